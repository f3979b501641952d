"""
Graph construction module.

Book-level graphs are built by GraphBuilder (select, prune, repair);
the category overview uses a static affinity table.

    from bookgraph.graph import GraphBuilder

    graph = GraphBuilder().build(entities, anchor_id="OL45883W")
"""

from .builder import GraphBuilder, GraphSettings, build_graph
from .categories import build_category_graph, category_similarity
from .union_find import UnionFind

__all__ = [
    "GraphBuilder",
    "GraphSettings",
    "UnionFind",
    "build_category_graph",
    "build_graph",
    "category_similarity",
]
