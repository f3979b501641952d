"""
Graph service for book similarity graphs.

    from bookgraph.services.graph import get_graph_service

    service = get_graph_service()
    graph = service.build_book_graph(entities, anchor_id="OL45883W")
"""

from .service import GraphService, get_graph_service, set_graph_service

__all__ = ["GraphService", "get_graph_service", "set_graph_service"]
