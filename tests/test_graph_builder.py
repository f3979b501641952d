"""
Tests for the book similarity graph builder.

Covers the three build phases (degree-capped selection, pruning, anchor
repair) and the guarantees the rendering layer depends on: every book is
reachable from the anchor and no book becomes a hub.
"""

import math
import random
from collections import Counter

import pytest

from bookgraph.core.errors import InvalidEntityError
from bookgraph.graph import GraphBuilder, GraphSettings, UnionFind, build_graph
from bookgraph.graph.builder import Candidate, Selection, select_step
from bookgraph.similarity import similarity


def _reachable_from_anchor(graph) -> bool:
    index = {node.id: i for i, node in enumerate(graph.nodes)}
    forest = UnionFind(len(graph.nodes))
    for edge in graph.edges:
        forest.union(index[edge.source], index[edge.target])
    anchor = index[graph.anchor_id]
    return all(forest.connected(anchor, i) for i in range(len(graph.nodes)))


def _random_books(make_book, seed: int, count: int):
    rng = random.Random(seed)
    return [
        make_book(f"b{i}", tuple(round(rng.random(), 3) for _ in range(5)))
        for i in range(count)
    ]


# =========================================================================
# Union-find
# =========================================================================


class TestUnionFind:
    def test_starts_disjoint(self):
        forest = UnionFind(3)
        assert not forest.connected(0, 1)
        assert len(forest.components()) == 3

    def test_union_merges(self):
        forest = UnionFind(4)
        assert forest.union(0, 1) is True
        assert forest.union(1, 0) is False
        forest.union(2, 3)
        forest.union(1, 3)
        assert forest.connected(0, 2)
        assert len(forest.components()) == 1

    def test_components_list_members_in_index_order(self):
        forest = UnionFind(5)
        forest.union(4, 1)
        forest.union(3, 0)
        groups = sorted(forest.components().values())
        assert groups == [[0, 3], [1, 4], [2]]


# =========================================================================
# Settings and selection step
# =========================================================================


class TestGraphSettings:
    def test_target_edges(self):
        settings = GraphSettings()
        assert settings.target_edges(4) == 6
        assert settings.target_edges(5) == 7
        assert settings.target_edges(2) == 3

    def test_kept_edges_is_float_safe(self):
        settings = GraphSettings()
        # 0.7 * 10 is 7.000000000000001 in floating point
        assert settings.kept_edges(10) == 7
        assert settings.kept_edges(6) == 5
        assert settings.kept_edges(1) == 1
        assert settings.kept_edges(0) == 0


class TestSelectStep:
    def test_accepts_without_mutating_input(self):
        state = Selection(edges=(), degrees=(0, 0, 0))
        after = select_step(state, Candidate(0, 1, 0.9), max_degree=3)
        assert state == Selection(edges=(), degrees=(0, 0, 0))
        assert after.edges == (Candidate(0, 1, 0.9),)
        assert after.degrees == (1, 1, 0)

    def test_rejects_at_degree_cap(self):
        state = Selection(edges=(), degrees=(1, 0, 0))
        after = select_step(state, Candidate(0, 2, 0.5), max_degree=1)
        assert after is state


# =========================================================================
# Builds
# =========================================================================


class TestBuildEdgeCases:
    def test_empty_input(self):
        graph = GraphBuilder().build([])
        assert graph.nodes == []
        assert graph.edges == []
        assert graph.anchor_id is None

    def test_single_book(self, make_book):
        graph = GraphBuilder().build([make_book("only")])
        assert [n.id for n in graph.nodes] == ["only"]
        assert graph.edges == []
        assert graph.anchor_id == "only"

    def test_two_books_are_connected(self, make_book):
        graph = build_graph([make_book("a", (1, 0, 0, 0, 0)), make_book("b", (0, 1, 0, 0, 0))])
        assert len(graph.edges) == 1
        assert graph.edges[0].weight == 0.0
        assert _reachable_from_anchor(graph)

    def test_duplicate_ids_rejected(self, make_book):
        with pytest.raises(InvalidEntityError):
            GraphBuilder().build([make_book("a"), make_book("a")])

    def test_non_entity_rejected(self, make_book):
        with pytest.raises(InvalidEntityError):
            GraphBuilder().build([make_book("a"), {"id": "b"}])

    def test_input_is_not_modified(self, clustered_books):
        before = list(clustered_books)
        GraphBuilder().build(clustered_books)
        assert clustered_books == before


class TestAnchor:
    def test_defaults_to_first_book(self, clustered_books):
        assert GraphBuilder().build(clustered_books).anchor_id == "a"

    def test_unknown_anchor_falls_back_to_first_book(self, clustered_books):
        assert GraphBuilder().build(clustered_books, anchor_id="missing").anchor_id == "a"

    def test_repair_edges_point_at_chosen_anchor(self, clustered_books):
        graph = GraphBuilder().build(clustered_books, anchor_id="c")
        repairs = [e for e in graph.edges if e.repair]
        assert repairs
        assert all(e.target == "c" for e in repairs)
        assert _reachable_from_anchor(graph)


class TestAxisBooks:
    """Two identical books plus two orthogonal ones."""

    def test_pair_similarities(self, axis_books):
        e1, e2, e3, e4 = axis_books
        assert similarity(e1.vector, e2.vector) == pytest.approx(1.0)
        assert similarity(e1.vector, e3.vector) == 0.0
        assert similarity(e1.vector, e4.vector) == 0.0
        assert similarity(e3.vector, e4.vector) == 0.0

    def test_all_reachable_from_first_book(self, axis_books):
        graph = GraphBuilder().build(axis_books)
        assert graph.anchor_id == "e1"
        assert _reachable_from_anchor(graph)
        strongest = max(graph.edges, key=lambda e: e.weight)
        assert {strongest.source, strongest.target} == {"e1", "e2"}


class TestRepair:
    """Four near-identical books saturate each other's degree budget."""

    def test_phase_counts(self, clustered_books):
        stats = GraphBuilder().build(clustered_books).stats
        assert stats.candidate_count == 10
        assert stats.selected_count == 6
        assert stats.retained_count == 5
        assert stats.components_after_pruning == 2
        assert stats.repair_count == 1

    def test_outlier_is_repaired_onto_anchor(self, clustered_books):
        graph = GraphBuilder().build(clustered_books)
        repairs = [e for e in graph.edges if e.repair]
        assert len(repairs) == 1
        assert (repairs[0].source, repairs[0].target) == ("e", "a")
        assert repairs[0].weight == pytest.approx(similarity(clustered_books[4].vector, clustered_books[0].vector))
        assert _reachable_from_anchor(graph)

    def test_repair_picks_member_most_similar_to_anchor(self, make_book):
        books = [
            make_book("anchor", (1, 0, 0, 0, 0)),
            make_book("near", (1, 0, 0, 0, 0.05)),
            make_book("x1", (0, 1, 0, 0, 0)),
            make_book("x2", (0.2, 1, 0, 0, 0)),
        ]
        builder = GraphBuilder(GraphSettings(max_degree=1, edges_per_node=1.5, keep_ratio=1.0))
        graph = builder.build(books)
        # Degree cap of 1 pairs anchor-near and x1-x2, leaving two components
        assert graph.stats.components_after_pruning == 2
        repairs = [e for e in graph.edges if e.repair]
        assert [(e.source, e.target) for e in repairs] == [("x2", "anchor")]

    def test_repair_tie_goes_to_earlier_member(self, make_book):
        books = [
            make_book("anchor", (1, 0, 0, 0, 0)),
            make_book("near", (1, 0, 0, 0, 0)),
            make_book("x1", (0, 1, 0, 0, 0)),
            make_book("x2", (0, 0, 1, 0, 0)),
        ]
        builder = GraphBuilder(GraphSettings(max_degree=1, edges_per_node=1.5, keep_ratio=1.0))
        graph = builder.build(books)
        repairs = [e for e in graph.edges if e.repair]
        assert [(e.source, e.target) for e in repairs] == [("x1", "anchor")]

    def test_no_repair_needed(self, make_book):
        books = [make_book(str(i), (0.5, 0.5, 0.5, 0.5, 0.5)) for i in range(3)]
        graph = GraphBuilder().build(books)
        assert graph.stats.repair_count == 0
        assert graph.stats.components_after_pruning == 1


class TestGraphProperties:
    @pytest.mark.parametrize("seed,count", [(1, 6), (2, 12), (3, 25), (4, 40), (5, 3)])
    def test_invariants_hold(self, make_book, seed, count):
        books = _random_books(make_book, seed, count)
        settings = GraphSettings()
        graph = GraphBuilder(settings).build(books)
        stats = graph.stats

        assert _reachable_from_anchor(graph)
        assert stats.selected_count <= math.floor(count * settings.edges_per_node)
        assert stats.retained_count == math.ceil(round(stats.selected_count * settings.keep_ratio, 9))
        assert stats.repair_count == stats.components_after_pruning - 1

        degrees = Counter()
        for edge in graph.edges:
            if not edge.repair:
                degrees[edge.source] += 1
                degrees[edge.target] += 1
        assert max(degrees.values(), default=0) <= settings.max_degree

        pairs = [frozenset((e.source, e.target)) for e in graph.edges]
        assert len(pairs) == len(set(pairs))
        assert all(e.source != e.target for e in graph.edges)

    def test_every_pair_scored_once(self, make_book, monkeypatch):
        calls = []

        def counting_similarity(a, b):
            calls.append((a, b))
            return similarity(a, b)

        monkeypatch.setattr("bookgraph.graph.builder.similarity", counting_similarity)
        books = _random_books(make_book, 7, 9)
        GraphBuilder().build(books)
        assert len(calls) == 9 * 8 // 2

    def test_builds_are_idempotent(self, make_book):
        books = _random_books(make_book, 11, 15)
        first = GraphBuilder().build(books)
        second = GraphBuilder().build(books)
        assert first.to_dict() == second.to_dict()

    def test_every_edge_is_explained(self, make_book):
        graph = GraphBuilder().build(_random_books(make_book, 13, 10))
        assert all(edge.reason for edge in graph.edges)
        assert all("%" in edge.reason for edge in graph.edges)
