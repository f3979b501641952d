"""
Similarity graph builder.

Turns a list of scored books into a sparse, fully reachable graph:

1. Score every unordered pair of books (cosine similarity)
2. Greedily accept the strongest pairs while no book exceeds the degree cap,
   up to about 1.5 edges per book
3. Drop the weakest 30% of the accepted edges
4. Reconnect every component cut off from the anchor book through the
   member most similar to the anchor

Step 2 spreads edges fairly so one popular book cannot become a hub; step 3
restores quality dominance; step 4 guarantees every book stays reachable
however aggressive steps 2-3 were.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Sequence

from ..core.errors import InvalidEntityError
from ..core.models import BookGraph, BuildStats, Entity, SimilarityEdge
from ..similarity.calculator import similarity
from ..similarity.explanations import explain
from .union_find import UnionFind

if TYPE_CHECKING:
    from ..core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphSettings:
    """Tuning knobs for edge selection and pruning."""

    max_degree: int = 3
    edges_per_node: float = 1.5
    keep_ratio: float = 0.7

    @classmethod
    def from_settings(cls, settings: "Settings") -> GraphSettings:
        return cls(
            max_degree=settings.graph_max_degree,
            edges_per_node=settings.graph_edges_per_node,
            keep_ratio=settings.graph_keep_ratio,
        )

    def target_edges(self, node_count: int) -> int:
        """Upper bound on edges accepted by greedy selection."""
        # Rounding first keeps 0.7 * 10 from ceiling to 8
        return math.floor(round(node_count * self.edges_per_node, 9))

    def kept_edges(self, selected_count: int) -> int:
        """Number of selected edges that survive pruning."""
        return math.ceil(round(selected_count * self.keep_ratio, 9))


class Candidate(NamedTuple):
    """A scored pair of entity indices, i < j."""

    i: int
    j: int
    score: float


class Selection(NamedTuple):
    """Accumulator for greedy selection. Never mutated in place."""

    edges: tuple[Candidate, ...]
    degrees: tuple[int, ...]


def select_step(state: Selection, candidate: Candidate, max_degree: int) -> Selection:
    """
    Offer one candidate to the selection.

    Returns a new Selection with the candidate accepted if both endpoints
    are below the degree cap, otherwise the unchanged state.
    """
    degrees = state.degrees
    if degrees[candidate.i] >= max_degree or degrees[candidate.j] >= max_degree:
        return state

    updated = list(degrees)
    updated[candidate.i] += 1
    updated[candidate.j] += 1
    return Selection(edges=state.edges + (candidate,), degrees=tuple(updated))


class GraphBuilder:
    """
    Builds the bounded-degree, pruned, anchor-reachable book graph.

    The builder is stateless between calls; every build works on its own
    similarity table and union-find structure.

    Usage:
        >>> builder = GraphBuilder()
        >>> graph = builder.build(entities, anchor_id="OL123W")
        >>> payload = graph.to_dict()
    """

    def __init__(self, settings: GraphSettings | None = None):
        self.settings = settings or GraphSettings()

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def build(self, entities: Sequence[Entity], anchor_id: str | None = None) -> BookGraph:
        """
        Build the similarity graph.

        Args:
            entities: Scored books. Order matters only for tie-breaking.
            anchor_id: Book every other book must reach. Defaults to the
                first book when omitted or not present.

        Returns:
            BookGraph with a copy of the entities and the annotated edges

        Raises:
            InvalidEntityError: If an entity is malformed or ids repeat
        """
        nodes = list(entities)
        self._validate(nodes)

        if not nodes:
            return BookGraph()

        anchor = self._resolve_anchor(nodes, anchor_id)

        if len(nodes) == 1:
            return BookGraph(
                nodes=nodes,
                anchor_id=nodes[anchor].id,
                stats=BuildStats(entity_count=1, components_after_pruning=1),
            )

        candidates = self._score_pairs(nodes)
        scores = {(c.i, c.j): c.score for c in candidates}

        ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
        selected = self._select(ranked, len(nodes))
        retained = self._prune(selected)

        components, repairs = self._repair(len(nodes), retained, anchor, scores)

        edges = [self._make_edge(nodes, c.i, c.j, c.score) for c in retained]
        edges.extend(
            self._make_edge(nodes, member, anchor, score, repair=True)
            for member, score in repairs
        )

        stats = BuildStats(
            entity_count=len(nodes),
            candidate_count=len(candidates),
            selected_count=len(selected),
            retained_count=len(retained),
            components_after_pruning=components,
            repair_count=len(repairs),
        )
        logger.debug(
            "Built graph for %d books: %d candidates, %d selected, %d retained, %d repairs",
            stats.entity_count,
            stats.candidate_count,
            stats.selected_count,
            stats.retained_count,
            stats.repair_count,
        )

        return BookGraph(nodes=nodes, edges=edges, anchor_id=nodes[anchor].id, stats=stats)

    # =========================================================================
    # Build Steps
    # =========================================================================

    def _validate(self, nodes: list[Entity]) -> None:
        seen: set[str] = set()
        for node in nodes:
            if not isinstance(node, Entity):
                raise InvalidEntityError(f"Expected Entity, got {type(node).__name__}")
            if node.id in seen:
                raise InvalidEntityError(f"Duplicate entity id {node.id}", entity_id=node.id)
            seen.add(node.id)

    def _resolve_anchor(self, nodes: list[Entity], anchor_id: str | None) -> int:
        if anchor_id is None:
            return 0
        for index, node in enumerate(nodes):
            if node.id == anchor_id:
                return index
        logger.warning("Anchor %s not among %d books, using %s", anchor_id, len(nodes), nodes[0].id)
        return 0

    def _score_pairs(self, nodes: list[Entity]) -> list[Candidate]:
        """Score each unordered pair exactly once, in enumeration order."""
        return [
            Candidate(i, j, similarity(nodes[i].vector, nodes[j].vector))
            for i in range(len(nodes))
            for j in range(i + 1, len(nodes))
        ]

    def _select(self, ranked: list[Candidate], node_count: int) -> tuple[Candidate, ...]:
        """Degree-capped greedy selection over candidates, strongest first."""
        target = self.settings.target_edges(node_count)
        state = Selection(edges=(), degrees=(0,) * node_count)

        for candidate in ranked:
            if len(state.edges) >= target:
                break
            state = select_step(state, candidate, self.settings.max_degree)

        return state.edges

    def _prune(self, selected: tuple[Candidate, ...]) -> list[Candidate]:
        """Keep the strongest share of the selected edges."""
        keep = self.settings.kept_edges(len(selected))
        return sorted(selected, key=lambda c: c.score, reverse=True)[:keep]

    def _repair(
        self,
        node_count: int,
        retained: list[Candidate],
        anchor: int,
        scores: dict[tuple[int, int], float],
    ) -> tuple[int, list[tuple[int, float]]]:
        """
        Connect every component that cannot reach the anchor.

        Each detached component contributes one edge: from its member most
        similar to the anchor, straight to the anchor.

        Returns:
            Component count after pruning and the (member, score) repair edges
        """
        forest = UnionFind(node_count)
        for c in retained:
            forest.union(c.i, c.j)

        groups = forest.components()
        anchor_root = forest.find(anchor)
        repairs: list[tuple[int, float]] = []

        for root, members in groups.items():
            if root == anchor_root:
                continue

            best_member = members[0]
            best_score = self._pair_score(scores, best_member, anchor)
            for member in members[1:]:
                score = self._pair_score(scores, member, anchor)
                if score > best_score:
                    best_member, best_score = member, score

            repairs.append((best_member, best_score))
            forest.union(best_member, anchor)

        if repairs:
            logger.info(
                "Reconnected %d detached component(s) to anchor", len(repairs)
            )

        return len(groups), repairs

    @staticmethod
    def _pair_score(scores: dict[tuple[int, int], float], x: int, y: int) -> float:
        return scores[(x, y)] if x < y else scores[(y, x)]

    @staticmethod
    def _make_edge(
        nodes: list[Entity],
        x: int,
        y: int,
        score: float,
        repair: bool = False,
    ) -> SimilarityEdge:
        return SimilarityEdge(
            source=nodes[x].id,
            target=nodes[y].id,
            weight=score,
            reason=explain(nodes[x], nodes[y], score),
            repair=repair,
        )


def build_graph(entities: Sequence[Entity], anchor_id: str | None = None) -> BookGraph:
    """Build a graph with default settings."""
    return GraphBuilder().build(entities, anchor_id)
