import logging
from collections import Counter, deque
from typing import Deque, Dict, FrozenSet, Optional, Set, Tuple

from amrgen.graph import word_lists
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex
from amrgen.oracles.structural_oracle import StructuralOracle
from amrgen.oracles.transitions import DELETE, KEEP, MERGE, SWAP

logger = logging.getLogger(__name__)

MergeTable = Dict[Tuple[str, str], Tuple[str, Optional[str]]]


class StructuralTransitionProcessor:
    """
    The first generation stage: rewrites the tree by deleting, swapping and merging
    vertices, one decision per vertex, bottom-up.

    A swapped vertex and its former parent are put back at the front of the queue, so the
    parent is reconsidered in its new position right away.  A pair of vertices is never
    swapped twice, which keeps the pass finite.

    # Parameters

    oracle : `StructuralOracle`
        Scores the transitions of each vertex.
    merge_table : `MergeTable`
        Maps a `(parent concept, child concept)` pair to the concept and POS tag they merge
        into.  Merging is only possible for pairs in the table.
    """

    def __init__(self, oracle: StructuralOracle, merge_table: MergeTable) -> None:
        self.oracle = oracle
        self.merge_table = merge_table

    def process(self, graph: AmrGraph) -> None:
        queue: Deque[Vertex] = deque(graph.bottom_up())
        swapped: Set[FrozenSet[int]] = set()
        applied: Counter = Counter()

        while queue:
            vertex = queue.popleft()
            if self._must_delete(vertex):
                vertex.annotation.deleted = True
                applied[DELETE] += 1
                continue
            scores = self.oracle.score_transitions(vertex, graph)
            if not scores:
                applied[KEEP] += 1
                continue

            best: Optional[str] = None
            best_score = 0.0
            for transition, score in scores:
                if not self._is_applicable(transition, vertex, swapped):
                    continue
                if best is None or score > best_score:
                    best = transition
                    best_score = score
            if best is None:
                best = KEEP
            logger.debug(f"{best} {vertex}")
            applied[best] += 1

            if best == DELETE:
                vertex.annotation.deleted = True
            elif best == SWAP:
                parent = vertex.parent
                graph.swap(parent, vertex)
                swapped.add(frozenset((vertex.index, parent.index)))
                if parent in queue:
                    queue.remove(parent)
                queue.appendleft(vertex)
                queue.appendleft(parent)
            elif best == MERGE:
                parent = vertex.parent
                merged_instance, merged_pos = self.merge_table[(parent.instance, vertex.instance)]
                graph.merge(parent, vertex, merged_instance, merged_pos)

        logger.info(
            "structural transitions: "
            + ", ".join(f"{transition}={count}" for transition, count in sorted(applied.items()))
        )

    def _is_applicable(
        self, transition: str, vertex: Vertex, swapped: Set[FrozenSet[int]]
    ) -> bool:
        if (vertex.is_link or vertex.name) and transition != KEEP:
            return False

        if transition == KEEP:
            return True
        if transition == DELETE:
            return vertex.instance not in word_lists.NEVER_DELETE
        parent = vertex.parent
        if transition == SWAP:
            return (
                parent is not None
                and not parent.name
                and frozenset((vertex.index, parent.index)) not in swapped
            )
        if transition == MERGE:
            return parent is not None and (parent.instance, vertex.instance) in self.merge_table
        return False

    def _must_delete(self, vertex: Vertex) -> bool:
        if vertex.instance in word_lists.ALWAYS_DELETE:
            return True
        incoming = vertex.incoming_edge
        return (
            vertex.instance in ("you", "we")
            and incoming is not None
            and incoming.label.startswith(":ARG")
            and incoming.source.mode == "imperative"
        )
