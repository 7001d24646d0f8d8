import logging
import re
from itertools import permutations
from typing import Dict, List, Optional, Sequence, Tuple

from amrgen.generation.hyperparameters import NBest
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.edge import Edge
from amrgen.graph.vertex import Vertex
from amrgen.oracles.reorder_oracle import ReorderOracle

logger = logging.getLogger(__name__)

_SENTENCE_LABEL = re.compile(r":snt[1-9]")
_OP_LABEL = re.compile(r":op[1-9]")
_DATE_LABELS = (":month", ":day", ":year")


class ReorderingScorer:
    """
    Scores the permutations of a vertex's outgoing edges, its instance edge included, and
    returns the best ones.  The probability of an order is the product of the probability
    that each child is on its side of the parent and of the pairwise order of the children
    on each side.  A few orders are ruled out outright (dates, numbered sentences and
    operands out of order).

    Pairwise probabilities are cached for the lifetime of the scorer, which should
    therefore not outlive a single graph.
    """

    def __init__(
        self, oracle: ReorderOracle, graph: AmrGraph, n_best: NBest, max_out_degree: int
    ) -> None:
        self.oracle = oracle
        self.graph = graph
        self.n_best = n_best
        self.max_out_degree = max_out_degree
        self._pairwise_cache: Dict[Tuple[Edge, Edge, str], float] = {}

    def n_best_reorderings(
        self,
        vertex: Vertex,
        child_insertions: Sequence[Edge],
        realization: Optional[str],
        voice: Optional[str],
    ) -> List[Tuple[List[Edge], float]]:
        edges = list(vertex.outgoing) + list(child_insertions)
        if len(edges) <= 1:
            return []
        if len(edges) > self.max_out_degree:
            return [(edges, 1.0)]
        if vertex.is_deleted and len(vertex.outgoing) == 2:
            return []

        left_probabilities: Dict[Edge, float] = {}
        if not vertex.is_deleted:
            for edge in edges:
                if edge.is_instance_edge:
                    continue
                if edge.is_inserted:
                    left_probabilities[edge] = 1.0
                else:
                    left_probabilities[edge] = self.oracle.child_before_parent(
                        edge, self.graph, realization, voice
                    )
        else:
            edges = [edge for edge in edges if not edge.is_instance_edge]

        scored = [
            (list(order), self.probability(vertex, list(order), left_probabilities))
            for order in permutations(edges)
            if self._satisfies_constraints(list(order))
        ]
        if not scored:
            return []
        scored.sort(key=lambda item: -item[1])
        scored = scored[: self.n_best.take_best_n]
        threshold = scored[0][1] - self.n_best.max_prob_decrement
        return [item for item in scored if item[1] >= threshold]

    def probability(
        self, vertex: Vertex, order: List[Edge], left_probabilities: Dict[Edge, float]
    ) -> float:
        if not self._satisfies_constraints(order):
            return 0.0

        instance_edge = vertex.instance_edge
        if vertex.is_deleted or instance_edge not in order:
            left, right = order, []
        else:
            split = order.index(instance_edge)
            left, right = order[:split], order[split + 1 :]

        probability = 1.0
        for edge in left:
            probability *= left_probabilities.get(edge, 1.0)
        for edge in right:
            probability *= 1.0 - left_probabilities.get(edge, 1.0)
        probability *= self._side_probability(left, "left")
        probability *= self._side_probability(right, "right")
        return probability

    def _side_probability(self, edges: List[Edge], side: str) -> float:
        probability = 1.0
        for i, first in enumerate(edges):
            for second in edges[i + 1 :]:
                probability *= self._pairwise(first, second, side)
        return probability

    def _pairwise(self, first: Edge, second: Edge, side: str) -> float:
        key = (first, second, side)
        if key not in self._pairwise_cache:
            self._pairwise_cache[key] = self.oracle.score_pairwise_order(
                first, second, self.graph, side
            )
        return self._pairwise_cache[key]

    @staticmethod
    def _satisfies_constraints(order: List[Edge]) -> bool:
        labels = [edge.label for edge in order]

        date_positions = [labels.index(label) for label in _DATE_LABELS if label in labels]
        if date_positions != sorted(date_positions):
            return False

        sentences = [label for label in labels if _SENTENCE_LABEL.fullmatch(label)]
        if sentences != sorted(sentences):
            return False

        operands = [
            edge for edge in order if edge.is_instance_edge or _OP_LABEL.fullmatch(edge.label)
        ]
        instance_positions = [i for i, edge in enumerate(operands) if edge.is_instance_edge]
        if instance_positions and len(operands) > 2:
            if instance_positions[0] != len(operands) - 2:
                return False
        operand_labels = [edge.label for edge in operands if not edge.is_instance_edge]
        if len(operand_labels) >= 2:
            if operand_labels != [f":op{i}" for i in range(1, len(operand_labels) + 1)]:
                return False
            # Only the instance edge may separate the operands.
            labels = [edge.label for edge in order if not edge.is_instance_edge]
            first = labels.index(":op1")
            for label in labels[first : first + len(operand_labels)]:
                if not _OP_LABEL.fullmatch(label):
                    return False
        return True
