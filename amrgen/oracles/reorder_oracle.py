from typing import Dict, Optional

from overrides import overrides

from amrgen.common.checks import check_probability
from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.edge import Edge


class ReorderOracle(Registrable):
    """
    Scores how the children of a vertex are arranged around it and among each other.
    """

    default_implementation = "lookup"

    def child_before_parent(
        self, edge: Edge, graph: AmrGraph, realization: Optional[str], voice: Optional[str]
    ) -> float:
        """
        The probability that the child of `edge` is realized before its parent, given the
        parent's realization and voice.
        """
        raise NotImplementedError

    def score_pairwise_order(self, first: Edge, second: Edge, graph: AmrGraph, side: str) -> float:
        """
        The probability that the child of `first` comes before the child of `second`, both
        on the same `side` ("left" or "right") of their parent.
        """
        raise NotImplementedError


@ReorderOracle.register("lookup")
class LookupReorderOracle(ReorderOracle):
    """
    # Parameters

    child_before_parent : `Dict[str, float]`, optional
        Maps an edge label, or `"<label>\\t<voice>"`, to the probability that the child is
        realized before its parent.
    left_sibling_order, right_sibling_order : `Dict[str, float]`, optional
        Map `"<label>\\t<label>"` to the probability that the first child precedes the
        second.  A missing pair is looked up reversed and inverted.
    default_probability : `float`, optional (default = `0.5`)
        Used for everything the tables don't cover.
    """

    def __init__(
        self,
        child_before_parent: Dict[str, float] = None,
        left_sibling_order: Dict[str, float] = None,
        right_sibling_order: Dict[str, float] = None,
        default_probability: float = 0.5,
    ) -> None:
        check_probability(default_probability, "default_probability")
        self.before_parent = child_before_parent or {}
        self.sibling_order = {
            "left": left_sibling_order or {},
            "right": right_sibling_order or {},
        }
        self.default_probability = default_probability

    @overrides
    def child_before_parent(
        self, edge: Edge, graph: AmrGraph, realization: Optional[str], voice: Optional[str]
    ) -> float:
        for key in (f"{edge.label}\t{voice}", edge.label):
            if key in self.before_parent:
                return self.before_parent[key]
        return self.default_probability

    @overrides
    def score_pairwise_order(self, first: Edge, second: Edge, graph: AmrGraph, side: str) -> float:
        table = self.sibling_order[side]
        key = f"{first.label}\t{second.label}"
        if key in table:
            return table[key]
        reversed_key = f"{second.label}\t{first.label}"
        if reversed_key in table:
            return 1.0 - table[reversed_key]
        return self.default_probability
