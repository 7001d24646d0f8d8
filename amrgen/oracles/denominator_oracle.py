from typing import Dict, List, Optional, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex


class DenominatorOracle(Registrable):
    """
    Predicts the article of a vertex.  `"-"` stands for no article.
    """

    default_implementation = "lookup"

    def predict(
        self, vertex: Vertex, graph: AmrGraph, number: Optional[str], realization: Optional[str]
    ) -> List[Tuple[str, float]]:
        raise NotImplementedError


@DenominatorOracle.register("lookup")
class LookupDenominatorOracle(DenominatorOracle):
    """
    # Parameters

    denominators : `Dict[str, Dict[str, float]]`, optional
        Maps `"<concept>\\t<number>"` or `"<concept>"` to the probabilities of its articles,
        e.g. `{"boy": {"the": 0.6, "a": 0.3, "-": 0.1}}`.
    """

    def __init__(self, denominators: Dict[str, Dict[str, float]] = None) -> None:
        self.denominators = denominators or {}

    @overrides
    def predict(
        self, vertex: Vertex, graph: AmrGraph, number: Optional[str], realization: Optional[str]
    ) -> List[Tuple[str, float]]:
        for key in (f"{vertex.instance}\t{number}", vertex.instance):
            if key in self.denominators:
                return list(self.denominators[key].items())
        return []
