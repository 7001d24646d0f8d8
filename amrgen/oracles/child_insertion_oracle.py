from typing import Dict, List, Optional, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex


class ChildInsertionOracle(Registrable):
    """
    Predicts a word that should be realized as an additional child of a PropBank frameset,
    such as a particle ("up" in "give up").  The empty string means no insertion.
    """

    default_implementation = "lookup"

    def predict(
        self, vertex: Vertex, graph: AmrGraph, realization: Optional[str], voice: Optional[str]
    ) -> List[Tuple[str, float]]:
        raise NotImplementedError


@ChildInsertionOracle.register("lookup")
class LookupChildInsertionOracle(ChildInsertionOracle):
    """
    # Parameters

    insertions : `Dict[str, Dict[str, float]]`, optional
        Maps `"<concept>\\t<realization>"` or `"<concept>"` to the probabilities of the
        words to insert.
    """

    def __init__(self, insertions: Dict[str, Dict[str, float]] = None) -> None:
        self.insertions = insertions or {}

    @overrides
    def predict(
        self, vertex: Vertex, graph: AmrGraph, realization: Optional[str], voice: Optional[str]
    ) -> List[Tuple[str, float]]:
        for key in (f"{vertex.instance}\t{realization}", vertex.instance):
            if key in self.insertions:
                return list(self.insertions[key].items())
        return []
