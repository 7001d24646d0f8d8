from typing import Dict, List, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex


class SyntacticAnnotationOracle(Registrable):
    """
    Predicts a distribution over the values of one syntactic property of a vertex: its
    part of speech (`pos`), grammatical `number`, `voice` or `tense`.
    """

    default_implementation = "lookup"

    def predict(self, vertex: Vertex, graph: AmrGraph, key: str) -> List[Tuple[str, float]]:
        raise NotImplementedError


@SyntacticAnnotationOracle.register("lookup")
class LookupSyntacticAnnotationOracle(SyntacticAnnotationOracle):
    """
    # Parameters

    annotations : `Dict[str, Dict[str, Dict[str, float]]]`, optional
        Maps a property, then a concept, to the distribution over its values, e.g.
        `{"tense": {"want-01": {"present": 0.8, "past": 0.2}}}`.
    """

    def __init__(self, annotations: Dict[str, Dict[str, Dict[str, float]]] = None) -> None:
        self.annotations = annotations or {}

    @overrides
    def predict(self, vertex: Vertex, graph: AmrGraph, key: str) -> List[Tuple[str, float]]:
        return list(self.annotations.get(key, {}).get(vertex.instance, {}).items())
