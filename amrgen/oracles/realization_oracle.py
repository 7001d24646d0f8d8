from typing import Dict, List, Set, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex


class RealizationOracle(Registrable):
    """
    Predicts the words a concept is realized as, given its syntactic annotation.
    `score_candidates` is only asked about concepts for which `has_observed` holds; the
    others are left to the `DefaultRealizer`.
    """

    default_implementation = "lookup"

    def has_observed(self, vertex: Vertex) -> bool:
        raise NotImplementedError

    def score_candidates(
        self, vertex: Vertex, graph: AmrGraph, syntactic_annotation: Dict[str, str]
    ) -> List[Tuple[str, float]]:
        raise NotImplementedError


@RealizationOracle.register("lookup")
class LookupRealizationOracle(RealizationOracle):
    """
    Reads realizations from a table.  Keys are tried from the most to the least specific:

    1. `"<concept>\\t<pos>\\t<annotation>"`, where the annotation lists `key=value` pairs
       sorted by key and joined with commas, e.g. `"want-01\\tVB\\ttense=past,voice=active"`;
    2. `"<concept>\\t<pos>"`;
    3. `"<concept>"`.

    # Parameters

    realizations : `Dict[str, Dict[str, float]]`, optional
        Maps a key to the probabilities of its realizations.
    """

    def __init__(self, realizations: Dict[str, Dict[str, float]] = None) -> None:
        self.realizations = realizations or {}
        self._observed: Set[str] = {key.split("\t")[0] for key in self.realizations}

    @overrides
    def has_observed(self, vertex: Vertex) -> bool:
        return vertex.instance in self._observed

    @overrides
    def score_candidates(
        self, vertex: Vertex, graph: AmrGraph, syntactic_annotation: Dict[str, str]
    ) -> List[Tuple[str, float]]:
        keys = []
        if vertex.pos is not None:
            annotation = ",".join(
                f"{key}={value}" for key, value in sorted(syntactic_annotation.items())
            )
            if annotation:
                keys.append(f"{vertex.instance}\t{vertex.pos}\t{annotation}")
            keys.append(f"{vertex.instance}\t{vertex.pos}")
        keys.append(vertex.instance)
        for key in keys:
            if key in self.realizations:
                return list(self.realizations[key].items())
        return []
