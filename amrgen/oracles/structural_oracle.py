import logging
from typing import Dict, List, Tuple

from overrides import overrides

from amrgen.common.checks import ConfigurationError
from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.vertex import Vertex
from amrgen.oracles.transitions import ALL_TRANSITIONS, KEEP

logger = logging.getLogger(__name__)


class StructuralOracle(Registrable):
    """
    Scores the structural transitions (keep, delete, swap, merge) for a vertex during the
    first generation stage.  Scores only need to be comparable with each other; the
    transition with the highest score among the applicable ones is taken.
    """

    default_implementation = "lookup"

    def score_transitions(self, vertex: Vertex, graph: AmrGraph) -> List[Tuple[str, float]]:
        raise NotImplementedError


@StructuralOracle.register("lookup")
class LookupStructuralOracle(StructuralOracle):
    """
    Reads transition scores from a table keyed by concept.

    # Parameters

    transitions : `Dict[str, Dict[str, float]]`, optional
        Maps a concept to the scores of its transitions, e.g.
        `{"develop-02": {"_merge": 0.9, "_realize": 0.1}}`.
    default : `Dict[str, float]`, optional (default = `{"_realize": 1.0}`)
        The scores of concepts missing from `transitions`.
    """

    def __init__(
        self, transitions: Dict[str, Dict[str, float]] = None, default: Dict[str, float] = None
    ) -> None:
        self.transitions = transitions or {}
        self.default = default if default is not None else {KEEP: 1.0}
        for scores in [self.default, *self.transitions.values()]:
            for transition in scores:
                if transition not in ALL_TRANSITIONS:
                    raise ConfigurationError(
                        f"unknown transition {transition!r}, expected one of {ALL_TRANSITIONS}"
                    )

    @overrides
    def score_transitions(self, vertex: Vertex, graph: AmrGraph) -> List[Tuple[str, float]]:
        return list(self.transitions.get(vertex.instance, self.default).items())
