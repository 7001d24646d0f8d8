from typing import Dict, List, Optional, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.edge import Edge


class InsertionOracle(Registrable):
    """
    Predicts a function word to insert in front of the child of `edge`, like the "to" in
    "wants to sleep".  Two of these are configured: one for argument edges (`:ARG0` to
    `:ARG9`) and one for all others.

    `relative_position` is "l" when the child precedes its parent's own words, "r" when it
    follows them and "d" when the parent has no words of its own.
    """

    default_implementation = "lookup"

    def score_insertion(
        self,
        edge: Edge,
        relative_position: str,
        from_text: Optional[str],
        to_text: str,
        graph: AmrGraph,
    ) -> List[Tuple[str, float]]:
        raise NotImplementedError


@InsertionOracle.register("lookup")
class LookupInsertionOracle(InsertionOracle):
    """
    Reads insertions from a table.  Keys are tried in order:
    `"<parent text>\\t<label>\\t<position>"`, `"<label>\\t<position>"`, `"<label>"`.

    # Parameters

    insertions : `Dict[str, Dict[str, float]]`, optional
        Maps a key to the probabilities of the words to insert; `""` inserts nothing.
    """

    def __init__(self, insertions: Dict[str, Dict[str, float]] = None) -> None:
        self.insertions = insertions or {}

    @overrides
    def score_insertion(
        self,
        edge: Edge,
        relative_position: str,
        from_text: Optional[str],
        to_text: str,
        graph: AmrGraph,
    ) -> List[Tuple[str, float]]:
        for key in (
            f"{from_text}\t{edge.label}\t{relative_position}",
            f"{edge.label}\t{relative_position}",
            edge.label,
        ):
            if key in self.insertions:
                return list(self.insertions[key].items())
        return []
