import logging
from typing import Any, Dict, List

from amrgen.graph.edge import Edge

logger = logging.getLogger(__name__)

_FIELDS = (
    "pos",
    "number",
    "tense",
    "voice",
    "realization",
    "denominator",
    "before_insertions",
    "after_insertions",
    "child_insertions",
    "reordering",
    "punctuation",
)


class PartialTransitionFunction:
    """
    The decisions a hypothesis has made so far, as one map per decision type keyed by
    vertex index.  Together they determine the final sentence through
    `AmrGraph.yield_words`.

    Instances are treated as immutable once they are attached to a `Prediction`: they are
    filled in right after creation, and combined through `union`, which copies.
    """

    def __init__(self) -> None:
        self.pos: Dict[int, str] = {}
        self.number: Dict[int, str] = {}
        self.tense: Dict[int, str] = {}
        self.voice: Dict[int, str] = {}
        self.realization: Dict[int, str] = {}
        self.denominator: Dict[int, str] = {}
        self.before_insertions: Dict[int, str] = {}
        self.after_insertions: Dict[int, str] = {}
        self.child_insertions: Dict[int, List[Edge]] = {}
        self.reordering: Dict[int, List[Edge]] = {}
        self.punctuation: Dict[int, str] = {}

    def union(self, other: "PartialTransitionFunction") -> "PartialTransitionFunction":
        """
        Returns a new function holding the entries of both.  Two hypotheses that decided
        differently for the same vertex should never be combined; where they are, `other`
        wins and a warning is logged.
        """
        result = PartialTransitionFunction()
        for field in _FIELDS:
            merged: Dict[int, Any] = dict(getattr(self, field))
            for index, value in getattr(other, field).items():
                if index in merged and merged[index] != value:
                    logger.warning(
                        f"overwriting {field} of vertex {index}: {merged[index]!r} -> {value!r}"
                    )
                merged[index] = value
            setattr(result, field, merged)
        return result

    def copy(self) -> "PartialTransitionFunction":
        """
        A copy whose maps can be changed without affecting this function.
        """
        return self.union(PartialTransitionFunction())

    def __repr__(self) -> str:
        filled = {field: getattr(self, field) for field in _FIELDS if getattr(self, field)}
        return f"PartialTransitionFunction({filled})"
