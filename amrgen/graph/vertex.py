import re
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from amrgen.graph.edge import Edge

_PROPBANK_ENTRY = re.compile(r".*-[0-9]+")
_SENSE_TAG = re.compile(r"-[0-9]+")
_QUOTED = re.compile(r'"(.*)"')
_NUMERIC = re.compile(r"[0-9.,]+")


class Annotation:
    """
    Bookkeeping the structural transitions leave on a vertex.

    `original` is only set on link vertices, and points at the vertex the link was split off
    from.  `swap_count` goes up by one every time the vertex is swapped above its parent and
    down by one every time it is swapped below its child.
    """

    def __init__(self, initial_instance: str) -> None:
        self.initial_instance = initial_instance
        self.deleted = False
        self.swap_count = 0
        self.original: Optional["Vertex"] = None


class Vertex:
    """
    A concept of an AMR graph.

    Vertices live in the arena of an `AmrGraph`; `index` is their position there and is
    what every per-vertex map of a `PartialTransitionFunction` is keyed by.  Edges are
    shared between the `outgoing` list of their source and the `incoming` list of their
    target, so relabelling or retargeting an edge is visible from both ends.

    # Parameters

    instance : `str`
        The concept, e.g. `"want-01"`, `"person"` or `"\\"Obama\\""`.
    index : `int`
        The position of the vertex in its graph.  `EMPTY_VERTEX` uses -1.
    """

    def __init__(self, instance: str, index: int = -1) -> None:
        self.instance = instance
        self.index = index
        self.name = ""
        self.mode = ""
        self.pos: Optional[str] = None
        self.incoming: List["Edge"] = []
        self.outgoing: List["Edge"] = []
        # n-best syntactic annotations by key, plus the stage-two "realization" candidates.
        self.predictions: Dict[str, Any] = {}
        self.annotation = Annotation(instance)

    @property
    def is_link(self) -> bool:
        return self.annotation.original is not None

    @property
    def is_deleted(self) -> bool:
        return self.annotation.deleted

    @property
    def is_propbank_entry(self) -> bool:
        return _PROPBANK_ENTRY.fullmatch(self.instance) is not None

    @property
    def is_translatable(self) -> bool:
        """
        Quoted strings and numbers are copied to the output, not translated.
        """
        return (
            _QUOTED.fullmatch(self.instance) is None and _NUMERIC.fullmatch(self.instance) is None
        )

    @property
    def cleared_instance(self) -> str:
        """
        The instance without its PropBank sense tag, e.g. `want` for `want-01`.
        """
        return _SENSE_TAG.sub("", self.instance)

    @property
    def instance_edge(self) -> Optional["Edge"]:
        for edge in self.outgoing:
            if edge.is_instance_edge:
                return edge
        return None

    @property
    def incoming_edge(self) -> Optional["Edge"]:
        """
        The first incoming edge.  In a tree this is the only one.
        """
        return self.incoming[0] if self.incoming else None

    @property
    def parent(self) -> Optional["Vertex"]:
        edge = self.incoming_edge
        return edge.source if edge is not None else None

    @property
    def incoming_label(self) -> Optional[str]:
        edge = self.incoming_edge
        return edge.label if edge is not None else None

    def child_edges(self) -> List["Edge"]:
        """
        The outgoing edges that lead to a real vertex, i.e. all but the instance edge.
        """
        return [edge for edge in self.outgoing if edge.target is not EMPTY_VERTEX]

    def children(self) -> List["Vertex"]:
        return [edge.target for edge in self.child_edges()]

    def bottom_up(self) -> Iterator["Vertex"]:
        """
        Post-order traversal of the subtree rooted here: every child before its parent,
        siblings in the order of `outgoing`.
        """
        for child in self.children():
            yield from child.bottom_up()
        yield self

    def __repr__(self) -> str:
        return f"Vertex({self.index}, {self.instance!r})"


# The target of every instance edge.
EMPTY_VERTEX = Vertex("UNKNOWN")
EMPTY_VERTEX.pos = "UNKNOWN"
