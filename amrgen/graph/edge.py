from amrgen.graph.vertex import Vertex

INVERSE_SUFFIX = "-of"

# The role given to edges that a child insertion attaches.
INSERTED_LABEL = ":ins"


class Edge:
    """
    A labelled, directed edge between two vertices.

    Instance edges (`is_instance_edge`) are labelled with the concept of their source and
    point at `EMPTY_VERTEX`; they mark where the source's own words go among its children's.
    Inserted edges (`is_inserted`) attach a vertex created by a child insertion and are only
    registered with their target.
    """

    def __init__(
        self,
        source: Vertex,
        target: Vertex,
        label: str,
        is_instance_edge: bool = False,
        is_inserted: bool = False,
    ) -> None:
        self.source = source
        self.target = target
        self.label = label
        self.is_instance_edge = is_instance_edge
        self.is_inserted = is_inserted

    def invert_label(self) -> None:
        """
        Toggles the `-of` suffix, so that `:ARG0` becomes `:ARG0-of` and back.
        """
        if self.label.endswith(INVERSE_SUFFIX):
            self.label = self.label[: -len(INVERSE_SUFFIX)]
        else:
            self.label = self.label + INVERSE_SUFFIX

    def __repr__(self) -> str:
        return f"Edge({self.source.instance!r} -{self.label}-> {self.target.instance!r})"
