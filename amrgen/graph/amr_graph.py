import logging
from collections import deque
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Set

from amrgen.common.checks import GraphStructureError
from amrgen.graph import word_lists
from amrgen.graph.edge import INVERSE_SUFFIX, INSERTED_LABEL, Edge
from amrgen.graph.pos import POS_ANY, simplify_pos
from amrgen.graph.vertex import EMPTY_VERTEX, Vertex

if TYPE_CHECKING:
    from amrgen.generation.partial_transition_function import PartialTransitionFunction

logger = logging.getLogger(__name__)

# How far up the first-parent chain `convert_to_tree` looks for the closest parent.
_MAX_ROOT_DISTANCE = 10

_WIKI_LABEL = ":wiki"
_POSS_LABEL = ":poss"
_MODE_LABEL = ":mode"


class AmrGraph:
    """
    A rooted AMR graph, stored as an arena of vertices.

    Vertices are created through `new_vertex`, which assigns their `index`, and connected
    through `add_edge`.  The first vertex created becomes the root unless `root` is set
    explicitly.  Iterating over a graph visits the vertices reachable from the root in
    breadth-first order.

    ```python
    graph = AmrGraph()
    want = graph.new_vertex("want-01")
    boy = graph.new_vertex("boy")
    graph.add_edge(want, boy, ":ARG0")
    ```
    """

    def __init__(self) -> None:
        self.vertices: List[Vertex] = []
        self.root: Optional[Vertex] = None

    def new_vertex(self, instance: str, with_instance_edge: bool = True) -> Vertex:
        vertex = Vertex(instance, index=len(self.vertices))
        self.vertices.append(vertex)
        if with_instance_edge:
            vertex.outgoing.append(Edge(vertex, EMPTY_VERTEX, instance, is_instance_edge=True))
        if self.root is None:
            self.root = vertex
        return vertex

    def add_edge(self, source: Vertex, target: Vertex, label: str) -> Edge:
        edge = Edge(source, target, label)
        source.outgoing.append(edge)
        target.incoming.append(edge)
        return edge

    def insert_child(self, parent: Vertex, instance: str) -> Edge:
        """
        Creates a vertex for a word that has no concept of its own and attaches it below
        `parent` with an inserted edge.  The edge is not added to `parent.outgoing`; it is
        only reachable through the child insertions of a partial transition function.
        """
        child = self.new_vertex(instance, with_instance_edge=False)
        edge = Edge(parent, child, INSERTED_LABEL, is_inserted=True)
        child.incoming.append(edge)
        return edge

    def __iter__(self) -> Iterator[Vertex]:
        if self.root is None:
            raise GraphStructureError("the graph has no root")
        seen: Set[int] = {id(self.root)}
        queue = deque([self.root])
        while queue:
            vertex = queue.popleft()
            yield vertex
            for edge in vertex.outgoing:
                target = edge.target
                if target is EMPTY_VERTEX or id(target) in seen:
                    continue
                seen.add(id(target))
                queue.append(target)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def bottom_up(self) -> List[Vertex]:
        if self.root is None:
            raise GraphStructureError("the graph has no root")
        return list(self.root.bottom_up())

    def edges(self) -> List[Edge]:
        return [edge for vertex in self for edge in vertex.outgoing]

    def is_tree(self) -> bool:
        return all(len(vertex.incoming) <= 1 for vertex in self)

    def is_cyclic(self) -> bool:
        vertices = list(self)
        in_degree = {id(vertex): 0 for vertex in vertices}
        for vertex in vertices:
            for child in vertex.children():
                in_degree[id(child)] += 1
        queue = deque(vertex for vertex in vertices if in_degree[id(vertex)] == 0)
        visited = 0
        while queue:
            vertex = queue.popleft()
            visited += 1
            for child in vertex.children():
                in_degree[id(child)] -= 1
                if in_degree[id(child)] == 0:
                    queue.append(child)
        return visited != len(vertices)

    def swap(self, parent: Vertex, child: Vertex) -> None:
        """
        Moves `child` above `parent`: the edge between them is reversed and `child` takes
        over the place `parent` had below its own parent (or becomes the root).
        """
        connection = child.incoming_edge
        if connection is None or connection.source is not parent:
            raise GraphStructureError(f"cannot swap {parent} and {child}: not parent and child")

        child.incoming.remove(connection)
        parent.outgoing.remove(connection)
        connection.source, connection.target = child, parent
        connection.invert_label()

        if not parent.incoming:
            self.root = child
        else:
            grandparent_edge = parent.incoming.pop(0)
            grandparent_edge.target = child
            child.incoming.append(grandparent_edge)

        child.outgoing.append(connection)
        parent.incoming.append(connection)

        child.annotation.swap_count += 1
        parent.annotation.swap_count -= 1

    def merge(self, master: Vertex, slave: Vertex, instance: str, pos: Optional[str]) -> None:
        """
        Collapses `slave` into `master`, which gets the new `instance` and `pos`.  `slave`
        must be a child or a sibling of `master`; its children move to `master`.
        """
        relevant_edge = slave.incoming_edge
        if relevant_edge is None or (
            relevant_edge.source is not master and relevant_edge.source is not master.parent
        ):
            raise GraphStructureError(
                f"cannot merge {master} and {slave}: "
                "merged vertices are neither in a parent-child relationship nor siblings"
            )

        master.instance = instance
        master.pos = pos
        relevant_edge.source.outgoing.remove(relevant_edge)

        for edge in slave.child_edges():
            edge.source = master
            master.outgoing.append(edge)

        instance_edge = master.instance_edge
        if instance_edge is not None:
            instance_edge.label = instance

    def uncouple(self, edge: Edge) -> Vertex:
        """
        Points `edge` at a fresh link vertex instead of its current target, which the link
        remembers as its `original`.
        """
        original = edge.target
        if edge in original.incoming:
            original.incoming.remove(edge)
        link = self.new_vertex(original.instance, with_instance_edge=False)
        link.incoming.append(edge)
        link.annotation.original = original
        edge.target = link
        return link

    def convert_to_tree(self) -> None:
        """
        Keeps a single incoming edge for every vertex and uncouples the others into links.

        The edge that is kept comes from the parent closest to the root, preferring edges
        other than `:poss` and `:wiki`, and then edges that are not inverted.
        """
        for vertex in list(self):
            if len(vertex.incoming) <= 1:
                continue
            min_distance = _MAX_ROOT_DISTANCE
            closest: List[Edge] = []
            for edge in vertex.incoming:
                distance = self._root_distance(edge.source, min_distance)
                if distance < min_distance:
                    min_distance = distance
                    closest = [edge]
                elif distance == min_distance:
                    closest.append(edge)

            candidates = [e for e in closest if e.label not in (_POSS_LABEL, _WIKI_LABEL)]
            if not candidates:
                candidates = closest
            uninverted = [e for e in candidates if not e.label.endswith(INVERSE_SUFFIX)]
            if uninverted:
                candidates = uninverted
            if not candidates:
                candidates = list(vertex.incoming)

            kept = candidates[0]
            for edge in list(vertex.incoming):
                if edge is not kept:
                    self.uncouple(edge)
            vertex.incoming = [kept]

    def _root_distance(self, vertex: Vertex, limit: int) -> int:
        distance = 0
        while vertex.incoming and distance <= limit:
            vertex = vertex.incoming[0].source
            distance += 1
        return distance

    def prepare(
        self, pos_lexicon: Dict[str, str] = None, deverbalizations: Dict[str, str] = None
    ) -> None:
        """
        Brings a freshly built graph into the shape the generation passes expect.  In order:

        1. edges into the root are dropped, and the graph is converted to a tree;
        2. `name` vertices are merged into the entity they name, and verbalized
           constructions found in `deverbalizations` are collapsed into a single concept;
        3. vertices get a simplified POS tag, from `pos_lexicon` for plain concepts and
           `POS_ANY` for PropBank framesets, and links copy the tag of their original;
        4. `:wiki` edges are removed and `:mode` edges turned into vertex modes.
        """
        pos_lexicon = pos_lexicon or {}
        deverbalizations = deverbalizations or {}
        if self.root is None:
            raise GraphStructureError("the graph has no root")

        for edge in list(self.root.incoming):
            edge.source.outgoing.remove(edge)
        self.root.incoming = []

        self.convert_to_tree()

        for vertex in list(self):
            self._merge_name_entities(vertex)
        for vertex in list(self):
            self._deverbalize(vertex, deverbalizations)

        vertices = list(self)
        for vertex in vertices:
            if vertex.is_link or vertex.pos is not None:
                continue
            if vertex.is_propbank_entry:
                vertex.pos = POS_ANY
            elif vertex.instance in pos_lexicon:
                vertex.pos = simplify_pos(pos_lexicon[vertex.instance], False)

        for vertex in vertices:
            if vertex.is_link:
                vertex.pos = simplify_pos(vertex.annotation.original.pos, vertex.is_propbank_entry)
            vertex.outgoing = [e for e in vertex.outgoing if e.label != _WIKI_LABEL]
            self._annotate_mode(vertex)

    def _merge_name_entities(self, vertex: Vertex) -> None:
        if vertex.instance != "name":
            return
        name = ""
        for edge in vertex.child_edges():
            if edge.target.instance.startswith('"'):
                name += edge.target.instance.replace('"', "").replace("-", " - ") + " "
                vertex.outgoing.remove(edge)
        name = name.replace(" - ", "-").strip()
        if not name:
            return

        incoming = vertex.incoming_edge
        if incoming is None:
            vertex.name = name
            return
        owner = incoming.source
        owner.name = name
        owner.outgoing.remove(incoming)
        for edge in vertex.child_edges():
            edge.source = owner
            owner.outgoing.append(edge)

    def _deverbalize(self, vertex: Vertex, deverbalizations: Dict[str, str]) -> None:
        for edge in vertex.child_edges():
            target = edge.target
            if len(target.outgoing) > 1:
                continue
            key = f"{vertex.instance}\t{edge.label}\t{target.instance}"
            if key in deverbalizations:
                vertex.instance = deverbalizations[key]
                vertex.pos = "NN"
                vertex.outgoing.remove(edge)
                instance_edge = vertex.instance_edge
                if instance_edge is not None:
                    instance_edge.label = vertex.instance
                logger.debug(f"deverbalized {key} into {vertex.instance}")
                return

    def _annotate_mode(self, vertex: Vertex) -> None:
        if vertex.instance == word_lists.AMR_UNKNOWN:
            ancestor = vertex.parent
            while ancestor is not None:
                if ancestor.is_propbank_entry:
                    ancestor.mode = "interrogative"
                ancestor = ancestor.parent
            return

        incoming = vertex.incoming_edge
        if incoming is None or incoming.label != _MODE_LABEL:
            return
        if vertex.instance not in word_lists.MODES:
            return
        owner = incoming.source
        owner.mode = vertex.instance
        owner.outgoing.remove(incoming)
        if vertex.instance == "imperative":
            owner.pos = "VB"

    def yield_words(self, ptf: "PartialTransitionFunction") -> List[str]:
        """
        Reads the sentence that `ptf` describes off the tree: every vertex contributes its
        denominator and realization, each child is surrounded by the insertions chosen for
        it, children are arranged by the vertex's reordering, and punctuation closes the
        vertex it was chosen for.
        """
        if self.root is None:
            raise GraphStructureError("the graph has no root")
        words: List[str] = []
        if self.root.incoming_edge is None:
            words.append(ptf.denominator.get(self.root.index, ""))
        self._yield_subtree(self.root, ptf, words)
        return [word for word in words if word]

    def _yield_subtree(
        self, vertex: Vertex, ptf: "PartialTransitionFunction", words: List[str]
    ) -> None:
        order = ptf.reordering.get(vertex.index)
        if order is None and vertex.child_edges():
            order = vertex.outgoing
        if order is None:
            words.append(ptf.realization.get(vertex.index, ""))
        else:
            for edge in order:
                if edge.is_instance_edge:
                    words.append(ptf.realization.get(vertex.index, ""))
                    continue
                target = edge.target
                words.append(ptf.before_insertions.get(target.index, ""))
                words.append(ptf.denominator.get(target.index, ""))
                self._yield_subtree(target, ptf, words)
                words.append(ptf.after_insertions.get(target.index, ""))
        words.append(ptf.punctuation.get(vertex.index, ""))

    def yield_string(self, ptf: "PartialTransitionFunction") -> str:
        return " ".join(self.yield_words(ptf))
