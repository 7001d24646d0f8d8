import pytest

from amrgen.common.checks import GraphStructureError
from amrgen.common.testing import AmrGenTestCase
from amrgen.generation.partial_transition_function import PartialTransitionFunction
from amrgen.graph import POS_ANY, AmrGraph, EMPTY_VERTEX


def build_want_sleep():
    """
    (w / want-01 :ARG0 (b / boy) :ARG1 (s / sleep-01 :ARG0 b))
    """
    graph = AmrGraph()
    want = graph.new_vertex("want-01")
    boy = graph.new_vertex("boy")
    sleep = graph.new_vertex("sleep-01")
    graph.add_edge(want, boy, ":ARG0")
    graph.add_edge(want, sleep, ":ARG1")
    graph.add_edge(sleep, boy, ":ARG0")
    return graph, want, boy, sleep


class TestAmrGraph(AmrGenTestCase):
    def test_first_vertex_is_root(self):
        graph, want, boy, sleep = build_want_sleep()
        assert graph.root is want
        assert [vertex.index for vertex in graph.vertices] == [0, 1, 2]

    def test_new_vertex_gets_instance_edge(self):
        graph = AmrGraph()
        boy = graph.new_vertex("boy")
        edge = boy.instance_edge
        assert edge.is_instance_edge
        assert edge.label == "boy"
        assert edge.target is EMPTY_VERTEX
        assert boy.child_edges() == []

    def test_iteration_is_breadth_first_and_visits_once(self):
        graph, want, boy, sleep = build_want_sleep()
        assert list(graph) == [want, boy, sleep]
        assert len(graph) == 3

    def test_iteration_without_root_raises(self):
        with pytest.raises(GraphStructureError):
            list(AmrGraph())

    def test_bottom_up_puts_children_first(self):
        graph = AmrGraph()
        root = graph.new_vertex("and")
        first = graph.new_vertex("a")
        second = graph.new_vertex("b")
        leaf = graph.new_vertex("c")
        graph.add_edge(root, first, ":op1")
        graph.add_edge(root, second, ":op2")
        graph.add_edge(first, leaf, ":ARG0")
        assert graph.bottom_up() == [leaf, first, second, root]

    def test_edges_include_instance_edges(self):
        graph, want, boy, sleep = build_want_sleep()
        labels = sorted(edge.label for edge in graph.edges())
        assert labels == [":ARG0", ":ARG0", ":ARG1", "boy", "sleep-01", "want-01"]

    def test_convert_to_tree_keeps_edge_closest_to_root(self):
        graph, want, boy, sleep = build_want_sleep()
        assert not graph.is_tree()

        graph.convert_to_tree()

        assert graph.is_tree()
        assert boy.incoming_edge.source is want
        link_edge = [edge for edge in sleep.child_edges() if edge.label == ":ARG0"][0]
        link = link_edge.target
        assert link is not boy
        assert link.is_link
        assert link.annotation.original is boy
        assert link.instance == "boy"
        assert link.instance_edge is None

    def test_convert_to_tree_prefers_uninverted_edges(self):
        graph = AmrGraph()
        root = graph.new_vertex("and")
        first = graph.new_vertex("teach-01")
        second = graph.new_vertex("learn-01")
        person = graph.new_vertex("person")
        graph.add_edge(root, first, ":op1")
        graph.add_edge(root, second, ":op2")
        graph.add_edge(first, person, ":ARG0-of")
        kept = graph.add_edge(second, person, ":ARG0")

        graph.convert_to_tree()

        assert person.incoming == [kept]

    def test_is_cyclic(self):
        graph, want, boy, sleep = build_want_sleep()
        assert not graph.is_cyclic()
        graph.add_edge(sleep, want, ":ARG1-of")
        assert graph.is_cyclic()

    def test_swap_moves_child_above_parent(self):
        graph, want, boy, sleep = build_want_sleep()
        graph.convert_to_tree()
        link = sleep.children()[0]

        graph.swap(sleep, link)

        assert link.incoming_edge.source is want
        assert link.incoming_edge.label == ":ARG1"
        assert sleep.incoming_edge.source is link
        assert sleep.incoming_edge.label == ":ARG0-of"
        assert sleep.child_edges() == []
        assert link.annotation.swap_count == 1
        assert sleep.annotation.swap_count == -1
        assert graph.is_tree()

    def test_swap_at_root_changes_root(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        boy = graph.new_vertex("boy")
        graph.add_edge(want, boy, ":ARG0")

        graph.swap(want, boy)

        assert graph.root is boy
        assert want.incoming_edge.label == ":ARG0-of"
        assert list(graph) == [boy, want]

    def test_swap_requires_parent_and_child(self):
        graph, want, boy, sleep = build_want_sleep()
        graph.convert_to_tree()
        with pytest.raises(GraphStructureError, match="not parent and child"):
            graph.swap(boy, sleep)

    def test_merge_child_into_parent(self):
        graph = AmrGraph()
        person = graph.new_vertex("person")
        develop = graph.new_vertex("develop-02")
        software = graph.new_vertex("software")
        graph.add_edge(person, develop, ":ARG0-of")
        graph.add_edge(develop, software, ":ARG1")

        graph.merge(person, develop, "developer", "NN")

        assert person.instance == "developer"
        assert person.pos == "NN"
        assert person.instance_edge.label == "developer"
        assert person.children() == [software]
        assert software.incoming_edge.source is person
        assert list(graph) == [person, software]

    def test_merge_siblings(self):
        graph = AmrGraph()
        root = graph.new_vertex("and")
        first = graph.new_vertex("a")
        second = graph.new_vertex("b")
        graph.add_edge(root, first, ":op1")
        graph.add_edge(root, second, ":op2")

        graph.merge(first, second, "ab", None)

        assert root.children() == [first]
        assert first.instance == "ab"

    def test_merge_unrelated_vertices_raises(self):
        graph = AmrGraph()
        root = graph.new_vertex("and")
        first = graph.new_vertex("a")
        nephew = graph.new_vertex("b")
        uncle = graph.new_vertex("c")
        graph.add_edge(root, first, ":op1")
        graph.add_edge(root, uncle, ":op2")
        graph.add_edge(uncle, nephew, ":ARG0")
        with pytest.raises(GraphStructureError, match="neither in a parent-child relationship"):
            graph.merge(first, nephew, "ab", None)

    def test_uncouple(self):
        graph, want, boy, sleep = build_want_sleep()
        edge = boy.incoming[1]

        link = graph.uncouple(edge)

        assert edge.target is link
        assert link.incoming == [edge]
        assert boy.incoming == [want.outgoing[1]]
        assert link.index == 3


class TestPrepare(AmrGenTestCase):
    def test_names_are_merged_into_their_entity(self):
        graph = AmrGraph()
        country = graph.new_vertex("country")
        name = graph.new_vertex("name")
        first = graph.new_vertex('"United"')
        second = graph.new_vertex('"States"')
        wiki = graph.new_vertex('"United_States"')
        graph.add_edge(country, name, ":name")
        graph.add_edge(name, first, ":op1")
        graph.add_edge(name, second, ":op2")
        graph.add_edge(country, wiki, ":wiki")

        graph.prepare()

        assert country.name == "United States"
        assert country.child_edges() == []
        assert list(graph) == [country]

    def test_hyphenated_names_keep_their_hyphen(self):
        graph = AmrGraph()
        city = graph.new_vertex("city")
        name = graph.new_vertex("name")
        op = graph.new_vertex('"Winston-Salem"')
        graph.add_edge(city, name, ":name")
        graph.add_edge(name, op, ":op1")

        graph.prepare()

        assert city.name == "Winston-Salem"

    def test_edges_into_the_root_are_dropped(self):
        graph = AmrGraph()
        root = graph.new_vertex("want-01")
        child = graph.new_vertex("boy")
        graph.add_edge(root, child, ":ARG0")
        graph.add_edge(child, root, ":ARG0-of")

        graph.prepare()

        assert root.incoming == []
        assert child.child_edges() == []
        assert graph.is_tree()

    def test_pos_tags(self):
        graph, want, boy, sleep = build_want_sleep()

        graph.prepare(pos_lexicon={"boy": "NNS"})

        link = sleep.children()[0]
        assert want.pos == POS_ANY
        assert sleep.pos == POS_ANY
        assert boy.pos == "NN"
        assert link.pos == "NN"

    def test_imperative_mode(self):
        graph = AmrGraph()
        go = graph.new_vertex("go-02")
        you = graph.new_vertex("you")
        mode = graph.new_vertex("imperative")
        graph.add_edge(go, you, ":ARG0")
        graph.add_edge(go, mode, ":mode")

        graph.prepare()

        assert go.mode == "imperative"
        assert go.pos == "VB"
        assert go.children() == [you]

    def test_unknown_concepts_make_questions(self):
        graph = AmrGraph()
        know = graph.new_vertex("know-01")
        say = graph.new_vertex("say-01")
        unknown = graph.new_vertex("amr-unknown")
        graph.add_edge(know, say, ":ARG1")
        graph.add_edge(say, unknown, ":ARG0")

        graph.prepare()

        assert say.mode == "interrogative"
        assert know.mode == "interrogative"

    def test_deverbalizations(self):
        graph = AmrGraph()
        like = graph.new_vertex("like-01")
        person = graph.new_vertex("person")
        teach = graph.new_vertex("teach-01")
        graph.add_edge(like, person, ":ARG0")
        graph.add_edge(person, teach, ":ARG0-of")

        graph.prepare(deverbalizations={"person\t:ARG0-of\tteach-01": "teacher"})

        assert person.instance == "teacher"
        assert person.pos == "NN"
        assert person.instance_edge.label == "teacher"
        assert list(graph) == [like, person]


class TestYield(AmrGenTestCase):
    def test_yield_follows_reordering_and_insertions(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        boy = graph.new_vertex("boy")
        sleep = graph.new_vertex("sleep-01")
        arg0 = graph.add_edge(want, boy, ":ARG0")
        arg1 = graph.add_edge(want, sleep, ":ARG1")

        ptf = PartialTransitionFunction()
        ptf.reordering[want.index] = [arg0, want.instance_edge, arg1]
        ptf.realization.update({want.index: "wants", boy.index: "boy", sleep.index: "sleep"})
        ptf.denominator[boy.index] = "the"
        ptf.before_insertions[sleep.index] = "to"
        ptf.punctuation[want.index] = "."

        assert graph.yield_words(ptf) == ["the", "boy", "wants", "to", "sleep", "."]
        assert graph.yield_string(ptf) == "the boy wants to sleep ."

    def test_yield_without_reordering_uses_outgoing_order(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        boy = graph.new_vertex("boy")
        graph.add_edge(want, boy, ":ARG0")

        ptf = PartialTransitionFunction()
        ptf.realization.update({want.index: "wants", boy.index: "boy"})
        ptf.denominator[want.index] = "the"

        assert graph.yield_string(ptf) == "the wants boy"

    def test_yield_includes_inserted_children(self):
        graph = AmrGraph()
        give = graph.new_vertex("give-01")
        inserted = graph.insert_child(give, "will")
        assert give.child_edges() == []

        ptf = PartialTransitionFunction()
        ptf.reordering[give.index] = [inserted, give.instance_edge]
        ptf.realization.update({give.index: "give", inserted.target.index: "will"})

        assert graph.yield_string(ptf) == "will give"
