from amrgen.common.testing import AmrGenTestCase
from amrgen.generation import StructuralTransitionProcessor
from amrgen.graph import AmrGraph
from amrgen.oracles import LookupStructuralOracle
from amrgen.oracles.transitions import DELETE, KEEP, MERGE, SWAP


def processor(transitions=None, default=None, merge_table=None):
    oracle = LookupStructuralOracle(transitions=transitions, default=default)
    return StructuralTransitionProcessor(oracle, merge_table or {})


class TestStructuralTransitionProcessor(AmrGenTestCase):
    def test_keep_leaves_graph_unchanged(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        boy = graph.new_vertex("boy")
        graph.add_edge(want, boy, ":ARG0")

        processor().process(graph)

        assert graph.root is want
        assert want.children() == [boy]
        assert not want.is_deleted
        assert not boy.is_deleted

    def test_swapping_terminates(self):
        graph = AmrGraph()
        top = graph.new_vertex("a")
        middle = graph.new_vertex("b")
        bottom = graph.new_vertex("c")
        graph.add_edge(top, middle, ":ARG0")
        graph.add_edge(middle, bottom, ":ARG1")

        processor(default={SWAP: 1.0}).process(graph)

        assert graph.root is bottom
        assert graph.is_tree()
        assert len(graph) == 3
        assert set(bottom.children()) == {top, middle}
        assert bottom.annotation.swap_count == 2
        assert middle.annotation.swap_count == -1
        assert top.annotation.swap_count == -1

    def test_swap_is_reconsidered_from_the_parent(self):
        graph = AmrGraph()
        top = graph.new_vertex("a")
        child = graph.new_vertex("b")
        graph.add_edge(top, child, ":ARG0")

        processor(transitions={"b": {SWAP: 0.8, KEEP: 0.2}}, default={DELETE: 1.0}).process(graph)

        assert graph.root is child
        assert top.incoming_edge.label == ":ARG0-of"
        assert top.is_deleted
        assert not child.is_deleted

    def test_delete(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        polarity = graph.new_vertex("-")
        graph.add_edge(want, polarity, ":polarity")

        processor(default={DELETE: 0.9, KEEP: 0.1}).process(graph)

        assert want.is_deleted
        assert not polarity.is_deleted

    def test_multi_sentence_is_always_deleted(self):
        graph = AmrGraph()
        root = graph.new_vertex("multi-sentence")
        first = graph.new_vertex("sleep-01")
        graph.add_edge(root, first, ":snt1")

        processor().process(graph)

        assert root.is_deleted
        assert not first.is_deleted

    def test_imperative_subject_is_deleted(self):
        graph = AmrGraph()
        go = graph.new_vertex("go-02")
        you = graph.new_vertex("you")
        graph.add_edge(go, you, ":ARG0")
        go.mode = "imperative"

        processor().process(graph)

        assert you.is_deleted

    def test_merge(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        person = graph.new_vertex("person")
        develop = graph.new_vertex("develop-02")
        graph.add_edge(want, person, ":ARG0")
        graph.add_edge(person, develop, ":ARG0-of")

        processor(
            transitions={"develop-02": {MERGE: 0.9, KEEP: 0.1}},
            merge_table={("person", "develop-02"): ("developer", "NN")},
        ).process(graph)

        assert person.instance == "developer"
        assert person.pos == "NN"
        assert person.child_edges() == []
        assert list(graph) == [want, person]

    def test_merge_requires_table_entry(self):
        graph = AmrGraph()
        person = graph.new_vertex("person")
        teach = graph.new_vertex("teach-01")
        graph.add_edge(person, teach, ":ARG0-of")

        processor(
            transitions={"teach-01": {MERGE: 0.9, KEEP: 0.1}},
            merge_table={("person", "develop-02"): ("developer", "NN")},
        ).process(graph)

        assert person.instance == "person"
        assert person.children() == [teach]

    def test_links_and_named_entities_are_kept(self):
        graph = AmrGraph()
        want = graph.new_vertex("want-01")
        boy = graph.new_vertex("boy")
        sleep = graph.new_vertex("sleep-01")
        graph.add_edge(want, boy, ":ARG0")
        graph.add_edge(want, sleep, ":ARG1")
        graph.add_edge(sleep, boy, ":ARG0")
        graph.convert_to_tree()
        link = sleep.children()[0]
        boy.name = "Bob"

        processor(transitions={"boy": {DELETE: 1.0, SWAP: 0.5}}).process(graph)

        assert not link.is_deleted
        assert not boy.is_deleted
        assert sleep.children() == [link]

    def test_unscored_transitions_fall_back_to_keep(self):
        graph = AmrGraph()
        graph.new_vertex("boy")

        processor(default={SWAP: 1.0, MERGE: 0.5}).process(graph)

        assert not graph.root.is_deleted
