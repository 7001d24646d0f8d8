import pytest

from amrgen.common.checks import ConfigurationError
from amrgen.common.params import Params
from amrgen.common.testing import AmrGenTestCase
from amrgen.graph import AmrGraph
from amrgen.oracles import (
    ChildInsertionOracle,
    DenominatorOracle,
    InsertionOracle,
    RealizationOracle,
    ReorderOracle,
    StructuralOracle,
    SyntacticAnnotationOracle,
)


class TestLookupOracles(AmrGenTestCase):
    def setup_method(self):
        super().setup_method()
        self.graph = AmrGraph()
        self.want = self.graph.new_vertex("want-01")
        self.boy = self.graph.new_vertex("boy")
        self.sleep = self.graph.new_vertex("sleep-01")
        self.arg0 = self.graph.add_edge(self.want, self.boy, ":ARG0")
        self.arg1 = self.graph.add_edge(self.want, self.sleep, ":ARG1")

    def test_structural_oracle(self):
        oracle = StructuralOracle.from_params(
            Params({"transitions": {"want-01": {"_swap": 0.7, "_realize": 0.3}}})
        )
        assert oracle.score_transitions(self.want, self.graph) == [
            ("_swap", 0.7),
            ("_realize", 0.3),
        ]
        assert oracle.score_transitions(self.boy, self.graph) == [("_realize", 1.0)]

    def test_structural_oracle_default_can_be_empty(self):
        oracle = StructuralOracle.from_params(Params({"default": {}}))
        assert oracle.score_transitions(self.boy, self.graph) == []

    def test_structural_oracle_rejects_unknown_transitions(self):
        with pytest.raises(ConfigurationError, match="unknown transition '_realise'"):
            StructuralOracle.from_params(Params({"transitions": {"boy": {"_realise": 1.0}}}))
        with pytest.raises(ConfigurationError, match="unknown transition 'keep'"):
            StructuralOracle.from_params(Params({"default": {"keep": 1.0}}))

    def test_syntactic_annotation_oracle(self):
        oracle = SyntacticAnnotationOracle.from_params(
            Params({"annotations": {"tense": {"want-01": {"past": 0.6, "present": 0.4}}}})
        )
        assert oracle.predict(self.want, self.graph, "tense") == [("past", 0.6), ("present", 0.4)]
        assert oracle.predict(self.want, self.graph, "voice") == []
        assert oracle.predict(self.boy, self.graph, "tense") == []

    def test_realization_oracle_prefers_specific_keys(self):
        oracle = RealizationOracle.from_params(
            Params(
                {
                    "realizations": {
                        "want-01\tVB\ttense=past,voice=active": {"wanted": 1.0},
                        "want-01\tVB": {"want": 0.7, "wants": 0.3},
                        "want-01": {"wish": 1.0},
                    }
                }
            )
        )
        assert oracle.has_observed(self.want)
        assert not oracle.has_observed(self.boy)

        self.want.pos = "VB"
        annotation = {"voice": "active", "tense": "past"}
        assert oracle.score_candidates(self.want, self.graph, annotation) == [("wanted", 1.0)]
        annotation = {"tense": "present"}
        assert oracle.score_candidates(self.want, self.graph, annotation) == [
            ("want", 0.7),
            ("wants", 0.3),
        ]
        self.want.pos = None
        assert oracle.score_candidates(self.want, self.graph, annotation) == [("wish", 1.0)]

    def test_reorder_oracle(self):
        oracle = ReorderOracle.from_params(
            Params(
                {
                    "child_before_parent": {":ARG0": 0.9, ":ARG0\tpassive": 0.2},
                    "left_sibling_order": {":ARG0\t:ARG1": 0.8},
                    "default_probability": 0.4,
                }
            )
        )
        assert oracle.child_before_parent(self.arg0, self.graph, "wants", "active") == 0.9
        assert oracle.child_before_parent(self.arg0, self.graph, "wanted", "passive") == 0.2
        assert oracle.child_before_parent(self.arg1, self.graph, "wants", None) == 0.4

        assert oracle.score_pairwise_order(self.arg0, self.arg1, self.graph, "left") == 0.8
        assert oracle.score_pairwise_order(
            self.arg1, self.arg0, self.graph, "left"
        ) == pytest.approx(0.2)
        assert oracle.score_pairwise_order(self.arg0, self.arg1, self.graph, "right") == 0.4

    def test_reorder_oracle_checks_default_probability(self):
        with pytest.raises(ConfigurationError):
            ReorderOracle.from_params(Params({"default_probability": 1.5}))

    def test_insertion_oracle(self):
        oracle = InsertionOracle.from_params(
            Params(
                {
                    "insertions": {
                        "wants\t:ARG1\tr": {"to": 0.9, "": 0.1},
                        ":ARG1\tl": {"": 1.0},
                        ":ARG1": {"that": 0.5},
                    }
                }
            )
        )
        assert oracle.score_insertion(self.arg1, "r", "wants", "sleep", self.graph) == [
            ("to", 0.9),
            ("", 0.1),
        ]
        assert oracle.score_insertion(self.arg1, "l", "wants", "sleep", self.graph) == [("", 1.0)]
        assert oracle.score_insertion(self.arg1, "d", None, "sleep", self.graph) == [
            ("that", 0.5)
        ]
        assert oracle.score_insertion(self.arg0, "l", "wants", "boy", self.graph) == []

    def test_child_insertion_oracle(self):
        oracle = ChildInsertionOracle.from_params(
            Params({"insertions": {"give-up-07\tgive": {"up": 0.9, "": 0.1}}})
        )
        give = self.graph.new_vertex("give-up-07")
        assert oracle.predict(give, self.graph, "give", "active") == [("up", 0.9), ("", 0.1)]
        assert oracle.predict(give, self.graph, "gave", "active") == []

    def test_denominator_oracle(self):
        oracle = DenominatorOracle.from_params(
            Params({"denominators": {"boy\tplural": {"-": 1.0}, "boy": {"the": 0.6, "a": 0.4}}})
        )
        assert oracle.predict(self.boy, self.graph, "plural", "boys") == [("-", 1.0)]
        assert oracle.predict(self.boy, self.graph, "singular", "boy") == [
            ("the", 0.6),
            ("a", 0.4),
        ]
        assert oracle.predict(self.want, self.graph, None, "wants") == []
