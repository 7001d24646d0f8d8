import pytest

from amrgen.common.checks import ConfigurationError
from amrgen.common.testing import AmrGenTestCase
from amrgen.generation import CandidateList, PartialTransitionFunction, Prediction


class TestCandidateList(AmrGenTestCase):
    def test_keeps_best_first_within_capacity(self):
        candidates = CandidateList(2)
        candidates.add_all(
            [Prediction("boy", -3.0), Prediction("the boy", -1.0), Prediction("a boy", -2.0)]
        )

        assert len(candidates) == 2
        assert [prediction.value for prediction in candidates] == ["the boy", "a boy"]
        assert candidates.best().value == "the boy"
        assert candidates[1].score == -2.0

    def test_same_text_is_merged(self):
        first_ptf = PartialTransitionFunction()
        first_ptf.realization[0] = "boy"
        candidates = CandidateList(3)
        candidates.insert_or_merge(Prediction("boy", -2.0, -5.0, first_ptf))
        candidates.insert_or_merge(Prediction("boy", -1.0, -6.0))

        assert len(candidates) == 1
        merged = candidates.best()
        assert merged.score == -1.0
        assert merged.lm_free_score == -5.0
        assert merged.ptf is first_ptf

    def test_ties_keep_insertion_order(self):
        candidates = CandidateList(3)
        candidates.add_all([Prediction("a", -1.0), Prediction("b", -1.0), Prediction("c", -1.0)])
        assert [prediction.value for prediction in candidates] == ["a", "b", "c"]

    def test_top_k_and_clear(self):
        candidates = CandidateList(5)
        candidates.add_all([Prediction(str(i), -float(i)) for i in range(5)])
        assert [prediction.value for prediction in candidates.top_k(2)] == ["0", "1"]

        candidates.clear()
        assert len(candidates) == 0
        assert candidates.best() is None

    def test_iteration_is_over_a_copy(self):
        candidates = CandidateList(3)
        candidates.add_all([Prediction("a", -1.0), Prediction("b", -2.0)])
        for prediction in candidates:
            candidates.insert_or_merge(Prediction(prediction.value + "!", 0.0))
        assert len(candidates) == 3

    def test_capacity_must_be_positive(self):
        with pytest.raises(ConfigurationError):
            CandidateList(0)


class TestPrediction(AmrGenTestCase):
    def test_lm_free_score_defaults_to_score(self):
        prediction = Prediction("boy", -2.0)
        assert prediction.lm_free_score == -2.0
        assert isinstance(prediction.ptf, PartialTransitionFunction)

    def test_with_scores_and_value_copy(self):
        prediction = Prediction("boy", -2.0, -1.0)
        rescored = prediction.with_scores(-3.0)
        assert (rescored.value, rescored.score, rescored.lm_free_score) == ("boy", -3.0, -1.0)
        assert rescored.ptf is prediction.ptf

        renamed = prediction.with_value("the boy")
        assert (renamed.value, renamed.score) == ("the boy", -2.0)
        assert prediction.value == "boy"
