import math

import pytest

from amrgen.common.checks import ConfigurationError
from amrgen.common.params import Params
from amrgen.common.testing import AmrGenTestCase
from amrgen.oracles import LanguageModelOracle, NltkLanguageModel


class TestNltkLanguageModel(AmrGenTestCase):
    def setup_method(self):
        super().setup_method()
        self.sentences = [
            ["the", "boy", "wants", "to", "sleep"],
            ["the", "girl", "wants", "to", "sleep"],
            ["the", "boy", "sleeps"],
        ]

    def test_scores_are_log10(self):
        model = NltkLanguageModel(self.sentences, estimator="laplace", order=2)
        expected = model.model.logscore("boy", ["the"]) * math.log10(2)
        assert model.ngram_log_prob(("the", "boy")) == pytest.approx(expected)

    def test_seen_sentences_score_higher(self):
        model = NltkLanguageModel(self.sentences, estimator="laplace", order=3)
        seen = model.score_sentence(["the", "boy", "wants", "to", "sleep"])
        shuffled = model.score_sentence(["sleep", "to", "wants", "boy", "the"])
        assert seen > shuffled
        assert math.isfinite(shuffled)

    def test_unknown_estimator(self):
        with pytest.raises(ConfigurationError):
            NltkLanguageModel(self.sentences, estimator="good_turing")

    def test_from_params(self):
        model = LanguageModelOracle.from_params(
            Params(
                {
                    "type": "nltk",
                    "sentences": self.sentences,
                    "estimator": "witten_bell",
                    "order": 2,
                }
            )
        )
        assert isinstance(model, NltkLanguageModel)
        assert model.order == 2
        assert model.score_sentence(["the", "boy"]) < 0
