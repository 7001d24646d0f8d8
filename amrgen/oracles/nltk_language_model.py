import logging
import math
from typing import List, Sequence

from nltk.lm import MLE, KneserNeyInterpolated, Laplace, WittenBellInterpolated
from nltk.lm.preprocessing import padded_everygram_pipeline
from overrides import overrides

from amrgen.common.checks import ConfigurationError
from amrgen.oracles.language_model import LanguageModelOracle

logger = logging.getLogger(__name__)

_ESTIMATORS = {
    "mle": MLE,
    "laplace": Laplace,
    "kneser_ney": KneserNeyInterpolated,
    "witten_bell": WittenBellInterpolated,
}

# nltk scores in log2.
_LOG2_TO_LOG10 = math.log10(2)


@LanguageModelOracle.register("nltk")
class NltkLanguageModel(LanguageModelOracle):
    """
    An n-gram model estimated by `nltk.lm` from tokenized sentences given in the
    configuration.  The sentence boundary symbols are nltk's own, `<s>` and `</s>`.

    # Parameters

    sentences : `List[List[str]]`
        The training sentences.
    estimator : `str`, optional (default = `"laplace"`)
        One of `mle`, `laplace`, `kneser_ney` or `witten_bell`.
    order : `int`, optional (default = `3`)
    """

    def __init__(
        self, sentences: List[List[str]], estimator: str = "laplace", order: int = 3
    ) -> None:
        super().__init__(order=order, start_symbol="<s>", end_symbol="</s>")
        if estimator not in _ESTIMATORS:
            raise ConfigurationError(
                f"unknown estimator {estimator}, expected one of {sorted(_ESTIMATORS)}"
            )
        self.model = _ESTIMATORS[estimator](order)
        train, vocabulary = padded_everygram_pipeline(order, sentences)
        self.model.fit(train, vocabulary)
        logger.info(
            f"trained a {order}-gram {estimator} model on {len(sentences)} sentences, "
            f"vocabulary size {len(self.model.vocab)}"
        )

    @overrides
    def ngram_log_prob(self, ngram: Sequence[str]) -> float:
        word = ngram[-1]
        context = list(ngram[:-1])
        return self.model.logscore(word, context) * _LOG2_TO_LOG10
