import logging
import threading
from typing import Dict, List, Sequence, Tuple

from overrides import overrides

from amrgen.common.checks import check_positive
from amrgen.common.registrable import Registrable

logger = logging.getLogger(__name__)


class LanguageModelOracle(Registrable):
    """
    An n-gram language model over log10 probabilities.

    Implementations only provide `ngram_log_prob`.  `score_sentence` slides an
    `order`-sized window over the sentence, padded with `start_symbol` and `end_symbol`,
    and caches every n-gram it scores.  The cache is shared by all threads using the
    model.

    # Parameters

    order : `int`, optional (default = `3`)
    start_symbol : `str`, optional (default = `"<s>"`)
    end_symbol : `str`, optional (default = `"</s>"`)
    """

    default_implementation = "lookup"

    def __init__(self, order: int = 3, start_symbol: str = "<s>", end_symbol: str = "</s>") -> None:
        check_positive(order, "order")
        self.order = order
        self.start_symbol = start_symbol
        self.end_symbol = end_symbol
        self._cache: Dict[Tuple[str, ...], float] = {}
        self._lock = threading.Lock()

    def ngram_log_prob(self, ngram: Sequence[str]) -> float:
        """
        The log10 probability of the last word of `ngram` given the words before it.
        """
        raise NotImplementedError

    def score_sentence(
        self, tokens: Sequence[str], start_bounded: bool = True, end_bounded: bool = True
    ) -> float:
        """
        The log10 probability of `tokens`.  With `start_bounded` the sentence is scored
        as the beginning of a sentence, with `end_bounded` as its end; a fragment in the
        middle of a sentence gets neither.
        """
        size = len(tokens)
        score = 0.0
        if start_bounded:
            i = 1
            while i < self.order - 1 and i <= size + 1:
                score += self._cached_log_prob(self._window(tokens, -1, i))
                i += 1
        end = size + (2 if end_bounded else 1)
        for i in range(self.order - 1, end):
            score += self._cached_log_prob(self._window(tokens, i - self.order, i))
        return score

    def _window(self, tokens: Sequence[str], start: int, end: int) -> Tuple[str, ...]:
        window: List[str] = []
        for i in range(start, end):
            if i < 0:
                window.append(self.start_symbol)
            elif i >= len(tokens):
                window.append(self.end_symbol)
            else:
                window.append(tokens[i])
        return tuple(window)

    def _cached_log_prob(self, ngram: Tuple[str, ...]) -> float:
        with self._lock:
            if ngram in self._cache:
                return self._cache[ngram]
        log_prob = self.ngram_log_prob(ngram)
        with self._lock:
            self._cache[ngram] = log_prob
        return log_prob

    @property
    def cache_size(self) -> int:
        return len(self._cache)


@LanguageModelOracle.register("lookup")
class LookupLanguageModel(LanguageModelOracle):
    """
    A backoff language model read from configuration, in the layout of an ARPA file.

    # Parameters

    log_probs : `Dict[str, float]`, optional
        Maps space-separated n-grams to their log10 probability.
    backoff_weights : `Dict[str, float]`, optional
        Maps space-separated contexts to their log10 backoff weight.
    unknown_log_prob : `float`, optional (default = `-1.0`)
        The log10 probability of a word that is not even a known unigram.
    """

    def __init__(
        self,
        log_probs: Dict[str, float] = None,
        backoff_weights: Dict[str, float] = None,
        unknown_log_prob: float = -1.0,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.log_probs = log_probs or {}
        self.backoff_weights = backoff_weights or {}
        self.unknown_log_prob = unknown_log_prob

    @overrides
    def ngram_log_prob(self, ngram: Sequence[str]) -> float:
        if not ngram:
            return self.unknown_log_prob
        key = " ".join(ngram)
        if key in self.log_probs:
            return self.log_probs[key]
        if len(ngram) == 1:
            return self.unknown_log_prob
        backoff = self.backoff_weights.get(" ".join(ngram[:-1]), 0.0)
        return backoff + self.ngram_log_prob(ngram[1:])
