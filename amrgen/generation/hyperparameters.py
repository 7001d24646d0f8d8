import logging
from typing import Dict, List, Sequence, Tuple

from amrgen.common.checks import ConfigurationError, check_positive
from amrgen.common.from_params import FromParams

logger = logging.getLogger(__name__)


class NBest(FromParams):
    """
    How many of an oracle's scored options survive pruning.

    # Parameters

    take_best_n : `int`
        At most this many options are kept.
    max_prob_decrement : `float`
        Options scoring more than this below the best one are dropped as well.
    """

    def __init__(self, take_best_n: int, max_prob_decrement: float) -> None:
        check_positive(take_best_n, "take_best_n")
        if max_prob_decrement < 0:
            raise ConfigurationError(
                f"max_prob_decrement must not be negative, but got {max_prob_decrement}"
            )
        self.take_best_n = take_best_n
        self.max_prob_decrement = max_prob_decrement

    def select(self, scored: Sequence[Tuple[str, float]]) -> List[Tuple[str, float]]:
        ranked = sorted(scored, key=lambda option: -option[1])[: self.take_best_n]
        if not ranked:
            return []
        threshold = ranked[0][1] - self.max_prob_decrement
        return [option for option in ranked if option[1] >= threshold]

    def __repr__(self) -> str:
        return f"NBest({self.take_best_n}, {self.max_prob_decrement})"


class Hyperparameters(FromParams):
    """
    The weights and beam sizes of the realization search.  Every value has a default, so a
    configuration only needs to name what it changes:

    ```jsonnet
    {"lm_weight": 20, "reordering": {"take_best_n": 3, "max_prob_decrement": 0.2}}
    ```

    # Parameters

    reordering, realization, argument_insertion, other_insertion, denominator : `NBest`
        Pruning of the options of the corresponding oracles.
    pos, number, voice, tense : `NBest`
        Pruning of the syntactic annotations kept on each vertex.
    lm_weight : `float`, optional (default = `38.5`)
        Weight of the normalized language model score of a hypothesis.
    before_insertion_weight : `float`, optional (default = `1.5`)
    before_argument_insertion_weight : `float`, optional (default = `1.5`)
        Weight of a word inserted in front of a child, for the general and the argument
        insertion oracle.
    after_insertion_weight : `float`, optional (default = `2.0`)
    article_lm_weight : `float`, optional (default = `0.7`)
        How much an article counts when the language model score is normalized by length.
    reordering_weight : `float`, optional (default = `4.5`)
    realization_weight : `float`, optional (default = `0.5`)
    default_realization_score : `float`, optional (default = `0.3`)
        The probability assigned to rule-based realizations.
    min_translation_score : `float`, optional (default = `0.025`)
        Realizations below this probability are discarded (the best one only below a
        hundredth of it).
    link_realization_score : `float`, optional (default = `-0.5`)
    max_realization_predictions_per_pos : `int`, optional (default = `3`)
    max_realization_predictions : `int`, optional (default = `8`)
    max_predictions_per_vertex : `int`, optional (default = `11`)
    max_out_degree : `int`, optional (default = `7`)
        Vertices with more children than this keep their children's order unscored.
    pos_weight, number_weight, voice_weight, tense_weight : `float`, optional (default = `2.0`)
    denominator_weight : `float`, optional (default = `0.1`)
    """

    def __init__(
        self,
        reordering: NBest = None,
        realization: NBest = None,
        argument_insertion: NBest = None,
        other_insertion: NBest = None,
        denominator: NBest = None,
        pos: NBest = None,
        number: NBest = None,
        voice: NBest = None,
        tense: NBest = None,
        lm_weight: float = 38.5,
        before_insertion_weight: float = 1.5,
        before_argument_insertion_weight: float = 1.5,
        after_insertion_weight: float = 2.0,
        article_lm_weight: float = 0.7,
        reordering_weight: float = 4.5,
        realization_weight: float = 0.5,
        default_realization_score: float = 0.3,
        min_translation_score: float = 0.025,
        link_realization_score: float = -0.5,
        max_realization_predictions_per_pos: int = 3,
        max_realization_predictions: int = 8,
        max_predictions_per_vertex: int = 11,
        max_out_degree: int = 7,
        pos_weight: float = 2.0,
        number_weight: float = 2.0,
        voice_weight: float = 2.0,
        tense_weight: float = 2.0,
        denominator_weight: float = 0.1,
    ) -> None:
        self.reordering = reordering or NBest(5, 0.4)
        self.realization = realization or NBest(2, 0.25)
        self.argument_insertion = argument_insertion or NBest(8, 0.4)
        self.other_insertion = other_insertion or NBest(8, 0.5)
        self.denominator = denominator or NBest(3, 0.8)
        self.pos = pos or NBest(3, 0.6)
        self.number = number or NBest(2, 0.4)
        self.voice = voice or NBest(2, 0.05)
        self.tense = tense or NBest(3, 0.4)

        self.lm_weight = lm_weight
        self.before_insertion_weight = before_insertion_weight
        self.before_argument_insertion_weight = before_argument_insertion_weight
        self.after_insertion_weight = after_insertion_weight
        self.article_lm_weight = article_lm_weight
        self.reordering_weight = reordering_weight
        self.realization_weight = realization_weight
        self.default_realization_score = default_realization_score
        self.min_translation_score = min_translation_score
        self.link_realization_score = link_realization_score

        for name, value in [
            ("max_realization_predictions_per_pos", max_realization_predictions_per_pos),
            ("max_realization_predictions", max_realization_predictions),
            ("max_predictions_per_vertex", max_predictions_per_vertex),
            ("max_out_degree", max_out_degree),
        ]:
            check_positive(value, name)
        self.max_realization_predictions_per_pos = max_realization_predictions_per_pos
        self.max_realization_predictions = max_realization_predictions
        self.max_predictions_per_vertex = max_predictions_per_vertex
        self.max_out_degree = max_out_degree

        self.syntactic_annotation_weights: Dict[str, float] = {
            "pos": pos_weight,
            "number": number_weight,
            "voice": voice_weight,
            "tense": tense_weight,
        }
        self.denominator_weight = denominator_weight

    def annotation_n_best(self, key: str) -> NBest:
        """
        The pruning of the syntactic annotation `key`, one of pos, number, voice or tense.
        """
        if key not in self.syntactic_annotation_weights:
            raise ConfigurationError(f"unknown syntactic annotation {key}")
        return getattr(self, key)
