from typing import Optional

from amrgen.generation.partial_transition_function import PartialTransitionFunction


class Prediction:
    """
    A scored hypothesis for the realization of a subtree.

    # Parameters

    value : `str`
        The text the subtree is realized as.
    score : `float`
        The total log-space score, including the language model.
    lm_free_score : `float`, optional (default = `score`)
        The score without the language model.  Composition sums these, and rescores the
        concatenated text with the language model once.
    partial_transition_function : `PartialTransitionFunction`, optional
        The decisions that produced `value`.
    """

    def __init__(
        self,
        value: str,
        score: float,
        lm_free_score: Optional[float] = None,
        partial_transition_function: Optional[PartialTransitionFunction] = None,
    ) -> None:
        self.value = value
        self.score = score
        self.lm_free_score = score if lm_free_score is None else lm_free_score
        self.partial_transition_function = (
            partial_transition_function
            if partial_transition_function is not None
            else PartialTransitionFunction()
        )

    @property
    def ptf(self) -> PartialTransitionFunction:
        return self.partial_transition_function

    def with_scores(self, score: float, lm_free_score: Optional[float] = None) -> "Prediction":
        return Prediction(
            self.value,
            score,
            self.lm_free_score if lm_free_score is None else lm_free_score,
            self.partial_transition_function,
        )

    def with_value(
        self, value: str, partial_transition_function: Optional[PartialTransitionFunction] = None
    ) -> "Prediction":
        return Prediction(
            value,
            self.score,
            self.lm_free_score,
            self.partial_transition_function
            if partial_transition_function is None
            else partial_transition_function,
        )

    def __repr__(self) -> str:
        return f"Prediction({self.value!r}, {self.score:.4f}, {self.lm_free_score:.4f})"
