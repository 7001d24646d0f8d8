from typing import Iterable, Iterator, List, Optional

from amrgen.common.checks import check_positive
from amrgen.generation.prediction import Prediction


class CandidateList:
    """
    A beam of at most `capacity` predictions, best first.  Predictions with the same text
    are merged rather than stored twice; ties in score keep insertion order.
    """

    def __init__(self, capacity: int) -> None:
        check_positive(capacity, "capacity")
        self.capacity = capacity
        self._predictions: List[Prediction] = []

    def insert_or_merge(self, prediction: Prediction) -> None:
        for i, existing in enumerate(self._predictions):
            if existing.value == prediction.value:
                self._predictions[i] = existing.with_scores(
                    max(existing.score, prediction.score),
                    max(existing.lm_free_score, prediction.lm_free_score),
                )
                break
        else:
            self._predictions.append(prediction)
        self._predictions.sort(key=lambda p: -p.score)
        del self._predictions[self.capacity :]

    def add_all(self, predictions: Iterable[Prediction]) -> None:
        for prediction in predictions:
            self.insert_or_merge(prediction)

    def top_k(self, k: int) -> List[Prediction]:
        return self._predictions[:k]

    def best(self) -> Optional[Prediction]:
        return self._predictions[0] if self._predictions else None

    def clear(self) -> None:
        self._predictions = []

    def __iter__(self) -> Iterator[Prediction]:
        return iter(list(self._predictions))

    def __len__(self) -> int:
        return len(self._predictions)

    def __getitem__(self, index: int) -> Prediction:
        return self._predictions[index]

    def __repr__(self) -> str:
        return f"CandidateList({self.capacity}, {self._predictions})"
