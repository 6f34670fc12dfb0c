from dataclasses import dataclass
from typing import Dict, Sequence

from corefscore.common.checks import check_non_negative


class FMeasureInfo:
    """
    The information needed to calculate precision, recall, and F-measure. Subclasses
    provide `precision` and `recall`; F-measures are always derived from them.
    """

    precision: float
    recall: float

    @property
    def f1(self) -> float:
        return self.f(1.0)

    def f(self, beta: float) -> float:
        if beta <= 0.0:
            raise ValueError(f"beta must be positive, but got {beta}")
        if self.precision + self.recall > 0.0:
            return (
                (1.0 + beta * beta)
                * self.precision
                * self.recall
                / (beta * beta * self.precision + self.recall)
            )
        else:
            return 0.0

    def to_json(self) -> Dict[str, float]:
        return {"precision": self.precision, "recall": self.recall, "f1": self.f1}


@dataclass(frozen=True)
class PrecisionRecallPair(FMeasureInfo):
    precision: float
    recall: float

    def __post_init__(self):
        check_non_negative(self.precision, "precision")
        check_non_negative(self.recall, "recall")


def aggregate_by_macro_pr(infos: Sequence[FMeasureInfo]) -> PrecisionRecallPair:
    """
    Averages precision and recall separately over `infos`. An empty sequence gives (0, 0).
    """
    if not infos:
        return PrecisionRecallPair(0.0, 0.0)
    return PrecisionRecallPair(
        sum(info.precision for info in infos) / len(infos),
        sum(info.recall for info in infos) / len(infos),
    )
