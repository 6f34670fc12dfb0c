import math
from dataclasses import dataclass
from typing import Dict, Optional

from corefscore.common.util import nan_to_zero


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _if_defined(value: float) -> Optional[float]:
    if math.isnan(value):
        return None
    return value


@dataclass(frozen=True, eq=False)
class BLANCResult:
    """
    The outcome of a BLANC comparison: precision, recall and F1 over coreference links and
    over non-coreference links, plus the combined BLANC precision, recall and score.

    The six link-type sub-scores are `None` when their denominator is zero. The combined
    values are always defined; see `from_set_counts` for how degenerate documents are handled.

    Instances are frozen and are built through `from_set_counts`. Undefined sub-scores are
    stored as NaN and reported as `None`.
    """

    _coref_precision: float
    _coref_recall: float
    _coref_f1: float
    _non_coref_precision: float
    _non_coref_recall: float
    _non_coref_f1: float
    _blanc_precision: float
    _blanc_recall: float
    _blanc_score: float

    @classmethod
    def from_set_counts(
        cls,
        item_sets_match: bool,
        coref_links_in_both: float,
        coref_links_in_key: float,
        coref_links_in_response: float,
        non_coref_links_in_both: float,
        non_coref_links_in_key: float,
        non_coref_links_in_response: float,
    ) -> "BLANCResult":
        """
        Builds a result from link counts, following section 4.1 of Luo et al. (ACL 2014) for
        degenerate cases:

        - no links of either type on either side (at most one item per side): 1.0 if the
          key and response cover the same items, otherwise 0.0;
        - no coreference links on either side (all singletons): the non-coreference value;
        - no non-coreference links on either side (one cluster per side): the coreference value;
        - otherwise the mean of the coreference and non-coreference values.

        The rule picks the score from the two F-measures, and the combined precision and
        recall from the matching sub-scores, where an undefined sub-score counts as zero.

        # Parameters

        item_sets_match : `bool`
            Whether the key and the response contain exactly the same items.
        """
        coref_recall = _ratio(coref_links_in_both, coref_links_in_key)
        coref_precision = _ratio(coref_links_in_both, coref_links_in_response)
        non_coref_recall = _ratio(non_coref_links_in_both, non_coref_links_in_key)
        non_coref_precision = _ratio(non_coref_links_in_both, non_coref_links_in_response)

        # F from the raw counts handles a link type missing on one side, which P and R do not
        coref_f1 = _ratio(2 * coref_links_in_both, coref_links_in_key + coref_links_in_response)
        non_coref_f1 = _ratio(
            2 * non_coref_links_in_both, non_coref_links_in_key + non_coref_links_in_response
        )

        no_coref_links = coref_links_in_key == 0 and coref_links_in_response == 0
        no_non_coref_links = non_coref_links_in_key == 0 and non_coref_links_in_response == 0

        def combine(coref_value: float, non_coref_value: float) -> float:
            if no_coref_links and no_non_coref_links:
                return 1.0 if item_sets_match else 0.0
            if no_coref_links:
                return nan_to_zero(non_coref_value)
            if no_non_coref_links:
                return nan_to_zero(coref_value)
            return 0.5 * (nan_to_zero(coref_value) + nan_to_zero(non_coref_value))

        return cls(
            coref_precision,
            coref_recall,
            coref_f1,
            non_coref_precision,
            non_coref_recall,
            non_coref_f1,
            combine(coref_precision, non_coref_precision),
            combine(coref_recall, non_coref_recall),
            combine(coref_f1, non_coref_f1),
        )

    @property
    def coref_link_precision(self) -> Optional[float]:
        return _if_defined(self._coref_precision)

    @property
    def coref_link_recall(self) -> Optional[float]:
        return _if_defined(self._coref_recall)

    @property
    def coref_link_f1(self) -> Optional[float]:
        return _if_defined(self._coref_f1)

    @property
    def non_coref_link_precision(self) -> Optional[float]:
        return _if_defined(self._non_coref_precision)

    @property
    def non_coref_link_recall(self) -> Optional[float]:
        return _if_defined(self._non_coref_recall)

    @property
    def non_coref_link_f1(self) -> Optional[float]:
        return _if_defined(self._non_coref_f1)

    @property
    def blanc_precision(self) -> float:
        return self._blanc_precision

    @property
    def blanc_recall(self) -> float:
        return self._blanc_recall

    @property
    def blanc_score(self) -> float:
        """
        The final BLANC score. Always defined, including for empty documents.
        """
        return self._blanc_score

    def to_json(self) -> Dict[str, Optional[float]]:
        return {
            "coref_precision": self.coref_link_precision,
            "coref_recall": self.coref_link_recall,
            "coref_f1": self.coref_link_f1,
            "non_coref_precision": self.non_coref_link_precision,
            "non_coref_recall": self.non_coref_link_recall,
            "non_coref_f1": self.non_coref_link_f1,
            "precision": self.blanc_precision,
            "recall": self.blanc_recall,
            "score": self.blanc_score,
        }

    def __repr__(self):
        return (
            f"BLANCResult(precision={self.blanc_precision:.4f}, "
            f"recall={self.blanc_recall:.4f}, score={self.blanc_score:.4f})"
        )
