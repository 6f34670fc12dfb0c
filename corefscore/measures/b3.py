import logging
from enum import Enum
from typing import Any, Iterable, Optional, Union

from corefscore.common.checks import ConfigurationError
from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.fmeasure import PrecisionRecallPair
from corefscore.measures.partitions import (
    Clustering,
    Equivalence,
    check_partitions_over_same_elements,
    make_item_to_cluster_map,
)

logger = logging.getLogger(__name__)


class B3Method(Enum):
    BY_ELEMENT = "by_element"
    BY_CLUSTER = "by_cluster"


@CorefScorer.register("b3")
class B3Scorer(CorefScorer):
    """
    Implements the B-cubed coreference metric (Bagga and Baldwin, 1998).

    Every item contributes the overlap of its gold and predicted clusters, relative to the
    predicted cluster's size for precision and to the gold cluster's size for recall. Both
    clusterings must cover exactly the same items.

    # Parameters

    method : `str`, optional (default = `"by_element"`)
        `"by_element"` averages over items. `"by_cluster"` is accepted but scoring with it
        raises `NotImplementedError`.
    """

    def __init__(
        self, method: Union[str, B3Method] = "by_element", equivalence: Optional[Equivalence] = None
    ) -> None:
        super().__init__(equivalence)
        try:
            self._method = B3Method(method)
        except ValueError:
            raise ConfigurationError(
                f"Unknown B3 method {method}; expected one of {[m.value for m in B3Method]}"
            )

    @classmethod
    def create_by_element_scorer(cls, equivalence: Optional[Equivalence] = None) -> "B3Scorer":
        return cls(B3Method.BY_ELEMENT, equivalence=equivalence)

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> PrecisionRecallPair:
        predicted_sets = self._to_sets(predicted)
        gold_sets = self._to_sets(gold)

        if self._method == B3Method.BY_ELEMENT:
            return self._score_by_element(predicted_sets, gold_sets)
        else:
            raise NotImplementedError(f"B3 scoring {self._method.value} is not implemented")

    @staticmethod
    def _score_by_element(predicted: Clustering, gold: Clustering) -> PrecisionRecallPair:
        predicted_item_to_group = make_item_to_cluster_map(predicted)
        gold_item_to_group = make_item_to_cluster_map(gold)

        check_partitions_over_same_elements(
            predicted_item_to_group.keys(), gold_item_to_group.keys()
        )

        # the universes match, so both sides are empty
        if not gold_item_to_group:
            return PrecisionRecallPair(0.0, 0.0)

        precision_total = 0.0
        recall_total = 0.0
        for item, gold_group in gold_item_to_group.items():
            predicted_group = predicted_item_to_group[item]
            in_both = len(gold_group & predicted_group)
            precision_total += in_both / len(predicted_group)
            recall_total += in_both / len(gold_group)

        num_items = len(gold_item_to_group)
        logger.debug("B3 over %d items", num_items)
        return PrecisionRecallPair(precision_total / num_items, recall_total / num_items)
