import logging
from typing import Any, Dict, Iterable, Optional

from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.fmeasure import PrecisionRecallPair
from corefscore.measures.partitions import (
    Cluster,
    Clustering,
    check_partitions_over_same_elements,
    make_item_to_cluster_map,
)

logger = logging.getLogger(__name__)


@CorefScorer.register("muc")
class MUCScorer(CorefScorer):
    """
    Produces coreference scores according to the MUC metric.

    See Marc Vilain, John Burger, John Aberdeen, Dennis Connolly, and Lynette Hirschman. 1995. A
    model-theoretic coreference scoring scheme. In Proceedings of the 6th Message Understanding
    Conference (MUC6).

    `score` returns `None` when the metric is undefined, i.e. when either clustering
    consists only of singletons. Undefined is not the same as zero.

    Empty clusters are ignored: they hold no links, so they neither add to nor subtract
    from the link totals. `[["a", "b"]]` scored against `[["a", "b"], []]` is therefore
    perfect rather than undefined.
    """

    @classmethod
    def create(cls) -> "MUCScorer":
        return cls()

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> Optional[PrecisionRecallPair]:
        predicted_sets = self._to_sets(predicted)
        gold_sets = self._to_sets(gold)

        predicted_item_to_group = make_item_to_cluster_map(predicted_sets)
        gold_item_to_group = make_item_to_cluster_map(gold_sets)

        check_partitions_over_same_elements(
            predicted_item_to_group.keys(), gold_item_to_group.keys()
        )

        recall = self._score_component(gold_sets, predicted_item_to_group)
        precision = self._score_component(predicted_sets, gold_item_to_group)

        if recall is None or precision is None:
            logger.debug("MUC undefined: recall=%s precision=%s", recall, precision)
            return None
        return PrecisionRecallPair(precision, recall)

    @staticmethod
    def _score_component(
        left_clustering: Clustering, right_item_to_group: Dict[Any, Cluster]
    ) -> Optional[float]:
        """
        For each left cluster, the number of links kept is its size minus the number of right
        clusters it is split across; the number of links it has is its size minus one.
        """
        numerator = 0
        denominator = 0
        for left_cluster in left_clustering:
            # empty clusters hold no links
            if not left_cluster:
                continue
            overlapped = {right_item_to_group[item] for item in left_cluster}
            numerator += len(left_cluster) - len(overlapped)
            denominator += len(left_cluster) - 1

        if denominator > 0:
            return numerator / denominator
        return None
