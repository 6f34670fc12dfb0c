"""
The BLANC family of coreference metrics (Recasens and Hovy, 2011; Luo et al., 2014).

BLANC looks at every pair of items and asks whether each side puts them in the same
cluster (a coreference link) or in different clusters (a non-coreference link). Precision,
recall and F1 are computed for each link type and then averaged.
"""
import logging
from typing import Any, Iterable, Optional

from corefscore.measures.blanc_result import BLANCResult
from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.partitions import (
    Equivalence,
    check_partitions_over_same_elements,
    make_item_to_cluster_map,
    make_item_to_clusters_multimap,
)

logger = logging.getLogger(__name__)


class _LinkCounts:
    """
    Running totals of per-item link counts. Every link is counted once from each of its
    endpoints, which doubles all six totals alike and leaves every ratio unchanged.
    """

    def __init__(self) -> None:
        self.coref_in_both = 0
        self.coref_in_key = 0
        self.coref_in_response = 0
        self.non_coref_in_both = 0
        self.non_coref_in_key = 0
        self.non_coref_in_response = 0

    def to_result(self, item_sets_match: bool) -> BLANCResult:
        logger.debug(
            "BLANC link counts: coref (both=%d, key=%d, response=%d), "
            "non-coref (both=%d, key=%d, response=%d)",
            self.coref_in_both,
            self.coref_in_key,
            self.coref_in_response,
            self.non_coref_in_both,
            self.non_coref_in_key,
            self.non_coref_in_response,
        )
        return BLANCResult.from_set_counts(
            item_sets_match,
            self.coref_in_both,
            self.coref_in_key,
            self.coref_in_response,
            self.non_coref_in_both,
            self.non_coref_in_key,
            self.non_coref_in_response,
        )


class BLANCScorer(CorefScorer):
    """
    Base class for the BLANC scorers. Use `BLANCScorer.standard()` when both clusterings
    partition the same items, and `BLANCScorer.multi()` when they may not.
    """

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> BLANCResult:
        raise NotImplementedError

    @staticmethod
    def standard(equivalence: Optional[Equivalence] = None) -> "StandardBLANCScorer":
        return StandardBLANCScorer(equivalence=equivalence)

    @staticmethod
    def multi(equivalence: Optional[Equivalence] = None) -> "MultiBLANCScorer":
        return MultiBLANCScorer(equivalence=equivalence)


@CorefScorer.register("standard-blanc")
class StandardBLANCScorer(BLANCScorer):
    """
    BLANC as defined by Recasens and Hovy (2011). Both clusterings must cover the same items
    and every item must belong to exactly one cluster on each side.

    # Parameters

    use_self_edges : `bool`, optional (default = `False`)
        If `True`, every item is also linked to itself, so singleton clusters contribute
        coreference links.
    """

    def __init__(
        self, use_self_edges: bool = False, equivalence: Optional[Equivalence] = None
    ) -> None:
        super().__init__(equivalence)
        self._use_self_edges = use_self_edges

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> BLANCResult:
        predicted_item_to_group = make_item_to_cluster_map(self._to_sets(predicted))
        gold_item_to_group = make_item_to_cluster_map(self._to_sets(gold))

        check_partitions_over_same_elements(
            predicted_item_to_group.keys(), gold_item_to_group.keys()
        )

        # don't count the link from an item to itself
        self_correction = 0 if self._use_self_edges else 1

        all_items = set(predicted_item_to_group)
        counts = _LinkCounts()
        for item in all_items:
            predicted_neighbors = set(predicted_item_to_group[item])
            gold_neighbors = set(gold_item_to_group[item])
            if not self._use_self_edges:
                predicted_neighbors.discard(item)
                gold_neighbors.discard(item)

            counts.coref_in_both += len(predicted_neighbors & gold_neighbors)
            counts.coref_in_response += len(predicted_neighbors)
            counts.coref_in_key += len(gold_neighbors)

            counts.non_coref_in_key += len(all_items) - len(gold_neighbors) - self_correction
            counts.non_coref_in_response += (
                len(all_items) - len(predicted_neighbors) - self_correction
            )
            neighbors_in_either = predicted_neighbors | gold_neighbors
            counts.non_coref_in_both += len(all_items - neighbors_in_either) - self_correction

        # the universes were checked above
        return counts.to_result(item_sets_match=True)


@CorefScorer.register("multi-blanc")
class MultiBLANCScorer(BLANCScorer):
    """
    The extension of BLANC by Luo et al. (2014), "An Extension of BLANC to System Mentions".

    The key and response may cover different items and an item may belong to any number of
    clusters. Non-coreference links are only compared over the items both sides contain.
    When the clusterings do satisfy the preconditions of `StandardBLANCScorer`, both
    scorers give the same result.
    """

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> BLANCResult:
        predicted_item_to_groups = make_item_to_clusters_multimap(self._to_sets(predicted))
        gold_item_to_groups = make_item_to_clusters_multimap(self._to_sets(gold))

        key_items = set(gold_item_to_groups)
        response_items = set(predicted_item_to_groups)
        items_in_both = key_items & response_items
        all_items = key_items | response_items

        counts = _LinkCounts()
        for item in all_items:
            in_key = item in key_items
            in_response = item in response_items

            predicted_neighbors = set().union(*predicted_item_to_groups.get(item, []))
            predicted_neighbors.discard(item)
            gold_neighbors = set().union(*gold_item_to_groups.get(item, []))
            gold_neighbors.discard(item)

            counts.coref_in_both += len(predicted_neighbors & gold_neighbors)
            counts.coref_in_response += len(predicted_neighbors)
            counts.coref_in_key += len(gold_neighbors)

            # the -1s exclude the link from an item to itself
            if in_key:
                counts.non_coref_in_key += len(key_items) - len(gold_neighbors) - 1
            if in_response:
                counts.non_coref_in_response += len(response_items) - len(predicted_neighbors) - 1
            if in_key and in_response:
                neighbors_in_either = predicted_neighbors | gold_neighbors
                counts.non_coref_in_both += len(items_in_both - neighbors_in_either) - 1

        if key_items != response_items:
            logger.debug(
                "multi-BLANC over mismatched items: %d in key only, %d in response only",
                len(key_items - response_items),
                len(response_items - key_items),
            )
        return counts.to_result(item_sets_match=key_items == response_items)
