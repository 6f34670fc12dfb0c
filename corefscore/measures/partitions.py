"""
Helpers for turning the clusterings handed to a scorer into validated partitions.

A clustering is any iterable of iterables of hashable items. Scorers convert it to a list of
`frozenset`s (one per cluster, duplicates within a cluster collapse, empty clusters are kept)
and index it from item to the cluster(s) holding it.
"""
import logging
from collections import defaultdict
from typing import AbstractSet, Any, Callable, Dict, FrozenSet, Hashable, Iterable, List, Optional

from corefscore.common.checks import PartitionError, PartitionMismatchError

logger = logging.getLogger(__name__)

Cluster = FrozenSet[Any]
Clustering = List[Cluster]


class Equivalence:
    """
    An equivalence relation over items, used in place of the items' own `__eq__` and
    `__hash__` when building clusters. The two methods must agree: equivalent items
    must hash the same.
    """

    def equivalent(self, first: Any, second: Any) -> bool:
        raise NotImplementedError

    def hash(self, item: Any) -> int:
        raise NotImplementedError

    def wrap(self, item: Any) -> "EquivalenceWrapper":
        return EquivalenceWrapper(self, item)


class KeyEquivalence(Equivalence):
    """
    Two items are equivalent when `key` maps them to equal values, e.g.
    `KeyEquivalence(lambda mention: mention.text.lower())` compares mentions by
    normalized surface form.
    """

    def __init__(self, key: Callable[[Any], Hashable]) -> None:
        self._key = key

    def equivalent(self, first: Any, second: Any) -> bool:
        return self._key(first) == self._key(second)

    def hash(self, item: Any) -> int:
        return hash(self._key(item))


class EquivalenceWrapper:
    """
    Holds an item so that set and dict operations use an `Equivalence` instead of
    the item's natural equality.
    """

    __slots__ = ("equivalence", "item")

    def __init__(self, equivalence: Equivalence, item: Any) -> None:
        self.equivalence = equivalence
        self.item = item

    def __eq__(self, other):
        if not isinstance(other, EquivalenceWrapper) or other.equivalence is not self.equivalence:
            return NotImplemented
        return self.equivalence.equivalent(self.item, other.item)

    def __hash__(self):
        return self.equivalence.hash(self.item)

    def __repr__(self):
        return repr(self.item)


def to_sets(
    clusters: Iterable[Iterable[Any]], equivalence: Optional[Equivalence] = None
) -> Clustering:
    """
    Materializes `clusters` as a list of frozensets, in input order. With an `equivalence`,
    every item is wrapped so that membership is decided by it.
    """
    if equivalence is None:
        return [frozenset(cluster) for cluster in clusters]
    return [frozenset(equivalence.wrap(item) for item in cluster) for cluster in clusters]


def make_item_to_cluster_map(clusters: Iterable[Cluster]) -> Dict[Any, Cluster]:
    """
    Indexes a single-membership clustering from each item to the cluster containing it.
    Raises a `PartitionError` if an item is found in more than one cluster.
    """
    item_to_cluster: Dict[Any, Cluster] = {}
    for cluster in clusters:
        for item in cluster:
            if item in item_to_cluster:
                raise PartitionError(
                    f"Item {item!r} appears in more than one cluster, but this metric requires "
                    "every item to belong to exactly one cluster"
                )
            item_to_cluster[item] = cluster
    return item_to_cluster


def make_item_to_clusters_multimap(clusters: Iterable[Cluster]) -> Dict[Any, List[Cluster]]:
    """
    Indexes a clustering in which items may belong to several clusters. Since clusters are
    sets, an item is listed at most once per cluster.
    """
    item_to_clusters: Dict[Any, List[Cluster]] = defaultdict(list)
    for cluster in clusters:
        for item in cluster:
            item_to_clusters[item].append(cluster)
    return dict(item_to_clusters)


def check_partitions_over_same_elements(
    predicted_items: AbstractSet[Any], gold_items: AbstractSet[Any]
) -> None:
    """
    Raises a `PartitionMismatchError` naming both sides of the symmetric difference if the
    predicted and gold item universes differ.
    """
    if predicted_items != gold_items:
        predicted_only = predicted_items - gold_items
        gold_only = gold_items - predicted_items
        logger.debug(
            "partition mismatch: %d predicted-only and %d gold-only items",
            len(predicted_only),
            len(gold_only),
        )
        raise PartitionMismatchError(predicted_only, gold_only)
