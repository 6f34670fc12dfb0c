from typing import Any, Iterable, Optional

from corefscore.common.registrable import Registrable
from corefscore.measures.partitions import Clustering, Equivalence, to_sets


class CorefScorer(Registrable):
    """
    A `CorefScorer` compares a predicted clustering (the response) of one document's mentions
    against the gold clustering (the key) under a single coreference metric.

    Scorers are stateless: `score` is a pure function of its arguments, never mutates them,
    and either returns a complete result or raises.

    # Parameters

    equivalence : `Equivalence`, optional (default = `None`)
        Decides when two items are the same mention. If `None`, the items' own
        `__eq__` and `__hash__` are used.
    """

    def __init__(self, equivalence: Optional[Equivalence] = None) -> None:
        self._equivalence = equivalence

    def score(self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]) -> Any:
        """
        # Parameters

        predicted : `Iterable[Iterable[Any]]`
            The response clustering: an iterable of clusters, each an iterable of mentions.
        gold : `Iterable[Iterable[Any]]`
            The key clustering, in the same form.
        """
        raise NotImplementedError

    def _to_sets(self, clusters: Iterable[Iterable[Any]]) -> Clustering:
        return to_sets(clusters, self._equivalence)

    @property
    def name(self) -> Optional[str]:
        return CorefScorer.registered_name(self.__class__)
