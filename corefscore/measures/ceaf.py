import logging
from typing import Any, Iterable, List, Optional

import numpy

from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.fmeasure import PrecisionRecallPair
from corefscore.measures.matching import BipartiteMatcher, ClusterNode, CompleteBipartiteGraph
from corefscore.measures.partitions import Clustering, Equivalence

logger = logging.getLogger(__name__)


@CorefScorer.register("mention-ceaf")
class MentionCEAFScorer(CorefScorer):
    """
    Mention-based CEAF (Luo, 2005). Gold and predicted clusters are aligned one-to-one so
    that the total number of shared mentions is maximal; that total divided by the number
    of predicted (gold) mentions is the precision (recall).

    Unlike MUC, an undefined precision or recall is not reported as absent: if either one
    is undefined, both are returned as 0.

    # Parameters

    matcher : `BipartiteMatcher`, optional (default = `HungarianMatcher`)
        Solves the minimum-weight perfect matching between the two sides.
    """

    def __init__(
        self, matcher: Optional[BipartiteMatcher] = None, equivalence: Optional[Equivalence] = None
    ) -> None:
        super().__init__(equivalence)
        self._matcher = matcher or BipartiteMatcher.by_name(
            BipartiteMatcher.default_implementation
        )()

    @classmethod
    def create(cls) -> "MentionCEAFScorer":
        return cls()

    def score(
        self, predicted: Iterable[Iterable[Any]], gold: Iterable[Iterable[Any]]
    ) -> PrecisionRecallPair:
        graph = self.build_graph(self._to_sets(predicted), self._to_sets(gold))
        matching = self._matcher.solve(graph)

        graph_similarity = sum(
            len(gold_node.members & predicted_node.members)
            for gold_node, predicted_node in matching.pairs
        )
        gold_mention_count = sum(len(node.members) for node in graph.left)
        predicted_mention_count = sum(len(node.members) for node in graph.right)

        logger.debug(
            "CEAF similarity %d over %d gold and %d predicted mentions",
            graph_similarity,
            gold_mention_count,
            predicted_mention_count,
        )

        if graph_similarity > 0 and gold_mention_count != 0 and predicted_mention_count != 0:
            return PrecisionRecallPair(
                graph_similarity / predicted_mention_count, graph_similarity / gold_mention_count
            )
        return PrecisionRecallPair(0.0, 0.0)

    @staticmethod
    def build_graph(predicted: Clustering, gold: Clustering) -> CompleteBipartiteGraph:
        """
        Builds the alignment graph with gold clusters on the left and predicted clusters on
        the right. The smaller side is padded with empty clusters so that both sides have
        `max(len(gold), len(predicted))` nodes. Edge weights are `max_similarity - |g & p|`,
        where `max_similarity` is the largest overlap of any pair, so that a minimum-weight
        matching maximizes the total overlap.
        """
        size = max(len(predicted), len(gold))
        gold_nodes = _to_nodes_with_padding(gold, size, "gold")
        predicted_nodes = _to_nodes_with_padding(predicted, size, "predicted")

        similarities = numpy.zeros((size, size))
        for i, gold_node in enumerate(gold_nodes):
            for j, predicted_node in enumerate(predicted_nodes):
                similarities[i, j] = len(gold_node.members & predicted_node.members)

        max_similarity = similarities.max() if size else 0.0
        return CompleteBipartiteGraph(gold_nodes, predicted_nodes, max_similarity - similarities)


def _to_nodes_with_padding(clusters: Clustering, size: int, prefix: str) -> List[ClusterNode]:
    nodes = [
        ClusterNode(f"{prefix}{index}", cluster) for index, cluster in enumerate(clusters, start=1)
    ]
    padding = size - len(nodes)
    if padding:
        logger.debug("padding %s side with %d empty clusters", prefix, padding)
    for index in range(len(nodes) + 1, size + 1):
        nodes.append(ClusterNode(f"{prefix}{index}", frozenset(), padding=True))
    return nodes
