"""
Minimum-weight perfect matching over complete bipartite graphs, the assignment problem
solved by mention-based CEAF.
"""
import logging
from typing import List, NamedTuple, Sequence, Tuple

import numpy
from scipy.optimize import linear_sum_assignment

from corefscore.common.registrable import Registrable
from corefscore.measures.partitions import Cluster

logger = logging.getLogger(__name__)


class ClusterNode(NamedTuple):
    """
    A vertex of the alignment graph. `node_id` is unique within its side ("gold1",
    "predicted3", ...); padding nodes have no members.
    """

    node_id: str
    members: Cluster
    padding: bool = False


class CompleteBipartiteGraph:
    """
    A complete bipartite graph with `weights[i, j]` the weight of the edge between
    `left[i]` and `right[j]`. Both sides must have the same number of nodes.
    """

    def __init__(
        self, left: Sequence[ClusterNode], right: Sequence[ClusterNode], weights: numpy.ndarray
    ) -> None:
        if len(left) != len(right):
            raise ValueError(
                f"A perfect matching needs sides of equal size, got {len(left)} and {len(right)}"
            )
        if weights.shape != (len(left), len(right)):
            raise ValueError(
                f"Weight matrix of shape {weights.shape} does not fit a graph with "
                f"{len(left)} nodes per side"
            )
        self.left = list(left)
        self.right = list(right)
        self.weights = weights

    def __len__(self) -> int:
        return len(self.left)


class Matching(NamedTuple):
    pairs: List[Tuple[ClusterNode, ClusterNode]]
    weight: float


class BipartiteMatcher(Registrable):
    """
    Solves the minimum-weight perfect matching problem: every left node is paired with
    exactly one right node so that the summed edge weight is as small as possible.
    """

    default_implementation = "hungarian"

    def solve(self, graph: CompleteBipartiteGraph) -> Matching:
        raise NotImplementedError


@BipartiteMatcher.register("hungarian")
class HungarianMatcher(BipartiteMatcher):
    """
    Uses the Hungarian algorithm implementation in `scipy.optimize.linear_sum_assignment`,
    which runs in time cubic in the number of nodes per side.
    """

    def solve(self, graph: CompleteBipartiteGraph) -> Matching:
        if len(graph) == 0:
            return Matching([], 0.0)
        rows, columns = linear_sum_assignment(graph.weights)
        pairs = [(graph.left[row], graph.right[column]) for row, column in zip(rows, columns)]
        weight = float(graph.weights[rows, columns].sum())
        logger.debug("matched %d node pairs with total weight %s", len(pairs), weight)
        return Matching(pairs, weight)
