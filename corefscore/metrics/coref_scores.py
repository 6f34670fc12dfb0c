import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from overrides import overrides
import torch

from corefscore.measures.blanc import BLANCScorer
from corefscore.measures.blanc_result import BLANCResult
from corefscore.measures.coref_scorer import CorefScorer
from corefscore.measures.fmeasure import FMeasureInfo, aggregate_by_macro_pr
from corefscore.metrics.metric import Metric

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

DEFAULT_SCORERS = ("muc", "b3", "mention-ceaf", "multi-blanc")


@Metric.register("coref_scores")
class CorefScores(Metric):
    """
    Accumulates per-document results of several coreference scorers and reports their
    macro averages over documents.

    # Parameters

    scorers : `Dict[str, CorefScorer]`, optional (default = `None`)
        The scorers to run, keyed by the prefix used in `get_metric`. If `None`, uses
        MUC, B3, mention CEAF and multi BLANC under their registered names.
    """

    def __init__(self, scorers: Optional[Dict[str, CorefScorer]] = None) -> None:
        if scorers is None:
            scorers = {name: CorefScorer.by_name(name)() for name in DEFAULT_SCORERS}
        self.scorers = scorers
        self._results: Dict[str, List[Any]] = {name: [] for name in self.scorers}
        self._documents = 0

    def __call__(  # type: ignore
        self,
        top_spans: torch.Tensor,
        antecedent_indices: torch.Tensor,
        predicted_antecedents: torch.Tensor,
        metadata_list: List[Dict[str, Any]],
    ) -> None:
        """
        Scores a batch of documents decoded from a span-ranking coreference model.

        # Parameters

        top_spans : `torch.Tensor`
            Inclusive `(start, end)` token offsets of the candidate mentions of each document,
            of shape `(batch_size, num_spans, 2)`.
        antecedent_indices : `torch.Tensor`
            Of shape `(batch_size, num_spans, num_antecedents)`. Row `i` lists the span
            indices that span `i` may take as its antecedent.
        predicted_antecedents : `torch.Tensor`
            Of shape `(batch_size, num_spans)`. A position in the matching row of
            `antecedent_indices`, or a negative value for a span without an antecedent.
        metadata_list : `List[Dict[str, Any]]`
            One dictionary per document whose `"clusters"` entry holds the gold clusters as
            lists of `[start, end]` spans.

        Every candidate span ends up in a predicted cluster, singletons included, so scorers
        that need equal item sets expect the candidate spans to be the gold mentions.
        """
        tensors = self.detach_tensors(top_spans, antecedent_indices, predicted_antecedents)
        spans, candidates, choices = (tensor.cpu() for tensor in tensors)

        for document, metadata in enumerate(metadata_list):
            self.score_document(
                self.get_predicted_clusters(
                    spans[document], candidates[document], choices[document]
                ),
                self.get_gold_clusters(metadata["clusters"]),
            )

    def score_document(
        self, predicted_clusters: Iterable[Iterable[Any]], gold_clusters: Iterable[Iterable[Any]]
    ) -> Dict[str, Any]:
        """
        Runs every scorer on one document and records the results. If any scorer raises,
        nothing is recorded for the document.
        """
        predicted_clusters = [list(cluster) for cluster in predicted_clusters]
        gold_clusters = [list(cluster) for cluster in gold_clusters]
        results = {
            name: scorer.score(predicted_clusters, gold_clusters)
            for name, scorer in self.scorers.items()
        }
        for name, result in results.items():
            if result is None:
                logger.info_once(  # type: ignore
                    f"{name} is undefined for some documents; they are counted in "
                    f"{name}_undefined and left out of its averages"
                )
            self._results[name].append(result)
        self._documents += 1
        return results

    @overrides
    def get_metric(self, reset: bool = False) -> Dict[str, float]:
        metrics: Dict[str, float] = {"documents": self._documents}
        for name, scorer in self.scorers.items():
            results = self._results[name]
            if isinstance(scorer, BLANCScorer):
                metrics.update(self._blanc_metrics(name, results))
            else:
                metrics.update(self._fmeasure_metrics(name, results))
        if reset:
            self.reset()
        return metrics

    @overrides
    def reset(self) -> None:
        self._results = {name: [] for name in self.scorers}
        self._documents = 0

    @staticmethod
    def _fmeasure_metrics(name: str, results: List[Optional[FMeasureInfo]]) -> Dict[str, float]:
        # undefined results are counted, never averaged in as zero
        defined = [result for result in results if result is not None]
        macro = aggregate_by_macro_pr(defined)
        return {
            f"{name}_precision": macro.precision,
            f"{name}_recall": macro.recall,
            f"{name}_f1": macro.f1,
            f"{name}_undefined": len(results) - len(defined),
        }

    @staticmethod
    def _blanc_metrics(name: str, results: List[BLANCResult]) -> Dict[str, float]:
        if not results:
            return {f"{name}_precision": 0.0, f"{name}_recall": 0.0, f"{name}_score": 0.0}
        return {
            f"{name}_precision": sum(r.blanc_precision for r in results) / len(results),
            f"{name}_recall": sum(r.blanc_recall for r in results) / len(results),
            f"{name}_score": sum(r.blanc_score for r in results) / len(results),
        }

    @staticmethod
    def get_gold_clusters(gold_clusters: List[List[List[int]]]) -> List[Tuple[Span, ...]]:
        return [tuple(tuple(mention) for mention in cluster) for cluster in gold_clusters]

    @staticmethod
    def get_predicted_clusters(
        top_spans: torch.Tensor,
        antecedent_indices: torch.Tensor,
        predicted_antecedents: torch.Tensor,
    ) -> List[Tuple[Span, ...]]:
        """
        Follows the predicted antecedent link of each span of one document. Linked spans form
        clusters in the order their first link appears; each remaining span is a singleton.
        """
        spans: List[Span] = [tuple(span) for span in top_spans.tolist()]  # type: ignore
        cluster_of: Dict[Span, int] = {}
        clusters: List[List[Span]] = []

        for anaphor, choice in enumerate(predicted_antecedents.tolist()):
            if choice < 0:
                continue
            antecedent = int(antecedent_indices[anaphor, choice])
            if antecedent >= anaphor:
                raise ValueError(f"span {anaphor} points at a later antecedent {antecedent}")
            if spans[antecedent] not in cluster_of:
                cluster_of[spans[antecedent]] = len(clusters)
                clusters.append([spans[antecedent]])
            cluster_id = cluster_of[spans[antecedent]]
            clusters[cluster_id].append(spans[anaphor])
            cluster_of[spans[anaphor]] = cluster_id

        for span in spans:
            if span not in cluster_of:
                cluster_of[span] = len(clusters)
                clusters.append([span])
        return [tuple(cluster) for cluster in clusters]
