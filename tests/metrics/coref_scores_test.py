import pytest
import torch
from numpy.testing import assert_almost_equal

from corefscore.common.checks import PartitionMismatchError
from corefscore.common.params import Params
from corefscore.common.testing import CorefScoreTestCase, multi_device
from corefscore.measures import B3Scorer, MultiBLANCScorer, MUCScorer, StandardBLANCScorer
from corefscore.metrics import CorefScores, Metric


class CorefScoresTest(CorefScoreTestCase):
    def setup_method(self):
        super().setup_method()
        self.metric = CorefScores()

    @multi_device
    def test_get_predicted_clusters(self, device: str):
        top_spans = torch.tensor([[0, 1], [4, 6], [8, 9]], device=device)
        antecedent_indices = torch.tensor([[-1, -1, -1], [0, -1, -1], [0, 1, -1]], device=device)
        predicted_antecedents = torch.tensor([-1, -1, 1], device=device)
        clusters = CorefScores.get_predicted_clusters(
            top_spans.cpu(), antecedent_indices.cpu(), predicted_antecedents.cpu()
        )
        assert len(clusters) == 2
        assert set(clusters[0]) == {(4, 6), (8, 9)}
        # spans without antecedents or anaphors are singletons
        assert clusters[1] == ((0, 1),)

    def test_antecedents_must_precede_their_anaphor(self):
        top_spans = torch.tensor([[0, 1], [4, 6]])
        antecedent_indices = torch.tensor([[1, -1], [0, -1]])
        with pytest.raises(ValueError, match="later antecedent"):
            CorefScores.get_predicted_clusters(
                top_spans, antecedent_indices, torch.tensor([0, -1])
            )

    @multi_device
    def test_call_scores_each_document_in_the_batch(self, device: str):
        top_spans = torch.tensor([[[0, 1], [4, 6], [8, 9]]], device=device)
        antecedent_indices = torch.tensor(
            [[[-1, -1, -1], [0, -1, -1], [0, 1, -1]]], device=device
        )
        predicted_antecedents = torch.tensor([[-1, -1, 1]], device=device)
        metadata = [{"clusters": [[[4, 6], [8, 9]], [[0, 1]]]}]

        self.metric(top_spans, antecedent_indices, predicted_antecedents, metadata)
        metrics = self.metric.get_metric()

        assert metrics["documents"] == 1
        for name in ("muc", "b3", "mention-ceaf"):
            assert metrics[f"{name}_f1"] == 1.0
            assert metrics[f"{name}_undefined"] == 0
        assert metrics["multi-blanc_score"] == 1.0

    def test_macro_averages(self):
        self.metric.score_document([[(0, 1), (4, 4)], [(7, 8)]], [[(0, 1), (4, 4)], [(7, 8)]])
        self.metric.score_document([["a", "b", "c"]], [["a", "b"], ["c"]])
        metrics = self.metric.get_metric()

        assert metrics["documents"] == 2
        assert_almost_equal(metrics["muc_precision"], 0.75)
        assert_almost_equal(metrics["muc_recall"], 1.0)
        assert_almost_equal(metrics["muc_f1"], 1.5 / 1.75)
        assert_almost_equal(metrics["b3_precision"], 7 / 9)
        assert_almost_equal(metrics["b3_recall"], 1.0)
        assert_almost_equal(metrics["mention-ceaf_precision"], 5 / 6)
        assert_almost_equal(metrics["mention-ceaf_recall"], 5 / 6)
        assert_almost_equal(metrics["multi-blanc_score"], 0.625)
        assert_almost_equal(metrics["multi-blanc_precision"], 7 / 12)
        assert_almost_equal(metrics["multi-blanc_recall"], 0.75)

    def test_undefined_results_are_counted_not_averaged(self):
        self.metric.score_document([["a", "b"], ["c"]], [["a", "b"], ["c"]])
        self.metric.score_document([["a"], ["b"]], [["a"], ["b"]])
        metrics = self.metric.get_metric()
        assert metrics["muc_undefined"] == 1
        assert metrics["muc_f1"] == 1.0
        assert metrics["b3_f1"] == 1.0

    def test_failed_documents_record_nothing(self):
        with pytest.raises(PartitionMismatchError):
            self.metric.score_document([["a", "b"]], [["a", "b"], ["c"]])
        metrics = self.metric.get_metric()
        assert metrics["documents"] == 0
        assert metrics["muc_undefined"] == 0
        assert metrics["multi-blanc_score"] == 0.0

    def test_reset(self):
        self.metric.score_document([["a", "b"]], [["a", "b"]])
        assert self.metric.get_metric(reset=True)["documents"] == 1
        assert self.metric.get_metric()["documents"] == 0

    def test_custom_scorers(self):
        metric = CorefScores({"blanc": StandardBLANCScorer(), "b3": B3Scorer()})
        metric.score_document([["a", "b"]], [["a", "b"]])
        metrics = metric.get_metric()
        assert set(metrics) == {
            "documents",
            "blanc_precision",
            "blanc_recall",
            "blanc_score",
            "b3_precision",
            "b3_recall",
            "b3_f1",
            "b3_undefined",
        }

    def test_from_params(self):
        metric = Metric.from_params(
            Params(
                {
                    "type": "coref_scores",
                    "scorers": {"muc": "muc", "blanc": {"type": "multi-blanc"}},
                }
            )
        )
        assert isinstance(metric, CorefScores)
        assert isinstance(metric.scorers["muc"], MUCScorer)
        assert isinstance(metric.scorers["blanc"], MultiBLANCScorer)
