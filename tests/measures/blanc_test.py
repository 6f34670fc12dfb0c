import pytest
from numpy.testing import assert_almost_equal

from corefscore.common.checks import PartitionError, PartitionMismatchError
from corefscore.common.params import Params
from corefscore.common.testing import CorefScoreTestCase, parse_clustering, read_clusterings
from corefscore.measures import BLANCScorer, CorefScorer, MultiBLANCScorer, StandardBLANCScorer

RECASENS_BLANC = [
    ("system_a", 97.61),
    ("system_b", 91.63),
    ("system_c", 91.15),
    ("system_d", 81.12),
    ("system_e", 79.92),
    ("system_f", 72.12),
    ("system_g", 49.90),
    ("system_h", 0.41),
]


class StandardBLANCScorerTest(CorefScoreTestCase):
    def setup_method(self):
        super().setup_method()
        self.scorer = BLANCScorer.standard()
        self.clusterings = read_clusterings(
            self.FIXTURES_ROOT / "coref" / "recasens_clusterings.json"
        )

    @pytest.mark.parametrize("system, expected_score", RECASENS_BLANC)
    def test_recasens_reference_scores(self, system, expected_score):
        result = self.scorer.score(self.clusterings[system], self.clusterings["ground_truth"])
        assert abs(100.0 * result.blanc_score - expected_score) <= 0.01

    def test_single_identical_item(self):
        assert self.scorer.score([["a"]], [["a"]]).blanc_score == 1.0

    def test_matching_singletons(self):
        result = self.scorer.score([["a"], ["b"], ["c"]], [["a"], ["b"], ["c"]])
        assert result.coref_link_f1 is None
        assert result.non_coref_link_f1 == 1.0
        assert result.blanc_score == 1.0

    def test_matching_single_cluster(self):
        result = self.scorer.score([["a", "b", "c"]], [["a", "b", "c"]])
        assert result.non_coref_link_f1 is None
        assert result.coref_link_f1 == 1.0
        assert result.blanc_score == 1.0

    def test_identical_clusterings_score_perfectly(self):
        gold = [["a", "b"], ["c"], ["d", "e", "f"]]
        result = self.scorer.score(gold, gold)
        assert result.blanc_score == 1.0
        assert result.blanc_precision == 1.0
        assert result.blanc_recall == 1.0

    def test_partial_merge_is_between_zero_and_one(self):
        result = self.scorer.score([["a", "b", "c"]], [["a", "b"], ["c"]])
        assert 0.0 < result.blanc_score < 1.0
        assert_almost_equal(result.coref_link_recall, 1.0)
        assert_almost_equal(result.coref_link_precision, 1 / 3)
        assert result.non_coref_link_precision is None
        assert_almost_equal(result.non_coref_link_recall, 0.0)
        assert_almost_equal(result.blanc_score, 0.25)

    def test_merging_two_singletons_disagrees_on_every_link(self):
        # the key has only a non-coreference link and the response only a coreference link
        result = self.scorer.score([["a", "b"]], [["a"], ["b"]])
        assert result.coref_link_recall is None
        assert result.coref_link_precision == 0.0
        assert result.non_coref_link_recall == 0.0
        assert result.blanc_score == 0.0

    def test_self_edges(self):
        scorer = StandardBLANCScorer(use_self_edges=True)
        # singletons now carry a coreference link to themselves
        result = scorer.score([["a"], ["b"]], [["a"], ["b"]])
        assert result.coref_link_f1 == 1.0
        assert result.non_coref_link_f1 == 1.0
        assert result.blanc_score == 1.0

        result = scorer.score([["a", "b"]], [["a"], ["b"]])
        assert_almost_equal(result.coref_link_recall, 1.0)
        assert_almost_equal(result.coref_link_precision, 0.5)
        assert result.non_coref_link_precision is None
        assert_almost_equal(result.blanc_score, 0.5 * (2 / 3))

    def test_mismatched_items_are_rejected(self):
        with pytest.raises(PartitionMismatchError):
            self.scorer.score([["a", "b"]], [["a", "c"]])

    def test_items_in_two_clusters_are_rejected(self):
        with pytest.raises(PartitionError):
            self.scorer.score([["a", "b"], ["a"]], [["a", "b"]])

    def test_from_params(self):
        scorer = CorefScorer.from_params(Params({"type": "standard-blanc", "use_self_edges": True}))
        assert isinstance(scorer, StandardBLANCScorer)
        assert scorer.name == "standard-blanc"


class MultiBLANCScorerTest(CorefScoreTestCase):
    def setup_method(self):
        super().setup_method()
        self.scorer = BLANCScorer.multi()
        self.clusterings = read_clusterings(
            self.FIXTURES_ROOT / "coref" / "recasens_clusterings.json"
        )

    def test_factory(self):
        assert isinstance(self.scorer, MultiBLANCScorer)
        scorer = CorefScorer.from_params(Params({"type": "multi-blanc"}))
        assert isinstance(scorer, MultiBLANCScorer)

    def test_mismatched_mentions(self):
        reference = parse_clustering("(1,2) (3,4,5,6) (7)")
        system = parse_clustering("(1,2,3) (4,5,8) (9)")
        result = self.scorer.score(system, reference)
        assert abs(result.coref_link_recall - 2 / 7) < 1e-4
        assert abs(result.coref_link_precision - 1 / 3) < 1e-4
        assert abs(result.non_coref_link_recall - 2 / 7) < 1e-4
        assert abs(result.non_coref_link_precision - 4 / 15) < 1e-4
        assert abs(result.coref_link_f1 - 0.30769) < 1e-4
        assert abs(result.non_coref_link_f1 - 0.27586) < 1e-4
        assert abs(result.blanc_score - (0.30769 + 0.27586) / 2) < 1e-4

    @pytest.mark.parametrize("system, expected_score", RECASENS_BLANC)
    def test_agrees_with_standard_blanc(self, system, expected_score):
        standard = BLANCScorer.standard().score(
            self.clusterings[system], self.clusterings["ground_truth"]
        )
        multi = self.scorer.score(self.clusterings[system], self.clusterings["ground_truth"])
        assert multi.to_json() == pytest.approx(standard.to_json())
        assert abs(100.0 * multi.blanc_score - expected_score) <= 0.01

    def test_agrees_with_standard_blanc_on_degenerate_documents(self):
        for predicted, gold in [
            ([["a"]], [["a"]]),
            ([["a"], ["b"]], [["a"], ["b"]]),
            ([["a", "b"]], [["a"], ["b"]]),
            ([["a", "b", "c"]], [["a", "b"], ["c"]]),
        ]:
            standard = BLANCScorer.standard().score(predicted, gold)
            multi = self.scorer.score(predicted, gold)
            assert multi.to_json() == standard.to_json()

    def test_different_single_items_score_zero(self):
        assert self.scorer.score([["a"]], [["b"]]).blanc_score == 0.0

    def test_empty_documents_score_one(self):
        assert self.scorer.score([], []).blanc_score == 1.0

    def test_items_may_belong_to_several_clusters(self):
        result = self.scorer.score([["a", "b"], ["b", "c"]], [["a", "b"], ["b", "c"]])
        assert result.blanc_score == 1.0

    def test_does_not_modify_inputs(self):
        predicted = [["a", "b"], ["c"]]
        gold = [["a"], ["b", "c"]]
        self.scorer.score(predicted, gold)
        assert predicted == [["a", "b"], ["c"]]
        assert gold == [["a"], ["b", "c"]]
