import math

import pytest

from clusterweight.config.settings import EPSILON, Settings
from clusterweight.core.errors import ClusteringFailure, DimensionMismatch, NonFiniteWeight
from clusterweight.scoring.scorer import RelevanceScorer, score_dataset
from clusterweight.scoring.shaping import LOG_FLOOR

from conftest import FixedCentroidClusterer, make_dataset, make_settings

# Two centroids far apart; the three records sit at minimum distances 0.5, 0.0 and 1.0.
CENTROIDS = [(0.0, 0.0), (10.0, 0.0)]
ROWS = [(0.5, 0.0), (0.0, 0.0), (0.0, 1.0)]


def test_single_record_batch_is_left_untouched():
    dataset = make_dataset([(3.0, 4.0)], weight=2.5)
    clusterer = FixedCentroidClusterer(CENTROIDS)

    out = RelevanceScorer(Settings(), clusterer=clusterer).process(dataset)

    assert out is dataset
    assert dataset.records[0].weight == 2.5
    # Clustering is skipped entirely for a single record.
    assert clusterer.calls == []


def test_empty_batch_is_a_no_op():
    dataset = make_dataset([])
    result = RelevanceScorer(Settings(), clusterer=FixedCentroidClusterer(CENTROIDS)).score(dataset)
    assert result.skipped
    assert result.weights == []


def test_high_relevance_identity_matches_inverse_distance():
    dataset = make_dataset(ROWS)
    scorer = RelevanceScorer(make_settings(impact="HighRelevance", shaping="Identity"), clusterer=FixedCentroidClusterer(CENTROIDS))

    result = scorer.score(dataset)

    assert result.min_distances == pytest.approx([0.5, 0.0, 1.0])
    assert result.shift == 0.0
    assert result.weights == pytest.approx([1 / (EPSILON + 0.5), 1 / EPSILON, 1 / (EPSILON + 1.0)])
    assert result.weights == pytest.approx([1.996008, 1000.0, 0.999001], rel=1e-6)
    # `score` never mutates the dataset.
    assert dataset.weights == [1.0, 1.0, 1.0]


def test_low_relevance_log_shifts_batch_so_minimum_is_one():
    dataset = make_dataset(ROWS)
    scorer = RelevanceScorer(make_settings(impact="LowRelevance", shaping="Log"), clusterer=FixedCentroidClusterer(CENTROIDS))

    scorer.process(dataset)

    expected_shift = 1.0 - math.log(LOG_FLOOR)
    assert dataset.weights == pytest.approx([math.log(0.5) + expected_shift, 1.0, expected_shift])
    assert min(dataset.weights) == pytest.approx(1.0)
    assert all(math.isfinite(w) for w in dataset.weights)


def test_low_relevance_log_orders_records_closer_than_epsilon():
    dataset = make_dataset([(0.0, 0.0), (1e-4, 0.0), (5e-4, 0.0), (1.0, 0.0)])
    scorer = RelevanceScorer(make_settings(impact="LowRelevance", shaping="Log"), clusterer=FixedCentroidClusterer(CENTROIDS))

    result = scorer.score(dataset)

    assert result.min_distances == pytest.approx([0.0, 1e-4, 5e-4, 1.0])
    assert result.weights[0] == pytest.approx(1.0)
    assert all(a < b for a, b in zip(result.weights, result.weights[1:]))
    assert result.weights[2] - result.weights[1] == pytest.approx(math.log(5.0))


def test_renormalization_preserves_pairwise_differences():
    dataset = make_dataset([(0.2, 0.0), (0.0, 0.7), (3.0, 0.0), (0.0, 0.05)])
    scorer = RelevanceScorer(make_settings(impact="LowRelevance", shaping="Log"), clusterer=FixedCentroidClusterer(CENTROIDS))

    result = scorer.score(dataset)

    assert result.shift > 0
    for i in range(len(result.weights)):
        for j in range(len(result.weights)):
            assert result.weights[i] - result.weights[j] == pytest.approx(result.shaped[i] - result.shaped[j])


def test_sigmoid_weights_need_no_shift():
    dataset = make_dataset(ROWS)
    scorer = RelevanceScorer(make_settings(impact="LowRelevance", shaping="Sigmoid"), clusterer=FixedCentroidClusterer(CENTROIDS))

    result = scorer.score(dataset)

    assert result.shift == 0.0
    assert all(0.0 < w < 1.0 for w in result.weights)
    assert result.weights[1] == pytest.approx(0.5)


def test_exp_overflow_aborts_batch_without_partial_writes():
    # HighRelevance on a centroid gives 1/epsilon = 1000, and e**1000 overflows.
    dataset = make_dataset(ROWS, weight=1.0)
    scorer = RelevanceScorer(make_settings(impact="HighRelevance", shaping="Exp"), clusterer=FixedCentroidClusterer(CENTROIDS))

    with pytest.raises(NonFiniteWeight):
        scorer.process(dataset)
    assert dataset.weights == [1.0, 1.0, 1.0]


def test_clustering_failure_propagates_unchanged():
    class _BrokenClusterer:
        def fit(self, vectors):
            raise ClusteringFailure("did not converge")

    dataset = make_dataset(ROWS)
    with pytest.raises(ClusteringFailure, match="did not converge"):
        RelevanceScorer(Settings(), clusterer=_BrokenClusterer()).process(dataset)
    assert dataset.weights == [1.0, 1.0, 1.0]


def test_centroid_dimension_mismatch_is_a_caller_error():
    dataset = make_dataset(ROWS)
    scorer = RelevanceScorer(Settings(), clusterer=FixedCentroidClusterer([(0.0, 0.0, 0.0)]))
    with pytest.raises(DimensionMismatch):
        scorer.process(dataset)
    assert dataset.weights == [1.0, 1.0, 1.0]


def test_label_column_is_stripped_before_clustering():
    dataset = make_dataset(ROWS, label="class")
    clusterer = FixedCentroidClusterer(CENTROIDS)

    RelevanceScorer(Settings(), clusterer=clusterer).score(dataset)

    assert clusterer.calls == [[(0.5, 0.0), (0.0, 0.0), (0.0, 1.0)]]


def test_process_only_changes_weights():
    dataset = make_dataset(ROWS)
    before = [dict(r.values) for r in dataset.records]

    score_dataset(dataset, settings=Settings(), clusterer=FixedCentroidClusterer(CENTROIDS))

    assert [r.values for r in dataset.records] == before
    assert dataset.weights != [1.0, 1.0, 1.0]


def test_scorer_runs_end_to_end_with_xmeans():
    # Two tight, well-separated groups; HighRelevance weights stay strictly positive.
    rows = [(0.0, 0.0), (0.1, 0.0), (0.0, 0.1), (10.0, 10.0), (10.1, 10.0), (10.0, 10.1)]
    dataset = make_dataset(rows)
    settings = Settings.model_validate({"clustering": {"max_clusters": 2}})

    result = score_dataset(dataset, settings=settings)

    assert result.n_clusters == 2
    assert all(w > 0 and math.isfinite(w) for w in dataset.weights)
    assert result.shift == 0.0
