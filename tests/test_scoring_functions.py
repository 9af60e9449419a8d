import math

import pytest

from clusterweight.config.settings import EPSILON, Impact, Shaping
from clusterweight.core.distance import distances_to_all, euclidean_distance, min_distance
from clusterweight.core.errors import ClusteringFailure, DimensionMismatch, NonFiniteWeight, UnknownModifier, UnknownStrategy
from clusterweight.scoring.relevance import raw_relevance
from clusterweight.scoring.renormalize import ensure_finite, renormalization_shift, renormalize
from clusterweight.scoring.shaping import LOG_FLOOR, shape


def test_euclidean_distance_basic_and_symmetric():
    assert euclidean_distance((0.0, 0.0), (3.0, 4.0)) == 5.0
    assert euclidean_distance((3.0, 4.0), (0.0, 0.0)) == 5.0
    assert euclidean_distance((1.5, -2.0), (1.5, -2.0)) == 0.0


def test_euclidean_distance_rejects_mismatched_lengths():
    with pytest.raises(DimensionMismatch):
        euclidean_distance((1.0, 2.0), (1.0, 2.0, 3.0))


def test_distances_to_all_keeps_centroid_order():
    centroids = [(0.0, 0.0), (10.0, 0.0), (0.0, 1.0)]
    assert distances_to_all((0.0, 0.0), centroids) == [0.0, 10.0, 1.0]
    assert min_distance((0.0, 0.5), centroids) == 0.5


def test_min_distance_without_centroids_is_a_clustering_failure():
    with pytest.raises(ClusteringFailure):
        min_distance((1.0,), [])


def test_high_relevance_is_inverse_distance_and_strictly_decreasing():
    distances = [0.0, 0.1, 1.0, 10.0, 1000.0]
    scores = [raw_relevance(d, Impact.HIGH_RELEVANCE) for d in distances]
    assert scores[0] == pytest.approx(1.0 / EPSILON)
    assert all(s > 0 for s in scores)
    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_low_relevance_is_the_distance_itself():
    distances = [0.0, 0.1, 1.0, 10.0]
    scores = [raw_relevance(d, Impact.LOW_RELEVANCE) for d in distances]
    assert scores == distances


def test_raw_relevance_respects_custom_epsilon():
    assert raw_relevance(0.0, Impact.HIGH_RELEVANCE, epsilon=0.5) == 2.0


def test_unknown_impact_and_shaping_fail_fast():
    with pytest.raises(UnknownStrategy):
        raw_relevance(1.0, "Sideways")  # type: ignore[arg-type]
    with pytest.raises(UnknownModifier):
        shape(1.0, "Cubic")  # type: ignore[arg-type]


def test_identity_exp_and_log_shapes():
    assert shape(2.5, Shaping.IDENTITY) == 2.5
    assert shape(1.0, Shaping.EXP) == pytest.approx(math.e)
    assert shape(math.e, Shaping.LOG) == pytest.approx(1.0)
    assert shape(1.0, Shaping.LOG) == 0.0


def test_log_replaces_zero_with_the_floor():
    # A record sitting on a centroid under LowRelevance feeds 0 into Log.
    assert shape(0.0, Shaping.LOG) == pytest.approx(math.log(LOG_FLOOR))
    assert math.isfinite(shape(0.0, Shaping.LOG))
    assert shape(0.0, Shaping.LOG) < shape(1e-300, Shaping.LOG) < shape(0.5, Shaping.LOG)


def test_log_keeps_exact_values_below_epsilon():
    # Far records under HighRelevance have raw relevance well below 1e-3.
    far = shape(raw_relevance(2000.0, Impact.HIGH_RELEVANCE), Shaping.LOG)
    farther = shape(raw_relevance(5000.0, Impact.HIGH_RELEVANCE), Shaping.LOG)
    assert far == pytest.approx(math.log(1.0 / (EPSILON + 2000.0)))
    assert far == pytest.approx(-7.6009, abs=1e-4)
    assert farther == pytest.approx(-8.5172, abs=1e-4)
    assert far > farther
    assert shape(1e-4, Shaping.LOG) < shape(5e-4, Shaping.LOG)


def test_exp_overflow_becomes_infinity_instead_of_raising():
    assert shape(1000.0, Shaping.EXP) == math.inf


@pytest.mark.parametrize("raw", [-30.0, -1.0, 0.0, 1.0, 12.0, 30.0])
def test_sigmoid_is_strictly_between_zero_and_one_for_moderate_inputs(raw):
    out = shape(raw, Shaping.SIGMOID)
    assert 0.0 < out < 1.0


def test_sigmoid_saturates_at_the_ends_without_overflow():
    assert shape(-5000.0, Shaping.SIGMOID) == 0.0
    assert shape(1000.0, Shaping.SIGMOID) == 1.0
    assert shape(0.0, Shaping.SIGMOID) == 0.5


def test_renormalize_leaves_positive_scores_untouched():
    scores, shift = renormalize([0.5, 2.0, 10.0])
    assert shift == 0.0
    assert scores == [0.5, 2.0, 10.0]


def test_renormalize_shifts_when_minimum_is_zero():
    scores, shift = renormalize([0.0, 0.25, 3.0])
    assert shift == 1.0
    assert scores == [1.0, 1.25, 4.0]


def test_renormalize_keeps_differences_and_sets_minimum_to_one():
    before = [-2.5, 0.5, 3.0, -0.75]
    after, shift = renormalize(before)
    assert shift == 3.5
    assert min(after) == 1.0
    for i in range(len(before)):
        for j in range(len(before)):
            assert after[i] - after[j] == pytest.approx(before[i] - before[j])


def test_renormalization_shift_of_empty_batch_is_zero():
    assert renormalization_shift([]) == 0.0


def test_non_finite_scores_are_rejected_with_their_index():
    with pytest.raises(NonFiniteWeight) as excinfo:
        renormalize([1.0, math.inf, 2.0])
    assert excinfo.value.index == 1

    with pytest.raises(NonFiniteWeight):
        ensure_finite([math.nan])
