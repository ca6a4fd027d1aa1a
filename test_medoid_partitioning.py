#!/usr/bin/env python3
"""
Tests for medoid partitioning and initialization strategies.
"""

import numpy as np
import pytest
from sklearn.datasets import make_blobs
from sklearn.metrics import pairwise_distances

from kselect.clustering.algorithms import (
    INITIALIZERS,
    KMedoidsPartitioner,
    build_init,
    farthest_init,
)
from kselect.clustering.exceptions import InvalidRangeError


@pytest.fixture
def blob_dissimilarity():
    X, y = make_blobs(
        n_samples=[20, 20, 20],
        centers=[(0, 0), (8, 0), (0, 8)],
        cluster_std=0.5,
        random_state=3
    )
    return pairwise_distances(X), y


def line_dissimilarity(values):
    points = np.asarray(values, dtype=float).reshape(-1, 1)
    return pairwise_distances(points)


@pytest.mark.parametrize("init", list(INITIALIZERS))
def test_every_strategy_partitions_all_points(blob_dissimilarity, init):
    D, _ = blob_dissimilarity
    partition = KMedoidsPartitioner(init=init, random_state=0).fit(D, 3)

    assert partition.labels.shape == (D.shape[0],)
    assert set(partition.labels.tolist()) == {0, 1, 2}
    assert len(np.unique(partition.medoids)) == 3
    assert partition.converged


def test_medoids_belong_to_their_own_cluster(blob_dissimilarity):
    D, _ = blob_dissimilarity
    partition = KMedoidsPartitioner().fit(D, 3)

    for cluster, medoid in enumerate(partition.medoids):
        assert partition.labels[medoid] == cluster


def test_converged_medoids_minimize_in_cluster_dissimilarity(blob_dissimilarity):
    D, _ = blob_dissimilarity
    partition = KMedoidsPartitioner().fit(D, 3)

    for cluster, medoid in enumerate(partition.medoids):
        members = np.flatnonzero(partition.labels == cluster)
        within = D[np.ix_(members, members)].sum(axis=1)
        assert D[medoid, members].sum() == pytest.approx(within.min())


def test_recovers_well_separated_blobs(blob_dissimilarity):
    D, y = blob_dissimilarity
    partition = KMedoidsPartitioner().fit(D, 3)

    # Same grouping up to label permutation
    for cluster in range(3):
        assert len(np.unique(y[partition.labels == cluster])) == 1


def test_cost_is_sum_of_distances_to_medoids(blob_dissimilarity):
    D, _ = blob_dissimilarity
    partition = KMedoidsPartitioner().fit(D, 3)

    expected = sum(D[i, partition.medoids[label]] for i, label in enumerate(partition.labels))
    assert partition.cost == pytest.approx(expected)


def test_build_init_picks_most_central_point_first():
    D = line_dissimilarity([0, 1, 2, 3, 4])
    assert build_init(D, 2)[0] == 2


def test_farthest_init_spreads_medoids():
    D = line_dissimilarity([0, 1, 2, 3, 10])
    medoids = farthest_init(D, 2)
    assert medoids[0] == 2
    assert medoids[1] == 4


def test_seeded_random_initialization_is_reproducible(blob_dissimilarity):
    D, _ = blob_dissimilarity
    first = KMedoidsPartitioner(init="random", random_state=11).fit(D, 4)
    second = KMedoidsPartitioner(init="random", random_state=11).fit(D, 4)

    np.testing.assert_array_equal(first.labels, second.labels)
    np.testing.assert_array_equal(first.medoids, second.medoids)


def test_empty_cluster_is_reseeded_from_farthest_point():
    X = np.array([[0.0, 0.0], [0.0, 0.0], [0.0, 0.5], [10.0, 10.0], [10.0, 10.5]])
    D = pairwise_distances(X)

    # Duplicate seeds leave the second cluster without members
    partitioner = KMedoidsPartitioner(init=lambda D, k, rng: [0, 1])
    partition = partitioner.fit(D, 2)

    assert partition.n_reseeded >= 1
    assert partition.converged
    np.testing.assert_array_equal(partition.labels, [0, 0, 0, 1, 1])
    assert partition.cluster_sizes.tolist() == [3, 2]


def test_coincident_points_never_leave_a_cluster_empty():
    X = np.array([[0.0, 0.0]] * 5 + [[5.0, 5.0]])
    D = pairwise_distances(X)

    partition = KMedoidsPartitioner().fit(D, 3)

    assert partition.converged
    assert (partition.cluster_sizes > 0).all()


def test_iteration_bound_returns_last_partition_unconverged():
    D = line_dissimilarity([0, 1, 2, 3, 10, 11, 12, 13])
    partitioner = KMedoidsPartitioner(init=lambda D, k, rng: [0, 1], max_iter=1)

    partition = partitioner.fit(D, 2)

    assert not partition.converged
    assert partition.n_iter == 1
    np.testing.assert_array_equal(partition.labels, [0, 0, 0, 0, 1, 1, 1, 1])


def test_converges_with_enough_iterations():
    D = line_dissimilarity([0, 1, 2, 3, 10, 11, 12, 13])
    partitioner = KMedoidsPartitioner(init=lambda D, k, rng: [0, 1], max_iter=10)

    partition = partitioner.fit(D, 2)

    assert partition.converged
    assert partition.n_iter == 2
    assert sorted(partition.medoids.tolist()) == [1, 5]


def test_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        KMedoidsPartitioner(init="nearest")


def test_rejects_non_positive_iteration_bound():
    with pytest.raises(ValueError):
        KMedoidsPartitioner(max_iter=0)


def test_rejects_invalid_custom_initialization(blob_dissimilarity):
    D, _ = blob_dissimilarity
    partitioner = KMedoidsPartitioner(init=lambda D, k, rng: [0, 0, 1])

    with pytest.raises(ValueError):
        partitioner.fit(D, 3)


@pytest.mark.parametrize("k", [1, 5])
def test_rejects_k_outside_dataset_bounds(k):
    D = line_dissimilarity([0, 1, 2, 3, 4])
    with pytest.raises(InvalidRangeError):
        KMedoidsPartitioner().fit(D, k)
