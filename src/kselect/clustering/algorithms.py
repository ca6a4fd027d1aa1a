"""
Medoid Partitioning Module

This module provides k-medoids partitioning over a precomputed dissimilarity
matrix, with configurable initialization strategies (PAM BUILD, farthest-point,
seeded random and k-medoids++).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

import numpy as np

from .constants import DEFAULT_INIT, DEFAULT_MAX_ITER, DEFAULT_RANDOM_STATE, ErrorMessages
from .exceptions import InvalidRangeError

logger = logging.getLogger(__name__)

InitStrategy = Union[str, Callable[[np.ndarray, int, np.random.Generator], Any]]


@dataclass
class MedoidPartition:
    """
    Container for a single k-medoids run.

    Attributes:
        k: Number of clusters
        labels: Cluster assignment labels in {0, ..., k-1}
        medoids: Index of the medoid point of each cluster
        cost: Sum of dissimilarities from every point to its medoid
        n_iter: Number of assignment/update iterations performed
        converged: Whether the assignment reached a fixpoint within max_iter
        execution_time: Time taken to fit in seconds
        n_reseeded: Number of empty clusters that were re-seeded
    """
    k: int
    labels: np.ndarray
    medoids: np.ndarray
    cost: float
    n_iter: int
    converged: bool
    execution_time: float
    n_reseeded: int = 0

    @property
    def cluster_sizes(self) -> np.ndarray:
        return np.bincount(self.labels, minlength=self.k)


def build_init(D: np.ndarray, k: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    PAM BUILD seeding.

    The first medoid minimizes total dissimilarity to all points; each further
    medoid is the point whose addition reduces the total cost the most.
    """
    medoids = [int(np.argmin(D.sum(axis=1)))]
    nearest = D[:, medoids[0]].copy()

    for _ in range(1, k):
        gains = np.maximum(nearest[:, None] - D, 0.0).sum(axis=0)
        gains[medoids] = -np.inf
        candidate = int(np.argmax(gains))
        medoids.append(candidate)
        nearest = np.minimum(nearest, D[:, candidate])

    return np.asarray(medoids, dtype=np.intp)


def farthest_init(D: np.ndarray, k: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Most central point first, then repeatedly the point farthest from its nearest medoid."""
    medoids = [int(np.argmin(D.sum(axis=1)))]
    nearest = D[:, medoids[0]].copy()

    for _ in range(1, k):
        candidates = nearest.copy()
        candidates[medoids] = -np.inf
        candidate = int(np.argmax(candidates))
        medoids.append(candidate)
        nearest = np.minimum(nearest, D[:, candidate])

    return np.asarray(medoids, dtype=np.intp)


def random_init(D: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """k distinct points drawn uniformly at random."""
    return np.sort(rng.choice(D.shape[0], size=k, replace=False)).astype(np.intp)


def kmedoids_plusplus_init(D: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """k-medoids++ seeding: each next medoid drawn with probability proportional to D^2."""
    n_points = D.shape[0]
    medoids = [int(rng.integers(n_points))]
    nearest = D[:, medoids[0]].copy()

    for _ in range(1, k):
        weights = nearest ** 2
        weights[medoids] = 0.0
        total = weights.sum()
        if total > 0:
            candidate = int(rng.choice(n_points, p=weights / total))
        else:
            # All remaining points coincide with a medoid
            remaining = np.setdiff1d(np.arange(n_points), medoids)
            candidate = int(rng.choice(remaining))
        medoids.append(candidate)
        nearest = np.minimum(nearest, D[:, candidate])

    return np.asarray(medoids, dtype=np.intp)


INITIALIZERS: Dict[str, Callable] = {
    'build': build_init,
    'farthest': farthest_init,
    'random': random_init,
    'k-medoids++': kmedoids_plusplus_init,
}


class KMedoidsPartitioner:
    """
    Alternating k-medoids over a dissimilarity matrix.

    Each iteration assigns every point to its nearest medoid and then moves
    each medoid to the member minimizing total in-cluster dissimilarity, until
    the assignment stops changing or max_iter is reached.
    """

    def __init__(
        self,
        init: InitStrategy = DEFAULT_INIT,
        max_iter: int = DEFAULT_MAX_ITER,
        random_state: Optional[int] = DEFAULT_RANDOM_STATE
    ):
        """
        Initialize medoid partitioner.

        Args:
            init: Initialization strategy name or callable (D, k, rng) -> indices
            max_iter: Maximum number of assignment/update iterations
            random_state: Seed for seeded initialization strategies
        """
        if isinstance(init, str) and init not in INITIALIZERS:
            raise ValueError(f"Initialization '{init}' not supported. Available: {list(INITIALIZERS)}")
        if not isinstance(init, str) and not callable(init):
            raise ValueError(f"init must be a strategy name or callable, got {init!r}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {max_iter}")

        self.init = init
        self.max_iter = max_iter
        self.random_state = random_state

    def fit(self, dissimilarity: np.ndarray, k: int) -> MedoidPartition:
        """
        Partition points into k clusters.

        Args:
            dissimilarity: Square dissimilarity matrix of shape (n_points, n_points)
            k: Number of clusters

        Returns:
            MedoidPartition with labels, medoids and convergence information

        Raises:
            InvalidRangeError: If k is not in [2, n_points - 1]
        """
        D = np.asarray(dissimilarity, dtype=float)
        n_points = D.shape[0]

        if k < 2 or k > n_points - 1:
            raise InvalidRangeError(
                ErrorMessages.K_MAX_TOO_LARGE.format(k_max=k, limit=n_points - 1)
                if k >= 2 else ErrorMessages.K_MIN_TOO_SMALL.format(min_k=2, k_min=k),
                details={'k': k, 'n_points': n_points}
            )

        start_time = time.time()
        # Fresh generator per fit, independent of evaluation order
        rng = np.random.default_rng(self.random_state)

        medoids = self._initial_medoids(D, k, rng)
        labels, medoids, n_reseeded = self._assign(D, medoids)

        converged = False
        n_iter = 0
        while n_iter < self.max_iter:
            n_iter += 1
            medoids = self._update_medoids(D, labels, medoids)
            new_labels, medoids, reseeded = self._assign(D, medoids)
            n_reseeded += reseeded

            if np.array_equal(new_labels, labels):
                converged = True
                break
            labels = new_labels

        execution_time = time.time() - start_time
        cost = float(D[np.arange(n_points), medoids[labels]].sum())

        if converged:
            logger.debug(f"k={k}: converged after {n_iter} iterations, cost={cost:.4f}")
        else:
            logger.warning(f"k={k}: no fixpoint after {self.max_iter} iterations, returning last partition")

        return MedoidPartition(
            k=k,
            labels=labels,
            medoids=medoids,
            cost=cost,
            n_iter=n_iter,
            converged=converged,
            execution_time=execution_time,
            n_reseeded=n_reseeded
        )

    def _initial_medoids(self, D: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
        initializer = INITIALIZERS[self.init] if isinstance(self.init, str) else self.init
        medoids = np.asarray(initializer(D, k, rng), dtype=np.intp).ravel()

        if len(medoids) != k or len(np.unique(medoids)) != k:
            raise ValueError(f"Initialization must return {k} distinct indices, got {medoids.tolist()}")
        if medoids.min() < 0 or medoids.max() >= D.shape[0]:
            raise ValueError(f"Initialization returned out-of-range indices: {medoids.tolist()}")

        return medoids

    def _assign(self, D: np.ndarray, medoids: np.ndarray) -> Tuple[np.ndarray, np.ndarray, int]:
        """
        Assign points to their nearest medoid.

        A cluster that ends up with no members gets a new medoid: the
        non-medoid point farthest from all current medoids, provided that
        point does not coincide with one. Every medoid is then pinned to its
        own cluster, so no cluster is left empty.

        Returns:
            Tuple of (labels, medoids, number_of_reseeded_clusters)
        """
        k = len(medoids)
        medoids = medoids.copy()
        labels = np.argmin(D[:, medoids], axis=1)

        n_reseeded = 0
        for cluster in np.flatnonzero(np.bincount(labels, minlength=k) == 0):
            distance_to_medoids = D[:, medoids].min(axis=1)
            distance_to_medoids[medoids] = -np.inf
            replacement = int(np.argmax(distance_to_medoids))
            if distance_to_medoids[replacement] <= 0:
                # Every remaining point coincides with a medoid
                break
            logger.debug(f"Cluster {cluster} is empty, re-seeding medoid {medoids[cluster]} -> {replacement}")
            medoids[cluster] = replacement
            n_reseeded += 1

        if n_reseeded:
            labels = np.argmin(D[:, medoids], axis=1)
        labels[medoids] = np.arange(k)

        return labels, medoids, n_reseeded

    def _update_medoids(self, D: np.ndarray, labels: np.ndarray, medoids: np.ndarray) -> np.ndarray:
        """Move each medoid to the member with minimal total in-cluster dissimilarity."""
        new_medoids = medoids.copy()

        for cluster, medoid in enumerate(medoids):
            members = np.flatnonzero(labels == cluster)
            within = D[np.ix_(members, members)].sum(axis=1)
            current = within[np.flatnonzero(members == medoid)[0]]
            best = int(np.argmin(within))
            # Current medoid wins ties
            if within[best] < current:
                new_medoids[cluster] = members[best]

        return new_medoids
