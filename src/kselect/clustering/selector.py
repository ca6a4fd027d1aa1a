"""
Cluster-Count Selector

This module chooses the number of clusters for a dataset by running medoid
partitioning for every candidate k in an inclusive range and keeping the
partition with the highest average silhouette width.
"""

import concurrent.futures
import logging
import time
import warnings
from dataclasses import dataclass, field
from multiprocessing import cpu_count
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .algorithms import KMedoidsPartitioner, MedoidPartition
from .config import SelectionConfig
from .constants import ErrorMessages, PRECOMPUTED
from .distances import DistanceMetric, compute_dissimilarity, metric_name
from .evaluator import SilhouetteEvaluator
from .exceptions import (
    DidNotConvergeWarning,
    EmptyDatasetError,
    InvalidDatasetError,
    InvalidRangeError,
)
from ..utils.validators import validate_k_range, validate_point_matrix

logger = logging.getLogger(__name__)


@dataclass
class CandidateEvaluation:
    """
    Diagnostics for one evaluated candidate k.

    The partition itself is only kept for the selected candidate.
    """
    k: int
    score: float
    cost: float
    n_iter: int
    converged: bool
    cluster_sizes: List[int]
    execution_time: float
    n_reseeded: int = 0


@dataclass
class SelectionResult:
    """
    Outcome of a cluster-count selection.

    Attributes:
        k: Selected number of clusters
        labels: Cluster label of every point for the selected k
        medoids: Index of each cluster's medoid
        score: Average silhouette width of the selected partition
        scores: Average silhouette width of every evaluated k
        candidates: Diagnostics of every evaluated k
        silhouette_values: Per-point silhouette widths of the selected partition
        converged: Whether the selected partition reached a fixpoint
        n_iter: Iterations used for the selected partition
        medoid_points: Rows of the dataset acting as medoids (None for precomputed input)
        distance_metric: Name of the distance metric used
        execution_time: Total selection time in seconds
    """
    k: int
    labels: np.ndarray
    medoids: np.ndarray
    score: float
    scores: Dict[int, float]
    candidates: Dict[int, CandidateEvaluation]
    silhouette_values: np.ndarray
    converged: bool
    n_iter: int
    medoid_points: Optional[np.ndarray] = None
    distance_metric: str = "euclidean"
    execution_time: float = 0.0
    silhouette_analysis: Dict[str, Any] = field(default_factory=dict)

    @property
    def did_not_converge(self) -> bool:
        """Flag set when the selected partition stopped at the iteration bound."""
        return not self.converged

    @property
    def k_range(self) -> Tuple[int, int]:
        return min(self.scores), max(self.scores)

    def cluster_sizes(self) -> Dict[int, int]:
        counts = np.bincount(self.labels, minlength=self.k)
        return {cluster: int(size) for cluster, size in enumerate(counts)}

    def to_frame(self) -> pd.DataFrame:
        """Per-candidate diagnostics, one row per evaluated k."""
        rows = [
            {
                "k": candidate.k,
                "silhouette": candidate.score,
                "cost": candidate.cost,
                "n_iter": candidate.n_iter,
                "converged": candidate.converged,
                "min_cluster_size": min(candidate.cluster_sizes),
                "max_cluster_size": max(candidate.cluster_sizes),
                "execution_time": candidate.execution_time,
                "selected": candidate.k == self.k,
            }
            for candidate in sorted(self.candidates.values(), key=lambda c: c.k)
        ]
        return pd.DataFrame(rows).set_index("k")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary of the selection."""
        return {
            "k": self.k,
            "score": self.score,
            "scores": {str(k): score for k, score in sorted(self.scores.items())},
            "medoids": self.medoids.tolist(),
            "medoid_points": self.medoid_points.tolist() if self.medoid_points is not None else None,
            "cluster_sizes": self.cluster_sizes(),
            "converged": self.converged,
            "n_iter": self.n_iter,
            "distance_metric": self.distance_metric,
            "execution_time": self.execution_time,
        }


class ClusterCountSelector:
    """
    Selects the number of clusters by average silhouette width.

    For every k in [k_min, k_max] the dataset is partitioned with k-medoids
    and scored; the best-scoring k wins, ties going to the smaller k.
    Candidates are independent and may be evaluated on a thread pool.
    """

    def __init__(self, config: Optional[SelectionConfig] = None):
        """
        Initialize selector.

        Args:
            config: Selection configuration (defaults to SelectionConfig())
        """
        self.config = config or SelectionConfig()

        validation = self.config.validate()
        if validation['errors']:
            raise ValueError(f"Configuration errors: {validation['errors']}")

        for warning in validation['warnings']:
            logger.warning(warning)

        self.partitioner = KMedoidsPartitioner(
            init=self.config.init,
            max_iter=self.config.max_iter,
            random_state=self.config.random_state
        )
        self.evaluator = SilhouetteEvaluator()

    def select(
        self,
        dataset: Any,
        k_min: Optional[int] = None,
        k_max: Optional[int] = None,
        distance_metric: Optional[DistanceMetric] = None
    ) -> SelectionResult:
        """
        Select the best number of clusters.

        Args:
            dataset: Points as a 2-D array-like or DataFrame (rows = points),
                     or a square dissimilarity matrix with "precomputed"
            k_min: Smallest candidate k (defaults to the configured range)
            k_max: Largest candidate k (defaults to the configured range)
            distance_metric: Callable, metric name or "precomputed"
                             (defaults to the configured metric)

        Returns:
            SelectionResult for the best-scoring k

        Raises:
            EmptyDatasetError: If the dataset has fewer than 2 points
            InvalidDatasetError: If the dataset is not a finite numeric matrix
            InvalidRangeError: If the k range is invalid for the dataset
            DegenerateMetricError: If the metric gives invalid dissimilarities
        """
        start_time = time.time()

        config_k_min, config_k_max = self.config.get_k_bounds()
        k_min = config_k_min if k_min is None else k_min
        k_max = config_k_max if k_max is None else k_max
        metric = self.config.distance_metric if distance_metric is None else distance_metric

        X = self._prepare_dataset(dataset)
        n_points = X.shape[0]

        is_valid, errors = validate_k_range(k_min, k_max, n_points)
        if not is_valid:
            logger.error(f"Invalid k range [{k_min}, {k_max}] for {n_points} points: {errors}")
            raise InvalidRangeError(
                "; ".join(errors),
                details={'k_min': k_min, 'k_max': k_max, 'n_points': n_points}
            )

        D = compute_dissimilarity(X, metric)
        ks = list(range(int(k_min), int(k_max) + 1))

        logger.info(
            f"Selecting k in [{k_min}, {k_max}] for {n_points} points "
            f"using {metric_name(metric)} distance"
        )

        evaluations = self._evaluate_candidates(D, ks)

        best_k = None
        for k in ks:
            if best_k is None or evaluations[k][1] > evaluations[best_k][1]:
                best_k = k

        partition, best_score, silhouette_values = evaluations[best_k]

        candidates = {}
        for k in ks:
            candidate, score, _ = evaluations[k]
            candidates[k] = CandidateEvaluation(
                k=k,
                score=score,
                cost=candidate.cost,
                n_iter=candidate.n_iter,
                converged=candidate.converged,
                cluster_sizes=candidate.cluster_sizes.tolist(),
                execution_time=candidate.execution_time,
                n_reseeded=candidate.n_reseeded
            )

        if not partition.converged:
            warnings.warn(
                f"Selected partition (k={best_k}) did not converge within "
                f"{self.config.max_iter} iterations",
                DidNotConvergeWarning
            )

        is_precomputed = isinstance(metric, str) and metric == PRECOMPUTED
        execution_time = time.time() - start_time

        logger.info(f"Selected k={best_k} with silhouette={best_score:.3f} in {execution_time:.3f}s")

        return SelectionResult(
            k=best_k,
            labels=partition.labels,
            medoids=partition.medoids,
            score=best_score,
            scores={k: candidates[k].score for k in ks},
            candidates=candidates,
            silhouette_values=silhouette_values,
            converged=partition.converged,
            n_iter=partition.n_iter,
            medoid_points=None if is_precomputed else X[partition.medoids].copy(),
            distance_metric=metric_name(metric),
            execution_time=execution_time,
            silhouette_analysis=self.evaluator.analyze(D, partition.labels)
        )

    def _prepare_dataset(self, dataset: Any) -> np.ndarray:
        """Convert input to a float point matrix and validate it."""
        if isinstance(dataset, pd.DataFrame):
            dataset = dataset.to_numpy()

        try:
            X = np.asarray(dataset, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidDatasetError(ErrorMessages.NOT_NUMERIC_MATRIX.format(error=e)) from e

        if X.ndim == 0:
            raise InvalidDatasetError(ErrorMessages.NOT_TWO_DIMENSIONAL.format(ndim=0))

        if X.shape[0] < 2:
            raise EmptyDatasetError(
                ErrorMessages.TOO_FEW_POINTS.format(n_points=X.shape[0]),
                details={'n_points': int(X.shape[0])}
            )

        is_valid, errors = validate_point_matrix(X)
        if not is_valid:
            raise InvalidDatasetError("; ".join(errors), details={'shape': X.shape})

        return X

    def _evaluate_candidate(self, D: np.ndarray, k: int) -> Tuple[MedoidPartition, float, np.ndarray]:
        """Partition and score a single candidate k."""
        partition = self.partitioner.fit(D, k)
        silhouette_values = self.evaluator.silhouette_values(D, partition.labels)
        score = float(np.mean(silhouette_values))

        logger.info(
            f"k={k}: silhouette={score:.3f}, cost={partition.cost:.3f}, "
            f"iterations={partition.n_iter}, converged={partition.converged}"
        )
        return partition, score, silhouette_values

    def _evaluate_candidates(
        self,
        D: np.ndarray,
        ks: List[int]
    ) -> Dict[int, Tuple[MedoidPartition, float, np.ndarray]]:
        """
        Evaluate all candidates, sequentially or on a thread pool.

        Results are gathered into a local dict and only returned once every
        task has completed; a failing task propagates its exception.
        """
        workers = self.get_optimal_workers(len(ks))

        if workers <= 1:
            return {k: self._evaluate_candidate(D, k) for k in ks}

        logger.info(f"Evaluating {len(ks)} candidates with {workers} workers")

        results = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_k = {
                executor.submit(self._evaluate_candidate, D, k): k
                for k in ks
            }

            for future in concurrent.futures.as_completed(future_to_k):
                k = future_to_k[future]
                results[k] = future.result()

        return results

    def get_optimal_workers(self, n_candidates: int) -> int:
        """
        Number of worker threads for the given number of candidates.

        Args:
            n_candidates: Number of candidate k values

        Returns:
            Worker count, 1 meaning sequential evaluation
        """
        n_jobs = self.config.n_jobs
        if n_jobs is None:
            return 1
        if n_jobs == -1:
            n_jobs = cpu_count()

        return max(1, min(n_jobs, n_candidates))
