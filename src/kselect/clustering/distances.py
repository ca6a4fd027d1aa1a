"""
Dissimilarity Matrix Module

Builds the pairwise dissimilarity matrix shared by every candidate k from a
point matrix and a distance metric (callable, metric name or precomputed).
"""

import logging
from typing import Callable, Union

import numpy as np
from scipy.spatial.distance import pdist, squareform
from sklearn.metrics import pairwise_distances

from .constants import ErrorMessages, PRECOMPUTED
from .exceptions import DegenerateMetricError
from ..utils.validators import validate_dissimilarity_matrix

logger = logging.getLogger(__name__)

DistanceMetric = Union[str, Callable[[np.ndarray, np.ndarray], float]]


def metric_name(metric: DistanceMetric) -> str:
    """Readable name for a metric, used in logs and exported summaries."""
    if isinstance(metric, str):
        return metric
    return getattr(metric, '__name__', type(metric).__name__)


def compute_dissimilarity(X: np.ndarray, metric: DistanceMetric = "euclidean") -> np.ndarray:
    """
    Compute the full pairwise dissimilarity matrix.

    Args:
        X: Point matrix of shape (n_points, n_features), or a square
           dissimilarity matrix when metric is "precomputed"
        metric: Callable f(u, v) -> float, a scikit-learn/SciPy metric name,
                or "precomputed"

    Returns:
        Dissimilarity matrix of shape (n_points, n_points) with zero diagonal

    Raises:
        DegenerateMetricError: If the metric yields negative or non-finite
            values, or a precomputed matrix is not square, symmetric and
            zero on the diagonal
    """
    if isinstance(metric, str) and metric == PRECOMPUTED:
        D = np.array(X, dtype=float)
        _check(D, check_symmetry=True)
        logger.debug(f"Using precomputed dissimilarity matrix of shape {D.shape}")
        return D

    if isinstance(metric, str):
        try:
            D = pairwise_distances(X, metric=metric)
        except ValueError as e:
            raise DegenerateMetricError(
                ErrorMessages.METRIC_FAILED.format(error=e),
                details={'metric': metric}
            ) from e
        # Named metrics may leave rounding noise on the diagonal
        np.fill_diagonal(D, 0.0)
    elif callable(metric):
        # Condensed form evaluates each unordered pair once
        D = squareform(pdist(X, metric=metric))
    else:
        raise DegenerateMetricError(
            ErrorMessages.UNKNOWN_METRIC.format(metric=metric),
            details={'metric': repr(metric)}
        )

    D = np.asarray(D, dtype=float)
    _check(D, check_symmetry=False)

    logger.debug(f"Computed {metric_name(metric)} dissimilarity matrix of shape {D.shape}")
    return D


def _check(D: np.ndarray, check_symmetry: bool):
    is_valid, errors = validate_dissimilarity_matrix(D, check_symmetry=check_symmetry)
    if not is_valid:
        logger.error(f"Invalid dissimilarity matrix: {errors}")
        raise DegenerateMetricError("; ".join(errors), details={'errors': errors})
