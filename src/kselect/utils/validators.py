"""
Validation utilities for cluster-count selection inputs.

Each validator returns a ``(is_valid, errors)`` tuple; callers decide which
typed exception to raise from the collected messages.
"""

import numbers
from typing import List, Tuple, Any

import numpy as np

from ..clustering.constants import ErrorMessages, MIN_K, SYMMETRY_TOLERANCE


def validate_point_matrix(X: np.ndarray) -> Tuple[bool, List[str]]:
    """
    Validate the shape and content of a point matrix.

    The minimum number of points is checked separately by the caller,
    since too few points is reported as its own error.

    Args:
        X: Candidate point matrix of shape (n_points, n_features)

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    if X.ndim != 2:
        errors.append(ErrorMessages.NOT_TWO_DIMENSIONAL.format(ndim=X.ndim))
        return False, errors

    if X.shape[1] == 0:
        errors.append(ErrorMessages.NO_FEATURES)
        return False, errors

    non_finite = int(np.size(X) - np.count_nonzero(np.isfinite(X)))
    if non_finite:
        errors.append(ErrorMessages.NON_FINITE.format(count=non_finite))

    return len(errors) == 0, errors


def validate_k_range(k_min: Any, k_max: Any, n_points: int) -> Tuple[bool, List[str]]:
    """
    Validate an inclusive candidate range against the dataset size.

    Args:
        k_min: Smallest candidate cluster count
        k_max: Largest candidate cluster count
        n_points: Number of points in the dataset

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    # bool is an Integral but never a meaningful cluster count
    for bound in (k_min, k_max):
        if isinstance(bound, bool) or not isinstance(bound, numbers.Integral):
            errors.append(ErrorMessages.NON_INTEGER_BOUND.format(k_min=k_min, k_max=k_max))
            return False, errors

    if k_min < MIN_K:
        errors.append(ErrorMessages.K_MIN_TOO_SMALL.format(min_k=MIN_K, k_min=k_min))

    if k_min > k_max:
        errors.append(ErrorMessages.K_MIN_ABOVE_K_MAX.format(k_min=k_min, k_max=k_max))

    if k_max > n_points - 1:
        errors.append(ErrorMessages.K_MAX_TOO_LARGE.format(k_max=k_max, limit=n_points - 1))

    return len(errors) == 0, errors


def validate_dissimilarity_matrix(
    D: np.ndarray,
    check_symmetry: bool = False
) -> Tuple[bool, List[str]]:
    """
    Validate that a matrix can be used as a dissimilarity matrix.

    Args:
        D: Candidate matrix of shape (n_points, n_points)
        check_symmetry: Whether to require D == D.T within tolerance

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []

    if D.ndim != 2 or D.shape[0] != D.shape[1]:
        errors.append(ErrorMessages.NOT_SQUARE.format(shape=D.shape))
        return False, errors

    finite_mask = np.isfinite(D)
    if not finite_mask.all():
        errors.append(ErrorMessages.NON_FINITE_DISTANCE.format(count=int((~finite_mask).sum())))
        return False, errors

    negative = D < 0
    if negative.any():
        errors.append(ErrorMessages.NEGATIVE_DISTANCE.format(
            count=int(negative.sum()),
            minimum=float(D.min())
        ))

    nonzero_diagonal = np.count_nonzero(np.diagonal(D))
    if nonzero_diagonal:
        errors.append(ErrorMessages.NONZERO_SELF_DISTANCE.format(count=nonzero_diagonal))

    if check_symmetry:
        deviation = float(np.max(np.abs(D - D.T))) if D.size else 0.0
        if deviation > SYMMETRY_TOLERANCE:
            errors.append(ErrorMessages.ASYMMETRIC_MATRIX.format(deviation=deviation))

    return len(errors) == 0, errors
