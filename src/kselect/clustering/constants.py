"""
Constants and defaults for cluster-count selection.

This module contains all constants used throughout the selection
pipeline to ensure consistency and easy maintenance.
"""

# Candidate range defaults
MIN_K = 2
DEFAULT_K_MIN = 2
DEFAULT_K_MAX = 10

# Medoid iteration
DEFAULT_MAX_ITER = 100
DEFAULT_RANDOM_STATE = 42
DEFAULT_INIT = "build"

# Tolerance used when checking a precomputed matrix for symmetry
SYMMETRY_TOLERANCE = 1e-8

# Supported names
INIT_STRATEGIES = ['build', 'farthest', 'random', 'k-medoids++']
SCALING_METHODS = ['standard', 'minmax', 'robust']
PRECOMPUTED = "precomputed"


# Error message templates
class ErrorMessages:
    """Templates for error messages with named placeholders."""
    
    # Dataset errors
    TOO_FEW_POINTS = "Dataset must contain at least 2 points, got {n_points}"
    NOT_TWO_DIMENSIONAL = "Dataset must be a 2-D collection of points, got {ndim} dimension(s)"
    NOT_NUMERIC_MATRIX = "Dataset could not be read as a numeric point matrix: {error}"
    NON_FINITE = "Dataset contains {count} non-finite value(s)"
    NO_FEATURES = "Points must have at least one feature"
    
    # Range errors
    NON_INTEGER_BOUND = "k bounds must be integers, got k_min={k_min!r}, k_max={k_max!r}"
    K_MIN_TOO_SMALL = "k_min must be at least {min_k}, got {k_min}"
    K_MIN_ABOVE_K_MAX = "k_min ({k_min}) must not exceed k_max ({k_max})"
    K_MAX_TOO_LARGE = "k_max ({k_max}) must not exceed number of points - 1 ({limit})"
    
    # Metric errors
    NEGATIVE_DISTANCE = "Distance metric returned {count} negative value(s), minimum {minimum:.6g}"
    NON_FINITE_DISTANCE = "Distance metric returned {count} non-finite value(s)"
    NONZERO_SELF_DISTANCE = "Distance metric returned non-zero self-distance for {count} point(s)"
    ASYMMETRIC_MATRIX = "Precomputed dissimilarity matrix is not symmetric (max deviation {deviation:.6g})"
    NOT_SQUARE = "Precomputed dissimilarity matrix must be square, got shape {shape}"
    UNKNOWN_METRIC = "Unknown distance metric: {metric!r}"
    METRIC_FAILED = "Distance metric failed: {error}"
