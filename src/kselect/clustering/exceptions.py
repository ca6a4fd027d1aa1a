"""
Custom exceptions for cluster-count selection.

These exceptions provide structured error handling with clear messages
and context for debugging and caller feedback.
"""

from typing import Dict, Any, Optional


class SelectionError(ValueError):
    """Base exception for all selection input errors."""
    
    def __init__(
        self, 
        error_type: str, 
        user_message: str, 
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_type = error_type
        self.user_message = user_message
        self.details = details or {}
        super().__init__(user_message)


class InvalidDatasetError(SelectionError):
    """Raised when the dataset is ragged, non-numeric or contains non-finite values."""
    
    def __init__(self, user_message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_type="INVALID_DATASET_ERROR",
            user_message=user_message,
            details=details
        )


class EmptyDatasetError(InvalidDatasetError):
    """Raised when the dataset has fewer than 2 points."""
    
    def __init__(self, user_message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(user_message, details)
        self.error_type = "EMPTY_DATASET_ERROR"


class InvalidRangeError(SelectionError):
    """Raised when the candidate k range cannot be evaluated on the dataset."""
    
    def __init__(self, user_message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_type="INVALID_RANGE_ERROR",
            user_message=user_message,
            details=details
        )


class DegenerateMetricError(SelectionError):
    """Raised when the distance metric does not produce a valid dissimilarity."""
    
    def __init__(self, user_message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_type="DEGENERATE_METRIC_ERROR",
            user_message=user_message,
            details=details
        )


class DidNotConvergeWarning(UserWarning):
    """Issued when medoid iteration stops at the iteration bound without a fixpoint."""
