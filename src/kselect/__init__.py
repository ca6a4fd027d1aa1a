"""
kselect: choose the number of clusters with k-medoids and silhouette width.
"""

from .clustering import (
    SelectionConfig,
    ClusterCountSelector,
    SelectionResult,
    ClusterSelectionPipeline,
    SelectionError,
    InvalidDatasetError,
    EmptyDatasetError,
    InvalidRangeError,
    DegenerateMetricError,
    DidNotConvergeWarning
)

__version__ = "0.1.0"

__all__ = [
    'SelectionConfig',
    'ClusterCountSelector',
    'SelectionResult',
    'ClusterSelectionPipeline',
    'SelectionError',
    'InvalidDatasetError',
    'EmptyDatasetError',
    'InvalidRangeError',
    'DegenerateMetricError',
    'DidNotConvergeWarning'
]
