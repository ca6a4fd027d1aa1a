"""
Cluster-Count Selection Module

Provides k-medoids partitioning with silhouette-based selection of the
number of clusters.
"""

from .config import SelectionConfig
from .algorithms import KMedoidsPartitioner, MedoidPartition
from .evaluator import SilhouetteEvaluator
from .distances import compute_dissimilarity
from .selector import ClusterCountSelector, SelectionResult, CandidateEvaluation
from .pipeline import ClusterSelectionPipeline
from .exceptions import (
    SelectionError,
    InvalidDatasetError,
    EmptyDatasetError,
    InvalidRangeError,
    DegenerateMetricError,
    DidNotConvergeWarning
)

__all__ = [
    'SelectionConfig',
    'KMedoidsPartitioner',
    'MedoidPartition',
    'SilhouetteEvaluator',
    'compute_dissimilarity',
    'ClusterCountSelector',
    'SelectionResult',
    'CandidateEvaluation',
    'ClusterSelectionPipeline',
    'SelectionError',
    'InvalidDatasetError',
    'EmptyDatasetError',
    'InvalidRangeError',
    'DegenerateMetricError',
    'DidNotConvergeWarning'
]
