"""
Feature Preparation Module

Scaling of numeric feature matrices ahead of cluster-count selection.
"""

from .scaler import FeatureScaler

__all__ = [
    'FeatureScaler'
]
