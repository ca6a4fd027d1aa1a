"""
Clustering Evaluation Module

This module provides silhouette-based evaluation of medoid partitions
computed from a precomputed dissimilarity matrix.
"""

import logging
from typing import Dict, Any

import numpy as np
from sklearn.metrics import silhouette_samples

logger = logging.getLogger(__name__)


class SilhouetteEvaluator:
    """
    Silhouette evaluation of partitions.

    Provides:
    - Per-point silhouette widths (singleton clusters score 0)
    - Average silhouette width used as the quality score
    - Per-cluster silhouette analysis
    """

    def silhouette_values(self, dissimilarity: np.ndarray, labels: np.ndarray) -> np.ndarray:
        """
        Per-point silhouette widths.

        Args:
            dissimilarity: Square dissimilarity matrix with zero diagonal
            labels: Cluster labels with at least 2 distinct clusters

        Returns:
            Array of silhouette widths in [-1, 1]
        """
        values = silhouette_samples(dissimilarity, labels, metric="precomputed")
        return np.clip(values, -1.0, 1.0)

    def score(self, dissimilarity: np.ndarray, labels: np.ndarray) -> float:
        """Average silhouette width of a partition."""
        return float(np.mean(self.silhouette_values(dissimilarity, labels)))

    def analyze(self, dissimilarity: np.ndarray, labels: np.ndarray) -> Dict[str, Any]:
        """
        Detailed silhouette analysis for each cluster.

        Args:
            dissimilarity: Square dissimilarity matrix
            labels: Cluster labels

        Returns:
            Dictionary with detailed silhouette analysis
        """
        sample_silhouette_values = self.silhouette_values(dissimilarity, labels)
        overall_silhouette = float(np.mean(sample_silhouette_values))

        cluster_analysis = {}
        for cluster_id in np.unique(labels):
            cluster_silhouettes = sample_silhouette_values[labels == cluster_id]

            cluster_analysis[int(cluster_id)] = {
                "mean_silhouette": float(np.mean(cluster_silhouettes)),
                "min_silhouette": float(np.min(cluster_silhouettes)),
                "max_silhouette": float(np.max(cluster_silhouettes)),
                "size": int(len(cluster_silhouettes)),
                "negative_count": int(np.sum(cluster_silhouettes < 0)),
            }

        logger.debug(f"Silhouette analysis: overall={overall_silhouette:.3f}, clusters={len(cluster_analysis)}")

        return {
            "overall_silhouette": overall_silhouette,
            "sample_silhouette_values": sample_silhouette_values,
            "cluster_analysis": cluster_analysis,
            "clusters_above_average": int(sum(
                1 for analysis in cluster_analysis.values()
                if analysis["mean_silhouette"] > overall_silhouette
            ))
        }
