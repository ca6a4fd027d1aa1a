"""
Cluster Selection Pipeline

This module wires feature scaling, cluster-count selection and result export
together for tabular input.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from .config import SelectionConfig
from .constants import ErrorMessages, PRECOMPUTED
from .exceptions import EmptyDatasetError, InvalidDatasetError
from .selector import ClusterCountSelector, SelectionResult
from ..features.scaler import FeatureScaler
from ..utils.logger import setup_logging

logger = logging.getLogger(__name__)


class ClusterSelectionPipeline:
    """
    Main cluster-count selection pipeline.

    Orchestrates:
    1. Numeric feature extraction
    2. Feature scaling (optional)
    3. Cluster-count selection
    4. Results export (CSV, JSON)
    """

    def __init__(self, config: Optional[SelectionConfig] = None):
        """
        Initialize selection pipeline.

        Args:
            config: Pipeline configuration
        """
        self.config = config or SelectionConfig()

        if self.config.enable_file_logging:
            setup_logging(
                enable_file_logging=True,
                log_level=self.config.log_level,
                log_dir=self.config.log_dir
            )

        self.selector = ClusterCountSelector(self.config)

        is_precomputed = (
            isinstance(self.config.distance_metric, str)
            and self.config.distance_metric == PRECOMPUTED
        )
        if self.config.scaling_method and not is_precomputed:
            self.scaler = FeatureScaler(self.config.scaling_method)
        else:
            self.scaler = None

        logger.info(
            f"Initialized selection pipeline: k_range={self.config.get_k_bounds()}, "
            f"scaling={self.scaler.method if self.scaler else 'none'}"
        )

    def run(
        self,
        data: Union[pd.DataFrame, np.ndarray],
        k_min: Optional[int] = None,
        k_max: Optional[int] = None
    ) -> SelectionResult:
        """
        Scale the data, select the number of clusters and optionally export.

        Args:
            data: Feature table (numeric columns are used) or point array
            k_min: Smallest candidate k (defaults to the configured range)
            k_max: Largest candidate k (defaults to the configured range)

        Returns:
            SelectionResult for the best-scoring k
        """
        feature_df = self.prepare_features(data)

        if self.scaler is not None:
            feature_df, _ = self.scaler.scale_features(feature_df)

        result = self.selector.select(feature_df.to_numpy(), k_min, k_max)

        if self.config.save_outputs:
            self.export_results(result, feature_df.index)

        return result

    def prepare_features(self, data: Union[pd.DataFrame, np.ndarray]) -> pd.DataFrame:
        """
        Extract the numeric feature table from the input.

        Args:
            data: DataFrame or 2-D array

        Returns:
            DataFrame containing only numeric columns
        """
        if isinstance(data, pd.DataFrame):
            df = data
        else:
            array = np.asarray(data)
            if array.ndim != 2:
                raise InvalidDatasetError(ErrorMessages.NOT_TWO_DIMENSIONAL.format(ndim=array.ndim))
            df = pd.DataFrame(array)

        if len(df) < 2:
            raise EmptyDatasetError(
                ErrorMessages.TOO_FEW_POINTS.format(n_points=len(df)),
                details={'n_points': len(df)}
            )

        numeric_df = df.select_dtypes(include=[np.number])
        dropped = [col for col in df.columns if col not in numeric_df.columns]
        if dropped:
            logger.warning(f"Ignoring non-numeric columns: {dropped}")

        if numeric_df.shape[1] == 0:
            raise InvalidDatasetError(ErrorMessages.NO_FEATURES, details={'columns': list(df.columns)})

        return numeric_df

    def export_results(
        self,
        result: SelectionResult,
        index: Optional[pd.Index] = None,
        output_dir: Optional[Path] = None
    ) -> Dict[str, str]:
        """
        Export selection results to files.

        Args:
            result: Selection result
            index: Row labels for the assignment table
            output_dir: Directory to save outputs (defaults to config.results_dir)

        Returns:
            Dictionary mapping output names to file paths
        """
        output_dir = Path(output_dir or self.config.results_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        scores_path = output_dir / "candidate_scores.csv"
        result.to_frame().to_csv(scores_path)

        assignments = pd.DataFrame(
            {
                "cluster": result.labels,
                "silhouette": result.silhouette_values,
                "is_medoid": np.isin(np.arange(len(result.labels)), result.medoids),
            },
            index=index if index is not None else pd.RangeIndex(len(result.labels))
        )
        assignments_path = output_dir / "assignments.csv"
        assignments.to_csv(assignments_path)

        summary = result.to_dict()
        summary["config"] = self.config.to_dict()
        summary["cluster_analysis"] = result.silhouette_analysis.get("cluster_analysis", {})
        summary_path = output_dir / "selection_summary.json"
        with open(summary_path, 'w') as f:
            json.dump(summary, f, indent=2, default=str)

        logger.info(f"Saved selection results to {output_dir}")

        return {
            "candidate_scores": str(scores_path),
            "assignments": str(assignments_path),
            "summary": str(summary_path),
        }
