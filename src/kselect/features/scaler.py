"""
Feature Scaling Module

This module scales feature matrices before cluster-count selection using
different scaling methods (StandardScaler, MinMaxScaler, RobustScaler).
"""

import logging
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler, MinMaxScaler, RobustScaler

from ..clustering.constants import SCALING_METHODS

logger = logging.getLogger(__name__)


class FeatureScaler:
    """
    Handles scaling of feature matrices using one scikit-learn scaler.

    Supports StandardScaler, MinMaxScaler, and RobustScaler. Only numeric
    columns are scaled; the index is preserved.
    """
    
    def __init__(self, method: str = "standard"):
        """
        Initialize the feature scaler.
        
        Args:
            method: Scaling method ('standard', 'minmax', 'robust')
        """
        if method not in SCALING_METHODS:
            raise ValueError(f"Unknown scaling method: {method}")
        self.method = method
        self.scaler = None
        
    def _get_scaler(self):
        """
        Get scaler instance for the configured method.
            
        Returns:
            Scaler instance
        """
        if self.method == 'standard':
            return StandardScaler()
        elif self.method == 'minmax':
            return MinMaxScaler()
        else:
            return RobustScaler()
    
    def scale_features(self, feature_matrix: pd.DataFrame) -> Tuple[pd.DataFrame, Any]:
        """
        Scale feature matrix using the configured method.
        
        Args:
            feature_matrix: Original unscaled feature DataFrame
            
        Returns:
            Tuple of (scaled_dataframe, fitted_scaler)
        """
        logger.info(f"Scaling features using {self.method} method")
        
        # Select only numeric feature columns
        numeric_cols = feature_matrix.select_dtypes(include=[np.number]).columns.tolist()
        X = feature_matrix[numeric_cols].to_numpy(dtype=float)
        
        scaler = self._get_scaler()
        X_scaled = scaler.fit_transform(X)
        
        # Build scaled DataFrame (preserve index and columns)
        scaled_df = pd.DataFrame(
            X_scaled, 
            index=feature_matrix.index, 
            columns=numeric_cols
        )
        
        self.scaler = scaler
        
        logger.info(
            f"  {self.method} scaled: mean={scaled_df.values.mean():.4f}, "
            f"std={scaled_df.values.std():.4f}"
        )
        
        return scaled_df, scaler
    
    def get_scaling_summary(self, scaled_df: pd.DataFrame) -> Dict[str, Any]:
        """
        Summary statistics of a scaled feature matrix.
        
        Args:
            scaled_df: Scaled feature DataFrame
            
        Returns:
            Dictionary with method, shape and per-column mean/std
        """
        return {
            'scaling_method': self.method,
            'shape': list(scaled_df.shape),
            'columns': scaled_df.columns.tolist(),
            'mean': scaled_df.mean().round(6).to_dict(),
            'std': scaled_df.std(ddof=0).round(6).to_dict(),
            'scaler_params': self.scaler.get_params() if self.scaler is not None else {}
        }
