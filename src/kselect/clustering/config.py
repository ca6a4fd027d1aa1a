"""
Cluster-Count Selection Configuration

This module provides the configuration class for the selector and the
surrounding selection pipeline.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .constants import (
    DEFAULT_INIT,
    DEFAULT_K_MAX,
    DEFAULT_K_MIN,
    DEFAULT_MAX_ITER,
    DEFAULT_RANDOM_STATE,
    INIT_STRATEGIES,
    MIN_K,
    SCALING_METHODS,
)


@dataclass
class SelectionConfig:
    """
    Configuration for cluster-count selection.

    Used directly by ClusterCountSelector and by ClusterSelectionPipeline,
    which additionally scales the input and exports results.
    """

    # Candidate counts
    k_range: range = field(default_factory=lambda: range(DEFAULT_K_MIN, DEFAULT_K_MAX + 1))

    # Medoid partitioning parameters
    distance_metric: Union[str, Callable] = "euclidean"
    init: Union[str, Callable] = DEFAULT_INIT
    max_iter: int = DEFAULT_MAX_ITER
    random_state: Optional[int] = DEFAULT_RANDOM_STATE

    # Worker pool size (None or 1 = sequential, -1 = all cores)
    n_jobs: Optional[int] = None

    # Preprocessing (pipeline only)
    scaling_method: Optional[str] = "standard"

    # Output configuration
    results_dir: Path = Path("selection_results")
    save_outputs: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    enable_file_logging: bool = False

    def __post_init__(self):
        """Convert string paths to Path objects."""
        if isinstance(self.results_dir, str):
            self.results_dir = Path(self.results_dir)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    @classmethod
    def from_json(cls, config_path: Union[str, Path]) -> 'SelectionConfig':
        """
        Load configuration from JSON file.

        The candidate range is given as an inclusive ``[k_min, k_max]`` pair.

        Args:
            config_path: Path to JSON configuration file

        Returns:
            SelectionConfig instance
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config_dict = json.load(f)

        k_range_config = config_dict.pop('k_range', None)
        if k_range_config is not None:
            if not (isinstance(k_range_config, list) and len(k_range_config) == 2):
                raise ValueError(f"k_range must be a [k_min, k_max] pair, got {k_range_config!r}")
            config_dict['k_range'] = range(k_range_config[0], k_range_config[1] + 1)

        return cls(**config_dict)

    @classmethod
    def for_single_k(cls, k: int, **kwargs) -> 'SelectionConfig':
        """
        Create configuration evaluating exactly one cluster count.

        Args:
            k: Number of clusters
            **kwargs: Any other configuration fields

        Returns:
            SelectionConfig instance with k_range == range(k, k + 1)
        """
        return cls(k_range=range(k, k + 1), **kwargs)

    def get_k_bounds(self) -> Tuple[int, int]:
        """Inclusive (k_min, k_max) bounds of the configured range."""
        return min(self.k_range), max(self.k_range)

    def validate(self) -> Dict[str, List[str]]:
        """
        Validate configuration settings.

        Returns:
            Dictionary with 'errors' and 'warnings' lists
        """
        errors = []
        warnings = []

        # Validate k_range
        if len(self.k_range) == 0:
            errors.append("k_range cannot be empty")
        elif min(self.k_range) < MIN_K:
            errors.append(f"Minimum k value must be at least {MIN_K}")
        elif self.k_range.step != 1:
            warnings.append(
                f"k_range step is {self.k_range.step}; only its bounds "
                f"{self.get_k_bounds()} are used"
            )

        # Validate partitioning parameters
        if isinstance(self.init, str) and self.init not in INIT_STRATEGIES:
            errors.append(f"Invalid init strategy: {self.init}. Available: {INIT_STRATEGIES}")
        elif not isinstance(self.init, str) and not callable(self.init):
            errors.append("init must be a strategy name or callable")

        if self.max_iter < 1:
            errors.append("max_iter must be at least 1")

        if self.n_jobs is not None and (self.n_jobs == 0 or self.n_jobs < -1):
            errors.append(f"n_jobs must be None, -1 or a positive integer, got {self.n_jobs}")

        if self.scaling_method is not None and self.scaling_method not in SCALING_METHODS:
            errors.append(f"Invalid scaling method: {self.scaling_method}. Available: {SCALING_METHODS}")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"Invalid log level: {self.log_level}")

        if self.random_state is None and isinstance(self.init, str) and self.init in ('random', 'k-medoids++'):
            warnings.append(f"init='{self.init}' without random_state is not reproducible")

        return {'errors': errors, 'warnings': warnings}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view of the configuration."""
        return {
            'k_range': list(self.get_k_bounds()) if len(self.k_range) else [],
            'distance_metric': self.distance_metric if isinstance(self.distance_metric, str)
            else getattr(self.distance_metric, '__name__', repr(self.distance_metric)),
            'init': self.init if isinstance(self.init, str) else getattr(self.init, '__name__', repr(self.init)),
            'max_iter': self.max_iter,
            'random_state': self.random_state,
            'n_jobs': self.n_jobs,
            'scaling_method': self.scaling_method,
        }
