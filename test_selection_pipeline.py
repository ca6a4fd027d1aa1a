#!/usr/bin/env python3
"""
Tests for configuration, feature scaling and the selection pipeline.
"""

import json
import logging

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_blobs

from kselect import (
    ClusterSelectionPipeline,
    EmptyDatasetError,
    InvalidDatasetError,
    SelectionConfig,
)
from kselect.features import FeatureScaler
from kselect.utils import setup_logging


@pytest.fixture
def labelled_blobs():
    # Second feature on a much larger scale than the first
    X, _ = make_blobs(
        n_samples=[25, 25, 25],
        centers=[(0, 0), (6, 0), (3, 6)],
        cluster_std=0.4,
        random_state=7
    )
    df = pd.DataFrame({"length": X[:, 0], "weight": X[:, 1] * 100.0})
    df.insert(0, "name", [f"item_{i}" for i in range(len(df))])
    return df.set_index("name", drop=False)


def test_default_config_is_valid():
    config = SelectionConfig()
    validation = config.validate()

    assert validation["errors"] == []
    assert config.get_k_bounds() == (2, 10)


def test_config_reports_all_errors():
    config = SelectionConfig(
        k_range=range(1, 4),
        init="nearest",
        max_iter=0,
        n_jobs=0,
        scaling_method="zscore",
        log_level="LOUD"
    )

    assert len(config.validate()["errors"]) == 6


def test_config_warns_on_unseeded_random_init():
    validation = SelectionConfig(init="random", random_state=None).validate()
    assert validation["errors"] == []
    assert len(validation["warnings"]) == 1


def test_single_k_config():
    config = SelectionConfig.for_single_k(4, max_iter=20)

    assert config.get_k_bounds() == (4, 4)
    assert config.max_iter == 20


def test_config_from_json(tmp_path):
    config_file = tmp_path / "selection.json"
    config_file.write_text(json.dumps({
        "k_range": [3, 7],
        "init": "farthest",
        "results_dir": str(tmp_path / "out"),
        "n_jobs": 2
    }))

    config = SelectionConfig.from_json(config_file)

    assert config.k_range == range(3, 8)
    assert config.init == "farthest"
    assert config.results_dir == tmp_path / "out"
    assert config.n_jobs == 2


def test_config_from_missing_json(tmp_path):
    with pytest.raises(FileNotFoundError):
        SelectionConfig.from_json(tmp_path / "missing.json")


@pytest.mark.parametrize("method", ["standard", "minmax", "robust"])
def test_scaler_keeps_index_and_numeric_columns(labelled_blobs, method):
    scaler = FeatureScaler(method)
    scaled_df, fitted = scaler.scale_features(labelled_blobs)

    assert list(scaled_df.columns) == ["length", "weight"]
    assert scaled_df.index.equals(labelled_blobs.index)
    assert fitted is scaler.scaler


def test_standard_scaling_centers_features(labelled_blobs):
    scaler = FeatureScaler("standard")
    scaled_df, _ = scaler.scale_features(labelled_blobs)

    np.testing.assert_allclose(scaled_df.mean().to_numpy(), 0.0, atol=1e-12)
    np.testing.assert_allclose(scaled_df.std(ddof=0).to_numpy(), 1.0)

    summary = scaler.get_scaling_summary(scaled_df)
    assert summary["scaling_method"] == "standard"
    assert summary["shape"] == [75, 2]


def test_unknown_scaling_method_is_rejected():
    with pytest.raises(ValueError):
        FeatureScaler("zscore")


def test_pipeline_selects_after_scaling(labelled_blobs):
    pipeline = ClusterSelectionPipeline(SelectionConfig(k_range=range(2, 7)))
    result = pipeline.run(labelled_blobs)

    assert result.k == 3
    assert result.score > 0.6


def test_pipeline_without_scaling_follows_dominant_feature(labelled_blobs):
    scaled = ClusterSelectionPipeline(SelectionConfig(k_range=range(2, 7))).run(labelled_blobs)
    unscaled = ClusterSelectionPipeline(
        SelectionConfig(k_range=range(2, 7), scaling_method=None)
    ).run(labelled_blobs)

    # Unscaled distances are dominated by the large-valued feature
    assert unscaled.k == 2
    assert scaled.k == 3


def test_pipeline_exports_results(labelled_blobs, tmp_path):
    config = SelectionConfig(k_range=range(2, 6), results_dir=tmp_path, save_outputs=True)
    result = ClusterSelectionPipeline(config).run(labelled_blobs)

    scores = pd.read_csv(tmp_path / "candidate_scores.csv", index_col="k")
    assert list(scores.index) == [2, 3, 4, 5]
    assert scores["silhouette"].idxmax() == result.k

    assignments = pd.read_csv(tmp_path / "assignments.csv", index_col=0)
    assert list(assignments.index) == list(labelled_blobs.index)
    assert assignments["is_medoid"].sum() == result.k

    with open(tmp_path / "selection_summary.json") as f:
        summary = json.load(f)
    assert summary["k"] == result.k
    assert summary["config"]["k_range"] == [2, 5]
    assert set(summary["scores"]) == {"2", "3", "4", "5"}


def test_pipeline_accepts_arrays():
    X, _ = make_blobs(n_samples=[15, 15], centers=[(0, 0), (5, 5)], cluster_std=0.3, random_state=1)
    result = ClusterSelectionPipeline(SelectionConfig(k_range=range(2, 5))).run(X)

    assert result.k == 2


def test_pipeline_rejects_tables_without_numeric_columns():
    df = pd.DataFrame({"name": ["a", "b", "c"]})
    with pytest.raises(InvalidDatasetError):
        ClusterSelectionPipeline().run(df)


def test_pipeline_rejects_single_row():
    df = pd.DataFrame({"x": [1.0]})
    with pytest.raises(EmptyDatasetError):
        ClusterSelectionPipeline().run(df, 2, 2)


def test_pipeline_skips_scaling_for_precomputed_input():
    pipeline = ClusterSelectionPipeline(SelectionConfig(distance_metric="precomputed"))
    assert pipeline.scaler is None


def test_setup_logging_writes_log_file(tmp_path):
    logger = setup_logging(
        enable_file_logging=True,
        log_level="DEBUG",
        log_dir=tmp_path,
        module_name="kselect_test"
    )
    logger.debug("selection started")

    for handler in logger.handlers:
        handler.flush()

    log_files = list(tmp_path.glob("kselect_test_*.log"))
    assert len(log_files) == 1
    assert "selection started" in log_files[0].read_text()
    assert logger.level == logging.DEBUG

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
