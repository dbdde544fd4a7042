"""Tests for the end-to-end pipeline run."""

import pandas as pd

from cloud_immersion.config import PipelineConfig
from cloud_immersion.pipeline import run_file, run_pipeline, to_flat_frame


def test_run_pipeline_regularizes_gaps(sample_daily_df, config):
    gappy = sample_daily_df.drop(index=[4]).reset_index(drop=True)

    result = run_pipeline(gappy, config)

    assert len(result.derived) == 10
    assert result.derived.loc[4, "kt"] != result.derived.loc[4, "kt"]  # NaN
    assert result.derived.loc[4, "is_cloudy"] is pd.NA
    assert len(result.immersion) == 10


def test_run_pipeline_default_config(sample_daily_df):
    result = run_pipeline(sample_daily_df)
    assert result.config == PipelineConfig()


def test_run_file(write_power_csv):
    path = write_power_csv([
        "2024,1,25.0,30.0,22.0,80.0",
        "2024,2,20.0,20.5,19.5,90.0",
    ])

    result = run_file(path)

    assert result.derived["cloud_base_m"].tolist() == [500.0, 250.0]
    assert result.derived["is_cloudy"].tolist() == [False, True]
    assert result.immersion.loc[1, 250] == True  # noqa: E712
    assert result.immersion.loc[1, 225] == False  # noqa: E712


def test_flat_frame_names_bands(sample_daily_df, config):
    flat = to_flat_frame(run_pipeline(sample_daily_df, config))

    assert "immersed_150" in flat.columns
    assert "immersed_1000" in flat.columns
    assert len(flat) == len(sample_daily_df)


def test_flat_frame_floor_and_low_confidence(write_power_csv):
    path = write_power_csv([
        "2024,1,25.0,30.0,22.0,40.0",
        "2024,2,20.0,20.5,19.5,90.0",
    ])

    flat = to_flat_frame(run_file(path))

    assert flat["low_confidence_dew_point"].tolist() == [True, False]
    assert pd.isna(flat.loc[0, "lowest_immersed_m"])
    assert flat.loc[1, "lowest_immersed_m"] == 250.0
