"""End-to-end run: load, regularize, derive, flag immersion."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import pandas as pd

from cloud_immersion.compute.dates import regularize_daily
from cloud_immersion.compute.derived import derive_features, derive_immersion, low_confidence_dew_point
from cloud_immersion.compute.summary import lowest_immersed_band
from cloud_immersion.config import PipelineConfig
from cloud_immersion.ingest.power_csv import load_daily_csv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    config: PipelineConfig
    derived: pd.DataFrame
    immersion: pd.DataFrame


def run_pipeline(daily: pd.DataFrame, config: PipelineConfig | None = None) -> PipelineResult:
    """Derive features and immersion flags for an already-loaded daily table."""
    config = config or PipelineConfig()
    regular = regularize_daily(daily)
    derived = derive_features(regular, config)
    immersion = derive_immersion(derived, config)
    return PipelineResult(config=config, derived=derived, immersion=immersion)


def run_file(
    path: str | Path,
    config: PipelineConfig | None = None,
    skiprows: int | None = None,
) -> PipelineResult:
    daily = load_daily_csv(path, skiprows=skiprows)
    if daily.empty:
        logger.warning("No daily records in %s", path)
    return run_pipeline(daily, config)


def to_flat_frame(result: PipelineResult) -> pd.DataFrame:
    """Derived columns, the immersion floor and one ``immersed_<elevation>`` column per band, for CSV export."""
    flags = result.immersion.rename(columns=lambda e: f"immersed_{e}")
    flags.columns.name = None
    extras = pd.DataFrame({
        "low_confidence_dew_point": low_confidence_dew_point(result.derived["rh_pct"]),
        "lowest_immersed_m": lowest_immersed_band(result.immersion),
    })
    return pd.concat([result.derived, extras, flags], axis=1)
