"""Trailing rolling-window aggregation over derived daily series.

Windows are right-aligned and require a full window of history: positions
before the window fills are NaN, never a shorter-window average. A missing
day inside a window makes that window missing as well.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from cloud_immersion.config import ROLLING_WINDOW_DAYS

logger = logging.getLogger(__name__)

ROLLING_COLUMNS = ["dew_point_c", "cloud_base_m", "rs_mj_m2_day", "kt"]


def to_float(series: pd.Series) -> pd.Series:
    """Nullable booleans to 0.0/1.0 with <NA> as NaN."""
    return pd.Series(
        series.to_numpy(dtype="float64", na_value=np.nan),
        index=series.index,
        name=series.name,
    )


def trailing_mean(series: pd.Series, window: int = ROLLING_WINDOW_DAYS) -> pd.Series:
    """Right-aligned trailing mean over ``window`` observations."""
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    return to_float(series).rolling(window, min_periods=window).mean()


def rolling_immersion_pct(
    immersion: pd.DataFrame,
    window: int = ROLLING_WINDOW_DAYS,
) -> pd.DataFrame:
    """Percent of days immersed over the trailing window, per elevation band."""
    rolled = pd.DataFrame(
        {elevation: trailing_mean(immersion[elevation], window) * 100.0 for elevation in immersion.columns},
        index=immersion.index,
    )
    rolled.columns.name = immersion.columns.name

    n_ready = int(rolled.notna().any(axis=1).sum()) if not rolled.empty else 0
    logger.info(
        "Rolling immersion over %d-day window: %d of %d positions defined",
        window, n_ready, len(rolled),
    )
    return rolled


def rolling_features(
    derived: pd.DataFrame,
    window: int = ROLLING_WINDOW_DAYS,
    columns: list[str] | None = None,
) -> pd.DataFrame:
    """Trailing means of numeric derived columns, as a new frame."""
    columns = columns or [c for c in ROLLING_COLUMNS if c in derived.columns]
    return pd.DataFrame(
        {c: trailing_mean(derived[c], window) for c in columns},
        index=derived.index,
    )
