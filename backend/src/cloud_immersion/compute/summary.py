"""Immersion summaries behind the exploratory plots."""

from __future__ import annotations

import numpy as np
import pandas as pd

from cloud_immersion.compute.rolling import to_float


def _float_frame(immersion: pd.DataFrame) -> pd.DataFrame:
    frame = pd.DataFrame({e: to_float(immersion[e]) for e in immersion.columns}, index=immersion.index)
    frame.columns.name = immersion.columns.name
    return frame


def immersion_profile(immersion: pd.DataFrame) -> pd.Series:
    """Percent of days with a defined flag that are immersed, per band."""
    flags = _float_frame(immersion)
    pct = flags.sum() / flags.notna().sum() * 100.0
    pct.index.name = "elevation_m"
    return pct.rename("immersed_pct")


def immersion_by_doy(derived: pd.DataFrame, immersion: pd.DataFrame) -> pd.DataFrame:
    """Mean percent immersed per day of year (rows) and band (columns)."""
    flags = _float_frame(immersion)
    climatology = flags.groupby(derived["doy"].to_numpy()).mean() * 100.0
    climatology.index.name = "doy"
    return climatology


def annual_immersion_days(derived: pd.DataFrame, immersion: pd.DataFrame) -> pd.DataFrame:
    """Count of immersed days per year (rows) and band (columns)."""
    flags = _float_frame(immersion)
    counts = flags.groupby(derived["year"].to_numpy()).sum().astype(int)
    counts.index.name = "year"
    return counts


def lowest_immersed_band(immersion: pd.DataFrame) -> pd.Series:
    """Lowest immersed elevation per day; NaN when no band is immersed."""
    if immersion.shape[1] == 0:
        return pd.Series(np.nan, index=immersion.index, name="lowest_immersed_m")

    flags = _float_frame(immersion).fillna(0.0).gt(0.0)
    flags = flags.reindex(columns=sorted(flags.columns))
    lowest = flags.idxmax(axis=1).astype(float).where(flags.any(axis=1))
    return lowest.rename("lowest_immersed_m")
