"""Calendar reconstruction for year/day-of-year daily tables.

The provider ships each day as (YEAR, DOY). Downstream rolling windows and
STL decomposition need a regularly spaced daily series, so gaps are made
explicit here as rows of missing observations.
"""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def reconstruct_dates(year, doy) -> pd.Series:
    """Return Jan 1 of ``year`` + (``doy`` - 1) as a datetime64 series.

    Missing, fractional or out-of-range parts (including DOY 366 in a
    non-leap year) yield NaT instead of raising.
    """
    years = pd.to_numeric(pd.Series(year), errors="coerce")
    doys = pd.to_numeric(pd.Series(doy), errors="coerce").set_axis(years.index)

    valid = (
        years.notna()
        & doys.notna()
        & (doys == doys.round())
        & doys.between(1, 366)
    )
    stamps = pd.Series(pd.NaT, index=years.index, dtype="datetime64[ns]")
    if not valid.any():
        return stamps

    jan1 = pd.to_datetime(
        pd.DataFrame({"year": years[valid].astype(int), "month": 1, "day": 1}),
        errors="coerce",
    )
    stamps.loc[valid] = jan1 + pd.to_timedelta(doys[valid].astype(int) - 1, unit="D")

    unrepresentable = valid & stamps.isna()
    if unrepresentable.any():
        logger.warning("Dropping %d dates with out-of-range year", int(unrepresentable.sum()))

    # DOY 366 of a common year rolls into the next year
    overflow = valid & stamps.notna() & (stamps.dt.year != years)
    if overflow.any():
        logger.warning("Dropping %d dates with day-of-year past year end", int(overflow.sum()))
        stamps.loc[overflow] = pd.NaT

    return stamps


def regularize_daily(daily: pd.DataFrame) -> pd.DataFrame:
    """Reindex a daily table onto a complete calendar.

    Rows are sorted by ``obs_date`` and deduplicated (first kept). Every
    missing day between the first and last observation is inserted with its
    ``obs_date``/``year``/``doy`` and NaN observations. Returns a new frame.
    """
    if daily.empty:
        return daily.copy()

    columns = list(daily.columns)
    frame = (
        daily.dropna(subset=["obs_date"])
        .sort_values("obs_date", kind="stable")
        .drop_duplicates(subset=["obs_date"], keep="first")
    )
    if frame.empty:
        return frame.reset_index(drop=True)

    full = pd.date_range(frame["obs_date"].min(), frame["obs_date"].max(), freq="D", name="obs_date")
    out = frame.set_index("obs_date").reindex(full).reset_index()
    out["year"] = out["obs_date"].dt.year
    out["doy"] = out["obs_date"].dt.dayofyear

    n_gaps = len(out) - len(frame)
    if n_gaps:
        logger.info("Inserted %d missing days between %s and %s", n_gaps, full[0].date(), full[-1].date())

    return out[columns]
