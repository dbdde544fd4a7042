"""Seasonal decomposition (STL) and LOESS smoothing of derived series."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from statsmodels.nonparametric.smoothers_lowess import lowess
from statsmodels.tsa.seasonal import STL

from cloud_immersion.config import SEASONAL_PERIOD_DAYS

logger = logging.getLogger(__name__)


def prepare_series(series: pd.Series, dates) -> pd.Series:
    """Daily-frequency series indexed by date, ready for STL.

    Leading/trailing missing values are dropped; interior gaps are filled by
    time interpolation since STL cannot handle missing observations.
    """
    values = pd.Series(
        pd.Series(series).to_numpy(dtype="float64", na_value=np.nan),
        index=pd.DatetimeIndex(dates),
        name=getattr(series, "name", None),
    )
    values = values[values.index.notna()].sort_index()
    values = values[~values.index.duplicated(keep="first")]
    if values.empty:
        return values

    values = values.asfreq("D")
    first, last = values.first_valid_index(), values.last_valid_index()
    if first is None:
        return values.iloc[0:0]
    values = values.loc[first:last]

    n_missing = int(values.isna().sum())
    if n_missing:
        logger.info("Interpolating %d missing days in %s", n_missing, values.name)
        values = values.interpolate(method="time")
    return values


def decompose_seasonal(
    series: pd.Series,
    dates,
    period: int = SEASONAL_PERIOD_DAYS,
    robust: bool = True,
) -> pd.DataFrame:
    """Additive STL split into observed, trend, seasonal and resid columns.

    Raises:
        ValueError: if fewer than two full seasonal cycles are available.
    """
    values = prepare_series(series, dates)
    if len(values) < 2 * period:
        raise ValueError(
            f"STL needs at least {2 * period} days for period={period}, got {len(values)}"
        )

    result = STL(values, period=period, robust=robust).fit()
    logger.info("STL decomposition of %s over %d days (period=%d)", values.name, len(values), period)

    return pd.DataFrame({
        "observed": result.observed,
        "trend": result.trend,
        "seasonal": result.seasonal,
        "resid": result.resid,
    }, index=values.index)


def loess_smooth(x, y, frac: float = 0.1) -> pd.DataFrame:
    """LOWESS fit of y on x over finite pairs, sorted by x.

    Returns DataFrame with columns: x, fitted. Empty when fewer than two
    usable points remain.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    finite = np.isfinite(x) & np.isfinite(y)

    if finite.sum() < 2:
        return pd.DataFrame(columns=["x", "fitted"], dtype=float)

    fitted = lowess(y[finite], x[finite], frac=frac, return_sorted=True)
    return pd.DataFrame({"x": fitted[:, 0], "fitted": fitted[:, 1]})
