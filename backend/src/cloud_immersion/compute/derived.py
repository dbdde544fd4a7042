"""Derived features for cloud immersion analysis.

Turns the canonical daily table into dew point, cloud base height, solar
radiation, a cloudiness index and per-elevation immersion flags:

    dew point        Lawrence (2005):  Td = T - (100 - RH) / 5
    cloud base       (T - Td) * 125 m
    Ra               FAO-56 extraterrestrial radiation
    Rs               Hargreaves:       k_rs * sqrt(Tmax - Tmin) * Ra
    Kt               Rs / Ra
    cloudy day       Kt < 0.25
    immersed at e    cloudy and e >= cloud base

Every function returns new objects. Arithmetic domain violations (sqrt of a
negative range, division by zero, missing inputs) propagate as NaN or <NA>
rather than raising, so one bad row never aborts the table.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from cloud_immersion.config import (
    CLOUD_BASE_LAPSE_M_PER_C,
    LOW_CONFIDENCE_RH_PCT,
    SOLAR_CONSTANT_MJ_M2_MIN,
    PipelineConfig,
)

logger = logging.getLogger(__name__)


def dew_point(tavg_c: pd.Series, rh_pct: pd.Series) -> pd.Series:
    """Linear dew point approximation (degC). Degrades below 50% RH."""
    return (tavg_c - (100.0 - rh_pct) / 5.0).rename("dew_point_c")


def low_confidence_dew_point(rh_pct: pd.Series) -> pd.Series:
    """Mask of rows where the dew point approximation is unreliable."""
    return (rh_pct < LOW_CONFIDENCE_RH_PCT).rename("low_confidence_dew_point")


def cloud_base_height(tavg_c: pd.Series, dew_point_c: pd.Series) -> pd.Series:
    """Cloud base height (m) from dew-point depression. Not clamped."""
    return ((tavg_c - dew_point_c) * CLOUD_BASE_LAPSE_M_PER_C).rename("cloud_base_m")


def extraterrestrial_radiation(doy, latitude_deg: float) -> pd.Series:
    """FAO-56 extraterrestrial radiation Ra (MJ m-2 day-1).

    Depends only on day of year and latitude, so the same DOY gives the same
    value in every year. Missing DOY yields NaN.

    Raises:
        ValueError: if the sunset hour angle is undefined for some day
            (latitude inside a polar circle).
    """
    doy = pd.to_numeric(pd.Series(doy), errors="coerce").astype(float)
    lat = np.radians(latitude_deg)

    angle = 2.0 * np.pi * doy / 365.0
    dr = 1.0 + 0.033 * np.cos(angle)
    delta = 0.409 * np.sin(angle - 1.39)

    cos_ws = -np.tan(lat) * np.tan(delta)
    out_of_domain = cos_ws.abs() > 1.0
    if out_of_domain.any():
        raise ValueError(
            f"Sunset hour angle undefined at latitude {latitude_deg} for "
            f"{int(out_of_domain.sum())} day(s) of year"
        )
    ws = np.arccos(cos_ws)

    ra = (24.0 * 60.0 / np.pi) * SOLAR_CONSTANT_MJ_M2_MIN * dr * (
        ws * np.sin(lat) * np.sin(delta) + np.cos(lat) * np.cos(delta) * np.sin(ws)
    )
    return ra.rename("ra_mj_m2_day")


def surface_radiation(
    tmax_c: pd.Series,
    tmin_c: pd.Series,
    ra: pd.Series,
    k_rs: float,
) -> pd.Series:
    """Hargreaves surface radiation Rs (MJ m-2 day-1).

    NaN where tmax < tmin.
    """
    diurnal_range = (tmax_c - tmin_c).astype(float)
    with np.errstate(invalid="ignore"):
        root = np.sqrt(diurnal_range)
    return (k_rs * root * ra).rename("rs_mj_m2_day")


def cloudiness_index(rs: pd.Series, ra: pd.Series) -> pd.Series:
    """Clearness index Kt = Rs / Ra."""
    with np.errstate(divide="ignore", invalid="ignore"):
        kt = rs.astype(float) / ra.astype(float)
    return kt.replace([np.inf, -np.inf], np.nan).rename("kt")


def cloudy_day(kt: pd.Series, threshold: float) -> pd.Series:
    """Nullable boolean ``kt < threshold``; <NA> where kt is undefined."""
    flag = (kt < threshold).astype("boolean")
    flag[kt.isna()] = pd.NA
    return flag.rename("is_cloudy")


def immersion_by_elevation(
    is_cloudy: pd.Series,
    cloud_base_m: pd.Series,
    bands: list[int],
) -> pd.DataFrame:
    """One nullable boolean column per elevation band.

    ``immersed[e] = is_cloudy & (e >= cloud_base_m)`` with Kleene logic, so a
    clear day is never immersed even when the cloud base is unknown.
    """
    cloudy = is_cloudy.astype("boolean")
    base = cloud_base_m.astype(float)
    base_missing = base.isna()

    columns = {}
    for elevation in bands:
        below = (elevation >= base).astype("boolean")
        below[base_missing] = pd.NA
        columns[elevation] = cloudy & below

    frame = pd.DataFrame(columns, index=is_cloudy.index)
    frame.columns.name = "elevation_m"
    return frame


def derive_features(daily: pd.DataFrame, config: PipelineConfig | None = None) -> pd.DataFrame:
    """Derive dew point, cloud base, radiation, Kt and the cloudy flag.

    Returns a new frame with every input column plus the derived ones, in
    the same order and length as ``daily``. The input is not modified.
    """
    config = config or PipelineConfig()

    dp = dew_point(daily["tavg_c"], daily["rh_pct"])
    cbh = cloud_base_height(daily["tavg_c"], dp)
    ra = extraterrestrial_radiation(daily["doy"], config.latitude_deg).set_axis(daily.index)
    rs = surface_radiation(daily["tmax_c"], daily["tmin_c"], ra, config.k_rs)
    kt = cloudiness_index(rs, ra)
    cloudy = cloudy_day(kt, config.cloudy_threshold)

    derived = daily.assign(
        dew_point_c=dp,
        cloud_base_m=cbh,
        ra_mj_m2_day=ra,
        rs_mj_m2_day=rs,
        kt=kt,
        is_cloudy=cloudy,
    )

    n_undefined = int(kt.isna().sum())
    if n_undefined:
        logger.warning("Cloudiness index undefined for %d of %d days", n_undefined, len(derived))
    n_negative = int((cbh < 0).sum())
    if n_negative:
        logger.warning("Negative cloud base height on %d days (RH > 100)", n_negative)

    logger.info(
        "Derived features for %d days (lat=%.2f, k_rs=%.2f, %d cloudy)",
        len(derived), config.latitude_deg, config.k_rs, int(cloudy.sum()),
    )
    return derived


def derive_immersion(derived: pd.DataFrame, config: PipelineConfig | None = None) -> pd.DataFrame:
    """Immersion flags for the configured elevation bands, aligned with ``derived``."""
    config = config or PipelineConfig()
    return immersion_by_elevation(derived["is_cloudy"], derived["cloud_base_m"], config.elevation_bands)
