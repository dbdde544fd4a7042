"""Shared test fixtures."""

import numpy as np
import pandas as pd
import pytest

from cloud_immersion.config import PipelineConfig


POWER_HEADER = """-BEGIN HEADER-
NASA/POWER CERES/MERRA2 Native Resolution Daily Data
Dates (month/day/year): 01/01/2024 through 01/10/2024
Location: Latitude  10.3   Longitude -84.8
Value for missing model data cannot be computed or out of model availability range: -999
Parameter(s):
T2M            Temperature at 2 Meters (C)
T2M_MAX        Temperature at 2 Meters Maximum (C)
T2M_MIN        Temperature at 2 Meters Minimum (C)
RH2M           Relative Humidity at 2 Meters (%)
-END HEADER-
"""


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def sample_daily_df() -> pd.DataFrame:
    """Sample daily observations (10 days, Jan 1-10 2024)."""
    dates = pd.date_range("2024-01-01", periods=10, freq="D")
    return pd.DataFrame({
        "obs_date": dates,
        "year": dates.year,
        "doy": dates.dayofyear,
        "tavg_c": [19.0, 18.5, 20.0, 21.0, 19.5, 18.0, 17.5, 19.0, 20.5, 21.0],
        "tmax_c": [23.0, 19.0, 25.0, 27.0, 20.0, 18.5, 22.0, 24.0, 26.0, 21.5],
        "tmin_c": [16.0, 18.0, 16.5, 17.0, 19.0, 17.5, 14.0, 15.0, 17.0, 20.5],
        "rh_pct": [85.0, 97.0, 80.0, 75.0, 95.0, 100.0, 60.0, 70.0, 78.0, 92.0],
    })


@pytest.fixture
def constant_daily_df() -> pd.DataFrame:
    """Three years of identical weather: 20 C, 90% RH, 1 C diurnal range."""
    dates = pd.date_range("2021-01-01", periods=3 * 365, freq="D")
    n = len(dates)
    return pd.DataFrame({
        "obs_date": dates,
        "year": dates.year,
        "doy": dates.dayofyear,
        "tavg_c": np.full(n, 20.0),
        "tmax_c": np.full(n, 20.5),
        "tmin_c": np.full(n, 19.5),
        "rh_pct": np.full(n, 90.0),
    })


@pytest.fixture
def write_power_csv(tmp_path):
    """Write a NASA POWER style CSV and return its path."""
    def _write(rows: list[str], header: str = POWER_HEADER, name: str = "power.csv"):
        path = tmp_path / name
        body = "YEAR,DOY,T2M,T2M_MAX,T2M_MIN,RH2M\n" + "".join(f"{r}\n" for r in rows)
        path.write_text(header + body)
        return path

    return _write
