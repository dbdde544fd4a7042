"""Tests for immersion summaries."""

import numpy as np
import pandas as pd
import pytest

from cloud_immersion.compute.summary import (
    annual_immersion_days,
    immersion_by_doy,
    immersion_profile,
    lowest_immersed_band,
)


def _immersion() -> pd.DataFrame:
    frame = pd.DataFrame({
        150: pd.array([False, False, pd.NA, False], dtype="boolean"),
        175: pd.array([True, False, pd.NA, False], dtype="boolean"),
        200: pd.array([True, True, pd.NA, False], dtype="boolean"),
    })
    frame.columns.name = "elevation_m"
    return frame


def _derived() -> pd.DataFrame:
    return pd.DataFrame({
        "year": [2023, 2023, 2024, 2024],
        "doy": [1, 2, 1, 2],
    })


class TestImmersionProfile:
    def test_percent_of_defined_days(self):
        profile = immersion_profile(_immersion())

        assert profile.loc[150] == 0.0
        assert profile.loc[175] == pytest.approx(100.0 / 3)
        assert profile.loc[200] == pytest.approx(200.0 / 3)
        assert profile.index.name == "elevation_m"

    def test_all_undefined_band_is_nan(self):
        frame = pd.DataFrame({150: pd.array([pd.NA, pd.NA], dtype="boolean")})
        assert np.isnan(immersion_profile(frame).loc[150])


class TestImmersionByDoy:
    def test_mean_percent_per_day_of_year(self):
        clim = immersion_by_doy(_derived(), _immersion())

        assert clim.index.tolist() == [1, 2]
        # DOY 1: 2023 immersed at 175, 2024 undefined
        assert clim.loc[1, 175] == 100.0
        assert clim.loc[2, 200] == 50.0
        assert clim.loc[2, 150] == 0.0


class TestAnnualImmersionDays:
    def test_counts_per_year(self):
        counts = annual_immersion_days(_derived(), _immersion())

        assert counts.loc[2023].tolist() == [0, 1, 2]
        assert counts.loc[2024].tolist() == [0, 0, 0]
        assert counts.index.name == "year"


class TestLowestImmersedBand:
    def test_lowest_band(self):
        lowest = lowest_immersed_band(_immersion())

        assert lowest.iloc[0] == 175.0
        assert lowest.iloc[1] == 200.0
        assert np.isnan(lowest.iloc[2])
        assert np.isnan(lowest.iloc[3])

    def test_no_bands(self):
        lowest = lowest_immersed_band(pd.DataFrame(index=range(3)))
        assert lowest.isna().all()
