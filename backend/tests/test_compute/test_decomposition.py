"""Tests for STL decomposition and LOESS smoothing."""

import numpy as np
import pandas as pd
import pytest

from cloud_immersion.compute.decomposition import (
    decompose_seasonal,
    loess_smooth,
    prepare_series,
)


def _seasonal_series(n_days: int = 3 * 365, start: str = "2020-01-01"):
    """Sinusoidal cloud base with a slow upward trend."""
    dates = pd.date_range(start, periods=n_days, freq="D")
    t = np.arange(n_days)
    rng = np.random.default_rng(42)
    values = 400 + 0.05 * t + 150 * np.sin(2 * np.pi * t / 365) + rng.normal(0, 5, n_days)
    return pd.Series(values, name="cloud_base_m"), pd.Series(dates)


class TestPrepareSeries:
    def test_interior_gap_interpolated(self):
        dates = pd.Series(pd.date_range("2024-01-01", periods=5, freq="D"))
        values = pd.Series([1.0, np.nan, np.nan, 4.0, 5.0])

        prepared = prepare_series(values, dates)

        assert prepared.tolist() == pytest.approx([1.0, 2.0, 3.0, 4.0, 5.0])
        assert prepared.index.freqstr == "D"

    def test_edges_trimmed(self):
        dates = pd.Series(pd.date_range("2024-01-01", periods=5, freq="D"))
        values = pd.Series([np.nan, 2.0, 3.0, 4.0, np.nan])

        prepared = prepare_series(values, dates)

        assert len(prepared) == 3
        assert prepared.index[0] == pd.Timestamp("2024-01-02")

    def test_missing_dates_become_rows(self):
        dates = pd.Series(pd.to_datetime(["2024-01-01", "2024-01-02", "2024-01-04"]))

        prepared = prepare_series(pd.Series([1.0, 2.0, 4.0]), dates)

        assert prepared.loc["2024-01-03"] == pytest.approx(3.0)

    def test_all_missing(self):
        dates = pd.Series(pd.date_range("2024-01-01", periods=3, freq="D"))
        assert prepare_series(pd.Series([np.nan] * 3), dates).empty


class TestDecomposeSeasonal:
    def test_components_sum_to_observed(self):
        values, dates = _seasonal_series()

        parts = decompose_seasonal(values, dates)

        assert list(parts.columns) == ["observed", "trend", "seasonal", "resid"]
        assert len(parts) == len(values)
        np.testing.assert_allclose(
            parts["trend"] + parts["seasonal"] + parts["resid"], parts["observed"], atol=1e-8,
        )

    def test_recovers_seasonal_amplitude(self):
        values, dates = _seasonal_series()

        parts = decompose_seasonal(values, dates)

        amplitude = (parts["seasonal"].max() - parts["seasonal"].min()) / 2
        assert amplitude == pytest.approx(150, rel=0.15)
        assert parts["trend"].iloc[-1] > parts["trend"].iloc[0]

    def test_too_short_raises(self):
        values, dates = _seasonal_series(n_days=400)

        with pytest.raises(ValueError, match="at least 730"):
            decompose_seasonal(values, dates)


class TestLoessSmooth:
    def test_follows_linear_trend(self):
        x = np.arange(50, dtype=float)
        y = 3.0 * x + 2.0 + 0.1 * np.sin(x)

        fit = loess_smooth(x, y, frac=0.3)

        assert list(fit.columns) == ["x", "fitted"]
        np.testing.assert_allclose(fit["fitted"], 3.0 * x + 2.0, atol=0.5)

    def test_skips_missing_pairs(self):
        x = np.array([1.0, 2.0, np.nan, 4.0, 5.0, 6.0])
        y = np.array([1.0, np.nan, 3.0, 4.5, 4.0, 6.5])

        fit = loess_smooth(x, y, frac=1.0)

        assert len(fit) == 4

    def test_too_few_points(self):
        fit = loess_smooth([1.0], [2.0])
        assert fit.empty
