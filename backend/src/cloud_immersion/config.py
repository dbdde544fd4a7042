from __future__ import annotations

import math
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_INPUT_CSV = DATA_DIR / "power_daily.csv"

# Site (Monteverde cloud forest, Costa Rica)
DEFAULT_LATITUDE_DEG = 10.3

# Hargreaves radiation coefficient: 0.16 interior, 0.19 coastal
DEFAULT_K_RS = 0.19

# Kt below this marks a day with dense cloud cover
CLOUDY_THRESHOLD = 0.25

# Elevation bands (m), inclusive at both ends
ELEVATION_MIN_M = 150
ELEVATION_MAX_M = 1000
ELEVATION_STEP_M = 25

# Trailing rolling window (days)
ROLLING_WINDOW_DAYS = 1000

# One seasonal cycle per year
SEASONAL_PERIOD_DAYS = 365

# Meters of cloud base per degree of dew-point depression
CLOUD_BASE_LAPSE_M_PER_C = 125.0

# FAO-56 solar constant (MJ m-2 min-1)
SOLAR_CONSTANT_MJ_M2_MIN = 0.0820

# Maximum solar declination used by the FAO-56 approximation (rad)
MAX_DECLINATION_RAD = 0.409

# Beyond this latitude the sunset hour angle is undefined for part of the year
POLAR_LATITUDE_LIMIT_DEG = 90.0 - math.degrees(MAX_DECLINATION_RAD)

# Dew point approximation degrades below this humidity
LOW_CONFIDENCE_RH_PCT = 50.0

# NASA POWER daily CSV
MISSING_SENTINEL = -999
HEADER_END_MARKER = "-END HEADER-"
POWER_COLUMNS = {
    "YEAR": "year",
    "DOY": "doy",
    "T2M": "tavg_c",
    "T2M_MAX": "tmax_c",
    "T2M_MIN": "tmin_c",
    "RH2M": "rh_pct",
}
DAILY_COLUMNS = ["obs_date", "year", "doy", "tavg_c", "tmax_c", "tmin_c", "rh_pct"]


class PipelineConfig(BaseModel):
    """Site and analysis constants passed explicitly through the pipeline."""

    model_config = ConfigDict(frozen=True)

    latitude_deg: float = DEFAULT_LATITUDE_DEG
    k_rs: float = Field(default=DEFAULT_K_RS, gt=0)
    cloudy_threshold: float = Field(default=CLOUDY_THRESHOLD, gt=0, le=1)
    elevation_min_m: int = ELEVATION_MIN_M
    elevation_max_m: int = ELEVATION_MAX_M
    elevation_step_m: int = Field(default=ELEVATION_STEP_M, gt=0)
    rolling_window_days: int = Field(default=ROLLING_WINDOW_DAYS, ge=1)
    seasonal_period_days: int = Field(default=SEASONAL_PERIOD_DAYS, ge=2)

    @field_validator("latitude_deg")
    @classmethod
    def check_latitude(cls, v: float) -> float:
        if not math.isfinite(v) or abs(v) >= POLAR_LATITUDE_LIMIT_DEG:
            raise ValueError(
                f"latitude {v} is outside +/-{POLAR_LATITUDE_LIMIT_DEG:.2f} deg; "
                "sunset hour angle is undefined for part of the year"
            )
        return v

    @model_validator(mode="after")
    def check_elevation_range(self) -> PipelineConfig:
        if self.elevation_min_m > self.elevation_max_m:
            raise ValueError(
                f"elevation_min_m ({self.elevation_min_m}) exceeds "
                f"elevation_max_m ({self.elevation_max_m})"
            )
        if (self.elevation_max_m - self.elevation_min_m) % self.elevation_step_m != 0:
            raise ValueError(
                f"elevation range {self.elevation_min_m}-{self.elevation_max_m} m is not "
                f"a whole number of {self.elevation_step_m} m steps"
            )
        return self

    @property
    def elevation_bands(self) -> list[int]:
        return list(range(self.elevation_min_m, self.elevation_max_m + 1, self.elevation_step_m))
