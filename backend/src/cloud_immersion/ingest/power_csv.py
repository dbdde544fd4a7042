"""NASA POWER daily point CSV loader.

The file starts with a free-text header block closed by ``-END HEADER-``,
followed by ``YEAR,DOY,T2M,T2M_MAX,T2M_MIN,RH2M`` rows. Returns observations
in the canonical daily layout used by the compute modules.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from cloud_immersion.compute.dates import reconstruct_dates
from cloud_immersion.config import (
    DAILY_COLUMNS,
    HEADER_END_MARKER,
    MISSING_SENTINEL,
    POWER_COLUMNS,
)

logger = logging.getLogger(__name__)


def load_daily_csv(
    path: str | Path,
    skiprows: int | None = None,
    columns: dict[str, str] | None = None,
) -> pd.DataFrame:
    """Load a daily CSV into the canonical table.

    Args:
        path: CSV file.
        skiprows: Fixed number of header lines to skip. Detected from the
            ``-END HEADER-`` marker when None.
        columns: Mapping of provider column name -> canonical name.

    Returns:
        DataFrame with columns: obs_date, year, doy, tavg_c, tmax_c, tmin_c,
        rh_pct, sorted by obs_date. Empty DataFrame if the file has no rows.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: if a required column is missing.
    """
    path = Path(path)
    columns = columns or POWER_COLUMNS
    if skiprows is None:
        skiprows = _find_header_end(path)

    logger.info("Reading %s (skipping %d header lines)", path, skiprows)
    raw = pd.read_csv(path, skiprows=skiprows, skipinitialspace=True)
    raw.columns = [str(c).strip() for c in raw.columns]

    missing = [c for c in columns if c not in raw.columns]
    if missing:
        raise ValueError(f"{path.name} is missing required columns: {', '.join(missing)}")

    if raw.empty:
        return _empty_df()

    frame = raw[list(columns)].rename(columns=columns).copy()
    for col in frame.columns:
        frame[col] = pd.to_numeric(frame[col], errors="coerce")
    frame = frame.mask(frame == MISSING_SENTINEL)

    n_fill = int(frame.drop(columns=["year", "doy"]).isna().sum().sum())
    if n_fill:
        logger.warning("%d missing or fill-valued observations in %s", n_fill, path.name)

    frame["obs_date"] = reconstruct_dates(frame["year"], frame["doy"])
    n_bad_dates = int(frame["obs_date"].isna().sum())
    if n_bad_dates:
        logger.warning("Dropping %d rows with invalid year/day-of-year", n_bad_dates)

    result = (
        frame.dropna(subset=["obs_date"])
        .sort_values("obs_date", kind="stable")
        .drop_duplicates(subset=["obs_date"], keep="first")
        .reset_index(drop=True)
    )
    result["year"] = result["year"].astype(int)
    result["doy"] = result["doy"].astype(int)

    logger.info("Loaded %d daily records from %s", len(result), path.name)
    return result[DAILY_COLUMNS]


def _find_header_end(path: Path) -> int:
    """Number of lines up to and including the header end marker (0 if absent)."""
    with path.open(encoding="utf-8", errors="replace") as fh:
        for lineno, line in enumerate(fh, start=1):
            if line.strip() == HEADER_END_MARKER:
                return lineno
            if lineno > 200:
                break
    return 0


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame(columns=DAILY_COLUMNS)
