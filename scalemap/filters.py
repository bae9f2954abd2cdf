# filters.py: stateless selection of records by brand and distance

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from scalemap.geo import haversine_km, to_float

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterCriteria:
    reference_point: Optional[Tuple[float, float]] = None
    radius_km: Optional[float] = None
    brand: Optional[str] = None


def parse_radius(value):
    """Radius input -> km, or None (unbounded) when blank, unparseable or negative."""
    r = to_float(value)
    if r is None or r < 0:
        return None
    return r


def distances_km(df: pd.DataFrame, point) -> pd.Series:
    if df is None or df.empty:
        return pd.Series(dtype=float)
    lat0, lon0 = point
    return df.apply(lambda r: haversine_km(lat0, lon0, r["latitude"], r["longitude"]), axis=1).astype(float)


def select_matching(df: pd.DataFrame, criteria: FilterCriteria) -> pd.DataFrame:
    """Subset of df matching criteria, in input order. Never mutates df."""
    if df is None or df.empty:
        return df
    mask = pd.Series(True, index=df.index)
    if criteria.brand:
        # exact, case-sensitive
        mask &= df["brand"].astype(str) == criteria.brand
    radius = parse_radius(criteria.radius_km)
    if criteria.reference_point is not None and radius is not None:
        mask &= distances_km(df, criteria.reference_point) <= radius
    return df.loc[mask]


def brand_options(*frames):
    brands = set()
    for df in frames:
        if df is None or df.empty or "brand" not in df.columns:
            continue
        brands.update(b for b in df["brand"].dropna().astype(str) if b.strip())
    return sorted(brands)
