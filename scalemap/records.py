# records.py: JSON payload -> canonical per-category DataFrame

import logging

import pandas as pd

from scalemap import CATEGORIES
from scalemap.config import COMMON_KEYS, CATEGORY_KEYS, columns_for
from scalemap.errors import MalformedCoordinate
from scalemap.geo import valid_position

logger = logging.getLogger(__name__)


def empty_frame(category):
    return pd.DataFrame(columns=columns_for(category))


def parse_record(item, category):
    """One source object -> row dict. Raises MalformedCoordinate on bad lat/lon."""
    if not isinstance(item, dict):
        raise MalformedCoordinate(None, None)
    pos = valid_position(item.get("latitude"), item.get("longitude"))
    if pos is None:
        raise MalformedCoordinate(item.get("latitude"), item.get("longitude"))
    row = {}
    for key, col in {**COMMON_KEYS, **CATEGORY_KEYS[category]}.items():
        row[col] = item.get(key)
    row["latitude"], row["longitude"] = pos
    status = row.get("pass_status")
    row["pass_status"] = "" if status is None else str(status)
    brand = row.get("brand")
    row["brand"] = "" if brand is None else str(brand)
    return row


def parse_records(payload, category):
    """Returns (DataFrame, skipped_count). Records with malformed coordinates are skipped."""
    if category not in CATEGORIES:
        raise ValueError(f"unknown category: {category!r}")
    rows, skipped = [], 0
    for item in payload or []:
        try:
            rows.append(parse_record(item, category))
        except MalformedCoordinate as e:
            skipped += 1
            logger.debug("skip %s record: %s", category, e)
    if skipped:
        logger.info("skipped %d %s record(s) with malformed coordinates", skipped, category)
    if not rows:
        return empty_frame(category), skipped
    return pd.DataFrame(rows, columns=columns_for(category)), skipped


def is_failed(pass_status):
    if pass_status is None:
        return False
    try:
        if pd.isna(pass_status):
            return False
    except (TypeError, ValueError):
        pass
    return str(pass_status).strip().upper() == "N"
