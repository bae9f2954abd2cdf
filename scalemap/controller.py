# controller.py: map interaction state machine
#
#   NO_REFERENCE_POINT --click--> REFERENCE_SET --apply--> FILTERED
#   FILTERED --click--> REFERENCE_SET   (filtered markers stay until re-applied)
#   any --clear--> NO_REFERENCE_POINT
#
# Counts are always len(drawn[category]); nothing else tracks them.

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pandas as pd

from scalemap import CATEGORIES
from scalemap.errors import MalformedCoordinate, MissingReferencePoint
from scalemap.filters import FilterCriteria, parse_radius, select_matching
from scalemap.geo import valid_position
from scalemap.records import empty_frame

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    NO_REFERENCE_POINT = "no_reference_point"
    REFERENCE_SET = "reference_set"
    FILTERED = "filtered"


@dataclass
class AppState:
    datasets: Dict[str, pd.DataFrame] = field(default_factory=dict)
    drawn: Dict[str, pd.DataFrame] = field(default_factory=dict)
    reference_point: Optional[Tuple[float, float]] = None
    criteria: Optional[FilterCriteria] = None
    mode: Mode = Mode.NO_REFERENCE_POINT
    errors: Dict[str, str] = field(default_factory=dict)
    skipped: Dict[str, int] = field(default_factory=dict)
    loaded_at: Dict[str, float] = field(default_factory=dict)


def new_state(datasets=None):
    state = AppState()
    for cat in CATEGORIES:
        df = (datasets or {}).get(cat)
        state.datasets[cat] = empty_frame(cat) if df is None else df
        state.drawn[cat] = state.datasets[cat]
    return state


def counts(state):
    return {cat: len(state.drawn.get(cat, ())) for cat in CATEGORIES}


def _redraw(state, category):
    df = state.datasets[category]
    # a filtered view (possibly stale after a new click) is kept until re-applied
    if state.criteria is not None:
        state.drawn[category] = select_matching(df, state.criteria)
    else:
        state.drawn[category] = df


# ------------------- TRANSITIONS -------------------
def set_reference_point(state, lat, lon):
    pos = valid_position(lat, lon)
    if pos is None:
        raise MalformedCoordinate(lat, lon)
    state.reference_point = pos
    state.mode = Mode.REFERENCE_SET
    logger.debug("reference point set to %s", pos)
    return state


def apply_filter(state, radius=None, brand=None):
    """Filter both categories around the current reference point.

    Raises MissingReferencePoint (state untouched) when no point has been picked.
    A blank/unparseable/negative radius means no distance limit.
    """
    if state.reference_point is None:
        raise MissingReferencePoint()
    criteria = FilterCriteria(
        reference_point=state.reference_point,
        radius_km=parse_radius(radius),
        brand=brand or None,
    )
    drawn = {cat: select_matching(state.datasets[cat], criteria) for cat in CATEGORIES}
    state.criteria = criteria
    state.drawn.update(drawn)
    state.mode = Mode.FILTERED
    logger.info("filter applied: %s -> %s", criteria, counts(state))
    return state


def clear_filter(state):
    state.reference_point = None
    state.criteria = None
    state.mode = Mode.NO_REFERENCE_POINT
    for cat in CATEGORIES:
        _redraw(state, cat)
    return state


def replace_dataset(state, category, df):
    if category not in CATEGORIES:
        raise ValueError(f"unknown category: {category!r}")
    state.datasets[category] = empty_frame(category) if df is None else df
    _redraw(state, category)
    return state


def record_load_results(state, results):
    """Apply {category: LoadResult}; a failed category becomes empty and keeps its error."""
    for cat, res in results.items():
        if res.ok:
            replace_dataset(state, cat, res.frame)
            state.errors.pop(cat, None)
            state.skipped[cat] = res.skipped
            if res.loaded_at is not None:
                state.loaded_at[cat] = res.loaded_at
        else:
            replace_dataset(state, cat, None)
            state.errors[cat] = str(res.error)
            state.skipped.pop(cat, None)
    return state


# ------------------- MAP EVENTS -------------------
def click_key(click):
    """st_folium last_clicked payload -> (lat, lng), or None when there is no click."""
    click = click or {}
    if "lat" not in click or "lng" not in click:
        return None
    return click["lat"], click["lng"]


def handle_map_click(state, click, last_key):
    """Set the reference point from a click not seen before.

    st_folium keeps returning its last click on every rerun, so last_key must
    stay at the latest seen click (also after clear_filter) or the old point
    comes back. Returns (key_to_remember, changed).
    """
    key = click_key(click)
    if key is None or key == last_key:
        return last_key, False
    set_reference_point(state, *key)
    return key, True


def circle_radius(state, typed_radius=None):
    """Radius (km) for the circle around the reference point, and whether it is only a preview.

    While a filter is shown the circle follows the applied radius; otherwise
    it previews the radius typed in the sidebar.
    """
    if state.reference_point is None:
        return None, False
    if state.mode is Mode.FILTERED and state.criteria is not None:
        return state.criteria.radius_km, False
    return parse_radius(typed_radius), True
