# markers.py: record + category -> marker spec (icon, popup) and folium marker

import html
from dataclasses import dataclass
from typing import Tuple

import folium
import pandas as pd

from scalemap.config import FAIL_ICON, ICONS, POPUP_FIELDS
from scalemap.records import is_failed


@dataclass(frozen=True)
class MarkerSpec:
    position: Tuple[float, float]
    icon_class: str
    popup_html: str
    tooltip: str = ""


def icon_for(pass_status, category):
    if is_failed(pass_status):
        return FAIL_ICON
    return ICONS[category]


def _text(value):
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return html.escape(str(value))


def popup_html(record, category):
    fields = POPUP_FIELDS[category]
    (title_col, _), rest = fields[0], fields[1:]
    lines = [f"<b>{_text(record.get(title_col))}</b>"]
    lines += [f"{html.escape(label)}: {_text(record.get(col))}" for col, label in rest]
    return "<br>".join(lines)


def render_record(record, category) -> MarkerSpec:
    """record: a mapping or DataFrame row with at least latitude/longitude."""
    title_col = POPUP_FIELDS[category][0][0]
    return MarkerSpec(
        position=(float(record["latitude"]), float(record["longitude"])),
        icon_class=icon_for(record.get("pass_status"), category),
        popup_html=popup_html(record, category),
        tooltip=_text(record.get(title_col)),
    )


def render_frame(df: pd.DataFrame, category):
    if df is None or df.empty:
        return []
    return [render_record(r, category) for _, r in df.iterrows()]


def to_folium_marker(spec: MarkerSpec):
    return folium.Marker(
        location=list(spec.position),
        icon=folium.Icon(color=spec.icon_class),
        popup=folium.Popup(spec.popup_html, max_width=300),
        tooltip=spec.tooltip or None,
    )
