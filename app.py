# app.py — Weighing-device inspection map (Leaflet via folium)
# - Scales (blue) and weighbridges (green) on one map, failed inspections in red
# - Click the map to pick a reference point, then filter by radius (km) and brand
# - Counts always match the markers drawn; a failed dataset never blanks the page

import datetime
import logging
import time

import streamlit as st
import folium
from folium import Element
from streamlit_folium import st_folium

try:
    from zoneinfo import ZoneInfo  # Python 3.9+
except Exception:
    ZoneInfo = None

from scalemap import CATEGORIES, config
from scalemap.controller import (
    Mode, apply_filter, circle_radius, clear_filter, click_key, counts, handle_map_click, new_state,
    record_load_results,
)
from scalemap.errors import MalformedCoordinate, MissingReferencePoint
from scalemap.filters import brand_options, parse_radius
from scalemap.loader import load_all
from scalemap.markers import render_frame, to_folium_marker

# ------------------- CONFIG -------------------
logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("scalemap.app")

st.set_page_config(page_title="Weighing Device Inspection Map", layout="wide")

ALL_BRANDS = "(all brands)"

# ------------------- TIME HELPERS -------------------
def fmt_ts(ts):
    try:
        ts = float(ts)
    except Exception:
        return ""
    if ZoneInfo:
        return datetime.datetime.fromtimestamp(ts, tz=ZoneInfo("Asia/Taipei")).strftime("%Y-%m-%d %H:%M:%S %Z")
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))

# ------------------- STATE -------------------
def get_state():
    if "app_state" not in st.session_state:
        state = new_state()
        with st.spinner("Loading inspection data..."):
            record_load_results(state, load_all())
        st.session_state["app_state"] = state
    return st.session_state["app_state"]

def reload_data(state):
    with st.spinner("Reloading inspection data..."):
        record_load_results(state, load_all())

# ------------------- MAP -------------------
def count_overlay_html(n):
    return f"""
    <div style="position:fixed;bottom:24px;right:12px;z-index:9999;background:#fff;
                padding:6px 10px;border-radius:6px;box-shadow:0 1px 4px rgba(0,0,0,.3);font-size:13px;">
      <b>{config.LABELS['scale']}數量:</b> {n['scale']}<br>
      <b>{config.LABELS['weighbridge']}數量:</b> {n['weighbridge']}
    </div>
    """

def build_map(state, typed_radius=None):
    center = state.reference_point or config.MAP_CENTER
    m = folium.Map(location=list(center), zoom_start=config.MAP_ZOOM, tiles=config.TILES, control_scale=True)
    n = counts(state)
    for cat in CATEGORIES:
        layer = folium.FeatureGroup(name=f"{config.LABELS[cat]} ({n[cat]})", show=True)
        for spec in render_frame(state.drawn[cat], cat):
            to_folium_marker(spec).add_to(layer)
        layer.add_to(m)

    if state.reference_point is not None:
        lat, lon = state.reference_point
        folium.Marker(
            [lat, lon], tooltip=f"Reference point ({lat:.5f}, {lon:.5f})",
            icon=folium.Icon(color=config.REFERENCE_ICON, icon="screenshot", prefix="glyphicon"),
        ).add_to(m)
        radius_km, preview = circle_radius(state, typed_radius)
        if radius_km is not None:
            style = {"dash_array": "6 6"} if preview else {}
            folium.Circle(
                location=[lat, lon], radius=radius_km * 1000.0,
                color=config.REFERENCE_ICON, weight=2, fill=True, fill_opacity=0.08, **style,
                tooltip=f"{'Preview: ' if preview else ''}{radius_km:g} km",
            ).add_to(m)

    folium.LayerControl(collapsed=False).add_to(m)
    m.get_root().html.add_child(Element(count_overlay_html(n)))
    return m

# ------------------- UI -------------------
st.title("Weighing Device Inspection Map")

state = get_state()

st.sidebar.header("Filter")
radius_text = st.sidebar.text_input("Radius (km)", value="5", key="radius_txt",
                                    help="Blank means no distance limit.")
brands = [ALL_BRANDS] + brand_options(*state.datasets.values())
brand_pick = st.sidebar.selectbox("Brand", brands, key="brand_sel")
brand = "" if brand_pick == ALL_BRANDS else brand_pick

radius_km = parse_radius(radius_text)
if radius_text.strip() and radius_km is None:
    st.sidebar.caption("Radius not understood; no distance limit will be applied.")

c1, c2, c3 = st.sidebar.columns(3)
if c1.button("Apply", key="apply_btn"):
    try:
        apply_filter(state, radius_text, brand)
    except MissingReferencePoint as e:
        st.error(str(e))
if c2.button("Clear", key="clear_btn"):
    # keep last_click: the map still returns the old click on this rerun
    clear_filter(state)
if c3.button("Reload", key="reload_btn"):
    reload_data(state)

n = counts(state)
m1, m2 = st.sidebar.columns(2)
m1.metric(f"{config.LABELS['scale']} (scales)", n["scale"])
m2.metric(f"{config.LABELS['weighbridge']} (weighbridges)", n["weighbridge"])

if state.reference_point is None:
    st.caption("Click the map to pick a reference point.")
else:
    lat, lon = state.reference_point
    msg = f"Reference point: {lat:.5f}, {lon:.5f}"
    if state.mode is Mode.REFERENCE_SET and state.criteria is not None:
        msg += ". Press **Apply** to refresh the filtered markers."
    st.caption(msg)

for cat, err in state.errors.items():
    st.warning(f"{config.LABELS[cat]} data unavailable: {err}")

# Map
out = st_folium(build_map(state, radius_text), width=None, height=config.MAP_HEIGHT_PX,
                key="inspection_map", returned_objects=["last_clicked"])

click = (out or {}).get("last_clicked")
try:
    key, changed = handle_map_click(state, click, st.session_state.get("last_click"))
    st.session_state["last_click"] = key
    if changed:
        st.rerun()
except MalformedCoordinate as e:
    st.session_state["last_click"] = click_key(click)
    logger.warning("%s", e)
    st.warning(str(e))

# Status
with st.expander("Data status", expanded=False):
    for cat in CATEGORIES:
        src = config.SOURCES[cat]
        if cat in state.errors:
            st.write(f"**{cat}** ({src}): error: {state.errors[cat]}")
        else:
            st.write(f"**{cat}** ({src}): {len(state.datasets[cat])} records, "
                     f"{state.skipped.get(cat, 0)} skipped (bad coordinates), "
                     f"loaded {fmt_ts(state.loaded_at.get(cat))}")
    st.write("Mode:", state.mode.value)
