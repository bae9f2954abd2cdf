# config.py: static settings, env overrides via os.getenv

import os

from scalemap import SCALE, WEIGHBRIDGE

# ------------------- DATA SOURCES -------------------
DATA_DIR = os.getenv("SCALEMAP_DATA_DIR", os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
SOURCES = {
    SCALE: os.getenv("SCALEMAP_SCALE_SOURCE", "scale-data.json"),
    WEIGHBRIDGE: os.getenv("SCALEMAP_WEIGHBRIDGE_SOURCE", "weighbridge-data.json"),
}
TIMEOUT_S = float(os.getenv("SCALEMAP_TIMEOUT_S", "15"))
MAX_RETRIES = int(os.getenv("SCALEMAP_MAX_RETRIES", "1"))
LOG_LEVEL = os.getenv("SCALEMAP_LOG_LEVEL", "INFO")

# ------------------- MAP -------------------
MAP_CENTER = (25.03236, 121.51813)
MAP_ZOOM = 10
TILES = "OpenStreetMap"
MAP_HEIGHT_PX = 620

# folium.Icon colors
FAIL_ICON = "red"
ICONS = {SCALE: "blue", WEIGHBRIDGE: "green"}
REFERENCE_ICON = "orange"

LABELS = {SCALE: "磅秤", WEIGHBRIDGE: "地秤"}

# ------------------- RECORD FIELDS -------------------
# source JSON key -> canonical column
COMMON_KEYS = {
    "latitude": "latitude",
    "longitude": "longitude",
    "檢查合格與否": "pass_status",
    "廠牌": "brand",
}
CATEGORY_KEYS = {
    SCALE: {
        "店名": "store_name",
        "地址": "address",
        "型號": "model",
        "秤量": "capacity",
        "檢查日期": "inspected_on",
    },
    WEIGHBRIDGE: {
        "所有人": "owner",
        "地址": "address",
        "型號": "model",
        "秤量": "capacity",
        "檢定合格單號碼": "certificate_no",
        "檢定日期": "verified_on",
        "有效期限": "valid_until",
    },
}

# popup rows, first one is the bold title
POPUP_FIELDS = {
    SCALE: [
        ("store_name", "店名"),
        ("brand", "廠牌"),
        ("model", "型號"),
        ("capacity", "秤量"),
        ("address", "地址"),
        ("inspected_on", "檢查日期"),
        ("pass_status", "檢查合格與否"),
    ],
    WEIGHBRIDGE: [
        ("owner", "所有人"),
        ("brand", "廠牌"),
        ("model", "型號"),
        ("capacity", "秤量"),
        ("address", "地址"),
        ("certificate_no", "檢定合格單號碼"),
        ("verified_on", "檢定日期"),
        ("valid_until", "有效期限"),
        ("pass_status", "檢查合格與否"),
    ],
}


def columns_for(category):
    """Canonical column order for one category's DataFrame."""
    cols = list(COMMON_KEYS.values())
    for col in CATEGORY_KEYS[category].values():
        if col not in cols:
            cols.append(col)
    return cols
