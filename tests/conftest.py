"""
Pytest configuration and fixtures.
"""
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scalemap import SCALE, WEIGHBRIDGE
from scalemap.controller import new_state
from scalemap.records import parse_records

TAIPEI_MAIN_STATION = (25.0478, 121.5319)


@pytest.fixture
def scale_payload():
    """Scale records as they appear in scale-data.json."""
    return [
        {"店名": "東門市場 陳家", "廠牌": "ACME", "型號": "AC-15", "秤量": "15kg",
         "檢查日期": "2024-03-14", "檢查合格與否": "n", "latitude": 25.04, "longitude": 121.53},
        {"店名": "南門市場 王記", "廠牌": "CAS", "型號": "SW-1", "秤量": "30kg",
         "檢查日期": "2024-03-12", "檢查合格與否": "Y", "latitude": 25.0359, "longitude": 121.5178},
        {"店名": "板橋 吳家", "廠牌": "acme", "檢查合格與否": "Y", "latitude": 25.0115, "longitude": 121.4593},
        {"店名": "高雄 鹽埕", "廠牌": "CAS", "latitude": 22.6273, "longitude": 120.3014},
    ]


@pytest.fixture
def weighbridge_payload():
    """Weighbridge records as they appear in weighbridge-data.json."""
    return [
        {"所有人": "南港貨運站", "廠牌": "METTLER TOLEDO", "型號": "PT-80", "秤量": "80t",
         "檢定合格單號碼": "WB-2024-0402", "檢查合格與否": "Y", "latitude": 25.0566, "longitude": 121.6162},
        {"所有人": "北投資源回收場", "廠牌": "ACME", "檢查合格與否": " N ",
         "latitude": 25.1195, "longitude": 121.4757},
    ]


@pytest.fixture
def scale_df(scale_payload):
    return parse_records(scale_payload, SCALE)[0]


@pytest.fixture
def weighbridge_df(weighbridge_payload):
    return parse_records(weighbridge_payload, WEIGHBRIDGE)[0]


@pytest.fixture
def state(scale_df, weighbridge_df):
    return new_state({SCALE: scale_df, WEIGHBRIDGE: weighbridge_df})
