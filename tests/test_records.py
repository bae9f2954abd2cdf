"""
Tests for parsing JSON payloads into per-category frames.
"""
import json
import math

import pytest

from scalemap import SCALE, WEIGHBRIDGE
from scalemap.config import columns_for
from scalemap.records import empty_frame, is_failed, parse_records


class TestParseRecords:

    def test_maps_source_keys_to_columns(self, scale_payload):
        df, skipped = parse_records(scale_payload, SCALE)
        assert skipped == 0
        assert list(df.columns) == columns_for(SCALE)
        first = df.iloc[0]
        assert first["store_name"] == "東門市場 陳家"
        assert first["brand"] == "ACME"
        assert first["pass_status"] == "n"
        assert first["latitude"] == 25.04

    def test_weighbridge_fields(self, weighbridge_payload):
        df, _ = parse_records(weighbridge_payload, WEIGHBRIDGE)
        assert df.iloc[0]["owner"] == "南港貨運站"
        assert df.iloc[0]["certificate_no"] == "WB-2024-0402"

    def test_missing_status_and_brand_become_empty(self, scale_payload):
        df, _ = parse_records(scale_payload, SCALE)
        assert df.iloc[3]["pass_status"] == ""
        df, _ = parse_records([{"latitude": 1, "longitude": 2}], SCALE)
        assert df.iloc[0]["brand"] == ""

    def test_numeric_strings_are_coordinates(self):
        df, skipped = parse_records([{"latitude": "25.1", "longitude": " 121.5 "}], SCALE)
        assert skipped == 0
        assert (df.iloc[0]["latitude"], df.iloc[0]["longitude"]) == (25.1, 121.5)

    def test_skips_malformed_coordinates(self, scale_payload):
        payload = scale_payload + [
            {"店名": "no coords"},
            {"latitude": "abc", "longitude": 121.5},
            {"latitude": 25.0, "longitude": None},
            {"latitude": 95.0, "longitude": 121.5},
            "not an object",
        ]
        df, skipped = parse_records(payload, SCALE)
        assert skipped == 5
        assert len(df) == len(scale_payload)
        assert list(df["store_name"]) == [r["店名"] for r in scale_payload]

    def test_empty_payload(self):
        df, skipped = parse_records([], WEIGHBRIDGE)
        assert df.empty and skipped == 0
        assert list(df.columns) == columns_for(WEIGHBRIDGE)

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            parse_records([], "truck")

    def test_empty_frame_columns(self):
        assert list(empty_frame(SCALE).columns) == columns_for(SCALE)


class TestIsFailed:

    @pytest.mark.parametrize("status", ["N", "n", " n ", "N\n"])
    def test_failed(self, status):
        assert is_failed(status) is True

    @pytest.mark.parametrize("status", ["Y", "", "  ", None, math.nan, "NO", "合格"])
    def test_passed(self, status):
        assert is_failed(status) is False


class TestOversizedCoordinates:

    def test_huge_integer_latitude_is_skipped(self):
        payload = json.loads('[{"latitude": 1' + '0' * 400 + ', "longitude": 121.5},'
                             ' {"latitude": 25.0, "longitude": 121.5}]')
        df, skipped = parse_records(payload, SCALE)
        assert skipped == 1
        assert list(df["latitude"]) == [25.0]
