from __future__ import annotations

from dinner_match.config import ScoringConfig
from dinner_match.recommendations.locality import locality_key


def test_city_marker_wins_over_later_district():
    assert locality_key("北京市朝阳区建国路") == "北京市"


def test_latin_address_falls_back_to_prefix():
    assert locality_key("Main Street 123") == "Main"


def test_district_and_county_markers():
    assert locality_key("朝阳区建国路") == "朝阳区"
    assert locality_key("大兴县黄村镇") == "大兴县"


def test_markers_are_scanned_in_order_not_by_position():
    # 区 appears first in the string but 市 is checked first
    assert locality_key("海淀区北京市") == "海淀区北京市"


def test_marker_at_start_is_skipped():
    assert locality_key("市中心广场") == "市中心广"
    assert locality_key("市中心朝阳区") == "市中心朝阳区"


def test_short_and_empty_strings():
    assert locality_key("abc") == "abc"
    assert locality_key("") == ""


def test_custom_fallback_length():
    cfg = ScoringConfig(locality_fallback_length=2)
    assert locality_key("Main Street", cfg) == "Ma"
