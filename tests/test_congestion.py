# -*- coding: utf-8 -*-
"""
CongestionModel 유닛 테스트
"""
import pytest

from gilmatch.congestion import (
    CongestionModel,
    build_congestion_data,
    default_congestion_model,
    get_rush_hour_penalty,
    is_rush_hour,
    time_slot_for,
)


@pytest.fixture(scope="module")
def congestion():
    return default_congestion_model()


class TestCongestionLevel:

    def test_line_count(self, congestion):
        assert len(congestion) == 12

    @pytest.mark.parametrize("time, slot", [
        ("05:00", "early_morning"),
        ("07:30", "rush_hour_morning"),
        ("11:59", "morning"),
        ("12:00", "lunch"),
        ("15:00", "afternoon"),
        ("19:00", "rush_hour_evening"),
        ("21:00", "evening"),
        ("03:00", "evening"),  # 범위 밖은 evening
    ])
    def test_time_slot_for(self, time, slot):
        assert time_slot_for(time) == slot

    def test_get_congestion_level(self, congestion):
        assert congestion.get_congestion_level("2", "08:00") == 10
        assert congestion.get_congestion_level("2", "23:30") == 5
        assert congestion.get_congestion_level("9", "12:30") == 2

    def test_unknown_line_defaults_to_medium(self, congestion):
        assert congestion.get_congestion_level("99", "08:00") == 5
        assert congestion.get_congestion_score("99", "08:00") == 5
        assert congestion.get_congestion_data("99") is None

    def test_congestion_score(self, congestion):
        assert congestion.get_congestion_score("2", "08:00") == 0
        assert congestion.get_congestion_score("9", "12:30") == 8

    def test_section_congestion(self, congestion):
        assert congestion.get_section_congestion("2", "222") == 10
        assert congestion.get_section_congestion("2", "150") is None
        assert congestion.get_section_congestion("99", "150") is None

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            build_congestion_data({"x": ("x", [0, 1, 1, 1, 1, 1, 1], [])})

    def test_custom_table(self):
        model = CongestionModel(build_congestion_data({"x": ("x", [1, 2, 3, 4, 5, 6, 7], [])}))
        assert model.get_congestion_level("x", "13:00") == 4


class TestRushHour:

    @pytest.mark.parametrize("time, expected", [
        ("06:59", False),
        ("07:00", True),
        ("08:59", True),
        ("09:00", False),
        ("17:30", False),
        ("18:00", True),
        ("19:59", True),
        ("20:00", False),
    ])
    def test_is_rush_hour(self, time, expected):
        assert is_rush_hour(time) is expected
        assert CongestionModel.is_rush_hour(time) is expected

    def test_rush_hour_penalty(self, congestion):
        assert get_rush_hour_penalty("08:00") == -3
        assert congestion.get_rush_hour_penalty("12:00") == 0
