# -*- coding: utf-8 -*-
"""
Congestion Model
================
노선별 시간대(7구간) 혼잡도 1-10 테이블과 출퇴근 시간 판별.

급행 모델과는 독립적이며, 역 구간별 혼잡도(sections)는 조회만 제공한다.
"""
from functools import lru_cache
from typing import Optional

from gilmatch.models import CongestionData, CongestionTimeSlots, SectionCongestion
from gilmatch.utils import parse_hhmm, to_minutes

DEFAULT_CONGESTION_LEVEL = 5  # 보통
RUSH_HOUR_PENALTY = -3

MORNING_RUSH = (7 * 60, 9 * 60)
EVENING_RUSH = (18 * 60, 20 * 60)

# (시작 시, 종료 시, 슬롯명) - 범위 밖은 evening
TIME_SLOT_BOUNDS = [
    (5, 7, "early_morning"),
    (7, 9, "rush_hour_morning"),
    (9, 12, "morning"),
    (12, 14, "lunch"),
    (14, 18, "afternoon"),
    (18, 20, "rush_hour_evening"),
]

# line_id -> (노선명, [early, rush_am, morning, lunch, afternoon, rush_pm, evening], [(역ID, 역명, 혼잡도)])
CONGESTION_TABLE = {
    "1": ("1호선", [3, 9, 6, 5, 7, 9, 4],
          [("150", "서울역", 9), ("152", "시청", 8), ("155", "종각", 9), ("156", "종로3가", 9)]),
    "2": ("2호선", [3, 10, 7, 6, 8, 10, 5],
          [("201", "을지로입구", 9), ("211", "을지로3가", 10), ("222", "강남역", 10),
           ("223", "역삼역", 9), ("224", "선릉역", 9), ("234", "교대역", 9), ("810", "잠실역", 10)]),
    "3": ("3호선", [2, 7, 5, 4, 6, 7, 3],
          [("324", "충무로", 7), ("334", "양재역", 6), ("339", "고속터미널", 7)]),
    "4": ("4호선", [2, 7, 5, 4, 5, 7, 3],
          [("150", "서울역", 7), ("426", "이촌", 5), ("430", "사당", 7)]),
    "5": ("5호선", [2, 5, 4, 3, 4, 5, 2],
          [("535", "광화문", 5), ("540", "여의도", 6)]),
    "6": ("6호선", [2, 4, 3, 3, 3, 4, 2],
          [("640", "공덕", 4)]),
    "7": ("7호선", [2, 6, 4, 4, 5, 6, 3],
          [("750", "도봉산", 5), ("751", "수락산", 5), ("339", "고속터미널", 7)]),
    "8": ("8호선", [2, 6, 4, 4, 5, 6, 3],
          [("810", "잠실", 8), ("814", "석촌", 5)]),
    "9": ("9호선", [1, 4, 3, 2, 3, 4, 2],
          [("915", "여의도", 4), ("922", "강남", 5), ("928", "교대", 5)]),
    "sinbundang": ("신분당선", [1, 5, 3, 2, 4, 5, 2],
                   [("D08", "강남", 6), ("D09", "역삼", 5), ("D10", "선릉", 5)]),
    "airport": ("공항철도", [1, 3, 2, 2, 2, 3, 1],
                [("150", "서울역", 3), ("640", "공덕", 2)]),
    "G410": ("경의중앙선", [1, 4, 3, 2, 3, 4, 2],
             [("426", "이촌", 3), ("640", "공덕", 4)]),
}


def build_congestion_data(table=CONGESTION_TABLE):
    rows = []
    for line_id, (line_name, levels, sections) in table.items():
        for level in levels:
            if not 1 <= level <= 10:
                raise ValueError(f"{line_id} 혼잡도 범위 오류: {level}")
        rows.append(CongestionData(
            line_id=line_id,
            line_name=line_name,
            time_slots=CongestionTimeSlots(*levels),
            sections=tuple(SectionCongestion(*s) for s in sections),
        ))
    return tuple(rows)


def time_slot_for(time: str) -> str:
    hour, _ = parse_hhmm(time)
    for start, end, slot in TIME_SLOT_BOUNDS:
        if start <= hour < end:
            return slot
    return "evening"


def is_rush_hour(time: str) -> bool:
    """07:00-09:00, 18:00-20:00 (종료 시각 미포함)."""
    minutes = to_minutes(time)
    return (
        MORNING_RUSH[0] <= minutes < MORNING_RUSH[1]
        or EVENING_RUSH[0] <= minutes < EVENING_RUSH[1]
    )


def get_rush_hour_penalty(time: str) -> int:
    return RUSH_HOUR_PENALTY if is_rush_hour(time) else 0


class CongestionModel:

    def __init__(self, data):
        self._data = tuple(data)

    def __len__(self):
        return len(self._data)

    def get_congestion_data(self, line_id: str) -> Optional[CongestionData]:
        for row in self._data:
            if row.line_id == line_id:
                return row
        return None

    def get_congestion_level(self, line_id: str, time: str) -> int:
        data = self.get_congestion_data(line_id)
        if data is None:
            return DEFAULT_CONGESTION_LEVEL
        return getattr(data.time_slots, time_slot_for(time))

    def get_congestion_score(self, line_id: str, time: str) -> int:
        """혼잡도 역수 점수 0-10 (덜 붐빌수록 높음)."""
        return max(0, 10 - self.get_congestion_level(line_id, time))

    def get_section_congestion(self, line_id: str, station_id: str) -> Optional[int]:
        data = self.get_congestion_data(line_id)
        if data is None:
            return None
        for section in data.sections:
            if section.station_id == station_id:
                return section.congestion_level
        return None

    is_rush_hour = staticmethod(is_rush_hour)
    get_rush_hour_penalty = staticmethod(get_rush_hour_penalty)


@lru_cache(maxsize=None)
def default_congestion_model() -> CongestionModel:
    return CongestionModel(build_congestion_data())
