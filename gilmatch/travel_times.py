# -*- coding: utf-8 -*-
"""
Travel-Time Resolver
====================
주요역 간 실측 소요시간 테이블 (sparse, 방향 있는 쌍).

조회 순서: "from-to" → 역방향 "to-from" (소요시간 대칭 가정) → None.
테이블에 없는 쌍은 거리 기반 추정식으로 대체할 수 있다.
"""
import math
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from gilmatch.models import Station, TravelTimeInfo
from gilmatch.utils import haversine

SUBWAY_SPEED_M_PER_MIN = 500  # 평균 약 30km/h
TRANSFER_PENALTY_SECONDS = 5 * 60

# "from-to" -> (일반 분, 급행 분 | None, 환승 횟수, 환승역, 급행 여부, 도보 m)
TRAVEL_TIME_DATA = {
    # 서울역 (150)
    "150-222": (35, 22, 1, ("D08",), True, 200),
    "150-223": (32, 25, 1, ("D09",), True, 180),
    "150-224": (30, 24, 1, ("D10",), True, 220),
    "150-234": (30, 20, 1, ("234",), True, 150),
    "150-426": (8, None, 0, (), False, 50),
    # 강남 (222)
    "222-150": (35, 22, 1, ("D08",), True, 200),
    "222-223": (4, 2, 0, (), True, 30),
    "222-224": (5, 3, 0, (), True, 40),
    "222-234": (8, 5, 0, (), True, 100),
    "222-334": (12, 8, 0, (), True, 120),
    # 역삼 (223)
    "223-150": (32, 25, 1, ("D09",), True, 180),
    "223-222": (4, 2, 0, (), True, 30),
    "223-224": (3, 2, 0, (), True, 20),
    "223-234": (10, 7, 0, (), True, 80),
    # 선릉 (224)
    "224-150": (30, 24, 1, ("D10",), True, 220),
    "224-222": (5, 3, 0, (), True, 40),
    "224-223": (3, 2, 0, (), True, 20),
    # 교대 (234)
    "234-150": (30, 20, 1, ("234",), True, 150),
    "234-222": (8, 5, 0, (), True, 100),
    "234-334": (6, 4, 0, (), True, 90),
    # 양재 (334)
    "334-150": (28, 20, 1, ("D05",), True, 180),
    "334-222": (12, 8, 0, (), True, 120),
    "334-234": (6, 4, 0, (), True, 90),
    # 종로3가 (156)
    "156-150": (5, None, 0, (), False, 40),
    "156-222": (25, 18, 1, ("223",), True, 150),
    # 시청 (152)
    "152-150": (3, None, 0, (), False, 20),
    "152-222": (22, 15, 0, (), True, 80),
    # 이촌 (426)
    "426-150": (8, None, 0, (), False, 50),
    "426-222": (28, 20, 1, ("222",), True, 200),
    # 고속터미널 (339)
    "339-150": (25, 18, 1, ("152",), True, 180),
    "339-222": (15, 10, 0, (), True, 120),
    # 여의도 (540)
    "540-150": (18, 12, 0, (), True, 100),
    "540-222": (12, 8, 0, (), True, 80),
    # 잠실 (810)
    "810-150": (30, 22, 1, ("234",), True, 200),
    "810-222": (10, 7, 0, (), True, 70),
    # 공덕 (640)
    "640-150": (12, 8, 0, (), True, 80),
    "640-222": (25, 18, 1, ("223",), True, 180),
}


def build_travel_time_matrix(rows=TRAVEL_TIME_DATA) -> Mapping[str, TravelTimeInfo]:
    matrix = {}
    for key, (normal_min, express_min, transfers, transfer_stations, has_express, walk) in rows.items():
        matrix[key] = TravelTimeInfo(
            normal_time=normal_min * 60,
            express_time=express_min * 60 if express_min is not None else None,
            transfer_count=transfers,
            transfer_stations=tuple(transfer_stations),
            has_express=has_express,
            walking_distance=walk,
        )
    return MappingProxyType(matrix)


def estimate_travel_time(distance: float, has_transfer: bool) -> int:
    """거리(m)와 환승 여부로 소요시간(초) 추정. 500m/분 + 환승 1회 5분."""
    base_time = (distance / SUBWAY_SPEED_M_PER_MIN) * 60
    transfer_time = TRANSFER_PENALTY_SECONDS if has_transfer else 0
    return math.ceil(base_time + transfer_time)


class TravelTimeResolver:

    def __init__(self, matrix: Mapping[str, TravelTimeInfo]):
        self._matrix = MappingProxyType(dict(matrix))

    def __len__(self):
        return len(self._matrix)

    def get_travel_time(self, from_station_id: str, to_station_id: str) -> Optional[TravelTimeInfo]:
        key = f"{from_station_id}-{to_station_id}"
        info = self._matrix.get(key)
        if info is not None:
            return info

        reverse_key = f"{to_station_id}-{from_station_id}"
        return self._matrix.get(reverse_key)

    estimate_travel_time = staticmethod(estimate_travel_time)

    def get_express_time_saved(self, from_station_id: str, to_station_id: str) -> int:
        """급행 이용 시 절약 시간(초). 급행 시간이 없으면 0."""
        info = self.get_travel_time(from_station_id, to_station_id)
        if info is None or not info.express_time:
            return 0
        return info.normal_time - info.express_time

    def get_or_estimate(self, from_station: Station, to_station: Station) -> TravelTimeInfo:
        """테이블 값이 있으면 그대로, 없으면 좌표 거리로 추정한 값(estimated=True)."""
        info = self.get_travel_time(from_station.station_id, to_station.station_id)
        if info is not None:
            return info

        distance = haversine(
            from_station.latitude, from_station.longitude,
            to_station.latitude, to_station.longitude,
        )
        has_transfer = not (set(from_station.line_ids) & set(to_station.line_ids))
        return TravelTimeInfo(
            normal_time=estimate_travel_time(distance, has_transfer),
            transfer_count=1 if has_transfer else 0,
            has_express=False,
            estimated=True,
        )


@lru_cache(maxsize=None)
def default_resolver() -> TravelTimeResolver:
    return TravelTimeResolver(build_travel_time_matrix())
