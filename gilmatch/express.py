# -*- coding: utf-8 -*-
"""
Express Schedule Model
======================
노선별 급행/특급/직행 운행 정보와 배차 간격 기반 다음 열차 계산.

다음 열차 시각은 시간대별 배차 간격의 배수로만 계산한다 (시각표 조회 아님).
"""
import math
from functools import lru_cache
from typing import List, Optional

from gilmatch.models import ExpressIntervals, ExpressTrainSchedule, ServiceType
from gilmatch.utils import format_minutes, parse_hhmm, to_minutes

ALL_DAYS = (1, 2, 3, 4, 5, 6, 7)


def _intervals(morning, evening, daytime, night):
    """분 단위 입력 → 초 단위 ExpressIntervals."""
    return ExpressIntervals(
        rush_hour_morning=morning * 60,
        rush_hour_evening=evening * 60,
        daytime=daytime * 60,
        night=night * 60,
    )


EXPRESS_TRAIN_SCHEDULES = (
    # 1호선 특급/급행
    ExpressTrainSchedule(
        line_id="1",
        service_type=ServiceType.SPECIAL,
        type_name="특급",
        operating_days=ALL_DAYS,
        first_train="05:30",
        last_train="23:40",
        intervals=_intervals(20, 30, 40, 60),
        stops=("150", "201", "202", "203", "204", "205", "206", "207"),  # 서울역 → 천안
        time_savings={"150-206": 15 * 60, "150-207": 25 * 60},
    ),
    ExpressTrainSchedule(
        line_id="1",
        service_type=ServiceType.EXPRESS,
        type_name="급행",
        operating_days=ALL_DAYS,
        first_train="06:00",
        last_train="23:00",
        intervals=_intervals(15, 20, 30, 40),
        stops=("150", "152", "155", "156", "201"),  # 서울역 → 구로
        time_savings={"150-201": 8 * 60},
    ),
    # 신분당선 급행 (출근 시간 3분 간격)
    ExpressTrainSchedule(
        line_id="sinbundang",
        service_type=ServiceType.EXPRESS,
        type_name="급행",
        operating_days=ALL_DAYS,
        first_train="05:30",
        last_train="23:50",
        intervals=_intervals(3, 5, 8, 10),
        stops=("D01", "D02", "D03", "D04", "D05", "D06", "D07", "D08", "D09", "D10", "D11"),
        time_savings={"D05-D10": 6 * 60, "D08-D10": 3 * 60},
    ),
    # 9호선 급행
    ExpressTrainSchedule(
        line_id="9",
        service_type=ServiceType.EXPRESS,
        type_name="급행",
        operating_days=ALL_DAYS,
        first_train="05:40",
        last_train="23:50",
        intervals=_intervals(6, 8, 12, 15),
        stops=("910", "914", "915", "920", "922", "924", "928", "930"),
        time_savings={"915-922": 5 * 60, "922-928": 3 * 60},
    ),
    # 3호선 급행 (대화 → 오금)
    ExpressTrainSchedule(
        line_id="3",
        service_type=ServiceType.EXPRESS,
        type_name="급행",
        operating_days=ALL_DAYS,
        first_train="06:00",
        last_train="23:30",
        intervals=_intervals(8, 10, 15, 20),
        stops=("320", "322", "324", "329", "334", "339", "343"),
        time_savings={"324-334": 7 * 60, "334-339": 4 * 60},
    ),
    # 공항철도 직행
    ExpressTrainSchedule(
        line_id="airport",
        service_type=ServiceType.EXPRESS,
        type_name="직행",
        operating_days=ALL_DAYS,
        first_train="05:20",
        last_train="23:50",
        intervals=_intervals(10, 15, 20, 30),
        stops=("A01", "A02", "A03", "A04", "A05", "A06"),  # 서울역 → 인천공항
        time_savings={"A01-A06": 25 * 60},
    ),
)


def interval_for(schedule: ExpressTrainSchedule, time: str) -> int:
    """시간대별 배차 간격(초). 07-09 출근, 18-20 퇴근, 09-18 주간, 그 외 야간."""
    hour, _ = parse_hhmm(time)
    if 7 <= hour < 9:
        return schedule.intervals.rush_hour_morning
    if 18 <= hour < 20:
        return schedule.intervals.rush_hour_evening
    if 9 <= hour < 18:
        return schedule.intervals.daytime
    return schedule.intervals.night


def is_operating_day(schedule: ExpressTrainSchedule, day: int) -> bool:
    return day in schedule.operating_days


class ExpressScheduleModel:

    def __init__(self, schedules):
        self._schedules = tuple(schedules)

    def __len__(self):
        return len(self._schedules)

    def get_express_schedules(self, line_id: str) -> List[ExpressTrainSchedule]:
        return [s for s in self._schedules if s.line_id == line_id]

    def has_express_between(self, from_station_id: str, to_station_id: str, line_id: str) -> bool:
        """두 역이 같은 급행 정차역 목록에 있으면 True. 진행 방향은 확인하지 않는다."""
        if from_station_id == to_station_id:
            return False
        for schedule in self.get_express_schedules(line_id):
            if from_station_id in schedule.stops and to_station_id in schedule.stops:
                return True
        return False

    def get_next_express_time(
        self,
        station_id: str,
        line_id: str,
        current_time: str,
        within_service_hours: bool = False,
    ) -> Optional[str]:
        """
        해당 역에 정차하는 첫 번째 급행의 다음 출발 시각 (HH:mm).

        배차 간격의 배수 중 현재 시각 이상인 첫 분을 돌려준다.
        자정을 넘기면 "24:00"이 아니라 "00:00"부터 다시 센다 (23:55, 30분 간격 → "00:00").
        기본적으로 첫차/막차 범위는 보지 않으며, within_service_hours=True이면
        운행 시간 밖의 결과는 None이다.
        """
        for schedule in self.get_express_schedules(line_id):
            if station_id not in schedule.stops:
                continue

            current_minutes = to_minutes(current_time)
            step = max(1, interval_for(schedule, current_time) // 60)
            next_minutes = math.ceil(current_minutes / step) * step

            if within_service_hours:
                first = to_minutes(schedule.first_train)
                last = to_minutes(schedule.last_train)
                if not first <= next_minutes <= last:
                    return None

            return format_minutes(next_minutes)

        return None

    def get_train_frequency_score(self, line_id: str, time: str) -> int:
        """열차 빈도 점수 (높을수록 자주 옴)."""
        hour, _ = parse_hhmm(time)
        morning_rush = 7 <= hour < 9
        evening_rush = 18 <= hour < 20

        if not self.get_express_schedules(line_id):
            return 6 if morning_rush or evening_rush else 3

        if morning_rush:
            return 10
        if evening_rush:
            return 9
        return 7


@lru_cache(maxsize=None)
def default_express_model() -> ExpressScheduleModel:
    return ExpressScheduleModel(EXPRESS_TRAIN_SCHEDULES)
