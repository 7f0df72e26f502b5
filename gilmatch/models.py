# -*- coding: utf-8 -*-
"""
gilmatch 도메인 모델
====================
역/노선/소요시간/급행/혼잡도 참조 테이블과 매칭 입출력 타입.

모든 타입은 frozen dataclass이며 컬렉션 필드는 tuple을 쓴다.
참조 테이블은 프로세스 시작 시 한 번 만들어지고 이후에는 읽기 전용이다.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class LineType(str, Enum):
    GENERAL = "general"
    EXPRESS = "express"
    SPECIAL = "special"


@dataclass(frozen=True)
class Line:
    line_id: str
    name: str
    code: str
    color: str
    line_type: LineType = LineType.GENERAL


@dataclass(frozen=True)
class Station:
    station_id: str
    name: str  # 한글 역명 (매칭 시 정확히 일치해야 함)
    name_en: str
    lines: Tuple[Line, ...]
    latitude: float
    longitude: float
    is_transfer: bool = False
    is_express_stop: bool = False
    is_terminus: bool = False
    has_elevator: bool = True
    has_escalator: bool = True

    def __post_init__(self):
        if not self.lines:
            raise ValueError(f"역 {self.station_id}에 노선이 없습니다")

    @property
    def line_ids(self) -> Tuple[str, ...]:
        return tuple(line.line_id for line in self.lines)


@dataclass(frozen=True)
class TravelTimeInfo:
    """
    정렬된 역 쌍 간 소요 정보.

    has_express는 express_time 유무와 별개로 기록된 값이다.
    """
    normal_time: int  # seconds
    express_time: Optional[int] = None  # seconds
    transfer_count: int = 0
    transfer_stations: Tuple[str, ...] = ()
    has_express: bool = False
    walking_distance: int = 0  # meters
    estimated: bool = False


class ServiceType(str, Enum):
    SPECIAL = "special"
    EXPRESS = "express"
    ITX = "itx"
    KTX = "ktx"
    SRT = "srt"
    AIRPORT = "airport"


@dataclass(frozen=True)
class ExpressIntervals:
    rush_hour_morning: int  # seconds, 07:00-09:00
    rush_hour_evening: int  # seconds, 18:00-20:00
    daytime: int  # seconds, 09:00-18:00
    night: int  # seconds, otherwise


@dataclass(frozen=True)
class ExpressTrainSchedule:
    line_id: str
    service_type: ServiceType
    type_name: str
    operating_days: Tuple[int, ...]
    first_train: str  # HH:mm
    last_train: str  # HH:mm
    intervals: ExpressIntervals
    stops: Tuple[str, ...]  # 물리적 운행 순서
    time_savings: Mapping[str, int] = field(default_factory=dict, hash=False)  # "from-to" -> seconds

    def __post_init__(self):
        # 생성 후 읽기 전용
        object.__setattr__(self, "time_savings", MappingProxyType(dict(self.time_savings)))


@dataclass(frozen=True)
class CongestionTimeSlots:
    early_morning: int  # 05:00-07:00
    rush_hour_morning: int  # 07:00-09:00
    morning: int  # 09:00-12:00
    lunch: int  # 12:00-14:00
    afternoon: int  # 14:00-18:00
    rush_hour_evening: int  # 18:00-20:00
    evening: int  # 20:00-23:00 (그 외 시간 포함)


@dataclass(frozen=True)
class SectionCongestion:
    station_id: str
    station_name: str
    congestion_level: int


@dataclass(frozen=True)
class CongestionData:
    line_id: str
    line_name: str
    time_slots: CongestionTimeSlots
    sections: Tuple[SectionCongestion, ...] = ()


# ---------------------------------------------------------------------------
# 매칭 입력
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GillerRoute:
    """길러(배송원)의 상시 출퇴근 경로."""
    giller_id: str
    giller_name: str
    start_station: Station
    end_station: Station
    departure_time: str  # HH:mm
    days_of_week: Tuple[int, ...]  # 1=월 ... 7=일
    rating: float = 3.5  # 1-5
    total_deliveries: int = 0
    completed_deliveries: int = 0


@dataclass(frozen=True)
class DeliveryRequest:
    request_id: str
    pickup_station_name: str
    delivery_station_name: str
    pickup_start_time: str
    pickup_end_time: str
    delivery_deadline: str
    preferred_days: Tuple[int, ...]
    package_size: str = "small"  # small | medium | large
    package_weight: float = 1.0  # kg


# ---------------------------------------------------------------------------
# 매칭 결과
# ---------------------------------------------------------------------------

class CongestionBucket(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RouteBreakdown:
    pickup_match: float
    delivery_match: float
    travel_time: int
    has_express: bool
    transfer_count: int
    congestion: CongestionBucket


@dataclass(frozen=True)
class TimeBreakdown:
    departure_time_match: float
    schedule_flexibility: float


@dataclass(frozen=True)
class ScoreBreakdown:
    pickup_match_score: int  # 0-25
    delivery_match_score: int  # 0-25
    departure_time_match_score: int  # 0-20
    schedule_flexibility_score: int  # 0-10
    rating_raw_score: int  # 0-15
    completion_rate_raw_score: int  # 0-5


@dataclass(frozen=True)
class RouteDetails:
    travel_time: int  # seconds
    is_express_available: bool
    transfer_count: int
    congestion_level: CongestionBucket


@dataclass(frozen=True)
class MatchingResult:
    giller_id: str
    giller_name: str
    total_score: int  # 0-100
    route_match_score: int  # 0-50
    time_match_score: int  # 0-30
    rating_score: int  # 0-15
    completion_rate_score: int  # 0-5
    scores: ScoreBreakdown
    route_details: RouteDetails
    reasons: Tuple[str, ...] = ()
