from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
HHMM = Annotated[str, Field(pattern=HHMM_PATTERN)]
DayOfWeek = Annotated[int, Field(ge=1, le=7)]  # 1=월 ... 7=일
PACKAGE_SIZE = Literal["small", "medium", "large"]
CONGESTION_BUCKET = Literal["low", "medium", "high"]


# --- Matching Schemas ---

class GillerRouteIn(BaseModel):
    giller_id: str = Field(max_length=64)
    giller_name: str = Field("익명", max_length=40)
    start_station: str = Field(max_length=20)  # 역명 (정확히 일치)
    end_station: str = Field(max_length=20)
    departure_time: HHMM
    days_of_week: List[DayOfWeek] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    rating: float = Field(3.5, ge=0.0, le=5.0)
    total_deliveries: int = Field(0, ge=0)
    completed_deliveries: int = Field(0, ge=0)


class DeliveryRequestIn(BaseModel):
    request_id: str = Field(max_length=64)
    pickup_station_name: str = Field(max_length=20)
    delivery_station_name: str = Field(max_length=20)
    pickup_start_time: HHMM
    pickup_end_time: HHMM
    delivery_deadline: HHMM
    preferred_days: List[DayOfWeek] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    package_size: PACKAGE_SIZE = "small"
    package_weight: float = Field(1.0, ge=0.0, le=30.0)  # kg


class MatchRequest(BaseModel):
    gillers: List[GillerRouteIn] = Field(max_length=500)
    request: DeliveryRequestIn
    top_n: Optional[int] = Field(None, ge=0, le=100)  # None이면 MATCH_TOP_N
    day_of_week: Optional[DayOfWeek] = None  # 지정 시 해당 요일 운행 길러만


class ScoreBreakdownOut(BaseModel):
    pickup_match_score: int
    delivery_match_score: int
    departure_time_match_score: int
    schedule_flexibility_score: int
    rating_raw_score: int
    completion_rate_raw_score: int


class RouteDetailsOut(BaseModel):
    travel_time: int  # seconds
    is_express_available: bool
    transfer_count: int
    congestion_level: CONGESTION_BUCKET


class MatchingResultOut(BaseModel):
    giller_id: str
    giller_name: str
    total_score: int
    route_match_score: int
    time_match_score: int
    rating_score: int
    completion_rate_score: int
    scores: ScoreBreakdownOut
    route_details: RouteDetailsOut
    reasons: List[str]


class MatchResponse(BaseModel):
    request_id: str
    total_candidates: int
    skipped_gillers: List[str] = []  # 경로 역을 찾지 못해 제외된 길러
    matches: List[MatchingResultOut]


# --- Station Schemas ---

class LineOut(BaseModel):
    line_id: str
    name: str
    code: str
    color: str
    line_type: str


class StationOut(BaseModel):
    station_id: str
    name: str
    name_en: str
    lines: List[LineOut]
    lat: float
    lng: float
    is_transfer: bool


class NearestStationItem(BaseModel):
    station_id: str
    name: str
    distance_m: float
    lat: float
    lng: float


class NearestStationResponse(BaseModel):
    stations: List[NearestStationItem]


# --- Transit Schemas ---

class TravelTimeResponse(BaseModel):
    from_id: str
    to_id: str
    normal_time: int
    express_time: Optional[int] = None
    express_time_saved: int = 0
    transfer_count: int
    transfer_stations: List[str]
    has_express: bool
    walking_distance: int
    estimated: bool = False


class ExpressIntervalsOut(BaseModel):
    rush_hour_morning: int
    rush_hour_evening: int
    daytime: int
    night: int


class ExpressScheduleOut(BaseModel):
    line_id: str
    service_type: str
    type_name: str
    operating_days: List[int]
    first_train: str
    last_train: str
    intervals: ExpressIntervalsOut
    stops: List[str]
    time_savings: Dict[str, int]


class NextExpressResponse(BaseModel):
    line_id: str
    station_id: str
    current_time: str
    next_departure: str
    frequency_score: int


class CongestionResponse(BaseModel):
    line_id: str
    time: str
    level: int
    score: int
    is_rush_hour: bool
    rush_hour_penalty: int
    known_line: bool
