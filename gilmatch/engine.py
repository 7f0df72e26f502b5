# -*- coding: utf-8 -*-
"""
Matching Engine
===============
배송 요청 1건에 대해 길러(배송원) 후보의 출퇴근 경로를 점수화하고 정렬한다.

Score (0-100):
    total = R + T + P + C     (각 항목을 정수로 반올림한 뒤 합산)

    R  경로 일치도   0-50   pickup(0-25) + delivery(0-25)
    T  시간 일치도   0-30   출발 시간(0-20) + 요일 유연성(0-10)
    P  평점          0-15   rating 1-5 → 0-15 선형
    C  완료율        0-5    completed/total × 5 (이력 없으면 2.5)

역-경로 점수는 그래프 탐색이 아니라 3단계 분류다:
    25  대상 역이 길러 출발/도착역과 동일
    20  대상 역이 출발/도착역과 노선을 공유
    15  그 외 (환승 1회로 가정)

경로 상세(travel_time, has_express, transfer_count)는 소요시간 테이블에서
길러 출발역→픽업역, 픽업역→배송역 두 구간을 조회해 합친 참고값이며 점수에는
반영되지 않는다. 테이블에 없는 구간은 0으로 계산한다.

혼잡 등급(congestion)은 길러 출발 시각 기준 07-09시·17-19시(양끝 포함) high,
09-17시 medium, 그 외 low이다. 혼잡도 모델의 출퇴근 구간(07-09, 18-20)과
경계가 다르며 두 정의를 각각 유지한다.
"""
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

from gilmatch.congestion import CongestionModel, default_congestion_model
from gilmatch.express import ExpressScheduleModel, default_express_model
from gilmatch.models import (
    CongestionBucket,
    DeliveryRequest,
    GillerRoute,
    MatchingResult,
    RouteBreakdown,
    RouteDetails,
    ScoreBreakdown,
    Station,
    TimeBreakdown,
)
from gilmatch.stations import StationDirectory, default_directory
from gilmatch.travel_times import TravelTimeResolver, default_resolver
from gilmatch.utils import clamp, parse_hhmm, round_half_up, to_minutes

logger = logging.getLogger(__name__)


class StationNotFoundError(ValueError):
    """요청 역명이 역 목록에 없음 (해당 매칭 1건만 실패)."""

    def __init__(self, station_name: str):
        self.station_name = station_name
        super().__init__(f"Station not found: {station_name}")


class RouteTier(IntEnum):
    SAME_STATION = 25
    SAME_LINE = 20
    ONE_TRANSFER = 15


# 매칭 사유 태그
REASON_ROUTE_PERFECT = "🛤️ 경로 완벽 일치"
REASON_ROUTE_HIGH = "🛤️ 경로 적합도 높음"
REASON_ROUTE_FAIR = "🛤️ 경로 적합도 보통"
REASON_TIME_PERFECT = "⏰ 시간 완벽 일치"
REASON_TIME_HIGH = "⏰ 시간 적합도 높음"
REASON_TIME_LOW = "⚠️ 시간 일치도 낮음"
REASON_RATING_TOP = "⭐ 최고 평점"
REASON_RATING_HIGH = "⭐ 높은 평점"
REASON_COMPLETION_HIGH = "✅ 높은 완료율"
REASON_COMPLETION_CHECK = "⚠️ 완료율 확인 필요"


@dataclass(frozen=True)
class MatchingParams:
    route_max: float = 50.0
    time_max: float = 30.0
    rating_max: float = 15.0
    completion_max: float = 5.0
    departure_max: float = 20.0
    departure_minutes_per_point: float = 3.0  # 60분 차이에서 0점
    flexibility_max: float = 10.0
    neutral_completion_score: float = 2.5
    min_rating: float = 1.0
    max_rating: float = 5.0
    default_top_n: int = 5


def congestion_bucket(departure_time: str) -> CongestionBucket:
    hour, _ = parse_hhmm(departure_time)
    if 7 <= hour <= 9 or 17 <= hour <= 19:
        return CongestionBucket.HIGH
    if 9 <= hour <= 17:
        return CongestionBucket.MEDIUM
    return CongestionBucket.LOW


class MatchingEngine:
    """
    길러 경로 ↔ 배송 요청 매칭 점수 계산기.

    참조 테이블(역/소요시간/급행/혼잡도)은 생성 시 주입되며 읽기 전용이다.
    인스턴스는 상태를 갖지 않으므로 여러 스레드에서 동시에 호출해도 안전하다.
    """

    def __init__(
        self,
        directory: StationDirectory,
        resolver: TravelTimeResolver,
        express: Optional[ExpressScheduleModel] = None,
        congestion: Optional[CongestionModel] = None,
        params: Optional[MatchingParams] = None,
    ):
        self.directory = directory
        self.resolver = resolver
        self.express = express if express is not None else default_express_model()
        self.congestion = congestion if congestion is not None else default_congestion_model()
        self.params = params if params is not None else MatchingParams()

    # ----- component scores -------------------------------------------------

    def calculate_station_on_route_score(
        self, start_station: Station, end_station: Station, target_station: Station
    ) -> int:
        target_id = target_station.station_id
        if target_id in (start_station.station_id, end_station.station_id):
            return int(RouteTier.SAME_STATION)

        route_lines = set(start_station.line_ids) | set(end_station.line_ids)
        if any(line_id in route_lines for line_id in target_station.line_ids):
            return int(RouteTier.SAME_LINE)

        return int(RouteTier.ONE_TRANSFER)

    def calculate_route_match_score(
        self, giller: GillerRoute, pickup_station: Station, delivery_station: Station
    ) -> Tuple[float, RouteBreakdown]:
        pickup_match = self.calculate_station_on_route_score(
            giller.start_station, giller.end_station, pickup_station
        )
        delivery_match = self.calculate_station_on_route_score(
            giller.start_station, giller.end_station, delivery_station
        )

        legs = [
            self.resolver.get_travel_time(giller.start_station.station_id, pickup_station.station_id),
            self.resolver.get_travel_time(pickup_station.station_id, delivery_station.station_id),
        ]
        travel_time = sum(leg.normal_time for leg in legs if leg is not None)
        has_express = any(leg.has_express for leg in legs if leg is not None)
        transfer_count = sum(leg.transfer_count for leg in legs if leg is not None)

        breakdown = RouteBreakdown(
            pickup_match=pickup_match,
            delivery_match=delivery_match,
            travel_time=travel_time,
            has_express=has_express,
            transfer_count=transfer_count,
            congestion=congestion_bucket(giller.departure_time),
        )
        return min(self.params.route_max, pickup_match + delivery_match), breakdown

    def calculate_time_match_score(
        self, giller: GillerRoute, request: DeliveryRequest
    ) -> Tuple[float, TimeBreakdown]:
        p = self.params
        time_diff = abs(to_minutes(giller.departure_time) - to_minutes(request.pickup_start_time))
        departure_time_match = max(0.0, p.departure_max - time_diff / p.departure_minutes_per_point)

        preferred = list(request.preferred_days)
        if preferred:
            day_match_count = sum(1 for day in preferred if day in giller.days_of_week)
            schedule_flexibility = day_match_count / len(preferred) * p.flexibility_max
        else:
            schedule_flexibility = 0.0

        breakdown = TimeBreakdown(
            departure_time_match=departure_time_match,
            schedule_flexibility=schedule_flexibility,
        )
        return min(p.time_max, departure_time_match + schedule_flexibility), breakdown

    def calculate_rating_score(self, rating: float) -> float:
        """평점 1.0 → 0점, 5.0 → 15점. 범위 밖 입력은 잘라낸다."""
        p = self.params
        rating = clamp(float(rating), p.min_rating, p.max_rating)
        return (rating - p.min_rating) / (p.max_rating - p.min_rating) * p.rating_max

    def calculate_completion_rate_score(self, total_deliveries: int, completed_deliveries: int) -> float:
        p = self.params
        if total_deliveries <= 0:
            return p.neutral_completion_score
        completed = clamp(completed_deliveries, 0, total_deliveries)
        return completed / total_deliveries * p.completion_max

    # ----- matching ---------------------------------------------------------

    def resolve_station(self, name: str) -> Station:
        station = self.directory.get_by_name(name)
        if station is None:
            raise StationNotFoundError(name)
        return station

    def calculate_matching_score(self, giller: GillerRoute, request: DeliveryRequest) -> MatchingResult:
        pickup_station = self.resolve_station(request.pickup_station_name)
        delivery_station = self.resolve_station(request.delivery_station_name)

        route_score, route = self.calculate_route_match_score(giller, pickup_station, delivery_station)
        time_score, timing = self.calculate_time_match_score(giller, request)
        rating_score = self.calculate_rating_score(giller.rating)
        completion_score = self.calculate_completion_rate_score(
            giller.total_deliveries, giller.completed_deliveries
        )

        # 각 항목을 먼저 반올림한 뒤 합산
        route_rounded = round_half_up(route_score)
        time_rounded = round_half_up(time_score)
        rating_rounded = round_half_up(rating_score)
        completion_rounded = round_half_up(completion_score)
        total_score = route_rounded + time_rounded + rating_rounded + completion_rounded

        return MatchingResult(
            giller_id=giller.giller_id,
            giller_name=giller.giller_name,
            total_score=total_score,
            route_match_score=route_rounded,
            time_match_score=time_rounded,
            rating_score=rating_rounded,
            completion_rate_score=completion_rounded,
            scores=ScoreBreakdown(
                pickup_match_score=round_half_up(route.pickup_match),
                delivery_match_score=round_half_up(route.delivery_match),
                departure_time_match_score=round_half_up(timing.departure_time_match),
                schedule_flexibility_score=round_half_up(timing.schedule_flexibility),
                rating_raw_score=rating_rounded,
                completion_rate_raw_score=completion_rounded,
            ),
            route_details=RouteDetails(
                travel_time=route.travel_time,
                is_express_available=route.has_express,
                transfer_count=route.transfer_count,
                congestion_level=route.congestion,
            ),
            reasons=tuple(generate_matching_reasons(
                route_score, time_score, rating_score, completion_score
            )),
        )

    def match_gillers_to_request(
        self, gillers: Iterable[GillerRoute], request: DeliveryRequest
    ) -> List[MatchingResult]:
        """모든 길러를 점수화해 내림차순 정렬. 실패한 길러는 로그만 남기고 제외한다."""
        results = []
        for giller in gillers:
            try:
                results.append(self.calculate_matching_score(giller, request))
            except Exception as e:
                logger.warning("Failed to match giller %s: %s", getattr(giller, "giller_id", "?"), e)
                continue

        # sorted()는 안정 정렬 - 동점이면 입력 순서 유지
        return sorted(results, key=lambda r: r.total_score, reverse=True)

    def get_top_matches(
        self, gillers: Iterable[GillerRoute], request: DeliveryRequest, top_n: Optional[int] = None
    ) -> List[MatchingResult]:
        if top_n is None:
            top_n = self.params.default_top_n
        if top_n < 0:
            raise ValueError(f"top_n은 0 이상이어야 합니다: {top_n}")
        return self.match_gillers_to_request(gillers, request)[:top_n]

    def find_matches(
        self,
        gillers: Iterable[GillerRoute],
        request: DeliveryRequest,
        top_n: Optional[int] = None,
        day_of_week: Optional[int] = None,
    ) -> List[MatchingResult]:
        """운행 요일 필터(선택) → 매칭 → 상위 N개."""
        if day_of_week is not None:
            gillers = filter_available_gillers(gillers, day_of_week)
        return self.get_top_matches(gillers, request, top_n)


def filter_available_gillers(gillers: Iterable[GillerRoute], day_of_week: int) -> List[GillerRoute]:
    """해당 요일(1=월 ... 7=일)에 운행하는 길러만 남긴다."""
    if not 1 <= day_of_week <= 7:
        raise ValueError(f"요일은 1-7 범위여야 합니다: {day_of_week}")
    return [g for g in gillers if day_of_week in g.days_of_week]


def generate_matching_reasons(
    route_match_score: float,
    time_match_score: float,
    rating_score: float,
    completion_rate_score: float,
) -> List[str]:
    """반올림 전 점수 기준 사유 태그. 순서: 경로, 시간, 평점, 완료율."""
    reasons = []

    if route_match_score >= 40:
        reasons.append(REASON_ROUTE_PERFECT)
    elif route_match_score >= 30:
        reasons.append(REASON_ROUTE_HIGH)
    elif route_match_score >= 20:
        reasons.append(REASON_ROUTE_FAIR)

    if time_match_score >= 25:
        reasons.append(REASON_TIME_PERFECT)
    elif time_match_score >= 20:
        reasons.append(REASON_TIME_HIGH)
    elif time_match_score < 15:
        reasons.append(REASON_TIME_LOW)

    if rating_score >= 12:
        reasons.append(REASON_RATING_TOP)
    elif rating_score >= 9:
        reasons.append(REASON_RATING_HIGH)

    if completion_rate_score >= 4:
        reasons.append(REASON_COMPLETION_HIGH)
    elif completion_rate_score < 3:
        reasons.append(REASON_COMPLETION_CHECK)

    return reasons


def build_default_engine(params: Optional[MatchingParams] = None) -> MatchingEngine:
    """내장 참조 테이블로 엔진 구성."""
    engine = MatchingEngine(
        directory=default_directory(),
        resolver=default_resolver(),
        express=default_express_model(),
        congestion=default_congestion_model(),
        params=params,
    )
    logger.info("MatchingEngine: reference tables loaded.")
    logger.info(
        "  stations=%d travel_times=%d express=%d congestion=%d",
        len(engine.directory), len(engine.resolver), len(engine.express), len(engine.congestion),
    )
    return engine
