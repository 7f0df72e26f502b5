from fastapi import APIRouter, HTTPException, Query
from api.dependencies import registry
from api.schemas import (
    CongestionResponse, ExpressIntervalsOut, ExpressScheduleOut, HHMM_PATTERN,
    NextExpressResponse, TravelTimeResponse,
)

router = APIRouter()


@router.get(
    "/travel-time",
    response_model=TravelTimeResponse,
    summary="역 간 소요시간 조회",
    description="소요시간 테이블에서 정방향, 없으면 역방향 값을 조회합니다. "
    "estimate=true이면 테이블에 없는 쌍을 좌표 거리로 추정합니다.",
)
async def get_travel_time(
    from_id: str = Query(..., max_length=10),
    to_id: str = Query(..., max_length=10),
    estimate: bool = False,
):
    engine = registry.get_engine()
    info = engine.resolver.get_travel_time(from_id, to_id)

    if info is None and estimate:
        from_station = engine.directory.get_by_id(from_id)
        to_station = engine.directory.get_by_id(to_id)
        if from_station is None or to_station is None:
            raise HTTPException(status_code=404, detail="역을 찾을 수 없습니다")
        info = engine.resolver.get_or_estimate(from_station, to_station)

    if info is None:
        raise HTTPException(status_code=404, detail=f"소요시간 정보가 없습니다: {from_id}-{to_id}")

    return TravelTimeResponse(
        from_id=from_id,
        to_id=to_id,
        normal_time=info.normal_time,
        express_time=info.express_time,
        express_time_saved=engine.resolver.get_express_time_saved(from_id, to_id),
        transfer_count=info.transfer_count,
        transfer_stations=list(info.transfer_stations),
        has_express=info.has_express,
        walking_distance=info.walking_distance,
        estimated=info.estimated,
    )


@router.get(
    "/express/{line_id}",
    response_model=list[ExpressScheduleOut],
    summary="노선 급행 운행 정보",
)
async def get_express_schedules(line_id: str):
    engine = registry.get_engine()
    return [
        ExpressScheduleOut(
            line_id=s.line_id,
            service_type=s.service_type.value,
            type_name=s.type_name,
            operating_days=list(s.operating_days),
            first_train=s.first_train,
            last_train=s.last_train,
            intervals=ExpressIntervalsOut(
                rush_hour_morning=s.intervals.rush_hour_morning,
                rush_hour_evening=s.intervals.rush_hour_evening,
                daytime=s.intervals.daytime,
                night=s.intervals.night,
            ),
            stops=list(s.stops),
            time_savings=dict(s.time_savings),
        )
        for s in engine.express.get_express_schedules(line_id)
    ]


@router.get(
    "/express/{line_id}/next",
    response_model=NextExpressResponse,
    summary="다음 급행 출발 시각",
    description="해당 역에 정차하는 급행의 시간대별 배차 간격으로 다음 출발 시각을 계산합니다.",
)
async def get_next_express(
    line_id: str,
    station_id: str = Query(..., max_length=10),
    time: str = Query(..., pattern=HHMM_PATTERN),
    within_service_hours: bool = False,
):
    engine = registry.get_engine()
    next_departure = engine.express.get_next_express_time(
        station_id, line_id, time, within_service_hours=within_service_hours
    )
    if next_departure is None:
        raise HTTPException(status_code=404, detail="해당 역에 정차하는 급행이 없습니다")

    return NextExpressResponse(
        line_id=line_id,
        station_id=station_id,
        current_time=time,
        next_departure=next_departure,
        frequency_score=engine.express.get_train_frequency_score(line_id, time),
    )


@router.get(
    "/congestion/{line_id}",
    response_model=CongestionResponse,
    summary="노선 혼잡도 조회",
    description="시간대별 혼잡도(1-10), 혼잡도 점수(0-10), 출퇴근 시간 여부를 반환합니다. "
    "등록되지 않은 노선은 보통(5)으로 간주합니다.",
)
async def get_congestion(line_id: str, time: str = Query(..., pattern=HHMM_PATTERN)):
    engine = registry.get_engine()
    model = engine.congestion
    return CongestionResponse(
        line_id=line_id,
        time=time,
        level=model.get_congestion_level(line_id, time),
        score=model.get_congestion_score(line_id, time),
        is_rush_hour=model.is_rush_hour(time),
        rush_hour_penalty=model.get_rush_hour_penalty(time),
        known_line=model.get_congestion_data(line_id) is not None,
    )
