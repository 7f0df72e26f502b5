import asyncio
import logging

from fastapi import APIRouter, HTTPException
from api.schemas import (
    MatchRequest, MatchResponse, MatchingResultOut, ScoreBreakdownOut, RouteDetailsOut,
)
from api.dependencies import registry
from gilmatch.engine import StationNotFoundError
from gilmatch.models import DeliveryRequest, GillerRoute

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_giller_routes(engine, gillers):
    """요청 본문의 길러 경로를 GillerRoute로 변환. 역을 찾지 못한 길러는 건너뛴다."""
    routes, skipped = [], []
    for g in gillers:
        start = engine.directory.get_by_name(g.start_station)
        end = engine.directory.get_by_name(g.end_station)
        if start is None or end is None:
            logger.warning("Station not found for giller route %s", g.giller_id)
            skipped.append(g.giller_id)
            continue
        routes.append(GillerRoute(
            giller_id=g.giller_id,
            giller_name=g.giller_name,
            start_station=start,
            end_station=end,
            departure_time=g.departure_time,
            days_of_week=tuple(g.days_of_week),
            rating=g.rating,
            total_deliveries=g.total_deliveries,
            completed_deliveries=g.completed_deliveries,
        ))
    return routes, skipped


def _to_result_out(result):
    return MatchingResultOut(
        giller_id=result.giller_id,
        giller_name=result.giller_name,
        total_score=result.total_score,
        route_match_score=result.route_match_score,
        time_match_score=result.time_match_score,
        rating_score=result.rating_score,
        completion_rate_score=result.completion_rate_score,
        scores=ScoreBreakdownOut(
            pickup_match_score=result.scores.pickup_match_score,
            delivery_match_score=result.scores.delivery_match_score,
            departure_time_match_score=result.scores.departure_time_match_score,
            schedule_flexibility_score=result.scores.schedule_flexibility_score,
            rating_raw_score=result.scores.rating_raw_score,
            completion_rate_raw_score=result.scores.completion_rate_raw_score,
        ),
        route_details=RouteDetailsOut(
            travel_time=result.route_details.travel_time,
            is_express_available=result.route_details.is_express_available,
            transfer_count=result.route_details.transfer_count,
            congestion_level=result.route_details.congestion_level.value,
        ),
        reasons=list(result.reasons),
    )


@router.post(
    "/match",
    response_model=MatchResponse,
    summary="길러 매칭",
    description="배송 요청 1건에 대해 길러 후보들의 출퇴근 경로를 경로 일치도(50), "
    "시간 일치도(30), 평점(15), 완료율(5)로 점수화하여 상위 N명을 반환합니다.",
    response_description="총점 내림차순 매칭 결과와 점수 상세, 매칭 사유",
)
async def match(req: MatchRequest):
    engine = registry.get_engine()

    # 입력 검증: 요청 역 존재 여부 확인
    for name in (req.request.pickup_station_name, req.request.delivery_station_name):
        if engine.directory.get_by_name(name) is None:
            raise HTTPException(status_code=404, detail=f"역을 찾을 수 없습니다: {name}")

    gillers, skipped = _to_giller_routes(engine, req.gillers)
    request = DeliveryRequest(
        request_id=req.request.request_id,
        pickup_station_name=req.request.pickup_station_name,
        delivery_station_name=req.request.delivery_station_name,
        pickup_start_time=req.request.pickup_start_time,
        pickup_end_time=req.request.pickup_end_time,
        delivery_deadline=req.request.delivery_deadline,
        preferred_days=tuple(req.request.preferred_days),
        package_size=req.request.package_size,
        package_weight=req.request.package_weight,
    )

    try:
        results = await asyncio.to_thread(
            engine.find_matches, gillers, request, req.top_n, req.day_of_week
        )
    except StationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Match failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="매칭 계산 중 오류가 발생했습니다")

    return MatchResponse(
        request_id=request.request_id,
        total_candidates=len(req.gillers),
        skipped_gillers=skipped,
        matches=[_to_result_out(r) for r in results],
    )
