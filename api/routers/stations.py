# -*- coding: utf-8 -*-
from fastapi import APIRouter, HTTPException, Query
from api.dependencies import registry
from api.schemas import LineOut, NearestStationItem, NearestStationResponse, StationOut

router = APIRouter()


def _to_station_out(station):
    return StationOut(
        station_id=station.station_id,
        name=station.name,
        name_en=station.name_en,
        lines=[
            LineOut(
                line_id=line.line_id,
                name=line.name,
                code=line.code,
                color=line.color,
                line_type=line.line_type.value,
            )
            for line in station.lines
        ],
        lat=station.latitude,
        lng=station.longitude,
        is_transfer=station.is_transfer,
    )


@router.get(
    "/stations",
    response_model=list[StationOut],
    summary="역 목록 조회",
    description="매칭에 사용하는 주요역 전체 목록을 반환합니다. "
    "환승역은 노선 코드별로 중복 등록되어 있을 수 있습니다.",
)
async def get_stations():
    engine = registry.get_engine()
    return [_to_station_out(s) for s in engine.directory.all()]


@router.get(
    "/stations/search",
    response_model=list[StationOut],
    summary="역 이름 검색",
    description="한글/영문 역명 부분 일치 검색 (대소문자 무시).",
)
async def search_stations(q: str = Query(..., min_length=1, max_length=20)):
    engine = registry.get_engine()
    return [_to_station_out(s) for s in engine.directory.search(q)]


@router.get(
    "/stations/{station_id}",
    response_model=StationOut,
    summary="역 상세 조회",
)
async def get_station(station_id: str):
    engine = registry.get_engine()
    station = engine.directory.get_by_id(station_id)
    if station is None:
        raise HTTPException(status_code=404, detail=f"역을 찾을 수 없습니다: {station_id}")
    return _to_station_out(station)


@router.get(
    "/lines/{line_id}/stations",
    response_model=list[StationOut],
    summary="노선별 역 목록",
)
async def get_line_stations(line_id: str):
    engine = registry.get_engine()
    return [_to_station_out(s) for s in engine.directory.get_by_line(line_id)]


@router.get(
    "/nearest-station",
    response_model=NearestStationResponse,
    summary="GPS 기반 최근접 역 조회",
    description="주어진 위도/경도 좌표에서 가장 가까운 역 3개를 "
    "Haversine 공식으로 계산하여 반환합니다. 거리(m) 포함.",
    response_description="최근접 3개역 (ID, 이름, 거리, 좌표)",
)
async def get_nearest_station(
    lat: float = Query(..., ge=-90, le=90, description="위도 (예: 37.4979)"),
    lng: float = Query(..., ge=-180, le=180, description="경도 (예: 127.0276)"),
):
    engine = registry.get_engine()
    nearest_3 = engine.directory.nearest(lat, lng, limit=3)

    return NearestStationResponse(
        stations=[
            NearestStationItem(
                station_id=station.station_id,
                name=station.name,
                distance_m=round(dist, 1),
                lat=station.latitude,
                lng=station.longitude,
            )
            for station, dist in nearest_3
        ]
    )
