"""
pytest 설정 파일
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="session")
def test_client():
    """FastAPI 테스트 클라이언트 픽스처"""
    from api.app import app
    with TestClient(app) as client:
        yield client


@pytest.fixture(scope="session")
def engine():
    """내장 참조 테이블 기반 MatchingEngine 픽스처"""
    from gilmatch.engine import build_default_engine
    return build_default_engine()


@pytest.fixture(scope="session")
def directory():
    from gilmatch.stations import default_directory
    return default_directory()


@pytest.fixture
def make_giller(directory):
    """길러 경로 팩토리 (역명으로 지정)"""
    from gilmatch.models import GillerRoute

    def _make(giller_id="g1", start="서울역", end="강남역", departure_time="08:00",
              days_of_week=(1, 2, 3, 4, 5), rating=4.5, total=0, completed=0, name=None):
        return GillerRoute(
            giller_id=giller_id,
            giller_name=name or f"길러 {giller_id}",
            start_station=directory.get_by_name(start),
            end_station=directory.get_by_name(end),
            departure_time=departure_time,
            days_of_week=tuple(days_of_week),
            rating=rating,
            total_deliveries=total,
            completed_deliveries=completed,
        )

    return _make


@pytest.fixture
def make_request():
    """배송 요청 팩토리"""
    from gilmatch.models import DeliveryRequest

    def _make(pickup="서울역", delivery="강남역", pickup_start="08:00",
              preferred_days=(1, 2, 3, 4, 5), request_id="r1"):
        return DeliveryRequest(
            request_id=request_id,
            pickup_station_name=pickup,
            delivery_station_name=delivery,
            pickup_start_time=pickup_start,
            pickup_end_time="08:20",
            delivery_deadline="09:00",
            preferred_days=tuple(preferred_days),
            package_size="small",
            package_weight=2.0,
        )

    return _make


@pytest.fixture
def sample_match_payload():
    """/api/match 요청 본문 샘플"""
    return {
        "gillers": [
            {
                "giller_id": "g1",
                "giller_name": "김길러",
                "start_station": "서울역",
                "end_station": "강남역",
                "departure_time": "08:00",
                "days_of_week": [1, 2, 3, 4, 5],
                "rating": 4.5,
            },
            {
                "giller_id": "g2",
                "giller_name": "이길러",
                "start_station": "잠실역",
                "end_station": "도봉산역",
                "departure_time": "18:30",
                "days_of_week": [6, 7],
                "rating": 3.0,
                "total_deliveries": 10,
                "completed_deliveries": 5,
            },
        ],
        "request": {
            "request_id": "req-1",
            "pickup_station_name": "서울역",
            "delivery_station_name": "강남역",
            "pickup_start_time": "08:00",
            "pickup_end_time": "08:20",
            "delivery_deadline": "09:00",
            "preferred_days": [1, 2, 3, 4, 5],
            "package_size": "small",
            "package_weight": 2.0,
        },
    }
