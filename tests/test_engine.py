# -*- coding: utf-8 -*-
"""
MatchingEngine 유닛 테스트
"""
import logging
from dataclasses import replace

import pytest

from gilmatch.engine import (
    MatchingEngine,
    MatchingParams,
    REASON_COMPLETION_CHECK,
    REASON_COMPLETION_HIGH,
    REASON_RATING_TOP,
    REASON_ROUTE_HIGH,
    REASON_ROUTE_PERFECT,
    REASON_TIME_LOW,
    REASON_TIME_PERFECT,
    StationNotFoundError,
    congestion_bucket,
    filter_available_gillers,
    generate_matching_reasons,
)
from gilmatch.models import CongestionBucket


class TestMatchingScore:
    """calculate_matching_score 시나리오 테스트"""

    def test_perfect_commute_match(self, engine, make_giller, make_request):
        """출발/도착역이 픽업/배송역과 같고 시간/요일이 일치하는 길러"""
        result = engine.calculate_matching_score(make_giller(), make_request())

        assert result.route_match_score == 50
        assert result.scores.pickup_match_score == 25
        assert result.scores.delivery_match_score == 25
        assert result.scores.departure_time_match_score == 20
        assert result.scores.schedule_flexibility_score == 10
        assert result.time_match_score == 30
        assert result.rating_score == 13  # 13.125
        assert result.completion_rate_score == 3  # 이력 없음 2.5
        assert result.total_score == 96

    def test_perfect_match_reasons(self, engine, make_giller, make_request):
        result = engine.calculate_matching_score(make_giller(), make_request())
        assert list(result.reasons) == [
            REASON_ROUTE_PERFECT,
            REASON_TIME_PERFECT,
            REASON_RATING_TOP,
            REASON_COMPLETION_CHECK,  # 반올림 전 2.5 기준
        ]

    def test_route_details(self, engine, make_giller, make_request):
        """경로 상세는 길러 출발역→픽업역, 픽업역→배송역 구간 합"""
        result = engine.calculate_matching_score(make_giller(), make_request())
        details = result.route_details

        # 150-150 구간은 테이블에 없음 → 0, 150-222 = 35분
        assert details.travel_time == 35 * 60
        assert details.is_express_available is True
        assert details.transfer_count == 1
        assert details.congestion_level == CongestionBucket.HIGH

    def test_weak_match(self, engine, make_giller, make_request):
        """노선 일부만 겹치고 시간/요일이 어긋나는 길러"""
        giller = make_giller(
            start="잠실역", end="도봉산역", departure_time="18:30",
            days_of_week=(6, 7), rating=3.0, total=10, completed=5,
        )
        result = engine.calculate_matching_score(giller, make_request())

        assert result.scores.pickup_match_score == 15  # 서울역: 노선 공유 없음
        assert result.scores.delivery_match_score == 20  # 강남역: 2호선 공유
        assert result.route_match_score == 35
        assert result.time_match_score == 0
        assert result.rating_score == 8  # 7.5
        assert result.completion_rate_score == 3  # 2.5
        assert result.total_score == 46
        assert list(result.reasons) == [REASON_ROUTE_HIGH, REASON_TIME_LOW, REASON_COMPLETION_CHECK]

        assert result.route_details.travel_time == (30 + 35) * 60
        assert result.route_details.transfer_count == 2

    def test_partial_time_match(self, engine, make_giller, make_request):
        """30분 차이 → 10점, 5일 중 3일 → 6점"""
        giller = make_giller(departure_time="08:30", days_of_week=(1, 2, 3))
        result = engine.calculate_matching_score(giller, make_request())

        assert result.scores.departure_time_match_score == 10
        assert result.scores.schedule_flexibility_score == 6
        assert result.time_match_score == 16

    def test_unknown_request_station(self, engine, make_giller, make_request):
        with pytest.raises(StationNotFoundError) as exc_info:
            engine.calculate_matching_score(make_giller(), make_request(pickup="없는역"))
        assert exc_info.value.station_name == "없는역"
        assert isinstance(exc_info.value, ValueError)

    def test_total_is_sum_of_rounded_parts(self, engine, make_giller, make_request):
        giller = make_giller(departure_time="08:13", days_of_week=(1, 3), rating=2.2, total=2, completed=1)
        result = engine.calculate_matching_score(giller, make_request())
        assert result.total_score == (
            result.route_match_score + result.time_match_score
            + result.rating_score + result.completion_rate_score
        )


class TestStationOnRoute:
    """역-경로 3단계 점수"""

    @pytest.mark.parametrize("target_id, expected", [
        ("150", 25),  # 출발역
        ("222", 25),  # 도착역
        ("223", 20),  # 2호선 공유
        ("426", 20),  # 4호선 공유 (서울역)
        ("922", 20),  # 같은 이름이지만 다른 ID
        ("750", 15),  # 7호선
    ])
    def test_tiers(self, engine, directory, target_id, expected):
        start = directory.get_by_id("150")
        end = directory.get_by_id("222")
        target = directory.get_by_id(target_id)
        assert engine.calculate_station_on_route_score(start, end, target) == expected


class TestComponentScores:
    """평점/완료율/시간 점수 경계값"""

    @pytest.mark.parametrize("rating, expected", [
        (1.0, 0.0),
        (5.0, 15.0),
        (3.0, 7.5),
        (0.0, 0.0),  # 하한 clamp
        (7.0, 15.0),  # 상한 clamp
    ])
    def test_rating_score(self, engine, rating, expected):
        assert engine.calculate_rating_score(rating) == pytest.approx(expected)

    def test_completion_rate_no_history(self, engine):
        assert engine.calculate_completion_rate_score(0, 0) == 2.5
        assert engine.calculate_completion_rate_score(-1, 3) == 2.5

    def test_completion_rate(self, engine):
        assert engine.calculate_completion_rate_score(10, 10) == 5.0
        assert engine.calculate_completion_rate_score(10, 8) == pytest.approx(4.0)
        assert engine.calculate_completion_rate_score(10, 15) == 5.0  # 완료 > 전체
        assert engine.calculate_completion_rate_score(10, -2) == 0.0

    def test_completion_half_rounds_up(self, engine, make_giller, make_request):
        """2.5는 3으로 반올림 (banker's rounding 아님)"""
        giller = make_giller(total=2, completed=1)
        result = engine.calculate_matching_score(giller, make_request())
        assert result.completion_rate_score == 3

    def test_empty_preferred_days(self, engine, make_giller, make_request):
        score, breakdown = engine.calculate_time_match_score(
            make_giller(), make_request(preferred_days=())
        )
        assert breakdown.schedule_flexibility == 0.0
        assert score == 20.0

    @pytest.mark.parametrize("departure_time, expected", [
        ("10:00", 0.0),
        ("09:00", 0.0),  # 60분 차이
        ("08:57", 1.0),  # 57분 차이
        ("07:03", 1.0),  # 이른 출발도 차이의 절댓값
    ])
    def test_departure_time_floor(self, engine, make_giller, make_request, departure_time, expected):
        """3분당 1점 감점, 60분 이상 차이는 0점"""
        _, breakdown = engine.calculate_time_match_score(
            make_giller(departure_time=departure_time), make_request(pickup_start="08:00")
        )
        assert breakdown.departure_time_match == pytest.approx(expected)

    def test_rating_score_sweep(self, engine):
        """평점 1-5 구간에서 0-15 범위, 단조 증가"""
        ratings = [1.0 + i * 0.1 for i in range(41)]
        scores = [engine.calculate_rating_score(r) for r in ratings]

        assert all(0.0 <= s <= 15.0 for s in scores)
        assert all(a <= b for a, b in zip(scores, scores[1:]))
        assert scores[0] == pytest.approx(0.0)
        assert scores[-1] == pytest.approx(15.0)

    def test_component_caps(self, engine, make_giller, make_request):
        """MatchingParams의 경로/시간 상한 적용"""
        capped = MatchingEngine(
            engine.directory, engine.resolver,
            params=replace(MatchingParams(), route_max=40.0, time_max=25.0),
        )
        result = capped.calculate_matching_score(make_giller(), make_request())

        assert result.route_match_score == 40
        assert result.time_match_score == 25
        assert result.scores.pickup_match_score == 25  # 세부 점수는 그대로
        assert result.total_score == 40 + 25 + 13 + 3


class TestBatchMatching:
    """여러 길러 일괄 매칭 / 정렬 / 필터"""

    def test_failed_giller_is_excluded(self, engine, make_giller, make_request, caplog):
        gillers = [
            make_giller("g1"),
            make_giller("bad", departure_time="8시"),
            make_giller("g3", start="잠실역", end="도봉산역"),
        ]
        with caplog.at_level(logging.WARNING, logger="gilmatch.engine"):
            results = engine.match_gillers_to_request(gillers, make_request())

        assert len(results) == 2
        assert [r.giller_id for r in results] == ["g1", "g3"]
        assert "Failed to match giller bad" in caplog.text

    def test_unknown_request_station_returns_empty(self, engine, make_giller, make_request):
        results = engine.match_gillers_to_request([make_giller()], make_request(delivery="없는역"))
        assert results == []

    def test_sorted_descending_and_stable(self, engine, make_giller, make_request):
        gillers = [
            make_giller("low", start="도봉산역", end="수락산역", rating=1.0),
            make_giller("a"),
            make_giller("b"),
        ]
        results = engine.match_gillers_to_request(gillers, make_request())

        scores = [r.total_score for r in results]
        assert scores == sorted(scores, reverse=True)
        # 동점이면 입력 순서 유지
        assert [r.giller_id for r in results] == ["a", "b", "low"]

    def test_top_matches(self, engine, make_giller, make_request):
        gillers = [make_giller(f"g{i}") for i in range(8)]
        assert len(engine.get_top_matches(gillers, make_request())) == 5
        assert len(engine.get_top_matches(gillers, make_request(), top_n=2)) == 2
        assert engine.get_top_matches(gillers, make_request(), top_n=0) == []

    def test_top_matches_is_prefix_of_full_ranking(self, engine, make_giller, make_request):
        """상위 N개는 전체 정렬 결과의 앞 N개와 같다"""
        gillers = [
            make_giller("low", start="도봉산역", end="수락산역", rating=1.0),
            make_giller("mid", start="잠실역", end="도봉산역", departure_time="08:30", rating=3.0),
            make_giller("top"),
            make_giller("late", departure_time="09:30", days_of_week=(1,), rating=2.0),
            make_giller("tie"),
        ]
        request = make_request()
        ranking = engine.match_gillers_to_request(gillers, request)

        assert len({r.total_score for r in ranking}) > 2
        for n in range(len(gillers) + 2):
            assert engine.get_top_matches(gillers, request, top_n=n) == ranking[:n]

    def test_top_matches_negative(self, engine, make_giller, make_request):
        with pytest.raises(ValueError):
            engine.get_top_matches([make_giller()], make_request(), top_n=-1)

    def test_default_top_n_from_params(self, engine, make_giller, make_request):
        custom = MatchingEngine(
            engine.directory, engine.resolver,
            params=replace(MatchingParams(), default_top_n=3),
        )
        gillers = [make_giller(f"g{i}") for i in range(6)]
        assert len(custom.get_top_matches(gillers, make_request())) == 3

    def test_find_matches_with_day_filter(self, engine, make_giller, make_request):
        gillers = [make_giller("weekday"), make_giller("weekend", days_of_week=(6, 7))]
        results = engine.find_matches(gillers, make_request(), day_of_week=7)
        assert [r.giller_id for r in results] == ["weekend"]

    def test_filter_available_gillers(self, make_giller):
        gillers = [make_giller("a", days_of_week=(1,)), make_giller("b", days_of_week=(1, 2))]
        assert [g.giller_id for g in filter_available_gillers(gillers, 2)] == ["b"]

    @pytest.mark.parametrize("day", [0, 8])
    def test_filter_invalid_day(self, make_giller, day):
        with pytest.raises(ValueError):
            filter_available_gillers([make_giller()], day)


class TestHelpers:

    @pytest.mark.parametrize("time, expected", [
        ("06:59", CongestionBucket.LOW),
        ("07:00", CongestionBucket.HIGH),
        ("09:30", CongestionBucket.HIGH),
        ("12:00", CongestionBucket.MEDIUM),
        ("16:59", CongestionBucket.MEDIUM),
        ("17:00", CongestionBucket.HIGH),
        ("19:59", CongestionBucket.HIGH),
        ("20:00", CongestionBucket.LOW),
    ])
    def test_congestion_bucket(self, time, expected):
        assert congestion_bucket(time) == expected

    def test_reasons_all(self):
        assert generate_matching_reasons(50, 30, 15, 5) == [
            REASON_ROUTE_PERFECT, REASON_TIME_PERFECT, REASON_RATING_TOP, REASON_COMPLETION_HIGH,
        ]

    def test_reasons_middle_band_is_silent(self):
        """경로 20 미만, 시간 15-20, 평점 9 미만, 완료율 3-4는 태그 없음"""
        assert generate_matching_reasons(10, 17, 5, 3.5) == []
