# -*- coding: utf-8 -*-
"""
가상 길러 풀 매칭 시뮬레이션
내장 역 목록으로 출퇴근 경로를 무작위 생성하고, 배송 요청 1건에 대해 매칭 결과를 출력한다.

사용 예:
    python scripts/simulate_matching.py --pickup 서울역 --delivery 강남역 --time 08:00
    python scripts/simulate_matching.py --pickup 잠실역 --delivery 교대역 --gillers 200 --top 20 --day 6
"""
import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from gilmatch.engine import build_default_engine
from gilmatch.models import DeliveryRequest, GillerRoute
from gilmatch.report import results_to_frame, summarize_scores
from gilmatch.utils import format_minutes, to_minutes

WEEKDAYS = (1, 2, 3, 4, 5)
WEEKEND = (6, 7)


def build_giller_pool(directory, n, seed=42):
    """역명 기준 중복 없는 역 목록에서 출발/도착역을 뽑아 길러 n명 생성."""
    rng = np.random.default_rng(seed)

    stations = []
    seen = set()
    for station in directory.all():
        if station.name not in seen:
            seen.add(station.name)
            stations.append(station)

    pool = []
    for i in range(n):
        start_idx, end_idx = rng.choice(len(stations), size=2, replace=False)
        # 출근 07:00-09:30 위주, 일부 퇴근/주말 경로
        if rng.random() < 0.7:
            departure = int(rng.integers(7 * 60, 9 * 60 + 31))
            days = WEEKDAYS
        else:
            departure = int(rng.integers(17 * 60, 20 * 60 + 1))
            days = WEEKDAYS + WEEKEND if rng.random() < 0.3 else WEEKDAYS

        total = int(rng.integers(0, 50))
        completed = int(rng.binomial(total, 0.9)) if total else 0
        pool.append(GillerRoute(
            giller_id=f"G{i + 1:04d}",
            giller_name=f"길러{i + 1}",
            start_station=stations[start_idx],
            end_station=stations[end_idx],
            departure_time=format_minutes(departure),
            days_of_week=days,
            rating=round(float(rng.uniform(2.5, 5.0)), 1),
            total_deliveries=total,
            completed_deliveries=completed,
        ))
    return pool


def main():
    parser = argparse.ArgumentParser(description="길러 매칭 시뮬레이션")
    parser.add_argument("--pickup", type=str, default="서울역", help="픽업 역명 (정확히 일치)")
    parser.add_argument("--delivery", type=str, default="강남역", help="배송 역명 (정확히 일치)")
    parser.add_argument("--time", type=str, default="08:00", help="픽업 시작 시각 HH:mm")
    parser.add_argument("--window", type=int, default=20, help="픽업 허용 시간 (분)")
    parser.add_argument("--gillers", type=int, default=100, help="생성할 길러 수")
    parser.add_argument("--top", type=int, default=10, help="출력할 상위 매칭 수")
    parser.add_argument("--day", type=int, default=None, help="운행 요일 필터 (1=월 ... 7=일)")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    engine = build_default_engine()
    if engine.directory.get_by_name(args.pickup) is None:
        parser.error(f"픽업 역을 찾을 수 없습니다: {args.pickup}")
    if engine.directory.get_by_name(args.delivery) is None:
        parser.error(f"배송 역을 찾을 수 없습니다: {args.delivery}")

    start = to_minutes(args.time)
    request = DeliveryRequest(
        request_id="SIM-001",
        pickup_station_name=args.pickup,
        delivery_station_name=args.delivery,
        pickup_start_time=args.time,
        pickup_end_time=format_minutes(start + args.window),
        delivery_deadline=format_minutes(start + 60),
        preferred_days=WEEKDAYS,
    )

    pool = build_giller_pool(engine.directory, args.gillers, seed=args.seed)
    results = engine.find_matches(pool, request, top_n=args.top, day_of_week=args.day)
    df = results_to_frame(results)

    print("=" * 60)
    print(f"매칭 시뮬레이션: {args.pickup} → {args.delivery} ({args.time}, 길러 {len(pool)}명)")
    print("=" * 60)

    if df.empty:
        print("매칭 결과가 없습니다.")
        return

    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(df.drop(columns=["reasons"]).to_string(index=False))

    print()
    print("[상위 3명 매칭 사유]")
    for _, row in df.head(3).iterrows():
        print(f"  {row['rank']}. {row['giller_name']} ({row['total_score']}점): {row['reasons']}")

    summary = summarize_scores(df)
    print()
    print(f"[요약] 인원 {summary['count']} | 평균 {summary['mean']} | 중앙값 {summary['median']} "
          f"| p90 {summary['p90']} | 최고 {summary['max']}")


if __name__ == "__main__":
    main()
