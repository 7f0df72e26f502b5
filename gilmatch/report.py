# -*- coding: utf-8 -*-
"""매칭 결과 → pandas DataFrame 변환 및 요약 통계."""
from typing import Dict, Iterable

import numpy as np
import pandas as pd

from gilmatch.models import MatchingResult

RESULT_COLUMNS = [
    "rank", "giller_id", "giller_name", "total_score",
    "route_match_score", "time_match_score", "rating_score", "completion_rate_score",
    "pickup_match_score", "delivery_match_score",
    "departure_time_match_score", "schedule_flexibility_score",
    "travel_time_min", "is_express_available", "transfer_count", "congestion_level",
    "reasons",
]


def results_to_frame(results: Iterable[MatchingResult]) -> pd.DataFrame:
    """정렬된 매칭 결과를 1행 1매칭 DataFrame으로 펼친다 (rank는 1부터)."""
    rows = []
    for rank, r in enumerate(results, start=1):
        rows.append({
            "rank": rank,
            "giller_id": r.giller_id,
            "giller_name": r.giller_name,
            "total_score": r.total_score,
            "route_match_score": r.route_match_score,
            "time_match_score": r.time_match_score,
            "rating_score": r.rating_score,
            "completion_rate_score": r.completion_rate_score,
            "pickup_match_score": r.scores.pickup_match_score,
            "delivery_match_score": r.scores.delivery_match_score,
            "departure_time_match_score": r.scores.departure_time_match_score,
            "schedule_flexibility_score": r.scores.schedule_flexibility_score,
            "travel_time_min": round(r.route_details.travel_time / 60, 1),
            "is_express_available": r.route_details.is_express_available,
            "transfer_count": r.route_details.transfer_count,
            "congestion_level": r.route_details.congestion_level.value,
            "reasons": " / ".join(r.reasons),
        })
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def summarize_scores(df: pd.DataFrame) -> Dict[str, float]:
    if df.empty:
        return {"count": 0, "mean": 0.0, "median": 0.0, "p90": 0.0, "max": 0.0}
    scores = df["total_score"].to_numpy(dtype=float)
    return {
        "count": int(scores.size),
        "mean": round(float(np.mean(scores)), 2),
        "median": round(float(np.median(scores)), 2),
        "p90": round(float(np.percentile(scores, 90)), 2),
        "max": float(np.max(scores)),
    }
