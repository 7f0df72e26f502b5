"""Common utilities for gilmatch."""
import math
import re

EARTH_RADIUS_M = 6_371_000  # Earth radius in meters

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(value):
    """'HH:mm' 문자열을 (hour, minute) 튜플로 변환한다."""
    match = _HHMM_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"시간 형식이 올바르지 않습니다 (HH:mm): {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"시간 범위를 벗어났습니다: {value!r}")
    return hour, minute


def to_minutes(value):
    """'HH:mm' → 자정 기준 분."""
    hour, minute = parse_hhmm(value)
    return hour * 60 + minute


def format_minutes(total_minutes):
    """자정 기준 분 → 'HH:mm' (24시간 초과분은 다음날로 넘긴다)."""
    total_minutes = int(total_minutes) % (24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def round_half_up(value):
    """0.5는 올림. 내장 round()의 banker's rounding과 다르다 (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def clamp(value, lower, upper):
    return max(lower, min(upper, value))


def haversine(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Calculate distance in meters between two coordinates using Haversine formula."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c
