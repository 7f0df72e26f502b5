# -*- coding: utf-8 -*-
"""
Station Directory
=================
서울 지하철 주요역(29개) 정적 레지스트리.

데이터가 작고 고정되어 있으므로 조회는 모두 선형 탐색이다.
강남/교대/여의도/양재/역삼/선릉처럼 여러 노선 코드로 중복 등록된 역이 있으며,
이름 조회는 테이블 순서상 첫 번째 역을 돌려준다.
"""
from functools import lru_cache
from typing import List, Optional, Tuple

from gilmatch.models import Line, LineType, Station
from gilmatch.utils import haversine

G = LineType.GENERAL
E = LineType.EXPRESS

# line_id -> (노선명, 색상)
LINE_INFO = {
    "1": ("1호선", "#0052A4"),
    "2": ("2호선", "#009900"),
    "3": ("3호선", "#FF9500"),
    "4": ("4호선", "#00A5DE"),
    "5": ("5호선", "#9B51E0"),
    "6": ("6호선", "#CD7C2F"),
    "7": ("7호선", "#667428"),
    "8": ("8호선", "#EC5C37"),
    "9": ("9호선", "#BDB092"),
    "K4501": ("경춘선", "#0C8E72"),
    "airport": ("공항철도", "#0090D2"),
    "sinbundang": ("신분당선", "#D4003A"),
    "suin": ("수인분당선", "#F5A200"),
    "G410": ("경의중앙선", "#77C4A3"),
}


def _line(line_id, code, line_type=G):
    name, color = LINE_INFO[line_id]
    return Line(line_id=line_id, name=name, code=code, color=color, line_type=line_type)


# (역ID, 역명, 영문명, (위도, 경도), 노선, 환승역 여부)
MAJOR_STATIONS_DATA = [
    # 1호선
    ("150", "서울역", "Seoul Station", (37.5547, 126.9707),
     [_line("1", "150"), _line("4", "426"), _line("K4501", ""), _line("airport", "A01", E)], True),
    ("152", "시청", "City Hall", (37.5661, 126.9795),
     [_line("1", "132"), _line("2", "201")], True),
    ("155", "종각", "Jonggak", (37.5704, 126.9831),
     [_line("1", "131")], False),
    ("156", "종로3가", "Jongno 3-ga", (37.5716, 126.9865),
     [_line("1", "130"), _line("3", "329"), _line("5", "535")], True),
    # 2호선
    ("201", "을지로입구", "Euljiro 1-ga", (37.5677, 126.9858),
     [_line("2", "202")], False),
    ("211", "을지로3가", "Euljiro 3-ga", (37.5705, 126.9904),
     [_line("2", "203"), _line("3", "330")], True),
    ("222", "강남역", "Gangnam", (37.5112, 127.0981),
     [_line("2", "222"), _line("sinbundang", "D08", E), _line("9", "922")], True),
    ("223", "역삼역", "Yeoksam", (37.5009, 127.0364),
     [_line("2", "223"), _line("sinbundang", "D09", E)], True),
    ("224", "선릉역", "Seolleung", (37.5037, 127.0479),
     [_line("2", "224"), _line("sinbundang", "D10", E), _line("suin", "K224")], True),
    ("234", "교대역", "Gangnam-gu Office", (37.4935, 127.0127),
     [_line("2", "234"), _line("3", "339"), _line("9", "928")], True),
    # 3호선
    ("324", "충무로", "Chungmuro", (37.5598, 126.9941),
     [_line("3", "329"), _line("4", "424")], True),
    ("334", "양재역", "Yangjae", (37.4821, 127.0339),
     [_line("3", "341"), _line("sinbundang", "D05", E)], True),
    ("339", "고속터미널역", "Express Bus Terminal", (37.5049, 127.0050),
     [_line("3", "341"), _line("7", "740"), _line("9", "934")], True),
    # 4호선
    ("426", "이촌역", "Ichon", (37.5183, 126.9638),
     [_line("4", "429"), _line("G410", "K311")], True),
    ("430", "사당역", "Sadang", (37.4763, 126.9816),
     [_line("2", "226"), _line("4", "433")], True),
    # 5호선
    ("535", "광화문역", "Gwanghwamun", (37.5746, 126.9755),
     [_line("5", "533")], False),
    ("540", "여의도역", "Yeouido", (37.5188, 126.9299),
     [_line("5", "538"), _line("9", "915")], True),
    # 6호선
    ("640", "공덕역", "Gongdeok", (37.5433, 126.9636),
     [_line("6", "632"), _line("G410", "K313"), _line("airport", "A05", E)], True),
    # 7호선
    ("750", "도봉산역", "Dobongsan", (37.6676, 127.0452),
     [_line("7", "710")], False),
    ("751", "수락산역", "Suraksan", (37.6575, 127.0570),
     [_line("7", "711")], False),
    # 8호선
    ("810", "잠실역", "Jamsil", (37.5130, 127.0996),
     [_line("2", "216"), _line("8", "814")], True),
    ("814", "석촌역", "Seokchon", (37.5035, 127.1052),
     [_line("8", "815")], False),
    # 9호선
    ("915", "여의도역", "Yeouido", (37.5188, 126.9299),
     [_line("5", "538"), _line("9", "915", E)], True),
    ("922", "강남역", "Gangnam", (37.5112, 127.0981),
     [_line("2", "222"), _line("sinbundang", "D08", E), _line("9", "922", E)], True),
    ("928", "교대역", "Gangnam-gu Office", (37.4935, 127.0127),
     [_line("2", "234"), _line("3", "339"), _line("9", "928", E)], True),
    # 신분당선
    ("D05", "양재역", "Yangjae", (37.4821, 127.0339),
     [_line("3", "341"), _line("sinbundang", "D05", E)], True),
    ("D08", "강남역", "Gangnam", (37.5112, 127.0981),
     [_line("2", "222"), _line("sinbundang", "D08", E), _line("9", "922", E)], True),
    ("D09", "역삼역", "Yeoksam", (37.5009, 127.0364),
     [_line("2", "223"), _line("sinbundang", "D09", E)], True),
    ("D10", "선릉역", "Seolleung", (37.5037, 127.0479),
     [_line("2", "224"), _line("sinbundang", "D10", E), _line("suin", "K224")], True),
]


def build_stations(rows=MAJOR_STATIONS_DATA) -> Tuple[Station, ...]:
    return tuple(
        Station(
            station_id=station_id,
            name=name,
            name_en=name_en,
            lines=tuple(lines),
            latitude=lat,
            longitude=lng,
            is_transfer=is_transfer,
        )
        for station_id, name, name_en, (lat, lng), lines, is_transfer in rows
    )


class StationDirectory:
    """역 ID/이름/노선 기반 조회. 모든 조회는 miss 시 None 또는 빈 리스트."""

    def __init__(self, stations):
        self._stations: Tuple[Station, ...] = tuple(stations)
        ids = [s.station_id for s in self._stations]
        if len(ids) != len(set(ids)):
            raise ValueError("역 ID가 중복되었습니다")

    def __len__(self):
        return len(self._stations)

    def all(self) -> List[Station]:
        return list(self._stations)

    def get_by_id(self, station_id: str) -> Optional[Station]:
        for station in self._stations:
            if station.station_id == station_id:
                return station
        return None

    def get_by_name(self, name: str) -> Optional[Station]:
        """정확히 일치하는 한글 역명 (대소문자/공백 정규화 없음)."""
        for station in self._stations:
            if station.name == name:
                return station
        return None

    def get_by_line(self, line_id: str) -> List[Station]:
        return [s for s in self._stations if line_id in s.line_ids]

    def get_transfer_stations(self) -> List[Station]:
        return [s for s in self._stations if s.is_transfer]

    def search(self, query: str) -> List[Station]:
        """한글/영문 역명 부분 일치 (대소문자 무시)."""
        q = query.lower()
        return [
            s for s in self._stations
            if q in s.name.lower() or q in s.name_en.lower()
        ]

    @staticmethod
    def shares_line(a: Station, b: Station) -> bool:
        return bool(set(a.line_ids) & set(b.line_ids))

    def nearest(self, lat: float, lng: float, limit: int = 3) -> List[Tuple[Station, float]]:
        """좌표 기준 가장 가까운 역 (거리 m, 오름차순). 같은 위치의 중복 등록 역은 한 번만."""
        distances = []
        seen = set()
        for station in self._stations:
            key = (station.name, station.latitude, station.longitude)
            if key in seen:
                continue
            seen.add(key)
            dist = haversine(lat, lng, station.latitude, station.longitude)
            distances.append((station, dist))

        distances.sort(key=lambda x: x[1])
        return distances[:limit]


@lru_cache(maxsize=None)
def default_directory() -> StationDirectory:
    return StationDirectory(build_stations())
