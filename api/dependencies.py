"""
MatchingEngine 싱글턴 관리.
앱 시작 시 한 번 로드하고, 모든 요청에서 재사용한다.
"""
import os
import sys
import threading
from dataclasses import replace
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from gilmatch.engine import MatchingEngine, MatchingParams, build_default_engine


class EngineRegistry:
    def __init__(self):
        self.engine: MatchingEngine | None = None
        self.engine_lock = threading.RLock()  # load()/reload 동시 실행 방지

    def load(self):
        params = replace(MatchingParams(), default_top_n=int(os.getenv("MATCH_TOP_N", "5")))
        with self.engine_lock:
            self.engine = build_default_engine(params)

    def get_engine(self) -> MatchingEngine:
        if self.engine is None:
            raise RuntimeError("Engine not loaded")
        return self.engine


registry = EngineRegistry()
