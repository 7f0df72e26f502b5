# -*- coding: utf-8 -*-
"""
gilmatch FastAPI Application
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import registry
from api.routers import match, stations, transit

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry.load()
    yield


app = FastAPI(title="gilmatch", version=VERSION, lifespan=lifespan)


allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(match.router, prefix="/api", tags=["match"])
app.include_router(stations.router, prefix="/api", tags=["stations"])
app.include_router(transit.router, prefix="/api", tags=["transit"])


@app.get(
    "/health",
    summary="서비스 상태 확인",
    description="엔진 로드 여부와 참조 테이블 크기를 반환합니다.",
    response_description="status(healthy/unavailable), version, 테이블별 항목 수",
)
async def health():
    try:
        engine = registry.get_engine()
        return {
            "status": "healthy",
            "version": VERSION,
            "stations": len(engine.directory),
            "travel_times": len(engine.resolver),
            "express_schedules": len(engine.express),
            "congestion_lines": len(engine.congestion),
        }
    except RuntimeError:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "Engine not loaded"},
        )
