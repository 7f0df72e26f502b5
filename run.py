"""
gilmatch API 진입점
실행: python run.py
접속: http://localhost:8000/docs
"""
import logging
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def main():
    """메인 실행 함수"""
    print("=" * 60)
    print("gilmatch - 지하철 출퇴근 경로 기반 길러 매칭")
    print("=" * 60)
    print()

    # 환경 변수 로드 (.env 있으면)
    load_dotenv()

    # 서버 설정
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "True").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    url = f"http://{host}:{port}"

    print(f"[*] 서버 주소: {url}")
    print(f"[*] 프로젝트 디렉토리: {Path.cwd()}")
    print(f"[*] 자동 재시작: {'활성화' if reload else '비활성화'}")
    print()
    print("서버를 중지하려면 Ctrl+C를 누르세요.")
    print("=" * 60)
    print()

    # 서버 실행
    try:
        uvicorn.run(
            "api.app:app",
            host=host,
            port=port,
            reload=reload,
            reload_dirs=["api", "gilmatch"],
            log_level=log_level,
        )
    except KeyboardInterrupt:
        print("\n\n[*] 서버를 종료합니다.")
    except Exception as e:
        print(f"\n[ERROR] 서버 실행 중 오류 발생: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
