"""애플리케이션 환경 설정 모듈.

Application configuration module using pydantic-settings.
All settings can be overridden via environment variables or a .env file.
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

# .env 파일 절대 경로 — CWD와 무관하게 항상 프로젝트 루트의 .env를 참조
# Absolute path to .env file — ensures correct loading regardless of CWD
_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """애플리케이션 전역 설정 — 환경 변수 기반 구성.

    Global application settings loaded from environment variables.
    Uses pydantic-settings for automatic env var parsing and .env file support.

    Attributes:
        SCRIPT_URL: 원격 액션 디스패치 엔드포인트 (Remote action-dispatch endpoint URL)
        UPLOAD_FOLDER_ID: 첨부 파일 업로드 대상 폴더 ID (Destination folder for attachments)
        MAX_UPLOAD_BYTES: 첨부 파일 최대 크기 (Attachment size ceiling in bytes)
        REQUEST_TIMEOUT_SECONDS: 원격 요청 타임아웃, None이면 무제한 (Request timeout, None = no timeout)
        CORS_ORIGINS: 허용된 CORS 출처 목록 (Allowed CORS origin URLs)
        APP_NAME: 애플리케이션 표시 이름 (Application display name)
        DEBUG: 디버그 모드 플래그 (Debug mode flag)
        LOG_LEVEL: 루트 로거 레벨 (Root logger level)
    """

    # 원격 엔드포인트 — 테이블 저장소를 프록시하는 단일 HTTP 엔드포인트
    # Single HTTP endpoint proxying the tabular data store
    SCRIPT_URL: str = ""
    UPLOAD_FOLDER_ID: str = ""  # updateTask/saveMeeting 첨부 파일 저장 폴더 (Attachment destination folder)

    # 첨부 파일 제한 — 10 MiB (Attachment ceiling)
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # None이면 타임아웃 없음 (No timeout when None)
    REQUEST_TIMEOUT_SECONDS: float | None = None

    # CORS 설정 — 브라우저 UI 개발 서버 허용 (Browser UI dev server origins)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # 앱 메타데이터 — Application metadata
    APP_NAME: str = "StationSync"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Axiom 로깅 설정 — Axiom observability platform settings
    AXIOM_API_TOKEN: str = ""  # Axiom API 토큰 (API token from Axiom dashboard)
    AXIOM_DATASET: str = ""  # Axiom 데이터셋 이름 (Dataset name for gateway/API events)

    model_config = {"env_file": _ENV_FILE, "env_file_encoding": "utf-8"}


# 전역 설정 싱글턴 인스턴스 — Global settings singleton instance
settings: Settings = Settings()
