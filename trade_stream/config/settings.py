"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export POLONIEX_HOST=...
    2. .env 파일 - config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 개발 환경 (기본값 사용)
    python main.py

    # 고정 크기(512자) 분할 수신 (잘린 메시지의 trade 블록은 버려짐)
    export POLONIEX_RECEIVE_BUFFER_SIZE=512
    python main.py
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from trade_stream.core.types import PAIRS_LIST, Pair

# 설정 파일 경로 (프로젝트 루트의 config/)
config_dir = Path(__file__).resolve().parents[2] / "config"


def env_settings(prefix: str) -> SettingsConfigDict:
    """.env + 환경변수 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: POLONIEX_, LOG_)

    Returns:
        Pydantic 설정 딕셔너리
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """애플리케이션 일반 설정

    환경변수 오버라이드:
        APP_ENVIRONMENT: 실행 환경 (dev, prod, test) (기본: dev)
        APP_DEBUG: 디버그 모드 (기본: false)
    """

    environment: str = "dev"
    debug: bool = False

    model_config = env_settings("APP_")


class PoloniexSettings(BaseSettings):
    """Poloniex 푸시 피드 설정 (환경변수 기반)

    환경변수 오버라이드 (타이밍 설정은 초 단위):
        POLONIEX_HOST: 웹소켓 호스트 (기본: api2.poloniex.com)
        POLONIEX_PAIRS: 구독 거래쌍 JSON 배열 (기본: 전체)
        POLONIEX_RECEIVE_BUFFER_SIZE: 1회 수신 최대 문자 수, 0이면 프레임 단위 (기본: 0)
        POLONIEX_RECEIVE_TIMEOUT: 수신 대기 타임아웃, 0이면 무제한 (기본: 0)
        POLONIEX_OPEN_TIMEOUT: 연결 타임아웃 (기본: 10초)
        POLONIEX_CLOSE_TIMEOUT: 종료 핸드셰이크 타임아웃 (기본: 5초)
        POLONIEX_RECEIVE_ERROR_PAUSE: 수신 실패 후 재수신 대기 (기본: 0.5초)
    """

    host: str = "api2.poloniex.com"
    pairs: list[Pair] = Field(default_factory=lambda: list(PAIRS_LIST))
    receive_buffer_size: int = Field(default=0, ge=0)
    receive_timeout: float = Field(default=0.0, ge=0.0)
    open_timeout: float = Field(default=10.0, gt=0.0)
    close_timeout: float = Field(default=5.0, gt=0.0)
    receive_error_pause: float = Field(default=0.5, ge=0.0)

    model_config = env_settings("POLONIEX_")

    @property
    def url(self) -> str:
        """웹소켓 URL (wss://host/ws)"""
        return f"wss://{self.host}/ws"

    @property
    def origin(self) -> str:
        """Origin 헤더 값 (https://host)"""
        return f"https://{self.host}"


class LoggingSettings(BaseSettings):
    """로깅 설정 (환경변수 기반)

    환경변수 오버라이드:
        LOG_LEVEL: 로깅 레벨 (기본: INFO)
        LOG_DIR: 로그 디렉토리 (기본: logs)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
    """

    level: str = "INFO"
    dir: str = "logs"
    to_file: bool = False

    model_config = env_settings("LOG_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================
# 환경변수 로드 (환경변수 없으면 기본값 사용)

app_settings = AppSettings()
poloniex_settings = PoloniexSettings()
logging_settings = LoggingSettings()
