"""
ssocreds/config.py - 중앙 설정 관리

하드코딩된 상수를 한 곳에 모아 관리합니다.
모든 값은 불변(frozen) 데이터클래스로 제공됩니다. 로깅만 환경변수(LOG_LEVEL, LOG_FORMAT)를 따릅니다.

Usage:
    from ssocreds.config import settings, get_default_region

    region = get_default_region()  # AWS_REGION 또는 "ap-northeast-2"
    buffer = settings.EXPIRY_BUFFER_SECONDS
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

# =============================================================================
# 전역 설정
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """애플리케이션 전역 설정 (불변)

    Attributes:
        DEFAULT_REGION: 리전 정보가 전혀 없을 때 사용할 기본 리전
        EXPIRY_BUFFER_SECONDS: 자격 증명 만료 전 재해석 버퍼 (초)
        DEFAULT_CREDENTIAL_TTL_SECONDS: 만료 시간이 없는 자격 증명의 캐시 유지 시간 (초)
        API_TIMEOUT: AWS API 읽기 타임아웃 (초)
        API_CONNECT_TIMEOUT: AWS API 연결 타임아웃 (초)
        API_RETRY_COUNT: botocore 재시도 최대 횟수
        SSO_METHOD: SSO Provider가 생성한 자격 증명의 출처 라벨
    """

    DEFAULT_REGION: str = "ap-northeast-2"
    EXPIRY_BUFFER_SECONDS: int = 10
    DEFAULT_CREDENTIAL_TTL_SECONDS: int = 900
    API_TIMEOUT: int = 30
    API_CONNECT_TIMEOUT: int = 10
    API_RETRY_COUNT: int = 3
    SSO_METHOD: str = "sso"


settings = Settings()


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정

    CLI 진입점에서 logging.basicConfig()에 그대로 전달합니다.
    """

    level: str = "WARNING"
    format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL / LOG_FORMAT 환경변수에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
        )

    def apply(self, debug: bool = False) -> None:
        """루트 로거에 설정 적용

        Args:
            debug: True면 level 설정과 무관하게 DEBUG로 동작
        """
        level = logging.DEBUG if debug else getattr(logging, self.level, logging.WARNING)
        logging.basicConfig(level=level, format=self.format, datefmt=self.date_format)
        if not debug:
            # botocore DEBUG 로그는 요청 본문(토큰 포함)을 출력하므로 억제
            logging.getLogger("botocore").setLevel(max(level, logging.INFO))


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_default_profile() -> str | None:
    """AWS_PROFILE → AWS_DEFAULT_PROFILE 순으로 활성 프로파일 이름 조회"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE") or None


def get_default_region() -> str:
    """AWS_REGION → AWS_DEFAULT_REGION → settings.DEFAULT_REGION 순으로 리전 조회"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


def get_version() -> str:
    """패키지 버전 문자열 반환"""
    from ssocreds import __version__

    return __version__
