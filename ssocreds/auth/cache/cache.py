# ssocreds/auth/cache/cache.py
"""
SSO 토큰 캐시 리더 및 자격 증명 캐시 구현

- CacheEntry: 만료 시간을 가진 제네릭 캐시 항목
- TokenCache: AWS CLI가 저장한 SSO 토큰 데이터 구조
- TokenCacheManager: 토큰 캐시 파일 위치 계산 및 로드 (읽기 전용)
- CredentialsCache: Provider를 감싸는 single-flight 자격 증명 캐시

설계 원칙:
- 토큰 캐시 파일은 읽기만 함 (쓰기/갱신은 `aws sso login` 담당)
- 파일 없음, 파싱 실패, 빈 토큰, 만료는 모두 "토큰 없음"으로 취급
- 자격 증명 캐시는 메모리 기반, 만료 시간 기준으로 재해석
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Generic, Optional, TypeVar

from botocore.utils import parse_timestamp

from ...config import settings
from ..types import Credentials, Provider, ProviderType

logger = logging.getLogger(__name__)

# =============================================================================
# Generic Cache Entry
# =============================================================================

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """캐시 항목을 나타내는 제네릭 데이터 클래스

    Attributes:
        value: 캐시된 값
        created_at: 생성 시간 (UTC)
        expires_at: 만료 시간 (UTC, None이면 만료되지 않음)
    """

    value: T
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """캐시 항목이 만료되었는지 확인

        Args:
            buffer_seconds: 만료 전 버퍼 시간 (초) - 기본 1분

        Returns:
            True if 만료됨, False otherwise
        """
        if self.expires_at is None:
            return False

        buffer = timedelta(seconds=buffer_seconds)
        return datetime.now(timezone.utc) >= (self.expires_at - buffer)


# =============================================================================
# Token Cache
# =============================================================================


def _parse_utc(value: Any) -> datetime:
    """ISO 8601 문자열을 UTC datetime으로 변환

    타임존 정보가 없으면 UTC로 간주합니다.

    Raises:
        ValueError: 파싱 실패 시
    """
    parsed = parse_timestamp(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class TokenCache:
    """SSO 토큰 캐시 데이터 구조

    AWS CLI가 ~/.aws/sso/cache/{hash}.json 에 저장한 형식을 읽습니다.
    필드 이름은 파일에서 camelCase (accessToken, expiresAt, region, startUrl) 입니다.

    Attributes:
        access_token: SSO 액세스 토큰
        expires_at: 만료 시간 (UTC)
        region: SSO 리전
        start_url: SSO 시작 URL
    """

    access_token: str
    expires_at: datetime
    region: Optional[str] = None
    start_url: Optional[str] = None

    def is_expired(self, buffer_seconds: int = 0, now: Optional[datetime] = None) -> bool:
        """토큰이 만료되었는지 확인

        만료 시간과 현재 시간이 같으면 만료로 간주합니다.

        Args:
            buffer_seconds: 만료 전 버퍼 시간 (초)
            now: 기준 시간 (기본: 현재 UTC)

        Returns:
            True if 만료됨
        """
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at - timedelta(seconds=buffer_seconds)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenCache":
        """딕셔너리에서 생성 (JSON 로드용)

        Raises:
            KeyError: accessToken 또는 expiresAt 누락 시
            ValueError: expiresAt 파싱 실패 시
            TypeError: 최상위가 객체가 아닌 경우
        """
        if not isinstance(data, dict):
            raise TypeError(f"토큰 캐시는 JSON 객체여야 합니다: {type(data).__name__}")

        access_token = data["accessToken"]
        if not isinstance(access_token, str):
            raise TypeError("accessToken은 문자열이어야 합니다")

        return cls(
            access_token=access_token,
            expires_at=_parse_utc(data["expiresAt"]),
            region=data.get("region"),
            start_url=data.get("startUrl"),
        )


def default_cache_dir() -> Path:
    """AWS CLI SSO 토큰 캐시 디렉토리 (~/.aws/sso/cache)"""
    return Path.home() / ".aws" / "sso" / "cache"


def get_cache_filename(key: str) -> str:
    """캐시 파일명 생성

    AWS CLI와 동일하게 키의 UTF-8 바이트를 SHA-1 해시하여 hex 인코딩합니다.
    """
    return hashlib.sha1(key.encode("utf-8")).hexdigest() + ".json"


class TokenCacheManager:
    """SSO 토큰 캐시 파일 리더

    AWS CLI와 호환되는 위치에서 토큰을 로드합니다.
    캐시 파일 위치: ~/.aws/sso/cache/{sha1(session_name or start_url)}.json

    이 클래스는 파일을 쓰거나 삭제하지 않습니다.
    """

    def __init__(
        self,
        start_url: str,
        session_name: Optional[str] = None,
        cache_dir: Optional[str | Path] = None,
    ):
        """TokenCacheManager 초기화

        Args:
            start_url: SSO 시작 URL
            session_name: sso-session 이름 (있으면 캐시 키로 사용)
            cache_dir: 캐시 디렉토리 (기본: ~/.aws/sso/cache)
        """
        self.start_url = start_url
        self.session_name = session_name
        self.cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()

    @property
    def cache_key(self) -> str:
        """해시 입력값 - sso-session 프로파일은 세션 이름, Legacy는 start_url"""
        return self.session_name if self.session_name else self.start_url

    @property
    def cache_path(self) -> Path:
        """캐시 파일 전체 경로"""
        return self.cache_dir / get_cache_filename(self.cache_key)

    def load(self, now: Optional[datetime] = None) -> Optional[TokenCache]:
        """유효한 토큰을 파일에서 로드

        실패 원인은 DEBUG 로그로만 남기고 모두 None으로 반환합니다.

        Args:
            now: 만료 판단 기준 시간 (기본: 현재 UTC)

        Returns:
            TokenCache 객체 또는 None
        """
        path = self.cache_path
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("SSO 토큰 캐시 파일 없음: %s", path)
            return None
        except OSError as e:
            logger.debug("SSO 토큰 캐시 파일 읽기 실패: %s (%s)", path, e)
            return None

        try:
            contents = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.debug("SSO 토큰 캐시가 UTF-8이 아님: %s (%s)", path, e)
            return None

        try:
            token = TokenCache.from_dict(json.loads(contents))
        except (ValueError, KeyError, TypeError, OverflowError, RuntimeError) as e:
            logger.debug("SSO 토큰 캐시 파싱 실패: %s (%r)", path, e)
            return None

        if not token.access_token:
            logger.debug("SSO 토큰 캐시에 accessToken이 비어 있음: %s", path)
            return None

        if token.is_expired(now=now):
            logger.debug("SSO 토큰 만료됨 (expiresAt=%s): %s", token.expires_at.isoformat(), path)
            return None

        return token


# =============================================================================
# Credentials Cache (single-flight)
# =============================================================================


class CredentialsCache(Provider):
    """Provider를 감싸는 메모리 기반 자격 증명 캐시

    - 동시에 들어온 요청은 하나의 하위 load() 호출로 합쳐짐 (single-flight)
    - 만료 시간 - buffer 까지 마지막 결과를 재사용
    - 만료 시간이 없는 자격 증명은 default_ttl 동안 재사용
    - 실패는 캐시하지 않음

    캐시는 SSO를 알지 못합니다. "자격 증명 + 만료 시간"만 다룹니다.

    Thread-safe 구현.
    """

    def __init__(
        self,
        provider: Provider,
        buffer_seconds: Optional[int] = None,
        default_ttl_seconds: Optional[int] = None,
    ):
        """CredentialsCache 초기화

        Args:
            provider: 실제 해석을 수행할 Provider (보통 ProviderChain)
            buffer_seconds: 만료 전 재해석 버퍼 (초) - 기본 settings.EXPIRY_BUFFER_SECONDS
            default_ttl_seconds: 만료 없는 자격 증명의 TTL (초) - 기본 settings.DEFAULT_CREDENTIAL_TTL_SECONDS
        """
        self._provider = provider
        self._buffer_seconds = (
            settings.EXPIRY_BUFFER_SECONDS if buffer_seconds is None else buffer_seconds
        )
        self._default_ttl = timedelta(
            seconds=settings.DEFAULT_CREDENTIAL_TTL_SECONDS
            if default_ttl_seconds is None
            else default_ttl_seconds
        )
        self._entry: Optional[CacheEntry[Credentials]] = None
        self._lock = threading.Lock()

    def type(self) -> ProviderType:
        return self._provider.type()

    def name(self) -> str:
        return self._provider.name()

    @property
    def provider(self) -> Provider:
        """감싸고 있는 Provider"""
        return self._provider

    def _valid_entry(self) -> Optional[CacheEntry[Credentials]]:
        entry = self._entry
        if entry is None or entry.is_expired(self._buffer_seconds):
            return None
        return entry

    def load(self) -> Credentials:
        """캐시된 자격 증명 반환, 없거나 만료 임박이면 하위 Provider로 재해석

        Raises:
            AuthError: 하위 Provider 해석 실패 시 (그대로 전파)
        """
        entry = self._valid_entry()
        if entry is not None:
            return entry.value

        with self._lock:
            # 대기하는 동안 다른 스레드가 이미 해석했을 수 있음
            entry = self._valid_entry()
            if entry is not None:
                logger.debug("자격 증명 캐시 적중 (대기 후): %s", self.name())
                return entry.value

            logger.debug("자격 증명 해석 시작: %s", self.name())
            credentials = self._provider.load()

            expires_at = credentials.expiration
            if expires_at is None:
                expires_at = datetime.now(timezone.utc) + self._default_ttl

            self._entry = CacheEntry(value=credentials, expires_at=expires_at)
            logger.debug(
                "자격 증명 캐시 저장: source=%s, expires_at=%s",
                credentials.source,
                expires_at.isoformat(),
            )
            return credentials

    @property
    def expires_at(self) -> Optional[datetime]:
        """현재 캐시 항목의 만료 시간 (캐시가 비었으면 None)"""
        entry = self._entry
        return entry.expires_at if entry else None

    def invalidate(self) -> bool:
        """캐시 무효화

        Returns:
            True if 캐시된 항목이 있었음
        """
        with self._lock:
            had_entry = self._entry is not None
            self._entry = None
            return had_entry
