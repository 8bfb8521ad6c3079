# ssocreds/auth/session.py
"""
ssocreds/auth/session.py - Provider 체인 조립 및 boto3 Session 헬퍼

    caller → CredentialsCache → ProviderChain → SSOProvider → (실패 시) DefaultProvider

주요 함수:
    - chained(): SSO 우선 + 기본 체인 폴백 + 캐시 래퍼 조립
    - get_credentials_cache(): 프로파일별로 조립된 캐시를 재사용
    - get_session(): 캐시된 체인으로 서명하는 boto3 Session 생성
    - clear_cache(): 재사용 중인 캐시 전체 폐기

Example:
    from ssocreds.auth.session import get_session

    session = get_session(region="ap-northeast-2")
    identity = session.client("sts").get_caller_identity()
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import boto3
import botocore.session
from botocore.credentials import CredentialProvider, CredentialResolver, DeferredRefreshableCredentials
from botocore.exceptions import BotoCoreError

from ..config import get_default_region, settings
from .cache import CredentialsCache
from .provider import DefaultProvider, ProviderChain, SSOProvider

logger = logging.getLogger(__name__)

CHAIN_METHOD = "ssocreds"

_caches: dict[str | None, CredentialsCache] = {}
_caches_lock = threading.Lock()


def chained(
    profile_name: str | None = None,
    cache_dir: str | Path | None = None,
) -> CredentialsCache:
    """SSO Provider를 먼저 시도하고 기본 체인으로 폴백하는 캐시된 Provider 생성

    Args:
        profile_name: 활성 프로파일 (기본: AWS_PROFILE → "default")
        cache_dir: SSO 토큰 캐시 디렉토리 (기본: ~/.aws/sso/cache)

    Returns:
        CredentialsCache(ProviderChain[sso, default])
    """
    chain = ProviderChain.first_try(
        "sso", SSOProvider(profile_name=profile_name, cache_dir=cache_dir)
    ).or_else("default", DefaultProvider(profile_name=profile_name))
    return CredentialsCache(chain)


def get_credentials_cache(profile_name: str | None = None) -> CredentialsCache:
    """프로파일별 CredentialsCache (프로세스 내 재사용)"""
    with _caches_lock:
        cache = _caches.get(profile_name)
        if cache is None:
            cache = chained(profile_name)
            _caches[profile_name] = cache
        return cache


def clear_cache() -> None:
    """재사용 중인 CredentialsCache 전체 폐기"""
    with _caches_lock:
        _caches.clear()


class CachedChainCredentialProvider(CredentialProvider):
    """CredentialsCache를 botocore 자격 증명 체인에 연결하는 어댑터

    botocore는 DeferredRefreshableCredentials를 통해 만료가 가까워지면
    refresh 콜백을 호출하고, 콜백은 CredentialsCache.load()로 위임합니다.
    """

    METHOD = CHAIN_METHOD
    CANONICAL_NAME = CHAIN_METHOD

    def __init__(self, credentials_cache: CredentialsCache):
        super().__init__()
        self._credentials_cache = credentials_cache

    def _refresh(self) -> dict[str, Any]:
        credentials = self._credentials_cache.load()
        metadata = credentials.to_metadata()
        if metadata["expiry_time"] is None:
            # 만료 없는 자격 증명: 캐시 항목 만료 시점에 다시 물어봄
            expires_at = self._credentials_cache.expires_at or (
                datetime.now(timezone.utc) + timedelta(seconds=settings.DEFAULT_CREDENTIAL_TTL_SECONDS)
            )
            metadata["expiry_time"] = expires_at.isoformat()
        return metadata

    def load(self) -> DeferredRefreshableCredentials:
        return DeferredRefreshableCredentials(refresh_using=self._refresh, method=self.METHOD)


def _resolve_region(botocore_session: botocore.session.Session) -> str:
    try:
        region = botocore_session.get_config_variable("region")
    except BotoCoreError as e:
        logger.debug("프로파일 리전 조회 실패, 기본값 사용: %s", e)
        region = None
    return region or get_default_region()


def get_session(
    region: str | None = None,
    profile_name: str | None = None,
    credentials_cache: CredentialsCache | None = None,
) -> boto3.Session:
    """캐시된 Provider 체인으로 서명하는 boto3 Session 생성

    Args:
        region: 리전 (기본: 프로파일 region → AWS_REGION → settings.DEFAULT_REGION)
        profile_name: 활성 프로파일
        credentials_cache: 사용할 CredentialsCache (기본: get_credentials_cache(profile_name))

    Returns:
        boto3.Session
    """
    if credentials_cache is None:
        credentials_cache = get_credentials_cache(profile_name)

    botocore_session = botocore.session.Session(profile=profile_name)
    botocore_session.register_component(
        "credential_provider",
        CredentialResolver([CachedChainCredentialProvider(credentials_cache)]),
    )

    region_name = region or _resolve_region(botocore_session)
    return boto3.Session(botocore_session=botocore_session, region_name=region_name)
