# ssocreds/auth/provider/sso.py
"""
SSO Provider - 캐시된 SSO 토큰을 Role 자격 증명으로 교환

요청마다 Provider 락을 잡은 상태로 다음을 수행합니다.

    1. 설정이 없으면 로드 (Provider 수명 동안 한 번만)
    2. 보유 중인 토큰이 만료됐으면 폐기
    3. 토큰이 없으면 디스크 캐시에서 로드
    4. 그래도 없으면 TokenUnavailableError (체인은 다음 Provider로)
    5. sso:GetRoleCredentials 호출 후 결과 반환 (에러는 그대로 전파)

락은 파일 읽기와 네트워크 호출 동안 유지됩니다.
같은 인스턴스에 동시에 들어온 요청은 직렬화되어 설정 로드와 교환이 중복되지 않습니다.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ...client import get_client
from ...config import settings
from ..cache import TokenCache, TokenCacheManager
from ..config import Loader, SSOConfig
from ..types import (
    Credentials,
    CredentialsNotLoadedError,
    ProviderError,
    ProviderType,
    RequiredConfigMissingError,
    TokenUnavailableError,
)
from .base import BaseProvider

logger = logging.getLogger(__name__)

# epoch 초로 보기에는 너무 큰 값 (서기 5138년) - 밀리초로 간주
_EPOCH_MILLIS_THRESHOLD = 100_000_000_000

ClientFactory = Callable[[str], Any]


def _create_sso_client(region: str) -> Any:
    return get_client("sso", region_name=region, unsigned=True)


def _parse_expiration(value: Any) -> datetime:
    """GetRoleCredentials expiration(epoch)을 UTC datetime으로 변환"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RequiredConfigMissingError("expiration")
    if value >= _EPOCH_MILLIS_THRESHOLD:
        if isinstance(value, int):
            seconds, millis = divmod(value, 1000)
            return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=millis * 1000)
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=timezone.utc)


def get_role_credentials(
    region: str,
    account_id: str,
    role_name: str,
    access_token: str,
    client_factory: ClientFactory | None = None,
) -> Credentials:
    """SSO 포털 API로 Role 자격 증명 조회

    Args:
        region: SSO 리전 (client 엔드포인트)
        account_id: 대상 계정 ID
        role_name: 대상 Role 이름
        access_token: 캐시된 SSO 액세스 토큰
        client_factory: region을 받아 sso client를 반환하는 함수 (테스트 주입용)

    Returns:
        source="sso" 인 Credentials

    Raises:
        ProviderError: API 호출 자체가 실패한 경우
        CredentialsNotLoadedError: 응답에 roleCredentials가 없는 경우
        RequiredConfigMissingError: 응답에 필수 필드가 없는 경우
    """
    client = (client_factory or _create_sso_client)(region)

    try:
        response = client.get_role_credentials(
            roleName=role_name,
            accountId=account_id,
            accessToken=access_token,
        )
    except (BotoCoreError, ClientError) as e:
        raise ProviderError(
            settings.SSO_METHOD,
            "get_role_credentials",
            f"Role 자격 증명 조회 실패 ({account_id}/{role_name})",
            cause=e,
        ) from e

    role_credentials = (response or {}).get("roleCredentials")
    if role_credentials is None:
        raise CredentialsNotLoadedError(
            f"GetRoleCredentials 응답에 roleCredentials가 없습니다 ({account_id}/{role_name})"
        )

    access_key_id = role_credentials.get("accessKeyId")
    if not access_key_id:
        raise RequiredConfigMissingError("access_key_id")
    secret_access_key = role_credentials.get("secretAccessKey")
    if not secret_access_key:
        raise RequiredConfigMissingError("secret_access_key")
    session_token = role_credentials.get("sessionToken")
    if not session_token:
        raise RequiredConfigMissingError("session_token")

    return Credentials(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        session_token=session_token,
        expiration=_parse_expiration(role_credentials.get("expiration")),
        source=settings.SSO_METHOD,
    )


@dataclass
class _ProviderState:
    sso_config: SSOConfig | None = None
    cached_token: TokenCache | None = None


class SSOProvider(BaseProvider):
    """캐시된 SSO 토큰 기반 자격 증명 Provider

    Example:
        provider = SSOProvider(profile_name="dev")
        credentials = provider.load()
    """

    def __init__(
        self,
        profile_name: str | None = None,
        loader: Loader | None = None,
        cache_dir: str | Path | None = None,
        client_factory: ClientFactory | None = None,
        name: str = settings.SSO_METHOD,
    ):
        """SSOProvider 초기화

        Args:
            profile_name: 활성 프로파일 (loader를 주면 무시)
            loader: 설정 로더 (기본: Loader(profile_name))
            cache_dir: SSO 토큰 캐시 디렉토리 (기본: ~/.aws/sso/cache)
            client_factory: region → sso client 생성 함수
            name: Provider 이름
        """
        super().__init__(name)
        self._loader = loader or Loader(profile_name)
        self._cache_dir = cache_dir
        self._client_factory = client_factory
        self._state = _ProviderState()
        self._lock = threading.Lock()

    @property
    def _provider_type(self) -> ProviderType:
        return ProviderType.SSO

    @property
    def sso_config(self) -> SSOConfig | None:
        """로드된 SSO 설정 (첫 요청 전이면 None)"""
        return self._state.sso_config

    def load(self) -> Credentials:
        """SSO 토큰을 교환해 자격 증명을 해석

        Raises:
            ConfigurationError: SSO 설정 누락
            TokenUnavailableError: 유효한 캐시 토큰 없음
            ProviderError / RequiredConfigMissingError / CredentialsNotLoadedError: 교환 실패
        """
        with self._lock:
            state = self._state

            if state.sso_config is None:
                state.sso_config = self._loader.load_sso_config()
                logger.debug(
                    "SSO 설정 로드: account=%s, role=%s, region=%s",
                    state.sso_config.account_id,
                    state.sso_config.role_name,
                    state.sso_config.region,
                )
            config = state.sso_config

            if state.cached_token is not None and state.cached_token.is_expired():
                logger.debug("보유 중인 SSO 토큰 만료, 폐기")
                state.cached_token = None

            if state.cached_token is None:
                state.cached_token = TokenCacheManager(
                    start_url=config.start_url,
                    session_name=config.session_name,
                    cache_dir=self._cache_dir,
                ).load()

            if state.cached_token is None:
                raise TokenUnavailableError(config.start_url)

            return get_role_credentials(
                region=config.region,
                account_id=config.account_id,
                role_name=config.role_name,
                access_token=state.cached_token.access_token,
                client_factory=self._client_factory,
            )
