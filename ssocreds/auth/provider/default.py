# ssocreds/auth/provider/default.py
"""
Default Provider - botocore 기본 자격 증명 체인

환경변수, credentials/config 파일의 정적 키, credential_process,
컨테이너/인스턴스 메타데이터 등 botocore가 지원하는 모든 방식을 그대로 사용합니다.
SSO 분기가 실패했을 때의 폴백입니다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import botocore.session
from botocore.credentials import RefreshableCredentials
from botocore.exceptions import BotoCoreError

from ..types import Credentials, CredentialsNotLoadedError, ProviderError, ProviderType
from .base import BaseProvider

logger = logging.getLogger(__name__)


class DefaultProvider(BaseProvider):
    """botocore 기본 자격 증명 체인을 감싼 Provider

    botocore Session은 처음 load() 시점에 생성되고 이후 재사용됩니다.
    botocore가 돌려준 RefreshableCredentials는 스스로 갱신되므로
    매 호출마다 고정(frozen) 값을 새로 읽습니다.
    """

    def __init__(
        self,
        profile_name: str | None = None,
        botocore_session: botocore.session.Session | None = None,
        name: str = "default",
    ):
        super().__init__(name)
        self._profile_name = profile_name
        self._botocore_session = botocore_session

    @property
    def _provider_type(self) -> ProviderType:
        return ProviderType.DEFAULT

    def _get_botocore_session(self) -> botocore.session.Session:
        if self._botocore_session is None:
            self._botocore_session = botocore.session.Session(profile=self._profile_name)
        return self._botocore_session

    def load(self) -> Credentials:
        """기본 체인으로 자격 증명 해석

        Raises:
            CredentialsNotLoadedError: 어떤 방식으로도 자격 증명을 찾지 못한 경우
            ProviderError: botocore 해석 중 에러
        """
        try:
            resolved = self._get_botocore_session().get_credentials()
            if resolved is None:
                raise CredentialsNotLoadedError("기본 자격 증명 체인에서 자격 증명을 찾지 못했습니다")
            frozen = resolved.get_frozen_credentials()
        except BotoCoreError as e:
            raise ProviderError(self._name, "get_credentials", "기본 자격 증명 체인 해석 실패", cause=e) from e

        expiration: datetime | None = None
        if isinstance(resolved, RefreshableCredentials):
            # botocore는 만료 시간을 공개 API로 노출하지 않음
            expiry_time = getattr(resolved, "_expiry_time", None)
            if expiry_time is not None:
                expiration = expiry_time.astimezone(timezone.utc)

        logger.debug("기본 체인 자격 증명 해석: method=%s", resolved.method)
        return Credentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            expiration=expiration,
            source=resolved.method or self._name,
        )
