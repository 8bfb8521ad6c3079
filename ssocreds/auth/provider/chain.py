# ssocreds/auth/provider/chain.py
"""
Provider 체인 - 여러 Provider를 순서대로 시도

Provider가 어떤 예외로 실패하든 다음 Provider로 넘어갑니다.
CredentialsNotLoadedError("해당 없음")는 DEBUG로, 그 외 에러는 WARNING으로 남겨
"세션 미설정"과 "세션은 있으나 교환 실패"를 로그에서 구분할 수 있게 합니다.
모두 실패하면 마지막 에러를 그대로 다시 발생시킵니다.

Example:
    chain = ProviderChain.first_try("sso", SSOProvider()).or_else("default", DefaultProvider())
    credentials = chain.load()
"""

from __future__ import annotations

import logging

from ..types import Credentials, CredentialsNotLoadedError, Provider, ProviderType
from .base import BaseProvider

logger = logging.getLogger(__name__)


class ProviderChain(BaseProvider):
    """순서가 있는 Provider 체인"""

    def __init__(self, providers: list[tuple[str, Provider]] | None = None, name: str = "chain"):
        super().__init__(name)
        self._providers: list[tuple[str, Provider]] = list(providers or [])

    @classmethod
    def first_try(cls, name: str, provider: Provider) -> ProviderChain:
        """첫 번째 Provider로 체인 생성"""
        return cls([(name, provider)])

    def or_else(self, name: str, provider: Provider) -> ProviderChain:
        """폴백 Provider 추가 (체이닝 가능)"""
        self._providers.append((name, provider))
        return self

    @property
    def _provider_type(self) -> ProviderType:
        return ProviderType.CHAIN

    @property
    def available_methods(self) -> list[str]:
        """체인에 등록된 Provider 이름 (시도 순서)"""
        return [name for name, _ in self._providers]

    def get_provider(self, name: str) -> Provider:
        """이름으로 Provider 조회

        Raises:
            KeyError: 해당 이름이 없는 경우
        """
        for provider_name, provider in self._providers:
            if provider_name == name:
                return provider
        raise KeyError(name)

    def load(self) -> Credentials:
        """첫 번째로 성공한 Provider의 자격 증명 반환

        Raises:
            CredentialsNotLoadedError: 체인이 비어 있는 경우
            Exception: 모든 Provider가 실패한 경우 마지막 Provider의 에러
        """
        last_error: Exception | None = None

        for name, provider in self._providers:
            logger.debug("자격 증명 탐색: %s", name)
            try:
                credentials = provider.load()
            except CredentialsNotLoadedError as e:
                logger.debug("[%s] 자격 증명 없음, 다음 Provider 시도: %s", name, e)
                last_error = e
                continue
            except Exception as e:
                logger.warning("[%s] 자격 증명 해석 실패, 다음 Provider 시도: %s", name, e, exc_info=True)
                last_error = e
                continue

            logger.info("[%s] 자격 증명 해석 성공 (source=%s)", name, credentials.source)
            return credentials

        if last_error is not None:
            raise last_error
        raise CredentialsNotLoadedError("체인에 등록된 Provider가 없습니다")
