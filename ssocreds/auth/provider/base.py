# ssocreds/auth/provider/base.py
"""
Provider 공통 기본 클래스

모든 Provider가 공유하는 이름/타입 처리와 로깅 헬퍼를 제공합니다.
하위 클래스는 _provider_type 과 load() 만 구현하면 됩니다.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from ..types import Credentials, Provider, ProviderType

logger = logging.getLogger(__name__)


class BaseProvider(Provider):
    """Provider 기본 구현

    Attributes:
        _name: Provider 이름 (체인 로그에 사용)
    """

    def __init__(self, name: str):
        self._name = name

    @property
    @abstractmethod
    def _provider_type(self) -> ProviderType:
        """하위 클래스에서 Provider 타입 지정"""
        pass

    def type(self) -> ProviderType:
        return self._provider_type

    def name(self) -> str:
        return self._name

    @abstractmethod
    def load(self) -> Credentials:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r})"
