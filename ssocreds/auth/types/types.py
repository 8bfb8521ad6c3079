# ssocreds/auth/types/types.py
"""
ssocreds/auth/types/types.py - 자격 증명 해석 모듈의 핵심 타입 정의

이 모듈은 자격 증명 해석 시스템 전체에서 사용되는 기본 타입들을 정의합니다.

포함 항목:
    - ProviderType: Provider 타입 열거형 (SSO, DEFAULT, CHAIN)
    - Credentials: 정규화된 임시 자격 증명 데이터 클래스
    - Provider: 모든 자격 증명 Provider가 구현해야 하는 추상 기본 클래스 (ABC)
    - 에러 클래스: AuthError, CredentialsNotLoadedError, ConfigurationError,
      TokenUnavailableError, ProviderError, RequiredConfigMissingError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# =============================================================================
# Provider Type Enum
# =============================================================================


class ProviderType(Enum):
    """자격 증명 Provider 타입을 나타내는 열거형

    - SSO: 캐시된 SSO 토큰을 Role 자격 증명으로 교환
    - DEFAULT: botocore 기본 자격 증명 체인 (환경변수, 프로파일, IMDS 등)
    - CHAIN: 여러 Provider를 순서대로 시도하는 조합 Provider
    """

    SSO = "sso"
    DEFAULT = "default"
    CHAIN = "chain"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Credentials
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """정규화된 AWS 자격 증명

    해석이 성공할 때마다 새로 생성되며 호출자에게 소유권이 넘어갑니다.
    Provider 내부에는 보관하지 않습니다 (캐시는 CredentialsCache 담당).

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰 (정적 키면 None)
        expiration: 만료 시간 (UTC, None이면 만료되지 않음)
        source: 자격 증명 출처 라벨 (예: "sso")
    """

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None
    expiration: datetime | None = None
    source: str = ""

    def __repr__(self) -> str:
        # 시크릿이 로그에 남지 않도록 마스킹
        return (
            f"Credentials(access_key_id={self.masked_access_key_id()!r}, "
            f"expiration={self.expiration!r}, source={self.source!r})"
        )

    def masked_access_key_id(self) -> str:
        """앞 4자리와 뒤 4자리만 남긴 액세스 키 ID"""
        key = self.access_key_id
        if len(key) <= 8:
            return "*" * len(key)
        return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"

    def is_expired(self, buffer_seconds: int = 0, now: datetime | None = None) -> bool:
        """만료 여부 확인 (expiration이 None이면 항상 False)"""
        if self.expiration is None:
            return False
        now = now or datetime.now(timezone.utc)
        return (self.expiration - now).total_seconds() <= buffer_seconds

    def to_metadata(self) -> dict[str, Any]:
        """botocore RefreshableCredentials가 기대하는 메타데이터 형식으로 변환

        Note:
            expiry_time은 필수이므로 expiration이 없으면 호출 측에서 채워야 합니다.
        """
        return {
            "access_key": self.access_key_id,
            "secret_key": self.secret_access_key,
            "token": self.session_token,
            "expiry_time": self.expiration.isoformat() if self.expiration else None,
        }


# =============================================================================
# Provider Interface (Abstract Base Class)
# =============================================================================


class Provider(ABC):
    """모든 자격 증명 Provider가 구현해야 하는 추상 기본 클래스

    "해석하거나 실패한다" 계약을 통일된 API로 제공합니다.
    load()는 Credentials를 반환하거나 AuthError 계열 예외를 발생시킵니다.

    Example:
        class MyProvider(Provider):
            def type(self) -> ProviderType:
                return ProviderType.DEFAULT

            def name(self) -> str:
                return "my-provider"

            def load(self) -> Credentials:
                ...
    """

    @abstractmethod
    def type(self) -> ProviderType:
        """Provider 타입을 반환합니다."""
        pass

    @abstractmethod
    def name(self) -> str:
        """Provider 이름(식별자)을 반환합니다."""
        pass

    @abstractmethod
    def load(self) -> Credentials:
        """자격 증명을 해석합니다.

        Returns:
            Credentials 객체

        Raises:
            CredentialsNotLoadedError: 이 Provider가 해석을 포기한 경우 (체인은 다음으로 진행)
            AuthError: 그 외 해석 실패
        """
        pass


# =============================================================================
# Error Classes
# =============================================================================


class AuthError(Exception):
    """인증 관련 기본 에러 클래스

    모든 자격 증명 에러의 부모 클래스입니다.
    원인 예외(cause)를 체이닝하여 디버깅을 용이하게 합니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (옵션)
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class CredentialsNotLoadedError(AuthError):
    """Provider가 자격 증명을 해석하지 않기로 한 경우 발생하는 에러

    "이 Provider에는 해당 없음" 신호입니다.
    Provider 체인은 이 에러를 받으면 조용히 다음 Provider를 시도합니다.
    """

    def __init__(
        self,
        message: str = "자격 증명을 로드할 수 없습니다",
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)


class ConfigurationError(CredentialsNotLoadedError):
    """설정 오류가 발생했을 때 발생하는 에러

    AWS 설정 파일 파싱 실패, 프로파일 없음, 필수 SSO 설정 누락 등의 경우 발생합니다.

    Attributes:
        config_key: 문제가 된 첫 번째 설정 키 이름 (옵션)
        missing_keys: 누락된 모든 설정 키 목록
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        cause: Exception | None = None,
        missing_keys: list[str] | None = None,
    ):
        super().__init__(message, cause)
        self.missing_keys = list(missing_keys or [])
        self.config_key = config_key or (self.missing_keys[0] if self.missing_keys else None)


class TokenUnavailableError(CredentialsNotLoadedError):
    """유효한 SSO 캐시 토큰이 없을 때 발생하는 에러

    캐시 파일 없음, 파싱 실패, 빈 토큰, 만료를 구분하지 않습니다.
    `aws sso login`으로 토큰을 다시 받아야 합니다.

    Attributes:
        start_url: 토큰을 찾은 SSO 시작 URL
    """

    def __init__(self, start_url: str, cause: Exception | None = None):
        message = f"유효한 SSO 토큰이 없습니다 (aws sso login 필요): {start_url}"
        super().__init__(message, cause)
        self.start_url = start_url


class ProviderError(AuthError):
    """Provider에서 발생하는 에러

    원격 호출 자체가 실패한 경우(네트워크, 인증, 프로토콜)에 사용합니다.
    에러 메시지 형식: "[provider] operation: message"

    Attributes:
        provider: 에러가 발생한 Provider 이름
        operation: 실패한 작업 이름 (예: "get_role_credentials")
    """

    def __init__(
        self,
        provider: str,
        operation: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"[{provider}] {operation}: {message}"
        super().__init__(full_message, cause)
        self.provider = provider
        self.operation = operation


class RequiredConfigMissingError(AuthError):
    """원격 응답에 필수 필드가 빠져 있을 때 발생하는 에러

    GetRoleCredentials가 성공했지만 access_key_id, secret_access_key,
    session_token 중 하나가 없는 경우 해당 필드 이름을 담아 발생합니다.

    Attributes:
        field_name: 누락된 필드 이름
    """

    def __init__(self, field_name: str, cause: Exception | None = None):
        message = f"필수 설정 누락: {field_name}"
        super().__init__(message, cause)
        self.field_name = field_name
