# ssocreds/auth/config/loader.py
"""
AWS 설정 파일 로더

~/.aws/config 와 ~/.aws/credentials 를 botocore 설정 로더로 읽고,
활성 프로파일에서 SSO 교환에 필요한 네 가지 값을 추출합니다.

    sso_account_id, sso_role_name, sso_region, sso_start_url

sso-session 방식 프로파일은 sso_region / sso_start_url 을
[sso-session NAME] 섹션에서 가져옵니다 (프로파일 값이 우선).

환경변수:
    AWS_CONFIG_FILE, AWS_SHARED_CREDENTIALS_FILE: 설정 파일 경로
    AWS_PROFILE, AWS_DEFAULT_PROFILE: 활성 프로파일 이름
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import botocore.session
from botocore.exceptions import BotoCoreError

from ...config import get_default_profile
from ..types import ConfigurationError, ProviderType

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_NAME = "default"

# 조회 순서 = 에러 메시지의 누락 키 순서
REQUIRED_SSO_KEYS = ("sso_account_id", "sso_role_name", "sso_region", "sso_start_url")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class SSOConfig:
    """SSO 교환에 필요한 설정 (Provider 수명 동안 불변)

    Attributes:
        account_id: 대상 AWS 계정 ID
        role_name: 대상 Role 이름 (Permission Set)
        region: SSO 포털 리전
        start_url: SSO 시작 URL (토큰 캐시 파일 키)
        session_name: sso-session 이름 (Legacy 프로파일이면 None)
    """

    account_id: str
    role_name: str
    region: str
    start_url: str
    session_name: str | None = None


@dataclass
class AWSSession:
    """[sso-session NAME] 섹션

    Attributes:
        name: 세션 이름
        start_url: SSO 시작 URL
        region: SSO 리전
        registration_scopes: OIDC 등록 스코프 (옵션)
    """

    name: str
    start_url: str
    region: str
    registration_scopes: str | None = None

    def __post_init__(self):
        if not self.start_url:
            raise ConfigurationError(
                f"sso-session '{self.name}'에 sso_start_url이 없습니다",
                config_key="sso_start_url",
            )
        if not self.region:
            raise ConfigurationError(
                f"sso-session '{self.name}'에 sso_region이 없습니다",
                config_key="sso_region",
            )


@dataclass
class AWSProfile:
    """[profile NAME] 섹션 (credentials 파일 값 병합)"""

    name: str
    region: str | None = None
    sso_session: str | None = None
    sso_account_id: str | None = None
    sso_role_name: str | None = None
    sso_region: str | None = None
    sso_start_url: str | None = None
    has_static_credentials: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_section(cls, name: str, section: dict[str, Any]) -> AWSProfile:
        known = {
            "region",
            "sso_session",
            "sso_account_id",
            "sso_role_name",
            "sso_region",
            "sso_start_url",
        }
        return cls(
            name=name,
            region=section.get("region"),
            sso_session=section.get("sso_session"),
            sso_account_id=section.get("sso_account_id"),
            sso_role_name=section.get("sso_role_name"),
            sso_region=section.get("sso_region"),
            sso_start_url=section.get("sso_start_url"),
            has_static_credentials=bool(
                section.get("aws_access_key_id") and section.get("aws_secret_access_key")
            ),
            extra={k: v for k, v in section.items() if k not in known},
        )

    def sso_values(self, sessions: dict[str, AWSSession]) -> dict[str, str | None]:
        """SSO 필수 키 값 (sso-session 참조 해석 포함)"""
        values: dict[str, str | None] = {
            "sso_account_id": self.sso_account_id,
            "sso_role_name": self.sso_role_name,
            "sso_region": self.sso_region,
            "sso_start_url": self.sso_start_url,
        }
        session = sessions.get(self.sso_session) if self.sso_session else None
        if session is not None:
            values["sso_region"] = values["sso_region"] or session.region
            values["sso_start_url"] = values["sso_start_url"] or session.start_url
        return values


@dataclass
class ParsedConfig:
    """파싱된 설정 전체

    Attributes:
        profiles: {프로파일 이름: AWSProfile}
        sso_sessions: {세션 이름: AWSSession}
        active_profile: 활성 프로파일 이름
    """

    profiles: dict[str, AWSProfile] = field(default_factory=dict)
    sso_sessions: dict[str, AWSSession] = field(default_factory=dict)
    active_profile: str = DEFAULT_PROFILE_NAME

    def get_profile(self, name: str | None = None) -> AWSProfile | None:
        return self.profiles.get(name or self.active_profile)


# =============================================================================
# Loader
# =============================================================================


class Loader:
    """AWS 설정 파일 로더

    botocore 설정 로더를 사용하므로 AWS CLI와 동일한 규칙으로 파일을 찾고 병합합니다.
    """

    def __init__(
        self,
        profile_name: str | None = None,
        config_file: str | Path | None = None,
        credentials_file: str | Path | None = None,
    ):
        """Loader 초기화

        Args:
            profile_name: 활성 프로파일 (기본: AWS_PROFILE → AWS_DEFAULT_PROFILE → "default")
            config_file: config 파일 경로 (기본: AWS_CONFIG_FILE 또는 ~/.aws/config)
            credentials_file: credentials 파일 경로 (기본: AWS_SHARED_CREDENTIALS_FILE 또는 ~/.aws/credentials)
        """
        self._profile_name = profile_name
        self._config_file = config_file
        self._credentials_file = credentials_file

    @property
    def profile_name(self) -> str:
        """활성 프로파일 이름"""
        return self._profile_name or get_default_profile() or DEFAULT_PROFILE_NAME

    def _create_botocore_session(self) -> botocore.session.Session:
        session = botocore.session.Session()
        if self._config_file:
            session.set_config_variable("config_file", str(self._config_file))
        if self._credentials_file:
            session.set_config_variable("credentials_file", str(self._credentials_file))
        return session

    def load(self) -> ParsedConfig:
        """설정 파일 전체 로드

        Returns:
            ParsedConfig

        Raises:
            ConfigurationError: 설정 파일 파싱 실패 시
        """
        session = self._create_botocore_session()
        try:
            full_config = session.full_config
        except BotoCoreError as e:
            raise ConfigurationError("AWS 설정 파일을 읽을 수 없습니다", cause=e) from e

        sessions: dict[str, AWSSession] = {}
        for name, section in (full_config.get("sso_sessions") or {}).items():
            try:
                sessions[name] = AWSSession(
                    name=name,
                    start_url=section.get("sso_start_url", ""),
                    region=section.get("sso_region", ""),
                    registration_scopes=section.get("sso_registration_scopes"),
                )
            except ConfigurationError as e:
                logger.warning("잘못된 sso-session 섹션 무시: %s", e)

        profiles = {
            name: AWSProfile.from_section(name, section or {})
            for name, section in (full_config.get("profiles") or {}).items()
        }

        logger.debug(
            "AWS 설정 로드: 프로파일 %d개, sso-session %d개 (활성: %s)",
            len(profiles),
            len(sessions),
            self.profile_name,
        )
        return ParsedConfig(
            profiles=profiles,
            sso_sessions=sessions,
            active_profile=self.profile_name,
        )

    def load_sso_config(self) -> SSOConfig:
        """활성 프로파일의 SSO 설정 추출

        네 개의 키 중 하나라도 없으면 실패합니다 (all-or-nothing).
        에러에는 누락된 키가 모두 포함됩니다.

        Returns:
            SSOConfig

        Raises:
            ConfigurationError: 프로파일이 없거나 필수 키가 누락된 경우
        """
        parsed = self.load()
        if not parsed.profiles:
            raise ConfigurationError("AWS 프로파일이 없습니다", config_key="profile")

        profile = parsed.get_profile()
        if profile is None:
            raise ConfigurationError(
                f"프로파일을 찾을 수 없습니다: {parsed.active_profile}",
                config_key="profile",
            )

        values = profile.sso_values(parsed.sso_sessions)
        missing = [key for key in REQUIRED_SSO_KEYS if not values.get(key)]
        if missing:
            raise ConfigurationError(
                f"[{profile.name}] 필수 SSO 설정 누락: {', '.join(missing)}",
                missing_keys=missing,
            )

        return SSOConfig(
            account_id=str(values["sso_account_id"]),
            role_name=str(values["sso_role_name"]),
            region=str(values["sso_region"]),
            start_url=str(values["sso_start_url"]),
            session_name=profile.sso_session if profile.sso_session in parsed.sso_sessions else None,
        )


# =============================================================================
# 모듈 레벨 편의 함수
# =============================================================================


def detect_provider_type(profile: AWSProfile) -> ProviderType:
    """프로파일 내용으로 Provider 타입 추정

    SSO 키가 하나라도 있으면 SSO, 그 외는 기본 체인이 처리합니다.
    """
    if profile.sso_session or profile.sso_start_url or profile.sso_account_id:
        return ProviderType.SSO
    return ProviderType.DEFAULT


def load_config(profile_name: str | None = None) -> ParsedConfig:
    """기본 위치의 설정 파일 로드"""
    return Loader(profile_name).load()


def load_sso_config(profile_name: str | None = None) -> SSOConfig:
    """활성 프로파일의 SSO 설정 로드"""
    return Loader(profile_name).load_sso_config()


def list_profiles() -> list[str]:
    """프로파일 이름 목록 (정렬)"""
    return sorted(load_config().profiles)


def list_sso_sessions() -> list[str]:
    """sso-session 이름 목록 (정렬)"""
    return sorted(load_config().sso_sessions)
