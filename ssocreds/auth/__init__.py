# ssocreds/auth/__init__.py
"""
AWS 자격 증명 해석 모듈 (ssocreds/auth)

`aws sso login`이 남긴 토큰 캐시를 Role 자격 증명으로 교환하고,
SSO 설정이나 토큰이 없으면 botocore 기본 자격 증명 체인으로 폴백합니다.

구성 요소:
- TokenCacheManager: ~/.aws/sso/cache 토큰 파일 읽기 (읽기 전용)
- Loader: 활성 프로파일의 SSO 설정 추출
- SSOProvider: 설정/토큰 로드 후 sso:GetRoleCredentials 교환
- ProviderChain: SSO → Default 순서로 시도
- CredentialsCache: 만료 시간까지 결과 재사용 (single-flight)

사용 예시:
    from ssocreds.auth import chained, get_session

    # 자격 증명 직접 해석
    provider = chained(profile_name="dev")
    credentials = provider.load()
    print(credentials.source, credentials.expiration)

    # boto3 Session으로 사용
    session = get_session(region="ap-northeast-2", profile_name="dev")
    sts = session.client("sts")

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    실제 사용 시점에만 하위 모듈이 로드되어 CLI 시작 시간을 최적화합니다.
"""

__all__ = [
    # Types
    "ProviderType",
    "Provider",
    "Credentials",
    "AuthError",
    "CredentialsNotLoadedError",
    "ConfigurationError",
    "TokenUnavailableError",
    "ProviderError",
    "RequiredConfigMissingError",
    # Cache
    "CacheEntry",
    "TokenCache",
    "TokenCacheManager",
    "CredentialsCache",
    "get_cache_filename",
    # Config
    "Loader",
    "AWSProfile",
    "AWSSession",
    "ParsedConfig",
    "SSOConfig",
    "load_config",
    "load_sso_config",
    "list_profiles",
    "list_sso_sessions",
    # Providers
    "BaseProvider",
    "SSOProvider",
    "DefaultProvider",
    "ProviderChain",
    "get_role_credentials",
    # Session 헬퍼
    "chained",
    "get_credentials_cache",
    "get_session",
    "clear_cache",
]

# Lazy import 매핑 테이블
_IMPORT_MAPPING = {
    # Types
    "ProviderType": (".types", "ProviderType"),
    "Provider": (".types", "Provider"),
    "Credentials": (".types", "Credentials"),
    "AuthError": (".types", "AuthError"),
    "CredentialsNotLoadedError": (".types", "CredentialsNotLoadedError"),
    "ConfigurationError": (".types", "ConfigurationError"),
    "TokenUnavailableError": (".types", "TokenUnavailableError"),
    "ProviderError": (".types", "ProviderError"),
    "RequiredConfigMissingError": (".types", "RequiredConfigMissingError"),
    # Cache
    "CacheEntry": (".cache", "CacheEntry"),
    "TokenCache": (".cache", "TokenCache"),
    "TokenCacheManager": (".cache", "TokenCacheManager"),
    "CredentialsCache": (".cache", "CredentialsCache"),
    "get_cache_filename": (".cache", "get_cache_filename"),
    # Config
    "Loader": (".config", "Loader"),
    "AWSProfile": (".config", "AWSProfile"),
    "AWSSession": (".config", "AWSSession"),
    "ParsedConfig": (".config", "ParsedConfig"),
    "SSOConfig": (".config", "SSOConfig"),
    "load_config": (".config", "load_config"),
    "load_sso_config": (".config", "load_sso_config"),
    "list_profiles": (".config", "list_profiles"),
    "list_sso_sessions": (".config", "list_sso_sessions"),
    # Providers
    "BaseProvider": (".provider", "BaseProvider"),
    "SSOProvider": (".provider", "SSOProvider"),
    "DefaultProvider": (".provider", "DefaultProvider"),
    "ProviderChain": (".provider", "ProviderChain"),
    "get_role_credentials": (".provider", "get_role_credentials"),
    # Session 헬퍼
    "chained": (".session", "chained"),
    "get_credentials_cache": (".session", "get_credentials_cache"),
    "get_session": (".session", "get_session"),
    "clear_cache": (".session", "clear_cache"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드

    CLI 시작 시간 최적화를 위해 무거운 의존성(boto3 등)을
    실제 필요한 시점에만 로드합니다.
    """
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
