# ssocreds/auth/config/__init__.py
"""
AWS 설정 파일 파싱 모듈

이 모듈은 ~/.aws/config 및 ~/.aws/credentials 파일을 읽어
활성 프로파일의 SSO 설정을 추출합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Data classes
    "AWSProfile",
    "AWSSession",
    "ParsedConfig",
    "SSOConfig",
    # Classes
    "Loader",
    # Functions
    "detect_provider_type",
    "load_config",
    "load_sso_config",
    "list_profiles",
    "list_sso_sessions",
    # Constants
    "REQUIRED_SSO_KEYS",
]

_IMPORT_MAPPING = {
    "AWSProfile": (".loader", "AWSProfile"),
    "AWSSession": (".loader", "AWSSession"),
    "ParsedConfig": (".loader", "ParsedConfig"),
    "SSOConfig": (".loader", "SSOConfig"),
    "Loader": (".loader", "Loader"),
    "detect_provider_type": (".loader", "detect_provider_type"),
    "load_config": (".loader", "load_config"),
    "load_sso_config": (".loader", "load_sso_config"),
    "list_profiles": (".loader", "list_profiles"),
    "list_sso_sessions": (".loader", "list_sso_sessions"),
    "REQUIRED_SSO_KEYS": (".loader", "REQUIRED_SSO_KEYS"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
