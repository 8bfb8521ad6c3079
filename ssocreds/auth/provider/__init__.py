# ssocreds/auth/provider/__init__.py
"""
자격 증명 Provider 구현 모듈

Provider 목록:
- SSOProvider: 캐시된 SSO 토큰 → Role 자격 증명 교환
- DefaultProvider: botocore 기본 자격 증명 체인 (폴백)
- ProviderChain: 여러 Provider를 순서대로 시도

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Base
    "BaseProvider",
    # SSO
    "SSOProvider",
    "get_role_credentials",
    # Default
    "DefaultProvider",
    # Chain
    "ProviderChain",
]

_IMPORT_MAPPING = {
    "BaseProvider": (".base", "BaseProvider"),
    "SSOProvider": (".sso", "SSOProvider"),
    "get_role_credentials": (".sso", "get_role_credentials"),
    "DefaultProvider": (".default", "DefaultProvider"),
    "ProviderChain": (".chain", "ProviderChain"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
