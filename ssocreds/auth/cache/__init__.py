# ssocreds/auth/cache/__init__.py
"""
SSO 토큰 캐시 리더 및 자격 증명 캐시 모듈

캐시 전략:
- TokenCache / TokenCacheManager: 파일 기반 (~/.aws/sso/cache/) - AWS CLI 호환, 읽기 전용
- CredentialsCache: 메모리 기반 - 만료 시간까지 재사용, single-flight

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "CacheEntry",
    "TokenCache",
    "TokenCacheManager",
    "CredentialsCache",
    "get_cache_filename",
    "default_cache_dir",
]

_IMPORT_MAPPING = {
    "CacheEntry": (".cache", "CacheEntry"),
    "TokenCache": (".cache", "TokenCache"),
    "TokenCacheManager": (".cache", "TokenCacheManager"),
    "CredentialsCache": (".cache", "CredentialsCache"),
    "get_cache_filename": (".cache", "get_cache_filename"),
    "default_cache_dir": (".cache", "default_cache_dir"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
