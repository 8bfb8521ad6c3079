# tests/ssocreds/auth/test_auth_cache.py
"""
ssocreds/auth/cache/cache.py 단위 테스트

CacheEntry, TokenCache, TokenCacheManager, CredentialsCache 테스트.
"""

import hashlib
import logging
import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from ssocreds.auth.cache.cache import (
    CacheEntry,
    CredentialsCache,
    TokenCache,
    TokenCacheManager,
    default_cache_dir,
    get_cache_filename,
)
from ssocreds.auth.types import Credentials, CredentialsNotLoadedError, ProviderType

START_URL = "https://example.awsapps.com/start"

# =============================================================================
# CacheEntry 테스트
# =============================================================================


class TestCacheEntry:
    """CacheEntry 테스트"""

    def test_init_with_defaults(self):
        """기본 초기화"""
        entry = CacheEntry(value="test_value")

        assert entry.value == "test_value"
        assert entry.created_at is not None
        assert entry.expires_at is None

    def test_is_expired_with_no_expiry(self):
        """만료 시간 없으면 만료되지 않음"""
        entry = CacheEntry(value="test")
        assert entry.is_expired() is False

    def test_is_expired_with_buffer(self):
        """버퍼 시간 내이면 만료로 간주"""
        near_future = datetime.now(timezone.utc) + timedelta(seconds=30)
        entry = CacheEntry(value="test", expires_at=near_future)
        assert entry.is_expired(buffer_seconds=60) is True
        assert entry.is_expired(buffer_seconds=10) is False


# =============================================================================
# TokenCache 테스트
# =============================================================================


class TestTokenCache:
    """TokenCache 테스트"""

    def test_from_dict(self):
        """AWS CLI 캐시 형식에서 생성"""
        token = TokenCache.from_dict(
            {
                "accessToken": "t",
                "expiresAt": "2024-01-01T12:00:00Z",
                "region": "us-east-1",
                "startUrl": START_URL,
            }
        )
        assert token.access_token == "t"
        assert token.expires_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert token.region == "us-east-1"
        assert token.start_url == START_URL

    def test_from_dict_converts_offset_to_utc(self):
        """오프셋이 있는 시간은 UTC로 변환"""
        token = TokenCache.from_dict({"accessToken": "t", "expiresAt": "2024-01-01T21:00:00+09:00"})
        assert token.expires_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert token.expires_at.utcoffset() == timedelta(0)

    def test_from_dict_missing_expires_at(self):
        with pytest.raises(KeyError):
            TokenCache.from_dict({"accessToken": "t"})

    def test_from_dict_missing_access_token(self):
        with pytest.raises(KeyError):
            TokenCache.from_dict({"expiresAt": "2024-01-01T12:00:00Z"})

    def test_from_dict_not_object(self):
        with pytest.raises(TypeError):
            TokenCache.from_dict(["accessToken"])  # type: ignore[arg-type]

    def test_is_expired_at_exact_time(self):
        """만료 시간과 현재가 같으면 만료"""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        token = TokenCache(access_token="t", expires_at=now)
        assert token.is_expired(now=now) is True
        assert token.is_expired(now=now - timedelta(seconds=1)) is False


# =============================================================================
# 캐시 파일명 테스트
# =============================================================================


class TestCacheFilename:
    """get_cache_filename / default_cache_dir 테스트"""

    def test_sha1_of_key(self):
        """AWS CLI와 동일한 SHA-1 hex + .json"""
        expected = hashlib.sha1(START_URL.encode("utf-8")).hexdigest() + ".json"
        assert get_cache_filename(START_URL) == expected

    def test_deterministic(self):
        assert get_cache_filename(START_URL) == get_cache_filename(START_URL)
        assert get_cache_filename(START_URL) != get_cache_filename(START_URL + "/")

    def test_default_cache_dir_follows_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_cache_dir() == tmp_path / ".aws" / "sso" / "cache"


# =============================================================================
# TokenCacheManager 테스트
# =============================================================================


class TestTokenCacheManager:
    """TokenCacheManager 테스트"""

    def test_cache_key_legacy(self, token_cache_dir):
        """sso-session이 없으면 start_url이 키"""
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)
        assert manager.cache_key == START_URL
        assert manager.cache_path == token_cache_dir / get_cache_filename(START_URL)

    def test_cache_key_session(self, token_cache_dir):
        """sso-session 프로파일은 세션 이름이 키"""
        manager = TokenCacheManager(START_URL, session_name="my-sso", cache_dir=token_cache_dir)
        assert manager.cache_key == "my-sso"
        assert manager.cache_path.name == get_cache_filename("my-sso")

    def test_load_valid_token(self, token_cache_dir, write_token):
        """유효한 토큰 로드"""
        write_token(access_token="valid-token")
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)

        token = manager.load()

        assert token is not None
        assert token.access_token == "valid-token"
        assert token.start_url == START_URL

    def test_load_missing_file(self, token_cache_dir):
        """파일 없으면 None"""
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)
        assert manager.load() is None

    def test_load_invalid_json(self, token_cache_dir, write_token):
        """JSON 파싱 실패면 None"""
        write_token(raw="{not json")
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)
        assert manager.load() is None

    def test_load_invalid_utf8(self, token_cache_dir):
        """UTF-8로 디코딩할 수 없는 파일도 None"""
        (token_cache_dir / get_cache_filename(START_URL)).write_bytes(b"\xff\xfe garbage")
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)
        assert manager.load() is None

    def test_load_not_an_object(self, token_cache_dir, write_token):
        write_token(raw="[1, 2, 3]")
        assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

    def test_load_missing_access_token(self, token_cache_dir, write_token):
        write_token(access_token=None)
        assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

    def test_load_empty_access_token(self, token_cache_dir, write_token):
        """빈 토큰은 토큰 없음과 동일"""
        write_token(access_token="")
        assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

    def test_load_bad_expires_at(self, token_cache_dir, write_token):
        write_token(raw='{"accessToken": "t", "expiresAt": "not-a-date"}')
        assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

    def test_load_expired_token(self, token_cache_dir, write_token):
        """만료된 토큰은 None"""
        write_token(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

    def test_load_expires_exactly_now(self, token_cache_dir, write_token):
        """expiresAt == now 이면 만료"""
        expires_at = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        write_token(expires_at=expires_at)
        manager = TokenCacheManager(START_URL, cache_dir=token_cache_dir)

        assert manager.load(now=expires_at) is None
        assert manager.load(now=expires_at - timedelta(seconds=1)) is not None

    def test_load_logs_reason_at_debug(self, token_cache_dir, write_token, caplog):
        """실패 원인은 DEBUG 로그로만 남음"""
        write_token(raw="{not json")
        with caplog.at_level(logging.DEBUG, logger="ssocreds.auth.cache.cache"):
            assert TokenCacheManager(START_URL, cache_dir=token_cache_dir).load() is None

        records = [r for r in caplog.records if r.name == "ssocreds.auth.cache.cache"]
        assert records
        assert all(r.levelno == logging.DEBUG for r in records)

    def test_load_does_not_modify_cache(self, token_cache_dir, write_token):
        """읽기 전용 - 만료된 파일도 그대로 남음"""
        path = write_token(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        before = path.read_text(encoding="utf-8")

        TokenCacheManager(START_URL, cache_dir=token_cache_dir).load()

        assert path.exists()
        assert path.read_text(encoding="utf-8") == before

    def test_default_cache_dir_used(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        manager = TokenCacheManager(START_URL)
        assert manager.cache_dir == tmp_path / ".aws" / "sso" / "cache"


# =============================================================================
# CredentialsCache 테스트
# =============================================================================


def _make_credentials(expiration=None, source="sso", key="AKIAEXAMPLE"):
    return Credentials(
        access_key_id=key,
        secret_access_key="secret",
        session_token="token",
        expiration=expiration,
        source=source,
    )


class TestCredentialsCache:
    """CredentialsCache 테스트"""

    def test_delegates_type_and_name(self):
        provider = MagicMock()
        provider.type.return_value = ProviderType.CHAIN
        provider.name.return_value = "chain"

        cache = CredentialsCache(provider)

        assert cache.type() == ProviderType.CHAIN
        assert cache.name() == "chain"
        assert cache.provider is provider

    def test_reuses_until_expiry(self):
        """만료 전이면 하위 Provider를 다시 호출하지 않음"""
        provider = MagicMock()
        provider.load.return_value = _make_credentials(
            expiration=datetime.now(timezone.utc) + timedelta(hours=1)
        )
        cache = CredentialsCache(provider)

        first = cache.load()
        second = cache.load()

        assert first is second
        assert provider.load.call_count == 1

    def test_reloads_within_buffer(self):
        """만료 버퍼 내이면 재해석"""
        provider = MagicMock()
        provider.load.side_effect = [
            _make_credentials(expiration=datetime.now(timezone.utc) + timedelta(seconds=5), key="FIRST"),
            _make_credentials(expiration=datetime.now(timezone.utc) + timedelta(hours=1), key="SECOND"),
        ]
        cache = CredentialsCache(provider, buffer_seconds=10)

        assert cache.load().access_key_id == "FIRST"
        assert cache.load().access_key_id == "SECOND"
        assert provider.load.call_count == 2

    def test_no_expiration_uses_default_ttl(self):
        """만료 없는 자격 증명은 default_ttl 동안 재사용"""
        provider = MagicMock()
        provider.load.return_value = _make_credentials(expiration=None, source="env")
        cache = CredentialsCache(provider, default_ttl_seconds=900)

        before = datetime.now(timezone.utc)
        cache.load()
        cache.load()

        assert provider.load.call_count == 1
        assert cache.expires_at is not None
        assert cache.expires_at >= before + timedelta(seconds=900)

    def test_failures_not_cached(self):
        """실패는 캐시하지 않고 다음 호출에서 재시도"""
        provider = MagicMock()
        provider.load.side_effect = [
            CredentialsNotLoadedError("없음"),
            _make_credentials(expiration=datetime.now(timezone.utc) + timedelta(hours=1)),
        ]
        cache = CredentialsCache(provider)

        with pytest.raises(CredentialsNotLoadedError):
            cache.load()
        assert cache.expires_at is None

        assert cache.load().source == "sso"
        assert provider.load.call_count == 2

    def test_invalidate(self):
        provider = MagicMock()
        provider.load.return_value = _make_credentials(
            expiration=datetime.now(timezone.utc) + timedelta(hours=1)
        )
        cache = CredentialsCache(provider)

        assert cache.invalidate() is False
        cache.load()
        assert cache.invalidate() is True
        assert cache.expires_at is None

        cache.load()
        assert provider.load.call_count == 2

    def test_single_flight(self):
        """동시 요청은 하나의 하위 load() 호출로 합쳐짐"""
        started = threading.Event()
        calls = []

        def slow_load():
            calls.append(1)
            started.set()
            time.sleep(0.2)
            return _make_credentials(expiration=datetime.now(timezone.utc) + timedelta(hours=1))

        provider = MagicMock()
        provider.load.side_effect = slow_load
        cache = CredentialsCache(provider)

        results = []
        errors = []

        def worker():
            try:
                results.append(cache.load())
            except Exception as e:  # pragma: no cover - 실패 시 assert에서 확인
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert errors == []
        assert len(results) == 8
        assert len(calls) == 1
        assert all(r is results[0] for r in results)
