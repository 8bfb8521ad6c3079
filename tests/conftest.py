"""
tests/conftest.py - pytest 공통 픽스처

AWS 설정 파일 / SSO 토큰 캐시를 tmp_path 아래로 격리하고
테스트용 헬퍼를 제공합니다.

Usage:
    def test_something(aws_files, write_token):
        aws_files.write_config(...)
        write_token("https://example.awsapps.com/start", access_token="t")
"""

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


START_URL = "https://example.awsapps.com/start"
ACCOUNT_ID = "111122223333"
ROLE_NAME = "ReadOnly"
SSO_REGION = "us-east-1"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(tmp_path, monkeypatch):
    """테스트 환경 설정

    실제 ~/.aws 를 읽지 않도록 설정 파일 경로와 HOME을 tmp_path로 돌립니다.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws_config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws_credentials"))
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    for name in (
        "AWS_PROFILE",
        "AWS_DEFAULT_PROFILE",
        "AWS_REGION",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_SECURITY_TOKEN",
        "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
        "AWS_CONTAINER_CREDENTIALS_FULL_URI",
        "AWS_WEB_IDENTITY_TOKEN_FILE",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)

    yield

    from ssocreds.auth.session import clear_cache

    clear_cache()


# =============================================================================
# AWS 설정 파일 픽스처
# =============================================================================


@dataclass
class AWSFiles:
    """tmp_path 아래의 AWS config / credentials 파일"""

    config_file: Path
    credentials_file: Path

    def write_config(self, text: str) -> Path:
        self.config_file.write_text(text, encoding="utf-8")
        return self.config_file

    def write_credentials(self, text: str) -> Path:
        self.credentials_file.write_text(text, encoding="utf-8")
        return self.credentials_file


@pytest.fixture
def aws_files(tmp_path):
    """AWS_CONFIG_FILE / AWS_SHARED_CREDENTIALS_FILE 이 가리키는 파일"""
    return AWSFiles(
        config_file=tmp_path / "aws_config",
        credentials_file=tmp_path / "aws_credentials",
    )


@pytest.fixture
def sso_profile_config(aws_files):
    """완전한 Legacy SSO 프로파일([default])"""
    aws_files.write_config(
        "[default]\n"
        f"sso_account_id = {ACCOUNT_ID}\n"
        f"sso_role_name = {ROLE_NAME}\n"
        f"sso_region = {SSO_REGION}\n"
        f"sso_start_url = {START_URL}\n"
    )
    return aws_files


# =============================================================================
# SSO 토큰 캐시 픽스처
# =============================================================================


@pytest.fixture
def token_cache_dir(tmp_path):
    """SSO 토큰 캐시 디렉토리"""
    cache_dir = tmp_path / "sso_cache"
    cache_dir.mkdir()
    return cache_dir


@pytest.fixture
def write_token(token_cache_dir):
    """토큰 캐시 파일 작성 헬퍼

    Returns:
        (key, access_token="t", expires_at=None, raw=None) -> Path
        expires_at 기본값은 현재 + 1시간, raw를 주면 내용을 그대로 기록
    """
    from ssocreds.auth.cache import get_cache_filename

    def _write(
        key: str = START_URL,
        access_token: Optional[str] = "t",
        expires_at: Optional[datetime] = None,
        raw: Optional[str] = None,
    ) -> Path:
        path = token_cache_dir / get_cache_filename(key)
        if raw is None:
            expires_at = expires_at or datetime.now(timezone.utc) + timedelta(hours=1)
            data = {
                "startUrl": START_URL,
                "region": SSO_REGION,
                "expiresAt": expires_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
            }
            if access_token is not None:
                data["accessToken"] = access_token
            raw = json.dumps(data)
        path.write_text(raw, encoding="utf-8")
        return path

    return _write


# =============================================================================
# SSO 클라이언트 모킹
# =============================================================================


def make_role_credentials_response(
    access_key_id: Optional[str] = "AKIAEXAMPLE1234567",
    secret_access_key: Optional[str] = "secret",
    session_token: Optional[str] = "session",
    expiration: Optional[int] = 1_700_000_000,
) -> dict:
    """GetRoleCredentials 응답 생성 헬퍼 (None 필드는 생략)"""
    role_credentials = {}
    if access_key_id is not None:
        role_credentials["accessKeyId"] = access_key_id
    if secret_access_key is not None:
        role_credentials["secretAccessKey"] = secret_access_key
    if session_token is not None:
        role_credentials["sessionToken"] = session_token
    if expiration is not None:
        role_credentials["expiration"] = expiration
    return {"roleCredentials": role_credentials}


@pytest.fixture
def mock_sso_client():
    """sso client 모킹 (기본 응답: 성공)"""
    mock_client = MagicMock()
    mock_client.get_role_credentials.return_value = make_role_credentials_response()
    return mock_client


@pytest.fixture
def client_factory(mock_sso_client):
    """region → mock_sso_client 를 반환하는 팩토리 (호출 기록 포함)"""
    factory = MagicMock(return_value=mock_sso_client)
    return factory


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "GetRoleCredentials",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


@pytest.fixture
def role_credentials_response():
    """make_role_credentials_response 헬퍼"""
    return make_role_credentials_response


@pytest.fixture
def client_error():
    """create_mock_client_error 헬퍼"""
    return create_mock_client_error


@pytest.fixture
def mock_sts_client():
    """STS 클라이언트 모킹"""
    mock_client = MagicMock()

    mock_client.get_caller_identity.return_value = {
        "UserId": "AROATEST123:user@example.com",
        "Account": "123456789012",
        "Arn": "arn:aws:sts::123456789012:assumed-role/ReadOnly/user@example.com",
    }

    yield mock_client
