"""
ssocreds/client.py - boto3 client 생성 헬퍼

Retry + 타임아웃이 설정된 boto3 client를 생성합니다.
자격 증명 해석 코어는 자체 재시도/타임아웃을 두지 않으므로
네트워크 호출의 상한은 여기서 설정한 botocore Config가 결정합니다.

Example:
    from ssocreds.client import get_client

    # SSO 포털 API (서명 없음)
    sso = get_client("sso", region_name="ap-northeast-2", unsigned=True)

    # 해석된 자격 증명을 쓰는 세션
    sts = get_client("sts", session=session)
"""

from __future__ import annotations

from typing import Any, Literal, cast

import boto3
from botocore import UNSIGNED
from botocore.config import Config

from .config import settings

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_RETRY_MODE: RetryMode = "standard"


def get_client(
    service_name: str,
    region_name: str | None = None,
    session: boto3.Session | None = None,
    unsigned: bool = False,
    max_attempts: int = settings.API_RETRY_COUNT,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = settings.API_CONNECT_TIMEOUT,
    read_timeout: int = settings.API_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """Retry와 타임아웃이 적용된 boto3 client 생성

    Args:
        service_name: AWS 서비스 이름 (sso, sts 등)
        region_name: 리전 (None이면 세션 기본값)
        session: boto3 Session (None이면 새 Session 생성)
        unsigned: True면 요청 서명 생략 (sso:GetRoleCredentials 등 토큰 기반 API)
        max_attempts: 최대 시도 횟수
        retry_mode: 재시도 모드 ('standard' 또는 'adaptive')
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    if session is None:
        session = boto3.Session(region_name=region_name)

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )
    if unsigned:
        # 서명이 없으면 자격 증명 체인을 거치지 않음 (재귀 해석 방지)
        config = config.merge(Config(signature_version=UNSIGNED))

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # cast to Any to bypass boto3-stubs Literal type requirements
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
