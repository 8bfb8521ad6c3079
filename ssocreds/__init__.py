# ssocreds/__init__.py
"""
ssocreds - AWS SSO 캐시 토큰 기반 자격 증명 해석기

AWS CLI 로그인(`aws sso login`)이 남긴 토큰 캐시를 이용해
임시 Role 자격 증명을 얻고, 실패 시 기본 자격 증명 체인으로 폴백합니다.

아키텍처:
    ssocreds/
    ├── auth/           # 자격 증명 해석 서브시스템
    │   ├── types/      # 공통 타입 및 에러
    │   ├── cache/      # 토큰 캐시 리더, 자격 증명 캐시
    │   ├── config/     # ~/.aws/config 파싱
    │   ├── provider/   # SSO / Default Provider, Provider 체인
    │   └── session.py  # boto3 Session 헬퍼
    ├── client.py       # boto3 client 생성 헬퍼
    └── config.py       # 중앙 설정 관리

Usage:
    from ssocreds.auth import get_session

    session = get_session(region="ap-northeast-2")
    sts = session.client("sts")
    print(sts.get_caller_identity()["Arn"])
"""

__version__ = "0.3.1"
