"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
SSO 캐시 토큰 → Role 자격 증명 해석 결과를 확인하는 명령어를 제공합니다.

명령어 구조:
    ssocreds whoami                 # sts:GetCallerIdentity 출력
    ssocreds credentials            # 해석된 자격 증명 요약
    ssocreds credentials --export   # 셸 export 구문 출력
    ssocreds profiles               # 프로파일 / sso-session 목록
    ssocreds --version              # 버전 표시

공통 옵션:
    -p, --profile   활성 프로파일 (기본: AWS_PROFILE → default)
    -r, --region    리전 (기본: 프로파일 region → AWS_REGION)
    --debug         DEBUG 로그 출력

Usage:
    $ ssocreds -p dev whoami
    $ eval "$(ssocreds -p dev credentials --export)"
    $ python -m cli.app whoami
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가 (소스 트리에서 직접 실행 시)
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import click  # noqa: E402
from click import Context  # noqa: E402

from cli.ui import console, print_error, print_success, print_warning  # noqa: E402
from ssocreds.config import LogConfig, get_version, settings  # noqa: E402


def _load_credentials(ctx: Context):
    """컨텍스트의 프로파일로 자격 증명 해석 (실패 시 종료 코드 1)"""
    from ssocreds.auth import AuthError, get_credentials_cache

    try:
        return get_credentials_cache(ctx.obj["profile"]).load()
    except AuthError as e:
        print_error(f"자격 증명 해석 실패: {e}")
        raise SystemExit(1) from e


@click.group()
@click.option("-p", "--profile", "profile", default=None, help="활성 프로파일 (기본: AWS_PROFILE → default)")
@click.option("-r", "--region", "region", default=None, help="리전 (기본: 프로파일 region → AWS_REGION)")
@click.option("--debug", is_flag=True, help="DEBUG 로그 출력")
@click.version_option(get_version(), "-v", "--version", prog_name="ssocreds")
@click.pass_context
def cli(ctx: Context, profile: str | None, region: str | None, debug: bool) -> None:
    """ssocreds - AWS SSO 캐시 토큰 기반 자격 증명 해석기

    `aws sso login`으로 받은 토큰을 Role 자격 증명으로 교환하고,
    SSO 설정이 없으면 기본 자격 증명 체인으로 폴백합니다.
    """
    LogConfig.from_env().apply(debug=debug)
    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["region"] = region


@cli.command("whoami")
@click.pass_context
def whoami_command(ctx: Context) -> None:
    """sts:GetCallerIdentity로 현재 자격 증명의 주체 확인

    \b
    Examples:
        ssocreds whoami
        ssocreds -p dev whoami
    """
    from botocore.exceptions import BotoCoreError, ClientError
    from rich.table import Table

    from ssocreds.auth import AuthError, get_credentials_cache, get_session
    from ssocreds.client import get_client

    profile = ctx.obj["profile"]
    try:
        session = get_session(
            region=ctx.obj["region"],
            profile_name=profile,
            credentials_cache=get_credentials_cache(profile),
        )
        identity = get_client("sts", session=session).get_caller_identity()
    except AuthError as e:
        print_error(f"자격 증명 해석 실패: {e}")
        raise SystemExit(1) from e
    except (BotoCoreError, ClientError) as e:
        print_error(f"sts:GetCallerIdentity 실패: {e}")
        raise SystemExit(1) from e

    table = Table(title="sts:GetCallerIdentity", show_header=True)
    table.add_column("항목", style="cyan")
    table.add_column("값", style="white")
    table.add_row("Account", str(identity.get("Account", "")))
    table.add_row("Arn", str(identity.get("Arn", "")))
    table.add_row("UserId", str(identity.get("UserId", "")))
    console.print(table)


@cli.command("credentials")
@click.option("--export", "as_export", is_flag=True, help="셸 export 구문으로 출력")
@click.option("--json", "as_json", is_flag=True, help="credential_process 호환 JSON으로 출력")
@click.pass_context
def credentials_command(ctx: Context, as_export: bool, as_json: bool) -> None:
    """해석된 자격 증명 요약 출력

    기본 출력은 액세스 키를 마스킹합니다.
    --export / --json 은 시크릿을 그대로 출력하므로 주의하세요.

    \b
    Examples:
        ssocreds credentials
        eval "$(ssocreds -p dev credentials --export)"
    """
    if as_export and as_json:
        print_error("--export 와 --json 은 함께 사용할 수 없습니다")
        raise SystemExit(1)

    credentials = _load_credentials(ctx)

    if as_export:
        click.echo(f'export AWS_ACCESS_KEY_ID="{credentials.access_key_id}"')
        click.echo(f'export AWS_SECRET_ACCESS_KEY="{credentials.secret_access_key}"')
        if credentials.session_token:
            click.echo(f'export AWS_SESSION_TOKEN="{credentials.session_token}"')
        return

    if as_json:
        output = {
            "Version": 1,
            "AccessKeyId": credentials.access_key_id,
            "SecretAccessKey": credentials.secret_access_key,
        }
        if credentials.session_token:
            output["SessionToken"] = credentials.session_token
        if credentials.expiration:
            output["Expiration"] = credentials.expiration.isoformat()
        click.echo(json.dumps(output, indent=2))
        return

    expiration = credentials.expiration.isoformat() if credentials.expiration else "-"
    print_success(f"자격 증명 해석 성공 (source={credentials.source})")
    console.print(f"  [cyan]AccessKeyId[/cyan] {credentials.masked_access_key_id()}")
    console.print(f"  [cyan]Expiration[/cyan]  {expiration}")
    if credentials.source != settings.SSO_METHOD:
        print_warning(f"SSO 자격 증명이 아닙니다 (기본 체인 폴백: source={credentials.source})")


@cli.command("profiles")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def profiles_command(as_json: bool) -> None:
    """프로파일 및 sso-session 목록

    \b
    Examples:
        ssocreds profiles
        ssocreds profiles --json
    """
    from rich.table import Table

    from ssocreds.auth import AuthError, load_config
    from ssocreds.auth.config import detect_provider_type

    try:
        parsed = load_config()
    except AuthError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    rows = [
        {
            "name": profile.name,
            "type": str(detect_provider_type(profile)),
            "sso_session": profile.sso_session or "",
            "account_id": profile.sso_account_id or "",
            "role_name": profile.sso_role_name or "",
        }
        for profile in sorted(parsed.profiles.values(), key=lambda p: p.name)
    ]

    if as_json:
        click.echo(
            json.dumps(
                {"profiles": rows, "sso_sessions": sorted(parsed.sso_sessions)},
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    table = Table(title="AWS 프로파일", show_header=True)
    table.add_column("프로파일", style="cyan")
    table.add_column("타입", style="yellow")
    table.add_column("sso-session", style="white")
    table.add_column("계정", style="white")
    table.add_column("Role", style="white")
    for row in rows:
        table.add_row(row["name"], row["type"], row["sso_session"], row["account_id"], row["role_name"])
    console.print(table)

    if parsed.sso_sessions:
        console.print()
        console.print(f"[dim]sso-session: {', '.join(sorted(parsed.sso_sessions))}[/dim]")


if __name__ == "__main__":
    cli()
