try:
    from cli.app import cli
except ModuleNotFoundError:
    # console_script로 실행될 때 프로젝트 루트를 sys.path에 추가
    import os
    import sys

    sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
    from cli.app import cli


def main():
    """ssocreds CLI 엔트리포인트. cli.app:cli 로 위임합니다."""
    cli()


if __name__ == "__main__":
    main()
