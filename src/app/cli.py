"""
wedcontest CLI.

사용법:
    # 설치 (역할 생성)
    python -m src.app.cli install

    # 템플릿 위치 확인
    python -m src.app.cli locate loop

    # 템플릿 렌더링
    python -m src.app.cli render loop --arg title=Hello

    # 템플릿 파트 렌더링
    python -m src.app.cli part content contest

    # 역할 목록
    python -m src.app.cli roles

    # 로그 기록
    python -m src.app.cli log warning "Disk almost full" --source system

    # 다른 설정 파일
    python -m src.app.cli --config /path/to/config.yaml install
"""

import argparse
import logging
import sys
from pathlib import Path

from src.app.config import DEFAULT_CONFIG_PATH, load_settings
from src.app.plugin import WedContest
from src.domain.errors import WedContestError

logger = logging.getLogger(__name__)


def _parse_args_pairs(pairs: list[str]) -> dict[str, str]:
    """["key=value", ...] → dict."""
    args: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {pair!r}")
        args[key] = value
    return args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wedcontest",
        description="wedcontest plugin core tools",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("install", help="설치 루틴 실행 (역할 생성)")
    sub.add_parser("roles", help="등록된 역할 목록")

    locate = sub.add_parser("locate", help="템플릿 경로 확인")
    locate.add_argument("name")
    locate.add_argument("--template-path", default="")
    locate.add_argument("--default-path", default="")

    render = sub.add_parser("render", help="템플릿 렌더링")
    render.add_argument("name")
    render.add_argument("--arg", action="append", default=[], metavar="KEY=VALUE")
    render.add_argument("--template-path", default="")
    render.add_argument("--default-path", default="")

    part = sub.add_parser("part", help="템플릿 파트 렌더링")
    part.add_argument("slug")
    part.add_argument("name", nargs="?", default="")

    log = sub.add_parser("log", help="로그 기록")
    log.add_argument("level")
    log.add_argument("message")
    log.add_argument("--source", default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    CLI 진입점.

    Returns:
        종료 코드 (0: 성공, 1: 실패)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        plugin = WedContest(load_settings(args.config))
    except WedContestError as e:
        logger.error(f"Failed to load settings: {e}")
        return 1

    if args.command == "install":
        ran = plugin.install()
        print("installed" if ran else "skipped")
        return 0 if ran else 1

    if args.command == "roles":
        for role in plugin.roles.list_roles():
            caps = ", ".join(sorted(c for c, granted in role.capabilities.items() if granted))
            print(f"{role.name}\t{role.display_name}\t{caps}")
        return 0

    if args.command == "locate":
        location = plugin.templates.locate(args.name, args.template_path, args.default_path)
        print(location.path)
        logger.debug(f"source={location.source.value} candidates={location.candidates}")
        return 0 if location.exists else 1

    if args.command == "render":
        try:
            context = _parse_args_pairs(args.arg)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
        output = plugin.get_template(
            args.name, context, args.template_path, args.default_path, out=sys.stdout
        )
        return 0 if output is not None else 1

    if args.command == "part":
        output = plugin.get_template_part(args.slug, args.name, out=sys.stdout)
        return 0 if output is not None else 1

    if args.command == "log":
        context = {"source": args.source} if args.source else {}
        plugin.logger.log(args.level, args.message, context)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
