from __future__ import annotations

import argparse
import logging
from pathlib import Path

from tesseract_orange.config import ToolchainConfig


def safe_print(msg: str) -> None:
    # Avoid UnicodeEncodeError on Windows CI/console encodings
    try:
        print(msg)
    except UnicodeEncodeError:
        print(msg.encode("utf-8", errors="replace").decode("utf-8"))


def _configure_logging(config: ToolchainConfig) -> None:
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tesseract-orange",
        description="Fetch and stage Tesseract OCR toolchain sources and traineddata.",
    )
    parser.add_argument("--version", action="store_true", help="Print version")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--progress", action="store_true", help="Show download progress bars")

    sub = parser.add_subparsers(dest="cmd")

    # source ...
    src = sub.add_parser("source", help="Upstream source archives")
    src_sub = src.add_subparsers(dest="source_cmd", required=True)

    src_sub.add_parser("list", help="List known upstream projects")

    p = src_sub.add_parser("info", help="Show an upstream project as JSON")
    p.add_argument("name")
    p.add_argument("--cache-dir", type=Path, default=None)

    p = src_sub.add_parser("resolve", help="Resolve a version request (default: latest)")
    p.add_argument("name")
    p.add_argument("--version", dest="source_version", default=None)

    p = src_sub.add_parser("fetch", help="Download a source archive into the cache")
    p.add_argument("name")
    p.add_argument("--version", dest="source_version", default=None)
    p.add_argument("--cache-dir", type=Path, default=None)

    p = src_sub.add_parser("extract", help="Extract a tar archive, stripping a single top-level dir")
    p.add_argument("archive", type=Path)
    p.add_argument("dest", type=Path)

    p = src_sub.add_parser("prepare", help="Resolve, fetch and extract upstream projects")
    p.add_argument("names", nargs="+")
    p.add_argument("--dest", type=Path, required=True)
    p.add_argument("--version", dest="source_version", default=None)
    p.add_argument("--cache-dir", type=Path, default=None)

    # cache ...
    cache = sub.add_parser("cache", help="Source archive cache")
    cache_sub = cache.add_subparsers(dest="cache_cmd", required=True)
    p = cache_sub.add_parser("path", help="Print the cache directory")
    p.add_argument("--cache-dir", type=Path, default=None)

    # traineddata ...
    td = sub.add_parser("traineddata", help="Tesseract traineddata files")
    td_sub = td.add_subparsers(dest="traineddata_cmd", required=True)
    p = td_sub.add_parser("install", help="Install or refresh traineddata files")
    p.add_argument("set", choices=["fast", "best", "legacy"])
    p.add_argument("identifiers", nargs="+", help="Language (eng) or script (Latin) names")
    p.add_argument("--tessdata-dir", type=Path, default=None)

    return parser


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        try:
            from importlib.metadata import version

            safe_print(f"tesseract-orange {version('tesseract-orange')}")
        except Exception:
            from tesseract_orange import __version__

            safe_print(f"tesseract-orange {__version__}")
        return 0

    if not args.cmd:
        parser.print_help()
        return 0

    config = ToolchainConfig.from_env(
        getattr(args, "cache_dir", None),
        debug=args.debug,
        progress=args.progress,
    )
    _configure_logging(config)

    if args.cmd == "source":
        from tesseract_orange.sources import cli as source_cli

        if args.source_cmd == "list":
            return source_cli.source_list_cmd()
        if args.source_cmd == "info":
            return source_cli.source_info_cmd(args.name, config=config)
        if args.source_cmd == "resolve":
            return source_cli.source_resolve_cmd(args.name, version=args.source_version)
        if args.source_cmd == "fetch":
            return source_cli.source_fetch_cmd(
                args.name,
                version=args.source_version,
                config=config,
            )
        if args.source_cmd == "extract":
            return source_cli.source_extract_cmd(args.archive, args.dest)
        if args.source_cmd == "prepare":
            return source_cli.source_prepare_cmd(
                args.names,
                dest=args.dest,
                version=args.source_version,
                config=config,
            )

    if args.cmd == "cache":
        from tesseract_orange.sources.cli import cache_path_cmd

        return cache_path_cmd(config=config)

    if args.cmd == "traineddata":
        from tesseract_orange.traineddata.installer import traineddata_install_cmd

        return traineddata_install_cmd(
            args.set,
            args.identifiers,
            tessdata_dir=args.tessdata_dir,
            config=config,
        )

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
