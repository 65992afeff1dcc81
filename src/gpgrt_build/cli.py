"""Command-line entrypoint: ``gpgrt-build build``."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from gpgrt_build.artifacts import emit_metadata, rerun_if_changed
from gpgrt_build.build import Build
from gpgrt_build.driver import BuildDriver
from gpgrt_build.errors import BuildError
from gpgrt_build.models import BuildOptions, SourceTree, Toggle
from gpgrt_build.observability import StructuredLogger

OPTION_NAMES = ("static", "shared", "doc")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gpgrt-build")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build and install libgpg-error, print link metadata")
    build.add_argument("--source", type=Path, default=None, help="Source tree (default: vendored)")
    build.add_argument("--out-dir", type=Path, default=None, help="Output root (default: $OUT_DIR/gpgrt-build)")
    build.add_argument("--prefix", type=Path, default=None, help="Install prefix (default: <out-dir>/install)")
    build.add_argument("--enable", action="append", choices=OPTION_NAMES, default=[])
    build.add_argument("--disable", action="append", choices=OPTION_NAMES, default=[])
    build.add_argument(
        "--toolchain-defaults",
        action="store_true",
        help="Start from unspecified options instead of static-only",
    )
    build.add_argument("--skip-check", action="store_true", help="Skip `make check`")
    build.add_argument("--manifest", type=Path, default=None, help="Write artifact manifest (.json or .cbor)")
    build.add_argument("--log", type=Path, default=None, help="Write structured logs as JSON lines")
    return parser


def _options(args: argparse.Namespace) -> BuildOptions:
    base = BuildOptions() if args.toolchain_defaults else BuildOptions.default()
    toggles = {name: getattr(base, name) for name in OPTION_NAMES}
    for name in args.enable:
        toggles[name] = Toggle.ENABLED
    for name in args.disable:
        toggles[name] = Toggle.DISABLED
    return BuildOptions(**toggles, install_path=args.prefix)


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    conflicting = sorted(set(args.enable) & set(args.disable))
    if conflicting:
        parser.error(f"option both enabled and disabled: {', '.join(conflicting)}")

    logger = StructuredLogger()
    build = Build.from_env(os.environ, driver=BuildDriver(logger=logger))
    if args.out_dir is not None:
        build.out_dir(args.out_dir)
    if args.source is not None:
        build.source = SourceTree(args.source)
    build.options = _options(args)
    build.run_tests = not args.skip_check

    try:
        artifacts = build.build()
    except BuildError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.log is not None:
            logger.to_json_lines(args.log)

    rerun_if_changed(build.source)
    emit_metadata(artifacts)
    if args.manifest is not None:
        if args.manifest.suffix == ".cbor":
            artifacts.to_cbor(args.manifest)
        else:
            artifacts.to_json(args.manifest)
    return 0


if __name__ == "__main__":
    sys.exit(main())
