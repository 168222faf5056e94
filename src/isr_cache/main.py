# src/isr_cache/main.py — v1
"""CLI entry point: key, list, inspect commands.

Usage:
    isr-cache key --codeview ntkrnlmp.pdb ce7ffb00c20b87500211456b3e905c471
    isr-cache key --banner "Linux version 6.8.0-40-generic (...) ..."
    isr-cache list --cache-dir ./cache
    isr-cache inspect ./cache/ntkrnlmp.pdb-ce7f....json [--symbol PsInitialSystemProcess]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from isr_cache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="isr-cache",
        description=f"isr-cache v{__version__} - OS kernel profile cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- key ---
    p_key = subparsers.add_parser(
        "key", help="Print the cache key of a fingerprint",
    )
    group = p_key.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--codeview", nargs=2, metavar=("PATH", "GUID"),
        help="CodeView PDB path and GUID",
    )
    group.add_argument(
        "--banner", help="Linux kernel version banner",
    )
    p_key.set_defaults(func=_cmd_key)

    # --- list ---
    p_list = subparsers.add_parser(
        "list", help="List cached artifacts",
    )
    p_list.add_argument(
        "--cache-dir", type=Path, default=None,
        help="Cache directory (default: CACHE_ROOT from environment/.env)",
    )
    p_list.add_argument(
        "--codec", default=None,
        help="Only list artifacts of this codec (json, msgpack, pickle)",
    )
    p_list.set_defaults(func=_cmd_list)

    # --- inspect ---
    p_inspect = subparsers.add_parser(
        "inspect", help="Decode an artifact and summarize it",
    )
    p_inspect.add_argument("artifact", type=Path, help="Artifact file")
    p_inspect.add_argument(
        "--symbol", default=None,
        help="Print the value of one symbol instead of a summary",
    )
    p_inspect.set_defaults(func=_cmd_inspect)

    return parser


def _cmd_key(args: argparse.Namespace) -> int:
    from isr_cache.cache.fingerprint import derive_key
    from isr_cache.cache.models import CodeViewId, LinuxBannerId

    if args.codeview:
        path, guid = args.codeview
        fingerprint = CodeViewId(module_path=path, guid=guid)
    else:
        fingerprint = LinuxBannerId(raw_banner=args.banner)

    print(derive_key(fingerprint))
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    from isr_cache.codecs.codec_factory import create_codec
    from isr_cache.config.settings import ConfigurationError, load_settings
    from isr_cache.storage.local_storage import LocalArtifactStorage

    cache_dir = args.cache_dir
    if cache_dir is None:
        cache_dir = load_settings().cache_root
    if cache_dir is None:
        raise ConfigurationError("Pass --cache-dir or set CACHE_ROOT")

    extension = create_codec(args.codec).extension if args.codec else None
    artifacts = LocalArtifactStorage(cache_dir).list_artifacts(extension)
    for artifact in artifacts:
        print(f"{artifact.size_bytes:>12}  {artifact.modified_at:%Y-%m-%d %H:%M}  {artifact.path.name}")
    print(f"\n{len(artifacts)} artifact(s) in {cache_dir}")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    from isr_cache.codecs.codec_factory import codec_for_extension
    from isr_cache.storage import layout
    from isr_cache.storage.local_storage import LocalArtifactStorage

    path: Path = args.artifact
    key, extension = layout.split_artifact_name(path.name)
    codec = codec_for_extension(extension)

    with LocalArtifactStorage(path.parent).open(key, extension) as view:
        profile = codec.decode(view)

    if args.symbol:
        value = profile.find_symbol(args.symbol)
        if value is None:
            print(f"Symbol not found: {args.symbol}", file=sys.stderr)
            return 1
        print(f"{args.symbol} = {value:#x}")
        return 0

    print(f"Artifact:     {path}")
    print(f"Codec:        {codec.format}")
    print(f"Architecture: {profile.architecture}")
    print(f"Symbols:      {len(profile.symbols)}")
    print(f"Structs:      {len(profile.types.structs)}")
    print(f"Enums:        {len(profile.types.enums)}")
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging from settings, with -v forcing DEBUG."""
    from isr_cache.config.settings import load_settings
    from isr_cache.logging.logger import setup_logging

    settings = load_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
