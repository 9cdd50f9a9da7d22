"""Evaluate media queries against virtual viewport sizes from the command line."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from preview_media.change_notifier import ManualFrameScheduler
from preview_media.debug_config import PreviewSettings, load_preview_settings
from preview_media.feature_overrides import load_overrides
from preview_media.logging_utils import LOGGER_ROOT, build_rotating_file_handler, resolve_log_level, resolve_logs_dir
from preview_media.preview_match_media import PreviewMatchMedia
from preview_media.query_handle import MediaQueryChangeEvent
from preview_media.viewport import StaticViewport


def _parse_size(value: str) -> Tuple[float, float]:
    token = value.lower().replace(" ", "")
    width_text, sep, height_text = token.partition("x")
    if not sep:
        raise argparse.ArgumentTypeError(f"size must look like WIDTHxHEIGHT, got {value!r}")
    try:
        width = float(width_text)
        height = float(height_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid size {value!r}") from exc
    if width < 0 or height < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative, got {value!r}")
    return width, height


def _parse_override(value: str) -> Tuple[str, str]:
    key, sep, raw = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"override must look like FEATURE=VALUE, got {value!r}")
    return key.strip().lower(), raw.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="preview-media",
        description="Evaluate CSS media queries against a virtual viewport.",
    )
    parser.add_argument("queries", nargs="+", help="Media queries, e.g. '(min-width: 600px)'.")
    parser.add_argument(
        "--size",
        dest="sizes",
        action="append",
        type=_parse_size,
        required=True,
        help="Viewport size WIDTHxHEIGHT. Repeat to replay a resize sequence.",
    )
    parser.add_argument(
        "--override",
        dest="overrides",
        action="append",
        type=_parse_override,
        default=[],
        help="Media feature override FEATURE=VALUE, e.g. prefers-color-scheme=dark.",
    )
    parser.add_argument("--overrides-file", type=Path, help="JSON file with media feature overrides.")
    parser.add_argument("--settings", type=Path, help="JSON settings file.")
    parser.add_argument("--log-dir", type=Path, help="Also write logs to a rotating file in this directory.")
    parser.add_argument("--log", action="store_true", help="Write logs to the default preview-media log directory.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _configure_logging(verbose: bool, log_dir: Optional[Path], settings: PreviewSettings) -> List[logging.Handler]:
    root = logging.getLogger(LOGGER_ROOT)
    level = resolve_log_level(verbose)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    handlers: List[logging.Handler] = [stream_handler]
    root.setLevel(level)
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith(f"{LOGGER_ROOT}."):
            logging.getLogger(name).setLevel(level)
    if log_dir is not None:
        handlers.append(
            build_rotating_file_handler(
                log_dir,
                "preview-media.log",
                retention=settings.log_retention,
                formatter=formatter,
            )
        )
    for handler in handlers:
        root.addHandler(handler)
    return handlers


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_preview_settings(args.settings) if args.settings else PreviewSettings()
    log_dir = args.log_dir
    if log_dir is None and args.log:
        log_dir = resolve_logs_dir()
    handlers = _configure_logging(args.verbose, log_dir, settings)
    try:
        return _run(args, settings)
    finally:
        root = logging.getLogger(LOGGER_ROOT)
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()


def _run(args: argparse.Namespace, settings: PreviewSettings) -> int:
    overrides: Dict[str, str] = {}
    if args.overrides_file is not None:
        overrides.update(load_overrides(args.overrides_file))
    overrides.update(dict(args.overrides))

    first_width, first_height = args.sizes[0]
    viewport = StaticViewport(first_width, first_height)
    frames = ManualFrameScheduler()
    engine = PreviewMatchMedia(
        viewport,
        after=frames.after,
        after_cancel=frames.cancel,
        overrides=overrides,
        settings=settings,
    )

    changes: List[MediaQueryChangeEvent] = []
    print(f"viewport {first_width:g}x{first_height:g}")
    for query in args.queries:
        handle = engine.match_media(query)
        status = "match" if handle.matches else "no match"
        if not handle.supported:
            status = "unsupported"
        print(f"  {query}: {status}")
        handle.add_listener(changes.append)

    for width, height in args.sizes[1:]:
        viewport.set_size(width, height)
        frames.flush()
        print(f"viewport {width:g}x{height:g}")
        if not changes:
            print("  no changes")
        for event in changes:
            print(f"  {event.media}: {'match' if event.matches else 'no match'}")
        changes.clear()

    engine.destroy()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
