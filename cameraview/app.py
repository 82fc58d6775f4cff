"""
Command line entry point.

    cameraview orient SRC DEST [--scale S]
    cameraview cameras [--facing back|front]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from cameraview.app_context import AppContext, initialize_app
from cameraview.services.cameras import Facing, has_camera_facing, has_cameras
from cameraview.services.decoder import CameraViewError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cameraview", description="Camera utilities")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    sub = parser.add_subparsers(dest="command", required=True)

    orient = sub.add_parser("orient", help="Decode an image and apply its EXIF rotation")
    orient.add_argument("source", type=Path)
    orient.add_argument("dest", type=Path)
    orient.add_argument("--scale", type=float, default=None)

    cameras = sub.add_parser("cameras", help="Report whether cameras are available")
    cameras.add_argument("--facing", choices=[f.value for f in Facing], default=None)
    return parser


def _orient(context: AppContext, args: argparse.Namespace) -> int:
    try:
        future = context.decode_service.decode_bitmap(args.source.read_bytes(), args.scale)
    except (CameraViewError, OSError) as exc:
        logger.error("Could not orient %s: %s", args.source, exc)
        return 1
    result = future.result()
    if not result.ok or result.image is None:
        logger.error("Could not orient %s: %s", args.source, result.error)
        return 1
    oriented = result.image.image
    if args.dest.suffix.lower() in {".jpg", ".jpeg"} and oriented.mode not in {"RGB", "L"}:
        oriented = oriented.convert("RGB")
    args.dest.parent.mkdir(parents=True, exist_ok=True)
    oriented.save(args.dest)
    logger.info("Wrote %s (%dx%d)", args.dest, result.image.width, result.image.height)
    return 0


def _cameras(context: AppContext, args: argparse.Namespace) -> int:
    if args.facing:
        found = has_camera_facing(context.camera_enumerator, args.facing)
    else:
        found = has_cameras(context.camera_enumerator)
    print("yes" if found else "no")
    return 0 if found else 1


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    context = initialize_app(args.config)
    try:
        if args.command == "orient":
            return _orient(context, args)
        return _cameras(context, args)
    finally:
        context.close()


if __name__ == "__main__":
    raise SystemExit(main())
