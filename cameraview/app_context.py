"""
Application bootstrap helpers.

Responsibilities:
- Locate/load configuration.
- Configure logging under the config directory.
- Build the decode service and camera enumerator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cameraview.config.loader import load_config
from cameraview.logging.setup import setup_logging
from cameraview.services.cameras import CameraEnumerator, OpenCVCameraEnumerator
from cameraview.services.workers import DecodeService

ENV_CONFIG_DIR = "CAMERAVIEW_CONFIG_DIR"


@dataclass
class AppContext:
    """Shared services for the CLI and embedding applications."""

    config: dict[str, Any]
    config_path: Path
    log_path: Path
    decode_service: DecodeService
    camera_enumerator: CameraEnumerator

    def close(self) -> None:
        self.decode_service.shutdown()


def default_config_dir() -> Path:
    """Return the directory to hold config files, honoring env override."""
    override = os.getenv(ENV_CONFIG_DIR)
    if override:
        return Path(override)
    return Path.home() / ".cameraview"


def default_config_path() -> Path:
    """Return default config file path."""
    return default_config_dir() / "config.toml"


def resolve_log_dir(config: dict[str, Any], config_dir: Path) -> Path:
    """Configured log dir, relative paths resolving against the config dir."""
    configured = str(config.get("logging", {}).get("dir", "") or "")
    if not configured:
        return config_dir / "logs"
    log_dir = Path(configured).expanduser()
    return log_dir if log_dir.is_absolute() else config_dir / log_dir


def initialize_app(config_path: Path | None = None) -> AppContext:
    """Load configuration, set up logging and return an AppContext."""
    config_path = config_path or default_config_path()
    config_dir = config_path.parent
    config_dir.mkdir(parents=True, exist_ok=True)
    config = load_config(config_path)

    log_path = setup_logging(
        log_dir=resolve_log_dir(config, config_dir),
        level=str(config.get("logging", {}).get("level", "INFO")),
    )

    worker_cfg = config.get("workers", {})
    camera_cfg = config.get("cameras", {})
    return AppContext(
        config=config,
        config_path=config_path,
        log_path=log_path,
        decode_service=DecodeService(max_workers=int(worker_cfg.get("max", 1))),
        camera_enumerator=OpenCVCameraEnumerator(
            max_index=int(camera_cfg.get("max_index", 4)),
            facing_hints=camera_cfg.get("facing", {}),
        ),
    )
