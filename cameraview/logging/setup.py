"""
Logging setup: console plus a rotating file under the config directory.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(
    log_dir: Path | None = None,
    level: str = "INFO",
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
) -> Path:
    """Configure console + rotating file handlers; return the log file path."""
    log_dir = log_dir or Path(".") / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "cameraview.log"
    handlers: list[logging.Handler] = [
        RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count),
        logging.StreamHandler(),
    ]
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
        force=True,
    )
    # Pillow logs every chunk it parses at DEBUG
    logging.getLogger("PIL").setLevel(max(logging.getLogger().level, logging.INFO))
    return log_path
