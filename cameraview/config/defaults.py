"""
Default configuration values.
"""

from __future__ import annotations

DEFAULTS: dict[str, object] = {
    "workers": {"max": 1},
    "logging": {"level": "info", "dir": ""},
    "cameras": {
        "max_index": 4,
        # camera index -> "back" | "front"; OpenCV cannot report facing itself
        "facing": {},
    },
}
