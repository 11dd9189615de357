"""
App configuration: defaults plus an optional JSON override file.

Only presentation/runtime knobs live here. Timing rules that define the
engine's behavior (1-minute countdown floor, rolling 7/30 day windows) are
constants in the services that own them and are deliberately not exposed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config" / "habitfocus.json"

PALETTE = [
    "#3498db", "#e74c3c", "#2ecc71", "#9b59b6",
    "#f1c40f", "#e67e22", "#1abc9c", "#34495e",
]

# Default config (used if JSON doesn't exist yet)
DEFAULT_CONFIG = {
    "tick_interval_ms": 1000,
    "default_countdown_minutes": 1,
    "default_color": PALETTE[0],
    "palette": list(PALETTE),
    "default_theme_id": "light",
    "db_path": str(ROOT_DIR / "habitfocus.db"),
}


def load_config(path: Optional[Path] = None) -> dict:
    """Read the JSON config at *path* and merge it over the defaults."""
    path = path or CONFIG_PATH
    merged = dict(DEFAULT_CONFIG)
    merged["palette"] = list(PALETTE)
    if not path.exists():
        return merged
    try:
        with open(path, encoding="utf-8") as f:
            cfg = json.load(f)
        if not isinstance(cfg, dict):
            raise ValueError("config root must be an object")
    except (json.JSONDecodeError, ValueError):
        logger.warning("Bad config at %s, using defaults.", path)
        return merged
    merged.update({k: v for k, v in cfg.items() if k in DEFAULT_CONFIG})
    return merged


def save_config(config: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    logger.info("Config saved to %s", path)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Holds the tunable settings (tick cadence, default color, DB location)
#   and loads overrides from config/habitfocus.json when present.
#
# Key points:
#   - Unknown keys in the JSON are ignored, so an old config file never
#     injects settings the code doesn't understand.
#   - A corrupt file is not fatal: we log a warning and keep the defaults.
#
# Interviewer-friendly talking points:
#   1. Config vs constants: "how often the heartbeat fires" is deployment
#      config; "a week is 7 rolling days" is business logic and stays in code.
#   2. JSON over INI/YAML: zero extra dependencies and trivially editable.
