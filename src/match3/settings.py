"""
Settings for the match-3 demo.

Optional JSON file with pacing and policy knobs. Missing or broken files fall
back to defaults; unknown keys are ignored when building a TurnConfig.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

from match3.components.token import TokenKind
from match3.components.turn_config import TurnConfig

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("match3.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "swap_delay": 0.3,
    "match_check_delay": 0.5,
    "clear_delay": 0.5,
    "fall_delay": 0.3,
    "require_match": False,
    "strict_invariants": False,
    "log_level": "INFO",
}


def load_settings(path: Path | str = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            settings = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load settings from %s: %s, using defaults", path, e)
        return DEFAULT_SETTINGS.copy()

    if not isinstance(settings, dict):
        logger.warning("Settings file %s does not hold an object, using defaults", path)
        return DEFAULT_SETTINGS.copy()

    # Merge with defaults to handle missing keys
    result = DEFAULT_SETTINGS.copy()
    result.update(settings)
    logger.debug("Settings loaded: %s", result)
    return result


def save_settings(settings: Dict[str, Any], path: Path | str = SETTINGS_FILE) -> None:
    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
        logger.debug("Settings saved: %s", settings)
    except OSError as e:
        logger.error("Failed to save settings to %s: %s", path, e)


def config_from_settings(settings: Dict[str, Any]) -> TurnConfig:
    """Build a TurnConfig from the keys it understands."""
    known = {f.name for f in fields(TurnConfig)}
    values = {key: value for key, value in settings.items() if key in known}
    if "spawn_kinds" in values:
        values["spawn_kinds"] = tuple(TokenKind(kind) for kind in values["spawn_kinds"])
    return TurnConfig(**values)
