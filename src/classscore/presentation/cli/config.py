"""User preference persistence for the CLI."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

HOME_ENV_VAR = "CLASSSCORE_HOME"

_DEFAULT_UPDATE_PATH = True
_DEFAULT_MODIFY_INVENTORY = True


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "ClassScoreTracker"
        return Path.home() / "ClassScoreTracker"
    return Path.home() / ".config" / "classscore"


def get_default_config_path() -> Path:
    """Return the default preferences path."""
    return get_user_data_dir() / "config.json"


def get_scores_path() -> Path:
    """Return the default path of the saved score progress."""
    return get_user_data_dir() / "scores.json"


def default_config() -> Dict[str, Any]:
    return {
        "filters": {},
        "update_path": _DEFAULT_UPDATE_PATH,
        "modify_inventory": _DEFAULT_MODIFY_INVENTORY,
    }


def _normalize(raw: object) -> Dict[str, Any]:
    config = default_config()
    if not isinstance(raw, dict):
        return config
    if isinstance(raw.get("filters"), dict):
        config["filters"] = raw["filters"]
    if isinstance(raw.get("update_path"), bool):
        config["update_path"] = raw["update_path"]
    if isinstance(raw.get("modify_inventory"), bool):
        config["modify_inventory"] = raw["modify_inventory"]
    return config


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load preferences from disk, falling back to defaults when unreadable."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default_config()
    return _normalize(raw)


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist preferences to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = _normalize(config)
    config_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8"
    )
