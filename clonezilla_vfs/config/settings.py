"""Settings storage for application configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "CLONEZILLA_VFS_SETTINGS_PATH",
        Path.home() / ".config" / "clonezilla-vfs" / "settings.json",
    )
)

DEFAULT_CACHE_FOLDER = str(Path.home() / ".cache" / "clonezilla-vfs")

DEFAULT_SETTINGS: dict[str, Any] = {
    "sevenzip_path": None,  # Explicit 7-Zip executable, overrides the platform lookup
    "tools_root": None,  # Base folder for the bundled ext/7-Zip tree
    "cache_folder": DEFAULT_CACHE_FOLDER,
    "will_perform_random_seeking": False,
    "verbose": False,
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=dict)


settings_store = SettingsStore()


def load_settings() -> None:
    settings_store.values = dict(DEFAULT_SETTINGS)
    if not SETTINGS_PATH.exists():
        return
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return
    if isinstance(data, dict):
        settings_store.values.update(data)


def save_settings() -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(settings_store.values, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def get_setting(key: str, default: Any | None = None) -> Any:
    return settings_store.values.get(key, default)


def set_setting(key: str, value: Any) -> None:
    settings_store.values[key] = value
    save_settings()


def get_bool(key: str, default: bool = False) -> bool:
    return bool(get_setting(key, default))


def set_bool(key: str, value: bool) -> None:
    set_setting(key, bool(value))


load_settings()
