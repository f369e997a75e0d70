"""Where each platform keeps its preference store, and where the tool keeps its own state."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Allow relocating the tool's own state (settings, sidecar registry, log).
# Example:
#   export PLAYERPREFS_INSPECTOR_HOME=/tmp/prefs_state
_ENV_HOME = "PLAYERPREFS_INSPECTOR_HOME"

EDITOR_REGISTRY_TEMPLATE = "Software\\Unity\\UnityEditor\\{company}\\{product}"
PLAYER_REGISTRY_TEMPLATE = "Software\\{company}\\{product}"
PLIST_NAME_TEMPLATE = "unity.{company}.{product}.plist"
BINARY_PREFS_NAME = "prefs.bin"


@dataclass(frozen=True)
class AppIdentity:
    """The two identifying strings a game runtime keys its preferences by."""

    company: str
    product: str

    def __post_init__(self) -> None:
        if not self.company or not self.product:
            raise ValueError("Both company and product names are required to locate a preference store")


def inspector_home() -> Path:
    env = (os.environ.get(_ENV_HOME) or "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".playerprefs_inspector"


def registry_key_path(app: AppIdentity, *, player: bool = False) -> str:
    """Registry key (relative to HKEY_CURRENT_USER) holding the preferences.

    The editor's play mode writes under ``Software\\Unity\\UnityEditor``; a
    standalone player writes directly under ``Software``.
    """
    template = PLAYER_REGISTRY_TEMPLATE if player else EDITOR_REGISTRY_TEMPLATE
    return template.format(company=app.company, product=app.product)


def plist_path(app: AppIdentity, *, home: Optional[Path] = None) -> Path:
    base = Path(home) if home is not None else Path.home()
    return base / "Library" / "Preferences" / PLIST_NAME_TEMPLATE.format(company=app.company, product=app.product)


def binary_prefs_path(app: AppIdentity, *, config_home: Optional[Path] = None) -> Path:
    if config_home is None:
        xdg = (os.environ.get("XDG_CONFIG_HOME") or "").strip()
        config_home = Path(xdg) if xdg else Path.home() / ".config"
    return Path(config_home) / "unity3d" / app.company / app.product / BINARY_PREFS_NAME


__all__ = [
    "AppIdentity",
    "BINARY_PREFS_NAME",
    "EDITOR_REGISTRY_TEMPLATE",
    "PLAYER_REGISTRY_TEMPLATE",
    "PLIST_NAME_TEMPLATE",
    "binary_prefs_path",
    "inspector_home",
    "plist_path",
    "registry_key_path",
]
