from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..locations import inspector_home

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def default_settings() -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "last_opened_at": None,
        # Application whose preferences are inspected
        "company_name": None,
        "product_name": None,
        # "auto" picks the reader from the running platform
        "backend": "auto",
        # Standalone player registry key instead of the editor one
        "player": False,
        # Sidecar registry file; None means <home>/registered_prefs.json
        "sidecar_path": None,
    }


def atomic_write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    txt = json.dumps(payload, indent=2, sort_keys=True)
    tmp.write_text(txt, encoding="utf-8")
    os.replace(tmp, path)


def backup_corrupt_file(path: Path) -> Optional[Path]:
    """Copy *path* aside as ``<name>.bak.<timestamp>``; returns the backup path."""
    try:
        ts = time.strftime("%Y%m%d_%H%M%S")
        bak = path.with_name(f"{path.name}.bak.{ts}")
        bak.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            return None
        bak.write_bytes(path.read_bytes())
        return bak
    except OSError as e:
        # Best-effort backup
        logger.warning("Could not back up %s: %s: %s", path, type(e).__name__, e)
        return None


@dataclass
class SettingsStore:
    """Load/save persistent settings.

    The store keeps settings as a plain dict to remain forward compatible
    with new keys across tool versions.
    """

    filename: str = "settings.json"
    home: Path = field(default_factory=inspector_home)

    def path(self) -> Path:
        return self.home / self.filename

    def sidecar_path(self) -> Path:
        custom = self.get("sidecar_path")
        if custom:
            return Path(custom).expanduser()
        return self.home / "registered_prefs.json"

    def load(self) -> Dict[str, Any]:
        path = self.path()
        base = default_settings()

        if not path.exists():
            return base

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("settings.json root is not an object")
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings %s: %s", path, e)
            backup_corrupt_file(path)
            return base

        # merge defaults (do not delete unknown keys)
        merged = dict(base)
        merged.update(data)
        return merged

    def save(self, data: Dict[str, Any]) -> None:
        # Shallow copy so we can stamp timestamp without mutating caller
        payload = dict(data or {})
        payload.setdefault("schema_version", SCHEMA_VERSION)
        payload["last_opened_at"] = time.strftime("%Y-%m-%dT%H:%M:%S")
        atomic_write_json(self.path(), payload)

    # Convenience helpers -------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        value = self.load().get(key)
        return default if value is None else value

    def update(self, patch: Dict[str, Any]) -> None:
        data = self.load()
        data.update(patch)
        self.save(data)
