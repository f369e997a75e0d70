"""Persistent settings for PlayerPrefs Inspector.

The CLI remembers which application it inspects (company/product names) and
how (backend, player vs. editor key). This package stores that state in a
single versioned JSON file under the tool's home folder.

Design goals:
  * Atomic writes (no corrupted settings on crash)
  * Resilient loads (backup and fall back to defaults)
"""

from .store import SettingsStore, atomic_write_json, backup_corrupt_file, default_settings

__all__ = ["SettingsStore", "atomic_write_json", "backup_corrupt_file", "default_settings"]
