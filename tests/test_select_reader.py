from __future__ import annotations

from pathlib import Path

import pytest

from playerprefs_inspector.locations import AppIdentity
from playerprefs_inspector.readers import (
    BinaryPrefsReader,
    PlistReader,
    RegistryReader,
    backend_for_platform,
    list_preferences,
    select_reader,
)

APP = AppIdentity("Acme", "Rocket")


@pytest.mark.parametrize(
    "platform,backend",
    [("win32", "registry"), ("darwin", "plist"), ("linux", "binary"), ("freebsd13", "binary")],
)
def test_backend_for_platform(platform: str, backend: str) -> None:
    assert backend_for_platform(platform) == backend


def test_auto_selects_by_platform() -> None:
    assert isinstance(select_reader(APP, platform="win32"), RegistryReader)
    assert isinstance(select_reader(APP, platform="darwin"), PlistReader)
    assert isinstance(select_reader(APP, platform="linux"), BinaryPrefsReader)


def test_explicit_backend_and_store_path(tmp_path: Path) -> None:
    reader = select_reader(APP, backend="plist", store_path=tmp_path / "x.plist")
    assert isinstance(reader, PlistReader)
    assert reader.location == str(tmp_path / "x.plist")


def test_unknown_backend_and_registry_path_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        select_reader(APP, backend="sqlite")
    with pytest.raises(ValueError):
        select_reader(APP, backend="registry", store_path=tmp_path / "x")


def test_identity_requires_both_names() -> None:
    with pytest.raises(ValueError):
        AppIdentity("", "Rocket")


def test_list_preferences_convenience(tmp_path: Path) -> None:
    store = tmp_path / "prefs.bin"
    store.write_bytes(bytes([1, 0, 0, 0]) + b"A" + bytes([0, 9, 0, 0, 0]))

    prefs = list_preferences("Acme", "Rocket", backend="binary", store_path=store)

    assert [(p.key, p.value) for p in prefs] == [("A", 9)]
