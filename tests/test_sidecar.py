from __future__ import annotations

import json
from pathlib import Path

import pytest

from playerprefs_inspector.errors import PrefsInspectorError, ValueTypeMismatch
from playerprefs_inspector.records import PlayerPref, ValueType
from playerprefs_inspector.sidecar import RegisteredPrefs, SidecarStore


def _registry(tmp_path: Path) -> RegisteredPrefs:
    return RegisteredPrefs.load(tmp_path / "registered_prefs.json")


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    assert len(reg) == 0
    assert reg.keys() == []


def test_add_generates_unique_default_keys(tmp_path: Path) -> None:
    reg = _registry(tmp_path)

    assert reg.add(ValueType.INT).key == "MyInt"
    assert reg.add(ValueType.INT).key == "MyInt1"
    assert reg.add(ValueType.FLOAT).key == "MyFloat"
    pref = reg.add(ValueType.STRING, key="Name", value="Ada")

    assert pref == PlayerPref("Name", ValueType.STRING, "Ada")
    assert reg.keys() == ["MyInt", "MyInt1", "MyFloat", "Name"]


def test_save_load_roundtrip(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    reg.add(ValueType.INT, key="Coins", value=12)
    reg.add(ValueType.FLOAT, key="Volume", value=0.5)
    reg.add(ValueType.STRING, key="Name", value="Zoë")
    reg.save()

    doc = json.loads((tmp_path / "registered_prefs.json").read_text(encoding="utf-8"))
    assert doc["schema_version"] == 1
    assert doc["prefs"][0] == {"key": "Coins", "type": "int", "value": 12}

    again = _registry(tmp_path)
    assert list(again) == list(reg)


def test_rename_ignores_own_key_and_avoids_others(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    reg.add(ValueType.INT, key="Score5")
    reg.add(ValueType.INT, key="Score6")

    assert reg.rename("Score5", "Score5") == "Score5"
    assert reg.rename("Score5", "Score6") == "Score7"
    assert reg.keys() == ["Score7", "Score6"]
    assert reg.rename("Score7", "") == "MyInt"


def test_rename_unknown_key_raises(tmp_path: Path) -> None:
    with pytest.raises(KeyError):
        _registry(tmp_path).rename("nope", "x")


def test_set_value_enforces_type(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    reg.add(ValueType.INT, key="Coins")

    assert reg.set_value("Coins", 40).value == 40
    with pytest.raises(ValueTypeMismatch):
        reg.set_value("Coins", "forty")
    assert reg.get("Coins").value == 40


def test_remove_and_pop_last(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    reg.add(ValueType.INT, key="A")
    reg.add(ValueType.INT, key="B")
    reg.add(ValueType.INT, key="C")

    assert reg.remove("A").key == "A"
    assert reg.pop_last().key == "C"
    assert reg.keys() == ["B"]
    assert "B" in reg
    reg.pop_last()
    with pytest.raises(PrefsInspectorError):
        reg.pop_last()


def test_import_uniqifies_clashing_keys(tmp_path: Path) -> None:
    reg = _registry(tmp_path)
    reg.add(ValueType.INT, key="Lvl")

    imported = reg.import_records(
        [PlayerPref("Lvl", ValueType.INT, 5), PlayerPref("Speed", ValueType.FLOAT, 3.5)]
    )

    assert [p.key for p in imported] == ["Lvl1", "Speed"]
    assert reg.get("Lvl1").value == 5


def test_corrupt_sidecar_is_backed_up(tmp_path: Path) -> None:
    path = tmp_path / "registered_prefs.json"
    path.write_text("[1, 2", encoding="utf-8")

    assert SidecarStore(path).load() == []
    assert sorted(tmp_path.glob("registered_prefs.json.bak.*"))


def test_invalid_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "registered_prefs.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": 1,
                "prefs": [
                    {"key": "Ok", "type": "int", "value": 1},
                    {"key": "Bad", "type": "int", "value": "one"},
                    {"key": "", "type": "string", "value": "x"},
                    {"key": "Weird", "type": "bool", "value": True},
                    "not an object",
                ],
            }
        ),
        encoding="utf-8",
    )

    assert [p.key for p in SidecarStore(path).load()] == ["Ok"]
