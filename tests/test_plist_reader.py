from __future__ import annotations

import plistlib
from pathlib import Path

import pytest

from playerprefs_inspector.errors import StoreUnavailable, UnrecognizedEncoding
from playerprefs_inspector.locations import AppIdentity, plist_path
from playerprefs_inspector.readers import PlistReader
from playerprefs_inspector.records import PlayerPref, ValueType

APP = AppIdentity("Acme", "Rocket")

_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
    '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
)


def _write_xml(path: Path, body: str) -> Path:
    path.write_text(_HEADER + f'<plist version="1.0">\n<dict>\n{body}\n</dict>\n</plist>\n', encoding="utf-8")
    return path


def test_real_element_decodes_to_float(tmp_path: Path) -> None:
    p = _write_xml(tmp_path / "prefs.plist", "<key>Lives</key>\n<real>2.0</real>")

    prefs = PlistReader(APP, path=p).list_preferences()

    assert prefs == [PlayerPref("Lives", ValueType.FLOAT, 2.0)]


def test_all_supported_elements(tmp_path: Path) -> None:
    p = _write_xml(
        tmp_path / "prefs.plist",
        "<key>Level</key><integer>-7</integer>"
        "<key>Volume</key><real>0.75</real>"
        "<key>Player</key><string>Ada &amp; co</string>"
        "<key>UnityGraphicsQuality</key><integer>3</integer>"
        "<key>unity.cloud_userid</key><string>abc</string>",
    )

    prefs = PlistReader(APP, path=p).list_preferences()

    assert prefs == [
        PlayerPref("Level", ValueType.INT, -7),
        PlayerPref("Volume", ValueType.FLOAT, 0.75),
        PlayerPref("Player", ValueType.STRING, "Ada & co"),
    ]


def test_binary_plist_is_accepted(tmp_path: Path) -> None:
    p = tmp_path / "prefs.plist"
    p.write_bytes(plistlib.dumps({"Coins": 12, "Name": "Bob"}, fmt=plistlib.FMT_BINARY))

    prefs = PlistReader(APP, path=p).list_preferences()

    assert {(x.key, x.value) for x in prefs} == {("Coins", 12), ("Name", "Bob")}


@pytest.mark.parametrize(
    "element",
    ["<true/>", "<false/>", "<data>AAEC</data>", "<array/>", "<dict/>", "<date>2020-01-01T00:00:00Z</date>"],
)
def test_unsupported_elements_raise(tmp_path: Path, element: str) -> None:
    p = _write_xml(tmp_path / "prefs.plist", f"<key>Odd</key>{element}")

    with pytest.raises(UnrecognizedEncoding) as ei:
        PlistReader(APP, path=p).list_preferences()
    assert ei.value.key == "Odd"


def test_integer_outside_32_bits_raises(tmp_path: Path) -> None:
    p = _write_xml(tmp_path / "prefs.plist", "<key>Big</key><integer>4294967296</integer>")
    with pytest.raises(UnrecognizedEncoding):
        PlistReader(APP, path=p).list_preferences()


def test_missing_file_is_store_unavailable(tmp_path: Path) -> None:
    with pytest.raises(StoreUnavailable):
        PlistReader(APP, path=tmp_path / "nope.plist").list_preferences()


def test_malformed_document_is_store_unavailable(tmp_path: Path) -> None:
    p = tmp_path / "prefs.plist"
    p.write_text("<plist><dict><key>A</key>", encoding="utf-8")
    with pytest.raises(StoreUnavailable):
        PlistReader(APP, path=p).list_preferences()


def test_non_dict_root_is_store_unavailable(tmp_path: Path) -> None:
    p = tmp_path / "prefs.plist"
    p.write_bytes(plistlib.dumps(["a", "b"]))
    with pytest.raises(StoreUnavailable):
        PlistReader(APP, path=p).list_preferences()


def test_default_location(tmp_path: Path) -> None:
    path = plist_path(APP, home=tmp_path)
    assert path == tmp_path / "Library" / "Preferences" / "unity.Acme.Rocket.plist"


def test_real_outside_float32_range_is_unrecognized(tmp_path: Path) -> None:
    p = _write_xml(tmp_path / "prefs.plist", "<key>Big</key><real>1e300</real>")
    with pytest.raises(UnrecognizedEncoding) as ei:
        PlistReader(APP, path=p).list_preferences()
    assert ei.value.key == "Big"
