"""Command line interface for PlayerPrefs Inspector."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional

import numpy as np

from .errors import PrefsInspectorError, StoreUnavailable, UnrecognizedEncoding
from .locations import AppIdentity
from .log_utils import sanitize_key, setup_logging
from .readers import BACKENDS, select_reader, write_prefs_file
from .records import PlayerPref, ValueType
from .settings import SettingsStore
from .sidecar import RegisteredPrefs

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_STORE_UNAVAILABLE = 3
EXIT_UNRECOGNIZED_ENCODING = 4
EXIT_REGISTRY_ERROR = 5


def parse_value(value_type: ValueType, text: str) -> Any:
    """Parse command line text into a value of *value_type* (C locale)."""
    if value_type is ValueType.INT:
        return int(text, 10)
    if value_type is ValueType.FLOAT:
        return float(text)
    return text


def format_value(pref: PlayerPref) -> str:
    if pref.value_type is ValueType.FLOAT:
        # shortest repr that round-trips at single precision
        return str(np.float32(pref.value))
    if pref.value_type is ValueType.STRING:
        return json.dumps(sanitize_key(str(pref.value)), ensure_ascii=False)
    return str(pref.value)


def _print_prefs(prefs: Iterable[PlayerPref], as_json: bool) -> None:
    prefs = list(prefs)
    if as_json:
        print(json.dumps([p.to_dict() for p in prefs], indent=2, ensure_ascii=False))
        return
    if not prefs:
        print("(no preferences)")
        return
    width = max(len(sanitize_key(p.key)) for p in prefs)
    for p in prefs:
        print(f"{p.value_type.display_name:<6} {sanitize_key(p.key):<{width}} = {format_value(p)}")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="playerprefs-inspector",
        description="Inspect game preferences stored in the platform-native store.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    ap.add_argument("--home", type=str, default=None, help="Tool state directory (settings, sidecar, log)")

    sub = ap.add_subparsers(dest="command", required=True)

    def add_store_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--company", type=str, default=None, help="Company name the game was built with")
        p.add_argument("--product", type=str, default=None, help="Product name the game was built with")
        p.add_argument("--backend", type=str, default=None, choices=["auto", *BACKENDS])
        p.add_argument("--store", type=str, default=None, help="Read this plist/binary file instead of the default location")
        p.add_argument("--player", action="store_true", default=None,
                       help="Registry: read the standalone player key instead of the editor key")
        p.add_argument("--remember", action="store_true", help="Save company/product/backend as defaults")

    p_list = sub.add_parser("list", help="List preferences found in the native store")
    add_store_args(p_list)
    p_list.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    p_export = sub.add_parser("export-binary", help="Snapshot the native store into a flat binary file")
    add_store_args(p_export)
    p_export.add_argument("out", type=str, help="Output file")

    p_reg = sub.add_parser("registry", help="Manage the sidecar registry of user-created preferences")
    p_reg.add_argument("--file", type=str, default=None, help="Sidecar JSON file (default from settings)")
    reg_sub = p_reg.add_subparsers(dest="registry_command", required=True)

    p_show = reg_sub.add_parser("show", help="Print registered preferences")
    p_show.add_argument("--json", action="store_true")

    p_add = reg_sub.add_parser("add", help="Register a new preference")
    p_add.add_argument("type", type=str, help="int | float | string")
    p_add.add_argument("--key", type=str, default=None, help="Key (default My<Type>, made unique)")
    p_add.add_argument("--value", type=str, default=None)

    p_rename = reg_sub.add_parser("rename", help="Rename a registered preference")
    p_rename.add_argument("key")
    p_rename.add_argument("new_key", nargs="?", default="")

    p_set = reg_sub.add_parser("set", help="Change a registered preference's value")
    p_set.add_argument("key")
    p_set.add_argument("value")

    p_remove = reg_sub.add_parser("remove", help="Remove a registered preference (default: the last one)")
    p_remove.add_argument("key", nargs="?", default=None)

    p_import = reg_sub.add_parser("import", help="Copy preferences from the native store into the registry")
    add_store_args(p_import)

    return ap


def _resolve_reader(args: argparse.Namespace, settings: SettingsStore, ap: argparse.ArgumentParser):
    company = args.company or settings.get("company_name")
    product = args.product or settings.get("product_name")
    if not company or not product:
        ap.error("--company and --product are required (or remember them once with --remember)")

    backend = args.backend or settings.get("backend", "auto")
    player = bool(args.player) if args.player is not None else bool(settings.get("player", False))

    if args.remember:
        settings.update({"company_name": company, "product_name": product, "backend": backend, "player": player})

    try:
        return select_reader(
            AppIdentity(company, product),
            backend=backend,
            store_path=Path(args.store).expanduser() if args.store else None,
            player=player,
        )
    except ValueError as e:
        ap.error(str(e))


def _run_registry(args: argparse.Namespace, settings: SettingsStore, ap: argparse.ArgumentParser) -> int:
    path = Path(args.file).expanduser() if args.file else settings.sidecar_path()
    registry = RegisteredPrefs.load(path)
    cmd = args.registry_command

    if cmd == "show":
        _print_prefs(registry, args.json)
        return EXIT_OK

    if cmd == "add":
        try:
            vt = ValueType.parse(args.type)
        except ValueError as e:
            ap.error(str(e))
        value = parse_value(vt, args.value) if args.value is not None else None
        pref = registry.add(vt, key=args.key, value=value)
        print(f"added {pref.key}")
    elif cmd == "rename":
        final = registry.rename(args.key, args.new_key)
        print(f"renamed {args.key} -> {final}")
    elif cmd == "set":
        vt = registry.get(args.key).value_type
        pref = registry.set_value(args.key, parse_value(vt, args.value))
        print(f"{pref.key} = {format_value(pref)}")
    elif cmd == "remove":
        pref = registry.remove(args.key) if args.key else registry.pop_last()
        print(f"removed {pref.key}")
    elif cmd == "import":
        reader = _resolve_reader(args, settings, ap)
        imported = registry.import_records(reader.list_preferences())
        print(f"imported {len(imported)} preference(s) from {reader.location}")

    registry.save()
    return EXIT_OK


def _dispatch(args: argparse.Namespace, settings: SettingsStore, ap: argparse.ArgumentParser) -> int:
    if args.command == "list":
        reader = _resolve_reader(args, settings, ap)
        _print_prefs(reader.list_preferences(), args.json)
        return EXIT_OK

    if args.command == "export-binary":
        reader = _resolve_reader(args, settings, ap)
        prefs = reader.list_preferences()
        out = write_prefs_file(Path(args.out).expanduser(), prefs)
        print(f"wrote {len(prefs)} preference(s) to {out}")
        return EXIT_OK

    return _run_registry(args, settings, ap)


def main(argv: Optional[List[str]] = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    home = Path(args.home).expanduser() if args.home else None
    setup_logging(verbose=args.verbose, home=home)
    settings = SettingsStore(home=home) if home is not None else SettingsStore()

    try:
        return _dispatch(args, settings, ap)
    except StoreUnavailable as e:
        print(f"[error] store unavailable: {e}", file=sys.stderr)
        return EXIT_STORE_UNAVAILABLE
    except UnrecognizedEncoding as e:
        print(f"[error] unrecognized encoding: {e}", file=sys.stderr)
        return EXIT_UNRECOGNIZED_ENCODING
    except KeyError as e:
        print(f"[error] no registered preference named {e.args[0]!r}", file=sys.stderr)
        return EXIT_REGISTRY_ERROR
    except (PrefsInspectorError, ValueError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_REGISTRY_ERROR
