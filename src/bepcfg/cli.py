from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from . import grammar
from .errors import BepCfgError, ValueFormatError
from .manifest import read_manifest, read_manifest_allow_old
from .parser import infer_setting_type
from .paths import settings_file, user_config_dir
from .settings import resolve_config_dir, set_config_dir
from .store import ConfigStore
from .values import (
    Value,
    simple_value_from_text,
    value_from_dict,
    value_from_text,
    value_to_text,
)
from .writer import write

DEBUG_ENV = "BEPCFG_DEBUG"

SETTING_TYPES = (grammar.BOOLEAN, grammar.STRING, grammar.INT32, grammar.SINGLE)

logger = logging.getLogger("bepcfg")


def _configure_logging(verbose: bool) -> None:
    if (verbose or os.environ.get(DEBUG_ENV)) and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s:%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)


def _store(args: argparse.Namespace) -> ConfigStore:
    return ConfigStore(resolve_config_dir(args.config_dir))


def _require_yaml():
    try:
        import yaml  # type: ignore
    except ModuleNotFoundError as exc:
        raise BepCfgError("PyYAML is required for YAML output") from exc
    return yaml


# ---------------------------------------------------------------------------
# Directory commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    data = {
        "user_config": user_config_dir(),
        "settings_file": settings_file(),
        "config_dir": resolve_config_dir(args.config_dir),
    }
    if args.as_json:
        print(json.dumps({k: str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v}")
    return 0


def config_dir_cmd(args: argparse.Namespace) -> int:
    if args.path is None:
        print(str(resolve_config_dir(args.config_dir)))
        return 0
    path = set_config_dir(args.path)
    print(str(path))
    return 0


def files_cmd(args: argparse.Namespace) -> int:
    store = _store(args)
    if args.dev or args.name:
        files = store.list_files_for_mod(args.dev or "", args.name or "")
    else:
        files = store.list_files()
    for rel in files:
        print(rel)
    return 0


# ---------------------------------------------------------------------------
# Settings file commands
# ---------------------------------------------------------------------------


def show_cmd(args: argparse.Namespace) -> int:
    doc = _store(args).read(args.path)
    if args.format == "json":
        print(json.dumps(doc.to_dict(), indent=2))
    elif args.format == "yaml":
        yaml = _require_yaml()
        print(yaml.safe_dump(doc.to_dict(), sort_keys=False, allow_unicode=True), end="")
    else:
        print(write(doc), end="")
    return 0


def get_cmd(args: argparse.Namespace) -> int:
    doc = _store(args).read(args.path)
    value = doc.get_value(args.section, args.entry)
    if value is None:
        return 1
    print(value_to_text(value))
    return 0


def _value_for_set(args: argparse.Namespace, current: Value | None) -> Value:
    if args.as_json:
        try:
            data = json.loads(args.value)
        except json.JSONDecodeError as exc:
            raise ValueFormatError(f"invalid JSON value: {exc}") from exc
        return value_from_dict(data)
    if current is not None and args.type is None:
        return value_from_text(args.value, current)
    setting_type = args.type or infer_setting_type(args.value)
    try:
        return simple_value_from_text(args.value, setting_type)
    except ValueError as exc:
        raise ValueFormatError(str(exc)) from exc


def set_cmd(args: argparse.Namespace) -> int:
    store = _store(args)
    current = None
    if store.path_for(args.path).exists():
        current = store.read(args.path).get_value(args.section, args.entry)
    value = _value_for_set(args, current)
    store.set_entry(args.path, args.section, args.entry, value)
    return 0


def manifest_cmd(args: argparse.Namespace) -> int:
    path: Path = args.path
    manifest = read_manifest_allow_old(path) if path.is_dir() else read_manifest(path)
    if args.as_json:
        print(json.dumps(manifest.to_dict()))
    else:
        print(f"{manifest.name} {manifest.version_number}")
    return 0


def build_parser(prog: str = "bepcfg") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Inspect and edit plugin settings files.")
    parser.add_argument("--config-dir", type=Path, default=None, help="Plugin config directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_paths = subparsers.add_parser("paths", help="Show bepcfg paths.")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_dir = subparsers.add_parser("config-dir", help="Print or remember the plugin config directory.")
    p_dir.add_argument("path", nargs="?", type=Path, default=None)
    p_dir.set_defaults(func=config_dir_cmd)

    p_files = subparsers.add_parser("files", help="List config files.")
    p_files.add_argument("--dev", help="Only files mentioning this plugin author")
    p_files.add_argument("--name", help="Only files mentioning this plugin name")
    p_files.set_defaults(func=files_cmd)

    p_show = subparsers.add_parser("show", help="Show a parsed settings file.")
    p_show.add_argument("path")
    p_show.add_argument("--as", dest="format", choices=["cfg", "json", "yaml"], default="cfg")
    p_show.set_defaults(func=show_cmd)

    p_get = subparsers.add_parser("get", help="Print the value of SECTION ENTRY.")
    p_get.add_argument("path")
    p_get.add_argument("section")
    p_get.add_argument("entry")
    p_get.set_defaults(func=get_cmd)

    p_set = subparsers.add_parser("set", help="Set SECTION ENTRY to VALUE.")
    p_set.add_argument("path")
    p_set.add_argument("section")
    p_set.add_argument("entry")
    p_set.add_argument("value")
    p_set.add_argument("--type", choices=SETTING_TYPES, default=None)
    p_set.add_argument("--json", dest="as_json", action="store_true", help="VALUE is a tagged JSON value")
    p_set.set_defaults(func=set_cmd)

    p_manifest = subparsers.add_parser("manifest", help="Show a plugin manifest.")
    p_manifest.add_argument("path", type=Path, help="manifest.json or a plugin directory")
    p_manifest.add_argument("--json", dest="as_json", action="store_true")
    p_manifest.set_defaults(func=manifest_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except BepCfgError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
