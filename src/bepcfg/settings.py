"""The tool's own settings, kept in a small TOML file.

The file is edited with :mod:`tomlkit` so comments a user adds by hand
survive when the CLI updates a key.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from .errors import CfgIOError
from .paths import default_config_dir, settings_file

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "BEPCFG_CONFIG_DIR"
CONFIG_DIR_KEY = "config_dir"


def load_settings(path: Path | None = None) -> TOMLDocument:
    """Return the parsed settings document, or an empty one.

    A missing file is normal; an unreadable or malformed one is logged and
    treated as empty.
    """

    path = Path(path) if path is not None else settings_file()
    if not path.is_file():
        return tomlkit.document()
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, TOMLKitError) as exc:
        logger.warning("Failed to read settings %s: %s", path, exc)
        return tomlkit.document()


def save_settings(doc: TOMLDocument, path: Path | None = None) -> Path:
    path = Path(path) if path is not None else settings_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(tomlkit.dumps(doc), encoding="utf-8")
        tmp.replace(path)
    except OSError as exc:
        raise CfgIOError(f"{path}: {exc}") from exc
    return path


def get_config_dir(path: Path | None = None) -> Path | None:
    value = load_settings(path).get(CONFIG_DIR_KEY)
    if not value:
        return None
    return Path(str(value)).expanduser()


def set_config_dir(config_dir: Path, path: Path | None = None) -> Path:
    """Persist *config_dir* and return the settings file written."""

    doc = load_settings(path)
    doc[CONFIG_DIR_KEY] = str(Path(config_dir).expanduser().resolve())
    return save_settings(doc, path)


def resolve_config_dir(explicit: Path | None = None, *, path: Path | None = None) -> Path:
    """Pick the plugin config directory.

    Order: *explicit*, ``$BEPCFG_CONFIG_DIR``, ``config_dir`` in the settings
    file, then :func:`bepcfg.paths.default_config_dir`.
    """

    if explicit is not None:
        return Path(explicit).expanduser()
    env = os.environ.get(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser()
    stored = get_config_dir(path)
    if stored is not None:
        return stored
    return default_config_dir()
