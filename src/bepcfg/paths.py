from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

APP_NAME = "bepcfg"

SETTINGS_FILENAME = "settings.toml"
CONFIG_DIRNAME = "config"


def _app_name(default: str) -> str:
    return os.getenv("BEPCFG_APP_NAME", default)


def user_config_dir(app_name: str = APP_NAME) -> Path:
    app = _app_name(app_name)
    return Path(_uc(appname=app)).resolve()


def settings_file(app_name: str = APP_NAME) -> Path:
    """Location of the tool's own ``settings.toml``."""
    return user_config_dir(app_name) / SETTINGS_FILENAME


def default_config_dir(app_name: str = APP_NAME) -> Path:
    """Fallback directory holding plugin ``.cfg`` files."""
    return user_config_dir(app_name) / CONFIG_DIRNAME
