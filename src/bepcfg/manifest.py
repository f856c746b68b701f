"""Reader for the ``manifest.json`` shipped with every installed plugin package."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
# A disabled plugin keeps its manifest under this name.
DISABLED_MANIFEST_NAME = "manifest.json.old"

_REQUIRED = ("name", "description", "version_number", "dependencies", "website_url")


@dataclass(frozen=True)
class Manifest:
    name: str
    description: str
    version_number: str
    dependencies: tuple[str, ...] = field(default_factory=tuple)
    website_url: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Manifest:
        if not isinstance(data, Mapping):
            raise ManifestError("manifest root must be an object")
        missing = [key for key in _REQUIRED if key not in data]
        if missing:
            raise ManifestError(f"missing field(s): {', '.join(missing)}")
        for key in ("name", "description", "version_number", "website_url"):
            if not isinstance(data[key], str):
                raise ManifestError(f"{key} must be a string")
        deps = data["dependencies"]
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise ManifestError("dependencies must be a list of strings")
        return cls(
            name=data["name"],
            description=data["description"],
            version_number=data["version_number"],
            dependencies=tuple(deps),
            website_url=data["website_url"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "version_number": self.version_number,
            "dependencies": list(self.dependencies),
            "website_url": self.website_url,
        }


def read_manifest(path: Path) -> Manifest:
    """Load the manifest at *path*."""

    path = Path(path)
    try:
        # Package tools commonly save these with a BOM.
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"{path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"{path}: {exc}") from exc
    try:
        return Manifest.from_dict(data)
    except ManifestError as exc:
        raise ManifestError(f"{path}: {exc}") from exc


def read_manifest_allow_old(mod_dir: Path) -> Manifest:
    """Load a plugin's manifest whether the plugin is enabled or disabled."""

    mod_dir = Path(mod_dir)
    for candidate in (MANIFEST_NAME, DISABLED_MANIFEST_NAME):
        path = mod_dir / candidate
        if path.exists():
            logger.debug("reading manifest %s", path)
            return read_manifest(path)
    raise ManifestError(f"{MANIFEST_NAME} not found under {mod_dir}")
