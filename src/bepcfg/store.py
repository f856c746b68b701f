"""Access to the plugin config directory.

Every path handed to :class:`ConfigStore` is relative to its base directory
and written with forward slashes; paths that would leave the base are
refused with :class:`~bepcfg.errors.UnsafePathError`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath

from .document import FileData, set_entry as _set_entry
from .errors import CfgIOError, UnsafePathError
from .parser import parse
from .values import Value
from .writer import write

logger = logging.getLogger(__name__)


def is_safe_rel_path(rel: str | PurePath) -> bool:
    """Return True if *rel* stays inside whatever directory it is joined to."""

    text = str(rel)
    if not text:
        return False
    for flavour in (PurePosixPath(text), PureWindowsPath(text)):
        if flavour.is_absolute() or flavour.drive or flavour.root:
            return False
        if any(part == ".." for part in flavour.parts):
            return False
    return True


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class ConfigStore:
    """Read and edit settings files below ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, rel: str | PurePath) -> Path:
        if not is_safe_rel_path(rel):
            raise UnsafePathError(f"invalid path: {rel!s}")
        return self.base_dir / rel

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_files(self) -> list[str]:
        """Return every file below the base directory as a relative path."""

        if not self.base_dir.exists():
            return []
        try:
            base = self.base_dir.resolve()
            out: list[str] = []
            for dirpath, _dirnames, filenames in os.walk(base):
                for filename in filenames:
                    path = Path(dirpath) / filename
                    if not path.is_file():
                        continue
                    real = path.resolve()
                    if not real.is_relative_to(base):
                        logger.debug("skipping %s: resolves outside %s", path, base)
                        continue
                    out.append(real.relative_to(base).as_posix())
        except OSError as exc:
            raise CfgIOError(f"{self.base_dir}: {exc}") from exc
        return sorted(out)

    def list_files_for_mod(self, dev: str, name: str) -> list[str]:
        """Files whose path mentions the plugin author or name (case-insensitive)."""

        terms = [t.lower() for t in (dev, name) if t]
        return [p for p in self.list_files() if any(t in p.lower() for t in terms)]

    # ------------------------------------------------------------------
    # Raw text
    # ------------------------------------------------------------------

    def read_text(self, rel: str | PurePath) -> str:
        path = self.path_for(rel)
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise CfgIOError(f"{path}: {exc}") from exc

    def write_text(self, rel: str | PurePath, contents: str) -> Path:
        path = self.path_for(rel)
        try:
            _atomic_write(path, contents)
        except OSError as exc:
            raise CfgIOError(f"{path}: {exc}") from exc
        logger.info("wrote %s", path)
        return path

    # ------------------------------------------------------------------
    # Parsed documents
    # ------------------------------------------------------------------

    def read(self, rel: str | PurePath) -> FileData:
        return parse(self.read_text(rel))

    def set_entry(
        self,
        rel: str | PurePath,
        section: str,
        entry: str,
        value: Value,
    ) -> FileData:
        """Set one entry and rewrite the file.

        A file that does not exist yet is treated as empty, so the section and
        entry are created.
        """

        path = self.path_for(rel)
        logger.info("set %s [%s] %s = %r", rel, section, entry, value)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            text = ""
        except (OSError, UnicodeDecodeError) as exc:
            raise CfgIOError(f"{path}: {exc}") from exc
        doc = _set_entry(parse(text), section, entry, value)
        self.write_text(rel, write(doc))
        return doc
