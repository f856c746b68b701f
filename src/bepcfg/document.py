"""Object graph for a parsed settings file."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from .errors import ValueFormatError
from .values import Value, value_from_dict, value_to_dict


@dataclass
class Metadata:
    """Header naming the plugin that generated the file."""

    mod_name: str
    mod_version: str
    mod_guid: str = ""


@dataclass
class Entry:
    name: str
    value: Value
    description: str | None = None
    default: Value | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "default": value_to_dict(self.default) if self.default is not None else None,
            "value": value_to_dict(self.value),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Entry:
        try:
            name = data["name"]
            value = data["value"]
        except (KeyError, TypeError) as exc:
            raise ValueFormatError(f"entry is missing {exc}") from exc
        default = data.get("default")
        return cls(
            name=name,
            value=value_from_dict(value),
            description=data.get("description"),
            default=value_from_dict(default) if default is not None else None,
        )


@dataclass
class Section:
    name: str
    entries: list[Entry] = field(default_factory=list)

    def entry(self, name: str) -> Entry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Section:
        try:
            name = data["name"]
        except (KeyError, TypeError) as exc:
            raise ValueFormatError(f"section is missing {exc}") from exc
        return cls(name, [Entry.from_dict(e) for e in data.get("entries", [])])


@dataclass
class FileData:
    """Root of a parsed settings file.

    Sections and their entries keep document order; :func:`bepcfg.write`
    emits them in the same order.
    """

    metadata: Metadata | None = None
    sections: list[Section] = field(default_factory=list)

    def section(self, name: str) -> Section | None:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def get_entry(self, section: str, entry: str) -> Entry | None:
        sec = self.section(section)
        if sec is None:
            return None
        return sec.entry(entry)

    def get_value(self, section: str, entry: str) -> Value | None:
        found = self.get_entry(section, entry)
        return found.value if found is not None else None

    def to_dict(self) -> dict[str, Any]:
        meta = None
        if self.metadata is not None:
            meta = {
                "mod_name": self.metadata.mod_name,
                "mod_version": self.metadata.mod_version,
                "mod_guid": self.metadata.mod_guid,
            }
        return {"metadata": meta, "sections": [s.to_dict() for s in self.sections]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileData:
        if not isinstance(data, Mapping):
            raise ValueFormatError("document must be a mapping")
        meta = data.get("metadata")
        metadata = None
        if meta is not None:
            try:
                metadata = Metadata(meta["mod_name"], meta["mod_version"], meta.get("mod_guid", ""))
            except (KeyError, TypeError, AttributeError) as exc:
                raise ValueFormatError(f"metadata is missing {exc}") from exc
        return cls(metadata, [Section.from_dict(s) for s in data.get("sections", [])])


def _same_kind(a: Value, b: Value) -> bool:
    if type(a) is not type(b):
        return False
    return getattr(a, "options", None) == getattr(b, "options", None)


def set_entry(doc: FileData, section: str, entry: str, value: Value) -> FileData:
    """Return a copy of *doc* where ``[section] entry`` holds *value*.

    A missing section is appended after the existing ones and a missing entry
    is appended to its section without description or default.  When *value*
    is of a different kind than the stored default (or an enum or flags value
    over other options) the default is dropped.  *doc* itself is left
    untouched.
    """

    new = deepcopy(doc)
    sec = new.section(section)
    if sec is None:
        sec = Section(section)
        new.sections.append(sec)
    found = sec.entry(entry)
    if found is None:
        sec.entries.append(Entry(name=entry, value=value))
    else:
        found.value = value
        if found.default is not None and not _same_kind(found.default, value):
            found.default = None
    return new
