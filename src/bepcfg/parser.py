"""Single pass parser for plugin settings files.

Comment lines ahead of an entry are collected into an :class:`EntryBuilder`;
the ``name = value`` line finalises the builder into an :class:`Entry` and
starts a fresh one.  Blank lines and section headers leave pending comment
state alone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from . import grammar
from .document import Entry, FileData, Metadata, Section
from .errors import CfgParseError
from .values import (
    EnumValue,
    FlagsValue,
    FloatValue,
    IntValue,
    Value,
    parse_float,
    parse_int,
    parse_range,
    simple_value_from_text,
)

logger = logging.getLogger(__name__)


def infer_setting_type(raw: str) -> str:
    """Guess a ``Setting type`` name from the first character of *raw*."""

    first = raw[:1]
    if first.isdigit() and first.isascii():
        return grammar.SINGLE if "." in raw else grammar.INT32
    if first in ("t", "f"):
        return grammar.BOOLEAN
    return grammar.STRING


@dataclass
class EntryBuilder:
    """Comment state collected for the next entry line."""

    description: list[str] = field(default_factory=list)
    setting_type: str | None = None
    default_text: str | None = None
    options: tuple[str, ...] | None = None
    is_flags: bool = False
    range_text: tuple[str, str] | None = None

    def apply_comment(self, body: str) -> None:
        """Record one ``# `` metadata comment; *body* excludes the marker."""

        if body.startswith(grammar.TYPE_FIELD):
            self.setting_type = body[len(grammar.TYPE_FIELD):]
        elif body.startswith(grammar.DEFAULT_FIELD):
            self.default_text = body[len(grammar.DEFAULT_FIELD):]
        elif body == grammar.NO_DEFAULT_FIELD:
            self.default_text = None
        elif body.startswith(grammar.OPTIONS_FIELD):
            listed = body[len(grammar.OPTIONS_FIELD):]
            self.options = tuple(listed.split(grammar.OPTIONS_SEPARATOR))
        elif body.startswith(grammar.RANGE_FIELD):
            low, sep, high = body[len(grammar.RANGE_FIELD):].partition(grammar.RANGE_SEPARATOR)
            if sep:
                self.range_text = (low, high)

    def build(self, name: str, raw_value: str) -> Entry:
        setting_type = self.setting_type or infer_setting_type(raw_value)
        default = None
        if self.default_text is not None:
            default = self._resolve(self.default_text, setting_type, name, "default")
        value = self._resolve(raw_value, setting_type, name, "value")
        description = "\n".join(self.description) if self.description else None
        return Entry(name=name, value=value, description=description, default=default)

    def _resolve(self, raw: str, setting_type: str, name: str, what: str) -> Value:
        if self.options is not None:
            return self._resolve_choice(raw, name)
        try:
            value = simple_value_from_text(raw, setting_type)
            if isinstance(value, IntValue):
                value = IntValue(value.value, parse_range(self.range_text, parse_int))
            elif isinstance(value, FloatValue):
                value = FloatValue(value.value, parse_range(self.range_text, parse_float))
        except ValueError as exc:
            raise CfgParseError(f"{name}: bad {what} for {setting_type}: {exc}") from exc
        return value

    def _resolve_choice(self, raw: str, name: str) -> Value:
        options = self.options or ()
        if self.is_flags:
            indices = frozenset(
                options.index(token)
                for token in raw.split(grammar.OPTIONS_SEPARATOR)
                if token in options
            )
            return FlagsValue(indices, options)
        if raw in options:
            return EnumValue(options.index(raw), options)
        # Files written against an older option list must still load.
        logger.warning(
            "%s: %r is not an acceptable value, using %r",
            name,
            raw,
            options[0] if options else "",
        )
        return EnumValue(0, options)


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _read_metadata(line: str) -> tuple[str, str] | None:
    parts = line[len(grammar.METADATA_PREFIX):].split(" ")
    if len(parts) < 2:
        return None
    return " ".join(parts[:-1]), parts[-1]


def _description_line(line: str) -> str:
    text = line[len(grammar.DESCRIPTION_PREFIX):]
    return text[1:] if text.startswith(" ") else text


def parse_lines(lines: Iterable[str]) -> FileData:
    """Parse an iterable of lines (for example an open text file)."""

    doc = FileData()
    current: Section | None = None
    builder = EntryBuilder()
    numbered: Iterator[tuple[int, str]] = enumerate(lines, start=1)

    for line_no, raw_line in numbered:
        line = _strip_eol(raw_line)
        if not line:
            continue

        if line.startswith(grammar.METADATA_PREFIX):
            header = _read_metadata(line)
            if header is not None:
                _, guid_line = next(numbered, (line_no + 1, ""))
                guid_line = _strip_eol(guid_line)
                guid = ""
                if guid_line.startswith(grammar.GUID_PREFIX):
                    guid = guid_line[len(grammar.GUID_PREFIX):]
                doc.metadata = Metadata(header[0], header[1], guid)
            continue

        if line.startswith("[") and line.endswith("]") and len(line) >= 2:
            if current is not None:
                doc.sections.append(current)
            current = Section(line[1:-1])
            continue

        if line.startswith(grammar.DESCRIPTION_PREFIX):
            builder.description.append(_description_line(line))
            continue

        if line == grammar.FLAGS_MESSAGE:
            builder.is_flags = True
            continue

        if line.startswith(grammar.COMMENT_PREFIX):
            builder.apply_comment(line[len(grammar.COMMENT_PREFIX):])
            continue

        name, sep, raw_value = line.partition("=")
        if not sep:
            continue
        name, raw_value = name.strip(), raw_value.strip()

        if current is None:
            raise CfgParseError("entry has no section", line_no)
        try:
            entry = builder.build(name, raw_value)
        except CfgParseError as exc:
            raise CfgParseError(exc.message, line_no) from exc
        builder = EntryBuilder()
        current.entries.append(entry)

    if current is not None:
        doc.sections.append(current)
    return doc


def parse(text: str) -> FileData:
    """Parse the full text of a settings file."""

    return parse_lines(text.split("\n"))
