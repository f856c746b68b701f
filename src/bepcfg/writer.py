from __future__ import annotations

from . import grammar
from .document import Entry, FileData
from .values import (
    FlagsValue,
    format_number,
    type_name,
    value_options,
    value_range,
    value_to_text,
)


def render_entry_comments(entry: Entry) -> list[str]:
    """Return the comment block written above ``entry``'s value line."""

    out: list[str] = []
    if entry.description is not None:
        out.extend(f"{grammar.DESCRIPTION_PREFIX} {line}" for line in entry.description.split("\n"))
    out.append(f"{grammar.COMMENT_PREFIX}{grammar.TYPE_FIELD}{type_name(entry.value)}")
    if entry.default is None:
        out.append(f"{grammar.COMMENT_PREFIX}{grammar.NO_DEFAULT_FIELD}")
    else:
        out.append(f"{grammar.COMMENT_PREFIX}{grammar.DEFAULT_FIELD}{value_to_text(entry.default)}")
    options = value_options(entry.value)
    if options is not None:
        out.append(
            f"{grammar.COMMENT_PREFIX}{grammar.OPTIONS_FIELD}"
            f"{grammar.OPTIONS_SEPARATOR.join(options)}"
        )
    if isinstance(entry.value, FlagsValue):
        out.append(grammar.FLAGS_MESSAGE)
    rng = value_range(entry.value)
    if rng is not None:
        out.append(
            f"{grammar.COMMENT_PREFIX}{grammar.RANGE_FIELD}{format_number(rng.start)}"
            f"{grammar.RANGE_SEPARATOR}{format_number(rng.end)}"
        )
    return out


def render_entry(entry: Entry) -> list[str]:
    return [*render_entry_comments(entry), f"{entry.name} = {value_to_text(entry.value)}"]


def write(doc: FileData) -> str:
    """Render ``doc`` as settings file text.

    Comments are regenerated from the structured fields, so the output is the
    canonical form: parsing it back yields an equal document and writing that
    again yields the same text.
    """

    out: list[str] = []
    if doc.metadata is not None:
        meta = doc.metadata
        out.append(f"{grammar.METADATA_PREFIX}{meta.mod_name} {meta.mod_version}")
        out.append(f"{grammar.GUID_PREFIX}{meta.mod_guid}")
        out.append("")

    for section in doc.sections:
        out.append(f"[{section.name}]")
        out.append("")
        for entry in section.entries:
            out.extend(render_entry(entry))
            out.append("")

    return "\n".join(out)
