from .document import Entry, FileData, Metadata, Section, set_entry
from .errors import (
    BepCfgError,
    CfgIOError,
    CfgParseError,
    ManifestError,
    UnsafePathError,
    ValueFormatError,
)
from .grammar import FLAGS_MESSAGE
from .manifest import Manifest, read_manifest, read_manifest_allow_old
from .parser import parse, parse_lines
from .store import ConfigStore
from .values import (
    BoolValue,
    EnumValue,
    FlagsValue,
    FloatValue,
    IntValue,
    NumRange,
    StringValue,
    Value,
    value_from_dict,
    value_from_text,
    value_to_dict,
    value_to_text,
)
from .writer import write


__all__ = [
    "BepCfgError",
    "BoolValue",
    "CfgIOError",
    "CfgParseError",
    "ConfigStore",
    "Entry",
    "EnumValue",
    "FLAGS_MESSAGE",
    "FileData",
    "FlagsValue",
    "FloatValue",
    "IntValue",
    "Manifest",
    "ManifestError",
    "Metadata",
    "NumRange",
    "Section",
    "StringValue",
    "UnsafePathError",
    "Value",
    "ValueFormatError",
    "parse",
    "parse_lines",
    "read_manifest",
    "read_manifest_allow_old",
    "set_entry",
    "value_from_dict",
    "value_from_text",
    "value_to_dict",
    "value_to_text",
    "write",
]
