"""Fixed markers of the settings file dialect.

Parser and writer both import these so the two sides never drift apart.
"""

from __future__ import annotations

METADATA_PREFIX = "## Settings file was created by plugin "
GUID_PREFIX = "## Plugin GUID: "

DESCRIPTION_PREFIX = "##"
COMMENT_PREFIX = "# "

TYPE_FIELD = "Setting type: "
DEFAULT_FIELD = "Default value: "
NO_DEFAULT_FIELD = "Default value:"
OPTIONS_FIELD = "Acceptable values: "
RANGE_FIELD = "Acceptable value range: From "
RANGE_SEPARATOR = " to "

OPTIONS_SEPARATOR = ", "

FLAGS_MESSAGE = (
    "# Multiple values can be set at the same time by separating them with , "
    "(e.g. Debug, Warning)"
)

# Literal written for a flags value with nothing selected.
EMPTY_FLAGS = "0"

BOOLEAN = "Boolean"
STRING = "String"
INT32 = "Int32"
SINGLE = "Single"

INT_TYPES = frozenset({INT32, "Number"})
FLOAT_TYPES = frozenset({SINGLE, "Double"})
