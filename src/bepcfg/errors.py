class BepCfgError(Exception):
    """Base class for bepcfg errors."""


class CfgParseError(BepCfgError):
    """Raised when a settings file cannot be parsed.

    ``line_no`` is the 1-based line the parser was looking at, or ``None``
    when the failure is not tied to a line.
    """

    def __init__(self, message: str, line_no: int | None = None) -> None:
        self.message = message
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class ValueFormatError(BepCfgError):
    """Raised when a serialised value or document is malformed."""


class ManifestError(BepCfgError):
    """Raised when a plugin manifest cannot be read."""


class CfgIOError(BepCfgError):
    """Raised when a config file cannot be read or written."""


class UnsafePathError(BepCfgError, ValueError):
    """Raised when a relative path escapes the config directory."""
