"""
s7tool error handling and exception classes.

Every failure the tool reports derives from :class:`S7ToolError`, so the
command line boundary can turn any of them into a non-zero exit.
"""


class S7ToolError(Exception):
    """Base exception for all s7tool errors."""

    pass


class ConnectError(S7ToolError):
    """Raised when a session with the PLC could not be established."""

    pass


class TransportError(S7ToolError):
    """Raised when the transport reports a failed read or write."""

    pass


class UnsupportedArea(S7ToolError):
    """Raised when an area name is unknown or has no read/write support."""

    def __init__(self, name: str, reason: str = "not supported"):
        super().__init__(f"area {name!r} {reason}")
        self.name = name


class UnsupportedFormat(S7ToolError):
    """Raised when a format name is not recognised."""

    def __init__(self, name: str):
        super().__init__(f"unknown format {name!r}")
        self.name = name


class AlignmentError(S7ToolError):
    """Raised when a payload length is not a multiple of the element width."""

    def __init__(self, fmt: str, width: int, length: int):
        super().__init__(f"{fmt} requires size to be a multiple of {width}, got {length}")
        self.width = width
        self.length = length


class MalformedInput(S7ToolError):
    """Raised when text input for a write could not be parsed."""

    pass
