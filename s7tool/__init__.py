"""
s7tool, a command line client for Siemens S7 PLC memory areas.

Reads, writes and polls data blocks, inputs, outputs and markers over the
S7 protocol, using python-snap7 for the connection.
"""

from importlib.metadata import version, PackageNotFoundError

from .area import AreaDescriptor, AreaKind, resolve
from .codec import Format, decode, encode
from .engine import read_area, write_area
from .poll import PollPlan, poll
from .transport import ConnectionOptions, Session, Snap7Transport, Transport

__all__ = [
    "AreaDescriptor",
    "AreaKind",
    "resolve",
    "Format",
    "decode",
    "encode",
    "read_area",
    "write_area",
    "PollPlan",
    "poll",
    "ConnectionOptions",
    "Session",
    "Snap7Transport",
    "Transport",
]

try:
    __version__ = version("s7tool")
except PackageNotFoundError:
    __version__ = "0.0rc0"
