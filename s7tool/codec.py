"""
Conversion between raw PLC buffers and their text representation.

All multi-byte values use the S7 wire order, which is big-endian.
"""

import math
import re
import string
import struct
from enum import Enum
from typing import List

from .error import AlignmentError, MalformedInput, UnsupportedFormat


class Format(Enum):
    HEX = "hex"
    STRING = "string"
    INT16 = "int16"
    INT32 = "int32"
    FLOAT32 = "float32"

    @classmethod
    def from_name(cls, name: str) -> "Format":
        """Look up a format by name, ignoring case.

        Raises:
            UnsupportedFormat: the name matches no format or alias.
        """
        try:
            return format_aliases[name.lower()]
        except KeyError:
            raise UnsupportedFormat(name) from None


format_aliases = {
    "hex": Format.HEX,
    "string": Format.STRING,
    "str": Format.STRING,
    "int16": Format.INT16,
    "int32": Format.INT32,
    "float32": Format.FLOAT32,
    "float": Format.FLOAT32,
}

# struct code and element width of the numeric formats
numeric_layouts = {
    Format.INT16: (">h", 2),
    Format.INT32: (">i", 4),
    Format.FLOAT32: (">f", 4),
}


def _as_format(fmt) -> Format:
    if isinstance(fmt, Format):
        return fmt
    return Format.from_name(fmt)


def decode(data: bytes, fmt) -> str:
    """Render a raw buffer as text.

    Args:
        data: buffer as read from the PLC.
        fmt: a :class:`Format` or its name.

    Returns:
        The text representation of ``data``.

    Raises:
        UnsupportedFormat: unknown format name.
        AlignmentError: the buffer length does not fit the element width.

    Examples:
        >>> decode(b"\\x01\\x02\\x03\\x04", "int16")
        '258,772'
    """
    fmt = _as_format(fmt)
    if fmt == Format.HEX:
        return bytes_to_hex(data)
    if fmt == Format.STRING:
        return bytes(data).decode("utf-8", errors="surrogateescape")

    code, width = numeric_layouts[fmt]
    if len(data) % width != 0:
        raise AlignmentError(fmt.value, width, len(data))
    values = [item[0] for item in struct.iter_unpack(code, bytes(data))]
    if fmt == Format.FLOAT32:
        return ",".join(format_real(value) for value in values)
    return ",".join(str(value) for value in values)


def encode(text: str, fmt) -> bytes:
    """Parse user input into the raw buffer to be written.

    Args:
        text: hex byte pairs, a plain string, or comma separated numbers.
        fmt: a :class:`Format` or its name.

    Returns:
        The encoded buffer. Its length follows from the input alone.

    Raises:
        UnsupportedFormat: unknown format name.
        MalformedInput: a token could not be parsed.

    Examples:
        >>> encode("1.5,2.25", "float32").hex()
        '3fc0000040100000'
    """
    fmt = _as_format(fmt)
    if fmt == Format.HEX:
        return hex_to_bytes(text)
    if fmt == Format.STRING:
        return text.encode("utf-8", errors="surrogateescape")

    code, width = numeric_layouts[fmt]
    tokens = split_values(text)
    if fmt == Format.FLOAT32:
        return b"".join(_pack_real(token) for token in tokens)
    return b"".join(struct.pack(code, parse_int(token, width * 8)) for token in tokens)


def bytes_to_hex(data: bytes) -> str:
    return " ".join(f"{byte:02X}" for byte in data)


def hex_to_bytes(text: str) -> bytes:
    """Parse hex byte pairs. Spaces and ``0x`` prefixes are ignored anywhere."""
    clean = text.replace(" ", "").replace("0x", "").replace("0X", "")
    if len(clean) % 2 != 0:
        raise MalformedInput(f"hex input length must be even, got {len(clean)}")

    result = bytearray(len(clean) // 2)
    for i in range(0, len(clean), 2):
        pair = clean[i : i + 2]
        if not all(char in string.hexdigits for char in pair):
            raise MalformedInput(f"invalid hex {pair!r} at position {i}")
        result[i // 2] = int(pair, 16)
    return bytes(result)


def split_values(text: str) -> List[str]:
    """Split comma separated input, dropping blanks."""
    return [item.strip() for item in text.split(",") if item.strip()]


def parse_int(token: str, bits: int) -> int:
    """Parse a signed integer that has to fit in ``bits`` bits.

    Decimal and ``0x``/``0o``/``0b`` prefixed literals are accepted. A
    leading zero marks an octal literal, so ``010`` is 8.
    """
    octal = re.fullmatch(r"([+-]?)0([0-7]+)", token)
    try:
        if octal:
            value = int(f"{octal.group(1)}0o{octal.group(2)}", 0)
        else:
            value = int(token, 0)
    except ValueError:
        raise MalformedInput(f"invalid integer {token!r}") from None

    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise MalformedInput(f"integer {token!r} out of range for int{bits}")
    return value


def _pack_real(token: str) -> bytes:
    try:
        return struct.pack(">f", float(token))
    except ValueError:
        raise MalformedInput(f"invalid float {token!r}") from None
    except OverflowError:
        raise MalformedInput(f"float {token!r} out of range for float32") from None


def format_real(value: float) -> str:
    """Shortest decimal text that packs back to the same binary32 bits.

    Examples:
        >>> format_real(struct.unpack(">f", bytes.fromhex("3dcccccd"))[0])
        '0.1'
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    packed = struct.pack(">f", value)
    # nine significant digits always identify a binary32 value
    for digits in range(1, 10):
        text = f"{value:.{digits - 1}e}"
        try:
            if struct.pack(">f", float(text)) == packed:
                break
        except OverflowError:
            # rounded above the largest finite binary32
            continue

    mantissa, exponent = text.split("e")
    exp = int(exponent)
    if exp < -4 or exp >= 6:
        return f"{mantissa}e{exp:+03d}"
    return f"{value:.{max(digits - 1 - exp, 0)}f}"
