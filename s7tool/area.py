"""
PLC memory areas and the descriptors used to address them.
"""

from dataclasses import dataclass
from enum import IntEnum

from .error import UnsupportedArea


class AreaKind(IntEnum):
    """Memory areas reachable by byte reads and writes.

    The values are the S7 protocol area codes.
    """

    PE = 0x81  # process inputs
    PA = 0x82  # process outputs
    MK = 0x83  # markers (flags)
    DB = 0x84  # data blocks


area_aliases = {
    "DB": AreaKind.DB,
    "PE": AreaKind.PE,
    "I": AreaKind.PE,
    "INPUT": AreaKind.PE,
    "PA": AreaKind.PA,
    "Q": AreaKind.PA,
    "OUTPUT": AreaKind.PA,
    "MK": AreaKind.MK,
    "M": AreaKind.MK,
    "MERKER": AreaKind.MK,
}

# timers and counters are valid S7 areas, but are not byte addressable here
unimplemented_areas = {"TM", "CT"}


def resolve(name: str) -> AreaKind:
    """Map an area name or alias to its :class:`AreaKind`, ignoring case.

    Raises:
        UnsupportedArea: unknown name, or one of the timer/counter areas.

    Examples:
        >>> resolve("merker")
        <AreaKind.MK: 131>
    """
    key = name.strip().upper()
    if key in unimplemented_areas:
        raise UnsupportedArea(name, "is recognised but not supported for read/write")
    try:
        return area_aliases[key]
    except KeyError:
        raise UnsupportedArea(name) from None


@dataclass(frozen=True)
class AreaDescriptor:
    """A contiguous byte range inside one PLC memory area.

    ``block`` is only used for data blocks and ignored for the other areas.
    """

    kind: AreaKind
    block: int = 0
    start: int = 0
    length: int = 1

    def __post_init__(self) -> None:
        if self.block < 0:
            raise ValueError(f"block number must not be negative, got {self.block}")
        if self.start < 0:
            raise ValueError(f"start offset must not be negative, got {self.start}")
        if self.length <= 0:
            raise ValueError(f"length must be positive, got {self.length}")

    @classmethod
    def from_name(cls, area: str, block: int = 0, start: int = 0, length: int = 1) -> "AreaDescriptor":
        return cls(resolve(area), block, start, length)

    def __str__(self) -> str:
        if self.kind == AreaKind.DB:
            return f"DB{self.block} start={self.start} size={self.length}"
        return f"{self.kind.name} start={self.start} size={self.length}"
