"""
Single reads and writes of a PLC memory area.
"""

import logging

from .area import AreaDescriptor
from .error import TransportError
from .transport import Session

logger = logging.getLogger(__name__)


def read_area(session: Session, descriptor: AreaDescriptor) -> bytes:
    """Read ``descriptor.length`` bytes with a single transport call.

    Args:
        session: open session to the PLC.
        descriptor: area, block, start offset and length to read.

    Returns:
        The bytes read.

    Raises:
        TransportError: the read failed, or the PLC returned fewer or more
            bytes than requested.
    """
    logger.debug(f"read_area: {descriptor}")
    data = session.read_block(descriptor.kind, descriptor.block, descriptor.start, descriptor.length)
    if len(data) != descriptor.length:
        raise TransportError(f"read {descriptor}: expected {descriptor.length} bytes, got {len(data)}")
    return bytes(data)


def write_area(session: Session, descriptor: AreaDescriptor, payload: bytes) -> None:
    """Write ``payload`` at the descriptor's area and start offset.

    The payload length decides how many bytes are written; ``descriptor.length``
    is not used.
    """
    logger.debug(f"write_area: {descriptor.kind.name} block={descriptor.block} start={descriptor.start} size={len(payload)}")
    session.write_block(descriptor.kind, descriptor.block, descriptor.start, bytes(payload))
