"""
Repeated reads of one area at a fixed interval.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .area import AreaDescriptor
from .codec import Format, decode
from .engine import read_area
from .transport import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollPlan:
    """How often to poll.

    Args:
        interval: seconds to wait between two reads.
        count: number of reads, 0 polls until cancelled.
    """

    interval: float = 1.0
    count: int = 0

    def __post_init__(self) -> None:
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")
        if self.count < 0:
            raise ValueError(f"count must not be negative, got {self.count}")


def timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def poll(
    session: Session,
    descriptor: AreaDescriptor,
    fmt: Format,
    plan: PollPlan,
    emit: Callable[[str], None] = print,
    stop: Optional[threading.Event] = None,
    clock: Callable[[], str] = timestamp,
) -> int:
    """Read, decode and emit ``descriptor`` until the plan is exhausted.

    Every line passed to ``emit`` looks like ``[2024-01-02T15:04:05+01:00] 01 02``.
    A failing read or decode ends the loop by raising; lines emitted before
    stay emitted. No wait happens after the last read.

    Args:
        session: open session to the PLC.
        descriptor: the area to read on every tick.
        fmt: output format for :func:`s7tool.codec.decode`.
        plan: interval and number of ticks.
        emit: receives one formatted line per tick.
        stop: when set, the loop ends before the next read. Waiting on it
            also serves as the inter-tick sleep.
        clock: returns the timestamp put in front of each line.

    Returns:
        The number of completed ticks.
    """
    stop = stop or threading.Event()
    ticks = 0
    while not stop.is_set():
        data = read_area(session, descriptor)
        emit(f"[{clock()}] {decode(data, fmt)}")

        ticks += 1
        if plan.count > 0 and ticks >= plan.count:
            break
        stop.wait(plan.interval)

    logger.debug(f"poll of {descriptor} stopped after {ticks} ticks")
    return ticks
