"""
The ``s7tool`` command line interface.

Three commands share the same connection and area options::

    s7tool read --addr 192.168.0.10 --db 1 --start 0 --size 4 --format int16
    s7tool write --area MK --start 10 --format float32 --values 1.5,2.25
    s7tool poll --area PE --size 2 --interval 500ms --count 10

Every option can also be given as an environment variable, for example
``S7TOOL_READ_ADDR``.
"""

import logging
import math
import re
import signal
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

import click

from . import __version__
from .area import AreaDescriptor
from .codec import Format, decode, encode
from .engine import read_area, write_area
from .error import S7ToolError
from .poll import PollPlan, poll
from .transport import ConnectionOptions, Snap7Transport, Transport

logger = logging.getLogger(__name__)


class Duration(click.ParamType):
    """A duration such as ``500ms``, ``2s``, ``1m30s``, or plain seconds."""

    name = "duration"
    units = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
    part = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)"

    def convert(self, value: Any, param: Any, ctx: Any) -> float:
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            text = value.strip()
            if re.fullmatch(r"\d+(?:\.\d*)?|\.\d+", text):
                seconds = float(text)
            elif re.fullmatch(f"(?:{self.part})+", text):
                seconds = sum(float(number) * self.units[unit] for number, unit in re.findall(self.part, text))
            else:
                self.fail(f"{value!r} is not a valid duration", param, ctx)

        if not math.isfinite(seconds) or seconds <= 0:
            self.fail(f"{value!r} is not a positive duration", param, ctx)
        return seconds


def connection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option("--port", default=102, show_default=True, type=click.IntRange(1, 65535), help="TCP port.")(func)
    func = click.option("--ctype", default=0, show_default=True, type=click.IntRange(min=0), help="Connection type (0 for default).")(func)
    func = click.option("--slot", default=1, show_default=True, type=click.IntRange(min=0), help="Slot number.")(func)
    func = click.option("--rack", default=0, show_default=True, type=click.IntRange(min=0), help="Rack number.")(func)
    func = click.option("--addr", default="127.0.0.1", show_default=True, help="PLC address (IP or host, optionally host:port).")(func)
    return func


def area_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option("--size", default=4, show_default=True, type=click.IntRange(min=1), help="Number of bytes to read.")(func)
    func = click.option("--start", default=0, show_default=True, type=click.IntRange(min=0), help="Start offset in bytes.")(func)
    func = click.option("--db", default=1, show_default=True, type=click.IntRange(min=0), help="DB number (used when area is DB).")(func)
    func = click.option("--area", default="DB", show_default=True, help="Memory area: DB|PE|PA|MK|TM|CT.")(func)
    return func


def format_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--format", default="hex", show_default=True, help="Data format: hex|string|int16|int32|float32."
    )(func)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn s7tool errors into a click error, printed to stderr with exit code 1."""
    try:
        yield
    except S7ToolError as e:
        raise click.ClickException(str(e)) from e


def echo(line: str) -> None:
    # string data may carry undecodable bytes, write them back unchanged
    click.echo(line.encode("utf-8", errors="surrogateescape"))


def _transport(ctx: click.Context) -> Transport:
    return ctx.obj["transport"]


@click.group(context_settings={"auto_envvar_prefix": "S7TOOL", "help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", count=True, help="Print log output, twice for debug output.")
@click.version_option(__version__)
@click.pass_context
def main(ctx: click.Context, verbose: int) -> None:
    """Read, write and poll memory areas of a Siemens S7 PLC."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(format="[%(levelname)s]: %(message)s", level=level)

    ctx.ensure_object(dict)
    ctx.obj.setdefault("transport", Snap7Transport())


@main.command()
@connection_options
@area_options
@format_option
@click.pass_context
def read(ctx: click.Context, addr, rack, slot, ctype, port, area, db, start, size, format) -> None:
    """One-shot read from an area."""
    with reported_errors():
        fmt = Format.from_name(format)
        descriptor = AreaDescriptor.from_name(area, db, start, size)
        options = ConnectionOptions(addr, rack, slot, ctype, port)

        with _transport(ctx).connect(options) as session:
            data = read_area(session, descriptor)
            echo(decode(data, fmt))


@main.command()
@connection_options
@area_options
@format_option
@click.option(
    "--values",
    default="",
    help="Data to write. For hex, use pairs (e.g. 01ff). For numeric formats, use comma-separated values (0x hex, leading 0 octal).",
)
@click.pass_context
def write(ctx: click.Context, addr, rack, slot, ctype, port, area, db, start, size, format, values) -> None:
    """Write data to an area.

    The number of bytes written follows from --values, --size is ignored.
    """
    if not values:
        raise click.ClickException("values is required")

    with reported_errors():
        fmt = Format.from_name(format)
        descriptor = AreaDescriptor.from_name(area, db, start, size)
        payload = encode(values, fmt)
        options = ConnectionOptions(addr, rack, slot, ctype, port)

        with _transport(ctx).connect(options) as session:
            write_area(session, descriptor, payload)
        logger.info(f"wrote {len(payload)} bytes to {descriptor.kind.name} at {descriptor.start}")


@main.command("poll")
@connection_options
@area_options
@format_option
@click.option("--interval", default="1s", show_default=True, type=Duration(), help="Poll interval, e.g. 500ms, 2s.")
@click.option("--count", default=0, show_default=True, type=click.IntRange(min=0), help="Number of polls (0 = run until interrupted).")
@click.pass_context
def poll_command(ctx: click.Context, addr, rack, slot, ctype, port, area, db, start, size, format, interval, count) -> None:
    """Repeated read with interval.

    Each line is prefixed with the local time of the read. Ctrl-C stops
    polling after the read in progress.
    """
    with reported_errors():
        fmt = Format.from_name(format)
        descriptor = AreaDescriptor.from_name(area, db, start, size)
        plan = PollPlan(interval, count)
        options = ConnectionOptions(addr, rack, slot, ctype, port)

        stop = threading.Event()
        previous = signal.signal(signal.SIGINT, lambda signum, frame: stop.set())
        try:
            with _transport(ctx).connect(options) as session:
                poll(session, descriptor, fmt, plan, emit=echo, stop=stop)
        finally:
            signal.signal(signal.SIGINT, previous)
        if stop.is_set():
            logger.info("polling interrupted")
