"""
Connection handling towards the PLC.

The rest of s7tool only talks to a :class:`Session` obtained from a
:class:`Transport`. :class:`Snap7Transport` implements both on top of the
``python-snap7`` client, which owns the ISO-on-TCP handshake and PDU
negotiation.
"""

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Optional, Protocol, Tuple, Type

from snap7.client import Client
from snap7.type import Area

from .area import AreaKind
from .error import ConnectError, TransportError

logger = logging.getLogger(__name__)

ISO_TCP_PORT = 102


@dataclass(frozen=True)
class ConnectionOptions:
    """Where and how to reach the PLC.

    Args:
        address: host name or IP, optionally with a ``:port`` suffix.
        rack: rack number of the CPU.
        slot: slot number of the CPU.
        connection_type: connection type override, 0 keeps the transport default.
        port: TCP port, used unless ``address`` carries its own.
    """

    address: str = "127.0.0.1"
    rack: int = 0
    slot: int = 1
    connection_type: int = 0
    port: int = ISO_TCP_PORT

    def endpoint(self) -> Tuple[str, int]:
        """Split the address into host and port.

        Examples:
            >>> ConnectionOptions("10.0.0.5:1102").endpoint()
            ('10.0.0.5', 1102)
        """
        host, sep, port = self.address.rpartition(":")
        if sep and host and ":" not in host and port.isdigit():
            return host, int(port)
        return self.address, self.port

    def __str__(self) -> str:
        host, port = self.endpoint()
        return f"{host}:{port} rack={self.rack} slot={self.slot}"


class Session(Protocol):
    """An established connection to one PLC."""

    def read_block(self, kind: AreaKind, block: int, start: int, size: int) -> bytes:
        ...

    def write_block(self, kind: AreaKind, block: int, start: int, data: bytes) -> None:
        ...

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...

    def __enter__(self) -> "Session":
        ...

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        ...


class Transport(Protocol):
    def connect(self, options: ConnectionOptions) -> Session:
        """Open a session.

        Raises:
            ConnectError: the session could not be established.
        """
        ...


class Snap7Session:
    """A :class:`Session` backed by a connected ``snap7.client.Client``."""

    def __init__(self, client: Client, options: ConnectionOptions):
        self._client: Optional[Client] = client
        self.options = options

    def _get_client(self) -> Client:
        if self._client is None:
            raise TransportError(f"session to {self.options} is closed")
        return self._client

    def read_block(self, kind: AreaKind, block: int, start: int, size: int) -> bytes:
        client = self._get_client()
        try:
            data = client.read_area(Area(kind.value), block, start, size)
        except Exception as e:
            raise TransportError(f"read {kind.name} failed: {e}") from e
        return bytes(data)

    def write_block(self, kind: AreaKind, block: int, start: int, data: bytes) -> None:
        client = self._get_client()
        try:
            client.write_area(Area(kind.value), block, start, bytearray(data))
        except Exception as e:
            raise TransportError(f"write {kind.name} failed: {e}") from e

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            client.disconnect()
        except Exception as e:
            logger.warning(f"error while disconnecting from {self.options}: {e}")
        else:
            logger.info(f"Disconnected from {self.options}")
        finally:
            try:
                client.destroy()
            except Exception as e:
                logger.warning(f"error while destroying client for {self.options}: {e}")

    def __enter__(self) -> "Snap7Session":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()


class Snap7Transport:
    """Opens sessions with the ``python-snap7`` client.

    With a connection type override the client is switched to that type
    before the handshake, otherwise the library default is used. Either way
    the result is the same :class:`Snap7Session`.
    """

    def connect(self, options: ConnectionOptions) -> Snap7Session:
        host, port = options.endpoint()
        try:
            client = Client()
        except Exception as e:
            raise ConnectError(f"cannot create snap7 client: {e}") from e

        try:
            if options.connection_type > 0:
                client.set_connection_type(options.connection_type)
            client.connect(host, options.rack, options.slot, port)
        except Exception as e:
            client.destroy()
            raise ConnectError(f"connect to {options} failed: {e}") from e

        logger.info(f"Connected to {options}")
        return Snap7Session(client, options)
