import logging
import unittest
from unittest import mock

import pytest
from snap7.type import Area

from s7tool.area import AreaKind
from s7tool.error import ConnectError, TransportError
from s7tool.transport import ConnectionOptions, Snap7Session, Snap7Transport


@pytest.mark.client
class TestConnectionOptions(unittest.TestCase):
    def test_defaults(self) -> None:
        options = ConnectionOptions()
        self.assertEqual(("127.0.0.1", 102), options.endpoint())
        self.assertEqual(0, options.rack)
        self.assertEqual(1, options.slot)
        self.assertEqual(0, options.connection_type)

    def test_port_in_address_wins(self) -> None:
        self.assertEqual(("10.0.0.5", 1102), ConnectionOptions("10.0.0.5:1102", port=102).endpoint())

    def test_port_option(self) -> None:
        self.assertEqual(("plc.local", 1102), ConnectionOptions("plc.local", port=1102).endpoint())

    def test_ipv6_address_is_not_split(self) -> None:
        self.assertEqual(("fe80::1", 102), ConnectionOptions("fe80::1").endpoint())

    def test_str(self) -> None:
        self.assertEqual("10.0.0.5:102 rack=0 slot=2", str(ConnectionOptions("10.0.0.5", 0, 2)))


@pytest.mark.client
@mock.patch("s7tool.transport.Client")
class TestSnap7Transport(unittest.TestCase):
    def test_connect(self, client_cls: mock.Mock) -> None:
        session = Snap7Transport().connect(ConnectionOptions("10.0.0.1", 0, 2))
        client = client_cls.return_value
        client.connect.assert_called_once_with("10.0.0.1", 0, 2, 102)
        client.set_connection_type.assert_not_called()
        self.assertIsInstance(session, Snap7Session)

    def test_connection_type_is_set_before_connect(self, client_cls: mock.Mock) -> None:
        Snap7Transport().connect(ConnectionOptions("10.0.0.1:1102", 0, 1, connection_type=3))
        client = client_cls.return_value
        self.assertEqual(
            [mock.call.set_connection_type(3), mock.call.connect("10.0.0.1", 0, 1, 1102)],
            client.mock_calls,
        )

    def test_connect_failure(self, client_cls: mock.Mock) -> None:
        client = client_cls.return_value
        client.connect.side_effect = RuntimeError(b"ISO : An error occurred during recv TCP : Connection timed out")
        with self.assertRaises(ConnectError) as cm:
            Snap7Transport().connect(ConnectionOptions("10.0.0.1"))
        self.assertIn("10.0.0.1:102", str(cm.exception))
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)
        client.destroy.assert_called_once_with()

    def test_missing_library(self, client_cls: mock.Mock) -> None:
        client_cls.side_effect = RuntimeError("can't find snap7 shared library.")
        self.assertRaises(ConnectError, Snap7Transport().connect, ConnectionOptions())


@pytest.mark.client
class TestSnap7Session(unittest.TestCase):
    def setUp(self) -> None:
        self.client = mock.Mock()
        self.session = Snap7Session(self.client, ConnectionOptions())

    def test_read_block(self) -> None:
        self.client.read_area.return_value = bytearray(b"\x01\x02")
        self.assertEqual(b"\x01\x02", self.session.read_block(AreaKind.DB, 1, 0, 2))
        self.client.read_area.assert_called_once_with(Area.DB, 1, 0, 2)

    def test_read_block_areas(self) -> None:
        self.client.read_area.return_value = bytearray(1)
        for kind, area in ((AreaKind.PE, Area.PE), (AreaKind.PA, Area.PA), (AreaKind.MK, Area.MK)):
            self.session.read_block(kind, 0, 3, 1)
            self.client.read_area.assert_called_with(area, 0, 3, 1)

    def test_read_failure(self) -> None:
        self.client.read_area.side_effect = RuntimeError(b"CPU : Address out of range")
        with self.assertRaises(TransportError) as cm:
            self.session.read_block(AreaKind.DB, 1, 0, 2)
        self.assertIn("Address out of range", str(cm.exception))
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)

    def test_write_block(self) -> None:
        self.session.write_block(AreaKind.MK, 0, 5, b"\x01")
        self.client.write_area.assert_called_once_with(Area.MK, 0, 5, bytearray(b"\x01"))

    def test_write_failure(self) -> None:
        self.client.write_area.side_effect = RuntimeError("CLI : function refused by CPU")
        self.assertRaises(TransportError, self.session.write_block, AreaKind.PA, 0, 0, b"\x00")

    def test_close_is_idempotent(self) -> None:
        with self.session as session:
            self.assertIs(self.session, session)
        self.session.close()
        self.client.disconnect.assert_called_once_with()
        self.client.destroy.assert_called_once_with()

    def test_closed_session(self) -> None:
        self.session.close()
        self.assertRaises(TransportError, self.session.read_block, AreaKind.DB, 1, 0, 2)

    def test_close_never_raises(self) -> None:
        self.client.disconnect.side_effect = RuntimeError("not connected")
        with self.assertLogs("s7tool.transport", level=logging.WARNING):
            self.session.close()

    def test_close_destroys_after_failed_disconnect(self) -> None:
        self.client.disconnect.side_effect = RuntimeError("not connected")
        self.client.destroy.side_effect = RuntimeError("already destroyed")
        with self.assertLogs("s7tool.transport", level=logging.WARNING) as cm:
            self.session.close()
        self.client.destroy.assert_called_once_with()
        self.assertEqual(2, len(cm.output))
