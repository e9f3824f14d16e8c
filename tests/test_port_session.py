import itertools
import unittest
from unittest import mock

import serial

from fakes import FakeSerial
from rctprinter.errors import PortError
from rctprinter.transport import (
    DataBits,
    FlowControl,
    Parity,
    PortConfig,
    PortSession,
    SessionState,
    StopBits,
)


class PortSessionLifecycleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeSerial()
        self.session = PortSession(lambda: self.fake)

    def test_open_applies_every_setting_before_opening(self) -> None:
        config = PortConfig(
            name="COM3",
            baud_rate=19200,
            data_bits=DataBits.SEVEN,
            parity=Parity.EVEN,
            stop_bits=StopBits.TWO,
            flow_control=FlowControl.HARDWARE,
        )
        self.session.open(config)

        self.assertTrue(self.session.is_open)
        self.assertEqual(self.session.state, SessionState.OPEN)
        self.assertEqual(
            self.fake.applied_on_open,
            [("COM3", 19200, serial.SEVENBITS, serial.PARITY_EVEN,
              serial.STOPBITS_TWO, True, False)],
        )

    def test_open_failure_raises_port_error_and_stays_closed(self) -> None:
        self.fake.open_error = serial.SerialException("could not open port 'COM9'")

        with self.assertRaises(PortError) as ctx:
            self.session.open(PortConfig(name="COM9"))

        self.assertEqual(ctx.exception.port, "COM9")
        self.assertIn("could not open port", ctx.exception.diagnostic)
        self.assertFalse(self.session.is_open)
        self.assertEqual(self.session.state, SessionState.CLOSED)

    def test_rejected_setting_raises_port_error_and_stays_closed(self) -> None:
        previous = PortConfig(name="COM1")
        self.session.open(previous)

        with self.assertRaises(PortError) as ctx:
            self.session.open(PortConfig(name="COM2", baud_rate=-5))

        self.assertEqual(ctx.exception.port, "COM2")
        self.assertIn("baudrate", ctx.exception.diagnostic)
        self.assertEqual(self.session.state, SessionState.CLOSED)
        self.assertEqual(self.session.config, previous)
        self.assertEqual(self.fake.open_calls, 1)

    def test_pyserial_rejected_baudrate_is_a_port_error(self) -> None:
        session = PortSession(serial.Serial)

        with self.assertRaises(PortError):
            session.open(PortConfig(name="/dev/ttyX", baud_rate=-5))

        self.assertFalse(session.is_open)
        self.assertIsNone(session.config)

    def test_close_without_open_is_noop(self) -> None:
        self.session.close()
        self.session.close()
        self.assertEqual(self.session.state, SessionState.CLOSED)

    def test_reopen_applies_second_config(self) -> None:
        first = PortConfig(name="COM1", baud_rate=9600)
        second = PortConfig(
            name="COM2",
            baud_rate=115200,
            parity=Parity.ODD,
            flow_control=FlowControl.SOFTWARE,
        )
        self.session.open(first)
        self.session.open(second)

        self.assertEqual(self.fake.open_calls, 2)
        self.assertEqual(
            self.fake.applied_on_open[-1],
            ("COM2", 115200, serial.EIGHTBITS, serial.PARITY_ODD,
             serial.STOPBITS_ONE, False, True),
        )
        self.assertEqual(self.session.config, second)
        self.assertTrue(self.session.is_open)

    def test_context_manager_closes_session(self) -> None:
        with self.session as session:
            session.open(PortConfig(name="COM1"))
            self.assertTrue(session.is_open)
        self.assertFalse(self.fake.is_open)


class PortSessionIOTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeSerial()
        self.session = PortSession(lambda: self.fake)
        self.errors = []
        self.session.add_error_listener(self.errors.append)
        self.session.open(PortConfig(name="COM1"))

    def test_write_returns_driver_count(self) -> None:
        self.fake.write_results = [3]
        self.assertEqual(self.session.write(b"\x01\x02\x03\x04"), 3)
        self.assertEqual(self.fake.writes, [b"\x01\x02\x03\x04"])

    def test_write_on_closed_session_raises(self) -> None:
        self.session.close()
        with self.assertRaises(PortError):
            self.session.write(b"\x01")

    def test_write_timeout_is_reported_without_closing(self) -> None:
        self.fake.write_results = [serial.SerialTimeoutException("Write timeout")]

        self.assertEqual(self.session.write(b"abc"), 0)

        self.assertTrue(self.session.is_open)
        self.assertEqual(len(self.errors), 1)
        self.assertFalse(self.errors[0].fatal)
        self.assertEqual(self.errors[0].description, "Write timeout")

    def test_resource_loss_closes_session_and_reports(self) -> None:
        self.fake.write_results = [serial.SerialException("device disconnected")]

        self.assertEqual(self.session.write(b"abc"), 0)

        self.assertFalse(self.session.is_open)
        self.assertEqual(len(self.errors), 1)
        self.assertTrue(self.errors[0].fatal)

    def test_read_available_drains_buffer(self) -> None:
        self.fake.incoming.extend(b"\x71\x00")
        self.assertEqual(self.session.read_available(), b"\x71\x00")
        self.assertEqual(self.session.read_available(), b"")

    def test_wait_for_reply_returns_true_when_data_arrives(self) -> None:
        self.fake.incoming.extend(b"\x70")
        self.assertTrue(self.session.wait_for_reply(1000))

    def test_wait_for_reply_times_out(self) -> None:
        time_values = itertools.chain([0.0, 0.5, 1.2], itertools.repeat(2.0))
        with mock.patch(
            "rctprinter.transport.port_session.time.time",
            side_effect=lambda: next(time_values),
        ), mock.patch("rctprinter.transport.port_session.time.sleep") as sleep:
            self.assertFalse(self.session.wait_for_reply(1000))
        sleep.assert_called()

    def test_removed_listener_is_not_called(self) -> None:
        self.session.remove_error_listener(self.errors.append)
        self.fake.write_results = [serial.SerialTimeoutException("Write timeout")]
        self.session.write(b"abc")
        self.assertEqual(self.errors, [])

    def test_failing_listener_does_not_block_others(self) -> None:
        seen = []
        self.session.add_error_listener(mock.Mock(side_effect=RuntimeError("boom")))
        self.session.add_error_listener(seen.append)
        self.fake.write_results = [serial.SerialTimeoutException("Write timeout")]

        self.session.write(b"abc")

        self.assertEqual(len(seen), 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
