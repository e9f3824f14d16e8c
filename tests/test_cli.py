import json
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from typer.testing import CliRunner

from rctprinter.cli import app, encode_command
from rctprinter.printing import ErrorEvent, ErrorKind
from rctprinter.transport import PortConfig


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_encode_command_replaces_cr_marker(self) -> None:
        self.assertEqual(encode_command("0#<CR>Bread<CR>"), b"0#\rBread\r")

    def test_send_uses_port_option_and_saves_it(self) -> None:
        with mock.patch("rctprinter.cli.PrintService", autospec=True) as factory:
            factory.return_value.print_job.return_value = []
            result = self.runner.invoke(
                app,
                ["send", "A<CR>", "B", "--port", "COM7", "--config", str(self.config_path)],
            )

        self.assertEqual(result.exit_code, 0, result.output)
        config, payloads = factory.return_value.print_job.call_args[0]
        self.assertEqual(config, PortConfig(name="COM7"))
        self.assertEqual(payloads, [b"A\r", b"B"])
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["port_name"], "COM7")

    def test_send_reports_errors_with_nonzero_exit(self) -> None:
        with mock.patch("rctprinter.cli.PrintService", autospec=True) as factory:
            factory.return_value.print_job.return_value = [
                ErrorEvent(ErrorKind.PAPER_OUT, "Paper out")
            ]
            result = self.runner.invoke(
                app,
                ["send", "A", "--port", "COM7", "--config", str(self.config_path)],
            )

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Paper out", result.output)
        self.assertFalse(self.config_path.exists())

    def test_send_without_port_fails(self) -> None:
        result = self.runner.invoke(
            app, ["send", "A", "--config", str(self.config_path)]
        )
        self.assertEqual(result.exit_code, 2)

    def test_ports_marks_selection(self) -> None:
        selection = SimpleNamespace(ports=["COM1", "COM2"], selected="COM1")
        with mock.patch("rctprinter.cli.PortService", autospec=True) as factory:
            factory.return_value.build_selection.return_value = selection
            result = self.runner.invoke(
                app, ["ports", "--config", str(self.config_path)]
            )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("* COM1", result.output)
        self.assertIn("  COM2", result.output)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
