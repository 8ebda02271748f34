import faulthandler
import json
import logging
import sys
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from sensorcore_core import logging_setup


class JsonFormatterTests(unittest.TestCase):
    def test_extra_fields_are_kept(self):
        record = logging.LogRecord("sensorcore.renderer", logging.WARNING, __file__, 1, "bad value", None, None)
        record.event = "conditional_image_bad_value"
        record.element_id = "gauge"
        payload = json.loads(logging_setup.JsonFormatter().format(record))
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["msg"], "bad value")
        self.assertEqual(payload["event"], "conditional_image_bad_value")
        self.assertEqual(payload["element_id"], "gauge")
        self.assertNotIn("crash_id", payload)


class LoggingSetupTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)
        self._excepthook = sys.excepthook
        self._thread_hook = threading.excepthook

    def tearDown(self):
        logger = logging.getLogger("sensorcore")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        sys.excepthook = self._excepthook
        threading.excepthook = self._thread_hook
        faulthandler.disable()
        self._tmp.cleanup()

    def test_configure_logging_writes_json_lines(self):
        logger = logging_setup.configure_logging(console=False, directory=self.tmp_path)
        logging.getLogger("sensorcore.renderer").info("frame ready", extra={"event": "frame_rendered"})
        for handler in logger.handlers:
            handler.flush()

        lines = (self.tmp_path / "sensorcore.log").read_text(encoding="utf-8").splitlines()
        events = [json.loads(line).get("event") for line in lines]
        self.assertEqual(events, ["logging_configured", "frame_rendered"])
        self.assertIs(logging_setup.configure_logging(directory=self.tmp_path), logger)
        self.assertEqual(len(logger.handlers), 1)

    def test_crash_hooks_log_uncaught_exceptions(self):
        with mock.patch.object(logging_setup, "log_dir", return_value=self.tmp_path):
            logging_setup.install_crash_hooks()

        self.assertIsNot(sys.excepthook, self._excepthook)
        self.assertIsNot(threading.excepthook, self._thread_hook)
        self.assertTrue(faulthandler.is_enabled())
        self.assertTrue((self.tmp_path / "fault.log").exists())

        with self.assertLogs("sensorcore", level="CRITICAL") as logs:
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                sys.excepthook(*sys.exc_info())
        self.assertIn("uncaught exception crash_id=", logs.output[0])
        self.assertEqual(logs.records[0].event, "uncaught_exception")

    def test_main_installs_crash_hooks(self):
        from sensorcore_app import cli

        with mock.patch.object(cli, "load_config", return_value=cli.AppConfig()), mock.patch.object(
            cli, "configure_logging"
        ) as configure, mock.patch.object(cli, "install_crash_hooks") as hooks, mock.patch.object(
            cli, "cmd_sensors", return_value=0
        ):
            self.assertEqual(cli.main(["sensors"]), 0)

        configure.assert_called_once()
        hooks.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
