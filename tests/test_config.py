import unittest

from loguru import logger

from seat_layout.config import Settings, load_settings
from seat_layout.grid import SeatLayoutError
from seat_layout.log import configure_logging


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(load_settings({}), Settings())

    def test_overrides(self):
        s = load_settings({
            "SEAT_LAYOUT_EDITOR_CELL_SIZE": "48",
            "SEAT_LAYOUT_MAX_SCALE": "4",
            "SEAT_LAYOUT_LOG_LEVEL": "debug",
        })
        self.assertEqual(s.editor_cell_size, 48)
        self.assertEqual(s.max_scale, 4.0)
        self.assertEqual(s.log_level, "DEBUG")

    def test_invalid_number(self):
        with self.assertRaises(SeatLayoutError):
            load_settings({"SEAT_LAYOUT_VIEWER_CELL_SIZE": "big"})

    def test_invalid_bounds(self):
        with self.assertRaises(SeatLayoutError):
            load_settings({"SEAT_LAYOUT_MIN_SCALE": "3", "SEAT_LAYOUT_MAX_SCALE": "2"})
        with self.assertRaises(SeatLayoutError):
            load_settings({"SEAT_LAYOUT_EDITOR_CELL_SIZE": "0"})


class TestConfigureLogging(unittest.TestCase):
    def test_configure_logging_replaces_sinks(self):
        configure_logging("WARNING")
        seen = []
        sink = logger.add(seen.append, level="DEBUG")
        try:
            logger.info("kept by the extra sink")
        finally:
            logger.remove(sink)
            configure_logging("INFO")
        self.assertEqual(len(seen), 1)


if __name__ == "__main__":
    unittest.main()
