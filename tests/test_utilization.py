import unittest
from datetime import datetime, timedelta, timezone

from seat_layout.utilization import UtilizationRecord, summarize_history


class TestSummarizeHistory(unittest.TestCase):
    def test_orders_and_diffs(self):
        records = [
            UtilizationRecord(3, 40.0, datetime(2026, 10, 19, 14, 0), "Nova"),
            UtilizationRecord(3, 25.5, datetime(2026, 10, 19, 12, 0), "Nova"),
            UtilizationRecord(3, 31.25, datetime(2026, 10, 19, 13, 0), "Nova"),
        ]
        summary = summarize_history(records)
        self.assertEqual([p.utilization for p in summary.points], [25.5, 31.25, 40.0])
        self.assertEqual(summary.points[0].time_label, "12:00")
        self.assertEqual(summary.points[0].date_label, "2026-10-19")
        self.assertEqual(summary.current, 40.0)
        self.assertEqual(summary.change, 8.75)
        self.assertEqual(summary.name, "Nova")

    def test_single_sample(self):
        summary = summarize_history([UtilizationRecord(1, 10.0, datetime(2026, 1, 1, 9, 30))])
        self.assertEqual(summary.current, 10.0)
        self.assertEqual(summary.change, 0.0)

    def test_empty(self):
        summary = summarize_history([])
        self.assertEqual(summary.points, ())
        self.assertIsNone(summary.current)
        self.assertEqual(summary.change, 0.0)

class TestMixedTimezones(unittest.TestCase):
    def test_naive_and_aware_samples_order_together(self):
        records = [
            UtilizationRecord(3, 30.0, datetime(2026, 10, 19, 11, 0)),
            UtilizationRecord(3, 10.0, datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)),
            UtilizationRecord(3, 20.0, datetime(2026, 10, 19, 12, 30, tzinfo=timezone(timedelta(hours=2)))),
        ]
        summary = summarize_history(records)
        # 12:30+02:00 is 10:30 UTC
        self.assertEqual([p.utilization for p in summary.points], [10.0, 20.0, 30.0])
        self.assertEqual(summary.current, 30.0)
        self.assertEqual(summary.change, 10.0)


if __name__ == "__main__":
    unittest.main()
