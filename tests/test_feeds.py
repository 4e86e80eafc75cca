import asyncio
import unittest
from datetime import date

from seat_layout.feeds import DateRange, StatusMapView, UsageMapView
from seat_layout.occupancy import AVAILABLE, OCCUPIED, SeatPosition


POSITIONS = [SeatPosition(1, 1, 1), SeatPosition(2, 2, 1)]


def returning(value, gate=None):
    async def fetch(*_args):
        if gate is not None:
            await gate.wait()
        return value

    return fetch


def failing(message):
    async def fetch(*_args):
        raise ConnectionError(message)

    return fetch


class TestStatusMapView(unittest.IsolatedAsyncioTestCase):
    async def test_merges_both_feeds(self):
        view = StatusMapView(cell_size=40)
        frame = await view.refresh(returning(POSITIONS), returning({2: True}))
        self.assertEqual([s.status for s in frame.seats], [AVAILABLE, OCCUPIED])
        self.assertEqual((frame.bounds.width, frame.bounds.height), (80, 40))
        self.assertFalse(frame.unavailable)
        self.assertFalse(view.loading)

    async def test_positions_render_before_status_arrives(self):
        frames = []
        gate = asyncio.Event()
        view = StatusMapView(cell_size=40, on_frame=frames.append)
        task = asyncio.create_task(view.refresh(returning(POSITIONS), returning({1: True}, gate)))
        for _ in range(3):
            await asyncio.sleep(0)
        self.assertEqual([s.status for s in view.frame.seats], [AVAILABLE, AVAILABLE])
        gate.set()
        await task
        self.assertEqual([s.status for s in view.frame.seats], [OCCUPIED, AVAILABLE])
        self.assertEqual(len(frames), 2)

    async def test_failed_status_feed_degrades_to_defaults(self):
        view = StatusMapView(cell_size=40)
        frame = await view.refresh(returning(POSITIONS), failing("status down"))
        self.assertEqual([s.status for s in frame.seats], [AVAILABLE, AVAILABLE])
        self.assertTrue(frame.unavailable)
        self.assertEqual(view.errors, ["status down"])

    async def test_failed_positions_give_empty_frame(self):
        view = StatusMapView(cell_size=40)
        frame = await view.refresh(failing("positions down"), returning({1: True}))
        self.assertTrue(frame.empty)
        self.assertTrue(frame.unavailable)
        self.assertEqual((frame.bounds.width, frame.bounds.height), (0, 0))

    async def test_stale_response_is_discarded(self):
        view = StatusMapView(cell_size=40)
        slow_gate = asyncio.Event()
        slow = asyncio.create_task(
            view.refresh(returning(POSITIONS, slow_gate), returning({1: True, 2: True}, slow_gate))
        )
        await asyncio.sleep(0)
        fresh = await view.refresh(returning(POSITIONS[:1]), returning({}))
        slow_gate.set()
        await slow
        self.assertEqual(view.frame, fresh)
        self.assertEqual([s.seat_number for s in view.frame.seats], [1])
        self.assertEqual(view.generation, 2)


class TestUsageMapView(unittest.IsolatedAsyncioTestCase):
    async def test_passes_date_range(self):
        seen = []

        async def fetch_usage(date_range):
            seen.append(date_range)
            return {1: 75.0}

        view = UsageMapView(cell_size=40)
        requested = DateRange(date(2026, 10, 1), date(2026, 10, 7))
        frame = await view.load(returning(POSITIONS), fetch_usage, requested)
        self.assertEqual(seen, [requested])
        self.assertEqual(view.date_range, requested)
        self.assertEqual([s.usage_intensity for s in frame.seats], [0.75, 0.0])

    def test_date_range_orders_its_ends(self):
        r = DateRange(date(2026, 10, 9), date(2026, 10, 2))
        self.assertEqual((r.start, r.end), (date(2026, 10, 2), date(2026, 10, 9)))

    def test_default_range_is_today(self):
        view = UsageMapView(cell_size=40)
        self.assertEqual(view.date_range.start, view.date_range.end)


if __name__ == "__main__":
    unittest.main()
