import unittest

from seat_layout.editor import SeatDefinition
from seat_layout.grid import GridGeometry, SeatLayoutError, collides, to_cell, to_pixel


class TestGridCoordinates(unittest.TestCase):
    def test_to_pixel(self):
        self.assertEqual(to_pixel(1, 1, 60), (0, 0))
        self.assertEqual(to_pixel(3, 2, 60), (120, 60))

    def test_to_cell_snaps_to_nearest(self):
        self.assertEqual(to_cell(0, 0, 60), (1, 1))
        self.assertEqual(to_cell(89, 31, 60), (2, 2))
        self.assertEqual(to_cell(29, 29, 60), (1, 1))

    def test_to_cell_rounds_half_up(self):
        self.assertEqual(to_cell(30, 90, 60), (2, 3))

    def test_to_cell_clamps_to_first_cell(self):
        self.assertEqual(to_cell(-500, -45, 60), (1, 1))

    def test_round_trip_is_stable(self):
        for cell_size in (1, 7, 40, 60, 0.5, 33.3):
            for column in range(1, 15):
                for row in range(1, 15):
                    x, y = to_pixel(column, row, cell_size)
                    self.assertEqual(to_cell(x, y, cell_size), (column, row))

    def test_non_positive_cell_size_raises(self):
        with self.assertRaises(SeatLayoutError):
            to_pixel(1, 1, 0)
        with self.assertRaises(SeatLayoutError):
            GridGeometry(-10)

    def test_geometry_snap(self):
        g = GridGeometry(40)
        self.assertEqual(g.snap(57, 21), (40, 40))


class TestCollides(unittest.TestCase):
    def setUp(self):
        self.seats = [
            SeatDefinition(1, 1, 1, 0, 0),
            SeatDefinition(2, 2, 1, 60, 0),
            SeatDefinition(3, 1, 2, 0, 60),
        ]

    def test_own_position_is_not_a_collision(self):
        for s in self.seats:
            self.assertFalse(collides(s.column, s.row, s.seat_number, self.seats))

    def test_other_seat_position_collides(self):
        self.assertTrue(collides(2, 1, 1, self.seats))
        self.assertTrue(collides(1, 2, 2, self.seats))

    def test_free_cell(self):
        self.assertFalse(collides(2, 2, 1, self.seats))

    def test_empty_layout(self):
        self.assertFalse(collides(1, 1, 1, []))

class TestNonFiniteCoordinates(unittest.TestCase):
    def test_to_cell_rejects_nan(self):
        with self.assertRaises(SeatLayoutError):
            to_cell(float("nan"), 0, 60)

    def test_to_cell_rejects_infinity(self):
        with self.assertRaises(SeatLayoutError):
            to_cell(0, float("inf"), 60)


if __name__ == "__main__":
    unittest.main()
