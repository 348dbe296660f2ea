import unittest
from dataclasses import replace

from game import DEFAULT_CONFIG, GridGeometry


class TestGridGeometry(unittest.TestCase):
    def setUp(self):
        self.geo = GridGeometry()

    def test_given_even_and_odd_rows_when_position_then_odd_rows_offset_by_half_spacing(self):
        self.assertEqual(self.geo.position(0, 0), (40, 60))
        x0, y0 = self.geo.position(0, 3)
        x1, y1 = self.geo.position(1, 3)
        self.assertEqual(x0, 40 + 3 * 36)
        self.assertEqual(x1 - x0, 18)
        self.assertAlmostEqual(y1 - y0, 36 * 0.87)

    def test_given_rows_when_counting_valid_cols_then_odd_rows_have_one_fewer(self):
        self.assertEqual(self.geo.valid_cols(0), 12)
        self.assertEqual(self.geo.valid_cols(1), 11)
        self.assertEqual(self.geo.valid_cols(10), 12)

    def test_given_every_slot_when_snapping_its_center_then_same_slot_returned(self):
        for slot in self.geo.slots():
            got = self.geo.nearest_slot(*self.geo.position(slot.row, slot.col))
            self.assertEqual((got.row, got.col), (slot.row, slot.col))
            self.assertEqual((got.x, got.y), self.geo.position(slot.row, slot.col))

    def test_given_default_board_when_listing_slots_then_all_inside_playable_width(self):
        slots = list(self.geo.slots())
        self.assertEqual(len(slots), 6 * 12 + 6 * 11)
        for s in slots:
            self.assertTrue(40 <= s.x <= 440)

    def test_given_point_between_slots_when_snapping_then_closest_center_wins(self):
        # (240, 80) sits closest to row 1, col 5 at (238, 91.32)
        slot = self.geo.nearest_slot(240, 80)
        self.assertEqual((slot.row, slot.col), (1, 5))

    def test_given_exact_tie_when_snapping_then_first_scanned_slot_wins(self):
        # Midway between (0, 0) and (0, 1) on row 0
        slot = self.geo.nearest_slot(58, 60 - 100)
        self.assertEqual((slot.row, slot.col), (0, 0))

    def test_given_no_playable_slots_when_snapping_then_falls_back_to_launcher_slot(self):
        geo = GridGeometry(replace(DEFAULT_CONFIG, playable_min_x=1000.0))
        self.assertEqual(list(geo.slots()), [])
        slot = geo.nearest_slot(100, 100)
        self.assertEqual((slot.row, slot.col), (11, 5))
        self.assertEqual((slot.x, slot.y), geo.position(11, 5))


if __name__ == '__main__':
    unittest.main(verbosity=2)
