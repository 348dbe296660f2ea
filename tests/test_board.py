import random
import unittest

from game import (
    BoardState,
    Bubble,
    Cause,
    GridGeometry,
    Projectile,
    deal_bubbles,
)

UP = (0.0, -1.0)


def mk(geo, row, col, color):
    x, y = geo.position(row, col)
    return Bubble(id=f"{row}-{col}", row=row, col=col, x=x, y=y, color=color, radius=18)


class TestBoardState(unittest.TestCase):
    def setUp(self):
        self.board = BoardState(rng=random.Random(1))
        self.geo = self.board.geometry
        self.board.started = True
        self.board.next_color = 'cyan'

    def _run_until_resolved(self, limit=200):
        events = []
        for _ in range(limit):
            if not self.board.in_flight:
                break
            ev = self.board.tick()
            if ev is not None:
                events.append(ev)
        self.assertFalse(self.board.in_flight)
        return events

    def test_given_seed_when_dealing_then_layout_is_deterministic(self):
        a = deal_bubbles(GridGeometry(), random.Random(7))
        b = deal_bubbles(GridGeometry(), random.Random(7))
        self.assertEqual([x.color for x in a], [x.color for x in b])
        self.assertEqual(len(a), 60)
        self.assertEqual(a[0].id, '0-0')
        self.assertTrue(all(x.row < 6 and x.col < 10 for x in a))

    def test_given_dealt_board_when_checking_bubbles_then_positions_match_slots_and_unique(self):
        board = BoardState(rng=random.Random(3))
        slots = set()
        for b in board.bubbles:
            self.assertEqual((b.x, b.y), board.geometry.position(b.row, b.col))
            slots.add(b.slot)
        self.assertEqual(len(slots), len(board.bubbles))

    def test_given_ready_board_when_firing_then_projectile_spawns_at_launcher_with_capped_speed(self):
        self.assertTrue(self.board.fire(UP, 1.0))
        p = self.board.projectile
        self.assertEqual((p.x, p.y), (240, 560))
        self.assertEqual(p.vy, -12)
        self.assertEqual(p.color, 'cyan')

    def test_given_low_power_when_firing_then_speed_scales_below_cap(self):
        self.assertTrue(self.board.fire((3.0, -4.0), 0.5))
        p = self.board.projectile
        self.assertAlmostEqual(p.vx, 0.6 * 7.5)
        self.assertAlmostEqual(p.vy, -0.8 * 7.5)

    def test_given_invalid_conditions_when_firing_then_silent_no_op(self):
        self.assertFalse(self.board.fire(UP, 0.05))
        self.assertFalse(self.board.fire((0.0, 0.0), 1.0))
        self.assertTrue(self.board.fire(UP, 1.0))
        first = self.board.projectile
        self.assertFalse(self.board.fire(UP, 1.0))
        self.assertIs(self.board.projectile, first)

        fresh = BoardState(rng=random.Random(2))
        self.assertFalse(fresh.fire(UP, 1.0))  # not started
        fresh.started = True
        fresh.end(Cause.LOST)
        self.assertFalse(fresh.fire(UP, 1.0))

    def test_given_non_finite_power_or_direction_when_firing_then_silent_no_op(self):
        nan, inf = float('nan'), float('inf')
        self.assertFalse(self.board.fire(UP, nan))
        self.assertFalse(self.board.fire(UP, inf))
        self.assertFalse(self.board.fire((nan, -1.0), 1.0))
        self.assertFalse(self.board.fire((0.0, -inf), 1.0))
        self.assertIsNone(self.board.projectile)
        self.assertTrue(self.board.fire(UP, 1.0))

    def test_given_two_same_color_neighbours_when_shot_lands_then_three_pop_for_30(self):
        self.board.bubbles = [mk(self.geo, 0, 5, 'cyan'), mk(self.geo, 0, 6, 'cyan'), mk(self.geo, 0, 0, 'lime')]
        self.board.fire(UP, 1.0)
        events = self._run_until_resolved()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].count, 3)
        self.assertEqual(self.board.score, 30)
        self.assertEqual([b.id for b in self.board.bubbles], ['0-0'])
        self.assertEqual(len(self.board.animations), 3)
        self.assertFalse(self.board.game_over)

    def test_given_three_same_color_neighbours_when_shot_lands_then_four_pop_for_45(self):
        self.board.bubbles = [
            mk(self.geo, 0, 4, 'cyan'), mk(self.geo, 0, 5, 'cyan'), mk(self.geo, 0, 6, 'cyan'),
            mk(self.geo, 0, 0, 'lime'),
        ]
        self.board.fire(UP, 1.0)
        events = self._run_until_resolved()
        self.assertEqual(events[0].count, 4)
        self.assertEqual(events[0].points, 45)
        self.assertEqual(self.board.score, 45)

    def test_given_no_matching_neighbours_when_shot_lands_then_bubble_stays(self):
        self.board.bubbles = [mk(self.geo, 0, 5, 'lime'), mk(self.geo, 0, 6, 'lime')]
        self.board.fire(UP, 1.0)
        self._run_until_resolved()
        self.assertEqual(self.board.bubble_count, 3)
        self.assertEqual(self.board.score, 0)
        placed = self.board.bubble_at(1, 5)
        self.assertIsNotNone(placed)
        self.assertEqual(placed.color, 'cyan')
        self.assertTrue(placed.id.startswith('proj-'))
        self.assertEqual((placed.x, placed.y), self.geo.position(1, 5))

    def test_given_occupied_snap_slot_when_tick_resolves_then_count_unchanged(self):
        self.board.bubbles = [mk(self.geo, 1, 5, 'lime')]
        self.board.projectile = Projectile(x=238, y=100, vx=0, vy=-1, color='cyan', radius=18)
        self.board.tick()
        self.assertEqual(self.board.bubble_count, 1)
        self.assertIsNone(self.board.projectile)
        self.assertEqual(self.board.score, 0)

    def test_given_last_bubbles_popped_when_tick_resolves_then_won(self):
        self.board.bubbles = [mk(self.geo, 0, 5, 'cyan'), mk(self.geo, 0, 6, 'cyan')]
        self.board.fire(UP, 1.0)
        self._run_until_resolved()
        self.assertTrue(self.board.game_over)
        self.assertEqual(self.board.cause, Cause.WON)
        self.assertEqual(self.board.bubble_count, 0)

    def test_given_shot_heading_down_when_reaching_bottom_then_lost(self):
        self.board.projectile = Projectile(x=240, y=595, vx=0, vy=10, color='cyan', radius=18)
        self.board.tick()
        self.assertTrue(self.board.game_over)
        self.assertEqual(self.board.cause, Cause.LOST)
        self.assertIsNone(self.board.projectile)

    def test_given_pop_when_aging_animations_then_expire_after_lifetime(self):
        self.board.bubbles = [mk(self.geo, 0, 5, 'cyan'), mk(self.geo, 0, 6, 'cyan'), mk(self.geo, 0, 0, 'lime')]
        self.board.fire(UP, 1.0)
        self._run_until_resolved()
        for _ in range(19):
            self.board.tick_animations()
        self.assertEqual(len(self.board.animations), 3)
        self.assertEqual(self.board.animations[0].frame, 19)
        self.board.tick_animations()
        self.assertEqual(self.board.animations, [])

    def test_given_no_projectile_when_ticking_then_no_op(self):
        before = list(self.board.bubbles)
        self.assertIsNone(self.board.tick())
        self.assertEqual(self.board.bubbles, before)

    def test_given_board_when_pretty_then_one_letter_per_bubble(self):
        self.board.bubbles = [mk(self.geo, 0, 0, 'lime'), mk(self.geo, 1, 0, 'cyan')]
        lines = self.board.pretty().splitlines()
        self.assertEqual(len(lines), 12)
        self.assertTrue(lines[0].startswith('L .'))
        self.assertTrue(lines[1].startswith(' C .'))


if __name__ == '__main__':
    unittest.main(verbosity=2)
