import unittest

import numpy as np

from vacuum_sim.model.grid import Cell, GridMap


class GridMapTests(unittest.TestCase):
    def test_out_of_bounds_queries_are_false(self):
        grid = GridMap(4, 3)
        grid.add_dirt(3, 2)
        grid.add_obstacle(0, 0)
        for x, y in [(-1, 0), (0, -1), (4, 0), (0, 3), (10, 10), (-5, -5)]:
            self.assertFalse(grid.in_bounds(x, y))
            self.assertFalse(grid.is_dirt(x, y))
            self.assertFalse(grid.is_obstacle(x, y))
            self.assertFalse(grid.is_walkable(x, y))
        self.assertTrue(grid.in_bounds(3, 2))
        self.assertTrue(grid.is_dirt(3, 2))
        self.assertTrue(grid.is_obstacle(0, 0))

    def test_starts_empty(self):
        grid = GridMap(5, 2)
        self.assertEqual(grid.cells.shape, (2, 5))
        self.assertEqual(grid.count_cells(Cell.EMPTY), 10)
        self.assertEqual(grid.count_remaining_dirt(), 0)

    def test_rejects_degenerate_size(self):
        with self.assertRaises(ValueError):
            GridMap(0, 4)

    def test_placement_outside_bounds_is_ignored(self):
        grid = GridMap(2, 2)
        grid.add_dirt(5, 5)
        grid.add_obstacle(-1, 0)
        self.assertEqual(grid.count_cells(Cell.EMPTY), 4)

    def test_placement_overwrites(self):
        grid = GridMap(2, 2)
        grid.add_dirt(1, 1)
        grid.add_obstacle(1, 1)
        self.assertEqual(grid.cell_at(1, 1), Cell.OBSTACLE)
        self.assertFalse(grid.is_dirt(1, 1))

    def test_clean_is_idempotent(self):
        grid = GridMap(3, 3)
        grid.add_dirt(1, 1)
        self.assertTrue(grid.clean(1, 1))
        self.assertEqual(grid.cell_at(1, 1), Cell.CLEANED)
        self.assertFalse(grid.clean(1, 1))
        self.assertEqual(grid.cell_at(1, 1), Cell.CLEANED)

    def test_clean_leaves_other_cells_alone(self):
        grid = GridMap(3, 1)
        grid.add_obstacle(0, 0)
        self.assertFalse(grid.clean(0, 0))
        self.assertFalse(grid.clean(1, 0))
        self.assertFalse(grid.clean(7, 7))
        self.assertEqual(grid.cell_at(0, 0), Cell.OBSTACLE)
        self.assertEqual(grid.cell_at(1, 0), Cell.EMPTY)

    def test_dirt_positions_row_major(self):
        grid = GridMap(3, 3)
        grid.add_dirt_points([(2, 2), (0, 1), (2, 0)])
        self.assertEqual(grid.dirt_positions(), [(2, 0), (0, 1), (2, 2)])
        self.assertEqual(grid.count_remaining_dirt(), 3)

    def test_random_placement_is_clamped(self):
        grid = GridMap(2, 2, rng=np.random.default_rng(0))
        self.assertEqual(grid.place_random_obstacles(10), 4)
        self.assertEqual(grid.place_random_dirt(3), 0)
        self.assertEqual(grid.count_cells(Cell.OBSTACLE), 4)

    def test_random_placement_only_uses_empty_cells(self):
        grid = GridMap(3, 3, rng=np.random.default_rng(1))
        grid.add_obstacle(1, 1)
        grid.add_dirt(0, 0)
        placed = grid.place_random_dirt(100)
        self.assertEqual(placed, 7)
        self.assertEqual(grid.cell_at(1, 1), Cell.OBSTACLE)
        self.assertEqual(grid.count_remaining_dirt(), 8)

    def test_random_placement_respects_exclude(self):
        grid = GridMap(3, 3, rng=np.random.default_rng(2))
        placed = grid.place_random_obstacles(9, exclude=[(0, 0)])
        self.assertEqual(placed, 8)
        self.assertEqual(grid.cell_at(0, 0), Cell.EMPTY)

    def test_random_placement_is_reproducible(self):
        a = GridMap(6, 6, rng=np.random.default_rng(42))
        b = GridMap(6, 6, rng=np.random.default_rng(42))
        for grid in (a, b):
            grid.place_random_obstacles(7)
            grid.place_random_dirt(9)
        np.testing.assert_array_equal(a.cells, b.cells)
        self.assertEqual(a.count_cells(Cell.OBSTACLE), 7)
        self.assertEqual(a.count_remaining_dirt(), 9)

    def test_neighbors(self):
        grid = GridMap(3, 3)
        grid.add_obstacle(2, 1)
        moore = grid.get_neighbors(1, 1)
        self.assertEqual(len(moore), 7)
        self.assertNotIn((2, 1), moore)
        self.assertNotIn((1, 1), moore)
        self.assertEqual(grid.get_neighbors(1, 1, include_diagonals=False),
                         [(1, 0), (1, 2), (0, 1)])


if __name__ == "__main__":
    unittest.main()
