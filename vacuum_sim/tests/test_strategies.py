import unittest

import numpy as np

from vacuum_sim.model.agent import Agent
from vacuum_sim.model.distance_field import DistanceField
from vacuum_sim.model.engine import SimulationEngine
from vacuum_sim.model.grid import GridMap
from vacuum_sim.model.state import Outcome
from vacuum_sim.model.strategies import (
    ExplorationStrategy,
    RandomStrategy,
    SweepStrategy,
    WaterfallStrategy,
    create_strategy,
)


def drive(strategy, agent, grid, ticks):
    """Apply a strategy directly, returning the chosen actions."""
    actions = []
    for _ in range(ticks):
        action = strategy.choose_move(agent, grid)
        actions.append(action)
        if action is not None:
            agent.move(action)
            agent.clean_current_spot()
    return actions


class SweepStrategyTests(unittest.TestCase):
    def test_serpentine(self):
        grid = GridMap(3, 2)
        agent = Agent(grid, (0, 0))
        actions = drive(SweepStrategy(), agent, grid, 6)
        self.assertEqual(actions, ["E", "E", "S", "W", "W", None])
        self.assertEqual(agent.position, (0, 1))

    def test_flag_persists_across_calls(self):
        grid = GridMap(2, 3)
        agent = Agent(grid, (1, 0))
        strategy = SweepStrategy()
        self.assertEqual(strategy.choose_move(agent, grid), "S")
        self.assertFalse(strategy.going_right)
        agent.move("S")
        self.assertEqual(strategy.choose_move(agent, grid), "W")


class RandomStrategyTests(unittest.TestCase):
    def test_picks_legal_moves(self):
        grid = GridMap(4, 4)
        grid.add_obstacle_points([(1, 0), (1, 1)])
        agent = Agent(grid, (0, 0))
        strategy = RandomStrategy(np.random.default_rng(3))
        for _ in range(20):
            self.assertIn(strategy.choose_move(agent, grid), agent.allowed_moves())

    def test_reproducible_with_seed(self):
        grid = GridMap(5, 5)
        picks = []
        for _ in range(2):
            agent = Agent(grid, (2, 2))
            strategy = RandomStrategy(np.random.default_rng(9))
            picks.append([strategy.choose_move(agent, grid) for _ in range(10)])
        self.assertEqual(picks[0], picks[1])

    def test_no_op_when_boxed_in(self):
        grid = GridMap(2, 2)
        grid.add_obstacle_points([(1, 0), (0, 1), (1, 1)])
        agent = Agent(grid, (0, 0))
        self.assertIsNone(RandomStrategy().choose_move(agent, grid))


class WaterfallStrategyTests(unittest.TestCase):
    def test_moves_onto_adjacent_dirt(self):
        grid = GridMap(3, 1)
        grid.add_dirt(1, 0)
        agent = Agent(grid, (0, 0))
        strategy = WaterfallStrategy()
        self.assertEqual(strategy.choose_move(agent, grid), "E")
        self.assertEqual(strategy.target, (1, 0))

    def test_no_dirt_is_no_op(self):
        grid = GridMap(3, 3)
        agent = Agent(grid, (1, 1))
        strategy = WaterfallStrategy()
        self.assertIsNone(strategy.choose_move(agent, grid))
        self.assertIsNone(strategy.target)

    def test_unreachable_dirt_is_no_op(self):
        grid = GridMap(3, 3)
        grid.add_obstacle_points([(1, 0), (1, 1), (1, 2)])
        grid.add_dirt(2, 2)
        agent = Agent(grid, (0, 0))
        self.assertIsNone(WaterfallStrategy().choose_move(agent, grid))

    def test_nearest_dirt_wins(self):
        grid = GridMap(7, 1)
        grid.add_dirt_points([(0, 0), (6, 0)])
        agent = Agent(grid, (2, 0))
        strategy = WaterfallStrategy()
        self.assertEqual(strategy.choose_move(agent, grid), "W")
        self.assertEqual(strategy.target, (0, 0))

    def test_tie_broken_by_visit_order(self):
        grid = GridMap(5, 1)
        grid.add_dirt_points([(0, 0), (4, 0)])
        agent = Agent(grid, (2, 0))
        strategy = WaterfallStrategy()
        self.assertEqual(strategy.choose_move(agent, grid), "E")
        self.assertEqual(strategy.target, (4, 0))

    def test_routes_around_wall(self):
        grid = GridMap(5, 5)
        grid.add_obstacle_points([(2, 0), (2, 1), (2, 2), (2, 3)])
        grid.add_dirt(4, 0)
        agent = Agent(grid, (0, 0))
        engine = SimulationEngine(grid, agent, WaterfallStrategy())
        state = engine.run()
        self.assertEqual(state.outcome, Outcome.ALL_CLEANED)
        # Shortest 8-connected route through the gap at the bottom
        self.assertEqual(agent.steps_taken, 8)

    def test_never_picks_a_worse_move(self):
        rng = np.random.default_rng(5)
        for _ in range(15):
            grid = GridMap(8, 8, rng=rng)
            grid.place_random_obstacles(12, exclude=[(0, 0)])
            grid.place_random_dirt(6)
            agent = Agent(grid, (0, 0))
            strategy = WaterfallStrategy()
            for _ in range(30):
                move = strategy.choose_move(agent, grid)
                if move is None:
                    break
                field = DistanceField.from_grid(grid, [strategy.target])
                moves = agent.available_moves()
                chosen = field.get_distance(*moves[move])
                others = [field.get_distance(*dest) for dest in moves.values()]
                self.assertEqual(chosen, min(d for d in others if d is not None))
                agent.move(move)
                agent.clean_current_spot()


class ExplorationStrategyTests(unittest.TestCase):
    def test_open_three_by_three(self):
        grid = GridMap(3, 3)
        for y in range(3):
            for x in range(3):
                grid.add_dirt(x, y)
        agent = Agent(grid, (1, 1))
        strategy = ExplorationStrategy()
        engine = SimulationEngine(grid, agent, strategy)
        state = engine.run()

        self.assertEqual(state.outcome, Outcome.ALL_CLEANED)
        self.assertEqual(grid.count_remaining_dirt(), 0)
        # Start cell plus one step per newly visited cell
        self.assertEqual(len(strategy.visit_order), 9)
        self.assertEqual(len(set(strategy.visit_order)), 9)
        self.assertEqual(agent.steps_taken, 8)
        self.assertEqual(strategy.visit_order, [
            (1, 1), (1, 0), (2, 0), (2, 1), (2, 2),
            (1, 2), (0, 2), (0, 1), (0, 0),
        ])

    def test_backtracks_then_finishes(self):
        grid = GridMap(3, 3)
        grid.add_obstacle_points([(1, 0), (1, 1), (1, 2)])
        agent = Agent(grid, (0, 0))
        strategy = ExplorationStrategy()
        actions = drive(strategy, agent, grid, 6)
        self.assertEqual(actions, ["S", "S", "N", "N", None, None])
        self.assertTrue(strategy.finished)
        self.assertEqual(set(strategy.visited), {(0, 0), (0, 1), (0, 2)})

    def test_disconnected_dirt_is_left(self):
        grid = GridMap(3, 3)
        grid.add_obstacle_points([(1, 0), (1, 1), (1, 2)])
        grid.add_dirt_points([(0, 2), (2, 2)])
        agent = Agent(grid, (0, 0))
        engine = SimulationEngine(grid, agent, ExplorationStrategy())
        state = engine.run()
        self.assertEqual(state.outcome, Outcome.STALLED)
        self.assertFalse(grid.is_dirt(0, 2))
        self.assertTrue(grid.is_dirt(2, 2))

    def test_ignores_diagonal_only_cells(self):
        grid = GridMap(2, 2)
        grid.add_obstacle_points([(1, 0), (0, 1)])
        agent = Agent(grid, (0, 0))
        strategy = ExplorationStrategy()
        self.assertIsNone(strategy.choose_move(agent, grid))
        self.assertEqual(strategy.visit_order, [(0, 0)])

    def test_restarts_path_after_external_move(self):
        grid = GridMap(4, 1)
        agent = Agent(grid, (0, 0))
        strategy = ExplorationStrategy()
        self.assertEqual(strategy.choose_move(agent, grid), "E")
        agent.move("E")
        agent.move("E")  # moved by someone else
        self.assertEqual(strategy.choose_move(agent, grid), "E")
        self.assertEqual(strategy.visit_order, [(0, 0), (1, 0), (2, 0), (3, 0)])

    def test_resumes_older_branches_after_swap_back(self):
        grid = GridMap(5, 1)
        grid.add_dirt_points([(0, 0), (1, 0), (3, 0), (4, 0)])
        agent = Agent(grid, (2, 0))
        exploration = ExplorationStrategy()
        engine = SimulationEngine(grid, agent, exploration)

        self.assertEqual(engine.step().action, "E")
        engine.set_strategy(SweepStrategy())
        self.assertEqual(engine.step().position, (4, 0))
        engine.set_strategy(exploration)
        state = engine.run()

        self.assertEqual(state.outcome, Outcome.ALL_CLEANED)
        self.assertEqual(sorted(exploration.visit_order),
                         [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)])

    def test_walks_back_from_a_distant_cell(self):
        grid = GridMap(6, 1)
        grid.add_dirt_points([(0, 0), (1, 0), (3, 0), (4, 0), (5, 0)])
        agent = Agent(grid, (2, 0))
        exploration = ExplorationStrategy()
        engine = SimulationEngine(grid, agent, exploration)

        engine.step()
        # Carried two cells past the end of the explored path
        agent.move("E")
        agent.move("E")
        state = engine.run()

        self.assertEqual(state.outcome, Outcome.ALL_CLEANED)
        self.assertEqual(len(exploration.visit_order), 6)
        self.assertEqual(len(set(exploration.visit_order)), 6)

    def test_agent_moved_onto_an_ancestor(self):
        grid = GridMap(3, 3)
        agent = Agent(grid, (1, 1))
        strategy = ExplorationStrategy()
        drive(strategy, agent, grid, 3)
        self.assertEqual(agent.position, (2, 1))
        # Back onto the start cell, part way through the traversal
        agent.move("W")
        drive(strategy, agent, grid, 30)
        self.assertTrue(strategy.finished)
        self.assertEqual(len(set(strategy.visit_order)), 9)


class StrategyRegistryTests(unittest.TestCase):
    def test_by_name_and_index(self):
        self.assertIsInstance(create_strategy("sweep"), SweepStrategy)
        self.assertIsInstance(create_strategy(" Waterfall "), WaterfallStrategy)
        self.assertIsInstance(create_strategy("2"), RandomStrategy)
        self.assertIsInstance(create_strategy(4), ExplorationStrategy)

    def test_random_gets_rng(self):
        rng = np.random.default_rng(0)
        self.assertIs(create_strategy("random", rng).rng, rng)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            create_strategy("zigzag")


if __name__ == "__main__":
    unittest.main()
