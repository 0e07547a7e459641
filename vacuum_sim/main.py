#!/usr/bin/env python3
"""
Vacuum Cleaner Robot Simulation

Runs a cleaning robot over a grid world with the chosen strategy and writes
a tick log, a final snapshot and optionally an animation.

Examples:
    vacuum-sim
    vacuum-sim --config configs/hallway.yaml --gif --out-dir results/
    vacuum-sim --strategy exploration --render --delay 0.05 --no-csv --no-snapshot
    vacuum-sim --strategy 3 --seed 42 --quiet
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from .config import SimulationConfig, default_config, load_config
from .model.engine import SimulationEngine
from .model.state import SimulationState
from .model.strategies import STRATEGY_INDEX, WaterfallStrategy, create_strategy
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter
from .export.text_renderer import render_text

GIF_FRAME_EVERY = 2
PROGRESS_EVERY = 50


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    menu = ', '.join(f'{idx}={name}' for idx, name in STRATEGY_INDEX.items())
    parser = argparse.ArgumentParser(
        prog='vacuum-sim',
        description='Grid-world vacuum cleaner simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='Examples:' + __doc__.split('Examples:', 1)[1]
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='YAML configuration file (built-in defaults if omitted)')
    parser.add_argument('--strategy', default=None,
                        help=f'Strategy name or number ({menu})')
    parser.add_argument('--steps', type=int, default=None,
                        help='Maximum number of ticks')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible layouts and moves')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Directory for exported files (default: ./output)')

    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Write the per-tick CSV log (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false')
    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Save a PNG of the final state (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false')
    parser.add_argument('--gif', action='store_true', default=False,
                        help='Save an animated GIF of the run')

    parser.add_argument('--render', action='store_true', default=False,
                        help='Print the grid as text after every tick')
    parser.add_argument('--delay', type=float, default=0.0,
                        help='Pause in seconds between ticks')
    parser.add_argument('--quiet', action='store_true', default=False,
                        help='No console output except errors')

    return parser.parse_args(argv)


def apply_overrides(config: SimulationConfig, args: argparse.Namespace) -> None:
    """Command line flags win over the config file."""
    if args.strategy is not None:
        config.strategy = args.strategy
    if args.steps is not None:
        config.max_steps = args.steps
    if args.seed is not None:
        config.seed = args.seed
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    config.gif_enabled = config.gif_enabled or args.gif
    config.quiet = args.quiet
    config.out_dir = args.out_dir


def run(engine: SimulationEngine, config: SimulationConfig,
        args: argparse.Namespace, visualizer: Visualizer, reporter: Reporter,
        csv_writer: Optional[CSVWriter]) -> Optional[SimulationState]:
    """Drive the engine to completion, feeding every exporter each tick."""
    verbose = not config.quiet
    pending = list(config.switches)
    final_state = None

    while not engine.is_finished():
        upcoming = engine.current_step + 1
        while pending and pending[0].step <= upcoming:
            switch = pending.pop(0)
            engine.set_strategy(create_strategy(switch.strategy, engine.rng))
            if verbose:
                print(f"  Tick {upcoming}: switched to {engine.strategy.name}")

        state = engine.step()
        final_state = state
        visualizer.record(state)
        reporter.update(state)
        if csv_writer:
            csv_writer.append(state)

        if config.gif_enabled and (state.step % GIF_FRAME_EVERY == 0 or state.finished):
            strategy = engine.strategy
            target = strategy.target if isinstance(strategy, WaterfallStrategy) else None
            visualizer.buffer_frame(state, target=target)

        if verbose and args.render:
            print(f"\nTick {state.step} [{state.strategy}] {state.action or 'no-op'}")
            print(render_text(state.cells, state.position, legend=False))
        elif verbose and state.step % PROGRESS_EVERY == 0:
            print(f"  Tick {state.step}: "
                  f"{int(state.metrics['remaining_dirt'])} dirt remaining")

        if args.delay > 0:
            time.sleep(args.delay)

    return final_state


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    apply_overrides(config, args)
    verbose = not config.quiet

    try:
        engine = SimulationEngine.from_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if verbose:
        print(f"Grid {config.grid.width}x{config.grid.height}, "
              f"{engine.initial_dirt} dirt, start {engine.agent.position}, "
              f"strategy {engine.strategy.name}")
        if args.render:
            print(render_text(engine.grid.cells, engine.agent.position))

    csv_path = config.out_dir / 'simulation_log.csv'
    snapshot_path = config.out_dir / 'final_state.png'
    gif_path = config.out_dir / 'simulation.gif'

    csv_writer = CSVWriter(csv_path) if config.csv_enabled else None
    if csv_writer:
        csv_writer.open()
    visualizer = Visualizer(config.grid.width, config.grid.height)
    reporter = Reporter(str(args.config) if args.config else None, config.seed)

    final_state = None
    try:
        final_state = run(engine, config, args, visualizer, reporter, csv_writer)
    except KeyboardInterrupt:
        if verbose:
            print("\nStopped by user.")
    finally:
        if csv_writer:
            csv_writer.close()

    if final_state is None:
        final_state = engine.snapshot()

    if config.snapshot_enabled:
        visualizer.save_snapshot(final_state, snapshot_path)
    if config.gif_enabled:
        visualizer.generate_gif(gif_path, fps=10)

    if verbose:
        print(reporter.generate_summary(
            final_state, config.out_dir,
            config.csv_enabled, config.snapshot_enabled, config.gif_enabled
        ))

    return 0


if __name__ == '__main__':
    sys.exit(main())
