"""Configuration dataclasses and YAML loader for the vacuum cleaning simulation."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.strategies import STRATEGIES, STRATEGY_INDEX


@dataclass
class GridConfig:
    width: int = 10
    height: int = 10


@dataclass
class LayoutConfig:
    obstacles: List[Tuple[int, int]] = field(default_factory=list)
    dirt: List[Tuple[int, int]] = field(default_factory=list)
    random_obstacles: int = 15
    random_dirt: int = 20


@dataclass
class AgentConfig:
    start: Tuple[int, int] = (0, 0)


@dataclass
class StrategySwitch:
    step: int       # switch takes effect before this tick runs
    strategy: str


@dataclass
class SimulationConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    strategy: str = "waterfall"
    max_steps: Optional[int] = 1000
    max_consecutive_no_ops: int = 40
    switches: List[StrategySwitch] = field(default_factory=list)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _parse_coord(raw: Any) -> Tuple[int, int]:
    """Parse an [x, y] pair."""
    try:
        x, y = raw
        return (int(x), int(y))
    except (TypeError, ValueError):
        raise ValueError(f"Expected an [x, y] coordinate, got {raw!r}")


def _parse_coords(coords_raw: Optional[List]) -> List[Tuple[int, int]]:
    return [_parse_coord(c) for c in coords_raw or []]


def _check_strategy(name: Any) -> str:
    key = str(name).strip().lower()
    if key not in STRATEGIES and key not in STRATEGY_INDEX:
        raise ValueError(f"Unknown strategy: {name!r}")
    return key


def _parse_count(value: Any, name: str, minimum: int = 0) -> int:
    count = int(value)
    if count < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {count}")
    return count


def _parse_switches(switches_raw: Optional[List[Dict]]) -> List[StrategySwitch]:
    """Parse the strategy switch schedule, sorted by step."""
    switches = []
    for s in switches_raw or []:
        step = int(s['step'])
        if step < 1:
            raise ValueError(f"Switch step must be >= 1, got {step}")
        switches.append(StrategySwitch(step=step, strategy=_check_strategy(s['strategy'])))
    return sorted(switches, key=lambda s: s.step)


def default_config() -> SimulationConfig:
    """Defaults used when no configuration file is given."""
    return SimulationConfig()


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    defaults = SimulationConfig()

    # Parse grid config
    grid_raw = raw.get('grid', {})
    grid = GridConfig(
        width=int(grid_raw.get('width', defaults.grid.width)),
        height=int(grid_raw.get('height', defaults.grid.height))
    )
    if grid.width <= 0 or grid.height <= 0:
        raise ValueError(f"Grid must be at least 1x1, got {grid.width}x{grid.height}")

    # Parse layout
    layout_raw = raw.get('layout', {})
    layout = LayoutConfig(
        obstacles=_parse_coords(layout_raw.get('obstacles')),
        dirt=_parse_coords(layout_raw.get('dirt')),
        random_obstacles=_parse_count(layout_raw.get('random_obstacles', defaults.layout.random_obstacles),
                                      'random_obstacles'),
        random_dirt=_parse_count(layout_raw.get('random_dirt', defaults.layout.random_dirt),
                                 'random_dirt')
    )

    # Parse agent config
    agent_raw = raw.get('agent', {})
    agent = AgentConfig(start=_parse_coord(agent_raw.get('start', defaults.agent.start)))

    # Parse simulation config
    sim_raw = raw.get('simulation', {})
    max_steps = sim_raw.get('max_steps', defaults.max_steps)
    if max_steps is not None:
        max_steps = _parse_count(max_steps, 'max_steps', minimum=1)

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    return SimulationConfig(
        grid=grid,
        layout=layout,
        agent=agent,
        strategy=_check_strategy(sim_raw.get('strategy', defaults.strategy)),
        max_steps=max_steps,
        max_consecutive_no_ops=_parse_count(
            sim_raw.get('max_consecutive_no_ops', defaults.max_consecutive_no_ops),
            'max_consecutive_no_ops', minimum=1),
        switches=_parse_switches(sim_raw.get('switches')),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        seed=raw.get('seed')
    )
