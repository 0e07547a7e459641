"""I/O package for the vacuum cleaning simulation."""

from .csv_writer import CSVWriter
from .visualizer import Visualizer
from .reporter import Reporter, count_unreachable_dirt
from .text_renderer import render_text

__all__ = ['CSVWriter', 'Visualizer', 'Reporter', 'count_unreachable_dirt', 'render_text']
