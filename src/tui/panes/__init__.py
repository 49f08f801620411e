"""TUI Panes Module

- output.py     - Scrolling report view
- status_bar.py - Run button, spinner, status line, export buttons
"""

from .output import OutputPane, PLACEHOLDER
from .status_bar import StatusBar

__all__ = [
    'OutputPane',
    'StatusBar',
    'PLACEHOLDER',
]
