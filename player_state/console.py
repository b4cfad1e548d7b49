"""
Console helpers: colored logging and running commands with error reporting.
"""

import asyncio
import logging
import sys
from typing import Awaitable, Callable, TypeVar

import click

from .errors import PlayerStateError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ColoredFormatter(logging.Formatter):
    """Colored formatter for player state client logs."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    # Component colors
    COMPONENT_COLORS = {
        'config': '\033[94m',          # Blue
        'connection': '\033[92m',      # Green
        'transactions': '\033[93m',    # Yellow
        'players': '\033[96m',         # Cyan
        'update_player': '\033[95m',   # Magenta
        'read_players': '\033[95m',    # Magenta
        'errors': '\033[91m',          # Red
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        component_name = record.name.split('.')[-1]
        timestamp = self.formatTime(record)

        if not self.use_color:
            return f"[{record.levelname}] [{component_name}] {timestamp} - {record.getMessage()}"

        level_color = self.COLORS.get(record.levelname, '')
        component_color = self.COMPONENT_COLORS.get(component_name, '')

        formatted = f"{self.BOLD}{level_color}[{record.levelname}]{self.RESET} "
        formatted += f"{component_color}[{component_name}]{self.RESET} "
        formatted += f"{timestamp} - {record.getMessage()}"
        return formatted


def setup_logging(verbose: bool = False) -> None:
    """Install the colored console handler on the root logger."""
    stream = sys.stderr
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(ColoredFormatter(use_color=stream.isatty()))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Repeated setup must not stack handlers
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, ColoredFormatter):
            root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)

    # Quiet noisy loggers
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('web3').setLevel(logging.WARNING)


def run_command(command: Callable[[], Awaitable[T]]) -> T:
    """Run an async command, turning classified failures into an exit code."""
    try:
        return asyncio.run(command())
    except PlayerStateError as e:
        logger.debug("Command failed", exc_info=True)
        click.secho(f"[ERROR] {e.kind}: {e}", fg="red", err=True)
        raise SystemExit(e.exit_code)
