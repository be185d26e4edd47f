"""Logging configuration for git-worktree-keeper"""
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_DIR_NAME = '.git-worktree-keeper'
LOG_FILE_NAME = 'git-worktree-keeper.log'

CONSOLE_FORMAT = 'wtk [%(name)s] %(levelname)s: %(message)s'
DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Colours the level name when the handler's stream is a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt=None, datefmt=None, stream=None):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.stream = stream if stream is not None else sys.stderr

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if not color or not self.stream.isatty():
            return super().format(record)

        # Records are shared between handlers; colour a copy only
        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def log_file_path(home: Optional[Path] = None) -> Path:
    """Where --debug writes its log."""
    return (home if home is not None else Path.home()) / LOG_DIR_NAME / LOG_FILE_NAME


def setup_logging(verbose: bool = False, debug: bool = False, home: Optional[Path] = None) -> None:
    """
    Configure logging for git-wtk.

    Warnings only by default, INFO with --verbose, DEBUG with --debug. Debug
    runs also overwrite a log file under the home directory.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages and also write them to a log file
        home: Home directory holding the debug log (defaults to the user's)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if debug:
        log_file = log_file_path(home)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(fmt=DEBUG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        ColoredFormatter(
            fmt=DEBUG_FORMAT if debug else CONSOLE_FORMAT,
            datefmt=DATE_FORMAT,
            stream=console_handler.stream,
        )
    )
    root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger named after the module, without the package prefix.

    ``git_worktree_keeper.services.providers.detector`` becomes
    ``providers.detector``.
    """
    for prefix in ('git_worktree_keeper.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]

    return logging.getLogger(name)
