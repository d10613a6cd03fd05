"""Logging setup shared by the API server and the CLI.

pdfplumber (through pdfminer), httpx and Pillow are chatty at DEBUG/INFO,
so their loggers are held at WARNING unless explicitly asked for.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_NOISY_LIBRARIES = ("pdfminer", "httpx", "httpcore", "PIL")


def setup_logging(level: str = "INFO", quiet_libraries: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Calling this more than once is a no-op, so both ``main`` and the CLI
    may call it without stacking handlers.

    Args:
        level: Logging level name. Unknown names fall back to INFO.
        quiet_libraries: Clamp third-party loggers to WARNING.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if quiet_libraries:
        for name in _NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, usually called with ``__name__``."""
    return logging.getLogger(name)
