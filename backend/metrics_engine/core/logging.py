"""
logging.py — Engine-Wide Logging Configuration

Purpose:
- Configure a standardized logging format for the calculation engine.
- Keep catalog/graph construction visible at INFO and per-period
  recomputation detail at DEBUG.

Uniform formatting: timestamp | level | module | message
"""

import logging
from typing import Optional

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL".
            Defaults to settings.LOG_LEVEL.

    Should be called ONCE, by whatever process embeds the engine
    (the command line runner does it at startup).
    """
    if level is None:
        from metrics_engine.core.config import settings
        level = settings.LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )

    logging.getLogger(__name__).info("Logging initialized with level %s", level)

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger instance to be used in any module.

    In any module:
        from metrics_engine.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
