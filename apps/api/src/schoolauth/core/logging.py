"""
Logging Setup

Configures the root logger once at startup. Modules log through
logging.getLogger(__name__).
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging with a single stream handler."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)

    # Keep SQL echo and access logs at the configured level or quieter
    logging.getLogger("sqlalchemy.engine").setLevel(max(numeric_level, logging.WARNING))
    logging.getLogger("uvicorn.access").setLevel(max(numeric_level, logging.WARNING))
