"""
Logging utilities
"""
import logging
from rich.logging import RichHandler
from rich.console import Console

from multicall_batcher.config.settings import LOG_LEVEL

# Global console for rich output
console = Console(stderr=True)


def setup_logging(level: str | None = None):
    """Configure logging with rich handler"""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                markup=True
            )
        ]
    )

    # Reduce noise from external libraries
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)
