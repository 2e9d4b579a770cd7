"""Logging utilities with rich console output.

Every module gets its logger through get_logger; the CLI calls setup_logging
once so the watch loop and one-shot runs share the same handlers.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Processing archive...")
    logger.warning("Image not found")
    logger.error("Failed to publish", exc_info=True)
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# Global console instance for consistent output
console = Console()

# Level chosen by setup_logging, applied to loggers created before and after it
_configured_level: str | None = None
_module_loggers: set[str] = set()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Published my-post")
        Published my-post
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = _configured_level or os.getenv("LOG_LEVEL", "INFO")
        _module_loggers.add(name)

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # Propagate so pytest caplog and file handlers on the root logger see records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Setup logging configuration for the entire application.

    This should be called once at the application entry point (CLI).
    Module loggers created with get_logger keep their own console handler,
    so the root logger only gets the optional file handler. Loggers that were
    not given an explicit level follow the level set here.

    Args:
        level: Default logging level for all modules
        log_file: Optional file path to also log to a file
    """
    global _configured_level

    # Allow environment variable to override
    level = os.getenv("LOG_LEVEL", level).upper()
    _configured_level = level
    for name in _module_loggers:
        logging.getLogger(name).setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


# Convenience functions for common logging patterns
def progress(message: str) -> None:
    """Print a progress message without the logger prefix."""
    console.print(message)


def success(message: str) -> None:
    """Print a success message with a green checkmark.

    Example:
        >>> success("Published my-post")
        ✓ Published my-post
    """
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    """Print a warning message with a yellow warning icon."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print an error message with a red X icon to stderr."""
    Console(stderr=True).print(f"[red]✗[/red] {message}")
