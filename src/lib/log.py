"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing.

All output goes to stderr, so a document rendered to stdout is never mixed
with log lines.

Usage:
    from pulpmd.lib.log import LOG, WARN, state_connectToLogger

    # At start of the pipeline:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    WARN("Skipping unreadable snippet file")
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with pulpmd-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this once at the start of the pipeline to make the state's
    verbosity setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def verbosity_get() -> Optional[int]:
    """Verbosity of the connected state, None when no state is connected"""
    state = _program_state.get()
    if state is None or not hasattr(state, 'verbosity'):
        return None
    return state.verbosity


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        0 = Quiet
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    verbosity = verbosity_get()
    if verbosity is not None and verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Emit a diagnostic that should be seen unless output is quiet.

    Unlike LOG(), this also reports when no state is connected (library use).
    """
    verbosity = verbosity_get()
    if verbosity is None or verbosity >= 1:
        logger.opt(depth=1).warning(message, **kwargs)
