"""
pulpmd - Markdown code snippet injector

Keeps documentation in sync with real, compilable example code.
"""

__version__ = "1.0.0"

from .parser import Parser
from .injector import Injector
from .renderer import RenderAdapter
from .log import LOG, WARN, state_connectToLogger

__all__ = ["Parser", "Injector", "RenderAdapter", "LOG", "WARN", "state_connectToLogger", "__version__"]
