"""
pulpmd - Markdown code snippet injector

Write and test example code as real files, then let pulpmd load it into
your markdown pages at {{snippet name}} markers.
"""

__version__ = "1.0.0"

from .lib import Parser, Injector, RenderAdapter, LOG, state_connectToLogger

__all__ = ["Parser", "Injector", "RenderAdapter", "LOG", "state_connectToLogger", "__version__"]
