"""Public package surface for lazyedit.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``lazyedit``.
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

# The terminal belongs to the UI; records are dropped unless the CLI adds a file handler.
logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main", "__version__"]
