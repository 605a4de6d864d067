"""Public runtime orchestration entry points.

This package groups the interactive session bootstrap (`run_editor`) and the
lower-level loop, viewport, and terminal pieces used by tests and composition.
"""

from __future__ import annotations


def run_editor(*args, **kwargs):
    """Lazily import the session entrypoint to keep package imports lightweight."""
    from .app import run_editor as _run_editor

    return _run_editor(*args, **kwargs)


__all__ = [
    "run_editor",
]
