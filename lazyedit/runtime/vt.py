"""Virtual-terminal processing for the output stream.

POSIX terminals interpret escape sequences natively, so enabling is a no-op
there. Windows consoles need ``ENABLE_VIRTUAL_TERMINAL_PROCESSING`` set on the
output handle; the previous console mode is restored on exit.
"""

from __future__ import annotations

import contextlib
import logging
import sys

logger = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"
STD_OUTPUT_HANDLE = -11
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004


@contextlib.contextmanager
def virtual_terminal_processing():
    """Enable escape-sequence interpretation on stdout for the ``with`` body."""
    if not _IS_WINDOWS:
        yield
        return

    import ctypes
    from ctypes import wintypes

    kernel32 = ctypes.windll.kernel32
    handle = kernel32.GetStdHandle(STD_OUTPUT_HANDLE)
    old_mode = wintypes.DWORD()
    if not kernel32.GetConsoleMode(handle, ctypes.byref(old_mode)):
        # Not a console (redirected output); nothing to enable.
        yield
        return
    kernel32.SetConsoleMode(handle, old_mode.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING)
    logger.debug("enabled virtual terminal processing")
    try:
        yield
    finally:
        kernel32.SetConsoleMode(handle, old_mode)
