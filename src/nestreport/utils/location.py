"""Registration-site annotations for captured test output.

Wrap an engine's registration functions (``it``, ``before_each``...) with
``LocationHook.wrap``; each registered body then prints ``path:line`` of its
registration as the first captured line, which the reporter renders as a
header above that unit's logs.
"""
from __future__ import annotations
import functools
import os
import sys
from typing import Any, Callable, Optional

from rich.console import Console
from ..theme import BASE_STYLES

def caller_location(depth: int = 1, cwd: Optional[str] = None) -> str:
    """``path:line`` of the frame ``depth`` levels above the caller."""
    frame = sys._getframe(depth + 1)
    path = frame.f_code.co_filename
    cwd = cwd or os.getcwd()
    try:
        rel = os.path.relpath(path, cwd)
    except ValueError:
        # different drive on Windows
        rel = path
    if not rel.startswith(".."):
        path = rel
    return f"{path}:{frame.f_lineno}"

class LocationHook:
    def __init__(self, cwd: Optional[str] = None, style: str = BASE_STYLES["location"]):
        self.cwd = cwd
        self.style = style
        self.active = False

    def _announce(self, line: str) -> None:
        # resolve stdout at call time so the reporter's interception sees it
        Console(file=sys.stdout, highlight=False, markup=False, emoji=False, soft_wrap=True).print(line, style=self.style)

    def wrap(self, register: Callable[..., Any]) -> Callable[..., Any]:
        self.active = True

        @functools.wraps(register)
        def wrapped(label, func: Callable[..., Any], *args, **kwargs):
            line = caller_location(1, self.cwd)

            @functools.wraps(func)
            def body(*a, **kw):
                self._announce(line)
                return func(*a, **kw)

            return register(label, body, *args, **kwargs)

        return wrapped
