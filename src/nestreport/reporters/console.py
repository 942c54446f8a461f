from __future__ import annotations
import logging
from typing import Callable, List, Optional

from rich.console import Console
from rich.text import Text

from ..config import ReporterConfig
from ..events import (End, FAST, LifecycleEvent, Start, SuiteEnter, SuiteExit, TestFail,
                      TestPass, TestPending, TestStart)
from ..theme import PresentationTheme, theme_for_platform
from ..utils.errors import FailureError, format_error, strip_debug_context
from ..utils.location import LocationHook
from ..utils.timefmt import humanize_ms
from .intercept import OutputSink, strip_styles

log = logging.getLogger(__name__)

class ConsoleReporter:
    """Nested console output; captured test output replayed under its test."""

    def __init__(
        self,
        config: Optional[ReporterConfig] = None,
        theme: Optional[PresentationTheme] = None,
        sink: Optional[OutputSink] = None,
        console: Optional[Console] = None,
        error_formatter: Callable[[FailureError], str] = format_error,
        location_hook: Optional[LocationHook] = None,
    ):
        self.cfg = config or ReporterConfig()
        self.theme = theme or theme_for_platform(self.cfg.platform)
        self.sink = sink or OutputSink()
        self.console = console or Console(
            file=self.sink.stdout, force_terminal=self.cfg.color, no_color=self.cfg.color is False,
            highlight=False, markup=False, emoji=False, soft_wrap=True)
        self.format_error = error_formatter
        self.location_hook = location_hook
        self.depth = 0
        self.failures = 0
        self.tests_ran = False
        self._titled: List[bool] = []
        self._handlers = {
            Start: self._start,
            SuiteEnter: self._suite,
            SuiteExit: self._suite_end,
            TestStart: self._test,
            TestPending: self._pending,
            TestPass: self._pass,
            TestFail: self._fail,
            End: self._end,
        }

    # ---------- observer ----------
    def on_event(self, event: LifecycleEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unknown lifecycle event: {event!r}")
        log.debug("%s (depth=%d)", event.kind, self.depth)
        try:
            handler(event)
        except Exception:
            # never leave stdout swapped out after a render error
            self.sink.close()
            raise

    # ---------- helpers ----------
    def indent(self) -> str:
        return "  " * self.depth

    def _print(self, *parts) -> None:
        """Print one line assembled from (text, style-name) parts."""
        self.console.print(Text.assemble(*((t, self.theme.style(s)) for t, s in parts)))

    def _blank(self) -> None:
        self.console.print()

    def _pause(self) -> None:
        self.sink.release()

    def _resume(self) -> None:
        self.sink.intercept()

    def flush(self, indent: str, only_if_verbose: bool = False) -> None:
        buf = self.sink.buffer
        if not len(buf):
            return
        if buf.stripped() == "" or (only_if_verbose and not self.cfg.verbose):
            buf.clear()
            return

        chunks = list(buf)
        location_pending = self.cfg.locations or bool(self.location_hook and self.location_hook.active)
        first = True
        for data in chunks:
            lines = strip_styles(data).split("\n")
            if lines[-1] == "":
                lines.pop()
            if location_pending:
                location_pending = False
                if lines:
                    self._print((indent, ""), (lines.pop(0), "location"))
            # separate the logs from the line above when there is more to come
            if first:
                first = False
                if len(chunks) > 1 or lines:
                    self._blank()
            for line in lines:
                self._print((indent, ""), (self.cfg.log_marker, "log_marker"), (line, ""))
        self._blank()
        buf.clear()

    def _flush_and_resume(self, indent: str, only_if_verbose: bool = True) -> None:
        self._pause()
        self.flush(indent, only_if_verbose)
        self._resume()

    # ---------- events ----------
    def _start(self, event: Start) -> None:
        self.depth = 0
        self.failures = 0
        self.tests_ran = False
        self._titled = []
        self.sink.buffer.clear()
        self._print((" ", ""))
        self._resume()

    def _suite(self, event: SuiteEnter) -> None:
        self._titled.append(bool(event.title))
        if not event.title:
            return
        self._pause()
        self.flush(self.indent(), only_if_verbose=True)
        self.depth += 1
        self._print((f"{self.indent()}[{event.title}]", "suite"), (" ", ""))
        self._resume()

    def _suite_end(self, event: SuiteExit) -> None:
        titled = self._titled.pop() if self._titled else False
        self._pause()
        self.flush(self.indent(), only_if_verbose=True)
        if titled:
            self.depth -= 1
        if self.tests_ran:
            self._blank()
        self.tests_ran = False
        self._resume()

    def _test(self, event: TestStart) -> None:
        self.tests_ran = True
        self._flush_and_resume(self.indent())

    def _pending(self, event: TestPending) -> None:
        self.tests_ran = True
        self._pause()
        self._print((self.indent(), ""), (f"  {self.theme.pending_symbol}", "pending_symbol"),
                    (f" {event.title}", "pending"))
        self._resume()

    def _pass(self, event: TestPass) -> None:
        self.tests_ran = True
        self._pause()
        parts = [(self.indent(), ""), (f"  {self.theme.ok_symbol}", "checkmark"), (f" {event.title}", "pass")]
        if event.speed != FAST:
            parts.append((f" ({event.duration_ms}ms)", event.speed))
        self._print(*parts)
        self.flush(self.indent() + "    ", only_if_verbose=True)
        self._resume()

    def _fail(self, event: TestFail) -> None:
        err = strip_debug_context(event.error)
        # still intercepting: the diagnostic goes to the bottom of this test's logs
        self.sink.write(self.format_error(err) + "\n")
        self.tests_ran = True
        self._pause()
        self.failures += 1
        self._blank()
        self._print((self.indent(), ""), (f"  {self.failures}) {event.title}", "fail"))
        self.flush(self.indent() + "     ")
        self._resume()

    def _end(self, event: End) -> None:
        bar = "red" if event.failures else "green"
        self.sink.close()
        self.flush("")

        self._print((self.theme.top_rule, f"bold {bar}"))
        self._print((f" {event.passes or 0}", "bold green"), (" passing", "green"))
        if event.pending:
            self._print((f" {event.pending}", "bold " + self.theme.style("pending")), (" pending", "pending"))
        if event.failures:
            self._print((f" {event.failures}", "bold " + self.theme.style("fail")), (" failing", "fail"))
        self._print((" Took ", "took"), (humanize_ms(event.duration_ms), "duration"))
        self._print((self.theme.bottom_rule, f"bold {bar}"))
        self._blank()
