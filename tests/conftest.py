from io import StringIO
from types import SimpleNamespace

import pytest
from rich.console import Console

from nestreport.config import ReporterConfig
from nestreport.reporters.console import ConsoleReporter
from nestreport.reporters.intercept import OutputSink


@pytest.fixture
def streams():
    """Stand-in for the ``sys`` module's stdout/stderr channels."""
    return SimpleNamespace(stdout=StringIO(), stderr=StringIO())


@pytest.fixture
def make_reporter(streams):
    def _make(**cfg):
        cfg.setdefault("platform", "linux")
        cfg.setdefault("verbose", False)
        sink = OutputSink(streams)
        console = Console(file=streams.stdout, color_system=None, width=200,
                          highlight=False, markup=False, emoji=False, soft_wrap=True)
        return ConsoleReporter(ReporterConfig(**cfg), sink=sink, console=console)

    return _make


@pytest.fixture
def output(streams):
    """Everything written to the real stdout so far, as lines."""
    real = streams.stdout

    def _lines():
        return real.getvalue().split("\n")

    return _lines
