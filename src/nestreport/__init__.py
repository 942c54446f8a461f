# Lazy exports: importing the package must not swap or touch stdout.
__all__ = ["ConsoleReporter", "EventSource", "ReporterConfig", "humanize_ms"]

def __getattr__(name):
    if name == "ConsoleReporter":
        from .reporters.console import ConsoleReporter as _ConsoleReporter
        return _ConsoleReporter
    if name == "EventSource":
        from .events import EventSource as _EventSource
        return _EventSource
    if name == "ReporterConfig":
        from .config import ReporterConfig as _ReporterConfig
        return _ReporterConfig
    if name == "humanize_ms":
        from .utils.timefmt import humanize_ms as _humanize_ms
        return _humanize_ms
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
