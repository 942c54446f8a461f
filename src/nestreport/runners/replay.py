from typing import Any, Dict, List, Literal, Optional, Union
import logging
import pathlib
import sys
import yaml
from pydantic import BaseModel, Field, TypeAdapter
from ..events import (End, ErrorInfo, EventSource, LifecycleEvent, RunStats, Start, SuiteEnter,
                      SuiteExit, TestFail, TestPass, TestPending, TestStart, classify_speed)

log = logging.getLogger(__name__)

EventKind = Literal["start", "suite", "suite end", "test", "pass", "fail", "pending", "end", "output"]

class ErrorRecord(BaseModel):
    message: str
    stack: Optional[str] = None
    debug_context: Optional[Dict[str, Any]] = None

class EventRecord(BaseModel):
    """One line of a recorded run, as written by an engine integration."""
    event: EventKind
    title: str = ""
    duration_ms: Optional[int] = Field(None, ge=0)
    speed: Optional[Literal["fast", "medium", "slow"]] = None
    error: Optional[Union[ErrorRecord, str]] = None
    # end counters; filled from the replayed events when missing
    passes: Optional[int] = Field(None, ge=0)
    pending: Optional[int] = Field(None, ge=0)
    failures: Optional[int] = Field(None, ge=0)
    # output records
    text: str = ""
    stream: Literal["stdout", "stderr"] = "stdout"

    def to_event(self, stats: RunStats, slow_ms: int = 75) -> Optional[LifecycleEvent]:
        if self.event == "start": return Start()
        if self.event == "suite": return SuiteEnter(self.title)
        if self.event == "suite end": return SuiteExit()
        if self.event == "test": return TestStart(self.title)
        if self.event == "pending": return TestPending(self.title)
        if self.event == "pass":
            ms = self.duration_ms or 0
            return TestPass(self.title, ms, self.speed or classify_speed(ms, slow_ms))
        if self.event == "fail":
            err = self.error or ErrorRecord(message="Unknown failure")
            if isinstance(err, str):
                err = ErrorRecord(message=err)
            return TestFail(self.title, ErrorInfo(err.message, err.stack, err.debug_context))
        if self.event == "end":
            return End(
                stats.passes if self.passes is None else self.passes,
                stats.pending if self.pending is None else self.pending,
                stats.failures if self.failures is None else self.failures,
                stats.duration_ms if self.duration_ms is None else self.duration_ms,
            )
        return None

_records = TypeAdapter(List[EventRecord])

def load_event_log(path: str) -> List[EventRecord]:
    """Read a YAML (or JSON) list of event records, optionally under ``events:``."""
    data = yaml.safe_load(pathlib.Path(path).read_text()) or []
    if isinstance(data, dict):
        data = data.get("events", [])
    return _records.validate_python(data)

class Replayer:
    """Feeds recorded events to an event source as a live engine would."""

    def __init__(self, source: EventSource, slow_ms: int = 75, streams: Any = None):
        self.source = source
        self.slow_ms = slow_ms
        self.streams = streams if streams is not None else sys
        self.stats = RunStats()
        self.end: Optional[End] = None

    def run(self, records: List[EventRecord]) -> RunStats:
        for rec in records:
            if rec.event == "output":
                # what a test body would print; the reporter decides where it ends up
                getattr(self.streams, rec.stream).write(rec.text)
                continue
            event = rec.to_event(self.stats, self.slow_ms)
            self.stats.on_event(event)
            if isinstance(event, End):
                self.end = event
            self.source.emit(event)
        log.debug("replayed %d records", len(records))
        return self.stats
