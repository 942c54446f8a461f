from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Optional, Protocol, Union
import logging

log = logging.getLogger(__name__)

FAST, MEDIUM, SLOW = "fast", "medium", "slow"

def classify_speed(duration_ms: int, slow_ms: int = 75) -> str:
    if duration_ms > slow_ms:
        return SLOW
    if duration_ms > slow_ms / 2:
        return MEDIUM
    return FAST

@dataclass
class ErrorInfo:
    """Failure reported by an engine that does not hand over a live exception."""
    message: str
    stack: Optional[str] = None
    debug_context: Optional[Dict[str, Any]] = None

# ---------- lifecycle events ----------
@dataclass(frozen=True)
class Start:
    kind: ClassVar[str] = "start"

@dataclass(frozen=True)
class SuiteEnter:
    title: str = ""
    kind: ClassVar[str] = "suite"

@dataclass(frozen=True)
class SuiteExit:
    kind: ClassVar[str] = "suite end"

@dataclass(frozen=True)
class TestStart:
    title: str = ""
    kind: ClassVar[str] = "test"
    __test__: ClassVar[bool] = False

@dataclass(frozen=True)
class TestPass:
    title: str
    duration_ms: int = 0
    speed: str = FAST
    kind: ClassVar[str] = "pass"
    __test__: ClassVar[bool] = False

@dataclass(frozen=True)
class TestFail:
    title: str
    error: Union[BaseException, ErrorInfo]
    kind: ClassVar[str] = "fail"
    __test__: ClassVar[bool] = False

@dataclass(frozen=True)
class TestPending:
    title: str
    kind: ClassVar[str] = "pending"
    __test__: ClassVar[bool] = False

@dataclass(frozen=True)
class End:
    passes: int = 0
    pending: int = 0
    failures: int = 0
    duration_ms: int = 0
    kind: ClassVar[str] = "end"

LifecycleEvent = Union[Start, SuiteEnter, SuiteExit, TestStart, TestPass, TestFail, TestPending, End]

class Observer(Protocol):
    def on_event(self, event: LifecycleEvent) -> None: ...

class EventSource:
    """Synchronous fan-out of lifecycle events, in subscription order."""

    def __init__(self):
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> Observer:
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> None:
        self._observers.remove(observer)

    def emit(self, event: LifecycleEvent) -> None:
        log.debug("emit %s", event.kind)
        for obs in list(self._observers):
            obs.on_event(event)

@dataclass
class RunStats:
    """Counters for engines that only report individual outcomes."""
    passes: int = 0
    pending: int = 0
    failures: int = 0
    duration_ms: int = 0

    def on_event(self, event: LifecycleEvent) -> None:
        if isinstance(event, TestPass):
            self.passes += 1
            self.duration_ms += event.duration_ms
        elif isinstance(event, TestPending):
            self.pending += 1
        elif isinstance(event, TestFail):
            self.failures += 1

    def end_event(self, duration_ms: Optional[int] = None) -> End:
        return End(self.passes, self.pending, self.failures,
                   self.duration_ms if duration_ms is None else duration_ms)
