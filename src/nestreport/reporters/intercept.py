from __future__ import annotations
import io
import logging
import sys
from typing import Any, Iterator, List, Optional

from rich.text import Text

log = logging.getLogger(__name__)

class InterceptError(RuntimeError):
    """begin/end interception called out of order."""

class LogBuffer:
    def __init__(self):
        self._chunks: List[str] = []

    def append(self, data: str) -> None:
        # continuing an unterminated chunk joins it: one print() is one chunk
        if self._chunks and not self._chunks[-1].endswith("\n"):
            self._chunks[-1] += data
        else:
            self._chunks.append(data)

    def stripped(self) -> str:
        return strip_styles("".join(self._chunks))

    def clear(self) -> None:
        self._chunks = []

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._chunks))

def strip_styles(data: str) -> str:
    return Text.from_ansi(data).plain if "\x1b" in data else data

class _CaptureWriter:
    """File-like stand-in for stdout/stderr while intercepting."""

    def __init__(self, buffer: LogBuffer, original: Any):
        self._buffer = buffer
        self.encoding = getattr(original, "encoding", None) or "utf-8"

    def write(self, data) -> int:
        if isinstance(data, bytes):
            data = data.decode(self.encoding, errors="replace")
        self._buffer.append(data)
        return len(data)

    def writelines(self, lines) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        pass

    def isatty(self) -> bool:
        return False

    def fileno(self) -> int:
        raise io.UnsupportedOperation("intercepted stream has no file descriptor")

class InterceptHandle:
    """Active interception; release restores the original channels."""

    def __init__(self, sink: "OutputSink"):
        self._sink = sink
        self.released = False

    def release(self) -> None:
        if self.released:
            raise InterceptError("interception already released")
        self._sink._restore()
        self.released = True

    def __enter__(self) -> "InterceptHandle":
        return self

    def __exit__(self, *exc) -> None:
        if not self.released:
            self.release()

class OutputSink:
    """stdout/stderr of ``streams`` (the sys module by default)."""

    def __init__(self, streams: Any = None):
        self.streams = streams if streams is not None else sys
        self.buffer = LogBuffer()
        self._saved: Optional[tuple] = None
        self._handle: Optional[InterceptHandle] = None

    @property
    def stdout(self):
        """The real stdout, even while intercepting."""
        return self._saved[0] if self._saved else self.streams.stdout

    @property
    def intercepting(self) -> bool:
        return self._handle is not None

    def intercept(self) -> InterceptHandle:
        if self._handle is not None:
            raise InterceptError("output is already being intercepted")
        self._saved = (self.streams.stdout, self.streams.stderr)
        writer = _CaptureWriter(self.buffer, self._saved[0])
        self.streams.stdout = self.streams.stderr = writer
        self._handle = InterceptHandle(self)
        return self._handle

    def release(self) -> None:
        if self._handle is None:
            raise InterceptError("release() without an active interception")
        self._handle.release()

    def _restore(self) -> None:
        if self._saved is None:
            raise InterceptError("nothing to restore")
        self.streams.stdout, self.streams.stderr = self._saved
        self._saved = None
        self._handle = None

    def close(self) -> None:
        if self._handle is not None:
            log.debug("closing active interception")
            self.release()

    def write(self, text: str) -> None:
        """Write through whatever stdout currently is (captured or not)."""
        self.streams.stdout.write(text)
