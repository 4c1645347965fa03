# src/lambdalog/sink.py: Destinations for serialized records.
# A sink is any callable taking the finished text of one record. This module
# provides the default stream sink, which writes whole records under a lock so
# that concurrent loggers never interleave partial lines.

import sys
import threading
from typing import Callable, Literal, Optional, TextIO

Sink = Callable[[str], None]


class StreamSink:
    """
    Writes each record to a text stream and flushes it.

    Without an explicit stream the process's stdout (or stderr) is looked up on
    every write, so a replaced sys.stdout is honoured.
    """

    def __init__(self, stream: Optional[TextIO] = None, default: Literal["stdout", "stderr"] = "stdout"):
        if default not in ("stdout", "stderr"):
            raise ValueError(f"Unknown stream: {default!r}")
        self._stream = stream
        self._default = default
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        if self._stream is not None:
            return self._stream
        return getattr(sys, self._default)

    def __call__(self, text: str) -> None:
        with self._lock:
            stream = self.stream
            stream.write(text)
            stream.flush()
