# io/recorder.py
import json
import logging
import queue
import sys
import threading
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev) -> None:
        self.fp.write(json.dumps(asdict(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


# Async sink (unbounded queue, write never blocks)
class AsyncSink:
    _STOP = object()

    def __init__(self, sink: Sink):
        self.sink, self.q = sink, queue.Queue()
        self._t = threading.Thread(target=self._run, name="track-handoff", daemon=True)
        self._t.start()

    def write(self, ev) -> None:
        self.q.put_nowait(ev)

    def _run(self):
        while True:
            ev = self.q.get()
            try:
                if ev is self._STOP:
                    return
                self.sink.write(ev)
            except Exception:
                log.exception("sink %s failed on %r", type(self.sink).__name__, ev)
            finally:
                self.q.task_done()

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until everything written so far reached the wrapped sink."""
        if timeout is None:
            self.q.join()
            return True
        done = threading.Event()
        threading.Thread(target=lambda: (self.q.join(), done.set()), daemon=True).start()
        return done.wait(timeout)

    def close(self, timeout: float = 1.0) -> None:
        if self._t.is_alive():
            self.q.put(self._STOP)
            self._t.join(timeout=timeout)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except Exception:
                log.exception("sink %s failed on %r", type(s).__name__, ev)  # never break the sim

    def flush(self, timeout: float | None = None) -> bool:
        ok = True
        for s in self.sinks:
            if isinstance(s, AsyncSink):
                ok = s.flush(timeout) and ok
        return ok

    def close(self) -> None:
        for s in self.sinks:
            if isinstance(s, AsyncSink):
                s.close()
