# sim/cancel.py
import threading


class CancellationToken:
    """Cooperative cancel flag shared between a run's worker thread and its owner."""

    def __init__(self):
        self._ev = threading.Event()

    def cancel(self) -> None:
        self._ev.set()

    @property
    def canceled(self) -> bool:
        return self._ev.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds; True if canceled meanwhile."""
        return self._ev.wait(timeout)
