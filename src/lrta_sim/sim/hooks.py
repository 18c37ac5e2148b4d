# sim/hooks.py
from typing import Protocol


class LoopHooks(Protocol):
    def run_start(self, *, max_steps, step_delay_s): ...
    def run_end(self, *, steps, distance, canceled, wall_ms): ...
    def step_start(self, *, step): ...
    def step_end(self, *, step, cost, distance, ms): ...
    def error(self, *, step, exc: BaseException): ...
    def outcome(self, outcome, *, exc: BaseException | None = None): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def step_start(self, **_):
        pass

    def step_end(self, **_):
        pass

    def error(self, **_):
        pass

    def outcome(self, *_, **__):
        pass
