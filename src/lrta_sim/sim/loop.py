# sim/loop.py

import time
from dataclasses import dataclass

from lrta_sim.app.protocols import Environment
from lrta_sim.sim.cancel import CancellationToken
from lrta_sim.sim.hooks import LoopHooks, NoopHooks


@dataclass(frozen=True)
class LoopResult:
    steps: int
    distance: float
    canceled: bool = False
    step_limit_reached: bool = False


class SimulationLoop:
    """
    Drives perceive/act cycles until the environment reports done.

    The cancel token is checked once per iteration and also ends the pacing
    wait early, so a cancel takes effect within one step plus the delay.
    Errors raised by a step (e.g. DeadEndError) are reported to the hooks and
    re-raised; steps/distance keep the partial progress.
    """

    def __init__(
        self,
        env: Environment,
        *,
        step_delay_s: float = 0.0,
        max_steps: int | None = None,
        token: CancellationToken | None = None,
        hooks: LoopHooks | None = None,
    ):
        if step_delay_s < 0:
            raise ValueError("step_delay_s must be >= 0")
        self.env = env
        self.step_delay_s = step_delay_s
        self.max_steps = max_steps
        self.token = token or CancellationToken()
        self._hooks = hooks or NoopHooks()
        self.steps = 0
        self.distance = 0.0

    def run(self) -> LoopResult:
        t0 = time.perf_counter()
        self._hooks.run_start(max_steps=self.max_steps, step_delay_s=self.step_delay_s)
        canceled = limited = False
        while not self.env.is_done():
            if self.token.canceled:
                canceled = True
                break
            if self.max_steps is not None and self.steps >= self.max_steps:
                limited = True
                break
            t1 = time.perf_counter()
            self._hooks.step_start(step=self.steps)
            try:
                cost = self.env.step()
            except Exception as exc:
                self._hooks.error(step=self.steps, exc=exc)
                raise
            self.steps += 1
            self.distance += cost
            ms = (time.perf_counter() - t1) * 1000
            self._hooks.step_end(step=self.steps, cost=cost, distance=self.distance, ms=ms)
            if self.step_delay_s > 0 and not self.env.is_done():
                if self.token.wait(self.step_delay_s):
                    canceled = True
                    break
        self._hooks.run_end(
            steps=self.steps,
            distance=self.distance,
            canceled=canceled,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return LoopResult(self.steps, self.distance, canceled, limited)
