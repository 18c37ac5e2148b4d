# lrta_sim/app/session.py
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from lrta_sim.app.build import App
from lrta_sim.app.environment import MapEnvironment
from lrta_sim.app.events import AgentActed
from lrta_sim.domain.entities.geography import Position, as_position
from lrta_sim.domain.errors import (
    DeadEndError,
    InsufficientInputError,
    NoNearbyLocationError,
    NotAdaptedError,
    RunInProgressError,
)
from lrta_sim.domain.search.lrta_star import LRTAStarAgent
from lrta_sim.domain.search.problem import OnlineSearchProblem
from lrta_sim.io.track import TrackRecorder
from lrta_sim.sim.cancel import CancellationToken
from lrta_sim.sim.loop import SimulationLoop


class RunStatus(Enum):
    SUCCESS = "success"
    CANCELED = "canceled"
    DEAD_END = "dead_end"
    RESOLUTION_FAILED = "resolution_failed"
    INSUFFICIENT_INPUT = "insufficient_input"
    STEP_LIMIT = "step_limit"
    FAILED = "failed"


@dataclass(frozen=True)
class RunOutcome:
    status: RunStatus
    message: str  # user-facing status line
    distance: float | None = None  # None if not a single step completed
    steps: int = 0
    moves: int = 0
    visited: int = 0  # distinct locations moved to
    start: int | None = None
    goal: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.SUCCESS


def format_distance(distance: float, unit: str) -> str:
    return f"Travel distance: {distance:.1f}{unit}"


def run_simulation(
    app: App,
    markers: Sequence[Position],
    *,
    token: CancellationToken | None = None,
) -> RunOutcome:
    """
    One LRTA* run from markers[0] to markers[1] on the app's graph.

    Every terminal situation, including the error taxonomy, comes back as a
    RunOutcome; only unexpected exceptions propagate. Runs on one App are
    serialized: a second concurrent call raises RunInProgressError.
    """
    if not app.run_lock.acquire(blocking=False):
        raise RunInProgressError("a run is already in progress on this App")
    try:
        return _run_locked(app, markers, token or CancellationToken())
    finally:
        app.run_lock.release()


def _run_locked(app: App, markers: Sequence[Position], token: CancellationToken) -> RunOutcome:
    cfg = app.config
    unit = app.graph.metric.unit
    exc: BaseException | None = None

    try:
        if len(markers) < 2:
            raise InsufficientInputError(len(markers))
        start = app.resolver.nearest_location(as_position(markers[0]))
        goal = app.resolver.nearest_location(as_position(markers[1]))
    except InsufficientInputError as e:
        outcome = RunOutcome(RunStatus.INSUFFICIENT_INPUT, "Error: fewer than two markers set.")
        app.hooks.outcome(outcome, exc=e)
        return outcome
    except NoNearbyLocationError as e:
        outcome = RunOutcome(RunStatus.RESOLUTION_FAILED, f"Error: {e}.")
        app.hooks.outcome(outcome, exc=e)
        return outcome

    problem = OnlineSearchProblem(app.graph, goal)
    heuristic = app.heuristic.adapt_to_goal(goal, app.graph)
    agent = LRTAStarAgent(problem, heuristic)

    env = MapEnvironment(app.graph)
    tracker = TrackRecorder(app.graph, app.recorder, track=cfg.track.name)
    tracker.start()
    env.on(AgentActed, tracker.on_agent_acted)
    env.add_agent(agent, start)

    loop = SimulationLoop(
        env,
        step_delay_s=cfg.sim.step_delay_s,
        max_steps=cfg.sim.max_steps,
        token=token,
        hooks=app.hooks,
    )
    try:
        result = loop.run()
    except DeadEndError as e:
        status, msg, exc = RunStatus.DEAD_END, f"Error: dead end, {e}.", e
    except NotAdaptedError as e:
        status, msg, exc = RunStatus.FAILED, f"Error: {e}.", e
    else:
        if result.canceled:
            status, msg = RunStatus.CANCELED, "Canceled."
        elif result.step_limit_reached:
            status, msg = RunStatus.STEP_LIMIT, f"Stopped after {result.steps} steps."
        else:
            status, msg = RunStatus.SUCCESS, ""

    distance = loop.distance if loop.steps > 0 else None
    if distance is not None:
        msg = f"{msg} {format_distance(distance, unit)}".strip()
    outcome = RunOutcome(
        status,
        msg,
        distance=distance,
        steps=loop.steps,
        moves=env.state.moves,
        visited=len(tracker.visited),
        start=start,
        goal=goal,
    )
    app.hooks.outcome(outcome, exc=exc)
    return outcome


class RunHandle:
    """A run on its own worker thread; cancel() is cooperative."""

    def __init__(self, app: App, markers: Sequence[Position]):
        self.token = CancellationToken()
        self.outcome: RunOutcome | None = None
        self.error: BaseException | None = None
        self._thread = threading.Thread(
            target=self._run, args=(app, list(markers)), name="lrta-run", daemon=True
        )

    def _run(self, app: App, markers: list[Position]) -> None:
        try:
            self.outcome = run_simulation(app, markers, token=self.token)
        except Exception as e:  # surfaced by join()
            self.error = e

    def start(self) -> "RunHandle":
        self._thread.start()
        return self

    def cancel(self) -> None:
        self.token.cancel()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> RunOutcome | None:
        """Outcome once the run finished, None if still running after timeout."""
        self._thread.join(timeout)
        if self._thread.is_alive():
            return None
        if self.error is not None:
            raise self.error
        return self.outcome


def start_run(app: App, markers: Sequence[Position]) -> RunHandle:
    return RunHandle(app, markers).start()
