import threading
import time

import pytest
from pydantic import ValidationError

from lrta_sim.app.build import build
from lrta_sim.app.session import RunStatus, format_distance, run_simulation, start_run
from lrta_sim.config.models import ScenarioModel
from lrta_sim.domain.entities.geography import MapNode, MapWay, Position
from lrta_sim.domain.errors import RunInProgressError
from lrta_sim.domain.map.metrics import PlanarMetric
from lrta_sim.domain.search.heuristics import StraightLineHeuristic, ZeroHeuristic
from lrta_sim.io.track import TrackStore
from lrta_sim.sim.cancel import CancellationToken


def cfg(**over):
    base = {
        "name": "test",
        "run_id": "t-1",
        "map": {"way_selection": "any", "metric": "euclidean", "max_resolve_distance": 0.5},
        "heuristic": {"kind": "zero"},
    }
    base.update(over)
    return base


@pytest.fixture
def cycle_app(cycle_map):
    app = build(cfg(), *cycle_map, use_logging=False)
    yield app
    app.close()


def line_map(n: int):
    nodes = [MapNode(i, 0.0, float(i)) for i in range(1, n + 1)]
    return nodes, [MapWay(1, tuple(range(1, n + 1)), {"highway": "residential"})]


class SlowTrackStore(TrackStore):
    """A renderer that is slower than the agent."""

    def __init__(self, delay_s: float):
        super().__init__()
        self.delay_s = delay_s

    def add_to_track(self, name, p):
        time.sleep(self.delay_s)
        super().add_to_track(name, p)


# ---------- end-to-end


def test_cycle_scenario_end_to_end(cycle_app):
    out = run_simulation(cycle_app, [Position(0.0, 0.0), Position(1.0, 1.0)])
    assert out.status is RunStatus.SUCCESS and out.succeeded
    assert (out.start, out.goal) == (1, 3)
    assert out.moves == 2
    assert out.visited == 2
    assert out.distance == pytest.approx(2.0)
    assert out.message == "Travel distance: 2.0"

    assert cycle_app.flush_tracks(timeout=5.0)
    track = cycle_app.tracks.track("Track").positions()
    assert track == [Position(0.0, 1.0), Position(1.0, 1.0)]  # via B, ending at C


def test_track_is_cleared_at_run_start(cycle_map):
    store = SlowTrackStore(delay_s=0.05)
    app = build(cfg(), *cycle_map, tracks=store, use_logging=False)
    markers = [Position(0.0, 0.0), Position(1.0, 1.0)]
    run_simulation(app, markers)
    run_simulation(app, markers)  # first run's points are still queued here
    assert app.flush_tracks(timeout=5.0)
    app.close()
    assert store.track("Track").positions() == [Position(0.0, 1.0), Position(1.0, 1.0)]


def test_slow_renderer_still_gets_every_point():
    nodes, ways = line_map(20)
    store = SlowTrackStore(delay_s=0.01)
    app = build(cfg(), nodes, ways, tracks=store, use_logging=False)
    out = run_simulation(app, [Position(0.0, 1.0), Position(0.0, 20.0)])
    assert app.flush_tracks(timeout=10.0)
    app.close()
    assert out.succeeded and out.moves == 19 and out.visited == 19
    assert store.track("Track").positions() == [Position(0.0, float(i)) for i in range(2, 21)]


def test_runs_do_not_share_learned_estimates(cycle_app):
    markers = [Position(0.0, 0.0), Position(1.0, 1.0)]
    first = run_simulation(cycle_app, markers)
    second = run_simulation(cycle_app, markers)
    cycle_app.flush_tracks(timeout=5.0)
    # a fresh table picks B again (a retained one would go via D)
    assert cycle_app.tracks.track("Track").positions()[0] == Position(0.0, 1.0)
    assert first.distance == second.distance


def test_haversine_reports_km():
    nodes = [MapNode(1, 48.0, 10.0), MapNode(2, 48.01, 10.0), MapNode(3, 48.02, 10.0)]
    ways = [MapWay(1, (1, 2, 3), {"highway": "primary"})]
    app = build({"map": {"metric": "haversine"}}, nodes, ways, use_logging=False)
    out = run_simulation(app, [Position(48.0, 10.0), Position(48.02, 10.0)])
    app.close()
    assert out.succeeded
    assert out.distance == pytest.approx(2.224, abs=1e-3)
    assert out.message == "Travel distance: 2.2km"
    assert isinstance(app.heuristic, StraightLineHeuristic)  # default, left unadapted


def test_start_equals_goal(cycle_app):
    out = run_simulation(cycle_app, [Position(0.0, 0.0), Position(0.1, 0.0)])
    assert out.succeeded
    assert out.distance == 0.0 and out.moves == 0 and out.steps == 1


# ---------- error taxonomy at the run boundary


@pytest.mark.parametrize("markers", [[], [Position(0.0, 0.0)]])
def test_fewer_than_two_markers(cycle_app, markers):
    out = run_simulation(cycle_app, markers)
    assert out.status is RunStatus.INSUFFICIENT_INPUT
    assert "fewer than two markers set" in out.message
    assert out.distance is None and out.steps == 0


def test_marker_far_from_map(cycle_app):
    cycle_app.tracks.add_to_track("Track", Position(9.0, 9.0))
    out = run_simulation(cycle_app, [Position(0.0, 0.0), Position(20.0, 20.0)])
    assert out.status is RunStatus.RESOLUTION_FAILED
    assert out.message.startswith("Error: nearest map location")
    assert out.steps == 0 and out.distance is None
    # no run happened, so the previous track is untouched
    assert len(cycle_app.tracks.track("Track")) == 1


def test_dead_end_after_zero_steps():
    nodes = [MapNode(1, 0.0, 0.0), MapNode(2, 0.0, 1.0)]
    ways = [MapWay(1, (1, 2), {"highway": "residential", "oneway": "yes"})]
    app = build(cfg(map={"way_selection": "car", "metric": "euclidean"}), nodes, ways, use_logging=False)
    out = run_simulation(app, [Position(0.0, 1.0), Position(0.0, 0.0)])
    app.close()
    assert out.status is RunStatus.DEAD_END
    assert not out.succeeded
    assert out.steps == 0 and out.distance is None
    assert "no way forward from location 2" in out.message


def test_oneway_ignored_with_any_way():
    nodes = [MapNode(1, 0.0, 0.0), MapNode(2, 0.0, 1.0)]
    ways = [MapWay(1, (1, 2), {"highway": "residential", "oneway": "yes"})]
    app = build(cfg(), nodes, ways, use_logging=False)
    out = run_simulation(app, [Position(0.0, 1.0), Position(0.0, 0.0)])
    app.close()
    assert out.succeeded and out.distance == pytest.approx(1.0)


def test_step_limit():
    nodes, ways = line_map(6)
    app = build(cfg(sim={"max_steps": 2}), nodes, ways, use_logging=False)
    out = run_simulation(app, [Position(0.0, 1.0), Position(0.0, 6.0)])
    app.close()
    assert out.status is RunStatus.STEP_LIMIT
    assert out.steps == 2 and out.distance == pytest.approx(2.0)


def test_canceled_token_gives_partial_result(cycle_app):
    token = CancellationToken()
    token.cancel()
    out = run_simulation(cycle_app, [Position(0.0, 0.0), Position(1.0, 1.0)], token=token)
    assert out.status is RunStatus.CANCELED
    assert out.distance is None


# ---------- worker thread


def test_background_run_completes(cycle_app):
    handle = start_run(cycle_app, [Position(0.0, 0.0), Position(1.0, 1.0)])
    out = handle.join(timeout=10.0)
    assert out is not None and out.succeeded
    assert not handle.running


def test_background_run_can_be_canceled():
    nodes, ways = line_map(50)
    app = build(cfg(sim={"step_delay_s": 5.0}), nodes, ways, use_logging=False)
    handle = start_run(app, [Position(0.0, 1.0), Position(0.0, 50.0)])
    assert handle.join(timeout=0.2) is None
    handle.cancel()
    out = handle.join(timeout=5.0)
    app.close()
    assert out is not None
    assert out.status is RunStatus.CANCELED
    assert out.message.startswith("Canceled.")
    assert out.distance is not None and out.distance < 49.0


def test_concurrent_run_on_same_app_is_refused(monkeypatch):
    thread_errors = []
    monkeypatch.setattr(threading, "excepthook", thread_errors.append)
    nodes, ways = line_map(50)
    app = build(cfg(sim={"step_delay_s": 5.0}), nodes, ways, use_logging=False)
    markers = [Position(0.0, 1.0), Position(0.0, 50.0)]
    first = start_run(app, markers)
    assert first.join(timeout=0.2) is None

    with pytest.raises(RunInProgressError):
        run_simulation(app, markers)
    second = start_run(app, markers)
    with pytest.raises(RunInProgressError):
        second.join(timeout=5.0)
    assert thread_errors == []  # reported once, by join()

    first.cancel()
    assert first.join(timeout=5.0).status is RunStatus.CANCELED
    # the lock is released once the run is over
    assert run_simulation(app, [Position(0.0, 1.0), Position(0.0, 1.0)]).succeeded
    app.close()


# ---------- configuration


def test_build_accepts_model_and_keeps_track_store(cycle_map):
    store = TrackStore()
    model = ScenarioModel.model_validate(cfg(track={"async_handoff": False, "name": "Route"}))
    app = build(model, *cycle_map, tracks=store, use_logging=False)
    assert app.config is model
    assert isinstance(app.graph.metric, PlanarMetric)
    assert isinstance(app.heuristic, ZeroHeuristic)
    run_simulation(app, [Position(0.0, 0.0), Position(1.0, 1.0)])
    assert len(store.track("Route")) == 2  # synchronous hand-off


@pytest.mark.parametrize(
    "bad",
    [
        {"map": {"way_selection": "boat"}},
        {"map": {"max_resolve_distance": 0}},
        {"heuristic": {"kind": "manhattan"}},
        {"sim": {"step_delay_s": -0.1}},
        {"sim": {"max_steps": 0}},
        {"unknown": 1},
    ],
)
def test_invalid_config_rejected(cycle_map, bad):
    with pytest.raises(ValidationError):
        build(bad, *cycle_map, use_logging=False)


def test_format_distance():
    assert format_distance(12.345, "km") == "Travel distance: 12.3km"
