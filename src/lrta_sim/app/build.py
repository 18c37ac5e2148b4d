# lrta_sim/app/build.py
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from lrta_sim.app.protocols import HeuristicFunction
from lrta_sim.config.models import ScenarioModel
from lrta_sim.domain.entities.geography import MapNode, MapWay
from lrta_sim.domain.map.map_graph import MapGraph
from lrta_sim.domain.map.resolver import LocationResolver
from lrta_sim.io.recorder import AsyncSink, JsonlSink, Recorder, Sink
from lrta_sim.io.run_logging import RunLogging
from lrta_sim.io.track import TrackSink, TrackStore
from lrta_sim.runtime.registries import make_heuristic, make_metric, make_way_selection
from lrta_sim.sim.hooks import LoopHooks, NoopHooks


@dataclass
class App:
    config: ScenarioModel
    graph: MapGraph
    resolver: LocationResolver
    heuristic: HeuristicFunction  # unadapted; each run adapts it to its goal
    tracks: TrackStore
    recorder: Recorder
    hooks: LoopHooks
    run_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)  # one run at a time

    def flush_tracks(self, timeout: float | None = None) -> bool:
        return self.recorder.flush(timeout)

    def close(self) -> None:
        self.recorder.close()


def build(
    cfg: ScenarioModel | Mapping,
    nodes: Mapping[int, MapNode] | Iterable[MapNode],
    ways: Iterable[MapWay],
    *,
    tracks: TrackStore | None = None,
    use_logging: bool = True,
) -> App:
    """Build everything derived from one configuration; call again after a change."""
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Graph & resolver
    graph = MapGraph(
        nodes,
        ways,
        selection=make_way_selection(model.map),
        metric=make_metric(model.map.metric),
    )
    resolver = LocationResolver(graph, max_distance=model.map.max_resolve_distance)
    heuristic = make_heuristic(model.heuristic)

    # 2) Track hand-off (never blocks the worker when async)
    tracks = tracks if tracks is not None else TrackStore()
    track_sink: Sink = TrackSink(tracks)
    if model.track.async_handoff:
        track_sink = AsyncSink(track_sink)
    sinks: list[Sink] = [track_sink]
    if model.track.echo_jsonl:
        sinks.append(JsonlSink())
    recorder = Recorder(*sinks)

    # 3) Hooks
    hooks = (
        RunLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    return App(model, graph, resolver, heuristic, tracks, recorder, hooks)
