# io/track.py
import threading
from dataclasses import dataclass

from lrta_sim.app.events import AgentActed
from lrta_sim.domain.entities.geography import Position
from lrta_sim.domain.map.map_graph import MapGraph
from lrta_sim.io.recorder import Recorder

DEFAULT_TRACK = "Track"


@dataclass(frozen=True)
class TrackPoint:
    track: str
    step: int
    location: int
    lat: float
    lon: float

    @property
    def position(self) -> Position:
        return Position(self.lat, self.lon)


@dataclass(frozen=True)
class TrackCleared:
    track: str


class Track:
    """Append-only list of positions; one writer and one reader may share it."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._positions: list[Position] = []

    def append(self, p: Position) -> None:
        with self._lock:
            self._positions.append(p)

    def clear(self) -> None:
        with self._lock:
            self._positions.clear()

    def positions(self) -> list[Position]:
        with self._lock:
            return list(self._positions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._positions)


class TrackStore:
    """Named tracks owned by the rendering side; outlives individual runs."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tracks: dict[str, Track] = {}

    def track(self, name: str) -> Track:
        with self._lock:
            t = self._tracks.get(name)
            if t is None:
                t = self._tracks[name] = Track(name)
            return t

    def add_to_track(self, name: str, p: Position) -> None:
        self.track(name).append(p)

    def clear_track(self, name: str) -> None:
        self.track(name).clear()

    def names(self) -> list[str]:
        with self._lock:
            return list(self._tracks)


class TrackSink:
    """Applies clears and points to the store in hand-off order."""

    def __init__(self, store: TrackStore):
        self.store = store

    def write(self, ev: TrackPoint | TrackCleared) -> None:
        if isinstance(ev, TrackCleared):
            self.store.clear_track(ev.track)
        else:
            self.store.add_to_track(ev.track, ev.position)


class TrackRecorder:
    """
    Environment observer turning agent moves into track points.
    Non-moves (including the final stop) are ignored.

    start() sends the clear through the recorder, so it stays ordered with
    points of an earlier run still queued in an async sink.
    """

    def __init__(self, graph: MapGraph, recorder: Recorder, *, track: str = DEFAULT_TRACK):
        self.graph, self.recorder, self.track = graph, recorder, track
        self.visited: set[int] = set()

    def start(self) -> None:
        self.visited.clear()
        self.recorder.emit(TrackCleared(self.track))

    def on_agent_acted(self, ev: AgentActed) -> None:
        if not ev.moved:
            return
        node = self.graph.way_node(ev.location)
        self.visited.add(ev.location)
        self.recorder.emit(TrackPoint(self.track, ev.step, node.id, node.lat, node.lon))
