import numpy as np

from lrta_sim.domain.entities.geography import MapNode, Position, as_position
from lrta_sim.domain.errors import NoNearbyLocationError
from lrta_sim.domain.map.map_graph import MapGraph


class LocationResolver:
    """Snaps free points to the nearest node of a (filtered) map graph."""

    def __init__(self, graph: MapGraph, *, max_distance: float = float("inf")):
        self.graph, self.max_distance = graph, max_distance
        # ids ascending so argmin's first hit is the lowest id on ties
        self._ids = np.array(graph.locations(), dtype=np.int64)
        self._lats = np.array([graph.position(int(i)).lat for i in self._ids], dtype=float)
        self._lons = np.array([graph.position(int(i)).lon for i in self._ids], dtype=float)

    def nearest_location(self, point: Position | MapNode | tuple[float, float]) -> int:
        p = as_position(point)
        if self._ids.size == 0:
            raise NoNearbyLocationError(p, None, self.max_distance)
        d = self.graph.metric.distances(p, self._lats, self._lons)
        i = int(np.argmin(d))
        if d[i] > self.max_distance:
            raise NoNearbyLocationError(p, float(d[i]), self.max_distance)
        return int(self._ids[i])

    def snap(self, point: Position | MapNode | tuple[float, float]) -> tuple[int, float]:
        """Nearest location plus the distance from the point to it."""
        p = as_position(point)
        loc = self.nearest_location(p)
        return loc, self.graph.metric.distance(p, self.graph.position(loc))
