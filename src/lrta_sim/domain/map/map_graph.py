import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from lrta_sim.app.protocols import DistanceMetric
from lrta_sim.domain.entities.actions import MoveToAction
from lrta_sim.domain.entities.geography import MapNode, MapWay, Position
from lrta_sim.domain.map.metrics import HaversineMetric
from lrta_sim.domain.map.way_filters import ANY_WAY, Direction, WaySelection

log = logging.getLogger(__name__)

Neighbor = tuple[MoveToAction, int, float]


@dataclass(frozen=True)
class Edge:
    target: int
    cost: float
    way_id: int


class MapGraph:
    """
    Queryable graph over the ways accepted by a WaySelection.

    Nodes are the map nodes referenced by accepted ways. Edge costs are
    metric distances between consecutive way nodes. Neighbour order is the
    order in which edges were first discovered (way order, then node order),
    which makes tie-breaking in the search agent reproducible.
    """

    def __init__(
        self,
        nodes: Mapping[int, MapNode] | Iterable[MapNode],
        ways: Iterable[MapWay],
        *,
        selection: WaySelection = ANY_WAY,
        metric: DistanceMetric | None = None,
    ):
        node_table = nodes if isinstance(nodes, Mapping) else {n.id: n for n in nodes}
        self.selection = selection
        self.metric = metric or HaversineMetric()
        self._nodes: dict[int, MapNode] = {}
        self._adj: dict[int, dict[int, Edge]] = {}

        accepted = rejected = missing = 0
        for way in ways:
            if not selection.accepts(way):
                rejected += 1
                continue
            accepted += 1
            direction = selection.direction(way)
            prev: MapNode | None = None
            for nid in way.nodes:
                node = node_table.get(nid)
                if node is None:
                    # a dangling reference splits the way
                    missing += 1
                    prev = None
                    continue
                self._add_node(node)
                if prev is not None and prev.id != node.id:
                    cost = self.metric.distance(prev.position, node.position)
                    if direction in (Direction.BOTH, Direction.FORWARD):
                        self._add_edge(prev.id, Edge(node.id, cost, way.id))
                    if direction in (Direction.BOTH, Direction.BACKWARD):
                        self._add_edge(node.id, Edge(prev.id, cost, way.id))
                prev = node

        log.debug(
            "map graph built: selection=%s ways=%d rejected=%d nodes=%d edges=%d missing_refs=%d",
            selection.name,
            accepted,
            rejected,
            len(self._nodes),
            self.edge_count,
            missing,
        )

    def _add_node(self, node: MapNode) -> None:
        if node.id not in self._nodes:
            self._nodes[node.id] = node
            self._adj[node.id] = {}

    def _add_edge(self, u: int, e: Edge) -> None:
        out = self._adj[u]
        old = out.get(e.target)
        # parallel ways keep the cheapest edge, in its first-seen slot
        if old is None or e.cost < old.cost:
            out[e.target] = e

    # ---------------- queries -----------------

    def __contains__(self, location: object) -> bool:
        return location in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(out) for out in self._adj.values())

    def locations(self) -> list[int]:
        return sorted(self._nodes)

    def way_node(self, location: int) -> MapNode:
        try:
            return self._nodes[location]
        except KeyError:
            raise KeyError(f"location {location!r} is not part of the map graph") from None

    def position(self, location: int) -> Position:
        return self.way_node(location).position

    def edges(self, location: int) -> list[Edge]:
        if location not in self._adj:
            raise KeyError(f"location {location!r} is not part of the map graph")
        return list(self._adj[location].values())

    def neighbors(self, location: int) -> list[Neighbor]:
        """(action, result location, step cost) per outgoing edge; [] for a dead end."""
        return [(MoveToAction(e.target), e.target, e.cost) for e in self.edges(location)]

    def edge_cost(self, u: int, v: int) -> float:
        e = self._adj.get(u, {}).get(v)
        if e is None:
            raise KeyError(f"no edge {u!r} -> {v!r}")
        return e.cost
