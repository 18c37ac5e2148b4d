from __future__ import annotations

from dataclasses import dataclass, field, replace

from lrta_sim.app.protocols import HeuristicFunction
from lrta_sim.domain.errors import NotAdaptedError
from lrta_sim.domain.map.map_graph import MapGraph


@dataclass(frozen=True)
class ZeroHeuristic(HeuristicFunction):
    """h = 0 everywhere; LRTA* then explores like uniform-cost search."""

    def h(self, state: int) -> float:
        return 0.0

    def adapt_to_goal(self, goal: int, graph: MapGraph) -> ZeroHeuristic:
        return self


@dataclass(frozen=True)
class StraightLineHeuristic(HeuristicFunction):
    """
    Direct distance from state to goal, measured with the graph's own metric.
    Edge costs use the same metric, so this never overestimates a path cost.
    """

    goal: int | None = None
    graph: MapGraph | None = field(default=None, repr=False, compare=False)

    @property
    def adapted(self) -> bool:
        return self.goal is not None and self.graph is not None

    def h(self, state: int) -> float:
        if not self.adapted:
            raise NotAdaptedError("StraightLineHeuristic used before adapt_to_goal()")
        g = self.graph
        return g.metric.distance(g.position(state), g.position(self.goal))

    def adapt_to_goal(self, goal: int, graph: MapGraph) -> StraightLineHeuristic:
        if goal not in graph:
            raise KeyError(f"goal {goal!r} is not part of the map graph")
        return replace(self, goal=goal, graph=graph)
