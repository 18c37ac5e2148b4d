import pytest

from lrta_sim.domain.entities.geography import MapNode, MapWay
from lrta_sim.domain.map.map_graph import MapGraph
from lrta_sim.domain.map.metrics import PlanarMetric
from lrta_sim.domain.map.way_filters import ANY_WAY

ROAD = {"highway": "residential"}


def planar_graph(nodes, ways, selection=ANY_WAY) -> MapGraph:
    return MapGraph(nodes, ways, selection=selection, metric=PlanarMetric())


# A(1)=(0,0) B(2)=(0,1) C(3)=(1,1) D(4)=(1,0): unit square, ways A-B, B-C, C-D, D-A
@pytest.fixture
def cycle_map():
    nodes = [MapNode(1, 0.0, 0.0), MapNode(2, 0.0, 1.0), MapNode(3, 1.0, 1.0), MapNode(4, 1.0, 0.0)]
    ways = [
        MapWay(11, (1, 2), ROAD),
        MapWay(12, (2, 3), ROAD),
        MapWay(13, (3, 4), ROAD),
        MapWay(14, (4, 1), ROAD),
    ]
    return nodes, ways


@pytest.fixture
def cycle_graph(cycle_map) -> MapGraph:
    return planar_graph(*cycle_map)


# A(1) - B(2) - C(3) on one way, unit spacing
@pytest.fixture
def path_graph() -> MapGraph:
    nodes = [MapNode(1, 0.0, 0.0), MapNode(2, 0.0, 1.0), MapNode(3, 0.0, 2.0)]
    return planar_graph(nodes, [MapWay(1, (1, 2, 3), ROAD)])


# S(1) with a cul-de-sac T(2) listed first, and the real route S-X(3)-G(4)
@pytest.fixture
def trap_graph() -> MapGraph:
    nodes = [MapNode(1, 0.0, 0.0), MapNode(2, 0.0, -1.0), MapNode(3, 1.0, 0.0), MapNode(4, 2.0, 0.0)]
    ways = [MapWay(1, (1, 2), ROAD), MapWay(2, (1, 3), ROAD), MapWay(3, (3, 4), ROAD)]
    return planar_graph(nodes, ways)


class ScriptedAgent:
    """Plays back a fixed action list; done once it is exhausted."""

    def __init__(self, actions):
        self._actions = list(actions)
        self.percepts: list[int] = []

    @property
    def done(self) -> bool:
        return not self._actions

    def execute(self, percept):
        self.percepts.append(percept)
        return self._actions.pop(0)


@pytest.fixture
def scripted_agent():
    return ScriptedAgent
