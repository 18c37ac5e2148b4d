from lrta_sim.app.protocols import SearchProblem
from lrta_sim.domain.entities.actions import MoveToAction
from lrta_sim.domain.map.map_graph import MapGraph


class OnlineSearchProblem(SearchProblem):
    """
    Actions, goal test and step costs of a route-finding task on a MapGraph.
    Nothing is searched here; the online agent queries it one state at a time.
    """

    def __init__(self, graph: MapGraph, goal: int):
        if goal not in graph:
            raise KeyError(f"goal {goal!r} is not part of the map graph")
        self.graph, self.goal = graph, goal

    def actions(self, state: int) -> list[MoveToAction]:
        return [a for a, _, _ in self.graph.neighbors(state)]

    def goal_test(self, state: int) -> bool:
        return state == self.goal

    def result(self, state: int, action: MoveToAction) -> int:
        return action.to

    def step_cost(self, state: int, action: MoveToAction, result: int) -> float:
        if action.to != result:
            raise ValueError(f"{action} from {state} cannot end in {result}")
        return self.graph.edge_cost(state, result)
