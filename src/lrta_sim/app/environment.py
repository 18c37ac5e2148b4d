# app/environment.py
from collections.abc import Callable

from lrta_sim.app.events import AgentActed, AgentAdded, EnvEvent
from lrta_sim.app.protocols import Agent, Environment
from lrta_sim.domain.entities.actions import MoveToAction
from lrta_sim.domain.map.map_graph import MapGraph
from lrta_sim.domain.state import AgentState

Handler = Callable[[EnvEvent], None]


class MapEnvironment(Environment):
    """
    Single-agent environment on a MapGraph. The percept handed to the agent is
    its current location; move actions are applied if the graph has the edge.
    Observers subscribe per event type and are owned by this instance.
    """

    def __init__(self, graph: MapGraph):
        self.graph = graph
        self.agent: Agent | None = None
        self.state: AgentState | None = None
        self._steps = 0
        self._subs: dict[type[EnvEvent], list[Handler]] = {}

    def on(self, etype: type[EnvEvent], handler: Handler) -> None:
        self._subs.setdefault(etype, []).append(handler)

    def _publish(self, ev: EnvEvent) -> None:
        for h in self._subs.get(type(ev), ()):
            h(ev)

    def add_agent(self, agent: Agent, location: int) -> None:
        if self.agent is not None:
            raise RuntimeError("MapEnvironment holds a single agent")
        if location not in self.graph:
            raise KeyError(f"start {location!r} is not part of the map graph")
        self.agent, self.state = agent, AgentState(location)
        self._publish(AgentAdded(step=self._steps, location=location))

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def travel_distance(self) -> float | None:
        """Distance covered by the agent, None while it has not acted yet."""
        if self.state is None or self._steps == 0:
            return None
        return self.state.distance

    def is_done(self) -> bool:
        return self.agent is None or self.agent.done

    def step(self) -> float:
        if self.agent is None:
            raise RuntimeError("no agent in environment")
        st = self.state
        action = self.agent.execute(st.location)
        cost = 0.0
        if isinstance(action, MoveToAction):
            cost = self.graph.edge_cost(st.location, action.to)
            st.move(action, cost)
        self._steps += 1
        self._publish(AgentActed(step=self._steps, action=action, location=st.location, cost=cost))
        return cost
