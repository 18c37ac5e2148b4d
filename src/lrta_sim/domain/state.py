# lrta_sim/domain/state.py
from collections.abc import Iterator
from dataclasses import dataclass

from lrta_sim.app.protocols import HeuristicFunction
from lrta_sim.domain.entities.actions import MoveToAction


@dataclass
class AgentState:
    location: int
    previous: tuple[int, MoveToAction] | None = None
    distance: float = 0.0
    moves: int = 0

    def move(self, action: MoveToAction, cost: float) -> None:
        self.previous = (self.location, action)
        self.location = action.to
        self.distance += cost
        self.moves += 1


class CostEstimateTable:
    """
    Learned cost-to-goal estimates H[s]. A missing entry is seeded from the
    heuristic on first access; entries never decrease afterwards.
    """

    def __init__(self, heuristic: HeuristicFunction):
        self.heuristic = heuristic
        self._h: dict[int, float] = {}

    def __getitem__(self, state: int) -> float:
        v = self._h.get(state)
        if v is None:
            v = self._h[state] = float(self.heuristic.h(state))
        return v

    def __contains__(self, state: object) -> bool:
        return state in self._h

    def __len__(self) -> int:
        return len(self._h)

    def __iter__(self) -> Iterator[int]:
        return iter(self._h)

    def raise_to(self, state: int, value: float) -> float:
        v = max(self[state], value)
        self._h[state] = v
        return v

    def snapshot(self) -> dict[int, float]:
        return dict(self._h)
