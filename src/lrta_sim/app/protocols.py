from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

from lrta_sim.domain.entities.actions import Action, MoveToAction
from lrta_sim.domain.entities.geography import Position

if TYPE_CHECKING:
    from lrta_sim.domain.map.map_graph import MapGraph


# ------------- Map --------------------
@runtime_checkable
class DistanceMetric(Protocol):
    """
    Responsibilities:
      • Distance between two positions (edge weights, heuristic values).
      • Vectorized distances from one position to many (nearest-node lookup).
    Edge costs and straight-line estimates must come from the same metric,
    otherwise the straight-line heuristic is no longer a lower bound.
    """

    unit: str

    def distance(self, a: Position, b: Position) -> float: ...
    def distances(self, p: Position, lats: np.ndarray, lons: np.ndarray) -> np.ndarray: ...


# ------------- Search --------------------
@runtime_checkable
class HeuristicFunction(Protocol):
    """
    Cost-to-goal estimate. adapt_to_goal() returns an instance bound to a
    goal; the receiver is left untouched.
    """

    def h(self, state: int) -> float: ...
    def adapt_to_goal(self, goal: int, graph: MapGraph) -> HeuristicFunction: ...


@runtime_checkable
class SearchProblem(Protocol):
    def actions(self, state: int) -> Sequence[MoveToAction]: ...
    def goal_test(self, state: int) -> bool: ...
    def step_cost(self, state: int, action: MoveToAction, result: int) -> float: ...
    def result(self, state: int, action: MoveToAction) -> int: ...


@runtime_checkable
class Agent(Protocol):
    """Maps a percept (the current location) to the next action."""

    @property
    def done(self) -> bool: ...

    def execute(self, percept: int) -> Action: ...


# ------------- Simulation --------------------
@runtime_checkable
class Environment(Protocol):
    def step(self) -> float:
        """One perceive-act-move cycle; returns the realized step cost."""

    def is_done(self) -> bool: ...
