import math
from enum import Enum

from lrta_sim.app.protocols import Agent, HeuristicFunction, SearchProblem
from lrta_sim.domain.entities.actions import NO_OP, Action, MoveToAction
from lrta_sim.domain.errors import DeadEndError
from lrta_sim.domain.state import CostEstimateTable


class AgentPhase(Enum):
    INIT = "init"  # no previous state/action yet
    RUNNING = "running"
    DONE = "done"  # goal reached, NO_OP forever after


class LRTAStarAgent(Agent):
    """
    Learning Real-Time A*.

    Each call to execute() first learns from the move that led to the
    perceived state, raising the estimate of the state it came from:

        H[s'] = max(H[s'], c(s', a', s) + H[s])

    and then commits to the action minimizing c(s, a, s_a) + H[s_a]. Among
    equally good actions the first in the problem's enumeration order wins.

    The estimate table survives restart(), so repeated trials on the same
    instance keep improving.
    """

    def __init__(
        self,
        problem: SearchProblem,
        heuristic: HeuristicFunction,
        *,
        table: CostEstimateTable | None = None,
    ):
        self.problem = problem
        self.heuristic = heuristic
        self.table = table if table is not None else CostEstimateTable(heuristic)
        self.phase = AgentPhase.INIT
        self._prev: tuple[int, MoveToAction] | None = None

    @property
    def done(self) -> bool:
        return self.phase is AgentPhase.DONE

    def restart(self) -> None:
        self.phase, self._prev = AgentPhase.INIT, None

    def execute(self, percept: int) -> Action:
        if self.phase is AgentPhase.DONE:
            return NO_OP
        s = percept
        if self._prev is not None:
            s_prev, a_prev = self._prev
            cost = self.problem.step_cost(s_prev, a_prev, s)
            self.table.raise_to(s_prev, cost + self.table[s])

        if self.problem.goal_test(s):
            self.phase, self._prev = AgentPhase.DONE, None
            return NO_OP

        actions = self.problem.actions(s)
        if not actions:
            raise DeadEndError(s)

        best, best_f = actions[0], math.inf
        for a in actions:
            f = self.lrta_cost(s, a)
            if f < best_f:
                best, best_f = a, f

        self._prev = (s, best)
        self.phase = AgentPhase.RUNNING
        return best

    def lrta_cost(self, s: int, a: MoveToAction) -> float:
        s_next = self.problem.result(s, a)
        return self.problem.step_cost(s, a, s_next) + self.table[s_next]
