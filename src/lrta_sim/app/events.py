# app/events.py
from dataclasses import dataclass

from lrta_sim.domain.entities.actions import Action, MoveToAction


@dataclass(frozen=True)
class EnvEvent:
    step: int  # environment step counter at publication (0 = before first step)


@dataclass(frozen=True)
class AgentAdded(EnvEvent):
    location: int


@dataclass(frozen=True)
class AgentActed(EnvEvent):
    action: Action
    location: int  # location after the action was applied
    cost: float  # realized step cost (0 for non-moves)

    @property
    def moved(self) -> bool:
        return isinstance(self.action, MoveToAction)
