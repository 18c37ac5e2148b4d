from dataclasses import dataclass


class Action:
    """Marker base for everything an agent can hand to the environment."""

    is_noop = False


@dataclass(frozen=True)
class MoveToAction(Action):
    to: int  # target location (node id)

    def __str__(self) -> str:
        return f"MoveTo({self.to})"


class NoOpAction(Action):
    is_noop = True

    def __repr__(self) -> str:
        return "NO_OP"


NO_OP = NoOpAction()
