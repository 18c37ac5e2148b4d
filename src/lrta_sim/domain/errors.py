# lrta_sim/domain/errors.py
from lrta_sim.domain.entities.geography import Position


class SimulationError(Exception):
    """Base class for outcomes that end a run without reaching the goal."""


class InsufficientInputError(SimulationError):
    def __init__(self, markers: int):
        super().__init__(f"fewer than two markers set (got {markers})")
        self.markers = markers


class NoNearbyLocationError(SimulationError):
    def __init__(self, point: Position, distance: float | None, max_distance: float):
        where = f"({point.lat:.5f}, {point.lon:.5f})"
        if distance is None:
            msg = f"no map location available for {where}"
        else:
            msg = f"nearest map location to {where} is {distance:.3f} away (max {max_distance})"
        super().__init__(msg)
        self.point, self.distance, self.max_distance = point, distance, max_distance


class DeadEndError(SimulationError):
    def __init__(self, location: int):
        super().__init__(f"no way forward from location {location}")
        self.location = location


class NotAdaptedError(RuntimeError):
    """Heuristic queried before adapt_to_goal()."""


class RunInProgressError(RuntimeError):
    """A second run was started on an App whose previous run has not finished."""
