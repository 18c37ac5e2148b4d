from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import IntEnum

from lrta_sim.domain.entities.geography import MapWay

WayFilter = Callable[[MapWay], bool]


class Direction(IntEnum):
    BACKWARD = -1
    BOTH = 0
    FORWARD = 1


CAR_HIGHWAYS = frozenset(
    {
        "motorway",
        "motorway_link",
        "trunk",
        "trunk_link",
        "primary",
        "primary_link",
        "secondary",
        "secondary_link",
        "tertiary",
        "tertiary_link",
        "unclassified",
        "residential",
        "living_street",
        "service",
        "road",
    }
)

BICYCLE_HIGHWAYS = frozenset(
    {
        "primary",
        "primary_link",
        "secondary",
        "secondary_link",
        "tertiary",
        "tertiary_link",
        "unclassified",
        "residential",
        "living_street",
        "service",
        "road",
        "cycleway",
        "path",
        "track",
        "bridleway",
    }
)

_NO = frozenset({"no", "private"})
_YES = frozenset({"yes", "true", "1"})
_REVERSE = frozenset({"-1", "reverse"})


# ------------------ Filters -----------------------------


def any_way(way: MapWay) -> bool:
    return way.tag("highway") is not None


def car_way(way: MapWay) -> bool:
    if way.tag("highway") not in CAR_HIGHWAYS:
        return False
    return way.tag("access") not in _NO and way.tag("motor_vehicle") not in _NO


def bicycle_way(way: MapWay) -> bool:
    hw = way.tag("highway")
    if hw in BICYCLE_HIGHWAYS:
        return way.tag("bicycle") not in _NO and way.tag("access") not in _NO
    # footways and pedestrian zones only when cycling is explicitly allowed
    return hw is not None and way.tag("bicycle") in {"yes", "designated", "permissive"}


# ------------------ Oneway -----------------------------


def oneway_direction(tags: Mapping[str, str], *, exempt_tag: str | None = None) -> Direction:
    """Traversal direction of a way relative to its node order."""
    if exempt_tag is not None and tags.get(exempt_tag) == "no":
        return Direction.BOTH
    v = tags.get("oneway")
    if v in _YES:
        return Direction.FORWARD
    if v in _REVERSE:
        return Direction.BACKWARD
    if v is None and tags.get("junction") in {"roundabout", "circular"}:
        return Direction.FORWARD
    if v is None and tags.get("highway") in {"motorway", "motorway_link"}:
        return Direction.FORWARD
    return Direction.BOTH


@dataclass(frozen=True)
class WaySelection:
    """Way filter predicate plus the oneway policy that goes with a travel mode."""

    name: str
    accepts: WayFilter
    enforce_oneway: bool
    oneway_exempt_tag: str | None = None

    def direction(self, way: MapWay) -> Direction:
        if not self.enforce_oneway:
            return Direction.BOTH
        return oneway_direction(way.tags, exempt_tag=self.oneway_exempt_tag)


ANY_WAY = WaySelection("any", any_way, enforce_oneway=False)
CAR = WaySelection("car", car_way, enforce_oneway=True)
BICYCLE = WaySelection("bicycle", bicycle_way, enforce_oneway=True, oneway_exempt_tag="oneway:bicycle")
