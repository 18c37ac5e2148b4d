# runtime/registries.py
from collections.abc import Callable

from lrta_sim.app.protocols import DistanceMetric, HeuristicFunction
from lrta_sim.config.models import (
    HeuristicUnion,
    MapModel,
    StraightLineHeuristicModel,
    ZeroHeuristicModel,
)
from lrta_sim.domain.map.metrics import HaversineMetric, PlanarMetric
from lrta_sim.domain.map.way_filters import ANY_WAY, BICYCLE, CAR, WaySelection
from lrta_sim.domain.search.heuristics import StraightLineHeuristic, ZeroHeuristic

MetricFactory = Callable[[], DistanceMetric]
HeuristicFactory = Callable[[HeuristicUnion], HeuristicFunction]

_metric_registry: dict[str, MetricFactory] = {}
_way_selection_registry: dict[str, WaySelection] = {}
_heuristic_registry: dict[str, HeuristicFactory] = {}


# ------------------- Distance metrics ---------------------------


def register_metric(kind: str):
    def deco(fn: MetricFactory):
        _metric_registry[kind] = fn
        return fn

    return deco


def make_metric(kind: str) -> DistanceMetric:
    try:
        return _metric_registry[kind]()
    except KeyError:
        raise ValueError(f"Unknown metric {kind!r}") from None


@register_metric("haversine")
def _make_haversine():
    return HaversineMetric()


@register_metric("euclidean")
def _make_planar():
    return PlanarMetric()


# ------------------- Way selections ---------------------------


def register_way_selection(sel: WaySelection) -> WaySelection:
    _way_selection_registry[sel.name] = sel
    return sel


def make_way_selection(cfg: MapModel | str) -> WaySelection:
    name = cfg if isinstance(cfg, str) else cfg.way_selection
    try:
        return _way_selection_registry[name]
    except KeyError:
        raise ValueError(f"Unknown way selection {name!r}") from None


for _sel in (ANY_WAY, CAR, BICYCLE):
    register_way_selection(_sel)


# ------------------- Heuristics ---------------------------


def register_heuristic(kind: str):
    def deco(fn: HeuristicFactory):
        _heuristic_registry[kind] = fn
        return fn

    return deco


def make_heuristic(cfg: HeuristicUnion) -> HeuristicFunction:
    try:
        factory = _heuristic_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown heuristic kind {cfg.kind!r}") from None
    return factory(cfg)


@register_heuristic("zero")
def _make_zero(cfg: ZeroHeuristicModel):
    return ZeroHeuristic()


@register_heuristic("straight_line")
def _make_straight_line(cfg: StraightLineHeuristicModel):
    return StraightLineHeuristic()
