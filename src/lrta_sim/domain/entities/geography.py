from dataclasses import dataclass, field


# Core geometry types used by the map layer
@dataclass(frozen=True)
class Position:
    lat: float  # degrees (or planar y when the euclidean metric is used)
    lon: float


@dataclass(frozen=True)
class MapNode:
    id: int
    lat: float
    lon: float

    @property
    def position(self) -> Position:
        return Position(self.lat, self.lon)


@dataclass(frozen=True)
class MapWay:
    id: int
    nodes: tuple[int, ...]
    tags: dict[str, str] = field(default_factory=dict, hash=False)

    def tag(self, key: str, default: str | None = None) -> str | None:
        return self.tags.get(key, default)


def as_position(p: Position | MapNode | tuple[float, float]) -> Position:
    if isinstance(p, Position):
        return p
    if isinstance(p, MapNode):
        return p.position
    return Position(float(p[0]), float(p[1]))
