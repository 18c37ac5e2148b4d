from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


# ----------------- MAP ---------------------


class MapModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # any -> every highway, oneways ignored; car/bicycle -> mode filter, oneways enforced
    way_selection: Literal["any", "car", "bicycle"] = "any"
    metric: Literal["haversine", "euclidean"] = "haversine"
    max_resolve_distance: float = 1.0  # metric units (km for haversine)

    @field_validator("max_resolve_distance")
    @classmethod
    def _positive(cls, v: float) -> float:
        if not v > 0:
            raise ValueError("max_resolve_distance must be > 0")
        return v


# ----------------- HEURISTICS ---------------------


class ZeroHeuristicModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["zero"] = "zero"


class StraightLineHeuristicModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["straight_line"] = "straight_line"


HeuristicUnion = Annotated[
    ZeroHeuristicModel | StraightLineHeuristicModel,
    Field(discriminator="kind"),
]


# ----------------- SIMULATION ---------------------


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    step_delay_s: float = 0.0
    max_steps: int | None = None

    @field_validator("step_delay_s")
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("max_steps")
    def _positive_or_none(cls, v: int | None, info: ValidationInfo) -> int | None:
        if v is not None and v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class TrackModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "Track"
    async_handoff: bool = True
    echo_jsonl: bool = False


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "lrta"
    run_id: str = "local"
    log: LogModel = LogModel()
    map: MapModel = MapModel()
    heuristic: HeuristicUnion = Field(default_factory=StraightLineHeuristicModel)
    sim: SimModel = SimModel()
    track: TrackModel = TrackModel()
