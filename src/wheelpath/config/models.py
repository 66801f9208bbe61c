from math import isfinite
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- SPEED CAPS ---------------------


class SpeedCapCentripetalModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["centripetal"] = "centripetal"
    lateral_acceleration: float | None = None  # None => max_acceleration

    @field_validator("lateral_acceleration")
    @classmethod
    def _positive(cls, v: float | None) -> float | None:
        if v is not None and not (isfinite(v) and v > 0):
            raise ValueError("lateral_acceleration must be a finite value > 0")
        return v


class SpeedCapWheelModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["wheel"] = "wheel"


SpeedCapUnion = Annotated[
    SpeedCapCentripetalModel | SpeedCapWheelModel,
    Field(discriminator="kind"),
]


# ----------------- PLANNER PARAMS ---------------------


class PlannerParams(BaseModel):
    """Every numeric knob of the planner. Immutable once built."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    path_alpha: float = 0.1  # fidelity weight, path smoothing
    path_beta: float = 0.3  # curvature weight, path smoothing
    speed_alpha: float = 0.1
    speed_beta: float = 0.3
    robot_width: float = 0.2  # meters between wheel contact lines
    time_step: float = 0.01  # seconds
    max_speed: float = 1.0  # m/s, any wheel
    max_acceleration: float = 0.5  # m/s^2
    dist_step: float = 0.01  # meters
    speed_step_mult: int = 10
    final_acc_time: float = 0.5  # seconds
    smooth_pass: int = Field(default=50, validation_alias=AliasChoices("smooth_pass", "passes"))
    densify: bool = False
    speed_cap: SpeedCapUnion = Field(default_factory=SpeedCapCentripetalModel)

    @field_validator(
        "path_alpha",
        "path_beta",
        "speed_alpha",
        "speed_beta",
        "robot_width",
        "time_step",
        "max_speed",
        "max_acceleration",
        "dist_step",
        "final_acc_time",
    )
    @classmethod
    def _finite(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v):
            raise ValueError(f"{info.field_name} must be finite, got {v!r}")
        return v

    @field_validator("robot_width", "time_step", "max_speed", "max_acceleration", "dist_step")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator("final_acc_time")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("speed_step_mult")
    @classmethod
    def _stride(cls, v: int) -> int:
        if v < 1:
            raise ValueError("speed_step_mult must be >= 1")
        return v

    @field_validator("smooth_pass")
    @classmethod
    def _passes(cls, v: int) -> int:
        if v < 0:
            raise ValueError("smooth_pass must be >= 0")
        return v

    @property
    def passes(self) -> int:
        return self.smooth_pass

    def dump(self) -> dict[str, Any]:
        """Flat view of the knobs, for logs and reports."""
        d = self.model_dump()
        d["speed_cap"] = d["speed_cap"]["kind"]
        return d


# ----------------- SCENARIO ---------------------


class ControlPointModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    x: float
    y: float
    tag: Literal[0, 1] = 0


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "scenario"
    run_id: str = "local"
    control_points: list[ControlPointModel]
    pinned: list[int] = Field(default_factory=lambda: [-2, -1])
    params: PlannerParams = Field(default_factory=PlannerParams)
    log: LogModel = LogModel()

    @field_validator("control_points", mode="before")
    @classmethod
    def _pairs_to_points(cls, v):
        # [[x, y], ...] is the usual waypoint-file shape
        if isinstance(v, (list, tuple)):
            return [
                {"x": p[0], "y": p[1]} if isinstance(p, (list, tuple)) and len(p) == 2 else p
                for p in v
            ]
        return v

    @model_validator(mode="after")
    def _check_pins(self):
        n = len(self.control_points)
        bad = [i for i in self.pinned if not -n <= i < n]
        if bad:
            raise ValueError(f"pinned indices {bad} out of range for {n} control points")
        return self
