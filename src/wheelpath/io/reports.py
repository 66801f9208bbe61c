# wheelpath/io/reports.py

from dataclasses import dataclass, field
from typing import Literal

StageName = Literal[
    "validate", "densify", "smooth", "resample", "offset", "profile", "reconstruct"
]


# Base type for analytics records (one plan produces a handful of these)
@dataclass
class Report:
    run_id: str
    seq: int  # emission order within the run
    name: str  # stable record name


@dataclass
class StageReport(Report):
    stage: StageName
    samples: int
    ms: float


@dataclass
class PlanReport(Report):
    control_points: int
    samples: int
    wall_ms: float
    peak_speed: float | None = None
    min_speed: float | None = None
    length_m: float | None = None
    stops: int = 0  # interior samples at a standstill
    params: dict[str, float | int | bool | str] = field(default_factory=dict)


@dataclass
class FailureReport(Report):
    stage: str
    error: str
    kind: str
