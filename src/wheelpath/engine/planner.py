# engine/planner.py

import math
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Generic, TypeVar

import numpy as np

from wheelpath.config.models import PlannerParams
from wheelpath.domain.entities.geography import Path, Position, path_length
from wheelpath.domain.entities.motion import Plan, Pose
from wheelpath.domain.errors import InvalidGeometryError
from wheelpath.domain.mechanics.mechanics_offsets import offset
from wheelpath.domain.mechanics.mechanics_reconstruct import EulerReconstructor
from wheelpath.domain.mechanics.mechanics_resamplers import resample
from wheelpath.domain.mechanics.mechanics_smoothers import densify, smooth
from wheelpath.domain.mechanics.mechanics_velocity import VelocityProfiler
from wheelpath.runtime.registries import make_speed_cap

from .hooks import NoopHooks, PlannerHooks

T = TypeVar("T")


def validate_geometry(control_points: Sequence[Position]) -> None:
    n = len(control_points)
    if n < 2:
        raise InvalidGeometryError(f"need at least 2 control points, got {n}")
    for i, p in enumerate(control_points):
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise InvalidGeometryError(f"control point {i} is not finite: ({p.x}, {p.y})")
    a, b = control_points[-2], control_points[-1]
    if math.hypot(b.x - a.x, b.y - a.y) < 1e-12:
        raise InvalidGeometryError(
            f"last control segment has zero length at ({b.x}, {b.y}); terminal heading is undefined"
        )


class PathPlanner(Generic[T]):
    """
    Turns control points into a center path, wheel paths, a velocity profile and
    its dead-reckoned reconstruction. One plan at a time per instance.
    """

    def __init__(
        self,
        params: PlannerParams | Mapping[str, Any] | None = None,
        hooks: PlannerHooks | None = None,
    ):
        self.params = (
            params
            if isinstance(params, PlannerParams)
            else PlannerParams.model_validate(params or {})
        )
        self._hooks = hooks or NoopHooks()
        self._control: Path = []
        self._plan: Plan | None = None
        self._busy = False
        self.profiler = VelocityProfiler(self.params, make_speed_cap(self.params))
        self.integrator = EulerReconstructor(self.params.robot_width)

    @property
    def control_points(self) -> Path:
        return self._control

    @control_points.setter
    def control_points(self, path: Sequence[Position[T]]) -> None:
        self._control = list(path)

    @property
    def plan(self) -> Plan:
        if self._plan is None:
            raise RuntimeError("no plan yet: call compute() first")
        return self._plan

    def compute(self) -> Plan:
        if self._busy:
            raise RuntimeError("compute() is already running on this planner")
        self._busy = True
        try:
            self._plan = self._compute(list(self._control))
        finally:
            self._busy = False
        return self._plan

    def _stage(self, name: str, fn: Callable, *args):
        t1 = time.perf_counter()
        try:
            out = fn(*args)
        except Exception as exc:
            self._hooks.error(name, exc=exc)
            raise
        ms = (time.perf_counter() - t1) * 1000
        first = out[0] if isinstance(out, tuple) else out
        self._hooks.stage_end(name, samples=0 if first is None else len(first), ms=ms)
        return out

    def _compute(self, ctrl: Path) -> Plan:
        p = self.params
        t0 = time.perf_counter()
        self._hooks.run_start(control_points=len(ctrl), params=p.dump())

        self._stage("validate", validate_geometry, ctrl)
        raw = self._stage("densify", densify, ctrl, p.dist_step) if p.densify else ctrl
        smoothed = self._stage("smooth", smooth, raw, p.path_alpha, p.path_beta, p.smooth_pass)
        center, kappa = self._stage("resample", resample, smoothed, p.dist_step)
        left, right = self._stage("offset", offset, center, p.robot_width)
        prof = self._stage("profile", self.profiler.profile, center, kappa)
        start = Pose.facing(center[0], center[1])
        recon = self._stage(
            "reconstruct",
            self.integrator.reconstruct,
            prof.center,
            prof.left,
            prof.right,
            p.time_step,
            start,
        )

        self._hooks.run_end(
            samples=len(center),
            wall_ms=(time.perf_counter() - t0) * 1000,
            peak_speed=prof.peak(),
            min_speed=float(np.min(np.minimum(prof.left, prof.right))),
            length_m=path_length(center),
            stops=int(np.count_nonzero(prof.center[1:-1] == 0.0)),
        )
        return Plan(
            control_points=ctrl,
            path=center,
            left=left,
            right=right,
            curvature=kappa,
            velocity=prof.center,
            left_velocity=prof.left,
            right_velocity=prof.right,
            reconstructed=recon,
        )

    # ------------- accessors for the last plan -------------------

    def get_path(self) -> Path:
        return self.plan.path

    def get_left(self) -> Path:
        return self.plan.left

    def get_right(self) -> Path:
        return self.plan.right

    def get_curvature(self) -> np.ndarray:
        return self.plan.curvature

    def get_velocity(self) -> np.ndarray:
        return self.plan.velocity

    def get_left_velocity(self) -> np.ndarray:
        return self.plan.left_velocity

    def get_right_velocity(self) -> np.ndarray:
        return self.plan.right_velocity

    def get_reconstructed(self) -> Path:
        return self.plan.reconstructed
