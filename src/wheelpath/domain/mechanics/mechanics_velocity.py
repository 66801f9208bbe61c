import math
from collections.abc import Sequence

import numpy as np

from wheelpath.app.protocols import Profiler, SpeedCap
from wheelpath.config.models import PlannerParams
from wheelpath.domain.entities.geography import Position
from wheelpath.domain.entities.motion import VelocityProfile
from wheelpath.domain.mechanics.mechanics_relaxation import relax
from wheelpath.domain.mechanics.mechanics_resamplers import spacing
from wheelpath.domain.mechanics.mechanics_speed_caps import WheelSpeedCap


def limit_acceleration(v: np.ndarray, ds: np.ndarray, max_acceleration: float) -> np.ndarray:
    """
    Two-pass constant-acceleration clamp: forward so no sample can be reached
    faster than a*ds allows, backward so every sample can still brake in time.
    ds[i] is the distance between samples i and i+1.
    """
    v = np.array(v, dtype=float)
    n = len(v)
    two_a = 2.0 * max_acceleration
    for i in range(1, n):
        v[i] = min(v[i], math.sqrt(v[i - 1] ** 2 + two_a * ds[i - 1]))
    for i in range(n - 2, -1, -1):
        v[i] = min(v[i], math.sqrt(v[i + 1] ** 2 + two_a * ds[i]))
    return v


class VelocityProfiler(Profiler):
    def __init__(self, params: PlannerParams, speed_cap: SpeedCap):
        self.params = params
        self.speed_cap = speed_cap
        self._wheel_cap = WheelSpeedCap(params.max_speed, params.robot_width)

    def profile(self, center: Sequence[Position], curvature: np.ndarray) -> VelocityProfile:
        p = self.params
        kappa = np.asarray(curvature, dtype=float)
        n = len(center)
        if len(kappa) != n:
            raise ValueError(f"curvature has {len(kappa)} samples, path has {n}")
        if n == 0:
            empty = np.zeros(0)
            return VelocityProfile(empty, empty.copy(), empty.copy())

        v = self.curvature_caps(kappa)
        v = relax(v, None, p.speed_alpha, p.speed_beta, p.smooth_pass)
        # smoothing may lift a dip back over what the wheels can carry
        v = np.minimum(np.clip(v, 0.0, p.max_speed), self._wheel_cap.cap(kappa))
        v = np.minimum(v, self.soft_envelope(n))
        v = limit_acceleration(v, spacing(center), p.max_acceleration)
        return self.split_wheels(v, kappa)

    # ---------------- stages -----------------------------

    def curvature_caps(self, kappa: np.ndarray) -> np.ndarray:
        """Caps evaluated every speed_step_mult-th sample (and the last), linear in between."""
        n = len(kappa)
        idx = np.arange(0, n, self.params.speed_step_mult)
        if idx[-1] != n - 1:
            idx = np.append(idx, n - 1)
        caps = self.speed_cap.cap(kappa[idx])
        return np.interp(np.arange(n), idx, caps)

    def ramp_samples(self) -> int:
        p = self.params
        ticks = p.final_acc_time / p.time_step
        ramp_m = ticks * p.time_step * p.max_speed  # covered at nominal speed
        return max(1, math.ceil(ramp_m / p.dist_step - 1e-9))

    def soft_envelope(self, n: int) -> np.ndarray:
        """Linear 0 -> max_speed -> 0 envelope over the soft start/stop windows."""
        r = self.ramp_samples()
        i = np.arange(n)
        frac = np.minimum(1.0, np.minimum(i, n - 1 - i) / r)
        return self.params.max_speed * frac

    def split_wheels(self, v: np.ndarray, kappa: np.ndarray) -> VelocityProfile:
        """
        omega = kappa*v; wheels at v*(1 -/+ kappa*w/2). A faster wheel over max_speed
        scales the whole sample down, which keeps the turn radius. The acceleration
        limit is enforced on the center profile only; wheel speeds follow it scaled
        by the local curvature.
        """
        p = self.params
        half = p.robot_width / 2.0
        left_k, right_k = 1.0 - kappa * half, 1.0 + kappa * half
        faster = v * np.maximum(left_k, right_k)
        over = faster > p.max_speed
        if over.any():
            v = v.copy()
            v[over] = v[over] * (p.max_speed / faster[over])
        return VelocityProfile(v, v * left_k, v * right_k)
