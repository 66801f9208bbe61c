import math

import numpy as np
import pytest

from wheelpath.config.models import PlannerParams
from wheelpath.domain.entities.geography import from_points
from wheelpath.domain.mechanics.mechanics_resamplers import resample, spacing
from wheelpath.domain.mechanics.mechanics_speed_caps import CentripetalSpeedCap, WheelSpeedCap
from wheelpath.domain.mechanics.mechanics_velocity import VelocityProfiler, limit_acceleration
from wheelpath.runtime.registries import make_speed_cap

TOL = 1e-9


def _profiler(**kw) -> VelocityProfiler:
    params = PlannerParams(**kw)
    return VelocityProfiler(params, make_speed_cap(params))


def _wavy(step=0.05):
    th = np.linspace(0.0, 3 * math.pi, 300)
    raw = from_points(zip(th, 0.8 * np.sin(th)))
    return resample(raw, step)


def _assert_feasible(prof, center, params):
    v, vl, vr = prof.center, prof.left, prof.right
    assert np.all(v >= -TOL) and np.all(v <= params.max_speed + TOL)
    assert np.all(vl <= params.max_speed + TOL) and np.all(vr <= params.max_speed + TOL)
    dv2 = np.abs(np.diff(v**2))
    assert np.all(dv2 <= 2 * params.max_acceleration * spacing(center) + 1e-9)
    assert v[0] == 0.0 and v[-1] == 0.0


# ---------- Speed caps


def test_speed_caps_are_monotone_and_bounded():
    k = np.array([0.0, 0.1, 0.5, 1.0, 5.0, -5.0])
    for cap in (CentripetalSpeedCap(2.0, 1.0), WheelSpeedCap(2.0, 0.5)):
        v = cap.cap(k)
        assert v[0] == 2.0
        assert np.all(np.diff(v[:5]) <= 0)
        assert np.all(v <= 2.0)
        assert v[4] == v[5]


def test_wheel_cap_stops_turns_tighter_than_half_the_track():
    cap = WheelSpeedCap(1.0, 0.5)
    v = cap.cap(np.array([3.0, 4.0, -4.0, 8.0]))
    assert v[0] == pytest.approx(1.0 / 1.75)
    assert v[1:].tolist() == [0.0, 0.0, 0.0]


def test_centripetal_cap_formula():
    assert CentripetalSpeedCap(10.0, 2.0).cap(np.array([0.5]))[0] == pytest.approx(2.0)


def test_lateral_acceleration_overrides_max_acceleration():
    p = PlannerParams(max_speed=10.0, speed_cap={"kind": "centripetal", "lateral_acceleration": 8.0})
    assert make_speed_cap(p).cap(np.array([2.0]))[0] == pytest.approx(2.0)
    p = PlannerParams(max_speed=10.0, speed_cap={"kind": "wheel"}, robot_width=2.0)
    assert isinstance(make_speed_cap(p), WheelSpeedCap)


def test_caps_are_subsampled_and_interpolated():
    prof = _profiler(max_speed=4.0, max_acceleration=1.0, speed_step_mult=4)
    kappa = np.zeros(9)
    kappa[4] = 1.0  # only the evaluated sample sees the bend
    caps = prof.curvature_caps(kappa)
    assert caps[4] == pytest.approx(1.0)
    assert caps[2] == pytest.approx(2.5)  # halfway between 4.0 and 1.0
    kappa = np.zeros(9)
    kappa[3] = 1.0  # between evaluated samples 0 and 4: skipped
    assert np.all(prof.curvature_caps(kappa) == 4.0)


# ---------- Stages


def test_forward_backward_passes():
    v = limit_acceleration(np.array([0.0, 5.0, 5.0, 5.0, 0.0]), np.ones(4), 2.0)
    assert v.tolist() == pytest.approx([0.0, 2.0, math.sqrt(8.0), 2.0, 0.0])


def test_lower_bound_wins_between_passes():
    v = limit_acceleration(np.array([3.0, 3.0, 0.5, 3.0]), np.ones(3), 0.5)
    assert v[1] == pytest.approx(math.sqrt(0.25 + 1.0))
    assert v[0] == pytest.approx(math.sqrt(0.25 + 2.0))
    assert v[3] == pytest.approx(math.sqrt(0.25 + 1.0))


def test_soft_envelope_ramps_over_final_acc_time():
    # 0.5 s at 2 m/s covers 1 m = 4 samples of 0.25 m
    prof = _profiler(max_speed=2.0, dist_step=0.25, time_step=0.01, final_acc_time=0.5)
    assert prof.ramp_samples() == 4
    env = prof.soft_envelope(12)
    assert env.tolist() == pytest.approx([0, 0.5, 1.0, 1.5, 2, 2, 2, 2, 1.5, 1.0, 0.5, 0])


def test_soft_envelope_without_ramp_still_stops_at_ends():
    prof = _profiler(final_acc_time=0.0)
    env = prof.soft_envelope(5)
    assert env[0] == 0.0 and env[-1] == 0.0 and np.all(env[1:-1] == 1.0)
    assert prof.soft_envelope(1).tolist() == [0.0]


def test_split_wheels_scales_down_the_faster_wheel():
    prof = _profiler(max_speed=1.0, robot_width=1.0)
    out = prof.split_wheels(np.array([1.0, 1.0]), np.array([0.0, 1.0]))
    assert out.left[0] == out.right[0] == 1.0
    # kappa=1, w/2=0.5: right = 1.5*v must be scaled to 1.0
    assert out.right[1] == pytest.approx(1.0)
    assert out.center[1] == pytest.approx(1.0 / 1.5)
    assert out.left[1] == pytest.approx(0.5 / 1.5)
    # turn radius is preserved: omega / v == kappa
    omega = out.right[1] - out.left[1]
    assert omega / out.center[1] == pytest.approx(1.0)


# ---------- Whole profile


def test_profile_on_wavy_path_is_feasible():
    center, kappa = _wavy()
    params = PlannerParams(max_speed=1.5, max_acceleration=0.8, robot_width=0.4, dist_step=0.05)
    prof = VelocityProfiler(params, make_speed_cap(params)).profile(center, kappa)
    assert len(prof) == len(center)
    _assert_feasible(prof, center, params)
    assert np.all(prof.left >= 0) and np.all(prof.right >= 0)
    # inner wheel is the slower one: positive kappa turns left
    bent = np.abs(kappa) > 0.2
    assert np.all((prof.left < prof.right)[bent & (kappa > 0) & (prof.center > 0)])


def test_sharper_turns_get_lower_speeds():
    center, kappa = _wavy()
    params = PlannerParams(max_speed=1.5, max_acceleration=5.0, dist_step=0.05, speed_step_mult=1)
    prof = VelocityProfiler(params, make_speed_cap(params)).profile(center, kappa)
    mid = slice(20, -20)
    v, k = prof.center[mid], np.abs(kappa[mid])
    assert v[np.argmax(k)] < v[np.argmin(k)]


def test_profile_rejects_misaligned_curvature():
    center, kappa = _wavy()
    with pytest.raises(ValueError):
        _profiler().profile(center, kappa[:-1])


def test_empty_profile():
    prof = _profiler().profile([], np.zeros(0))
    assert len(prof) == 0
