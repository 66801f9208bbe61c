# runtime/registries.py
from collections.abc import Callable

from wheelpath.app.protocols import SpeedCap
from wheelpath.config.models import (
    PlannerParams,
    SpeedCapCentripetalModel,
    SpeedCapUnion,
    SpeedCapWheelModel,
)
from wheelpath.domain.mechanics.mechanics_speed_caps import CentripetalSpeedCap, WheelSpeedCap

SpeedCapFactory = Callable[[SpeedCapUnion, PlannerParams], SpeedCap]

_speed_cap_registry: dict[str, SpeedCapFactory] = {}


# ------------------- Speed cap registries ---------------------------


def register_speed_cap(kind: str):
    def deco(fn: SpeedCapFactory):
        _speed_cap_registry[kind] = fn
        return fn

    return deco


def make_speed_cap(params: PlannerParams) -> SpeedCap:
    cfg = params.speed_cap
    try:
        factory = _speed_cap_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown speed cap kind {cfg.kind!r}") from None
    return factory(cfg, params)


@register_speed_cap("centripetal")
def _make_centripetal(cfg: SpeedCapCentripetalModel, params: PlannerParams):
    a_lat = cfg.lateral_acceleration or params.max_acceleration
    return CentripetalSpeedCap(params.max_speed, a_lat)


@register_speed_cap("wheel")
def _make_wheel(cfg: SpeedCapWheelModel, params: PlannerParams):
    return WheelSpeedCap(params.max_speed, params.robot_width)
