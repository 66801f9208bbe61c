# engine/hooks.py
from typing import Protocol


class PlannerHooks(Protocol):
    def run_start(self, *, control_points, params): ...
    def stage_end(self, stage: str, *, samples: int, ms: float, **kw): ...
    def run_end(self, *, samples: int, wall_ms: float, **kw): ...
    def error(self, stage: str, *, exc: BaseException, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def stage_end(self, *_, **__):
        pass

    def run_end(self, **_):
        pass

    def error(self, *_, **__):
        pass
