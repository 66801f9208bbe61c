# wheelpath/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from wheelpath.config.models import ScenarioModel
from wheelpath.domain.entities.geography import Path, Position, pin
from wheelpath.engine.hooks import NoopHooks
from wheelpath.engine.planner import PathPlanner
from wheelpath.io.planner_logging import PlannerLogging  # JSON logs
from wheelpath.io.recorder import Recorder, Sink


@dataclass
class App:
    planner: PathPlanner
    scenario: ScenarioModel
    hooks: PlannerLogging | NoopHooks
    recorder: Recorder | None = None

    def run(self):
        return self.planner.compute()


def control_path(model: ScenarioModel) -> Path:
    pts = [Position.make_tagged(cp.tag, cp.x, cp.y) for cp in model.control_points]
    return pin(pts, model.pinned)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    use_logging: bool = True,
    sinks: tuple[Sink, ...] = (),
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Hooks (with optional analytics recorder)
    recorder = Recorder(*sinks) if sinks else None
    hooks = (
        PlannerLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Planner with the caller's pins applied
    planner = PathPlanner(model.params, hooks=hooks)
    planner.control_points = control_path(model)
    return App(planner=planner, scenario=model, hooks=hooks, recorder=recorder)
