# io/planner_logging.py
import json
import logging
import sys

from wheelpath.engine.hooks import NoopHooks
from wheelpath.io.recorder import Recorder
from wheelpath.io.reports import FailureReport, PlanReport, StageReport


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="wheelpath", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class PlannerLogging(NoopHooks):
    """
    One place to shape and emit structured logs for a planning run.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level)
        self._seq = 0
        self._control_points = 0
        self._params: dict = {}

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _record(self, cls, name: str, **fields):
        if self.recorder:
            self._seq += 1
            self.recorder.emit(cls(run_id=self.run_id, seq=self._seq, name=name, **fields))

    # --------------------------------------------------------

    def run_start(self, *, control_points: int, params: dict):
        self._seq = 0
        self._control_points, self._params = control_points, params
        self._emit("INFO", "plan_start", control_points=control_points, params=params)

    def stage_end(self, stage: str, *, samples: int, ms: float, **extra):
        if self.debug:
            self._emit("DEBUG", "stage_done", stage=stage, samples=samples, ms=round(ms, 3), **extra)
        self._record(StageReport, "stage_done", stage=stage, samples=samples, ms=ms)

    def run_end(self, *, samples: int, wall_ms: float, **extra):
        self._emit("INFO", "plan_end", samples=samples, wall_ms=round(wall_ms, 3), **extra)
        if extra.get("stops"):
            # turns tighter than half the track width are taken from a standstill
            self._emit("WARNING", "interior_stop", stops=extra["stops"])
        self._record(
            PlanReport,
            "plan_done",
            control_points=self._control_points,
            samples=samples,
            wall_ms=wall_ms,
            peak_speed=extra.get("peak_speed"),
            min_speed=extra.get("min_speed"),
            length_m=extra.get("length_m"),
            stops=extra.get("stops", 0),
            params=self._params,
        )

    def error(self, stage: str, *, exc: BaseException, **extra):
        self._emit("ERROR", "plan_error", stage=stage, error=str(exc), kind=type(exc).__name__, **extra)
        self._record(FailureReport, "plan_failed", stage=stage, error=str(exc), kind=type(exc).__name__)
