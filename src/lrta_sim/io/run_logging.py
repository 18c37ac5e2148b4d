# io/run_logging.py
import json
import logging
import sys

from lrta_sim.sim.hooks import NoopHooks


def _default_json_logger(name="lrta_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

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
                if record.exc_info:
                    payload["exc"] = self.formatException(record.exc_info)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class RunLogging(NoopHooks):
    """
    Structured logs for one simulation run: loop lifecycle, sampled steps
    (debug only) and the final outcome.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, exc_info=None, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(
            getattr(logging, level), msg, exc_info=exc_info, extra={"extra": {**payload, **extra}}
        )

    # loop lifecycle

    def run_start(self, *, max_steps: int | None, step_delay_s: float):
        self._emit("INFO", "run_start", max_steps=max_steps, step_delay_s=step_delay_s)

    def run_end(self, *, steps: int, **extra):
        self._emit("INFO", "run_end", steps=steps, **extra)

    def step_end(self, *, step: int, cost: float, distance: float, ms: float):
        if self.debug and (step % self.sample_every) == 0:
            self._emit("DEBUG", "step", step=step, cost=cost, distance=distance, ms=ms)

    def error(self, *, step: int, exc: BaseException):
        self._emit("ERROR", "loop_error", step=step, error=str(exc), error_type=type(exc).__name__)

    # ------------- Run outcome --------------------------

    def outcome(self, outcome, *, exc: BaseException | None = None):
        level = "INFO" if outcome.status.value in ("success", "canceled") else "WARNING"
        exc_info = None
        if exc is not None and outcome.status.value == "failed":
            level, exc_info = "ERROR", (type(exc), exc, exc.__traceback__)
        self._emit(
            level,
            "run_outcome",
            exc_info=exc_info,
            status=outcome.status.value,
            distance=outcome.distance,
            steps=outcome.steps,
            moves=outcome.moves,
            visited=outcome.visited,
            start=outcome.start,
            goal=outcome.goal,
            message=outcome.message,
        )
