import json
import logging

from lrta_sim.app.session import RunOutcome, RunStatus
from lrta_sim.io.run_logging import RunLogging, _default_json_logger
from lrta_sim.sim.loop import SimulationLoop


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


def make_logger(name: str) -> tuple[logging.Logger, ListHandler]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    h = ListHandler()
    logger.handlers[:] = [h]
    return logger, h


class TwoSteps:
    def __init__(self):
        self.n = 0

    def step(self):
        self.n += 1
        return 2.0

    def is_done(self):
        return self.n >= 2


def test_loop_lifecycle_is_logged_with_run_id():
    logger, h = make_logger("lrta_sim.test.lifecycle")
    hooks = RunLogging(run_id="r-7", debug=True, logger=logger)
    SimulationLoop(TwoSteps(), hooks=hooks).run()

    msgs = [r.getMessage() for r in h.records]
    assert msgs == ["run_start", "step", "step", "run_end"]
    assert all(r.extra["run_id"] == "r-7" for r in h.records)
    assert h.records[-1].extra["steps"] == 2
    assert h.records[-1].extra["distance"] == 4.0


def test_steps_are_sampled_and_debug_only():
    logger, h = make_logger("lrta_sim.test.sampling")
    SimulationLoop(TwoSteps(), hooks=RunLogging(debug=False, logger=logger)).run()
    assert "step" not in [r.getMessage() for r in h.records]

    logger, h = make_logger("lrta_sim.test.sampling2")
    SimulationLoop(TwoSteps(), hooks=RunLogging(debug=True, sample_every=2, logger=logger)).run()
    assert [r.extra["step"] for r in h.records if r.getMessage() == "step"] == [2]


def test_outcome_levels():
    logger, h = make_logger("lrta_sim.test.outcome")
    hooks = RunLogging(logger=logger)
    hooks.outcome(RunOutcome(RunStatus.SUCCESS, "Travel distance: 1.0km", distance=1.0))
    hooks.outcome(RunOutcome(RunStatus.DEAD_END, "Error: dead end"))
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        hooks.outcome(RunOutcome(RunStatus.FAILED, "Error: boom"), exc=e)

    assert [r.levelname for r in h.records] == ["INFO", "WARNING", "ERROR"]
    assert h.records[0].extra["status"] == "success"
    assert h.records[0].extra["visited"] == 0
    assert h.records[2].exc_info is not None


def test_default_logger_emits_json(capsys):
    logger = _default_json_logger(name="lrta_sim.test.json", level="INFO")
    RunLogging(run_id="j-1", logger=logger).run_start(max_steps=None, step_delay_s=0.0)
    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["msg"] == "run_start"
    assert payload["run_id"] == "j-1"
    assert payload["level"] == "INFO"
