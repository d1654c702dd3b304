"""Shared test fixtures for gangsched."""

import pytest
from gangsched.config import reset_config, get_config
from gangsched.scheduler.admission import StaticMembershipSource
from gangsched.scheduler.scoring import StaticInventory
from gangsched.observer import SchedulingObserver
from gangsched.types import Job

_ENV_VARS = (
    "GANGSCHED_MODE",
    "GANGSCHED_MIN_SCORE",
    "GANGSCHED_MAX_SCORE",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch):
    """Reset global config and clear gangsched environment for all tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config():
    """Return the default GangSchedConfig."""
    return get_config()


@pytest.fixture
def group_snapshot():
    """Return a snapshot with three members of group g1."""
    jobs = [Job(job_id=f"p{i}", group="g1", min_available=1) for i in range(3)]
    jobs.append(Job(job_id="other", group="g2", min_available=1))
    jobs.append(Job(job_id="solo"))
    return StaticMembershipSource(jobs)


@pytest.fixture
def inventory():
    """Return two nodes with 100 and 200 bytes allocatable."""
    return StaticInventory({"m1": 100, "m2": 200})


class RecordingObserver(SchedulingObserver):
    """Observer that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def on_admission(self, decision):
        self.events.append(("admission", decision))

    def on_invalid_quorum(self, job, raw_value):
        self.events.append(("invalid_quorum", job.job_id, raw_value))

    def on_score(self, job_id, candidate, mode, raw):
        self.events.append(("score", candidate.name, raw))

    def on_score_error(self, candidate, error):
        self.events.append(("score_error", candidate, error))

    def on_normalize(self, batch_size, lo, hi, degenerate):
        self.events.append(("normalize", batch_size, lo, hi, degenerate))

    def kinds(self):
        return [event[0] for event in self.events]


@pytest.fixture
def recorder():
    """Return an observer recording all events."""
    return RecordingObserver()
