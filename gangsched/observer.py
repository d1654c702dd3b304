"""
Scheduling observers.

The admission checker, scorer and normalizer never log on their own. They
report what happened to an injected observer; ``LoggingObserver`` turns those
reports into structured log events.
"""

from typing import Any, Optional

from .logging import get_logger
from .types import AdmissionDecision, Candidate, Job, ScoringMode


class SchedulingObserver:
    """Receives events from the scheduling components. All hooks are no-ops."""

    def on_admission(self, decision: AdmissionDecision):
        pass

    def on_invalid_quorum(self, job: Job, raw_value: Any):
        pass

    def on_score(self, job_id: Optional[str], candidate: Candidate, mode: ScoringMode, raw: int):
        pass

    def on_score_error(self, candidate: str, error: Exception):
        pass

    def on_normalize(self, batch_size: int, lo: int, hi: int, degenerate: bool):
        pass


class NullObserver(SchedulingObserver):
    """Observer that drops every event."""


class LoggingObserver(SchedulingObserver):
    """Observer that writes events to a structlog logger."""

    def __init__(self, name: str = "gangsched.events"):
        self.logger = get_logger(name)

    def on_admission(self, decision: AdmissionDecision):
        self.logger.info(
            "Admission admitted" if decision.admitted else "Admission rejected",
            **decision.to_dict(),
        )

    def on_invalid_quorum(self, job: Job, raw_value: Any):
        self.logger.warning(
            "Invalid quorum specification",
            job_id=job.job_id,
            group=job.group,
            value=repr(raw_value),
        )

    def on_score(self, job_id: Optional[str], candidate: Candidate, mode: ScoringMode, raw: int):
        self.logger.debug(
            "Candidate scored",
            job_id=job_id,
            node=candidate.name,
            allocatable_memory=candidate.allocatable_memory,
            mode=mode.value,
            raw_score=raw,
        )

    def on_score_error(self, candidate: str, error: Exception):
        self.logger.warning("Candidate scoring failed", node=candidate, error=str(error))

    def on_normalize(self, batch_size: int, lo: int, hi: int, degenerate: bool):
        self.logger.info(
            "Scores normalized",
            batch_size=batch_size,
            min_raw_score=lo,
            max_raw_score=hi,
            degenerate=degenerate,
        )
