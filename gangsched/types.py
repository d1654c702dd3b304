"""
Core Type Definitions for gangsched

This module defines the data types exchanged between the host scheduler and
the admission, scoring and normalization components.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import ConfigurationError

# Node score range used by the host framework
MIN_NODE_SCORE = 0
MAX_NODE_SCORE = 100

# Label keys carrying gang metadata on untyped jobs
GROUP_NAME_LABEL = "podGroup"
MIN_AVAILABLE_LABEL = "minAvailable"

REASON_INSUFFICIENT_MEMBERS = "insufficient group membership"
REASON_INVALID_QUORUM = "invalid quorum specification"


class ScoringMode(str, Enum):
    """Ranking direction for the resource scorer."""

    LEAST = "Least"  # PreferLeastAllocated
    MOST = "Most"  # PreferMostAllocated

    @classmethod
    def parse(cls, value: Union["ScoringMode", str]) -> "ScoringMode":
        """Resolve a mode from its value or long name, failing fast otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for mode in cls:
                if value in (mode.value, mode.long_name):
                    return mode
        raise ConfigurationError(
            "mode", value, "one of Least, Most, PreferLeastAllocated, PreferMostAllocated"
        )

    @property
    def long_name(self) -> str:
        return f"Prefer{self.value}Allocated"


class StatusCode(Enum):
    """Outcome of a plugin hook as seen by the host."""

    SUCCESS = auto()
    UNSCHEDULABLE = auto()  # Rejected for this cycle, may pass later
    ERROR = auto()  # Internal failure for this job or candidate


@dataclass
class Status:
    """Result returned by plugin hooks."""

    code: StatusCode = StatusCode.SUCCESS
    reasons: List[str] = field(default_factory=list)

    @classmethod
    def success(cls) -> "Status":
        return cls(StatusCode.SUCCESS)

    @classmethod
    def unschedulable(cls, *reasons: str) -> "Status":
        return cls(StatusCode.UNSCHEDULABLE, list(reasons))

    @classmethod
    def error(cls, *reasons: str) -> "Status":
        return cls(StatusCode.ERROR, list(reasons))

    def is_success(self) -> bool:
        return self.code == StatusCode.SUCCESS

    @property
    def message(self) -> str:
        return ", ".join(self.reasons)


@dataclass(frozen=True)
class Job:
    """A unit of work asking for placement.

    ``min_available`` is the required quorum. It may be an int or, for jobs
    built from labels, the raw label string; the admission checker parses it.
    """

    job_id: str
    group: Optional[str] = None
    min_available: Optional[Union[int, str]] = None
    labels: Dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.job_id:
            raise ValueError("job_id cannot be empty")

        # An empty group label means the job is not gang-scheduled
        if self.group == "":
            object.__setattr__(self, "group", None)

    @classmethod
    def from_labels(cls, job_id: str, labels: Mapping[str, str]) -> "Job":
        """Build a job from untyped label metadata."""
        return cls(
            job_id=job_id,
            group=labels.get(GROUP_NAME_LABEL) or None,
            min_available=labels.get(MIN_AVAILABLE_LABEL),
            labels=dict(labels),
        )

    @property
    def is_gang(self) -> bool:
        return self.group is not None


@dataclass(frozen=True)
class Candidate:
    """A placement target and its allocatable memory in bytes."""

    name: str
    allocatable_memory: int

    def __post_init__(self):
        if not self.name:
            raise ValueError("name cannot be empty")

        if isinstance(self.allocatable_memory, bool) or not isinstance(
            self.allocatable_memory, int
        ):
            raise ValueError("allocatable_memory must be an integer")

        if self.allocatable_memory < 0:
            raise ValueError("allocatable_memory cannot be negative")


@dataclass
class NodeScore:
    """Score of one node within a single job's scoring round."""

    name: str
    score: int


# One job's scores across all candidates of a cycle
ScoreBatch = List[NodeScore]


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of a gang admission check."""

    job_id: str
    admitted: bool
    reason: str = ""
    group: Optional[str] = None
    member_count: Optional[int] = None
    required: Optional[int] = None

    def to_status(self) -> Status:
        if self.admitted:
            return Status.success()
        return Status.unschedulable(self.reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "admitted": self.admitted,
            "reason": self.reason,
            "group": self.group,
            "member_count": self.member_count,
            "required": self.required,
        }
