"""
gangsched - Gang admission and resource scoring for workload schedulers.

This package contains the pieces a host scheduler calls on every scheduling
cycle: a gang admission check, a memory-based node scorer and a min-max score
normalizer, along with their configuration, logging and error types.
"""

from .config import GangSchedConfig
from .errors import (
    ConfigurationError,
    EmptyBatchError,
    GangSchedError,
    InvalidAdmissionInput,
    InvalidResourceError,
    ResourceOverflowError,
    UnknownNodeError,
)
from .observer import LoggingObserver, NullObserver, SchedulingObserver
from .plugin import GangSchedulerPlugin
from .scheduler import (
    AdmissionChecker,
    GroupMembershipSource,
    Normalizer,
    ResourceInventory,
    ResourceScorer,
    StaticInventory,
    StaticMembershipSource,
)
from .types import (
    MAX_NODE_SCORE,
    MIN_NODE_SCORE,
    AdmissionDecision,
    Candidate,
    Job,
    NodeScore,
    ScoreBatch,
    ScoringMode,
    Status,
    StatusCode,
)

__version__ = "0.1.0"

__all__ = [
    "GangSchedConfig",
    "GangSchedulerPlugin",
    "AdmissionChecker",
    "GroupMembershipSource",
    "StaticMembershipSource",
    "ResourceScorer",
    "ResourceInventory",
    "StaticInventory",
    "Normalizer",
    "SchedulingObserver",
    "LoggingObserver",
    "NullObserver",
    "Job",
    "Candidate",
    "NodeScore",
    "ScoreBatch",
    "ScoringMode",
    "AdmissionDecision",
    "Status",
    "StatusCode",
    "MIN_NODE_SCORE",
    "MAX_NODE_SCORE",
    "GangSchedError",
    "ConfigurationError",
    "InvalidAdmissionInput",
    "InvalidResourceError",
    "ResourceOverflowError",
    "EmptyBatchError",
    "UnknownNodeError",
]
