"""
Host-facing scheduler plugin.

Wraps the admission checker, resource scorer and normalizer behind the three
hooks a scheduling framework calls: pre-filter once per job, score once per
candidate node, and normalize once per job with the collected scores.
"""

import json
from typing import Any, List, Mapping, Optional, Tuple, Union

from .config import get_config
from .errors import (
    ConfigurationError,
    InvalidResourceError,
    ResourceOverflowError,
    UnknownNodeError,
)
from .logging import get_logger, with_cycle_id
from .observer import NullObserver, SchedulingObserver
from .scheduler.admission import AdmissionChecker, GroupMembershipSource
from .scheduler.normalize import Normalizer
from .scheduler.scoring import ResourceInventory, ResourceScorer
from .types import Job, NodeScore, ScoreBatch, ScoringMode, Status

PLUGIN_NAME = "GangScheduler"

logger = get_logger(__name__)

PluginArgs = Union[None, Mapping[str, Any], str, bytes]


def parse_plugin_args(args: PluginArgs) -> ScoringMode:
    """Resolve the scoring mode from plugin arguments.

    ``None`` falls back to the configured mode. Otherwise ``args`` is a
    mapping or a JSON document with a ``mode`` key, which must be present
    and valid.

    Raises:
        ConfigurationError: on malformed JSON or a missing or unknown mode.
    """
    if args is None:
        return get_config().scoring.mode

    if isinstance(args, (str, bytes)):
        try:
            args = json.loads(args)
        except ValueError as e:
            raise ConfigurationError("args", args, "a JSON object", error=str(e)) from e

    if not isinstance(args, Mapping):
        raise ConfigurationError("args", args, "a JSON object")

    return ScoringMode.parse(args.get("mode"))


class GangSchedulerPlugin:
    """Gang admission and memory-based node scoring for one scheduler profile."""

    name = PLUGIN_NAME

    def __init__(
        self,
        mode: Union[ScoringMode, str],
        membership: GroupMembershipSource,
        inventory: ResourceInventory,
        observer: Optional[SchedulingObserver] = None,
        min_score: Optional[int] = None,
        max_score: Optional[int] = None,
    ):
        self.observer = observer or NullObserver()
        scoring = get_config().scoring

        self.admission = AdmissionChecker(membership, observer=self.observer)
        self.scorer = ResourceScorer(mode, inventory=inventory, observer=self.observer)
        self.normalizer = Normalizer(
            min_score=scoring.min_score if min_score is None else min_score,
            max_score=scoring.max_score if max_score is None else max_score,
            observer=self.observer,
        )

    @classmethod
    def new(
        cls,
        args: PluginArgs,
        membership: GroupMembershipSource,
        inventory: ResourceInventory,
        observer: Optional[SchedulingObserver] = None,
    ) -> "GangSchedulerPlugin":
        """Build the plugin from framework arguments, failing fast on bad config."""
        mode = parse_plugin_args(args)
        plugin = cls(mode, membership, inventory, observer=observer)
        logger.info("Gang scheduler plugin initialized", plugin=cls.name, mode=mode.value)
        return plugin

    @property
    def mode(self) -> ScoringMode:
        return self.scorer.mode

    def pre_filter(self, job: Job) -> Status:
        """Reject jobs whose group has not reached its quorum yet."""
        return self.admission.check(job).to_status()

    def score(self, job: Job, node_name: str) -> Tuple[int, Status]:
        """Raw score of a node for a job.

        Failures are reported per node so the host can drop only that node.
        """
        try:
            return self.scorer.score_node(node_name, job_id=job.job_id), Status.success()
        except (InvalidResourceError, ResourceOverflowError, UnknownNodeError) as e:
            self.observer.on_score_error(node_name, e)
            return 0, Status.error(str(e))

    def normalize_score(self, job: Job, scores: ScoreBatch) -> Status:
        """Normalize one job's scores in place."""
        self.normalizer.normalize(scores, job_id=job.job_id)
        return Status.success()

    @with_cycle_id()
    def rank(self, job: Job, node_names: List[str]) -> List[NodeScore]:
        """Run admission, scoring and normalization for one job.

        Returns the scored nodes best first. Rejected jobs and jobs with no
        scoreable node get an empty list.
        """
        status = self.pre_filter(job)
        if not status.is_success():
            logger.info("Job not admitted", job_id=job.job_id, reason=status.message)
            return []

        scores: ScoreBatch = []
        excluded = []
        for node_name in node_names:
            raw, node_status = self.score(job, node_name)
            if node_status.is_success():
                scores.append(NodeScore(name=node_name, score=raw))
            else:
                excluded.append(node_name)

        if excluded:
            logger.warning("Nodes excluded from scoring", job_id=job.job_id, nodes=excluded)

        if not scores:
            return []

        self.normalize_score(job, scores)
        return sorted(scores, key=lambda s: s.score, reverse=True)
