"""
Gang Admission for gangsched

A job that belongs to a group may only be considered for placement once
enough members of its group are known to the cluster.
"""

import re
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Iterable, Mapping, Optional, Union

from ..errors import InvalidAdmissionInput
from ..observer import NullObserver, SchedulingObserver
from ..types import (
    REASON_INSUFFICIENT_MEMBERS,
    REASON_INVALID_QUORUM,
    AdmissionDecision,
    Job,
)

# Plain decimal integers only
_QUORUM_PATTERN = re.compile(r"[+-]?[0-9]+")


class GroupMembershipSource(ABC):
    """Read-only view of how many jobs currently share a group."""

    @abstractmethod
    def count_members(self, group: str) -> int:
        """Return the number of known jobs carrying this group identity."""
        pass


class StaticMembershipSource(GroupMembershipSource):
    """Point-in-time membership snapshot.

    Built either from a ``{group: count}`` mapping or from the jobs currently
    known to the cluster; jobs without a group are ignored.
    """

    def __init__(self, members: Union[Mapping[str, int], Iterable[Job], None] = None):
        if members is None:
            counts = Counter()
        elif isinstance(members, Mapping):
            counts = Counter(dict(members))
        else:
            counts = Counter(job.group for job in members if job.group is not None)

        for group, count in counts.items():
            if count < 0:
                raise ValueError(f"member count for group {group} cannot be negative")

        self._counts = dict(counts)

    def count_members(self, group: str) -> int:
        return self._counts.get(group, 0)

    def __len__(self) -> int:
        return len(self._counts)


def parse_quorum(job: Job) -> int:
    """Read a job's required quorum as a non-negative integer.

    Raises:
        InvalidAdmissionInput: if the quorum is missing, not an integer or negative.
    """
    value: Any = job.min_available

    if isinstance(value, bool):
        raise InvalidAdmissionInput(job.job_id, value)

    if isinstance(value, int):
        quorum = value
    elif isinstance(value, str):
        text = value.strip()
        if not _QUORUM_PATTERN.fullmatch(text):
            raise InvalidAdmissionInput(job.job_id, value)
        quorum = int(text)
    else:
        raise InvalidAdmissionInput(job.job_id, value)

    if quorum < 0:
        raise InvalidAdmissionInput(job.job_id, value, constraint="non-negative")
    return quorum


class AdmissionChecker:
    """Decides whether a job may be considered for placement this cycle.

    The check is a pure predicate over the job and the membership snapshot:
    it never mutates either, and gives the same answer for as long as the
    snapshot does not change. A rejection only holds for the current cycle.
    """

    def __init__(
        self,
        membership: GroupMembershipSource,
        observer: Optional[SchedulingObserver] = None,
    ):
        self.membership = membership
        self.observer = observer or NullObserver()

    def check(self, job: Job) -> AdmissionDecision:
        """Admit or reject a job based on its group's current membership."""
        if not job.is_gang:
            decision = AdmissionDecision(job_id=job.job_id, admitted=True)
            self.observer.on_admission(decision)
            return decision

        try:
            required = parse_quorum(job)
        except InvalidAdmissionInput:
            self.observer.on_invalid_quorum(job, job.min_available)
            decision = AdmissionDecision(
                job_id=job.job_id,
                admitted=False,
                reason=REASON_INVALID_QUORUM,
                group=job.group,
            )
            self.observer.on_admission(decision)
            return decision

        member_count = self.membership.count_members(job.group)
        if member_count < 0:
            raise ValueError(f"membership source returned {member_count} for group {job.group}")

        admitted = member_count >= required
        decision = AdmissionDecision(
            job_id=job.job_id,
            admitted=admitted,
            reason="" if admitted else REASON_INSUFFICIENT_MEMBERS,
            group=job.group,
            member_count=member_count,
            required=required,
        )
        self.observer.on_admission(decision)
        return decision
