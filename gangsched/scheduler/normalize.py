"""
Score Normalization for gangsched

Rescales one job's raw node scores onto the host's fixed score range so they
can be combined with scores from other plugins.
"""

from typing import Optional

from ..errors import EmptyBatchError
from ..observer import NullObserver, SchedulingObserver
from ..types import MAX_NODE_SCORE, MIN_NODE_SCORE, ScoreBatch


def div_trunc(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero.

    Python's ``//`` floors, which differs for negative quotients.
    """
    if denominator == 0:
        raise ZeroDivisionError("integer division by zero")
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


class Normalizer:
    """Min-max normalizer onto ``[min_score, max_score]``.

    The lowest raw score of a batch maps to exactly ``min_score`` and the
    highest to exactly ``max_score``; everything in between is scaled
    linearly and truncated. When every raw score is equal, all entries get
    the midpoint of the range.

    The batch must hold one job's scores from one scoring round. Mixing
    rounds cannot be detected here and is the caller's responsibility.
    """

    def __init__(
        self,
        min_score: int = MIN_NODE_SCORE,
        max_score: int = MAX_NODE_SCORE,
        observer: Optional[SchedulingObserver] = None,
    ):
        if min_score > max_score:
            raise ValueError("min_score cannot be larger than max_score")

        self.min_score = min_score
        self.max_score = max_score
        self.observer = observer or NullObserver()

    @property
    def midpoint(self) -> int:
        return (self.min_score + self.max_score) // 2

    def normalize(self, batch: ScoreBatch, job_id: Optional[str] = None) -> ScoreBatch:
        """Normalize a batch in place and return it.

        Raises:
            EmptyBatchError: if the batch has no entries.
        """
        if not batch:
            raise EmptyBatchError(job_id)

        lo = hi = batch[0].score
        for entry in batch:
            if entry.score < lo:
                lo = entry.score
            if entry.score > hi:
                hi = entry.score

        degenerate = hi == lo
        if degenerate:
            for entry in batch:
                entry.score = self.midpoint
        else:
            span = self.max_score - self.min_score
            for entry in batch:
                entry.score = self.min_score + div_trunc((entry.score - lo) * span, hi - lo)

        self.observer.on_normalize(len(batch), lo, hi, degenerate)
        return batch
