"""
Resource Scoring for gangsched

Scores candidate nodes by their allocatable memory. Both modes produce raw
scores where higher means more preferred, so the normalizer never needs to
know which mode produced a batch.
"""

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Union

from ..errors import InvalidResourceError, ResourceOverflowError, UnknownNodeError
from ..observer import NullObserver, SchedulingObserver
from ..types import Candidate, ScoringMode

# Raw scores are signed 64-bit integers
MAX_RAW_SCORE = 2**63 - 1


class ResourceInventory(ABC):
    """Read-only view of per-node allocatable resources."""

    @abstractmethod
    def allocatable_memory(self, name: str) -> int:
        """Return the allocatable memory of a node in bytes."""
        pass


class StaticInventory(ResourceInventory):
    """Inventory snapshot backed by a ``{node: bytes}`` mapping."""

    def __init__(self, nodes: Mapping[str, int]):
        self._nodes = dict(nodes)

    def allocatable_memory(self, name: str) -> int:
        try:
            return self._nodes[name]
        except KeyError:
            raise UnknownNodeError(name) from None

    def names(self) -> List[str]:
        return list(self._nodes)


class ResourceScorer:
    """Raw resource scorer with a mode fixed at construction.

    Under ``LEAST`` a node's raw score is its negated allocatable memory, under
    ``MOST`` it is the allocatable memory itself.
    """

    def __init__(
        self,
        mode: Union[ScoringMode, str] = ScoringMode.LEAST,
        inventory: Optional[ResourceInventory] = None,
        observer: Optional[SchedulingObserver] = None,
    ):
        self._mode = ScoringMode.parse(mode)
        self.inventory = inventory
        self.observer = observer or NullObserver()

    @property
    def mode(self) -> ScoringMode:
        return self._mode

    def score(self, candidate: Candidate, job_id: Optional[str] = None) -> int:
        """Return the raw score of a candidate.

        Raises:
            ResourceOverflowError: if the allocatable quantity does not fit a
                signed 64-bit score.
        """
        quantity = candidate.allocatable_memory
        if quantity > MAX_RAW_SCORE:
            raise ResourceOverflowError(candidate.name, quantity, MAX_RAW_SCORE)

        raw = -quantity if self._mode == ScoringMode.LEAST else quantity
        self.observer.on_score(job_id, candidate, self._mode, raw)
        return raw

    def score_node(self, name: str, job_id: Optional[str] = None) -> int:
        """Look a node up in the inventory and score it.

        Raises:
            UnknownNodeError: if the inventory has no entry for the node.
            InvalidResourceError: if the reported quantity is negative or not an integer.
            ResourceOverflowError: as for ``score``.
        """
        if self.inventory is None:
            raise ValueError("score_node requires a resource inventory")

        quantity = self.inventory.allocatable_memory(name)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidResourceError(name, quantity)

        candidate = Candidate(name=name, allocatable_memory=quantity)
        return self.score(candidate, job_id=job_id)
