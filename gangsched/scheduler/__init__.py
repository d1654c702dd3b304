"""
Scheduler Components for gangsched

This package contains the gang admission checker, the resource scorer and the
score normalizer a host scheduler calls during each scheduling cycle.
"""

from .admission import AdmissionChecker, GroupMembershipSource, StaticMembershipSource, parse_quorum
from .normalize import Normalizer, div_trunc
from .scoring import MAX_RAW_SCORE, ResourceInventory, ResourceScorer, StaticInventory

__all__ = [
    "AdmissionChecker",
    "GroupMembershipSource",
    "StaticMembershipSource",
    "parse_quorum",
    "ResourceScorer",
    "ResourceInventory",
    "StaticInventory",
    "MAX_RAW_SCORE",
    "Normalizer",
    "div_trunc",
]
