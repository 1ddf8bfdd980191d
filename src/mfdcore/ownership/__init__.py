"""
Ownership inference: which component owns each construct.
"""

from .mapper import Assignment, OwnershipMap, PassSnapshot, assign_owners
from .passes import PASSES, OwnershipContext, OwnershipPass
from .scoring import ScoreBoard
from .config import OWNERSHIP_CONFIG

__all__ = [
    "Assignment",
    "OwnershipMap",
    "PassSnapshot",
    "assign_owners",
    "PASSES",
    "OwnershipContext",
    "OwnershipPass",
    "ScoreBoard",
    "OWNERSHIP_CONFIG",
]
