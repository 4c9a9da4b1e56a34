"""
Link Repair Module

Applies matcher decisions to a user's reading-list and challenge links.
"""

from shelflink.linking.service import (
    LinkRepairService,
    RepairCandidate,
    RepairSuggestion,
    RepairStats,
    RepairResult,
    BrokenLinkCount,
    LinkedBook,
)

__all__ = [
    "LinkRepairService",
    "RepairCandidate",
    "RepairSuggestion",
    "RepairStats",
    "RepairResult",
    "BrokenLinkCount",
    "LinkedBook",
]
