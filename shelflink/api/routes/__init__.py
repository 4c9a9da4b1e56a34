"""
API Routes for ShelfLink

Route modules:
- matching: Scoring and ranking of book references
- links: Link repair for reading lists and challenges
"""

from shelflink.api.routes.matching import router as matching_router
from shelflink.api.routes.links import router as links_router

__all__ = [
    "matching_router",
    "links_router",
]
