"""
Link Repair Service

Keeps a user's reading-list and challenge entries pointing at books in their
library:
- Scan broken links and auto-link confident matches
- Collect suggestions for matches that need confirmation
- Confirm a suggested link on request
- Bulk-link unlisted library books to reading list entries

The matcher decides; this service only applies or surfaces the decision.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from shelflink.errors import NotFoundError, ProcessingError, ValidationError
from shelflink.matching import (
    BookReference,
    CandidateBook,
    LinkDecision,
    MatchConfidence,
    rank,
)
from shelflink.storage import (
    LinkRepository,
    BrokenLink,
    READING_LIST_LINK,
    CHALLENGE_LINK,
)


@dataclass
class RepairCandidate:
    book_id: str
    book_title: str
    score: float
    confidence: MatchConfidence


@dataclass
class RepairSuggestion:
    """Unresolved link with candidates awaiting confirmation."""

    type: str  # "reading-list" or "challenge"
    target_id: str
    target_title: str
    target_author: str
    list_or_challenge_name: str
    candidates: list[RepairCandidate] = field(default_factory=list)


@dataclass
class RepairStats:
    reading_lists_scanned: int = 0
    reading_lists_repaired: int = 0
    challenges_scanned: int = 0
    challenges_repaired: int = 0
    suggestions_found: int = 0


@dataclass
class RepairResult:
    success: bool
    stats: RepairStats = field(default_factory=RepairStats)
    suggestions: list[RepairSuggestion] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BrokenLinkCount:
    reading_lists: int = 0
    challenges: int = 0

    @property
    def total(self) -> int:
        return self.reading_lists + self.challenges


@dataclass
class LinkedBook:
    """Result of bulk linking one library book."""

    book_id: str
    book_title: str
    reading_list_book_id: str
    reading_list_book_title: str
    reading_list_name: str
    score: float


class LinkRepairService:
    """
    Repairs broken links between list entries and library books.

    Usage:
        service = LinkRepairService(LinkRepository(database_url))

        result = service.repair_all_links(user_id)
        for suggestion in result.suggestions:
            ...
        service.confirm_suggested_link(user_id, "reading-list", link_id, book_id)
    """

    # Suggestions kept per unresolved link
    MAX_SUGGESTIONS = 3

    def __init__(self, repository: LinkRepository):
        self.repository = repository

    def repair_all_links(self, user_id: str) -> RepairResult:
        """
        Scan and repair every broken link of a user.

        Reading list links are processed first, then challenge links.
        A link is repaired when its best match is an AUTO_LINK decision;
        otherwise its SUGGEST candidates are returned as a suggestion.

        Args:
            user_id: Current user

        Returns:
            RepairResult; success is False if storage failed
        """
        try:
            candidates = [book.to_candidate() for book in self.repository.list_books(user_id)]
            stats = RepairStats()
            suggestions: list[RepairSuggestion] = []

            reading_list_links = self.repository.list_broken_reading_list_links(user_id)
            stats.reading_lists_scanned = len(reading_list_links)
            for link in reading_list_links:
                if self._repair_link(link, candidates, suggestions):
                    stats.reading_lists_repaired += 1

            challenge_links = self.repository.list_broken_challenge_links(user_id)
            stats.challenges_scanned = len(challenge_links)
            for link in challenge_links:
                if self._repair_link(link, candidates, suggestions):
                    stats.challenges_repaired += 1

            stats.suggestions_found = len(suggestions)

        except SQLAlchemyError as e:
            logger.error(f"Repair links failed for user {user_id}: {e}")
            return RepairResult(success=False)

        logger.info(
            f"Repaired links for user {user_id}: "
            f"reading lists {stats.reading_lists_repaired}/{stats.reading_lists_scanned}, "
            f"challenges {stats.challenges_repaired}/{stats.challenges_scanned}, "
            f"{stats.suggestions_found} suggestions"
        )

        return RepairResult(success=True, stats=stats, suggestions=suggestions)

    def _repair_link(
        self,
        link: BrokenLink,
        candidates: list[CandidateBook],
        suggestions: list[RepairSuggestion],
    ) -> bool:
        """Repair one link or record a suggestion. Returns True if repaired."""
        query = BookReference(title=link.title, author=link.author)
        ranked = rank(query, candidates, min_confidence=MatchConfidence.MEDIUM)

        if not ranked:
            return False

        best_candidate, best = ranked[0]
        if best.decision is LinkDecision.AUTO_LINK:
            self._set_link(link.link_type, link.id, best_candidate.book_id)
            logger.debug(
                f"Auto-linked {link.link_type} '{link.title}' -> '{best_candidate.title}' "
                f"({best.score:.3f})"
            )
            return True

        suggested = [
            RepairCandidate(
                book_id=candidate.book_id,
                book_title=candidate.title,
                score=result.score,
                confidence=result.confidence,
            )
            for candidate, result in ranked
            if result.decision is LinkDecision.SUGGEST
        ][:self.MAX_SUGGESTIONS]

        suggestions.append(RepairSuggestion(
            type=link.link_type,
            target_id=link.id,
            target_title=link.title,
            target_author=link.author,
            list_or_challenge_name=link.list_or_challenge_name,
            candidates=suggested,
        ))
        return False

    def _set_link(self, link_type: str, link_id: str, book_id: str, user_id: Optional[str] = None) -> bool:
        if link_type == READING_LIST_LINK:
            return self.repository.set_reading_list_link(link_id, book_id, user_id=user_id)
        elif link_type == CHALLENGE_LINK:
            return self.repository.set_challenge_link(link_id, book_id, user_id=user_id)
        raise ValidationError(
            "Unknown link type",
            detail=f"Expected '{READING_LIST_LINK}' or '{CHALLENGE_LINK}', got '{link_type}'",
        )

    def confirm_suggested_link(self, user_id: str, link_type: str, target_id: str, book_id: str) -> None:
        """
        Apply a suggested link after the user confirmed it.

        Raises:
            ValidationError: Unknown link type
            NotFoundError: Book or link does not belong to the user
            ProcessingError: Storage failed while saving the link
        """
        if link_type not in (READING_LIST_LINK, CHALLENGE_LINK):
            raise ValidationError(
                "Unknown link type",
                detail=f"Expected '{READING_LIST_LINK}' or '{CHALLENGE_LINK}', got '{link_type}'",
            )

        if self.repository.get_book(user_id, book_id) is None:
            raise NotFoundError("Book", book_id)

        try:
            updated = self._set_link(link_type, target_id, book_id, user_id=user_id)
        except SQLAlchemyError as e:
            logger.error(f"Confirm link {target_id} failed for user {user_id}: {e}")
            raise ProcessingError("Could not save link", detail="The link could not be written to storage") from e

        if not updated:
            raise NotFoundError("Link", target_id)

        logger.info(f"Confirmed {link_type} link {target_id} -> {book_id} for user {user_id}")

    def get_broken_links_count(self, user_id: str) -> BrokenLinkCount:
        reading_lists, challenges = self.repository.count_broken_links(user_id)
        return BrokenLinkCount(reading_lists=reading_lists, challenges=challenges)

    def link_books_by_similarity(self, user_id: str) -> list[LinkedBook]:
        """
        Link library books that are in no reading list to matching entries.

        Each library book and each reading list entry is linked at most once
        per user; only AUTO_LINK matches are applied.

        Returns:
            Links created, in library order
        """
        existing = self.repository.list_reading_list_links(user_id)
        linked_entry_ids = {l.reading_list_book_id for l in existing}
        linked_book_ids = {l.book_id for l in existing if l.book_id}

        entries = self.repository.list_reading_list_entries()
        entries_by_id = {e.id: e for e in entries}

        created: list[LinkedBook] = []
        for book in self.repository.list_books(user_id):
            if book.id in linked_book_ids:
                continue

            available = [
                CandidateBook(book_id=e.id, title=e.title, author=e.author)
                for e in entries
                if e.id not in linked_entry_ids
            ]
            ranked = rank(
                BookReference(title=book.title, author=book.author),
                available,
                limit=1,
                min_confidence=MatchConfidence.HIGH,
            )
            if not ranked:
                continue

            entry_candidate, result = ranked[0]
            entry = entries_by_id[entry_candidate.book_id]

            self.repository.create_reading_list_link(user_id, entry.id, book.id)
            linked_entry_ids.add(entry.id)
            linked_book_ids.add(book.id)

            created.append(LinkedBook(
                book_id=book.id,
                book_title=book.title,
                reading_list_book_id=entry.id,
                reading_list_book_title=entry.title,
                reading_list_name=entry.reading_list_name,
                score=result.score,
            ))

        logger.info(f"Linked {len(created)} books by similarity for user {user_id}")
        return created
