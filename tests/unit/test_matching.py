"""
Unit tests for the book matching module.
"""

import math

import pytest

from shelflink.matching import (
    AUTHOR_WEIGHT,
    HIGH_CONFIDENCE,
    LOW_CONFIDENCE,
    MEDIUM_CONFIDENCE,
    NEUTRAL_AUTHOR_SCORE,
    NUMBER_MISMATCH_CAP,
    TITLE_WEIGHT,
    BookReference,
    CandidateBook,
    LinkDecision,
    MatchConfidence,
    StringSimilarity,
    TextNormalizer,
    confidence_of,
    decide,
    is_auto_linkable,
    is_suggestion_worthy,
    match,
    rank,
    score,
)


class TestTextNormalizer:
    """Tests for TextNormalizer class."""

    def test_turkish_letters_folded(self):
        assert TextNormalizer.normalize("Suç ve Ceza") == "suc ve ceza"
        assert TextNormalizer.normalize("Hayvan Çiftliği") == "hayvan ciftligi"
        assert TextNormalizer.normalize("İnce Memed") == "ince memed"
        assert TextNormalizer.normalize("KIRMIZI SAÇLI KADIN") == "kirmizi sacli kadin"

    def test_diacritics_stripped(self):
        assert TextNormalizer.normalize("Cien años de soledad") == "cien anos de soledad"
        assert TextNormalizer.normalize("Les Misérables") == "les miserables"

    def test_punctuation_and_whitespace(self):
        assert TextNormalizer.normalize("  Harry   Potter: and the... ") == "harry potter and the"
        assert TextNormalizer.normalize("snake_case") == "snake case"

    def test_none_and_non_strings(self):
        assert TextNormalizer.normalize(None) == ""
        assert TextNormalizer.normalize("") == ""
        assert TextNormalizer.normalize(1984) == "1984"

    def test_leading_article_removed_from_titles(self):
        assert TextNormalizer.normalize_title("The Hobbit") == "hobbit"
        # A lone article is the whole title
        assert TextNormalizer.normalize_title("The") == "the"

    def test_series_suffix(self):
        title = "Dune (Dune Chronicles, #1)"
        assert TextNormalizer.normalize_title(title) == "dune dune chronicles 1"
        assert TextNormalizer.normalize_title(title, strip_series=True) == "dune"

    def test_author_lastname(self):
        assert TextNormalizer.extract_author_lastname("George Orwell") == "orwell"
        assert TextNormalizer.extract_author_lastname("Dostoyevski") == "dostoyevski"
        assert TextNormalizer.extract_author_lastname("") == ""
        assert TextNormalizer.extract_author_lastname(None) == ""


class TestStringSimilarity:
    """Tests for StringSimilarity class."""

    def test_edit_similarity(self):
        assert StringSimilarity.edit_similarity("abc", "abc") == 1.0
        assert StringSimilarity.edit_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_edit_similarity_empty(self):
        assert StringSimilarity.edit_similarity("", "abc") == 0.0
        assert StringSimilarity.edit_similarity("", "") == 0.0

    def test_word_similarity_ignores_order(self):
        assert StringSimilarity.word_similarity("suc ve ceza", "ceza ve suc") == 1.0

    def test_word_similarity_tolerates_typos(self):
        # "ciftligi" vs "ciftlgi" is above the per-word threshold
        assert StringSimilarity.word_similarity("hayvan ciftligi", "hayvan ciftlgi") == 1.0

    def test_word_similarity_skips_single_characters(self):
        assert StringSimilarity.word_similarity("a b", "c d") == 0.0

    def test_word_similarity_keeps_numbers(self):
        assert StringSimilarity.word_similarity("harry potter 1", "harry potter 1") == 1.0
        assert StringSimilarity.word_similarity("harry potter 1", "harry potter 2") == pytest.approx(2 / 3)

    def test_word_similarity_matches_each_word_once(self):
        assert StringSimilarity.word_similarity("dune dune", "dune messiah") == 0.5

    def test_numbers(self):
        assert StringSimilarity.numbers("vakif 2 cilt 10") == ["10", "2"]
        assert StringSimilarity.numbers("dune") == []

    def test_token_sort_similarity(self):
        assert StringSimilarity.token_sort_similarity("orwell george", "george orwell") == 1.0


class TestScore:
    """Tests for pair scoring."""

    def test_identical_title_and_author(self):
        query = BookReference(title="Suç ve Ceza", author="Fyodor Dostoyevski")
        candidate = CandidateBook(book_id="b1", title="Suç ve Ceza", author="Fyodor Dostoyevski")

        result = match(query, candidate)

        assert result.score == 1.0
        assert result.confidence is MatchConfidence.HIGH
        assert result.decision is LinkDecision.AUTO_LINK

    def test_identical_after_normalization(self):
        query = BookReference(title="HAYVAN CIFTLIGI", author="george orwell")
        candidate = CandidateBook(book_id="b1", title="Hayvan Çiftliği", author="George Orwell")

        assert score(query, candidate) == 1.0

    def test_last_name_only_author_is_auto_linked(self):
        query = BookReference(title="Suç ve Ceza", author="Dostoyevski")
        candidate = CandidateBook(book_id="b1", title="Suç ve Ceza", author="Fyodor Dostoyevski")

        result = match(query, candidate)

        assert result.score == pytest.approx(0.975)
        assert result.confidence is MatchConfidence.HIGH
        assert result.decision is LinkDecision.AUTO_LINK
        assert result.components.author_compared is True

    def test_same_author_disjoint_title_is_ignored(self):
        query = BookReference(title="1984", author="Orwell")
        candidate = CandidateBook(book_id="b1", title="Hayvan Çiftliği", author="George Orwell")

        result = match(query, candidate)

        assert result.score < LOW_CONFIDENCE
        assert result.confidence in (MatchConfidence.NONE, MatchConfidence.LOW)
        assert result.decision is LinkDecision.IGNORE

    def test_disjoint_title_and_author(self):
        query = BookReference(title="Dune", author="Frank Herbert")
        candidate = CandidateBook(book_id="b1", title="Emma", author="Jane Austen")

        result = match(query, candidate)

        assert result.score < LOW_CONFIDENCE
        assert result.decision is LinkDecision.IGNORE

    def test_disjoint_title_capped_by_author_weight(self):
        query = BookReference(title="Dune", author="Frank Herbert")
        candidate = CandidateBook(book_id="b1", title="Emma", author="Frank Herbert")

        assert score(query, candidate) <= AUTHOR_WEIGHT

    def test_missing_author_is_neutral(self):
        query = BookReference(title="Dune")
        candidate = CandidateBook(book_id="b1", title="Dune", author="Frank Herbert")

        result = match(query, candidate)

        assert result.score == pytest.approx(TITLE_WEIGHT + AUTHOR_WEIGHT * NEUTRAL_AUTHOR_SCORE)
        assert result.components.author_compared is False
        assert result.confidence is MatchConfidence.MEDIUM
        assert result.decision is LinkDecision.SUGGEST

    def test_both_authors_missing(self):
        result = match(BookReference(title="Dune"), CandidateBook(book_id="b1", title="Dune"))

        assert result.score == 1.0
        assert result.confidence is MatchConfidence.HIGH
        assert result.decision is LinkDecision.AUTO_LINK

    def test_blank_author_counts_as_missing(self):
        query = BookReference(title="Dune", author="  ")
        candidate = CandidateBook(book_id="b1", title="Dune", author=None)

        assert score(query, candidate) == 1.0

    def test_other_volume_is_not_auto_linked(self):
        query = BookReference(title="Harry Potter 1", author="J.K. Rowling")
        candidate = CandidateBook(book_id="b1", title="Harry Potter 2", author="J.K. Rowling")

        result = match(query, candidate)

        assert result.components.title_similarity <= NUMBER_MISMATCH_CAP
        assert result.confidence is MatchConfidence.MEDIUM
        assert result.decision is LinkDecision.SUGGEST

    def test_same_volume_is_auto_linked(self):
        query = BookReference(title="Harry Potter 1", author="J.K. Rowling")
        candidate = CandidateBook(book_id="b1", title="Harry Potter 1", author="J.K. Rowling")

        assert match(query, candidate).decision is LinkDecision.AUTO_LINK

    def test_repeated_word_matches_once(self):
        query = BookReference(title="Dune Dune", author="Frank Herbert")
        candidate = CandidateBook(book_id="b1", title="Dune Messiah", author="Frank Herbert")

        result = match(query, candidate)

        assert result.components.title_similarity == pytest.approx(0.5)
        assert result.decision is LinkDecision.IGNORE

    def test_series_suffix_is_forgiven(self):
        query = BookReference(title="Dune (Dune Chronicles, #1)", author="Frank Herbert")
        candidate = CandidateBook(book_id="b1", title="Dune", author="Frank Herbert")

        result = match(query, candidate)

        assert result.score == pytest.approx(0.75 * 0.95 + 0.25)
        assert result.decision is LinkDecision.AUTO_LINK

    def test_author_word_order(self):
        query = BookReference(title="Dune", author="Herbert Frank")
        candidate = CandidateBook(book_id="b1", title="Dune", author="Frank Herbert")

        assert score(query, candidate) == 1.0

    @pytest.mark.parametrize("query,candidate", [
        (BookReference(title=""), CandidateBook(book_id="b1", title="")),
        (BookReference(title="", author="Orwell"), CandidateBook(book_id="b1", title="1984", author="Orwell")),
        (BookReference(title=None, author=None), CandidateBook(book_id="b1", title="1984")),
        (BookReference(title="1984"), CandidateBook(book_id="b1", title=None, author=None)),
        (BookReference(title="!!!"), CandidateBook(book_id="b1", title="???")),
    ])
    def test_empty_input_scores_zero(self, query, candidate):
        result = match(query, candidate)

        assert result.score == 0.0
        assert result.confidence is MatchConfidence.NONE
        assert result.decision is LinkDecision.IGNORE

    def test_score_in_range_and_deterministic(self):
        titles = ["Suç ve Ceza", "Crime and Punishment", "1984", "", "Dune", "Dune Messiah", "a", "Ω"]
        authors = [None, "", "Dostoyevski", "George Orwell", "Frank Herbert"]

        for q_title in titles:
            for c_title in titles:
                for author in authors:
                    query = BookReference(title=q_title, author=author)
                    candidate = CandidateBook(book_id="x", title=c_title, author="Frank Herbert")
                    value = score(query, candidate)

                    assert 0.0 <= value <= 1.0
                    assert math.isfinite(value)
                    assert score(query, candidate) == value


class TestConfidence:
    """Tests for tier boundaries and decisions."""

    @pytest.mark.parametrize("value,expected", [
        (1.0, MatchConfidence.HIGH),
        (HIGH_CONFIDENCE, MatchConfidence.HIGH),
        (0.9199, MatchConfidence.MEDIUM),
        (MEDIUM_CONFIDENCE, MatchConfidence.MEDIUM),
        (0.7499, MatchConfidence.LOW),
        (LOW_CONFIDENCE, MatchConfidence.LOW),
        (0.4999, MatchConfidence.NONE),
        (0.0, MatchConfidence.NONE),
    ])
    def test_cut_points_are_inclusive(self, value, expected):
        assert confidence_of(value) is expected

    def test_documented_cut_points(self):
        assert (HIGH_CONFIDENCE, MEDIUM_CONFIDENCE, LOW_CONFIDENCE) == (0.92, 0.75, 0.5)

    def test_invalid_scores_are_none(self):
        assert confidence_of(float("nan")) is MatchConfidence.NONE
        assert confidence_of(None) is MatchConfidence.NONE
        assert confidence_of("high") is MatchConfidence.NONE

    def test_tiers_are_ordered(self):
        assert MatchConfidence.NONE < MatchConfidence.LOW < MatchConfidence.MEDIUM < MatchConfidence.HIGH
        assert MatchConfidence.HIGH >= MatchConfidence.MEDIUM
        assert max(MatchConfidence) is MatchConfidence.HIGH

    @pytest.mark.parametrize("tier,decision", [
        (MatchConfidence.HIGH, LinkDecision.AUTO_LINK),
        (MatchConfidence.MEDIUM, LinkDecision.SUGGEST),
        (MatchConfidence.LOW, LinkDecision.IGNORE),
        (MatchConfidence.NONE, LinkDecision.IGNORE),
    ])
    def test_decide(self, tier, decision):
        assert decide(tier) is decision

    def test_score_predicates(self):
        assert is_auto_linkable(0.92)
        assert not is_auto_linkable(0.91)
        assert is_suggestion_worthy(0.75)
        assert not is_suggestion_worthy(0.92)
        assert not is_suggestion_worthy(0.6)


class TestRank:
    """Tests for candidate ranking."""

    @pytest.fixture
    def catalog(self):
        return [
            CandidateBook(book_id="b3", title="Hayvan Çiftliği", author="George Orwell"),
            CandidateBook(book_id="b2", title="Suç ve Ceza", author="Fyodor Dostoyevski"),
            CandidateBook(book_id="b1", title="Suç ve Ceza", author="Fyodor Dostoyevski"),
            CandidateBook(book_id="b4", title="Budala", author="Fyodor Dostoyevski"),
        ]

    def test_sorted_by_score_then_id(self, catalog):
        query = BookReference(title="Suç ve Ceza", author="Dostoyevski")

        ranked = rank(query, catalog)
        scores = [result.score for _, result in ranked]

        assert scores == sorted(scores, reverse=True)
        assert [c.book_id for c, _ in ranked][:2] == ["b1", "b2"]
        assert len(ranked) == len(catalog)

    def test_repeatable(self, catalog):
        query = BookReference(title="Suç ve Ceza", author="Dostoyevski")

        first = rank(query, catalog)
        second = rank(query, list(reversed(catalog)))

        assert first == second

    def test_accepts_any_iterable(self, catalog):
        query = BookReference(title="Budala")

        ranked = rank(query, (c for c in catalog))

        assert ranked[0][0].book_id == "b4"

    def test_limit_and_min_confidence(self, catalog):
        query = BookReference(title="Suç ve Ceza", author="Dostoyevski")

        assert len(rank(query, catalog, limit=1)) == 1

        confident = rank(query, catalog, min_confidence=MatchConfidence.HIGH)
        assert [c.book_id for c, _ in confident] == ["b1", "b2"]

    def test_empty_catalog(self):
        assert rank(BookReference(title="Dune"), []) == []
