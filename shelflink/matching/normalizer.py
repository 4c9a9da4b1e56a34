"""
Text Normalizer for ShelfLink

Normalization of free-text book references before comparison:
- Turkish letter folding (ç, ğ, ı, ö, ş, ü)
- Unicode decomposition and diacritic stripping
- Case folding
- Punctuation removal
- Whitespace collapsing

Design Decisions:
1. Total functions: None and non-string input normalize to a string, never raise
2. Turkish first: dotless ı has no Unicode decomposition, so it is mapped
   explicitly before NFKD
3. Series suffixes: Goodreads titles carry "(Series, #1)" which is stripped
   only for a secondary comparison, never for the primary one
"""

import re
import unicodedata
from typing import Any


class TextNormalizer:
    """
    Normalize titles and author names for fuzzy comparison.

    Usage:
        TextNormalizer.normalize_title("Suç ve Ceza")        # "suc ve ceza"
        TextNormalizer.normalize_author("Fyodor Dostoyevski") # "fyodor dostoyevski"
        TextNormalizer.extract_author_lastname("George Orwell")  # "orwell"
    """

    TURKISH_MAP = {
        "ç": "c", "ğ": "g", "ı": "i", "ö": "o", "ş": "s", "ü": "u",
        "Ç": "c", "Ğ": "g", "İ": "i", "Ö": "o", "Ş": "s", "Ü": "u",
    }

    # Articles to strip from the beginning of titles
    ARTICLES = {"the", "a", "an"}

    # Trailing "(Dune Chronicles, #1)" style suffix
    SERIES_PATTERN = re.compile(r"\s*\([^()]*\)\s*$")

    _TRANSLATION = str.maketrans(TURKISH_MAP)
    _PUNCTUATION = re.compile(r"[^\w\s]")

    @classmethod
    def normalize(cls, text: Any) -> str:
        """
        Normalize arbitrary text for comparison.

        Args:
            text: Raw text (None and non-strings are accepted)

        Returns:
            Lowercase ASCII-folded text without punctuation
        """
        if text is None:
            return ""
        if not isinstance(text, str):
            text = str(text)
        if not text:
            return ""

        text = text.translate(cls._TRANSLATION)

        # Decompose and drop combining marks (é -> e, â -> a)
        text = unicodedata.normalize("NFKD", text)
        text = "".join(c for c in text if not unicodedata.combining(c))

        text = text.casefold()

        # \w keeps underscores
        text = cls._PUNCTUATION.sub("", text).replace("_", " ")

        return " ".join(text.split())

    @classmethod
    def normalize_title(cls, title: Any, strip_series: bool = False) -> str:
        """
        Normalize book title for comparison.

        Args:
            title: Original title
            strip_series: Remove a trailing parenthesised series suffix

        Returns:
            Normalized title
        """
        if title is None:
            return ""
        if not isinstance(title, str):
            title = str(title)

        if strip_series:
            title = cls.SERIES_PATTERN.sub("", title)

        text = cls.normalize(title)

        words = text.split()
        if len(words) > 1 and words[0] in cls.ARTICLES:
            text = " ".join(words[1:])

        return text

    @classmethod
    def normalize_author(cls, author: Any) -> str:
        """Normalize author name for comparison."""
        return cls.normalize(author)

    @classmethod
    def extract_author_lastname(cls, author: Any) -> str:
        """Extract likely last name from author."""
        parts = cls.normalize_author(author).split()

        if not parts:
            return ""

        # Usually last word is surname
        return parts[-1]
