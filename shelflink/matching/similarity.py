"""
String similarity measures used by the book matcher.

All measures expect already-normalized input and return a score in [0, 1].
Empty input on either side scores 0.
"""

import Levenshtein


class StringSimilarity:
    """String similarity calculations."""

    # Two words count as the same word above this edit similarity
    WORD_MATCH_THRESHOLD = 0.8

    @staticmethod
    def edit_similarity(s1: str, s2: str) -> float:
        """
        Edit-distance similarity relative to the longer string.

        Args:
            s1: First string
            s2: Second string

        Returns:
            (len(longer) - distance) / len(longer)
        """
        if not s1 or not s2:
            return 0.0

        if s1 == s2:
            return 1.0

        longer = max(len(s1), len(s2))
        distance = Levenshtein.distance(s1, s2)

        return (longer - distance) / longer

    @staticmethod
    def _tokens(s: str) -> list[str]:
        return [w for w in s.split() if len(w) > 1 or w.isdigit()]

    @classmethod
    def word_similarity(cls, s1: str, s2: str) -> float:
        """
        Share of words matched between two strings.

        Single letters are ignored but numbers of any length are kept.
        Each word on the other side can be matched once; a word matches
        when it is equal to, or close enough by edit similarity to, a
        word that is still unmatched. Numbers only match equal numbers.

        Args:
            s1: First string
            s2: Second string

        Returns:
            matched / max(word counts)
        """
        words1 = cls._tokens(s1)
        words2 = cls._tokens(s2)

        if not words1 or not words2:
            return 0.0

        longest = max(len(words1), len(words2))
        unmatched = list(words2)
        matched = 0
        for word1 in words1:
            for i, word2 in enumerate(unmatched):
                if word1 == word2 or (
                    not (word1.isdigit() or word2.isdigit())
                    and cls.edit_similarity(word1, word2) > cls.WORD_MATCH_THRESHOLD
                ):
                    matched += 1
                    del unmatched[i]
                    break

        return matched / longest

    @staticmethod
    def numbers(s: str) -> list[str]:
        """Sorted numeric tokens of a normalized string."""
        return sorted(w for w in s.split() if w.isdigit())

    @classmethod
    def token_sort_similarity(cls, s1: str, s2: str) -> float:
        """
        Compute similarity after sorting tokens.

        Handles word order differences:
        "Orwell George" vs "George Orwell"
        """
        if not s1 or not s2:
            return 0.0

        sorted_s1 = " ".join(sorted(s1.split()))
        sorted_s2 = " ".join(sorted(s2.split()))

        return cls.edit_similarity(sorted_s1, sorted_s2)
