"""
Calibration Benchmark Module

Evaluates the matcher's confidence cut points on labelled pairs:
- Precision/recall of AUTO_LINK decisions
- Share of true matches sent to SUGGEST vs. missed
- Tier distribution
- Threshold sweep for choosing the HIGH cut point
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

import numpy as np

from shelflink.matching import (
    BookReference,
    CandidateBook,
    LinkDecision,
    MatchConfidence,
    match,
    score,
)

logger = logging.getLogger(__name__)


@dataclass
class LabeledPair:
    """A reference/candidate pair with ground truth."""
    pair_id: str
    query: BookReference
    candidate: CandidateBook
    is_match: bool
    category: str = "general"


@dataclass
class CalibrationMetrics:
    """Decision quality at the current cut points."""
    total_pairs: int = 0
    positive_pairs: int = 0
    auto_link_precision: float = 0.0
    auto_link_recall: float = 0.0
    false_auto_links: int = 0
    suggest_rate_on_matches: float = 0.0
    missed_matches: int = 0
    ignored_non_matches: int = 0
    tier_distribution: dict[str, int] = field(default_factory=dict)
    mean_score_matches: float = 0.0
    mean_score_non_matches: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pairs": self.total_pairs,
            "positive_pairs": self.positive_pairs,
            "auto_link": {
                "precision": round(self.auto_link_precision, 4),
                "recall": round(self.auto_link_recall, 4),
                "false_positives": self.false_auto_links,
            },
            "suggest_rate_on_matches": round(self.suggest_rate_on_matches, 4),
            "missed_matches": self.missed_matches,
            "ignored_non_matches": self.ignored_non_matches,
            "tier_distribution": self.tier_distribution,
            "mean_score": {
                "matches": round(self.mean_score_matches, 4),
                "non_matches": round(self.mean_score_non_matches, 4),
            },
        }


@dataclass
class ThresholdPoint:
    threshold: float
    precision: float
    recall: float


class CalibrationBenchmark:
    """
    Benchmark for the matcher's score thresholds.

    Usage:
        benchmark = CalibrationBenchmark()
        benchmark.load_dataset(Path("pairs.json"))
        print(benchmark.evaluate().to_dict())
        for point in benchmark.sweep_thresholds():
            print(point)
    """

    def __init__(self):
        self.pairs: list[LabeledPair] = []

    def add_pair(
        self,
        pair_id: str,
        query_title: str,
        candidate_title: str,
        is_match: bool,
        query_author: Optional[str] = None,
        candidate_author: Optional[str] = None,
        candidate_id: Optional[str] = None,
        category: str = "general",
    ) -> None:
        """Add a labelled pair for evaluation."""
        self.pairs.append(LabeledPair(
            pair_id=pair_id,
            query=BookReference(title=query_title, author=query_author),
            candidate=CandidateBook(
                book_id=candidate_id or pair_id,
                title=candidate_title,
                author=candidate_author,
            ),
            is_match=is_match,
            category=category,
        ))

    def load_dataset(self, pairs_file: Path) -> None:
        """
        Load labelled pairs.

        Expected format:
        [
            {
                "pair_id": "p_001",
                "query": {"title": "Suç ve Ceza", "author": "Dostoyevski"},
                "candidate": {"id": "b1", "title": "Suç ve Ceza", "author": "Fyodor Dostoyevski"},
                "is_match": true,
                "category": "translated"
            },
            ...
        ]
        """
        with open(pairs_file, encoding="utf-8") as f:
            data = json.load(f)

        for item in data:
            query = item.get("query", {})
            candidate = item.get("candidate", {})
            self.add_pair(
                pair_id=item["pair_id"],
                query_title=query.get("title", ""),
                query_author=query.get("author"),
                candidate_title=candidate.get("title", ""),
                candidate_author=candidate.get("author"),
                candidate_id=candidate.get("id"),
                is_match=bool(item["is_match"]),
                category=item.get("category", "general"),
            )

        logger.info(f"Loaded {len(data)} labelled pairs from {pairs_file}")

    def evaluate(self) -> CalibrationMetrics:
        """Evaluate decisions at the fixed cut points."""
        if not self.pairs:
            logger.warning("No pairs to evaluate")
            return CalibrationMetrics()

        metrics = CalibrationMetrics(total_pairs=len(self.pairs))
        tiers: Counter = Counter()

        auto_true = auto_false = suggested_matches = 0
        match_scores, non_match_scores = [], []

        for pair in self.pairs:
            result = match(pair.query, pair.candidate)
            tiers[result.confidence.value] += 1

            if pair.is_match:
                metrics.positive_pairs += 1
                match_scores.append(result.score)
                if result.decision is LinkDecision.AUTO_LINK:
                    auto_true += 1
                elif result.decision is LinkDecision.SUGGEST:
                    suggested_matches += 1
                else:
                    metrics.missed_matches += 1
            else:
                non_match_scores.append(result.score)
                if result.decision is LinkDecision.AUTO_LINK:
                    auto_false += 1
                elif result.decision is LinkDecision.IGNORE:
                    metrics.ignored_non_matches += 1

        auto_total = auto_true + auto_false
        metrics.auto_link_precision = auto_true / auto_total if auto_total else 0.0
        metrics.auto_link_recall = auto_true / metrics.positive_pairs if metrics.positive_pairs else 0.0
        metrics.false_auto_links = auto_false
        metrics.suggest_rate_on_matches = (
            suggested_matches / metrics.positive_pairs if metrics.positive_pairs else 0.0
        )
        metrics.tier_distribution = {
            tier.value: tiers.get(tier.value, 0) for tier in MatchConfidence
        }
        metrics.mean_score_matches = float(np.mean(match_scores)) if match_scores else 0.0
        metrics.mean_score_non_matches = float(np.mean(non_match_scores)) if non_match_scores else 0.0

        return metrics

    def sweep_thresholds(self, thresholds: Optional[Iterable[float]] = None) -> list[ThresholdPoint]:
        """
        Precision/recall of "score >= threshold means same book".

        Args:
            thresholds: Cut points to try (default 0.50..1.00 step 0.01)

        Returns:
            One point per threshold, in the given order
        """
        if thresholds is None:
            thresholds = np.round(np.arange(0.5, 1.001, 0.01), 2)

        scores = np.array([score(p.query, p.candidate) for p in self.pairs], dtype=float)
        labels = np.array([p.is_match for p in self.pairs], dtype=bool)
        positives = int(labels.sum())

        points = []
        for threshold in thresholds:
            predicted = scores >= threshold
            true_positive = int((predicted & labels).sum())
            predicted_count = int(predicted.sum())
            points.append(ThresholdPoint(
                threshold=float(threshold),
                precision=true_positive / predicted_count if predicted_count else 0.0,
                recall=true_positive / positives if positives else 0.0,
            ))

        return points
