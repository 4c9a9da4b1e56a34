"""
Evaluation Module for ShelfLink

Calibration of the matcher's confidence cut points against labelled pairs.
"""

from shelflink.evaluation.calibration import (
    CalibrationBenchmark,
    CalibrationMetrics,
    LabeledPair,
    ThresholdPoint,
)

__all__ = [
    "CalibrationBenchmark",
    "CalibrationMetrics",
    "LabeledPair",
    "ThresholdPoint",
]
