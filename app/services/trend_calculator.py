"""
Trend Calculator
================

Ordinary least-squares trend over a short chronological series.
The sample index (0..n-1) is the x axis; R² of the fit is used as confidence.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy import stats

from app.schemas.health_prediction import TrendDirection

MIN_POINTS = 3
STABLE_SLOPE = 0.1
DEFAULT_CONFIDENCE = 0.3
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    rate: float
    confidence: float


def r_squared(values: Sequence[float], slope: float, intercept: float) -> float:
    """Coefficient of determination, 0 for a constant series"""
    y = np.asarray(values, dtype=float)
    x = np.arange(len(y))

    ss_tot = float(np.sum((y - y.mean()) ** 2))
    if ss_tot == 0:
        return 0.0

    ss_res = float(np.sum((y - (slope * x + intercept)) ** 2))
    return max(0.0, 1.0 - ss_res / ss_tot)


def calculate_trend(values: Sequence[float]) -> TrendResult:
    """
    Fit a linear trend to chronological samples

    The direction follows the sign of the slope only: a positive slope is
    "improving" whatever the metric. Callers interpret it per metric.

    Args:
        values: Samples in chronological order, already free of missing values

    Returns:
        TrendResult with direction, rate (slope per sample) and confidence
    """
    if len(values) < MIN_POINTS:
        return TrendResult(TrendDirection.STABLE, 0.0, DEFAULT_CONFIDENCE)

    y = np.asarray(values, dtype=float)
    x = np.arange(len(y))
    fit = stats.linregress(x, y)
    slope = float(fit.slope)

    r2 = r_squared(y, slope, float(fit.intercept))
    confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, r2))

    if abs(slope) < STABLE_SLOPE:
        direction = TrendDirection.STABLE
    elif slope > 0:
        direction = TrendDirection.IMPROVING
    else:
        direction = TrendDirection.DECLINING

    return TrendResult(direction, slope, confidence)
