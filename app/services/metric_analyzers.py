"""
Metric Trend Analyzers
======================

Wrap the trend calculator with metric-specific projections, risk thresholds
and recommendation text.

Trend Metrics:
- weight (lbs)
- bodyFat (% body fat)
- adherence (% of plan followed)
- exercise (minutes per week)

Directions come straight from the calculator's slope sign. For weight and
body fat a falling value is the clinical goal, so "declining" there means the
patient is losing weight/fat; thresholds below are written against that
convention and are not re-interpreted.
"""

import logging
import math
from typing import List, Optional, Sequence

from app.schemas.health_prediction import HealthDataPoint, HealthTrend, RiskLevel, TrendDirection
from app.services.trend_calculator import MIN_POINTS, calculate_trend

logger = logging.getLogger(__name__)

PROJECTION_WEEKS = 4
FALLBACK_CONFIDENCE = 0.5


def extract_series(data_points: Sequence[HealthDataPoint], field: str) -> List[float]:
    """Chronological values of one metric, missing and non-finite readings dropped"""
    values = (getattr(point, field) for point in data_points)
    return [float(v) for v in values if v is not None and math.isfinite(v)]


def _fallback_trend(metric: str, projected_value: float, message: str) -> HealthTrend:
    return HealthTrend(
        metric=metric,
        direction=TrendDirection.STABLE,
        confidence=FALLBACK_CONFIDENCE,
        change_rate=0.0,
        projected_value=projected_value,
        risk_level=RiskLevel.LOW,
        recommendations=[message],
    )


def _check_samples(metric: str, label: str, values: List[float]) -> Optional[HealthTrend]:
    """Neutral trend when there are too few samples to fit, else None"""
    if not values:
        return _fallback_trend(metric, 0.0, f"No {label} data available for analysis")
    if len(values) < MIN_POINTS:
        logger.debug(f"Only {len(values)} {label} samples, skipping regression")
        return _fallback_trend(metric, values[-1], f"Insufficient {label} data for trend analysis")
    return None


def analyze_weight_trend(data_points: Sequence[HealthDataPoint]) -> HealthTrend:
    weights = extract_series(data_points, "weight")
    fallback = _check_samples("weight", "weight", weights)
    if fallback:
        return fallback

    trend = calculate_trend(weights)
    current = weights[-1]
    projected = current + trend.rate * PROJECTION_WEEKS

    risk_level = RiskLevel.LOW
    if trend.direction == TrendDirection.DECLINING and abs(trend.rate) > 0.5:
        risk_level = RiskLevel.HIGH
    elif trend.direction == TrendDirection.DECLINING and abs(trend.rate) > 0.25:
        risk_level = RiskLevel.MEDIUM

    if trend.direction == TrendDirection.DECLINING:
        recommendations = [
            "Consider increasing protein intake to maintain muscle mass",
            "Monitor for rapid weight loss - consult provider if losing >2 lbs/week",
        ]
    elif trend.direction == TrendDirection.IMPROVING:
        recommendations = [
            "Great progress! Continue current nutrition plan",
            "Consider strength training to maximize muscle retention",
        ]
    else:
        recommendations = ["Weight is stable - focus on body composition improvements"]

    return HealthTrend(
        metric="weight",
        direction=trend.direction,
        confidence=trend.confidence,
        change_rate=trend.rate,
        projected_value=projected,
        risk_level=risk_level,
        recommendations=recommendations,
    )


def analyze_body_fat_trend(data_points: Sequence[HealthDataPoint]) -> HealthTrend:
    body_fats = extract_series(data_points, "body_fat")
    fallback = _check_samples("bodyFat", "body fat", body_fats)
    if fallback:
        return fallback

    trend = calculate_trend(body_fats)
    current = body_fats[-1]
    projected = max(5.0, current + trend.rate * PROJECTION_WEEKS)

    # TODO: both branches are unreachable under the slope-sign convention
    # (improving implies rate > 0.1); needs a clinical decision on the intended thresholds
    risk_level = RiskLevel.LOW
    if trend.direction == TrendDirection.IMPROVING and trend.rate < -0.2:
        risk_level = RiskLevel.MEDIUM
    elif trend.direction == TrendDirection.DECLINING and trend.rate > 0.3:
        risk_level = RiskLevel.HIGH

    if trend.direction == TrendDirection.IMPROVING:
        recommendations = [
            "Excellent body composition progress!",
            "Continue resistance training to preserve muscle mass",
        ]
    elif trend.direction == TrendDirection.DECLINING:
        recommendations = [
            "Body fat percentage is increasing - review caloric intake",
            "Increase cardiovascular exercise and strength training",
        ]
    else:
        recommendations = ["Body fat is stable - consider adjusting training intensity"]

    return HealthTrend(
        metric="bodyFat",
        direction=trend.direction,
        confidence=trend.confidence,
        change_rate=trend.rate,
        projected_value=projected,
        risk_level=risk_level,
        recommendations=recommendations,
    )


def analyze_adherence_trend(data_points: Sequence[HealthDataPoint]) -> HealthTrend:
    adherences = extract_series(data_points, "adherence")
    fallback = _check_samples("adherence", "adherence", adherences)
    if fallback:
        return fallback

    trend = calculate_trend(adherences)
    current = adherences[-1]
    projected = max(0.0, min(100.0, current + trend.rate * PROJECTION_WEEKS))

    risk_level = RiskLevel.LOW
    if current < 60:
        risk_level = RiskLevel.HIGH
    elif current < 75:
        risk_level = RiskLevel.MEDIUM

    if trend.direction == TrendDirection.DECLINING:
        recommendations = [
            "Adherence is declining - consider simplifying the plan",
            "Schedule regular check-ins with healthcare provider",
            "Identify and address barriers to adherence",
        ]
    elif trend.direction == TrendDirection.IMPROVING:
        recommendations = [
            "Great improvement in adherence!",
            "Continue building healthy habits",
        ]
    else:
        recommendations = ["Adherence is stable - focus on consistency"]

    return HealthTrend(
        metric="adherence",
        direction=trend.direction,
        confidence=trend.confidence,
        change_rate=trend.rate,
        projected_value=projected,
        risk_level=risk_level,
        recommendations=recommendations,
    )


def analyze_exercise_trend(data_points: Sequence[HealthDataPoint]) -> HealthTrend:
    minutes = extract_series(data_points, "exercise")
    fallback = _check_samples("exercise", "exercise", minutes)
    if fallback:
        return fallback

    trend = calculate_trend(minutes)
    current = minutes[-1]
    projected = max(0.0, current + trend.rate * PROJECTION_WEEKS)

    # 150 min/week is the activity guideline
    if current < 75:
        risk_level = RiskLevel.HIGH
    elif current < 150:
        risk_level = RiskLevel.MEDIUM
    else:
        risk_level = RiskLevel.LOW

    if trend.direction == TrendDirection.DECLINING:
        recommendations = [
            "Exercise frequency is decreasing - set smaller, achievable goals",
            "Consider finding enjoyable physical activities",
        ]
    elif trend.direction == TrendDirection.IMPROVING:
        recommendations = [
            "Excellent progress in exercise consistency!",
            "Consider varying workout types to prevent plateaus",
        ]
    else:
        recommendations = ["Exercise is consistent - focus on intensity or variety"]

    return HealthTrend(
        metric="exercise",
        direction=trend.direction,
        confidence=trend.confidence,
        change_rate=trend.rate,
        projected_value=projected,
        risk_level=risk_level,
        recommendations=recommendations,
    )
