"""
Tests for the per-metric trend analyzers
"""

import pytest

from app.schemas.health_prediction import RiskLevel, TrendDirection
from app.services.metric_analyzers import (
    analyze_adherence_trend,
    analyze_body_fat_trend,
    analyze_exercise_trend,
    analyze_weight_trend,
    extract_series,
)

from conftest import make_points


class TestExtractSeries:

    def test_drops_missing_and_non_finite_values(self):
        points = make_points("weight", [150.0, None, float("nan"), float("inf"), 149.0])

        assert extract_series(points, "weight") == [150.0, 149.0]


class TestWeightTrend:

    def test_no_data(self):
        trend = analyze_weight_trend(make_points("adherence", [80.0] * 5))

        assert trend.metric == "weight"
        assert trend.direction == TrendDirection.STABLE
        assert trend.projected_value == 0
        assert trend.recommendations == ["No weight data available for analysis"]

    def test_insufficient_data_projects_last_value(self):
        trend = analyze_weight_trend(make_points("weight", [180.0, 178.0]))

        assert trend.direction == TrendDirection.STABLE
        assert trend.confidence == 0.5
        assert trend.projected_value == 178.0
        assert trend.recommendations == ["Insufficient weight data for trend analysis"]

    def test_fast_loss_is_declining_high_risk(self):
        trend = analyze_weight_trend(make_points("weight", [200.0 - i for i in range(13)]))

        assert trend.direction == TrendDirection.DECLINING
        assert trend.change_rate == pytest.approx(-1.0)
        assert trend.projected_value == pytest.approx(184.0)
        assert trend.risk_level == RiskLevel.HIGH
        assert "Consider increasing protein intake to maintain muscle mass" in trend.recommendations

    def test_moderate_loss_is_medium_risk(self):
        trend = analyze_weight_trend(make_points("weight", [200.0 - 0.3 * i for i in range(13)]))

        assert trend.direction == TrendDirection.DECLINING
        assert trend.risk_level == RiskLevel.MEDIUM

    def test_gain_is_labelled_improving(self):
        """Direction follows the slope sign, so weight gain reads as improving"""
        trend = analyze_weight_trend(make_points("weight", [150.0 + i for i in range(13)]))

        assert trend.direction == TrendDirection.IMPROVING
        assert trend.risk_level == RiskLevel.LOW
        assert trend.recommendations[0] == "Great progress! Continue current nutrition plan"

    def test_flat_weight_is_stable(self):
        trend = analyze_weight_trend(make_points("weight", [150.0] * 13))

        assert trend.direction == TrendDirection.STABLE
        assert trend.recommendations == ["Weight is stable - focus on body composition improvements"]


class TestBodyFatTrend:

    def test_no_data(self):
        trend = analyze_body_fat_trend(make_points("weight", [150.0] * 5))

        assert trend.metric == "bodyFat"
        assert trend.recommendations == ["No body fat data available for analysis"]

    def test_projection_never_below_five_percent(self):
        trend = analyze_body_fat_trend(make_points("body_fat", [20.0 - i for i in range(13)]))

        assert trend.direction == TrendDirection.DECLINING
        assert trend.projected_value == 5.0
        assert trend.recommendations[0] == "Body fat percentage is increasing - review caloric intake"

    @pytest.mark.parametrize("step", [-1.0, 0.0, 1.0])
    def test_risk_is_always_low(self, step):
        trend = analyze_body_fat_trend(make_points("body_fat", [25.0 + step * i for i in range(13)]))

        assert trend.risk_level == RiskLevel.LOW

    def test_rising_body_fat_is_labelled_improving(self):
        trend = analyze_body_fat_trend(make_points("body_fat", [20.0 + 0.5 * i for i in range(13)]))

        assert trend.direction == TrendDirection.IMPROVING
        assert trend.recommendations[0] == "Excellent body composition progress!"


class TestAdherenceTrend:

    def test_low_current_adherence_is_high_risk(self):
        trend = analyze_adherence_trend(make_points("adherence", [67.0 - i for i in range(13)]))

        assert trend.direction == TrendDirection.DECLINING
        assert trend.risk_level == RiskLevel.HIGH
        assert len(trend.recommendations) == 3

    def test_mid_adherence_is_medium_risk(self):
        trend = analyze_adherence_trend(make_points("adherence", [70.0] * 13))

        assert trend.direction == TrendDirection.STABLE
        assert trend.risk_level == RiskLevel.MEDIUM

    def test_projection_clamped_to_100(self):
        trend = analyze_adherence_trend(make_points("adherence", [88.0 + i for i in range(13)]))

        assert trend.direction == TrendDirection.IMPROVING
        assert trend.risk_level == RiskLevel.LOW
        assert trend.projected_value == 100.0

    def test_no_data(self):
        trend = analyze_adherence_trend(make_points("weight", [150.0] * 5))

        assert trend.recommendations == ["No adherence data available for analysis"]


class TestExerciseTrend:

    @pytest.mark.parametrize(
        "current, expected",
        [(60.0, RiskLevel.HIGH), (100.0, RiskLevel.MEDIUM), (200.0, RiskLevel.LOW)],
    )
    def test_risk_from_current_minutes(self, current, expected):
        trend = analyze_exercise_trend(make_points("exercise", [current] * 13))

        assert trend.risk_level == expected

    def test_declining_exercise_never_projects_below_zero(self):
        trend = analyze_exercise_trend(make_points("exercise", [36.0 - 3 * i for i in range(13)]))

        assert trend.direction == TrendDirection.DECLINING
        assert trend.projected_value == 0.0
        assert trend.recommendations[0] == "Exercise frequency is decreasing - set smaller, achievable goals"
