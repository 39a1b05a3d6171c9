"""
Tests for the health prediction facade: scoring, risk factors, interventions,
live and demo reports
"""

from datetime import datetime, timezone

import numpy as np
import pytest

from app.schemas.health_prediction import HealthTrend, RiskLevel, TrendDirection
from app.services.health_prediction_service import (
    calculate_overall_score,
    find_trend,
    generate_demo_health_prediction,
    generate_interventions,
    identify_risk_factors,
    predict_health_trends,
)

from conftest import make_patient


def make_trend(metric, direction=TrendDirection.STABLE, confidence=0.5,
               risk_level=RiskLevel.LOW, projected_value=200.0):
    return HealthTrend(
        metric=metric,
        direction=direction,
        confidence=confidence,
        change_rate=0.0,
        projected_value=projected_value,
        risk_level=risk_level,
        recommendations=[],
    )


class TestOverallScore:

    def test_base_score_without_trends(self):
        assert calculate_overall_score([]) == 70

    def test_improving_adherence_rounds_half_up(self):
        trends = [make_trend("adherence", TrendDirection.IMPROVING, confidence=1.0)]

        assert calculate_overall_score(trends) == 75

    def test_declining_trend_and_risk_penalties(self):
        trends = [
            make_trend("weight", TrendDirection.DECLINING, confidence=1.0, risk_level=RiskLevel.HIGH),
            make_trend("exercise", risk_level=RiskLevel.MEDIUM),
        ]

        # 70 - 20*0.2*1.0 - 10 - 5
        assert calculate_overall_score(trends) == 51

    def test_clamped_at_zero(self):
        trends = [
            make_trend("adherence", TrendDirection.DECLINING, confidence=1.0, risk_level=RiskLevel.HIGH)
            for _ in range(10)
        ]

        assert calculate_overall_score(trends) == 0


class TestRiskFactors:

    def test_only_high_risk_trends_count(self):
        trends = [
            make_trend("weight", TrendDirection.DECLINING, risk_level=RiskLevel.HIGH),
            make_trend("adherence", risk_level=RiskLevel.MEDIUM),
            make_trend("exercise", risk_level=RiskLevel.HIGH),
        ]

        assert identify_risk_factors(trends) == [
            "Rapid weight loss may indicate inadequate nutrition",
            "Insufficient physical activity levels",
        ]

    def test_high_risk_weight_not_declining(self):
        trends = [make_trend("weight", TrendDirection.IMPROVING, risk_level=RiskLevel.HIGH)]

        assert identify_risk_factors(trends) == ["Weight gain trend requires intervention"]

    def test_body_fat_only_when_declining(self):
        trends = [
            make_trend("bodyFat", TrendDirection.STABLE, risk_level=RiskLevel.HIGH),
            make_trend("adherence", risk_level=RiskLevel.HIGH),
        ]

        assert identify_risk_factors(trends) == ["Poor adherence to treatment plan"]


class TestInterventions:

    def test_no_interventions_for_healthy_trends(self):
        trends = [make_trend("adherence"), make_trend("exercise", projected_value=180.0)]

        assert generate_interventions(trends, []) == []

    def test_all_interventions(self):
        trends = [
            make_trend("adherence", TrendDirection.DECLINING, confidence=0.9),
            make_trend("exercise", TrendDirection.DECLINING, confidence=0.7, projected_value=120.0),
        ]

        assert generate_interventions(trends, ["Poor adherence to treatment plan"]) == [
            "Schedule follow-up appointment within 2 weeks",
            "Consider comprehensive plan review and adjustment",
            "Implement adherence support strategies",
            "Develop structured exercise progression plan",
        ]

    def test_low_confidence_declines_do_not_trigger_plan_review(self):
        trends = [
            make_trend("weight", TrendDirection.DECLINING, confidence=0.6),
            make_trend("bodyFat", TrendDirection.DECLINING, confidence=0.9),
        ]

        assert "Consider comprehensive plan review and adjustment" not in generate_interventions(trends, [])


class TestPredictHealthTrends:

    def test_reference_patient(self, seeded_rng):
        patient = make_patient(adherence=95, weight=150, weight_goal=140, body_fat=20, body_fat_goal=15)

        prediction = predict_health_trends(patient, rng=seeded_rng)

        assert 0 <= prediction.overall_score <= 100
        assert [t.metric for t in prediction.trends] == ["weight", "bodyFat", "adherence", "exercise"]
        assert all(0 <= t.confidence <= 1 for t in prediction.trends)
        assert prediction.patient_id == patient.id
        assert prediction.confidence_level == pytest.approx(
            np.mean([t.confidence for t in prediction.trends])
        )

    def test_seeded_predictions_are_reproducible(self, patient):
        first = predict_health_trends(patient, rng=np.random.default_rng(99))
        second = predict_health_trends(patient, rng=np.random.default_rng(99))

        assert first.trends == second.trends
        assert first.overall_score == second.overall_score

    def test_weight_and_body_fat_skipped_when_unknown(self, seeded_rng):
        patient = make_patient(weight=None, body_fat=None)

        prediction = predict_health_trends(patient, rng=seeded_rng)

        assert [t.metric for t in prediction.trends] == ["adherence", "exercise"]

    def test_risk_blocks_attached(self, seeded_rng):
        patient = make_patient(age=70, blood_pressure="185/115")

        prediction = predict_health_trends(patient, rng=seeded_rng)

        assert prediction.heart_attack_risk.score == 55
        assert prediction.cancer_risk.score == 15

    def test_trend_lookup(self, patient, seeded_rng):
        prediction = predict_health_trends(patient, rng=seeded_rng)

        assert find_trend(prediction.trends, "adherence").metric == "adherence"
        assert find_trend(prediction.trends, "sleep") is None


class TestDemoPrediction:

    def test_fixed_score_and_demo_flag(self, patient):
        prediction = generate_demo_health_prediction(patient)

        assert prediction.overall_score == 83
        assert prediction.is_demo is True
        assert prediction.confidence_level == 0.8
        assert prediction.heart_attack_risk.score == 32
        assert prediction.cancer_risk.score == 28

    def test_projections_follow_snapshot(self):
        prediction = generate_demo_health_prediction(make_patient(weight=210, body_fat=31, adherence=95))

        assert find_trend(prediction.trends, "weight").projected_value == 207
        assert find_trend(prediction.trends, "bodyFat").projected_value == 29
        assert find_trend(prediction.trends, "adherence").projected_value == 100

    def test_projection_defaults_without_snapshot_values(self):
        prediction = generate_demo_health_prediction(make_patient(weight=None, body_fat=None, adherence=0))

        assert find_trend(prediction.trends, "weight").projected_value == 180
        assert find_trend(prediction.trends, "bodyFat").projected_value == 25
        assert find_trend(prediction.trends, "adherence").projected_value == 90

    def test_generated_at_is_current(self, patient):
        before = datetime.now(timezone.utc)

        prediction = generate_demo_health_prediction(patient)

        assert prediction.generated_at >= before
