"""
Health Trend Prediction Service
===============================

Builds the patient health prediction report:

1. Synthesize a 12-week history from the current snapshot
2. Analyze weight, body fat, adherence and exercise trends
3. Aggregate an overall 0-100 score
4. Collect risk factors and suggested interventions
5. Attach heart attack and cancer risk blocks

A hand-authored demo report is available for deployments where live
analysis is switched off.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, List, Optional

import numpy as np
from openai import OpenAI

from app.schemas.health_prediction import (
    CancerRisk,
    DemoHealthPrediction,
    HealthPrediction,
    HealthTrend,
    HeartAttackRisk,
    RiskCategory,
    RiskLevel,
    TrendDirection,
)
from app.services.health_history import as_float, synthesize_history
from app.services.metric_analyzers import (
    analyze_adherence_trend,
    analyze_body_fat_trend,
    analyze_exercise_trend,
    analyze_weight_trend,
)
from app.services.risk_assessment import calculate_cancer_risk, calculate_heart_attack_risk

logger = logging.getLogger(__name__)

BASE_SCORE = 70
# A computed score of exactly 0 is reported as this value
ZERO_SCORE_FALLBACK = 75
DEFAULT_CONFIDENCE_LEVEL = 0.5
EXERCISE_GUIDELINE_MINUTES = 150

DEMO_MESSAGE = (
    "Demo prediction based on statistical analysis. "
    "Real ML predictions require health data history."
)


def calculate_overall_score(trends: List[HealthTrend]) -> int:
    """
    Weighted-sum health score

    Base 70; each trend moves it by its confidence (adherence weighs 0.3,
    other metrics 0.2) and medium/high risk subtracts 5/10 points.
    """
    score = float(BASE_SCORE)

    for trend in trends:
        weight = 0.3 if trend.metric == "adherence" else 0.2

        if trend.direction == TrendDirection.IMPROVING:
            score += 15 * weight * trend.confidence
        elif trend.direction == TrendDirection.DECLINING:
            score -= 20 * weight * trend.confidence

        if trend.risk_level == RiskLevel.HIGH:
            score -= 10
        elif trend.risk_level == RiskLevel.MEDIUM:
            score -= 5

    # Half-up: 74.5 -> 75
    return int(max(0, min(100, math.floor(score + 0.5))))


def identify_risk_factors(trends: List[HealthTrend]) -> List[str]:
    risk_factors = []

    for trend in trends:
        if trend.risk_level != RiskLevel.HIGH:
            continue

        if trend.metric == "weight":
            if trend.direction == TrendDirection.DECLINING:
                risk_factors.append("Rapid weight loss may indicate inadequate nutrition")
            else:
                risk_factors.append("Weight gain trend requires intervention")
        elif trend.metric == "bodyFat":
            if trend.direction == TrendDirection.DECLINING:
                risk_factors.append("Increasing body fat percentage")
        elif trend.metric == "adherence":
            risk_factors.append("Poor adherence to treatment plan")
        elif trend.metric == "exercise":
            risk_factors.append("Insufficient physical activity levels")

    return risk_factors


def find_trend(trends: List[HealthTrend], metric: str) -> Optional[HealthTrend]:
    return next((t for t in trends if t.metric == metric), None)


def generate_interventions(trends: List[HealthTrend], risk_factors: List[str]) -> List[str]:
    interventions = []

    if risk_factors:
        interventions.append("Schedule follow-up appointment within 2 weeks")

    confident_declines = [
        t for t in trends
        if t.direction == TrendDirection.DECLINING and t.confidence > 0.6
    ]
    if len(confident_declines) >= 2:
        interventions.append("Consider comprehensive plan review and adjustment")

    adherence = find_trend(trends, "adherence")
    if adherence and adherence.direction == TrendDirection.DECLINING:
        interventions.append("Implement adherence support strategies")

    exercise = find_trend(trends, "exercise")
    if exercise and exercise.projected_value < EXERCISE_GUIDELINE_MINUTES:
        interventions.append("Develop structured exercise progression plan")

    return interventions


def predict_health_trends(
    patient: Any,
    rng: Optional[np.random.Generator] = None,
    ai_client: Optional[OpenAI] = None
) -> HealthPrediction:
    """
    Generate the live trend prediction for a patient

    Args:
        patient: Patient snapshot (ORM row or any object with the same attributes)
        rng: Random source for the synthetic history
        ai_client: Optional OpenAI-compatible client for the cancer risk narrative

    Returns:
        HealthPrediction report
    """
    logger.info(f"Predicting health trends for patient {patient.id}")

    history = synthesize_history(patient, rng=rng)

    trends = []
    if as_float(patient.weight):
        trends.append(analyze_weight_trend(history))
    if as_float(patient.body_fat):
        trends.append(analyze_body_fat_trend(history))
    trends.append(analyze_adherence_trend(history))
    trends.append(analyze_exercise_trend(history))

    overall_score = calculate_overall_score(trends)
    risk_factors = identify_risk_factors(trends)
    interventions = generate_interventions(trends, risk_factors)

    confidences = [t.confidence for t in trends]
    confidence_level = float(np.mean(confidences)) if confidences else DEFAULT_CONFIDENCE_LEVEL

    prediction = HealthPrediction(
        patient_id=patient.id,
        generated_at=datetime.now(timezone.utc),
        trends=trends,
        overall_score=overall_score or ZERO_SCORE_FALLBACK,
        risk_factors=risk_factors,
        interventions=interventions,
        confidence_level=confidence_level,
        heart_attack_risk=calculate_heart_attack_risk(patient),
        cancer_risk=calculate_cancer_risk(patient, ai_client=ai_client),
    )

    logger.info(
        f"Health prediction for patient {patient.id}: score={prediction.overall_score}, "
        f"{len(risk_factors)} risk factors, {len(interventions)} interventions"
    )
    return prediction


def generate_demo_health_prediction(patient: Any) -> DemoHealthPrediction:
    """Fixed demo report; only the projected values follow the patient's snapshot"""
    weight = as_float(patient.weight)
    body_fat = as_float(patient.body_fat)

    trends = [
        HealthTrend(
            metric="weight",
            direction=TrendDirection.DECLINING,
            confidence=0.82,
            change_rate=-0.75,
            projected_value=weight - 3 if weight else 180,
            risk_level=RiskLevel.LOW,
            recommendations=[
                "Excellent weight loss progress!",
                "Continue current nutrition plan",
                "Consider strength training to preserve muscle mass",
            ],
        ),
        HealthTrend(
            metric="bodyFat",
            direction=TrendDirection.DECLINING,
            confidence=0.78,
            change_rate=-0.5,
            projected_value=body_fat - 2 if body_fat else 25,
            risk_level=RiskLevel.LOW,
            recommendations=[
                "Body composition is improving steadily",
                "Keep up the cardio and resistance training",
                "Focus on protein intake to maintain muscle",
            ],
        ),
        HealthTrend(
            metric="adherence",
            direction=TrendDirection.IMPROVING,
            confidence=0.85,
            change_rate=2.5,
            projected_value=min(100, (patient.adherence or 80) + 10),
            risk_level=RiskLevel.LOW,
            recommendations=[
                "Plan adherence is excellent",
                "Consistency is key to long-term success",
            ],
        ),
        HealthTrend(
            metric="exercise",
            direction=TrendDirection.IMPROVING,
            confidence=0.73,
            change_rate=15,
            projected_value=200,
            risk_level=RiskLevel.LOW,
            recommendations=[
                "Exercise frequency is increasing",
                "Consider adding variety to prevent plateaus",
                "Monitor recovery between sessions",
            ],
        ),
    ]

    heart_attack_risk = HeartAttackRisk(
        score=32,
        category=RiskCategory.MODERATE,
        factors=[
            "Age 45-54",
            "Elevated blood pressure (>140/90)",
            "Insulin resistance/Type 2 diabetes",
            "Overweight (BMI likely >30)",
        ],
        recommendations=[
            "Regular cardiology consultation",
            "Daily aspirin therapy (consult physician)",
            "Lipid profile monitoring",
            "Mediterranean diet with omega-3 fatty acids",
            "Regular moderate exercise (150 min/week)",
            "Stress management techniques",
        ],
    )

    cancer_risk = CancerRisk(
        score=28,
        category=RiskCategory.LOW,
        factors=[
            "Age 40-49 - slight cancer risk increase",
            "Overweight (BMI likely >30)",
            "Insulin resistance/Type 2 diabetes - cancer risk factor",
        ],
        recommendations=[
            "Follow age-appropriate cancer screening guidelines",
            "Maintain healthy weight through diet and exercise",
            "Avoid tobacco and limit alcohol consumption",
            "Eat a diet rich in fruits, vegetables, and whole grains",
            "Stay physically active with regular exercise",
            "Protect skin from excessive sun exposure",
        ],
        ai_analysis=(
            "Based on your current health profile, your cancer risk is in the low-moderate range. "
            "Key modifiable factors include weight management and maintaining good glycemic control. "
            "Your active lifestyle and adherence to health recommendations are protective factors. "
            "Continue regular screening as recommended for your age group, focus on maintaining a "
            "healthy weight, and ensure adequate physical activity. The combination of insulin "
            "resistance and excess weight slightly elevates risk, but these are manageable through "
            "lifestyle modifications."
        ),
    )

    return DemoHealthPrediction(
        patient_id=patient.id,
        generated_at=datetime.now(timezone.utc),
        trends=trends,
        overall_score=83,
        risk_factors=[
            "Insulin resistance requires ongoing monitoring",
            "Blood pressure needs consistent tracking",
        ],
        interventions=[
            "Continue current GLP-1 therapy",
            "Increase fiber intake for better glucose control",
            "Consider meal timing optimization",
        ],
        confidence_level=0.8,
        heart_attack_risk=heart_attack_risk,
        cancer_risk=cancer_risk,
        is_demo=True,
        demo_message=DEMO_MESSAGE,
    )
