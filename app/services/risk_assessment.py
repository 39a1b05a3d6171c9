"""
Lifestyle Risk Assessment Service
=================================

Additive point scores for two long-horizon risks, computed from the patient's
current snapshot:

1. Heart attack risk
   - Age bands, blood pressure stages, weight, insulin resistance,
     treatment adherence, body fat percentage

2. Cancer risk
   - Age bands, weight, body fat, insulin resistance, adherence
     (high adherence is treated as protective)
   - Optional AI narrative from an OpenAI-compatible endpoint

These are wellness heuristics, NOT validated clinical formulas.
"""

import math
from typing import Any, List, Optional, Tuple

from openai import OpenAI, OpenAIError

from app.config import settings
from app.core.logging import log_warning
from app.schemas.health_prediction import CancerRisk, HeartAttackRisk, RiskCategory
from app.services.health_history import as_float

DEFAULT_CANCER_ANALYSIS = "Cancer risk assessment based on demographic and lifestyle factors."


def _reading_part(part: str) -> float:
    """Numeric value of one half of a reading; blank is 0, unparseable is NaN"""
    part = part.strip()
    if not part:
        return 0.0
    try:
        return float(part)
    except ValueError:
        return math.nan


def parse_blood_pressure(reading: Optional[str]) -> Optional[Tuple[float, float]]:
    """
    Split a "SYS/DIA" reading into (systolic, diastolic).

    Each half is parsed on its own so a partial reading still scores on the
    half that is present. A missing diastolic is NaN and fails every
    threshold comparison. Returns None only when there is no reading.
    """
    if not reading:
        return None
    parts = reading.split("/")
    systolic = _reading_part(parts[0])
    diastolic = _reading_part(parts[1]) if len(parts) > 1 else math.nan
    return systolic, diastolic


def categorize(score: int, bands: List[Tuple[int, RiskCategory]]) -> RiskCategory:
    """First category whose lower bound the score reaches; bands sorted high to low"""
    for lower_bound, category in bands:
        if score >= lower_bound:
            return category
    return RiskCategory.VERY_LOW


class HeartAttackRiskCalculator:
    """
    Additive heart attack risk score (0-100)

    Categories:
    - >= 80: very_high
    - >= 60: high
    - >= 40: moderate
    - >= 20: low
    """

    CATEGORY_BANDS = [
        (80, RiskCategory.VERY_HIGH),
        (60, RiskCategory.HIGH),
        (40, RiskCategory.MODERATE),
        (20, RiskCategory.LOW),
    ]

    GENERAL_RECOMMENDATIONS = [
        "Mediterranean diet with omega-3 fatty acids",
        "Regular moderate exercise (150 min/week)",
        "Stress management techniques",
    ]

    @classmethod
    def calculate(cls, patient: Any) -> HeartAttackRisk:
        score = 0
        factors = []
        recommendations = []

        age = patient.age or 0
        if age >= 65:
            score += 25
            factors.append("Age 65 or older")
        elif age >= 55:
            score += 15
            factors.append("Age 55-64")
        elif age >= 45:
            score += 10
            factors.append("Age 45-54")

        bp = parse_blood_pressure(patient.blood_pressure)
        if bp:
            systolic, diastolic = bp
            if systolic >= 180 or diastolic >= 110:
                score += 30
                factors.append("Very high blood pressure (>180/110)")
                recommendations.append("Immediate medical attention for blood pressure control")
            elif systolic >= 160 or diastolic >= 100:
                score += 25
                factors.append("High blood pressure (>160/100)")
                recommendations.append("Medication review and lifestyle modifications")
            elif systolic >= 140 or diastolic >= 90:
                score += 15
                factors.append("Elevated blood pressure (>140/90)")
                recommendations.append("Regular monitoring and dietary changes")

        # BMI approximated from weight alone; height is not recorded
        weight = as_float(patient.weight)
        if weight and weight > 250:
            score += 20
            factors.append("Obesity (BMI likely >35)")
            recommendations.append("Weight management program with medical supervision")
        elif weight and weight > 220:
            score += 15
            factors.append("Overweight (BMI likely >30)")
            recommendations.append("Structured weight loss plan")

        if patient.insulin_resistance:
            score += 15
            factors.append("Insulin resistance/Type 2 diabetes")
            recommendations.append("Strict glucose control and cardiovascular monitoring")

        if patient.adherence and patient.adherence < 50:
            score += 10
            factors.append("Poor treatment adherence")
            recommendations.append("Behavioral counseling and support systems")

        body_fat = as_float(patient.body_fat)
        if body_fat and body_fat > 35:
            score += 10
            factors.append("High body fat percentage")
            recommendations.append("Body composition improvement through exercise")

        category = categorize(score, cls.CATEGORY_BANDS)

        if score > 40:
            recommendations.append("Regular cardiology consultation")
            recommendations.append("Consider cardiac stress testing")
        if score > 20:
            recommendations.append("Daily aspirin therapy (consult physician)")
            recommendations.append("Lipid profile monitoring")
        recommendations.extend(cls.GENERAL_RECOMMENDATIONS)

        return HeartAttackRisk(
            score=min(100, score),
            category=category,
            factors=factors,
            recommendations=recommendations,
        )


class CancerRiskCalculator:
    """
    Additive cancer risk score (0-100) with an optional AI-written narrative

    Categories:
    - >= 70: very_high
    - >= 50: high
    - >= 30: moderate
    - >= 15: low
    """

    CATEGORY_BANDS = [
        (70, RiskCategory.VERY_HIGH),
        (50, RiskCategory.HIGH),
        (30, RiskCategory.MODERATE),
        (15, RiskCategory.LOW),
    ]

    UNIVERSAL_RECOMMENDATIONS = [
        "Maintain healthy weight through diet and exercise",
        "Avoid tobacco and limit alcohol consumption",
        "Eat a diet rich in fruits, vegetables, and whole grains",
        "Stay physically active with regular exercise",
        "Protect skin from excessive sun exposure",
        "Stay up-to-date with recommended vaccinations",
    ]

    @classmethod
    def score_factors(cls, patient: Any) -> Tuple[int, List[str]]:
        score = 0
        factors = []

        age = patient.age or 0
        if age >= 65:
            score += 20
            factors.append("Age 65 or older - increased cancer risk")
        elif age >= 50:
            score += 15
            factors.append("Age 50-64 - moderate cancer risk increase")
        elif age >= 40:
            score += 10
            factors.append("Age 40-49 - slight cancer risk increase")

        weight = as_float(patient.weight)
        if weight and weight > 250:
            score += 15
            factors.append("Severe obesity - increased cancer risk")
        elif weight and weight > 220:
            score += 10
            factors.append("Obesity - moderate cancer risk increase")

        body_fat = as_float(patient.body_fat)
        if body_fat and body_fat > 35:
            score += 8
            factors.append("High body fat percentage - cancer risk factor")

        if patient.insulin_resistance:
            score += 12
            factors.append("Insulin resistance/Type 2 diabetes - cancer risk factor")

        if patient.adherence and patient.adherence < 50:
            score += 8
            factors.append("Poor lifestyle adherence - increased cancer risk")

        if patient.adherence and patient.adherence > 80:
            score -= 5
            factors.append("Good adherence to healthy lifestyle - protective factor")

        return score, factors

    @staticmethod
    def build_prompt(patient: Any, factors: List[str]) -> str:
        return (
            "As a medical AI assistant, analyze the cancer risk for this patient profile:\n"
            f"- Age: {patient.age}\n"
            f"- Weight: {patient.weight} lbs\n"
            f"- Body Fat: {patient.body_fat}%\n"
            f"- Insulin Resistance: {'Yes' if patient.insulin_resistance else 'No'}\n"
            f"- Blood Pressure: {patient.blood_pressure}\n"
            f"- Treatment Adherence: {patient.adherence}%\n"
            f"- Current risk factors: {', '.join(factors)}\n\n"
            "Provide a brief, professional analysis of their cancer risk profile focusing on "
            "modifiable risk factors and preventive measures. Keep response under 150 words."
        )

    @classmethod
    def generate_ai_analysis(cls, patient: Any, factors: List[str], ai_client: Optional[OpenAI]) -> str:
        """Narrative from the AI endpoint, or the default sentence when unavailable"""
        if ai_client is None:
            return DEFAULT_CANCER_ANALYSIS

        try:
            response = ai_client.chat.completions.create(
                model=settings.XAI_MODEL,
                messages=[{"role": "user", "content": cls.build_prompt(patient, factors)}],
                max_tokens=200,
            )
        except OpenAIError as e:
            log_warning(
                f"AI cancer risk analysis unavailable, using default assessment: {type(e).__name__}",
                logger_name=__name__
            )
            return DEFAULT_CANCER_ANALYSIS

        content = response.choices[0].message.content if response.choices else None
        return content or DEFAULT_CANCER_ANALYSIS

    @classmethod
    def calculate(cls, patient: Any, ai_client: Optional[OpenAI] = None) -> CancerRisk:
        score, factors = cls.score_factors(patient)
        category = categorize(score, cls.CATEGORY_BANDS)
        ai_analysis = cls.generate_ai_analysis(patient, factors, ai_client)

        recommendations = []
        if score >= 50:
            recommendations.append("Schedule comprehensive cancer screening")
            recommendations.append("Consult oncology specialist for risk assessment")
        if score >= 30:
            recommendations.append("Follow age-appropriate cancer screening guidelines")
            recommendations.append("Consider genetic counseling if family history present")
        recommendations.extend(cls.UNIVERSAL_RECOMMENDATIONS)

        return CancerRisk(
            score=min(100, max(0, score)),
            category=category,
            factors=factors,
            recommendations=recommendations,
            ai_analysis=ai_analysis,
        )


def calculate_heart_attack_risk(patient: Any) -> HeartAttackRisk:
    return HeartAttackRiskCalculator.calculate(patient)


def calculate_cancer_risk(patient: Any, ai_client: Optional[OpenAI] = None) -> CancerRisk:
    return CancerRiskCalculator.calculate(patient, ai_client)
