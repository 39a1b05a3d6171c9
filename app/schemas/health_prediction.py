"""
Health Trend Prediction Schemas
Pydantic models for per-metric trends, risk blocks and the patient prediction report
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskCategory(str, Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class HealthDataPoint(BaseModel):
    """One weekly reading of the synthetic history"""
    timestamp: datetime
    weight: Optional[float] = None
    body_fat: Optional[float] = None
    blood_pressure: Optional[str] = None
    adherence: Optional[float] = None
    insulin_resistance: Optional[bool] = None
    exercise: Optional[float] = None  # minutes per week
    steps: Optional[float] = None  # daily average
    sleep: Optional[float] = None  # hours per night


class HealthTrend(BaseModel):
    """Trend of a single metric over the analyzed window"""
    metric: str
    direction: TrendDirection
    confidence: float = Field(..., ge=0.0, le=1.0)
    change_rate: float  # units per week
    projected_value: float  # value in 4 weeks
    risk_level: RiskLevel
    recommendations: List[str]


class HeartAttackRisk(BaseModel):
    score: int = Field(..., ge=0, le=100)
    category: RiskCategory
    factors: List[str]
    recommendations: List[str]


class CancerRisk(HeartAttackRisk):
    ai_analysis: str


class HealthPrediction(BaseModel):
    """Aggregated trend report for one patient"""
    patient_id: int
    generated_at: datetime
    trends: List[HealthTrend]
    overall_score: int = Field(..., ge=0, le=100)
    risk_factors: List[str]
    interventions: List[str]
    confidence_level: float = Field(..., ge=0.0, le=1.0)
    heart_attack_risk: HeartAttackRisk
    cancer_risk: CancerRisk


class DemoHealthPrediction(HealthPrediction):
    """Hand-authored report served when live analysis is not enabled"""
    is_demo: bool = True
    demo_message: str
