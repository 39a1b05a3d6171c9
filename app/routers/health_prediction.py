"""
Health Prediction API Endpoints

Serves the per-patient health trend prediction report.
Used for wellness monitoring (NOT medical diagnosis).
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from openai import OpenAI
from sqlalchemy.orm import Session

from app.config import get_ai_client, settings
from app.core.logging import log_audit, log_info
from app.database import get_db
from app.models.patient import Patient
from app.schemas.health_prediction import DemoHealthPrediction, HealthPrediction
from app.services.health_prediction_service import (
    generate_demo_health_prediction,
    predict_health_trends,
)

router = APIRouter(prefix="/api/patients", tags=["Health Prediction"])


@router.get(
    "/{patient_id}/health-prediction",
    response_model=Union[DemoHealthPrediction, HealthPrediction]
)
async def get_health_prediction(
    patient_id: int = Path(..., ge=1, description="Patient identifier"),
    demo: Optional[bool] = Query(None, description="Force demo (true) or live (false) analysis"),
    db: Session = Depends(get_db),
    ai_client: Optional[OpenAI] = Depends(get_ai_client)
):
    """
    Get the health trend prediction for a patient.

    Returns per-metric trends (weight, body fat, adherence, exercise) with
    4-week projections, an overall 0-100 score, risk factors, suggested
    interventions and heart attack / cancer risk blocks.

    The hand-authored demo report is served unless live analysis is enabled
    (HEALTH_PREDICTION_DEMO_MODE=false) or requested with demo=false.
    """
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found"
        )

    use_demo = settings.HEALTH_PREDICTION_DEMO_MODE if demo is None else demo
    mode = "demo" if use_demo else "live"

    if use_demo:
        prediction = generate_demo_health_prediction(patient)
    else:
        prediction = predict_health_trends(patient, ai_client=ai_client)

    log_audit(
        "health_prediction_generated",
        patient_id,
        {"mode": mode, "overall_score": prediction.overall_score}
    )
    log_info(f"Served {mode} health prediction for patient {patient_id}", logger_name=__name__)

    return prediction
