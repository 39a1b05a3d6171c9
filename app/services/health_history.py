"""
Synthetic Health History
Placeholder weekly time series built from a patient's current snapshot.

The platform stores no historical measurements, so the predictor works on a
fabricated 12-week history: current values plus uniform noise plus a linear
progress bias driven by plan adherence.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import numpy as np

from app.config import settings
from app.schemas.health_prediction import HealthDataPoint

logger = logging.getLogger(__name__)

HISTORY_WEEKS = 12
DEFAULT_ADHERENCE = 70


def as_float(value: Any) -> Optional[float]:
    """Numeric snapshot field as float; unset, zero or unparseable values become None"""
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def default_rng() -> np.random.Generator:
    """Random source for history synthesis, seeded from PREDICTION_RANDOM_SEED when set"""
    return np.random.default_rng(settings.PREDICTION_RANDOM_SEED)


def synthesize_history(
    patient: Any,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None
) -> List[HealthDataPoint]:
    """
    Fabricate weekly readings ending at the patient's current snapshot

    Args:
        patient: Object exposing weight, body_fat, adherence, blood_pressure, insulin_resistance
        rng: Random source; a fresh default_rng() when omitted
        now: Timestamp of the most recent point (defaults to current UTC time)

    Returns:
        HISTORY_WEEKS + 1 points in chronological order
    """
    rng = rng if rng is not None else default_rng()
    now = now or datetime.now(timezone.utc)

    weight = as_float(patient.weight)
    body_fat = as_float(patient.body_fat)
    adherence_base = patient.adherence or DEFAULT_ADHERENCE
    progress_factor = (adherence_base - 60) / 100

    data_points = []
    for weeks_back in range(HISTORY_WEEKS, -1, -1):
        weekly_progress = progress_factor * (HISTORY_WEEKS - weeks_back)

        weight_noise = rng.uniform(-2.0, 2.0)
        body_fat_noise = rng.uniform(-1.0, 1.0)
        adherence_noise = rng.uniform(-10.0, 10.0)

        data_points.append(HealthDataPoint(
            timestamp=now - timedelta(weeks=weeks_back),
            weight=max(100.0, weight + weight_noise - weekly_progress) if weight else None,
            body_fat=max(5.0, body_fat + body_fat_noise - weekly_progress * 0.3) if body_fat else None,
            blood_pressure=patient.blood_pressure,
            adherence=float(np.clip(adherence_base + adherence_noise + weekly_progress * 5, 0, 100)),
            insulin_resistance=patient.insulin_resistance,
            exercise=max(0.0, 150 + rng.uniform(-30.0, 30.0) + weekly_progress * 10),
            steps=max(0.0, 7000 + rng.uniform(-1000.0, 1000.0) + weekly_progress * 500),
            sleep=float(np.clip(7 + rng.uniform(-1.0, 1.0) + weekly_progress * 0.2, 4, 10)),
        ))

    logger.debug(f"Synthesized {len(data_points)} weekly points for patient {getattr(patient, 'id', None)}")
    return data_points
