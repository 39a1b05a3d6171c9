from app.models.patient import Patient

__all__ = ["Patient"]
