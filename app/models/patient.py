from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text
from sqlalchemy.sql import func
from app.database import Base


class Patient(Base):
    """Current health snapshot of a patient; predictions are derived from it"""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    age = Column(Integer, nullable=False)

    weight = Column(Numeric(5, 2), nullable=False)  # lbs
    weight_goal = Column(Numeric(5, 2), nullable=False)
    body_fat = Column(Numeric(4, 1), nullable=False)  # %
    body_fat_goal = Column(Numeric(4, 1), nullable=False)
    insulin_resistance = Column(Boolean, nullable=False, default=False)
    blood_pressure = Column(String, nullable=False)  # "SYS/DIA"
    blood_sugar = Column(String, nullable=False, default="Normal")
    adherence = Column(Integer, nullable=False, default=0)  # % of plan followed

    last_visit = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
