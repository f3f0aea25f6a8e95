from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Float, JSON
from sqlalchemy.sql import func
from telecare.db.base import Base


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    specialty = Column(String, nullable=False, index=True)  # e.g., "Cardiology", "General Medicine"
    specialties = Column(JSON, nullable=True)  # secondary specialties
    bio = Column(Text, nullable=True)
    city = Column(String, nullable=True, index=True)

    rating = Column(Float, nullable=True)  # 0-5
    total_reviews = Column(Integer, default=0)
    consultation_price = Column(Float, nullable=True)
    teleconsultation_price = Column(Float, nullable=True)

    accepts_teleconsultation = Column(Boolean, default=False)
    is_verified = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
