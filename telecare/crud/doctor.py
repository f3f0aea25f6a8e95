from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_
from telecare.models.doctor import Doctor


class CRUDDoctor:
    """Read-only access to the doctor catalog."""

    def get(self, db: Session, doctor_id: int) -> Optional[Doctor]:
        return db.query(Doctor).filter(Doctor.id == doctor_id).first()

    def search_doctors(
        self,
        db: Session,
        *,
        specialty: Optional[str] = None,
        city: Optional[str] = None,
        min_rating: Optional[float] = None,
        max_price: Optional[float] = None,
        accepts_teleconsultation: Optional[bool] = None,
        limit: int = 50,
    ) -> List[Doctor]:
        query = db.query(Doctor).filter(Doctor.is_active == True)

        if specialty:
            query = query.filter(Doctor.specialty.ilike(f"%{specialty}%"))
        if city:
            query = query.filter(Doctor.city.ilike(f"%{city}%"))
        if min_rating is not None:
            query = query.filter(Doctor.rating >= min_rating)
        if max_price is not None:
            query = query.filter(
                or_(Doctor.consultation_price == None, Doctor.consultation_price <= max_price)
            )
        if accepts_teleconsultation:
            query = query.filter(Doctor.accepts_teleconsultation == True)

        return (
            query.order_by(Doctor.rating.desc(), Doctor.id.asc())
            .limit(limit)
            .all()
        )


doctor = CRUDDoctor()
