"""Vendor profile model"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON

from servicehub import db
from .base import generate_uuid, utcnow, isoformat


class Vendor(db.Model):
    """
    A service provider that requests can be assigned to.

    ``availability_schedule`` is a list of ``{"dayOfWeek", "startTime",
    "endTime"}`` entries; ``unavailable_dates`` a list of ``{"date",
    "reason"}`` entries with ``YYYY-MM-DD`` dates.
    """
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(20), nullable=True)
    vendor_type = Column(String(20), nullable=False, default="individual")  # individual, corporate
    approved = Column(Boolean, nullable=False, default=False)
    blocked = Column(Boolean, nullable=False, default=False)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True, index=True)
    availability_schedule = Column(JSON, nullable=True, default=list)
    unavailable_dates = Column(JSON, nullable=True, default=list)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    service = db.relationship("Service", lazy="joined")

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p) or None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "vendor_type": self.vendor_type,
            "approved": self.approved,
            "blocked": self.blocked,
            "service_id": self.service_id,
            "category_id": self.service.category_id if self.service else None,
            "availability_schedule": self.availability_schedule or [],
            "unavailable_dates": self.unavailable_dates or [],
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<Vendor {self.full_name or self.id}>'
