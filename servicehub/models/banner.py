"""Promotional banner model"""
from sqlalchemy import Column, String, Boolean, Float, Integer, DateTime, ForeignKey
from sqlalchemy.orm import validates

from servicehub import db
from .base import generate_uuid, utcnow


class Banner(db.Model):
    __tablename__ = "banners"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=True)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    discount_percentage = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow)

    service = db.relationship("Service", back_populates="banners")

    @validates("discount_percentage")
    def validate_discount_percentage(self, key, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError("Discount percentage must be between 0 and 100")
        return value

    @classmethod
    def first_active_for(cls, service_id):
        return (
            cls.query
            .filter_by(service_id=service_id, is_active=True)
            .order_by(cls.sort_order.asc(), cls.created_at.asc())
            .first()
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "service_id": self.service_id,
            "discount_percentage": self.discount_percentage,
            "is_active": self.is_active,
            "sort_order": self.sort_order,
        }
