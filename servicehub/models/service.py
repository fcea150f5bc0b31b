"""Catalog service definition"""
from sqlalchemy import Column, String, Boolean, Float, Integer, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import validates

from servicehub import db
from .base import generate_uuid, utcnow

UNIT_TYPES = ("per_unit", "per_hour")


class Service(db.Model):
    """
    A bookable service.

    ``sub_services`` holds ``{"name", "rate", "max", "items"}`` entries and
    ``time_based_pricing`` holds ``{"hours", "price"}`` package tiers.
    A ``per_hour`` service with all three rates set is priced by
    rate * duration * persons instead.
    """
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)

    # Pricing
    unit_type = Column(String(20), nullable=False, default="per_unit")
    base_price = Column(Float, nullable=True)
    min_advance_hours = Column(Integer, nullable=True)
    discount_percentage = Column(Float, nullable=True)
    sub_services = Column(JSON, nullable=True, default=list)
    time_based_pricing = Column(JSON, nullable=True, default=list)
    per_hour_rate = Column(Float, nullable=True)
    per_day_rate = Column(Float, nullable=True)
    per_month_rate = Column(Float, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    category = db.relationship("Category", back_populates="services")
    banners = db.relationship("Banner", back_populates="service", lazy="dynamic")

    @validates("sub_services")
    def validate_sub_services(self, key, value):
        seen = set()
        for entry in value or []:
            name = str(entry.get("name") or "").strip()
            if not name:
                raise ValueError("Sub-service name is required")
            if name.lower() in seen:
                raise ValueError(f"Duplicate sub-service name: {name}")
            seen.add(name.lower())
            if float(entry.get("rate") or 0) < 0:
                raise ValueError(f"Sub-service rate must be >= 0: {name}")
        return value

    @validates("time_based_pricing")
    def validate_time_based_pricing(self, key, value):
        hours = [tier.get("hours") for tier in value or []]
        if len(hours) != len(set(hours)):
            raise ValueError("Time based pricing tiers must have unique hours")
        for h in hours:
            if not isinstance(h, int) or h <= 0:
                raise ValueError("Time based pricing hours must be positive integers")
        for tier in value or []:
            try:
                price = float(tier["price"])
            except (KeyError, TypeError, ValueError):
                raise ValueError(f"Time based pricing tier for {tier.get('hours')}h needs a numeric price") from None
            if price < 0:
                raise ValueError(f"Time based pricing price must be >= 0 ({tier.get('hours')}h)")
        return value

    @validates("per_hour_rate", "per_day_rate", "per_month_rate")
    def validate_rates(self, key, value):
        if value is not None and value < 0:
            raise ValueError(f"{key} must be >= 0")
        return value

    @validates("discount_percentage")
    def validate_discount_percentage(self, key, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError("Discount percentage must be between 0 and 100")
        return value

    @validates("unit_type")
    def validate_unit_type(self, key, value):
        if value not in UNIT_TYPES:
            raise ValueError(f"Unit type must be one of {', '.join(UNIT_TYPES)}")
        return value

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category_id": self.category_id,
            "unit_type": self.unit_type,
            "base_price": self.base_price,
            "min_advance_hours": self.min_advance_hours,
            "discount_percentage": self.discount_percentage,
            "sub_services": self.sub_services or [],
            "time_based_pricing": self.time_based_pricing or [],
            "per_hour_rate": self.per_hour_rate,
            "per_day_rate": self.per_day_rate,
            "per_month_rate": self.per_month_rate,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f'<Service {self.name}>'
