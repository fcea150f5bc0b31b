"""Service request model"""
from sqlalchemy import Column, String, Boolean, Float, Integer, Text, DateTime, ForeignKey, JSON

from servicehub import db
from .base import generate_uuid, utcnow, isoformat

REQUEST_TYPES = ("Quotation", "OnTime", "Scheduled")
PAYMENT_METHODS = ("Cash On Delivery", "Online Payment")
PAYMENT_STATUSES = ("Pending", "Success", "Failure", "Cancelled")


class ServiceRequest(db.Model):
    __tablename__ = "service_requests"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # Contact
    user_name = Column(String(255), nullable=False)
    user_phone = Column(String(20), nullable=False, index=True)
    user_email = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=False)

    # Catalog references
    service_id = Column(String(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True, index=True)
    service_name = Column(String(255), nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    category_name = Column(String(255), nullable=True)

    request_type = Column(String(20), nullable=False)
    requested_date = Column(DateTime, nullable=False)
    message = Column(Text, nullable=True)
    number_of_units = Column(Integer, nullable=False, default=1)

    # Pricing
    unit_type = Column(String(20), nullable=True)
    unit_price = Column(Float, nullable=True)
    total_price = Column(Float, nullable=True)
    discount_percentage = Column(Float, nullable=True)
    discount_amount = Column(Float, nullable=True)
    currency = Column(String(3), nullable=False, default="AED")
    selected_sub_services = Column(JSON, nullable=True, default=list)
    duration_type = Column(String(10), nullable=True)  # hours, days, months
    duration = Column(Integer, nullable=True)
    number_of_persons = Column(Integer, nullable=True)
    question_answers = Column(JSON, nullable=True, default=list)

    # Lifecycle
    status = Column(String(20), nullable=False, default="Pending", index=True)
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_admin_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Payment
    payment_method = Column(String(30), nullable=False, default="Cash On Delivery")
    payment_status = Column(String(20), nullable=True)
    payment_details = Column(JSON, nullable=True)
    payment_type = Column(String(20), nullable=True)  # full, milestone
    milestones = Column(JSON, nullable=True, default=list)
    require_sequential_payment = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    service = db.relationship("Service", lazy="joined")
    category = db.relationship("Category", lazy="joined")
    vendor = db.relationship("Vendor", lazy="joined")

    @property
    def is_quotation(self):
        return self.request_type == "Quotation"

    def to_dict(self):
        return {
            "id": self.id,
            "user_name": self.user_name,
            "user_phone": self.user_phone,
            "user_email": self.user_email,
            "address": self.address,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "request_type": self.request_type,
            "requested_date": isoformat(self.requested_date),
            "message": self.message,
            "number_of_units": self.number_of_units,
            "unit_type": self.unit_type,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "discount_percentage": self.discount_percentage,
            "discount_amount": self.discount_amount,
            "currency": self.currency,
            "selected_sub_services": self.selected_sub_services or [],
            "duration_type": self.duration_type,
            "duration": self.duration,
            "number_of_persons": self.number_of_persons,
            "question_answers": self.question_answers or [],
            "status": self.status,
            "vendor_id": self.vendor_id,
            "created_by_admin_id": self.created_by_admin_id,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "payment_details": self.payment_details,
            "payment_type": self.payment_type,
            "milestones": self.milestones or [],
            "require_sequential_payment": self.require_sequential_payment,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<ServiceRequest {self.id} {self.status}>'
