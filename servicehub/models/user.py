"""User model (identity only; tokens are issued elsewhere)"""
from sqlalchemy import Column, String, DateTime

from servicehub import db
from .base import generate_uuid, utcnow, isoformat


class User(db.Model):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(20), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="customer")
    status = Column(String(20), nullable=False, default="active")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "phone": self.phone,
            "name": self.name,
            "role": self.role,
            "status": self.status,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email or self.phone}>'
