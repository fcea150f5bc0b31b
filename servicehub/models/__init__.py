"""Database models"""
from .user import User
from .category import Category
from .service import Service
from .banner import Banner
from .vendor import Vendor
from .service_request import ServiceRequest

__all__ = [
    'User',
    'Category',
    'Service',
    'Banner',
    'Vendor',
    'ServiceRequest',
]
