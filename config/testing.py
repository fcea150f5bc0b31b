"""
Testing configuration for the ServiceHub backend
"""
import os
from config.settings import Config


class TestingConfig(Config):
    """Testing configuration with isolated database and safe defaults"""

    TESTING = True
    DEBUG = False

    # Use in-memory SQLite for fast tests
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'TEST_DATABASE_URL',
        'sqlite:///:memory:'
    )

    SECRET_KEY = 'test-secret-key'
    JWT_SECRET = 'test-jwt-secret'

    # Never talk to Resend or Twilio from tests
    NOTIFICATIONS_ENABLED = False
    ADMIN_EMAIL = 'ops@servicehub.test'
    RESEND_API_KEY = ''
    TWILIO_ACCOUNT_SID = ''

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'

    SENTRY_DSN = None

    # Logging
    LOG_LEVEL = 'WARNING'

    CORS_ORIGINS = ['http://localhost:5173', 'http://localhost:3000']
