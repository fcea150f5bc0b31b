"""
Shared Flask extension instances.

Kept in their own module so blueprints can decorate routes with the limiter
before ``create_app`` calls ``init_app``.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage and the enabled flag come from RATELIMIT_* config keys at init_app().
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100 per minute"],
)
