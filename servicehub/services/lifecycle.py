"""
Service request status lifecycle.

    Pending ──> Assigned ──> Accepted ──> Completed
       │  └──> Quoted ──┘        │
       └──────────┴──────────────┴──> Cancelled

``Quoted`` only exists for Quotation requests and is entered when an
operator prices the quote.  Completed and Cancelled are terminal.
"""
import logging
from enum import Enum

from servicehub.errors import LifecycleError, LifecycleErrorCode

logger = logging.getLogger(__name__)


class RequestStatus(str, Enum):
    PENDING = "Pending"
    QUOTED = "Quoted"
    ASSIGNED = "Assigned"
    ACCEPTED = "Accepted"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    def __str__(self):
        return self.value


TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.ASSIGNED, RequestStatus.QUOTED, RequestStatus.CANCELLED},
    RequestStatus.QUOTED: {RequestStatus.ASSIGNED, RequestStatus.CANCELLED},
    RequestStatus.ASSIGNED: {RequestStatus.ACCEPTED, RequestStatus.CANCELLED},
    RequestStatus.ACCEPTED: {RequestStatus.COMPLETED, RequestStatus.CANCELLED},
    RequestStatus.COMPLETED: set(),
    RequestStatus.CANCELLED: set(),
}

TERMINAL = {RequestStatus.COMPLETED, RequestStatus.CANCELLED}
NEEDS_VENDOR = {RequestStatus.ASSIGNED, RequestStatus.ACCEPTED, RequestStatus.COMPLETED}
# States a vendor can be attached or swapped in
ASSIGNABLE = {RequestStatus.PENDING, RequestStatus.QUOTED, RequestStatus.ASSIGNED}


def parse_status(value):
    """Return the ``RequestStatus`` for *value* or raise INVALID_STATUS."""
    try:
        return RequestStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in RequestStatus)
        raise LifecycleError(
            LifecycleErrorCode.INVALID_STATUS,
            f"Invalid status '{value}'. Valid statuses are: {valid}",
        ) from None


def can_transition(current, target):
    current, target = RequestStatus(current), RequestStatus(target)
    if current == target:
        return current not in TERMINAL
    return target in TRANSITIONS[current]


def transition(current, target, vendor_id=None, is_quotation=False):
    """
    Validate moving from *current* to *target*.

    Returns the target ``RequestStatus``.
    """
    current = RequestStatus(current)
    target = parse_status(target)

    if target == RequestStatus.QUOTED and not is_quotation:
        raise LifecycleError(
            LifecycleErrorCode.INVALID_STATUS_TRANSITION,
            "Only quotation requests can be marked as Quoted",
        )
    if not can_transition(current, target):
        raise LifecycleError(
            LifecycleErrorCode.INVALID_STATUS_TRANSITION,
            f"Cannot change status from {current} to {target}",
        )
    if target in NEEDS_VENDOR and not vendor_id:
        raise LifecycleError(
            LifecycleErrorCode.VENDOR_REQUIRED,
            f"A vendor must be assigned before the request can be {target}",
        )
    return target


def assign_vendor(current, vendor_id, requested_status=None, is_quotation=False):
    """
    Attach a vendor, promoting the status where the lifecycle allows.

    A vendor on a Pending (or Quoted) request with no explicit status, or an
    explicit status equal to the current one, moves the request to Assigned.
    An explicit different status is validated against the transition table.

    Returns:
        tuple: (new status, vendor id)
    """
    current = RequestStatus(current)
    if requested_status is not None and parse_status(requested_status) != current:
        return transition(current, requested_status, vendor_id, is_quotation), vendor_id

    if current not in ASSIGNABLE:
        raise LifecycleError(
            LifecycleErrorCode.INVALID_STATUS_TRANSITION,
            f"Cannot assign a vendor to a {current} request",
        )
    if current in (RequestStatus.PENDING, RequestStatus.QUOTED):
        return RequestStatus.ASSIGNED, vendor_id
    return current, vendor_id


def _guard(status, code, action):
    status = RequestStatus(status)
    if status != RequestStatus.PENDING:
        raise LifecycleError(
            code,
            f"Request cannot be {action} because its status is {status}. "
            f"Only Pending requests can be {action}.",
        )


def ensure_editable(status):
    _guard(status, LifecycleErrorCode.REQUEST_NOT_EDITABLE, "edited")


def ensure_cancellable(status):
    _guard(status, LifecycleErrorCode.REQUEST_NOT_CANCELLABLE, "cancelled")


def ensure_deletable(status):
    _guard(status, LifecycleErrorCode.REQUEST_NOT_DELETABLE, "deleted")


def owns_request(identity, service_request):
    """
    True when *identity* (a ``User``) is the request's contact.

    Email matches case-insensitively; phone matches exactly.
    """
    if identity is None:
        return False
    email = (identity.email or "").strip().lower()
    if email and email == (service_request.user_email or "").strip().lower():
        return True
    phone = (identity.phone or "").strip()
    return bool(phone) and phone == (service_request.user_phone or "").strip()
