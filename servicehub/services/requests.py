"""
Service request operations.

Every entry point that creates or edits a request prices it through
``resolve_price`` followed by ``resolve_discount``, so a booking costs the
same whether it came from the public form, the admin panel or a customer
edit.  All validation happens before anything is written; notifications go
out after the commit and never fail the operation.
"""
import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from servicehub import db, notifications
from servicehub.errors import (
    EligibilityError,
    IneligibilityReason,
    MilestoneError,
    MilestoneErrorCode,
    NotFoundError,
    OwnershipError,
    RequestErrorCode,
    PricingError,
    PricingErrorCode,
    RequestValidationError,
)
from servicehub.models import Category, Service, ServiceRequest, Vendor
from servicehub.models.base import as_utc, utcnow
from servicehub.models.service_request import PAYMENT_STATUSES, REQUEST_TYPES
from servicehub.services import lifecycle
from servicehub.services.discounts import resolve_discount
from servicehub.services.eligibility import (
    EligibilityResult,
    available_slots,
    check_vendor_eligibility,
    local_datetime,
    validate_schedule,
    validate_unavailable_dates,
)
from servicehub.services.milestones import (
    COMPLETION_STATUSES,
    allocate_milestones,
    plan_for_total,
    reallocate_amounts,
)
from servicehub.services.pricing import (
    check_advance_notice,
    resolve_price,
    round_money,
    to_decimal,
)
from servicehub.utils.helpers import parse_date, parse_datetime, to_db_datetime
from servicehub.utils.validators import (
    is_positive_int,
    normalize_payment_method,
    validate_email,
    validate_phone,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "user_name",
    "user_phone",
    "user_email",
    "address",
    "service_id",
    "category_id",
    "request_type",
    "requested_date",
)
EDITABLE_FIELDS = (
    "user_name",
    "address",
    "message",
    "requested_date",
    "number_of_units",
    "payment_method",
    "selected_sub_services",
    "duration_type",
    "duration",
    "number_of_persons",
)
TEXT_FIELDS = ("user_name", "user_phone", "user_email", "address")
RATE_FIELDS = ("duration_type", "duration", "number_of_persons")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _timezone():
    return current_app.config.get("BUSINESS_TIMEZONE", "UTC")


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _invalid(code, message, details=None):
    return RequestValidationError(code, message, details=details)


def _text(value, field):
    """Strip a free-text field, rejecting anything that is not a string."""
    if not isinstance(value, str):
        raise _invalid(RequestErrorCode.INVALID_FIELD, f"{field} must be a string", details=[field])
    return value.strip()


def _optional_text(value, field):
    return None if value is None else _text(value, field)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database commit failed")
        raise


def get_request(request_id):
    service_request = db.session.get(ServiceRequest, request_id) if request_id else None
    if service_request is None:
        raise NotFoundError(RequestErrorCode.SERVICE_REQUEST_NOT_FOUND, "Service request not found")
    return service_request


def _get_vendor(vendor_id):
    vendor = db.session.get(Vendor, vendor_id) if vendor_id else None
    if vendor is None:
        raise NotFoundError(RequestErrorCode.VENDOR_NOT_FOUND, "Vendor not found")
    return vendor


def _parse_requested_date(value):
    parsed = parse_datetime(value, _timezone())
    if parsed is None:
        raise _invalid(RequestErrorCode.INVALID_DATE, "requested_date must be a valid ISO date")
    return parsed


def _check_schedule_rules(service, requested_date, now):
    if requested_date < as_utc(now):
        raise _invalid(RequestErrorCode.INVALID_DATE, "Requested date cannot be in the past")
    check_advance_notice(service, requested_date, now)


def _payment_method(value):
    method = normalize_payment_method(value)
    if method is None:
        raise _invalid(
            RequestErrorCode.INVALID_PAYMENT_METHOD,
            "Payment method must be 'Cash On Delivery' or 'Online Payment'",
        )
    return method


def _selections(value):
    if value is None:
        return None
    if not isinstance(value, list):
        raise PricingError(PricingErrorCode.INVALID_SUBSERVICE_NAME, "selected_sub_services must be a list")
    return value


def _question_answers(entries):
    answers = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        question, answer = entry.get("question"), entry.get("answer")
        if _blank(question) or _blank(answer):
            continue
        answers.append({
            "question": str(question).strip(),
            "answer": str(answer).strip(),
            "questionType": entry.get("questionType") or "text",
        })
    return answers


def _money(value):
    return float(round_money(value)) if value is not None else None


def _apply_pricing(service_request, quote, discounted):
    service_request.unit_type = quote.unit_type
    service_request.unit_price = _money(quote.unit_price)
    service_request.total_price = _money(discounted.total)
    service_request.selected_sub_services = quote.line_dicts()
    service_request.duration_type = quote.duration_type
    service_request.duration = quote.duration
    service_request.number_of_persons = quote.number_of_persons
    if discounted.applied:
        service_request.discount_percentage = float(discounted.percentage)
        service_request.discount_amount = _money(discounted.amount)
    else:
        service_request.discount_percentage = None
        service_request.discount_amount = None


def _price(service, request_type, units, selections, rate=None):
    quote = resolve_price(service, request_type, units, selections, **(rate or {}))
    return quote, resolve_discount(service, request_type, quote.total_price)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------
def submit_request(data, admin_id=None, now=None):
    """
    Create a service request.

    Public submissions (``admin_id`` None) must be in the future and respect
    the service's minimum advance notice.  Operator submissions skip both
    checks and record who created the request.

    Returns:
        ServiceRequest: the persisted request
    """
    data = data or {}
    now = now or utcnow()

    missing = [field for field in REQUIRED_FIELDS if _blank(data.get(field))]
    if missing:
        raise _invalid(
            RequestErrorCode.MISSING_REQUIRED_FIELDS,
            f"Missing required fields: {', '.join(missing)}",
            details=missing,
        )
    contact = {field: _text(data[field], field) for field in TEXT_FIELDS}
    message = _optional_text(data.get("message"), "message")
    if not validate_email(data["user_email"]):
        raise _invalid(RequestErrorCode.INVALID_EMAIL, "Please provide a valid email address")
    if not validate_phone(data["user_phone"]):
        raise _invalid(RequestErrorCode.INVALID_PHONE, "Please provide a valid phone number")

    request_type = data["request_type"]
    if request_type not in REQUEST_TYPES:
        raise _invalid(
            RequestErrorCode.INVALID_REQUEST_TYPE,
            f"Request type must be one of: {', '.join(REQUEST_TYPES)}",
        )

    units = data.get("number_of_units", 1)
    if not is_positive_int(units):
        raise _invalid(RequestErrorCode.INVALID_NUMBER_OF_UNITS, "Number of units must be a positive integer")
    units = int(units)

    service = db.session.get(Service, data["service_id"])
    if service is None or not service.is_active:
        raise _invalid(RequestErrorCode.INVALID_SERVICE, "Service not found or inactive")
    category = db.session.get(Category, data["category_id"])
    if category is None or not category.is_active or category.id != service.category_id:
        raise _invalid(RequestErrorCode.INVALID_CATEGORY, "Category not found, inactive or unrelated to the service")

    requested_date = _parse_requested_date(data["requested_date"])
    payment_method = _payment_method(data.get("payment_method"))
    if admin_id is None:
        _check_schedule_rules(service, requested_date, now)

    rate = {field: data.get(field) for field in RATE_FIELDS}
    quote, discounted = _price(service, request_type, units, _selections(data.get("selected_sub_services")), rate)

    milestones = []
    payment_type = None
    if data.get("payment_type") == "milestone":
        milestones = allocate_milestones(data.get("milestones"), discounted.total)
        payment_type = "milestone"
    elif data.get("payment_type") == "full" or payment_method == "Online Payment":
        payment_type = "full"

    service_request = ServiceRequest(
        user_name=contact["user_name"],
        user_phone=contact["user_phone"],
        user_email=contact["user_email"].lower(),
        address=contact["address"],
        service_id=service.id,
        service_name=service.name,
        category_id=category.id,
        category_name=category.name,
        request_type=request_type,
        requested_date=to_db_datetime(requested_date),
        message=message,
        number_of_units=units,
        currency=current_app.config.get("CURRENCY", "AED"),
        question_answers=_question_answers(data.get("question_answers")) if request_type == "Quotation" else [],
        status=lifecycle.RequestStatus.PENDING.value,
        payment_method=payment_method,
        payment_status="Pending" if payment_method == "Online Payment" else None,
        payment_type=payment_type,
        milestones=milestones,
        require_sequential_payment=bool(data.get("require_sequential_payment", True)),
        created_by_admin_id=admin_id,
    )
    _apply_pricing(service_request, quote, discounted)

    db.session.add(service_request)
    _commit()
    logger.info(
        "Service request %s created (%s, %s, total=%s, by_admin=%s)",
        service_request.id, service.name, request_type, service_request.total_price, bool(admin_id),
    )

    notifications.dispatch("created", service_request)
    return service_request


# ---------------------------------------------------------------------------
# Customer self-service
# ---------------------------------------------------------------------------
def _own_request(request_id, identity):
    service_request = get_request(request_id)
    if not lifecycle.owns_request(identity, service_request):
        logger.warning("User %s denied access to request %s", getattr(identity, "id", None), request_id)
        raise OwnershipError()
    return service_request


def update_own_request(request_id, identity, data, now=None):
    """
    Edit a Pending request owned by *identity*.

    Changing the units or sub-services re-prices the request against the
    current catalog, including the current discount.
    """
    data = data or {}
    now = now or utcnow()
    service_request = _own_request(request_id, identity)
    lifecycle.ensure_editable(service_request.status)

    supplied = [field for field in EDITABLE_FIELDS if field in data]
    if not supplied:
        raise _invalid(
            RequestErrorCode.NO_UPDATE_FIELDS,
            f"Provide at least one of: {', '.join(EDITABLE_FIELDS)}",
        )

    changes = {}
    for field in ("user_name", "address"):
        if field in data:
            if _blank(data[field]):
                raise _invalid(RequestErrorCode.MISSING_REQUIRED_FIELDS, f"{field} cannot be empty")
            changes[field] = _text(data[field], field)
    if "message" in data:
        changes["message"] = _optional_text(data["message"], "message")

    service = service_request.service
    if "requested_date" in data:
        requested_date = _parse_requested_date(data["requested_date"])
        if service is not None:
            _check_schedule_rules(service, requested_date, now)
        elif requested_date < as_utc(now):
            raise _invalid(RequestErrorCode.INVALID_DATE, "Requested date cannot be in the past")
        changes["requested_date"] = to_db_datetime(requested_date)

    if "payment_method" in data:
        changes["payment_method"] = _payment_method(data["payment_method"])

    pricing = None
    if any(field in data for field in ("number_of_units", "selected_sub_services") + RATE_FIELDS):
        if service is None or not service.is_active:
            raise _invalid(RequestErrorCode.INVALID_SERVICE, "Service not found or inactive")
        units = data.get("number_of_units", service_request.number_of_units)
        if not is_positive_int(units):
            raise _invalid(RequestErrorCode.INVALID_NUMBER_OF_UNITS, "Number of units must be a positive integer")
        changes["number_of_units"] = int(units)
        if "selected_sub_services" in data:
            selections = _selections(data["selected_sub_services"])
        else:
            selections = [
                {"name": line["name"], "quantity": line["quantity"]}
                for line in service_request.selected_sub_services or []
            ]
        rate = {field: data.get(field, getattr(service_request, field)) for field in RATE_FIELDS}
        pricing = _price(service, service_request.request_type, int(units), selections, rate)

    for field, value in changes.items():
        setattr(service_request, field, value)
    if pricing is not None:
        _apply_pricing(service_request, *pricing)
        service_request.milestones = reallocate_amounts(service_request.milestones, to_decimal(service_request.total_price))
    if "payment_method" in changes and changes["payment_method"] == "Online Payment" and not service_request.payment_status:
        service_request.payment_status = "Pending"

    _commit()
    logger.info("Service request %s updated by owner (%s)", service_request.id, ", ".join(sorted(changes)))
    return service_request


def cancel_own_request(request_id, identity):
    service_request = _own_request(request_id, identity)
    lifecycle.ensure_cancellable(service_request.status)

    old_status = service_request.status
    service_request.status = lifecycle.RequestStatus.CANCELLED.value
    _commit()
    logger.info("Service request %s cancelled by owner", service_request.id)

    notifications.dispatch("status_changed", service_request, old_status=old_status)
    return service_request


def delete_own_request(request_id, identity):
    service_request = _own_request(request_id, identity)
    lifecycle.ensure_deletable(service_request.status)

    db.session.delete(service_request)
    _commit()
    logger.info("Service request %s deleted by owner", request_id)


# ---------------------------------------------------------------------------
# Operator actions
# ---------------------------------------------------------------------------
def vendor_eligibility(service_request, vendor):
    """Run the eligibility matcher for *vendor* against *service_request*."""
    if service_request.service is None:
        return EligibilityResult(False, IneligibilityReason.SERVICE_MISMATCH)
    when = local_datetime(service_request.requested_date, _timezone()) if service_request.requested_date else None
    return check_vendor_eligibility(vendor, service_request.service, service_request.request_type, when)


def update_status(request_id, status=None, vendor_id=None, force=False):
    """
    Change a request's status and/or vendor.

    A vendor on a Pending request with no explicit status moves it to
    Assigned.  Vendors must pass the eligibility matcher unless ``force``.
    """
    if _blank(status) and _blank(vendor_id):
        raise _invalid(RequestErrorCode.MISSING_REQUIRED_FIELDS, "Provide a status or a vendor_id")
    if not _blank(status):
        lifecycle.parse_status(status)
    else:
        status = None

    service_request = get_request(request_id)
    old_status, old_vendor_id = service_request.status, service_request.vendor_id

    vendor = None
    if not _blank(vendor_id):
        vendor = _get_vendor(vendor_id)
        if not force:
            result = vendor_eligibility(service_request, vendor)
            if not result.eligible:
                logger.warning(
                    "Vendor %s rejected for request %s: %s", vendor.id, service_request.id, result.reason,
                )
                raise EligibilityError(result.reason)
        new_status, new_vendor_id = lifecycle.assign_vendor(
            service_request.status, vendor.id, status, service_request.is_quotation,
        )
    else:
        new_status = lifecycle.transition(
            service_request.status, status, service_request.vendor_id, service_request.is_quotation,
        )
        new_vendor_id = service_request.vendor_id

    service_request.status = str(new_status)
    service_request.vendor_id = new_vendor_id
    _commit()
    logger.info(
        "Service request %s: status %s -> %s, vendor %s -> %s",
        service_request.id, old_status, service_request.status, old_vendor_id, new_vendor_id,
    )

    if vendor is not None and new_vendor_id != old_vendor_id:
        notifications.dispatch("assigned", service_request, vendor=vendor)
    if service_request.status != old_status:
        notifications.dispatch("status_changed", service_request, old_status=old_status)
    return service_request


def assign_vendor(request_id, vendor_id, force=False):
    """Attach *vendor_id* to a request; Pending requests become Assigned."""
    if _blank(request_id) or _blank(vendor_id):
        raise _invalid(RequestErrorCode.MISSING_REQUIRED_FIELDS, "request_id and vendor_id are required")
    return update_status(request_id, vendor_id=vendor_id, force=force)


def list_eligible_vendors(request_id):
    """Return ``(vendor, EligibilityResult)`` for every vendor, eligible first."""
    service_request = get_request(request_id)
    vendors = Vendor.query.order_by(Vendor.created_at.asc()).all()
    results = [(vendor, vendor_eligibility(service_request, vendor)) for vendor in vendors]
    results.sort(key=lambda pair: not pair[1].eligible)
    return service_request, results


def quote_request(request_id, total_price, unit_price=None, status=None, admin_notes=None):
    """Price a Quotation request; moves it to Quoted unless told otherwise."""
    service_request = get_request(request_id)
    if not service_request.is_quotation:
        raise _invalid(RequestErrorCode.NOT_QUOTATION_TYPE, "Only quotation requests can be priced manually")

    total = to_decimal(total_price)
    if total is None or total <= 0:
        raise _invalid(RequestErrorCode.INVALID_PRICE, "Total price must be greater than 0")
    unit = to_decimal(unit_price) if unit_price not in (None, "") else total
    if unit is None or unit <= 0:
        raise _invalid(RequestErrorCode.INVALID_PRICE, "Unit price must be greater than 0")
    admin_notes = _optional_text(admin_notes, "admin_notes")

    old_status = service_request.status
    target = lifecycle.transition(
        old_status, status or lifecycle.RequestStatus.QUOTED.value, service_request.vendor_id, True,
    )

    service_request.unit_price = _money(unit)
    service_request.total_price = _money(total)
    service_request.milestones = reallocate_amounts(service_request.milestones, round_money(total))
    service_request.status = str(target)
    if admin_notes:
        note = f"[Admin Notes] {admin_notes}"
        service_request.message = f"{service_request.message}\n\n{note}" if service_request.message else note

    _commit()
    logger.info("Quotation %s priced at %s", service_request.id, service_request.total_price)

    notifications.dispatch("quoted", service_request)
    return service_request


def record_payment_status(request_id, payment_status, details=None):
    """Record the outcome reported by the payment subsystem."""
    if payment_status not in PAYMENT_STATUSES:
        raise _invalid(
            RequestErrorCode.INVALID_PAYMENT_STATUS,
            f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}",
        )
    service_request = get_request(request_id)

    changed = service_request.payment_status != payment_status
    service_request.payment_status = payment_status
    if details:
        service_request.payment_details = {**(service_request.payment_details or {}), **details}

    _commit()
    logger.info("Service request %s payment status: %s", service_request.id, payment_status)

    if changed:
        notifications.dispatch("payment_status_changed", service_request)
    return service_request


def delete_request(request_id):
    """Operator delete; allowed in any status."""
    service_request = get_request(request_id)
    db.session.delete(service_request)
    _commit()
    logger.info("Service request %s deleted by operator", request_id)


def bulk_delete_requests(ids):
    """
    Delete several requests at once.

    Returns:
        dict: ``deleted_count`` and the ``not_found`` ids
    """
    if not isinstance(ids, list) or not ids:
        raise _invalid(RequestErrorCode.MISSING_IDS, "Provide a non-empty list of ids")
    if not all(isinstance(i, str) and i.strip() for i in ids):
        raise _invalid(RequestErrorCode.INVALID_IDS, "Every id must be a non-empty string")

    found = ServiceRequest.query.filter(ServiceRequest.id.in_(ids)).all()
    if not found:
        raise NotFoundError(RequestErrorCode.NO_REQUESTS_FOUND, "No service requests found for the given ids")

    found_ids = {sr.id for sr in found}
    for service_request in found:
        db.session.delete(service_request)
    _commit()
    logger.info("Bulk deleted %d service request(s)", len(found))

    return {
        "deleted_count": len(found),
        "not_found": [i for i in ids if i not in found_ids],
    }


def get_order_details(request_id):
    """Full view of a request with its service, category and vendor."""
    service_request = get_request(request_id)
    details = service_request.to_dict()
    details["service"] = service_request.service.to_dict() if service_request.service else None
    details["category"] = service_request.category.to_dict() if service_request.category else None
    details["vendor"] = service_request.vendor.to_dict() if service_request.vendor else None

    subtotal = None
    if service_request.total_price is not None:
        subtotal = service_request.total_price + (service_request.discount_amount or 0)
    details["pricing"] = {
        "unit_type": service_request.unit_type,
        "unit_price": service_request.unit_price,
        "number_of_units": service_request.number_of_units,
        "subtotal": round(subtotal, 2) if subtotal is not None else None,
        "discount_percentage": service_request.discount_percentage,
        "discount_amount": service_request.discount_amount,
        "total_price": service_request.total_price,
        "currency": service_request.currency,
    }
    return details


# ---------------------------------------------------------------------------
# Milestone plans
# ---------------------------------------------------------------------------
MILESTONE_FIELDS = ("name", "description", "due_date", "completion_status")


def _milestone_index(milestones, milestone_id):
    for index, milestone in enumerate(milestones):
        if milestone.get("id") == milestone_id:
            return index
    raise NotFoundError(MilestoneErrorCode.MILESTONE_NOT_FOUND, "Milestone not found")


def create_milestone_plan(request_id, entries, require_sequential=None):
    """
    Attach a milestone plan to an existing request, replacing any unpaid plan.

    Entries give either a ``percentage`` or a fixed ``amount`` of the
    request total.  The request moves to the ``milestone`` payment type.
    """
    service_request = get_request(request_id)
    total = to_decimal(service_request.total_price)
    if total is None or total <= 0:
        raise MilestoneError(
            MilestoneErrorCode.INVALID_TOTAL_PRICE,
            "The request needs a total price before milestones can be planned",
        )
    if any(m.get("payment_status") == "Success" for m in service_request.milestones or []):
        raise MilestoneError(
            MilestoneErrorCode.MILESTONE_ALREADY_PAID,
            "The current plan has paid milestones and cannot be replaced",
        )

    service_request.milestones = plan_for_total(entries, total)
    service_request.payment_type = "milestone"
    service_request.require_sequential_payment = True if require_sequential is None else bool(require_sequential)

    _commit()
    logger.info(
        "Milestone plan set on %s (%d milestones, total=%s)",
        service_request.id, len(service_request.milestones), service_request.total_price,
    )
    return service_request


def update_milestone(request_id, milestone_id, data):
    """
    Edit one milestone's name, description, due date or completion status.

    Returns:
        tuple: ``(service_request, milestone)``
    """
    data = data or {}
    service_request = get_request(request_id)
    milestones = [dict(m) for m in service_request.milestones or []]
    milestone = milestones[_milestone_index(milestones, milestone_id)]

    if not any(field in data for field in MILESTONE_FIELDS):
        raise _invalid(
            RequestErrorCode.NO_UPDATE_FIELDS,
            f"Provide at least one of: {', '.join(MILESTONE_FIELDS)}",
        )

    if "name" in data:
        if _blank(data["name"]):
            raise MilestoneError(MilestoneErrorCode.INVALID_MILESTONES, "Milestone name cannot be empty")
        milestone["name"] = _text(data["name"], "name")
    if "description" in data:
        milestone["description"] = _optional_text(data["description"], "description") or None
    if "due_date" in data:
        if _blank(data["due_date"]):
            milestone["due_date"] = None
        else:
            due = parse_datetime(data["due_date"], _timezone())
            if due is None:
                raise _invalid(RequestErrorCode.INVALID_DATE, "due_date must be a valid ISO date")
            milestone["due_date"] = due.isoformat()
    if "completion_status" in data:
        status = data["completion_status"]
        if not isinstance(status, str) or status not in COMPLETION_STATUSES:
            raise MilestoneError(
                MilestoneErrorCode.INVALID_COMPLETION_STATUS,
                f"Completion status must be one of: {', '.join(COMPLETION_STATUSES)}",
            )
        milestone["completion_status"] = status
        milestone["completed_at"] = utcnow().isoformat() if status == "Completed" else None

    service_request.milestones = milestones
    _commit()
    logger.info("Milestone %s on %s updated", milestone_id, service_request.id)
    return service_request, milestone


def delete_milestone(request_id, milestone_id):
    """Remove an unpaid milestone from a request's plan."""
    service_request = get_request(request_id)
    milestones = list(service_request.milestones or [])
    index = _milestone_index(milestones, milestone_id)
    if milestones[index].get("payment_status") == "Success":
        raise MilestoneError(MilestoneErrorCode.MILESTONE_ALREADY_PAID, "Paid milestones cannot be deleted")

    milestones.pop(index)
    service_request.milestones = milestones
    if not milestones:
        service_request.payment_type = "full" if service_request.payment_method == "Online Payment" else None

    _commit()
    logger.info("Milestone %s removed from %s", milestone_id, service_request.id)
    return service_request


# ---------------------------------------------------------------------------
# Vendor calendar
# ---------------------------------------------------------------------------
def update_vendor_availability(vendor_id, schedule=None, unavailable_dates=None):
    vendor = _get_vendor(vendor_id)
    if schedule is None and unavailable_dates is None:
        raise _invalid(
            RequestErrorCode.NO_UPDATE_FIELDS,
            "Provide availability_schedule and/or unavailable_dates",
        )

    cleaned_schedule = validate_schedule(schedule) if schedule is not None else None
    cleaned_dates = validate_unavailable_dates(unavailable_dates) if unavailable_dates is not None else None

    if cleaned_schedule is not None:
        vendor.availability_schedule = cleaned_schedule
    if cleaned_dates is not None:
        vendor.unavailable_dates = cleaned_dates
    _commit()
    logger.info("Vendor %s availability updated", vendor.id)
    return vendor


def vendor_slots(vendor_id, day):
    vendor = _get_vendor(vendor_id)
    parsed = parse_date(day)
    if parsed is None:
        raise _invalid(RequestErrorCode.INVALID_DATE_FORMAT, "date must use the YYYY-MM-DD format")
    return vendor, parsed, available_slots(vendor, parsed)
