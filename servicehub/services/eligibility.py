"""
Vendor eligibility matching.

A vendor may take a request when it is approved and not blocked, its
primary service (or that service's category) matches the request, and for
Scheduled requests its calendar covers the requested local date and time.
Checks short-circuit in that order and the first failure is reported.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional
from zoneinfo import ZoneInfo

from servicehub.errors import IneligibilityReason, RequestErrorCode, RequestValidationError
from servicehub.models.base import as_utc

logger = logging.getLogger(__name__)

# Indexed by date.weekday()
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
VALID_DAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SLOT_MINUTES = 30


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: Optional[IneligibilityReason] = None

    def to_dict(self):
        return {
            "eligible": self.eligible,
            "reason": str(self.reason) if self.reason else None,
        }


ELIGIBLE = EligibilityResult(True)


def parse_clock(value):
    """Parse ``H:MM``/``HH:MM`` into minutes after midnight, or None."""
    if not isinstance(value, str) or not TIME_PATTERN.match(value.strip()):
        return None
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def format_clock(minutes):
    minutes %= 24 * 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def within_window(minute, start, end):
    """Inclusive range check that wraps past midnight when end < start."""
    if end < start:
        return minute >= start or minute <= end
    return start <= minute <= end


def local_datetime(value, timezone_name):
    """Convert a stored UTC datetime into the business timezone."""
    return as_utc(value).astimezone(ZoneInfo(timezone_name))


def is_unavailable_on(vendor, day):
    target = day.isoformat()
    for entry in vendor.unavailable_dates or []:
        raw = entry.get("date") if isinstance(entry, dict) else entry
        if isinstance(raw, str) and raw[:10] == target:
            return True
    return False


def schedule_for(vendor, day):
    """Return the schedule entry for *day*'s weekday, or None."""
    name = WEEKDAY_NAMES[day.weekday()]
    for entry in vendor.availability_schedule or []:
        if entry.get("dayOfWeek") == name:
            return entry
    return None


def matches_service(vendor, service):
    primary = vendor.service
    if primary is None:
        return False
    if primary.id == service.id:
        return True
    return primary.category_id is not None and primary.category_id == service.category_id


def check_vendor_eligibility(vendor, service, request_type, when=None):
    """
    Decide whether *vendor* can be assigned a request for *service*.

    Args:
        vendor: ``Vendor``
        service: the request's catalog ``Service``
        request_type (str): Quotation, OnTime or Scheduled
        when (datetime): requested date in the business timezone

    Returns:
        EligibilityResult
    """
    if not vendor.approved:
        return EligibilityResult(False, IneligibilityReason.NOT_APPROVED)
    if vendor.blocked:
        return EligibilityResult(False, IneligibilityReason.BLOCKED)
    if vendor.service is None:
        return EligibilityResult(False, IneligibilityReason.NO_PRIMARY_SERVICE)
    if not matches_service(vendor, service):
        return EligibilityResult(False, IneligibilityReason.SERVICE_MISMATCH)

    if request_type != "Scheduled" or when is None:
        return ELIGIBLE

    if is_unavailable_on(vendor, when.date()):
        return EligibilityResult(False, IneligibilityReason.UNAVAILABLE_DATE)

    # A vendor with no schedule at all is treated as always available
    if not vendor.availability_schedule:
        return ELIGIBLE

    entry = schedule_for(vendor, when.date())
    if entry is None:
        return EligibilityResult(False, IneligibilityReason.NO_SCHEDULE_FOR_DAY)

    start = parse_clock(entry.get("startTime"))
    end = parse_clock(entry.get("endTime"))
    if start is None or end is None:
        logger.warning("Vendor %s has a malformed schedule entry: %s", vendor.id, entry)
        return EligibilityResult(False, IneligibilityReason.OUTSIDE_WORKING_HOURS)

    if not within_window(when.hour * 60 + when.minute, start, end):
        return EligibilityResult(False, IneligibilityReason.OUTSIDE_WORKING_HOURS)
    return ELIGIBLE


def available_slots(vendor, day):
    """
    List 30-minute slot start times for *day*.

    Slots run from the day's start time up to, but excluding, its end time.
    Unavailable dates and unscheduled weekdays have no slots.
    """
    if is_unavailable_on(vendor, day):
        return []
    entry = schedule_for(vendor, day)
    if entry is None:
        return []
    start = parse_clock(entry.get("startTime"))
    end = parse_clock(entry.get("endTime"))
    if start is None or end is None:
        return []
    if end <= start:
        end += 24 * 60
    return [format_clock(minute) for minute in range(start, end, SLOT_MINUTES)]


def validate_schedule(schedule):
    """Normalise an availability schedule, raising on malformed entries."""
    if not isinstance(schedule, list):
        raise RequestValidationError(
            RequestErrorCode.INVALID_DAY_OF_WEEK,
            "availability_schedule must be a list",
        )
    cleaned = []
    for entry in schedule:
        if not isinstance(entry, dict) or entry.get("dayOfWeek") not in VALID_DAYS:
            raise RequestValidationError(
                RequestErrorCode.INVALID_DAY_OF_WEEK,
                f"dayOfWeek must be one of {', '.join(VALID_DAYS)}",
            )
        if parse_clock(entry.get("startTime")) is None:
            raise RequestValidationError(
                RequestErrorCode.INVALID_START_TIME,
                "startTime must be in HH:MM format",
            )
        if parse_clock(entry.get("endTime")) is None:
            raise RequestValidationError(
                RequestErrorCode.INVALID_END_TIME,
                "endTime must be in HH:MM format",
            )
        cleaned.append({
            "dayOfWeek": entry["dayOfWeek"],
            "startTime": entry["startTime"].strip(),
            "endTime": entry["endTime"].strip(),
        })
    return cleaned


def validate_unavailable_dates(entries):
    """Normalise unavailable dates to ``{"date": "YYYY-MM-DD", "reason"}``."""
    if not isinstance(entries, list):
        raise RequestValidationError(
            RequestErrorCode.INVALID_UNAVAILABLE_DATES,
            "unavailable_dates must be a list",
        )
    cleaned = []
    for entry in entries:
        raw = entry.get("date") if isinstance(entry, dict) else entry
        try:
            if not isinstance(raw, str) or not DATE_PATTERN.match(raw[:10]):
                raise ValueError(raw)
            day = date.fromisoformat(raw[:10])
        except ValueError:
            raise RequestValidationError(
                RequestErrorCode.INVALID_DATE_FORMAT,
                "Unavailable dates must use the YYYY-MM-DD format",
            )
        reason = entry.get("reason") if isinstance(entry, dict) else None
        cleaned.append({"date": day.isoformat(), "reason": reason or None})
    return cleaned

