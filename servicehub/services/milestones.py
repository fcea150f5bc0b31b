"""Milestone payment plans"""
from decimal import Decimal

from servicehub.errors import MilestoneError, MilestoneErrorCode
from servicehub.models.base import generate_uuid
from servicehub.services.pricing import round_money, to_decimal

HUNDRED = Decimal("100")
TOLERANCE = Decimal("0.01")
MIN_MILESTONES = 2
COMPLETION_STATUSES = ("NotStarted", "InProgress", "Completed")


def validate_milestones(entries):
    """Return a list of every problem with *entries*; empty when valid."""
    problems = []
    if not isinstance(entries, list) or len(entries) < MIN_MILESTONES:
        return [f"At least {MIN_MILESTONES} milestones are required"]

    total = Decimal("0")
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            problems.append(f"Milestone {index} must be an object")
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            problems.append(f"Milestone {index} must have a name")
        percentage = to_decimal(entry.get("percentage"))
        if percentage is None or percentage <= 0 or percentage > HUNDRED:
            problems.append(f"Milestone {index} percentage must be greater than 0 and at most 100")
        else:
            total += percentage

    if not problems and abs(total - HUNDRED) > TOLERANCE:
        problems.append(f"Milestone percentages must add up to 100 (got {total})")
    return problems


def allocate_milestones(entries, total_price=None):
    """
    Validate a milestone plan and derive per-milestone amounts.

    Percentages are stored as supplied.  Amounts are computed only when the
    request has a total, using half-up rounding to 2 decimals.

    Raises:
        MilestoneError: with every problem listed in ``details``
    """
    problems = validate_milestones(entries)
    if problems:
        raise MilestoneError(
            MilestoneErrorCode.INVALID_MILESTONES,
            problems[0] if len(problems) == 1 else "Milestone plan is invalid",
            details=problems,
        )

    allocated = []
    for index, entry in enumerate(entries):
        percentage = to_decimal(entry["percentage"])
        order = entry.get("order")
        milestone = {
            "id": generate_uuid(),
            "name": entry["name"].strip(),
            "percentage": float(percentage),
            "order": int(order) if isinstance(order, (int, float)) else index + 1,
            "description": entry.get("description") or None,
            "due_date": entry.get("due_date") or entry.get("dueDate"),
            "payment_status": "Pending",
            "completion_status": "NotStarted",
        }
        if total_price is not None:
            milestone["amount"] = float(round_money(total_price * percentage / HUNDRED))
        allocated.append(milestone)

    allocated.sort(key=lambda m: m["order"])
    return allocated


def reallocate_amounts(milestones, total_price):
    """Recompute amounts for an already-validated plan after a price change."""
    if not milestones:
        return milestones
    updated = []
    for milestone in milestones:
        milestone = dict(milestone)
        if total_price is None:
            milestone.pop("amount", None)
        else:
            percentage = to_decimal(milestone["percentage"])
            milestone["amount"] = float(round_money(total_price * percentage / HUNDRED))
        updated.append(milestone)
    return updated


def _entry_amount(entry, total_price):
    if not isinstance(entry, dict):
        return None
    amount = to_decimal(entry.get("amount"))
    if amount is not None:
        return amount
    percentage = to_decimal(entry.get("percentage"))
    return total_price * percentage / HUNDRED if percentage is not None else None


def plan_for_total(entries, total_price):
    """
    Build a plan against a known request total.

    Entries may give a ``percentage`` or a fixed ``amount``; amounts are
    converted to percentages of the total before the usual validation.

    Raises:
        MilestoneError: MILESTONE_AMOUNT_EXCEEDS_TOTAL when the entries ask
            for more than the total, otherwise as ``allocate_milestones``
    """
    if isinstance(entries, list):
        requested = sum(
            (amount for amount in (_entry_amount(entry, total_price) for entry in entries) if amount is not None),
            Decimal("0"),
        )
        if requested > total_price + TOLERANCE:
            raise MilestoneError(
                MilestoneErrorCode.MILESTONE_AMOUNT_EXCEEDS_TOTAL,
                f"Milestone amounts ({round_money(requested)}) exceed the request total ({round_money(total_price)})",
            )

        converted = []
        for entry in entries:
            if isinstance(entry, dict) and entry.get("percentage") is None and to_decimal(entry.get("amount")) is not None:
                entry = dict(entry)
                entry["percentage"] = float(
                    (to_decimal(entry["amount"]) * HUNDRED / total_price).quantize(Decimal("0.0001"))
                )
            converted.append(entry)
        entries = converted

    return allocate_milestones(entries, total_price)
