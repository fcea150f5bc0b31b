"""
Error taxonomy for the request engine.

Every business-rule failure is raised as an ``EngineError`` subclass carrying
an enum code.  The enum values are the wire strings clients already match on,
so they must not change.  ``create_app`` registers a handler that turns these
into ``{"success": false, "error": ..., "code": ...}`` responses.
"""
from enum import Enum


class ErrorCode(str, Enum):
    """Base for code enums; members compare equal to their wire string."""

    def __str__(self):
        return self.value


class RequestErrorCode(ErrorCode):
    MISSING_REQUIRED_FIELDS = 'MISSING_REQUIRED_FIELDS'
    INVALID_FIELD = 'INVALID_FIELD'
    INVALID_EMAIL = 'INVALID_EMAIL'
    INVALID_PHONE = 'INVALID_PHONE'
    INVALID_REQUEST_TYPE = 'INVALID_REQUEST_TYPE'
    INVALID_NUMBER_OF_UNITS = 'INVALID_NUMBER_OF_UNITS'
    INVALID_SERVICE = 'INVALID_SERVICE'
    INVALID_CATEGORY = 'INVALID_CATEGORY'
    INVALID_DATE = 'INVALID_DATE'
    INVALID_PAYMENT_METHOD = 'INVALID_PAYMENT_METHOD'
    INVALID_PAYMENT_STATUS = 'INVALID_PAYMENT_STATUS'
    INVALID_PRICE = 'INVALID_PRICE'
    NOT_QUOTATION_TYPE = 'NOT_QUOTATION_TYPE'
    NO_UPDATE_FIELDS = 'NO_UPDATE_FIELDS'
    MISSING_IDS = 'MISSING_IDS'
    INVALID_IDS = 'INVALID_IDS'
    NO_REQUESTS_FOUND = 'NO_REQUESTS_FOUND'
    SERVICE_REQUEST_NOT_FOUND = 'SERVICE_REQUEST_NOT_FOUND'
    VENDOR_NOT_FOUND = 'VENDOR_NOT_FOUND'
    VENDOR_NOT_ELIGIBLE = 'VENDOR_NOT_ELIGIBLE'
    UNAUTHORIZED_ACCESS = 'UNAUTHORIZED_ACCESS'
    INVALID_DAY_OF_WEEK = 'INVALID_DAY_OF_WEEK'
    INVALID_START_TIME = 'INVALID_START_TIME'
    INVALID_END_TIME = 'INVALID_END_TIME'
    INVALID_UNAVAILABLE_DATES = 'INVALID_UNAVAILABLE_DATES'
    INVALID_DATE_FORMAT = 'INVALID_DATE_FORMAT'


class PricingErrorCode(ErrorCode):
    SERVICE_NO_SUBSERVICES = 'SERVICE_NO_SUBSERVICES'
    INVALID_SUBSERVICE_NAME = 'INVALID_SUBSERVICE_NAME'
    SUBSERVICE_NOT_FOUND = 'SUBSERVICE_NOT_FOUND'
    INVALID_SUBSERVICE_QUANTITY = 'INVALID_SUBSERVICE_QUANTITY'
    INVALID_SUBSERVICES_PRICING = 'INVALID_SUBSERVICES_PRICING'
    MISSING_TIME_BASED_TIER = 'MISSING_TIME_BASED_TIER'
    INVALID_SERVICE_PRICE = 'INVALID_SERVICE_PRICE'
    INVALID_UNIT_TYPE = 'INVALID_UNIT_TYPE'
    INSUFFICIENT_ADVANCE_TIME = 'INSUFFICIENT_ADVANCE_TIME'
    INVALID_DURATION_TYPE = 'INVALID_DURATION_TYPE'
    INVALID_DURATION = 'INVALID_DURATION'
    INVALID_NUMBER_OF_PERSONS = 'INVALID_NUMBER_OF_PERSONS'


class MilestoneErrorCode(ErrorCode):
    INVALID_MILESTONES = 'INVALID_MILESTONES'
    INVALID_TOTAL_PRICE = 'INVALID_TOTAL_PRICE'
    MILESTONE_AMOUNT_EXCEEDS_TOTAL = 'MILESTONE_AMOUNT_EXCEEDS_TOTAL'
    MILESTONE_NOT_FOUND = 'MILESTONE_NOT_FOUND'
    MILESTONE_ALREADY_PAID = 'MILESTONE_ALREADY_PAID'
    INVALID_COMPLETION_STATUS = 'INVALID_COMPLETION_STATUS'


class LifecycleErrorCode(ErrorCode):
    INVALID_STATUS = 'INVALID_STATUS'
    INVALID_STATUS_TRANSITION = 'INVALID_STATUS_TRANSITION'
    VENDOR_REQUIRED = 'VENDOR_REQUIRED'
    REQUEST_NOT_EDITABLE = 'REQUEST_NOT_EDITABLE'
    REQUEST_NOT_CANCELLABLE = 'REQUEST_NOT_CANCELLABLE'
    REQUEST_NOT_DELETABLE = 'REQUEST_NOT_DELETABLE'


class IneligibilityReason(ErrorCode):
    NOT_APPROVED = 'NOT_APPROVED'
    BLOCKED = 'BLOCKED'
    NO_PRIMARY_SERVICE = 'NO_PRIMARY_SERVICE'
    SERVICE_MISMATCH = 'SERVICE_MISMATCH'
    UNAVAILABLE_DATE = 'UNAVAILABLE_DATE'
    NO_SCHEDULE_FOR_DAY = 'NO_SCHEDULE_FOR_DAY'
    OUTSIDE_WORKING_HOURS = 'OUTSIDE_WORKING_HOURS'


class EngineError(Exception):
    """Base class for all business-rule failures."""

    status_code = 400

    def __init__(self, code, message, status_code=None, details=None):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        payload = {
            'success': False,
            'error': self.message,
            'code': str(self.code),
        }
        if self.details:
            payload['details'] = self.details
        return payload

    def __repr__(self):
        return f'<{type(self).__name__} {self.code}: {self.message}>'


class RequestValidationError(EngineError):
    pass


class NotFoundError(EngineError):
    status_code = 404


class OwnershipError(EngineError):
    status_code = 403

    def __init__(self, message='You are not allowed to access this service request'):
        super().__init__(RequestErrorCode.UNAUTHORIZED_ACCESS, message)


class PricingError(EngineError):
    pass


class MilestoneError(EngineError):
    pass


class LifecycleError(EngineError):
    pass


class EligibilityError(EngineError):
    """Raised when an operator assigns a vendor that fails the matcher."""

    def __init__(self, reason, message=None):
        super().__init__(
            RequestErrorCode.VENDOR_NOT_ELIGIBLE,
            message or f'Vendor is not eligible for this request ({reason})',
            details={'reason': str(reason)},
        )
        self.reason = reason
