"""
Notification services for ServiceHub.

Email: Resend.
SMS: Twilio.

IMPORTANT: No function in this module should ever raise an exception.
All errors are caught and logged so that a notification failure never
rolls back or fails a service request operation.

Email sending is performed in a background thread so that request handlers
are never blocked by network I/O to the email provider.
"""
import logging
import threading

from flask import current_app

from servicehub.email_templates import (
    request_received_html,
    admin_new_request_html,
    vendor_assigned_html,
    vendor_job_html,
    status_update_html,
    quote_ready_html,
    payment_status_html,
)
from servicehub.utils.helpers import format_currency, short_id

logger = logging.getLogger(__name__)


def _setting(key, default=None):
    return current_app.config.get(key, default)


def _enabled():
    return bool(_setting("NOTIFICATIONS_ENABLED", False))


# ---------------------------------------------------------------------------
# Twilio SMS
# ---------------------------------------------------------------------------
_twilio_client = None


def _get_twilio(account_sid, auth_token):
    """Lazily initialise the Twilio client."""
    global _twilio_client
    if _twilio_client is None and account_sid and auth_token:
        try:
            from twilio.rest import Client
            _twilio_client = Client(account_sid, auth_token)
        except Exception:
            logger.exception("Failed to initialise Twilio client")
    return _twilio_client


def send_sms(to_number, body):
    """Send an SMS via Twilio. Returns message SID or None.

    Never raises. Logs errors and returns None on failure.
    """
    try:
        if not _enabled():
            logger.debug("Notifications disabled; SMS to %s skipped", to_number)
            return None
        client = _get_twilio(_setting("TWILIO_ACCOUNT_SID"), _setting("TWILIO_AUTH_TOKEN"))
        from_number = _setting("TWILIO_FROM_NUMBER")
        if not client or not from_number:
            logger.info("[DEV] SMS to %s: %s", to_number, body)
            return None

        message = client.messages.create(body=body, from_=from_number, to=to_number)
        logger.info("SMS sent to %s (SID: %s)", to_number, message.sid)
        return message.sid
    except Exception:
        logger.exception("Failed to send SMS to %s", to_number)
        return None


# ---------------------------------------------------------------------------
# Email via Resend
# ---------------------------------------------------------------------------
def _send_email_resend(api_key, sender, to_email, subject, html_content):
    """Send via the Resend API. Returns the response id or None."""
    try:
        import resend
        resend.api_key = api_key

        response = resend.Emails.send({
            "from": sender,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        })
        logger.info("Email sent via Resend to %s (id: %s)", to_email, response.get("id"))
        return response.get("id")
    except Exception:
        logger.exception("Resend email failed for %s", to_email)
        return None


def send_email(to_email, subject, html_content):
    """Send an email asynchronously in a background thread.

    Returns immediately. Never raises.
    """
    try:
        if not to_email:
            return
        if not _enabled():
            logger.debug("Notifications disabled; email to %s skipped", to_email)
            return
        api_key = _setting("RESEND_API_KEY")
        if not api_key:
            logger.info("[DEV] Email to %s: %s", to_email, subject)
            return
        sender = "{} <{}>".format(_setting("EMAIL_FROM_NAME"), _setting("EMAIL_FROM"))
        thread = threading.Thread(
            target=_send_email_resend,
            args=(api_key, sender, to_email, subject, html_content),
            daemon=True,
        )
        thread.start()
        logger.debug("Email queued (async) to %s: %s", to_email, subject)
    except Exception:
        logger.exception("Failed to queue async email to %s", to_email)


# ---------------------------------------------------------------------------
# Service request events
# ---------------------------------------------------------------------------
def _money(value):
    if value is None:
        return None
    return format_currency(value, _setting("CURRENCY", "AED"))


def _when(service_request):
    return service_request.requested_date.strftime("%Y-%m-%d %H:%M UTC") if service_request.requested_date else None


def notify_request_created(service_request):
    """Confirm to the customer and alert the operator. Never raises."""
    try:
        sr = service_request
        send_email(
            sr.user_email,
            "Request received #{}".format(short_id(sr.id)),
            request_received_html(
                sr.user_name, sr.id, sr.service_name, sr.request_type,
                _when(sr), sr.address, _money(sr.total_price),
            ),
        )
        admin_email = _setting("ADMIN_EMAIL")
        if admin_email:
            send_email(
                admin_email,
                "New {} request from {}".format(sr.request_type, sr.user_name),
                admin_new_request_html(
                    sr.id, sr.user_name, sr.user_email, sr.user_phone,
                    sr.service_name, sr.request_type, _when(sr),
                    _money(sr.total_price), bool(sr.created_by_admin_id),
                ),
            )
        send_sms(sr.user_phone, "ServiceHub: we received your {} request #{}.".format(
            sr.service_name or "service", short_id(sr.id)))
    except Exception:
        logger.exception("Failed in notify_request_created for %s", service_request.id)


def notify_vendor_assigned(service_request, vendor):
    """Tell both the customer and the vendor about an assignment. Never raises."""
    try:
        sr = service_request
        send_email(
            sr.user_email,
            "A provider has been assigned to #{}".format(short_id(sr.id)),
            vendor_assigned_html(sr.user_name, sr.id, sr.service_name, vendor.full_name, _when(sr)),
        )
        if vendor.email:
            send_email(
                vendor.email,
                "New job #{}".format(short_id(sr.id)),
                vendor_job_html(vendor.full_name, sr.id, sr.service_name, _when(sr), sr.address, sr.message),
            )
        if vendor.phone:
            send_sms(vendor.phone, "ServiceHub: new job #{} on {}.".format(short_id(sr.id), _when(sr)))
    except Exception:
        logger.exception("Failed in notify_vendor_assigned for %s", service_request.id)


def notify_status_changed(service_request, old_status):
    """Never raises."""
    try:
        sr = service_request
        send_email(
            sr.user_email,
            "Request #{} is now {}".format(short_id(sr.id), sr.status),
            status_update_html(sr.user_name, sr.id, old_status, sr.status),
        )
    except Exception:
        logger.exception("Failed in notify_status_changed for %s", service_request.id)


def notify_quote_ready(service_request):
    """Never raises."""
    try:
        sr = service_request
        send_email(
            sr.user_email,
            "Your quote for #{} is ready".format(short_id(sr.id)),
            quote_ready_html(sr.user_name, sr.id, sr.service_name, _money(sr.unit_price), _money(sr.total_price)),
        )
    except Exception:
        logger.exception("Failed in notify_quote_ready for %s", service_request.id)


def notify_payment_status(service_request):
    """Never raises."""
    try:
        sr = service_request
        send_email(
            sr.user_email,
            "Payment {} for #{}".format(str(sr.payment_status).lower(), short_id(sr.id)),
            payment_status_html(sr.user_name, sr.id, sr.payment_status, _money(sr.total_price)),
        )
    except Exception:
        logger.exception("Failed in notify_payment_status for %s", service_request.id)


def dispatch(event, service_request, **kwargs):
    """Route an engine event to its notifier. Never raises."""
    handlers = {
        "created": notify_request_created,
        "assigned": notify_vendor_assigned,
        "status_changed": notify_status_changed,
        "quoted": notify_quote_ready,
        "payment_status_changed": notify_payment_status,
    }
    handler = handlers.get(event)
    if handler is None:
        logger.warning("No notifier registered for event %s", event)
        return
    try:
        handler(service_request, **kwargs)
    except Exception:
        logger.exception("Notifier for %s failed", event)
