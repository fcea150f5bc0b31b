"""
HTML email templates for ServiceHub service request notifications.

Every public function returns a complete HTML string ready for
``notifications.send_email``.  Styles are inlined; nothing external is
referenced.
"""
from html import escape as _esc

ACCENT = '#0F766E'


def _wrap(title, body_html):
    """Common email shell with the brand header and footer."""
    return (
        '<!DOCTYPE html>'
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width,initial-scale=1.0">'
        '<title>{title}</title></head>'
        '<body style="margin:0;padding:0;background-color:#f1f5f9;">'
        '<div style="font-family:Arial,Helvetica,sans-serif;max-width:600px;margin:0 auto;padding:32px 16px;">'
        '<h1 style="color:{accent};font-size:24px;margin:0 0 24px;text-align:center;">ServiceHub</h1>'
        '<div style="background:#ffffff;border-radius:10px;padding:28px;">'
    ).format(title=_esc(title), accent=ACCENT) + body_html + (
        '</div>'
        '<p style="text-align:center;color:#94a3b8;font-size:12px;margin-top:24px;">'
        'You are receiving this email because of a ServiceHub service request.</p>'
        '</div></body></html>'
    )


def _details(rows):
    """Key/value table.  *rows* is a list of (label, value); None values are skipped."""
    inner = ''
    for label, value in rows:
        if value is None:
            continue
        inner += (
            '<tr><td style="padding:6px 0;color:#64748b;font-size:14px;">{label}</td>'
            '<td style="padding:6px 0;color:#0f172a;font-size:14px;font-weight:600;text-align:right;">{value}</td></tr>'
        ).format(label=_esc(str(label)), value=_esc(str(value)))
    return (
        '<table style="width:100%;border-collapse:collapse;margin:18px 0;'
        'border-top:1px solid #e2e8f0;border-bottom:1px solid #e2e8f0;">'
        + inner + '</table>'
    )


def _greeting(name):
    return '<p style="color:#334155;line-height:1.6;">Hi {},</p>'.format(
        _esc(str(name)) if name else 'there'
    )


def _heading(text):
    return '<h2 style="color:#0f172a;margin:0 0 12px;font-size:20px;">{}</h2>'.format(_esc(text))


def request_received_html(customer_name, request_id, service_name, request_type,
                          requested_date, address, total):
    """Customer confirmation for a newly submitted request."""
    body = _heading('We received your request')
    body += _greeting(customer_name)
    body += '<p style="color:#334155;line-height:1.6;">Thanks for booking with us. Here is a summary:</p>'
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Service', service_name),
        ('Type', request_type),
        ('Date', requested_date),
        ('Address', address),
        ('Total', total or 'To be quoted'),
    ])
    body += '<p style="color:#334155;font-size:14px;">We will let you know as soon as a provider is assigned.</p>'
    return _wrap('Request received', body)


def admin_new_request_html(request_id, customer_name, customer_email, customer_phone,
                           service_name, request_type, requested_date, total, created_by_admin):
    """Operator alert for a newly submitted request."""
    body = _heading('New service request')
    body += _details([
        ('Request', str(request_id)),
        ('Customer', customer_name),
        ('Email', customer_email),
        ('Phone', customer_phone),
        ('Service', service_name),
        ('Type', request_type),
        ('Date', requested_date),
        ('Total', total or 'Quotation'),
        ('Source', 'Admin panel' if created_by_admin else 'Customer'),
    ])
    return _wrap('New service request', body)


def vendor_assigned_html(customer_name, request_id, service_name, vendor_name, requested_date):
    """Tell the customer who will perform their request."""
    body = _heading('A provider has been assigned')
    body += _greeting(customer_name)
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Service', service_name),
        ('Provider', vendor_name or 'Your provider'),
        ('Date', requested_date),
    ])
    return _wrap('Provider assigned', body)


def vendor_job_html(vendor_name, request_id, service_name, requested_date, address, message):
    """Tell the vendor about a request they were assigned."""
    body = _heading('New job assigned to you')
    body += _greeting(vendor_name)
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Service', service_name),
        ('Date', requested_date),
        ('Address', address),
        ('Notes', message),
    ])
    return _wrap('New job', body)


def status_update_html(customer_name, request_id, old_status, new_status):
    """Status change notice for the customer."""
    body = _heading('Your request is now {}'.format(new_status))
    body += _greeting(customer_name)
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Previous status', old_status),
        ('Current status', new_status),
    ])
    return _wrap('Request update', body)


def quote_ready_html(customer_name, request_id, service_name, unit_price, total):
    """Quotation priced by an operator."""
    body = _heading('Your quote is ready')
    body += _greeting(customer_name)
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Service', service_name),
        ('Unit price', unit_price),
        ('Total', total),
    ])
    body += '<p style="color:#334155;font-size:14px;">Reply to this email if you have any questions about the quote.</p>'
    return _wrap('Quote ready', body)


def payment_status_html(customer_name, request_id, payment_status, total):
    """Payment outcome for an online payment."""
    body = _heading('Payment {}'.format(str(payment_status).lower()))
    body += _greeting(customer_name)
    body += _details([
        ('Request', '#{}'.format(str(request_id)[:8])),
        ('Payment status', payment_status),
        ('Amount', total),
    ])
    return _wrap('Payment update', body)
