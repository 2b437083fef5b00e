"""Input checks shared by the resource handlers."""

import html
import re
from datetime import datetime

from email_validator import EmailNotValidError, validate_email

DATE_FORMAT = "%Y-%m-%d"
ALLOWED_ORDERS = ("asc", "desc")

_TAG_RE = re.compile(r"<[^>]*>")


def is_valid_email(value) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_date(value) -> bool:
    """True only for a YYYY-MM-DD string that formats back to itself."""
    if not isinstance(value, str):
        return False
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return parsed.strftime(DATE_FORMAT) == value


def parse_date(value):
    return datetime.strptime(value, DATE_FORMAT).date()


def is_valid_sort_field(field, allowed) -> bool:
    return field in allowed


def normalize_order(order) -> str:
    order = (order or "").lower()
    return order if order in ALLOWED_ORDERS else "asc"


def sanitize_input(value) -> str:
    value = str(value).strip()
    value = _TAG_RE.sub("", value)
    return html.escape(value, quote=True)


def parse_identifier(value):
    """Positive integer id from a query or body value, None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    try:
        ident = int(str(value).strip())
    except ValueError:
        return None
    return ident if ident > 0 else None


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
