"""
Request-body parsing for the JSON views.

Each helper raises InvalidPayload with the message the client sees
(mapped to HTTP 400 by the views).
"""
import datetime
import json
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidPayload

INVALID_PAYLOAD = "Invalid request payload"


def parse_json(request) -> dict:
    try:
        data = json.loads(request.body or b"null")
    except (ValueError, UnicodeDecodeError):
        raise InvalidPayload(INVALID_PAYLOAD)
    if not isinstance(data, dict):
        raise InvalidPayload(INVALID_PAYLOAD)
    return data


def require(data: dict, fields, message: str):
    """Every field must be present and non-empty."""
    for field in fields:
        value = data.get(field)
        if value is None or value == "" or value == []:
            raise InvalidPayload(message)


def text(data: dict, field: str, default="") -> str:
    value = data.get(field, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidPayload(INVALID_PAYLOAD)
    return value


# Column limits: DecimalField(max_digits=18, decimal_places=2),
# IntegerField / PositiveIntegerField (32-bit) and BigAutoField ids
MONEY_MAX_DIGITS = 18
MONEY_DECIMAL_PLACES = 2
INT_MIN = -2147483648
INT_MAX = 2147483647
ID_MAX = 9223372036854775807


def decimal(data: dict, field: str, default=Decimal("0.00"),
            max_digits=MONEY_MAX_DIGITS,
            decimal_places=MONEY_DECIMAL_PLACES) -> Decimal:
    value = data.get(field)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidPayload(INVALID_PAYLOAD)
    try:
        # str() keeps 0.1 as 0.1 instead of the binary float expansion
        parsed = Decimal(str(value))
        # NaN / Infinity are not amounts
        if not parsed.is_finite():
            raise InvalidPayload(INVALID_PAYLOAD)
        # must fit the column once rounded to its scale
        scaled = parsed.quantize(Decimal(1).scaleb(-decimal_places))
    except InvalidOperation:
        raise InvalidPayload(INVALID_PAYLOAD)
    if len(scaled.as_tuple().digits) > max_digits:
        raise InvalidPayload(INVALID_PAYLOAD)
    return parsed


def _whole_number(value, low, high) -> int:
    if isinstance(value, bool):
        raise InvalidPayload(INVALID_PAYLOAD)
    if isinstance(value, float) and not value.is_integer():
        raise InvalidPayload(INVALID_PAYLOAD)
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidPayload(INVALID_PAYLOAD)
    if not low <= number <= high:
        raise InvalidPayload(INVALID_PAYLOAD)
    return number


def integer(data: dict, field: str, default=0, low=INT_MIN, high=INT_MAX) -> int:
    value = data.get(field)
    if value is None or value == "":
        return default
    return _whole_number(value, low, high)


def identifier(data: dict, field: str):
    """Foreign-key ids travel as JSON numbers or numeric strings."""
    value = data.get(field)
    if value is None or value == "":
        return None
    return _whole_number(value, -ID_MAX, ID_MAX)


def date_value(data: dict, field: str):
    """Accept "2025-09-15" or a full RFC 3339 timestamp; keep the date part."""
    value = data.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidPayload(INVALID_PAYLOAD)
    try:
        parsed = parse_date(value)
        if parsed is None:
            dt = parse_datetime(value)
            parsed = dt.date() if dt else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidPayload(INVALID_PAYLOAD)
    return parsed


def datetime_value(data: dict, field: str):
    """RFC 3339 timestamp (naive values are read as UTC) or a bare date."""
    value = data.get(field)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidPayload(INVALID_PAYLOAD)
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is not None:
                parsed = datetime.datetime.combine(day, datetime.time())
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidPayload(INVALID_PAYLOAD)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, datetime.timezone.utc)
    return parsed
