# utils/parsing.py
import datetime
from decimal import Decimal, InvalidOperation

from budget_app.errors import ValidationError
from budget_app.models.transaction import direction_for

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
MAX_AMOUNT = Decimal("10000000")
CENT = Decimal("0.01")


def require_fields(data, *names, message=None):
    """Raise ValidationError unless every field is present and non-empty."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    missing = [n for n in names if data.get(n) in (None, "")]
    if missing:
        raise ValidationError(message or f"Missing required fields: {', '.join(missing)}")
    return [data[n] for n in names]


def require_text(data, *names, message=None):
    """Like require_fields, but every value must be a non-blank string."""
    values = require_fields(data, *names, message=message)
    if not all(isinstance(v, str) and v.strip() for v in values):
        raise ValidationError(message or f"Fields must be text: {', '.join(names)}")
    return values


def parse_optional_text(value, name):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {name}: expected text")
    return value.strip() or None


def parse_amount(value, allow_zero=False, allow_negative=True) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError("Invalid amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Amount too large: {amount}")
    if amount != amount.quantize(CENT):
        raise ValidationError("Amount cannot have more than two decimal places")
    if amount == 0 and not allow_zero:
        raise ValidationError("Amount cannot be zero")
    if amount < 0 and not allow_negative:
        raise ValidationError("Amount cannot be negative")
    return amount


def parse_date(value) -> datetime.date:
    """Try multiple date formats, then ISO datetime."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not value:
        raise ValidationError("Invalid or missing date")
    s = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def parse_direction(amount: Decimal, declared=None) -> str:
    """
    Direction implied by the amount sign. A declared type is accepted only
    when it agrees with the sign.
    """
    direction = direction_for(amount)
    if declared is not None and str(declared).strip().lower() != direction:
        raise ValidationError(
            f"Transaction type '{declared}' does not match the sign of amount {amount}"
        )
    return direction


def parse_int_arg(value, name, default=None) -> int:
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"Missing required parameter: {name}")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}")


def parse_month_index(value, default=None) -> int:
    month_index = parse_int_arg(value, "month", default)
    if not 0 <= month_index <= 11:
        raise ValidationError("month must be between 0 (January) and 11 (December)")
    return month_index


def parse_bool_arg(value) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on", "y"}
