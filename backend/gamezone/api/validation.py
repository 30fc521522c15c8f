import math
from numbers import Real

from gamezone.errors import ValidationError


def require_number(data, field, message, minimum=None, maximum=None, integer=False):
    """Pull a JSON number out of ``data`` or raise ValidationError(message)."""
    if not isinstance(data, dict):
        raise ValidationError(message)
    value = data.get(field)
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(message)
    if not math.isfinite(value):
        raise ValidationError(message)
    if integer and not float(value).is_integer():
        raise ValidationError(message)
    if minimum is not None and value < minimum:
        raise ValidationError(message)
    if maximum is not None and value > maximum:
        raise ValidationError(message)
    return int(value) if integer else value


def require_decimal_string(data, field, message, minimum=None):
    """Parse a decimal number sent as a string, e.g. ``{"time": "12.3"}``."""
    if not isinstance(data, dict):
        raise ValidationError(message)
    raw = data.get(field)
    if not isinstance(raw, str):
        raise ValidationError(message)
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(message)
    if not math.isfinite(value):
        raise ValidationError(message)
    if minimum is not None and value < minimum:
        raise ValidationError(message)
    return value
