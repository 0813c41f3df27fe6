import re
import math
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional
from backoffice.core.exceptions import InvalidAmountError

logger = logging.getLogger(__name__)

MINOR_UNITS = Decimal("100")


def round_half_up(value: Decimal) -> int:
    """Round a decimal to the nearest integer, halves away from zero"""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_minor_amount(
    value: Any, field_name: str = "amount", default: Optional[int] = None
) -> int:
    """
    Validates an integer amount in minor units.

    Args:
        value: int, integral float/Decimal or a string of digits
        field_name: Field name used in error messages
        default: Value used when `value` is None or an empty string

    Returns:
        int: The amount

    Raises:
        InvalidAmountError: If the amount is missing, negative, fractional or not finite
    """
    if value is None or value == "":
        if default is None:
            raise InvalidAmountError(f"{field_name} is required")
        return default

    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid {field_name}: must be a number")

    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmountError(f"Invalid {field_name}: must be a number")

    if not number.is_finite():
        raise InvalidAmountError(f"Invalid {field_name}: must be a finite number")
    if number < 0:
        raise InvalidAmountError(f"Invalid {field_name}: cannot be negative")
    if number != number.to_integral_value():
        raise InvalidAmountError(
            f"Invalid {field_name}: must be an integer amount in minor units"
        )

    return int(number)


def validate_rate(value: Any, field_name: str = "rate") -> Optional[Decimal]:
    """
    Validates an optional wage rate in major units.

    Empty values and zero mean "not configured" and return None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidAmountError(f"Invalid {field_name}: must be a finite number")

    try:
        rate = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmountError(f"Invalid {field_name}: must be a number")

    if not rate.is_finite():
        raise InvalidAmountError(f"Invalid {field_name}: must be a finite number")
    if rate < 0:
        raise InvalidAmountError(f"Invalid {field_name}: cannot be negative")
    if rate == 0:
        return None

    return rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def validate_name(name: Optional[str], field_name: str = "Name") -> str:
    """Trimmed, non-empty name of at most 100 characters"""
    if name is None or not name.strip():
        raise ValueError(f"{field_name} is required")

    name = name.strip()
    if len(name) > 100:
        raise ValueError(f"{field_name} must be at most 100 characters")

    return name


def clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def is_valid_email(email: str) -> bool:
    """
    Checks whether the string looks like an email address.
    """
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))


def is_valid_phone(phone: str) -> bool:
    """
    Accepts UK and Irish numbers as well as any 10-15 digit international number.
    """
    clean_phone = re.sub(r"[^\d+]", "", phone)

    uk_pattern = r"^(\+44|0)7[0-9]{9}$"
    generic_pattern = r"^\+?[0-9]{10,15}$"

    return bool(re.match(uk_pattern, clean_phone) or re.match(generic_pattern, clean_phone))


def validate_contact(
    email: Optional[str] = None, phone: Optional[str] = None
) -> tuple:
    """Cleans optional contact fields, rejecting malformed values"""
    email = clean_optional(email)
    phone = clean_optional(phone)

    if email and not is_valid_email(email):
        logger.warning(f"Rejected email address: {email}")
        raise ValueError(f"Invalid email: {email}")
    if phone and not is_valid_phone(phone):
        logger.warning(f"Rejected phone number: {phone}")
        raise ValueError(f"Invalid phone: {phone}")

    return email, phone
