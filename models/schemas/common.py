import re
from datetime import date
from decimal import Decimal, InvalidOperation

from marshmallow import ValidationError

MAX_TEXT_LENGTH = 255
MIN_PUBLICATION_YEAR = 1000

# 13 digits, or a 3-digit prefix, a hyphen, 10 digits and a check digit or X
ISBN_PATTERN = re.compile(r"^\d{3}-\d{10}[\dX]$|^\d{13}$")

TWO_PLACES = Decimal("0.01")
# Largest value a Numeric(10, 2) column holds
MAX_PRICE_VALUE = Decimal("99999999.99")


def validate_not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Must not be blank.")


def normalize_isbn(raw):
    """Blank ISBNs are stored as NULL."""
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def validate_isbn(raw) -> None:
    isbn = normalize_isbn(raw)
    if isbn is not None and not ISBN_PATTERN.match(isbn):
        raise ValidationError("ISBN must be 13 digits, or 3 digits, a hyphen and 10 digits plus a check digit or X.")


def validate_publication_year(year) -> None:
    if year is None:
        return
    current = date.today().year
    if year < MIN_PUBLICATION_YEAR or year > current:
        raise ValidationError(f"Publication year must be between {MIN_PUBLICATION_YEAR} and {current}.")


def validate_price_value(value) -> None:
    if value is None:
        raise ValidationError("Price value is required.")
    try:
        d = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Invalid decimal.")
    if not d.is_finite():
        raise ValidationError("Invalid decimal.")
    if d <= 0:
        raise ValidationError("Price value must be greater than zero.")
    if d > MAX_PRICE_VALUE:
        raise ValidationError(f"Price value must not exceed {MAX_PRICE_VALUE}.")
    if d != d.quantize(TWO_PLACES):
        raise ValidationError("Price value must have at most 2 decimal places.")
