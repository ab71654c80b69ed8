"""
Common validators and utilities for the fleet back-office application.

This module contains shared validation logic and utility functions used
across multiple Django apps.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from django.conf import settings
from django.core.validators import BaseValidator


ZERO = Decimal("0")
LITERS_PLACES = Decimal("0.001")
WEIGHT_PLACES = Decimal("0.001")
MONEY_PLACES = Decimal("0.01")


class QuantityValidator(BaseValidator):
    """
    Validator for physical quantities (litres, tonnes, kilometres, rupees).

    Ensures values are non-negative and, optionally, below a ceiling.
    """

    def __init__(self, unit="units", max_value=None):
        self.unit = unit
        self.limit_value = max_value
        if max_value is None:
            self.message = f"Quantity in {unit} cannot be negative."
        else:
            self.message = f"Quantity in {unit} must be between 0 and {max_value}."

    def compare(self, value, limit_value):
        try:
            quantity = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return True
        if quantity < 0:
            return True
        return limit_value is not None and quantity > limit_value

    def clean(self, value):
        return value


def validate_liters(value):
    """Validate a fuel quantity in litres."""
    validator = QuantityValidator("liters")
    validator(value)


def validate_weight_mt(value):
    """Validate a weighbridge reading in metric tonnes (a loaded truck is well under 100 MT)."""
    validator = QuantityValidator("MT", max_value=100)
    validator(value)


def validate_odometer(value):
    """Validate an odometer reading in kilometres."""
    validator = QuantityValidator("km")
    validator(value)


def to_decimal(value, default=ZERO):
    """
    Convert a loosely typed value into a Decimal.

    None, empty strings and unparsable values become ``default`` so
    aggregations can treat missing fields as zero.
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def safe_divide(numerator, denominator):
    """Divide two quantities, returning zero when the denominator is not positive."""
    denominator = to_decimal(denominator)
    if denominator <= 0:
        return ZERO
    return to_decimal(numerator) / denominator


def quantize_liters(value):
    return to_decimal(value).quantize(LITERS_PLACES, rounding=ROUND_HALF_UP)


def quantize_weight(value):
    return to_decimal(value).quantize(WEIGHT_PLACES, rounding=ROUND_HALF_UP)


def quantize_money(value):
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def get_default_diesel_rate():
    """
    Get the fallback diesel rate in Rs per litre.

    Used when neither a coal log nor its matching fuel log carries a rate.
    """
    return to_decimal(getattr(settings, "DEFAULT_DIESEL_RATE", "90.55"), Decimal("90.55"))


def first_of_month(value: date) -> date:
    """Return the first day of the month containing ``value``."""
    return value.replace(day=1)


def previous_day(value: date) -> date:
    """Return the calendar day before ``value``."""
    return value - timedelta(days=1)


def format_date_label(value):
    """
    Format a date for report headers as DD-MM-YYYY.

    Returns an empty string when no date is given.
    """
    if not value:
        return ""
    return value.strftime("%d-%m-%Y")


def date_in_range(value, start=None, end=None):
    """Check whether ``value`` falls within the inclusive [start, end] range."""
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True


def validate_odometer_readings(previous_odometer, odometer):
    """
    Validate a pair of odometer readings for a fuel fill.

    Returns list of validation errors.
    """
    errors = []

    if odometer is None:
        errors.append("Odometer reading is required")
        return errors

    if to_decimal(odometer) < 0:
        errors.append("Odometer reading cannot be negative")

    if previous_odometer is not None and to_decimal(odometer) < to_decimal(previous_odometer):
        errors.append("Odometer reading cannot be lower than the previous reading")

    return errors
