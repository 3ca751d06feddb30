"""Error handling utilities for robust screening.

Provides the screener's exception hierarchy, safe arithmetic and
validation of raw option leg records.
"""

from typing import Tuple
import logging

logger = logging.getLogger("spread_screener.error_handling")

VALID_KINDS = ("CALL", "PUT")


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safely divide two numbers, returning default on division by zero.

    Args:
        numerator: Numerator value
        denominator: Denominator value
        default: Value to return if denominator is zero

    Returns:
        Result of division, or default if denominator is zero

    Example:
        >>> safe_divide(10, 2)
        5.0
        >>> safe_divide(10, 0, default=float('inf'))
        inf
    """
    if denominator == 0:
        logger.debug("Division by zero: %s/%s, returning %s", numerator, denominator, default)
        return default
    return numerator / denominator


def validate_leg_data(leg_dict: dict) -> Tuple[bool, str]:
    """Validate a raw option leg record for completeness and sanity.

    Args:
        leg_dict: Dictionary containing option leg data

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> data = {"underlying": "PETR4", "symbol": "PETRH280", "kind": "CALL",
        ...         "strike": 28.0, "premium": 1.5, "expiration": "2024-08-16"}
        >>> is_valid, error = validate_leg_data(data)
        >>> is_valid
        True
    """
    required_fields = ['underlying', 'symbol', 'expiration', 'kind', 'premium']

    for field in required_fields:
        if field not in leg_dict or leg_dict[field] is None:
            return False, f"Missing required field: {field}"

    kind = str(leg_dict['kind']).upper()
    if kind not in VALID_KINDS:
        return False, f"Invalid option kind: {leg_dict['kind']}"

    try:
        premium = float(leg_dict['premium'])
    except (TypeError, ValueError):
        return False, f"Non-numeric premium: {leg_dict['premium']}"
    if premium < 0:
        return False, f"Negative premium: {premium}"

    strike = leg_dict.get('strike')
    if strike is not None:
        try:
            float(strike)
        except (TypeError, ValueError):
            return False, f"Non-numeric strike: {strike}"

    iv = leg_dict.get('implied_vol')
    if iv is not None:
        try:
            iv = float(iv)
        except (TypeError, ValueError):
            return False, f"Non-numeric implied volatility: {leg_dict['implied_vol']}"
        if iv < 0:
            return False, f"Negative implied volatility: {iv}"

    business_days = leg_dict.get('business_days')
    if business_days is not None:
        try:
            business_days = float(business_days)
        except (TypeError, ValueError):
            return False, f"Non-numeric business days: {leg_dict['business_days']}"
        if business_days < 0:
            return False, f"Negative business days: {business_days:g}"

    for greek in ('delta', 'gamma', 'theta', 'vega'):
        value = leg_dict.get(greek)
        if value is None:
            continue
        try:
            float(value)
        except (TypeError, ValueError):
            return False, f"Non-numeric {greek}: {value}"

    multiplier = leg_dict.get('multiplier')
    if multiplier is not None:
        try:
            multiplier = float(multiplier)
        except (TypeError, ValueError):
            return False, f"Non-numeric multiplier: {leg_dict['multiplier']}"
        if multiplier <= 0:
            return False, f"Non-positive multiplier: {multiplier:g}"

    return True, ""


class ScreeningError(Exception):
    """Base exception for screening-related errors."""
    pass


class DataValidationError(ValueError, ScreeningError):
    """Raised when option leg data fails validation.

    Inherits from ValueError so callers catching ValueError still work.
    """
    pass


class InsufficientDataError(ScreeningError):
    """Raised when insufficient data to perform screening."""
    pass


class ConfigurationError(ScreeningError):
    """Raised when configuration is invalid."""
    pass
