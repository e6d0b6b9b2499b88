"""
Custom Validators
Validation and normalisation helpers for STK Push requests
"""

import re
from typing import Any, Optional

# Largest single STK Push Safaricom accepts, in KES
MAX_AMOUNT = 150000

MAX_ACCOUNT_REFERENCE_LENGTH = 20
MAX_TRANSACTION_DESC_LENGTH = 100

_UNSAFE_CHARS = re.compile(r'[<>"\'&]')


def normalize_phone_number(phone: Any) -> Optional[str]:
    """
    Normalise a Kenyan mobile number to 254XXXXXXXXX

    Accepts 0712345678, 254712345678, 712345678 and any of those with
    spaces, dashes, brackets or a leading +.

    Args:
        phone: Raw phone number

    Returns:
        Normalised number, or None if the input is not a recognised shape
    """
    if not phone or not isinstance(phone, str):
        return None

    digits = re.sub(r'\D', '', phone)

    if digits.startswith('0') and len(digits) == 10:
        return '254' + digits[1:]
    if digits.startswith('254') and len(digits) == 12:
        return digits
    if digits.startswith('7') and len(digits) == 9:
        return '254' + digits

    return None


def amount_error_message(max_amount: float = MAX_AMOUNT) -> str:
    return f'Invalid amount. Must be a positive number not exceeding KES {max_amount:,.0f}.'


def validate_amount(amount: Any, max_amount: float = MAX_AMOUNT) -> tuple[bool, Optional[str]]:
    """
    Validate payment amount

    Args:
        amount: Amount to validate
        max_amount: Maximum allowed amount

    Returns:
        Tuple of (is_valid, error_message)
    """
    error = amount_error_message(max_amount)

    # bool is an int subclass, but True is not an amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False, error

    if amount != amount or amount <= 0 or amount > max_amount:
        return False, error

    return True, None


def sanitize_text(value: str) -> str:
    """Strip characters that could be used for markup or header injection."""
    return _UNSAFE_CHARS.sub('', value)
