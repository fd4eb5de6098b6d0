"""
Input Validation

Turns raw user strings into domain values. Every check raises
ValidationError with a message suitable for showing to the user.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional
import re

from .config import LedgerConfig, get_config
from .models import TransactionType


class ValidationError(ValueError):
    """Raised for malformed or out-of-range input"""


class IdentifierKind(Enum):
    ACCOUNT = "account"
    INTEREST_RULE = "interest_rule"


INVALID_DATE_FORMAT = "Invalid date format. Use YYYYMMdd"
INVALID_MONTH_FORMAT = "Invalid date format. Use YYYYMM"
INVALID_DATE = "Invalid date"
INVALID_AMOUNT = "Invalid amount"
INVALID_DECIMAL_PLACES = "Amount can have up to 2 decimal places"
AMOUNT_TOO_SMALL = "Amount must be greater than 0"
INVALID_TRANSACTION_TYPE = 'Invalid transaction type. Valid types are "D" for Deposit or "W" for Withdrawal.'
INVALID_RATE = "Invalid interest rate (must be between 0 and 100)"

_DATE = re.compile(r'^\d{8}$')
_MONTH = re.compile(r'^\d{6}$')
_NUMBER = re.compile(r'^\d+(\.\d+)?$')


def validate_date(value: str) -> date:
    """Parse a YYYYMMdd calendar day"""
    value = (value or "").strip()
    if not _DATE.match(value):
        raise ValidationError(INVALID_DATE_FORMAT)
    try:
        return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
    except ValueError:
        raise ValidationError(INVALID_DATE)


def validate_statement_month(value: str) -> date:
    """Parse YYYYMM into the first day of that month"""
    value = (value or "").strip()
    if not _MONTH.match(value):
        raise ValidationError(INVALID_MONTH_FORMAT)
    try:
        return date(int(value[:4]), int(value[4:6]), 1)
    except ValueError:
        raise ValidationError(INVALID_DATE)


def validate_amount(value: str, config: Optional[LedgerConfig] = None) -> Decimal:
    """Parse a positive amount with at most two decimal places"""
    config = config or get_config()
    value = (value or "").strip()
    if not _NUMBER.match(value):
        raise ValidationError(INVALID_AMOUNT)

    places = len(value.split('.')[1]) if '.' in value else 0
    if places > config.amount_decimal_places:
        raise ValidationError(INVALID_DECIMAL_PLACES)

    amount = Decimal(value)
    if amount <= Decimal('0'):
        raise ValidationError(AMOUNT_TOO_SMALL)

    maximum = Decimal(config.max_transaction_amount)
    if amount > maximum:
        raise ValidationError(f"Amount must not exceed {maximum:,}")
    return amount


def validate_transaction_type(value: str) -> TransactionType:
    try:
        return TransactionType((value or "").strip())
    except ValueError:
        raise ValidationError(INVALID_TRANSACTION_TYPE)


def validate_identifier(value: str, kind: IdentifierKind,
                        config: Optional[LedgerConfig] = None) -> str:
    """Account or interest rule identifier: non-empty and length-limited"""
    config = config or get_config()
    value = (value or "").strip()
    label = "Account name" if kind == IdentifierKind.ACCOUNT else "Interest rule name"
    if not value:
        raise ValidationError(f"{label} is required")
    if len(value) > config.max_identifier_length:
        raise ValidationError(
            f"{label} must be less than {config.max_identifier_length + 1} characters"
        )
    return value


def validate_rate(value: str) -> Decimal:
    """Interest rate in percent, between 0 and 100 inclusive"""
    try:
        rate = Decimal((value or "").strip())
    except InvalidOperation:
        raise ValidationError(INVALID_RATE)
    if not rate.is_finite() or rate < Decimal('0') or rate > Decimal('100'):
        raise ValidationError(INVALID_RATE)
    return rate
