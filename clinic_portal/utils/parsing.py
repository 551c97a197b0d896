"""
Request value parsing. Each helper raises ValueError with a message that
can be shown to the user as-is.
"""
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Optional


def parse_date(value, field='date') -> Optional[date]:
    """Parse YYYY-MM-DD; empty values give None."""
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f'Invalid {field} format. Use YYYY-MM-DD')


def parse_amount(value, field='amount') -> Decimal:
    """Parse a non-negative money amount with at most two decimals."""
    if value is None or value == '':
        raise ValueError(f'Field "{field}" is required')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f'{field} must be a number')
    if not amount.is_finite() or amount < 0:
        raise ValueError(f'{field} must be a non-negative number')
    return amount.quantize(Decimal('0.01'))


def parse_choice(value, choices, field='status') -> str:
    if value not in choices:
        raise ValueError(f'Invalid {field}. Valid values: {", ".join(choices)}')
    return value


def missing_fields(data, required):
    """Names of required keys that are absent or blank in data."""
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing
