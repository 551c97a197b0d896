"""
Dashboard aggregations over already-fetched rows.

Kept as plain functions over lists so the same numbers come out whether the
rows were loaded for the doctor console or the patient overview.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional


def count_todays_appointments(appointments: Iterable, today: Optional[date] = None) -> int:
    today = today or date.today()
    return sum(1 for a in appointments if a.appointment_date == today)


def count_upcoming_appointments(appointments: Iterable, today: Optional[date] = None) -> int:
    """Appointments from today on that are still scheduled or confirmed."""
    today = today or date.today()
    return sum(
        1 for a in appointments
        if a.appointment_date >= today and a.status in ('scheduled', 'confirmed')
    )


def sum_amounts(records: Iterable, status: str) -> Decimal:
    total = Decimal('0.00')
    for record in records:
        if record.status == status and record.amount is not None:
            total += Decimal(str(record.amount))
    return total


def total_revenue(records: Iterable) -> Decimal:
    """Sum of amount over paid billing records; pending ones are ignored."""
    return sum_amounts(records, 'paid')


def pending_amount(records: Iterable) -> Decimal:
    return sum_amounts(records, 'pending')


def billing_summary(records) -> dict:
    records = list(records)
    return {
        'total_revenue': float(total_revenue(records)),
        'pending_amount': float(pending_amount(records)),
        'paid_count': sum(1 for r in records if r.status == 'paid'),
        'pending_count': sum(1 for r in records if r.status == 'pending'),
    }
