"""Billing cycle rules for card invoices.

A cycle ("competência") is identified by the first day of its month and
labelled ``YYYY-MM``. Purchases made after the card's closing day fall into
the next cycle.
"""

import calendar
from datetime import date
from decimal import Decimal, ROUND_DOWN

from dateutil.relativedelta import relativedelta

CENT = Decimal("0.01")


def cycle_label(cycle: date) -> str:
    """Label of a cycle, e.g. ``2025-11``."""
    return cycle.strftime("%Y-%m")


def parse_cycle(label: str) -> date:
    """Parse a ``YYYY-MM`` label into the first day of that month."""
    year, month = label.split("-")
    return date(int(year), int(month), 1)


def natural_cycle(purchase_date: date, closing_day: int) -> date:
    """Cycle a purchase is billed in.

    Args:
        purchase_date: Date of the purchase
        closing_day: Card statement closing day-of-month

    Returns:
        First day of the cycle month
    """
    cycle = purchase_date.replace(day=1)
    if purchase_date.day > closing_day:
        cycle += relativedelta(months=1)
    return cycle


def installment_cycles(purchase_date: date, closing_day: int, installments: int) -> list[date]:
    """Consecutive cycles for each installment, starting at the natural cycle."""
    first = natural_cycle(purchase_date, closing_day)
    return [first + relativedelta(months=i) for i in range(installments)]


def _day_in_month(cycle: date, day: int) -> date:
    last_day = calendar.monthrange(cycle.year, cycle.month)[1]
    return cycle.replace(day=min(day, last_day))


def closing_date(cycle: date, closing_day: int) -> date:
    """Closing date of a cycle, clamped to the month's last day."""
    return _day_in_month(cycle, closing_day)


def due_date(cycle: date, closing_day: int, due_day: int) -> date:
    """Due date of a cycle.

    When the due day comes after the closing day the invoice is due in the
    same month it closes; otherwise the due date rolls into the next month.
    """
    if due_day > closing_day:
        return _day_in_month(cycle, due_day)
    return _day_in_month(cycle + relativedelta(months=1), due_day)


def split_installments(total: Decimal, installments: int) -> list[Decimal]:
    """Split a purchase total into installment amounts.

    Every installment but the last is ``total / n`` truncated to cents; the
    last one absorbs the remainder so the parts always sum to ``total``.

    >>> split_installments(Decimal("100.00"), 3)
    [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')]
    """
    share = (total / installments).quantize(CENT, rounding=ROUND_DOWN)
    parts = [share] * (installments - 1)
    parts.append(total - sum(parts, Decimal("0")))
    return parts
