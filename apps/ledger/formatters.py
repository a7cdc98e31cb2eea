"""
Formatting and identifier helpers shared by the ledger, analytics and
reports apps. Everything here is a pure function.
"""

from datetime import date, timedelta
from decimal import Decimal
import uuid


MONTH_NAMES = [
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
]

WEEKDAY_NAMES = ['Dom', 'Seg', 'Ter', 'Qua', 'Qui', 'Sex', 'Sáb']


def format_currency(amount) -> str:
    """
    Format an amount as Brazilian reais.

    >>> format_currency(Decimal('1234.5'))
    'R$ 1.234,50'
    >>> format_currency(Decimal('-10'))
    '-R$ 10,00'
    """
    amount = Decimal(amount)
    digits = f"{abs(amount):,.2f}"
    # en-US separators -> pt-BR separators
    digits = digits.replace(',', '_').replace('.', ',').replace('_', '.')
    sign = '-' if amount < 0 else ''
    return f"{sign}R$ {digits}"


def format_signed_currency(amount, is_revenue: bool) -> str:
    """Amount with an explicit sign: ``+R$ 300,00`` or ``-R$ 100,00``."""
    sign = '+' if is_revenue else '-'
    return f"{sign}{format_currency(abs(Decimal(amount)))}"


def format_date(value: date) -> str:
    return value.strftime('%d/%m/%Y')


def month_name(year: int, month: int) -> str:
    """Title of a calendar month, e.g. ``janeiro de 2024``."""
    return f"{MONTH_NAMES[month - 1]} de {year}"


def generate_id() -> uuid.UUID:
    return uuid.uuid4()


def add_months(start: date, months: int) -> date:
    """
    Advance ``start`` by ``months`` calendar months.

    The day of month is kept when the target month has it. Otherwise the
    surplus days roll forward into the following month, so 2024-01-31 plus
    one month is 2024-03-02 (February 2024 has 29 days).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=start.day - 1)


def shift_month(year: int, month: int, delta: int):
    """Return ``(year, month)`` moved by ``delta`` months."""
    month_index = month - 1 + delta
    return year + month_index // 12, month_index % 12 + 1
