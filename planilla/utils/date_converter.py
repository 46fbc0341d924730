# planilla/utils/date_converter.py

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from babel.dates import format_skeleton
from babel.numbers import format_currency as babel_format_currency

from planilla.config import LOCALE, CURRENCY
from planilla.constants import DATE_FORMAT


def to_date(value: Union[date, datetime]) -> date:
    """Drops the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value

def format_period(on: Union[date, datetime], locale: str = LOCALE) -> str:
    """
    Payroll period name for the month containing ``on``, e.g. "Octubre de 2026".
    Month name and layout come from the locale; the first letter is capitalized.
    """
    period = format_skeleton("yMMMM", to_date(on), locale=locale)
    return period[:1].upper() + period[1:]

def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Whole calendar days between two dates, regardless of order."""
    return abs((to_date(end) - to_date(start)).days)

def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parses a YYYY-MM-DD string; returns None for empty or invalid input."""
    if not isinstance(date_str, str) or not date_str:
        return None
    try:
        return datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except ValueError:
        return None

def format_currency(amount: Union[Decimal, float, int], currency: str = CURRENCY, locale: str = LOCALE) -> str:
    return babel_format_currency(amount, currency, locale=locale)
