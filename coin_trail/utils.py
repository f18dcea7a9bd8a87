# coin_trail/utils.py
from datetime import date
from typing import Optional


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_year(value: Optional[str], today: Optional[date] = None) -> int:
    """
    Read a ``year`` query parameter, falling back to the current year when it
    is missing or not a number.
    """
    today = today or date.today()
    year = _parse_int(value)
    if year is None or not 1 <= year <= 9999:
        return today.year
    return year


def parse_month(value: Optional[str], today: Optional[date] = None) -> int:
    """
    Read a ``month`` query parameter (1-12), falling back to the current month.
    """
    today = today or date.today()
    month = _parse_int(value)
    if month is None or not 1 <= month <= 12:
        return today.month
    return month

