"""Month normalization to two-digit codes."""

from types import MappingProxyType

MISSING_MONTH = "00"

MONTHS = MappingProxyType(
    {
        "1": "01",
        "2": "02",
        "3": "03",
        "4": "04",
        "5": "05",
        "6": "06",
        "7": "07",
        "8": "08",
        "9": "09",
        "10": "10",
        "11": "11",
        "12": "12",
        "01": "01",
        "02": "02",
        "03": "03",
        "04": "04",
        "05": "05",
        "06": "06",
        "07": "07",
        "08": "08",
        "09": "09",
        "jan": "01",
        "feb": "02",
        "mar": "03",
        "apr": "04",
        "may": "05",
        "jun": "06",
        "jul": "07",
        "aug": "08",
        "sep": "09",
        "oct": "10",
        "nov": "11",
        "dec": "12",
        "january": "01",
        "february": "02",
        "march": "03",
        "april": "04",
        "june": "06",
        "july": "07",
        "august": "08",
        "september": "09",
        "october": "10",
        "november": "11",
        "december": "12",
    }
)
"""Lowercase month spelling → two-digit code."""


def normalize_month(value: object) -> str:
    """Return the two-digit code for ``value``, or ``"00"`` if unrecognized.

    Accepts ints, numeric strings (padded or not), three-letter abbreviations
    and full English month names in any case.  Never raises.
    """
    if value is None:
        return MISSING_MONTH
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return MONTHS.get(str(value).strip().lower(), MISSING_MONTH)
