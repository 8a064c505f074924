# sales_dashboard/utils.py
import re

# leading optional sign and digits, the way JavaScript's parseInt reads them
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def _leading_int(value):
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # past the interpreter's integer string conversion limit
        return None


def parse_month(value):
    """
    Parse a raw ``month`` parameter.
    Reads the leading integer ("3abc" is 3, "1.5" is 1). Missing or
    non-numeric input, or a number outside 1-12, yields None, the sentinel
    that matches no records.
    """
    month = _leading_int(value)
    if month is None or not 1 <= month <= 12:
        return None
    return month


def parse_int(value, default):
    """
    Parse a raw paging parameter by its leading integer, falling back to
    ``default`` when it is missing or has no leading digits.
    """
    number = _leading_int(value)
    return default if number is None else number
