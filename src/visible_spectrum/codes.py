from __future__ import annotations

import re

from visible_spectrum.errors import InvalidAgeFormat, InvalidPeriodFormat


MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

PERIOD_RX = re.compile(r"(?P<month>" + "|".join(MONTHS) + r")\s(?P<year>\d{4})")
_AGE_OPEN_RX = re.compile(r"(?P<start>\d+)\+")
_AGE_RANGE_RX = re.compile(r"(?P<start>\d+)-(?P<end>\d+)")

ALL_AGES_CODE = "Y000_999"
UNDER_ONE_CODE = "Y000_000"


def age_range_to_code(age_range: str) -> str:
    """'15-19' -> 'Y015_019', '50+' -> 'Y050_999', '<1' -> 'Y000_000', 'all ages' -> 'Y000_999'."""
    s = str(age_range).strip()
    if s == "all ages":
        return ALL_AGES_CODE
    if s == "<1":
        return UNDER_ONE_CODE

    m = _AGE_OPEN_RX.fullmatch(s)
    if m:
        return f"Y{int(m['start']):03d}_999"

    m = _AGE_RANGE_RX.fullmatch(s)
    if m:
        return f"Y{int(m['start']):03d}_{int(m['end']):03d}"

    raise InvalidAgeFormat(age_range)


def is_period(value: str) -> bool:
    return PERIOD_RX.fullmatch(str(value)) is not None


def convert_date_to_quarter(period: str) -> str:
    """'March 2024' -> '2024-1'."""
    m = PERIOD_RX.fullmatch(str(period).strip())
    if not m:
        raise InvalidPeriodFormat(period)
    month = MONTHS.index(m["month"]) + 1
    quarter = (month - 1) // 3 + 1
    return f"{m['year']}-{quarter}"


def sex_to_code(sex: str) -> str:
    return str(sex).strip().lower()
