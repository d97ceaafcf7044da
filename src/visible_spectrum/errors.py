from __future__ import annotations

from typing import Optional


class NaomiError(Exception):
    """Base class for errors raised while pulling Naomi estimates."""


class InvalidParameter(NaomiError, ValueError):
    """A filter value is not part of its vocabulary."""

    def __init__(self, value: object, field: str, suggestion: Optional[str] = None) -> None:
        self.value = value
        self.field = field
        self.suggestion = suggestion
        if suggestion is not None:
            msg = f"Invalid parameter: {value}. Did you mean {suggestion}? Rerun with valid input value."
        else:
            msg = f"Invalid parameter: {value} is not a valid {field}. Rerun with valid input value."
        super().__init__(msg)


class InvalidPeriodFormat(NaomiError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Invalid period '{value}'. Please provide periods in the format 'Month YYYY', e.g., 'December 2023'."
        )


class InvalidAgeFormat(NaomiError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid age group '{value}'. Expected 'all ages', '<1', 'N+' or 'A-B'.")


class MissingCode(NaomiError, LookupError):
    """A request cannot be encoded because one of its API codes is unknown."""


class NoDataFetched(NaomiError, RuntimeError):
    """Every request in the batch failed."""


class UnrecognizedCountryWarning(UserWarning):
    pass
