from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import pandas as pd


@dataclass(frozen=True)
class FilterSet:
    countries: tuple[str, ...]
    indicators: tuple[str, ...]
    age_groups: tuple[str, ...]
    sex_options: tuple[str, ...]
    periods: tuple[str, ...]
    area_level_cap: Optional[int] = None

    @property
    def expected_requests(self) -> int:
        return len(self.age_groups) * len(self.sex_options) * len(self.indicators) * len(self.periods)


@dataclass(frozen=True)
class AtomicRequest:
    countries: tuple[str, ...]
    country_codes: tuple[str, ...]
    indicator: str
    indicator_code: Optional[str]
    age_group: str
    age_code: str
    sex: str
    sex_code: str
    period: str
    period_code: str
    area_level: int
    url: str = ""

    def describe(self) -> str:
        return f"{self.period} {self.age_group} {self.sex} {self.indicator_code or self.indicator}"


@dataclass(frozen=True)
class FailureRecord:
    period: str
    age_group: str
    sex: str
    indicator_code: Optional[str]
    url: str

    @classmethod
    def from_request(cls, request: AtomicRequest) -> FailureRecord:
        return cls(
            period=request.period,
            age_group=request.age_group,
            sex=request.sex,
            indicator_code=request.indicator_code,
            url=request.url,
        )


@dataclass(frozen=True, eq=False)
class Success:
    request: AtomicRequest
    table: pd.DataFrame


@dataclass(frozen=True)
class EmptyResult:
    request: AtomicRequest


@dataclass(frozen=True)
class HttpError:
    request: AtomicRequest
    status: int


@dataclass(frozen=True)
class FetchError:
    """The transport raised, or the body could not be read as a Naomi table."""

    request: AtomicRequest
    reason: str


RequestOutcome = Union[Success, EmptyResult, HttpError, FetchError]
