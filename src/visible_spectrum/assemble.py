from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Iterable, Union

import pandas as pd

from visible_spectrum.errors import NoDataFetched
from visible_spectrum.models import AtomicRequest, FailureRecord, RequestOutcome, Success


logger = logging.getLogger(__name__)

RESULT_COLUMNS: list[str] = [
    "country",
    "area",
    "level",
    "indicator",
    "age_group",
    "sex",
    "period",
    "period_year_quarter",
    "mean",
    "lower",
    "upper",
]
NUMERIC_COLUMNS: tuple[str, ...] = ("level", "mean", "lower", "upper")
FAILURE_COLUMNS: list[str] = [f.name for f in fields(FailureRecord)]


def fill_country(df: pd.DataFrame) -> pd.DataFrame:
    """
    Label every row with its country: the area of the nearest level-0 row at or
    above it. Assumes the API lists each national row before its subdivisions.
    """
    out = df.copy()
    out["country"] = out["area"].where(out["level"] == 0).ffill()
    orphans = int(out["country"].isna().sum())
    if orphans:
        logger.warning("%d row(s) precede any national (level 0) row; country left empty.", orphans)
    return out


def annotate_response(df: pd.DataFrame, request: AtomicRequest) -> pd.DataFrame:
    out = df.copy()
    out["period"] = request.period
    out["period_year_quarter"] = request.period_code
    out["age_group"] = request.age_group
    out["sex"] = request.sex
    out["indicator"] = request.indicator_code
    for col in NUMERIC_COLUMNS:
        if col in out.columns:
            out[col] = pd.to_numeric(out[col], errors="coerce")
        else:
            out[col] = float("nan")
    out = fill_country(out)
    extra = [c for c in out.columns if c not in RESULT_COLUMNS]
    return out[RESULT_COLUMNS + extra].reset_index(drop=True)


@dataclass(frozen=True, eq=False)
class AllSucceeded:
    table: pd.DataFrame

    @property
    def success_data(self) -> pd.DataFrame:
        return self.table

    @property
    def failures(self) -> tuple[FailureRecord, ...]:
        return ()

    @property
    def is_partial(self) -> bool:
        return False


@dataclass(frozen=True, eq=False)
class PartialFailure:
    success_data: pd.DataFrame
    failures: tuple[FailureRecord, ...]

    @property
    def fail_data(self) -> pd.DataFrame:
        return failures_frame(self.failures)

    @property
    def is_partial(self) -> bool:
        return True


PullResult = Union[AllSucceeded, PartialFailure]


def failures_frame(records: Iterable[FailureRecord]) -> pd.DataFrame:
    rows = [r.__dict__ for r in records]
    return pd.DataFrame(rows, columns=FAILURE_COLUMNS)


def assemble(outcomes: Iterable[RequestOutcome]) -> PullResult:
    """
    Concatenate successful tables in request order.

    Returns AllSucceeded when nothing failed, PartialFailure otherwise; raises
    NoDataFetched when no request succeeded.
    """
    tables: list[pd.DataFrame] = []
    failures: list[FailureRecord] = []
    for outcome in outcomes:
        if isinstance(outcome, Success):
            tables.append(outcome.table)
        else:
            failures.append(FailureRecord.from_request(outcome.request))

    if not tables:
        raise NoDataFetched(f"No data fetched from the API ({len(failures)} request(s) failed).")

    combined = pd.concat(tables, ignore_index=True)
    if not failures:
        return AllSucceeded(table=combined)
    return PartialFailure(success_data=combined, failures=tuple(failures))
