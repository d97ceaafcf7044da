from __future__ import annotations

import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass
from functools import partial
from io import StringIO
from typing import Callable, Iterable

import pandas as pd
import requests

from visible_spectrum.assemble import annotate_response
from visible_spectrum.models import AtomicRequest, EmptyResult, FetchError, HttpError, RequestOutcome, Success


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("area", "level")


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


Fetch = Callable[[str], HttpResponse]


def http_get(url: str, *, session: requests.Session | None = None, timeout: float = 60) -> HttpResponse:
    getter = session.get if session is not None else requests.get
    resp = getter(url, timeout=timeout)
    return HttpResponse(status=resp.status_code, body=resp.text)


def parse_csv(body: str) -> pd.DataFrame:
    if not body.strip():
        return pd.DataFrame()
    return pd.read_csv(StringIO(body))


def fetch_one(request: AtomicRequest, fetch: Fetch) -> RequestOutcome:
    """Issue one GET and classify it. Never raises for per-request failures."""
    try:
        resp = fetch(request.url)
    except requests.RequestException as exc:
        return FetchError(request=request, reason=f"{type(exc).__name__}: {exc}")

    if not resp.ok:
        return HttpError(request=request, status=resp.status)

    try:
        df = parse_csv(resp.body)
    except pd.errors.EmptyDataError:
        return EmptyResult(request=request)
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        return FetchError(request=request, reason=f"Unreadable CSV body: {exc}")

    if df.empty:
        return EmptyResult(request=request)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        return FetchError(request=request, reason=f"Response missing columns {missing}")

    return Success(request=request, table=annotate_response(df, request))


def _log_failure(outcome: RequestOutcome) -> None:
    request = outcome.request
    if isinstance(outcome, HttpError):
        logger.warning("Failed to fetch data for URL: %s with status code: %s", request.url, outcome.status)
    elif isinstance(outcome, EmptyResult):
        logger.warning("Failed %s: empty response.", request.describe())
    elif isinstance(outcome, FetchError):
        logger.warning("Failed %s: %s", request.describe(), outcome.reason)


def fetch_requests(
    atomic_requests: Iterable[AtomicRequest],
    *,
    fetch: Fetch | None = None,
    wait: float = 0,
    timeout: float = 60,
    verbose: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> list[RequestOutcome]:
    """
    Run the batch one request at a time, in order.

    Returns one outcome per request. Failures are recorded and skipped, never
    retried. When wait > 0 the loop pauses between consecutive requests.
    """
    if wait < 0:
        raise ValueError("wait must be >= 0 seconds.")

    atomic_requests = list(atomic_requests)
    outcomes: list[RequestOutcome] = []

    with ExitStack() as stack:
        if fetch is not None:
            get = fetch
        else:
            session = stack.enter_context(requests.Session())
            get = partial(http_get, session=session, timeout=timeout)
        for idx, request in enumerate(atomic_requests):
            if idx > 0 and wait > 0:
                sleep(wait)
            if verbose:
                logger.info("Processing: %s", request.url)

            outcome = fetch_one(request, get)
            if isinstance(outcome, Success):
                if verbose:
                    logger.info("Processed %s.", request.describe())
            else:
                _log_failure(outcome)
            outcomes.append(outcome)

    return outcomes
