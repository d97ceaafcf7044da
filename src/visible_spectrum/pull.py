from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Union

import pandas as pd

from visible_spectrum.assemble import PullResult, assemble
from visible_spectrum.config import NaomiConfig, load_config
from visible_spectrum.expand import expand
from visible_spectrum.io.naomi import Fetch, fetch_requests
from visible_spectrum.models import Success
from visible_spectrum.selection import SelectionInput, resolve_filters


logger = logging.getLogger(__name__)


def export_csv(df: pd.DataFrame, path: str | Path) -> Path:
    path = Path(path)
    df.to_csv(path, index=False)
    return path


def pull_naomi(
    countries: SelectionInput = "all",
    indicators: SelectionInput = "all",
    age_groups: SelectionInput = "standard",
    sex_options: SelectionInput = "all",
    periods: SelectionInput = "recent",
    max_level: Union[int, str, None] = "none",
    *,
    verbose: bool = False,
    csv: bool = False,
    wait: float = 0,
    config: NaomiConfig | None = None,
    fetch: Fetch | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PullResult:
    """
    Pull Naomi estimates for every combination of the requested filters.

    Each filter takes either a keyword ("all", "dreams", "no anc", "standard",
    "recent") or a list of explicit values. One API request is made per
    (age group, sex, indicator, period); all countries go into each request.

    Returns AllSucceeded when every request returned data, or PartialFailure
    carrying both success_data and fail_data. Raises NoDataFetched when nothing
    came back, and InvalidParameter / InvalidPeriodFormat before any request
    when a filter value is invalid.

    With csv=True the successful rows are written to naomi_results.csv in the
    current directory, replacing any existing file.
    """
    if wait < 0:
        raise ValueError("wait must be >= 0 seconds.")
    cfg = config if config is not None else load_config()

    filters = resolve_filters(
        countries=countries,
        indicators=indicators,
        age_groups=age_groups,
        sex_options=sex_options,
        periods=periods,
        max_level=max_level,
        cfg=cfg,
        verbose=verbose,
    )

    if verbose:
        logger.info("Processing country parameters...")
    atomic_requests = expand(filters, cfg)
    if verbose:
        logger.info("URLs created.")
        for request in atomic_requests:
            logger.info("  %s", request.url)

    outcomes = fetch_requests(
        atomic_requests,
        fetch=fetch,
        wait=wait,
        timeout=cfg.api.timeout,
        verbose=verbose,
        sleep=sleep,
    )

    success_count = sum(isinstance(o, Success) for o in outcomes)
    logger.info("Expected requests: %d", filters.expected_requests)
    logger.info("Successful requests: %d", success_count)
    logger.info("Failed requests: %d", len(outcomes) - success_count)

    if verbose:
        logger.info("Combining all queries' results...")
    result = assemble(outcomes)

    if verbose:
        rows, cols = result.success_data.shape
        logger.info("Combined results shape: %d rows and %d columns.", rows, cols)
    if result.is_partial:
        logger.warning("Failures in query. See success_data for results and fail_data for failed requests.")

    if csv:
        out = export_csv(result.success_data, Path.cwd() / cfg.defaults.csv_filename)
        logger.info("Results written to %s", out)

    return result
