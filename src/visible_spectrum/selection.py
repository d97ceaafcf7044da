from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Collection, Iterable, Mapping, Optional, Sequence, Union

from rapidfuzz.distance import Levenshtein

from visible_spectrum.codes import is_period
from visible_spectrum.config import NaomiConfig
from visible_spectrum.errors import InvalidParameter, InvalidPeriodFormat
from visible_spectrum.models import FilterSet


logger = logging.getLogger(__name__)

MAX_SUGGESTION_DISTANCE = 2

_FIELD_LABELS: dict[str, str] = {
    "countries": "country",
    "indicators": "indicator",
    "age_groups": "age group",
    "sex_options": "sex option",
    "periods": "period",
}


@dataclass(frozen=True)
class Keyword:
    name: str


@dataclass(frozen=True)
class Explicit:
    values: tuple[str, ...]


Selection = Union[Keyword, Explicit]
SelectionInput = Union[str, Sequence[str], AbstractSet[str]]


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    unique: dict[str, None] = {}
    for v in values:
        unique[v] = None
    return tuple(unique.keys())


def parse_selection(value: SelectionInput, keywords: Collection[str]) -> Selection:
    if isinstance(value, str):
        values: tuple[str, ...] = (value,)
    elif isinstance(value, (set, frozenset)):
        # sorted so request order does not depend on hash seed
        values = tuple(sorted(str(v) for v in value))
    else:
        values = tuple(str(v) for v in value)
    if not values:
        raise ValueError("Filter selections must contain at least one value.")
    if len(values) == 1 and values[0] in keywords:
        return Keyword(values[0])
    return Explicit(_unique(values))


def keyword_table(field: str, cfg: NaomiConfig) -> dict[str, tuple[str, ...]]:
    ref = cfg.reference
    tables: dict[str, dict[str, tuple[str, ...]]] = {
        "countries": {"all": ref.all_countries, "dreams": ref.dreams_countries},
        "indicators": {"all": ref.all_indicators, "no anc": ref.no_anc_indicators},
        "age_groups": {"standard": ref.standard_age_groups},
        "sex_options": {"all": ref.sex_options},
        "periods": {"recent": (cfg.defaults.recent_period,)},
    }
    if field not in tables:
        raise KeyError(f"Unknown filter field '{field}'. Expected one of {list(tables)}.")
    return tables[field]


def vocabulary(field: str, cfg: NaomiConfig) -> Optional[tuple[str, ...]]:
    """Closed vocabulary for a field, or None when values are checked by pattern."""
    ref = cfg.reference
    vocabs: dict[str, Optional[tuple[str, ...]]] = {
        "countries": ref.all_countries,
        "indicators": ref.all_indicators,
        "age_groups": ref.valid_age_groups,
        "sex_options": ref.sex_options,
        "periods": None,
    }
    return vocabs[field]


def resolve(selection: Selection, table: Mapping[str, Sequence[str]]) -> tuple[str, ...]:
    if isinstance(selection, Keyword):
        return tuple(table[selection.name])
    return selection.values


def suggest_closest(value: str, options: Sequence[str]) -> Optional[str]:
    if not options:
        return None
    closest = min(options, key=lambda opt: Levenshtein.distance(value, opt))
    if Levenshtein.distance(value, closest) <= MAX_SUGGESTION_DISTANCE:
        return closest
    return None


def validate(values: Iterable[str], options: Sequence[str], field: str) -> None:
    allowed = set(options)
    for value in values:
        if value not in allowed:
            raise InvalidParameter(value, field, suggest_closest(value, options))


def validate_periods(values: Iterable[str]) -> None:
    for value in values:
        if not is_period(value):
            raise InvalidPeriodFormat(value)


def parse_max_level(value: Union[int, str, None]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidParameter(value, "max level")
    if isinstance(value, str):
        s = value.strip()
        if s.lower() == "none":
            return None
        if not s.isdigit():
            raise InvalidParameter(value, "max level")
        return int(s)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise InvalidParameter(value, "max level")
    return value


def resolve_field(field: str, value: SelectionInput, cfg: NaomiConfig) -> tuple[str, ...]:
    table = keyword_table(field, cfg)
    values = resolve(parse_selection(value, table.keys()), table)
    options = vocabulary(field, cfg)
    if options is None:
        validate_periods(values)
    else:
        validate(values, options, _FIELD_LABELS[field])
    return values


def resolve_filters(
    *,
    countries: SelectionInput,
    indicators: SelectionInput,
    age_groups: SelectionInput,
    sex_options: SelectionInput,
    periods: SelectionInput,
    max_level: Union[int, str, None],
    cfg: NaomiConfig,
    verbose: bool = False,
) -> FilterSet:
    """
    Expand keywords and validate every filter dimension.

    Raises on the first invalid value, before any request is built.
    """
    filters = FilterSet(
        countries=resolve_field("countries", countries, cfg),
        indicators=resolve_field("indicators", indicators, cfg),
        age_groups=resolve_field("age_groups", age_groups, cfg),
        sex_options=resolve_field("sex_options", sex_options, cfg),
        periods=resolve_field("periods", periods, cfg),
        area_level_cap=parse_max_level(max_level),
    )
    if verbose:
        logger.info("All inputs are valid.")
    return filters
