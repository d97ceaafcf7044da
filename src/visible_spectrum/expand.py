from __future__ import annotations

from dataclasses import replace
from itertools import product
from typing import Iterable, Mapping, Optional

from visible_spectrum.codes import age_range_to_code, convert_date_to_quarter, sex_to_code
from visible_spectrum.config import NaomiConfig
from visible_spectrum.iso import countries_to_iso
from visible_spectrum.models import AtomicRequest, FilterSet
from visible_spectrum.urls import build_url


def resolve_area_level(
    countries: Iterable[str],
    max_levels: Mapping[str, int],
    cap: Optional[int],
) -> int:
    """
    Area level for one multi-country request.

    The API takes a single areaLevel per query, so use the deepest level any
    requested country supports, clipped to the caller's cap.
    """
    countries = list(countries)
    depths = [max_levels[c] for c in countries if c in max_levels]
    if not depths:
        raise KeyError(f"No maximum area level known for countries {list(countries)}.")
    deepest = max(depths)
    return deepest if cap is None else min(cap, deepest)


def expand(filters: FilterSet, cfg: NaomiConfig) -> list[AtomicRequest]:
    """
    One AtomicRequest per (age group, sex, indicator, period), age group varying
    fastest. Countries are not multiplied out: every request carries the full
    country code list.
    """
    ref = cfg.reference
    country_codes = tuple(c for c in countries_to_iso(filters.countries) if c is not None)
    area_level = resolve_area_level(filters.countries, ref.country_max_area_level, filters.area_level_cap)

    age_codes = {a: age_range_to_code(a) for a in filters.age_groups}
    period_codes = {p: convert_date_to_quarter(p) for p in filters.periods}

    out: list[AtomicRequest] = []
    for period, indicator, sex, age in product(
        filters.periods, filters.indicators, filters.sex_options, filters.age_groups
    ):
        request = AtomicRequest(
            countries=filters.countries,
            country_codes=country_codes,
            indicator=indicator,
            indicator_code=ref.indicator_name_to_code.get(indicator),
            age_group=age,
            age_code=age_codes[age],
            sex=sex,
            sex_code=sex_to_code(sex),
            period=period,
            period_code=period_codes[period],
            area_level=area_level,
        )
        out.append(replace(request, url=build_url(request, cfg.api.base_url)))
    return out
