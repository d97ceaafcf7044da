from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout: float


@dataclass(frozen=True)
class Defaults:
    recent_period: str
    csv_filename: str


@dataclass(frozen=True)
class ReferenceVocabulary:
    all_countries: tuple[str, ...]
    indicator_name_to_code: Mapping[str, str]
    country_max_area_level: Mapping[str, int]
    dreams_countries: tuple[str, ...]
    no_anc_indicators: tuple[str, ...]
    standard_age_groups: tuple[str, ...]
    valid_age_groups: tuple[str, ...]
    sex_options: tuple[str, ...]

    @property
    def all_indicators(self) -> tuple[str, ...]:
        return tuple(self.indicator_name_to_code)


@dataclass(frozen=True)
class NaomiConfig:
    api: ApiConfig
    defaults: Defaults
    reference: ReferenceVocabulary


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "data" / "naomi.yml"


def _require(d: dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in d:
        raise KeyError(f"Missing required key '{key}' in {ctx}.")
    return d[key]


def _str_list(value: Any, *, ctx: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ValueError(f"{ctx} must be a non-empty list.")
    return tuple(str(x) for x in value)


def _str_mapping(value: Any, *, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict) or not value:
        raise ValueError(f"{ctx} must be a non-empty mapping.")
    return {str(k): v for k, v in value.items()}


def _check_subset(subset: tuple[str, ...], superset: tuple[str, ...], *, ctx: str) -> None:
    known = set(superset)
    unknown = [x for x in subset if x not in known]
    if unknown:
        raise ValueError(f"{ctx} lists unknown entries: {unknown}")


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> NaomiConfig:
    path = Path(path)
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise TypeError(f"Config at {path} must be a mapping.")

    api_raw = _require(raw, "api", ctx="root")
    defaults_raw = _require(raw, "defaults", ctx="root")
    ages_raw = _require(raw, "age_groups", ctx="root")

    api = ApiConfig(
        base_url=str(_require(api_raw, "base_url", ctx="api")).rstrip("/?"),
        timeout=float(api_raw.get("timeout", 60)),
    )
    if api.timeout <= 0:
        raise ValueError("api.timeout must be > 0.")

    defaults = Defaults(
        recent_period=str(_require(defaults_raw, "recent_period", ctx="defaults")),
        csv_filename=str(defaults_raw.get("csv_filename", "naomi_results.csv")),
    )

    levels: dict[str, int] = {}
    for name, level in _str_mapping(_require(raw, "countries", ctx="root"), ctx="countries").items():
        if isinstance(level, bool) or not isinstance(level, int) or level < 0:
            raise ValueError(f"countries.{name} must be a non-negative integer area level.")
        levels[name] = level
    countries = tuple(levels)

    indicators = {
        name: str(code)
        for name, code in _str_mapping(_require(raw, "indicators", ctx="root"), ctx="indicators").items()
    }

    dreams = _str_list(_require(raw, "dreams_countries", ctx="root"), ctx="dreams_countries")
    no_anc = _str_list(_require(raw, "no_anc_indicators", ctx="root"), ctx="no_anc_indicators")
    valid_ages = _str_list(_require(ages_raw, "valid", ctx="age_groups"), ctx="age_groups.valid")
    standard_ages = _str_list(_require(ages_raw, "standard", ctx="age_groups"), ctx="age_groups.standard")
    sexes = _str_list(_require(raw, "sex_options", ctx="root"), ctx="sex_options")

    _check_subset(dreams, countries, ctx="dreams_countries")
    _check_subset(no_anc, tuple(indicators), ctx="no_anc_indicators")
    _check_subset(standard_ages, valid_ages, ctx="age_groups.standard")

    reference = ReferenceVocabulary(
        all_countries=countries,
        indicator_name_to_code=MappingProxyType(indicators),
        country_max_area_level=MappingProxyType(levels),
        dreams_countries=dreams,
        no_anc_indicators=no_anc,
        standard_age_groups=standard_ages,
        valid_age_groups=valid_ages,
        sex_options=sexes,
    )
    return NaomiConfig(api=api, defaults=defaults, reference=reference)
