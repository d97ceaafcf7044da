from __future__ import annotations

from dataclasses import replace

import pytest

from visible_spectrum.errors import MissingCode
from visible_spectrum.models import AtomicRequest
from visible_spectrum.urls import build_url


BASE = "https://naomiviewerserver.azurewebsites.net/api/v1/data"

REQUEST = AtomicRequest(
    countries=("Angola", "Malawi"),
    country_codes=("AGO", "MWI"),
    indicator="HIV prevalence",
    indicator_code="prevalence",
    age_group="15-49",
    age_code="Y015_049",
    sex="Both",
    sex_code="both",
    period="December 2023",
    period_code="2023-4",
    area_level=1,
)


def test_build_url_repeats_country_parameter() -> None:
    assert build_url(REQUEST, BASE) == (
        f"{BASE}?country=AGO&country=MWI&indicator=prevalence&ageGroup=Y015_049"
        "&period=2023-4&sex=both&areaLevel=1"
    )


def test_build_url_tolerates_trailing_separator() -> None:
    assert build_url(REQUEST, BASE + "?").startswith(f"{BASE}?country=AGO")


def test_build_url_percent_encodes_each_value() -> None:
    request = replace(REQUEST, country_codes=("C I V",), indicator_code="a&b'c")
    url = build_url(request, BASE)
    assert "country=C%20I%20V" in url
    assert "indicator=a%26b%27c" in url


@pytest.mark.parametrize(
    "change",
    [{"indicator_code": None}, {"country_codes": ()}, {"age_code": ""}],
)
def test_build_url_requires_codes(change: dict[str, object]) -> None:
    with pytest.raises(MissingCode):
        build_url(replace(REQUEST, **change), BASE)  # type: ignore[arg-type]
