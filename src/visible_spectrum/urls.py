from __future__ import annotations

from urllib.parse import quote, urlencode

from visible_spectrum.errors import MissingCode
from visible_spectrum.models import AtomicRequest


def _missing_codes(request: AtomicRequest) -> list[str]:
    required = {
        "country": request.country_codes,
        "indicator": request.indicator_code,
        "ageGroup": request.age_code,
        "period": request.period_code,
        "sex": request.sex_code,
    }
    return [name for name, code in required.items() if not code]


def build_url(request: AtomicRequest, base_url: str) -> str:
    """
    Render a request as
    {base}?country=A[&country=B...]&indicator=..&ageGroup=..&period=..&sex=..&areaLevel=..

    Values are percent-encoded one by one; spaces become %20.
    """
    missing = _missing_codes(request)
    if missing:
        raise MissingCode(
            f"Cannot build URL for {request.describe()}: missing code(s) for {', '.join(missing)}."
        )

    params: list[tuple[str, str]] = [("country", code) for code in request.country_codes]
    params.extend(
        [
            ("indicator", str(request.indicator_code)),
            ("ageGroup", request.age_code),
            ("period", request.period_code),
            ("sex", request.sex_code),
            ("areaLevel", str(request.area_level)),
        ]
    )
    return f"{base_url.rstrip('/?')}?{urlencode(params, quote_via=quote)}"
