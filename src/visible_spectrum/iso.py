from __future__ import annotations

import re
import warnings
from functools import lru_cache
from typing import Iterable, Optional

import pycountry

from visible_spectrum.errors import UnrecognizedCountryWarning


# Spellings used by the Naomi viewer that pycountry does not resolve, plus the
# dataset's own code for Eswatini (ISO 3166 is SWZ).
_NAME_OVERRIDES: dict[str, str] = {
    "ESWATINI": "ESW",
    "COTE D'IVOIRE": "CIV",
    "CÔTE D'IVOIRE": "CIV",
    "DEMOCRATIC REPUBLIC OF THE CONGO": "COD",
    "DR CONGO": "COD",
    "CONGO": "COG",
    "TANZANIA": "TZA",
    "UNITED REPUBLIC OF TANZANIA": "TZA",
    "GAMBIA": "GMB",
    "THE GAMBIA": "GMB",
}


def normalize_country_name(name: str) -> str:
    name = name.strip()
    return re.sub(r"\s+", " ", name)


@lru_cache(maxsize=512)
def country_name_to_iso(name: str) -> Optional[str]:
    clean = normalize_country_name(name)
    if not clean:
        return None
    key = clean.upper()
    if key in _NAME_OVERRIDES:
        return _NAME_OVERRIDES[key]
    try:
        country = pycountry.countries.lookup(clean)
    except LookupError:
        return None
    return getattr(country, "alpha_3", None)


def countries_to_iso(names: Iterable[str]) -> tuple[Optional[str], ...]:
    """
    Map country names to their Naomi codes, position by position.

    Unmapped names come back as None and are reported together in a single
    UnrecognizedCountryWarning rather than raising.
    """
    names = list(names)
    codes = tuple(country_name_to_iso(n) for n in names)
    unmapped = [n for n, c in zip(names, codes) if c is None]
    if unmapped:
        warnings.warn(
            f"Unrecognized country names: {', '.join(unmapped)}",
            UnrecognizedCountryWarning,
            stacklevel=2,
        )
    return codes
