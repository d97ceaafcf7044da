from __future__ import annotations

from typing import Callable

import pytest

from visible_spectrum.config import NaomiConfig, load_config
from visible_spectrum.io.naomi import HttpResponse


ANGOLA_CSV = (
    "area_id,area,level,mean,lower,upper\n"
    "AGO,Angola,0,100,90,110\n"
    "AGO_1_1,Huambo,1,10,9,11\n"
    "AGO_1_2,Luanda,1,20,18,22\n"
)


class FakeApi:
    """Stands in for the HTTP transport; records every URL it is asked for."""

    def __init__(self, handler: Callable[[str], HttpResponse] | None = None) -> None:
        self.handler = handler or (lambda url: HttpResponse(status=200, body=ANGOLA_CSV))
        self.calls: list[str] = []

    def __call__(self, url: str) -> HttpResponse:
        self.calls.append(url)
        return self.handler(url)


def fail_when(fragment: str, status: int = 500) -> Callable[[str], HttpResponse]:
    def handler(url: str) -> HttpResponse:
        if fragment in url:
            return HttpResponse(status=status, body="Internal Server Error")
        return HttpResponse(status=200, body=ANGOLA_CSV)

    return handler


@pytest.fixture
def cfg() -> NaomiConfig:
    return load_config()
