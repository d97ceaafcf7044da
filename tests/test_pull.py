from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import pytest

from conftest import FakeApi, fail_when
from visible_spectrum.assemble import AllSucceeded, PartialFailure
from visible_spectrum.config import NaomiConfig
from visible_spectrum.errors import InvalidParameter, InvalidPeriodFormat, NoDataFetched
from visible_spectrum.pull import pull_naomi


def _pull(cfg: NaomiConfig, api: FakeApi, **kwargs: object):
    params: dict[str, object] = {
        "countries": ["Angola"],
        "indicators": ["Population"],
        "age_groups": ["15-49"],
        "sex_options": "all",
        "periods": "recent",
    }
    params.update(kwargs)
    return pull_naomi(config=cfg, fetch=api, **params)  # type: ignore[arg-type]


def test_pull_returns_single_table_when_everything_succeeds(cfg: NaomiConfig) -> None:
    api = FakeApi()
    result = _pull(cfg, api)

    assert isinstance(result, AllSucceeded)
    assert len(api.calls) == 3
    assert all("country=AGO" in url and "period=2023-4" in url for url in api.calls)
    assert len(result.success_data) == 9
    assert set(result.success_data["country"]) == {"Angola"}


def test_pull_reports_partial_failure(cfg: NaomiConfig, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="visible_spectrum")
    api = FakeApi(fail_when("sex=male"))
    result = _pull(cfg, api)

    assert isinstance(result, PartialFailure)
    assert len(api.calls) == len(set(api.calls)) == 3
    assert result.fail_data["url"].tolist() == [api.calls[0]]
    assert len(result.success_data) == 6
    assert result.fail_data[["sex", "indicator_code"]].values.tolist() == [["Male", "population"]]
    assert "Expected requests: 3" in caplog.text
    assert "Failed requests: 1" in caplog.text


def test_validation_fails_before_any_request(cfg: NaomiConfig) -> None:
    api = FakeApi()
    with pytest.raises(InvalidParameter, match="Atlantis"):
        _pull(cfg, api, countries=["Atlantis"])
    with pytest.raises(InvalidPeriodFormat):
        _pull(cfg, api, periods=["2023 Q4"])
    assert api.calls == []


def test_pull_raises_when_nothing_comes_back(cfg: NaomiConfig) -> None:
    with pytest.raises(NoDataFetched):
        _pull(cfg, FakeApi(fail_when("sex=")))


def test_max_level_is_sent(cfg: NaomiConfig) -> None:
    api = FakeApi()
    _pull(cfg, api, countries=["Malawi"], sex_options=["Both"], max_level=3)
    assert api.calls[0].endswith("areaLevel=3")


def test_csv_export_overwrites_in_cwd(
    cfg: NaomiConfig, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "naomi_results.csv"
    out.write_text("stale\n")

    result = _pull(cfg, FakeApi(fail_when("sex=both")), csv=True)

    written = pd.read_csv(out)
    assert len(written) == len(result.success_data) == 6
    assert list(written.columns[:3]) == ["country", "area", "level"]


def test_no_csv_by_default(cfg: NaomiConfig, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    _pull(cfg, FakeApi())
    assert not (tmp_path / "naomi_results.csv").exists()


def test_negative_wait_rejected(cfg: NaomiConfig) -> None:
    api = FakeApi()
    with pytest.raises(ValueError):
        _pull(cfg, api, wait=-0.1)
    assert api.calls == []
