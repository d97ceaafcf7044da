from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from visible_spectrum.config import DEFAULT_CONFIG_PATH, load_config
from visible_spectrum.errors import NaomiError
from visible_spectrum.pull import pull_naomi


app = typer.Typer(add_completion=False, help="Pull sub-national HIV estimates from the Naomi viewer API.")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _one_or_many(values: List[str]) -> str | List[str]:
    return values[0] if len(values) == 1 else values


@app.command()
def pull(
    country: List[str] = typer.Option(["all"], "--country", "-c", help="Country name, 'all' or 'dreams'. Repeatable."),
    indicator: List[str] = typer.Option(["all"], "--indicator", "-i", help="Indicator name, 'all' or 'no anc'. Repeatable."),
    age_group: List[str] = typer.Option(["standard"], "--age-group", "-a", help="Age group or 'standard'. Repeatable."),
    sex: List[str] = typer.Option(["all"], "--sex", "-s", help="Male, Female, Both or 'all'. Repeatable."),
    period: List[str] = typer.Option(["recent"], "--period", "-p", help="'Month YYYY' or 'recent'. Repeatable."),
    max_level: str = typer.Option("none", "--max-level", help="Deepest area level to request, or 'none'."),
    wait: float = typer.Option(0.0, "--wait", min=0.0, help="Seconds to pause between requests."),
    csv: bool = typer.Option(False, "--csv", help="Write successful rows to naomi_results.csv."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, help="Reference data YAML."),
) -> None:
    _configure_logging(verbose)
    cfg = load_config(config)
    try:
        result = pull_naomi(
            countries=_one_or_many(country),
            indicators=_one_or_many(indicator),
            age_groups=_one_or_many(age_group),
            sex_options=_one_or_many(sex),
            periods=_one_or_many(period),
            max_level=max_level,
            verbose=verbose,
            csv=csv,
            wait=wait,
            config=cfg,
        )
    except NaomiError as exc:
        print(f"[red]Error[/red] {exc}")
        raise typer.Exit(code=1)

    print(f"[green]Fetched[/green] {len(result.success_data):,} rows")
    if result.is_partial:
        table = Table("period", "age_group", "sex", "indicator_code", "url", title="Failed requests")
        for rec in result.failures:
            table.add_row(rec.period, rec.age_group, rec.sex, str(rec.indicator_code), rec.url)
        Console().print(table)
        print(f"[yellow]{len(result.failures)} request(s) failed[/yellow]")
    if csv:
        print(f"[green]Wrote[/green] {Path.cwd() / cfg.defaults.csv_filename}")


@app.command()
def countries(config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True)) -> None:
    ref = load_config(config).reference
    table = Table("country", "max_level", "dreams", title="Naomi countries")
    for name in ref.all_countries:
        dreams = "x" if name in ref.dreams_countries else ""
        table.add_row(name, str(ref.country_max_area_level[name]), dreams)
    Console().print(table)


@app.command()
def indicators(config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True)) -> None:
    ref = load_config(config).reference
    table = Table("indicator", "code", "anc", title="Naomi indicators")
    no_anc = set(ref.no_anc_indicators)
    for name, code in ref.indicator_name_to_code.items():
        table.add_row(name, code, "" if name in no_anc else "x")
    Console().print(table)


if __name__ == "__main__":
    app()
