from __future__ import annotations

import argparse
import logging
from pathlib import Path

from visible_spectrum.pull import pull_naomi


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Pull HIV prevalence for DREAMS countries by standard age group.")
    p.add_argument("--period", action="append", default=[], help="'Month YYYY' (repeatable). Default: recent.")
    p.add_argument("--max-level", default="none", help="Deepest area level (default: none).")
    p.add_argument("--wait", type=float, default=1.0, help="Seconds between requests (default: 1).")
    p.add_argument("--out", default="data/dreams_prevalence.csv")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s %(message)s")

    result = pull_naomi(
        countries="dreams",
        indicators=["HIV prevalence"],
        age_groups="standard",
        sex_options=["Female", "Male"],
        periods=args.period or "recent",
        max_level=args.max_level,
        wait=args.wait,
    )

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    result.success_data.to_csv(out, index=False)
    print(f"Wrote {out} ({len(result.success_data):,} rows)")
    if result.is_partial:
        failed = out.with_name(out.stem + "_failed.csv")
        result.fail_data.to_csv(failed, index=False)
        print(f"Wrote {failed} ({len(result.failures):,} failed requests)")


if __name__ == "__main__":
    main()
