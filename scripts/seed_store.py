#!/usr/bin/env python3
import argparse
from pathlib import Path

# Ensure local imports work when run from repo root
import sys
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from sitedefects.core.config import settings
from sitedefects.core.sample_data import initial_defects
from sitedefects.services.aggregation_service import overall_totals
from sitedefects.services.export_service import records_to_json
from sitedefects.services.store_service import build_store


def seed(out: Path | None, push: bool) -> int:
    records = initial_defects()
    stats = overall_totals(records)
    print(f"Sample set: {len(records)} locations, {stats.total} defects, {stats.percentage:.1f}% fixed")

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(records_to_json(records), encoding="utf-8")
        print(f"Wrote sample records to: {out}")

    if push:
        store = build_store(settings)
        count = store.import_records(records, mode="replace")
        print(f"Replaced {settings.store_backend} store contents with {count} records")

    return 0


def main():
    parser = argparse.ArgumentParser(description="Write the sample defect records to a JSON file or the configured store.")
    parser.add_argument("--out", type=str, default=str(REPO_ROOT / "data/defects.json"), help="Target JSON file")
    parser.add_argument("--no-file", action="store_true", help="Do not write the JSON file")
    parser.add_argument("--push", action="store_true", help="Replace the STORE_BACKEND contents with the sample set")
    args = parser.parse_args()

    out = None if args.no_file else Path(args.out)
    raise SystemExit(seed(out, push=args.push))


if __name__ == "__main__":
    main()
