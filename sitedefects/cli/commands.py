import argparse
import logging
from pathlib import Path

from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sitedefects.core.config import settings
from sitedefects.core.errors import SiteDefectsError
from sitedefects.core.schemas import HeaderItem, status_label
from sitedefects.services import aggregation_service as agg
from sitedefects.services.export_service import (
    overview_sheet,
    records_from_json,
    records_to_json,
    slide_status_text,
    summary_sheet,
)
from sitedefects.services.layout_service import balance_columns
from sitedefects.services.store_service import JsonFileDefectStore, build_store
from sitedefects.utils.io import frames_to_excel_bytes

console = Console()


def _open_store(args):
    if args.data:
        return JsonFileDefectStore(args.data)
    return build_store(settings)


def cmd_summary(args):
    records = _open_store(args).snapshot()
    stats = agg.overall_totals(records)
    print(f"[bold]{settings.project_name}[/bold] - {len(records)} locations")
    print(f"Total defects: {stats.total}")
    print(f"Fixed:         [green]{stats.fixed}[/green] ({stats.percentage:.1f}%)")
    print(f"Remaining:     [red]{stats.remaining}[/red]")
    print("[bold]Status distribution:")
    for status, count in agg.status_distribution(records):
        print(f"  {status_label(status)}: {count}")


def cmd_categories(args):
    table = Table(title="Defects by category")
    for col in ("Category", "Total", "Fixed", "Remaining", "Progress"):
        table.add_column(col, justify="left" if col == "Category" else "right")
    for s in agg.category_stats(_open_store(args).snapshot()):
        table.add_row(s.name, str(s.total), str(s.fixed), str(s.remaining), f"{s.progress:.0f}%")
    console.print(table)


def _column_table(title, items):
    table = Table(title=title)
    for col in ("#", "Location", "TOT", "FIX", "TARGET", "STATUS"):
        table.add_column(col)
    for item in items:
        if isinstance(item, HeaderItem):
            table.add_row("", f"[bold magenta]{item.title}", "", "", "", "")
            continue
        r = item.record
        table.add_row(
            str(item.index), r.location, str(r.total_defects), str(r.fixed_defects),
            r.target_date or "-", slide_status_text(r),
        )
    return table


def cmd_slides(args):
    left, right = balance_columns(_open_store(args).snapshot())
    console.print(_column_table("Left column", left))
    console.print(_column_table("Right column", right))


def cmd_export(args):
    records = _open_store(args).snapshot()
    out = Path(args.out)
    if out.suffix.lower() == ".xlsx":
        out.write_bytes(frames_to_excel_bytes({
            "Summary": summary_sheet(records),
            "Overview": overview_sheet(records),
        }))
    else:
        out.write_text(records_to_json(records), encoding="utf-8")
    print(f"[green]Wrote {len(records)} records → {out}")


def cmd_import(args):
    records = records_from_json(Path(args.file).read_text(encoding="utf-8"))
    count = _open_store(args).import_records(records, mode="merge" if args.merge else "replace")
    print(f"[green]Imported {count} records")


def cmd_rename(args):
    count = _open_store(args).rename_category(args.old, args.new)
    if count:
        print(f"[green]Renamed {count} records: {args.old} → {args.new}")
    else:
        print(f"[yellow]No records in category {args.old!r}")


def build_argparser():
    ap = argparse.ArgumentParser(prog="sitedefects")
    ap.add_argument("--data", required=False, help="JSON data file (overrides STORE_BACKEND)")
    ap.add_argument("--log-level", default=settings.log_level)
    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("summary", help="Overall totals and status distribution").set_defaults(func=cmd_summary)
    sub.add_parser("categories", help="Per-category rollup").set_defaults(func=cmd_categories)
    sub.add_parser("slides", help="Balanced two-column detail slide").set_defaults(func=cmd_slides)

    ap_x = sub.add_parser("export", help="Export records (.json) or report sheets (.xlsx)")
    ap_x.add_argument("--out", required=True)
    ap_x.set_defaults(func=cmd_export)

    ap_i = sub.add_parser("import", help="Import a JSON array of records")
    ap_i.add_argument("file")
    ap_i.add_argument("--merge", action="store_true", help="Merge by id instead of replacing all records")
    ap_i.set_defaults(func=cmd_import)

    ap_r = sub.add_parser("rename", help="Rename a category on every record")
    ap_r.add_argument("old")
    ap_r.add_argument("new")
    ap_r.set_defaults(func=cmd_rename)

    return ap


def main(argv=None):
    ap = build_argparser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(message)s", handlers=[RichHandler(console=console)])
    try:
        args.func(args)
    except (SiteDefectsError, ValueError, OSError) as e:
        print(f"[red]Error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
