#!/usr/bin/env python3
"""
Study planner CLI - local control of the study timetable.

Commands:
- init              create the local database
- add / edit / delete
- day / week        agenda for a date
- stats             hours per subject for the week
- check             report overlapping blocks in stored data
- export            stored collection as JSON
- clear             delete everything (needs --yes)
"""

import argparse
import logging
import sys
from datetime import date

from studyplan import config, paths
from studyplan.clock import format_date, format_duration, format_time, parse_local, time_slots
from studyplan.errors import NotFoundError, PersistenceError
from studyplan.kv_store import SqliteKeyValueStore
from studyplan.observability import configure_log_file, configure_logging
from studyplan.timetable import (
    BlockStore,
    ColorAssignmentTable,
    ConflictError,
    TimetableService,
    blocks_on_day,
    ranked,
    total_hours,
    week_agenda,
)
from studyplan.timetable.block_store import export_json

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFLICT = 2


def print_header(text: str):
    """Print a section header."""
    print(f"\n{'═' * 50}")
    print(f"  {text}")
    print(f"{'═' * 50}")


def print_table(headers: list, rows: list, widths: list = None):
    """Print a simple table."""
    if not widths:
        widths = [max(len(str(row[i])) for row in [headers] + rows) for i in range(len(headers))]

    header_str = " │ ".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_str)
    print("─" * len(header_str))

    for row in rows:
        print(" │ ".join(str(c)[:w].ljust(w) for c, w in zip(row, widths)))


def block_rows(blocks, tz) -> list:
    return [
        [
            b.id[:8],
            f"{format_time(b.start, tz)}-{format_time(b.end, tz)}",
            format_duration(b.start, b.end),
            ("! " if b.is_high_priority else "") + b.subject,
            b.color,
            b.description or "",
        ]
        for b in blocks
    ]


BLOCK_HEADERS = ["ID", "Time", "Len", "Subject", "Color", "Notes"]


def slot_rows(blocks, tz, start_hour: int, end_hour: int) -> list:
    """One row per half-hour slot; a block sits in the slot its local start falls in."""
    by_slot = {}
    for b in blocks:
        local = b.start.astimezone(tz) if tz is not None else b.start.astimezone()
        label = f"{local.hour:02d}:{0 if local.minute < 30 else 30:02d}"
        by_slot.setdefault(label, []).append(b.subject)
    return [[label, ", ".join(by_slot.get(label, []))] for label in time_slots(start_hour, end_hour)]


def _date_arg(value: str | None) -> date:
    return date.fromisoformat(value) if value else date.today()


def _resolve_id(service: TimetableService, prefix: str) -> str:
    """Accept a full id or an unambiguous prefix (as printed by `day`/`week`)."""
    matches = [b.id for b in service.blocks if b.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValueError(f"Ambiguous block id prefix: {prefix}")
    raise NotFoundError(prefix)


def _report_conflict(conflict: ConflictError) -> int:
    print(f"✗ {conflict.message}", file=sys.stderr)
    return EXIT_CONFLICT


def cmd_init(service: TimetableService, args, settings) -> int:
    service.store.kv.init_db()
    print(f"  ✓ database  {service.store.kv.db_path}")
    cfg = paths.settings_path()
    print(f"  {'✓' if cfg.exists() else '✗'} settings  {cfg}")
    return EXIT_OK


def cmd_add(service: TimetableService, args, settings) -> int:
    tz = settings.display_tz
    result = service.add(
        subject=args.subject,
        start=parse_local(args.start, tz),
        end=parse_local(args.end, tz),
        priority=args.priority,
        description=args.description,
    )
    if isinstance(result, ConflictError):
        return _report_conflict(result)
    print(f"✓ Created {result.id} ({result.subject}, {result.color})")
    return EXIT_OK


def cmd_edit(service: TimetableService, args, settings) -> int:
    tz = settings.display_tz
    changes = {}
    if args.subject is not None:
        changes["subject"] = args.subject
    if args.start is not None:
        changes["start"] = parse_local(args.start, tz)
    if args.end is not None:
        changes["end"] = parse_local(args.end, tz)
    if args.priority is not None:
        changes["priority"] = args.priority
    if args.description is not None:
        changes["description"] = args.description or None
    if not changes:
        print("Nothing to change.")
        return EXIT_OK

    result = service.edit(_resolve_id(service, args.id), changes)
    if isinstance(result, ConflictError):
        return _report_conflict(result)
    print(f"✓ Updated {result.id}")
    return EXIT_OK


def cmd_delete(service: TimetableService, args, settings) -> int:
    removed = service.delete(_resolve_id(service, args.id))
    print(f"✓ Deleted {removed.id} ({removed.subject})")
    return EXIT_OK


def cmd_day(service: TimetableService, args, settings) -> int:
    tz = settings.display_tz
    day = _date_arg(args.date)
    blocks = blocks_on_day(service.blocks, day, tz)

    print_header(f"{day.strftime('%A')}, {format_date(day)}")
    if not blocks:
        print("No study blocks scheduled.")
        return EXIT_OK
    print_table(BLOCK_HEADERS, block_rows(blocks, tz))
    print()
    print_table(["Slot", "Subject"], slot_rows(blocks, tz, settings.day_start_hour, settings.day_end_hour))
    print(f"\n{total_hours(blocks):.1f}h total")
    return EXIT_OK


def cmd_week(service: TimetableService, args, settings) -> int:
    tz = settings.display_tz
    agenda = week_agenda(service.blocks, _date_arg(args.date), tz)

    print_header(f"Week of {format_date(agenda[0][0])}")
    for day, blocks in agenda:
        print(f"\n{day.strftime('%a %d')}" + (f"  ({total_hours(blocks):.1f}h)" if blocks else ""))
        for b in blocks:
            flag = " !" if b.is_high_priority else ""
            print(f"  {format_time(b.start, tz):>8}  {b.subject}{flag}  [{b.id[:8]}]")
    return EXIT_OK


def cmd_stats(service: TimetableService, args, settings) -> int:
    stats = service.stats_for_week(_date_arg(args.date))
    print_header("This Week's Study Time")
    if not stats:
        print("No study time recorded this week.")
        return EXIT_OK
    print_table(["Subject", "Hours"], [[s, f"{h:.1f}h"] for s, h in ranked(stats)])
    return EXIT_OK


def cmd_check(service: TimetableService, args, settings) -> int:
    pairs = service.check()
    if not pairs:
        print("✓ No overlapping blocks")
        return EXIT_OK
    tz = settings.display_tz
    for a, b in pairs:
        print(
            f"✗ {a.subject} {format_time(a.start, tz)}-{format_time(a.end, tz)} overlaps "
            f"{b.subject} {format_time(b.start, tz)}-{format_time(b.end, tz)}"
        )
    return EXIT_CONFLICT


def cmd_export(service: TimetableService, args, settings) -> int:
    print(export_json(list(service.blocks)))
    return EXIT_OK


def cmd_clear(service: TimetableService, args, settings) -> int:
    if not args.yes:
        print(f"This will permanently delete all {len(service.blocks)} study blocks. Re-run with --yes.")
        return EXIT_ERROR
    service.clear()
    print("✓ All study blocks have been cleared.")
    return EXIT_OK


COMMANDS = {
    "init": cmd_init,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "day": cmd_day,
    "week": cmd_week,
    "stats": cmd_stats,
    "check": cmd_check,
    "export": cmd_export,
    "clear": cmd_clear,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="studyplan", description="Plan and track study sessions")
    p.add_argument("--db", default=None, help="SQLite file (default: STUDYPLAN_DB or ~/.studyplan)")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this file (rotated)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init", help="Create the local database")

    a = sub.add_parser("add", help="Create a study block")
    a.add_argument("--subject", required=True)
    a.add_argument("--start", required=True, help="ISO date-time, e.g. 2026-03-02T09:00")
    a.add_argument("--end", required=True, help="ISO date-time, e.g. 2026-03-02T10:30")
    a.add_argument("--priority", choices=["normal", "high"], default="normal")
    a.add_argument("--description", default=None)

    e = sub.add_parser("edit", help="Change a study block")
    e.add_argument("id", help="Block id or unique prefix")
    e.add_argument("--subject")
    e.add_argument("--start")
    e.add_argument("--end")
    e.add_argument("--priority", choices=["normal", "high"])
    e.add_argument("--description", help="Empty string removes the notes")

    d = sub.add_parser("delete", help="Remove a study block")
    d.add_argument("id", help="Block id or unique prefix")

    for name, help_text in (
        ("day", "Blocks for one day"),
        ("week", "Blocks for the week"),
        ("stats", "Hours per subject this week"),
    ):
        s = sub.add_parser(name, help=help_text)
        s.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")

    sub.add_parser("check", help="Report overlapping stored blocks")
    sub.add_parser("export", help="Print stored blocks as JSON")

    c = sub.add_parser("clear", help="Delete all study blocks")
    c.add_argument("--yes", action="store_true", help="Confirm deletion")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    configure_log_file(args.log_file)
    settings = config.load_settings()

    store = BlockStore(
        SqliteKeyValueStore(args.db),
        palette=ColorAssignmentTable(settings.palette),
    )
    service = TimetableService(store, tz=settings.display_tz)

    try:
        if args.cmd != "init":
            service.refresh()
        return COMMANDS[args.cmd](service, args, settings)
    except (NotFoundError, PersistenceError, ValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
