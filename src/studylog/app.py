"""Command-line reports over an exported study log."""
import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from studylog.config import DEFAULT_CONFIG, DEFAULT_WINDOW_DAYS, EngineConfig
from studylog.errors import InvalidInput, StudyLogError
from studylog.gamification import calculate_badges, today_mission
from studylog.grouping import group_due_tasks, join_due_tasks
from studylog.models import ReviewMaterial, ReviewTask, StudySession
from studylog.scheduler import schedule_reviews
from studylog.stats import (
    compute_streaks, daily_aggregate, material_aggregate, study_days_of, subject_aggregate,
)
from studylog.studyday import (
    format_study_day, month_start, parse_instant, parse_study_day, range_of_study_day,
    study_day_of,
)

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class Export:
    sessions: list = field(default_factory=list)
    tasks: list = field(default_factory=list)
    materials: list = field(default_factory=list)

    def session(self, session_id: str) -> StudySession:
        for s in self.sessions:
            if s.id == session_id:
                return s
        raise InvalidInput(f"no session with id {session_id!r} in export")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


def _session_from_record(rec: dict) -> StudySession:
    return StudySession(
        id=str(rec["id"]),
        subject=rec.get("subject") or "Other",
        started_at=parse_instant(rec["started_at"]),
        duration_minutes=rec["duration_minutes"],
        material_id=rec.get("material_id"),
        note=rec.get("note", ""),
    )


def _task_from_record(rec: dict) -> ReviewTask:
    created = rec.get("created_at")
    return ReviewTask(
        id=str(rec["id"]),
        session_id=str(rec["session_id"]),
        due_day=parse_study_day(rec["due_day"]),
        status=rec.get("status", "pending"),
        created_at=parse_instant(created) if created else None,
    )


def load_export(path: str) -> Export:
    """Read a JSON export with ``sessions``, ``tasks`` and ``materials`` lists."""
    try:
        data = json.loads(Path(path).read_text())
    except OSError as e:
        raise InvalidInput(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidInput(f"{path} is not valid JSON: {e}") from e
    try:
        export = Export(
            sessions=[_session_from_record(r) for r in data.get("sessions", [])],
            tasks=[_task_from_record(r) for r in data.get("tasks", [])],
            materials=[ReviewMaterial(id=str(r["id"]), title=r["title"]) for r in data.get("materials", [])],
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidInput(f"malformed record in {path}: {e!r}") from e
    logger.debug(
        "loaded %d sessions, %d tasks, %d materials from %s",
        len(export.sessions), len(export.tasks), len(export.materials), path,
    )
    return export


def cmd_day(instant_text: str, config: EngineConfig = DEFAULT_CONFIG) -> None:
    instant = parse_instant(instant_text)
    day = study_day_of(instant, config.day_start_hour, config.offset_minutes)
    start, end = range_of_study_day(day, config.day_start_hour, config.offset_minutes)
    console.print(Panel(
        f"[bold]{format_study_day(day)}[/bold]\n"
        f"[dim]{start.isoformat()} <= t < {end.isoformat()}[/dim]",
        title=f"Study day of {instant.isoformat()}", border_style="blue",
    ))


def cmd_report(export: Export, now_text: str, window_days: int = DEFAULT_WINDOW_DAYS,
               config: EngineConfig = DEFAULT_CONFIG) -> None:
    now = parse_instant(now_text)
    h, off = config.day_start_hour, config.offset_minutes
    today = study_day_of(now, h, off)
    streak = compute_streaks(study_days_of(export.sessions, h, off), today)

    badges = calculate_badges(export.sessions, streak)
    mission = today_mission(export.sessions, streak, now, day_start_hour=h, offset_minutes=off)
    status = "[green]done[/green]" if mission.completed else f"{mission.current}/{mission.target} min"
    console.print(Panel(
        f"Current streak: [bold]{streak.current}[/bold]  |  Longest: [bold]{streak.longest}[/bold]\n"
        f"[cyan]{mission.title}[/cyan]: {status}"
        + (f"\n[yellow]{', '.join(badges)}[/yellow]" if badges else ""),
        title=f"Study log for {format_study_day(today)}", border_style="blue",
    ))

    daily = Table(title=f"Last {window_days} days")
    daily.add_column("Day")
    daily.add_column("Minutes", justify="right")
    for day, minutes in daily_aggregate(export.sessions, window_days, now, h, off).items():
        daily.add_row(format_study_day(day), str(minutes) if minutes else "[dim]0[/dim]")
    console.print(daily)

    subjects = Table(title="By subject")
    subjects.add_column("Subject", style="cyan")
    subjects.add_column("Minutes", justify="right")
    for total in subject_aggregate(export.sessions):
        subjects.add_row(total.subject, str(total.total_minutes))
    console.print(subjects)

    books = Table(title="By material this month")
    books.add_column("Material", style="cyan")
    books.add_column("Minutes", justify="right")
    for total in material_aggregate(export.sessions, export.materials, month_start(today), today, h, off):
        books.add_row(total.title, str(total.total_minutes))
    console.print(books)

    rows = join_due_tasks(export.tasks, export.sessions, export.materials, today)
    groups = group_due_tasks(rows)
    if not groups:
        console.print("[green]No reviews due.[/green]")
        return
    console.print("\n[bold]Reviews due:[/bold]")
    for group in groups:
        oldest = format_study_day(group.due_tasks[0].due_day)
        console.print(f"  [cyan]{group.title:<24}[/cyan] {group.count} due (oldest {oldest})")


def cmd_schedule(export: Export, session_id: str, now_text: str,
                 config: EngineConfig = DEFAULT_CONFIG) -> None:
    session = export.session(session_id)
    tasks = schedule_reviews(
        session, config.intervals_days, parse_instant(now_text),
        config.day_start_hour, config.offset_minutes,
    )
    table = Table(title=f"Reviews for {session.subject} ({session.id})")
    table.add_column("Task")
    table.add_column("Due", justify="right")
    for task in tasks:
        table.add_row(task.id, format_study_day(task.due_day))
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studylog", description="Study-day calendar and review reports.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    day = sub.add_parser("day", help="show the study day an instant belongs to")
    day.add_argument("instant", help="ISO-8601 instant with offset, e.g. 2026-02-10T18:00:00Z")

    report = sub.add_parser("report", help="streaks, totals and due reviews")
    report.add_argument("export", help="JSON export file")
    report.add_argument("--now", required=True, help="ISO-8601 instant to evaluate at")
    report.add_argument("--window", type=int, default=DEFAULT_WINDOW_DAYS, help="days in the daily table")

    schedule = sub.add_parser("schedule", help="preview reviews for one session")
    schedule.add_argument("export", help="JSON export file")
    schedule.add_argument("session_id")
    schedule.add_argument("--now", required=True, help="ISO-8601 instant the tasks are created at")
    schedule.add_argument("--intervals", help="comma-separated review ladder, e.g. 1,3,7")
    return parser


def _config_for(args) -> EngineConfig:
    if getattr(args, "intervals", None):
        try:
            ladder = tuple(int(part) for part in args.intervals.split(","))
        except ValueError as e:
            raise InvalidInput(f"bad interval ladder {args.intervals!r}") from e
        return EngineConfig(intervals_days=ladder)
    return DEFAULT_CONFIG


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        config = _config_for(args)
        if args.command == "day":
            cmd_day(args.instant, config)
        elif args.command == "report":
            cmd_report(load_export(args.export), args.now, args.window, config)
        elif args.command == "schedule":
            cmd_schedule(load_export(args.export), args.session_id, args.now, config)
    except StudyLogError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
