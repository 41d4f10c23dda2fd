"""CLI entry point for the planning workspace.

Usage:
  python -m planboard init [--data-dir DIR] [--force]
  python -m planboard features [--system TOM]
  python -m planboard sprints
  python -m planboard financials [--system TOM]
  python -m planboard programs
  python -m planboard timeline [--start YYYY-MM-DD --end YYYY-MM-DD]
  python -m planboard logs [--query TEXT] [--kind feature|sprint]
  python -m planboard workdays YEAR MONTH
  python -m planboard allocate FEATURE_ID SPRINT_ID [--points N]
  python -m planboard add-feature [--name NAME]
  python -m planboard add-sprint [--start YYYY-MM-DD]
  python -m planboard sprint-start SPRINT_ID YYYY-MM-DD
  python -m planboard feature-date FEATURE_ID start|end YYYY-MM-DD
  python -m planboard toggle-sprint SPRINT_ID
  python -m planboard delete-sprint SPRINT_ID
  python -m planboard suggest "product description" [--mock]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Feature and sprint planning CLI")
    parser.add_argument("--data-dir", default=None, help="Planning data directory")
    parser.add_argument("--config", default="planboard.yaml", help="Config file path")
    parser.add_argument("--system", default=None, help="Active system filter (global, TOM, EOM, C3)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Create a workspace with sample data")
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing data")

    subparsers.add_parser("features", help="List features by backlog order")
    subparsers.add_parser("sprints", help="List sprints with their load")
    subparsers.add_parser("financials", help="Monthly value vs run-rate burn")
    subparsers.add_parser("programs", help="Cost per program")

    timeline_parser = subparsers.add_parser("timeline", help="Feature timeline positions")
    timeline_parser.add_argument("--start", default=None, help="Range start (YYYY-MM-DD)")
    timeline_parser.add_argument("--end", default=None, help="Range end (YYYY-MM-DD)")

    logs_parser = subparsers.add_parser("logs", help="Show the audit log")
    logs_parser.add_argument("--query", default="", help="Text to search for")
    logs_parser.add_argument("--kind", default="All", help="feature, sprint, or All")

    workdays_parser = subparsers.add_parser("workdays", help="Working days in a month")
    workdays_parser.add_argument("year", type=int)
    workdays_parser.add_argument("month", type=int, help="Month number, 1-12")

    allocate_parser = subparsers.add_parser("allocate", help="Allocate a feature into a sprint")
    allocate_parser.add_argument("feature_id")
    allocate_parser.add_argument("sprint_id")
    allocate_parser.add_argument("--points", type=int, default=None)

    add_feature_parser = subparsers.add_parser("add-feature", help="Add a blank feature to the backlog")
    add_feature_parser.add_argument("--name", default=None)

    add_sprint_parser = subparsers.add_parser("add-sprint", help="Add a sprint of the configured length")
    add_sprint_parser.add_argument("--start", default=None, help="Start date (YYYY-MM-DD), default today")

    sprint_start_parser = subparsers.add_parser("sprint-start", help="Move a sprint's start date")
    sprint_start_parser.add_argument("sprint_id")
    sprint_start_parser.add_argument("date")

    feature_date_parser = subparsers.add_parser("feature-date", help="Set a feature's start or end date")
    feature_date_parser.add_argument("feature_id")
    feature_date_parser.add_argument("which", choices=["start", "end"])
    feature_date_parser.add_argument("date")

    toggle_parser = subparsers.add_parser("toggle-sprint", help="Close or reopen a sprint")
    toggle_parser.add_argument("sprint_id")

    delete_parser = subparsers.add_parser("delete-sprint", help="Delete a sprint")
    delete_parser.add_argument("sprint_id")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest features with Claude")
    suggest_parser.add_argument("description", help="Product description")
    suggest_parser.add_argument("--mock", action="store_true", help="Use canned suggestions")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from planboard.config import load_config
    from planboard.planning.exceptions import PlanningError

    try:
        config = load_config(Path(args.config))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.data_dir:
        config.data_dir = args.data_dir
    if args.system:
        config.default_system = args.system

    handler = _COMMANDS[args.command]
    try:
        handler(args, config)
    except (PlanningError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _open_session(config):
    from planboard.adapters.yaml_store import YamlStore
    from planboard.session import PlanningSession

    store = YamlStore(Path(config.data_dir))
    if not store.exists():
        print(f"No planning data in {config.data_dir}. Run 'init' first.", file=sys.stderr)
        sys.exit(1)
    return PlanningSession(
        store,
        active_system=config.default_system,
        sprint_length_days=config.sprint_length_days,
        sprint_capacity=config.default_sprint_capacity,
    )


def _init_command(args, config) -> None:
    from planboard.adapters.yaml_store import YamlStore
    from planboard.seed import sample_state

    store = YamlStore(Path(config.data_dir))
    if store.exists() and not args.force:
        print(f"Planning data already exists in {config.data_dir} (use --force)", file=sys.stderr)
        sys.exit(1)
    state = sample_state()
    store.save(state)
    print(f"Initialized {config.data_dir}: {len(state.features)} features, {len(state.sprints)} sprints")


def _features_command(args, config) -> None:
    from planboard.planning.allocation import allocated_points
    from planboard.planning.financials import feature_stats

    session = _open_session(config)
    features = session.visible_features()
    for f in features:
        print(
            f"{f.id:<10} {f.name:<32} {f.priority.value:<8} {f.status.value:<11} "
            f"{f.start_date} -> {f.end_date}  {allocated_points(f)}/{f.points} pts  ${f.estimated_cost:,.0f}"
        )
    stats = feature_stats(features)
    print(
        f"\nTotal: {stats.total_points} pts (avg {stats.avg_points}), "
        f"{stats.critical_count} critical, {stats.high_count} high, "
        f"{stats.in_progress_count} in progress"
    )


def _sprints_command(args, config) -> None:
    from planboard.planning.allocation import sprint_load

    session = _open_session(config)
    for s in session.visible_sprints():
        load = sprint_load(s, session.state.features)
        lock = " [closed]" if s.is_closed else ""
        print(
            f"{s.id:<10} {s.name:<28} {s.start_date} -> {s.end_date}  "
            f"{load.used_points}/{load.capacity} pts ({load.utilization:.0f}%){lock}"
        )


def _financials_command(args, config) -> None:
    from planboard.planning.financials import financial_comparison, monthly_financials

    session = _open_session(config)
    features = session.visible_features()
    print("Value realized by month:")
    for row in monthly_financials(features):
        print(f"  {row.month:<8} ${row.payment:>12,.0f}  cumulative ${row.cumulative:>12,.0f}")

    print(f"\nRun rate vs value ({session.active_system}):")
    for row in financial_comparison(features, session.state.run_rates, session.active_system):
        label = "excess burn" if row.diff > 0 else "under burn" if row.diff < 0 else "even"
        print(
            f"  {row.month:<8} burn ${row.run_rate:>10,.0f}  value ${row.budget:>10,.0f}  "
            f"gap ${row.diff:>10,.0f} ({label})"
        )


def _programs_command(args, config) -> None:
    from planboard.planning.financials import program_financials, program_readiness

    session = _open_session(config)
    features = session.visible_features()
    for p in program_financials(features):
        print(f"  {p.name:<28} ${p.cost:>12,.2f}")
    print(f"\nReadiness: {program_readiness(features)}% complete")


def _timeline_command(args, config) -> None:
    from planboard.planning.dates import parse_date
    from planboard.planning.timeline import (
        DateRange,
        date_position,
        features_in_range,
        timeline_months,
    )

    session = _open_session(config)
    features = session.visible_features()
    override = None
    if args.start and args.end:
        override = DateRange(parse_date(args.start), parse_date(args.end))
        features = features_in_range(features, override)

    months = timeline_months(features, override)
    if not months:
        print("No features to place on the timeline.")
        return
    print("Months: " + " ".join(m.strftime("%b %y") for m in months))
    for f in features:
        start = date_position(f.start_date, months, override)
        end = date_position(f.end_date, months, override)
        print(f"  {f.name:<32} {start:5.1f}% -> {end:5.1f}%")


def _logs_command(args, config) -> None:
    from planboard.planning.audit import filter_logs

    session = _open_session(config)
    logs = filter_logs(session.state.logs, args.query, args.kind)
    if not logs:
        print("No log entries.")
        return
    for log in logs:
        print(f"{log.timestamp}  [{log.kind.value}] {log.entity_name}: {log.action}")
        print(f"    {log.details}")


def _workdays_command(args, config) -> None:
    from planboard.planning.workdays import canadian_working_days

    if not 1 <= args.month <= 12:
        raise ValueError(f"Month must be 1-12, got {args.month}")
    days = canadian_working_days(args.year, args.month - 1, config.holidays)
    print(f"{args.year}-{args.month:02d}: {days} working days")


def _allocate_command(args, config) -> None:
    session = _open_session(config)
    state = session.allocate(args.feature_id, args.sprint_id, args.points)
    feature = state.get_feature(args.feature_id)
    print(f"Allocated {feature.name} to {args.sprint_id}: now {feature.start_date} -> {feature.end_date}")


def _add_feature_command(args, config) -> None:
    session = _open_session(config)
    feature = session.add_blank_feature(name=args.name)
    print(f"Added feature {feature.id}: {feature.name} ({feature.start_date} -> {feature.end_date})")


def _add_sprint_command(args, config) -> None:
    from planboard.planning.dates import parse_date

    start = parse_date(args.start) if args.start else None
    session = _open_session(config)
    sprint = session.add_blank_sprint(start)
    print(
        f"Added sprint {sprint.id}: {sprint.name} {sprint.start_date} -> {sprint.end_date}, "
        f"{sprint.capacity} pts, deploys {sprint.target_deployment_date}"
    )


def _sprint_start_command(args, config) -> None:
    session = _open_session(config)
    sprint = session.set_sprint_start(args.sprint_id, args.date)
    print(f"Sprint {sprint.name} now runs {sprint.start_date} -> {sprint.end_date}")


def _feature_date_command(args, config) -> None:
    session = _open_session(config)
    feature = session.set_feature_date(args.feature_id, f"{args.which}_date", args.date)
    print(f"{feature.name}: {feature.start_date} -> {feature.end_date}")


def _toggle_sprint_command(args, config) -> None:
    session = _open_session(config)
    state = session.toggle_sprint_closed(args.sprint_id)
    sprint = state.get_sprint(args.sprint_id)
    print(f"Sprint {sprint.name} is now {'closed' if sprint.is_closed else 'open'}")


def _delete_sprint_command(args, config) -> None:
    session = _open_session(config)
    before = {f.id: f for f in session.state.features}
    state = session.delete_sprint(args.sprint_id)
    changed = [f for f in state.features if f != before.get(f.id)]
    print(f"Deleted sprint {args.sprint_id}; {len(changed)} feature(s) updated")


def _suggest_command(args, config) -> None:
    if args.mock:
        from planboard.agents.suggester import MockFeatureSuggester
        suggester = MockFeatureSuggester()
    else:
        from planboard.agents.suggester import ClaudeFeatureSuggester
        suggester = ClaudeFeatureSuggester(model=config.suggestion_model)

    session = _open_session(config)
    records = asyncio.run(suggester.suggest(args.description))
    if not records:
        print("No suggestions returned.")
        return
    count_before = len(session.state.features)
    state = session.admit_suggestions(records)
    for f in state.features[count_before:]:
        print(f"  + {f.name} ({f.priority.value}, {f.points} pts, ${f.estimated_cost:,.0f})")


_COMMANDS = {
    "init": _init_command,
    "features": _features_command,
    "sprints": _sprints_command,
    "financials": _financials_command,
    "programs": _programs_command,
    "timeline": _timeline_command,
    "logs": _logs_command,
    "workdays": _workdays_command,
    "allocate": _allocate_command,
    "add-feature": _add_feature_command,
    "add-sprint": _add_sprint_command,
    "sprint-start": _sprint_start_command,
    "feature-date": _feature_date_command,
    "toggle-sprint": _toggle_sprint_command,
    "delete-sprint": _delete_sprint_command,
    "suggest": _suggest_command,
}


if __name__ == "__main__":
    main()
