"""Command-line interface for the hangar scheduler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import load_config
from .engine.orchestrator import analyze, schedule
from .errors import HangarSchedulerError
from .io.export_csv import export_inductions_csv
from .io.model_loader import load_model
from .validator import summarize_analysis


def _write_json(path: str | Path, payload: Any) -> None:
    Path(path).write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def _cmd_analyze(args: argparse.Namespace) -> int:
    """Run the full analysis and write report/export JSON."""
    cfg = load_config(args.config)
    model = load_model(args.model)
    print(f"[INFO] Analyzing {model.name}")

    result = analyze(model, cfg)
    summary = result.report.summary
    print(
        f"[OK] {summary.total_violations} violations "
        f"({summary.by_severity.get('errors', 0)} errors, {summary.by_severity.get('warnings', 0)} warnings)"
    )
    if result.conflicts:
        print(f"[WARN] {len(result.conflicts)} conflicts in combined schedule")

    if args.report:
        _write_json(args.report, result.report.to_dict())
        print(f"[OK] Validation report written to {args.report}")
    if args.out:
        _write_json(args.out, result.export_model.to_dict())
        print(f"[OK] Export model written to {args.out}")
    if not args.report and not args.out:
        print(json.dumps({"report": result.report.to_dict(), "export": result.export_model.to_dict()}, indent=2))
    return 0


def _cmd_schedule(args: argparse.Namespace) -> int:
    """Schedule auto-inductions only."""
    cfg = load_config(args.config)
    model = load_model(args.model)
    result = schedule(model, cfg)

    for placement in result.scheduled:
        print(
            f"[OK] {placement.id}: {placement.hangar} [{', '.join(placement.bays)}] "
            f"{placement.start.isoformat()} -> {placement.end.isoformat()}"
        )
    for u in result.unscheduled:
        reasons = result.reasons_for(u.id)
        rule = reasons[0].rule_id if reasons else "unknown"
        print(f"[WARN] {u.id}: not scheduled ({rule})")

    if args.out:
        _write_json(args.out, result.to_dict())
        print(f"[OK] Schedule written to {args.out}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    """Validate a model; exit status 1 when error violations exist."""
    cfg = load_config(args.config)
    model = load_model(args.model)
    report = analyze(model, cfg).report

    for v in report.violations:
        prefix = "[ERROR]" if v.severity == "error" else "[WARN]"
        print(f"{prefix} {v.rule_id}: {v.message}")
    if args.report:
        _write_json(args.report, report.to_dict())

    if report.has_errors:
        print(f"[ERROR] Validation failed: {report.summary.by_severity.get('errors', 0)} errors")
        return 1
    print("[OK] Validation passed.")
    return 0


def _cmd_export_csv(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    model = load_model(args.model)
    result = analyze(model, cfg)
    count = export_inductions_csv(result.export_model, args.out)
    print(f"[OK] Exported {count} inductions to {args.out}")
    return 0


def _cmd_summarize(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    model = load_model(args.model)
    print(summarize_analysis(analyze(model, cfg)))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="hangar-scheduler")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Validate, schedule and export a model")
    a.add_argument("--model", required=True)
    a.add_argument("--config")
    a.add_argument("--report", help="Validation report JSON path")
    a.add_argument("--out", help="Export model JSON path")
    a.set_defaults(func=_cmd_analyze)

    s = sub.add_parser("schedule", help="Schedule auto-inductions")
    s.add_argument("--model", required=True)
    s.add_argument("--config")
    s.add_argument("--out", help="Schedule result JSON path")
    s.set_defaults(func=_cmd_schedule)

    v = sub.add_parser("validate", help="Validate a model")
    v.add_argument("--model", required=True)
    v.add_argument("--config")
    v.add_argument("--report", help="Validation report JSON path")
    v.set_defaults(func=_cmd_validate)

    e = sub.add_parser("export-csv", help="Export analyzed inductions to CSV")
    e.add_argument("--model", required=True)
    e.add_argument("--config")
    e.add_argument("--out", required=True)
    e.set_defaults(func=_cmd_export_csv)

    m = sub.add_parser("summarize", help="Print a text summary of an analysis")
    m.add_argument("--model", required=True)
    m.add_argument("--config")
    m.set_defaults(func=_cmd_summarize)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except HangarSchedulerError as e:
        print(f"[ERROR] {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
