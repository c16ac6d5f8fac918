import argparse
import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import colorlog

from branch_budget import __version__ as _PACKAGE_VERSION
from branch_budget.core.context import ScopeContext
from branch_budget.core.repository import InMemoryStagingRepository, load_snapshot


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _load_repository(data_arg: str) -> Optional[InMemoryStagingRepository]:
    """Load the staging YAML file, logging and returning None when it is unusable."""
    data_file = Path(data_arg).resolve()
    try:
        return InMemoryStagingRepository.from_yaml(data_file)
    except FileNotFoundError as e:
        logging.error("%s", e)
    except ValueError as e:
        logging.error("Invalid staging data: %s", e)
    return None


def _scope_from_args(args: argparse.Namespace) -> Optional[ScopeContext]:
    try:
        return ScopeContext(args.org, args.period)
    except ValueError as e:
        logging.error("%s", e)
        return None


def _report_path(option, data_arg: str, scope: ScopeContext, suffix: str) -> Path:
    """Report path: next to the data file, or inside a custom directory."""
    if option is True:
        report_dir = Path(data_arg).resolve().parent
    else:
        report_dir = Path(option)
    report_dir.mkdir(parents=True, exist_ok=True)
    return report_dir / f"{scope.org_unit_code}_{scope.period_ym}_validation.{suffix}"


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate the staging data of one branch and period.

    Returns:
        0 if validation passed without errors
        1 if the staging data could not be loaded
        2 if validation errors were found (or warnings with --strict)
    """
    from branch_budget.validation import registry

    scope = _scope_from_args(args)
    if scope is None:
        return 2
    repository = _load_repository(args.data)
    if repository is None:
        return 1

    today = None
    if getattr(args, "today", None):
        try:
            today = date.fromisoformat(args.today)
        except ValueError:
            logging.error("Invalid --today date: %s. Expected YYYY-MM-DD.", args.today)
            return 2

    snapshot = asyncio.run(load_snapshot(repository, scope))
    if snapshot.record_count() == 0:
        logging.error("No staging records found for %s", scope.key)
        return 1

    logging.info("Validating %s...", scope.key)
    result = registry.run_validation(
        snapshot, today=today, include_field_checks=bool(getattr(args, "field_checks", False))
    )
    registry.print_report(result)

    if getattr(args, "report", False):
        report_path = _report_path(args.report, args.data, scope, "md")
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(result.to_markdown())
        logging.info("Markdown report saved: %s", report_path)

    if getattr(args, "report_json", False):
        report_path = _report_path(args.report_json, args.data, scope, "json")
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(result.to_json())
        logging.info("JSON report saved: %s", report_path)

    if result.has_errors(strict=bool(getattr(args, "strict", False))):
        logging.error(
            "Validation failed for %s: %d errors, %d warnings",
            scope.key,
            result.summary.error_count,
            result.summary.warning_count,
        )
        return 2
    logging.info("Validation passed for %s", scope.key)
    return 0


def cmd_etl(args: argparse.Namespace) -> int:
    """Aggregate approved staging data into ledgers.

    Returns:
        0 on success, 1 if the staging data could not be loaded, 2 on pipeline errors.
    """
    from branch_budget.aggregation import lines_to_frame, run_etl_from_repository

    scope = _scope_from_args(args)
    if scope is None:
        return 2
    repository = _load_repository(args.data)
    if repository is None:
        return 1

    result = asyncio.run(run_etl_from_repository(repository, scope))
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    if not result.success:
        for err in result.errors:
            logging.error("ETL error: %s", err)
        return 2

    if getattr(args, "output", None):
        out_dir = Path(args.output).resolve()
        out_dir.mkdir(parents=True, exist_ok=True)
        outputs = {
            "budget_lines.csv": result.revenues,
            "cash_flow_lines.csv": result.cash_flows,
            "consolidated_lines.csv": result.consolidated,
        }
        for name, lines in outputs.items():
            path = out_dir / name
            lines_to_frame(lines).to_csv(path, index=False)
            logging.info("Saved %d lines: %s", len(lines), path)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Print staging statistics as JSON."""
    from branch_budget.aggregation import count_by_status, get_etl_statistics

    repository = _load_repository(args.data)
    if repository is None:
        return 1
    org = getattr(args, "org", None)
    records = repository.all()
    stats = get_etl_statistics(records, org_unit_code=org)
    payload = stats.to_dict()
    payload["by_status"] = count_by_status(
        r for r in records if org is None or r.org_unit_code == org
    )
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def _add_scope_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", required=True, help="Staging data YAML file (one list per domain)")
    p.add_argument("--org", required=True, help="Branch code (org_unit_code)")
    p.add_argument("--period", required=True, help="Period in YYYY-MM format")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="branch-budget",
        description=f"Branch Budget Tools (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate staging data of a branch and period")
    _add_scope_arguments(p_validate)
    p_validate.add_argument(
        "--field-checks",
        action="store_true",
        help="Also check required fields and formats of every record",
    )
    p_validate.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors for the exit code",
    )
    p_validate.add_argument(
        "--today",
        default=None,
        help="Reference date for overdue alerts (YYYY-MM-DD). Defaults to today.",
    )
    p_validate.add_argument(
        "--report",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed Markdown report. Optionally specify custom directory path.",
    )
    p_validate.add_argument(
        "--report-json",
        nargs="?",
        const=True,
        default=False,
        help="Generate detailed JSON report. Optionally specify custom directory path.",
    )
    p_validate.set_defaults(func=cmd_validate)

    p_etl = sub.add_parser("etl", help="Aggregate approved staging data into ledgers")
    _add_scope_arguments(p_etl)
    p_etl.add_argument(
        "--output",
        default=None,
        help="Directory for budget_lines.csv, cash_flow_lines.csv and consolidated_lines.csv",
    )
    p_etl.set_defaults(func=cmd_etl)

    p_stats = sub.add_parser("stats", help="Show staging statistics")
    p_stats.add_argument("--data", required=True, help="Staging data YAML file")
    p_stats.add_argument("--org", default=None, help="Limit statistics to one branch")
    p_stats.set_defaults(func=cmd_stats)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
