"""Org chart runner: validates directory sources, resolves, and renders the hierarchy."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from orgchart.config import OrgChartConfig, load_orgchart_config
from orgchart.directory.provider import DirectoryProvider
from orgchart.hierarchy.errors import DirectoryError, InvalidInputError
from orgchart.hierarchy.metrics import flatten_forest
from orgchart.hierarchy.render import render_report, report_to_dict
from orgchart.hierarchy.resolver import resolve
from orgchart.utils.io import write_json, write_output
from orgchart.utils.types import DanglingPolicy

type SourceResult = dict[str, bool | str | int]

console = Console()


def build_provider(config: OrgChartConfig) -> DirectoryProvider:
    return DirectoryProvider(
        source=config.directory.employees,
        departments=config.directory.departments,
        only_active=config.directory.only_active,
    )


def validate_sources(provider: DirectoryProvider) -> list[SourceResult]:
    results: list[SourceResult] = []
    match provider.validate():
        case {"status": "ok", "rows_available": n}:
            results.append({"source": "employees", "valid": True, "detail": f"{n} rows"})
        case {"status": "warning", "errors": warnings}:
            console.print(f"[yellow]employees: {warnings[0]}[/yellow]")
            results.append({"source": "employees", "valid": True, "detail": warnings[0]})
        case {"status": "error", "message": msg}:
            results.append({"source": "employees", "valid": False, "detail": msg})
        case _:
            results.append({"source": "employees", "valid": False, "detail": "Unknown validation result"})

    if provider.departments is not None:
        try:
            n = len(provider.fetch_departments())
            results.append({"source": "departments", "valid": True, "detail": f"{n} rows"})
        except DirectoryError as exc:
            results.append({"source": "departments", "valid": False, "detail": str(exc)})
    return results


def _output_format(path: Path) -> str:
    match path.suffix.lower():
        case ".parquet":
            return "parquet"
        case ".xlsx":
            return "excel"
        case ".json":
            return "json"
        case _:
            return "csv"


def run_chart(
    provider: DirectoryProvider,
    config: OrgChartConfig,
    metrics_path: Path | None = None,
    json_path: Path | None = None,
) -> None:
    records = provider.fetch()
    report = resolve(records, dangling=config.dangling)
    render_report(
        report,
        target=console,
        title=config.render.title,
        show_departments=config.render.show_departments,
    )

    if provider.departments is not None:
        departments = resolve(provider.fetch_departments(), dangling=config.dangling)
        render_report(departments, target=console, title="Departments", show_departments=False)

    if metrics_path is not None:
        write_output(flatten_forest(report), metrics_path, fmt=_output_format(metrics_path))
    if json_path is not None:
        write_json(report_to_dict(report), json_path)


def main():
    parser = argparse.ArgumentParser(description="Resolve and render the organization chart")
    parser.add_argument("--env", type=str, default="production", help="Configuration environment")
    parser.add_argument("--source", type=Path, help="Employee export file or drop directory")
    parser.add_argument("--departments", type=Path, help="Department export file")
    parser.add_argument("--validate", action="store_true", help="Only validate sources, don't render")
    parser.add_argument("--drop-dangling", action="store_true", help="Hide employees whose manager is unknown")
    parser.add_argument("--metrics", type=Path, help="Write span-of-control rows to this path")
    parser.add_argument("--json", type=Path, help="Write the resolved forest as JSON to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        config = load_orgchart_config(args.env)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    provider = build_provider(config)
    if args.source:
        provider.source = args.source
    if args.departments:
        provider.departments = args.departments
    if args.drop_dangling:
        config = replace(config, dangling=DanglingPolicy.DROP)

    if args.validate:
        results = validate_sources(provider)
        table = Table(title="Directory Validation")
        table.add_column("Source")
        table.add_column("Valid")
        table.add_column("Details")

        for r in results:
            status = "[green]✓[/green]" if r["valid"] else "[red]✗[/red]"
            table.add_row(r["source"], status, str(r["detail"]))

        console.print(table)

        if not all(r["valid"] for r in results):
            sys.exit(1)
        return

    try:
        run_chart(provider, config, metrics_path=args.metrics, json_path=args.json)
    except DirectoryError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)
    except InvalidInputError as exc:
        console.print(f"[red]Cannot build org chart: {exc}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
