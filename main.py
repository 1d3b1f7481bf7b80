"""Command line entry point for the camper trip exporter."""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from camper_export import (
    DeviceProfile,
    ExportFormat,
    ExportOptions,
    TripModel,
    export_trip_to_file,
    import_route,
)
from camper_export.config import settings


console = Console()

FLAGS = [
    "waypoints",
    "campsites",
    "route",
    "vehicle_info",
    "cost_data",
    "planning_data",
    "metadata",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export and import camper trips as GPX, KML, GeoJSON or CSV")
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", help="Export a trip JSON file")
    export.add_argument("trip", type=Path, help="Trip file (TripModel as JSON)")
    export.add_argument("--format", choices=[f.value for f in ExportFormat], default="gpx")
    export.add_argument("--device", choices=[d.value for d in DeviceProfile], default="universal")
    export.add_argument("--name", help="Custom document name")
    export.add_argument("--author")
    export.add_argument("--description")
    export.add_argument("-o", "--output-dir", type=Path, default=None)
    for flag in FLAGS:
        option = flag.replace("_", "-")
        export.add_argument(f"--{option}", dest=flag, action=argparse.BooleanOptionalAction, default=None)

    imp = commands.add_parser("import", help="Import waypoints from an exported document")
    imp.add_argument("file", type=Path)
    imp.add_argument("--format", help="Format hint (default: from file extension or content)")

    return parser


def run_export(args: argparse.Namespace) -> int:
    try:
        trip = TripModel.model_validate(json.loads(args.trip.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Cannot load trip from {args.trip}: {e}[/red]")
        return 1

    values = {
        "format": args.format,
        "device_profile": args.device,
        "custom_name": args.name,
        "author": args.author,
        "description": args.description,
    }
    for flag in FLAGS:
        if getattr(args, flag) is not None:
            values[f"include_{flag}"] = getattr(args, flag)

    result = export_trip_to_file(trip, ExportOptions(**values), args.output_dir)

    if result.warnings:
        console.print(Panel(
            "\n".join(f"  • {w}" for w in result.warnings),
            title="Warnings",
            border_style="yellow",
        ))
    if not result.success:
        console.print(Panel(
            "\n".join(f"  • {e}" for e in result.errors),
            title="Export failed",
            border_style="red",
        ))
        return 1

    console.print(
        f"[green]✓ Saved {result.info.filepath}[/green] "
        f"[dim]({result.file_size / 1024:.1f} KB, {result.info.waypoints} waypoints, "
        f"{result.info.campsites} campsites, {result.info.route_points} route points)[/dim]"
    )
    return 0


def run_import(args: argparse.Namespace) -> int:
    try:
        content = args.file.read_bytes()
    except OSError as e:
        console.print(f"[red]Cannot read {args.file}: {e}[/red]")
        return 1

    result = import_route(content, args.format or args.file.name)

    if not result.success:
        console.print(Panel(
            "\n".join(f"  • {e}" for e in result.errors),
            title="Import failed",
            border_style="red",
        ))
        return 1

    table = Table(title=f"Waypoints from {args.file.name}")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Lat", justify="right")
    table.add_column("Lng", justify="right")
    for index, waypoint in enumerate(result.waypoints, start=1):
        table.add_row(
            str(index),
            waypoint.name,
            waypoint.role.value,
            f"{waypoint.lat:.6f}",
            f"{waypoint.lng:.6f}",
        )
    console.print(table)

    if result.campsites or result.route_points:
        console.print(
            f"[dim]{len(result.campsites)} campsites, {len(result.route_points)} route points[/dim]"
        )
    for message in result.warnings + result.errors:
        console.print(f"[yellow]! {message}[/yellow]")
    return 0


def main():
    """Main entry point."""
    load_dotenv()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    args = build_parser().parse_args()
    if args.command == "export":
        sys.exit(run_export(args))
    sys.exit(run_import(args))


if __name__ == "__main__":
    main()
