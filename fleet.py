#!/usr/bin/env python3
"""
Unified CLI for fleet administration.

Commands:
  cars               - List cars, optionally filtered
  add-car            - Add a car
  update-car         - Replace a car's details
  delete-car         - Delete a car (asks for confirmation)
  garages            - List garages
  add-garage         - Add a garage
  update-garage      - Replace a garage's details
  delete-garage      - Delete a garage (asks for confirmation)
  availability       - Daily availability report for a garage
  maintenance        - List maintenance records with car/garage names
  add-maintenance    - Book a maintenance record (checks garage capacity)
  update-maintenance - Replace a maintenance record
  delete-maintenance - Delete a maintenance record (asks for confirmation)
  report             - Monthly maintenance request report for a garage
"""

import argparse
import logging
import sys
from tabulate import tabulate
from typing import List, Optional

from config import ConfigError, load_config, setup_logging
from models import (
    Car,
    Garage,
    MaintenanceRecord,
    MonthlyReportEntry,
    DailyAvailabilityEntry,
    FleetClient,
    FleetError,
    car_from_form,
    garage_from_form,
    record_from_form,
)
from models import actions
from models.calculations import check_capacity

logger = logging.getLogger("fleet")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_value(value) -> str:
    """Format an optional value for display."""
    if value is None or value == "":
        return "-"
    return str(value)


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def ask_confirmation(prompt: str) -> bool:
    """Interactive yes/no prompt; anything but y/yes declines."""
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def confirmer(args):
    """Confirmation callback honoring --yes."""
    if getattr(args, "yes", False):
        return lambda prompt: True
    return ask_confirmation


def make_car_table(cars: List[Car]) -> List[List[str]]:
    """Convert cars to table rows."""
    return [
        [
            format_value(car.id),
            car.make,
            car.model,
            format_value(car.production_year),
            format_value(car.license_plate),
            car.garage_names,
        ]
        for car in cars
    ]


def make_garage_table(garages: List[Garage]) -> List[List[str]]:
    """Convert garages to table rows."""
    return [
        [
            format_value(g.id),
            g.name,
            format_value(g.location),
            format_value(g.city),
            format_value(g.capacity),
        ]
        for g in garages
    ]


def make_maintenance_table(records: List[MaintenanceRecord]) -> List[List[str]]:
    """Convert decorated maintenance records to table rows."""
    return [
        [
            format_value(r.id),
            truncate(r.service_type),
            format_value(r.scheduled_date),
            r.garage_name or "N/A",
            r.car_name or "N/A",
        ]
        for r in records
    ]


def make_report_table(entries: List[MonthlyReportEntry]) -> List[List[str]]:
    """Convert monthly report entries to table rows."""
    return [[e.year_month or "N/A", e.requests or 0] for e in entries]


def make_availability_table(entries: List[DailyAvailabilityEntry]) -> List[List[str]]:
    """Convert daily availability entries to table rows."""
    return [
        [e.date, e.requests, e.available_capacity, "FULL" if e.is_full else ""]
        for e in entries
    ]


def car_values(args) -> dict:
    """Collect car fields from parsed arguments."""
    return {
        "id": getattr(args, "id", None),
        "make": args.make,
        "model": args.model,
        "production_year": args.year,
        "license_plate": args.plate,
        "garage_ids": args.garage or [],
    }


def garage_values(args) -> dict:
    """Collect garage fields from parsed arguments."""
    return {
        "id": getattr(args, "id", None),
        "name": args.name,
        "location": args.location,
        "city": args.city,
        "capacity": args.capacity,
    }


def maintenance_values(args) -> dict:
    """Collect maintenance fields from parsed arguments."""
    return {
        "id": getattr(args, "id", None),
        "service_type": args.service_type,
        "scheduled_date": args.date,
        "car_id": args.car,
        "garage_id": args.garage,
    }


# =============================================================================
# Car commands
# =============================================================================


def cmd_cars(args, client: FleetClient):
    """List cars, optionally filtered."""
    filters = {
        "make": args.make,
        "garage_id": args.garage,
        "from_year": args.from_year,
        "to_year": args.to_year,
    }
    cars, _ = actions.load_car_view(client, filters)

    print(f"Cars: {len(cars)}")
    print()
    if not cars:
        print("No cars found.")
        return 0

    headers = ["ID", "Make", "Model", "Year", "License Plate", "Garages"]
    print(tabulate(make_car_table(cars), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_car(args, client: FleetClient):
    """Add a car."""
    values = car_values(args)
    if args.dry_run:
        car = car_from_form(values)
        print("Would add car:")
        print(tabulate(make_car_table([car]), tablefmt="plain"))
        print("(dry run - no changes made)")
        return 0

    actions.add_car(client, values)
    print("Car added successfully!")
    return 0


def cmd_update_car(args, client: FleetClient):
    """Replace a car's details."""
    values = car_values(args)
    if args.dry_run:
        car_from_form(values)
        print(f"Would update car {args.id}.")
        print("(dry run - no changes made)")
        return 0

    actions.update_car(client, values)
    print("Car updated successfully!")
    return 0


def cmd_delete_car(args, client: FleetClient):
    """Delete a car after confirmation."""
    deleted = actions.confirm_delete(
        confirmer(args),
        client.delete_car,
        args.id,
        "Are you sure you want to delete this car?",
    )
    print("Car deleted successfully!" if deleted else "Cancelled.")
    return 0


# =============================================================================
# Garage commands
# =============================================================================


def cmd_garages(args, client: FleetClient):
    """List garages."""
    garages = client.list_garages()

    print(f"Garages: {len(garages)}")
    print()
    if not garages:
        print("No garages found.")
        return 0

    headers = ["ID", "Name", "Location", "City", "Capacity"]
    print(tabulate(make_garage_table(garages), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_garage(args, client: FleetClient):
    """Add a garage."""
    values = garage_values(args)
    if args.dry_run:
        garage = garage_from_form(values)
        print("Would add garage:")
        print(tabulate(make_garage_table([garage]), tablefmt="plain"))
        print("(dry run - no changes made)")
        return 0

    actions.add_garage(client, values)
    print("Garage added successfully!")
    return 0


def cmd_update_garage(args, client: FleetClient):
    """Replace a garage's details."""
    values = garage_values(args)
    if args.dry_run:
        garage_from_form(values)
        print(f"Would update garage {args.id}.")
        print("(dry run - no changes made)")
        return 0

    actions.update_garage(client, values)
    print("Garage updated successfully!")
    return 0


def cmd_delete_garage(args, client: FleetClient):
    """Delete a garage after confirmation."""
    deleted = actions.confirm_delete(
        confirmer(args),
        client.delete_garage,
        args.id,
        "Are you sure you want to delete this garage?",
    )
    print("Garage deleted successfully!" if deleted else "Cancelled.")
    return 0


def cmd_availability(args, client: FleetClient):
    """Daily availability report for a garage."""
    entries = actions.daily_availability(client, args.garage, args.start, args.end)

    print(f"Garage: {args.garage}")
    print(f"Period: {args.start} to {args.end}")
    print()
    if not entries:
        print(actions.NO_REPORT_DATA)
        return 0

    headers = ["Date", "Requests", "Available", ""]
    print(tabulate(make_availability_table(entries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Maintenance commands
# =============================================================================


def cmd_maintenance(args, client: FleetClient):
    """List maintenance records."""
    filters = {
        "car_id": args.car,
        "garage_id": args.garage,
        "start_date": args.start,
        "end_date": args.end,
    }
    records, _, _ = actions.load_maintenance_view(client, filters)

    print(f"Maintenance records: {len(records)}")
    if any(filters.values()):
        print("Showing: filtered")
    print()
    if not records:
        print("No maintenance records found.")
        return 0

    headers = ["ID", "Service Type", "Scheduled Date", "Garage", "Car"]
    print(tabulate(make_maintenance_table(records), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_maintenance(args, client: FleetClient):
    """Book a maintenance record, checking garage capacity first."""
    values = maintenance_values(args)
    record = record_from_form(values)
    records, _, garages = actions.load_maintenance_view(client)

    if args.dry_run:
        garage = check_capacity(record.garage_id, garages, records)
        print(f"Would add '{record.service_type}' on {record.scheduled_date} at {garage.name}.")
        print("(dry run - no changes made)")
        return 0

    actions.add_maintenance(client, values, garages, records)
    print("Record added successfully!")
    return 0


def cmd_update_maintenance(args, client: FleetClient):
    """Replace a maintenance record."""
    values = maintenance_values(args)
    if args.dry_run:
        record_from_form(values)
        print(f"Would update maintenance record {args.id}.")
        print("(dry run - no changes made)")
        return 0

    actions.update_maintenance(client, values)
    print("Maintenance record updated successfully!")
    return 0


def cmd_delete_maintenance(args, client: FleetClient):
    """Delete a maintenance record after confirmation."""
    deleted = actions.confirm_delete(
        confirmer(args),
        client.delete_maintenance,
        args.id,
        "Are you sure you want to delete this maintenance request?",
    )
    print("Maintenance request deleted successfully!" if deleted else "Cancelled.")
    return 0


def cmd_report(args, client: FleetClient):
    """Monthly maintenance request report."""
    entries = actions.monthly_report(client, args.garage, args.start, args.end)

    print(f"Garage: {args.garage}")
    print(f"Period: {args.start} to {args.end}")
    print()
    if not entries:
        print(actions.NO_REPORT_DATA)
        return 0

    headers = ["Month", "Requests"]
    print(tabulate(make_report_table(entries), headers=headers, tablefmt="simple"))
    return 0


COMMANDS = {
    "cars": cmd_cars,
    "add-car": cmd_add_car,
    "update-car": cmd_update_car,
    "delete-car": cmd_delete_car,
    "garages": cmd_garages,
    "add-garage": cmd_add_garage,
    "update-garage": cmd_update_garage,
    "delete-garage": cmd_delete_garage,
    "availability": cmd_availability,
    "maintenance": cmd_maintenance,
    "add-maintenance": cmd_add_maintenance,
    "update-maintenance": cmd_update_maintenance,
    "delete-maintenance": cmd_delete_maintenance,
    "report": cmd_report,
}


# =============================================================================
# Main
# =============================================================================


def add_car_arguments(parser, require_id: bool = False):
    if require_id:
        parser.add_argument("id", type=str, help="Car ID")
    parser.add_argument("--make", type=str, required=True, help="Car make")
    parser.add_argument("--model", type=str, required=True, help="Car model")
    parser.add_argument("--year", type=str, required=True, help="Production year")
    parser.add_argument("--plate", type=str, required=True, help="License plate")
    parser.add_argument(
        "--garage",
        action="append",
        help="Associated garage ID (repeat for several)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be sent without calling the API",
    )


def add_garage_arguments(parser, require_id: bool = False):
    if require_id:
        parser.add_argument("id", type=str, help="Garage ID")
    parser.add_argument("--name", type=str, required=True, help="Garage name")
    parser.add_argument("--location", type=str, default="", help="Street address")
    parser.add_argument("--city", type=str, default="", help="City")
    parser.add_argument("--capacity", type=str, required=True, help="Maximum records")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be sent without calling the API",
    )


def add_maintenance_arguments(parser, require_id: bool = False):
    if require_id:
        parser.add_argument("id", type=str, help="Maintenance record ID")
    parser.add_argument(
        "service_type",
        type=str,
        help="Service type (e.g., 'Oil change')",
    )
    parser.add_argument("--date", type=str, required=True, help="Scheduled date (YYYY-MM-DD)")
    parser.add_argument("--car", type=str, required=True, help="Car ID")
    parser.add_argument("--garage", type=str, required=True, help="Garage ID")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate without calling the API",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s cars --make Toyota --from-year 2015
  %(prog)s add-car --make Toyota --model Corolla --year 2020 --plate CA1234AB --garage 1
  %(prog)s delete-car 3f2a --yes
  %(prog)s maintenance --garage 1 --start 2024-01-01 --end 2024-06-30
  %(prog)s add-maintenance "Oil change" --date 2024-03-15 --car 3f2a --garage 1
  %(prog)s report --garage 1 --start 2024-01 --end 2024-06
  %(prog)s availability --garage 1 --start 2024-03-01 --end 2024-03-31
""",
    )
    parser.add_argument("--api-url", type=str, help="Fleet API base URL")
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Cars
    cars_parser = subparsers.add_parser("cars", help="List cars")
    cars_parser.add_argument("--make", type=str, help="Filter by make")
    cars_parser.add_argument("--garage", type=str, help="Filter by garage ID")
    cars_parser.add_argument("--from-year", type=str, help="Earliest production year")
    cars_parser.add_argument("--to-year", type=str, help="Latest production year")

    add_car_arguments(subparsers.add_parser("add-car", help="Add a car"))
    add_car_arguments(
        subparsers.add_parser("update-car", help="Replace a car's details"),
        require_id=True,
    )
    delete_car_parser = subparsers.add_parser("delete-car", help="Delete a car")
    delete_car_parser.add_argument("id", type=str, help="Car ID")
    delete_car_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    # Garages
    subparsers.add_parser("garages", help="List garages")
    add_garage_arguments(subparsers.add_parser("add-garage", help="Add a garage"))
    add_garage_arguments(
        subparsers.add_parser("update-garage", help="Replace a garage's details"),
        require_id=True,
    )
    delete_garage_parser = subparsers.add_parser("delete-garage", help="Delete a garage")
    delete_garage_parser.add_argument("id", type=str, help="Garage ID")
    delete_garage_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    availability_parser = subparsers.add_parser(
        "availability", help="Daily availability report for a garage"
    )
    availability_parser.add_argument("--garage", type=str, required=True, help="Garage ID")
    availability_parser.add_argument("--start", type=str, required=True, help="Start date (YYYY-MM-DD)")
    availability_parser.add_argument("--end", type=str, required=True, help="End date (YYYY-MM-DD)")

    # Maintenance
    maintenance_parser = subparsers.add_parser("maintenance", help="List maintenance records")
    maintenance_parser.add_argument("--car", type=str, help="Filter by car ID")
    maintenance_parser.add_argument("--garage", type=str, help="Filter by garage ID")
    maintenance_parser.add_argument("--start", type=str, help="Earliest scheduled date")
    maintenance_parser.add_argument("--end", type=str, help="Latest scheduled date")

    add_maintenance_arguments(
        subparsers.add_parser("add-maintenance", help="Book a maintenance record")
    )
    add_maintenance_arguments(
        subparsers.add_parser("update-maintenance", help="Replace a maintenance record"),
        require_id=True,
    )
    delete_maintenance_parser = subparsers.add_parser(
        "delete-maintenance", help="Delete a maintenance record"
    )
    delete_maintenance_parser.add_argument("id", type=str, help="Maintenance record ID")
    delete_maintenance_parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip confirmation"
    )

    report_parser = subparsers.add_parser("report", help="Monthly request report")
    report_parser.add_argument("--garage", type=str, required=True, help="Garage ID")
    report_parser.add_argument("--start", type=str, required=True, help="Start month (YYYY-MM)")
    report_parser.add_argument("--end", type=str, required=True, help="End month (YYYY-MM)")

    return parser


def main(argv=None, client: Optional[FleetClient] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    setup_logging("DEBUG" if args.verbose else config.log_level)

    if client is None:
        client = FleetClient(args.api_url or config.api_url, timeout=config.timeout)

    # Dispatch to command handler
    try:
        with client:
            return COMMANDS[args.command](args, client)
    except FleetError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
