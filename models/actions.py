"""
Operations behind the car, garage and maintenance views.

Both the web app and the CLI go through these, so the capacity check,
the name decoration and the delete confirmation behave the same in each.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .calculations import check_capacity, decorate_records, filter_records, missing_fields
from .car import Car
from .client import FleetClient
from .errors import FormError
from .forms import car_from_form, garage_from_form, record_from_form
from .garage import Garage
from .maintenance_record import MaintenanceRecord
from .report_entry import DailyAvailabilityEntry, MonthlyReportEntry

logger = logging.getLogger(__name__)

NO_REPORT_DATA = "No data available for the selected criteria."


def load_car_view(
    client: FleetClient, filters: Optional[Mapping[str, Any]] = None
) -> Tuple[List[Car], List[Garage]]:
    """Filtered cars plus the unfiltered garage list for the filter dropdown."""
    cars = client.list_cars(filters)
    garages = client.list_garages()
    return cars, garages


def add_car(client: FleetClient, values: Mapping[str, Any]) -> Any:
    car = car_from_form(values)
    logger.info("Adding car: %s", vars(car))
    return client.create_car(car)


def update_car(client: FleetClient, values: Mapping[str, Any]) -> Any:
    """Send a full-record update for the car being edited."""
    if not values.get("id"):
        raise FormError("No car selected for update.")
    car = car_from_form(values)
    logger.info("Updating car %s: %s", car.id, vars(car))
    return client.update_car(car)


def add_garage(client: FleetClient, values: Mapping[str, Any]) -> Any:
    garage = garage_from_form(values)
    logger.info("Adding garage: %s", vars(garage))
    return client.create_garage(garage)


def update_garage(client: FleetClient, values: Mapping[str, Any]) -> Any:
    if not values.get("id"):
        raise FormError("No garage selected for update.")
    garage = garage_from_form(values)
    logger.info("Updating garage %s: %s", garage.id, vars(garage))
    return client.update_garage(garage)


def load_maintenance_view(
    client: FleetClient, filters: Optional[Mapping[str, Any]] = None
) -> Tuple[List[MaintenanceRecord], List[Car], List[Garage]]:
    """
    Fetch records, then cars and garages concurrently, and join names on.

    The same filters are sent to the server and applied again locally.
    """
    filters = filters or {}
    records = client.list_maintenance(filters)
    cars, garages = client.fetch_cars_and_garages()
    decorate_records(records, cars, garages)
    records = filter_records(
        records,
        car_id=filters.get("car_id"),
        garage_id=filters.get("garage_id"),
        start_date=filters.get("start_date"),
        end_date=filters.get("end_date"),
    )
    return records, cars, garages


def add_maintenance(
    client: FleetClient,
    values: Mapping[str, Any],
    garages: List[Garage],
    records: List[MaintenanceRecord],
) -> Any:
    """
    Validate a new record, check the garage capacity, then create it.

    `garages` and `records` are whatever the caller fetched last; the
    capacity check is only as fresh as they are.
    """
    record = record_from_form(values)
    check_capacity(record.garage_id, garages, records)
    logger.info("Adding maintenance record: %s", vars(record))
    return client.create_maintenance(record)


def update_maintenance(client: FleetClient, values: Mapping[str, Any]) -> Any:
    """Send a full-record update for the record being edited."""
    if not values.get("id"):
        raise FormError("No maintenance record selected for update.")
    record = record_from_form(values)
    logger.info("Updating maintenance record %s: %s", record.id, vars(record))
    return client.update_maintenance(record)


def monthly_report(
    client: FleetClient, garage_id: Any, start_month: Any, end_month: Any
) -> List[MonthlyReportEntry]:
    """Fetch the monthly request report; all three fields are required."""
    values = {"garage_id": garage_id, "start_month": start_month, "end_month": end_month}
    if missing_fields(values, values.keys()):
        raise FormError("Please select all fields.")
    return client.monthly_report(garage_id, start_month, end_month)


def daily_availability(
    client: FleetClient, garage_id: Any, start_date: Any, end_date: Any
) -> List[DailyAvailabilityEntry]:
    """Fetch a garage's day-by-day availability; all three fields are required."""
    values = {"garage_id": garage_id, "start_date": start_date, "end_date": end_date}
    if missing_fields(values, values.keys()):
        raise FormError("Please select all fields.")
    return client.daily_availability(garage_id, start_date, end_date)


def confirm_delete(
    confirm: Callable[[str], bool],
    delete: Callable[[str], Any],
    item_id: str,
    prompt: str,
) -> bool:
    """
    Call `delete(item_id)` only if `confirm(prompt)` returns True.

    Returns whether the delete was sent.
    """
    if not confirm(prompt):
        logger.info("Delete of %s cancelled", item_id)
        return False
    delete(item_id)
    logger.info("Deleted %s", item_id)
    return True
