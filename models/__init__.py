"""
Fleet administration models.

This package provides the client side of the fleet API:
- Car, Garage, MaintenanceRecord: entities as the API returns them
- MonthlyReportEntry, DailyAvailabilityEntry: report rows
- FleetClient: REST calls for every endpoint
- calculations: filter parameters, name decoration, capacity guard
- actions: the view operations shared by the web app and the CLI
"""

from .errors import FleetError, ApiError, FormError, CapacityExceeded
from .garage import Garage
from .car import Car
from .maintenance_record import MaintenanceRecord
from .report_entry import MonthlyReportEntry, DailyAvailabilityEntry
from .calculations import (
    build_car_params,
    build_maintenance_params,
    decorate_records,
    filter_records,
    check_capacity,
    format_year_month,
)
from .client import FleetClient, DEFAULT_API_URL, DEFAULT_TIMEOUT
from .forms import car_from_form, garage_from_form, record_from_form

__all__ = [
    "FleetError",
    "ApiError",
    "FormError",
    "CapacityExceeded",
    "Garage",
    "Car",
    "MaintenanceRecord",
    "MonthlyReportEntry",
    "DailyAvailabilityEntry",
    "build_car_params",
    "build_maintenance_params",
    "decorate_records",
    "filter_records",
    "check_capacity",
    "format_year_month",
    "FleetClient",
    "DEFAULT_API_URL",
    "DEFAULT_TIMEOUT",
    "car_from_form",
    "garage_from_form",
    "record_from_form",
]
