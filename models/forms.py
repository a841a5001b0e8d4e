"""Build model objects from submitted form values."""

from typing import Any, Iterable, Mapping, Optional

from .calculations import coerce_garage_ids, coerce_int, is_blank, missing_fields
from .car import Car
from .errors import FormError
from .garage import Garage
from .maintenance_record import MaintenanceRecord
from .validation import validate_payload
from .client import car_to_dict, garage_to_dict, record_to_dict

CAR_FIELDS = ("make", "model", "production_year", "license_plate")
GARAGE_FIELDS = ("name", "capacity")
MAINTENANCE_FIELDS = ("service_type", "scheduled_date", "garage_id", "car_id")


def _text(values: Mapping[str, Any], name: str) -> str:
    value = values.get(name)
    return "" if value is None else str(value).strip()


def _id(values: Mapping[str, Any], name: str = "id") -> Optional[str]:
    value = values.get(name)
    return None if is_blank(value) else str(value).strip()


def _garage_ids(values: Mapping[str, Any]) -> Iterable[Any]:
    """Garage ids as a list, whether submitted as a list or comma-separated."""
    raw = values.get("garage_ids") or []
    if isinstance(raw, str):
        raw = raw.split(",")
    return raw


def car_from_form(values: Mapping[str, Any]) -> Car:
    """
    Build a Car from form values.

    The production year and numeric garage ids are converted to ints before
    the payload is checked against the car schema.
    """
    if missing_fields(values, CAR_FIELDS):
        raise FormError("Please fill all fields.")

    car = Car(
        make=_text(values, "make"),
        model=_text(values, "model"),
        production_year=coerce_int(values.get("production_year"), "production year"),
        license_plate=_text(values, "license_plate"),
        garage_ids=coerce_garage_ids(_garage_ids(values)),
        id=_id(values),
    )
    validate_payload("car", car_to_dict(car))
    return car


def garage_from_form(values: Mapping[str, Any]) -> Garage:
    """Build a Garage from form values."""
    if missing_fields(values, GARAGE_FIELDS):
        raise FormError("Please fill all fields.")

    garage = Garage(
        name=_text(values, "name"),
        capacity=coerce_int(values.get("capacity"), "capacity"),
        location=_text(values, "location"),
        city=_text(values, "city"),
        id=_id(values),
    )
    validate_payload("garage", garage_to_dict(garage))
    return garage


def record_from_form(values: Mapping[str, Any]) -> MaintenanceRecord:
    """Build a MaintenanceRecord from form values; every field is required."""
    if missing_fields(values, MAINTENANCE_FIELDS):
        raise FormError("Please fill all fields.")

    record = MaintenanceRecord(
        service_type=_text(values, "service_type"),
        scheduled_date=_text(values, "scheduled_date"),
        car_id=_text(values, "car_id"),
        garage_id=_text(values, "garage_id"),
        id=_id(values),
    )
    validate_payload("maintenance", record_to_dict(record))
    return record
