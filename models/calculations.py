"""Helper functions shared by the car and maintenance views."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from dateutil import parser as date_parser

from .car import Car
from .errors import CapacityExceeded, FormError
from .garage import Garage
from .maintenance_record import MaintenanceRecord

NOT_AVAILABLE = "N/A"

# Filter field -> query parameter understood by the API
CAR_FILTER_PARAMS = {
    "make": "carMake",
    "garage_id": "garageId",
    "from_year": "fromYear",
    "to_year": "toYear",
}

MAINTENANCE_FILTER_PARAMS = {
    "car_id": "carId",
    "garage_id": "garageId",
    "start_date": "startDate",
    "end_date": "endDate",
}

REPORT_FILTER_PARAMS = {
    "garage_id": "garageId",
    "start_month": "startMonth",
    "end_month": "endMonth",
}

AVAILABILITY_FILTER_PARAMS = {
    "garage_id": "garageId",
    "start_date": "startDate",
    "end_date": "endDate",
}


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def same_id(left: Any, right: Any) -> bool:
    """Compare identifiers by string form; the API mixes ints and strings."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


def build_query_params(
    filters: Mapping[str, Any], names: Mapping[str, str]
) -> Dict[str, str]:
    """Map filter fields to query parameters, omitting empty fields."""
    params = {}
    for field, param in names.items():
        value = filters.get(field)
        if is_blank(value):
            continue
        params[param] = str(value).strip()
    return params


def build_car_params(filters: Mapping[str, Any]) -> Dict[str, str]:
    """Query parameters for GET /cars."""
    return build_query_params(filters, CAR_FILTER_PARAMS)


def build_maintenance_params(filters: Mapping[str, Any]) -> Dict[str, str]:
    """Query parameters for GET /maintenance."""
    return build_query_params(filters, MAINTENANCE_FILTER_PARAMS)


def missing_fields(values: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    """Names of required fields that are blank."""
    return [name for name in required if is_blank(values.get(name))]


def coerce_int(value: Any, label: str) -> int:
    """Convert a form value to int, raising FormError with the field label."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise FormError(f"Invalid {label}: {value!r}")


def coerce_garage_ids(values: Iterable[Any]) -> List[Any]:
    """Numeric garage ids become ints; anything else is sent unchanged."""
    result = []
    for value in values:
        if is_blank(value):
            continue
        text = str(value).strip()
        result.append(int(text) if text.isdigit() else text)
    return result


# =============================================================================
# Lookups and decoration
# =============================================================================


def find_car(cars: Iterable[Car], car_id: Any) -> Optional[Car]:
    for car in cars:
        if same_id(car.id, car_id):
            return car
    return None


def find_garage(garages: Iterable[Garage], garage_id: Any) -> Optional[Garage]:
    for garage in garages:
        if same_id(garage.id, garage_id):
            return garage
    return None


def decorate_records(
    records: List[MaintenanceRecord], cars: List[Car], garages: List[Garage]
) -> List[MaintenanceRecord]:
    """
    Attach car and garage display names to each record.

    A left join against the fetched lists: ids with no match, and cars
    without a make, get "N/A". Records are updated in place and returned.
    """
    cars_by_id = {str(c.id): c for c in cars if c.id is not None}
    garages_by_id = {str(g.id): g for g in garages if g.id is not None}

    for record in records:
        car = cars_by_id.get(str(record.car_id))
        garage = garages_by_id.get(str(record.garage_id))
        record.car_name = car.name if car and car.make else NOT_AVAILABLE
        record.garage_name = garage.name if garage and garage.name else NOT_AVAILABLE
    return records


# =============================================================================
# Local filtering
# =============================================================================


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date or datetime string; None when blank or unparseable."""
    if is_blank(value):
        return None
    try:
        parsed = date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return None
    # Compare everything as naive local values
    return parsed.replace(tzinfo=None)


def filter_records(
    records: Iterable[MaintenanceRecord],
    car_id: Any = None,
    garage_id: Any = None,
    start_date: Any = None,
    end_date: Any = None,
) -> List[MaintenanceRecord]:
    """
    Filter already-fetched records by car, garage and date range.

    Bounds are inclusive. Records whose date cannot be parsed are dropped
    whenever a date bound is set.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)

    result = []
    for record in records:
        if not is_blank(car_id) and not same_id(record.car_id, car_id):
            continue
        if not is_blank(garage_id) and not same_id(record.garage_id, garage_id):
            continue
        if start or end:
            scheduled = parse_date(record.scheduled_date)
            if scheduled is None:
                continue
            if start and scheduled < start:
                continue
            if end and scheduled > end:
                continue
        result.append(record)
    return result


# =============================================================================
# Capacity guard
# =============================================================================


def count_records_for_garage(records: Iterable[MaintenanceRecord], garage_id: Any) -> int:
    return sum(1 for r in records if same_id(r.garage_id, garage_id))


def check_capacity(
    garage_id: Any, garages: List[Garage], records: List[MaintenanceRecord]
) -> Garage:
    """
    Advisory check that a garage can take one more record.

    Uses the most recently fetched garages and records; the server does not
    re-validate. Returns the garage, or raises FormError / CapacityExceeded.
    """
    garage = find_garage(garages, garage_id)
    if garage is None:
        raise FormError("Selected garage is not valid.")
    if count_records_for_garage(records, garage_id) >= garage.capacity:
        raise CapacityExceeded(garage.capacity)
    return garage


# =============================================================================
# Report formatting
# =============================================================================


def format_year_month(value: Any) -> Optional[str]:
    """
    Normalize a report month label to 'YYYY-MM'.

    The API sends either a flat label (returned unchanged) or a structured
    {"year": 2024, "monthValue": 3} pair. A pair without a numeric year and
    monthValue gives None.
    """
    if isinstance(value, Mapping):
        year = value.get("year")
        month = value.get("monthValue")
        if year is None or month is None:
            return None
        try:
            return f"{int(year)}-{int(month):02d}"
        except (TypeError, ValueError):
            return None
    return value
