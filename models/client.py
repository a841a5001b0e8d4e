"""HTTP client for the fleet REST API."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import httpx

from .calculations import (
    AVAILABILITY_FILTER_PARAMS,
    REPORT_FILTER_PARAMS,
    build_car_params,
    build_maintenance_params,
    build_query_params,
    format_year_month,
)
from .car import Car
from .errors import ApiError
from .garage import Garage
from .maintenance_record import MaintenanceRecord
from .report_entry import DailyAvailabilityEntry, MonthlyReportEntry

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8088"
DEFAULT_TIMEOUT = 5.0


def _optional_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_object(
    dct: Dict[str, Any],
) -> Union[Car, Garage, MaintenanceRecord, MonthlyReportEntry, DailyAvailabilityEntry, dict]:
    """Parse a decoded JSON object into the matching model type."""
    # Maintenance record (checked first: responses also carry carName)
    if "serviceType" in dct:
        return MaintenanceRecord(
            dct["serviceType"],
            dct.get("scheduledDate"),
            _optional_id(dct.get("carId")),
            _optional_id(dct.get("garageId")),
            _optional_id(dct.get("id")),
            dct.get("carName"),
            dct.get("garageName"),
        )
    # Car object
    elif "make" in dct and "model" in dct:
        garages = []
        for g in dct.get("garages") or []:
            # Expanded garages may omit capacity
            if isinstance(g, dict):
                g = Garage(g.get("name") or "", g.get("capacity") or 0, id=_optional_id(g.get("id")))
            if isinstance(g, Garage):
                garages.append(g)
        garage_ids = dct.get("garageIds")
        if garage_ids is not None:
            garage_ids = [str(g) for g in garage_ids if g is not None]
        return Car(
            dct["make"],
            dct["model"],
            dct.get("productionYear"),
            dct.get("licensePlate"),
            garage_ids,
            garages,
            _optional_id(dct.get("id")),
        )
    # Garage object
    elif "name" in dct and "capacity" in dct:
        return Garage(
            dct["name"],
            dct["capacity"],
            dct.get("location"),
            dct.get("city"),
            _optional_id(dct.get("id")),
        )
    # Monthly report row
    elif "yearMonth" in dct:
        return MonthlyReportEntry(
            format_year_month(dct["yearMonth"]),
            dct.get("requests") or 0,
        )
    # Daily availability row
    elif "date" in dct and ("availableCapacity" in dct or "available_capacity" in dct):
        available = dct.get("availableCapacity", dct.get("available_capacity"))
        return DailyAvailabilityEntry(dct["date"], dct.get("requests") or 0, available or 0)
    else:
        # Structured year/month pairs, error bodies, status replies
        return dct


def car_to_dict(car: Car) -> Dict[str, Any]:
    """Serialize a Car to the API payload format (camelCase keys)."""
    d: Dict[str, Any] = {
        "make": car.make,
        "model": car.model,
        "productionYear": car.production_year,
        "licensePlate": car.license_plate,
        "garageIds": list(car.garage_ids),
    }
    if car.id is not None:
        d["id"] = car.id
    return d


def garage_to_dict(garage: Garage) -> Dict[str, Any]:
    """Serialize a Garage to the API payload format."""
    d: Dict[str, Any] = {
        "name": garage.name,
        "location": garage.location or "",
        "city": garage.city or "",
        "capacity": garage.capacity,
    }
    if garage.id is not None:
        d["id"] = garage.id
    return d


def record_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to the API payload format."""
    d: Dict[str, Any] = {
        "serviceType": record.service_type,
        "scheduledDate": record.scheduled_date,
        "carId": record.car_id,
        "garageId": record.garage_id,
    }
    if record.id is not None:
        d["id"] = record.id
    return d


def _error_details(response: httpx.Response) -> Optional[Any]:
    """Pull the server's error description out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("details") or body.get("error") or body
    return body


class FleetClient:
    """Thin wrapper over httpx for the fleet API endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FleetClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, action: str, **kwargs) -> Any:
        """
        Send a request and decode the reply.

        JSON bodies are parsed into model objects; other bodies come back as
        text. Any transport failure, non-2xx status or undecodable JSON body
        raises ApiError naming the action.
        """
        logger.debug("%s %s params=%s", method, path, kwargs.get("params"))
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            details = _error_details(e.response)
            logger.error("Error %s: HTTP %s %s", action, e.response.status_code, details)
            raise ApiError(
                f"An error occurred while {action}.",
                status_code=e.response.status_code,
                details=details,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Error %s: %s", action, e)
            raise ApiError(f"An error occurred while {action}.", details=str(e)) from e

        if not response.content:
            return None
        if "json" not in response.headers.get("content-type", ""):
            return response.text
        try:
            return response.json(object_hook=_parse_object)
        except ValueError as e:
            logger.error("Error %s: undecodable response: %s", action, e)
            raise ApiError(
                f"An error occurred while {action}.",
                status_code=response.status_code,
                details=str(e),
            ) from e

    # -------------------------------------------------------------------------
    # Cars
    # -------------------------------------------------------------------------

    def list_cars(self, filters: Optional[Mapping[str, Any]] = None) -> List[Car]:
        params = build_car_params(filters or {})
        return self._request("GET", "/cars", "fetching cars", params=params) or []

    def create_car(self, car: Car) -> Any:
        return self._request("POST", "/cars", "adding the car", json=car_to_dict(car))

    def update_car(self, car: Car) -> Any:
        return self._request(
            "PUT", f"/cars/{car.id}", "updating the car", json=car_to_dict(car)
        )

    def delete_car(self, car_id: str) -> Any:
        return self._request("DELETE", f"/cars/{car_id}", "deleting the car")

    # -------------------------------------------------------------------------
    # Garages
    # -------------------------------------------------------------------------

    def list_garages(self) -> List[Garage]:
        return self._request("GET", "/garages", "fetching garages") or []

    def get_garage(self, garage_id: str) -> Garage:
        return self._request("GET", f"/garages/{garage_id}", "fetching the garage")

    def create_garage(self, garage: Garage) -> Any:
        return self._request(
            "POST", "/garages", "adding the garage", json=garage_to_dict(garage)
        )

    def update_garage(self, garage: Garage) -> Any:
        return self._request(
            "PUT",
            f"/garages/{garage.id}",
            "updating the garage",
            json=garage_to_dict(garage),
        )

    def delete_garage(self, garage_id: str) -> Any:
        return self._request("DELETE", f"/garages/{garage_id}", "deleting the garage")

    def daily_availability(
        self, garage_id: Any, start_date: str, end_date: str
    ) -> List[DailyAvailabilityEntry]:
        params = build_query_params(
            {"garage_id": garage_id, "start_date": start_date, "end_date": end_date},
            AVAILABILITY_FILTER_PARAMS,
        )
        return self._request(
            "GET",
            "/garages/dailyAvailabilityReport",
            "fetching the availability report",
            params=params,
        ) or []

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def list_maintenance(
        self, filters: Optional[Mapping[str, Any]] = None
    ) -> List[MaintenanceRecord]:
        params = build_maintenance_params(filters or {})
        return self._request(
            "GET", "/maintenance", "fetching maintenance records", params=params
        ) or []

    def get_maintenance(self, record_id: str) -> MaintenanceRecord:
        return self._request(
            "GET", f"/maintenance/{record_id}", "fetching the maintenance record"
        )

    def create_maintenance(self, record: MaintenanceRecord) -> Any:
        return self._request(
            "POST", "/maintenance", "adding the record", json=record_to_dict(record)
        )

    def update_maintenance(self, record: MaintenanceRecord) -> Any:
        return self._request(
            "PUT",
            f"/maintenance/{record.id}",
            "updating the record",
            json=record_to_dict(record),
        )

    def delete_maintenance(self, record_id: str) -> Any:
        return self._request(
            "DELETE", f"/maintenance/{record_id}", "deleting the maintenance request"
        )

    def monthly_report(
        self, garage_id: Any, start_month: str, end_month: str
    ) -> List[MonthlyReportEntry]:
        params = build_query_params(
            {"garage_id": garage_id, "start_month": start_month, "end_month": end_month},
            REPORT_FILTER_PARAMS,
        )
        return self._request(
            "GET",
            "/maintenance/monthlyRequestsReport",
            "fetching the monthly report",
            params=params,
        ) or []

    def fetch_cars_and_garages(self) -> Tuple[List[Car], List[Garage]]:
        """Fetch the full car and garage lists concurrently."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            cars = pool.submit(self.list_cars)
            garages = pool.submit(self.list_garages)
            return cars.result(), garages.result()
