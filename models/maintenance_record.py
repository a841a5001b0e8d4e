"""MaintenanceRecord class for scheduled services."""
from typing import Optional


class MaintenanceRecord:
    """A maintenance request booked for a car at a garage."""

    def __init__(
            self,
            service_type: str,
            scheduled_date: str,
            car_id: str,
            garage_id: str,
            id: Optional[str] = None,
            car_name: Optional[str] = None,
            garage_name: Optional[str] = None,
    ):
        self.id = id
        self.service_type = service_type
        self.scheduled_date = scheduled_date
        self.car_id = car_id
        self.garage_id = garage_id
        self.car_name = car_name
        self.garage_name = garage_name
