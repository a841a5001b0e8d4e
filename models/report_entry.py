"""Report row dataclasses returned by the reporting endpoints."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class MonthlyReportEntry:
    """Maintenance request count for one calendar month."""

    year_month: Optional[str] = None
    requests: int = 0


@dataclass
class DailyAvailabilityEntry:
    """Requests and remaining capacity for one day at a garage."""

    date: str
    requests: int = 0
    available_capacity: int = 0

    @property
    def is_full(self) -> bool:
        return self.available_capacity <= 0
