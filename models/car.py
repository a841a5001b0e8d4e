"""Car class for fleet vehicles."""

from typing import List, Optional

from .garage import Garage


class Car:
    """A fleet car and the garages it is associated with."""

    def __init__(
        self,
        make: str,
        model: str,
        production_year: Optional[int],
        license_plate: str,
        garage_ids: Optional[List[str]] = None,
        garages: Optional[List[Garage]] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.make = make
        self.model = model
        self.production_year = production_year
        self.license_plate = license_plate
        self.garages = garages or []
        if garage_ids is None:
            garage_ids = [g.id for g in self.garages]
        self.garage_ids = garage_ids

    @property
    def name(self) -> str:
        """Display name used wherever a car is referenced by id."""
        if not self.make:
            return "N/A"
        return f"{self.make} {self.model}"

    @property
    def garage_names(self) -> str:
        """Comma-separated garage names, or 'Not Assigned'."""
        return ", ".join(g.name for g in self.garages) or "Not Assigned"
