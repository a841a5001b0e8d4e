"""Garage class for service locations."""

from typing import Optional


class Garage:
    """A service location with a fixed maintenance capacity."""

    def __init__(
        self,
        name: str,
        capacity: int,
        location: Optional[str] = None,
        city: Optional[str] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.capacity = capacity
        self.location = location
        self.city = city
