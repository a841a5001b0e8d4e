"""Exceptions raised by the fleet client and form checks."""

from typing import Any, Optional


class FleetError(Exception):
    """Base class for every error shown to the operator."""


class ApiError(FleetError):
    """A request to the fleet API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class FormError(FleetError):
    """Submitted data was rejected before it reached the API."""


class CapacityExceeded(FormError):
    """The target garage already holds as many records as it allows."""

    def __init__(self, capacity: int):
        super().__init__(f"Cannot add maintenance. Garage capacity ({capacity}) reached.")
        self.capacity = capacity
