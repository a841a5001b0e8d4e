#!/usr/bin/env python3
"""Tests for Car and Garage classes."""

from models import Car, Garage


class TestCar:
    """Tests for Car class."""

    def test_name_property(self):
        """Name property joins make and model."""
        car = Car("Toyota", "Corolla", 2018, "CA1234AB")
        assert car.name == "Toyota Corolla"

    def test_attributes(self):
        """All attributes are stored correctly."""
        car = Car("Honda", "Civic", 2021, "PB7777XX", ["1", "2"], id="c2")
        assert car.id == "c2"
        assert car.make == "Honda"
        assert car.model == "Civic"
        assert car.production_year == 2021
        assert car.license_plate == "PB7777XX"
        assert car.garage_ids == ["1", "2"]
        assert car.garages == []

    def test_name_without_make(self):
        """A car with no make has no display name."""
        car = Car("", "Civic", 2021, "PB7777XX")
        assert car.name == "N/A"

    def test_garage_ids_default_from_garages(self):
        """Garage ids fall back to the expanded garage list."""
        garages = [Garage("Central", 2, id="1"), Garage("North", 1, id="2")]
        car = Car("Toyota", "Corolla", 2018, "CA1234AB", garages=garages)
        assert car.garage_ids == ["1", "2"]

    def test_garage_names(self):
        """Garage names are comma-joined."""
        garages = [Garage("Central", 2, id="1"), Garage("North", 1, id="2")]
        car = Car("Toyota", "Corolla", 2018, "CA1234AB", garages=garages)
        assert car.garage_names == "Central, North"

    def test_garage_names_not_assigned(self):
        """No garages reads Not Assigned."""
        car = Car("Toyota", "Corolla", 2018, "CA1234AB")
        assert car.garage_names == "Not Assigned"


class TestGarage:
    """Tests for Garage class."""

    def test_attributes(self):
        """All attributes are stored correctly."""
        garage = Garage("Central", 2, "1 Main St", "Sofia", id="1")
        assert garage.id == "1"
        assert garage.name == "Central"
        assert garage.capacity == 2
        assert garage.location == "1 Main St"
        assert garage.city == "Sofia"

    def test_optional_fields_default_to_none(self):
        """Location, city and id default to None."""
        garage = Garage("Central", 2)
        assert garage.id is None
        assert garage.location is None
        assert garage.city is None
