"""Shared fixtures: a fake fleet API served through httpx.MockTransport."""

import httpx
import pytest

from models import FleetClient

GARAGES = [
    {"id": 1, "name": "Central", "location": "1 Main St", "city": "Sofia", "capacity": 2},
    {"id": 2, "name": "North", "location": "9 Hill Rd", "city": "Plovdiv", "capacity": 1},
]

CARS = [
    {
        "id": "c1",
        "make": "Toyota",
        "model": "Corolla",
        "productionYear": 2018,
        "licensePlate": "CA1234AB",
        "garageIds": ["1"],
        "garages": [GARAGES[0]],
    },
    {
        "id": "c2",
        "make": "Honda",
        "model": "Civic",
        "productionYear": 2021,
        "licensePlate": "PB7777XX",
        "garageIds": [],
        "garages": [],
    },
]

MAINTENANCE = [
    {"id": 10, "carId": "c1", "garageId": "1", "serviceType": "Oil change", "scheduledDate": "2024-03-15"},
    {"id": 11, "carId": "c2", "garageId": "2", "serviceType": "Brakes", "scheduledDate": "2024-04-02"},
    {"id": 12, "carId": "c9", "garageId": "7", "serviceType": "Tires", "scheduledDate": "2024-05-20"},
]


class FakeApi:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, json=None, status=200, text=None, content_type=None):
        self.routes[(method, path)] = (status, json, text, content_type)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"error": "Not found"})
        status, body, text, content_type = self.routes[key]
        if text is not None:
            headers = {"content-type": content_type} if content_type else None
            return httpx.Response(status, text=text, headers=headers)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method, path=None):
        """Requests matching a method and, optionally, a path."""
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]


@pytest.fixture
def api():
    fake = FakeApi()
    fake.add("GET", "/cars", json=CARS)
    fake.add("GET", "/garages", json=GARAGES)
    fake.add("GET", "/maintenance", json=MAINTENANCE)
    return fake


@pytest.fixture
def client(api):
    return FleetClient("http://fleet.test", transport=httpx.MockTransport(api.handler))
