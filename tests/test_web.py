#!/usr/bin/env python3
"""Tests for the Flask web views."""

import pytest

from web.app import app

REPORT_PATH = "/maintenance/monthlyRequestsReport"


@pytest.fixture
def web(client):
    app.config["TESTING"] = True
    app.config["FLEET_CLIENT"] = client
    with app.test_client() as test_client:
        yield test_client
    app.config["FLEET_CLIENT"] = None


class TestIndex:
    """Tests for the dashboard."""

    def test_counts(self, web):
        """Dashboard renders."""
        response = web.get("/")
        assert response.status_code == 200
        assert b"Fleet Admin" in response.data

    def test_api_failure_flashed(self, api, web):
        """A failed fetch is shown as an alert, not a server error."""
        api.add("GET", "/cars", status=500, json={"error": "boom"})
        response = web.get("/")
        assert response.status_code == 200
        assert b"An error occurred while fetching cars." in response.data


class TestCars:
    """Tests for the car view."""

    def test_lists_cars(self, web):
        """Cars are listed with their garages."""
        response = web.get("/cars")
        assert response.status_code == 200
        assert b"Corolla" in response.data
        assert b"Not Assigned" in response.data

    def test_filters_sent_without_empty_values(self, api, web):
        """Empty filter fields are not sent to the API."""
        web.get("/cars?make=Toyota&garage_id=&from_year=&to_year=")
        request = api.calls("GET", "/cars")[0]
        assert dict(request.url.params) == {"carMake": "Toyota"}

    def test_edit_prefills_form(self, web):
        """Selecting a car for edit fills the form."""
        response = web.get("/cars?edit=c1")
        assert b"Update car" in response.data
        assert b'value="CA1234AB"' in response.data

    def test_edit_unknown_car(self, web):
        """Editing an unknown car shows an alert."""
        response = web.get("/cars?edit=nope")
        assert b"No car selected for update." in response.data

    def test_add_car(self, api, web):
        """A complete form posts the car."""
        api.add("POST", "/cars", status=201, json={"id": "c3", "make": "Kia", "model": "Rio"})
        response = web.post("/cars", data={
            "make": "Kia",
            "model": "Rio",
            "production_year": "2019",
            "license_plate": "X1",
            "garage_ids": ["1", "2"],
        }, follow_redirects=True)
        assert b"Car added successfully!" in response.data
        assert len(api.calls("POST", "/cars")) == 1

    def test_add_car_missing_fields(self, api, web):
        """An incomplete form posts nothing."""
        response = web.post("/cars", data={"make": "Kia"}, follow_redirects=True)
        assert b"Please fill all fields." in response.data
        assert api.calls("POST") == []

    def test_update_car_failure_keeps_edit(self, api, web):
        """A failed update returns to the edit form."""
        response = web.post("/cars/c1", data={
            "make": "Toyota",
            "model": "Corolla",
            "production_year": "2019",
            "license_plate": "CA1234AB",
        })
        assert response.status_code == 302
        assert "edit=c1" in response.headers["Location"]


class TestDelete:
    """Deletes require the confirmation form."""

    def test_confirmation_page(self, web):
        """The confirmation page carries confirm=yes."""
        response = web.get("/cars/c1/delete")
        assert b"Are you sure you want to delete this car?" in response.data
        assert b'name="confirm" value="yes"' in response.data

    def test_post_without_confirm_sends_nothing(self, api, web):
        """Without confirm=yes no DELETE is sent."""
        web.post("/cars/c1/delete", data={})
        assert api.calls("DELETE") == []

    def test_confirmed_delete(self, api, web):
        """With confirm=yes the DELETE is sent once."""
        api.add("DELETE", "/cars/c1", json={"id": "c1", "deleted": True})
        response = web.post("/cars/c1/delete", data={"confirm": "yes"}, follow_redirects=True)
        assert b"Car deleted successfully!" in response.data
        assert len(api.calls("DELETE", "/cars/c1")) == 1

    def test_delete_maintenance_failure_flashed(self, api, web):
        """A failed delete is shown as an alert."""
        api.add("DELETE", "/maintenance/10", status=500, json={"error": "boom"})
        response = web.post("/maintenance/10/delete", data={"confirm": "yes"}, follow_redirects=True)
        assert b"An error occurred while deleting the maintenance request." in response.data


class TestGarages:
    """Tests for the garage view."""

    def test_lists_garages(self, web):
        """Garages are listed."""
        response = web.get("/garages")
        assert b"Central" in response.data
        assert b"Plovdiv" in response.data

    def test_add_garage_invalid_capacity(self, api, web):
        """A non-numeric capacity posts nothing."""
        response = web.post("/garages", data={"name": "South", "capacity": "lots"}, follow_redirects=True)
        assert b"Invalid capacity" in response.data
        assert api.calls("POST") == []

    def test_availability(self, api, web):
        """Availability rows are fetched with the API parameter names."""
        api.add("GET", "/garages/1", json={"id": 1, "name": "Central", "capacity": 2})
        api.add("GET", "/garages/dailyAvailabilityReport", json=[
            {"date": "2024-03-01", "requests": 2, "availableCapacity": 0},
        ])
        response = web.get("/garages/1/availability?start_date=2024-03-01&end_date=2024-03-01")
        assert response.status_code == 200
        assert b"2024-03-01" in response.data
        request = api.calls("GET", "/garages/dailyAvailabilityReport")[0]
        assert dict(request.url.params) == {
            "garageId": "1",
            "startDate": "2024-03-01",
            "endDate": "2024-03-01",
        }

    def test_availability_no_data(self, api, web):
        """An empty availability report shows a neutral alert and an empty table."""
        api.add("GET", "/garages/1", json={"id": 1, "name": "Central", "capacity": 2})
        api.add("GET", "/garages/dailyAvailabilityReport", json=[])
        response = web.get("/garages/1/availability?start_date=2024-03-01&end_date=2024-03-02")
        assert b"No data available for the selected criteria." in response.data
        assert b"bg-blue-50" in response.data
        assert b"bg-red-100" not in response.data
        assert b'id="availability-report"' in response.data


class TestMaintenance:
    """Tests for the maintenance view."""

    def test_names_resolved(self, web):
        """Car and garage names are shown, unknown ones as N/A."""
        response = web.get("/maintenance")
        assert b"Toyota Corolla" in response.data
        assert b"Honda Civic" in response.data
        assert b"N/A" in response.data

    def test_local_filter(self, web):
        """Records outside the filter are not shown."""
        response = web.get("/maintenance?garage_id=2")
        assert b"Brakes" in response.data
        assert b"Oil change" not in response.data

    def test_edit_record_outside_filter(self, api, web):
        """A record hidden by the filter is fetched by id for editing."""
        api.add("GET", "/maintenance/10", json={
            "id": 10, "carId": "c1", "garageId": "1", "serviceType": "Oil change", "scheduledDate": "2024-03-15",
        })
        response = web.get("/maintenance?garage_id=2&edit=10")
        assert b"Update maintenance record" in response.data
        assert b'value="Oil change"' in response.data
        assert len(api.calls("GET", "/maintenance/10")) == 1

    def test_edit_unknown_record(self, web):
        """Editing a record that cannot be found shows an alert."""
        response = web.get("/maintenance?edit=99")
        assert response.status_code == 200
        assert b"No maintenance record selected for update." in response.data
        assert b"Add maintenance record" in response.data

    def test_add_missing_fields_fetches_nothing(self, api, web):
        """Missing fields are reported before anything is fetched."""
        response = web.post("/maintenance", data={"service_type": "Wash"})
        assert response.status_code == 302
        assert api.requests == []

    def test_add_over_capacity(self, api, web):
        """A full garage gets the capacity alert and no POST."""
        response = web.post("/maintenance", data={
            "service_type": "Wash",
            "scheduled_date": "2024-06-01",
            "car_id": "c1",
            "garage_id": "2",
        }, follow_redirects=True)
        assert b"Cannot add maintenance. Garage capacity (1) reached." in response.data
        assert api.calls("POST") == []

    def test_add_below_capacity(self, api, web):
        """A garage with room gets the record posted."""
        api.add("POST", "/maintenance", status=201, json={
            "id": 13, "carId": "c1", "garageId": "1", "serviceType": "Wash", "scheduledDate": "2024-06-01",
        })
        response = web.post("/maintenance", data={
            "service_type": "Wash",
            "scheduled_date": "2024-06-01",
            "car_id": "c1",
            "garage_id": "1",
        }, follow_redirects=True)
        assert b"Record added successfully!" in response.data
        assert len(api.calls("POST", "/maintenance")) == 1


class TestMonthlyReport:
    """Tests for the monthly report form."""

    def test_requires_all_fields(self, api, web):
        """A missing month stops the request."""
        response = web.get("/maintenance/report?report_garage_id=1&start_month=2024-01&end_month=")
        assert b"Please select all fields." in response.data
        assert api.calls("GET", REPORT_PATH) == []

    def test_formats_months(self, api, web):
        """Structured months are rendered as YYYY-MM."""
        api.add("GET", REPORT_PATH, json=[
            {"yearMonth": {"year": 2024, "monthValue": 3}, "requests": 4},
            {"yearMonth": {"year": 2024, "monthValue": 4}, "requests": None},
        ])
        response = web.get("/maintenance/report?report_garage_id=1&start_month=2024-03&end_month=2024-04")
        assert b'id="monthly-report"' in response.data
        assert b"2024-03" in response.data
        assert b"2024-04" in response.data

    def test_month_name_shown_as_na(self, api, web):
        """A month the page cannot format is shown as N/A."""
        api.add("GET", REPORT_PATH, json=[
            {"yearMonth": {"year": 2024, "month": "MARCH"}, "requests": 2},
        ])
        response = web.get(
            "/maintenance/report?garage_id=1&report_garage_id=1&start_month=2024-01&end_month=2024-06"
        )
        assert response.status_code == 200
        assert b'id="monthly-report"' in response.data
        assert b'<td class="p-2">N/A</td>' in response.data

    def test_malformed_body_flashed(self, api, web):
        """An undecodable report reply is shown as an error alert."""
        api.add("GET", REPORT_PATH, text='[{"yearMonth": ', content_type="application/json")
        response = web.get("/maintenance/report?report_garage_id=1&start_month=2024-01&end_month=2024-06")
        assert response.status_code == 200
        assert b"An error occurred while fetching the monthly report." in response.data
        assert b'id="monthly-report"' not in response.data

    def test_no_data(self, api, web):
        """An empty report shows a neutral alert and an empty table."""
        api.add("GET", REPORT_PATH, json=[])
        response = web.get("/maintenance/report?report_garage_id=1&start_month=2024-03&end_month=2024-04")
        assert b"No data available for the selected criteria." in response.data
        assert b"bg-blue-50" in response.data
        assert b"bg-red-100" not in response.data
        assert b'id="monthly-report"' in response.data
        assert b"No requests in this period." in response.data
