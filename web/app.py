"""Flask web application for fleet administration."""

import logging
from pathlib import Path

from flask import Flask, g, render_template, request, redirect, url_for, flash

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import load_config, setup_logging
from models import FleetClient, FleetError, MaintenanceRecord, record_from_form
from models import actions
from models.calculations import decorate_records, find_car, find_garage, NOT_AVAILABLE

config = load_config()
setup_logging(config.log_level)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = config.secret_key
app.config["FLEET_API_URL"] = config.api_url
app.config["FLEET_API_TIMEOUT"] = config.timeout
# Tests put a FleetClient with a mock transport here
app.config["FLEET_CLIENT"] = None


def get_client() -> FleetClient:
    """The configured API client, one per request unless injected."""
    injected = app.config.get("FLEET_CLIENT")
    if injected is not None:
        return injected
    if "fleet_client" not in g:
        g.fleet_client = FleetClient(
            app.config["FLEET_API_URL"], timeout=app.config["FLEET_API_TIMEOUT"]
        )
    return g.fleet_client


@app.teardown_appcontext
def close_client(exc):
    client = g.pop("fleet_client", None)
    if client is not None:
        client.close()


def report_error(error: FleetError) -> None:
    """Log a failure and show it to the operator."""
    logger.error("%s %s failed: %s", request.method, request.path, error)
    flash(str(error), "error")


def form_values() -> dict:
    """Submitted form fields, with multi-select garage ids kept as a list."""
    values = request.form.to_dict()
    values["garage_ids"] = request.form.getlist("garage_ids")
    return values


def format_value(value):
    """Format optional values for table cells."""
    if value is None or value == "":
        return "—"
    return value


def default_na(value):
    return value or NOT_AVAILABLE


# Register template filters
app.jinja_env.filters["format_value"] = format_value
app.jinja_env.filters["default_na"] = default_na


@app.route("/")
def index():
    """Dashboard with counts for each resource."""
    client = get_client()
    counts = {"cars": None, "garages": None, "maintenance": None}
    try:
        counts["cars"] = len(client.list_cars())
        counts["garages"] = len(client.list_garages())
        counts["maintenance"] = len(client.list_maintenance())
    except FleetError as e:
        report_error(e)
    return render_template("index.html", counts=counts)


# =============================================================================
# Cars
# =============================================================================


@app.route("/cars")
def cars():
    """Car list with filters, add form and edit form."""
    filters = {
        "make": request.args.get("make", ""),
        "garage_id": request.args.get("garage_id", ""),
        "from_year": request.args.get("from_year", ""),
        "to_year": request.args.get("to_year", ""),
    }
    car_list, garages = [], []
    try:
        car_list, garages = actions.load_car_view(get_client(), filters)
    except FleetError as e:
        report_error(e)

    editing = None
    edit_id = request.args.get("edit")
    if edit_id:
        editing = find_car(car_list, edit_id)
        if editing is None:
            flash("No car selected for update.", "error")

    return render_template(
        "cars.html",
        cars=car_list,
        garages=garages,
        filters=filters,
        editing=editing,
    )


@app.route("/cars", methods=["POST"])
def add_car():
    """Handle add car form submission."""
    try:
        actions.add_car(get_client(), form_values())
    except FleetError as e:
        report_error(e)
    else:
        flash("Car added successfully!", "success")
    return redirect(url_for("cars"))


@app.route("/cars/<car_id>", methods=["POST"])
def update_car(car_id: str):
    """Handle edit car form submission (full-record update)."""
    values = form_values()
    values["id"] = car_id
    try:
        actions.update_car(get_client(), values)
    except FleetError as e:
        report_error(e)
        return redirect(url_for("cars", edit=car_id))
    flash("Car updated successfully!", "success")
    return redirect(url_for("cars"))


@app.route("/cars/<car_id>/delete", methods=["GET"])
def confirm_delete_car(car_id: str):
    """Confirmation page shown before a car is deleted."""
    return render_template(
        "confirm_delete.html",
        prompt="Are you sure you want to delete this car?",
        action=url_for("delete_car", car_id=car_id),
        cancel=url_for("cars"),
    )


@app.route("/cars/<car_id>/delete", methods=["POST"])
def delete_car(car_id: str):
    """Delete a car; only sent when the form carries confirm=yes."""
    try:
        deleted = actions.confirm_delete(
            lambda prompt: request.form.get("confirm") == "yes",
            get_client().delete_car,
            car_id,
            "Are you sure you want to delete this car?",
        )
    except FleetError as e:
        report_error(e)
    else:
        if deleted:
            flash("Car deleted successfully!", "success")
    return redirect(url_for("cars"))


# =============================================================================
# Garages
# =============================================================================


@app.route("/garages")
def garages():
    """Garage list with add and edit forms."""
    garage_list = []
    try:
        garage_list = get_client().list_garages()
    except FleetError as e:
        report_error(e)

    editing = None
    edit_id = request.args.get("edit")
    if edit_id:
        editing = find_garage(garage_list, edit_id)
        if editing is None:
            flash("No garage selected for update.", "error")

    return render_template("garages.html", garages=garage_list, editing=editing)


@app.route("/garages", methods=["POST"])
def add_garage():
    """Handle add garage form submission."""
    try:
        actions.add_garage(get_client(), request.form.to_dict())
    except FleetError as e:
        report_error(e)
    else:
        flash("Garage added successfully!", "success")
    return redirect(url_for("garages"))


@app.route("/garages/<garage_id>", methods=["POST"])
def update_garage(garage_id: str):
    """Handle edit garage form submission."""
    values = request.form.to_dict()
    values["id"] = garage_id
    try:
        actions.update_garage(get_client(), values)
    except FleetError as e:
        report_error(e)
        return redirect(url_for("garages", edit=garage_id))
    flash("Garage updated successfully!", "success")
    return redirect(url_for("garages"))


@app.route("/garages/<garage_id>/delete", methods=["GET"])
def confirm_delete_garage(garage_id: str):
    """Confirmation page shown before a garage is deleted."""
    return render_template(
        "confirm_delete.html",
        prompt="Are you sure you want to delete this garage?",
        action=url_for("delete_garage", garage_id=garage_id),
        cancel=url_for("garages"),
    )


@app.route("/garages/<garage_id>/delete", methods=["POST"])
def delete_garage(garage_id: str):
    """Delete a garage; only sent when the form carries confirm=yes."""
    try:
        deleted = actions.confirm_delete(
            lambda prompt: request.form.get("confirm") == "yes",
            get_client().delete_garage,
            garage_id,
            "Are you sure you want to delete this garage?",
        )
    except FleetError as e:
        report_error(e)
    else:
        if deleted:
            flash("Garage deleted successfully!", "success")
    return redirect(url_for("garages"))


@app.route("/garages/<garage_id>/availability")
def garage_availability(garage_id: str):
    """Daily availability report for one garage."""
    start_date = request.args.get("start_date", "")
    end_date = request.args.get("end_date", "")
    client = get_client()

    garage = None
    entries = None
    try:
        garage = client.get_garage(garage_id)
        if start_date or end_date:
            entries = actions.daily_availability(client, garage_id, start_date, end_date)
            if not entries:
                flash(actions.NO_REPORT_DATA, "info")
    except FleetError as e:
        report_error(e)

    return render_template(
        "availability.html",
        garage_id=garage_id,
        garage=garage,
        entries=entries,
        start_date=start_date,
        end_date=end_date,
    )


# =============================================================================
# Maintenance
# =============================================================================


def render_maintenance(report=None, report_filter=None):
    """Render the maintenance page with the current filters applied."""
    filters = {
        "car_id": request.args.get("car_id", ""),
        "garage_id": request.args.get("garage_id", ""),
        "start_date": request.args.get("start_date", ""),
        "end_date": request.args.get("end_date", ""),
    }
    records, car_list, garage_list = [], [], []
    try:
        records, car_list, garage_list = actions.load_maintenance_view(get_client(), filters)
    except FleetError as e:
        report_error(e)

    editing = None
    edit_id = request.args.get("edit")
    if edit_id:
        editing = next((r for r in records if str(r.id) == edit_id), None)
        if editing is None:
            # Filtered out of the list; look it up directly
            try:
                editing = get_client().get_maintenance(edit_id)
            except FleetError as e:
                logger.info("Maintenance record %s not loaded for edit: %s", edit_id, e)
            if isinstance(editing, MaintenanceRecord):
                decorate_records([editing], car_list, garage_list)
            else:
                editing = None
                flash("No maintenance record selected for update.", "error")

    return render_template(
        "maintenance.html",
        records=records,
        cars=car_list,
        garages=garage_list,
        filters=filters,
        editing=editing,
        report=report,
        report_filter=report_filter or {"garage_id": "", "start_month": "", "end_month": ""},
    )


@app.route("/maintenance")
def maintenance():
    """Maintenance list with filters, forms and the monthly report form."""
    return render_maintenance()


@app.route("/maintenance", methods=["POST"])
def add_maintenance():
    """Handle add maintenance form submission, checking garage capacity."""
    client = get_client()
    values = request.form.to_dict()
    try:
        record_from_form(values)
        records, _, garage_list = actions.load_maintenance_view(client)
        actions.add_maintenance(client, values, garage_list, records)
    except FleetError as e:
        report_error(e)
    else:
        flash("Record added successfully!", "success")
    return redirect(url_for("maintenance"))


@app.route("/maintenance/<record_id>", methods=["POST"])
def update_maintenance(record_id: str):
    """Handle edit maintenance form submission."""
    values = request.form.to_dict()
    values["id"] = record_id
    try:
        actions.update_maintenance(get_client(), values)
    except FleetError as e:
        report_error(e)
        return redirect(url_for("maintenance", edit=record_id))
    flash("Maintenance record updated successfully!", "success")
    return redirect(url_for("maintenance"))


@app.route("/maintenance/<record_id>/delete", methods=["GET"])
def confirm_delete_maintenance(record_id: str):
    """Confirmation page shown before a maintenance record is deleted."""
    return render_template(
        "confirm_delete.html",
        prompt="Are you sure you want to delete this maintenance request?",
        action=url_for("delete_maintenance", record_id=record_id),
        cancel=url_for("maintenance"),
    )


@app.route("/maintenance/<record_id>/delete", methods=["POST"])
def delete_maintenance(record_id: str):
    """Delete a maintenance record; only sent when confirm=yes."""
    try:
        deleted = actions.confirm_delete(
            lambda prompt: request.form.get("confirm") == "yes",
            get_client().delete_maintenance,
            record_id,
            "Are you sure you want to delete this maintenance request?",
        )
    except FleetError as e:
        report_error(e)
    else:
        if deleted:
            flash("Maintenance request deleted successfully!", "success")
    return redirect(url_for("maintenance"))


@app.route("/maintenance/report")
def maintenance_report():
    """Monthly request report; needs garage, start month and end month."""
    report_filter = {
        "garage_id": request.args.get("report_garage_id", ""),
        "start_month": request.args.get("start_month", ""),
        "end_month": request.args.get("end_month", ""),
    }
    report = None
    try:
        report = actions.monthly_report(
            get_client(),
            report_filter["garage_id"],
            report_filter["start_month"],
            report_filter["end_month"],
        )
        if not report:
            flash(actions.NO_REPORT_DATA, "info")
    except FleetError as e:
        report_error(e)

    return render_maintenance(report=report, report_filter=report_filter)


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
