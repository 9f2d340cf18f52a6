from flask import Blueprint, jsonify

from ..exceptions import InvalidRequestError
from ..utils.decorators import admin_required
from .helpers import json_body, required, services

bp = Blueprint("staff", __name__, url_prefix="/admin")

COMMON_VEHICLE_FIELDS = ("kind", "model")


@bp.post("/vehicles")
@admin_required
def staff_add_vehicle():
    """Add a new vehicle; kind-specific attributes go in 'details'."""
    data = json_body()
    required(data, *COMMON_VEHICLE_FIELDS)
    details = data.get("details") or {}
    if not isinstance(details, dict):
        raise InvalidRequestError("Error: details must be a JSON object")

    v = services().vehicles.add_vehicle(data["kind"], data["model"], details)
    return jsonify(v.to_dict()), 201


@bp.post("/vehicles/<vid>/status")
@admin_required
def staff_change_status(vid):
    """Set availability directly: available / reserved / under_maintenance."""
    data = json_body()
    required(data, "status")
    v = services().vehicles.change_availability(vid, data["status"])
    return jsonify(v.to_dict())


@bp.post("/vehicles/<vid>/delete")
@admin_required
def staff_delete_vehicle(vid):
    """Delete a vehicle that has no active reservations."""
    services().vehicles.remove_vehicle(vid)
    return jsonify(message="Vehicle deleted", vehicle_id=vid)
