from flask import Blueprint, jsonify, request

from .helpers import services

bp = Blueprint("vehicles", __name__, url_prefix="/vehicles")


@bp.get("")
def list_vehicles():
    """Vehicles list with optional ?status= and ?model= filters; empty params are ignored."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    rows = services().vehicles.list_vehicles(status=q.get("status") or None, model=q.get("model") or None)
    return jsonify([v.to_dict() for v in rows])


@bp.get("/available")
def list_available():
    """Available vehicles of one category, in booking order."""
    rows = services().vehicles.list_available_by_category(request.args.get("category"))
    return jsonify([v.to_dict() for v in rows])


@bp.get("/<vid>")
def vehicle_detail(vid):
    return jsonify(services().vehicles.get_vehicle(vid).to_dict())
