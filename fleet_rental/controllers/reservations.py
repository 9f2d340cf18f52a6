from flask import Blueprint, jsonify, request

from .helpers import invoice_json, json_body, required, reservation_json, services

bp = Blueprint("reservations", __name__, url_prefix="/reservations")


@bp.post("")
def create_reservation():
    """
    Book by 'vehicle_id' or, failing that, by 'category'
    (the available vehicle with the lowest id is taken).
    """
    data = json_body()
    required(data, "customer_id", "start_date", "days", "total_km")
    svc = services().reservations
    args = (data["start_date"], data["days"], data["total_km"])

    if data.get("vehicle_id"):
        r = svc.create(data["customer_id"], data["vehicle_id"], *args)
    else:
        required(data, "category")
        r = svc.create_by_category(data["customer_id"], data["category"], *args)
    return jsonify(reservation_json(r)), 201


@bp.get("")
def list_reservations():
    """All reservations; ?date=YYYY-MM-DD for exact start date, ?q= for id/customer-name search."""
    svc = services().reservations
    day = (request.args.get("date") or "").strip()
    q = (request.args.get("q") or "").strip()
    if day:
        rows = svc.list_by_start_date(day)
    elif q:
        rows = svc.search(q)
    else:
        rows = svc.list_all()
    return jsonify([reservation_json(r) for r in rows])


@bp.get("/<rid>")
def reservation_detail(rid):
    return jsonify(reservation_json(services().reservations.get(rid)))


@bp.post("/<rid>/amend")
def amend_reservation(rid):
    data = json_body()
    r = services().reservations.amend(
        rid,
        new_start_date=data.get("start_date"),
        new_days=data.get("days"),
        new_total_km=data.get("total_km"),
    )
    return jsonify(reservation_json(r))


@bp.post("/<rid>/cancel")
def cancel_reservation(rid):
    r = services().reservations.cancel(rid)
    return jsonify(reservation_json(r))


@bp.post("/<rid>/complete")
def complete_reservation(rid):
    inv = services().reservations.complete(rid)
    return jsonify(invoice_json(inv))


@bp.get("/<rid>/invoice")
def invoice(rid):
    return jsonify(invoice_json(services().reservations.invoice(rid)))
