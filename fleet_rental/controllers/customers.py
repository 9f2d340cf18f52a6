from flask import Blueprint, jsonify, request

from ..exceptions import InvalidRequestError
from .helpers import json_body, required, services

bp = Blueprint("customers", __name__, url_prefix="/customers")


@bp.post("")
def register_customer():
    """
    Register a customer.
    - type 'local':   national_id, name, contact, email
    - type 'foreign': passport_number, nationality, name, contact, email
    """
    data = json_body()
    ctype = (data.get("type") or "local").strip().lower()
    svc = services().customers

    if ctype == "local":
        required(data, "national_id", "name")
        c = svc.register_local(data["national_id"], data["name"], data.get("contact"), data.get("email"))
    elif ctype == "foreign":
        required(data, "passport_number", "nationality", "name")
        c = svc.register_foreign(
            data["passport_number"], data["nationality"], data["name"], data.get("contact"), data.get("email")
        )
    else:
        raise InvalidRequestError("Error: type must be 'local' or 'foreign'", type=ctype)

    return jsonify(c.to_dict()), 201


@bp.get("")
def search_customers():
    rows = services().customers.search_by_name(request.args.get("name") or "")
    return jsonify([c.to_dict() for c in rows])


@bp.get("/<cid>")
def customer_detail(cid):
    return jsonify(services().customers.get_customer(cid).to_dict())
