"""Request/response helpers shared by the blueprints."""
from flask import current_app, request

from ..exceptions import InvalidRequestError
from ..models.reservation import InvoiceSnapshot, Reservation
from ..utils.filters import fmt_iso_local, fmt_money

MONEY_FIELDS = ("base_price", "extra_km_charge", "discount", "tax", "deposit_deducted", "final_payable")


def services():
    """The service bundle built by create_app()."""
    return current_app.extensions["fleet_rental"]


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequestError("Error: request body must be a JSON object")
    return data


def required(data: dict, *fields: str) -> None:
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise InvalidRequestError("Error: missing " + ", ".join(missing), missing=",".join(missing))


def reservation_json(r: Reservation) -> dict:
    out = r.to_dict()
    out["created_at"] = fmt_iso_local(r.created_at, current_app.config["TIMEZONE"])
    customer = services().store.customers.find_by_id(r.customer_id)
    out["customer_name"] = customer.name if customer else None
    return out


def invoice_json(inv: InvoiceSnapshot) -> dict:
    out = inv.to_dict()
    out["display"] = {k: fmt_money(getattr(inv, k)) for k in MONEY_FIELDS}
    return out
