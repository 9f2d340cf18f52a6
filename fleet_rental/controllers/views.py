from flask import Blueprint, current_app, jsonify

from .helpers import services

bp = Blueprint("views", __name__)


@bp.get("/")
def home():
    """Service banner with record counts."""
    return jsonify(
        service="fleet_rental",
        timezone=current_app.config["TIMEZONE"],
        **services().store.counts(),
    )
