from flask import Blueprint, current_app, jsonify, session

from .helpers import json_body, services

bp = Blueprint("auth", __name__, url_prefix="/admin")


@bp.post("/login")
def login_submit():
    data = json_body()
    admin_id = (data.get("admin_id") or "").strip()
    password = data.get("password") or ""

    if not admin_id or not password:
        return jsonify(error="invalid_request", message="Admin id and password are required."), 400

    if not services().admin_auth.authenticate(admin_id, password):
        current_app.logger.info("Failed admin login for '%s'", admin_id)
        return jsonify(error="invalid_credentials", message="Invalid credentials"), 401

    session.clear()
    session["admin_id"] = admin_id
    return jsonify(admin_id=admin_id, message="Logged in")


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify(message="Logged out")
