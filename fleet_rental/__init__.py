import os
from types import SimpleNamespace

import click
from flask import Flask, jsonify

from .controllers.auth import bp as auth_bp
from .controllers.customers import bp as customers_bp
from .controllers.reservations import bp as reservations_bp
from .controllers.staff import bp as admin_bp
from .controllers.vehicles import bp as vehicles_bp
from .controllers.views import bp as views_bp
from .exceptions import RentalError
from .models.store import Store
from .seeds import seed_demo_data
from .services import AdminAuth, BookingPolicy, CustomerService, ReservationService, VehicleService
from .utils.clock import SystemClock
from .utils.constants import DEFAULT_TIMEZONE
from .utils.ids import IdGenerator


def _load_config(app, test_config):
    app.config.from_mapping(
        SECRET_KEY="dev-secret-change-me",
        TIMEZONE=DEFAULT_TIMEZONE,
        SEED_DEMO_DATA=os.getenv("APP_ENV") != "test",
        LOG_LEVEL="INFO",
    )
    for key, env in (("SECRET_KEY", "SECRET_KEY"), ("TIMEZONE", "FLEET_TIMEZONE"), ("LOG_LEVEL", "LOG_LEVEL")):
        if os.getenv(env):
            app.config[key] = os.environ[env]
    if test_config:
        app.config.update(test_config)


def create_app(test_config=None, *, store=None, clock=None, ids=None):
    app = Flask(__name__)
    _load_config(app, test_config)

    # app.logger is the "fleet_rental" logger, parent of every module logger in the package
    app.logger.setLevel(app.config["LOG_LEVEL"])

    store = store or Store.instance()  # shared in-memory store unless one is injected
    clock = clock or SystemClock(app.config["TIMEZONE"])
    ids = ids or IdGenerator()

    fleet = SimpleNamespace(
        store=store,
        clock=clock,
        admin_auth=AdminAuth(),
        vehicles=VehicleService(store, ids),
        customers=CustomerService(store),
        reservations=ReservationService(store, clock, ids, BookingPolicy(clock)),
    )
    app.extensions["fleet_rental"] = fleet

    app.register_blueprint(views_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(reservations_bp)

    @app.errorhandler(RentalError)
    def handle_rental_error(err):
        return jsonify(err.to_dict()), err.http_status

    @app.cli.command("seed")
    def seed_command():
        """Load the demo fleet and the default admin account."""
        created = seed_demo_data(fleet.vehicles, fleet.admin_auth)
        click.echo(f"Seeded {created} demo vehicle(s)")

    if app.config["SEED_DEMO_DATA"]:
        seed_demo_data(fleet.vehicles, fleet.admin_auth)

    return app
