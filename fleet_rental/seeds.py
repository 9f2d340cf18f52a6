"""
Demo fleet and default admin account.

Loaded by create_app() unless seeding is disabled
(APP_ENV=test or SEED_DEMO_DATA=False).
"""

import logging

from .services.admin_service import AdminAuth
from .services.vehicle_service import VehicleService
from .utils.constants import VehicleKind

logger = logging.getLogger(__name__)

DEFAULT_ADMIN = ("admin", "admin123")

DEMO_VEHICLES = [
    (VehicleKind.HYBRID, "Toyota Aqua", {"battery_capacity": 6.5, "fuel_efficiency": 25}),
    (VehicleKind.ELECTRIC, "Nissan Leaf", {"battery_capacity": 40, "charging_time": 7.0}),
    (VehicleKind.LUXURY_SUV, "BMW X5", {"luxury_features": "Leather, Sunroof", "driver_included": True}),
    (VehicleKind.ELECTRIC, "BYD Atto 3", {"battery_capacity": 60, "charging_time": 8.0}),
    (VehicleKind.COMPACT_PETROL, "Toyota Corolla", {"engine_capacity": 1.5, "transmission": "AUTO"}),
]


def ensure_admin(admin_auth: AdminAuth, admin_id: str, password: str) -> None:
    """Create the admin account only if it does not exist yet (idempotent)."""
    if not admin_auth.has_admin(admin_id):
        admin_auth.add_admin(admin_id, password)


def seed_demo_data(vehicles: VehicleService, admin_auth: AdminAuth) -> int:
    """
    Add the demo vehicles when the fleet is empty and make sure the default
    admin exists. Returns the number of vehicles created.
    """
    ensure_admin(admin_auth, *DEFAULT_ADMIN)

    if vehicles.list_vehicles():
        return 0

    for kind, model, attrs in DEMO_VEHICLES:
        vehicles.add_vehicle(kind, model, **attrs)

    logger.info("Seeded %d demo vehicles", len(DEMO_VEHICLES))
    return len(DEMO_VEHICLES)
