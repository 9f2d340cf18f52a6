import sys, pathlib
import threading
from datetime import datetime, timedelta
from itertools import count

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest
import pytz

from fleet_rental import create_app
from fleet_rental.exceptions import RentalError
from fleet_rental.models.store import Store
from fleet_rental.services import CustomerService, ReservationService, VehicleService
from fleet_rental.utils.clock import FixedClock
from fleet_rental.utils.ids import IdGenerator

NOW = pytz.utc.localize(datetime(2030, 3, 1, 9, 0, 0))
LOCAL_NIC = "200012345678"
FOREIGN_PASSPORT = "N1234567"


def run_in_thread(fn, *args):
    """
    Start ``fn(*args)`` on a thread. The returned dict gets "result" or,
    for a rejected call, "error" once the thread is joined.
    """
    outcome = {}

    def target():
        try:
            outcome["result"] = fn(*args)
        except RentalError as e:
            outcome["error"] = e

    t = threading.Thread(target=target, daemon=True)
    t.start()
    return t, outcome


@pytest.fixture
def store():
    """A fresh in-memory store per test, never the shared singleton."""
    return Store()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def ids():
    """Reservation ids R-00000001, R-00000002, ... in creation order."""
    n = count(1)
    return IdGenerator(token_source=lambda: f"{next(n):08x}")


@pytest.fixture
def days_from_today(clock):
    def _at(n):
        return clock.today() + timedelta(days=n)

    return _at


@pytest.fixture
def vehicle_service(store, ids):
    return VehicleService(store, ids)


@pytest.fixture
def customer_service(store):
    return CustomerService(store)


@pytest.fixture
def reservation_service(store, clock, ids):
    return ReservationService(store, clock, ids)


@pytest.fixture
def fleet(vehicle_service):
    """
    C-001 compact, C-002 compact, C-003 hybrid, C-004 electric.
    No luxury SUVs, so that category is always sold out.
    """
    vehicle_service.add_vehicle("compact_petrol", "Toyota Corolla", engine_capacity=1.5, transmission="AUTO")
    vehicle_service.add_vehicle("compact_petrol", "Suzuki Swift", engine_capacity=1.2, transmission="MANUAL")
    vehicle_service.add_vehicle("hybrid", "Toyota Aqua", battery_capacity=6.5, fuel_efficiency=25)
    vehicle_service.add_vehicle("electric", "Nissan Leaf", battery_capacity=40, charging_time=7.0)
    return vehicle_service


@pytest.fixture
def customers(customer_service):
    customer_service.register_local(LOCAL_NIC, "Alice Perera", "0771234567", "alice@example.com")
    customer_service.register_foreign(FOREIGN_PASSPORT, "German", "Jonas Weber", "+49301234567", "jonas@example.com")
    return customer_service


@pytest.fixture
def app(store, clock, ids):
    app = create_app(
        {"TESTING": True, "SECRET_KEY": "test", "SEED_DEMO_DATA": False},
        store=store, clock=clock, ids=ids,
    )
    app.extensions["fleet_rental"].admin_auth.add_admin("admin", "Admin123")
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
