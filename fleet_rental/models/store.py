import logging
import threading
from datetime import date

from .category import Category
from .customer import CustomerBase
from .reservation import Reservation
from .vehicle import VehicleBase
from ..utils.constants import VehicleStatus

logger = logging.getLogger(__name__)


class VehicleStore:
    """In-memory fleet keyed by vehicle_id."""

    def __init__(self):
        self.vehicles: dict[str, VehicleBase] = {}
        self._rw = threading.RLock()

    def save(self, vehicle: VehicleBase) -> None:
        with self._rw:
            self.vehicles[vehicle.vehicle_id] = vehicle

    def insert(self, build) -> VehicleBase:
        """Store ``build(existing_ids)`` atomically, so two adds never share an id."""
        with self._rw:
            vehicle = build(list(self.vehicles))
            self.vehicles[vehicle.vehicle_id] = vehicle
            return vehicle

    def find_by_id(self, vehicle_id: str) -> VehicleBase | None:
        return self.vehicles.get(str(vehicle_id))

    def find_all(self) -> list[VehicleBase]:
        with self._rw:
            return sorted(self.vehicles.values(), key=lambda v: v.vehicle_id)

    def find_available_by_category(self, category: Category) -> list[VehicleBase]:
        """Available vehicles of one category, lowest vehicle_id first."""
        return [
            v for v in self.find_all()
            if v.category is category and v.status == VehicleStatus.AVAILABLE
        ]

    def delete(self, vehicle_id: str) -> bool:
        with self._rw:
            if vehicle_id in self.vehicles:
                del self.vehicles[vehicle_id]
                return True
            return False


class ReservationStore:
    """In-memory reservations keyed by reservation_id. Records are never deleted."""

    def __init__(self):
        self.reservations: dict[str, Reservation] = {}
        self._rw = threading.RLock()

    def save(self, reservation: Reservation) -> None:
        with self._rw:
            self.reservations[reservation.reservation_id] = reservation

    def find_by_id(self, reservation_id: str) -> Reservation | None:
        return self.reservations.get(str(reservation_id))

    def find_all(self) -> list[Reservation]:
        with self._rw:
            return list(self.reservations.values())

    def find_by_exact_date(self, day: date) -> list[Reservation]:
        """Reservations whose start_date is exactly ``day``."""
        return [r for r in self.find_all() if r.start_date == day]


class CustomerStore:
    """In-memory customers keyed by their identity string."""

    def __init__(self):
        self.customers: dict[str, CustomerBase] = {}
        self._rw = threading.RLock()

    def save(self, customer: CustomerBase) -> None:
        with self._rw:
            self.customers[customer.identity()] = customer

    def find_by_id(self, customer_id: str) -> CustomerBase | None:
        return self.customers.get(str(customer_id))

    def find_all(self) -> list[CustomerBase]:
        with self._rw:
            return list(self.customers.values())

    def find_by_name_contains(self, fragment: str) -> list[CustomerBase]:
        q = (fragment or "").lower()
        return [c for c in self.find_all() if c.name and q in c.name.lower()]


class Store:
    """Bundle of the three collaborator stores shared by the services."""

    _inst = None
    _inst_lock = threading.Lock()

    def __init__(self):
        self.vehicles = VehicleStore()
        self.reservations = ReservationStore()
        self.customers = CustomerStore()
        self._vehicle_locks: dict[str, threading.Lock] = {}
        self._vehicle_locks_guard = threading.Lock()

    # ---------- Singleton ----------
    @classmethod
    def instance(cls):
        """Return the process-wide Store used when none is injected."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store()
                logger.debug("Created shared in-memory store")
        return cls._inst

    def vehicle_lock(self, vehicle_id: str) -> threading.Lock:
        """
        The write lock for one vehicle. Every service that reads a vehicle's
        reservations and then writes the vehicle or its reservations holds it.
        """
        with self._vehicle_locks_guard:
            return self._vehicle_locks.setdefault(str(vehicle_id), threading.Lock())

    def counts(self) -> dict:
        return {
            "vehicles": len(self.vehicles.vehicles),
            "customers": len(self.customers.customers),
            "reservations": len(self.reservations.reservations),
        }
