from __future__ import annotations

import logging
from typing import Optional

from ..exceptions import InvalidRequestError, NotFoundError, VehicleUnavailableError
from ..models.store import Store
from ..models.vehicle import VEHICLE_KINDS, VehicleBase
from ..utils.constants import VehicleStatus
from ..utils.ids import IdGenerator
from .common import _lc, _store, parse_category

logger = logging.getLogger(__name__)


def _check_details(cls: type[VehicleBase], attrs: dict) -> None:
    """
    Only the kind's own attributes may be set, with the declared type.
    Numbers must be non-negative; identity and status are never accepted here.
    """
    allowed = cls.detail_fields()
    for name, value in attrs.items():
        expected = allowed.get(name)
        if expected is None:
            raise InvalidRequestError(
                f"Error: '{name}' is not an attribute of {cls.kind} vehicles", kind=cls.kind, attribute=name
            )
        if expected is float:
            ok = isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
        else:
            ok = isinstance(value, expected)
        if not ok:
            raise InvalidRequestError(
                f"Error: {name} must be {'a non-negative number' if expected is float else expected.__name__}",
                kind=cls.kind, attribute=name, value=value,
            )


class VehicleService:
    """Fleet catalogue and admin actions: add, change availability, remove, list."""

    def __init__(self, store: Optional[Store] = None, ids: Optional[IdGenerator] = None):
        self.store = store or _store()
        self.ids = ids or IdGenerator()

    def get_vehicle(self, vehicle_id: str) -> VehicleBase:
        """Return a vehicle by ID or raise NotFoundError."""
        v = self.store.vehicles.find_by_id(vehicle_id)
        if v is None:
            raise NotFoundError(f"Error: vehicle with ID '{vehicle_id}' not found", vehicle_id=vehicle_id)
        return v

    def list_vehicles(self, status: Optional[str] = None, model: Optional[str] = None) -> list[VehicleBase]:
        """
        All vehicles ordered by ID.
        - status: exact availability state
        - model: case-insensitive partial match on the model name
        """
        res = self.store.vehicles.find_all()
        if status:
            res = [v for v in res if v.status == _lc(status).strip()]
        if model:
            kw = _lc(model).strip()
            res = [v for v in res if kw in _lc(v.model)]
        return res

    def list_available_by_category(self, category) -> list[VehicleBase]:
        return self.store.vehicles.find_available_by_category(parse_category(category))

    def add_vehicle(self, kind: str, model: str, details: Optional[dict] = None, **attrs) -> VehicleBase:
        """
        Register a new vehicle under the next free 'C-NNN' id.
        ``details`` and ``attrs`` are the kind-specific fields (e.g. battery_capacity for electric cars).
        """
        attrs = {**(details or {}), **attrs}
        cls = VEHICLE_KINDS.get(_lc(kind).strip())
        model = (model or "").strip()
        if cls is None or not model:
            raise InvalidRequestError(
                "Error: vehicle needs a model and a kind of " + "/".join(sorted(VEHICLE_KINDS)),
                kind=kind, model=model,
            )
        _check_details(cls, attrs)

        vehicle = self.store.vehicles.insert(
            lambda existing: cls(vehicle_id=self.ids.next_vehicle_id(existing), model=model, **attrs)
        )
        logger.info("Added vehicle %s (%s, %s)", vehicle.vehicle_id, vehicle.model, vehicle.category.name)
        return vehicle

    def change_availability(self, vehicle_id: str, status: str) -> VehicleBase:
        """Admin override of a vehicle's availability state."""
        status = _lc(status).strip()
        if status not in VehicleStatus.ALL:
            raise InvalidRequestError(
                "Error: status must be one of " + "/".join(VehicleStatus.ALL), status=status
            )
        v = self.get_vehicle(vehicle_id)
        with self.store.vehicle_lock(v.vehicle_id):
            v = self.get_vehicle(v.vehicle_id)
            v.status = status
            self.store.vehicles.save(v)
        logger.info("Vehicle %s set to %s", v.vehicle_id, status)
        return v

    def remove_vehicle(self, vehicle_id: str) -> None:
        """
        Delete a vehicle if and only if:
        - the vehicle exists,
        - there are no active reservations referencing it.
        """
        v = self.get_vehicle(vehicle_id)
        with self.store.vehicle_lock(v.vehicle_id):
            v = self.get_vehicle(v.vehicle_id)
            for r in self.store.reservations.find_all():
                if r.vehicle_id == v.vehicle_id and r.is_active:
                    raise VehicleUnavailableError(
                        f"Error: cannot remove {v.vehicle_id} while reservation {r.reservation_id} is active",
                        vehicle_id=v.vehicle_id, reservation_id=r.reservation_id,
                    )
            self.store.vehicles.delete(v.vehicle_id)
        logger.info("Removed vehicle %s", v.vehicle_id)
