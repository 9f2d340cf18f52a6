"""Reservation lifecycle: create, amend, cancel, complete and the read-side queries."""

from __future__ import annotations

import logging
import threading
from datetime import date
from decimal import Decimal
from typing import Optional

from ..exceptions import (
    InvalidStateError,
    NoAvailableVehicleError,
    NotFoundError,
    ScheduleConflictError,
)
from ..models.customer import CustomerBase
from ..models.reservation import InvoiceSnapshot, Reservation, end_for
from ..models.store import Store
from ..models.vehicle import VehicleBase
from ..utils.clock import SystemClock
from ..utils.constants import DEPOSIT, ReservationStatus
from ..utils.ids import IdGenerator
from .booking_policy import BookingPolicy
from .common import _lc, _store, as_date, as_int, parse_category
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


class ReservationService:
    """
    Orchestrates the reservation state machine:
      active -> completed, active -> cancelled (both terminal).

    Every operation validates and checks the policy gates before its first
    write, so a rejected call leaves the stores untouched. Every status check
    and the writes that follow it run under the vehicle's lock from the
    store, so two calls on the same car or reservation never interleave.
    """

    def __init__(
            self,
            store: Optional[Store] = None,
            clock=None,
            ids: Optional[IdGenerator] = None,
            policy: Optional[BookingPolicy] = None,
            deposit: Decimal = DEPOSIT,
    ):
        self.store = store or _store()
        self.clock = clock or SystemClock()
        self.ids = ids or IdGenerator()
        self.policy = policy or BookingPolicy(self.clock)
        self.deposit = deposit

    # --------------- lookups ---------------
    def _vehicle_lock(self, vehicle_id: str) -> threading.Lock:
        return self.store.vehicle_lock(vehicle_id)

    def _require_customer(self, customer_id: str) -> CustomerBase:
        c = self.store.customers.find_by_id(customer_id)
        if c is None:
            raise NotFoundError(f"Error: customer '{customer_id}' not found", customer_id=customer_id)
        return c

    def _require_vehicle(self, vehicle_id: str) -> VehicleBase:
        v = self.store.vehicles.find_by_id(vehicle_id)
        if v is None:
            raise NotFoundError(f"Error: vehicle '{vehicle_id}' not found", vehicle_id=vehicle_id)
        return v

    def _require_reservation(self, reservation_id: str) -> Reservation:
        r = self.store.reservations.find_by_id(reservation_id)
        if r is None:
            raise NotFoundError(
                f"Error: reservation '{reservation_id}' not found", reservation_id=reservation_id
            )
        return r

    def _active_for_vehicle(self, vehicle_id: str, exclude_id: Optional[str] = None) -> list[Reservation]:
        return [
            r for r in self.store.reservations.find_all()
            if r.vehicle_id == vehicle_id and r.is_active and r.reservation_id != exclude_id
        ]

    def _ensure_no_conflict(self, vehicle_id: str, start: date, end: date,
                            exclude_id: Optional[str] = None) -> None:
        for other in self._active_for_vehicle(vehicle_id, exclude_id):
            if other.overlaps(start, end):
                logger.info(
                    "Schedule conflict on %s: %s..%s overlaps %s (%s..%s)",
                    vehicle_id, start, end, other.reservation_id, other.start_date, other.end_date,
                )
                raise ScheduleConflictError(
                    f"Error: vehicle {vehicle_id} is already booked from "
                    f"{other.start_date.isoformat()} to {other.end_date.isoformat()}",
                    vehicle_id=vehicle_id,
                    conflicting_reservation_id=other.reservation_id,
                    start_date=start.isoformat(),
                    end_date=end.isoformat(),
                )

    def _new_reservation_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            rid = self.ids.reservation_id()
            if self.store.reservations.find_by_id(rid) is None:
                return rid
        raise RuntimeError("could not allocate a unique reservation id")

    # --------------- commands ---------------
    def create(self, customer_id: str, vehicle_id: str, start_date, days, total_km) -> Reservation:
        """
        Book a specific vehicle for ``days`` days from ``start_date``.
        The vehicle must be available and the start at least the lead time away.
        """
        start = as_date(start_date, "start_date")
        days = as_int(days, "days", minimum=1)
        total_km = as_int(total_km, "total_km", minimum=0)

        customer = self._require_customer(customer_id)
        vehicle_id = self._require_vehicle(vehicle_id).vehicle_id
        end = end_for(start, days)

        with self._vehicle_lock(vehicle_id):
            # re-read: the vehicle may have been removed or changed while we waited
            vehicle = self._require_vehicle(vehicle_id)
            self.policy.ensure_can_create(vehicle, start)
            self._ensure_no_conflict(vehicle.vehicle_id, start, end)

            reservation = Reservation(
                reservation_id=self._new_reservation_id(),
                created_at=self.clock.now(),
                start_date=start,
                end_date=end,
                total_km=total_km,
                deposit=self.deposit,
                customer_id=customer.identity(),
                vehicle_id=vehicle.vehicle_id,
                category=vehicle.category,
                status=ReservationStatus.ACTIVE,
            )
            vehicle.mark_reserved()
            self.store.vehicles.save(vehicle)
            self.store.reservations.save(reservation)

        logger.info(
            "Created reservation %s: vehicle %s for %s, %s..%s",
            reservation.reservation_id, vehicle.vehicle_id, customer.identity(), start, end,
        )
        return reservation

    def create_by_category(self, customer_id: str, category, start_date, days, total_km) -> Reservation:
        """Book the available vehicle of ``category`` with the lowest vehicle id."""
        category = parse_category(category)
        candidates = self.store.vehicles.find_available_by_category(category)
        if not candidates:
            raise NoAvailableVehicleError(
                f"Error: no available vehicle in {category.display_name}", category=category.name
            )
        return self.create(customer_id, candidates[0].vehicle_id, start_date, days, total_km)

    def _ensure_active(self, r: Reservation, action: str) -> None:
        if not r.is_active:
            raise InvalidStateError(
                f"Error: cannot {action} reservation {r.reservation_id}, it is {r.status}",
                reservation_id=r.reservation_id, status=r.status,
            )

    def amend(self, reservation_id: str, new_start_date=None, new_days=None, new_total_km=None) -> Reservation:
        """
        Move the dates and/or replace the km estimate of an active reservation.
        Any change to the date range is re-checked for overlap against the
        vehicle's other active reservations. Passing nothing is a no-op.
        """
        r = self._require_reservation(reservation_id)

        with self._vehicle_lock(r.vehicle_id):
            self._ensure_active(r, "amend")
            self.policy.ensure_can_amend_or_cancel(r)

            if new_start_date is None and new_days is None and new_total_km is None:
                return r

            start = as_date(new_start_date, "start_date") if new_start_date is not None else r.start_date
            days = as_int(new_days, "days", minimum=1) if new_days is not None else r.rental_days
            km = as_int(new_total_km, "total_km", minimum=0) if new_total_km is not None else None

            if new_start_date is not None or new_days is not None:
                end = end_for(start, days)
                self._ensure_no_conflict(r.vehicle_id, start, end, exclude_id=r.reservation_id)
                r.start_date, r.end_date = start, end
            if km is not None:
                r.total_km = km
            self.store.reservations.save(r)

        logger.info(
            "Amended reservation %s: %s..%s, %d km", r.reservation_id, r.start_date, r.end_date, r.total_km
        )
        return r

    def cancel(self, reservation_id: str) -> Reservation:
        """
        Cancel an active reservation inside the amendment window. The vehicle
        goes back to available unless another active reservation still holds it.
        """
        r = self._require_reservation(reservation_id)

        with self._vehicle_lock(r.vehicle_id):
            self._ensure_active(r, "cancel")
            self.policy.ensure_can_amend_or_cancel(r)

            r.status = ReservationStatus.CANCELLED
            vehicle = self.store.vehicles.find_by_id(r.vehicle_id)
            if vehicle is not None:
                others = self._active_for_vehicle(r.vehicle_id, exclude_id=r.reservation_id)
                if others:
                    logger.warning(
                        "Vehicle %s kept reserved after cancelling %s: %d other active reservation(s)",
                        r.vehicle_id, r.reservation_id, len(others),
                    )
                else:
                    vehicle.mark_available()
                    self.store.vehicles.save(vehicle)
            self.store.reservations.save(r)

        logger.info("Cancelled reservation %s", r.reservation_id)
        return r

    def complete(self, reservation_id: str) -> InvoiceSnapshot:
        """
        Close an active reservation and price it. The vehicle's availability
        is left as it is; returning the car to the pool happens elsewhere.
        """
        r = self._require_reservation(reservation_id)

        with self._vehicle_lock(r.vehicle_id):
            self._ensure_active(r, "complete")
            r.status = ReservationStatus.COMPLETED
            self.store.reservations.save(r)
            invoice = PricingService.invoice(r)

        logger.info("Completed reservation %s, payable %s", r.reservation_id, invoice.final_payable)
        return invoice

    def invoice(self, reservation_id: str) -> InvoiceSnapshot:
        """Recompute the invoice of a completed reservation."""
        r = self._require_reservation(reservation_id)
        if r.status != ReservationStatus.COMPLETED:
            raise InvalidStateError(
                f"Error: reservation {r.reservation_id} is {r.status}, not completed",
                reservation_id=r.reservation_id, status=r.status,
            )
        return PricingService.invoice(r)

    # --------------- queries ---------------
    def get(self, reservation_id: str) -> Reservation:
        return self._require_reservation(reservation_id)

    def list_all(self) -> list[Reservation]:
        return sorted(self.store.reservations.find_all(), key=lambda r: (r.start_date, r.reservation_id))

    def list_by_start_date(self, day) -> list[Reservation]:
        day = as_date(day, "date")
        return sorted(self.store.reservations.find_by_exact_date(day), key=lambda r: r.reservation_id)

    def search(self, query: str) -> list[Reservation]:
        """Case-insensitive substring match on reservation id or customer name."""
        q = _lc(query).strip()
        out = []
        for r in self.list_all():
            customer = self.store.customers.find_by_id(r.customer_id)
            name = customer.name if customer else ""
            if q in _lc(r.reservation_id) or q in _lc(name):
                out.append(r)
        return out
