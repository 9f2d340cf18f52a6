from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from .category import Category
from ..utils.constants import ReservationStatus


def end_for(start: date, days: int) -> date:
    """Inclusive end date of a rental starting on ``start`` and lasting ``days`` days."""
    return start + timedelta(days=days - 1)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between inclusive ranges [a_start, a_end] and [b_start, b_end].
    Both ends are booked days: 2030-01-10 -> 2030-01-15 and 2030-01-15 -> 2030-01-18 clash.
    """
    return not (a_end < b_start or a_start > b_end)


@dataclass
class Reservation:
    """
    A booking of one vehicle by one customer over an inclusive date range.
    Customer, vehicle and category never change after creation; amendments
    only move the dates or the km estimate.
    """
    reservation_id: str
    created_at: datetime
    start_date: date
    end_date: date
    total_km: int
    deposit: Decimal
    customer_id: str
    vehicle_id: str
    category: Category
    status: str = ReservationStatus.ACTIVE

    @property
    def rental_days(self) -> int:
        return max(1, (self.end_date - self.start_date).days + 1)

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def overlaps(self, start: date, end: date) -> bool:
        return ranges_overlap(self.start_date, self.end_date, start, end)

    def to_dict(self) -> dict:
        return {
            "reservation_id": self.reservation_id,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.rental_days,
            "total_km": self.total_km,
            "deposit": str(self.deposit),
            "status": self.status,
            "customer_id": self.customer_id,
            "vehicle_id": self.vehicle_id,
            "category": self.category.name,
        }


@dataclass(frozen=True)
class InvoiceSnapshot:
    """Charges for a completed reservation. Equal inputs always give an equal snapshot."""
    reservation_id: str
    rental_days: int
    free_km_allowance: int
    base_price: Decimal
    extra_km_charge: Decimal
    discount: Decimal
    tax: Decimal
    deposit_deducted: Decimal
    final_payable: Decimal

    def to_dict(self) -> dict:
        return {
            "reservation_id": self.reservation_id,
            "rental_days": self.rental_days,
            "free_km_allowance": self.free_km_allowance,
            "base_price": str(self.base_price),
            "extra_km_charge": str(self.extra_km_charge),
            "discount": str(self.discount),
            "tax": str(self.tax),
            "deposit_deducted": str(self.deposit_deducted),
            "final_payable": str(self.final_payable),
        }
