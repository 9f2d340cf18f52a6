"""
Amend / cancel / complete / invoice transitions, the 2-day amendment window
and the read-side queries.
"""

import time
from datetime import date
from decimal import Decimal

import pytest

from fleet_rental.exceptions import (
    AmendmentWindowExpiredError,
    InvalidRequestError,
    InvalidStateError,
    NotFoundError,
)
from fleet_rental.models.reservation import ranges_overlap
from fleet_rental.utils.constants import ReservationStatus, VehicleStatus

from conftest import FOREIGN_PASSPORT, LOCAL_NIC, run_in_thread


@pytest.fixture
def booking(fleet, customers, reservation_service, days_from_today):
    return reservation_service.create(LOCAL_NIC, "C-001", days_from_today(5), 3, 300)


# ---------- amendment window ----------
def test_amend_allowed_just_inside_window(booking, reservation_service, clock):
    clock.advance(days=2, hours=23)
    r = reservation_service.amend(booking.reservation_id, new_total_km=500)
    assert r.total_km == 500


def test_amend_rejected_after_window(booking, reservation_service, clock, days_from_today):
    clock.advance(days=3)
    with pytest.raises(AmendmentWindowExpiredError):
        reservation_service.amend(booking.reservation_id, new_start_date=days_from_today(6))
    assert booking.start_date.day == 6  # 2030-03-06, unchanged
    assert booking.total_km == 300


def test_cancel_rejected_after_window(booking, reservation_service, store, clock):
    clock.advance(days=3)
    with pytest.raises(AmendmentWindowExpiredError):
        reservation_service.cancel(booking.reservation_id)
    assert booking.status == ReservationStatus.ACTIVE
    assert store.vehicles.find_by_id("C-001").status == VehicleStatus.RESERVED


def test_complete_ignores_window(booking, reservation_service, clock):
    clock.advance(days=30)
    inv = reservation_service.complete(booking.reservation_id)
    assert inv.reservation_id == booking.reservation_id


# ---------- amend ----------
def test_amend_km_only_keeps_dates(booking, reservation_service, days_from_today):
    r = reservation_service.amend(booking.reservation_id, new_total_km=1200)
    assert r.total_km == 1200
    assert r.start_date == days_from_today(5)
    assert r.end_date == days_from_today(7)


def test_amend_without_changes_is_noop(booking, reservation_service):
    before = booking.to_dict()
    r = reservation_service.amend(booking.reservation_id)
    assert r.to_dict() == before


def test_amend_does_not_recheck_lead_time(booking, reservation_service, days_from_today):
    r = reservation_service.amend(booking.reservation_id, new_start_date=days_from_today(1))
    assert r.start_date == days_from_today(1)


def test_amend_rejects_bad_days(booking, reservation_service):
    with pytest.raises(InvalidRequestError):
        reservation_service.amend(booking.reservation_id, new_days=0)
    assert booking.rental_days == 3


def test_amend_cancelled_reservation_fails(booking, reservation_service):
    reservation_service.cancel(booking.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.amend(booking.reservation_id, new_total_km=10)


def test_amend_unknown_reservation(reservation_service):
    with pytest.raises(NotFoundError):
        reservation_service.amend("R-deadbeef", new_total_km=10)


# ---------- cancel ----------
def test_cancel_frees_vehicle(booking, reservation_service, store):
    r = reservation_service.cancel(booking.reservation_id)
    assert r.status == ReservationStatus.CANCELLED
    assert store.vehicles.find_by_id("C-001").status == VehicleStatus.AVAILABLE
    # the record is kept
    assert store.reservations.find_by_id(booking.reservation_id) is r


def test_cancel_twice_fails(booking, reservation_service):
    reservation_service.cancel(booking.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.cancel(booking.reservation_id)


def test_cancel_completed_fails(booking, reservation_service):
    reservation_service.complete(booking.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.cancel(booking.reservation_id)


# ---------- complete / invoice ----------
def test_complete_leaves_vehicle_reserved(booking, reservation_service, store):
    reservation_service.complete(booking.reservation_id)
    assert booking.status == ReservationStatus.COMPLETED
    assert store.vehicles.find_by_id("C-001").status == VehicleStatus.RESERVED


def test_complete_cancelled_fails(booking, reservation_service):
    reservation_service.cancel(booking.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.complete(booking.reservation_id)
    assert booking.status == ReservationStatus.CANCELLED


def test_complete_twice_fails(booking, reservation_service):
    reservation_service.complete(booking.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.complete(booking.reservation_id)


def test_invoice_recomputes_completed(booking, reservation_service):
    first = reservation_service.complete(booking.reservation_id)
    again = reservation_service.invoice(booking.reservation_id)
    assert again == first
    # 3 days compact, 300 km == allowance
    assert again.base_price == Decimal("15000")
    assert again.extra_km_charge == Decimal("0")
    assert again.discount == Decimal("0")
    assert again.tax == Decimal("1500.00")
    assert again.final_payable == Decimal("11500.00")


def test_invoice_of_active_reservation_fails(booking, reservation_service):
    with pytest.raises(InvalidStateError):
        reservation_service.invoice(booking.reservation_id)


# ---------- queries ----------
def test_get_and_not_found(booking, reservation_service):
    assert reservation_service.get(booking.reservation_id) is booking
    with pytest.raises(NotFoundError) as exc:
        reservation_service.get("R-00000000")
    assert exc.value.context["reservation_id"] == "R-00000000"


def test_list_all_ordered_by_start_then_id(fleet, customers, reservation_service, days_from_today):
    late = reservation_service.create(LOCAL_NIC, "C-001", days_from_today(9), 1, 0)
    early = reservation_service.create(FOREIGN_PASSPORT, "C-002", days_from_today(4), 1, 0)
    same = reservation_service.create(LOCAL_NIC, "C-003", days_from_today(9), 1, 0)
    assert [r.reservation_id for r in reservation_service.list_all()] == [
        early.reservation_id, late.reservation_id, same.reservation_id,
    ]


def test_list_by_start_date(fleet, customers, reservation_service, days_from_today):
    a = reservation_service.create(LOCAL_NIC, "C-001", days_from_today(4), 3, 0)
    reservation_service.create(FOREIGN_PASSPORT, "C-002", days_from_today(5), 3, 0)

    assert reservation_service.list_by_start_date(days_from_today(4)) == [a]
    assert reservation_service.list_by_start_date(days_from_today(4).isoformat()) == [a]
    # exact start date only, not "in progress on"
    assert reservation_service.list_by_start_date(days_from_today(6)) == []


def test_search_by_id_or_customer_name(fleet, customers, reservation_service, days_from_today):
    a = reservation_service.create(LOCAL_NIC, "C-001", days_from_today(4), 3, 0)
    b = reservation_service.create(FOREIGN_PASSPORT, "C-002", days_from_today(5), 3, 0)

    assert reservation_service.search("alice") == [a]
    assert reservation_service.search("WEBER") == [b]
    assert reservation_service.search(b.reservation_id.upper()) == [b]
    assert reservation_service.search("nobody") == []


# ---------- invariants over a sequence ----------
def test_invariants_hold_through_a_sequence(fleet, customers, reservation_service, store, clock,
                                            days_from_today):
    a = reservation_service.create(LOCAL_NIC, "C-001", days_from_today(4), 3, 100)
    b = reservation_service.create_by_category(FOREIGN_PASSPORT, "HYBRID", days_from_today(6), 2, 50)
    fleet.change_availability("C-001", VehicleStatus.AVAILABLE)
    c = reservation_service.create(FOREIGN_PASSPORT, "C-001", days_from_today(10), 2, 0)
    reservation_service.amend(a.reservation_id, new_days=5)
    reservation_service.cancel(b.reservation_id)
    reservation_service.complete(c.reservation_id)
    clock.advance(days=5)

    all_rs = store.reservations.find_all()
    ids = [r.reservation_id for r in all_rs]
    assert len(ids) == len(set(ids)) == 3
    for r in all_rs:
        assert r.status in (ReservationStatus.ACTIVE, ReservationStatus.COMPLETED, ReservationStatus.CANCELLED)
        assert r.end_date >= r.start_date
        assert isinstance(r.start_date, date)
    active = [r for r in all_rs if r.is_active]
    for i, x in enumerate(active):
        for y in active[i + 1:]:
            if x.vehicle_id == y.vehicle_id:
                assert not ranges_overlap(x.start_date, x.end_date, y.start_date, y.end_date)

    # a vehicle is reserved exactly while an active reservation holds it;
    # completion alone does not hand the car back
    for v in store.vehicles.find_all():
        mine = [r for r in all_rs if r.vehicle_id == v.vehicle_id]
        if any(r.is_active for r in mine):
            assert v.status == VehicleStatus.RESERVED, v.vehicle_id
        elif not any(r.status == ReservationStatus.COMPLETED for r in mine):
            assert v.status == VehicleStatus.AVAILABLE, v.vehicle_id
    assert store.vehicles.find_by_id("C-001").status == VehicleStatus.RESERVED
    assert store.vehicles.find_by_id("C-003").status == VehicleStatus.AVAILABLE

    # terminal states stay terminal
    with pytest.raises(InvalidStateError):
        reservation_service.complete(b.reservation_id)
    with pytest.raises(InvalidStateError):
        reservation_service.cancel(c.reservation_id)


# ---------- concurrent transitions ----------
def test_cancel_and_complete_race_ends_in_one_terminal_state(booking, reservation_service, store):
    with store.vehicle_lock("C-001"):
        t_cancel, cancelled = run_in_thread(reservation_service.cancel, booking.reservation_id)
        t_complete, completed = run_in_thread(reservation_service.complete, booking.reservation_id)
        time.sleep(0.05)
        # both calls wait on the vehicle lock before looking at the status
        assert booking.status == ReservationStatus.ACTIVE
    t_cancel.join(5)
    t_complete.join(5)
    assert not t_cancel.is_alive() and not t_complete.is_alive()

    assert ("result" in cancelled) != ("result" in completed)
    if "result" in completed:
        assert booking.status == ReservationStatus.COMPLETED
        assert isinstance(cancelled["error"], InvalidStateError)
        assert store.vehicles.find_by_id("C-001").status == VehicleStatus.RESERVED
    else:
        assert booking.status == ReservationStatus.CANCELLED
        assert isinstance(completed["error"], InvalidStateError)
        assert store.vehicles.find_by_id("C-001").status == VehicleStatus.AVAILABLE


def test_completed_reservation_is_never_cancelled_afterwards(booking, reservation_service, store):
    with store.vehicle_lock("C-001"):
        t_cancel, cancelled = run_in_thread(reservation_service.cancel, booking.reservation_id)
        time.sleep(0.05)
        # cancel is parked; complete the record directly as a competing writer would
        booking.status = ReservationStatus.COMPLETED
    t_cancel.join(5)

    assert isinstance(cancelled["error"], InvalidStateError)
    assert booking.status == ReservationStatus.COMPLETED
    assert store.vehicles.find_by_id("C-001").status == VehicleStatus.RESERVED


def test_amend_rechecks_status_under_lock(booking, reservation_service, store):
    with store.vehicle_lock("C-001"):
        t_amend, amended = run_in_thread(reservation_service.amend, booking.reservation_id, None, None, 999)
        time.sleep(0.05)
        booking.status = ReservationStatus.CANCELLED
    t_amend.join(5)

    assert isinstance(amended["error"], InvalidStateError)
    assert booking.total_km == 300
