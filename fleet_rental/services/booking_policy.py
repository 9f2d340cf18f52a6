import logging
from datetime import date

from ..exceptions import (
    AmendmentWindowExpiredError,
    LeadTimeViolationError,
    VehicleUnavailableError,
)
from ..models.reservation import Reservation
from ..models.vehicle import VehicleBase
from ..utils.constants import AMENDMENT_WINDOW_DAYS, LEAD_TIME_DAYS

logger = logging.getLogger(__name__)


class BookingPolicy:
    """
    Gatekeeper for creation and amendment. Both checks are read-only; the
    caller runs the relevant gate and only then mutates anything.
    """

    def __init__(self, clock, lead_time_days: int = LEAD_TIME_DAYS,
                 amendment_window_days: int = AMENDMENT_WINDOW_DAYS):
        self.clock = clock
        self.lead_time_days = lead_time_days
        self.amendment_window_days = amendment_window_days

    def ensure_can_create(self, vehicle: VehicleBase, start_date: date) -> None:
        if not vehicle.is_available():
            logger.info("Rejected booking: vehicle %s is %s", vehicle.vehicle_id, vehicle.status)
            raise VehicleUnavailableError(
                f"Error: vehicle {vehicle.vehicle_id} is {vehicle.status}",
                vehicle_id=vehicle.vehicle_id,
                status=vehicle.status,
            )

        today = self.clock.today()
        days_ahead = (start_date - today).days
        if days_ahead < self.lead_time_days:
            logger.info("Rejected booking: start %s is %d day(s) from %s", start_date, days_ahead, today)
            raise LeadTimeViolationError(
                f"Error: booking must be scheduled at least {self.lead_time_days} days in advance",
                start_date=start_date.isoformat(),
                today=today.isoformat(),
            )

    def ensure_can_amend_or_cancel(self, reservation: Reservation) -> None:
        """The window counts whole days since the reservation was made, not until it starts."""
        now = self.clock.now()
        days_since = (now - reservation.created_at).days
        if days_since > self.amendment_window_days:
            logger.info(
                "Rejected change to %s: created %s, %d day(s) ago",
                reservation.reservation_id, reservation.created_at.isoformat(), days_since,
            )
            raise AmendmentWindowExpiredError(
                f"Error: reservations can only be changed within {self.amendment_window_days} days of booking",
                reservation_id=reservation.reservation_id,
                created_at=reservation.created_at.isoformat(timespec="seconds"),
            )
