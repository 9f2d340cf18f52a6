# fleet_rental/utils/constants.py

"""
Global constants for statuses, booking rules and identity formats.
These constants are imported by both models and services.
"""

from decimal import Decimal

# Date format (used for reservation start/end)
DATE_FMT = "%Y-%m-%d"

# Default timezone for the system clock and timestamp rendering
DEFAULT_TIMEZONE = "Asia/Colombo"


class VehicleStatus:
    AVAILABLE = "available"
    RESERVED = "reserved"
    UNDER_MAINTENANCE = "under_maintenance"

    ALL = (AVAILABLE, RESERVED, UNDER_MAINTENANCE)


class ReservationStatus:
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VehicleKind:
    COMPACT_PETROL = "compact_petrol"
    HYBRID = "hybrid"
    ELECTRIC = "electric"
    LUXURY_SUV = "luxury_suv"


# --- Booking rules ---
DEPOSIT = Decimal("5000")
LEAD_TIME_DAYS = 3
AMENDMENT_WINDOW_DAYS = 2
LONG_RENTAL_DAYS = 7
LONG_RENTAL_DISCOUNT = Decimal("0.10")

# --- Identity formats ---
RESERVATION_ID_PREFIX = "R-"
RESERVATION_TOKEN_LENGTH = 8
VEHICLE_ID_PREFIX = "C-"
VEHICLE_ID_WIDTH = 3

# --- Money ---
CENTS = Decimal("0.01")
