from .admin_service import AdminAuth
from .booking_policy import BookingPolicy
from .customer_service import CustomerService
from .pricing_service import PricingService
from .reservation_service import ReservationService
from .vehicle_service import VehicleService

__all__ = [
    "AdminAuth",
    "BookingPolicy",
    "CustomerService",
    "PricingService",
    "ReservationService",
    "VehicleService",
]
