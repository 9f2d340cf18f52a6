"""
Pricing engine.

Pure functions from a reservation (dates, km estimate, deposit, category)
to money. Everything is ``Decimal`` so recomputing an invoice always gives
back the same figures.
"""

from decimal import Decimal

from ..models.category import RateTable
from ..models.reservation import InvoiceSnapshot, Reservation
from ..utils.constants import CENTS, LONG_RENTAL_DAYS, LONG_RENTAL_DISCOUNT

ZERO = Decimal("0")


class PricingService:
    """Rental charges derived from ``reservation.category``'s rate table."""

    @staticmethod
    def _rates(r: Reservation) -> RateTable:
        return r.category.rates

    @staticmethod
    def rental_days(r: Reservation) -> int:
        return r.rental_days

    @staticmethod
    def base_price(r: Reservation) -> Decimal:
        return PricingService._rates(r).daily_rate * r.rental_days

    @staticmethod
    def free_km_allowance(r: Reservation) -> int:
        return PricingService._rates(r).free_km_per_day * r.rental_days

    @staticmethod
    def extra_km_charge(r: Reservation) -> Decimal:
        extra_km = max(0, r.total_km - PricingService.free_km_allowance(r))
        return PricingService._rates(r).extra_km_rate * extra_km

    @staticmethod
    def discount(r: Reservation) -> Decimal:
        """10% off the base price for rentals of 7 days or more."""
        if r.rental_days >= LONG_RENTAL_DAYS:
            return PricingService.base_price(r) * LONG_RENTAL_DISCOUNT
        return ZERO

    @staticmethod
    def tax(r: Reservation) -> Decimal:
        taxable = PricingService.base_price(r) - PricingService.discount(r) + PricingService.extra_km_charge(r)
        return taxable * PricingService._rates(r).tax_rate

    @staticmethod
    def subtotal(r: Reservation) -> Decimal:
        return (
            PricingService.base_price(r)
            - PricingService.discount(r)
            + PricingService.extra_km_charge(r)
            + PricingService.tax(r)
        )

    @staticmethod
    def final_payable(r: Reservation) -> Decimal:
        """Subtotal less the deposit already paid, never below zero."""
        return max(ZERO, PricingService.subtotal(r) - r.deposit)

    @staticmethod
    def invoice(r: Reservation) -> InvoiceSnapshot:
        def cents(x: Decimal) -> Decimal:
            return Decimal(x).quantize(CENTS)

        return InvoiceSnapshot(
            reservation_id=r.reservation_id,
            rental_days=r.rental_days,
            free_km_allowance=PricingService.free_km_allowance(r),
            base_price=cents(PricingService.base_price(r)),
            extra_km_charge=cents(PricingService.extra_km_charge(r)),
            discount=cents(PricingService.discount(r)),
            tax=cents(PricingService.tax(r)),
            deposit_deducted=cents(r.deposit),
            final_payable=cents(PricingService.final_payable(r)),
        )
