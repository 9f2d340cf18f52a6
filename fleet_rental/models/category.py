from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class RateTable:
    """
    Per-category tariff. Defined once at import time and never mutated;
    every vehicle keeps the same category (and so the same table) for life.
    """
    display_name: str
    daily_rate: Decimal
    free_km_per_day: int
    extra_km_rate: Decimal  # charged per km beyond the free allowance
    tax_rate: Decimal


class Category(Enum):
    COMPACT_PETROL = RateTable("Compact Petrol", Decimal("5000"), 100, Decimal("50"), Decimal("0.10"))
    HYBRID = RateTable("Hybrid", Decimal("7500"), 150, Decimal("60"), Decimal("0.12"))
    ELECTRIC = RateTable("Electric", Decimal("10000"), 200, Decimal("40"), Decimal("0.08"))
    LUXURY_SUV = RateTable("Luxury SUV", Decimal("15000"), 250, Decimal("75"), Decimal("0.15"))

    @property
    def rates(self) -> RateTable:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.display_name

    @classmethod
    def parse(cls, value) -> "Category":
        """Accept a Category, its name ('HYBRID') or a loose spelling ('luxury suv')."""
        if isinstance(value, cls):
            return value
        key = (value or "").strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown category: {value!r}") from None
