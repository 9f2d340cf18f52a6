from dataclasses import dataclass, fields
from typing import ClassVar

from .category import Category
from ..utils.constants import VehicleStatus, VehicleKind


@dataclass
class VehicleBase:
    """
    Base vehicle model. Identity and availability live here; each subclass
    pins its category and adds the attributes specific to that kind of car.
    """
    vehicle_id: str
    model: str
    status: str = VehicleStatus.AVAILABLE

    category: ClassVar[Category]
    kind: ClassVar[str]

    def is_available(self) -> bool:
        return self.status == VehicleStatus.AVAILABLE

    def mark_reserved(self) -> None:
        self.status = VehicleStatus.RESERVED

    def mark_available(self) -> None:
        self.status = VehicleStatus.AVAILABLE

    @classmethod
    def detail_fields(cls) -> dict:
        """Kind-specific attribute names mapped to their declared types."""
        base = {f.name for f in fields(VehicleBase)}
        return {f.name: f.type for f in fields(cls) if f.name not in base}

    def details(self) -> dict:
        """Category-specific attributes; subclasses override."""
        return {}

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "model": self.model,
            "kind": self.kind,
            "category": self.category.name,
            "category_name": self.category.display_name,
            "status": self.status,
            "details": self.details(),
        }


@dataclass
class CompactPetrolCar(VehicleBase):
    engine_capacity: float = 0.0  # litres
    transmission: str = "AUTO"  # AUTO | MANUAL

    category: ClassVar[Category] = Category.COMPACT_PETROL
    kind: ClassVar[str] = VehicleKind.COMPACT_PETROL

    def details(self) -> dict:
        return {"engine_capacity": self.engine_capacity, "transmission": self.transmission}


@dataclass
class HybridCar(VehicleBase):
    battery_capacity: float = 0.0  # kWh
    fuel_efficiency: float = 0.0  # km/l

    category: ClassVar[Category] = Category.HYBRID
    kind: ClassVar[str] = VehicleKind.HYBRID

    def details(self) -> dict:
        return {"battery_capacity": self.battery_capacity, "fuel_efficiency": self.fuel_efficiency}


@dataclass
class ElectricCar(VehicleBase):
    battery_capacity: float = 0.0  # kWh
    charging_time: float = 0.0  # hours

    category: ClassVar[Category] = Category.ELECTRIC
    kind: ClassVar[str] = VehicleKind.ELECTRIC

    def details(self) -> dict:
        return {"battery_capacity": self.battery_capacity, "charging_time": self.charging_time}


@dataclass
class LuxurySUV(VehicleBase):
    luxury_features: str = ""
    driver_included: bool = False

    category: ClassVar[Category] = Category.LUXURY_SUV
    kind: ClassVar[str] = VehicleKind.LUXURY_SUV

    def details(self) -> dict:
        return {"luxury_features": self.luxury_features, "driver_included": self.driver_included}


VEHICLE_KINDS: dict[str, type[VehicleBase]] = {
    cls.kind: cls for cls in (CompactPetrolCar, HybridCar, ElectricCar, LuxurySUV)
}
