import re
from dataclasses import dataclass

NATIONAL_ID_PATTERN = re.compile(r"^[0-9VvXx]{10,12}$")
MIN_PASSPORT_LENGTH = 6


@dataclass
class CustomerBase:
    """
    Base customer model. ``customer_id`` is the booking identity key:
    a national ID for local customers, a passport number for foreign ones.
    """
    customer_id: str
    name: str
    contact: str
    email: str

    def identity(self) -> str:
        return self.customer_id

    def has_valid_identity(self) -> bool:
        """Subclasses override this with their document-format rule."""
        return bool(self.customer_id)

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "name": self.name,
            "contact": self.contact,
            "email": self.email,
        }


class LocalCustomer(CustomerBase):
    """
    Local customers are identified by their national ID card number.
    """

    @property
    def national_id(self) -> str:
        return self.customer_id

    def has_valid_identity(self) -> bool:
        return bool(NATIONAL_ID_PATTERN.match(self.customer_id or ""))

    def to_dict(self) -> dict:
        return {**super().to_dict(), "type": "local"}


@dataclass
class ForeignCustomer(CustomerBase):
    """
    Foreign customers book with their passport number and declare a nationality.
    """
    nationality: str = ""

    @property
    def passport_number(self) -> str:
        return self.customer_id

    def has_valid_identity(self) -> bool:
        return len(self.customer_id or "") >= MIN_PASSPORT_LENGTH

    def to_dict(self) -> dict:
        return {**super().to_dict(), "type": "foreign", "nationality": self.nationality}
