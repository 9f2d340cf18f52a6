from __future__ import annotations

import logging
from typing import Optional

from ..exceptions import InvalidRequestError, NotFoundError
from ..models.customer import CustomerBase, ForeignCustomer, LocalCustomer
from ..models.store import Store
from .common import _store

logger = logging.getLogger(__name__)


class CustomerService:
    """Customer registration, lookup and name search."""

    def __init__(self, store: Optional[Store] = None):
        self.store = store or _store()

    def _register(self, customer: CustomerBase, document: str) -> CustomerBase:
        if not customer.name.strip():
            raise InvalidRequestError("Error: customer name is required")
        if not customer.has_valid_identity():
            raise InvalidRequestError(f"Error: invalid {document}", customer_id=customer.customer_id)
        if self.store.customers.find_by_id(customer.identity()) is not None:
            raise InvalidRequestError(
                f"Error: customer '{customer.identity()}' already exists", customer_id=customer.identity()
            )
        self.store.customers.save(customer)
        logger.info("Registered customer %s (%s)", customer.identity(), type(customer).__name__)
        return customer

    def register_local(self, national_id: str, name: str, contact: str = "", email: str = "") -> CustomerBase:
        customer = LocalCustomer(
            customer_id=(national_id or "").strip(),
            name=name or "",
            contact=contact or "",
            email=email or "",
        )
        return self._register(customer, "national ID")

    def register_foreign(self, passport_number: str, nationality: str, name: str,
                         contact: str = "", email: str = "") -> CustomerBase:
        customer = ForeignCustomer(
            customer_id=(passport_number or "").strip(),
            name=name or "",
            contact=contact or "",
            email=email or "",
            nationality=(nationality or "").strip(),
        )
        return self._register(customer, "passport number")

    def get_customer(self, customer_id: str) -> CustomerBase:
        c = self.store.customers.find_by_id(customer_id)
        if c is None:
            raise NotFoundError(f"Error: customer '{customer_id}' not found", customer_id=customer_id)
        return c

    def search_by_name(self, fragment: str) -> list[CustomerBase]:
        return sorted(self.store.customers.find_by_name_contains(fragment), key=lambda c: c.name.lower())
