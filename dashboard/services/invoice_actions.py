"""Create, update and delete invoices from submitted form data.

Every action runs the same steps in order: validate the submission, apply one
write through the store, invalidate the cached invoice views and hand back a
:class:`Redirect`.  Failures come back as :class:`ValidationFailure` or
:class:`PersistenceFailure` values.  Navigation after success is a returned
value rather than an exception, so error handling around a write can never
mistake a finished submission for a failed one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional, Union

from dashboard.services.invoice_store import InvoiceStore, PersistenceError
from dashboard.services.invoice_validation import (
    Intent,
    InvalidInvoice,
    validate_invoice_form,
)
from dashboard.services.read_coordinator import ReadCoordinator

logger = logging.getLogger(__name__)

INVOICES = "invoices"
INVOICES_PATH = "/dashboard/invoices"


@dataclass(frozen=True)
class FormState:
    """What the form page needs to show after a failed submission."""

    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class Redirect:
    to: str
    record_id: Optional[str] = None


@dataclass(frozen=True)
class ValidationFailure:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: str = ""

    @property
    def state(self) -> FormState:
        return FormState(errors=self.errors, message=self.message)


@dataclass(frozen=True)
class PersistenceFailure:
    message: str

    @property
    def state(self) -> FormState:
        return FormState(message=self.message)


Outcome = Union[Redirect, ValidationFailure, PersistenceFailure]


class InvoiceActions:
    """Run invoice mutations against ``store`` and keep cached reads fresh.

    Updating or deleting an id that does not exist succeeds without touching
    any row; the affected row count is only logged.
    """

    def __init__(
        self,
        store: InvoiceStore,
        coordinator: ReadCoordinator,
        listing_path: str = INVOICES_PATH,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.coordinator = coordinator
        self.listing_path = listing_path
        self.today = today

    def create(self, raw: Mapping[str, str]) -> Outcome:
        result = validate_invoice_form(raw, Intent.CREATE)
        if isinstance(result, InvalidInvoice):
            return self._invalid(Intent.CREATE, result)
        try:
            invoice_id = self.store.insert(
                result.customer_id, result.amount_cents, result.status, self.today()
            )
        except PersistenceError as exc:
            return PersistenceFailure(str(exc))
        logger.info("Created invoice %s", invoice_id)
        return self._committed(invoice_id)

    def update(self, invoice_id: str, raw: Mapping[str, str]) -> Outcome:
        result = validate_invoice_form(raw, Intent.UPDATE)
        if isinstance(result, InvalidInvoice):
            return self._invalid(Intent.UPDATE, result)
        try:
            affected = self.store.update(
                invoice_id, result.customer_id, result.amount_cents, result.status
            )
        except PersistenceError as exc:
            return PersistenceFailure(str(exc))
        logger.info("Updated invoice %s (%d row(s))", invoice_id, affected)
        return self._committed(invoice_id)

    def delete(self, invoice_id: str) -> Outcome:
        try:
            affected = self.store.delete(invoice_id)
        except PersistenceError as exc:
            return PersistenceFailure(str(exc))
        logger.info("Deleted invoice %s (%d row(s))", invoice_id, affected)
        return self._committed(invoice_id)

    def _invalid(self, intent: Intent, result: InvalidInvoice) -> ValidationFailure:
        logger.debug(
            "Rejected %s submission: %s", intent.value, sorted(result.errors)
        )
        return ValidationFailure(errors=result.errors, message=result.message)

    def _committed(self, invoice_id: str) -> Redirect:
        self.coordinator.invalidate(INVOICES)
        return Redirect(to=self.listing_path, record_id=invoice_id)
