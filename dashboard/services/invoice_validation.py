"""Validation of submitted invoice fields.

The validator is a pure function: it receives the raw submitted mapping and
returns either a normalised :class:`ValidInvoice` or an
:class:`InvalidInvoice` describing every failing field.  It performs no I/O
and never touches the request or the database, so the same input always
produces the same result.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Mapping, Union

from werkzeug.datastructures import MultiDict

from dashboard.forms import InvoiceFieldsForm
from dashboard.utils.numeric import to_minor_units

INVOICE_FIELDS = ("customerId", "amount", "status")


class Intent(enum.Enum):
    """The kind of mutation a submission is aimed at."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def verb(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ValidInvoice:
    customer_id: str
    amount: Decimal
    status: str

    @property
    def amount_cents(self) -> int:
        return to_minor_units(self.amount)


@dataclass(frozen=True)
class InvalidInvoice:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: str = ""


ValidationResult = Union[ValidInvoice, InvalidInvoice]


def _as_multidict(raw: Mapping[str, str]) -> MultiDict:
    if isinstance(raw, MultiDict):
        return raw
    return MultiDict(
        {name: raw[name] for name in INVOICE_FIELDS if raw.get(name) is not None}
    )


def validate_invoice_form(raw: Mapping[str, str], intent: Intent) -> ValidationResult:
    """Validate raw invoice fields for ``intent``.

    Only ``customerId``, ``amount`` and ``status`` are read; an ``id`` or
    ``date`` in the submission is ignored because both are assigned by the
    system.  Create and update require the same three fields and differ only
    in the summary message.
    """

    if intent not in (Intent.CREATE, Intent.UPDATE):
        raise ValueError(f"{intent.value} submissions carry no fields to validate")

    form = InvoiceFieldsForm(formdata=_as_multidict(raw))
    if not form.validate():
        errors = {name: list(messages) for name, messages in form.errors.items()}
        return InvalidInvoice(
            errors=errors,
            message=f"Missing Fields. Failed to {intent.verb} Invoice.",
        )

    return ValidInvoice(
        customer_id=form.customerId.data.strip(),
        amount=form.amount.data,
        status=form.status.data,
    )
