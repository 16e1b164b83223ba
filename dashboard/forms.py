from decimal import Decimal, InvalidOperation

from flask_wtf import FlaskForm
from wtforms import (
    DecimalField as WTFormsDecimalField,
    Form,
    PasswordField,
    StringField,
    SubmitField,
)
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    StopValidation,
)

from dashboard.models import INVOICE_STATUSES
from dashboard.utils.numeric import MAX_AMOUNT_CENTS, to_minor_units

CUSTOMER_ERROR = "Please select a customer."
AMOUNT_ERROR = "Please enter an amount greater than $0."
STATUS_ERROR = "Please select an invoice status."


class AmountField(WTFormsDecimalField):
    """Decimal field that never turns a blank submission into zero.

    Blank input leaves ``data`` as ``None`` and anything that is not a plain
    decimal number is reported with :data:`AMOUNT_ERROR` rather than the
    generic WTForms message.
    """

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        text = (valuelist[0] or "").strip()
        if not text:
            self.data = None
            return
        try:
            self.data = Decimal(text)
        except InvalidOperation:
            self.data = None
            raise ValueError(AMOUNT_ERROR)


def positive_amount(form, field):
    """Reject missing, non-finite and non-positive amounts.

    Amounts that round to zero cents are rejected as well, since the stored
    value must stay strictly positive.
    """
    value = field.data
    if value is not None and value.is_finite():
        try:
            if 0 < to_minor_units(value) <= MAX_AMOUNT_CENTS:
                return
        except ArithmeticError:
            pass
    if field.errors:
        # The parse error already carries the message.
        raise StopValidation()
    raise StopValidation(AMOUNT_ERROR)


class InvoiceFieldsForm(Form):
    """Plain WTForms form holding the submitted invoice fields.

    It is deliberately not a ``FlaskForm``: validation runs without a request
    context and CSRF is enforced globally by ``CSRFProtect``.
    """

    customerId = StringField(
        "Customer", validators=[DataRequired(message=CUSTOMER_ERROR)]
    )
    amount = AmountField("Amount", validators=[positive_amount])
    status = StringField(
        "Status",
        validators=[AnyOf(INVOICE_STATUSES, message=STATUS_ERROR)],
    )


class LoginForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
    submit = SubmitField("Log in")


class DeleteForm(FlaskForm):
    """Simple form used for CSRF protection on delete actions."""

    submit = SubmitField("Delete")


class CSRFOnlyForm(FlaskForm):
    """Simple form that only provides CSRF protection."""

    pass
