# Each field's ``sph_field`` metadata names the request field its value is sent as.
from marshmallow import RAISE, Schema
from marshmallow.fields import UUID, Boolean, Integer, String, Url
from marshmallow.validate import Length, Range, Regexp

from ph_common.field_enum import SphField


class StrictSchema(Schema):
    """Base Schema explicitly stating what we do if unknown fields are included - raise an error"""

    class Meta:
        unknown = RAISE


class FormOptionsSchema(StrictSchema):
    """
    Options shared by every hosted form

    Serialization direction:
    Python -> load() -> FormBuilder
    """

    success_url = Url(required=True, allow_none=False, require_tld=False, metadata={'sph_field': SphField.SUCCESS_URL})
    failure_url = Url(required=True, allow_none=False, require_tld=False, metadata={'sph_field': SphField.FAILURE_URL})
    cancel_url = Url(required=True, allow_none=False, require_tld=False, metadata={'sph_field': SphField.CANCEL_URL})
    language = String(
        required=True, allow_none=False, validate=Length(min=2, max=5), metadata={'sph_field': SphField.LANGUAGE}
    )

    # Optional flags, left off the form entirely when None
    skip_form_notifications = Boolean(
        required=False, allow_none=True, metadata={'sph_field': SphField.SKIP_FORM_NOTIFICATIONS}
    )
    exit_iframe_on_result = Boolean(
        required=False, allow_none=True, metadata={'sph_field': SphField.EXIT_IFRAME_ON_RESULT}
    )
    exit_iframe_on_three_d_secure = Boolean(
        required=False, allow_none=True, metadata={'sph_field': SphField.EXIT_IFRAME_ON_THREE_D_SECURE}
    )
    # None leaves 3DS to the merchant account's configured default
    use_three_d_secure = Boolean(required=False, allow_none=True, metadata={'sph_field': SphField.USE_THREE_D_SECURE})


class AddCardFormOptionsSchema(FormOptionsSchema):
    # Accept a card token even if the card requires CVC for payments
    accept_cvc_required = Boolean(
        required=False, allow_none=True, metadata={'sph_field': SphField.ACCEPT_CVC_REQUIRED}
    )


class PaymentFormOptionsSchema(FormOptionsSchema):
    """
    Options for forms that charge the card, used for both pay-with-card and add-card-and-pay

    amount is in the currency's minor unit (e.g. cents).
    """

    amount = Integer(required=True, allow_none=False, validate=Range(min=0), metadata={'sph_field': SphField.AMOUNT})
    currency = String(
        required=True, allow_none=False, validate=Regexp('^[A-Z]{3}$'), metadata={'sph_field': SphField.CURRENCY}
    )
    order_id = String(
        required=True, allow_none=False, validate=Length(min=1, max=254), metadata={'sph_field': SphField.ORDER}
    )
    description = String(
        required=True, allow_none=False, validate=Length(min=1, max=256), metadata={'sph_field': SphField.DESCRIPTION}
    )


class PayWithTokenAndCvcFormOptionsSchema(PaymentFormOptionsSchema):
    token = UUID(required=True, allow_none=False, metadata={'sph_field': SphField.TOKEN})
