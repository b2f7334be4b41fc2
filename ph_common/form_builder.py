"""
Builds the hidden form fields a merchant page posts to the gateway's hosted forms.

Every form carries the merchant identity, a fresh request id and timestamp, and the redirect URLs, plus the
fields of its transaction type. The fields are signed over the form URI with an empty body and the
resulting token is added as the ``signature`` field.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from marshmallow import Schema, ValidationError

from ph_common.config import config, logger
from ph_common.exceptions import PHConstructionException
from ph_common.field_enum import FormUri, SphField
from ph_common.parameters import ParameterSet
from ph_common.request_identity import RequestIdentity
from ph_common.schema.form import (
    AddCardFormOptionsSchema,
    PaymentFormOptionsSchema,
    PayWithTokenAndCvcFormOptionsSchema,
)
from ph_common.signature import Credentials, sign_parameters


class FormType(Enum):
    ADD_CARD = (FormUri.ADD_CARD, AddCardFormOptionsSchema)
    PAY_WITH_CARD = (FormUri.PAY_WITH_CARD, PaymentFormOptionsSchema)
    ADD_CARD_AND_PAY = (FormUri.ADD_CARD_AND_PAY, PaymentFormOptionsSchema)
    PAY_WITH_TOKEN_AND_CVC = (FormUri.PAY_WITH_TOKEN_AND_CVC, PayWithTokenAndCvcFormOptionsSchema)

    def __init__(self, uri: FormUri, schema_class: type[Schema]):
        self.uri = uri
        self.schema_class = schema_class


@dataclass
class FormContainer:
    """
    A signed form, ready to be rendered as hidden inputs and posted to ``action_url``.

    :param method: HTTP method the form must be submitted with
    :param base_url: Gateway service URL
    :param uri: Form path on the gateway
    :param fields: Signed form fields, ``signature`` included
    :param request_id: The request id generated for this form
    """

    method: str
    base_url: str
    uri: str
    fields: ParameterSet
    request_id: str

    @property
    def action_url(self) -> str:
        return f'{self.base_url.rstrip("/")}{self.uri}'


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class FormBuilder:
    def __init__(
        self,
        credentials: Credentials,
        account: str,
        merchant: str,
        base_url: str,
        method: str = 'POST',
    ):
        self.credentials = credentials
        self.account = account
        self.merchant = merchant
        self.base_url = base_url
        self.method = method

    @classmethod
    def from_config(cls) -> 'FormBuilder':
        return cls(
            credentials=config.signature_credentials,
            account=config.account,
            merchant=config.merchant,
            base_url=config.service_url,
        )

    def build(self, form_type: FormType, options: dict[str, Any]) -> FormContainer:
        """
        Build a signed form of the given type.

        :param form_type: Which hosted form to build
        :param options: Form options by name, see the schema of the form type. Optional flags that are absent
            or None are left off the form.
        :return: The signed form
        :raises PHConstructionException: If the options fail validation
        """
        schema = form_type.schema_class()
        try:
            loaded = schema.load(options)
        except ValidationError as e:
            logger.info('Invalid form options', form_type=form_type.name, errors=e.messages)
            raise PHConstructionException(f'Invalid form options: {e.messages}') from e

        identity = RequestIdentity.generate()
        fields = self._common_fields(identity)
        for name, schema_field in schema.fields.items():
            value = loaded.get(name)
            if value is None:
                continue
            fields[schema_field.metadata['sph_field']] = _format_value(value)

        sign_parameters(fields, self.method, form_type.uri, self.credentials)
        logger.info('Built signed form', form_type=form_type.name, request_id=identity.request_id)

        return FormContainer(
            method=self.method,
            base_url=self.base_url,
            uri=form_type.uri,
            fields=fields,
            request_id=identity.request_id,
        )

    def generate_add_card_parameters(self, **options) -> FormContainer:
        return self.build(FormType.ADD_CARD, options)

    def generate_payment_parameters(self, **options) -> FormContainer:
        return self.build(FormType.PAY_WITH_CARD, options)

    def generate_add_card_and_payment_parameters(self, **options) -> FormContainer:
        return self.build(FormType.ADD_CARD_AND_PAY, options)

    def generate_pay_with_token_and_cvc_parameters(self, **options) -> FormContainer:
        return self.build(FormType.PAY_WITH_TOKEN_AND_CVC, options)

    def _common_fields(self, identity: RequestIdentity) -> ParameterSet:
        return ParameterSet(
            {
                SphField.API_VERSION: config.api_version,
                SphField.ACCOUNT: self.account,
                SphField.MERCHANT: self.merchant,
                SphField.TIMESTAMP: identity.timestamp,
                SphField.REQUEST_ID: identity.request_id,
            }
        )
