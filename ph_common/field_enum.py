from enum import StrEnum

# Only fields whose (lower-cased) name starts with this prefix are covered by the signature.
SIGNABLE_PREFIX = 'sph-'

SIGNATURE_FIELD = 'signature'


class SphField(StrEnum):
    """
    Central source for all gateway protocol field names.

    Both the form builder and the canonicalizer read names from here, so which fields are signable is
    decided in exactly one place: every member carrying the ``sph-`` prefix is signed, the rest
    (``language``, ``description``) travel with the request unsigned.
    """

    API_VERSION = 'sph-api-version'
    ACCOUNT = 'sph-account'
    MERCHANT = 'sph-merchant'
    TIMESTAMP = 'sph-timestamp'
    REQUEST_ID = 'sph-request-id'
    SUCCESS_URL = 'sph-success-url'
    FAILURE_URL = 'sph-failure-url'
    CANCEL_URL = 'sph-cancel-url'
    AMOUNT = 'sph-amount'
    CURRENCY = 'sph-currency'
    ORDER = 'sph-order'
    TOKEN = 'sph-token'
    ACCEPT_CVC_REQUIRED = 'sph-accept-cvc-required'
    SKIP_FORM_NOTIFICATIONS = 'sph-skip-form-notifications'
    EXIT_IFRAME_ON_RESULT = 'sph-exit-iframe-on-result'
    EXIT_IFRAME_ON_THREE_D_SECURE = 'sph-exit-iframe-on-three-d-secure'
    USE_THREE_D_SECURE = 'sph-use-three-d-secure'
    # unsigned
    LANGUAGE = 'language'
    DESCRIPTION = 'description'

    @property
    def is_signable(self) -> bool:
        return is_signable(self.value)


class FormUri(StrEnum):
    ADD_CARD = '/form/view/add_card'
    PAY_WITH_CARD = '/form/view/pay_with_card'
    ADD_CARD_AND_PAY = '/form/view/add_and_pay_with_card'
    PAY_WITH_TOKEN_AND_CVC = '/form/view/pay_with_token_and_cvc'


# Fields every gateway-signed request carries; verification treats their absence as malformed input.
REQUIRED_RECEIVED_FIELDS = (SphField.ACCOUNT, SphField.MERCHANT, SphField.REQUEST_ID, SphField.TIMESTAMP)


def is_signable(name: str) -> bool:
    return name.lower().startswith(SIGNABLE_PREFIX)
