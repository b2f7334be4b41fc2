"""
Request Signature Module

Every request sent to the gateway, whether a server-to-server HTTP call or a browser-submitted form, carries
a ``signature`` value proving it came from a merchant holding the secret key and was not altered in transit.

The string to sign is constructed as:
HTTP_METHOD\nREQUEST_PATH\nSORTED_SPH_FIELDS\nBODY

Where SORTED_SPH_FIELDS are the ``sph-`` prefixed fields as lower-cased ``key:value`` lines, sorted by key and
joined with newlines. BODY is the raw request body, empty when there is none.

The signature value is ``SPH1 <key id> <lower-case hex HMAC-SHA256 of the string to sign>``. Its format is a
wire contract with the gateway and must not change.
"""

import hashlib
import hmac
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ph_common.config import logger
from ph_common.exceptions import (
    PHConfigurationException,
    PHConstructionException,
    PHMalformedSignatureException,
)
from ph_common.field_enum import REQUIRED_RECEIVED_FIELDS, SIGNATURE_FIELD, is_signable
from ph_common.parameters import ParameterSet

SIGNATURE_VERSION = 'SPH1'
TOKEN_DELIMITER = ' '

_HEX_DIGEST_PATTERN = re.compile(r'^[0-9a-f]{64}$')

Fields = Mapping[str, str | None] | Iterable[tuple[str, str | None]]


@dataclass(frozen=True)
class Credentials:
    """
    Merchant signing credentials. The secret is excluded from repr so it never ends up in logs or tracebacks.
    """

    key_id: str
    secret: bytes = field(repr=False)


@dataclass(frozen=True)
class SignatureToken:
    version: str
    key_id: str
    digest: str

    def __str__(self):
        return TOKEN_DELIMITER.join([self.version, self.key_id, self.digest])

    @classmethod
    def parse(cls, value: str | None) -> 'SignatureToken':
        """
        Parse a received signature value.

        :param value: The raw ``signature`` field or header value
        :return: The parsed token
        :raises PHMalformedSignatureException: If the value is not a well-formed SPH1 token
        """
        if not value:
            raise PHMalformedSignatureException('Signature is missing')

        parts = value.split(TOKEN_DELIMITER)
        if len(parts) != 3:
            raise PHMalformedSignatureException('Signature is not in the form "SPH1 <key id> <digest>"')

        version, key_id, digest = parts
        if version != SIGNATURE_VERSION:
            raise PHMalformedSignatureException(f'Unsupported signature version: {version}')
        if not key_id:
            raise PHMalformedSignatureException('Signature key id is empty')
        if not _HEX_DIGEST_PATTERN.match(digest):
            raise PHMalformedSignatureException('Signature digest is not a lower-case hex SHA-256 digest')

        return cls(version=version, key_id=key_id, digest=digest)


def canonicalize(method: str, path: str, fields: Fields, body: bytes | str | None = b'') -> bytes:
    """
    Build the canonical byte string that is signed for a request.

    Fields without the ``sph-`` prefix are not part of the signature and are ignored here, whatever their
    value. The result is identical for any two field sets holding the same signable keys and values,
    regardless of the order in which they were added.

    The result contains request field values and must not be logged.

    :param method: HTTP method; upper-cased in the output
    :param path: Request path including any version segment, must start with '/'
    :param fields: A ParameterSet, mapping, or sequence of (name, value) pairs
    :param body: Raw request body. None and empty serialize identically.
    :return: The canonical bytes
    :raises PHConstructionException: On an empty method, a path not starting with '/', a signable field
        with a null or non-string value, or two signable fields with the same case-insensitive name
    """
    if not method or not method.strip():
        raise PHConstructionException('HTTP method is required for signing')
    if not path or not path.startswith('/'):
        raise PHConstructionException(f'Request path must start with "/": {path!r}')

    pairs = fields.items() if isinstance(fields, Mapping) else fields

    signable: dict[str, str] = {}
    for name, value in pairs:
        key = name.lower()
        if not is_signable(key):
            continue
        if key in signable:
            raise PHConstructionException(f'Duplicate signable field: {key}')
        if value is None:
            raise PHConstructionException(f'Signable field has no value: {key}')
        if not isinstance(value, str):
            raise PHConstructionException(f'Signable field value must be a string: {key}')
        signable[key] = value

    field_lines = '\n'.join(f'{key}:{signable[key]}' for key in sorted(signable))

    if body is None:
        body = b''
    elif isinstance(body, str):
        body = body.encode('utf-8')

    head = '\n'.join([method.upper(), path, field_lines])
    return head.encode('utf-8') + b'\n' + body


def _check_credentials(key_id: str, secret: bytes | str) -> None:
    if not key_id:
        raise PHConfigurationException('Signature key id is required')
    if TOKEN_DELIMITER in key_id:
        raise PHConfigurationException('Signature key id must not contain spaces')
    if not secret:
        raise PHConfigurationException('Signature secret is required')


def sign(canonical: bytes, key_id: str, secret: bytes | str) -> str:
    """
    Compute the signature value for a canonical string.

    Pure and thread-safe: no I/O and no shared state.

    :param canonical: Output of :func:`canonicalize`
    :param key_id: Identifier of the signing key, sent in clear as part of the token
    :param secret: Shared secret the HMAC is keyed with
    :return: The wire token, ``SPH1 <key id> <hex digest>``
    :raises PHConfigurationException: If the key id or secret is empty, or the key id contains the delimiter
    """
    _check_credentials(key_id, secret)

    if isinstance(secret, str):
        secret = secret.encode('utf-8')

    digest = hmac.new(secret, canonical, hashlib.sha256).hexdigest()
    return str(SignatureToken(version=SIGNATURE_VERSION, key_id=key_id, digest=digest))


def sign_parameters(
    parameters: ParameterSet,
    method: str,
    path: str,
    credentials: Credentials,
    body: bytes | str | None = b'',
) -> str:
    """
    Sign a request and append the resulting token to its parameters as the ``signature`` field.

    Any ``signature`` already present is replaced; it is never part of what is signed.

    :param parameters: The fully populated request fields, modified in place
    :param method: HTTP method
    :param path: Request path
    :param credentials: Merchant signing credentials
    :param body: Raw request body
    :return: The signature token
    """
    parameters.pop(SIGNATURE_FIELD, None)
    token = sign(canonicalize(method, path, parameters, body), credentials.key_id, credentials.secret)
    parameters[SIGNATURE_FIELD] = token

    logger.debug(
        'Signed request',
        key_id=credentials.key_id,
        method=method.upper(),
        path=path,
        signed_field_count=sum(1 for name in parameters if is_signable(name)),
    )
    return token


def verify(
    received_fields: Fields,
    method: str,
    path: str,
    body: bytes | str | None,
    key_id: str,
    secret: bytes | str,
    required_fields: Iterable[str] = REQUIRED_RECEIVED_FIELDS,
) -> bool:
    """
    Verify the signature carried by a received request.

    A mismatch is an ordinary outcome (tampering, replay against another key, stale secret) and is
    reported as False. Only structurally broken input raises.

    :param received_fields: Received headers or form/query fields, including ``signature``
    :param method: HTTP method of the received request
    :param path: Path of the received request
    :param body: Raw received body
    :param key_id: Key id the request is expected to be signed with
    :param secret: Shared secret for that key
    :param required_fields: Signable fields that must be present for the request to be verifiable
    :return: True if the carried signature matches the recomputed one, False otherwise
    :raises PHMalformedSignatureException: If the signature is missing or unparseable, a required field is
        missing, a signable field or the signature is received twice under different casing, or the received
        fields cannot be canonicalized
    :raises PHConfigurationException: If the key id or secret is empty
    """
    _check_credentials(key_id, secret)

    pairs = list(received_fields.items() if isinstance(received_fields, Mapping) else received_fields)
    seen: set[str] = set()
    for name, _ in pairs:
        key = name.lower()
        if key in seen and (is_signable(key) or key == SIGNATURE_FIELD):
            logger.warning('Received request repeats a signed field', field=key)
            raise PHMalformedSignatureException(f'Duplicate signed field: {key}')
        seen.add(key)
    received = ParameterSet(pairs)

    missing = [name for name in required_fields if received.get(name) is None]
    if missing:
        logger.warning('Received request is missing required signed fields', missing_fields=missing)
        raise PHMalformedSignatureException(f'Missing required fields: {", ".join(missing)}')

    received_token = received.pop(SIGNATURE_FIELD, None)
    # Parsed for structure only; the comparison below is over the full token
    SignatureToken.parse(received_token)

    try:
        canonical = canonicalize(method, path, received, body)
    except PHConstructionException as e:
        raise PHMalformedSignatureException(e.message) from e

    expected_token = sign(canonical, key_id, secret)
    if hmac.compare_digest(expected_token.encode('utf-8'), received_token.encode('utf-8')):
        return True

    logger.info('Signature mismatch for received request', key_id=key_id, method=method.upper(), path=path)
    return False
