"""
Signature Authentication Module

Decorators for API Gateway handlers that receive signed calls from the gateway: browser redirects back to the
merchant's success/failure/cancel URLs, which carry ``sph-*`` query parameters and a ``signature`` parameter,
and server-to-server notifications, which carry ``sph-*`` headers, a ``signature`` header and a body.
"""

import base64
from collections.abc import Callable
from functools import wraps
from typing import Any

from ph_common.config import config, logger
from ph_common.exceptions import PHMalformedSignatureException, PHUnauthorizedException
from ph_common.signature import verify


def redirect_signature_required(fn: Callable) -> Callable:
    """
    Decorator to validate the signature on a browser redirect from the gateway.

    :param fn: The function to decorate
    :return: Decorated function
    """

    @wraps(fn)
    def validate_redirect_signature(event: dict, context: Any) -> Any:
        _validate_signature(event, event.get('queryStringParameters') or {}, b'')
        return fn(event, context)

    return validate_redirect_signature


def notification_signature_required(fn: Callable) -> Callable:
    """
    Decorator to validate the signature on a server-to-server notification from the gateway.

    The body is verified exactly as received, so this must wrap the handler before any parsing. A body API Gateway
    delivered base64-encoded is decoded first, but the event passed on is left untouched.

    :param fn: The function to decorate
    :return: Decorated function
    """

    @wraps(fn)
    def validate_notification_signature(event: dict, context: Any) -> Any:
        _validate_signature(event, event.get('headers') or {}, _received_body(event))
        return fn(event, context)

    return validate_notification_signature


def _received_body(event: dict) -> bytes | str:
    body = event.get('body') or b''
    if body and event.get('isBase64Encoded'):
        return base64.b64decode(body)
    return body


def _validate_signature(event: dict, fields: dict, body: bytes | str) -> None:
    """
    :raises PHMalformedSignatureException: If the request cannot be verified at all
    :raises PHUnauthorizedException: If the signature does not match
    """
    method = event.get('httpMethod', '')
    path = event.get('path', '')
    credentials = config.signature_credentials

    try:
        valid = verify(fields, method, path, body, credentials.key_id, credentials.secret)
    except PHMalformedSignatureException as e:
        logger.warning('Malformed signed request', method=method, path=path, error=e.message)
        raise

    if not valid:
        logger.warning('Invalid signature for request', method=method, path=path)
        raise PHUnauthorizedException('Invalid request signature')

    logger.info('Signature validated successfully', method=method, path=path, key_id=credentials.key_id)
