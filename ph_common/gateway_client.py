"""
Thin transport to the gateway.

Signs server-to-server requests with ``sph-*`` headers and a ``signature`` header, and posts signed hosted
forms. Retries and backoff are left to the caller.
"""

import json
from typing import Any

import requests

from ph_common.config import config, logger
from ph_common.exceptions import PHGatewayException, PHMalformedSignatureException
from ph_common.field_enum import SphField
from ph_common.form_builder import FormContainer
from ph_common.parameters import ParameterSet
from ph_common.request_identity import RequestIdentity
from ph_common.signature import Credentials, sign_parameters, verify

USER_AGENT = 'PaymentHighway Python Lib'
FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'
JSON_CONTENT_TYPE = 'application/json; charset=utf-8'


class GatewayClient:
    def __init__(
        self,
        service_url: str,
        credentials: Credentials,
        account: str,
        merchant: str,
        timeout: int = config.default_request_timeout_seconds,
        session: requests.Session | None = None,
    ):
        self.service_url = service_url.rstrip('/')
        self.credentials = credentials
        self.account = account
        self.merchant = merchant
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'GatewayClient':
        return cls(
            service_url=config.service_url,
            credentials=config.signature_credentials,
            account=config.account,
            merchant=config.merchant,
            timeout=config.request_timeout_seconds,
        )

    def signed_headers(self, method: str, path: str, body: bytes = b'') -> ParameterSet:
        """
        Build the signed header set for a server-to-server request.

        :param method: HTTP method
        :param path: Request path, e.g. '/transaction'
        :param body: Exact bytes that will be sent as the request body
        :return: Headers including ``signature``
        """
        identity = RequestIdentity.generate()
        headers = ParameterSet(
            {
                SphField.ACCOUNT: self.account,
                SphField.MERCHANT: self.merchant,
                SphField.TIMESTAMP: identity.timestamp,
                SphField.REQUEST_ID: identity.request_id,
            }
        )
        sign_parameters(headers, method, path, self.credentials, body)
        headers['User-Agent'] = USER_AGENT
        return headers

    def send(
        self, method: str, path: str, payload: dict[str, Any] | None = None, verify_response: bool = True
    ) -> requests.Response:
        """
        Send a signed JSON request to the gateway.

        :param method: HTTP method
        :param path: Request path
        :param payload: JSON-serializable body, or None for no body
        :param verify_response: Check the signature the gateway puts on its response
        :return: The response
        :raises PHGatewayException: On a transport error, a non-2xx status, or a response that fails
            signature verification
        """
        body = json.dumps(payload).encode('utf-8') if payload is not None else b''
        headers = self.signed_headers(method, path, body)
        if payload is not None:
            headers['Content-Type'] = JSON_CONTENT_TYPE

        response = self._request(method, path, headers=dict(headers.items()), data=body or None)

        if verify_response and not self._verify_response(method, path, response):
            logger.error('Gateway response signature mismatch', method=method, path=path)
            raise PHGatewayException('Gateway response signature could not be verified', response.status_code)

        return response

    def submit_form(self, form: FormContainer) -> requests.Response:
        """
        Post a signed hosted form to its ``action_url`` on behalf of the browser, e.g. for integration testing.

        :param form: A form produced by FormBuilder
        :return: The response
        :raises PHGatewayException: On a transport error or a non-2xx status
        """
        return self._request(
            form.method,
            form.uri,
            url=form.action_url,
            headers={'User-Agent': USER_AGENT, 'Content-Type': FORM_CONTENT_TYPE},
            data=form.fields.to_list(),
        )

    def _request(self, method: str, path: str, url: str | None = None, **kwargs) -> requests.Response:
        url = url or f'{self.service_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning('Gateway request failed', method=method, path=path, exc_info=e)
            raise PHGatewayException(f'Gateway request failed: {e}') from e

        if not 200 <= response.status_code < 300:
            logger.warning('Unexpected gateway response status', method=method, path=path, status=response.status_code)
            raise PHGatewayException(f'Unexpected response status: {response.status_code}', response.status_code)

        logger.info('Gateway request succeeded', method=method, path=path, status=response.status_code)
        return response

    def _verify_response(self, method: str, path: str, response: requests.Response) -> bool:
        try:
            return verify(
                response.headers,
                method,
                path,
                response.content,
                self.credentials.key_id,
                self.credentials.secret,
                required_fields=(),
            )
        except PHMalformedSignatureException as e:
            logger.error('Gateway response is not verifiable', method=method, path=path, exc_info=e)
            raise PHGatewayException(f'Gateway response is not verifiable: {e.message}', response.status_code) from e
