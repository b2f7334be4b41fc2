import logging
import os
from datetime import UTC, datetime
from functools import cached_property

import boto3
from aws_lambda_powertools.logging import Logger
from botocore.config import Config as BotoConfig

logging.basicConfig()
logger = Logger()
logger.setLevel(logging.DEBUG if os.environ.get('DEBUG', 'false').lower() == 'true' else logging.INFO)


class _Config:
    api_version = '20151028'
    default_request_timeout_seconds = 30

    @cached_property
    def secrets_manager_client(self):
        return boto3.client('secretsmanager', config=BotoConfig(retries={'mode': 'standard'}))

    @property
    def signature_key_id(self):
        key_id = os.environ.get('SPH_SIGNATURE_KEY_ID', '')
        if not key_id:
            from ph_common.exceptions import PHConfigurationException

            raise PHConfigurationException('SPH_SIGNATURE_KEY_ID is not configured')
        return key_id

    @property
    def signature_secret(self) -> bytes:
        """
        The shared signing secret.

        Read from SPH_SIGNATURE_SECRET if set, otherwise from the Secrets Manager secret named by
        SPH_SIGNATURE_SECRET_NAME. This is deliberately not cached: callers should hold it only for the
        duration of a single signing or verification call.
        """
        from ph_common.exceptions import PHConfigurationException

        secret = os.environ.get('SPH_SIGNATURE_SECRET')
        if not secret:
            secret_name = os.environ.get('SPH_SIGNATURE_SECRET_NAME')
            if not secret_name:
                raise PHConfigurationException(
                    'Neither SPH_SIGNATURE_SECRET nor SPH_SIGNATURE_SECRET_NAME is configured'
                )
            secret = self.secrets_manager_client.get_secret_value(SecretId=secret_name)['SecretString']
        if not secret:
            raise PHConfigurationException('Signature secret is empty')
        return secret.encode('utf-8')

    @property
    def signature_credentials(self):
        from ph_common.signature import Credentials

        return Credentials(key_id=self.signature_key_id, secret=self.signature_secret)

    @property
    def account(self):
        return os.environ['SPH_ACCOUNT']

    @property
    def merchant(self):
        return os.environ['SPH_MERCHANT']

    @property
    def service_url(self):
        return os.environ['SPH_SERVICE_URL'].rstrip('/')

    @property
    def request_timeout_seconds(self):
        return int(os.environ.get('SPH_REQUEST_TIMEOUT_SECONDS', self.default_request_timeout_seconds))

    @property
    def current_standard_datetime(self):
        """
        Standardized way to get the current datetime with the microseconds stripped off.
        """
        return datetime.now(tz=UTC).replace(microsecond=0)


config = _Config()
