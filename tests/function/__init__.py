import os
from unittest.mock import patch

import boto3
from moto import mock_aws

from tests import TstSigning


@mock_aws
class TstFunction(TstSigning):
    """
    Base class to set up Moto mocking and create mock AWS resources for functional testing
    """

    def setUp(self):  # pylint: disable=invalid-name
        super().setUp()

        self._os_patch = patch.dict(os.environ, {'SPH_SIGNATURE_SECRET_NAME': 'sph/signature-secret'})
        self._os_patch.start()
        # The secret must come from Secrets Manager in these tests
        os.environ.pop('SPH_SIGNATURE_SECRET', None)

        self.build_resources()

        import ph_common.config

        ph_common.config.config = ph_common.config._Config()  # noqa: SLF001 protected-access
        self.config = ph_common.config.config

        self.addCleanup(self._os_patch.stop)
        self.addCleanup(self.delete_resources)

    def build_resources(self):
        self._secrets_client = boto3.client('secretsmanager')
        self._secrets_client.create_secret(Name=os.environ['SPH_SIGNATURE_SECRET_NAME'], SecretString='testSecret')

    def delete_resources(self):
        self._secrets_client.delete_secret(
            SecretId=os.environ['SPH_SIGNATURE_SECRET_NAME'], ForceDeleteWithoutRecovery=True
        )
