import os
from unittest import TestCase
from unittest.mock import MagicMock

from aws_lambda_powertools.utilities.typing import LambdaContext


class TstSigning(TestCase):
    @classmethod
    def setUpClass(cls):
        os.environ.update(
            {
                # Set to 'true' to enable debug logging
                'DEBUG': 'false',
                'AWS_DEFAULT_REGION': 'us-east-1',
                'POWERTOOLS_SERVICE_NAME': 'ph-signing-test',
                'SPH_SIGNATURE_KEY_ID': 'testKey',
                'SPH_SIGNATURE_SECRET': 'testSecret',
                'SPH_ACCOUNT': 'test',
                'SPH_MERCHANT': 'test_merchantId',
                'SPH_SERVICE_URL': 'https://v1-hub-staging.sph-test-solinor.com',
            },
        )
        # Monkey-patch config object to be sure we have it based
        # on the env vars we set above
        import ph_common.config

        cls.config = ph_common.config._Config()  # noqa: SLF001 protected-access
        ph_common.config.config = cls.config
        cls.mock_context = MagicMock(name='MockLambdaContext', spec=LambdaContext)
