import json
from datetime import UTC, datetime
from uuid import UUID

from tests import TstSigning


class TestResponseEncoder(TstSigning):
    def test_encodes_request_identity_values(self):
        from ph_common.utils import ResponseEncoder

        body = json.dumps(
            {
                'request_id': UUID('11111111-1111-1111-1111-111111111111'),
                'received': datetime(2023, 1, 1, tzinfo=UTC),
            },
            cls=ResponseEncoder,
        )

        self.assertEqual(
            {'request_id': '11111111-1111-1111-1111-111111111111', 'received': '2023-01-01T00:00:00Z'},
            json.loads(body),
        )

    def test_unknown_type(self):
        from ph_common.utils import ResponseEncoder

        with self.assertRaises(TypeError):
            json.dumps({'value': object()}, cls=ResponseEncoder)
