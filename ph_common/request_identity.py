from dataclasses import dataclass
from uuid import uuid4

from ph_common.config import config

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


@dataclass(frozen=True)
class RequestIdentity:
    """
    Per-request identifier and UTC timestamp.

    A new identity must be generated for every outbound request. Because both values are signed, this
    guarantees that no two requests share a canonical string, even for otherwise identical payloads.

    :param request_id: Random (version 4) UUID in its canonical textual form
    :param timestamp: UTC time with second precision, e.g. ``2023-01-01T00:00:00Z``
    """

    request_id: str
    timestamp: str

    @classmethod
    def generate(cls) -> 'RequestIdentity':
        return cls(
            request_id=str(uuid4()),
            timestamp=config.current_standard_datetime.strftime(TIMESTAMP_FORMAT),
        )
