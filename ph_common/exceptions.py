class PHBaseException(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PHConfigurationException(PHBaseException):
    """Signing credentials or settings are missing or empty. Fatal, never retried."""


class PHConstructionException(PHBaseException):
    """The caller built an invalid request (bad method/path, duplicate or null signable field, bad options)"""


class PHInvalidRequestException(PHBaseException):
    """Client error in an inbound request, corresponds to a 400 response"""


class PHMalformedSignatureException(PHInvalidRequestException):
    """Received request is structurally unverifiable: missing fields or an unparseable signature token"""


class PHUnauthorizedException(PHInvalidRequestException):
    """Received request signature did not match, corresponds to a 401 response"""


class PHGatewayException(PHBaseException):
    """The gateway could not be reached or answered with an error status"""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
