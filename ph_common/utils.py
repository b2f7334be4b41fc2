import json
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from json import JSONEncoder
from uuid import UUID

from aws_lambda_powertools.utilities.typing import LambdaContext

from ph_common.config import logger
from ph_common.exceptions import PHInvalidRequestException, PHUnauthorizedException
from ph_common.request_identity import TIMESTAMP_FORMAT


class ResponseEncoder(JSONEncoder):
    """JSON Encoder for the request ids and timestamps merchant callback handlers return"""

    def default(self, o):
        if isinstance(o, UUID):
            return str(o)

        if isinstance(o, datetime):
            return o.strftime(TIMESTAMP_FORMAT)

        return super().default(o)


def api_handler(fn: Callable):
    """Decorator to wrap a merchant callback handler in standard logging, error handling.

    - Logs each access
    - JSON-encodes returned responses
    - Translates PHInvalidRequestException subclasses to their respective HTTP response codes
    """

    @wraps(fn)
    @logger.inject_lambda_context
    def caught_handler(event, context: LambdaContext):
        # Propagate these keys to all log messages in this with block
        with logger.append_context_keys(method=event.get('httpMethod'), path=event.get('path')):
            logger.info('Incoming request')

            try:
                return {
                    'headers': {'Content-Type': 'application/json'},
                    'statusCode': 200,
                    'body': json.dumps(fn(event, context), cls=ResponseEncoder),
                }
            except PHUnauthorizedException as e:
                logger.info('Unauthorized request', exc_info=e)
                return {
                    'headers': {'Content-Type': 'application/json'},
                    'statusCode': 401,
                    'body': json.dumps({'message': 'Unauthorized'}),
                }
            except PHInvalidRequestException as e:
                logger.info('Invalid request', exc_info=e)
                return {
                    'headers': {'Content-Type': 'application/json'},
                    'statusCode': 400,
                    'body': json.dumps({'message': e.message}),
                }

    return caught_handler
