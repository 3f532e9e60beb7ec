"""
Shared logger for handlers: one JSON line per record, tracebacks included.
"""
import os
import sys
import json
import traceback
from typing import Any, Optional
from aws_lambda_powertools import Logger


def flatten_traceback(exc_info) -> Optional[str]:
    """Render exc_info as a single line, frames joined with ' | '."""
    if exc_info is True:
        exc_info = sys.exc_info()
    if not isinstance(exc_info, tuple) or len(exc_info) != 3 or exc_info[0] is None:
        return None
    lines = ''.join(traceback.format_exception(*exc_info)).splitlines()
    return ' | '.join(line.strip() for line in lines if line.strip())


class SingleLineLogger(Logger):
    """Powertools logger whose exception records stay on one CloudWatch line."""

    def exception(self, message, *args, **kwargs):
        extra = dict(kwargs.pop('extra', None) or {})
        extra['exception'] = flatten_traceback(kwargs.pop('exc_info', True))
        super().error(message, *args, extra=extra, **kwargs)


logger = SingleLineLogger(
    service=os.environ.get('POWERTOOLS_SERVICE_NAME', 'sensitrack'),
    level=os.environ.get('LOG_LEVEL', 'INFO'),
    log_uncaught_exceptions=True,
    json_serializer=json.dumps,
    use_rfc3339=True
)

# Lambda environment, constant for the life of the container
logger.append_keys(
    region=os.environ.get('AWS_REGION'),
    function=os.environ.get('AWS_LAMBDA_FUNCTION_NAME'),
    version=os.environ.get('AWS_LAMBDA_FUNCTION_VERSION')
)


def log_exception(logger: Logger, message: str, error: Optional[BaseException] = None, **fields: Any) -> None:
    """
    Log a failure as a single error record.

    error_type, error_details and the flattened traceback are taken from
    error, or from the exception currently being handled. Keyword arguments
    are added as structured fields.

    Example:
        except Exception as e:
            log_exception(logger, "Error analyzing cycle", e, user_id=user_id)
    """
    if error is not None:
        exc_info = (type(error), error, error.__traceback__)
    else:
        exc_info = sys.exc_info()

    extra = {
        "error_type": exc_info[0].__name__ if exc_info[0] else None,
        "error_details": str(exc_info[1]) if exc_info[1] is not None else None,
        "exception": flatten_traceback(exc_info),
    }
    extra.update(fields)
    logger.error(message, extra=extra)
