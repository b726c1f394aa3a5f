"""Map domain errors to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Only the user-safe
code and message of a domain error reach the client.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from event_setup.domain.errors import DomainError, ErrorCode, StepValidationError, ValidationError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_STEP: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.LOOKUP_FAILED: status.HTTP_404_NOT_FOUND,
    ErrorCode.SUBMISSION_IN_PROGRESS: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_error_response(exc: DomainError) -> Response:
    body = {"error": exc.code.value, "message": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = list(exc.errors)
    if isinstance(exc, StepValidationError):
        body["step"] = exc.step
        body["warnings"] = list(exc.result.warnings)
    return Response(body, status=STATUS_BY_CODE[exc.code])


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        logger.info("%s handled as HTTP %s", exc, STATUS_BY_CODE[exc.code])
        return domain_error_response(exc)
    return exception_handler(exc, context)
