"""Translate domain errors into API responses.

Only the domain message reaches the client; internal ids and stack detail stay
in the logs.
"""

import logging

from rest_framework import status
from rest_framework.response import Response

from .exceptions import (
    AlreadyResolvedError,
    DuplicateDisputeError,
    InvalidTransitionError,
    OrderIntegrityError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger("studentgigs.api")

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (DuplicateDisputeError, status.HTTP_409_CONFLICT),
    (AlreadyResolvedError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def error_response(exc: OrderIntegrityError, request=None) -> Response:
    code = status.HTTP_400_BAD_REQUEST
    for klass, mapped in STATUS_BY_ERROR:
        if isinstance(exc, klass):
            code = mapped
            break
    body = {"detail": exc.message}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    level = logging.ERROR if code >= 500 else logging.INFO
    logger.log(
        level,
        "domain_error",
        extra={
            "error": exc.__class__.__name__,
            "path": getattr(request, "path", None),
            "user_id": getattr(getattr(request, "user", None), "id", None),
        },
    )
    return Response(body, status=code)


def not_found(label: str) -> Response:
    return Response({"detail": f"{label} not found"}, status=status.HTTP_404_NOT_FOUND)
