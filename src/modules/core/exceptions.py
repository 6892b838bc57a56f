"""Domain error categories and their HTTP translation.

Domain modules raise subclasses of the three categories below; the
``api_exception_handler`` (wired through ``REST_FRAMEWORK``) maps each
category to a status code so views never need per-exception branches.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class NotFoundError(Exception):
    """The entity addressed by an identifier-keyed operation does not exist."""


class ConflictError(Exception):
    """The operation conflicts with the current state of the data."""


class InvalidInputError(Exception):
    """The caller supplied malformed arguments (e.g. inverted bounds)."""


_STATUS_BY_CATEGORY: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (PydanticValidationError, status.HTTP_400_BAD_REQUEST),
)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Optional[Response]:
    """Translate domain exceptions into ``{"detail": ...}`` responses.

    Anything that is not a domain category falls through to DRF's default
    handler (which returns ``None`` for unexpected errors, letting Django
    produce a 500).
    """
    for category, status_code in _STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            view = context.get("view")
            logger.warning(
                "api.domain_error",
                error=type(exc).__name__,
                status_code=status_code,
                view=type(view).__name__ if view else None,
            )
            return Response({"detail": str(exc)}, status=status_code)
    return exception_handler(exc, context)
