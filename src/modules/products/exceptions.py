"""Product domain exceptions.

Raised by the entity, the query engine and the mutation engine when
business rules are violated.  Each one extends a category from
``modules.core.exceptions`` so the API layer can tell "not found" from
"conflict" from "invalid input".
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, InvalidInputError, NotFoundError


class ProductNotFound(NotFoundError):
    """The requested product does not exist."""


class DuplicateSkuError(ConflictError):
    """A product with the same SKU already exists."""


class InsufficientQuantityError(ConflictError):
    """A decrease would drive the stock quantity below zero."""


class InvalidRangeError(InvalidInputError):
    """Filter bounds are inverted (lower bound above upper bound)."""


class InvalidStatusError(InvalidInputError):
    """The supplied value is not a known product status."""
