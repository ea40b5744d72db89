"""
Domain error taxonomy.

Services raise these; the API layer maps them to an ErrorResponse body with a
status code per kind. They carry an optional list of detail entries (e.g. every
violated field, or every unresolvable discount id).
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    kind: str = "error"
    status_code: int = 500

    def __init__(self, message: str, *, details: list[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = list(details or [])


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = 404


class ForbiddenError(DomainError):
    kind = "forbidden"
    status_code = 403


class ListingValidationError(DomainError):
    kind = "validation_error"
    status_code = 422


class BusinessRuleError(DomainError):
    kind = "business_rule"
    status_code = 400


class UpstreamError(DomainError):
    kind = "upstream_error"
    status_code = 502
