"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught by
the presentation layer, which maps them to HTTP status codes.
"""

from portal_chat.domain.exceptions.entity_not_found import EntityNotFoundError
from portal_chat.domain.exceptions.access_denied import AccessDeniedError
from portal_chat.domain.exceptions.validation_error import DomainValidationError
from portal_chat.domain.exceptions.rate_limited import RateLimitExceededError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "DomainValidationError",
    "RateLimitExceededError",
]
