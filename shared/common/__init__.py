# Shared Common Library for the Flow Measure Management System
# This package contains shared exceptions, middleware, model mixins
# and outbound HTTP clients used by the services.

__version__ = "1.0.0"

# Export commonly used components
from .exceptions import (
    BaseAPIException,
    ValidationException,
    ForbiddenException,
    NotFoundException,
    ConflictException,
    ServiceUnavailableException,
)

from .clients import (
    CircuitBreaker,
    CircuitBreakerError,
    BaseWebhookClient,
)

__all__ = [
    # Version
    '__version__',

    # Exceptions
    'BaseAPIException',
    'ValidationException',
    'ForbiddenException',
    'NotFoundException',
    'ConflictException',
    'ServiceUnavailableException',

    # Clients
    'CircuitBreaker',
    'CircuitBreakerError',
    'BaseWebhookClient',
]
