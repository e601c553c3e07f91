"""
Flow Service Exceptions.
"""
from typing import Dict, List

from shared.common.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ServiceUnavailableException,
    ValidationException,
)


class FlowMeasureValidationError(ValidationException):
    """Raised with field-scoped errors before any flow measure is written."""
    default_detail = "Flow measure is invalid."
    error_code = "FLOW_MEASURE_INVALID"

    def __init__(self, errors: Dict[str, List[str]], detail: str = None):
        super().__init__(errors=errors, detail=detail)


class FlowMeasureNotFound(NotFoundException):
    """Raised when a flow measure is not found."""
    default_detail = "Flow measure not found."
    error_code = "FLOW_MEASURE_NOT_FOUND"


class RegionNotPermitted(ForbiddenException):
    """Raised when a user acts on a region outside their scope."""
    default_detail = "You may not manage flow measures for this flight information region."
    error_code = "REGION_NOT_PERMITTED"


class InvalidStatusTransition(ConflictException):
    """Raised when a flow measure cannot move to the requested status."""
    default_detail = "Flow measure cannot move to the requested status."
    error_code = "INVALID_STATUS_TRANSITION"


class FlowMeasureFinished(ConflictException):
    """Raised when editing a withdrawn or expired flow measure."""
    default_detail = "Withdrawn or expired flow measures cannot be changed."
    error_code = "FLOW_MEASURE_FINISHED"


class DiscordDeliveryFailed(ServiceUnavailableException):
    """Raised when a Discord webhook delivery fails."""
    default_detail = "Failed to deliver Discord notification."
    error_code = "DISCORD_DELIVERY_FAILED"
