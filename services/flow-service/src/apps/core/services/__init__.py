"""
Flow Service - Business Logic Layer.
"""
from .authorization_service import AuthorizationService
from .flow_measure_service import FlowMeasureService
from .identifier_service import IdentifierService
from .notification_service import DiscordNotificationService

__all__ = [
    'AuthorizationService',
    'FlowMeasureService',
    'IdentifierService',
    'DiscordNotificationService',
]
