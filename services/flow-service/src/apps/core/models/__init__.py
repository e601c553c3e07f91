# services/flow-service/src/apps/core/models/__init__.py
"""
Flow Service Models

Flight information regions, events, flow measures, users and roles, and
the Discord tags and notification records used to announce flow measures.
"""

from .user import (
    User,
    Role,
    RoleKey,
)
from .flight_information_region import (
    FlightInformationRegion,
)
from .event import (
    Event,
)
from .flow_measure import (
    FlowMeasure,
    FlowMeasureType,
    FlowMeasureStatus,
    FilterType,
    INTERVAL_TYPES,
    FINISHED_STATUSES,
)
from .discord import (
    DiscordTag,
    DiscordNotification,
    DiscordNotificationStatus,
)

__all__ = [
    # User
    'User',
    'Role',
    'RoleKey',
    # Region
    'FlightInformationRegion',
    # Event
    'Event',
    # Flow measure
    'FlowMeasure',
    'FlowMeasureType',
    'FlowMeasureStatus',
    'FilterType',
    'INTERVAL_TYPES',
    'FINISHED_STATUSES',
    # Discord
    'DiscordTag',
    'DiscordNotification',
    'DiscordNotificationStatus',
]
