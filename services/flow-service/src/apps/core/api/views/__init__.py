# services/flow-service/src/apps/core/api/views/__init__.py
"""
Flow Service API Views
"""

from .region_views import FlightInformationRegionViewSet, DiscordTagViewSet
from .event_views import EventViewSet
from .flow_measure_views import FlowMeasureViewSet

__all__ = [
    'FlightInformationRegionViewSet',
    'DiscordTagViewSet',
    'EventViewSet',
    'FlowMeasureViewSet',
]
