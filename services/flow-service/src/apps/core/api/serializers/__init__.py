# services/flow-service/src/apps/core/api/serializers/__init__.py
"""
Flow Service API Serializers
"""

from .region_serializers import (
    FlightInformationRegionSerializer,
    DiscordTagSerializer,
)
from .event_serializers import EventSerializer
from .flow_measure_serializers import (
    FlowMeasureSerializer,
    FlowMeasureListSerializer,
    FlowMeasureCreateSerializer,
    FlowMeasureUpdateSerializer,
    AdditionalFilterSerializer,
)

__all__ = [
    'FlightInformationRegionSerializer',
    'DiscordTagSerializer',
    'EventSerializer',
    'FlowMeasureSerializer',
    'FlowMeasureListSerializer',
    'FlowMeasureCreateSerializer',
    'FlowMeasureUpdateSerializer',
    'AdditionalFilterSerializer',
]
