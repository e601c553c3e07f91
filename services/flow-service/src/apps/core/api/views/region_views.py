# services/flow-service/src/apps/core/api/views/region_views.py
"""
Flight Information Region and Discord Tag ViewSets
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.filters import OrderingFilter, SearchFilter

from ...capabilities import Capability
from ...models import DiscordTag, FlightInformationRegion
from ...permissions import HasWriteCapability
from ..serializers import DiscordTagSerializer, FlightInformationRegionSerializer

logger = logging.getLogger(__name__)


class FlightInformationRegionViewSet(viewsets.ModelViewSet):
    """
    ViewSet for flight information regions.

    Endpoints:
    - GET /flight-information-regions/ - List regions
    - POST /flight-information-regions/ - Create region
    - GET /flight-information-regions/{id}/ - Retrieve region
    - PATCH /flight-information-regions/{id}/ - Update region
    - DELETE /flight-information-regions/{id}/ - Delete region
    """

    queryset = FlightInformationRegion.objects.all()
    serializer_class = FlightInformationRegionSerializer
    permission_classes = [HasWriteCapability]
    write_capability = Capability.MANAGE_REGIONS
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ['identifier', 'name']
    ordering_fields = ['identifier', 'name']
    ordering = ['identifier']

    def perform_create(self, serializer):
        region = serializer.save()
        logger.info(f"Flight information region {region.identifier} created")


class DiscordTagViewSet(viewsets.ModelViewSet):
    """ViewSet for Discord mention tags of flight information regions."""

    queryset = DiscordTag.objects.select_related('flight_information_region')
    serializer_class = DiscordTagSerializer
    permission_classes = [HasWriteCapability]
    write_capability = Capability.MANAGE_REGIONS
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['flight_information_region']
