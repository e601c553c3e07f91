# services/flow-service/src/apps/core/api/views/flow_measure_views.py
"""
Flow Measure ViewSet

API endpoints for raising, editing and withdrawing flow measures.
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from ...capabilities import Capability
from ...models import FlowMeasure
from ...permissions import HasWriteCapability
from ...services import DiscordNotificationService, FlowMeasureService
from ..filters import FlowMeasureFilter
from ..serializers import (
    FlowMeasureCreateSerializer,
    FlowMeasureListSerializer,
    FlowMeasureSerializer,
    FlowMeasureUpdateSerializer,
)

logger = logging.getLogger(__name__)


class FlowMeasureViewSet(viewsets.ModelViewSet):
    """
    ViewSet for flow measures.

    Endpoints:
    - GET /flow-measures/ - List flow measures
    - POST /flow-measures/ - Raise a flow measure
    - GET /flow-measures/{id}/ - Retrieve flow measure
    - PATCH /flow-measures/{id}/ - Edit flow measure
    - DELETE /flow-measures/{id}/ - Withdraw flow measure
    - POST /flow-measures/{id}/withdraw/ - Withdraw flow measure
    - GET /flow-measures/{id}/message/ - Preview the Discord message
    """

    permission_classes = [HasWriteCapability]
    write_capability = Capability.MANAGE_FLOW_MEASURES
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = FlowMeasureFilter
    search_fields = ['identifier', 'reason']
    ordering_fields = ['start_time', 'end_time', 'identifier', 'created_at']
    ordering = ['start_time']

    def get_queryset(self):
        return FlowMeasure.objects.select_related(
            'flight_information_region', 'event'
        ).prefetch_related('notified_flight_information_regions')

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'create':
            return FlowMeasureCreateSerializer
        elif self.action == 'partial_update':
            return FlowMeasureUpdateSerializer
        elif self.action == 'list':
            return FlowMeasureListSerializer
        return FlowMeasureSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        measure = FlowMeasureService.create(request.user, serializer.validated_data)

        return Response(
            FlowMeasureSerializer(measure).data,
            status=status.HTTP_201_CREATED
        )

    def partial_update(self, request, *args, **kwargs):
        measure = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        measure = FlowMeasureService.update(request.user, measure, serializer.validated_data)

        return Response(FlowMeasureSerializer(measure).data)

    def destroy(self, request, *args, **kwargs):
        """Flow measures are withdrawn, never deleted."""
        measure = self.get_object()
        FlowMeasureService.withdraw(measure, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def withdraw(self, request, pk=None):
        """
        Withdraw a flow measure.

        POST /flow-measures/{id}/withdraw/
        """
        measure = FlowMeasureService.withdraw(self.get_object(), user=request.user)
        logger.info(f"Flow measure {measure.identifier} withdrawn via API by user {request.user.pk}")
        return Response(FlowMeasureSerializer(measure).data)

    @action(detail=True, methods=['get'])
    def message(self, request, pk=None):
        """
        Preview the Discord message for the measure's current status.

        GET /flow-measures/{id}/message/
        """
        return Response(DiscordNotificationService.render(self.get_object()))
