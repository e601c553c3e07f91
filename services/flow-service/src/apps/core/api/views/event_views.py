# services/flow-service/src/apps/core/api/views/event_views.py
"""
Event ViewSet
"""

from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from ...capabilities import Capability
from ...models import Event
from ...permissions import HasWriteCapability
from ..serializers import EventSerializer


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for events.

    Endpoints:
    - GET /events/ - List events
    - POST /events/ - Create event
    - GET /events/{id}/ - Retrieve event
    - PATCH /events/{id}/ - Update event
    - DELETE /events/{id}/ - Delete event
    - GET /events/upcoming/ - Events that have not yet ended
    """

    queryset = Event.objects.select_related('flight_information_region')
    serializer_class = EventSerializer
    permission_classes = [HasWriteCapability]
    write_capability = Capability.MANAGE_EVENTS
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ['flight_information_region']
    search_fields = ['name']
    ordering_fields = ['date_start', 'date_end', 'name']
    ordering = ['date_start']

    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        """
        Events that have not yet ended, for selection on flow measures.

        GET /events/upcoming/
        """
        queryset = self.filter_queryset(self.get_queryset()).ending_after(timezone.now())
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
