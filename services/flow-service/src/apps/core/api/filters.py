# services/flow-service/src/apps/core/api/filters.py
"""
Flow Measure list filters
"""

from django_filters import rest_framework as filters
from django.utils import timezone

from ..models import FINISHED_STATUSES, FlowMeasure, FlowMeasureStatus, FlowMeasureType


class FlowMeasureFilter(filters.FilterSet):
    """
    Filters for the flow measure list.

    `state=active` returns measures in force right now, `state=notified`
    those announced but not yet started, `state=finished` those withdrawn
    or expired.
    """

    STATE_CHOICES = (
        ('active', 'Active'),
        ('notified', 'Notified'),
        ('finished', 'Finished'),
    )

    status = filters.MultipleChoiceFilter(choices=FlowMeasureStatus.choices)
    type = filters.MultipleChoiceFilter(choices=FlowMeasureType.choices)
    flight_information_region = filters.NumberFilter(field_name='flight_information_region_id')
    region = filters.CharFilter(
        field_name='flight_information_region__identifier',
        lookup_expr='iexact'
    )
    event = filters.NumberFilter(field_name='event_id')
    state = filters.ChoiceFilter(choices=STATE_CHOICES, method='filter_state')
    end_time_after = filters.IsoDateTimeFilter(field_name='end_time', lookup_expr='gte')
    end_time_before = filters.IsoDateTimeFilter(field_name='end_time', lookup_expr='lte')

    class Meta:
        model = FlowMeasure
        fields = ['status', 'type', 'flight_information_region', 'event']

    def filter_state(self, queryset, name, value):
        now = timezone.now()
        if value == 'active':
            return queryset.active().filter(end_time__gt=now)
        if value == 'notified':
            return queryset.notified().filter(start_time__gt=now)
        return queryset.filter(status__in=FINISHED_STATUSES)
