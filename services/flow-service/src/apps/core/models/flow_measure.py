# services/flow-service/src/apps/core/models/flow_measure.py
"""
Flow Measure Model

A traffic-management restriction raised by a flight information region for
a time window, optionally tied to an event and notified to other regions.
"""

from datetime import datetime
from typing import Optional

from django.conf import settings
from django.db import models

from shared.common.mixins import TimestampMixin


class FlowMeasureType(models.TextChoices):
    """Flow measure type choices."""
    MINIMUM_DEPARTURE_INTERVAL = 'minimum_departure_interval', 'Minimum Departure Interval [MDI]'
    AVERAGE_DEPARTURE_INTERVAL = 'average_departure_interval', 'Average Departure Interval [ADI]'
    PER_HOUR = 'per_hour', 'Per hour'
    MILES_IN_TRAIL = 'miles_in_trail', 'Miles In Trail [MIT]'
    MAX_IAS = 'max_ias', 'Max IAS'
    MAX_MACH = 'max_mach', 'Max Mach'
    IAS_REDUCTION = 'ias_reduction', 'IAS Reduction'
    MACH_REDUCTION = 'mach_reduction', 'Mach Reduction'
    LEVEL_CAP = 'level_cap', 'Level Cap'
    PROHIBIT = 'prohibit', 'Prohibit'
    MANDATORY_ROUTE = 'mandatory_route', 'Mandatory route'

    @property
    def description(self) -> str:
        return FLOW_MEASURE_TYPE_DESCRIPTIONS[self.value]

    @property
    def is_interval(self) -> bool:
        return self.value in INTERVAL_TYPES


FLOW_MEASURE_TYPE_DESCRIPTIONS = {
    FlowMeasureType.MINIMUM_DEPARTURE_INTERVAL.value:
        'A minimum interval between successive departures from the same airport.',
    FlowMeasureType.AVERAGE_DEPARTURE_INTERVAL.value:
        'An interval between departures averaged over a rolling period.',
    FlowMeasureType.PER_HOUR.value: 'A maximum number of flights per hour.',
    FlowMeasureType.MILES_IN_TRAIL.value: 'A minimum distance in nautical miles between successive flights.',
    FlowMeasureType.MAX_IAS.value: 'A maximum indicated airspeed in knots.',
    FlowMeasureType.MAX_MACH.value: 'A maximum mach number, in hundredths.',
    FlowMeasureType.IAS_REDUCTION.value: 'A reduction in indicated airspeed in knots.',
    FlowMeasureType.MACH_REDUCTION.value: 'A reduction in mach number, in hundredths.',
    FlowMeasureType.LEVEL_CAP.value: 'A maximum cruising flight level.',
    FlowMeasureType.PROHIBIT.value: 'Matching flights are prohibited.',
    FlowMeasureType.MANDATORY_ROUTE.value: 'Matching flights must file one of the given routes.',
}

INTERVAL_TYPES = frozenset({
    FlowMeasureType.MINIMUM_DEPARTURE_INTERVAL.value,
    FlowMeasureType.AVERAGE_DEPARTURE_INTERVAL.value,
})


class FlowMeasureStatus(models.TextChoices):
    """Flow measure lifecycle states."""
    NOTIFIED = 'notified', 'Notified'
    ACTIVE = 'active', 'Active'
    WITHDRAWN = 'withdrawn', 'Withdrawn'
    EXPIRED = 'expired', 'Expired'


FINISHED_STATUSES = frozenset({
    FlowMeasureStatus.WITHDRAWN.value,
    FlowMeasureStatus.EXPIRED.value,
})


class FilterType(models.TextChoices):
    """Additional filter types; labels are the notification field names."""
    ADEP = 'adep', 'Departure Airports'
    ADES = 'ades', 'Arrival Airports'
    LEVEL_ABOVE = 'level_above', 'Level at or Above'
    LEVEL_BELOW = 'level_below', 'Level at or Below'
    LEVEL = 'level', 'At Levels'
    WAYPOINT = 'waypoint', 'Via Waypoint'
    MEMBER_EVENT = 'member_event', 'Members of Event'
    MEMBER_NOT_EVENT = 'member_not_event', 'Non-Members of Event'


class FlowMeasureQuerySet(models.QuerySet):

    def notified(self):
        return self.filter(status=FlowMeasureStatus.NOTIFIED)

    def active(self):
        return self.filter(status=FlowMeasureStatus.ACTIVE)

    def unfinished(self):
        return self.exclude(status__in=FINISHED_STATUSES)

    def due_activation(self, now: datetime):
        return self.notified().filter(start_time__lte=now, end_time__gt=now)

    def due_expiry(self, now: datetime):
        return self.unfinished().filter(end_time__lte=now)


class FlowMeasure(TimestampMixin, models.Model):
    """
    Flow measure.

    For interval types `value` holds the interval in seconds; `minutes` and
    `seconds` are derived from it.
    """

    identifier = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='flow_measures',
    )
    flight_information_region = models.ForeignKey(
        'core.FlightInformationRegion',
        on_delete=models.PROTECT,
        related_name='flow_measures',
    )
    event = models.ForeignKey(
        'core.Event',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='flow_measures',
    )

    type = models.CharField(
        max_length=50,
        choices=FlowMeasureType.choices,
        db_index=True
    )
    status = models.CharField(
        max_length=20,
        choices=FlowMeasureStatus.choices,
        default=FlowMeasureStatus.NOTIFIED,
        db_index=True
    )
    value = models.PositiveIntegerField(null=True, blank=True)
    mandatory_route = models.JSONField(default=list, blank=True)
    reason = models.TextField()
    additional_filters = models.JSONField(
        default=list,
        blank=True,
        help_text='Ordered list of {"type": ..., "value": ...} filters'
    )

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)
    withdrawn_at = models.DateTimeField(null=True, blank=True)

    notified_flight_information_regions = models.ManyToManyField(
        'core.FlightInformationRegion',
        related_name='notified_flow_measures',
        blank=True,
    )

    objects = FlowMeasureQuerySet.as_manager()

    class Meta:
        db_table = 'flow_measures'
        ordering = ['start_time', 'identifier']
        indexes = [
            models.Index(fields=['status', 'start_time']),
            models.Index(fields=['status', 'end_time']),
        ]

    def __str__(self):
        return self.identifier

    @property
    def measure_type(self) -> FlowMeasureType:
        return FlowMeasureType(self.type)

    @property
    def is_interval(self) -> bool:
        return self.type in INTERVAL_TYPES

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    @property
    def minutes(self) -> Optional[int]:
        if not self.is_interval or self.value is None:
            return None
        return self.value // 60

    @property
    def seconds(self) -> Optional[int]:
        if not self.is_interval or self.value is None:
            return None
        return self.value % 60
