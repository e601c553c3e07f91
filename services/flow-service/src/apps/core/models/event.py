# services/flow-service/src/apps/core/models/event.py
"""
Event Model
"""

from datetime import datetime, timezone

from django.core.exceptions import ValidationError
from django.db import models

from shared.common.mixins import TimestampMixin


def format_event_time(value: datetime) -> str:
    """Render an instant in UTC as e.g. `May 22, 2022 14:54z`."""
    value = value.astimezone(timezone.utc)
    return f"{value:%b} {value.day}, {value:%Y %H:%M}z"


class EventQuerySet(models.QuerySet):

    def ending_after(self, moment: datetime):
        return self.filter(date_end__gt=moment)


class Event(TimestampMixin, models.Model):
    """A scheduled event hosted in a single flight information region."""

    name = models.CharField(max_length=255)
    date_start = models.DateTimeField(db_index=True)
    date_end = models.DateTimeField(db_index=True)
    flight_information_region = models.ForeignKey(
        'core.FlightInformationRegion',
        on_delete=models.PROTECT,
        related_name='events',
    )

    objects = EventQuerySet.as_manager()

    class Meta:
        db_table = 'events'
        ordering = ['date_start', 'name']

    def __str__(self):
        return self.name_date

    def clean(self):
        if self.date_start and self.date_end and self.date_end <= self.date_start:
            raise ValidationError({'date_end': 'Event must end after it starts.'})

    @property
    def name_date(self) -> str:
        return f"{self.name} [{format_event_time(self.date_start)} - {format_event_time(self.date_end)}]"
