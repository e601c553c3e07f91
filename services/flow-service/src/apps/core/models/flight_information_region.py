# services/flow-service/src/apps/core/models/flight_information_region.py
"""
Flight Information Region Model
"""

from django.core.validators import RegexValidator
from django.db import models

from shared.common.mixins import TimestampMixin


class FlightInformationRegion(TimestampMixin, models.Model):
    """
    An airspace administrative area.

    Owns events and flow measures, is notified of other regions' measures
    and carries the Discord tags pinged for those notifications.
    """

    identifier = models.CharField(
        max_length=4,
        unique=True,
        validators=[RegexValidator(r'^[A-Z]{4}$', 'Identifier must be a four letter ICAO code')],
        help_text='ICAO code, e.g. EGTT'
    )
    name = models.CharField(max_length=255)

    class Meta:
        db_table = 'flight_information_regions'
        ordering = ['identifier']

    def __str__(self):
        return self.identifier_name

    @property
    def identifier_name(self) -> str:
        return f"{self.identifier} - {self.name}"
