"""
Identifier Service.

Generates flow measure identifiers of the form `{FIR}{DD}{letters}`, e.g.
EGTT22A for the first EGTT measure starting on the 22nd.
"""
import logging
from datetime import datetime, timezone

from ..models import FlightInformationRegion, FlowMeasure

logger = logging.getLogger(__name__)


def sequence_letters(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


class IdentifierService:

    @staticmethod
    def generate(region: FlightInformationRegion, start_time: datetime) -> str:
        start = start_time.astimezone(timezone.utc)
        prefix = f"{region.identifier}{start:%d}"
        index = FlowMeasure.objects.filter(
            flight_information_region=region,
            start_time__date=start.date(),
        ).count()

        identifier = prefix + sequence_letters(index)
        while FlowMeasure.objects.filter(identifier=identifier).exists():
            index += 1
            identifier = prefix + sequence_letters(index)

        return identifier
