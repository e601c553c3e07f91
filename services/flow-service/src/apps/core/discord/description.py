"""
Embed descriptions for flow measure notifications.
"""
from typing import List

from ..constants import INTERESTED_PARTIES_PREFIX
from ..models import FlowMeasure


class EventNameAndInterestedParties:
    """
    Describes a flow measure by its event and the parties to notify.

    The event name (if any) comes first, followed by the mentions of every
    notified region's Discord tags. A notified region without tags is
    listed by its identifier instead.
    """

    def __init__(self, measure: FlowMeasure):
        self.measure = measure

    def description(self) -> str:
        parts = []
        if self.measure.event_id is not None:
            parts.append(self.measure.event.name)

        parties = self.interested_parties()
        if parties:
            parts.append(INTERESTED_PARTIES_PREFIX + ' '.join(parties))

        return '\n\n'.join(parts)

    def interested_parties(self) -> List[str]:
        parties: List[str] = []
        regions = self.measure.notified_flight_information_regions.order_by('identifier').prefetch_related(
            'discord_tags'
        )
        for region in regions:
            mentions = [tag.mention for tag in region.discord_tags.all()] or [region.identifier]
            for mention in mentions:
                if mention not in parties:
                    parties.append(mention)
        return parties
