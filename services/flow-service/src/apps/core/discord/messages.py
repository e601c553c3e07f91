"""
Flow measure notification messages.

One message class per status a flow measure can move into. Messages are
pure reads of the flow measure's state, so rendering twice gives the same
payload.
"""
from typing import Any, Dict, List, Type

from ..models import FlowMeasure, FlowMeasureStatus
from .colour import Colour
from .description import EventNameAndInterestedParties
from .embed import Embed
from .fields import flow_measure_fields


class FlowMeasureMessage:
    """Base notification message for a flow measure."""

    status: FlowMeasureStatus
    colour: Colour

    def __init__(self, measure: FlowMeasure):
        self.measure = measure

    def content(self) -> str:
        return ''

    def title(self) -> str:
        return f"{self.measure.identifier} - {self.status.label}"

    def embeds(self) -> List[Embed]:
        return [
            Embed(
                title=self.title(),
                colour=self.colour,
                description=EventNameAndInterestedParties(self.measure).description(),
                fields=flow_measure_fields(self.measure),
            )
        ]

    def to_payload(self) -> Dict[str, Any]:
        return {
            'content': self.content(),
            'embeds': [embed.to_dict() for embed in self.embeds()],
        }


class FlowMeasureNotifiedMessage(FlowMeasureMessage):
    status = FlowMeasureStatus.NOTIFIED
    colour = Colour.NOTIFIED


class FlowMeasureActivatedMessage(FlowMeasureMessage):
    status = FlowMeasureStatus.ACTIVE
    colour = Colour.ACTIVATED


class FlowMeasureWithdrawnMessage(FlowMeasureMessage):
    status = FlowMeasureStatus.WITHDRAWN
    colour = Colour.WITHDRAWN


class FlowMeasureExpiredMessage(FlowMeasureMessage):
    status = FlowMeasureStatus.EXPIRED
    colour = Colour.EXPIRED


MESSAGES_BY_STATUS: Dict[str, Type[FlowMeasureMessage]] = {
    message.status.value: message
    for message in (
        FlowMeasureNotifiedMessage,
        FlowMeasureActivatedMessage,
        FlowMeasureWithdrawnMessage,
        FlowMeasureExpiredMessage,
    )
}


def message_for(measure: FlowMeasure, status: str = None) -> FlowMeasureMessage:
    """Build the message announcing `measure` in `status` (default: its current status)."""
    return MESSAGES_BY_STATUS[str(status or measure.status)](measure)
