"""
Discord notification rendering and delivery.
"""
from .colour import Colour
from .description import EventNameAndInterestedParties
from .embed import Embed, Field
from .messages import (
    FlowMeasureMessage,
    FlowMeasureNotifiedMessage,
    FlowMeasureActivatedMessage,
    FlowMeasureWithdrawnMessage,
    FlowMeasureExpiredMessage,
    message_for,
)
from .client import DiscordWebhookClient, get_default_client

__all__ = [
    'Colour',
    'EventNameAndInterestedParties',
    'Embed',
    'Field',
    'FlowMeasureMessage',
    'FlowMeasureNotifiedMessage',
    'FlowMeasureActivatedMessage',
    'FlowMeasureWithdrawnMessage',
    'FlowMeasureExpiredMessage',
    'message_for',
    'DiscordWebhookClient',
    'get_default_client',
]
