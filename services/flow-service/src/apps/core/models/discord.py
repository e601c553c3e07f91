# services/flow-service/src/apps/core/models/discord.py
"""
Discord Models

Mention tags for flight information regions and the record of every
notification message rendered for a flow measure status transition.
"""

from django.db import models

from shared.common.mixins import TimestampMixin

from .flow_measure import FlowMeasureStatus


class DiscordTag(TimestampMixin, models.Model):
    """
    A mention target for a flight information region.

    `tag` is either a numeric Discord role id, rendered as a role mention,
    or a literal mention string used as-is.
    """

    flight_information_region = models.ForeignKey(
        'core.FlightInformationRegion',
        on_delete=models.CASCADE,
        related_name='discord_tags',
    )
    tag = models.CharField(max_length=255)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'discord_tags'
        ordering = ['id']
        unique_together = ['flight_information_region', 'tag']

    def __str__(self):
        return self.mention

    @property
    def mention(self) -> str:
        if self.tag.isdigit():
            return f"<@&{self.tag}>"
        return self.tag


class DiscordNotificationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SENT = 'sent', 'Sent'
    FAILED = 'failed', 'Failed'


class DiscordNotification(TimestampMixin, models.Model):
    """
    Notification rendered for one flow measure status transition.

    The payload is stored at render time so delivery retries resend the
    same message.
    """

    flow_measure = models.ForeignKey(
        'core.FlowMeasure',
        on_delete=models.CASCADE,
        related_name='discord_notifications',
    )
    type = models.CharField(max_length=20, choices=FlowMeasureStatus.choices)
    content = models.TextField(blank=True)
    embeds = models.JSONField(default=list)

    status = models.CharField(
        max_length=20,
        choices=DiscordNotificationStatus.choices,
        default=DiscordNotificationStatus.PENDING,
        db_index=True
    )
    remote_id = models.CharField(max_length=64, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.TextField(blank=True)
    retry_count = models.IntegerField(default=0)

    class Meta:
        db_table = 'discord_notifications'
        ordering = ['-created_at']
        unique_together = ['flow_measure', 'type']

    def __str__(self):
        return f"{self.flow_measure_id} - {self.get_type_display()}"

    @property
    def payload(self) -> dict:
        return {'content': self.content, 'embeds': self.embeds}
