"""
Discord Notification Service.

Renders flow measure status messages, records them and hands them to the
Discord webhook for delivery.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from shared.common.clients import CircuitBreakerError

from ..discord import DiscordWebhookClient, get_default_client, message_for
from ..exceptions import DiscordDeliveryFailed
from ..models import (
    DiscordNotification,
    DiscordNotificationStatus,
    FlowMeasure,
)

logger = logging.getLogger(__name__)


class DiscordNotificationService:
    """Service for Discord notifications about flow measures."""

    @staticmethod
    def render(measure: FlowMeasure, status: Optional[str] = None) -> Dict[str, Any]:
        """Render the payload announcing `measure` in `status` (default: current status)."""
        return message_for(measure, status).to_payload()

    @staticmethod
    def notify(measure: FlowMeasure) -> DiscordNotification:
        """
        Record the message for the measure's current status and queue it.

        Only one notification exists per (measure, status); repeated calls
        return the existing record without queueing it again.
        """
        from ..tasks import send_discord_notification

        payload = DiscordNotificationService.render(measure)
        notification, created = DiscordNotification.objects.get_or_create(
            flow_measure=measure,
            type=measure.status,
            defaults={
                'content': payload['content'],
                'embeds': payload['embeds'],
            },
        )

        if created:
            logger.info(
                f"Queued {measure.status} notification for flow measure {measure.identifier}",
                extra={'flow_measure_id': measure.id, 'notification_id': notification.id}
            )
            transaction.on_commit(lambda: send_discord_notification.delay(notification.id))

        return notification

    @staticmethod
    def deliver(
        notification: DiscordNotification,
        client: Optional[DiscordWebhookClient] = None,
    ) -> bool:
        """
        Send a recorded notification.

        Returns True once the notification has been sent, False when Discord
        delivery is disabled. Raises DiscordDeliveryFailed on failure.
        """
        if notification.status == DiscordNotificationStatus.SENT:
            return True

        client = client or get_default_client()
        if client is None:
            logger.info(f"Discord delivery disabled, notification {notification.id} left pending")
            return False

        try:
            remote_id = client.send(notification.payload)
        except (httpx.HTTPError, CircuitBreakerError) as e:
            notification.status = DiscordNotificationStatus.FAILED
            notification.failure_reason = str(e)
            notification.retry_count += 1
            notification.save(update_fields=['status', 'failure_reason', 'retry_count', 'updated_at'])
            logger.error(f"Failed to deliver Discord notification {notification.id}: {e}")
            raise DiscordDeliveryFailed(detail=f"Discord delivery failed: {e}") from e

        notification.status = DiscordNotificationStatus.SENT
        notification.remote_id = remote_id
        notification.sent_at = timezone.now()
        notification.failure_reason = ''
        notification.save(update_fields=['status', 'remote_id', 'sent_at', 'failure_reason', 'updated_at'])

        logger.info(
            f"Delivered Discord notification {notification.id}",
            extra={'remote_id': remote_id}
        )
        return True

    @staticmethod
    def get_failed(max_retries: int) -> QuerySet[DiscordNotification]:
        return DiscordNotification.objects.filter(
            status=DiscordNotificationStatus.FAILED,
            retry_count__lt=max_retries,
        )

