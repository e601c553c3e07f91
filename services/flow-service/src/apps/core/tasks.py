# services/flow-service/src/apps/core/tasks.py
"""
Celery Tasks for Flow Service

- Delivery of recorded Discord notifications
- Time-driven flow measure status updates (beat)
- Re-queueing of failed deliveries (beat)
"""

import logging
from typing import Any, Dict

from celery import shared_task
from django.conf import settings

from .constants import DISCORD_RETRY_BACKOFF_MULTIPLIER, DISCORD_RETRY_DELAY_SECONDS
from .exceptions import DiscordDeliveryFailed

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=DISCORD_RETRY_DELAY_SECONDS)
def send_discord_notification(self, notification_id: int) -> Dict[str, Any]:
    """
    Deliver a recorded Discord notification.

    Args:
        notification_id: ID of the DiscordNotification to deliver

    Returns:
        Dict with send result
    """
    from .models import DiscordNotification
    from .services import DiscordNotificationService

    try:
        notification = DiscordNotification.objects.select_related('flow_measure').get(id=notification_id)
    except DiscordNotification.DoesNotExist:
        logger.error(f"Discord notification not found: {notification_id}")
        return {'success': False, 'error': 'Notification not found'}

    try:
        sent = DiscordNotificationService.deliver(notification)
    except DiscordDeliveryFailed as e:
        if self.request.retries < self.max_retries:
            countdown = DISCORD_RETRY_DELAY_SECONDS * (DISCORD_RETRY_BACKOFF_MULTIPLIER ** self.request.retries)
            raise self.retry(exc=e, countdown=countdown)
        return {'success': False, 'error': str(e.detail)}

    if not sent:
        return {'success': False, 'error': 'Discord delivery disabled'}

    return {'success': True, 'remote_id': notification.remote_id}


@shared_task
def update_flow_measure_statuses() -> Dict[str, int]:
    """
    Activate and expire flow measures by time.
    Should be run every minute via celery beat.
    """
    from .services import FlowMeasureService

    return FlowMeasureService.update_statuses()


@shared_task
def retry_failed_discord_notifications() -> Dict[str, int]:
    """
    Re-queue failed Discord notifications that have retries left.
    Should be run periodically via celery beat.
    """
    from .services import DiscordNotificationService

    queued = 0
    for notification in DiscordNotificationService.get_failed(settings.DISCORD_MAX_RETRIES):
        send_discord_notification.delay(notification.id)
        queued += 1

    if queued:
        logger.info(f"Re-queued {queued} failed Discord notifications")
    return {'queued': queued}
