"""
Discord webhook client.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from django.conf import settings

from shared.common.clients import BaseWebhookClient, CircuitBreaker

logger = logging.getLogger(__name__)

# Shared by every default client in a worker process.
_circuit_breaker = CircuitBreaker()


class DiscordWebhookClient(BaseWebhookClient):
    """Posts notification payloads to a Discord channel webhook."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        super().__init__(
            name='discord',
            url=url or settings.DISCORD_WEBHOOK_URL,
            timeout=timeout or settings.DISCORD_WEBHOOK_TIMEOUT,
            transport=transport,
            circuit_breaker=circuit_breaker or CircuitBreaker(),
        )

    def send(self, payload: Dict[str, Any]) -> str:
        """Post a message and return the id Discord assigned to it."""
        response = self.post(payload, params={'wait': 'true'})
        return str(response.get('id', ''))


def get_default_client() -> Optional[DiscordWebhookClient]:
    """The configured client, or None when Discord delivery is disabled."""
    if not settings.DISCORD_ENABLED or not settings.DISCORD_WEBHOOK_URL:
        return None
    return DiscordWebhookClient(circuit_breaker=_circuit_breaker)
