# shared/common/clients.py
"""
Outbound webhook client with a circuit breaker.
"""

import time
import logging
from typing import Dict, Any, Optional

import httpx

logger = logging.getLogger(__name__)


class CircuitBreakerError(Exception):
    """Raised instead of calling an endpoint whose circuit is open."""


class CircuitBreaker:
    """
    Stops calls to a webhook after repeated failures.

    ``closed`` lets every call through. After ``failure_threshold`` failures
    the circuit is ``open`` and calls are refused until ``open_until``; the
    next call is then a ``half_open`` probe, and ``success_threshold``
    successful probes close the circuit again. ``hold_open`` opens it for an
    explicit period, e.g. a rate limit window announced by the endpoint.
    """

    CLOSED = 'closed'
    OPEN = 'open'
    HALF_OPEN = 'half_open'

    def __init__(
        self,
        failure_threshold: int = 5,
        success_threshold: int = 2,
        timeout: int = 30
    ):
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.timeout = timeout
        self.state = self.CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.open_until = 0.0

    def can_execute(self) -> bool:
        if self.state == self.OPEN:
            if time.monotonic() < self.open_until:
                return False
            self.state = self.HALF_OPEN
            self.success_count = 0
        return True

    def record_success(self):
        if self.state == self.HALF_OPEN:
            self.success_count += 1
            if self.success_count < self.success_threshold:
                return
            logger.info("Circuit breaker closed")
        self.state = self.CLOSED
        self.failure_count = 0

    def record_failure(self):
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.hold_open(self.timeout)
            logger.warning(f"Circuit breaker opened after {self.failure_count} failures")

    def hold_open(self, seconds: float):
        self.state = self.OPEN
        self.open_until = max(self.open_until, time.monotonic() + seconds)


def retry_after_seconds(response: httpx.Response) -> Optional[float]:
    """Seconds a 429 response asks the caller to wait, if it says."""
    value = response.headers.get('Retry-After')
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class BaseWebhookClient:
    """
    Posts JSON payloads to a single webhook URL.

    Pass ``transport`` (e.g. ``httpx.MockTransport``) to run without network.
    """

    def __init__(
        self,
        name: str,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.name = name
        self.url = url
        self.timeout = httpx.Timeout(timeout, connect=5.0)
        self.transport = transport
        self.circuit_breaker = circuit_breaker or CircuitBreaker()

    def post(self, data: Dict[str, Any], params: Dict = None) -> Dict:
        """POST ``data`` and return the decoded response body, ``{}`` if empty."""
        if not self.circuit_breaker.can_execute():
            raise CircuitBreakerError(f"Circuit breaker open for {self.name}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, params=params, json=data)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                f"{self.name} webhook returned {status_code}",
                extra={'webhook': self.name, 'status_code': status_code}
            )
            wait = retry_after_seconds(e.response) if status_code == 429 else None
            if wait is not None:
                self.circuit_breaker.hold_open(wait)
            elif status_code >= 500 or status_code == 429:
                self.circuit_breaker.record_failure()
            raise
        except httpx.RequestError as e:
            logger.error(f"{self.name} webhook unreachable: {e}", extra={'webhook': self.name})
            self.circuit_breaker.record_failure()
            raise

        self.circuit_breaker.record_success()
        return response.json() if response.content else {}
