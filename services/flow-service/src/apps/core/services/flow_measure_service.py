"""
Flow Measure Service - Business Logic Layer.

Creates and edits flow measures and drives them through their lifecycle:

    NOTIFIED -> ACTIVE -> WITHDRAWN | EXPIRED

Every status a measure enters produces exactly one Discord notification.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from ..exceptions import (
    FlowMeasureFinished,
    FlowMeasureNotFound,
    InvalidStatusTransition,
    RegionNotPermitted,
)
from ..models import FlowMeasure, FlowMeasureStatus, User
from .authorization_service import AuthorizationService
from .flow_measure_rules import validate_flow_measure
from .identifier_service import IdentifierService
from .notification_service import DiscordNotificationService

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    FlowMeasureStatus.NOTIFIED.value: frozenset({
        FlowMeasureStatus.ACTIVE.value,
        FlowMeasureStatus.WITHDRAWN.value,
        FlowMeasureStatus.EXPIRED.value,
    }),
    FlowMeasureStatus.ACTIVE.value: frozenset({
        FlowMeasureStatus.WITHDRAWN.value,
        FlowMeasureStatus.EXPIRED.value,
    }),
    FlowMeasureStatus.WITHDRAWN.value: frozenset(),
    FlowMeasureStatus.EXPIRED.value: frozenset(),
}


class FlowMeasureService:
    """Service for managing flow measures."""

    @staticmethod
    def get_by_id(measure_id: int) -> FlowMeasure:
        try:
            return FlowMeasure.objects.select_related(
                'flight_information_region', 'event'
            ).get(id=measure_id)
        except FlowMeasure.DoesNotExist:
            raise FlowMeasureNotFound()

    @staticmethod
    @transaction.atomic
    def create(user: User, data: Dict[str, Any], now: Optional[datetime] = None) -> FlowMeasure:
        """
        Create a flow measure and queue its notified message.

        Args:
            user: The user raising the measure
            data: Submitted attributes (region and event as model instances)
            now: Current time, used to bound the allowed time window

        Returns:
            The created FlowMeasure
        """
        now = now or timezone.now()
        cleaned = validate_flow_measure(data, now)

        region = cleaned['flight_information_region']
        if not AuthorizationService.can_manage_region(user, region):
            raise RegionNotPermitted()

        notified_regions = cleaned.pop('notified_flight_information_regions', [])
        measure = FlowMeasure.objects.create(
            identifier=IdentifierService.generate(region, cleaned['start_time']),
            user=user,
            status=FlowMeasureStatus.NOTIFIED,
            **cleaned
        )
        measure.notified_flight_information_regions.set(notified_regions)

        logger.info(
            f"Created flow measure {measure.identifier}",
            extra={'flow_measure_id': measure.id, 'user_id': user.pk, 'type': measure.type}
        )

        DiscordNotificationService.notify(measure)
        return measure

    @staticmethod
    @transaction.atomic
    def update(
        user: User,
        measure: FlowMeasure,
        data: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> FlowMeasure:
        """
        Edit a flow measure that has not yet finished.

        Only editable fields may be submitted. The notified regions are
        replaced as a whole when submitted.
        """
        now = now or timezone.now()
        if measure.is_finished:
            raise FlowMeasureFinished()
        if not AuthorizationService.can_edit_flow_measure(user, measure):
            raise RegionNotPermitted()

        cleaned = validate_flow_measure(data, now, instance=measure)
        notified_regions = cleaned.pop('notified_flight_information_regions', None)
        # Fixed at creation
        cleaned.pop('start_time', None)

        for field, value in cleaned.items():
            setattr(measure, field, value)
        measure.save()

        if notified_regions is not None:
            measure.notified_flight_information_regions.set(notified_regions)

        logger.info(
            f"Updated flow measure {measure.identifier}",
            extra={'flow_measure_id': measure.id, 'user_id': user.pk, 'fields': sorted(data)}
        )
        return measure

    @staticmethod
    def _transition(
        measure: FlowMeasure,
        status: str,
        now: Optional[datetime] = None,
    ) -> FlowMeasure:
        now = now or timezone.now()
        locked = FlowMeasure.objects.select_for_update().get(pk=measure.pk)

        if status not in ALLOWED_TRANSITIONS[locked.status]:
            raise InvalidStatusTransition(
                detail=f"Flow measure {locked.identifier} cannot move from {locked.status} to {status}."
            )

        previous = locked.status
        locked.status = status
        update_fields = ['status', 'updated_at']
        if status == FlowMeasureStatus.WITHDRAWN:
            locked.withdrawn_at = now
            update_fields.append('withdrawn_at')
        locked.save(update_fields=update_fields)

        measure.status = locked.status
        measure.withdrawn_at = locked.withdrawn_at

        logger.info(
            f"Flow measure {locked.identifier} moved from {previous} to {status}",
            extra={'flow_measure_id': locked.id, 'from_status': previous, 'to_status': status}
        )

        DiscordNotificationService.notify(locked)
        return locked

    @staticmethod
    @transaction.atomic
    def activate(measure: FlowMeasure, now: Optional[datetime] = None) -> FlowMeasure:
        return FlowMeasureService._transition(measure, FlowMeasureStatus.ACTIVE, now)

    @staticmethod
    @transaction.atomic
    def withdraw(
        measure: FlowMeasure,
        user: Optional[User] = None,
        now: Optional[datetime] = None,
    ) -> FlowMeasure:
        """Withdraw a measure; a user, when given, must be able to edit it."""
        if user is not None and not AuthorizationService.can_edit_flow_measure(user, measure):
            raise RegionNotPermitted()
        return FlowMeasureService._transition(measure, FlowMeasureStatus.WITHDRAWN, now)

    @staticmethod
    @transaction.atomic
    def expire(measure: FlowMeasure, now: Optional[datetime] = None) -> FlowMeasure:
        return FlowMeasureService._transition(measure, FlowMeasureStatus.EXPIRED, now)

    @staticmethod
    def update_statuses(now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Move measures along by time.

        Measures past their end time expire first, so a measure first seen
        after its window closed goes straight to EXPIRED.
        """
        now = now or timezone.now()
        results = {'expired': 0, 'activated': 0}

        for key, due, move in (
            ('expired', FlowMeasure.objects.due_expiry(now), FlowMeasureService.expire),
            ('activated', FlowMeasure.objects.due_activation(now), FlowMeasureService.activate),
        ):
            for measure in due:
                try:
                    move(measure, now)
                except InvalidStatusTransition as e:
                    # changed since it was read, e.g. withdrawn meanwhile
                    logger.warning(
                        f"Skipped flow measure {measure.identifier}: {e.detail}",
                        extra={'flow_measure_id': measure.id}
                    )
                    continue
                results[key] += 1

        if results['expired'] or results['activated']:
            logger.info(
                f"Updated flow measure statuses: {results['activated']} activated, {results['expired']} expired",
                extra=results
            )
        return results
