"""
Flow Service Service Layer Tests

Tests for flow measure creation, editing and the status lifecycle.
"""

from datetime import timedelta

import pytest

from apps.core.exceptions import (
    FlowMeasureFinished,
    FlowMeasureNotFound,
    FlowMeasureValidationError,
    InvalidStatusTransition,
    RegionNotPermitted,
)
from apps.core.models import (
    DiscordNotification,
    FilterType,
    FlowMeasure,
    FlowMeasureStatus,
    FlowMeasureType,
)
from apps.core.services import FlowMeasureService, IdentifierService
from apps.core.services.identifier_service import sequence_letters


class TestSequenceLetters:
    """Test identifier letter sequences."""

    @pytest.mark.parametrize('index,letters', [
        (0, 'A'),
        (1, 'B'),
        (25, 'Z'),
        (26, 'AA'),
        (27, 'AB'),
        (701, 'ZZ'),
        (702, 'AAA'),
    ])
    def test_letters(self, index, letters):
        assert sequence_letters(index) == letters


@pytest.mark.django_db
class TestIdentifierService:
    """Test identifier generation."""

    def test_first_of_the_day(self, create_region, now):
        assert IdentifierService.generate(create_region('EGTT'), now) == 'EGTT22A'

    def test_counts_same_region_and_day(self, create_region, create_flow_measure, now):
        create_flow_measure(flight_information_region=create_region('EGTT'))
        create_flow_measure(flight_information_region=create_region('EHAA'))
        create_flow_measure(
            flight_information_region=create_region('EGTT'),
            identifier='EGTT23A',
            start_time=now + timedelta(days=1),
            end_time=now + timedelta(days=1, hours=1),
        )

        assert IdentifierService.generate(create_region('EGTT'), now) == 'EGTT22B'

    def test_skips_taken_identifiers(self, create_region, create_flow_measure, now):
        create_flow_measure(
            flight_information_region=create_region('EGTT'),
            identifier='EGTT22A',
            start_time=now - timedelta(days=31),
            end_time=now - timedelta(days=31) + timedelta(hours=1),
        )

        assert IdentifierService.generate(create_region('EGTT'), now) == 'EGTT22B'


@pytest.fixture
def create_data(create_region, now):
    """Valid data for raising a flow measure in EGTT."""
    return {
        'flight_information_region': create_region('EGTT'),
        'type': FlowMeasureType.MINIMUM_DEPARTURE_INTERVAL,
        'minutes': 3,
        'seconds': 0,
        'reason': 'Runway capacity',
        'start_time': now + timedelta(hours=1),
        'end_time': now + timedelta(hours=4),
        'additional_filters': [{'type': FilterType.ADEP.value, 'value': ['EGLL']}],
        'notified_flight_information_regions': [create_region('EHAA')],
    }


@pytest.mark.django_db
class TestFlowMeasureServiceCreate:
    """Test raising flow measures."""

    def test_create(self, flow_manager, create_data, create_region, now):
        measure = FlowMeasureService.create(flow_manager, create_data, now=now)

        assert measure.identifier == 'EGTT22A'
        assert measure.status == FlowMeasureStatus.NOTIFIED
        assert measure.user == flow_manager
        assert measure.value == 180
        assert measure.minutes == 3
        assert list(measure.notified_flight_information_regions.all()) == [create_region('EHAA')]

    def test_create_records_notified_message(self, flow_manager, create_data, now):
        measure = FlowMeasureService.create(flow_manager, create_data, now=now)

        notification = DiscordNotification.objects.get(flow_measure=measure)
        assert notification.type == FlowMeasureStatus.NOTIFIED
        assert notification.content == ''
        assert notification.embeds[0]['title'] == 'EGTT22A - Notified'

    def test_create_queues_delivery_on_commit(
        self, flow_manager, create_data, now, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks() as callbacks:
            FlowMeasureService.create(flow_manager, create_data, now=now)

        assert len(callbacks) == 1

    def test_create_outside_visible_regions(self, flow_manager, create_data, create_region, now):
        create_data['flight_information_region'] = create_region('EHAA')

        with pytest.raises(RegionNotPermitted):
            FlowMeasureService.create(flow_manager, create_data, now=now)
        assert not FlowMeasure.objects.exists()

    def test_nmt_can_create_anywhere(self, nmt_user, create_data, create_region, now):
        create_data['flight_information_region'] = create_region('LFFF')
        measure = FlowMeasureService.create(nmt_user, create_data, now=now)

        assert measure.identifier == 'LFFF22A'

    def test_invalid_data_writes_nothing(self, flow_manager, create_data, now):
        create_data['seconds'] = 99

        with pytest.raises(FlowMeasureValidationError) as excinfo:
            FlowMeasureService.create(flow_manager, create_data, now=now)

        assert 'seconds' in excinfo.value.errors
        assert not FlowMeasure.objects.exists()
        assert not DiscordNotification.objects.exists()


@pytest.mark.django_db
class TestFlowMeasureServiceUpdate:
    """Test editing flow measures."""

    def test_update_reason(self, flow_manager, create_data, now):
        measure = FlowMeasureService.create(flow_manager, create_data, now=now)
        measure = FlowMeasureService.update(flow_manager, measure, {'reason': 'Weather'}, now=now)

        measure.refresh_from_db()
        assert measure.reason == 'Weather'
        assert measure.value == 180

    def test_notified_regions_are_replaced(self, flow_manager, create_data, create_region, now):
        measure = FlowMeasureService.create(flow_manager, create_data, now=now)
        paris = create_region('LFFF')
        scottish = create_region('EGPX')

        FlowMeasureService.update(
            flow_manager, measure, {'notified_flight_information_regions': [paris, scottish]}, now=now
        )

        assert set(measure.notified_flight_information_regions.all()) == {paris, scottish}

    def test_finished_measure_cannot_change(self, flow_manager, create_flow_measure, now):
        measure = create_flow_measure(status=FlowMeasureStatus.WITHDRAWN)

        with pytest.raises(FlowMeasureFinished):
            FlowMeasureService.update(flow_manager, measure, {'reason': 'Weather'}, now=now)

    def test_update_outside_visible_regions(self, flow_manager, create_flow_measure, create_region, now):
        measure = create_flow_measure(flight_information_region=create_region('EHAA'))

        with pytest.raises(RegionNotPermitted):
            FlowMeasureService.update(flow_manager, measure, {'reason': 'Weather'}, now=now)

    def test_get_by_id_not_found(self):
        with pytest.raises(FlowMeasureNotFound):
            FlowMeasureService.get_by_id(123456)


@pytest.mark.django_db
class TestFlowMeasureLifecycle:
    """Test status transitions."""

    def test_activate(self, create_flow_measure, now):
        measure = create_flow_measure()
        FlowMeasureService.activate(measure, now)

        measure.refresh_from_db()
        assert measure.status == FlowMeasureStatus.ACTIVE
        notification = measure.discord_notifications.get()
        assert notification.type == FlowMeasureStatus.ACTIVE
        assert notification.embeds[0]['title'] == f"{measure.identifier} - Active"

    def test_withdraw(self, create_flow_measure, flow_manager, now):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        FlowMeasureService.withdraw(measure, user=flow_manager, now=now)

        measure.refresh_from_db()
        assert measure.status == FlowMeasureStatus.WITHDRAWN
        assert measure.withdrawn_at == now
        assert measure.discord_notifications.filter(type=FlowMeasureStatus.WITHDRAWN).count() == 1

    def test_withdraw_updates_given_instance(self, create_flow_measure, now):
        measure = create_flow_measure()
        FlowMeasureService.withdraw(measure, now=now)

        assert measure.status == FlowMeasureStatus.WITHDRAWN
        assert measure.is_finished

    def test_withdraw_outside_visible_regions(self, create_flow_measure, flow_manager, create_region, now):
        measure = create_flow_measure(flight_information_region=create_region('EHAA'))

        with pytest.raises(RegionNotPermitted):
            FlowMeasureService.withdraw(measure, user=flow_manager, now=now)

    @pytest.mark.parametrize('status', [FlowMeasureStatus.WITHDRAWN, FlowMeasureStatus.EXPIRED])
    def test_finished_states_are_terminal(self, create_flow_measure, now, status):
        measure = create_flow_measure(status=status)

        with pytest.raises(InvalidStatusTransition):
            FlowMeasureService.activate(measure, now)
        with pytest.raises(InvalidStatusTransition):
            FlowMeasureService.withdraw(measure, now=now)
        with pytest.raises(InvalidStatusTransition):
            FlowMeasureService.expire(measure, now)

    def test_active_cannot_be_reactivated(self, create_flow_measure, now):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)

        with pytest.raises(InvalidStatusTransition):
            FlowMeasureService.activate(measure, now)

    def test_one_notification_per_transition(self, create_flow_measure, now):
        measure = create_flow_measure()
        FlowMeasureService.activate(measure, now)
        FlowMeasureService.expire(measure, now)

        types = list(measure.discord_notifications.order_by('created_at').values_list('type', flat=True))
        assert sorted(types) == [FlowMeasureStatus.ACTIVE, FlowMeasureStatus.EXPIRED]


@pytest.mark.django_db
class TestUpdateStatuses:
    """Test the time-driven status update."""

    def test_update_statuses(self, create_flow_measure, now):
        starting = create_flow_measure(start_time=now - timedelta(minutes=5), end_time=now + timedelta(hours=1))
        missed = create_flow_measure(start_time=now - timedelta(hours=2), end_time=now - timedelta(hours=1))
        ending = create_flow_measure(
            status=FlowMeasureStatus.ACTIVE,
            start_time=now - timedelta(hours=2),
            end_time=now,
        )
        upcoming = create_flow_measure(start_time=now + timedelta(hours=1), end_time=now + timedelta(hours=2))
        withdrawn = create_flow_measure(
            status=FlowMeasureStatus.WITHDRAWN,
            start_time=now - timedelta(hours=2),
            end_time=now - timedelta(hours=1),
        )

        results = FlowMeasureService.update_statuses(now)

        assert results == {'expired': 2, 'activated': 1}
        for measure in (starting, missed, ending, upcoming, withdrawn):
            measure.refresh_from_db()
        assert starting.status == FlowMeasureStatus.ACTIVE
        assert missed.status == FlowMeasureStatus.EXPIRED
        assert ending.status == FlowMeasureStatus.EXPIRED
        assert upcoming.status == FlowMeasureStatus.NOTIFIED
        assert withdrawn.status == FlowMeasureStatus.WITHDRAWN

    def test_update_statuses_is_idempotent(self, create_flow_measure, now):
        create_flow_measure(start_time=now - timedelta(minutes=5), end_time=now + timedelta(hours=1))

        FlowMeasureService.update_statuses(now)

        assert FlowMeasureService.update_statuses(now) == {'expired': 0, 'activated': 0}
        assert DiscordNotification.objects.count() == 1

    def test_measure_changed_meanwhile_is_skipped(self, create_flow_measure, now, monkeypatch):
        withdrawn = create_flow_measure(start_time=now - timedelta(hours=2), end_time=now - timedelta(hours=1))
        missed = create_flow_measure(start_time=now - timedelta(hours=2), end_time=now - timedelta(hours=1))
        expire = FlowMeasureService.expire

        def withdraw_first_then_expire(measure, now=None):
            if measure.pk == withdrawn.pk:
                FlowMeasure.objects.filter(pk=measure.pk).update(status=FlowMeasureStatus.WITHDRAWN)
            return expire(measure, now)

        monkeypatch.setattr(FlowMeasureService, 'expire', staticmethod(withdraw_first_then_expire))

        assert FlowMeasureService.update_statuses(now) == {'expired': 1, 'activated': 0}
        withdrawn.refresh_from_db()
        missed.refresh_from_db()
        assert withdrawn.status == FlowMeasureStatus.WITHDRAWN
        assert missed.status == FlowMeasureStatus.EXPIRED
