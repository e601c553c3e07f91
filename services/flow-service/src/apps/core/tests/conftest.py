"""
Pytest Configuration and Fixtures

Shared fixtures for flow service tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from apps.core.models import (
    DiscordTag,
    Event,
    FilterType,
    FlightInformationRegion,
    FlowMeasure,
    FlowMeasureStatus,
    FlowMeasureType,
    RoleKey,
    User,
)

REGION_NAMES = {
    'EGTT': 'London',
    'EGPX': 'Scottish',
    'EHAA': 'Amsterdam',
    'LFFF': 'Paris',
}


@pytest.fixture
def now():
    """A fixed point in time all tests measure against."""
    return datetime(2022, 5, 22, 14, 54, 23, tzinfo=timezone.utc)


@pytest.fixture
def create_region(db):
    """Factory for flight information regions."""
    def _create_region(identifier='EGTT', name=None):
        region, _ = FlightInformationRegion.objects.get_or_create(
            identifier=identifier,
            defaults={'name': name or REGION_NAMES.get(identifier, identifier)},
        )
        return region
    return _create_region


@pytest.fixture
def create_user(db):
    """Factory for users with a role."""
    counter = {'id': 1203532}

    def _create_user(role_key=RoleKey.FLOW_MANAGER, regions=(), name='Test User'):
        counter['id'] += 1
        user = User.objects.create_user(id=counter['id'], name=name, role_key=role_key)
        if regions:
            user.flight_information_regions.set(regions)
        return user
    return _create_user


@pytest.fixture
def create_event(db, create_region, now):
    """Factory for events."""
    def _create_event(name='Cross the Pond', region=None, date_start=None, date_end=None):
        return Event.objects.create(
            name=name,
            flight_information_region=region or create_region('EGTT'),
            date_start=date_start or now,
            date_end=date_end or now + timedelta(hours=6),
        )
    return _create_event


@pytest.fixture
def create_discord_tag(db):
    """Factory for Discord mention tags."""
    def _create_discord_tag(region, tag='1234567890', description=''):
        return DiscordTag.objects.create(
            flight_information_region=region,
            tag=tag,
            description=description,
        )
    return _create_discord_tag


@pytest.fixture
def create_flow_measure(db, create_region, now):
    """
    Factory for flow measures written straight to the database.

    Defaults to a 2 minute MDI out of EG** into EHAM at or below FL220.
    """
    counter = {'n': 0}

    def _create_flow_measure(**kwargs):
        counter['n'] += 1
        notified_regions = kwargs.pop('notified_flight_information_regions', [])
        region = kwargs.pop('flight_information_region', None) or create_region('EGTT')
        attributes = {
            'identifier': f"{region.identifier}22{chr(ord('A') + counter['n'] - 1)}",
            'flight_information_region': region,
            'type': FlowMeasureType.MINIMUM_DEPARTURE_INTERVAL,
            'status': FlowMeasureStatus.NOTIFIED,
            'value': 120,
            'reason': 'Due to congestion',
            'start_time': now,
            'end_time': now.replace(hour=16, minute=37),
            'additional_filters': [
                {'type': FilterType.ADEP.value, 'value': ['EG**']},
                {'type': FilterType.ADES.value, 'value': ['EHAM']},
                {'type': FilterType.LEVEL_BELOW.value, 'value': 220},
            ],
        }
        attributes.update(kwargs)
        measure = FlowMeasure.objects.create(**attributes)
        measure.notified_flight_information_regions.set(notified_regions)
        return measure
    return _create_flow_measure


@pytest.fixture
def api_client():
    """Create API client."""
    return APIClient()


@pytest.fixture
def flow_manager(create_user, create_region):
    """A flow manager responsible for EGTT and EGPX."""
    return create_user(
        role_key=RoleKey.FLOW_MANAGER,
        regions=[create_region('EGTT'), create_region('EGPX')],
    )


@pytest.fixture
def nmt_user(create_user):
    return create_user(role_key=RoleKey.NMT, name='NMT User')


@pytest.fixture
def authenticated_client(api_client, flow_manager):
    """API client authenticated as the flow manager."""
    api_client.force_authenticate(user=flow_manager)
    api_client.user = flow_manager
    return api_client
