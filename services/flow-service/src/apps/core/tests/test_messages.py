"""
Discord Message Tests

Tests for the flow measure notification messages and their embed fields.
"""

from datetime import timedelta, timezone

import pytest

from apps.core.constants import ZERO_WIDTH_SPACE
from apps.core.discord import (
    Colour,
    FlowMeasureActivatedMessage,
    FlowMeasureExpiredMessage,
    FlowMeasureNotifiedMessage,
    FlowMeasureWithdrawnMessage,
    message_for,
)
from apps.core.discord.fields import balance_inline_rows, format_interval
from apps.core.discord.embed import Field
from apps.core.models import FilterType, FlowMeasureStatus, FlowMeasureType


def _fields(payload):
    return [(f['name'], f['value'], f['inline']) for f in payload['embeds'][0]['fields']]


@pytest.mark.django_db
class TestFlowMeasureActivatedMessage:
    """Test the activated message."""

    def test_content_is_empty(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        assert FlowMeasureActivatedMessage(measure).content() == ''

    def test_single_embed(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        payload = FlowMeasureActivatedMessage(measure).to_payload()

        assert payload['content'] == ''
        assert len(payload['embeds']) == 1

    def test_embed_title_and_colour(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        embed = FlowMeasureActivatedMessage(measure).to_payload()['embeds'][0]

        assert embed['title'] == f"{measure.identifier} - Active"
        assert embed['color'] == Colour.ACTIVATED.value

    def test_embed_fields(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        payload = FlowMeasureActivatedMessage(measure).to_payload()

        assert _fields(payload) == [
            ('Minimum Departure Interval [MDI]', '2 Minutes', True),
            ('Start Time', '22/05 1454Z', True),
            ('End Time', '1637Z', True),
            ('Departure Airports', 'EG**', True),
            ('Arrival Airports', 'EHAM', True),
            (ZERO_WIDTH_SPACE, ZERO_WIDTH_SPACE, True),
            ('Level at or Below', '220', False),
            ('Reason', 'Due to congestion', False),
        ]

    def test_rendering_is_deterministic(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.ACTIVE)
        message = FlowMeasureActivatedMessage(measure)

        assert message.to_payload() == message.to_payload()


@pytest.mark.django_db
class TestMessageTitlesAndColours:
    """Test each status message's title and colour."""

    @pytest.mark.parametrize('message_class,title,colour', [
        (FlowMeasureNotifiedMessage, 'Notified', Colour.NOTIFIED),
        (FlowMeasureActivatedMessage, 'Active', Colour.ACTIVATED),
        (FlowMeasureWithdrawnMessage, 'Withdrawn', Colour.WITHDRAWN),
        (FlowMeasureExpiredMessage, 'Expired', Colour.EXPIRED),
    ])
    def test_title_and_colour(self, create_flow_measure, message_class, title, colour):
        measure = create_flow_measure()
        embed = message_class(measure).embeds()[0]

        assert embed.title == f"{measure.identifier} - {title}"
        assert embed.colour == colour

    def test_message_for_uses_current_status(self, create_flow_measure):
        measure = create_flow_measure(status=FlowMeasureStatus.WITHDRAWN)
        assert isinstance(message_for(measure), FlowMeasureWithdrawnMessage)

    def test_message_for_explicit_status(self, create_flow_measure):
        measure = create_flow_measure()
        assert isinstance(message_for(measure, FlowMeasureStatus.EXPIRED), FlowMeasureExpiredMessage)


@pytest.mark.django_db
class TestHeadlineField:
    """Test the type-specific headline field."""

    def test_interval_with_seconds(self, create_flow_measure):
        measure = create_flow_measure(value=150)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[0] == ('Minimum Departure Interval [MDI]', '2 Minutes 30 Seconds', True)

    def test_average_departure_interval(self, create_flow_measure):
        measure = create_flow_measure(type=FlowMeasureType.AVERAGE_DEPARTURE_INTERVAL, value=300)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[0] == ('Average Departure Interval [ADI]', '5 Minutes', True)

    def test_level_cap_value(self, create_flow_measure):
        measure = create_flow_measure(type=FlowMeasureType.LEVEL_CAP, value=240)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[0] == ('Level Cap', '240', True)

    def test_prohibit(self, create_flow_measure):
        measure = create_flow_measure(type=FlowMeasureType.PROHIBIT, value=None)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[0] == ('Prohibit', 'Prohibited', True)

    def test_mandatory_route(self, create_flow_measure):
        measure = create_flow_measure(
            type=FlowMeasureType.MANDATORY_ROUTE,
            value=None,
            mandatory_route=['LOGAN UL620', 'DOGAL UN546'],
        )
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[0] == ('Mandatory route', 'LOGAN UL620\nDOGAL UN546', True)

    def test_mandatory_route_without_routes_fails(self, create_flow_measure):
        measure = create_flow_measure(type=FlowMeasureType.MANDATORY_ROUTE, value=None, mandatory_route=[])
        with pytest.raises(ValueError):
            FlowMeasureNotifiedMessage(measure).to_payload()

    def test_missing_value_fails(self, create_flow_measure):
        measure = create_flow_measure(type=FlowMeasureType.PER_HOUR, value=None)
        with pytest.raises(ValueError):
            FlowMeasureNotifiedMessage(measure).to_payload()

    def test_format_interval(self):
        assert format_interval(2, 0) == '2 Minutes'
        assert format_interval(0, 45) == '0 Minutes 45 Seconds'


@pytest.mark.django_db
class TestTimeAndFilterFields:
    """Test time and filter fields."""

    def test_end_time_on_another_day_includes_date(self, create_flow_measure, now):
        measure = create_flow_measure(end_time=now + timedelta(days=1))
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())
        assert fields[2] == ('End Time', '23/05 1454Z', True)

    def test_end_time_same_utc_day_in_another_offset(self, create_flow_measure, now):
        # 23/05 01:30 at +02:00 is still 22/05 in UTC
        end_time = (now.replace(hour=23, minute=30)).astimezone(timezone(timedelta(hours=2)))
        measure = create_flow_measure(end_time=end_time)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert end_time.day == 23
        assert fields[2] == ('End Time', '2330Z', True)

    def test_end_time_next_utc_day_in_another_offset(self, create_flow_measure, now):
        # 22/05 20:30 at -04:00 is already 23/05 in UTC
        end_time = (now + timedelta(days=1)).replace(hour=0, minute=30).astimezone(timezone(timedelta(hours=-4)))
        measure = create_flow_measure(end_time=end_time)
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert end_time.day == 22
        assert fields[2] == ('End Time', '23/05 0030Z', True)

    def test_no_filters(self, create_flow_measure):
        measure = create_flow_measure(additional_filters=[])
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert [name for name, _, _ in fields] == [
            'Minimum Departure Interval [MDI]',
            'Start Time',
            'End Time',
            'Reason',
        ]

    def test_filters_keep_their_order(self, create_flow_measure):
        measure = create_flow_measure(additional_filters=[
            {'type': FilterType.ADES.value, 'value': ['EHAM', 'EHRD']},
            {'type': FilterType.ADEP.value, 'value': ['EG**']},
        ])
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert fields[3] == ('Arrival Airports', 'EHAM, EHRD', True)
        assert fields[4] == ('Departure Airports', 'EG**', True)
        assert fields[5] == (ZERO_WIDTH_SPACE, ZERO_WIDTH_SPACE, True)
        assert fields[6][0] == 'Reason'

    def test_member_event_filter_shows_event_name(self, create_flow_measure, create_event):
        event = create_event(name='Heathrow Overload')
        measure = create_flow_measure(additional_filters=[
            {'type': FilterType.MEMBER_EVENT.value, 'value': event.id},
        ])
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert ('Members of Event', 'Heathrow Overload', False) in fields

    def test_level_filters(self, create_flow_measure):
        measure = create_flow_measure(additional_filters=[
            {'type': FilterType.LEVEL_ABOVE.value, 'value': 300},
            {'type': FilterType.LEVEL.value, 'value': [340, 360]},
        ])
        fields = _fields(FlowMeasureNotifiedMessage(measure).to_payload())

        assert ('Level at or Above', '300', False) in fields
        assert ('At Levels', '340, 360', False) in fields


class TestBalanceInlineRows:
    """Test padding of inline field rows."""

    def test_full_row_is_not_padded(self):
        fields = [Field('a', '1'), Field('b', '2'), Field('c', '3'), Field('d', '4', inline=False)]
        assert balance_inline_rows(fields) == fields

    def test_partial_row_is_padded(self):
        fields = [Field('a', '1'), Field('b', '2'), Field('c', '3', inline=False)]
        balanced = balance_inline_rows(fields)

        assert len(balanced) == 4
        assert balanced[2] == Field.blank()

    def test_trailing_inline_run_is_not_padded(self):
        fields = [Field('a', '1'), Field('b', '2')]
        assert balance_inline_rows(fields) == fields

    def test_four_field_run_is_padded_to_two_rows(self):
        fields = [Field(name, '1') for name in 'abcd'] + [Field('e', '5', inline=False)]
        balanced = balance_inline_rows(fields)

        assert balanced[:4] == fields[:4]
        assert balanced[4:6] == [Field.blank(), Field.blank()]
        assert balanced[6] == fields[4]

    def test_three_field_run_needs_no_spacer(self):
        fields = [Field(name, '1') for name in 'abc'] + [Field('d', '4', inline=False)]
        assert len(balance_inline_rows(fields)) == 4
