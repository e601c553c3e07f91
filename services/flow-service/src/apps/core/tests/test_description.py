"""
Embed Description Tests
"""

import pytest

from apps.core.discord import EventNameAndInterestedParties


@pytest.mark.django_db
class TestEventNameAndInterestedParties:
    """Test the event name and interested parties description."""

    def test_empty_without_event_or_notified_regions(self, create_flow_measure):
        measure = create_flow_measure()
        assert EventNameAndInterestedParties(measure).description() == ''

    def test_event_name_only(self, create_flow_measure, create_event):
        measure = create_flow_measure(event=create_event(name='Cross the Pond Westbound'))
        assert EventNameAndInterestedParties(measure).description() == 'Cross the Pond Westbound'

    def test_event_name_and_tags(self, create_flow_measure, create_event, create_region, create_discord_tag):
        amsterdam = create_region('EHAA')
        paris = create_region('LFFF')
        create_discord_tag(amsterdam, tag='1111')
        create_discord_tag(paris, tag='2222')
        create_discord_tag(paris, tag='@paris-flow')
        measure = create_flow_measure(
            event=create_event(name='Cross the Pond'),
            notified_flight_information_regions=[paris, amsterdam],
        )

        assert EventNameAndInterestedParties(measure).description() == (
            'Cross the Pond\n\n**FAO**: <@&1111> <@&2222> @paris-flow'
        )

    def test_region_without_tags_falls_back_to_identifier(
        self, create_flow_measure, create_region, create_discord_tag
    ):
        amsterdam = create_region('EHAA')
        paris = create_region('LFFF')
        create_discord_tag(paris, tag='2222')
        measure = create_flow_measure(notified_flight_information_regions=[amsterdam, paris])

        assert EventNameAndInterestedParties(measure).interested_parties() == ['EHAA', '<@&2222>']

    def test_mentions_are_deduplicated(self, create_flow_measure, create_region, create_discord_tag):
        amsterdam = create_region('EHAA')
        paris = create_region('LFFF')
        create_discord_tag(amsterdam, tag='@europe')
        create_discord_tag(paris, tag='@europe')
        measure = create_flow_measure(notified_flight_information_regions=[amsterdam, paris])

        assert EventNameAndInterestedParties(measure).interested_parties() == ['@europe']
