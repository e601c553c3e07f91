# services/flow-service/src/apps/core/api/serializers/region_serializers.py
"""
Flight Information Region Serializers
"""

from rest_framework import serializers

from ...models import DiscordTag, FlightInformationRegion


class DiscordTagSerializer(serializers.ModelSerializer):
    """Discord tag serializer."""

    mention = serializers.CharField(read_only=True)

    class Meta:
        model = DiscordTag
        fields = [
            'id',
            'flight_information_region',
            'tag',
            'description',
            'mention',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class FlightInformationRegionSerializer(serializers.ModelSerializer):
    """Flight information region serializer."""

    identifier_name = serializers.CharField(read_only=True)

    class Meta:
        model = FlightInformationRegion
        fields = [
            'id',
            'identifier',
            'name',
            'identifier_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
