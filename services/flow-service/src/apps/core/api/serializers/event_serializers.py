# services/flow-service/src/apps/core/api/serializers/event_serializers.py
"""
Event Serializers
"""

from rest_framework import serializers

from ...models import Event


class EventSerializer(serializers.ModelSerializer):
    """Event serializer."""

    name_date = serializers.CharField(read_only=True)
    flight_information_region_identifier = serializers.CharField(
        source='flight_information_region.identifier',
        read_only=True
    )

    class Meta:
        model = Event
        fields = [
            'id',
            'name',
            'date_start',
            'date_end',
            'flight_information_region',
            'flight_information_region_identifier',
            'name_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        date_start = attrs.get('date_start', getattr(self.instance, 'date_start', None))
        date_end = attrs.get('date_end', getattr(self.instance, 'date_end', None))
        if date_start and date_end and date_end <= date_start:
            raise serializers.ValidationError({'date_end': 'End date must be after the start date.'})
        return attrs
