# services/flow-service/src/apps/core/api/serializers/flow_measure_serializers.py
"""
Flow Measure Serializers

Input serializers only shape the request; the type-dependent field rules
are enforced by the flow measure service so the API and admin panel share
one contract.
"""

from rest_framework import serializers

from ...models import (
    Event,
    FilterType,
    FlightInformationRegion,
    FlowMeasure,
    FlowMeasureType,
)


class AdditionalFilterSerializer(serializers.Serializer):
    """A single `{type, value}` filter."""

    type = serializers.ChoiceField(choices=FilterType.choices)
    value = serializers.JSONField()


class FlowMeasureSerializer(serializers.ModelSerializer):
    """Full flow measure serializer."""

    type_display = serializers.CharField(source='get_type_display', read_only=True)
    type_description = serializers.CharField(source='measure_type.description', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    minutes = serializers.IntegerField(read_only=True)
    seconds = serializers.IntegerField(read_only=True)
    flight_information_region_identifier = serializers.CharField(
        source='flight_information_region.identifier',
        read_only=True
    )

    class Meta:
        model = FlowMeasure
        fields = [
            'id',
            'identifier',
            'user',
            'flight_information_region',
            'flight_information_region_identifier',
            'event',
            'type',
            'type_display',
            'type_description',
            'status',
            'status_display',
            'value',
            'minutes',
            'seconds',
            'mandatory_route',
            'reason',
            'additional_filters',
            'start_time',
            'end_time',
            'withdrawn_at',
            'notified_flight_information_regions',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class FlowMeasureListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    type_display = serializers.CharField(source='get_type_display', read_only=True)
    flight_information_region_identifier = serializers.CharField(
        source='flight_information_region.identifier',
        read_only=True
    )

    class Meta:
        model = FlowMeasure
        fields = [
            'id',
            'identifier',
            'flight_information_region_identifier',
            'type',
            'type_display',
            'status',
            'start_time',
            'end_time',
        ]


class FlowMeasureUpdateSerializer(serializers.Serializer):
    """Editable flow measure fields."""

    type = serializers.ChoiceField(choices=FlowMeasureType.choices, required=False)
    value = serializers.IntegerField(required=False, allow_null=True)
    minutes = serializers.IntegerField(required=False, allow_null=True)
    seconds = serializers.IntegerField(required=False, allow_null=True)
    mandatory_route = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        allow_null=True
    )
    reason = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    end_time = serializers.DateTimeField(required=False)
    additional_filters = AdditionalFilterSerializer(many=True, required=False)
    notified_flight_information_regions = serializers.PrimaryKeyRelatedField(
        queryset=FlightInformationRegion.objects.all(),
        many=True,
        required=False
    )


class FlowMeasureCreateSerializer(FlowMeasureUpdateSerializer):
    """Flow measure creation; region may be taken from the event."""

    type = serializers.ChoiceField(choices=FlowMeasureType.choices)
    flight_information_region = serializers.PrimaryKeyRelatedField(
        queryset=FlightInformationRegion.objects.all(),
        required=False
    )
    event = serializers.PrimaryKeyRelatedField(
        queryset=Event.objects.all(),
        required=False,
        allow_null=True
    )
    start_time = serializers.DateTimeField(required=False)
