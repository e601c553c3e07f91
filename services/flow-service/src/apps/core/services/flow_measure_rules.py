"""
Flow Measure Rules.

Field visibility and validation for flow measures, shared by the admin
panel and the REST API so that both enforce the same contract before
anything is written.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Dict, FrozenSet, List, Optional

from django.conf import settings
from django.utils import timezone

from ..constants import (
    AIRPORT_PATTERN,
    EDITABLE_FIELDS,
    ERROR_FIELD_NOT_APPLICABLE,
    ERROR_FIELD_REQUIRED,
    MAX_FLIGHT_LEVEL,
    MAX_SECONDS,
)
from ..exceptions import FlowMeasureValidationError
from ..models import (
    Event,
    FilterType,
    FlowMeasure,
    FlowMeasureType,
    INTERVAL_TYPES,
)

TYPE_DEPENDENT_FIELDS = frozenset({'value', 'minutes', 'seconds', 'mandatory_route'})

_airport_re = re.compile(AIRPORT_PATTERN)


@dataclass(frozen=True)
class FieldRules:
    required: FrozenSet[str]
    visible: FrozenSet[str]
    hidden: FrozenSet[str]


def field_rules(measure_type: Optional[str]) -> FieldRules:
    """Return which type-dependent fields are required, visible and hidden."""
    if not measure_type or measure_type not in FlowMeasureType.values:
        visible = frozenset()
    elif measure_type in INTERVAL_TYPES:
        visible = frozenset({'minutes', 'seconds'})
    elif measure_type == FlowMeasureType.MANDATORY_ROUTE:
        visible = frozenset({'mandatory_route'})
    elif measure_type == FlowMeasureType.PROHIBIT:
        visible = frozenset()
    else:
        visible = frozenset({'value'})

    return FieldRules(
        required=visible,
        visible=visible,
        hidden=TYPE_DEPENDENT_FIELDS - visible,
    )


def _is_blank(value: Any) -> bool:
    return value is None or value == '' or value == []


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r'-?[0-9]+', value.strip()):
        return int(value.strip())
    return None


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_utc(value: datetime) -> datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value


class _Errors:

    def __init__(self):
        self.errors: Dict[str, List[str]] = {}

    def add(self, field: str, message: str):
        self.errors.setdefault(field, []).append(message)

    def __bool__(self):
        return bool(self.errors)


def _clean_level(value: Any, field: str, errors: _Errors) -> Optional[int]:
    level = _as_int(value)
    if level is None or not 0 <= level <= MAX_FLIGHT_LEVEL:
        errors.add(field, f"Flight level must be a whole number between 0 and {MAX_FLIGHT_LEVEL}.")
        return None
    return level


def clean_filters(filters: Any, errors: _Errors) -> list:
    """Validate and normalise additional filters, keeping their order."""
    if _is_blank(filters):
        return []
    if not isinstance(filters, list):
        errors.add('additional_filters', 'Filters must be a list.')
        return []

    cleaned = []
    for index, item in enumerate(filters):
        field = f"additional_filters.{index}"
        if not isinstance(item, dict) or 'type' not in item:
            errors.add(field, 'Each filter needs a type and a value.')
            continue

        filter_type = item['type']
        value = item.get('value')
        if filter_type not in FilterType.values:
            errors.add(field, f"Unknown filter type '{filter_type}'.")
            continue
        if _is_blank(value):
            errors.add(field, ERROR_FIELD_REQUIRED)
            continue

        if filter_type in (FilterType.ADEP, FilterType.ADES):
            airports = [str(airport).strip().upper() for airport in _as_list(value)]
            invalid = [airport for airport in airports if not _airport_re.match(airport)]
            if invalid:
                errors.add(field, f"Invalid airport pattern(s): {', '.join(invalid)}.")
                continue
            value = airports
        elif filter_type in (FilterType.LEVEL_ABOVE, FilterType.LEVEL_BELOW):
            value = _clean_level(value, field, errors)
            if value is None:
                continue
        elif filter_type == FilterType.LEVEL:
            levels = [_clean_level(level, field, errors) for level in _as_list(value)]
            if None in levels:
                continue
            value = levels
        elif filter_type == FilterType.WAYPOINT:
            value = [str(waypoint).strip().upper() for waypoint in _as_list(value)]
        else:
            event_id = _as_int(value)
            if event_id is None or not Event.objects.filter(pk=event_id).exists():
                errors.add(field, 'Event does not exist.')
                continue
            value = event_id

        cleaned.append({'type': filter_type, 'value': value})

    return cleaned


def validate_flow_measure(
    data: Dict[str, Any],
    now: datetime,
    instance: Optional[FlowMeasure] = None,
) -> Dict[str, Any]:
    """
    Validate flow measure input and return model-ready attributes.

    `data` holds the submitted fields; on update (`instance` given) only the
    editable fields may be submitted and the remaining state is taken from
    the instance. `now` bounds the allowed time window.

    Raises FlowMeasureValidationError with field-scoped messages.
    """
    errors = _Errors()
    creating = instance is None
    max_ahead = now + timedelta(days=settings.FLOW_MEASURE_MAX_DAYS_AHEAD)
    cleaned: Dict[str, Any] = {}

    if not creating:
        for field in data:
            if field not in EDITABLE_FIELDS:
                errors.add(field, 'This field cannot be changed after creation.')

    def current(field: str, default: Any = None) -> Any:
        if field in data:
            return data[field]
        if creating:
            return default
        if field == 'minutes':
            return instance.minutes
        if field == 'seconds':
            return instance.seconds
        if field == 'notified_flight_information_regions':
            return None
        return getattr(instance, field)

    # Type and type-dependent fields
    measure_type = current('type')
    if _is_blank(measure_type):
        errors.add('type', ERROR_FIELD_REQUIRED)
    elif measure_type not in FlowMeasureType.values:
        errors.add('type', f"'{measure_type}' is not a valid flow measure type.")
    else:
        cleaned['type'] = measure_type

    rules = field_rules(measure_type)
    type_changed = not creating and 'type' in data and data['type'] != instance.type

    def typed(field: str) -> Any:
        # A changed type discards the old type-dependent values.
        if creating or type_changed:
            return data.get(field)
        return current(field)

    for field in rules.hidden:
        if field in data and not _is_blank(data[field]):
            errors.add(field, ERROR_FIELD_NOT_APPLICABLE)

    for field in rules.required:
        if _is_blank(typed(field)):
            errors.add(field, ERROR_FIELD_REQUIRED)

    cleaned['value'] = None
    cleaned['mandatory_route'] = []

    if 'minutes' in rules.visible:
        minutes = _as_int(typed('minutes'))
        seconds = _as_int(typed('seconds'))
        if 'minutes' not in errors.errors and (minutes is None or minutes < 0):
            errors.add('minutes', 'Minutes must be a whole number of at least 0.')
        if 'seconds' not in errors.errors and (seconds is None or not 0 <= seconds <= MAX_SECONDS):
            errors.add('seconds', f"Seconds must be a whole number between 0 and {MAX_SECONDS}.")
        if minutes is not None and seconds is not None:
            cleaned['value'] = minutes * 60 + seconds
    elif 'value' in rules.visible:
        value = _as_int(typed('value'))
        if 'value' in errors.errors:
            pass
        elif value is None or value < 0:
            errors.add('value', 'Value must be a whole number of at least 0.')
        elif measure_type == FlowMeasureType.LEVEL_CAP and value > MAX_FLIGHT_LEVEL:
            errors.add('value', f"Flight level must not exceed {MAX_FLIGHT_LEVEL}.")
        cleaned['value'] = value
    elif 'mandatory_route' in rules.visible:
        routes = [str(route).strip() for route in _as_list(typed('mandatory_route') or [])]
        if 'mandatory_route' not in errors.errors and (not routes or '' in routes):
            errors.add('mandatory_route', 'Each mandatory route must be a non-empty string.')
        cleaned['mandatory_route'] = routes

    # Reason
    reason = current('reason')
    if _is_blank(reason) or not str(reason).strip():
        errors.add('reason', ERROR_FIELD_REQUIRED)
    elif len(reason) > settings.FLOW_MEASURE_REASON_MAX_LENGTH:
        errors.add('reason', f"Reason must be at most {settings.FLOW_MEASURE_REASON_MAX_LENGTH} characters.")
    else:
        cleaned['reason'] = reason

    # Region and event
    if creating:
        region = data.get('flight_information_region')
        event = data.get('event')
        if event is not None:
            if region is None:
                region = event.flight_information_region
            elif region.pk != event.flight_information_region_id:
                errors.add(
                    'flight_information_region',
                    "Flight information region must match the event's region."
                )
        if region is None:
            errors.add('flight_information_region', ERROR_FIELD_REQUIRED)
        cleaned['flight_information_region'] = region
        cleaned['event'] = event

    # Times
    start_time = current('start_time')
    end_time = current('end_time')
    if creating:
        if start_time is None:
            errors.add('start_time', ERROR_FIELD_REQUIRED)
        else:
            start_time = _as_utc(start_time)
            if start_time < now:
                errors.add('start_time', 'Start time must not be in the past.')
            elif start_time > max_ahead:
                errors.add(
                    'start_time',
                    f"Start time must be within {settings.FLOW_MEASURE_MAX_DAYS_AHEAD} days."
                )
            cleaned['start_time'] = start_time

    if end_time is None:
        errors.add('end_time', ERROR_FIELD_REQUIRED)
    else:
        end_time = _as_utc(end_time)
        if start_time is not None and end_time <= start_time:
            errors.add('end_time', 'End time must be after the start time.')
        elif (creating or 'end_time' in data) and end_time < now:
            errors.add('end_time', 'End time must not be in the past.')
        elif (creating or 'end_time' in data) and end_time > max_ahead:
            errors.add(
                'end_time',
                f"End time must be within {settings.FLOW_MEASURE_MAX_DAYS_AHEAD} days."
            )
        cleaned['end_time'] = end_time

    # Filters and notified regions
    if creating or 'additional_filters' in data:
        cleaned['additional_filters'] = clean_filters(data.get('additional_filters'), errors)
    if 'notified_flight_information_regions' in data:
        cleaned['notified_flight_information_regions'] = list(
            data['notified_flight_information_regions'] or []
        )

    if errors:
        raise FlowMeasureValidationError(errors.errors)

    return cleaned
