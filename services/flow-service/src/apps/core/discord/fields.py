"""
Embed field builders for flow measure notifications.

Fields are produced in display order: the type headline, start and end
times, one field per additional filter, then the reason. Discord lays
inline fields out three to a row, so a run of inline fields followed by a
full-width field is padded with blank fields to complete its row.
"""
from datetime import datetime, timezone
from typing import Iterable, List

from ..constants import (
    EMBED_GRID_COLUMNS,
    END_TIME_FIELD,
    PROHIBITED_VALUE,
    REASON_FIELD,
    START_TIME_FIELD,
)
from ..models import Event, FilterType, FlowMeasure, FlowMeasureType
from .embed import Field

INLINE_FILTER_TYPES = frozenset({FilterType.ADEP.value, FilterType.ADES.value})


def format_date_time(value: datetime) -> str:
    """`22/05 1454Z`"""
    value = value.astimezone(timezone.utc)
    return f"{value:%d/%m %H%M}Z"


def format_time(value: datetime) -> str:
    """`1454Z`"""
    value = value.astimezone(timezone.utc)
    return f"{value:%H%M}Z"


def format_interval(minutes: int, seconds: int) -> str:
    if seconds == 0:
        return f"{minutes} Minutes"
    return f"{minutes} Minutes {seconds} Seconds"


def headline_value(measure: FlowMeasure) -> str:
    measure_type = measure.measure_type

    if measure.is_interval:
        return format_interval(measure.minutes, measure.seconds)
    if measure_type == FlowMeasureType.PROHIBIT:
        return PROHIBITED_VALUE
    if measure_type == FlowMeasureType.MANDATORY_ROUTE:
        if not measure.mandatory_route:
            raise ValueError(f"Flow measure {measure.identifier} has no mandatory route")
        return '\n'.join(measure.mandatory_route)

    if measure.value is None:
        raise ValueError(f"Flow measure {measure.identifier} has no value")
    return str(measure.value)


def headline_field(measure: FlowMeasure) -> Field:
    return Field(name=measure.measure_type.label, value=headline_value(measure))


def time_fields(measure: FlowMeasure) -> List[Field]:
    start = measure.start_time.astimezone(timezone.utc)
    end = measure.end_time.astimezone(timezone.utc)
    end_value = format_time(end) if start.date() == end.date() else format_date_time(end)

    return [
        Field(name=START_TIME_FIELD, value=format_date_time(start)),
        Field(name=END_TIME_FIELD, value=end_value),
    ]


def _join(values) -> str:
    if isinstance(values, (list, tuple)):
        return ', '.join(str(value) for value in values)
    return str(values)


def filter_value(filter_type: str, value) -> str:
    if filter_type in (FilterType.MEMBER_EVENT, FilterType.MEMBER_NOT_EVENT):
        event = Event.objects.filter(pk=value).first()
        return event.name if event else str(value)
    return _join(value)


def filter_fields(measure: FlowMeasure) -> List[Field]:
    fields = []
    for item in measure.additional_filters:
        filter_type = item['type']
        fields.append(Field(
            name=FilterType(filter_type).label,
            value=filter_value(filter_type, item['value']),
            inline=filter_type in INLINE_FILTER_TYPES,
        ))
    return fields


def reason_field(measure: FlowMeasure) -> Field:
    return Field(name=REASON_FIELD, value=measure.reason, inline=False)


def balance_inline_rows(fields: Iterable[Field]) -> List[Field]:
    """Pad each run of inline fields that ends before a full-width field."""
    balanced: List[Field] = []
    run = 0
    for field in fields:
        if field.inline:
            run += 1
        else:
            if run % EMBED_GRID_COLUMNS:
                balanced.extend(Field.blank() for _ in range(EMBED_GRID_COLUMNS - run % EMBED_GRID_COLUMNS))
            run = 0
        balanced.append(field)
    return balanced


def flow_measure_fields(measure: FlowMeasure) -> List[Field]:
    fields = [headline_field(measure)]
    fields.extend(time_fields(measure))
    fields.extend(filter_fields(measure))
    fields.append(reason_field(measure))
    return balance_inline_rows(fields)
