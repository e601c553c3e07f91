"""
Flow Service Constants.
"""

# Discord embed rendering
ZERO_WIDTH_SPACE = '\u200b'
EMBED_GRID_COLUMNS = 3
START_TIME_FIELD = 'Start Time'
END_TIME_FIELD = 'End Time'
REASON_FIELD = 'Reason'
PROHIBITED_VALUE = 'Prohibited'
INTERESTED_PARTIES_PREFIX = '**FAO**: '

# Flow measure validation
MAX_SECONDS = 59
MAX_FLIGHT_LEVEL = 660
AIRPORT_PATTERN = r'^[A-Z0-9*]{4}$'

# Fields an existing flow measure may change
EDITABLE_FIELDS = (
    'end_time',
    'reason',
    'type',
    'value',
    'minutes',
    'seconds',
    'mandatory_route',
    'additional_filters',
    'notified_flight_information_regions',
)

# Discord delivery
DISCORD_RETRY_DELAY_SECONDS = 60
DISCORD_RETRY_BACKOFF_MULTIPLIER = 2

# Error Messages
ERROR_FIELD_REQUIRED = "This field is required."
ERROR_FIELD_NOT_APPLICABLE = "This field does not apply to the selected type."
