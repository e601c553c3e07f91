"""Embed colours keyed by flow measure status."""
from enum import IntEnum


class Colour(IntEnum):
    NOTIFIED = 0xF1C40F
    ACTIVATED = 0x2ECC71
    WITHDRAWN = 0xE74C3C
    EXPIRED = 0x95A5A6
