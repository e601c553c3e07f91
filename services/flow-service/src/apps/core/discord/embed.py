"""
Discord embed structures.

Plain value objects serialised to the webhook JSON shape.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..constants import ZERO_WIDTH_SPACE


@dataclass(frozen=True)
class Field:
    name: str
    value: str
    inline: bool = True

    @classmethod
    def blank(cls) -> 'Field':
        """An invisible inline field used to pad a row of the embed grid."""
        return cls(name=ZERO_WIDTH_SPACE, value=ZERO_WIDTH_SPACE, inline=True)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value, 'inline': self.inline}


@dataclass(frozen=True)
class Embed:
    title: str
    colour: int
    description: str
    fields: List[Field] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'color': int(self.colour),
            'description': self.description,
            'fields': [f.to_dict() for f in self.fields],
        }
