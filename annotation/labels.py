"""Label enumerations for zones, actors and events"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from annotation.errors import ValidationError

# Characters reserved by the token grammar "<z1→z2 : a1→a2 : e>"
RESERVED_CHARS = ('<', '>', '→', ':')

# Selection field -> label group
FIELD_GROUPS: Dict[str, str] = {
    'z1': 'zones',
    'z2': 'zones',
    'a1': 'actors',
    'a2': 'actors',
    'e': 'events',
}

SELECTION_FIELDS: Tuple[str, ...] = ('z1', 'z2', 'a1', 'a2', 'e')


@dataclass(frozen=True)
class LabelSet:
    """Allowed values for each selection field"""
    zones: Tuple[str, ...]
    actors: Tuple[str, ...]
    events: Tuple[str, ...]

    def options(self, field_name: str) -> Tuple[str, ...]:
        """Allowed values for a selection field (z1, z2, a1, a2, e)"""
        group = FIELD_GROUPS.get(field_name)
        if group is None:
            raise ValidationError(f"unknown selection field: {field_name}")
        return getattr(self, group)

    def default_selection(self) -> Dict[str, str]:
        """First option of every field, used as the initial UI selection"""
        return {name: self.options(name)[0] for name in SELECTION_FIELDS}

    def to_dict(self) -> Dict[str, list]:
        return {
            'zones': list(self.zones),
            'actors': list(self.actors),
            'events': list(self.events),
        }

    @staticmethod
    def from_dict(data: Dict) -> "LabelSet":
        """
        Build a label set from {"zones": [...], "actors": [...], "events": [...]}

        Raises:
            ValidationError: a group is missing or empty, or a label is blank
                or contains a character used by the token grammar
        """
        groups = {}
        for group in ('zones', 'actors', 'events'):
            values = data.get(group) if isinstance(data, dict) else None
            if not isinstance(values, list) or not values:
                raise ValidationError(f"labels config requires a non-empty '{group}' list")
            for value in values:
                if not isinstance(value, str) or not value.strip():
                    raise ValidationError(f"invalid label in '{group}': {value!r}")
                if any(ch in value for ch in RESERVED_CHARS):
                    raise ValidationError(
                        f"label {value!r} in '{group}' contains a reserved token character"
                    )
            groups[group] = tuple(values)
        return LabelSet(**groups)


def load_labels(path: Optional[str] = None) -> LabelSet:
    """
    Load label enumerations from a JSON file

    Args:
        path: labels file, defaults to AppConfig.LABELS_FILE

    Returns:
        LabelSet
    """
    if path is None:
        from config.app_config import AppConfig
        path = AppConfig.LABELS_FILE

    labels_file = Path(path)
    try:
        with open(labels_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"cannot read labels file {labels_file}: {e}") from e
    return LabelSet.from_dict(data)
