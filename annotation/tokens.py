"""Annotation tokens: canonical rendering and construction from a selection"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from annotation.errors import ValidationError
from annotation.labels import LabelSet, SELECTION_FIELDS


def render_token(z1: str, z2: str, a1: str, a2: str, e: str) -> str:
    """Canonical display string, e.g. "<FC→FC : V→E : STOP>" """
    return f"<{z1}→{z2} : {a1}→{a2} : {e}>"


@dataclass(frozen=True)
class AnnotationToken:
    """One structured event label; `token` is derived from the five fields"""
    z1: str
    z2: str
    a1: str
    a2: str
    e: str
    token: str = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, 'token', render_token(self.z1, self.z2, self.a1, self.a2, self.e)
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "token": self.token,
            "z1": self.z1,
            "z2": self.z2,
            "a1": self.a1,
            "a2": self.a2,
            "e": self.e,
        }

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "AnnotationToken":
        # the stored "token" string is ignored and re-rendered
        missing = [name for name in SELECTION_FIELDS if d.get(name) in (None, "")]
        if missing:
            raise ValidationError(f"annotation record missing fields: {', '.join(missing)}")
        return AnnotationToken(
            z1=str(d["z1"]),
            z2=str(d["z2"]),
            a1=str(d["a1"]),
            a2=str(d["a2"]),
            e=str(d["e"]),
        )


class TokenBuilder:
    """Turns a five-field selection into an AnnotationToken"""

    def __init__(self, labels: LabelSet):
        self.labels = labels

    def build(self, selection: Mapping[str, str]) -> AnnotationToken:
        """
        Build a token from {z1, z2, a1, a2, e}

        Raises:
            ValidationError: a field is absent or not in its label set
        """
        values = {}
        for name in SELECTION_FIELDS:
            value = selection.get(name)
            if value is None:
                raise ValidationError(f"selection missing field '{name}'")
            if value not in self.labels.options(name):
                raise ValidationError(f"'{value}' is not a valid value for '{name}'")
            values[name] = value
        return AnnotationToken(**values)
