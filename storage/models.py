"""Persisted data models"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from annotation.tokens import AnnotationToken
from utils.time_utils import to_iso


@dataclass
class AnnotationDocument:
    """All annotations saved for one video filename (unique key)"""
    filename: str
    annotations: List[AnnotationToken] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None  # set on first write, never changed
    updated_at: Optional[datetime] = None  # refreshed on every write

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape used by /check and /list"""
        return {
            "filename": self.filename,
            "annotations": [a.to_dict() for a in self.annotations],
            "meta": dict(self.meta),
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }
