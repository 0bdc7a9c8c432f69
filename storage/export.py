"""Flat export of stored documents"""

import json
from typing import Iterable, List

import pandas as pd

from storage.models import AnnotationDocument
from utils.time_utils import to_iso

EXPORT_COLUMNS: List[str] = ["filename", "createdAt", "updatedAt", "annotations"]


def documents_to_frame(documents: Iterable[AnnotationDocument]) -> pd.DataFrame:
    """One row per document; annotations are a JSON-encoded string"""
    rows = [
        {
            "filename": doc.filename,
            "createdAt": to_iso(doc.created_at),
            "updatedAt": to_iso(doc.updated_at),
            "annotations": json.dumps(
                [a.to_dict() for a in doc.annotations], ensure_ascii=False
            ),
        }
        for doc in documents
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def documents_to_csv(documents: Iterable[AnnotationDocument]) -> str:
    return documents_to_frame(documents).to_csv(index=False, lineterminator="\n")
