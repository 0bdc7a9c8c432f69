"""Shared fixtures: label set, in-memory store, controllable clock"""

import copy
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from annotation.errors import ConflictError, StoreUnavailable
from annotation.labels import LabelSet
from annotation.tokens import TokenBuilder
from storage.models import AnnotationDocument


class InMemoryAnnotationStore:
    """Store fake with the same unique-filename behaviour as the table"""

    def __init__(self) -> None:
        self.documents: Dict[str, AnnotationDocument] = {}
        self.available = True
        self.writes = 0
        self.closed = False

    def _check(self) -> None:
        if not self.available:
            raise StoreUnavailable("store offline")

    def find_by_filename(self, filename: str) -> Optional[AnnotationDocument]:
        self._check()
        document = self.documents.get(filename)
        return copy.deepcopy(document) if document is not None else None

    def insert_document(self, document: AnnotationDocument) -> None:
        self._check()
        if document.filename in self.documents:
            raise ConflictError(document.filename)
        self.documents[document.filename] = copy.deepcopy(document)
        self.writes += 1

    def replace_document(self, document: AnnotationDocument) -> None:
        self._check()
        stored = self.documents.get(document.filename)
        if stored is None:
            raise StoreUnavailable(f"annotation update failed: no stored document for {document.filename}")
        stored.annotations = list(document.annotations)
        stored.meta = dict(document.meta)
        stored.updated_at = document.updated_at
        self.writes += 1

    def list_documents(self) -> List[AnnotationDocument]:
        self._check()
        return sorted(
            (copy.deepcopy(d) for d in self.documents.values()),
            key=lambda d: (d.created_at, d.filename),
        )

    def close(self) -> None:
        self.closed = True


class StepClock:
    """Returns a time one second later on every call"""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture
def labels() -> LabelSet:
    return LabelSet(
        zones=("FC", "SZ", "MZ"),
        actors=("V", "E", "R"),
        events=("START", "STOP", "PASS"),
    )


@pytest.fixture
def builder(labels: LabelSet) -> TokenBuilder:
    return TokenBuilder(labels)


@pytest.fixture
def store() -> InMemoryAnnotationStore:
    return InMemoryAnnotationStore()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def legacy_csv(tmp_path):
    """Writes a legacy CSV and returns its path"""

    def _write(text: str, name: str = "annotations_export.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
