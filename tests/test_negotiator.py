"""Tests for the check-then-write save protocol."""

import pytest

from annotation.errors import ConflictError, StoreUnavailable
from annotation.negotiator import NegotiatorState, SaveNegotiator, SaveStatus
from annotation.tokens import AnnotationToken


def _tokens(*events: str):
    return [AnnotationToken(z1="FC", z2="SZ", a1="V", a2="E", e=e) for e in events]


@pytest.fixture
def negotiator(store, clock) -> SaveNegotiator:
    return SaveNegotiator(store, clock=clock)


def test_first_save_commits_with_equal_timestamps(negotiator, store) -> None:
    outcome = negotiator.save("v1", _tokens("STOP"))

    assert outcome.status is SaveStatus.COMMITTED
    stored = store.documents["v1"]
    assert stored.created_at == stored.updated_at
    assert negotiator.state is NegotiatorState.COMMITTED
    assert not negotiator.overwrite_armed


def test_three_step_overwrite_protocol(negotiator, store) -> None:
    negotiator.save("v1", _tokens("STOP"), meta={"operator": "a"})
    first = store.find_by_filename("v1")

    conflict = negotiator.save("v1", _tokens("START"))

    assert conflict.status is SaveStatus.CONFLICT
    assert negotiator.state is NegotiatorState.CONFLICT
    assert negotiator.overwrite_armed
    unchanged = store.find_by_filename("v1")
    assert [t.e for t in unchanged.annotations] == ["STOP"]
    assert unchanged.updated_at == first.updated_at
    assert store.writes == 1

    overwrite = negotiator.save("v1", _tokens("START", "PASS"), force=True)

    assert overwrite.status is SaveStatus.COMMITTED
    final = store.find_by_filename("v1")
    assert [t.e for t in final.annotations] == ["START", "PASS"]
    assert final.created_at == first.created_at
    assert final.updated_at > first.updated_at
    assert final.meta == {}
    assert not negotiator.overwrite_armed


def test_force_on_unseen_filename_is_a_plain_insert(negotiator, store) -> None:
    outcome = negotiator.save("fresh", _tokens("STOP"), force=True)

    assert outcome.ok
    assert store.documents["fresh"].created_at == store.documents["fresh"].updated_at


def test_missing_filename_is_rejected(negotiator, store) -> None:
    outcome = negotiator.save("", _tokens("STOP"))

    assert outcome.status is SaveStatus.REJECTED
    assert outcome.reason == "missing filename"
    assert store.writes == 0


def test_missing_annotations_is_rejected(negotiator) -> None:
    outcome = negotiator.save("v1", None)

    assert outcome.status is SaveStatus.REJECTED
    assert outcome.reason == "missing annotations"


def test_empty_sequence_is_a_valid_save(negotiator, store) -> None:
    outcome = negotiator.save("v1", [])

    assert outcome.ok
    assert store.documents["v1"].annotations == []


def test_racing_insert_is_reported_as_conflict(store, clock) -> None:
    class RacingStore(type(store)):
        def find_by_filename(self, filename):
            return None

        def insert_document(self, document):
            raise ConflictError(document.filename)

    negotiator = SaveNegotiator(RacingStore(), clock=clock)

    outcome = negotiator.save("v1", _tokens("STOP"))

    assert outcome.status is SaveStatus.CONFLICT
    assert negotiator.overwrite_armed


def test_store_failure_surfaces_without_writing(negotiator, store) -> None:
    store.available = False

    with pytest.raises(StoreUnavailable):
        negotiator.save("v1", _tokens("STOP"))

    assert negotiator.state is NegotiatorState.IDLE
    assert store.documents == {}


def test_reset_disarms_pending_confirmation(negotiator) -> None:
    negotiator.save("v1", _tokens("STOP"))
    negotiator.save("v1", _tokens("STOP"))
    assert negotiator.overwrite_armed

    negotiator.reset()

    assert not negotiator.overwrite_armed
    assert negotiator.state is NegotiatorState.IDLE


def test_overwrite_of_vanished_document_is_not_committed(store, clock) -> None:
    class VanishingStore(type(store)):
        def replace_document(self, document):
            self.documents.pop(document.filename)
            super().replace_document(document)

    vanishing = VanishingStore()
    negotiator = SaveNegotiator(vanishing, clock=clock)
    negotiator.save("v1", _tokens("STOP"))

    with pytest.raises(StoreUnavailable):
        negotiator.save("v1", _tokens("START"), force=True)

    assert negotiator.state is NegotiatorState.IDLE
