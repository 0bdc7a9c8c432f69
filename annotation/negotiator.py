"""Check-then-write save protocol with explicit overwrite confirmation"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from annotation.errors import ConflictError
from annotation.tokens import AnnotationToken
from storage.models import AnnotationDocument
from utils.logger import get_logger
from utils.time_utils import utc_now

logger = get_logger(__name__)


class NegotiatorState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    CONFLICT = "conflict"


class SaveStatus(str, Enum):
    COMMITTED = "committed"
    CONFLICT = "conflict"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SaveOutcome:
    status: SaveStatus
    reason: Optional[str] = None
    document: Optional[AnnotationDocument] = None

    @property
    def ok(self) -> bool:
        return self.status is SaveStatus.COMMITTED


class SaveNegotiator:
    """
    Decides whether a save is a fresh insert, a confirmed overwrite or a
    conflict.

    An existing document is only replaced when the caller passes
    force=True. A refused save arms `overwrite_armed` so the session can
    confirm on the next attempt; any commit disarms it again.
    """

    def __init__(self, store, clock: Callable[[], datetime] = utc_now):
        """
        Args:
            store: primary store (find_by_filename, insert_document, replace_document)
            clock: returns the current aware UTC time
        """
        self.store = store
        self.clock = clock
        self.state = NegotiatorState.IDLE
        self.overwrite_armed = False

    def reset(self) -> None:
        """Forget any pending confirmation (new video or filename)"""
        self.state = NegotiatorState.IDLE
        self.overwrite_armed = False

    def _conflict(self, filename: str) -> SaveOutcome:
        self.state = NegotiatorState.CONFLICT
        self.overwrite_armed = True
        logger.info("save of %s refused: annotations already exist", filename)
        return SaveOutcome(
            status=SaveStatus.CONFLICT,
            reason=f"annotations already exist for {filename}; save again with force to overwrite",
        )

    def save(self, filename: str,
             annotations: Optional[Iterable[AnnotationToken]],
             force: bool = False,
             meta: Optional[Dict[str, Any]] = None) -> SaveOutcome:
        """
        Save annotations for a filename

        Args:
            filename: unique document key
            annotations: tokens to store; None is rejected, an empty list is a valid save
            force: overwrite an existing document
            meta: free-form metadata stored alongside

        Returns:
            SaveOutcome (committed, conflict or rejected)

        Raises:
            StoreUnavailable: the store read or write failed; nothing was written
        """
        if not filename:
            return SaveOutcome(status=SaveStatus.REJECTED, reason="missing filename")
        if annotations is None:
            return SaveOutcome(status=SaveStatus.REJECTED, reason="missing annotations")

        self.state = NegotiatorState.PENDING
        tokens = list(annotations)
        try:
            existing = self.store.find_by_filename(filename)
            now = self.clock()

            if existing is None:
                document = AnnotationDocument(
                    filename=filename,
                    annotations=tokens,
                    meta=dict(meta or {}),
                    created_at=now,
                    updated_at=now,
                )
                try:
                    self.store.insert_document(document)
                except ConflictError:
                    # another session created the same filename first
                    return self._conflict(filename)
            elif not force:
                return self._conflict(filename)
            else:
                document = AnnotationDocument(
                    filename=filename,
                    annotations=tokens,
                    meta=dict(meta or {}),
                    created_at=existing.created_at,
                    updated_at=now,
                )
                self.store.replace_document(document)
        except Exception:
            self.state = NegotiatorState.IDLE
            raise

        self.state = NegotiatorState.COMMITTED
        self.overwrite_armed = False
        logger.info(
            "saved %d annotations for %s (%s)",
            len(tokens), filename, "overwrite" if existing is not None else "new",
        )
        return SaveOutcome(status=SaveStatus.COMMITTED, document=document)
