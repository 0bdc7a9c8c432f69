"""Editing session: one operator labelling one video at a time"""

from typing import Any, BinaryIO, Dict, Mapping, Optional

from annotation.errors import ValidationError
from annotation.negotiator import SaveNegotiator, SaveOutcome
from annotation.resolver import ExistenceResolver, LookupResult, LookupSource
from annotation.sequence import AnnotationSequence
from annotation.tokens import AnnotationToken, TokenBuilder


class EditingSession:
    """
    In-memory editing state for the annotate view.

    The video stream is held as an opaque handle and never read here.
    Saving twice in a row against an existing document is the overwrite
    confirmation: the first save reports a conflict, the second forces.
    """

    def __init__(self, builder: TokenBuilder,
                 resolver: ExistenceResolver,
                 negotiator: SaveNegotiator):
        self.builder = builder
        self.resolver = resolver
        self.negotiator = negotiator

        self.filename = ""
        self.video: Optional[BinaryIO] = None
        self.sequence = AnnotationSequence()
        self.selection: Dict[str, str] = builder.labels.default_selection()

    def select_video(self, filename: str, video: Optional[BinaryIO] = None) -> None:
        """Switch to a new input; labels of the previous video are dropped"""
        self.filename = filename or ""
        self.video = video
        self.sequence.clear()
        self.negotiator.reset()

    def set_filename(self, filename: str) -> None:
        """Rename the target document; keeps the labels, drops any pending confirmation"""
        if filename != self.filename:
            self.negotiator.reset()
        self.filename = filename or ""

    def select(self, **fields: str) -> None:
        """Update the current selection (z1, z2, a1, a2, e)"""
        self.selection.update(fields)

    def add(self, selection: Optional[Mapping[str, str]] = None) -> AnnotationToken:
        """Build a token from the given or current selection and append it"""
        token = self.builder.build(selection if selection is not None else self.selection)
        self.sequence.append(token)
        return token

    def remove(self, index: int) -> None:
        self.sequence.remove_at(index)

    def move_up(self, index: int) -> None:
        self.sequence.move_up(index)

    def move_down(self, index: int) -> None:
        self.sequence.move_down(index)

    def drop(self, dragged_index: int, target_index: int) -> None:
        self.sequence.drop(dragged_index, target_index)

    def drop_on_tail(self, dragged_index: int) -> None:
        self.sequence.drop_on_tail(dragged_index)

    @property
    def overwrite_pending(self) -> bool:
        """True after a conflict: the next save() overwrites"""
        return self.negotiator.overwrite_armed

    def check(self) -> LookupResult:
        """Look the filename up; a primary hit replaces the current labels"""
        if not self.filename:
            raise ValidationError("missing filename")
        result = self.resolver.lookup(self.filename)
        if result.source is LookupSource.PRIMARY and result.document is not None:
            self.sequence.replace(result.document.annotations)
        return result

    def save(self, meta: Optional[Dict[str, Any]] = None) -> SaveOutcome:
        return self.negotiator.save(
            self.filename,
            list(self.sequence),
            force=self.negotiator.overwrite_armed,
            meta=meta,
        )
