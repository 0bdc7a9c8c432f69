"""Existence lookup: primary store first, legacy CSV second"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from annotation.errors import StoreUnavailable
from annotation.fallback import LegacyCsvSource
from storage.models import AnnotationDocument
from utils.logger import get_logger

logger = get_logger(__name__)


class LookupSource(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass(frozen=True)
class LookupResult:
    """Outcome of an existence check"""
    found: bool
    source: LookupSource
    document: Optional[AnnotationDocument] = None  # only for primary hits


class ExistenceResolver:
    """Answers "does this filename already have annotations?" """

    def __init__(self, store, fallback: Optional[LegacyCsvSource] = None):
        """
        Args:
            store: primary store exposing find_by_filename()
            fallback: legacy CSV source, or None when there is none
        """
        self.store = store
        self.fallback = fallback

    def lookup(self, filename: str) -> LookupResult:
        """
        Look a filename up in the primary store, then in the fallback

        An unreachable primary store is treated as a miss. A fallback that
        exists but cannot be parsed raises MalformedFallbackData.
        """
        try:
            document = self.store.find_by_filename(filename)
        except StoreUnavailable as e:
            logger.warning("primary store lookup failed for %s, using fallback: %s", filename, e)
            document = None

        if document is not None:
            return LookupResult(found=True, source=LookupSource.PRIMARY, document=document)

        if self.fallback is not None and self.fallback.find(filename) is not None:
            return LookupResult(found=True, source=LookupSource.FALLBACK)

        return LookupResult(found=False, source=LookupSource.NONE)
