"""Annotation error taxonomy"""


class AnnotationError(Exception):
    """Base error for the annotation core"""


class ValidationError(AnnotationError):
    """Missing or invalid input that the operator can correct (400)"""


class ConflictError(AnnotationError):
    """A document for the filename already exists and overwrite was not confirmed (409)"""

    def __init__(self, filename: str, message: str = None):
        self.filename = filename
        super().__init__(message or f"annotations already exist for {filename}")


class StoreUnavailable(AnnotationError):
    """Primary store could not be reached or the query failed"""


class MalformedFallbackData(AnnotationError):
    """Legacy fallback source exists but cannot be parsed"""


class CorruptRecord(AnnotationError):
    """A stored document cannot be decoded (server-side data fault, 500)"""
