"""Pydantic request/response models"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class AnnotationTokenModel(BaseModel):
    """One annotation record; token is re-rendered from the fields on save"""
    z1: str
    z2: str
    a1: str
    a2: str
    e: str
    token: Optional[str] = None


class AnnotationDocumentModel(BaseModel):
    """Stored document"""
    filename: str
    annotations: List[AnnotationTokenModel]
    meta: Dict[str, Any] = {}
    createdAt: str
    updatedAt: str


class SaveRequest(BaseModel):
    """Save request; missing filename/annotations are rejected with 400"""
    filename: Optional[str] = None
    annotations: Optional[List[AnnotationTokenModel]] = None
    force: bool = False
    meta: Optional[Dict[str, Any]] = None


class SaveResponse(BaseModel):
    ok: bool


class CheckResponse(BaseModel):
    """Existence check response"""
    annotated: bool
    source: str  # mongodb | csv | none
    doc: Optional[AnnotationDocumentModel] = None


class LabelsResponse(BaseModel):
    zones: List[str]
    actors: List[str]
    events: List[str]
