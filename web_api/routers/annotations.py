"""Annotation check/save/list routes"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from annotation.errors import ValidationError
from annotation.labels import LabelSet
from annotation.negotiator import SaveNegotiator, SaveStatus
from annotation.resolver import ExistenceResolver, LookupSource
from annotation.tokens import AnnotationToken
from storage.export import documents_to_csv
from web_api.dependencies import get_labels, get_negotiator, get_resolver, get_store
from web_api.models.schemas import CheckResponse, LabelsResponse, SaveRequest, SaveResponse

router = APIRouter(tags=["annotations"])

# Wire names for lookup sources, as expected by existing clients
WIRE_SOURCES: Dict[LookupSource, str] = {
    LookupSource.PRIMARY: "mongodb",
    LookupSource.FALLBACK: "csv",
    LookupSource.NONE: "none",
}


@router.get("/labels", response_model=LabelsResponse)
def get_label_options(labels: LabelSet = Depends(get_labels)):
    """Zone, actor and event options for the editing UI"""
    return LabelsResponse(**labels.to_dict())


@router.get("/check", response_model=CheckResponse)
def check_annotations(
    filename: Optional[str] = Query(None),
    resolver: ExistenceResolver = Depends(get_resolver)
):
    """Whether a filename already has annotations"""
    if not filename:
        raise ValidationError("filename required")

    result = resolver.lookup(filename)
    return CheckResponse(
        annotated=result.found,
        source=WIRE_SOURCES[result.source],
        doc=result.document.to_dict() if result.document is not None else None
    )


@router.post("/save", response_model=SaveResponse)
def save_annotations(
    request: SaveRequest,
    negotiator: SaveNegotiator = Depends(get_negotiator)
):
    """Save annotations; an existing document needs force=true"""
    annotations = None
    if request.annotations is not None:
        annotations = [
            AnnotationToken(z1=a.z1, z2=a.z2, a1=a.a1, a2=a.a2, e=a.e)
            for a in request.annotations
        ]

    outcome = negotiator.save(
        request.filename or "",
        annotations,
        force=request.force,
        meta=request.meta
    )

    if outcome.status is SaveStatus.REJECTED:
        raise ValidationError(outcome.reason)
    if outcome.status is SaveStatus.CONFLICT:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": outcome.reason, "exists": True}
        )
    return SaveResponse(ok=True)


@router.get("/list")
def list_annotations(
    output_format: str = Query("json", alias="format"),
    store=Depends(get_store)
):
    """All stored documents as JSON, or CSV with format=csv"""
    documents = store.list_documents()

    if output_format.lower() == "csv":
        return Response(
            content=documents_to_csv(documents),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": 'attachment; filename="annotations.csv"'}
        )

    return [doc.to_dict() for doc in documents]
