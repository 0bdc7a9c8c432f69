"""FastAPI dependencies"""

from typing import Optional

from fastapi import Request

from annotation.fallback import LegacyCsvSource
from annotation.labels import LabelSet
from annotation.negotiator import SaveNegotiator
from annotation.resolver import ExistenceResolver


def get_store(request: Request):
    """Process-wide primary store handle"""
    return request.app.state.store


def get_fallback(request: Request) -> Optional[LegacyCsvSource]:
    return request.app.state.fallback


def get_labels(request: Request) -> LabelSet:
    return request.app.state.labels


def get_resolver(request: Request) -> ExistenceResolver:
    return ExistenceResolver(get_store(request), get_fallback(request))


def get_negotiator(request: Request) -> SaveNegotiator:
    """Each request is its own save attempt; confirmation comes from the force flag"""
    return SaveNegotiator(get_store(request))
