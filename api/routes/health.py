"""
Module 09D - Health Check Route

Liveness endpoint that also reports how many files the holder keeps.
"""

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.models.responses import HealthResponse
from api.store import BlockStore


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(store: BlockStore = Depends(get_store)) -> HealthResponse:
    """Service status and the number of held files."""
    return HealthResponse(files=len(store))


@router.get("/", response_model=HealthResponse)
def root(store: BlockStore = Depends(get_store)) -> HealthResponse:
    return health_check(store)
