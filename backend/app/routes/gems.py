"""
Hidden Gems Backend — Gem Route Handlers
=========================================

What:  The five /api/gems endpoints.
How:   Each handler pulls the path id and/or JSON body, calls GemService,
       and picks the status code. Errors are raised as application
       exceptions and rendered by the handlers registered in main.py.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from app.database import get_gem_service
from app.exceptions import NotFoundError
from app.schemas.gem import ErrorResponse, GemCreatedResponse, MessageResponse
from app.services.gem_service import GemService, GemUpdateStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Gems"])

UPDATE_MESSAGES = {
    GemUpdateStatus.UNCHANGED: "No changes made to the hidden gem (data was identical)",
    GemUpdateStatus.UPDATED: "Hidden gem updated successfully",
}

_GEM_EXAMPLE = {
    "title": "Hidden Beach",
    "description": "Secluded cove",
    "category": "Nature",
}


@router.get(
    "/gems",
    response_model=List[Dict[str, Any]],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all hidden gems",
)
async def list_gems(service: GemService = Depends(get_gem_service)) -> List[Dict[str, Any]]:
    return await service.list_gems()


@router.get(
    "/gems/{gem_id}",
    response_model=Dict[str, Any],
    responses={
        400: {"description": "Invalid Gem ID format", "model": ErrorResponse},
        404: {"description": "Gem not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single hidden gem by ID",
)
async def get_gem(
    gem_id: str,
    service: GemService = Depends(get_gem_service),
) -> Dict[str, Any]:
    return await service.get_gem(gem_id)


@router.post(
    "/gems",
    status_code=201,
    response_model=GemCreatedResponse,
    responses={
        400: {"description": "Missing required fields", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Add a hidden gem",
    description=(
        "Requires non-empty `title`, `description` and `category`; any other "
        "fields are stored as sent. The server sets `_id` and `submissionDate`."
    ),
)
async def create_gem(
    payload: Dict[str, Any] = Body(..., examples=[_GEM_EXAMPLE]),
    service: GemService = Depends(get_gem_service),
) -> GemCreatedResponse:
    return await service.create_gem(payload)


@router.put(
    "/gems/{gem_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid Gem ID format", "model": ErrorResponse},
        404: {"description": "Gem not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update fields of a hidden gem",
    description=(
        "Sets only the supplied fields; others are left untouched. `_id` in the "
        "body is ignored. `submissionDate` is NOT protected and can be "
        "overwritten through this endpoint."
    ),
)
async def update_gem(
    gem_id: str,
    payload: Dict[str, Any] = Body(..., examples=[{"category": "Nature & Parks"}]),
    service: GemService = Depends(get_gem_service),
) -> MessageResponse:
    status = await service.update_gem(gem_id, payload)
    if status is GemUpdateStatus.NOT_FOUND:
        logger.info("Update for unknown gem %s", gem_id)
        raise NotFoundError(resource_id=gem_id)
    return MessageResponse(message=UPDATE_MESSAGES[status])


@router.delete(
    "/gems/{gem_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid Gem ID format", "model": ErrorResponse},
        404: {"description": "Gem not found or already deleted", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a hidden gem",
)
async def delete_gem(
    gem_id: str,
    service: GemService = Depends(get_gem_service),
) -> MessageResponse:
    await service.delete_gem(gem_id)
    return MessageResponse(message="Hidden gem deleted successfully")
