"""
ComfortMap Backend — Review Route Handlers
============================================

What:  GET /api/notes (list) and POST /api/notes (create).
How:   Delegates to ReviewService; PersistenceError is turned into a 500 with
       a static message by the global handler in main.py.
Who:   Called by the browser frontend and by ReviewBoard.

The path keeps its historical "notes" name; the payload is a review.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comfortmap.database import get_db_session
from comfortmap.schemas.review import ErrorResponse, ReviewCreate, ReviewResponse
from comfortmap.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.get(
    "/notes",
    response_model=List[ReviewResponse],
    responses={
        200: {"description": "All stored reviews, newest first"},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List all reviews",
)
async def list_reviews(
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewResponse]:
    """Every stored review ordered by createdAt descending. No pagination."""
    return await review_service.list_reviews(db=db)


@router.post(
    "/notes",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "The stored review with its id and createdAt"},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a review",
    description=(
        "Stores one review. The body carries the pre-encoded `text` plus the "
        "redundant plain fields and coordinates. Fields are not validated; "
        "values the store can't accept fail the request with a 500."
    ),
)
async def create_review(
    # Untyped body: an empty body or a JSON array must reach the store check
    # (500), not FastAPI's 422 validation
    body: Any = Body(default=None, description="ReviewCreate fields as a JSON object"),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.create_review(db=db, payload=ReviewCreate.from_body(body))
