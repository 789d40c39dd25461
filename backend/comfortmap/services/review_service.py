"""
ComfortMap Backend — Review Service (Store Orchestrator)
=========================================================

What:  Create and list reviews against the store.
Why:   Keeps persistence and error translation out of the route handlers.
How:   Casts the submitted fields the way the store schema demands, inserts
       one record, or reads all records newest first.
Who:   Called by the /api/notes route handlers.

The service never decodes `text`; stored records go back to callers unchanged.

Error Handling Strategy:
    Any failure touching the store (connection, constraint, cast) is logged
    with full context and re-raised as PersistenceError carrying the static
    message the API promises. No retries.
"""

import logging
import math
import re
from typing import Any, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from comfortmap.exceptions import PersistenceError
from comfortmap.models.review import Review
from comfortmap.schemas.review import ReviewCreate, ReviewResponse

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Could not create note"
LIST_FAILED_MESSAGE = "Failed to load notes"

# Decimal literal: optional sign, digits with an optional fraction, optional exponent
_DECIMAL_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


def _cast_number(field: str, value: Any) -> Optional[float]:
    """
    Cast a submitted value to a number, like the store's numeric fields do.

    Accepts finite numbers, booleans (true → 1, false → 0) and plain decimal
    strings ("9", " 4.5 ", "1e3"); None and "" mean "not given". NaN,
    infinities, and strings such as "nan", "inf" or "1_000" raise ValueError.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        # float() alone would also take "nan", "infinity" and "1_000"
        if not _DECIMAL_RE.match(value.strip()):
            raise ValueError(f"{field}: {value!r} is not a number")
        number = float(value)
    else:
        raise ValueError(f"{field}: cannot cast {type(value).__name__} to a number")

    if not math.isfinite(number):
        raise ValueError(f"{field}: {value!r} is not a finite number")
    return number


def _cast_string(field: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ValueError(f"{field}: cannot cast {type(value).__name__} to a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_review(payload: ReviewCreate) -> Review:
    """
    Turn a create payload into an unsaved Review.

    Raises:
        ValueError: A field couldn't be cast, or `text` is missing/empty
        (the store's required constraint on text).
    """
    text = _cast_string("text", payload.text)
    if not text:
        raise ValueError("text: required")

    return Review(
        text=text,
        restaurant=_cast_string("restaurant", payload.restaurant),
        location=_cast_string("location", payload.location),
        scale=_cast_number("scale", payload.scale),
        review=_cast_string("review", payload.review),
        lat=_cast_number("lat", payload.lat),
        lon=_cast_number("lon", payload.lon),
    )


class ReviewService:
    """
    Store operations for reviews.

    Responsibilities:
        - create_review(): Insert one record, return it with id and createdAt
        - list_reviews(): All records, newest first
    """

    async def create_review(self, db: AsyncSession, payload: ReviewCreate) -> ReviewResponse:
        """
        Insert one review and return the stored record.

        Args:
            db: Async database session (injected by FastAPI)
            payload: Submitted fields, passed through as-is

        Raises:
            PersistenceError: Cast failure, missing text, or store failure
        """
        try:
            review = build_review(payload)
            db.add(review)
            # Commit here so a failed commit still surfaces as PersistenceError
            await db.flush()
            await db.commit()
            logger.info("Review %s created for '%s'", review.id, review.restaurant)
            return ReviewResponse.model_validate(review)

        except Exception as e:
            logger.error("Error creating review: %s", str(e), exc_info=True)
            try:
                await db.rollback()
            except Exception:
                logger.error("Rollback after failed insert also failed", exc_info=True)
            raise PersistenceError(
                message=CREATE_FAILED_MESSAGE,
                context={"error_type": type(e).__name__, "detail": str(e)},
            ) from e

    async def list_reviews(self, db: AsyncSession) -> List[ReviewResponse]:
        """
        Return every stored review ordered by created_at descending.

        Raises:
            PersistenceError: Store unreachable or query failed
        """
        try:
            result = await db.execute(select(Review).order_by(desc(Review.created_at)))
            reviews = list(result.scalars().all())
            return [ReviewResponse.model_validate(review) for review in reviews]

        except Exception as e:
            logger.error("Error listing reviews: %s", str(e), exc_info=True)
            raise PersistenceError(
                message=LIST_FAILED_MESSAGE,
                context={"error_type": type(e).__name__, "detail": str(e)},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
review_service = ReviewService()
