"""
ComfortMap Backend — Review Board (Presentation Client)
=========================================================

What:  The presentation layer in Python: lists reviews as HTML cards, places
       them on the map, and runs the submit flow (geocode → encode → create →
       refresh).
Why:   Mirrors what the browser page in comfortmap/static/ does, so the same
       behaviour can be driven from scripts and tests against the HTTP API.
How:   One ReviewBoard per page session. It owns the mutable UI state (map
       viewport, current marker, rendered cards) instead of module globals.

Flow (submit):
    ┌──────────┐    ┌───────────┐    ┌──────────┐    ┌──────────────┐
    │  Form    │───▶│ Geocoder  │───▶│ Encoder  │───▶│ POST         │
    └──────────┘    └───────────┘    └──────────┘    │ /api/notes   │
                     not found →                     └──────┬───────┘
                     GeocodeNotFoundError                   ▼
                                                   reload cards + markers

Consistency:
    The refresh after a write is a separate request; a concurrent writer can
    interleave and nothing here detects it.
"""

import html
import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

import httpx
from pydantic import ValidationError

from comfortmap.config import settings
from comfortmap.exceptions import GeocodeNotFoundError
from comfortmap.schemas.board import MapMarker, MapView, ReviewForm
from comfortmap.schemas.review import ReviewResponse
from comfortmap.services.geocoding_service import Geocoder
from comfortmap.services.review_text import decode_review_text, encode_review_text

logger = logging.getLogger(__name__)

NOTES_PATH = "/api/notes"
NO_REVIEWS_PLACEHOLDER = '<p class="no-reviews">No reviews yet. Be the first to share!</p>'

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_MAX_ZOOM = 19
TILE_ATTRIBUTION = "© OpenStreetMap"
FOCUS_ZOOM = 15

# Icon per tag value, plus the icon used for values outside the vocabulary
TAG_ICONS = {
    "noise": ({"quiet": "◇", "moderate": "◆", "loud": "◈"}, "♪"),
    "crowd": ({"empty": "○", "some": "◐", "busy": "●"}, "○"),
    "lighting": ({"natural": "☼", "soft": "◑", "bright": "✦"}, "☼"),
    "texture": ({"soft": "◡", "mixed": "◠", "crunchy": "◬"}, "◡"),
}


# ══════════════════════════════════════════════════════════════════════════
# Rendering
# ══════════════════════════════════════════════════════════════════════════


def format_review_date(value: datetime) -> str:
    """Render a timestamp like "Jan 5, 2025, 3:04 PM" (UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%b} {value.day}, {value.year}, {hour}:{value:%M} {meridiem}"


def format_number(value: Optional[Union[int, float]], missing: str = "?") -> str:
    if value is None:
        return missing
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def render_sensory_tag(name: str, value: str) -> str:
    icons, default_icon = TAG_ICONS[name]
    return (
        f'<span class="sensory-tag"><span class="tag-icon">{icons.get(value, default_icon)}</span>'
        f"{html.escape(value)}</span>"
    )


def render_review_card(record: ReviewResponse) -> str:
    """
    Render one stored review as a card.

    Everything shown comes from decoding `text`; only the date comes from
    the record itself. A text that doesn't follow the template still renders,
    with fallback values.
    """
    decoded = decode_review_text(record.text)
    tags = "".join(render_sensory_tag(name, value) for name, value in decoded.sensory_tags())
    tags_block = f'<div class="sensory-tags">{tags}</div>' if tags else ""

    return (
        '<div class="review-card">'
        '<div class="review-header">'
        '<div class="review-location">'
        f"<strong>{html.escape(decoded.restaurant.upper())}</strong>"
        f'<span class="review-area">{html.escape(decoded.location)}</span>'
        "</div>"
        '<div class="review-rating">'
        f'<span class="rating-number">{html.escape(decoded.rating)}</span>'
        '<span class="rating-label">/10</span>'
        "</div>"
        "</div>"
        f"{tags_block}"
        f'<div class="review-body"><p>{html.escape(decoded.review_body)}</p></div>'
        '<div class="review-footer">'
        f'<span class="review-date">{format_review_date(record.created_at)}</span>'
        "</div>"
        "</div>"
    )


def build_marker(record: ReviewResponse) -> Optional[MapMarker]:
    """
    Map marker for a stored review, or None when it has no coordinates.

    Uses the redundant plain fields; no decoding needed.
    """
    if record.lat is None or record.lon is None:
        return None
    popup = (
        f"<b>{html.escape(record.restaurant or 'Restaurant')}</b><br>"
        f"{html.escape(record.location or '')}<br>"
        f"Rating: {format_number(record.scale)}/10<br>"
        f"{html.escape(record.review or '')}"
    )
    return MapMarker(lat=record.lat, lon=record.lon, popup=popup)


# ══════════════════════════════════════════════════════════════════════════
# Session
# ══════════════════════════════════════════════════════════════════════════


class ReviewBoard:
    """
    One page session of the review board.

    Attributes:
        map_view: Viewport, current marker, and stored-review markers
        cards: HTML of the most recently rendered list (or the placeholder)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        geocoder: Optional[Geocoder] = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=settings.api_base_url)
        self.geocoder = geocoder or Geocoder()
        self.map_view = MapView()
        self.cards: List[str] = []

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "ReviewBoard":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def fetch_reviews(self) -> Optional[List[ReviewResponse]]:
        """
        GET the stored reviews, newest first.

        Returns None (after logging) when the API answers non-2xx, can't be
        reached, or sends a body that isn't a review list; callers keep
        whatever they rendered before.
        """
        try:
            response = await self.client.get(NOTES_PATH)
        except httpx.HTTPError as e:
            logger.error("Error fetching %s: %s", NOTES_PATH, str(e))
            return None

        if not response.is_success:
            logger.error(
                "Failed to load notes: %d %s", response.status_code, response.reason_phrase
            )
            return None

        # A 2xx that isn't a list of reviews (e.g. a proxy error page) counts as
        # a failed load too
        try:
            return [ReviewResponse.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error("Unreadable response from %s: %s", NOTES_PATH, str(e))
            return None

    async def load_reviews(self) -> List[str]:
        """Re-render the card list; the placeholder stands in for an empty store."""
        records = await self.fetch_reviews()
        if records is None:
            return self.cards

        if not records:
            self.cards = [NO_REVIEWS_PLACEHOLDER]
        else:
            self.cards = [render_review_card(record) for record in records]
        return self.cards

    async def load_markers(self) -> List[MapMarker]:
        """Replace the stored-review markers with one per located review."""
        records = await self.fetch_reviews()
        if records is None:
            return self.map_view.markers

        markers = [build_marker(record) for record in records]
        self.map_view.markers = [marker for marker in markers if marker is not None]
        return self.map_view.markers

    def render_list(self) -> str:
        return "".join(self.cards)

    async def submit(self, form: ReviewForm) -> Optional[ReviewResponse]:
        """
        Submit one review.

        Steps:
            1. Skip silently if restaurant, location, scale or review is blank
            2. Geocode the location; no result → GeocodeNotFoundError,
               nothing created and no state changed
            3. Focus the map on the result
            4. Encode the text and POST everything
            5. Reload cards and markers

        Returns:
            The stored review, or None when skipped or the API refused it.

        Raises:
            GeocodeNotFoundError: The location couldn't be found
            GeocodingServiceError: The geocoder itself failed
        """
        form = form.model_copy(
            update={
                "restaurant": form.restaurant.strip(),
                "location": form.location.strip(),
                "review": form.review.strip(),
            }
        )
        if not form.is_complete():
            return None

        coords = await self.geocoder.lookup(form.location)
        if coords is None:
            raise GeocodeNotFoundError(form.location)

        self.map_view.focus(coords, zoom=FOCUS_ZOOM)

        text = encode_review_text(
            restaurant=form.restaurant,
            location=form.location,
            review=form.review,
            scale=form.scale,
            noise=form.noise,
            crowd=form.crowd,
            lighting=form.lighting,
            texture=form.texture,
            features=form.features,
        )
        body = {
            "text": text,
            "lat": coords.lat,
            "lon": coords.lon,
            "restaurant": form.restaurant,
            "location": form.location,
            "scale": form.scale,
            "review": form.review,
        }

        created: Optional[ReviewResponse] = None
        try:
            response = await self.client.post(NOTES_PATH, json=body)
        except httpx.HTTPError as e:
            logger.error("Error posting review for %r: %s", form.restaurant, str(e))
        else:
            if response.is_success:
                created = ReviewResponse.model_validate(response.json())
            else:
                logger.error(
                    "Could not create review for %r: %d", form.restaurant, response.status_code
                )

        await self.load_reviews()
        await self.load_markers()
        return created
