"""
ComfortMap Backend — Presentation Schemas
==========================================

What:  Pydantic models used by the review text codec and the ReviewBoard client.
Why:   The presentation layer works with the same typed models as the API,
       so decoded fields, form input and map state are all validated objects.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

# Sentinels meaning "field intentionally omitted"
NOT_SPECIFIED = "not specified"
NOT_APPLICABLE = "not-applicable"


class DecodedReview(BaseModel):
    """
    What:  Structured fields recovered from a review's `text`.
    How:   Built by decode_review_text(); every field already holds its
           fallback when the pattern didn't match.

    Sensory tags are None when absent from the text. A tag that is present
    but holds a sentinel is kept here as-is; sensory_tags() filters it out.
    """
    restaurant: str
    location: str
    review_body: str
    rating: str
    noise: Optional[str] = None
    crowd: Optional[str] = None
    lighting: Optional[str] = None
    texture: Optional[str] = None

    def sensory_tags(self) -> List[Tuple[str, str]]:
        """(tag, value) pairs to render, in display order, sentinels excluded."""
        tags = []
        for name in ("noise", "crowd", "lighting", "texture"):
            value = getattr(self, name)
            if not value or value == NOT_SPECIFIED:
                continue
            if name == "texture" and value == NOT_APPLICABLE:
                continue
            tags.append((name, value))
        return tags


class Coordinates(BaseModel):
    """A geocoded point."""
    lat: float
    lon: float


class ReviewForm(BaseModel):
    """
    What:  One filled-in review form, as the browser would submit it.
    Why defaults: They match the form's initial state (slider at 7, the
    "moderate / some / natural / n/a" radios checked, no features).
    """
    restaurant: str = ""
    location: str = ""
    scale: str = Field(default="7", description="Slider value, kept as the string the form holds")
    review: str = ""
    noise: str = "moderate"
    crowd: str = "some"
    lighting: str = "natural"
    texture: str = NOT_APPLICABLE
    features: List[str] = Field(default_factory=list)

    def is_complete(self) -> bool:
        """All of restaurant, location, scale and review are non-blank."""
        return all(
            value.strip()
            for value in (self.restaurant, self.location, self.scale, self.review)
        )


class MapMarker(BaseModel):
    """A marker on the review map with its popup HTML."""
    lat: float
    lon: float
    popup: str = ""


class MapView(BaseModel):
    """
    What:  The map's current viewport plus the "just submitted" marker.
    Who:   Owned by one ReviewBoard for the lifetime of its page session.
    """
    center: Coordinates = Field(default_factory=lambda: Coordinates(lat=40.7128, lon=-74.006))
    zoom: int = 12
    current_marker: Optional[Coordinates] = None
    markers: List[MapMarker] = Field(default_factory=list)

    def focus(self, point: Coordinates, zoom: int = 15) -> None:
        """Centre on a point and move (or create) the current marker there."""
        self.center = point
        self.zoom = zoom
        self.current_marker = point
