"""
ComfortMap Backend — Review Text Codec
========================================

What:  Encodes structured review fields into one display string and recovers
       them again with pattern extraction.
Why:   Every review carries a `text` field that is the source of truth for
       list display. The structured fields are embedded in it through fixed
       templates and bracketed tags:

           My review of {restaurant} in {location} is {review}
           (Rating: {scale}/10) [Noise: ..] [Crowd: ..] [Lighting: ..]
           [Texture: ..] [Features: a, b]

How:   decode_review_text() runs independent regex searches anchored on the
       template's literal markers. There is no shared parse tree, so each
       field falls back on its own when its pattern doesn't match.

Limitations (kept deliberately):
    - Nothing is escaped. Free text containing " in ", " is ", " (Rating:"
      or a "[Tag: " marker decodes to garbled fields.
    - Features are encoded but never decoded.
    - Decoding never raises; the worst case is fallback display values.
"""

import re
from typing import Any, Optional, Sequence

from comfortmap.schemas.board import NOT_APPLICABLE, NOT_SPECIFIED, DecodedReview

# ── Vocabularies ──────────────────────────────────────────────────────────
# What the form offers; the encoder renders any string it is given.
NOISE_LEVELS = ("quiet", "moderate", "loud")
CROWD_LEVELS = ("empty", "some", "busy")
LIGHTING_LEVELS = ("natural", "soft", "bright")
TEXTURE_LEVELS = ("soft", "mixed", "crunchy")

# ── Fallbacks ─────────────────────────────────────────────────────────────
UNKNOWN_RATING = "N/A"
UNKNOWN_RESTAURANT = "Unknown Location"
UNKNOWN_AREA = "Unknown Area"

# ── Patterns ──────────────────────────────────────────────────────────────
# Stands in for ".": no field crosses a line terminator (\n, \r, U+2028, U+2029)
_LINE = r"[^\n\r\u2028\u2029]"
# [0-9] rather than \d: only ASCII digits count as a rating
_RATING_RE = re.compile(r"Rating: (?P<rating>[0-9]+)/10")
_RESTAURANT_RE = re.compile(r"My review of (?P<restaurant>" + _LINE + r"+?) in ")
_LOCATION_RE = re.compile(r" in (?P<location>" + _LINE + r"+?) is ")
_REVIEW_RE = re.compile(r" is (?P<body>" + _LINE + r"+?) \(Rating:")
_TAG_RES = {
    name: re.compile(r"\[" + label + r": (?P<value>" + _LINE + r"+?)\]")
    for name, label in (
        ("noise", "Noise"),
        ("crowd", "Crowd"),
        ("lighting", "Lighting"),
        ("texture", "Texture"),
    )
}


def encode_review_text(
    restaurant: str,
    location: str,
    review: str,
    scale: Any,
    noise: str = NOT_SPECIFIED,
    crowd: str = NOT_SPECIFIED,
    lighting: str = NOT_SPECIFIED,
    texture: str = NOT_SPECIFIED,
    features: Sequence[str] = (),
) -> str:
    """
    Build the canonical review string.

    `scale` is rendered with str() exactly as given. Texture may also be
    NOT_APPLICABLE. An empty feature list renders as "[Features: ]".
    """
    return (
        f"My review of {restaurant} in {location} is {review} "
        f"(Rating: {scale}/10) "
        f"[Noise: {noise}] [Crowd: {crowd}] [Lighting: {lighting}] "
        f"[Texture: {texture}] [Features: {', '.join(features)}]"
    )


def _search(pattern: re.Pattern, text: str, group: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(group) if match else None


def decode_review_text(text: str) -> DecodedReview:
    """
    Recover structured fields from an encoded review string.

    Each field is extracted independently:

        rating       digits between "Rating: " and "/10"     else "N/A"
        restaurant   between "My review of " and " in "      else "Unknown Location"
        location     between " in " and " is "               else "Unknown Area"
        review_body  between " is " and " (Rating:"          else the raw text
        tags         between "[Tag: " and "]"                else None

    Restaurant, location and body are whitespace-stripped; tag values and the
    rating are returned as matched. Never raises for string input.
    """
    rating = _search(_RATING_RE, text, "rating")
    restaurant = _search(_RESTAURANT_RE, text, "restaurant")
    location = _search(_LOCATION_RE, text, "location")
    body = _search(_REVIEW_RE, text, "body")

    return DecodedReview(
        rating=rating if rating is not None else UNKNOWN_RATING,
        restaurant=restaurant.strip() if restaurant is not None else UNKNOWN_RESTAURANT,
        location=location.strip() if location is not None else UNKNOWN_AREA,
        review_body=body.strip() if body is not None else text,
        **{name: _search(pattern, text, "value") for name, pattern in _TAG_RES.items()},
    )


__all__ = [
    "NOT_APPLICABLE",
    "NOT_SPECIFIED",
    "NOISE_LEVELS",
    "CROWD_LEVELS",
    "LIGHTING_LEVELS",
    "TEXTURE_LEVELS",
    "encode_review_text",
    "decode_review_text",
]
