"""
ComfortMap Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for the few ways a request can fail.
Why:   Custom exceptions enable targeted error handling with the right HTTP
       status code and a static client-facing message, while internal details
       stay in the server log.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses.
Who:   Raised by services; caught by global handlers or by the presentation layer.

Exception Hierarchy:
    ComfortMapError (base)
    ├── PersistenceError         → 500 Internal Server Error (store failure)
    ├── GeocodeNotFoundError     → presentation only (submission aborted)
    └── GeocodingServiceError    → presentation only (submission aborted)

Decoding never raises: text that doesn't match the review template degrades
to fallback display values (see services/review_text.py).
"""

from typing import Any, Dict, Optional


class ComfortMapError(Exception):
    """
    Base exception for all ComfortMap application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class PersistenceError(ComfortMapError):
    """
    Raised when the review store is unreachable or an insert/read fails.

    HTTP:    500 Internal Server Error, body {"error": message}

    The message is one of the static strings the API promises
    ("Failed to load notes", "Could not create note"). The underlying driver
    error goes into `context` and the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GeocodeNotFoundError(ComfortMapError):
    """
    Raised when the geocoder has no result for a location string.

    Presentation layer only: the submission is aborted before anything is
    sent to the API, and the user is told the location couldn't be found.
    """

    def __init__(
        self,
        query: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["query"] = query
        super().__init__(message="Could not find that location on the map.", context=ctx)
        self.query = query


class GeocodingServiceError(ComfortMapError):
    """Raised when the geocoding service itself fails (non-2xx or transport error)."""

    def __init__(
        self,
        message: str = "The geocoding service is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
