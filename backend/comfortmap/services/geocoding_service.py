"""
ComfortMap Backend — Geocoding Service
========================================

What:  Turns a free-text location into coordinates via a Nominatim-compatible
       search endpoint.
Why:   Every review is pinned on the map; the form only collects text.
How:   One GET per lookup (format=json, limit=1) through an httpx AsyncClient.
       Zero results → None. No retries.
Who:   Called by ReviewBoard.submit() before anything is sent to the API.
"""

import logging
from typing import Optional

import httpx

from comfortmap.config import settings
from comfortmap.exceptions import GeocodingServiceError
from comfortmap.schemas.board import Coordinates

logger = logging.getLogger(__name__)


class Geocoder:
    """
    Nominatim search client.

    The httpx client can be injected (tests pass one built on MockTransport);
    otherwise one is created per lookup with the configured timeout.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url or settings.geocoder_url
        self.user_agent = user_agent or settings.geocoder_user_agent
        self._client = client

    async def _get(self, params: dict) -> httpx.Response:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self._client is not None:
            return await self._client.get(self.url, params=params, headers=headers)
        async with httpx.AsyncClient(timeout=settings.geocoder_timeout) as client:
            return await client.get(self.url, params=params, headers=headers)

    async def lookup(self, query: str) -> Optional[Coordinates]:
        """
        Geocode a location string.

        Returns:
            Coordinates of the first result, or None when nothing matched.

        Raises:
            GeocodingServiceError: Transport failure, non-2xx status, or a
            body that isn't the expected JSON list.
        """
        params = {"format": "json", "limit": 1, "q": query}
        try:
            response = await self._get(params)
        except httpx.HTTPError as e:
            logger.error("Geocoder request failed for %r: %s", query, str(e))
            raise GeocodingServiceError(context={"query": query, "error": str(e)}) from e

        if not response.is_success:
            logger.error("Geocoder returned %d for %r", response.status_code, query)
            raise GeocodingServiceError(
                context={"query": query, "status": response.status_code}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GeocodingServiceError(
                message="The geocoding service returned an unreadable response",
                context={"query": query},
            ) from e

        if not data:
            logger.info("No geocoding result for %r", query)
            return None

        first = data[0]
        try:
            return Coordinates(lat=float(first["lat"]), lon=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingServiceError(
                message="The geocoding service returned an unreadable response",
                context={"query": query},
            ) from e
