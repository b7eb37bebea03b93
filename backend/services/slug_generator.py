"""
Client for the slug generation endpoint.
"""

import logging
from urllib.parse import quote

import httpx

from lib.errors import SlugGenerationError

logger = logging.getLogger(__name__)


class SlugGenerator:
    """Asks the server for a canonical, unique slug for some text."""

    def __init__(self, client: httpx.AsyncClient, api_url: str, slug_type: str = "post"):
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.slug_type = slug_type

    async def generate_slug(self, text: str) -> str:
        """
        Request a slug for text.

        Args:
            text: Free text, e.g. a post title or a user typed slug

        Returns:
            The server's slug, or "" when text is empty

        Raises:
            SlugGenerationError: The request failed or the response was malformed
        """
        if not text:
            return ""

        url = f"{self.api_url}/slugs/{self.slug_type}/{quote(text, safe='')}"
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            return response.json()["slugs"][0]["slug"]
        except httpx.HTTPError as e:
            logger.error(f"Error requesting slug for '{text}': {e}")
            raise SlugGenerationError(f"Unable to generate a slug for '{text}'") from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed slug response for '{text}': {e}")
            raise SlugGenerationError(f"Malformed slug response for '{text}'") from e
