"""
Artwork overviews - short historical summaries from the Gemini API.

The only entry point is ``OverviewService.generate_overview``. Failures are
raised as the typed errors from ``art_explorer.errors``; nothing is retried.
"""

import json
import logging
from typing import Optional

import requests

from .config import config
from .errors import (
    DecodeFailure,
    EncodeFailure,
    InvalidRequest,
    MissingCredential,
    NoContent,
    RemoteStatusError,
    TransportFailure,
)
from .models import NO_DESCRIPTION, Artwork, Exhibition

logger = logging.getLogger(__name__)

# Exhibition title used for artworks opened from search results
SEARCH_RESULTS_TITLE = "Search Results"

PROMPT_INTRO = (
    "Please provide a concise historical overview of this artwork in exactly 1 paragraph "
    "(4-6 sentences). Focus on the most important historical context, artistic significance, "
    "and one interesting fact. Keep it engaging and informative for museum visitors."
)

PROMPT_OUTRO = (
    "Provide only the most essential historical context, key artistic techniques or style, "
    "cultural significance, and one compelling fact about this piece. Write in a single, "
    "well-structured paragraph that flows naturally. Make it accessible and engaging for "
    "general museum visitors."
)


def build_prompt(artwork: Artwork, exhibition: Exhibition) -> str:
    """Compose the instruction and artwork details sent to the model."""
    lines = [
        PROMPT_INTRO,
        "",
        "Artwork Details:",
        f"- Title: {artwork.display_title}",
        f"- Artist: {artwork.display_artist}",
        f"- Date: {artwork.display_date}",
    ]
    if artwork.display_description != NO_DESCRIPTION:
        lines.append(f"- Description: {artwork.display_description}")
    if exhibition.display_title != SEARCH_RESULTS_TITLE:
        lines.append(f"- Exhibition: {exhibition.display_title}")
    lines += ["", PROMPT_OUTRO]
    return "\n".join(lines)


class OverviewService:
    """Client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = config.FETCH_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model_url = model_url or config.GEMINI_MODEL_URL
        self.session = session or requests.Session()
        self.timeout = timeout

    def generate_overview(self, artwork: Artwork, exhibition: Exhibition) -> str:
        """Return a one-paragraph overview of ``artwork`` seen in ``exhibition``."""
        if not self.api_key:
            raise MissingCredential("Gemini API key not found. Please add GEMINI_API_KEY to .env")

        if not self.model_url.startswith(("http://", "https://")):
            raise InvalidRequest("Invalid API URL")

        payload = {"contents": [{"parts": [{"text": build_prompt(artwork, exhibition)}]}]}
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise EncodeFailure(f"Failed to encode request: {e}") from e

        try:
            logger.debug("Requesting overview for artwork %s", artwork.id)
            response = self.session.post(
                self.model_url,
                params={"key": self.api_key},
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
            raise InvalidRequest("Invalid API URL") from e
        except requests.exceptions.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            raise TransportFailure(f"Failed to reach Gemini API: {e}") from e

        if response.status_code != 200:
            logger.error("Gemini API error %s: %s", response.status_code, response.text[:500])
            raise RemoteStatusError(
                response.status_code, f"API error with status code: {response.status_code}"
            )

        try:
            candidates = response.json()["candidates"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Gemini response parse error: %s", e)
            raise DecodeFailure(f"Failed to decode response: {e}") from e

        try:
            text = candidates[0]["content"]["parts"][0]["text"]
        except (IndexError, KeyError, TypeError):
            raise NoContent() from None

        if not isinstance(text, str) or not text.strip():
            raise NoContent()
        return text.strip()
