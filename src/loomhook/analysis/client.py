"""
Analysis service: turns a fabric photo into an AnalysisResult.

The engine only depends on the AnalysisService protocol. AnthropicVisionClient
is one implementation, talking to the Messages API over httpx; anything else
with an async submit() can be dropped in.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from loomhook.analysis.image import JPEG_QUALITY, MAX_IMAGE_SIDE, prepare_image
from loomhook.analysis.result import AnalysisResult, parse_analysis_text
from loomhook.errors import AnalysisFailed

logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """Analyze this weave pattern image and provide a JSON response ONLY (no other text) with this structure:
{
  "patternType": "plain|twill|satin|basket|complex",
  "description": "brief description of the weave pattern",
  "repeatWidth": number (how many threads before pattern repeats horizontally),
  "repeatHeight": number (how many threads before pattern repeats vertically),
  "hookPattern": [[1,-1,1,-1], [array of arrays where 1=hook up/warp over, -1=hook down/warp under, 0=undetermined]],
  "confidence": "high|medium|low"
}

Analyze the fabric structure carefully. Look for:
- Over/under interlacing patterns
- Repeat units
- Diagonal lines (twill)
- Even distribution (plain)
- Long floats (satin)

Return ONLY the JSON, no markdown backticks or explanations."""


def build_analysis_prompt() -> str:
    """Fixed instruction sent with every image."""
    return ANALYSIS_PROMPT


class AnalysisService(Protocol):
    """Capability interface for image analysis."""

    async def submit(self, image: Any) -> AnalysisResult:
        """
        Analyze one fabric image.

        Args:
            image: Image in any form the implementation accepts

        Returns:
            Parsed AnalysisResult

        Raises:
            AnalysisFailed: on transport, service or parsing failure
        """
        ...


@dataclass
class AnalysisClientConfig:
    """Configuration for AnthropicVisionClient."""

    api_url: str = "https://api.anthropic.com/v1/messages"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1000
    timeout: float = 30.0  # Seconds
    anthropic_version: str = "2023-06-01"
    api_key: str | None = field(default=None, repr=False)  # Falls back to ANTHROPIC_API_KEY
    max_image_side: int = MAX_IMAGE_SIDE
    jpeg_quality: int = JPEG_QUALITY

    def resolved_api_key(self) -> str | None:
        return self.api_key or os.environ.get("ANTHROPIC_API_KEY")


class AnthropicVisionClient:
    """
    Vision client for the Anthropic Messages API.

    Handles:
    - Resizing and base64-encoding the image
    - Sending image + fixed prompt in a single user message
    - Extracting the text reply and parsing it (fences tolerated)
    """

    def __init__(
        self,
        config: AnalysisClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or AnalysisClientConfig()
        self._transport = transport
        if not self.config.resolved_api_key():
            logger.warning("ANTHROPIC_API_KEY not set; analysis requests will be unauthenticated")

    def build_payload(self, image_b64: str) -> dict[str, Any]:
        """Request body for one image."""
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": "image/jpeg",
                                "data": image_b64,
                            },
                        },
                        {"type": "text", "text": build_analysis_prompt()},
                    ],
                }
            ],
        }

    def _headers(self) -> dict[str, str]:
        headers = {
            "content-type": "application/json",
            "anthropic-version": self.config.anthropic_version,
        }
        api_key = self.config.resolved_api_key()
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    async def submit(self, image: Any) -> AnalysisResult:
        """Analyze a PIL image, raw image bytes, or an image path."""
        image_b64 = prepare_image(
            image,
            max_side=self.config.max_image_side,
            quality=self.config.jpeg_quality,
        )
        payload = self.build_payload(image_b64)

        logger.debug("Calling vision API with model: %s", self.config.model)
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.config.api_url, headers=self._headers(), json=payload
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "HTTP error from vision API: %s - %s",
                exc.response.status_code,
                exc.response.text,
            )
            raise AnalysisFailed(f"API error: {exc.response.status_code}") from exc
        except httpx.TimeoutException as exc:
            logger.error("Timeout while calling vision API")
            raise AnalysisFailed("Vision API timeout") from exc
        except httpx.HTTPError as exc:
            logger.error("Transport error calling vision API: %s", exc)
            raise AnalysisFailed(f"Transport error: {exc}") from exc
        except ValueError as exc:
            logger.error("Vision API returned a non-JSON body")
            raise AnalysisFailed("Vision API returned a non-JSON body") from exc

        text = extract_reply_text(body)
        return parse_analysis_text(text)


def extract_reply_text(body: Any) -> str:
    """
    Pull the first text block out of a Messages API response body.

    Raises:
        AnalysisFailed: if the body has no text content
    """
    content = body.get("content") if isinstance(body, dict) else None
    if isinstance(content, list):
        for block in content:
            if isinstance(block, dict) and block.get("type", "text") == "text":
                text = block.get("text")
                if isinstance(text, str) and text.strip():
                    return text.strip()
    logger.warning("Empty response from vision API")
    raise AnalysisFailed("Empty response from vision API")
