"""Website image analysis using Perplexity's web-search chat-completions API.

Perplexity exposes an OpenAI-compatible endpoint, so the same ``AsyncOpenAI``
client type is used with a different ``base_url``.
"""

import logging
from typing import Any, Dict, List, Optional

from openai import APIError, AsyncOpenAI

from models.analysis_models import ImageInput
from models.errors import ExternalApiError
from services.openai.analysis_prompts import build_research_prompt, build_standard_prompt
from services.openai.media_inputs import build_messages, to_image_data_url
from services.openai.response_parser import extract_message_text

LOGGER = logging.getLogger(__name__)
PROVIDER_NAME = "Perplexity"
ANALYSIS_MODEL = "sonar"
RESEARCH_MODEL = "sonar-pro"
RESEARCH_HEADING = "**Web Research & Trends:**"


class SearchAnalyzer:
    """Describe an image, optionally followed by web research on design trends."""

    def __init__(self, client: AsyncOpenAI) -> None:
        if client is None:
            raise ValueError("Perplexity client must be provided.")
        self.client = client

    async def analyze(self, image: ImageInput, *, research: bool = False) -> str:
        """Return the analysis for one image, with a research section when requested.

        Raises:
            ExternalApiError: If either call fails or returns no text.
        """
        image_url = to_image_data_url(image.data, image.mime_type)
        image_analysis = await self._complete(build_standard_prompt(image.original_name), image_url, ANALYSIS_MODEL)
        if not research:
            return image_analysis

        web_research = await self._complete(build_research_prompt(image_analysis), None, RESEARCH_MODEL)
        return f"{image_analysis}\n\n{RESEARCH_HEADING}\n{web_research}"

    async def _complete(self, prompt: str, image_url: Optional[str], model: str) -> str:
        messages: List[Dict[str, Any]] = build_messages(prompt, image_url)
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                stream=False,
                max_tokens=400,
                temperature=0.2,
                top_p=0.9,
            )
        except APIError as exc:
            LOGGER.error("Error during Perplexity %s call: %s", model, exc)
            raise ExternalApiError(PROVIDER_NAME, str(exc)) from exc

        try:
            return extract_message_text(response)
        except ValueError as exc:
            LOGGER.error("Malformed Perplexity %s response: %r", model, response)
            raise ExternalApiError(PROVIDER_NAME, str(exc)) from exc
