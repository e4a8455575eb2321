"""Website image analysis using OpenAI's multimodal chat-completions API."""

import logging
import time
from typing import Any, Dict, List

from openai import APIError, AsyncOpenAI

from models.analysis_models import ImageInput
from models.errors import ExternalApiError
from services.openai.analysis_prompts import build_advanced_prompt, build_standard_prompt
from services.openai.media_inputs import build_messages, to_image_data_url
from services.openai.response_parser import extract_message_text, extract_usage

LOGGER = logging.getLogger(__name__)
PROVIDER_NAME = "OpenAI"
STANDARD_MAX_TOKENS = 300
ADVANCED_MAX_TOKENS = 500


class VisionAnalyzer:
    """Describe an image and suggest a filename with a vision model."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o") -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model

    async def analyze(self, image: ImageInput, *, advanced: bool = False) -> str:
        """Return the analysis report for one image.

        Args:
            image: Uploaded image to analyse.
            advanced: Request the nine-field report with a larger token cap.

        Raises:
            ExternalApiError: If the request fails or the reply has no text.
        """
        start_time = time.time()
        prompt = build_advanced_prompt(image.original_name) if advanced else build_standard_prompt(image.original_name)
        messages = build_messages(prompt, to_image_data_url(image.data, image.mime_type), detail="high")

        response = await self._create_response(messages, ADVANCED_MAX_TOKENS if advanced else STANDARD_MAX_TOKENS)
        try:
            text = extract_message_text(response)
        except ValueError as exc:
            LOGGER.error("Malformed OpenAI response for %s: %r", image.original_name, response)
            raise ExternalApiError(PROVIDER_NAME, str(exc)) from exc

        usage = extract_usage(response)
        LOGGER.info(
            "Vision analysis of %s took %.3fs (input_tokens=%s, output_tokens=%s)",
            image.original_name,
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return text

    async def _create_response(self, messages: List[Dict[str, Any]], max_tokens: int) -> Any:
        """Send the multimodal request to the chat-completions API."""
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
            )
        except APIError as exc:
            LOGGER.error("Error during OpenAI chat-completions call: %s", exc)
            raise ExternalApiError(PROVIDER_NAME, str(exc)) from exc
