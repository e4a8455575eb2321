"""Dispatch image analysis to the provider selected by the job's mode."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

from openai import AsyncOpenAI

from models.analysis_mode import AnalysisMode, Provider
from models.analysis_models import ImageInput
from models.errors import JobProcessingError
from services.openai.search_analyzer import SearchAnalyzer
from services.openai.vision_analyzer import VisionAnalyzer
from utils.settings import Settings

LOGGER = logging.getLogger(__name__)


class AnalysisClient:
    """Front for the vision and search analyzers.

    Either analyzer may be missing when its API key is not configured; jobs
    that need it fail at setup via ``ensure_available``.
    """

    def __init__(self, vision: Optional[VisionAnalyzer] = None, search: Optional[SearchAnalyzer] = None) -> None:
        self.vision = vision
        self.search = search

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisClient":
        """Build provider clients for every configured API key.

        SDK retries are disabled; a failed call is recorded against its image.
        """
        vision = None
        if settings.openai_api_key:
            openai_client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)
            vision = VisionAnalyzer(openai_client, model=settings.openai_vision_model)
        else:
            LOGGER.warning("OPENAI_API_KEY is not set; vision modes are unavailable")

        search = None
        if settings.perplexity_api_key:
            perplexity_client = AsyncOpenAI(
                api_key=settings.perplexity_api_key,
                base_url=settings.perplexity_base_url,
                max_retries=0,
            )
            search = SearchAnalyzer(perplexity_client)
        else:
            LOGGER.warning("PERPLEXITY_API_KEY is not set; search modes are unavailable")

        return cls(vision=vision, search=search)

    def is_available(self, provider: Provider) -> bool:
        if provider is Provider.VISION:
            return self.vision is not None
        return self.search is not None

    def ensure_available(self, mode: AnalysisMode) -> None:
        """Raise ``JobProcessingError`` if the mode's provider is not configured."""
        if not self.is_available(mode.provider):
            raise JobProcessingError(f"No {mode.provider.value} provider is configured for mode '{mode.name}'")

    async def analyze(self, image: ImageInput, mode: AnalysisMode) -> str:
        """Return the analysis text for one image.

        Raises:
            ExternalApiError: If the provider call fails.
            JobProcessingError: If the provider is not configured.
        """
        self.ensure_available(mode)
        if mode.provider is Provider.VISION:
            return await self.vision.analyze(image, advanced=mode.enhanced)
        return await self.search.analyze(image, research=mode.enhanced)

    async def aclose(self) -> None:
        """Close the underlying HTTP clients."""
        for analyzer in (self.vision, self.search):
            if analyzer is not None:
                await analyzer.client.close()


def suggest_filename(description: str, original_name: str) -> str:
    """Turn a description into a lowercase, hyphenated filename keeping the original extension."""
    _, ext = os.path.splitext(original_name)
    slug = re.sub(r"[^a-z0-9\s-]", "", description.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug[:50] + ext


_FIELD_PATTERN = r"^\s*\*\*{label}:\*\*\s*(.+?)\s*$"


def _report_field(analysis_text: str, label: str) -> Optional[str]:
    match = re.search(_FIELD_PATTERN.format(label=re.escape(label)), analysis_text, re.MULTILINE)
    return match.group(1) if match else None


def extract_suggested_filename(analysis_text: str, original_name: str) -> Optional[str]:
    """Return the model's suggested filename, or one derived from its description.

    The suggestion is normalized with ``suggest_filename`` so it is always
    filesystem-safe and keeps the original extension.
    """
    ext = os.path.splitext(original_name)[1]
    suggested = _report_field(analysis_text, "Suggested")
    if suggested:
        stem, _ = os.path.splitext(suggested.strip("`[]\"' "))
        filename = suggest_filename(stem, original_name)
        if filename != ext:
            return filename

    description = _report_field(analysis_text, "Description")
    if description:
        filename = suggest_filename(description, original_name)
        if filename != ext:
            return filename
    return None
