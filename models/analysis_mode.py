"""Analysis modes: which provider analyses a job and at what verbosity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from models.errors import ValidationError


class Provider(str, Enum):
    """External service that produces the analysis text."""

    SEARCH = "search"
    VISION = "vision"


class Tier(str, Enum):
    """Verbosity tier; ENHANCED adds research (search) or the long report (vision)."""

    STANDARD = "standard"
    ENHANCED = "enhanced"


@dataclass(frozen=True)
class AnalysisMode:
    """A provider/tier pair. Every combination is valid."""

    provider: Provider
    tier: Tier

    @property
    def name(self) -> str:
        return _WIRE_NAMES[(self.provider, self.tier)]

    @property
    def enhanced(self) -> bool:
        return self.tier is Tier.ENHANCED

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Optional[str]) -> "AnalysisMode":
        """Resolve a wire name (or legacy alias) into a mode.

        An empty value selects ``search-basic``.

        Raises:
            ValidationError: If the name is not a known mode.
        """
        key = (value or "").strip().lower()
        if not key:
            return SEARCH_BASIC
        mode = _BY_NAME.get(key)
        if mode is None:
            raise ValidationError(
                f"Unknown analysis mode '{value}'. Expected one of: {', '.join(sorted(_WIRE_NAMES.values()))}"
            )
        return mode


SEARCH_BASIC = AnalysisMode(Provider.SEARCH, Tier.STANDARD)
SEARCH_WITH_RESEARCH = AnalysisMode(Provider.SEARCH, Tier.ENHANCED)
VISION_STANDARD = AnalysisMode(Provider.VISION, Tier.STANDARD)
VISION_ADVANCED = AnalysisMode(Provider.VISION, Tier.ENHANCED)

_WIRE_NAMES = {
    (Provider.SEARCH, Tier.STANDARD): "search-basic",
    (Provider.SEARCH, Tier.ENHANCED): "search-with-research",
    (Provider.VISION, Tier.STANDARD): "vision-standard",
    (Provider.VISION, Tier.ENHANCED): "vision-advanced",
}

# Names used by older frontends.
_LEGACY_ALIASES = {
    "sonar": SEARCH_BASIC,
    "sonar-web": SEARCH_WITH_RESEARCH,
    "openai": VISION_STANDARD,
    "openai-standard": VISION_STANDARD,
    "openai-advanced": VISION_ADVANCED,
}

_BY_NAME: Dict[str, AnalysisMode] = {
    name: AnalysisMode(provider, tier) for (provider, tier), name in _WIRE_NAMES.items()
}
_BY_NAME.update(_LEGACY_ALIASES)
