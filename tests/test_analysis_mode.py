import pytest

from models.analysis_mode import (
    SEARCH_BASIC,
    SEARCH_WITH_RESEARCH,
    VISION_ADVANCED,
    VISION_STANDARD,
    AnalysisMode,
    Provider,
    Tier,
)
from models.errors import ValidationError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("search-basic", SEARCH_BASIC),
        ("search-with-research", SEARCH_WITH_RESEARCH),
        ("vision-standard", VISION_STANDARD),
        ("vision-advanced", VISION_ADVANCED),
        ("sonar", SEARCH_BASIC),
        ("sonar-web", SEARCH_WITH_RESEARCH),
        ("openai-advanced", VISION_ADVANCED),
        ("  Vision-Standard ", VISION_STANDARD),
    ],
)
def test_parse_known_names(name, expected):
    assert AnalysisMode.parse(name) == expected


def test_empty_mode_defaults_to_search_basic():
    assert AnalysisMode.parse(None) is SEARCH_BASIC
    assert AnalysisMode.parse("") is SEARCH_BASIC


def test_unknown_mode_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        AnalysisMode.parse("gemini-ultra")
    assert "gemini-ultra" in excinfo.value.message


def test_every_provider_tier_pair_has_a_wire_name():
    names = {AnalysisMode(provider, tier).name for provider in Provider for tier in Tier}
    assert names == {"search-basic", "search-with-research", "vision-standard", "vision-advanced"}
    for name in names:
        assert AnalysisMode.parse(name).name == name


def test_enhanced_flag_follows_tier():
    assert VISION_ADVANCED.enhanced
    assert SEARCH_WITH_RESEARCH.enhanced
    assert not VISION_STANDARD.enhanced
