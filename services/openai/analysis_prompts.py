"""Prompt builders for website image analysis."""

SCREENSHOT_RULE = (
    "If this appears to be a screenshot, has visible UI elements (browser bars, desktop elements, "
    "app interfaces, window frames, taskbars), or looks like it needs cropping to remove unwanted parts, "
    "mark it as NOT suitable for website use. Screenshots and images with extraneous UI elements are "
    "unprofessional for website use."
)


def build_standard_prompt(original_name: str) -> str:
    """Return the five-field prompt shared by search mode and standard vision mode."""
    return f"""Analyze this image with the original filename "{original_name}". Provide a detailed analysis in the following format:

**Original:** {original_name}
**Suggested:** [new descriptive filename with extension]
**Description:** [Detailed description of what the image shows - be very specific about elements, colors, layout, text, UI components, etc.]
**Website Usage:** [Explain where and how this could be used on a website - hero section, about page, product gallery, blog post, etc.]
**Professional Assessment:** [State whether this image is suitable for professional website use or if it has issues like being blurry, poorly cropped, unprofessional lighting, etc. IMPORTANT: {SCREENSHOT_RULE} Be honest about quality.]

Focus on creating meaningful, SEO-friendly filenames that describe both the content and potential use case. Pay special attention to identifying screenshots or images with extraneous elements."""


def build_advanced_prompt(original_name: str) -> str:
    """Return the nine-field report prompt used by advanced vision mode."""
    return f"""Analyze this image with the original filename "{original_name}". Provide an ultra-detailed professional analysis in the following format:

**Original:** {original_name}
**Suggested:** [new descriptive filename with extension - include technical context]
**Description:** [Extremely detailed description including specific UI elements, typography, color schemes, layout patterns, brand elements, etc.]
**Technical Specs:** [Image dimensions if visible, file format recommendations, compression suggestions, resolution assessment]
**Website Suitability Assessment:** [CRITICAL EVALUATION: Should this image be used on a website at all? Check for: sensitive/confidential information, personal data, inappropriate content, unprofessional elements, poor image quality, copyright concerns, or anything that could harm brand reputation. ESPECIALLY IMPORTANT: {SCREENSHOT_RULE} Be brutally honest - if it shouldn't be used, clearly state WHY NOT.]
**Website Usage:** [Only if suitable for web use - Multiple specific use cases with detailed placement recommendations - hero sections, landing pages, product showcases, blog headers, social media, etc.]
**SEO Considerations:** [Alt text suggestions, semantic meaning, keyword opportunities]
**Accessibility Assessment:** [Color contrast, readability, accessibility concerns, screen reader considerations]
**Professional Assessment:** [Comprehensive quality evaluation including composition, lighting, technical quality, brand consistency, and specific improvement recommendations]
**Content Strategy:** [How this image fits into broader content marketing, user experience considerations, conversion potential]

Focus on creating highly optimized, contextual filenames that serve both technical and marketing purposes."""


def build_research_prompt(image_analysis: str) -> str:
    """Return the follow-up prompt asking for design-trend research on a prior analysis."""
    return (
        f'Based on this image analysis: "{image_analysis}", research current web design trends, '
        "similar successful implementations, and industry best practices. Provide additional insights about:\n"
        "- Current design trends that match this style\n"
        "- Similar implementations on popular websites\n"
        "- Modern naming conventions for this type of content\n"
        "- Industry-specific recommendations"
    )


def build_failure_report(original_name: str) -> str:
    """Placeholder analysis recorded when an image could not be analysed."""
    return (
        f"**Original:** {original_name}\n"
        "**Error:** Unable to process this image\n"
        "**Description:** Error occurred during analysis\n"
        "**Website Usage:** N/A\n"
        "**Professional Assessment:** Could not assess due to processing error"
    )
