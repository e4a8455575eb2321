"""Helpers to parse chat-completion outputs."""

from typing import Any, Dict, Optional


def extract_message_text(response: Any) -> str:
    """Return the trimmed text of the first choice.

    Raises:
        ValueError: If the response has no choices or the message is empty.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise ValueError("Response contained no choices.")

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        raise ValueError("Response message was empty.")
    return content.strip()


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "prompt_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "completion_tokens", None) if usage else None,
    }
