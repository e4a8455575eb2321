"""Utilities to build multimodal chat-completion message payloads."""

import base64
from typing import Any, Dict, List, Optional


def to_image_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Encode raw image bytes into a data URL suitable for vision input."""
    if not image_bytes:
        raise ValueError("Image bytes are required.")
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def build_messages(prompt: str, image_url: Optional[str] = None, *, detail: Optional[str] = None) -> List[Dict[str, Any]]:
    """Build a single user message, with the image appended after the prompt when given."""
    if image_url is None:
        return [{"role": "user", "content": prompt}]

    image_part: Dict[str, Any] = {"url": image_url}
    if detail:
        image_part["detail"] = detail
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": image_part},
            ],
        }
    ]
