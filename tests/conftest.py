"""
Pytest configuration file.
Adds the project root to Python path and provides fakes for the provider
clients and the pacing clock.
"""
import os
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional

import bcrypt
import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

TEST_PASSWORD = "correct horse"

# Set environment variables for testing before any app imports
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD_HASH"] = bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(4)).decode()
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["APP_ENV"] = "test"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("PERPLEXITY_API_KEY", None)

from models.analysis_models import ImageInput  # noqa: E402
from services.queue.pacer import Pacer  # noqa: E402


def completion(text: Optional[str]):
    """Build an object shaped like a chat-completions response."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20),
    )


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replies are consumed in order."""

    def __init__(self, replies: List[object]) -> None:
        self.replies = list(replies)
        self.calls: List[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeProviderClient:
    def __init__(self, replies: List[object]) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions(replies))
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Virtual clock: records every requested wait and returns immediately."""

    def __init__(self) -> None:
        self.waits: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


def make_image(name: str = "photo.jpg", mime_type: str = "image/jpeg") -> ImageInput:
    return ImageInput(data=b"\xff\xd8\xff" + name.encode(), mime_type=mime_type, original_name=name)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def pacer(recording_sleep) -> Pacer:
    return Pacer(request_interval=0.5, batch_interval=2.0, job_interval=1.0, sleep=recording_sleep)


class StubAnalysisClient:
    """Analysis client double with per-image failures and an optional gate.

    When ``gate`` is set, every call waits on it, which lets tests observe a
    job while it is processing.
    """

    def __init__(self, fail_names=(), available: bool = True, gate=None) -> None:
        self.fail_names = set(fail_names)
        self.available = available
        self.gate = gate
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0

    def is_available(self, provider) -> bool:
        return self.available

    def ensure_available(self, mode) -> None:
        if not self.available:
            from models.errors import JobProcessingError

            raise JobProcessingError(f"No {mode.provider.value} provider is configured for mode '{mode.name}'")

    async def analyze(self, image, mode) -> str:
        self.calls.append(image.original_name)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if image.original_name in self.fail_names:
                raise RuntimeError(f"provider exploded on {image.original_name}")
            stem = image.original_name.rsplit(".", 1)[0]
            return (
                f"**Original:** {image.original_name}\n"
                f"**Suggested:** {stem}-described.jpg\n"
                f"**Description:** A picture of {stem}"
            )
        finally:
            self.active -= 1
