"""
pytest shared fixtures.

Collaborators that would call external services (PDF parsing, LLMs,
translation) are replaced with in-process fakes; no API keys are needed.
Redis-backed tests run only when REDIS_URL is set.
"""
import os
from typing import List, Optional, Tuple

import httpx
import pytest

from core.errors import ExtractionFailure
from rag_services.context_store import InMemoryContextStore
from services.document_session import DocumentSessionController

LEASE_TEXT = "Lease Agreement between A and B. The monthly rent is 1200 USD, payable on the first day of each month."

requires_redis = pytest.mark.skipif(
    not os.getenv("REDIS_URL"),
    reason="needs REDIS_URL",
)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAnswerer:
    name = "fake"

    def __init__(self):
        self.calls: List[Tuple[str, Optional[str]]] = []

    async def generate(self, document_text: str, question: Optional[str] = None) -> str:
        self.calls.append((document_text, question))
        if question is None:
            return "Summary: this is a lease agreement."
        return f"Answer to: {question}"


class FakeTranslator:
    """Tags text with the target language so tests can see each hop."""

    def __init__(self):
        self.calls: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if source_lang == target_lang:
            return text
        return f"[{target_lang}] {text}"


def fake_extractor(pdf_bytes: bytes) -> str:
    if pdf_bytes.startswith(b"%PDF"):
        return LEASE_TEXT
    raise ExtractionFailure()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def store(clock):
    store = InMemoryContextStore(ttl_seconds=30 * 60, clock=clock)
    yield store
    await store.close()


@pytest.fixture
def answerer():
    return FakeAnswerer()


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def controller(store, answerer, translator):
    return DocumentSessionController(
        store=store,
        answerer=answerer,
        extractor=fake_extractor,
        translator=translator,
        max_file_size_mb=1,
    )


@pytest.fixture
def app(controller):
    """FastAPI app with the session controller swapped for the test one."""
    from main import create_app
    from rag_services.state import get_session_controller

    application = create_app()
    application.dependency_overrides[get_session_controller] = lambda: controller
    return application


@pytest.fixture
async def async_client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
