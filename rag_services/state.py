"""
Shared in-memory state for the document services.

One context store and one controller per process, so the upload and chat
routes see the same sessions.
"""
import logging
from typing import List, Optional

from core.config import settings
from rag_services.context_store import ContextStore, build_context_store
from rag_services.llm import AnswerProvider, FallbackAnswerChain, GroqAnswerProvider, OpenAIAnswerProvider
from rag_services.translator import LLMTranslator, PassThroughTranslator, Translator
from services.document_session import DocumentSessionController

logger = logging.getLogger(__name__)

_controller: Optional[DocumentSessionController] = None


def build_answer_chain() -> FallbackAnswerChain:
    providers: List[AnswerProvider] = []
    if settings.GROQ_API_KEY:
        providers.append(GroqAnswerProvider(
            api_key=settings.GROQ_API_KEY,
            model=settings.CHAT_MODEL,
            temperature=settings.TEMPERATURE,
            max_tokens=settings.MAX_TOKENS,
        ))
    if settings.OPENAI_API_KEY:
        providers.append(OpenAIAnswerProvider(
            api_key=settings.OPENAI_API_KEY,
            model=settings.FALLBACK_CHAT_MODEL,
            temperature=settings.TEMPERATURE,
            max_tokens=settings.MAX_TOKENS,
        ))
    if not providers:
        logger.warning("Neither GROQ_API_KEY nor OPENAI_API_KEY is set; AI answers will fail")
    return FallbackAnswerChain(providers)


def build_translator() -> Translator:
    if settings.TRANSLATION_ENABLED and settings.GROQ_API_KEY:
        return LLMTranslator(api_key=settings.GROQ_API_KEY, model=settings.TRANSLATION_MODEL)
    return PassThroughTranslator()


def build_store() -> ContextStore:
    return build_context_store(
        settings.CONTEXT_STORE_BACKEND,
        ttl_seconds=settings.session_ttl_seconds,
        redis_url=settings.REDIS_URL,
    )


async def get_session_controller() -> DocumentSessionController:
    """FastAPI dependency returning the process-wide controller."""
    global _controller
    if _controller is None:
        _controller = DocumentSessionController(
            store=build_store(),
            answerer=build_answer_chain(),
            translator=build_translator(),
            allowed_extensions=settings.ALLOWED_EXTENSIONS,
            max_file_size_mb=settings.MAX_FILE_SIZE_MB,
        )
    return _controller


async def close_session_controller() -> None:
    global _controller
    if _controller is not None:
        await _controller.store.close()
        _controller = None
