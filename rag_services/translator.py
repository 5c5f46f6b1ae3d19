"""
Translation of user questions and AI answers.

Translation is best effort: any failure hands back the original text.
"""
import logging
from typing import Dict, Optional, Protocol

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq

from core.errors import TranslationFailure

logger = logging.getLogger(__name__)


SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "bn": "Bengali",
    "ta": "Tamil",
    "te": "Telugu",
    "mr": "Marathi",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    "ur": "Urdu",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
}

TRANSLATION_SYSTEM_PROMPT = """You are a professional translator for legal content.
Translate the text from {source} to {target}.
Keep legal terms accurate, keep formatting such as bullet points and line breaks, and do not add explanations.
Reply with the translated text only."""


def normalize_language(code: Optional[str], default: str = "en") -> str:
    if not code:
        return default
    code = code.strip().lower()
    return code if code in SUPPORTED_LANGUAGES else default


class Translator(Protocol):
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        ...


class PassThroughTranslator:
    """Used when translation is disabled."""

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        return text


class LLMTranslator:
    """Translates text with a small Groq-hosted model."""

    def __init__(self, api_key: str, model: str = "llama-3.1-8b-instant"):
        self._llm: Optional[ChatGroq] = None
        self.api_key = api_key
        self.model = model

    def _ensure_client(self) -> ChatGroq:
        if self._llm is None:
            self._llm = ChatGroq(api_key=self.api_key, model_name=self.model, temperature=0)
        return self._llm

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        if not text or source_lang == target_lang:
            return text
        try:
            return await self._translate(text, source_lang, target_lang)
        except TranslationFailure as e:
            logger.warning("Translation %s->%s returned nothing usable: %s", source_lang, target_lang, e)
        except Exception as e:
            logger.warning("Translation %s->%s failed, using original text: %s", source_lang, target_lang, e, exc_info=True)
        return text

    async def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        source = SUPPORTED_LANGUAGES.get(source_lang)
        target = SUPPORTED_LANGUAGES.get(target_lang)
        if source is None or target is None:
            raise TranslationFailure(f"Unsupported language pair {source_lang}->{target_lang}")

        response = await self._ensure_client().ainvoke([
            SystemMessage(content=TRANSLATION_SYSTEM_PROMPT.format(source=source, target=target)),
            HumanMessage(content=text),
        ])
        translated = (response.content or "").strip()
        if not translated:
            raise TranslationFailure("Empty translation")
        return translated
