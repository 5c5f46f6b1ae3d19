"""
LLM services for document summaries and follow-up answers
"""
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from openai import AsyncOpenAI

from core.errors import AnswerProviderFailure

logger = logging.getLogger(__name__)


INITIAL_ANALYSIS_SYSTEM_PROMPT = """You are LawWise, a helpful legal assistant chatbot. Your purpose is to help non-lawyers understand legal documents.
You will be given the text extracted from a user's document.
Your instructions are:
1. Identify what type of document it is (e.g., rental agreement, employment contract, NDA).
2. Provide a brief, easy-to-understand summary of the document's main purpose.
3. Highlight 2-3 of the most important clauses, rights, or obligations for the user in a bulleted list.
4. Ask the user what specific questions they have about the document.
5. IMPORTANT: Always include this disclaimer at the very end: "Disclaimer: I am an AI assistant and this is not legal advice. Please consult with a qualified legal professional."
"""

FOLLOW_UP_SYSTEM_PROMPT = """You are LawWise, a helpful legal assistant. The user has already uploaded a document, and you have its full text. Now, the user is asking a follow-up question about it.
Your task is to answer the user's question based *only* on the provided document context.
Do not make up information. If the answer is not in the document, say so.
Keep your answers concise and easy to understand.
"""

EMPTY_SUMMARY_MESSAGE = "I was unable to analyze the document."
EMPTY_ANSWER_MESSAGE = "Sorry, I couldn't find an answer to that question."


def build_prompt(document_text: str, question: Optional[str]) -> Tuple[str, str]:
    """Return (system, user) prompt text. No question means the initial summary."""
    if question is None:
        return (
            INITIAL_ANALYSIS_SYSTEM_PROMPT,
            "Here is the legal document I need help understanding. Please provide a summary "
            f'based on your instructions. Document Text: """{document_text}"""',
        )
    return (
        FOLLOW_UP_SYSTEM_PROMPT,
        f'Here is the full document text for context: """{document_text}"""\n\n'
        f'Now, please answer my specific question: "{question}"',
    )


def _answer_or_default(content: Optional[str], question: Optional[str]) -> str:
    content = (content or "").strip()
    if content:
        return content
    return EMPTY_SUMMARY_MESSAGE if question is None else EMPTY_ANSWER_MESSAGE


class AnswerProvider(Protocol):
    name: str

    async def generate(self, document_text: str, question: Optional[str] = None) -> str:
        ...


class GroqAnswerProvider:
    """Answers through Groq-hosted models via LangChain."""

    name = "groq"

    def __init__(self, api_key: str, model: str = "llama-3.3-70b-versatile", temperature: float = 0.3, max_tokens: int = 1024):
        # Built on first use so importing does not require a key
        self._llm: Optional[ChatGroq] = None
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _ensure_client(self) -> ChatGroq:
        if self._llm is None:
            self._llm = ChatGroq(
                api_key=self.api_key,
                model_name=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        return self._llm

    async def generate(self, document_text: str, question: Optional[str] = None) -> str:
        system, user = build_prompt(document_text, question)
        response = await self._ensure_client().ainvoke(
            [SystemMessage(content=system), HumanMessage(content=user)]
        )
        return _answer_or_default(response.content, question)


class OpenAIAnswerProvider:
    """Answers through OpenAI's chat models."""

    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", temperature: float = 0.3, max_tokens: int = 1024):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, document_text: str, question: Optional[str] = None) -> str:
        system, user = build_prompt(document_text, question)
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return _answer_or_default(response.choices[0].message.content, question)


class FallbackAnswerChain:
    """Tries each provider in order until one answers."""

    name = "fallback-chain"

    def __init__(self, providers: Sequence[AnswerProvider]):
        self.providers: List[AnswerProvider] = list(providers)

    async def generate(self, document_text: str, question: Optional[str] = None) -> str:
        for provider in self.providers:
            try:
                return await provider.generate(document_text, question)
            except Exception as e:
                logger.warning("Answer provider %s failed: %s", provider.name, e, exc_info=True)

        logger.error("No answer provider succeeded (%d configured)", len(self.providers))
        raise AnswerProviderFailure()
