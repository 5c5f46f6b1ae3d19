"""
Session lifecycle for uploaded documents.

Sits between the HTTP routes and the context store: validates requests, opens a
session when a document is uploaded and resolves it again for follow-up
questions. The TTL policy belongs to the store the controller is built with.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from starlette.concurrency import run_in_threadpool

from core.errors import ExtractionFailure, InvalidInput, SessionExpiredError
from rag_services.context_store import ContextStore
from rag_services.llm import AnswerProvider
from rag_services.pdf_processor import PDFProcessor
from rag_services.translator import PassThroughTranslator, Translator

logger = logging.getLogger(__name__)

# Questions and documents are sent to the model in English
WORKING_LANGUAGE = "en"


@dataclass(frozen=True)
class UploadResult:
    session_id: str


@dataclass(frozen=True)
class AnswerRequest:
    session_id: str
    document_text: str
    question: str


@dataclass(frozen=True)
class DocumentReply:
    message: str
    session_id: str


class DocumentSessionController:
    def __init__(
        self,
        store: ContextStore,
        answerer: AnswerProvider,
        extractor: Callable[[bytes], str] = PDFProcessor.extract_text,
        translator: Optional[Translator] = None,
        allowed_extensions: Sequence[str] = (".pdf",),
        max_file_size_mb: int = 10,
    ):
        self.store = store
        self.answerer = answerer
        self.extractor = extractor
        self.translator = translator or PassThroughTranslator()
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)
        self.max_file_size_mb = max_file_size_mb

    # --- core operations ---

    async def handle_upload(self, document_text: str) -> UploadResult:
        if not document_text or not document_text.strip():
            raise InvalidInput("No document text to store.")
        session_id = await self.store.create(document_text)
        return UploadResult(session_id=session_id)

    async def handle_follow_up(self, session_id: str, question: str) -> AnswerRequest:
        if not session_id or not question or not question.strip():
            raise InvalidInput("Session ID and question are required.")

        document_text = await self.store.get(session_id)
        if document_text is None:
            logger.info("Follow-up for unknown or expired session %s", session_id)
            raise SessionExpiredError()
        return AnswerRequest(session_id=session_id, document_text=document_text, question=question.strip())

    async def clear_session(self, session_id: str) -> None:
        await self.store.expire(session_id)

    # --- request flows ---

    async def upload_document(self, pdf_bytes: bytes, filename: str, language: str = WORKING_LANGUAGE) -> DocumentReply:
        """Extract the PDF, open a session and return the initial summary."""
        self._validate_file(pdf_bytes, filename)

        document_text = await run_in_threadpool(self.extractor, pdf_bytes)
        if not document_text:
            raise ExtractionFailure("No readable text was found in the uploaded PDF.")

        upload = await self.handle_upload(document_text)
        try:
            summary = await self.answerer.generate(document_text, None)
            summary = await self.translator.translate(summary, WORKING_LANGUAGE, language)
        except Exception:
            # the client never receives this id, so drop the session now
            await self.store.expire(upload.session_id)
            raise
        return DocumentReply(message=summary, session_id=upload.session_id)

    async def answer_follow_up(self, session_id: str, question: str, language: str = WORKING_LANGUAGE) -> str:
        request = await self.handle_follow_up(session_id, question)

        question_en = await self.translator.translate(request.question, language, WORKING_LANGUAGE)
        answer = await self.answerer.generate(request.document_text, question_en)
        return await self.translator.translate(answer, WORKING_LANGUAGE, language)

    def check_file_size(self, size: int | None) -> None:
        """Reject an upload over the size limit. ``None`` means the size is unknown yet."""
        if size is not None and size > self.max_file_size_mb * 1024 * 1024:
            raise InvalidInput("File size limit exceeded.")

    def _validate_file(self, pdf_bytes: bytes, filename: str) -> None:
        if not pdf_bytes:
            raise InvalidInput("No PDF file uploaded.")
        if Path(filename or "").suffix.lower() not in self.allowed_extensions:
            raise InvalidInput("Invalid file type. Please upload a PDF.")
        self.check_file_size(len(pdf_bytes))
