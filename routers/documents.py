import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from core.config import settings
from core.errors import LawWiseError
from models.document_model import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    LanguagesResponse,
    MessageResponse,
    UploadResponse,
)
from rag_services.state import get_session_controller
from rag_services.translator import SUPPORTED_LANGUAGES, normalize_language
from services.document_session import DocumentSessionController

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(error: LawWiseError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    pdfFile: Optional[UploadFile] = File(None),
    language: Optional[str] = Form(None),
    controller: DocumentSessionController = Depends(get_session_controller),
):
    """
    Upload a PDF, open a document session and return the AI summary.

    Response:
    ```json
    {
        "message": "This is a residential lease agreement...",
        "sessionId": "3f2b9c0e6d0b4a51a4c1f0b8e2d7c9aa"
    }
    ```
    """
    if pdfFile is None:
        raise HTTPException(status_code=400, detail="No PDF file uploaded.")

    try:
        controller.check_file_size(pdfFile.size)
    except LawWiseError as e:
        raise _http_error(e)

    pdf_bytes = await pdfFile.read()
    try:
        reply = await controller.upload_document(
            pdf_bytes,
            pdfFile.filename,
            normalize_language(language, settings.DEFAULT_LANGUAGE),
        )
    except LawWiseError as e:
        raise _http_error(e)
    except Exception:
        logger.exception("Error processing file %s", pdfFile.filename)
        raise HTTPException(status_code=500, detail="Failed to process the PDF file.")

    return UploadResponse(message=reply.message, session_id=reply.session_id)


@router.post("/chat", response_model=ChatResponse)
async def follow_up_question(
    payload: ChatRequest,
    controller: DocumentSessionController = Depends(get_session_controller),
):
    """
    Answer a follow-up question about a previously uploaded document.

    Request body:
    ```json
    {
        "sessionId": "3f2b9c0e6d0b4a51a4c1f0b8e2d7c9aa",
        "question": "What is the monthly rent?",
        "language": "en"
    }
    ```

    Returns 404 when the session has expired or never existed.
    """
    try:
        answer = await controller.answer_follow_up(
            payload.session_id,
            payload.question,
            normalize_language(payload.language, settings.DEFAULT_LANGUAGE),
        )
    except LawWiseError as e:
        raise _http_error(e)
    except Exception:
        logger.exception("Error getting follow-up response for session %s", payload.session_id)
        raise HTTPException(status_code=500, detail="Failed to get a response from the AI.")

    return ChatResponse(message=answer)


@router.delete("/session/{session_id}", response_model=MessageResponse)
async def clear_session(
    session_id: str,
    controller: DocumentSessionController = Depends(get_session_controller),
):
    await controller.clear_session(session_id)
    return MessageResponse(message="Document session cleared.")


@router.get("/languages", response_model=LanguagesResponse)
async def list_languages():
    return LanguagesResponse(default=settings.DEFAULT_LANGUAGE, languages=SUPPORTED_LANGUAGES)


@router.get("/health", response_model=HealthResponse)
async def health(controller: DocumentSessionController = Depends(get_session_controller)):
    return HealthResponse(status="ok", active_sessions=await controller.store.count())
