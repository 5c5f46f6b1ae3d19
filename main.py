import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.errors import InvalidInput
from core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()

    application = FastAPI(
        title="LawWise API",
        description="Plain-language summaries and follow-up Q&A for uploaded legal documents",
        version="1.0.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # pydantic errors echo the raw input, keep them in the log only
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        error = InvalidInput("Invalid request body.")
        return JSONResponse(status_code=error.status_code, content={"error": error.message})

    # Session store lifecycle
    from rag_services.state import close_session_controller

    @application.on_event("shutdown")
    async def shutdown_event():
        await close_session_controller()

    # Routers are imported lazily to avoid circular deps during app creation
    from routers.documents import router as documents_router

    application.include_router(documents_router, prefix="/api", tags=["documents"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=5000, reload=True)
