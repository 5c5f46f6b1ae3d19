"""
Pydantic models for API requests and responses
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    question: Optional[str] = None
    language: Optional[str] = None


class ChatResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: str = Field(serialization_alias="sessionId")


class MessageResponse(BaseModel):
    message: str


class LanguagesResponse(BaseModel):
    default: str
    languages: Dict[str, str]


class HealthResponse(BaseModel):
    status: str
    active_sessions: int
