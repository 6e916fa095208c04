"""
Coach Schemas
=============

Request and response bodies for the AI relay endpoints (life coach chat,
alignment check, knowledge recall).
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """One prior turn. System messages are never accepted from the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1, max_length=4000)
    conversation_history: list[ChatMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
    )


class AlignmentRequest(BaseModel):
    vision: str = Field(default="", max_length=4000)
    values: list[str] = Field(default_factory=list, max_length=20)


class AlignmentResponse(BaseModel):
    response: str


class RecallRequest(BaseModel):
    question: str = Field(default="", max_length=4000)
    action: Literal["ask", "summarize"] = "ask"


class RecallResponse(BaseModel):
    answer: str
