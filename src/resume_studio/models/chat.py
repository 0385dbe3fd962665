"""Pydantic models for chat sessions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class ConversationMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ChatTurnResult(BaseModel):
    reply: str
    resume_request: bool = False  # which instruction variant was used
    document: str | None = None  # assembled resume markdown when the reply held resume content

    @property
    def resume_updated(self) -> bool:
        return self.document is not None
