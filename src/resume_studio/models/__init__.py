"""Data models for the resume studio pipeline."""

from resume_studio.models.chat import ChatTurnResult, ConversationMessage
from resume_studio.models.knowledge import KnowledgeRecord
from resume_studio.models.resume import AdvisorResponse, BuildResult, ExtractedSection

__all__ = [
    "AdvisorResponse",
    "BuildResult",
    "ChatTurnResult",
    "ConversationMessage",
    "ExtractedSection",
    "KnowledgeRecord",
]
