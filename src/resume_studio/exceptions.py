"""Exception hierarchy for resume-studio."""

from __future__ import annotations

CREDENTIAL_REMEDIATION = (
    "The Anthropic API key is missing or invalid. Add ANTHROPIC_API_KEY=<your key> "
    "to the .env file in the project root (or export it in your shell) and try again."
)
BACKEND_FAILURE_MESSAGE = (
    "Failed to get a response from the AI. Please check your internet connection and try again."
)
CANCELLED_MESSAGE = "The request was cancelled. Nothing was changed."


class ResumeStudioError(Exception):
    """Base exception for all resume-studio errors."""


class GenerationError(ResumeStudioError):
    """Raised when the text-generation backend does not produce a reply.

    ``user_message`` is the human-readable text shown to the user.
    """

    default_message = BACKEND_FAILURE_MESSAGE

    def __init__(self, detail: str = "", *, user_message: str | None = None):
        super().__init__(detail or self.default_message)
        self.user_message = user_message or self.default_message


class CredentialMissingError(GenerationError):
    """Raised when the backend cannot be reached because no valid API key is configured."""

    default_message = CREDENTIAL_REMEDIATION


class BackendError(GenerationError):
    """Raised on transient network or service failures. Retryable by the user."""


class TurnCancelledError(GenerationError):
    """Raised when an in-flight completion was abandoned by the user."""

    default_message = CANCELLED_MESSAGE


class EmptyKnowledgeBaseError(ResumeStudioError):
    """Raised when a one-shot build is requested without any stored knowledge."""

    def __init__(self, message: str = "Knowledge base is empty. Add experience, education, "
                 "skills or a job description first."):
        super().__init__(message)


class TurnInFlightError(ResumeStudioError):
    """Raised when a chat message is submitted while a completion is still running."""


class EmptyMessageError(ResumeStudioError, ValueError):
    """Raised when a chat message is empty or whitespace-only."""
