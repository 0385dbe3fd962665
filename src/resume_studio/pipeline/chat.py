"""Conversational resume assistant - one chat session per user."""

from __future__ import annotations

import asyncio
import logging
import uuid

from resume_studio.clients.llm_client import LLMClient
from resume_studio.exceptions import EmptyMessageError, TurnCancelledError, TurnInFlightError
from resume_studio.models.chat import ChatTurnResult, ConversationMessage
from resume_studio.models.knowledge import KnowledgeRecord
from resume_studio.pipeline.assembler import ResumeDocument, assemble_document
from resume_studio.pipeline.intent import is_resume_request, looks_like_resume_content
from resume_studio.pipeline.prompt_composer import compose_knowledge_context
from resume_studio.pipeline.section_extractor import extract_sections
from resume_studio.store.knowledge_store import KnowledgeStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert resume writer and career coach helping the user build and improve their resume.

Rules:
1. Never write, ask for, or reveal the user's name, contact details or other identity fields. \
The resume header holding them is managed separately and must not appear in your reply.
2. Use structured markdown: `##` headings for resume sections, `###` for individual roles or \
entries, and bullet lists for details.
3. Ground everything in the user's knowledge base. Do not invent employers, dates or degrees."""

RESUME_INSTRUCTION = """\
The user is asking for resume content. Reply with resume section content only. Start every \
section with a level-2 heading such as `## Summary`, `## Experience`, `## Projects`, \
`## Skills` or `## Education`. No introduction, no closing remarks and no name or contact \
header. When target job descriptions are listed, tailor the content to the last one."""

ADVICE_INSTRUCTION = """\
Reply conversationally with specific, practical advice. Use short markdown headings and \
bullet lists where they help readability, but do not rewrite the whole resume unless the \
user asks for it."""

GREETING = "Hi! I'm your AI resume assistant. How can I help you with your resume today?"
GREETING_WITH_KNOWLEDGE = (
    " I can use the information from your knowledge base to provide personalized assistance."
)
GREETING_WITHOUT_KNOWLEDGE = (
    " You might want to fill out your knowledge base to get more personalized assistance."
)
GREETING_EXAMPLES = """

**Try these example prompts**:
- "Create a resume for a software engineer position"
- "Help me highlight my leadership skills"
- "How can I improve my work experience section?"
- "Update my resume based on the latest job description"

I'll keep your personal information in the header untouched while improving the other sections."""


def build_system_context(knowledge: KnowledgeRecord | None, instruction: str) -> str:
    """Fixed behavioral rules, the knowledge base snapshot, then the turn instruction."""
    context = compose_knowledge_context(knowledge)
    if context:
        knowledge_block = f"The user's knowledge base:\n\n{context}"
    else:
        knowledge_block = "The user's knowledge base is empty."
    return f"{SYSTEM_PROMPT}\n\n{knowledge_block}\n\n{instruction}"


def format_transcript(history: list[ConversationMessage], message: str) -> str:
    """Serialize prior turns (role-labeled) followed by the new user message."""
    parts = []
    if history:
        parts.append("Conversation so far:")
        parts.extend(f"{m.role.capitalize()}: {m.content}" for m in history)
        parts.append("")
    parts.append(f"User: {message}")
    return "\n".join(parts)


class ChatSession:
    """Drives one conversation: prompt, completion, extraction and document update.

    At most one completion runs at a time. A turn that fails or is cancelled
    leaves the transcript and the document exactly as they were before it.
    """

    def __init__(
        self,
        llm: LLMClient,
        knowledge_store: KnowledgeStore | None = None,
        document: ResumeDocument | None = None,
        *,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        session_id: str | None = None,
    ):
        self.llm = llm
        self.knowledge_store = knowledge_store
        self.document = document or ResumeDocument()
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.session_id = session_id or uuid.uuid4().hex
        self._messages: list[ConversationMessage] = []
        self._pending: asyncio.Future | None = None
        self._cancel_requested = False

    @property
    def messages(self) -> tuple[ConversationMessage, ...]:
        return tuple(self._messages)

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    def greeting(self) -> str:
        """Welcome text for a new session; not part of the transcript."""
        text = GREETING
        if self.knowledge_store is not None:
            knowledge = self.knowledge_store.get()
            if knowledge is None or knowledge.is_empty:
                text += GREETING_WITHOUT_KNOWLEDGE
            else:
                text += GREETING_WITH_KNOWLEDGE
        return text + GREETING_EXAMPLES

    def reset(self) -> None:
        if self.is_busy:
            raise TurnInFlightError("Cannot reset while a reply is pending")
        self._messages.clear()

    def cancel(self) -> bool:
        """Abandon the in-flight completion. Returns False when nothing is running."""
        if self._pending is None or self._pending.done():
            return False
        self._cancel_requested = True
        self._pending.cancel()
        return True

    async def submit(self, message: str) -> ChatTurnResult:
        """Run one chat turn and return the reply plus any resume update."""
        if self.is_busy:
            raise TurnInFlightError("A reply is still being generated for this session")
        if not message or not message.strip():
            raise EmptyMessageError("Message is empty")

        knowledge = self._snapshot()
        resume_request = is_resume_request(message)
        instruction = RESUME_INSTRUCTION if resume_request else ADVICE_INSTRUCTION
        system = build_system_context(knowledge, instruction)
        prompt = format_transcript(self._messages, message)
        logger.debug(
            "Chat turn %d (session=%s, resume_request=%s)",
            len(self._messages) // 2 + 1, self.session_id, resume_request,
        )

        user_message = ConversationMessage(role="user", content=message)
        self._messages.append(user_message)
        self._cancel_requested = False
        self._pending = asyncio.ensure_future(
            self.llm.complete(
                prompt,
                system=system,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        )
        try:
            response = await self._pending
        except asyncio.CancelledError:
            self._rollback(user_message)
            if self._cancel_requested:
                logger.info("Chat turn cancelled by user (session=%s)", self.session_id)
                raise TurnCancelledError() from None
            raise
        except Exception:
            self._rollback(user_message)
            raise
        finally:
            self._pending = None

        reply = response.text
        self._messages.append(ConversationMessage(role="assistant", content=reply))

        document = None
        if looks_like_resume_content(reply):
            sections = extract_sections(reply)
            if sections is None:
                logger.info("Reply looked like resume content but had no known sections")
            document = assemble_document(self.document.header, sections, reply)
            self.document.replace(document)

        return ChatTurnResult(reply=reply, resume_request=resume_request, document=document)

    def _snapshot(self) -> KnowledgeRecord | None:
        if self.knowledge_store is None:
            return None
        return self.knowledge_store.get()

    def _rollback(self, user_message: ConversationMessage) -> None:
        if self._messages and self._messages[-1] is user_message:
            self._messages.pop()
