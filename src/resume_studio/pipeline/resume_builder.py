"""One-shot resume build from the stored knowledge base."""

from __future__ import annotations

import logging

from resume_studio.clients.llm_client import LLMClient
from resume_studio.exceptions import EmptyKnowledgeBaseError
from resume_studio.models.resume import BuildResult
from resume_studio.pipeline.assembler import DEFAULT_HEADER, ResumeDocument, assemble_document
from resume_studio.pipeline.prompt_composer import compose_prompt
from resume_studio.pipeline.section_extractor import extract_sections
from resume_studio.store.knowledge_store import KnowledgeStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a professional resume writer. Write resume sections in markdown using `##` headings \
for sections and bullet lists for details. Use only facts from the provided information. \
Never include the candidate's name or contact details; the resume header is added separately."""


class ResumeBuilder:
    def __init__(
        self,
        llm: LLMClient,
        knowledge_store: KnowledgeStore,
        *,
        header: str = DEFAULT_HEADER,
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ):
        self.llm = llm
        self.knowledge_store = knowledge_store
        self.header = header
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def build(
        self,
        instruction: str | None = None,
        document: ResumeDocument | None = None,
    ) -> BuildResult:
        """Generate a full resume; replaces ``document`` when one is given.

        The document's own header is used when a document is passed.
        """
        knowledge = self.knowledge_store.get()
        if knowledge is None or knowledge.is_empty:
            raise EmptyKnowledgeBaseError()

        prompt = compose_prompt(knowledge, instruction)
        response = await self.llm.complete(
            prompt,
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        sections = extract_sections(response.text)
        if sections is None:
            logger.info("Build output had no recognized sections, using raw text")
        header = document.header if document is not None else self.header
        markdown = assemble_document(header, sections, response.text)

        if document is not None:
            document.replace(markdown)

        return BuildResult(
            markdown=markdown,
            sections=sections or [],
            raw_completion=response.text,
        )
