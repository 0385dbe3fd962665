"""Section-level improvement, content suggestions and resume review."""

from __future__ import annotations

import logging

from resume_studio.clients.llm_client import LLMClient
from resume_studio.models.resume import AdvisorResponse
from resume_studio.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an experienced resume reviewer. Be specific and actionable: prefer quantified \
achievements, job-description keywords and concrete technologies over generic advice.

Respond ONLY with JSON in this format:
{
  "suggestions": ["short, actionable suggestion", "..."],
  "improved_content": "markdown content, or null when not requested"
}"""


class ResumeAdvisor:
    def __init__(self, llm: LLMClient, model: str | None = None, temperature: float = 0.3):
        self.llm = llm
        self.model = model
        self.temperature = temperature

    async def improve_section(self, section_id: str, content: str) -> AdvisorResponse:
        """Rewrite one resume section and explain the changes."""
        prompt = (
            f"Please improve the following {section_id} section of my resume. "
            f"Put the rewritten section in improved_content.\n\n{content}"
        )
        return await self._ask(prompt)

    async def suggest_content(self, section_id: str, context: str) -> AdvisorResponse:
        """Draft content for a section from free-form context."""
        prompt = (
            f"Please suggest content for the {section_id} section of my resume based on "
            f"this context. Put a draft of the section in improved_content.\n\n{context}"
        )
        return await self._ask(prompt)

    async def analyze_resume(self, markdown: str) -> AdvisorResponse:
        """Review a whole resume; suggestions only."""
        prompt = (
            "Please analyze this resume and provide suggestions for improvement. "
            f"Set improved_content to null.\n\n{markdown}"
        )
        return await self._ask(prompt)

    async def _ask(self, prompt: str) -> AdvisorResponse:
        response = await self.llm.complete(
            prompt,
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=self.temperature,
        )
        try:
            data = extract_json(response.text)
        except ValueError:
            # Plain-text reply: keep it as one suggestion rather than dropping it.
            logger.warning("Advisor reply was not JSON, keeping raw text")
            text = response.text.strip()
            return AdvisorResponse(suggestions=[text] if text else [])

        if not isinstance(data, dict):
            data = {"suggestions": data if isinstance(data, list) else [str(data)]}

        raw_suggestions = data.get("suggestions") or []
        if not isinstance(raw_suggestions, list):
            raw_suggestions = [raw_suggestions]
        suggestions = [str(s).strip() for s in raw_suggestions if str(s).strip()]
        improved = data.get("improved_content")
        if not isinstance(improved, str) or not improved.strip():
            improved = None
        return AdvisorResponse(suggestions=suggestions, improved_content=improved)
