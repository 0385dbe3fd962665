"""Pydantic model for the user's stored career knowledge."""

from __future__ import annotations

from pydantic import BaseModel, Field

KNOWLEDGE_TEXT_FIELDS = ("experiences", "education", "skills")


class KnowledgeRecord(BaseModel):
    experiences: str = ""
    education: str = ""
    skills: str = ""
    job_descriptions: list[str] = Field(default_factory=list)  # oldest first

    @property
    def latest_job_description(self) -> str | None:
        """Most recent job description, the default target-job context."""
        if not self.job_descriptions:
            return None
        return self.job_descriptions[-1]

    @property
    def is_empty(self) -> bool:
        return not (
            self.experiences.strip()
            or self.education.strip()
            or self.skills.strip()
            or any(jd.strip() for jd in self.job_descriptions)
        )
