"""Pydantic models for extracted and assembled resume content."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExtractedSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_offset: int
    content: str  # heading line plus body, trimmed


class BuildResult(BaseModel):
    markdown: str
    sections: list[ExtractedSection] = Field(default_factory=list)
    raw_completion: str = ""

    @property
    def extraction_missed(self) -> bool:
        return not self.sections


class AdvisorResponse(BaseModel):
    suggestions: list[str] = Field(default_factory=list)
    improved_content: str | None = None
