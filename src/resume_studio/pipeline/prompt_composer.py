"""Builds generation prompts from a knowledge base snapshot."""

from __future__ import annotations

from resume_studio.models.knowledge import KnowledgeRecord

DEFAULT_INSTRUCTION = "generate a professional resume in markdown format"
JOB_DESCRIPTION_SEPARATOR = "\n---\n"

CLOSING_LINE = (
    "Please provide the response in markdown format, ensuring proper headings, "
    "bullet points, and formatting."
)
GENERIC_RESUME_REQUEST = (
    "No background information has been provided yet. Please {instruction}, "
    "using a generic professional resume structure with clearly marked example content "
    "the user can replace."
)


def compose_knowledge_context(knowledge: KnowledgeRecord | None) -> str:
    """Render the non-empty knowledge fields as labeled blocks.

    Order is fixed: experience, education, skills, then every stored job
    description (oldest first). Returns "" when nothing is stored.
    """
    if knowledge is None:
        return ""

    blocks = []
    if knowledge.experiences.strip():
        blocks.append(f"Professional Experience:\n{knowledge.experiences.strip()}")
    if knowledge.education.strip():
        blocks.append(f"Education:\n{knowledge.education.strip()}")
    if knowledge.skills.strip():
        blocks.append(f"Skills:\n{knowledge.skills.strip()}")

    job_descriptions = [jd.strip() for jd in knowledge.job_descriptions if jd.strip()]
    if job_descriptions:
        blocks.append(
            "Target Job Descriptions:\n" + JOB_DESCRIPTION_SEPARATOR.join(job_descriptions)
        )
    return "\n\n".join(blocks)


def compose_prompt(knowledge: KnowledgeRecord | None, instruction: str | None = None) -> str:
    """Build a single generation-ready prompt from stored knowledge."""
    instruction = (instruction or "").strip().rstrip(":.") or DEFAULT_INSTRUCTION
    context = compose_knowledge_context(knowledge)

    if not context:
        return GENERIC_RESUME_REQUEST.format(instruction=instruction) + "\n\n" + CLOSING_LINE

    return (
        f"Based on the following information, {instruction}:\n\n"
        f"{context}\n\n"
        f"{CLOSING_LINE}"
    )
