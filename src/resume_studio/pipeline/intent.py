"""Keyword and pattern heuristics for chat intent and reply content.

Both checks are approximate by nature. They are kept behind these two
functions so a better classifier can replace them without touching the
chat session.
"""

from __future__ import annotations

import re

from resume_studio.pipeline.section_extractor import HEADING_RE

# Any substring match counts ("resume" covers "build a resume", "tailor my
# resume" and so on). Recall over precision: a false positive only costs a
# resume-oriented instruction for one turn.
RESUME_KEYWORDS: tuple[str, ...] = (
    "resume",
    "résumé",
    "cv",
    "curriculum vitae",
    "job application",
    "job posting",
    "job description",
    "experience section",
    "skills section",
)

_BOLD_WITH_YEAR_RE = re.compile(r"\*\*[^*\n]+\*\*[^\n]*\b(?:19|20)\d{2}\b")
_TABLE_ROW_RE = re.compile(r"^\s*\|(?:[^|\n]*\|){2,}\s*$", re.MULTILINE)


def is_resume_request(message: str) -> bool:
    """Return True when the message asks for resume content."""
    lowered = message.lower()
    return any(keyword in lowered for keyword in RESUME_KEYWORDS)


def looks_like_resume_content(text: str) -> bool:
    """Return True when a reply appears to contain resume material."""
    return bool(
        HEADING_RE.search(text)
        or _BOLD_WITH_YEAR_RE.search(text)
        or _TABLE_ROW_RE.search(text)
    )
