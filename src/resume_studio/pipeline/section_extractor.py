"""Splits free-form generated text into recognized resume sections."""

from __future__ import annotations

import logging
import re

from resume_studio.models.resume import ExtractedSection

logger = logging.getLogger(__name__)

RECOGNIZED_SECTION_TITLES: tuple[str, ...] = (
    "Experience",
    "Professional Experience",
    "Work Experience",
    "Employment",
    "Education",
    "Skills",
    "Projects",
    "Certifications",
    "Languages",
    "Achievements",
    "Summary",
    "Objective",
)

HEADING_RE = re.compile(
    r"^##[ \t]+(?:"
    + "|".join(re.escape(title) for title in RECOGNIZED_SECTION_TITLES)
    + r")[ \t]*:?[ \t\r]*$",
    re.IGNORECASE | re.MULTILINE,
)


def extract_sections(content: str) -> list[ExtractedSection] | None:
    """Return the recognized sections of ``content`` in order, or None on a miss.

    Each section runs from its heading line up to the next recognized heading
    (or end of text) and is whitespace-trimmed. Text before the first
    recognized heading is dropped. Unrecognized ``##`` headings stay inside
    the preceding section.
    """
    offsets = sorted(match.start() for match in HEADING_RE.finditer(content))
    if not offsets:
        logger.debug("No recognized section headings in %d chars of output", len(content))
        return None

    ends = offsets[1:] + [len(content)]
    return [
        ExtractedSection(start_offset=start, content=content[start:end].strip())
        for start, end in zip(offsets, ends)
    ]
