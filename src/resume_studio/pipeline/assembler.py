"""Merges the fixed identity header with generated content into the resume document."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from resume_studio.models.resume import ExtractedSection

logger = logging.getLogger(__name__)

DEFAULT_HEADER = """\
# Bruce Wayne

|  |  |  |
|---------|---------|---------|
| 👤 [example.com](https://example.com/) | 🔗 [github.com/example](https://github.com/example) | 📱 [(+1) 123-456-7890](https://wa.me/11234567890) |
| 📍 1234 Abc Street, Example, EX 01234 | 💼 [linkedin.com/in/example](https://linkedin.com/in/example/) | ✉️ [email@example.com](mailto:email@example.com) |

"""

DEFAULT_BODY = """\
## Experience

### Machine Learning Engineer Intern at Slow Feet Technology
*Jul 2021 - Present*

- Devised a food-agnostic formulation for fine-grained cross-ingredient meal cooking
- Built a pan for meal cooking that the whole research group now uses

## Education

### M.S. in Computer Science
*University of Charles River, Boston, MA*
*Sep 2021 - Jan 2023*

## Skills

### Programming Languages
Python, JavaScript/TypeScript, HTML/CSS, Java

### Languages
English (proficient), Indonesian (native)"""


def normalize_header(text: str) -> str:
    """Strip surrounding whitespace and end the header with one blank line."""
    return text.strip() + "\n\n"


def load_header(path: str | Path | None = None) -> str:
    """Load the identity header from a markdown file, or the built-in default."""
    if path is None:
        return DEFAULT_HEADER
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Header file not found: {p}")
    header = p.read_text(encoding="utf-8")
    if not header.strip():
        raise ValueError(f"Header file is empty: {p}")
    return normalize_header(header)


def assemble_document(
    header: str,
    sections: list[ExtractedSection] | None,
    raw_completion: str,
) -> str:
    """Build the resume markdown: header first, then sections or the raw reply.

    With sections, their contents are joined by blank lines. On an extraction
    miss the raw completion is appended as-is. A copy of the header that the
    completion already starts with is dropped in both cases, along with any
    sections found inside it, so assembling an assembled document changes
    nothing.
    """
    if raw_completion.startswith(header):
        raw_completion = raw_completion[len(header):]
        if sections:
            sections = [s for s in sections if s.start_offset >= len(header)]

    if sections:
        body = "\n\n".join(section.content for section in sections)
        return header + body.rstrip()

    logger.debug("Assembling from raw completion (extraction miss)")
    return header + raw_completion


def default_document(header: str = DEFAULT_HEADER) -> str:
    return header + DEFAULT_BODY


class ResumeDocument:
    """The canonical resume markdown, editable by the user and replaced by the pipeline."""

    def __init__(self, markdown: str | None = None, *, header: str = DEFAULT_HEADER):
        self.header = header
        self._text = default_document(header) if markdown is None else markdown
        self._subscribers: list[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, markdown: str) -> None:
        """Apply a user edit."""
        self._text = markdown
        self._notify()

    def replace(self, markdown: str) -> None:
        """Replace the whole document with pipeline output."""
        if not markdown.startswith(self.header):
            raise ValueError("Pipeline output must start with the identity header")
        self._text = markdown
        self._notify()

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a callback for document changes; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._text)
