"""SQLite-backed store for the user's knowledge base."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from resume_studio.models.knowledge import KNOWLEDGE_TEXT_FIELDS, KnowledgeRecord

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".resume-studio" / "knowledge.db"
DEFAULT_MAX_JOB_DESCRIPTIONS = 20

_RECORD_ID = 1  # single-user store: one row


class KnowledgeStore:
    """Durable single-record store of experience, education, skills and job descriptions.

    ``get`` returns a fresh snapshot each call, so a caller holding a record is
    unaffected by later saves.
    """

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        max_job_descriptions: int = DEFAULT_MAX_JOB_DESCRIPTIONS,
    ):
        if max_job_descriptions < 1:
            raise ValueError("max_job_descriptions must be at least 1")
        self.db_path = Path(db_path)
        self.max_job_descriptions = max_job_descriptions
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS knowledge_base (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    experiences TEXT NOT NULL DEFAULT '',
                    education TEXT NOT NULL DEFAULT '',
                    skills TEXT NOT NULL DEFAULT '',
                    job_descriptions_json TEXT NOT NULL DEFAULT '[]',
                    updated_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self) -> KnowledgeRecord | None:
        """Return the stored record, or None if nothing was ever saved."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT experiences, education, skills, job_descriptions_json
                   FROM knowledge_base WHERE id = ?""",
                (_RECORD_ID,),
            ).fetchone()

        if row is None:
            return None

        experiences, education, skills, jds_json = row
        try:
            job_descriptions = json.loads(jds_json)
        except json.JSONDecodeError:
            logger.error("Corrupt job description list in %s, resetting", self.db_path)
            job_descriptions = []
        if not isinstance(job_descriptions, list):
            job_descriptions = []

        return KnowledgeRecord(
            experiences=experiences,
            education=education,
            skills=skills,
            job_descriptions=[str(jd) for jd in job_descriptions],
        )

    def save(self, **fields: object) -> KnowledgeRecord:
        """Merge the given fields over the stored record and persist it.

        Accepts any subset of ``experiences``, ``education``, ``skills`` and
        ``job_descriptions``. Returns the record as stored.
        """
        allowed = set(KNOWLEDGE_TEXT_FIELDS) | {"job_descriptions"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unknown knowledge fields: {', '.join(sorted(unknown))}")

        current = self.get() or KnowledgeRecord()
        record = KnowledgeRecord.model_validate({**current.model_dump(), **fields})
        record.job_descriptions = self._cap(record.job_descriptions)
        self._write(record)
        logger.debug("Knowledge base saved: fields=%s", sorted(fields))
        return record

    def append_job_description(self, text: str) -> KnowledgeRecord:
        """Append a job description, discarding the oldest beyond the cap."""
        if not text or not text.strip():
            raise ValueError("Job description is empty")
        current = self.get() or KnowledgeRecord()
        return self.save(job_descriptions=[*current.job_descriptions, text])

    def clear(self) -> None:
        """Remove the stored record."""
        with self._connect() as conn:
            conn.execute("DELETE FROM knowledge_base WHERE id = ?", (_RECORD_ID,))

    def _cap(self, job_descriptions: list[str]) -> list[str]:
        overflow = len(job_descriptions) - self.max_job_descriptions
        if overflow > 0:
            logger.info("Discarding %d oldest job description(s)", overflow)
            return job_descriptions[overflow:]
        return job_descriptions

    def _write(self, record: KnowledgeRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO knowledge_base
                   (id, experiences, education, skills, job_descriptions_json, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    _RECORD_ID,
                    record.experiences,
                    record.education,
                    record.skills,
                    json.dumps(record.job_descriptions, ensure_ascii=False),
                    time.time(),
                ),
            )
