"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 120

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 600)


@dataclass(frozen=True)
class GenerationConfig:
    chat_temperature: float = 0.7
    build_temperature: float = 0.3
    max_output_tokens: int = 4096

    def __post_init__(self) -> None:
        _check_range("chat_temperature", self.chat_temperature, 0.0, 1.0)
        _check_range("build_temperature", self.build_temperature, 0.0, 1.0)
        _check_range("max_output_tokens", self.max_output_tokens, 1, 64000)


@dataclass(frozen=True)
class KnowledgeConfig:
    db_path: str = "~/.resume-studio/knowledge.db"
    max_job_descriptions: int = 20

    def __post_init__(self) -> None:
        _check_range("max_job_descriptions", self.max_job_descriptions, 1, 1000)

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class ResumeConfig:
    header_path: str | None = None

    @property
    def resolved_header_path(self) -> Path | None:
        if self.header_path is None:
            return None
        return Path(self.header_path).expanduser()


@dataclass(frozen=True)
class UsageConfig:
    enabled: bool = True
    db_path: str = "~/.resume-studio/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)
    resume: ResumeConfig = field(default_factory=ResumeConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**(raw.get("llm") or {})),
        generation=GenerationConfig(**(raw.get("generation") or {})),
        knowledge=KnowledgeConfig(**(raw.get("knowledge") or {})),
        resume=ResumeConfig(**(raw.get("resume") or {})),
        usage=UsageConfig(**(raw.get("usage") or {})),
    )
