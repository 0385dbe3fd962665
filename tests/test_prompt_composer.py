"""Tests for prompt composition."""

from resume_studio.models.knowledge import KnowledgeRecord
from resume_studio.pipeline.prompt_composer import (
    DEFAULT_INSTRUCTION,
    JOB_DESCRIPTION_SEPARATOR,
    compose_knowledge_context,
    compose_prompt,
)

LABELS = ("Professional Experience:", "Education:", "Skills:", "Target Job Descriptions:")


class TestComposePrompt:
    def test_end_to_end_order(self, sample_knowledge):
        prompt = compose_prompt(sample_knowledge, "generate a professional resume")
        acme = prompt.index("Acme")
        skills = prompt.index("Go, SQL")
        job = prompt.index("Backend engineer, distributed systems")
        assert acme < skills < job
        assert "Education:" not in prompt

    def test_instruction_in_preamble(self, sample_knowledge):
        prompt = compose_prompt(sample_knowledge, "tailor it for a fintech role")
        assert prompt.startswith("Based on the following information, tailor it for a fintech role:")

    def test_default_instruction(self, sample_knowledge):
        prompt = compose_prompt(sample_knowledge)
        assert DEFAULT_INSTRUCTION in prompt

    def test_empty_knowledge_requests_generic_resume(self):
        prompt = compose_prompt(KnowledgeRecord())
        assert prompt.strip()
        assert "generic professional resume" in prompt
        for label in LABELS:
            assert label not in prompt

    def test_none_knowledge_same_as_empty(self):
        assert compose_prompt(None) == compose_prompt(KnowledgeRecord())

    def test_whitespace_fields_are_omitted(self):
        record = KnowledgeRecord(experiences="Acme", education="   \n", skills="")
        prompt = compose_prompt(record)
        assert "Professional Experience:\nAcme" in prompt
        assert "Education:" not in prompt
        assert "Skills:" not in prompt

    def test_all_job_descriptions_joined(self):
        record = KnowledgeRecord(job_descriptions=["first posting", "second posting"])
        prompt = compose_prompt(record)
        assert f"first posting{JOB_DESCRIPTION_SEPARATOR}second posting" in prompt

    def test_deterministic(self, sample_knowledge):
        assert compose_prompt(sample_knowledge, "x") == compose_prompt(sample_knowledge, "x")

    def test_asks_for_markdown(self, sample_knowledge):
        assert "markdown" in compose_prompt(sample_knowledge).lower()


class TestComposeKnowledgeContext:
    def test_fixed_section_order(self):
        record = KnowledgeRecord(
            experiences="exp", education="edu", skills="sk", job_descriptions=["jd"]
        )
        context = compose_knowledge_context(record)
        positions = [context.index(label) for label in LABELS]
        assert positions == sorted(positions)

    def test_empty(self):
        assert compose_knowledge_context(KnowledgeRecord()) == ""
        assert compose_knowledge_context(None) == ""
