"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import signal
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from resume_studio.clients.llm_client import LLMClient
from resume_studio.config import AppConfig, load_config
from resume_studio.exceptions import (
    EmptyKnowledgeBaseError,
    EmptyMessageError,
    GenerationError,
    TurnCancelledError,
)
from resume_studio.logging.cost_calculator import calculate_cost
from resume_studio.logging.models import UsageLog
from resume_studio.logging.usage_store import UsageStore
from resume_studio.pipeline.advisor import ResumeAdvisor
from resume_studio.pipeline.assembler import ResumeDocument, load_header
from resume_studio.pipeline.chat import ChatSession
from resume_studio.pipeline.resume_builder import ResumeBuilder
from resume_studio.store.knowledge_store import KnowledgeStore

app = typer.Typer(
    name="resume-studio",
    help="Build and refine a resume from your knowledge base with AI assistance",
    no_args_is_help=True,
)
console = Console()

KNOWLEDGE_FIELDS = ("experiences", "education", "skills")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to config.yaml")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Debug logging")


def _setup(config_path: Path | None, verbose: bool) -> AppConfig:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return load_config(config_path)


def _knowledge_store(config: AppConfig) -> KnowledgeStore:
    return KnowledgeStore(
        db_path=config.knowledge.resolved_db_path,
        max_job_descriptions=config.knowledge.max_job_descriptions,
    )


def _llm(config: AppConfig) -> LLMClient:
    return LLMClient(timeout=config.llm.timeout, model=config.llm.model)


def _read_text(text: str | None, file: Path | None) -> str:
    if (text is None) == (file is None):
        console.print("[red]Give exactly one of --text or --file.[/red]")
        raise typer.Exit(1)
    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found: {file}[/red]")
            raise typer.Exit(1)
        return file.read_text(encoding="utf-8")
    return text


def _record_usage(
    config: AppConfig,
    llm: LLMClient,
    *,
    mode: str,
    session_id: str,
    started: float,
    resume_updated: bool = False,
    error: Exception | None = None,
) -> None:
    summary = llm.get_token_summary()
    if not config.usage.enabled:
        return
    UsageStore(config.usage.resolved_db_path).save_log(
        UsageLog(
            session_id=session_id,
            mode=mode,
            model=llm.model,
            resume_updated=resume_updated,
            elapsed_seconds=time.monotonic() - started,
            total_input_tokens=summary["input"],
            total_output_tokens=summary["output"],
            estimated_cost_usd=calculate_cost(summary["calls"]),
            success=error is None,
            error_message=str(error) if error else None,
        )
    )


def _print_generation_error(exc: GenerationError) -> None:
    console.print(Panel(exc.user_message, title="Generation failed", border_style="red"))


@app.command()
def build(
    instruction: str = typer.Option(None, "--instruction", "-i", help="Custom generation instruction"),
    output: Path = typer.Option(Path("resume.md"), "--output", "-o", help="Output markdown file"),
    config_path: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Generate a complete resume from the knowledge base."""
    config = _setup(config_path, verbose)
    header = load_header(config.resume.resolved_header_path)
    llm = _llm(config)
    builder = ResumeBuilder(
        llm,
        _knowledge_store(config),
        header=header,
        temperature=config.generation.build_temperature,
        max_tokens=config.generation.max_output_tokens,
    )

    started = time.monotonic()
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Generating resume...", total=None)
            result = asyncio.run(builder.build(instruction))
    except EmptyKnowledgeBaseError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(1)
    except GenerationError as exc:
        _record_usage(config, llm, mode="build", session_id="cli", started=started, error=exc)
        _print_generation_error(exc)
        raise typer.Exit(1)

    _record_usage(config, llm, mode="build", session_id="cli", started=started, resume_updated=True)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.markdown, encoding="utf-8")
    if result.extraction_missed:
        console.print("[dim]No standard section headings found; kept the full reply.[/dim]")
    else:
        console.print(f"[dim]Sections: {len(result.sections)}[/dim]")
    console.print(f"[green]Resume saved: {output}[/green]")


@app.command()
def chat(
    output: Path = typer.Option(Path("resume.md"), "--output", "-o", help="Resume markdown file to keep updated"),
    config_path: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Chat with the resume assistant. Resume updates are written to --output."""
    config = _setup(config_path, verbose)
    header = load_header(config.resume.resolved_header_path)
    existing = output.read_text(encoding="utf-8") if output.exists() else None
    document = ResumeDocument(existing, header=header)
    llm = _llm(config)
    session = ChatSession(
        llm,
        _knowledge_store(config),
        document,
        temperature=config.generation.chat_temperature,
        max_tokens=config.generation.max_output_tokens,
    )

    def _save(markdown: str) -> None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markdown, encoding="utf-8")

    document.subscribe(_save)
    console.print(Panel(Markdown(session.greeting()), title="Resume assistant"))
    console.print("[dim]/reset clears the conversation, /save writes the resume, /quit exits. "
                  "Ctrl-C while waiting abandons the request.[/dim]")
    asyncio.run(_chat_loop(session, config, llm, output))


async def _chat_loop(session: ChatSession, config: AppConfig, llm: LLMClient, output: Path) -> None:
    loop = asyncio.get_running_loop()
    while True:
        try:
            message = console.input("[bold cyan]you>[/bold cyan] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return

        command = message.strip().lower()
        if command in ("/quit", "/exit"):
            return
        if command == "/reset":
            session.reset()
            console.print("[dim]Conversation cleared.[/dim]")
            continue
        if command == "/save":
            output.write_text(session.document.text, encoding="utf-8")
            console.print(f"[green]Resume saved: {output}[/green]")
            continue

        try:
            loop.add_signal_handler(signal.SIGINT, session.cancel)
        except (NotImplementedError, RuntimeError):
            pass  # no signal support (e.g. Windows); Ctrl-C ends the chat instead

        started = time.monotonic()
        try:
            with console.status("Thinking..."):
                result = await session.submit(message)
        except EmptyMessageError:
            continue
        except TurnCancelledError as exc:
            _record_usage(config, llm, mode="chat", session_id=session.session_id,
                          started=started, error=exc)
            console.print(f"[yellow]{exc.user_message}[/yellow]")
            continue
        except GenerationError as exc:
            _record_usage(config, llm, mode="chat", session_id=session.session_id,
                          started=started, error=exc)
            _print_generation_error(exc)
            continue
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass

        _record_usage(config, llm, mode="chat", session_id=session.session_id,
                      started=started, resume_updated=result.resume_updated)
        console.print(Panel(Markdown(result.reply), title="assistant", border_style="blue"))
        if result.resume_updated:
            console.print(f"[green]Resume updated ({output}); your header was left untouched.[/green]")


@app.command("kb-show")
def kb_show(config_path: Path = ConfigOption) -> None:
    """Show the stored knowledge base."""
    config = _setup(config_path, False)
    record = _knowledge_store(config).get()
    if record is None or record.is_empty:
        console.print("[yellow]Knowledge base is empty.[/yellow]")
        return

    for field_name in KNOWLEDGE_FIELDS:
        value = getattr(record, field_name)
        console.print(Panel(value or "[dim](empty)[/dim]", title=field_name.capitalize()))
    for i, jd in enumerate(record.job_descriptions, 1):
        latest = " (latest)" if i == len(record.job_descriptions) else ""
        console.print(Panel(jd, title=f"Job description {i}{latest}"))


@app.command("kb-set")
def kb_set(
    field_name: str = typer.Argument(help="experiences | education | skills"),
    text: str = typer.Option(None, "--text", help="New text"),
    file: Path = typer.Option(None, "--file", help="Read new text from a file"),
    config_path: Path = ConfigOption,
) -> None:
    """Replace one knowledge base field."""
    if field_name not in KNOWLEDGE_FIELDS:
        console.print(f"[red]Unknown field: {field_name}. Use one of {', '.join(KNOWLEDGE_FIELDS)}.[/red]")
        raise typer.Exit(1)
    value = _read_text(text, file)
    config = _setup(config_path, False)
    _knowledge_store(config).save(**{field_name: value})
    console.print(f"[green]Saved {field_name} ({len(value)} chars).[/green]")


@app.command("kb-add-jd")
def kb_add_jd(
    text: str = typer.Option(None, "--text", help="Job description text"),
    file: Path = typer.Option(None, "--file", help="Read the job description from a file"),
    config_path: Path = ConfigOption,
) -> None:
    """Add a target job description (the newest one is the default target)."""
    value = _read_text(text, file)
    config = _setup(config_path, False)
    try:
        record = _knowledge_store(config).append_job_description(value)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Job description added ({len(record.job_descriptions)} stored).[/green]")


@app.command("kb-clear")
def kb_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: Path = ConfigOption,
) -> None:
    """Delete the stored knowledge base."""
    if not yes and not typer.confirm("Delete the whole knowledge base?"):
        raise typer.Exit(1)
    config = _setup(config_path, False)
    _knowledge_store(config).clear()
    console.print("[green]Knowledge base cleared.[/green]")


@app.command()
def improve(
    section_id: str = typer.Argument(help="Section name, e.g. experience or skills"),
    file: Path = typer.Option(..., "--file", help="File holding the current section text"),
    config_path: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Rewrite one resume section and list suggestions."""
    content = _read_text(None, file)
    config = _setup(config_path, verbose)
    llm = _llm(config)
    advisor = ResumeAdvisor(llm)
    _run_advisor(config, llm, advisor.improve_section(section_id, content))


@app.command()
def suggest(
    section_id: str = typer.Argument(help="Section name, e.g. summary or projects"),
    text: str = typer.Option(None, "--text", help="Context to draft from"),
    file: Path = typer.Option(None, "--file", help="Read the context from a file"),
    config_path: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Draft content for a section from free-form context."""
    context = _read_text(text, file)
    config = _setup(config_path, verbose)
    llm = _llm(config)
    advisor = ResumeAdvisor(llm)
    _run_advisor(config, llm, advisor.suggest_content(section_id, context))


@app.command()
def analyze(
    resume: Path = typer.Argument(Path("resume.md"), help="Resume markdown file"),
    config_path: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Review a resume file and list suggestions."""
    content = _read_text(None, resume)
    config = _setup(config_path, verbose)
    llm = _llm(config)
    advisor = ResumeAdvisor(llm)
    _run_advisor(config, llm, advisor.analyze_resume(content))


def _run_advisor(config: AppConfig, llm: LLMClient, request) -> None:
    started = time.monotonic()
    try:
        with console.status("Reviewing..."):
            response = asyncio.run(request)
    except GenerationError as exc:
        _record_usage(config, llm, mode="advise", session_id="cli", started=started, error=exc)
        _print_generation_error(exc)
        raise typer.Exit(1)
    _record_usage(config, llm, mode="advise", session_id="cli", started=started)

    if response.suggestions:
        console.print(Panel("\n".join(f"- {s}" for s in response.suggestions), title="Suggestions"))
    if response.improved_content:
        console.print(Panel(Markdown(response.improved_content), title="Improved content"))


@app.command()
def usage(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of recent entries"),
    config_path: Path = ConfigOption,
) -> None:
    """Show recent generation usage and this month's totals."""
    config = _setup(config_path, False)
    store = UsageStore(config.usage.resolved_db_path)
    stats = store.get_monthly_stats()

    table = Table(title=f"Recent usage (month {stats['month']})")
    for column in ("When", "Mode", "Tokens in/out", "Cost (USD)", "OK"):
        table.add_column(column)
    for log in store.get_logs(limit=limit):
        table.add_row(
            log.timestamp.strftime("%Y-%m-%d %H:%M"),
            log.mode,
            f"{log.total_input_tokens}/{log.total_output_tokens}",
            f"{log.estimated_cost_usd:.4f}",
            "yes" if log.success else "no",
        )
    console.print(table)
    console.print(
        f"This month: {stats['total_runs']} requests, "
        f"${stats['total_cost_usd']:.4f}, success rate {stats['success_rate']:.0f}%"
    )


if __name__ == "__main__":
    app()
