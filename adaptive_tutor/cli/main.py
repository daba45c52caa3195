"""
Typer CLI for the adaptive tutor engine.

Commands:
    tutor db init                 - Initialize database tables
    tutor db check                - Check database connectivity
    tutor curriculum seed         - Seed the built-in subject catalog
    tutor curriculum list         - List subjects and module generation state
    tutor progress enroll         - Enroll a student in a subject
    tutor progress show           - Show a student's progress in a subject
    tutor attempts list           - List attempts (by student or module)
    tutor report generate         - Generate a performance report
    tutor report students         - Per-student summary table
    tutor info                    - Show configuration
    tutor version                 - Show version

Usage:
    tutor --help
    tutor --database-url sqlite:///tutor.db db init
    tutor curriculum seed
    tutor progress show student-42 cpp
"""

from __future__ import annotations

from typing import NoReturn
from uuid import UUID

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from adaptive_tutor import __version__
from adaptive_tutor.core.errors import TutorError
from adaptive_tutor.core.log_setup import setup_logging
from adaptive_tutor.core.mastery import MASTERY_THRESHOLD, MasteryLevel

app = typer.Typer(
    help="Adaptive tutor: mastery-gated lessons, quizzes and remediation",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    database_url: str | None = typer.Option(
        None,
        "--database-url",
        envvar="DATABASE_URL",
        help="SQLAlchemy URL (defaults to settings)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Configure logging and the database before running a command."""
    from adaptive_tutor.db.database import configure_database

    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_file)
    configure_database(database_url or settings.database_url)


def _fail(error: Exception) -> NoReturn:
    rprint(f"[red]✗[/red] {error}")
    raise typer.Exit(code=1)


def _subject_id(key: str) -> UUID:
    from adaptive_tutor.curriculum.service import CurriculumService

    try:
        return CurriculumService().get_subject_by_key(key).id
    except TutorError as e:
        _fail(e)


# ========================================
# Database Commands
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Initialize database tables from SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    from adaptive_tutor.db.database import init_db

    logger.info("Initializing database tables...")
    init_db()
    rprint("[green]✓[/green] Database initialized!")


@db_app.command("check")
def db_check() -> None:
    """Check database connectivity."""
    from adaptive_tutor.db.database import check_database

    status, error = check_database()
    if status != "ok":
        _fail(RuntimeError(f"Database unreachable: {error}"))
    rprint("[green]✓[/green] Database reachable")


# ========================================
# Curriculum Commands
# ========================================

curriculum_app = typer.Typer(help="Subjects and modules")
app.add_typer(curriculum_app, name="curriculum")


@curriculum_app.command("seed")
def curriculum_seed() -> None:
    """Seed the built-in catalog (existing subjects are skipped)."""
    from adaptive_tutor.curriculum.service import CurriculumService

    created = CurriculumService().seed_subjects()
    if created:
        rprint(f"[green]✓[/green] Seeded {len(created)} subjects: {', '.join(created)}")
    else:
        rprint("[yellow]⚠[/yellow] All catalog subjects already exist")


@curriculum_app.command("list")
def curriculum_list(
    modules: bool = typer.Option(False, "--modules", "-m", help="Show modules of each subject"),
) -> None:
    """List subjects."""
    from adaptive_tutor.curriculum.service import CurriculumService

    subjects = CurriculumService().list_subjects()
    if not subjects:
        rprint("[yellow]⚠[/yellow] No subjects. Run [bold]tutor curriculum seed[/bold] first.")
        return

    table = Table(title="Subjects")
    table.add_column("Key", style="cyan")
    table.add_column("Title")
    table.add_column("Language", style="dim")
    table.add_column("Modules", justify="right")
    table.add_column("Ready", justify="right", style="green")
    for subject in subjects:
        ready = sum(1 for m in subject.modules if m.generation_state == "ready")
        table.add_row(
            subject.key,
            subject.title,
            subject.language or "-",
            str(len(subject.modules)),
            str(ready),
        )
    console.print(table)

    if modules:
        for subject in subjects:
            module_table = Table(title=subject.title)
            module_table.add_column("#", justify="right")
            module_table.add_column("Module")
            module_table.add_column("State", style="dim")
            for module in subject.modules:
                module_table.add_row(str(module.order), module.title, module.generation_state)
            console.print(module_table)


# ========================================
# Progress Commands
# ========================================

progress_app = typer.Typer(help="Student enrollment and progress")
app.add_typer(progress_app, name="progress")


@progress_app.command("enroll")
def progress_enroll(
    student_id: str = typer.Argument(..., help="Student id"),
    subject_key: str = typer.Argument(..., help="Subject key (e.g. cpp)"),
) -> None:
    """Enroll a student in a subject (no-op if already enrolled)."""
    from adaptive_tutor.adaptive.progress_store import ProgressStore

    progress = ProgressStore().enroll(student_id, _subject_id(subject_key))
    rprint(f"[green]✓[/green] {student_id} enrolled in {subject_key} ({progress.id})")


@progress_app.command("show")
def progress_show(
    student_id: str = typer.Argument(..., help="Student id"),
    subject_key: str = typer.Argument(..., help="Subject key (e.g. cpp)"),
) -> None:
    """Show completed modules and active remedial overrides."""
    from adaptive_tutor.adaptive.progress_store import ProgressStore
    from adaptive_tutor.curriculum.service import CurriculumService

    try:
        subject = CurriculumService().get_subject_by_key(subject_key)
        progress = ProgressStore().get_progress(student_id, subject.id)
    except TutorError as e:
        _fail(e)

    table = Table(title=f"{student_id} - {subject.title}")
    table.add_column("#", justify="right")
    table.add_column("Module")
    table.add_column("Status")
    for module in subject.modules:
        if module.id in progress.completed_module_ids:
            status = "[green]completed[/green]"
        elif module.id in progress.overrides:
            status = "[yellow]remedial[/yellow]"
        else:
            status = "[dim]-[/dim]"
        table.add_row(str(module.order), module.title, status)
    console.print(table)
    rprint(
        f"Completed {len(progress.completed_module_ids)}/{len(subject.modules)} modules, "
        f"{len(progress.overrides)} remedial overrides"
    )


# ========================================
# Attempt Commands
# ========================================

attempts_app = typer.Typer(help="Attempt history")
app.add_typer(attempts_app, name="attempts")


@attempts_app.command("list")
def attempts_list(
    student_id: str | None = typer.Option(None, "--student", "-s", help="Filter by student"),
    module_id: str | None = typer.Option(None, "--module", "-m", help="Filter by module id"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum rows"),
) -> None:
    """List attempts, newest first."""
    from adaptive_tutor.adaptive.reports import ReportService

    if not student_id and not module_id:
        _fail(ValueError("Pass --student or --module"))

    service = ReportService()
    if module_id:
        try:
            module_uuid = UUID(module_id)
        except ValueError:
            _fail(ValueError(f"Invalid module id: {module_id}"))
        attempts = service.attempts_for_module(module_uuid, student_id)
    else:
        attempts = service.attempts_for_student(student_id)

    if not attempts:
        rprint("[yellow]⚠[/yellow] No attempts found")
        return

    table = Table(title=f"Attempts (pass mark {MASTERY_THRESHOLD})")
    table.add_column("When", style="dim")
    table.add_column("Student", style="cyan")
    table.add_column("Module", style="dim")
    table.add_column("Score", justify="right")
    table.add_column("Level")
    table.add_column("Result")
    for attempt in attempts[:limit]:
        level = MasteryLevel.from_score(attempt.score)
        table.add_row(
            attempt.created_at.strftime("%Y-%m-%d %H:%M") if attempt.created_at else "-",
            attempt.student_id,
            str(attempt.module_id)[:8],
            str(attempt.score),
            f"[{level.color}]{level.display_name}[/{level.color}]",
            "[green]passed[/green]" if attempt.passed else "[red]failed[/red]",
        )
    console.print(table)


# ========================================
# Report Commands
# ========================================

report_app = typer.Typer(help="Performance reports")
app.add_typer(report_app, name="report")


@report_app.command("generate")
def report_generate(
    student_id: str = typer.Argument(..., help="Student id"),
    subject_key: str = typer.Argument(..., help="Subject key (e.g. cpp)"),
) -> None:
    """Generate a performance report with the configured content generator."""
    from adaptive_tutor.adaptive.reports import ReportService
    from adaptive_tutor.content.generator import GeminiContentGenerator

    if not get_settings().has_ai_configured():
        _fail(RuntimeError("GEMINI_API_KEY is not set"))

    subject_id = _subject_id(subject_key)
    try:
        report = ReportService(GeminiContentGenerator()).generate_report(student_id, subject_id)
    except TutorError as e:
        _fail(e)

    analysis = report.analysis
    rprint(f"[bold]{analysis.get('title', 'Report')}[/bold]")
    rprint(analysis.get("summary", ""))
    for heading, key, color in (
        ("Strengths", "strengths", "green"),
        ("Weaknesses", "weaknesses", "red"),
        ("Recommendations", "recommendations", "cyan"),
    ):
        items = analysis.get(key) or []
        if items:
            rprint(f"\n[{color}]{heading}[/{color}]")
            for item in items:
                rprint(f"  • {item}")


@report_app.command("students")
def report_students() -> None:
    """Per-student attempts, average score and passed count."""
    from adaptive_tutor.adaptive.reports import ReportService

    summaries = ReportService().student_summaries()
    if not summaries:
        rprint("[yellow]⚠[/yellow] No attempts recorded yet")
        return

    table = Table(title="Students")
    table.add_column("Student", style="cyan")
    table.add_column("Attempts", justify="right")
    table.add_column("Avg score", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Last attempt", style="dim")
    for summary in summaries:
        table.add_row(
            summary.student_id,
            str(summary.attempts_count),
            str(summary.average_score),
            str(summary.passed_count),
            summary.last_attempt_at.strftime("%Y-%m-%d %H:%M") if summary.last_attempt_at else "-",
        )
    console.print(table)


# ========================================
# Info
# ========================================


@app.command("info")
def show_info() -> None:
    """Show configuration."""
    settings = get_settings()

    table = Table(title="Adaptive Tutor Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Database URL", settings.database_url)
    table.add_row("Gemini API Key", "***" if settings.gemini_api_key else "Not set")
    table.add_row("AI Model", settings.ai_model)
    table.add_row("Questions per quiz", str(settings.quiz_question_count))
    table.add_row("Coding questions", str(settings.quiz_coding_question_count))
    table.add_row("Judge0 URL", settings.judge0_api_url)
    table.add_row("Sandbox", "Configured" if settings.has_sandbox_configured() else "Not set")
    table.add_row("Mastery threshold", str(MASTERY_THRESHOLD))
    table.add_row("Generation lease (s)", str(settings.generation_lease_seconds))
    table.add_row("Grading workers", str(settings.grading_max_workers))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]adaptive-tutor[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
