# printify_check/cli.py
"""
CLI interface for printify-check.

Thin presentation layer over the wizard session and the orchestrator.
All processing happens on the Processing API.
"""

import asyncio
import json
from pathlib import Path

import typer

from printify_check.aggregation import ResultAggregator, SingleAggregate
from printify_check.api import DocumentFile, create_api_client
from printify_check.config import get_config_path, load_config
from printify_check.errors import JobFailedError, PrintifyCheckError
from printify_check.fixes import bundle_for_fix, fixes_for_type
from printify_check.logging_config import configure_logging
from printify_check.models import Issue, JobKind, JobStatus, MultiStandardResult, Severity
from printify_check.orchestrator import JobOrchestrator
from printify_check.viewer import build_overlays
from printify_check.wizard import (
    OCR,
    REDACTION,
    FixesMode,
    WizardSession,
    WizardStateMachine,
)

app = typer.Typer(
    name="printify-check",
    help="Preflight, validate and fix PDFs for print through the Processing API.",
    no_args_is_help=True,
)

_SEVERITY_STYLES = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "dark_orange",
    Severity.LOW: "blue",
    Severity.INFO: "blue",
}


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _setup(verbose: bool):
    config = load_config()
    configure_logging("verbose" if verbose else config.output.verbosity)
    return config


def _load_file(path: Path) -> DocumentFile:
    if not path.is_file():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(1)
    return DocumentFile.from_path(path)


def _fail(error: Exception) -> None:
    typer.echo(typer.style(f"Error: {error}", fg=typer.colors.RED), err=True)
    raise typer.Exit(1)


class RichViewer:
    """Viewer that lists issue overlays per page on the terminal."""

    def __init__(self, console):
        self.console = console

    def render(self, file: DocumentFile, issues: list[Issue]) -> None:
        from rich.table import Table

        pages = build_overlays(issues)
        if not pages:
            self.console.print("[dim]No located issues to overlay.[/dim]")
            return

        table = Table(title=f"Overlays: {file.name}")
        table.add_column("Page", justify="right")
        table.add_column("Issue")
        table.add_column("Rect (x, y, w, h)")
        table.add_column("Color")
        for page in sorted(pages):
            for overlay in pages[page]:
                table.add_row(
                    str(page),
                    overlay.title,
                    f"{overlay.x:.2f}, {overlay.y:.2f}, {overlay.width:.2f}, {overlay.height:.2f}",
                    f"[{_SEVERITY_STYLES[overlay.severity]}]{overlay.border_color}[/]",
                )
        self.console.print(table)


def _print_summary(console, file_name: str, quality_score: float, summary: SingleAggregate) -> None:
    from rich.table import Table

    console.print(f"\n[bold]{file_name}[/bold]  quality score: {quality_score:g}")

    counts = "  ".join(
        f"[{_SEVERITY_STYLES[level]}]{level.value}: {count}[/]"
        for level, count in summary.by_severity.items()
    )
    console.print(f"{summary.total} issues  {counts}\n")

    if summary.total == 0:
        console.print("[green]✓ No issues found[/green]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Page", justify="right")
    table.add_column("Fixable")
    table.add_column("Message")
    for category, issues in summary.by_category.items():
        for issue in issues:
            level = issue.severity_level
            table.add_row(
                issue.id,
                category.value,
                f"[{_SEVERITY_STYLES[level]}]{issue.severity}[/]",
                issue.type,
                str(issue.page_number or ""),
                "✓" if issue.auto_fixable else "",
                issue.message,
            )
    console.print(table)


def _print_compliance(console, result: MultiStandardResult) -> None:
    from rich.table import Table

    table = Table(title="Compliance")
    table.add_column("Standard")
    table.add_column("Verdict")
    table.add_column("Issues", justify="right")
    for standard, entry in result.results.items():
        verdict = "[green]compliant[/green]" if entry.is_compliant else "[red]not compliant[/red]"
        table.add_row(standard, verdict, str(len(entry.issues)))
    console.print(table)

    overall = "[green]✓ Compliant[/green]" if result.is_compliant else "[red]✗ Not compliant[/red]"
    console.print(f"\nOverall: {overall}")


async def _wait(console, orchestrator: JobOrchestrator, job, config, label: str):
    if job.status is JobStatus.FAILED:
        raise JobFailedError(job)
    if job.is_terminal:
        return job
    with console.status(f"{label}..."):
        return await orchestrator.await_completion(
            job.id, config.polling.interval, timeout=config.polling.timeout
        )


@app.command()
def validate(
    file: Path = typer.Argument(..., help="PDF file to preflight"),
    as_json: bool = typer.Option(False, "--json", help="Print the parsed result as JSON"),
    overlays: bool = typer.Option(False, "--overlays", help="List issue overlays per page"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Run a preflight validation and show the issues found."""
    from rich.console import Console

    config = _setup(verbose)
    document = _load_file(file)
    console = Console()

    async def _validate():
        api = create_api_client(config)
        orchestrator = JobOrchestrator(api)
        try:
            job = await orchestrator.submit(JobKind.VALIDATE, document)
            job = await _wait(console, orchestrator, job, config, "Validating")
            return await orchestrator.fetch_validation_result(job)
        finally:
            await api.close()

    try:
        result = _run(_validate())
    except PrintifyCheckError as e:
        _fail(e)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    _print_summary(console, result.file_name or document.name, result.quality_score,
                   ResultAggregator().aggregate_single(result))
    if overlays:
        RichViewer(console).render(document, result.issues())


@app.command()
def compliance(
    file: Path = typer.Argument(..., help="PDF file to validate"),
    standard: list[str] = typer.Option(
        None, "--standard", "-s", help="Standard to check (repeatable, default from config)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Validate against compliance standards (PDF/A, PDF/UA, WCAG), each independently."""
    from rich.console import Console

    config = _setup(verbose)
    document = _load_file(file)
    console = Console()
    standards = standard or config.wizard.default_standards

    async def _compliance():
        api = create_api_client(config)
        orchestrator = JobOrchestrator(api)
        params = {"standard": standards[0]} if len(standards) == 1 else {"levels": standards}
        try:
            job = await orchestrator.submit(JobKind.COMPLIANCE, document, params)
            job = await _wait(console, orchestrator, job, config, "Validating compliance")
            key = standards[0] if len(standards) == 1 else None
            return await orchestrator.fetch_compliance_result(job, standard=key)
        finally:
            await api.close()

    try:
        result = _run(_compliance())
    except PrintifyCheckError as e:
        _fail(e)

    _print_compliance(console, result)
    if not result.is_compliant:
        raise typer.Exit(2)


@app.command()
def check(
    file: Path = typer.Argument(..., help="PDF file to run through the wizard"),
    ocr: bool = typer.Option(False, "--ocr", help="Run OCR first (Pro/Team)"),
    redact: bool = typer.Option(False, "--redact", help="Redact sensitive data (Pro/Team)"),
    pro: bool = typer.Option(None, "--pro/--no-pro", help="Override the Pro/Team entitlement from config"),
    fix: list[str] = typer.Option(None, "--fix", "-f", help="Issue id to fix (repeatable)"),
    fix_all: bool = typer.Option(False, "--fix-all", help="Fix every auto-fixable issue"),
    optimize: list[str] = typer.Option(
        None, "--optimize", help="Fix operation to apply by name, e.g. linearization (repeatable)"
    ),
    output: Path = typer.Option(None, "--output", "-o", help="Directory for the fixed file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Upload, optionally OCR/redact, preflight and fix a document."""
    from rich.console import Console

    config = _setup(verbose)
    document = _load_file(file)
    console = Console()
    is_pro = config.wizard.pro_or_team if pro is None else pro

    if (ocr or redact) and not is_pro:
        typer.echo("OCR and redaction require a Pro or Team plan.", err=True)
        raise typer.Exit(1)

    async def _check():
        api = create_api_client(config)
        orchestrator = JobOrchestrator(api)
        session = WizardSession(
            orchestrator,
            machine=WizardStateMachine(is_pro_or_team=is_pro),
            polling=config.polling,
        )
        try:
            await session.upload(document)

            for step_id, wanted, run, label in (
                (OCR, ocr, session.run_ocr, "Running OCR"),
                (REDACTION, redact, session.run_redaction, "Redacting"),
            ):
                if session.machine.current_step_id != step_id:
                    continue
                if wanted:
                    with console.status(f"{label}..."):
                        await run()
                    console.print(f"[green]✓[/green] {label} done")
                else:
                    await session.skip_step()

            with console.status("Running preflight..."):
                result = await session.run_preflight()
            if result is None:
                return None, None

            summary = session.summary()
            _print_summary(console, result.file_name or document.name, result.quality_score, summary)

            selection = [issue.id for issue in summary.fixable_issues] if fix_all else (fix or [])
            optimizations = optimize or []
            if not selection and not optimizations:
                await session.skip_fixes()
                if session.state.fixes_mode is FixesMode.REMEDIATE:
                    console.print("\nRe-run with --fix ID or --fix-all to apply automatic fixes.")
                return None, None

            with console.status("Applying fixes..."):
                job = await session.apply_fixes(selection, optimizations=optimizations)
            content = await orchestrator.download(job)
            return job, content
        finally:
            await api.close()

    try:
        job, content = _run(_check())
    except PrintifyCheckError as e:
        _fail(e)

    if content is None:
        return

    target_dir = output or Path(config.output.download_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"fixed_{document.name}"
    target.write_bytes(content)
    console.print(f"\n[green]✓ Done[/green]  fix job {job.id}")
    console.print(f"[dim]Saved:[/dim] {target}")


@app.command()
def fixes(issue_type: str = typer.Argument(..., help="Issue type, e.g. 'RGB in CMYK' or missing_font")):
    """Show the automatic fixes available for an issue type."""
    names = fixes_for_type(issue_type)
    if not names:
        typer.echo(f"No automatic fix for '{issue_type}'.")
        raise typer.Exit(1)
    for name in names:
        bundle = bundle_for_fix(name)
        typer.echo(f"{name:<24} {bundle.value if bundle else ''}")


@app.command("config")
def show_config():
    """Print the config file location and current settings."""
    config = load_config()
    typer.echo(f"Config: {get_config_path()}")
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
