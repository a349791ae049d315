"""
TalentBridge Command Line Interface

Provides CLI commands for managing the marketplace core, including
database setup, commission previews and application workflow operations.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="talentbridge",
    help="TalentBridge recruitment marketplace CLI",
    add_completion=False,
)
console = Console()


@app.callback()
def main(ctx: typer.Context):
    """Configure logging before any command runs."""
    from talentbridge.utils.logger import setup_logging

    setup_logging()
    ctx.call_on_close(_close_database)


def _close_database() -> None:
    from talentbridge.data.database import get_database_manager

    get_database_manager().close_all()


def _require_database():
    """Exit unless MongoDB is reachable."""
    from talentbridge.data.database import get_database_manager

    db_manager = get_database_manager()
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)
    return db_manager


def _workflow_service():
    from talentbridge.core.workflow import ApplicationWorkflowService
    from talentbridge.data.repositories import (
        get_application_repository,
        get_job_repository,
    )

    _require_database()
    return ApplicationWorkflowService(get_application_repository(), get_job_repository())


def _print_validation(validation) -> None:
    for issue in validation.errors:
        console.print(f"  [red]✗[/red] {issue.message}: {issue.description}")
        for key, value in issue.details.items():
            console.print(f"    [dim]{key}:[/dim] {value}")


@app.command()
def version():
    """Show application version."""
    from talentbridge import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from talentbridge.utils.config import get_settings

    settings = get_settings()

    table = Table(title="TalentBridge Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Default Reduction %", str(settings.commission.default_reduction_percentage))
    table.add_row(
        "Commission % Bounds",
        f"{settings.commission.min_commission_percentage}"
        f"-{settings.commission.max_commission_percentage}",
    )
    table.add_row("Transition Retries", str(settings.workflow.transition_retry_attempts))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    import asyncio

    console.print("[yellow]Initializing database...[/yellow]")

    console.print("  Checking database connection...")
    db_manager = _require_database()
    console.print("  [green]✓[/green] Connected to MongoDB")

    try:
        console.print("  Creating indexes...")
        asyncio.run(db_manager.ensure_indexes())
        console.print("  [green]✓[/green] Indexes created")
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def commission(
    salary: float = typer.Option(0.0, "--salary", "-s", help="Top of the salary range"),
    commission_type: str = typer.Option(
        "percentage", "--type", "-t", help="percentage, fixed or hourly"
    ),
    percentage: float = typer.Option(0.0, "--percentage", "-p", help="Commission percentage"),
    amount: float = typer.Option(0.0, "--amount", "-a", help="Fixed amount or hourly rate"),
    reduction: Optional[float] = typer.Option(
        None, "--reduction", "-r", help="Platform reduction percentage"
    ),
    currency: str = typer.Option("USD", "--currency", "-c", help="Currency code"),
):
    """Preview the commission split for a salary and terms."""
    from talentbridge.core.commission import get_commission_engine
    from talentbridge.data.models import JobCommissionTerms
    from talentbridge.utils.constants import CommissionType

    try:
        ctype = CommissionType(commission_type.lower())
    except ValueError:
        console.print(f"[red]Error: Unknown commission type: {commission_type}[/red]")
        raise typer.Exit(1)

    engine = get_commission_engine()
    terms = JobCommissionTerms(type=ctype)
    update = {
        "reduction_percentage": engine.clamp_reduction_percentage(
            terms.reduction_percentage if reduction is None else reduction
        )
    }
    if ctype == CommissionType.PERCENTAGE:
        update["original_percentage"] = engine.clamp_commission_percentage(percentage)
    elif ctype == CommissionType.FIXED:
        update["fixed_amount"] = amount
    else:
        update["hourly_rate"] = amount
    terms = terms.model_copy(update=update)

    breakdown = engine.recompute_on_change(terms, salary)

    table = Table(title=f"Commission Breakdown ({ctype.value})")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right", style="green")

    if ctype == CommissionType.PERCENTAGE:
        table.add_row("Original %", f"{breakdown.original_percentage:.2f}")
        table.add_row("Recruiter %", f"{breakdown.recruiter_percentage:.2f}")
        table.add_row("Platform fee %", f"{breakdown.platform_fee_percentage:.2f}")
    table.add_row("Reduction %", f"{breakdown.reduction_percentage:.2f}")
    table.add_row("Original amount", f"{breakdown.original_amount:,.2f} {currency}")
    table.add_row("Recruiter amount", f"{breakdown.recruiter_amount:,.2f} {currency}")
    table.add_row("Platform fee", f"{breakdown.platform_fee_amount:,.2f} {currency}")

    console.print(table)


@app.command()
def validate(
    job_id: str = typer.Option(..., "--job", "-j", help="Job ID"),
    email: str = typer.Option(..., "--email", "-e", help="Candidate email"),
    phone: str = typer.Option(..., "--phone", "-p", help="Candidate phone with country code"),
):
    """Check whether a candidate can be submitted to a job."""
    from talentbridge.core.workflow import DuplicateValidator
    from talentbridge.data.repositories import get_application_repository

    _require_database()
    result = DuplicateValidator(get_application_repository()).validate_candidate(
        email, phone, job_id
    )

    if result.is_valid:
        console.print("[green]Candidate can be submitted.[/green]")
        return

    console.print("[red]Candidate cannot be submitted:[/red]")
    _print_validation(result)
    raise typer.Exit(1)


@app.command()
def submit(
    job_id: str = typer.Option(..., "--job", "-j", help="Job ID"),
    name: str = typer.Option(..., "--name", "-n", help="Candidate name"),
    email: str = typer.Option(..., "--email", "-e", help="Candidate email"),
    phone: str = typer.Option(..., "--phone", "-p", help="Candidate phone with country code"),
    recruiter: str = typer.Option(..., "--recruiter", "-r", help="Submitting recruiter ID"),
):
    """Submit a candidate against a job."""
    from talentbridge.data.models import CandidateProfile, SubmissionRequest

    service = _workflow_service()
    request = SubmissionRequest(
        job_id=job_id,
        submitted_by=recruiter,
        candidate=CandidateProfile(candidate_name=name, email=email, phone=phone),
    )
    result = service.submit_application(request)

    if not result.success:
        console.print("[red]Submission rejected:[/red]")
        _print_validation(result.validation)
        raise typer.Exit(1)

    console.print(
        f"  [green]✓[/green] Application created with ID: [cyan]{result.application.id}[/cyan]"
    )


@app.command()
def change_status(
    application_id: str = typer.Argument(..., help="Application ID"),
    status: str = typer.Argument(..., help="New status, e.g. SHORTLISTED"),
    actor: str = typer.Option("cli", "--actor", "-a", help="Who is making the change"),
):
    """Move an application to a new status."""
    from talentbridge.core.exceptions import TalentBridgeError
    from talentbridge.utils.constants import STATUS_LABELS, ApplicationStatus

    try:
        new_status = ApplicationStatus(status.upper())
    except ValueError:
        console.print(f"[red]Error: Unknown status: {status}[/red]")
        console.print(f"[dim]Valid statuses: {', '.join(s.value for s in ApplicationStatus)}[/dim]")
        raise typer.Exit(1)

    service = _workflow_service()
    try:
        application = service.change_status(application_id, new_status, actor)
    except TalentBridgeError as e:
        console.print(f"[red]Error changing status: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"  [green]✓[/green] Application [cyan]{application.id}[/cyan] is now "
        f"{STATUS_LABELS[application.current_status]}"
    )
    if application.payout is not None:
        payout = application.payout
        console.print(
            f"  Payout recorded: {payout.breakdown.recruiter_amount:,.2f} {payout.currency} "
            f"to recruiter {payout.recruiter_id}"
        )


@app.command()
def timeline(
    application_id: str = typer.Argument(..., help="Application ID"),
):
    """Show the status timeline of an application."""
    from talentbridge.core.exceptions import ApplicationNotFoundError
    from talentbridge.data.repositories import get_application_repository

    _require_database()
    try:
        application = get_application_repository().get_application(application_id)
    except ApplicationNotFoundError:
        console.print(f"[red]Error: Application not found: {application_id}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Timeline for {application.candidate.candidate_name}")
    table.add_column("Status", style="cyan")
    table.add_column("Entered At", style="green")
    table.add_column("Current", justify="center")

    for entry in application.status_history():
        table.add_row(
            entry.label,
            f"{entry.timestamp:%Y-%m-%d %H:%M:%S}",
            "●" if entry.is_current else "",
        )

    console.print(table)


if __name__ == "__main__":
    app()
