"""
Studio Onboarding - CLI Entry Point.

Usage:
    studio-onboarding start        Walk through the workshop
    studio-onboarding steps        List the workshop steps
    studio-onboarding health       Check configuration
    studio-onboarding serve        Start the web API
    studio-onboarding --help       Show help
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from studio_onboarding.state import WizardStateMachine

app = typer.Typer(
    name="studio-onboarding",
    help="Studio Onboarding - set up your Visual Studio, one step at a time.",
    add_completion=False,
)
console = Console()

QUIT_WORDS = ("exit", "quit", "q")
BACK_WORDS = ("b", "back", "p", "previous")
RESTART_WORDS = ("r", "restart")
NEXT_WORDS = ("", "n", "next")


def apply_input(machine: WizardStateMachine, raw: str) -> str:
    """
    Apply one line of user input to the machine.

    On the entry step anything that is not a quit word is taken as the
    visitor's name (blank keeps the current one). Returns the action taken.
    """
    text = raw.strip()
    word = text.lower()

    if word in QUIT_WORDS:
        return "quit"

    if machine.current_index == 0:
        if text:
            machine.set_visitor_name(text)
        _, transitioned = machine.advance()
        return "next" if transitioned else "blocked"

    if word in BACK_WORDS:
        machine.retreat()
        return "back"
    if word in RESTART_WORDS:
        machine.restart()
        return "restart"
    if word in NEXT_WORDS:
        _, transitioned = machine.advance()
        return "next" if transitioned else "blocked"

    return "unknown"


def _render_step(machine: WizardStateMachine) -> None:
    step = machine.current_step
    snapshot = machine.get_state()

    bar_width = 30
    filled = round(bar_width * snapshot.progress_percent / 100)
    console.print(
        f"\n[cyan]{'█' * filled}[/cyan][dim]{'░' * (bar_width - filled)}[/dim] "
        f"{snapshot.progress_percent:.0f}%"
        + (f"  [dim]{snapshot.step_label}[/dim]" if snapshot.step_label else "")
    )

    lines = [
        f"[italic]{step.analogy}[/italic]",
        "",
        step.description,
        "",
        f"[bold]>[/bold] {step.instruction}",
    ]
    if step.link:
        lines.append(f"[bold]>[/bold] Open guide: [link={step.link}]{step.link}[/link]")
    if step.command_text:
        lines += ["", f"[on grey11] [sky_blue1]{step.command_text}[/sky_blue1] [/on grey11]"]
    if snapshot.is_complete:
        lines += ["", f"[bold green]Badge unlocked:[/bold green] Architect's Seal, welcome to the studio {snapshot.visitor_name}!"]

    console.print(Panel("\n".join(lines), title=f"[bold]{step.title}[/bold]", border_style="green"))


def _prompt_for(machine: WizardStateMachine) -> str:
    if machine.current_index == 0:
        current = f" [dim](Enter keeps '{machine.visitor_name}')[/dim]" if machine.visitor_name.strip() else ""
        return f"[bold blue]Your name{current}:[/bold blue] "
    if machine.is_complete:
        return "[dim]r = restart, q = quit[/dim] "
    return f"[dim]Enter = {machine.current_step.button_text}, b = back, r = restart, q = quit[/dim] "


async def _walk(machine: WizardStateMachine, dispatcher) -> None:
    while True:
        _render_step(machine)
        raw = await asyncio.to_thread(console.input, _prompt_for(machine))
        action = apply_input(machine, raw)

        if action == "quit":
            break
        if action == "blocked":
            if machine.current_index == 0:
                console.print("[yellow]Tell us your name first.[/yellow]")
            else:
                console.print("[dim]That's the last step. Type 'r' to restart or 'q' to quit.[/dim]")
        elif action == "unknown":
            console.print(f"[red]Unknown command: {raw.strip()}[/red]")

    if dispatcher.pending:
        console.print(f"[dim]Saving progress ({dispatcher.pending} pending)...[/dim]")
    await dispatcher.drain()


def _configure_logging() -> None:
    from studio_onboarding.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def start(
    name: str = typer.Option("", "--name", "-n", help="Pre-fill your name on the entry step"),
) -> None:
    """Walk through the workshop interactively."""
    from studio_onboarding.db.client import init_client
    from studio_onboarding.dispatch import ProgressDispatcher
    from studio_onboarding.recorder import ProgressRecorder

    _configure_logging()
    if init_client() is None:
        console.print("[dim]Progress recording disabled (no Supabase configuration).[/dim]")

    dispatcher = ProgressDispatcher(ProgressRecorder())
    machine = WizardStateMachine(on_step_advanced=dispatcher)
    if name:
        machine.set_visitor_name(name)

    console.print(
        Panel.fit(
            "[bold green]Setting up your Visual Studio[/bold green]\n"
            "An IDE is your digital workbench for building and previewing code.\n\n"
            "[dim]Type 'q' at any prompt to leave.[/dim]",
            title="Onboarding",
            border_style="green",
        )
    )

    try:
        asyncio.run(_walk(machine, dispatcher))
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n[dim]Session interrupted. Goodbye![/dim]")
        return

    console.print("\n[dim]Goodbye![/dim]")


@app.command()
def steps() -> None:
    """List the workshop steps."""
    from studio_onboarding.steps import WORKSHOP_STEPS

    table = Table(title="Workshop Steps")
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Button")
    table.add_column("Command", style="sky_blue1")

    for step in WORKSHOP_STEPS:
        table.add_row(str(step.index), step.title, step.button_text, step.command_text or "")

    console.print(table)


@app.command()
def health() -> None:
    """Check configuration and progress recording."""
    from studio_onboarding.config import get_settings
    from studio_onboarding.db.client import init_client

    console.print("\n[bold]Studio Onboarding Health Check[/bold]\n")

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.onboarding_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Progress table: {settings.progress_table}")

    if not settings.supabase_configured:
        console.print("[yellow]WARN[/yellow] Supabase not configured; progress recording will be skipped")
        return

    if init_client() is None:
        console.print("[red]FAIL[/red] Supabase client could not be created")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Supabase client ready")


@app.command()
def version() -> None:
    """Show version information."""
    from studio_onboarding import __version__

    console.print(f"Studio Onboarding version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the onboarding web API."""
    import os

    import uvicorn

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Studio Onboarding API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "studio_onboarding.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
