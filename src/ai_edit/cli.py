"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ai_edit.config import load_config
from ai_edit.errors import EditError, MissingCredentialError, RequestValidationError
from ai_edit.handler import context_from_note, create_editor, parse_edit_request
from ai_edit.logging.cost_calculator import calculate_cost
from ai_edit.logging.models import EditUsageLog
from ai_edit.logging.usage_store import UsageStore
from ai_edit.models.edit import Action
from ai_edit.models.outcome import ParseFailure, Success
from ai_edit.parsers.voice_profile import load_voice_profile
from ai_edit.pipeline.action_registry import ACTION_TEMPLATES, build_tone_template
from ai_edit.pipeline.editor import edit_with_retries
from ai_edit.pipeline.prompt_compiler import compile_prompt
from ai_edit.pipeline.response_recovery import recover

app = typer.Typer(
    name="ai-edit",
    help="AI rewrites for a selected passage of a note",
    no_args_is_help=True,
)
console = Console()


def _build_payload(
    action: str,
    selection: str,
    note: Path | None,
    title: str | None,
    tone: str | None,
    before: str | None,
    after: str | None,
    voice_profile: Path | None,
    context_window: int,
) -> dict:
    body = None
    if note is not None:
        if not note.exists():
            console.print(f"[red]Note file not found: {note}[/red]")
            raise typer.Exit(1)
        body = note.read_text(encoding="utf-8")
        if before is None and after is None:
            before, after = context_from_note(body, selection, context_window)

    profile = None
    if voice_profile is not None:
        try:
            profile = load_voice_profile(voice_profile)
        except (OSError, ValueError) as e:
            console.print(f"[red]Could not load voice profile: {e}[/red]")
            raise typer.Exit(1)

    return {
        "action": action,
        "toneValue": tone,
        "documentTitle": title,
        "documentBody": body,
        "selectedText": selection,
        "contextBefore": before,
        "contextAfter": after,
        "voiceProfile": profile.model_dump(exclude_none=True) if profile else None,
    }


def _print_outcome(outcome) -> None:
    if isinstance(outcome, Success):
        for alt in outcome.alternatives:
            console.print(Panel(alt.text, title=alt.label, border_style="cyan"))
        return
    console.print(f"[yellow]No usable alternatives: {outcome.kind}[/yellow]")
    if isinstance(outcome, ParseFailure):
        console.print(Panel(outcome.raw_text or "(empty response)", title="Raw model output"))


@app.command()
def edit(
    action: str = typer.Option(..., "--action", "-a", help="rewrite|shorter|clearer|fix|tone|expand|bullets|example"),
    selection: str = typer.Option(..., "--selection", "-s", help="Selected text to rewrite"),
    note: Path = typer.Option(None, "--note", "-n", help="Full note text file"),
    title: str = typer.Option(None, "--title", help="Note title"),
    tone: str = typer.Option(None, "--tone", help="Target tone (required for --action tone)"),
    before: str = typer.Option(None, "--before", help="Text before the selection"),
    after: str = typer.Option(None, "--after", help="Text after the selection"),
    voice_profile: Path = typer.Option(None, "--voice-profile", help="Voice profile YAML/JSON"),
    as_json: bool = typer.Option(False, "--json", help="Print the response body as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Generate alternative rewrites for a selection."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = load_config()
    payload = _build_payload(
        action, selection, note, title, tone, before, after, voice_profile,
        config.edit.context_window,
    )

    try:
        request = parse_edit_request(payload, context_window=config.edit.context_window)
    except RequestValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(2)

    try:
        editor = create_editor(config)
    except MissingCredentialError as e:
        console.print(f"[red]{e.message}: set ANTHROPIC_API_KEY[/red]")
        raise typer.Exit(1)

    store = UsageStore(config.usage.resolved_db_path) if config.usage.enabled else None
    usage_log = EditUsageLog(action=request.action.value, model=config.llm.model)

    try:
        with console.status("Generating alternatives..."):
            run = asyncio.run(edit_with_retries(editor, request, attempts=config.llm.max_retries))
    except EditError as e:
        console.print(f"[red]{e.message}[/red]")
        if store is not None:
            store.save_log(usage_log.model_copy(update={"success": False, "error_message": e.message}))
        raise typer.Exit(1)

    if store is not None:
        store.save_log(usage_log.model_copy(update={
            "outcome": run.outcome.kind,
            "alternative_count": len(run.outcome.alternatives) if isinstance(run.outcome, Success) else 0,
            "elapsed_seconds": run.elapsed_seconds,
            "total_input_tokens": run.input_tokens,
            "total_output_tokens": run.output_tokens,
            "estimated_cost_usd": calculate_cost(
                [(config.llm.model, run.input_tokens, run.output_tokens)]
            ),
            "success": run.outcome.ok,
        }))

    if as_json:
        console.print_json(json.dumps(run.outcome.to_payload(), ensure_ascii=False))
    else:
        _print_outcome(run.outcome)

    if verbose:
        console.print(
            f"[dim]{run.elapsed_seconds:.1f}s | tokens in/out: "
            f"{run.input_tokens}/{run.output_tokens}[/dim]"
        )


@app.command()
def prompt(
    action: str = typer.Option(..., "--action", "-a", help="Action to compile"),
    selection: str = typer.Option(..., "--selection", "-s", help="Selected text"),
    note: Path = typer.Option(None, "--note", "-n", help="Full note text file"),
    title: str = typer.Option(None, "--title", help="Note title"),
    tone: str = typer.Option(None, "--tone", help="Target tone"),
    voice_profile: Path = typer.Option(None, "--voice-profile", help="Voice profile YAML/JSON"),
) -> None:
    """Show the compiled prompt without calling the model."""
    config = load_config()
    payload = _build_payload(
        action, selection, note, title, tone, None, None, voice_profile,
        config.edit.context_window,
    )
    try:
        request = parse_edit_request(payload, context_window=config.edit.context_window)
    except RequestValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(2)

    compiled = compile_prompt(request)
    console.print(Panel(compiled.system_instructions, title="System", border_style="blue"))
    console.print(Panel(compiled.user_message, title="User", border_style="green"))


@app.command("recover")
def recover_cmd(
    file: Path = typer.Argument(help="File with a raw model response"),
) -> None:
    """Run response recovery on saved model output."""
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)

    outcome = recover(file.read_text(encoding="utf-8"))
    console.print_json(json.dumps(outcome.to_payload(), ensure_ascii=False))
    if not outcome.ok:
        raise typer.Exit(3)


@app.command()
def actions() -> None:
    """List available actions."""
    table = Table(title="Actions")
    table.add_column("Action", style="bold")
    table.add_column("Alternatives", justify="right")
    table.add_column("Temperature", justify="right")
    table.add_column("Instruction")

    for action in Action:
        if action is Action.TONE:
            template = build_tone_template("<tone>")
        else:
            template = ACTION_TEMPLATES[action]
        table.add_row(
            action.value,
            str(template.expected_alternative_count),
            f"{template.sampling_temperature:.1f}",
            template.instruction_text,
        )
    console.print(table)


@app.command()
def usage() -> None:
    """Show this month's usage summary."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    stats = store.get_monthly_stats()

    outcomes = ", ".join(f"{k}: {v}" for k, v in sorted(stats["outcomes"].items())) or "-"
    console.print(Panel(
        f"Runs: {stats['total_runs']} | success: {stats['success_rate']:.0f}%\n"
        f"Tokens in/out: {stats['total_input_tokens']}/{stats['total_output_tokens']}\n"
        f"Estimated cost: ${stats['total_cost_usd']:.4f}\n"
        f"Outcomes: {outcomes}",
        title=f"Usage {stats['month']}",
    ))


if __name__ == "__main__":
    app()
