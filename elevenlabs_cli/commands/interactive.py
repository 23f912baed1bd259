"""Interactive shell over a handful of common commands."""

from pathlib import Path
from typing import Callable, Dict

import click
from rich.markup import escape

from ..exceptions import ElevenLabsError, ValidationError
from ..utils.output import console, print_error, print_lines
from .account import models, user
from .common import DEFAULT_MODEL, DEFAULT_VOICE
from .stt import stt
from .tts import tts
from .voice import voice

PROMPT = "elevenlabs> "

HELP_LINES = (
    "Available commands:",
    "  tts <text>          - Text to speech",
    "  stt <file>          - Speech to text",
    "  voices              - List voices",
    "  models              - List models",
    "  user                - User info",
    "  help                - Show this help",
    "  exit                - Exit interactive mode",
)


def _run_tts(ctx: click.Context, args: str) -> None:
    if not args:
        click.echo("Usage: tts <text>")
        return
    ctx.invoke(tts, text=args, voice=DEFAULT_VOICE, model=DEFAULT_MODEL)


def _run_stt(ctx: click.Context, args: str) -> None:
    if not args:
        click.echo("Usage: stt <file>")
        return
    if not Path(args).is_file():
        raise ValidationError(f"File not found: {args}")
    ctx.invoke(stt, file=args)


def _subcommand(group: click.Group, name: str) -> Callable[[click.Context, str], None]:
    def run(ctx: click.Context, args: str) -> None:
        ctx.invoke(group.commands[name])

    return run


HANDLERS: Dict[str, Callable[[click.Context, str], None]] = {
    "tts": _run_tts,
    "stt": _run_stt,
    "voices": _subcommand(voice, "list"),
    "models": _subcommand(models, "list"),
    "user": _subcommand(user, "info"),
}

FAILURE_LABELS = {
    "tts": "TTS failed",
    "stt": "STT failed",
    "voices": "Failed to list voices",
    "models": "Failed to list models",
    "user": "Failed to get user info",
}


def run_line(ctx: click.Context, line: str) -> bool:
    """
    Execute one shell line. Returns False when the shell should exit.

    Command failures are printed and never end the session.
    """
    line = line.strip()
    if not line:
        return True
    name, _, args = line.partition(" ")
    name = name.lower()
    args = args.strip()

    if name in ("exit", "quit"):
        click.echo("Goodbye!")
        return False
    if name == "help":
        print_lines(HELP_LINES)
        return True

    handler = HANDLERS.get(name)
    if handler is None:
        console.print(f"[red]✗[/red] Unknown command: {escape(name)}")
        return True
    try:
        handler(ctx, args)
    except (ElevenLabsError, click.ClickException) as e:
        print_error(f"{FAILURE_LABELS[name]}: {e}")
    return True


@click.command("interactive")
@click.pass_context
def interactive(ctx: click.Context):
    """Start an interactive session.

    \b
    Examples:
      elevenlabs interactive
      elevenlabs> tts Hello there
      elevenlabs> voices
    """
    console.print("[bold underline]ElevenLabs Interactive Mode[/bold underline]")
    click.echo("Type 'help' for available commands, 'exit' to quit.\n")
    while True:
        try:
            line = console.input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            click.echo()
            break
        if not run_line(ctx, line):
            break
