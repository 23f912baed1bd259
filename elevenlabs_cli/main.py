"""ElevenLabs CLI - Main entry point."""

import logging
from typing import Optional

import click
from click.shell_completion import get_completion_class

from . import __version__
from .commands import (
    agent,
    audio_native,
    config as config_cmd,
    converse,
    dialogue,
    dub,
    history,
    interactive,
    isolate,
    knowledge,
    library,
    mcp,
    models,
    music,
    phone,
    projects,
    pronunciation,
    rag,
    realtime_tts,
    samples,
    sfx,
    stt,
    tools,
    tts,
    tts_stream,
    tts_timestamps,
    usage,
    user,
    voice,
    voice_changer,
    voice_design,
    webhook,
    workspace,
)
from .exceptions import ElevenLabsError
from .utils.client import DEFAULT_BASE_URL
from .utils.config import load_config
from .utils.files import DEFAULT_OUTPUT_FORMAT, validate_output_format
from .utils.output import OutputMode, print_api_error

logger = logging.getLogger("elevenlabs_cli")

PROG_NAME = "elevenlabs"
COMPLETE_VAR = "_ELEVENLABS_COMPLETE"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ALIASES = {
    "speak": "tts",
    "tts-ts": "tts-timestamps",
    "transcribe": "stt",
    "vc": "voice-changer",
    "lib": "library",
    "pronounce": "pronunciation",
    "chat": "converse",
    "kb": "knowledge",
    "ws": "workspace",
    "repl": "interactive",
}


def setup_logging(verbose: bool) -> None:
    """Configure stderr logging; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT, force=True)
    if not verbose:
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)


class ElevenLabsGroup(click.Group):
    """
    Root command group.

    Resolves command aliases and turns ``ElevenLabsError`` raised anywhere
    below into a remediation message and exit status 1.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args):
        name, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else name), cmd, rest

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except ElevenLabsError as e:
            logger.debug("Command failed", exc_info=True)
            print_api_error(e)
            ctx.exit(1)


@click.group(cls=ElevenLabsGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--api-key", "-a", envvar="ELEVENLABS_API_KEY",
              help="API key for ElevenLabs (or set ELEVENLABS_API_KEY)")
@click.option("--base-url", envvar="ELEVENLABS_BASE_URL", hidden=True, help="API base URL")
@click.option("--format", "-f", "audio_format",
              help=f"Audio output format (mp3_44100_128, pcm_16000, ...; default {DEFAULT_OUTPUT_FORMAT})")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
@click.option("--json", "-j", "json_flag", is_flag=True, help="Output as JSON")
@click.option("--output", "-o", type=click.Choice([m.value for m in OutputMode]), default=None,
              help="Output format for results")
@click.pass_context
def cli(
    ctx: click.Context,
    api_key: Optional[str],
    base_url: Optional[str],
    audio_format: Optional[str],
    verbose: bool,
    yes: bool,
    json_flag: bool,
    output: Optional[str],
):
    """ElevenLabs CLI - A comprehensive CLI for the ElevenLabs AI audio platform.

    \b
    Examples:
      elevenlabs tts "Hello world" -o hello.mp3
      elevenlabs stt meeting.mp3 --diarize
      elevenlabs voice list
      elevenlabs agent list
      elevenlabs mcp
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config()
    if not api_key and config.api_key:
        api_key = config.api_key
        logger.debug("Using API key from config file")

    if audio_format:
        audio_format = validate_output_format(audio_format)
    else:
        audio_format = config.default_output_format or DEFAULT_OUTPUT_FORMAT

    ctx.obj["api_key"] = api_key
    ctx.obj["base_url"] = base_url or DEFAULT_BASE_URL
    ctx.obj["format"] = audio_format
    ctx.obj["output"] = OutputMode.resolve(output, json_flag)
    ctx.obj["yes"] = yes
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@cli.command("completions")
@click.argument("shell", type=click.Choice(["bash", "zsh", "fish"]))
def completions(shell: str):
    """Print a shell completion script.

    \b
    Examples:
      elevenlabs completions bash >> ~/.bashrc
      elevenlabs completions zsh > ~/.zfunc/_elevenlabs
      elevenlabs completions fish > ~/.config/fish/completions/elevenlabs.fish
    """
    completion_cls = get_completion_class(shell)
    click.echo(completion_cls(cli, {}, PROG_NAME, COMPLETE_VAR).source())


# Register commands
for command in (
    tts,
    tts_timestamps,
    tts_stream,
    realtime_tts,
    stt,
    voice_changer,
    isolate,
    sfx,
    dialogue,
    voice_design,
    music,
    voice,
    library,
    samples,
    pronunciation,
    agent,
    converse,
    knowledge,
    rag,
    tools,
    phone,
    webhook,
    user,
    models,
    usage,
    history,
    dub,
    projects,
    audio_native,
    workspace,
    config_cmd,
    interactive,
    mcp,
):
    cli.add_command(command)


def main():
    """Main entry point for the CLI."""
    cli(obj={}, prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
