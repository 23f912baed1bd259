"""Generation history commands."""

from datetime import datetime, timezone
from typing import Optional

import click

from ..utils.client import client_from_context
from ..utils.output import format_output, print_info, print_kv, print_success
from ..utils.retry import with_retry
from .common import confirm_action, output_mode, save_audio


def _date(unix: Optional[int]) -> Optional[str]:
    if not unix:
        return None
    return datetime.fromtimestamp(unix, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


@click.group()
def history():
    """Browse generation history.

    \b
    Examples:
      elevenlabs history list --limit 20
      elevenlabs history download <history_item_id> -o clip.mp3
    """
    pass


@history.command("list")
@click.option("--limit", "-l", type=click.IntRange(1, 1000), default=10, show_default=True, help="Number of items")
@click.option("--voice-id", help="Only items generated with this voice")
@click.option("--detailed", "-d", is_flag=True, help="Include the generated text")
@click.pass_context
def list_history(ctx: click.Context, limit: int, voice_id: Optional[str], detailed: bool):
    """List recent generations."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    print_info(f"Fetching history (last {limit} items)...", mode)
    result = with_retry(lambda: client.history.list(page_size=limit, voice_id=voice_id),
                        description="list history")
    if mode.machine_readable:
        format_output(result, mode)
        return

    items = result.get("history") or []
    rows = []
    for item in items:
        row = {
            "history_item_id": item.get("history_item_id"),
            "voice_name": item.get("voice_name"),
            "date": _date(item.get("date_unix")),
            "characters": item.get("character_count_change_to"),
        }
        if detailed:
            row["text"] = (item.get("text") or "")[:60]
        rows.append(row)
    format_output(rows, mode, title="History")
    print_success(f"Showing {len(rows)} items", mode)


@history.command("get")
@click.argument("history_item_id")
@click.pass_context
def get_history_item(ctx: click.Context, history_item_id: str):
    """Show a history item."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    item = client.history.get(history_item_id)
    if mode.machine_readable:
        format_output(item, mode)
        return
    print_kv(
        [
            ("ID", item.get("history_item_id")),
            ("Voice", f"{item.get('voice_name')} ({item.get('voice_id')})"),
            ("Model", item.get("model_id")),
            ("Date", _date(item.get("date_unix"))),
            ("Characters", item.get("character_count_change_to")),
            ("State", item.get("state")),
            ("Text", item.get("text")),
        ],
        mode,
        title="History Item",
    )


@history.command("delete")
@click.argument("history_item_id")
@click.pass_context
def delete_history_item(ctx: click.Context, history_item_id: str):
    """Delete a history item."""
    if not confirm_action(ctx, f"Delete history item {history_item_id}?"):
        return
    client = client_from_context(ctx)
    client.history.delete(history_item_id)
    print_success(f"Deleted history item '{history_item_id}'", output_mode(ctx))


@history.command("download")
@click.argument("history_item_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def download_history(ctx: click.Context, history_item_id: str, output: Optional[str]):
    """Download the audio of a history item."""
    client = client_from_context(ctx)
    audio = client.history.audio(history_item_id)
    save_audio(ctx, audio, output or f"{history_item_id}.mp3", "history", extension="mp3")


@history.command("feedback")
@click.argument("history_item_id")
@click.option("--thumbs-up/--thumbs-down", default=True, help="Positive or negative feedback")
@click.option("--feedback", "text", help="Feedback text")
@click.pass_context
def history_feedback(ctx: click.Context, history_item_id: str, thumbs_up: bool, text: Optional[str]):
    """Rate a generation."""
    client = client_from_context(ctx)
    client.history.feedback(history_item_id, thumbs_up, text)
    print_success(f"Feedback submitted for '{history_item_id}'", output_mode(ctx))
