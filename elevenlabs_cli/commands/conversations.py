"""Agent conversation commands."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import click
from rich.markup import escape

from ..streaming import ConversationEvent, ConversationEventType, ConversationSession
from ..utils.client import client_from_context
from ..utils.output import console, format_output, print_info, print_kv, print_success, print_warning
from .common import confirm_action, open_player, output_mode, save_audio


def _started(unix: Optional[int]) -> Optional[str]:
    if not unix:
        return None
    return datetime.fromtimestamp(unix, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _read_line() -> Optional[str]:
    try:
        return input()
    except EOFError:
        return None


@click.group()
def converse():
    """Talk to agents and browse conversations.

    \b
    Examples:
      elevenlabs converse chat --agent-id <agent_id>
      elevenlabs converse chat --agent-id <agent_id> -m "What are your hours?"
      elevenlabs converse list --agent-id <agent_id>
    """
    pass


@converse.command("chat")
@click.option("--agent-id", required=True, help="Agent to talk to")
@click.option("--message", "-m", help="Send a single message and wait for the reply")
@click.option("--max-turns", type=click.IntRange(min=1), help="Stop after N agent responses")
@click.option("--play", is_flag=True, help="Play the agent's audio")
@click.pass_context
def chat(
    ctx: click.Context,
    agent_id: str,
    message: Optional[str],
    max_turns: Optional[int],
    play: bool,
):
    """Start a text conversation with an agent."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    session = ConversationSession(client.api_key, agent_id, max_turns=max_turns)
    audio = bytearray()

    @session.on(ConversationEventType.METADATA)
    def on_metadata(event: ConversationEvent):
        print_info(f"Conversation started: {session.conversation_id}", mode)

    @session.on(ConversationEventType.AGENT_RESPONSE)
    def on_agent(event: ConversationEvent):
        if event.text and not mode.machine_readable:
            console.print(f"[bold cyan]Agent:[/bold cyan] {escape(event.text)}")

    @session.on(ConversationEventType.USER_TRANSCRIPT)
    def on_user(event: ConversationEvent):
        if event.text and not mode.machine_readable:
            console.print(f"[bold green]You:[/bold green] {escape(event.text)}")

    @session.on(ConversationEventType.AUDIO)
    def on_audio(event: ConversationEvent):
        audio.extend(event.audio)

    @session.on(ConversationEventType.ERROR)
    def on_error(event: ConversationEvent):
        print_warning(f"Agent error: {event.text}", mode)

    if message is None:
        print_info("Connected. Type your messages; 'exit' or Ctrl-D to quit.", mode)
    asyncio.run(session.chat(read_line=_read_line, message=message))

    if mode.machine_readable:
        format_output(
            {"conversation_id": session.conversation_id, "transcript": session.transcript},
            mode,
        )
    if play and audio:
        player = open_player(ctx, session.audio_format)
        if player is not None:
            player.feed(bytes(audio))
            player.close()
    print_success(f"Conversation ended after {session.agent_turns} agent turns", mode)


@converse.command("list")
@click.option("--agent-id", help="Only conversations with this agent")
@click.option("--branch-id", help="Only conversations on this branch")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.pass_context
def list_conversations(
    ctx: click.Context,
    agent_id: Optional[str],
    branch_id: Optional[str],
    limit: Optional[int],
):
    """List conversations."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.conversations.list(agent_id=agent_id, page_size=limit, branch_id=branch_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    rows = [
        {
            "conversation_id": c.get("conversation_id"),
            "agent_name": c.get("agent_name"),
            "status": c.get("status"),
            "started": _started(c.get("start_time_unix_secs")),
            "duration_s": c.get("call_duration_secs"),
            "messages": c.get("message_count"),
        }
        for c in result.get("conversations") or []
    ]
    format_output(rows, mode, title="Conversations")


@converse.command("get")
@click.argument("conversation_id")
@click.pass_context
def get_conversation(ctx: click.Context, conversation_id: str):
    """Show a conversation and its transcript."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.conversations.get(conversation_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    metadata = result.get("metadata") or {}
    print_kv(
        [
            ("Conversation ID", result.get("conversation_id")),
            ("Agent ID", result.get("agent_id")),
            ("Status", result.get("status")),
            ("Started", _started(metadata.get("start_time_unix_secs"))),
            ("Duration", metadata.get("call_duration_secs")),
        ],
        mode,
        title="Conversation",
    )
    transcript = [
        {"role": t.get("role"), "time_s": t.get("time_in_call_secs"), "message": t.get("message")}
        for t in result.get("transcript") or []
    ]
    if transcript:
        format_output(transcript, mode, title="Transcript")


@converse.command("signed-url")
@click.argument("agent_id")
@click.option("--branch-id", "-b", help="Agent branch")
@click.pass_context
def signed_url(ctx: click.Context, agent_id: str, branch_id: Optional[str]):
    """Get a signed WebSocket URL for a private agent."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.conversations.signed_url(agent_id, branch_id=branch_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    click.echo(result.get("signed_url"))


@converse.command("token")
@click.argument("agent_id")
@click.option("--branch-id", "-b", help="Agent branch")
@click.pass_context
def conversation_token(ctx: click.Context, agent_id: str, branch_id: Optional[str]):
    """Get a WebRTC conversation token."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.conversations.token(agent_id, branch_id=branch_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    click.echo(result.get("token"))


@converse.command("delete")
@click.argument("conversation_id")
@click.pass_context
def delete_conversation(ctx: click.Context, conversation_id: str):
    """Delete a conversation."""
    if not confirm_action(ctx, f"Delete conversation {conversation_id}?"):
        return
    client = client_from_context(ctx)
    client.conversations.delete(conversation_id)
    print_success(f"Conversation {conversation_id} deleted", output_mode(ctx))


@converse.command("audio")
@click.argument("conversation_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def conversation_audio(ctx: click.Context, conversation_id: str, output: Optional[str]):
    """Download a conversation's recording."""
    client = client_from_context(ctx)
    audio = client.conversations.audio(conversation_id)
    save_audio(ctx, audio, output or f"{conversation_id}.mp3", "conversation", extension="mp3")


@converse.command("feedback")
@click.argument("conversation_id")
@click.option("--thumbs-up/--thumbs-down", default=True, help="Positive or negative feedback")
@click.pass_context
def conversation_feedback(ctx: click.Context, conversation_id: str, thumbs_up: bool):
    """Rate a conversation."""
    client = client_from_context(ctx)
    client.conversations.feedback(conversation_id, thumbs_up)
    print_success(f"Feedback submitted for conversation {conversation_id}", output_mode(ctx))


@converse.command("outbound")
@click.option("--agent-id", required=True, help="Agent that places the call")
@click.option("--caller-id", required=True, help="Phone number ID to call from")
@click.option("--to", "to_number", required=True, help="Number to call (E.164)")
@click.option("--message", "-m", help="Override the agent's first message")
@click.pass_context
def outbound_call(
    ctx: click.Context,
    agent_id: str,
    caller_id: str,
    to_number: str,
    message: Optional[str],
):
    """Place an outbound phone call with an agent."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    print_info(f"Calling {to_number}...", mode)
    result = client.conversations.outbound_call(agent_id, caller_id, to_number, first_message=message)
    print_success(f"Call started: {result.get('conversation_id') or result.get('callSid')}", mode)
    if mode.machine_readable:
        format_output(result, mode)
