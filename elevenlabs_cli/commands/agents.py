"""Conversational agent management commands."""

from typing import Any, Dict, Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import format_output, print_info, print_kv, print_success
from ..utils.retry import with_retry
from .common import confirm_action, output_mode

AGENT_COLUMNS = ["agent_id", "name", "created_at_unix_secs", "access_level"]


def build_agent_config(
    first_message: Optional[str] = None,
    system_prompt: Optional[str] = None,
    voice_id: Optional[str] = None,
) -> Dict[str, Any]:
    """``conversation_config`` body for a new agent."""
    agent: Dict[str, Any] = {}
    if first_message:
        agent["first_message"] = first_message
    if system_prompt:
        agent["prompt"] = {"prompt": system_prompt}
    config: Dict[str, Any] = {"agent": agent}
    if voice_id:
        config["tts"] = {"voice_id": voice_id}
    return config


@click.group()
def agent():
    """Manage conversational AI agents.

    \b
    Examples:
      elevenlabs agent list
      elevenlabs agent create --name "Support Bot" --system-prompt "You are helpful"
      elevenlabs agent simulate <agent_id> -m "Hi, I need help"
    """
    pass


@agent.command("list")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.option("--search", "-s", help="Search by name")
@click.pass_context
def list_agents(ctx: click.Context, limit: Optional[int], search: Optional[str]):
    """List all agents."""
    client = client_from_context(ctx)
    result = with_retry(lambda: client.agents.list(page_size=limit, search=search), description="list agents")
    format_output(result, output_mode(ctx), columns=AGENT_COLUMNS, title="Agents", key="agents")


@agent.command("summaries")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.pass_context
def agent_summaries(ctx: click.Context, limit: Optional[int]):
    """List lightweight agent summaries."""
    client = client_from_context(ctx)
    result = with_retry(lambda: client.agents.summaries(page_size=limit), description="agent summaries")
    format_output(result, output_mode(ctx), columns=["agent_id", "name", "last_call_time_unix_secs"],
                  title="Agent Summaries", key="agents")


@agent.command("get")
@click.argument("agent_id")
@click.pass_context
def get_agent(ctx: click.Context, agent_id: str):
    """Get details for a specific agent."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.agents.get(agent_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    config = result.get("conversation_config") or {}
    agent_cfg = config.get("agent") or {}
    print_kv(
        [
            ("Agent ID", result.get("agent_id")),
            ("Name", result.get("name")),
            ("Voice", (config.get("tts") or {}).get("voice_id")),
            ("Language", agent_cfg.get("language")),
            ("First message", agent_cfg.get("first_message")),
            ("Prompt", ((agent_cfg.get("prompt") or {}).get("prompt") or "")[:200]),
        ],
        mode,
        title="Agent",
    )


@agent.command("create")
@click.option("--name", "-n", required=True, help="Agent name")
@click.option("--description", "-d", help="Agent description")
@click.option("--voice-id", "-v", help="Voice ID")
@click.option("--first-message", "-f", help="Initial greeting")
@click.option("--system-prompt", "-s", help="System prompt")
@click.pass_context
def create_agent(
    ctx: click.Context,
    name: str,
    description: Optional[str],
    voice_id: Optional[str],
    first_message: Optional[str],
    system_prompt: Optional[str],
):
    """Create a new agent."""
    data: Dict[str, Any] = {
        "name": name,
        "conversation_config": build_agent_config(first_message, system_prompt, voice_id),
    }
    if description:
        data["tags"] = [description]
    client = client_from_context(ctx)
    result = client.agents.create(**data)
    mode = output_mode(ctx)
    print_success(f"Agent created: {result.get('agent_id')}", mode)
    if mode.machine_readable:
        format_output(result, mode)


@agent.command("update")
@click.argument("agent_id")
@click.option("--name", "-n", help="New name")
@click.option("--description", "-d", help="New description")
@click.pass_context
def update_agent(ctx: click.Context, agent_id: str, name: Optional[str], description: Optional[str]):
    """Update an agent."""
    data = {k: v for k, v in (("name", name), ("description", description)) if v}
    if not data:
        raise ValidationError("No updates specified. Use --name or --description")
    client = client_from_context(ctx)
    client.agents.update(agent_id, **data)
    print_success(f"Agent {agent_id} updated", output_mode(ctx))


@agent.command("delete")
@click.argument("agent_id")
@click.pass_context
def delete_agent(ctx: click.Context, agent_id: str):
    """Delete an agent."""
    if not confirm_action(ctx, f"Delete agent {agent_id}?"):
        return
    client = client_from_context(ctx)
    client.agents.delete(agent_id)
    print_success(f"Agent {agent_id} deleted", output_mode(ctx))


@agent.command("link")
@click.argument("agent_id")
@click.pass_context
def agent_link(ctx: click.Context, agent_id: str):
    """Show an agent's shareable link."""
    client = client_from_context(ctx)
    result = client.agents.link(agent_id)
    format_output(result, output_mode(ctx))


@agent.command("duplicate")
@click.argument("agent_id")
@click.option("--name", "-n", required=True, help="Name for the copy")
@click.pass_context
def duplicate_agent(ctx: click.Context, agent_id: str, name: str):
    """Duplicate an agent."""
    client = client_from_context(ctx)
    result = client.agents.duplicate(agent_id, name=name)
    print_success(f"Agent duplicated: {result.get('agent_id')}", output_mode(ctx))


@agent.command("branches")
@click.argument("agent_id")
@click.pass_context
def agent_branches(ctx: click.Context, agent_id: str):
    """List an agent's branches."""
    client = client_from_context(ctx)
    result = client.agents.branches(agent_id)
    format_output(result, output_mode(ctx), columns=["id", "name", "created_at"], key="results")


@agent.command("rename-branch")
@click.argument("agent_id")
@click.argument("branch_id")
@click.option("--name", "-n", required=True, help="New branch name")
@click.pass_context
def rename_branch(ctx: click.Context, agent_id: str, branch_id: str, name: str):
    """Rename an agent branch."""
    client = client_from_context(ctx)
    client.agents.rename_branch(agent_id, branch_id, name)
    print_success(f"Branch {branch_id} renamed to '{name}'", output_mode(ctx))


@agent.command("batch-list")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.pass_context
def batch_list(ctx: click.Context, limit: Optional[int]):
    """List batch calling jobs."""
    client = client_from_context(ctx)
    result = client.batch_calls.list(limit=limit)
    format_output(result, output_mode(ctx), columns=["id", "name", "agent_name", "status", "total_calls_scheduled"],
                  title="Batch Calls", key="batch_calls")


@agent.command("batch-status")
@click.argument("batch_id")
@click.pass_context
def batch_status(ctx: click.Context, batch_id: str):
    """Show a batch calling job."""
    client = client_from_context(ctx)
    result = client.batch_calls.get(batch_id)
    format_output(result, output_mode(ctx), columns=["id", "name", "status", "total_calls_dispatched"])


@agent.command("batch-delete")
@click.argument("batch_id")
@click.pass_context
def batch_delete(ctx: click.Context, batch_id: str):
    """Delete a batch calling job."""
    if not confirm_action(ctx, f"Delete batch call {batch_id}?"):
        return
    client = client_from_context(ctx)
    client.batch_calls.delete(batch_id)
    print_success(f"Batch call {batch_id} deleted", output_mode(ctx))


@agent.command("simulate")
@click.argument("agent_id")
@click.option("--message", "-m", required=True, help="Simulated user's first message")
@click.option("--max-turns", type=click.IntRange(1, 50), default=5, show_default=True, help="Turn limit")
@click.pass_context
def simulate(ctx: click.Context, agent_id: str, message: str, max_turns: int):
    """Simulate a conversation with an agent."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    print_info(f"Simulating conversation with agent {agent_id}...", mode)
    result = client.agents.simulate(agent_id, message, max_turns=max_turns)
    if mode.machine_readable:
        format_output(result, mode)
        return
    turns = [
        {"role": turn.get("role"), "message": turn.get("message")}
        for turn in result.get("simulated_conversation") or []
    ]
    format_output(turns, mode, columns=["role", "message"], title="Simulated Conversation")
    analysis = result.get("analysis") or {}
    if analysis.get("transcript_summary"):
        print_info(f"Summary: {analysis['transcript_summary']}", mode)


@agent.command("update-turn")
@click.argument("agent_id")
@click.option("--spelling-patience", type=click.Choice(["auto", "low", "medium", "high"]),
              help="How long to wait while the user spells")
@click.option("--silence-threshold-ms", type=click.IntRange(min=0), help="Turn silence threshold in ms")
@click.pass_context
def update_turn(
    ctx: click.Context,
    agent_id: str,
    spelling_patience: Optional[str],
    silence_threshold_ms: Optional[int],
):
    """Update an agent's turn-taking configuration."""
    if spelling_patience is None and silence_threshold_ms is None:
        raise ValidationError("No updates specified. Use --spelling-patience or --silence-threshold-ms")
    client = client_from_context(ctx)
    client.agents.update_turn(agent_id, spelling_patience, silence_threshold_ms)
    print_success(f"Turn configuration updated for agent {agent_id}", output_mode(ctx))


@agent.command("whatsapp-list")
@click.pass_context
def whatsapp_list(ctx: click.Context):
    """List WhatsApp accounts connected to agents."""
    client = client_from_context(ctx)
    result = client.agents.whatsapp_accounts()
    format_output(result, output_mode(ctx), title="WhatsApp Accounts", key="items")


@agent.command("widget-get")
@click.argument("agent_id")
@click.pass_context
def widget_get(ctx: click.Context, agent_id: str):
    """Show an agent's widget configuration."""
    client = client_from_context(ctx)
    result = client.agents.widget(agent_id)
    format_output(result, output_mode(ctx))


@agent.command("widget-avatar")
@click.argument("agent_id")
@click.option("--file", "-f", "file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="Avatar image")
@click.pass_context
def widget_avatar(ctx: click.Context, agent_id: str, file: str):
    """Upload an avatar for an agent's widget."""
    client = client_from_context(ctx)
    result = client.agents.upload_avatar(agent_id, file)
    print_success(f"Avatar uploaded for agent {agent_id}", output_mode(ctx))
    if result.get("avatar_url"):
        print_info(f"URL: {result['avatar_url']}", output_mode(ctx))
