"""Phone number commands."""

from typing import Any, Dict, Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import format_output, print_info, print_kv, print_success
from .common import confirm_action, output_mode

PROVIDERS = ("twilio", "sip")


def build_import_body(
    number: str,
    provider: str = "twilio",
    label: Optional[str] = None,
    sid: Optional[str] = None,
    token: Optional[str] = None,
    sip_uri: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Request body for importing a phone number.

    Twilio numbers need the account SID and auth token; SIP trunk numbers
    need the trunk URI.

    Raises:
        ValidationError: If a provider credential is missing.
    """
    provider = (provider or "twilio").lower()
    if provider == "twilio":
        if not sid:
            raise ValidationError("Twilio Account SID is required for Twilio provider. Use --sid")
        if not token:
            raise ValidationError("Twilio Auth Token is required for Twilio provider. Use --token")
        provider_config = {"type": "twilio", "twilio_sid": sid, "twilio_token": token}
    elif provider in ("sip", "sip_trunk"):
        if not sip_uri:
            raise ValidationError("SIP URI is required for SIP provider. Use --sip-uri")
        provider_config = {"type": "sip_trunk", "sip_uri": sip_uri}
    else:
        raise ValidationError(f"Unknown provider '{provider}'. Use twilio or sip")

    body: Dict[str, Any] = {"phone_number": number, "label": label or number}
    body["provider"] = provider_config
    return body


@click.group()
def phone():
    """Manage phone numbers for agents.

    \b
    Examples:
      elevenlabs phone list
      elevenlabs phone import +15551234567 -p twilio --sid AC... --token ...
      elevenlabs phone update <phone_id> --agent-id <agent_id>
    """
    pass


@phone.command("list")
@click.option("--agent-id", help="Only numbers assigned to this agent")
@click.pass_context
def list_numbers(ctx: click.Context, agent_id: Optional[str]):
    """List phone numbers."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.phone_numbers.list(agent_id=agent_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    rows = [
        {
            "phone_number_id": n.get("phone_number_id"),
            "phone_number": n.get("phone_number"),
            "label": n.get("label"),
            "provider": n.get("provider"),
            "agent": (n.get("assigned_agent") or {}).get("agent_name"),
        }
        for n in (result if isinstance(result, list) else result.get("phone_numbers") or [])
    ]
    format_output(rows, mode, title="Phone Numbers")


@phone.command("get")
@click.argument("phone_id")
@click.pass_context
def get_number(ctx: click.Context, phone_id: str):
    """Show a phone number."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.phone_numbers.get(phone_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    agent = result.get("assigned_agent") or {}
    print_kv(
        [
            ("ID", result.get("phone_number_id")),
            ("Number", result.get("phone_number")),
            ("Label", result.get("label")),
            ("Provider", result.get("provider")),
            ("Agent", f"{agent.get('agent_name')} ({agent.get('agent_id')})" if agent else None),
        ],
        mode,
        title="Phone Number",
    )


@phone.command("import")
@click.argument("number")
@click.option("--provider", "-p", type=click.Choice(PROVIDERS), default="twilio", show_default=True,
              help="Telephony provider")
@click.option("--label", "-l", help="Display label")
@click.option("--sid", help="Twilio Account SID")
@click.option("--token", help="Twilio Auth Token")
@click.option("--sip-uri", help="SIP trunk URI")
@click.pass_context
def import_number(
    ctx: click.Context,
    number: str,
    provider: str,
    label: Optional[str],
    sid: Optional[str],
    token: Optional[str],
    sip_uri: Optional[str],
):
    """Import a Twilio or SIP trunk phone number."""
    body = build_import_body(number, provider, label, sid, token, sip_uri)
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    print_info(f"Importing {number} ({provider})...", mode)
    result = client.phone_numbers.create(**body)
    print_success(f"Phone number imported: {result.get('phone_number_id')}", mode)


@phone.command("update")
@click.argument("phone_id")
@click.option("--label", "-l", help="New label")
@click.option("--agent-id", help="Agent to assign")
@click.pass_context
def update_number(ctx: click.Context, phone_id: str, label: Optional[str], agent_id: Optional[str]):
    """Update a phone number's label or agent."""
    data = {k: v for k, v in (("label", label), ("agent_id", agent_id)) if v}
    if not data:
        raise ValidationError("No updates specified. Use --label or --agent-id")
    client = client_from_context(ctx)
    client.phone_numbers.update(phone_id, **data)
    print_success(f"Phone number {phone_id} updated", output_mode(ctx))


@phone.command("delete")
@click.argument("phone_id")
@click.pass_context
def delete_number(ctx: click.Context, phone_id: str):
    """Delete a phone number."""
    if not confirm_action(ctx, f"Delete phone number {phone_id}?"):
        return
    client = client_from_context(ctx)
    client.phone_numbers.delete(phone_id)
    print_success(f"Phone number {phone_id} deleted", output_mode(ctx))


@phone.command("test")
@click.argument("phone_id")
@click.option("--agent-id", help="Agent to test with")
@click.pass_context
def test_number(ctx: click.Context, phone_id: str, agent_id: Optional[str]):
    """Place a test call through a phone number."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.phone_numbers.test_call(phone_id, agent_id=agent_id)
    print_success(f"Test call started for {phone_id}", mode)
    if mode.machine_readable:
        format_output(result, mode)
