"""Workspace webhook commands."""

from typing import Optional

import click

from ..utils.client import client_from_context
from ..utils.output import format_output, print_success
from .common import confirm_action, output_mode, split_csv


@click.group()
def webhook():
    """Manage workspace webhooks.

    \b
    Examples:
      elevenlabs webhook list
      elevenlabs webhook create -n alerts -u https://example.com/hook -e transcript,call_ended
    """
    pass


@webhook.command("list")
@click.pass_context
def list_webhooks(ctx: click.Context):
    """List webhooks."""
    client = client_from_context(ctx)
    result = client.webhooks.list()
    format_output(result, output_mode(ctx), columns=["webhook_id", "name", "webhook_url", "is_disabled"],
                  title="Webhooks", key="webhooks")


@webhook.command("create")
@click.option("--name", "-n", required=True, help="Webhook name")
@click.option("--url", "-u", required=True, help="Endpoint URL")
@click.option("--events", "-e", help="Comma-separated event types")
@click.pass_context
def create_webhook(ctx: click.Context, name: str, url: str, events: Optional[str]):
    """Create a webhook."""
    client = client_from_context(ctx)
    result = client.webhooks.create(name, url, split_csv(events) or None)
    print_success(f"Webhook created: {result.get('webhook_id')}", output_mode(ctx))


@webhook.command("delete")
@click.argument("webhook_id")
@click.pass_context
def delete_webhook(ctx: click.Context, webhook_id: str):
    """Delete a webhook."""
    if not confirm_action(ctx, f"Delete webhook {webhook_id}?"):
        return
    client = client_from_context(ctx)
    client.webhooks.delete(webhook_id)
    print_success(f"Webhook {webhook_id} deleted", output_mode(ctx))
