"""Workspace administration commands."""

import click

from ..utils.client import client_from_context
from ..utils.output import format_output, print_kv, print_success
from .common import confirm_action, output_mode

ROLES = ("admin", "contributor", "viewer")
SHARE_ROLES = ("admin", "editor", "viewer")
SECRET_TYPES = ("new", "stored")


def _items(result, key: str):
    if isinstance(result, list):
        return result
    return result.get(key) or []


@click.group()
def workspace():
    """Manage the workspace: members, invites, secrets and sharing.

    \b
    Examples:
      elevenlabs workspace members
      elevenlabs workspace invite user@example.com viewer
      elevenlabs workspace add-secret STRIPE_KEY sk_live_... new
    """
    pass


@workspace.command("info")
@click.pass_context
def workspace_info(ctx: click.Context):
    """Show workspace details."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.workspace.info()
    if mode.machine_readable:
        format_output(result, mode)
        return
    print_kv(
        [
            ("Workspace ID", result.get("workspace_id") or result.get("id")),
            ("Name", result.get("name")),
            ("Owner", result.get("owner_id")),
            ("Members", result.get("member_count")),
        ],
        mode,
        title="Workspace",
    )


@workspace.command("members")
@click.pass_context
def list_members(ctx: click.Context):
    """List workspace members."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.workspace.members()
    if mode.machine_readable:
        format_output(result, mode)
        return
    format_output(_items(result, "members"), mode, columns=["user_id", "email", "role", "is_locked"],
                  title="Members")


@workspace.command("remove-member")
@click.argument("user_id")
@click.pass_context
def remove_member(ctx: click.Context, user_id: str):
    """Remove a member from the workspace."""
    if not confirm_action(ctx, f"Remove member {user_id} from the workspace?"):
        return
    client = client_from_context(ctx)
    client.workspace.remove_member(user_id)
    print_success(f"Member {user_id} removed", output_mode(ctx))


@workspace.command("invites")
@click.pass_context
def list_invites(ctx: click.Context):
    """List pending invites."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.workspace.invites()
    if mode.machine_readable:
        format_output(result, mode)
        return
    format_output(_items(result, "invites"), mode, columns=["email", "role", "created_at"], title="Invites")


@workspace.command("invite")
@click.argument("email")
@click.argument("role", type=click.Choice(ROLES), default="viewer")
@click.pass_context
def invite(ctx: click.Context, email: str, role: str):
    """Invite a user by email."""
    client = client_from_context(ctx)
    client.workspace.invite(email, role)
    print_success(f"Invited {email} as {role}", output_mode(ctx))


@workspace.command("revoke")
@click.argument("email")
@click.pass_context
def revoke(ctx: click.Context, email: str):
    """Revoke a pending invite."""
    if not confirm_action(ctx, f"Revoke the invite for {email}?"):
        return
    client = client_from_context(ctx)
    client.workspace.revoke_invite(email)
    print_success(f"Invite for {email} revoked", output_mode(ctx))


@workspace.command("api-keys")
@click.pass_context
def api_keys(ctx: click.Context):
    """List workspace API keys."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.workspace.api_keys()
    if mode.machine_readable:
        format_output(result, mode)
        return
    format_output(_items(result, "api_keys"), mode, columns=["key_id", "name", "hint", "is_disabled"],
                  title="API Keys")


@workspace.command("secrets")
@click.pass_context
def list_secrets(ctx: click.Context):
    """List agent secrets (values are never shown)."""
    client = client_from_context(ctx)
    result = client.workspace.secrets()
    format_output(result, output_mode(ctx), columns=["secret_id", "name", "type"], title="Secrets", key="secrets")


@workspace.command("add-secret")
@click.argument("name")
@click.argument("value")
@click.argument("secret_type", type=click.Choice(SECRET_TYPES), default="new")
@click.pass_context
def add_secret(ctx: click.Context, name: str, value: str, secret_type: str):
    """Store a secret for agent tools."""
    client = client_from_context(ctx)
    result = client.workspace.add_secret(name, value, secret_type=secret_type)
    print_success(f"Secret '{name}' added: {result.get('secret_id')}", output_mode(ctx))


@workspace.command("delete-secret")
@click.argument("secret_id")
@click.pass_context
def delete_secret(ctx: click.Context, secret_id: str):
    """Delete a secret."""
    if not confirm_action(ctx, f"Delete secret {secret_id}?"):
        return
    client = client_from_context(ctx)
    client.workspace.delete_secret(secret_id)
    print_success(f"Secret {secret_id} deleted", output_mode(ctx))


@workspace.command("share")
@click.argument("resource_type")
@click.argument("resource_id")
@click.argument("role", type=click.Choice(SHARE_ROLES), default="viewer")
@click.pass_context
def share(ctx: click.Context, resource_type: str, resource_id: str, role: str):
    """Share a resource (voice, agent, project...) with the workspace."""
    client = client_from_context(ctx)
    client.workspace.share(resource_type, resource_id, role)
    print_success(f"Shared {resource_type} {resource_id} ({role})", output_mode(ctx))


@workspace.command("unshare")
@click.argument("resource_type")
@click.argument("resource_id")
@click.pass_context
def unshare(ctx: click.Context, resource_type: str, resource_id: str):
    """Stop sharing a resource with the workspace."""
    client = client_from_context(ctx)
    client.workspace.unshare(resource_type, resource_id)
    print_success(f"Unshared {resource_type} {resource_id}", output_mode(ctx))
