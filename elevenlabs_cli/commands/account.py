"""Account commands: user, models and usage."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.output import format_output, print_info, print_kv, print_subscription_info, print_success
from ..utils.retry import with_retry
from .common import output_mode

USAGE_WINDOW_DAYS = 30
BREAKDOWN_TYPES = ("none", "voice", "user", "groups", "voice_multiplier")

Timestamp = Optional[Union[int, str]]


def _to_seconds(value: Timestamp, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name} timestamp: {value}. Expected Unix seconds")
    # Accept millisecond timestamps as well
    return seconds // 1000 if seconds > 10**11 else seconds


def default_usage_window(start: Timestamp = None, end: Timestamp = None) -> Tuple[int, int]:
    """
    Usage query window in Unix milliseconds.

    ``start`` and ``end`` are Unix timestamps (seconds); missing values
    default to the last 30 days ending now.
    """
    end_s = _to_seconds(end, "end")
    if end_s is None:
        end_s = int(time.time())
    start_s = _to_seconds(start, "start")
    if start_s is None:
        start_s = end_s - USAGE_WINDOW_DAYS * 24 * 60 * 60
    if start_s > end_s:
        raise ValidationError("Start time must be before end time")
    return start_s * 1000, end_s * 1000


def usage_rows(stats: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten ``{"time": [...], "usage": {type: [...]}}`` into table rows."""
    times = stats.get("time") or []
    rows = []
    for usage_type, values in (stats.get("usage") or {}).items():
        for timestamp, value in zip(times, values):
            rows.append({
                "time": datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d"),
                "usage_type": usage_type,
                "characters": value,
            })
    return rows


def _usage_pairs(sub: Dict[str, Any]) -> List[Tuple[str, Any]]:
    count = sub.get("character_count") or 0
    limit = sub.get("character_limit") or 0
    pairs: List[Tuple[str, Any]] = [
        ("Character count", f"{count:,}"),
        ("Character limit", f"{limit:,}"),
    ]
    if limit:
        pairs.append(("Usage", f"{count / limit * 100:.1f}%"))
    reset = sub.get("next_character_count_reset_unix")
    if reset:
        pairs.append(("Next reset", datetime.fromtimestamp(reset, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")))
    return pairs


# =============================================================================
# User
# =============================================================================


@click.group()
def user():
    """Show account information.

    \b
    Examples:
      elevenlabs user info
      elevenlabs user subscription
    """
    pass


@user.command("info")
@click.pass_context
def user_info(ctx: click.Context):
    """Show user information."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = with_retry(client.user.get, description="get user")
    if mode.machine_readable:
        format_output(result, mode)
        return
    sub = result.get("subscription") or {}
    print_kv(
        [("User ID", result.get("user_id")), ("Subscription", sub.get("tier"))] + _usage_pairs(sub),
        mode,
        title="User Information",
    )


@user.command("subscription")
@click.pass_context
def user_subscription(ctx: click.Context):
    """Show subscription details."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    sub = with_retry(client.user.subscription, description="get subscription")
    if mode.machine_readable:
        format_output(sub, mode)
        return
    pairs = [("Tier", sub.get("tier")), ("Status", sub.get("status"))] + _usage_pairs(sub)
    pairs += [
        ("Voice limit", sub.get("voice_limit")),
        ("Professional voices limit", sub.get("professional_voice_limit")),
    ]
    print_kv(pairs, mode, title="Subscription Details")


@user.command("permissions")
@click.pass_context
def user_permissions(ctx: click.Context):
    """Show which features the current subscription unlocks."""
    client = client_from_context(ctx)
    result = client.user.get()
    tier = (result.get("subscription") or {}).get("tier") or "unknown"
    print_info(f"User ID: {result.get('user_id')}", output_mode(ctx))
    print_subscription_info(tier)


# =============================================================================
# Models
# =============================================================================


@click.group()
def models():
    """List generation models."""
    pass


@models.command("list")
@click.pass_context
def list_models(ctx: click.Context):
    """List available models."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = with_retry(client.models.list, description="list models")
    if mode.machine_readable:
        format_output(result, mode)
        return
    rows = [
        {
            "model_id": m.get("model_id"),
            "name": m.get("name"),
            "description": (m.get("description") or "")[:60],
            "languages": len(m.get("languages") or []),
        }
        for m in result
    ]
    format_output(rows, mode, title="Available Models")
    print_success(f"Found {len(rows)} models", mode)


@models.command("rates")
@click.pass_context
def model_rates(ctx: click.Context):
    """Show per-model character cost multipliers."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = with_retry(client.models.list, description="list models")
    rows = [
        {
            "model_id": m.get("model_id"),
            "name": m.get("name"),
            "character_cost_multiplier": (m.get("model_rates") or {}).get("character_cost_multiplier", 1.0),
        }
        for m in result
    ]
    format_output(rows, mode, title="Model Pricing/Rates")


# =============================================================================
# Usage
# =============================================================================


@click.group()
def usage():
    """Character usage statistics."""
    pass


@usage.command("stats")
@click.option("--start", "-s", type=int, help="Start time (Unix seconds, default: 30 days ago)")
@click.option("--end", "-e", type=int, help="End time (Unix seconds, default: now)")
@click.option("--breakdown", "-b", type=click.Choice(BREAKDOWN_TYPES), help="Breakdown type")
@click.pass_context
def usage_stats(ctx: click.Context, start: Optional[int], end: Optional[int], breakdown: Optional[str]):
    """Show character usage over a time window.

    \b
    Examples:
      elevenlabs usage stats
      elevenlabs usage stats --breakdown voice
    """
    mode = output_mode(ctx)
    start_ms, end_ms = default_usage_window(start, end)
    client = client_from_context(ctx)
    print_info(f"Fetching usage stats from {start_ms // 1000} to {end_ms // 1000}...", mode)
    stats = client.usage.character_stats(start_ms, end_ms, breakdown_type=breakdown)
    if mode.machine_readable:
        format_output(stats, mode)
        return

    rows = usage_rows(stats)
    if not rows:
        print_info("No usage data found for the specified period", mode)
        return
    format_output(rows, mode, columns=["time", "usage_type", "characters"], title="Usage Statistics")
    total = sum(row["characters"] or 0 for row in rows)
    print_success(f"Total characters used: {total:,}", mode)
