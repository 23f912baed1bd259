"""Output formatting utilities."""

import json
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.syntax import Syntax

from ..exceptions import ElevenLabsError, ErrorKind, classify

console = Console()
err_console = Console(stderr=True)

API_KEYS_URL = "https://elevenlabs.io/app/settings/api-keys"


class OutputMode(str, Enum):
    """How command results are rendered."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def resolve(cls, output: Optional[str], json_flag: bool = False) -> "OutputMode":
        if json_flag:
            return cls.JSON
        return cls(output or cls.TABLE.value)

    @property
    def machine_readable(self) -> bool:
        return self is not OutputMode.TABLE


def format_output(
    data: Any,
    mode: OutputMode = OutputMode.TABLE,
    columns: Optional[List[str]] = None,
    title: Optional[str] = None,
    key: Optional[str] = None,
) -> None:
    """
    Format and print data based on the output mode.

    ``key`` names the list inside a response envelope (``voices``, ``agents``,
    ...) to tabulate; JSON and YAML modes always print the whole response.
    """
    if mode is OutputMode.JSON:
        print_json(data)
    elif mode is OutputMode.YAML:
        print_yaml(data)
    else:
        if key and isinstance(data, dict):
            data = data.get(key) or []
        if isinstance(data, list):
            print_table(data, columns, title=title)
        elif isinstance(data, dict):
            print_table([data], columns, title=title)
        else:
            console.print(data)


def print_json(data: Any) -> None:
    """Print data as JSON."""
    json_str = json.dumps(data, indent=2, default=str)
    if console.is_terminal:
        console.print(Syntax(json_str, "json", theme="monokai", line_numbers=False))
    else:
        # Plain text keeps piped output parseable
        console.print(json_str, markup=False, emoji=False, highlight=False, soft_wrap=True)


def print_yaml(data: Any) -> None:
    """Print data as YAML."""
    yaml_str = yaml.dump(data, default_flow_style=False, sort_keys=False)
    if console.is_terminal:
        console.print(Syntax(yaml_str, "yaml", theme="monokai", line_numbers=False))
    else:
        console.print(yaml_str, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, (list, dict)):
        text = json.dumps(value)
        return text[:50] + "..." if len(text) > 50 else text
    text = str(value)
    if len(text) > 50:
        text = text[:47] + "..."
    return text


def print_table(
    data: List[Dict[str, Any]],
    columns: Optional[List[str]] = None,
    title: Optional[str] = None,
) -> None:
    """Print data as a formatted table."""
    if not data:
        console.print("[dim]No data to display[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")

    if columns:
        display_columns = columns
    else:
        all_keys = list(data[0].keys())
        priority = ["voice_id", "agent_id", "id", "name", "status", "category", "created_at"]
        display_columns = [k for k in priority if k in all_keys]
        display_columns.extend([k for k in all_keys if k not in display_columns])
        display_columns = display_columns[:8]

    for col in display_columns:
        table.add_column(col.replace("_", " ").title())

    for item in data:
        table.add_row(*[escape(_cell(item.get(col))) for col in display_columns])

    console.print(table)


def print_kv(
    pairs: Sequence[Tuple[str, Any]],
    mode: OutputMode = OutputMode.TABLE,
    title: Optional[str] = None,
) -> None:
    """Print a two-column property table, or a dict in machine-readable modes."""
    if mode.machine_readable:
        format_output({k: v for k, v in pairs}, mode)
        return

    table = Table(title=title, show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for name, value in pairs:
        if value is None or value == "":
            continue
        table.add_row(name, escape(_cell(value)))
    console.print(table)


def _status_console(mode: OutputMode) -> Console:
    # Keep stdout clean for JSON/YAML consumers
    return err_console if mode.machine_readable else console


def print_success(message: str, mode: OutputMode = OutputMode.TABLE) -> None:
    """Print a success message."""
    _status_console(mode).print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str, mode: OutputMode = OutputMode.TABLE) -> None:
    """Print a warning message."""
    _status_console(mode).print(f"[yellow]![/yellow] {escape(message)}")


def print_info(message: str, mode: OutputMode = OutputMode.TABLE) -> None:
    """Print an info message."""
    _status_console(mode).print(f"[blue]i[/blue] {escape(message)}")


def confirm(message: str, assume_yes: bool = False, default: bool = False) -> bool:
    """Ask for confirmation. ``assume_yes`` (the global --yes flag) skips the prompt."""
    if assume_yes:
        return True
    suffix = " [Y/n]" if default else " [y/N]"
    result = console.input(f"{message}{escape(suffix)} ")
    if not result:
        return default
    return result.strip().lower() in ("y", "yes")


def print_api_error(error: BaseException) -> None:
    """Print a category-specific explanation and remediation hint for ``error``."""
    kind = classify(error)
    out = err_console

    if kind is ErrorKind.MISSING_API_KEY:
        out.print("[red]Error: API key is required[/red]")
        out.print()
        out.print("[yellow]To get an API key:[/yellow]")
        out.print(f"  1. Go to {API_KEYS_URL}")
        out.print("  2. Create a new API key")
        out.print("  3. Copy it and set it as ELEVENLABS_API_KEY environment variable")
        out.print()
        out.print("[yellow]Or use the --api-key flag:[/yellow]")
        out.print("  elevenlabs --api-key YOUR_API_KEY ...")
    elif kind is ErrorKind.UNAUTHORIZED:
        out.print("[red]Error: Invalid API key[/red]")
        out.print()
        out.print("[yellow]Your API key may be invalid or expired.[/yellow]")
        out.print(f"Get a new key from: {API_KEYS_URL}")
    elif kind is ErrorKind.FORBIDDEN:
        out.print("[red]Error: Permission denied[/red]")
        out.print()
        out.print("[yellow]Your API key doesn't have permission for this feature.[/yellow]")
        out.print("Check your subscription tier at: https://elevenlabs.io/app/settings")
        out.print()
        out.print("Some features require:")
        out.print("  - Paid subscription (for professional voice cloning)")
        out.print("  - Business subscription (for agents, phone, etc.)")
        out.print("See: https://elevenlabs.io/pricing")
    elif kind is ErrorKind.NOT_FOUND:
        out.print("[red]Error: Resource not found[/red]")
        out.print("The requested resource doesn't exist or has been deleted.")
    elif kind is ErrorKind.RATE_LIMITED:
        out.print("[red]Error: Rate limited[/red]")
        out.print("Too many requests. Please wait a moment and try again.")
    elif kind is ErrorKind.SERVER_ERROR:
        out.print("[red]Error: ElevenLabs server error[/red]")
        out.print(escape(str(error)))
        out.print("The service may be temporarily unavailable. Try again shortly.")
    elif kind in (ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT):
        out.print("[red]Error: Network error[/red]")
        out.print("Could not connect to ElevenLabs API.")
        out.print("Check your internet connection and try again.")
    else:
        message = error.message if isinstance(error, ElevenLabsError) else str(error)
        out.print(f"[red]Error: {escape(message)}[/red]")


SUBSCRIPTION_FEATURES: Dict[str, List[Tuple[str, str, Optional[str]]]] = {
    "free": [
        ("TTS (Basic)", "✓", "Limited voices"),
        ("STT", "✓", "Limited usage"),
        ("Voice Library", "✓", "Browse only"),
        ("Professional Voice Cloning", "✗", "Upgrade to Starter"),
        ("Agents", "✗", "Upgrade to Starter"),
        ("Phone Numbers", "✗", "Upgrade to Starter"),
        ("Custom Pronunciations", "✗", "Upgrade to Starter"),
    ],
    "starter": [
        ("TTS (All Voices)", "✓", None),
        ("STT", "✓", None),
        ("Voice Library", "✓", None),
        ("Professional Voice Cloning", "✓", None),
        ("Voice Fine-tuning", "✓", None),
        ("Agents", "✗", "Upgrade to Creator"),
        ("Phone Numbers", "✗", "Upgrade to Creator"),
        ("Custom Pronunciations", "✗", "Upgrade to Creator"),
    ],
    "creator": [
        ("All TTS Features", "✓", None),
        ("All STT Features", "✓", None),
        ("Voice Library", "✓", None),
        ("Professional Voice Cloning", "✓", None),
        ("Voice Fine-tuning", "✓", None),
        ("Agents", "✓", None),
        ("Phone Numbers", "✓", None),
        ("Custom Pronunciations", "✓", None),
        ("Priority Support", "✓", None),
    ],
    "unknown": [
        ("TTS", "?", "Check your dashboard"),
        ("STT", "?", "Check your dashboard"),
        ("Voice Library", "?", "Check your dashboard"),
        ("Agents", "?", "Check your dashboard"),
    ],
}
SUBSCRIPTION_FEATURES["pro"] = SUBSCRIPTION_FEATURES["creator"]
SUBSCRIPTION_FEATURES["business"] = SUBSCRIPTION_FEATURES["creator"]


def subscription_features(tier: str) -> List[Tuple[str, str, Optional[str]]]:
    return SUBSCRIPTION_FEATURES.get(tier.lower(), SUBSCRIPTION_FEATURES["unknown"])


def print_subscription_info(tier: str) -> None:
    """Print which features the given subscription tier unlocks."""
    console.print()
    console.print("[bold underline]Your Subscription:[/bold underline]")
    console.print(f"  Tier: [yellow]{escape(tier)}[/yellow]")
    console.print()
    console.print("[bold]Feature Availability:[/bold]")

    colors = {"✓": "green", "✗": "red"}
    for feature, status, note in subscription_features(tier):
        color = colors.get(status, "yellow")
        line = f"  [{color}]{status}[/{color}] {feature}"
        if note:
            line += f" - [dim]{note}[/dim]"
        console.print(line)

    console.print()
    console.print("[dim]View full feature comparison:[/dim]")
    console.print("  https://elevenlabs.io/pricing")


def print_lines(lines: Iterable[str]) -> None:
    for line in lines:
        console.print(line, markup=False, emoji=False, highlight=False)
