"""Voice library, samples and pronunciation dictionary commands."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ..exceptions import ValidationError
from ..utils.client import client_from_context
from ..utils.files import confirm_overwrite, validate_file_size, write_bytes_to_file
from ..utils.output import format_output, print_info, print_success
from ..utils.retry import with_retry
from .common import assume_yes, confirm_action, output_mode, save_audio

VOICE_COLUMNS = ["voice_id", "name", "category", "gender", "age", "accent", "language", "public_owner_id"]


def load_rules(path: str) -> List[Dict[str, Any]]:
    """Pronunciation rules from a JSON file (a list, or ``{"rules": [...]}``)."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValidationError(f"Failed to read rules file: {path} ({e})")
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in rules file {path}: {e}")
    rules = data.get("rules") if isinstance(data, dict) else data
    if not isinstance(rules, list) or not rules:
        raise ValidationError(f"No rules found in {path}")
    for index, rule in enumerate(rules):
        if not isinstance(rule, dict) or not rule.get("string_to_replace"):
            raise ValidationError(f"Rule {index} is missing 'string_to_replace'")
    return rules


# =============================================================================
# Voice library
# =============================================================================


@click.group()
def library():
    """Browse the shared voice library.

    \b
    Examples:
      elevenlabs library list --gender female --language en
      elevenlabs library add -p <public_user_id> -v <voice_id> -n "Narrator"
    """
    pass


@library.command("list")
@click.option("--page-size", "-p", type=int, help="Results per page")
@click.option("--category", "-c", help="professional, high_quality, cloned, premade, generated")
@click.option("--gender", "-g", help="male or female")
@click.option("--age", help="young, middle_aged or old")
@click.option("--language", "-l", help="Language filter")
@click.option("--accent", help="Accent filter")
@click.option("--use-cases", help="Use case filter")
@click.option("--descriptives", help="Descriptives filter")
@click.option("--search", "-s", help="Search query")
@click.option("--featured", is_flag=True, help="Only featured voices")
@click.pass_context
def list_library(ctx: click.Context, featured: bool, **filters: Optional[Any]):
    """List shared voices."""
    params = {k: v for k, v in filters.items() if v is not None}
    if featured:
        params["featured"] = True
    client = client_from_context(ctx)
    result = with_retry(lambda: client.library.shared(**params), description="list shared voices")
    format_output(result, output_mode(ctx), columns=VOICE_COLUMNS, title="Voice Library", key="voices")


@library.command("saved")
@click.option("--page-size", "-p", type=int, help="Results per page")
@click.option("--search", "-s", help="Search query")
@click.pass_context
def saved_voices(ctx: click.Context, page_size: Optional[int], search: Optional[str]):
    """List voices saved from the library."""
    client = client_from_context(ctx)
    result = client.library.saved(page_size=page_size, search=search)
    format_output(result, output_mode(ctx), columns=["voice_id", "name", "category"], title="Saved Voices",
                  key="voices")


@library.command("add")
@click.option("--public-user-id", "-p", required=True, help="Public user ID of the voice owner")
@click.option("--voice-id", "-v", required=True, help="Voice ID")
@click.option("--name", "-n", required=True, help="Name in your library")
@click.pass_context
def add_library_voice(ctx: click.Context, public_user_id: str, voice_id: str, name: str):
    """Add a shared voice to your voices."""
    client = client_from_context(ctx)
    result = client.library.add(public_user_id, voice_id, name)
    print_success(f"Voice added: {result.get('voice_id', voice_id)}", output_mode(ctx))


@library.command("collections")
@click.option("--page-size", "-p", type=int, help="Results per page")
@click.pass_context
def collections(ctx: click.Context, page_size: Optional[int]):
    """List voice collections."""
    client = client_from_context(ctx)
    result = client.library.collections(page_size=page_size)
    format_output(result, output_mode(ctx), title="Collections", key="collections")


@library.command("collection-voices")
@click.argument("collection_id")
@click.pass_context
def collection_voices(ctx: click.Context, collection_id: str):
    """List the voices in a collection."""
    client = client_from_context(ctx)
    result = client.library.collection_voices(collection_id)
    format_output(result, output_mode(ctx), columns=["voice_id", "name", "category"], key="voices")


# =============================================================================
# Samples
# =============================================================================


@click.group()
def samples():
    """Manage audio samples of cloned voices."""
    pass


@samples.command("list")
@click.argument("voice_id")
@click.pass_context
def list_samples(ctx: click.Context, voice_id: str):
    """List samples for a voice."""
    client = client_from_context(ctx)
    result = client.samples.list(voice_id)
    format_output(result, output_mode(ctx), columns=["sample_id", "file_name", "mime_type", "size_bytes"],
                  title=f"Samples for {voice_id}")


@samples.command("delete")
@click.argument("voice_id")
@click.argument("sample_id")
@click.pass_context
def delete_sample(ctx: click.Context, voice_id: str, sample_id: str):
    """Delete a sample."""
    if not confirm_action(ctx, f"Delete sample {sample_id}?"):
        return
    client = client_from_context(ctx)
    client.samples.delete(voice_id, sample_id)
    print_success(f"Sample {sample_id} deleted", output_mode(ctx))


@samples.command("download")
@click.argument("voice_id")
@click.argument("sample_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path")
@click.pass_context
def download_sample(ctx: click.Context, voice_id: str, sample_id: str, output: Optional[str]):
    """Download a sample's audio."""
    client = client_from_context(ctx)
    audio = client.samples.audio(voice_id, sample_id)
    save_audio(ctx, audio, output or f"sample_{sample_id}.mp3", "sample", extension="mp3")


# =============================================================================
# Pronunciation dictionaries
# =============================================================================


@click.group()
def pronunciation():
    """Manage pronunciation dictionaries.

    \b
    Examples:
      elevenlabs pronunciation add -f names.pls -n "Names"
      elevenlabs pronunciation add-rules <dictionary_id> -r rules.json
    """
    pass


@pronunciation.command("list")
@click.pass_context
def list_dictionaries(ctx: click.Context):
    """List pronunciation dictionaries."""
    client = client_from_context(ctx)
    result = client.pronunciation.list()
    format_output(result, output_mode(ctx), columns=["id", "name", "latest_version_id", "description"],
                  title="Pronunciation Dictionaries", key="pronunciation_dictionaries")


@pronunciation.command("add")
@click.option("--file", "-f", "file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="PLS file")
@click.option("--name", "-n", required=True, help="Dictionary name")
@click.option("--description", "-d", help="Description")
@click.pass_context
def add_dictionary(ctx: click.Context, file: str, name: str, description: Optional[str]):
    """Create a dictionary from a PLS file."""
    validate_file_size(file)
    client = client_from_context(ctx)
    result = client.pronunciation.add_from_file(file, name, description)
    print_success(f"Dictionary created: {result.get('id')}", output_mode(ctx))


@pronunciation.command("delete")
@click.argument("dictionary_id")
@click.pass_context
def delete_dictionary(ctx: click.Context, dictionary_id: str):
    """Delete a dictionary."""
    if not confirm_action(ctx, f"Delete pronunciation dictionary {dictionary_id}?"):
        return
    client = client_from_context(ctx)
    client.pronunciation.delete(dictionary_id)
    print_success(f"Dictionary {dictionary_id} deleted", output_mode(ctx))


@pronunciation.command("rules")
@click.argument("dictionary_id")
@click.pass_context
def list_rules(ctx: click.Context, dictionary_id: str):
    """List the rules in a dictionary."""
    client = client_from_context(ctx)
    result = client.pronunciation.get(dictionary_id)
    format_output(result, output_mode(ctx), columns=["string_to_replace", "type", "alias", "phoneme", "alphabet"],
                  title=result.get("name"), key="rules")


@pronunciation.command("add-rules")
@click.argument("dictionary_id")
@click.option("--rules-file", "-r", required=True, type=click.Path(exists=True, dir_okay=False),
              help="JSON file with rules")
@click.pass_context
def add_rules(ctx: click.Context, dictionary_id: str, rules_file: str):
    """Add rules from a JSON file."""
    rules = load_rules(rules_file)
    client = client_from_context(ctx)
    client.pronunciation.add_rules(dictionary_id, rules)
    print_success(f"Added {len(rules)} rule(s) to {dictionary_id}", output_mode(ctx))


@pronunciation.command("remove-rules")
@click.argument("dictionary_id")
@click.option("--rules-file", "-r", required=True, type=click.Path(exists=True, dir_okay=False),
              help="JSON file with rules")
@click.pass_context
def remove_rules(ctx: click.Context, dictionary_id: str, rules_file: str):
    """Remove the rules listed in a JSON file."""
    strings = [rule["string_to_replace"] for rule in load_rules(rules_file)]
    client = client_from_context(ctx)
    client.pronunciation.remove_rules(dictionary_id, strings)
    print_success(f"Removed {len(strings)} rule(s) from {dictionary_id}", output_mode(ctx))


@pronunciation.command("get-pls")
@click.argument("dictionary_id")
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False), help="Output PLS file")
@click.option("--version-id", help="Dictionary version (default: latest)")
@click.pass_context
def get_pls(ctx: click.Context, dictionary_id: str, output: str, version_id: Optional[str]):
    """Download a dictionary as a PLS file."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    if not version_id:
        version_id = client.pronunciation.get(dictionary_id).get("latest_version_id")
        if not version_id:
            raise ValidationError(f"Dictionary {dictionary_id} has no versions")
    if not confirm_overwrite(output, assume_yes(ctx), output_mode(ctx)):
        print_info("Cancelled", mode)
        return
    data = client.pronunciation.pls(dictionary_id, version_id)
    write_bytes_to_file(data, output)
    print_success(f"PLS saved -> {output}", mode)
