"""Knowledge base and RAG index commands."""

from typing import Optional

import click

from ..utils.client import client_from_context
from ..utils.files import validate_file_size
from ..utils.output import format_output, print_info, print_kv, print_success
from ..utils.retry import with_retry
from .common import confirm_action, output_mode

DEFAULT_RAG_MODEL = "e5_mistral_7b_instruct"
RAG_MODELS = (DEFAULT_RAG_MODEL, "multilingual_e5_large_instruct")


def _document_created(ctx: click.Context, result: dict) -> None:
    mode = output_mode(ctx)
    print_success(f"Document added: {result.get('id')}", mode)
    if mode.machine_readable:
        format_output(result, mode)


@click.group()
def knowledge():
    """Manage the agent knowledge base.

    \b
    Examples:
      elevenlabs knowledge list
      elevenlabs knowledge add-from-url -u https://example.com/faq -n "FAQ"
      elevenlabs knowledge add-from-file -f handbook.pdf
    """
    pass


@knowledge.command("list")
@click.option("--limit", "-l", type=int, help="Maximum results")
@click.option("--cursor", help="Pagination cursor from a previous page")
@click.pass_context
def list_documents(ctx: click.Context, limit: Optional[int], cursor: Optional[str]):
    """List knowledge base documents."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = with_retry(lambda: client.knowledge_base.list(page_size=limit, cursor=cursor),
                        description="list knowledge base")
    format_output(result, mode, columns=["id", "name", "type", "created_at_unix_secs"],
                  title="Knowledge Base", key="documents")
    if result.get("has_more") and not mode.machine_readable:
        print_info(f"More results: --cursor {result.get('next_cursor')}", mode)


@knowledge.command("add-from-url")
@click.option("--url", "-u", required=True, help="Page to ingest")
@click.option("--name", "-n", help="Document name")
@click.pass_context
def add_from_url(ctx: click.Context, url: str, name: Optional[str]):
    """Add a document from a URL."""
    client = client_from_context(ctx)
    _document_created(ctx, client.knowledge_base.add_from_url(url, name=name))


@knowledge.command("add-from-text")
@click.option("--text", "-t", required=True, help="Document text")
@click.option("--name", "-n", help="Document name")
@click.pass_context
def add_from_text(ctx: click.Context, text: str, name: Optional[str]):
    """Add a document from inline text."""
    client = client_from_context(ctx)
    _document_created(ctx, client.knowledge_base.add_from_text(text, name=name))


@knowledge.command("add-from-file")
@click.option("--file", "-f", "file", required=True, type=click.Path(exists=True, dir_okay=False),
              help="PDF, TXT, DOCX, HTML or EPUB file")
@click.option("--name", "-n", help="Document name")
@click.pass_context
def add_from_file(ctx: click.Context, file: str, name: Optional[str]):
    """Upload a document file."""
    validate_file_size(file)
    client = client_from_context(ctx)
    _document_created(ctx, client.knowledge_base.add_from_file(file, name=name))


@knowledge.command("get")
@click.argument("document_id")
@click.pass_context
def get_document(ctx: click.Context, document_id: str):
    """Show a knowledge base document."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.knowledge_base.get(document_id)
    if mode.machine_readable:
        format_output(result, mode)
        return
    print_kv(
        [
            ("ID", result.get("id")),
            ("Name", result.get("name")),
            ("Type", result.get("type")),
            ("URL", result.get("url")),
            ("Size", (result.get("metadata") or {}).get("size_bytes")),
        ],
        mode,
        title="Document",
    )


@knowledge.command("delete")
@click.argument("document_id")
@click.pass_context
def delete_document(ctx: click.Context, document_id: str):
    """Delete a knowledge base document."""
    if not confirm_action(ctx, f"Delete document {document_id}?"):
        return
    client = client_from_context(ctx)
    client.knowledge_base.delete(document_id)
    print_success(f"Document {document_id} deleted", output_mode(ctx))


# =============================================================================
# RAG
# =============================================================================


@click.group()
def rag():
    """Manage RAG indexes over knowledge base documents."""
    pass


@rag.command("create")
@click.option("--document-id", "-d", required=True, help="Knowledge base document")
@click.option("--model", "-m", type=click.Choice(RAG_MODELS), default=DEFAULT_RAG_MODEL, show_default=True,
              help="Embedding model")
@click.pass_context
def create_index(ctx: click.Context, document_id: str, model: str):
    """Compute a RAG index for a document."""
    mode = output_mode(ctx)
    client = client_from_context(ctx)
    result = client.rag.create(document_id, model)
    print_success(f"RAG index {result.get('id')}: {result.get('status')}", mode)
    if mode.machine_readable:
        format_output(result, mode)


@rag.command("status")
@click.option("--document-id", "-d", required=True, help="Knowledge base document")
@click.option("--rag-index-id", "-r", required=True, help="RAG index")
@click.pass_context
def index_status(ctx: click.Context, document_id: str, rag_index_id: str):
    """Show one RAG index."""
    client = client_from_context(ctx)
    result = client.rag.status(document_id, rag_index_id)
    format_output(result, output_mode(ctx), columns=["id", "model", "status", "progress_percentage"])


@rag.command("delete")
@click.option("--document-id", "-d", required=True, help="Knowledge base document")
@click.option("--rag-index-id", "-r", required=True, help="RAG index")
@click.pass_context
def delete_index(ctx: click.Context, document_id: str, rag_index_id: str):
    """Delete a RAG index."""
    if not confirm_action(ctx, f"Delete RAG index {rag_index_id}?"):
        return
    client = client_from_context(ctx)
    client.rag.delete(document_id, rag_index_id)
    print_success(f"RAG index {rag_index_id} deleted", output_mode(ctx))


@rag.command("rebuild")
@click.option("--document-id", "-d", required=True, help="Knowledge base document")
@click.pass_context
def rebuild_index(ctx: click.Context, document_id: str):
    """Rebuild a document's RAG index."""
    client = client_from_context(ctx)
    client.rag.rebuild(document_id)
    print_success(f"Rebuild started for document {document_id}", output_mode(ctx))


@rag.command("index-status")
@click.option("--document-id", "-d", required=True, help="Knowledge base document")
@click.pass_context
def all_index_status(ctx: click.Context, document_id: str):
    """List every RAG index of a document."""
    client = client_from_context(ctx)
    result = client.rag.index_status(document_id)
    format_output(result, output_mode(ctx), columns=["id", "model", "status", "progress_percentage"],
                  title="RAG Indexes", key="indexes")
