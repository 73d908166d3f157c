"""Main CLI entry point for the notion-cli command.

Each subcommand resolves the configuration once, opens a
:class:`NotionClient`, runs one operation and renders the result.  Any
:class:`NotionCliError` is reported on stderr as ``✗ <message>`` and the
process exits with status 1.
"""

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

import typer
from rich.markup import escape

from notioncli import __version__
from notioncli.cli.output import OutputHandler
from notioncli.client import DEFAULT_LIMIT, NotionClient
from notioncli.config import (
    config_path,
    load_file_config,
    resolve_config,
    save_file_config,
)
from notioncli.converter.block_builder import DEFAULT_CODE_LANGUAGE, split_list_items
from notioncli.converter.render import extract_title
from notioncli.errors import NotionCliError
from notioncli.notion_api.transport import console_retry_notice
from notioncli.observability import set_log_level

app = typer.Typer(
    name="notion-cli",
    help="A simple Notion CLI tool.",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Show or edit the config file.", no_args_is_help=True)
app.add_typer(config_app, name="config")

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class GlobalOptions:
    """Options given before the subcommand, shared by every command."""

    timeout: Optional[int] = None
    api_key: Optional[str] = None
    debug_payload: bool = False
    no_color: bool = False


def _configure_logging(verbose: bool) -> None:
    set_log_level(logging.DEBUG if verbose else logging.WARNING)


def _output(ctx: typer.Context) -> OutputHandler:
    opts: GlobalOptions = ctx.obj
    return OutputHandler(no_color=opts.no_color)


def _client(ctx: typer.Context, out: OutputHandler) -> NotionClient:
    opts: GlobalOptions = ctx.obj
    config = resolve_config(
        cli_api_key=opts.api_key,
        cli_timeout=opts.timeout,
        debug_dump_payload=opts.debug_payload,
    )
    return NotionClient(config, retry_notice=console_retry_notice(out.err_console))


def handle_errors(func: F) -> F:
    """Turn :class:`NotionCliError` into ``✗ message`` on stderr and exit 1."""

    @functools.wraps(func)
    def wrapper(ctx: typer.Context, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(ctx, *args, **kwargs)
        except NotionCliError as exc:
            _output(ctx).error(exc.message)
            raise typer.Exit(code=1) from exc

    return wrapper  # type: ignore[return-value]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"notion-cli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    timeout: Optional[int] = typer.Option(
        None, "--timeout", min=1, help="Request timeout in seconds [default: 30]."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Notion API key (overrides env and config file)."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every request as JSON to stderr."
    ),
    debug_payload: bool = typer.Option(
        False, "--debug-payload", help="Dump request and response bodies to stderr."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    _configure_logging(verbose)
    ctx.obj = GlobalOptions(
        timeout=timeout,
        api_key=api_key,
        debug_payload=debug_payload,
        no_color=no_color,
    )


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

@app.command()
@handle_errors
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    limit: int = typer.Option(
        DEFAULT_LIMIT, "--limit", "-l", min=0, help="Maximum results to fetch."
    ),
) -> None:
    """Search for pages and databases."""
    out = _output(ctx)
    out.action("Searching:", f'"{query}"')
    with _client(ctx, out) as client:
        results = client.search(query, limit)
    out.result_count(len(results))
    for item in results:
        out.search_result(item)


@app.command()
@handle_errors
def read(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
) -> None:
    """Read a page's content."""
    out = _output(ctx)
    out.action("Reading page:", page_id)
    with _client(ctx, out) as client:
        page = client.get_page(page_id)
        blocks = client.get_blocks(page_id)
    out.line()
    out.line(f"[green]Title:[/green] {escape(extract_title(page))}\n", markup=True)
    out.blocks(blocks)


@app.command("get-block-ids")
@handle_errors
def get_block_ids(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
) -> None:
    """List block IDs of a page (for bulk operations)."""
    out = _output(ctx)
    out.action("Getting block IDs:", page_id)
    with _client(ctx, out) as client:
        ids = client.get_block_ids(page_id)
    out.success(f"{len(ids)} blocks found\n")
    for block_id, block_type in ids:
        out.line(f"  {block_id}  [dim]{escape(block_type)}[/dim]", markup=True)


@app.command()
@handle_errors
def query(
    ctx: typer.Context,
    database_id: str = typer.Argument(..., help="Database ID."),
    filter: Optional[str] = typer.Option(
        None, "--filter", "-f",
        help=(
            'Filter by property: "Property=value" or "Property:type=value". '
            "Types: title, rich_text (default), select, checkbox, number."
        ),
    ),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Sort by property."),
    direction: str = typer.Option(
        "desc", "--direction", help="Sort direction: asc, or anything else for descending."
    ),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-l", min=0, help="Maximum results."),
) -> None:
    """Query a database."""
    out = _output(ctx)
    out.action("Querying database:", database_id)
    if filter is not None:
        out.field("Filter", filter)
    if sort is not None:
        out.field("Sort", f"{sort} ({direction})")
    with _client(ctx, out) as client:
        results = client.query_database(
            database_id, filter=filter, sort=sort, direction=direction, limit=limit
        )
    out.result_count(len(results))
    for item in results:
        out.query_row(item)


# ---------------------------------------------------------------------------
# Creating and appending
# ---------------------------------------------------------------------------

@app.command()
@handle_errors
def create(
    ctx: typer.Context,
    parent: str = typer.Option(..., "--parent", "-p", help="Parent page ID."),
    title: str = typer.Option(..., "--title", "-t", help="Page title."),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="Page content."),
) -> None:
    """Create a new page."""
    out = _output(ctx)
    out.action("Creating page:", f'"{title}"')
    with _client(ctx, out) as client:
        result = client.create_page(parent, title, content)
    out.success("Page created!")
    out.field("ID", result.get("id", "unknown"))
    if result.get("url"):
        out.field("URL", result["url"])


@app.command()
@handle_errors
def append(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    content: str = typer.Argument(..., help="Content to append."),
) -> None:
    """Append a paragraph to a page."""
    out = _output(ctx)
    out.action("Appending to:", page_id)
    with _client(ctx, out) as client:
        client.append_paragraph(page_id, content)
    out.success("Content appended!")


@app.command("append-code")
@handle_errors
def append_code(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    code: str = typer.Argument(..., help="Code content."),
    language: str = typer.Option(
        DEFAULT_CODE_LANGUAGE, "--language", "-l",
        help="Programming language (e.g. rust, python, javascript).",
    ),
) -> None:
    """Append a code block to a page."""
    out = _output(ctx)
    out.action("Appending code to:", page_id)
    with _client(ctx, out) as client:
        client.append_code(page_id, code, language)
    out.success(f"Code block ({language}) appended!")


@app.command("append-bookmark")
@handle_errors
def append_bookmark(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    url: str = typer.Argument(..., help="Bookmark URL."),
    caption: Optional[str] = typer.Option(None, "--caption", "-c", help="Optional caption."),
) -> None:
    """Append a bookmark to a page."""
    out = _output(ctx)
    out.action("Appending bookmark to:", page_id)
    with _client(ctx, out) as client:
        client.append_bookmark(page_id, url, caption)
    out.success("Bookmark appended!")


@app.command("append-heading")
@handle_errors
def append_heading(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    text: str = typer.Argument(..., help="Heading text."),
    level: int = typer.Option(2, "--level", "-l", min=1, max=3, help="Heading level (1, 2, or 3)."),
) -> None:
    """Append a heading to a page."""
    out = _output(ctx)
    out.action("Appending heading to:", page_id)
    with _client(ctx, out) as client:
        client.append_heading(page_id, text, level)
    out.success(f"Heading (H{level}) appended!")


@app.command("append-divider")
@handle_errors
def append_divider(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
) -> None:
    """Append a divider to a page."""
    out = _output(ctx)
    out.action("Appending divider to:", page_id)
    with _client(ctx, out) as client:
        client.append_divider(page_id)
    out.success("Divider appended!")


@app.command("append-list")
@handle_errors
def append_list(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    items: str = typer.Argument(..., help="List items (comma-separated)."),
) -> None:
    """Append a bulleted list to a page."""
    out = _output(ctx)
    out.action("Appending list to:", page_id)
    entries = split_list_items(items)
    with _client(ctx, out) as client:
        client.append_list(page_id, entries)
    out.success(f"List with {len(entries)} items appended!")


@app.command("append-link")
@handle_errors
def append_link(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    link_text: str = typer.Option(..., "--link-text", help="Link text."),
    url: str = typer.Option(..., "--url", help="Link URL."),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Text before the link."),
    suffix: Optional[str] = typer.Option(None, "--suffix", help="Text after the link."),
) -> None:
    """Append a paragraph containing a link."""
    out = _output(ctx)
    out.action("Appending link to:", page_id)
    with _client(ctx, out) as client:
        client.append_link(page_id, link_text, url, prefix=prefix, suffix=suffix)
    out.success("Link appended!")


# ---------------------------------------------------------------------------
# Updating, deleting, moving
# ---------------------------------------------------------------------------

@app.command()
@handle_errors
def update(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title."),
    icon: Optional[str] = typer.Option(None, "--icon", "-i", help="New icon (emoji)."),
) -> None:
    """Update a page's title and/or icon."""
    out = _output(ctx)
    out.action("Updating page:", page_id)
    with _client(ctx, out) as client:
        result = client.update_page(page_id, title=title, icon=icon)
    out.success("Page updated!")
    out.field("Title", extract_title(result))
    icon_obj = result.get("icon")
    if isinstance(icon_obj, dict) and icon_obj.get("emoji"):
        out.field("Icon", icon_obj["emoji"])


@app.command()
@handle_errors
def delete(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page ID."),
) -> None:
    """Delete (archive) a page."""
    out = _output(ctx)
    out.action("Archiving page:", page_id)
    with _client(ctx, out) as client:
        result = client.delete_page(page_id)
    if result.get("archived") is True:
        out.success("Page archived (moved to trash)!")
    else:
        out.warning("Page status unclear")


@app.command("delete-block")
@handle_errors
def delete_block(
    ctx: typer.Context,
    block_id: str = typer.Argument(..., help="Block ID."),
) -> None:
    """Delete (archive) a block."""
    out = _output(ctx)
    out.action("Deleting block:", block_id)
    with _client(ctx, out) as client:
        client.delete_block(block_id)
    out.success("Block deleted!")


@app.command()
@handle_errors
def move(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Source page ID."),
    parent: str = typer.Option(..., "--parent", "-p", help="New parent page ID."),
    delete: bool = typer.Option(False, "--delete", help="Archive the original after copying."),
) -> None:
    """Move a page to a new parent (copies it, then optionally archives the original)."""
    out = _output(ctx)
    out.action("Moving page:", f"{page_id} -> {parent}")
    with _client(ctx, out) as client:
        result = client.move_page(page_id, parent, delete_original=delete)
    out.success(f"Page copied with {result.blocks_copied} blocks!")
    out.field("New ID", result.page_id)
    if result.page.get("url"):
        out.field("URL", result.page["url"])
    if result.blocks_skipped:
        out.warning(
            f"Skipped {len(result.blocks_skipped)} blocks that cannot be copied: "
            + ", ".join(sorted(set(result.blocks_skipped)))
        )
    if result.archived_original:
        out.success("Original page archived!")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def _mask(key: str) -> str:
    return f"...{key[-4:]}" if len(key) >= 8 else "****"


@app.command()
@handle_errors
def init(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(
        None, "--key", help="API key to store (prompted for when omitted)."
    ),
) -> None:
    """Save an API key to the config file."""
    out = _output(ctx)
    path = config_path()
    out.action("Config file:", str(path))
    if api_key is None:
        api_key = typer.prompt("Notion API key", hide_input=True)
    file_config = load_file_config(path)
    file_config.api_key = api_key.strip()
    save_file_config(file_config, path)
    out.success(f"API key saved to {path}")


@config_app.command("show")
@handle_errors
def config_show(ctx: typer.Context) -> None:
    """Show the config file path and its values."""
    out = _output(ctx)
    path = config_path()
    file_config = load_file_config(path)
    out.field("Path", str(path))
    out.field("api_key", _mask(file_config.api_key) if file_config.api_key else "(not set)")
    out.field("timeout", str(file_config.timeout) if file_config.timeout is not None else "(not set)")


@config_app.command("path")
def config_show_path() -> None:
    """Print the config file path."""
    typer.echo(str(config_path()))


@config_app.command("set-key")
@handle_errors
def config_set_key(
    ctx: typer.Context,
    api_key: str = typer.Argument(..., help="Notion API key."),
) -> None:
    """Store an API key in the config file."""
    path = config_path()
    file_config = load_file_config(path)
    file_config.api_key = api_key.strip()
    save_file_config(file_config, path)
    _output(ctx).success(f"API key saved to {path}")


@config_app.command("set-timeout")
@handle_errors
def config_set_timeout(
    ctx: typer.Context,
    seconds: int = typer.Argument(..., min=1, help="Request timeout in seconds."),
) -> None:
    """Store the default request timeout in the config file."""
    path = config_path()
    file_config = load_file_config(path)
    file_config.timeout = seconds
    save_file_config(file_config, path)
    _output(ctx).success(f"Timeout set to {seconds}s in {path}")


def main() -> None:
    """Console-script entry point."""
    app()

