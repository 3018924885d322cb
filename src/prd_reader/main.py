# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands to read documents, summarize them and serve the MCP tools

import asyncclick as click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from prd_reader.config import get_config
from prd_reader.core.service import DocumentService
from prd_reader.extraction.base import DocumentReaderError, NormalizedDocument
from prd_reader.extraction.resolver import Platform, detect_platform
from prd_reader.summarization import DocumentSummarizer, SummarizationError
from prd_reader.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logger,
    get_logging_status,
    with_document_context,
)
from prd_reader.utils.rich_tables import (
    create_document_table,
    create_key_points_table,
    create_logging_status_table,
    print_rich_table,
)

console = Console()

PLATFORM_CHOICE = click.Choice([platform.value for platform in Platform])


async def _read_document(
    url: str,
    platform: str | None,
    username: str | None,
    token: str | None,
    credentials: str | None,
) -> tuple[Platform, NormalizedDocument]:
    """Read a document, using explicit credentials when given and configuration otherwise."""
    resolved_platform = Platform(platform) if platform else detect_platform(url)
    document = await DocumentService().read(
        url, resolved_platform, username=username, token=token, credentials=credentials
    )
    return resolved_platform, document


def _credential_options(func):
    func = click.option("--credentials", help="Google service account JSON (Google Docs)")(func)
    func = click.option("--token", help="API or integration token (Confluence, Notion)")(func)
    func = click.option("--username", help="Account name (Confluence)")(func)
    func = click.option("--platform", type=PLATFORM_CHOICE, help="Source platform, detected from the URL if omitted")(
        func
    )
    return func


@click.command()
@click.argument("url")
@_credential_options
@click.option("--raw", is_flag=True, help="Print the Markdown text without rendering it")
@click.pass_context
async def read(
    ctx, url: str, platform: str | None, username: str | None, token: str | None, credentials: str | None, raw: bool
):
    """
    📖 Read a Confluence page, Google Doc or Notion page as Markdown.
    """
    json_output = ctx.obj["json_output"]

    try:
        with with_document_context(url, platform) as logger:
            resolved_platform, document = await _read_document(url, platform, username, token, credentials)
            logger.info("Read complete", document_id=document.id, title=document.title)
    except DocumentReaderError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise click.exceptions.Exit(1) from e

    if json_output:
        click.echo(document.model_dump_json())
        return

    if raw:
        click.echo(document.to_markdown())
        return

    print_rich_table(console, create_document_table(document, resolved_platform.label))
    console.print(Panel(Markdown(document.content or "_No content_"), title=document.title, border_style="blue"))


@click.command()
@click.argument("url")
@_credential_options
@click.option("--key-points", is_flag=True, help="List key points instead of a prose summary")
@click.pass_context
async def summarize(
    ctx,
    url: str,
    platform: str | None,
    username: str | None,
    token: str | None,
    credentials: str | None,
    key_points: bool,
):
    """
    🧠 Read a document and summarize it with a language model.
    """
    json_output = ctx.obj["json_output"]
    config = get_config()
    logger = get_logger(__name__)

    if not config.anthropic_api_key:
        console.print("[red]❌ API key required - set PRD_READER_ANTHROPIC_API_KEY[/red]")
        raise click.exceptions.Exit(1)

    summarizer = DocumentSummarizer(
        api_key=config.anthropic_api_key, model=config.summary_model, max_tokens=config.summary_max_tokens
    )

    try:
        _, document = await _read_document(url, platform, username, token, credentials)
        if key_points:
            points = await summarizer.extract_key_points(document.content, document.title)
        else:
            summary = await summarizer.summarize(document.content, document.title)
    except (DocumentReaderError, SummarizationError) as e:
        logger.warning("Summarize failed", url=url, error=str(e))
        console.print(f"[red]❌ {e}[/red]")
        raise click.exceptions.Exit(1) from e

    if key_points:
        if json_output:
            click.echo("\n".join(points))
        else:
            print_rich_table(console, create_key_points_table(points, document.title))
        return

    if json_output:
        click.echo(summary)
    else:
        console.print(Panel(Markdown(summary), title=f"📝 {document.title}", border_style="green"))
        console.print(f"🌐 Source: {document.url}")


@click.command()
async def serve():
    """
    🔌 Serve the document tools to an MCP client over stdio.
    """
    from prd_reader.server import serve as serve_stdio

    await serve_stdio()


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    print_rich_table(console, create_logging_status_table(status))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else config.log_mode

    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Plain machine readable output and JSON logs")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    📚 PRD Reader - product requirement documents as Markdown

    Read Confluence pages, Google Docs and Notion pages into one canonical
    Markdown form, summarize them, or serve them to MCP clients.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(read)
app.add_command(summarize)
app.add_command(serve)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
