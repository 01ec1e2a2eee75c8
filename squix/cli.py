"""
Squix CLI

Command-line interface for asking questions about a database.

Usage:
    squix ask "How many users signed up this week?"   # Single question
    squix chat                                         # Interactive REPL mode
    squix schema --refresh                             # Print the schema description

The target database defaults to DATABASE_URL / DATABASE_TYPE.
"""

import os

os.environ.setdefault("GRPC_VERBOSITY", "ERROR")
os.environ.setdefault("GLOG_minloglevel", "3")
os.environ.setdefault("ABSL_LOGGING_MIN_LOG_LEVEL", "3")

import asyncio
import logging

import click
import sqlparse
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from squix.config import get_settings
from squix.connectors.base import ConnectorError
from squix.models.agent import AgentError, ChatOptions, ChatResponse
from squix.pipeline.orchestrator import Squix

console = Console()

EXIT_COMMANDS = {"exit", "quit"}


def configure_cli_logging(verbose: bool) -> None:
    if verbose:
        return
    for logger_name in ("squix", "google", "grpc", "openai", "httpx", "asyncio"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


async def open_squix(database_url: str | None, provider: str | None) -> Squix:
    """Create a Squix instance connected to the requested (or configured) database."""
    settings = get_settings()
    url = database_url or settings.database.url
    if not url:
        raise click.UsageError("No database configured. Pass --database-url or set DATABASE_URL.")

    squix = Squix(settings=settings)
    try:
        await squix.connect(provider or settings.database.db_type, url)
    except Exception:
        await squix.close()
        raise
    return squix


def format_sql(sql: str) -> str:
    return sqlparse.format(sql, reindent=True, keyword_case="upper")


def format_answer(response: ChatResponse, show_sql: bool = False) -> None:
    """Format and display an answer."""
    console.print(Panel(Markdown(response.answer), title="[bold green]Answer[/bold green]"))

    if not show_sql or not response.sql:
        return

    console.print(Panel(format_sql(response.sql), title="SQL", border_style="cyan", highlight=True))

    if response.result and response.result.rows:
        table = Table(show_header=True, header_style="bold cyan")
        for column in response.result.columns:
            table.add_column(column)
        for row in response.result.rows:
            table.add_row(*[str(row.get(column, "")) for column in response.result.columns])
        console.print(table)
        console.print(
            f"[dim]{response.result.row_count} rows in "
            f"{response.result.execution_time_ms:.1f} ms[/dim]"
        )


def database_options(func):
    func = click.option(
        "--provider",
        type=click.Choice(["postgresql", "mysql"], case_sensitive=False),
        help="Database type (defaults to DATABASE_TYPE).",
    )(func)
    func = click.option(
        "--database-url",
        help="Target database URL (defaults to DATABASE_URL).",
    )(func)
    return func


def answer_options(func):
    func = click.option("--show-sql", is_flag=True, help="Show generated SQL and result rows.")(func)
    func = click.option("--system-prompt", help="Persona to use instead of the default.")(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="Squix")
@click.option("--verbose", "-v", is_flag=True, help="Show application logs.")
def cli(verbose: bool):
    """Squix - ask questions about your database in plain language."""
    configure_cli_logging(verbose)


@cli.command()
@click.argument("question")
@database_options
@answer_options
def ask(
    question: str,
    database_url: str | None,
    provider: str | None,
    system_prompt: str | None,
    show_sql: bool,
):
    """Ask a single question and exit."""

    async def run_query() -> None:
        squix = await open_squix(database_url, provider)
        try:
            with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                response = await squix.ask(question, ChatOptions(system_prompt=system_prompt))
            format_answer(response, show_sql=show_sql)
        finally:
            await squix.close()

    try:
        asyncio.run(run_query())
    except AgentError as e:
        raise click.ClickException(e.message) from e
    except ConnectorError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@database_options
@answer_options
def chat(
    database_url: str | None,
    provider: str | None,
    system_prompt: str | None,
    show_sql: bool,
):
    """Interactive REPL mode."""
    console.print(
        Panel.fit(
            "[bold green]Squix Interactive Mode[/bold green]\n"
            "Ask questions in natural language. Type 'exit' or 'quit' to leave.",
            border_style="green",
        )
    )

    async def run_chat() -> None:
        squix = await open_squix(database_url, provider)
        options = ChatOptions(system_prompt=system_prompt)
        try:
            while True:
                try:
                    query = console.input("[bold cyan]You:[/bold cyan] ")
                except EOFError:
                    break

                if not query.strip():
                    continue
                if query.strip().lower() in EXIT_COMMANDS:
                    break

                try:
                    with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                        response = await squix.ask(query, options)
                except AgentError as e:
                    console.print(f"[red]Error: {e.message}[/red]")
                    continue
                format_answer(response, show_sql=show_sql)
        finally:
            await squix.close()
        console.print("\n[yellow]Goodbye![/yellow]")

    try:
        asyncio.run(run_chat())
    except AgentError as e:
        raise click.ClickException(e.message) from e
    except ConnectorError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@database_options
@click.option("--refresh", is_flag=True, help="Re-introspect instead of using the cache.")
def schema(database_url: str | None, provider: str | None, refresh: bool):
    """Print the schema description used in prompts."""

    async def run_schema() -> str:
        squix = await open_squix(database_url, provider)
        try:
            return await squix.get_schema(force_refresh=refresh)
        finally:
            await squix.close()

    try:
        schema_text = asyncio.run(run_schema())
    except AgentError as e:
        raise click.ClickException(e.message) from e
    except ConnectorError as e:
        raise click.ClickException(str(e)) from e

    if not schema_text.strip():
        console.print("[yellow]No tables found.[/yellow]")
        return
    console.print(schema_text.rstrip(), markup=False, highlight=False)


if __name__ == "__main__":
    cli()
