"""CLI entry point for Undha."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from undha import __version__
from undha.config import ConfigError, Settings
from undha.engine import Direction, ResolutionEngine, ResolutionError, Strategy
from undha.lexicon import (
    DEMO_LEXICON_PATH,
    Lexicon,
    LoadError,
    Register,
    load_lexicon_file,
)
from undha.lexicon.glossary import glossary_lookup
from undha.responders import get_responder
from undha.responders.credentials import CredentialError

console = Console()

REGISTER_CHOICES = [r.value for r in Register] + [
    "ngoko",
    "krama-alus",
    "krama-inggil",
]
STRATEGY_CHOICES = [s.value for s in Strategy]
RESPONDER_CHOICES = ["none", "fake", "http"]


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def _load_lexicon(settings: Settings) -> Lexicon:
    path = settings.lexicon_path or DEMO_LEXICON_PATH
    try:
        lexicon = load_lexicon_file(path)
    except LoadError as e:
        _fail(str(e))
    if lexicon.load_report.skipped:
        console.print(
            f"[yellow]Skipped {lexicon.load_report.skipped} malformed "
            f"lexicon record(s) in {path}[/yellow]"
        )
    return lexicon


def _build_responder(kind: str, settings: Settings, lexicon: Lexicon):
    try:
        return get_responder(kind, settings=settings, lexicon=lexicon)
    except (CredentialError, ValueError) as e:
        _fail(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML config file (default: $UNDHA_CONFIG or ~/.undha/config.yaml)",
)
@click.option(
    "--lexicon",
    "lexicon_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Lexicon file (.json or .tsv); overrides the config",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@click.pass_context
def cli(ctx, config_path: str | None, lexicon_path: str | None, log_level: str):
    """Undha - register-aware Indonesian to Javanese translation."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.load(config_path)
    except ConfigError as e:
        _fail(str(e))
    if lexicon_path:
        settings.lexicon_path = Path(lexicon_path)
    ctx.obj = settings


@cli.command()
@click.argument("text", nargs=-1, required=True)
@click.option(
    "--register",
    "-r",
    type=click.Choice(REGISTER_CHOICES, case_sensitive=False),
    default=None,
    help="Target register (source register with --reverse)",
)
@click.option(
    "--strategy",
    "-s",
    type=click.Choice(STRATEGY_CHOICES),
    default=None,
    help="Resolution strategy",
)
@click.option("--reverse", is_flag=True, help="Javanese to Indonesian")
@click.option(
    "--responder",
    type=click.Choice(RESPONDER_CHOICES),
    default=None,
    help="External responder (default from config)",
)
@click.option("--timeout", type=float, default=None, help="External call timeout (s)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_obj
def translate(
    settings: Settings,
    text: tuple[str, ...],
    register: str | None,
    strategy: str | None,
    reverse: bool,
    responder: str | None,
    timeout: float | None,
    as_json: bool,
):
    """Translate a phrase into a speech register.

    Example: undha translate -r honorific "ibu makan nasi"
    """
    phrase = " ".join(text)
    lexicon = _load_lexicon(settings)
    engine = ResolutionEngine(
        lexicon,
        responder=_build_responder(responder or settings.responder, settings, lexicon),
        settings=settings,
    )
    direction = Direction.REVERSE if reverse else Direction.FORWARD
    kwargs = {"direction": direction}
    if timeout is not None:
        kwargs["timeout"] = timeout

    try:
        result = asyncio.run(
            engine.resolve(
                phrase,
                register or settings.default_register,
                strategy or settings.default_strategy,
                **kwargs,
            )
        )
    except (ResolutionError, ValueError) as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    console.print(
        Panel(
            f"[bold]{escape(result.translated_text)}[/bold]\n"
            f"[dim]{escape(result.original_text)}[/dim]",
            title=result.register.display_name,
        )
    )
    console.print(
        f"Method: [cyan]{result.method.value}[/cyan] "
        f"(requested {result.requested_strategy.value}), "
        f"confidence {result.confidence:.2f}"
    )
    if result.degraded:
        console.print(
            f"[yellow]External responder failed, showing lexicon result: "
            f"{escape(result.external_error or '')}[/yellow]"
        )
    if result.untranslated:
        untranslated = escape(", ".join(result.untranslated))
        console.print(f"[dim]Untranslated: {untranslated}[/dim]")

    if result.matches:
        table = Table(title="Lexicon matches")
        table.add_column("Token", style="cyan")
        table.add_column("Lemma")
        table.add_column("Form", style="green")
        table.add_column("Confidence", justify="right")
        table.add_column("Exact")
        for m in result.matches:
            table.add_row(
                m.token,
                m.lemma,
                m.surface_form,
                f"{m.confidence:.2f}",
                "yes" if m.exact else "no",
            )
        console.print(table)


@cli.command()
@click.argument("word")
@click.option(
    "--register",
    "-r",
    type=click.Choice(REGISTER_CHOICES, case_sensitive=False),
    default=None,
    help="Register (with --reverse, omit to search all registers)",
)
@click.option("--reverse", is_flag=True, help="Look up a Javanese form")
@click.pass_obj
def lookup(settings: Settings, word: str, register: str | None, reverse: bool):
    """Exact single-word lookup."""
    lexicon = _load_lexicon(settings)
    reg = Register.parse(register) if register else None

    if reverse:
        found = lexicon.lookup_by_register_form(word, reg)
        if found is None:
            console.print(f"[yellow]No entry has the form '{word}'[/yellow]")
            sys.exit(1)
        base, matched = found
        console.print(f"{word} ({matched.display_name}) -> [green]{base}[/green]")
        return

    reg = reg or Register.parse(settings.default_register)
    entry = lexicon.entry_for_base(word, reg)
    form = lexicon.lookup_by_base(word, reg)
    if entry is None or form is None:
        console.print(f"[yellow]No {reg.display_name} form for '{word}'[/yellow]")
        sys.exit(1)
    note = " [dim](ngoko fallback)[/dim]" if entry.is_fallback(reg) else ""
    console.print(f"{word} ({reg.display_name}) -> [green]{form}[/green]{note}")


@cli.command()
@click.argument("query", default="")
@click.option("--limit", "-n", default=50, help="Maximum rows to show")
@click.pass_obj
def search(settings: Settings, query: str, limit: int):
    """Search glosses and forms by substring."""
    lexicon = _load_lexicon(settings)
    entries = lexicon.search(query)
    if not entries:
        console.print(f"[yellow]No entries match '{query}'[/yellow]")
        return

    table = Table(title=f"{len(entries)} entries")
    table.add_column("Indonesian", style="cyan")
    for register in Register:
        table.add_column(register.display_name)
    for entry in entries[:limit]:
        table.add_row(entry.base, *(entry.form(r) for r in Register))
    console.print(table)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print stats as JSON")
@click.pass_obj
def stats(settings: Settings, as_json: bool):
    """Show lexicon statistics."""
    lexicon = _load_lexicon(settings)
    summary = lexicon.stats()
    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    table = Table(title=f"Lexicon: {summary.total_entries} entries")
    table.add_column("Register", style="cyan")
    table.add_column("Own forms", justify="right")
    table.add_column("Ngoko fallback", justify="right")
    for register in Register:
        table.add_row(
            register.display_name,
            str(summary.forms_per_register[register.value]),
            str(summary.fallbacks_per_register[register.value]),
        )
    console.print(table)
    if summary.skipped_records:
        console.print(f"[yellow]Skipped records: {summary.skipped_records}[/yellow]")


@cli.command()
@click.argument("terms")
@click.pass_obj
def glossary(settings: Settings, terms: str):
    """Show register forms for comma-separated terms.

    Example: undha glossary "makan, pergi"
    """
    lexicon = _load_lexicon(settings)
    console.print(glossary_lookup(lexicon, terms))


@cli.command()
@click.option("--host", default=None, help="Bind host (default from config)")
@click.option("--port", type=int, default=None, help="Bind port (default from config)")
@click.option(
    "--responder",
    type=click.Choice(RESPONDER_CHOICES),
    default=None,
    help="External responder (default from config)",
)
@click.pass_obj
def serve(
    settings: Settings, host: str | None, port: int | None, responder: str | None
):
    """Start the API server."""
    import uvicorn

    from undha.api.main import create_app
    from undha.lexicon import LexiconHandle

    lexicon = _load_lexicon(settings)
    app = create_app(
        settings,
        LexiconHandle(lexicon),
        _build_responder(responder or settings.responder, settings, lexicon),
    )
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold blue]Starting Undha API at http://{host}:{port}[/bold blue]")
    uvicorn.run(app, host=host, port=port)


@cli.group()
def auth():
    """Manage the API key for the HTTP responder."""
    pass


@auth.command("set")
@click.option(
    "--key",
    prompt=True,
    hide_input=True,
    help="API key (prompted if omitted)",
)
def auth_set(key: str):
    """Store the API key (keychain, or 0600 file)."""
    from undha.responders.credentials import store_api_key

    if not key.strip():
        _fail("API key is empty")
    location = store_api_key(key.strip())
    console.print(f"[green]✓ API key stored ({location})[/green]")


@auth.command("show")
def auth_show():
    """Show where the API key comes from (masked)."""
    from undha.responders.credentials import get_api_key, mask_key

    try:
        key = get_api_key()
    except CredentialError as e:
        _fail(str(e))
    if key is None:
        console.print("[yellow]No API key configured[/yellow]")
        sys.exit(1)
    console.print(f"API key: {mask_key(key)}")


@auth.command("clear")
def auth_clear():
    """Delete the stored API key."""
    from undha.responders.credentials import delete_api_key

    if delete_api_key():
        console.print("[green]✓ API key deleted[/green]")
    else:
        console.print("[dim]No stored API key[/dim]")


if __name__ == "__main__":
    cli()
