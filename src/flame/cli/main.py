"""Main CLI entry point for Flame."""

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich import print as rprint
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from flame.cli.helpers import configure_logging, max_retries_from_env, open_store, store_path
from flame.core.errors import ContentUnavailableError, FlameError, JudgingError
from flame.core.models import Item, Word
from flame.core.scheduler import FlameScheduler, Quality
from flame.core.session import ReviewSession
from flame.core.storage import ItemStorage

load_dotenv()

app = typer.Typer(
    name="flame",
    help="Spaced repetition review for vocabulary words.",
    no_args_is_help=True,
)

console = Console()

LOGO = r"""  _____.__
_/ ____\  | _____    _____   ____
\   __\|  | \__  \  /     \_/ __ \
 |  |  |  |__/ __ \|  Y Y  \  ___/
 |__|  |____(____  /__|_|  /\___  >
                 \/      \/     \/"""

MARKS = {
    "b": Quality.COMPLETE_BLACKOUT,
    "i": Quality.INCORRECT,
    "h": Quality.CORRECT_HARD,
    "c": Quality.CORRECT,
    "f": Quality.PERFECT,
}
QUIT_MARK = "q"

PATH_HELP = "Path to the store file (default: $FLAME_STORE_PATH or ./flame.json)"


@app.callback()
def main() -> None:
    """Spaced repetition review for vocabulary words."""
    configure_logging()


def _fail(error: FlameError) -> typer.Exit:
    rprint(f"[red]{escape(str(error))}[/red]")
    return typer.Exit(1)


# ============================================================================
# REVIEW command
# ============================================================================


@app.command()
def review(
    path: str | None = typer.Option(None, "--path", "-p", help=PATH_HELP),
    count_as_a_day: bool = typer.Option(
        False,
        "--count-as-a-day",
        "-c",
        help="Treat this session as a new day: items not yet due get one day closer",
    ),
    max_retries: int | None = typer.Option(
        None,
        "--max-retries",
        min=0,
        help="Give up after this many invalid answers for one item (default: unlimited)",
    ),
) -> None:
    """Start an interactive review session."""
    try:
        storage, store = open_store(path)
    except FlameError as e:
        raise _fail(e)

    rprint(f"[bold red]{LOGO}[/bold red]\n")

    total = len(store.retrieve())
    rprint(f"[blue][INFO][/blue] Totally {total} items to review today.")

    if max_retries is None:
        max_retries = max_retries_from_env()

    session = ReviewSession(
        FlameScheduler(store),
        _make_judge(storage.base_dir, total),
        count_as_a_day=count_as_a_day,
        max_retries=max_retries,
    )
    try:
        aborted = session.run()
    except FlameError as e:
        raise _fail(e)

    if aborted:
        rprint("\n[yellow]Session ended early.[/yellow]")
    else:
        rprint("\n[bold green]Session complete![/bold green]")
    rprint(f"Reviewed {len(session.results)} item(s).")

    rprint("\n[blue][INFO][/blue] Saving progress...")
    try:
        storage.save(store)
    except FlameError as e:
        raise _fail(e)
    rprint("[blue][INFO][/blue] Bye bye.")


def _make_judge(base_dir: Path, total: int):
    """Build the interactive judge for a session of ``total`` items."""
    reviewed = 0

    def judge(item: Item) -> Quality | None:
        nonlocal reviewed
        _show_item(item, base_dir, reviewed + 1, total)
        quality = _prompt_quality()
        if quality is not None:
            reviewed += 1
        return quality

    return judge


def _show_item(item: Item, base_dir: Path, position: int, total: int) -> None:
    """Display a word with its detail content."""
    word = escape(item.payload.word)
    title = f"Item {position}/{total} - [bold green italic]{word}[/bold green italic]"
    try:
        body = Markdown(item.payload.read_detail(base_dir))
    except ContentUnavailableError as e:
        body = f"[red]{escape(str(e))}[/red]"
    console.print()
    console.print(Panel(body, title=title, border_style="blue"))


def _prompt_quality() -> Quality | None:
    """Ask for a mark. Returns None when the user quits."""
    rprint(
        "\n[magenta][MARK][/magenta] "
        "blackout([red]b[/red]) | incorrect([red]i[/red]) | "
        "correct but hard([yellow]h[/yellow]) | correct([green]c[/green]) | "
        "perfect([cyan]f[/cyan]) | [dim]quit(q)[/dim]"
    )
    try:
        choice = typer.prompt(">", prompt_suffix=" ").strip().lower()
    except typer.Abort:
        return None

    if choice == QUIT_MARK:
        return None
    if choice not in MARKS:
        raise JudgingError(f"unknown mark: {choice}")
    return MARKS[choice]


# ============================================================================
# ADD / REMOVE / LIST commands
# ============================================================================


@app.command()
def add(
    word: str = typer.Argument(..., help="The word to learn"),
    detail: str = typer.Argument(..., help="Path to the detail file (relative to the store)"),
    path: str | None = typer.Option(None, "--path", "-p", help=PATH_HELP),
) -> None:
    """Add a new word, due for review immediately."""
    try:
        storage, store = open_store(path)
        payload = Word(word=word, detail=detail)
        if not payload.detail_path(storage.base_dir).exists():
            rprint(f"[yellow]Detail file does not exist yet: {escape(detail)}[/yellow]")
        key = store.introduce(payload)
        storage.save(store)
    except FlameError as e:
        raise _fail(e)

    rprint(f"[green]Word added![/green] ID: {key}")


@app.command()
def remove(
    word: str = typer.Argument(..., help="Remove every item with this word"),
    path: str | None = typer.Option(None, "--path", "-p", help=PATH_HELP),
) -> None:
    """Remove a word from the store."""
    try:
        storage, store = open_store(path)
        removed = store.remove_matching(lambda payload: payload.word == word)
        if not removed:
            rprint(f"[yellow]No item found for: {escape(word)}[/yellow]")
            return
        storage.save(store)
    except FlameError as e:
        raise _fail(e)

    rprint(f"[green]Removed {removed} item(s).[/green]")


@app.command("list")
def list_items(
    path: str | None = typer.Option(None, "--path", "-p", help=PATH_HELP),
    due: bool = typer.Option(False, "--due", "-d", help="Only show items due now"),
) -> None:
    """List items with their scheduling state."""
    try:
        _, store = open_store(path)
    except FlameError as e:
        raise _fail(e)

    items = sorted(store.mem.items())
    if due:
        items = [(key, item) for key, item in items if item.is_due]

    if not items:
        rprint("[dim]No items found.[/dim]")
        return

    table = Table(title=f"Items ({len(items)} total)")
    table.add_column("ID", style="dim")
    table.add_column("Word", style="cyan")
    table.add_column("Repetition", justify="right")
    table.add_column("Factor", justify="right")
    table.add_column("Interval", justify="right", style="green")

    for key, item in items:
        table.add_row(
            str(key),
            escape(item.payload.word),
            str(item.repetition),
            f"{item.factor:.2f}",
            str(item.interval),
        )

    console.print(table)


# ============================================================================
# INIT command
# ============================================================================


@app.command("init")
def init_cmd(
    path: str | None = typer.Option(None, "--path", "-p", help=PATH_HELP),
) -> None:
    """Create an empty store file."""
    storage = ItemStorage(store_path(path))
    try:
        storage.init()
    except FlameError as e:
        raise _fail(e)

    rprint(f"[green]Store created at:[/green] {escape(str(storage.path))}")
    rprint("\nSet this environment variable to use it by default:")
    rprint(f"  FLAME_STORE_PATH={escape(str(storage.path.resolve()))}")


if __name__ == "__main__":
    app()
