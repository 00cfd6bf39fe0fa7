# answer_search/interface/cli.py

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from answer_search.domain.models import (
    AccuracyBucket,
    AccuracyFilter,
    MatchSpan,
    SearchResult,
)


console = Console()

HIGHLIGHT_STYLE = "bold black on yellow"
FILTER_CHOICES = ["all", "high", "medium", "low"]


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]🔍 Answer Search[/bold cyan]\n"
        "[dim]Fuzzy question lookup for noisy OCR text[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_loading_status(num_records: int, kind_stats: Optional[List[dict]] = None) -> None:
    console.print(f"\n[green]✓[/green] Loaded [bold]{num_records}[/bold] records.\n")

    if kind_stats:
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("Kind")
        table.add_column("Records", justify="right")
        for row in kind_stats:
            table.add_row(row["kind"] or "-", str(row["count"]))
        console.print(table)


def prompt_for_query() -> str:
    return Prompt.ask("\n[bold yellow]❓ Question text[/bold yellow]", default="")


def prompt_for_filter() -> AccuracyFilter:
    choice = Prompt.ask(
        "[dim]Accuracy filter[/dim]",
        choices=FILTER_CHOICES,
        default="all",
    )
    if choice == "all":
        return AccuracyFilter()
    return AccuracyFilter.from_buckets([choice])


def highlight(text: str, span: MatchSpan) -> Text:
    """Render `text` with every character index in `span` highlighted."""
    rendered = Text(text)
    for index in sorted(set(span)):
        if 0 <= index < len(text):
            rendered.stylize(HIGHLIGHT_STYLE, index, index + 1)
    return rendered


def display_results(query: str, results: List[SearchResult], limit: Optional[int] = None) -> None:
    console.print(f"\n[bold]Results for:[/bold] [italic]\"{query}\"[/italic]\n")

    if not results:
        console.print("[dim]No matching records.[/dim]")
        return

    shown = results if limit is None else results[:limit]
    for rank, result in enumerate(shown, start=1):
        color = _bucket_to_color(result.bucket)

        content = Text()
        content.append("🎯 Score: ")
        content.append(f"{result.score:.4f}", style=color)
        if result.record.kind:
            content.append(f"   [{result.record.kind}]", style="dim")
        content.append("\n\n")
        content.append_text(highlight(result.record.question, result.question_matches))

        for option in result.record.options:
            content.append("\n  • ")
            content.append_text(highlight(option, result.option_matches.get(option, [])))

        if result.record.answer:
            content.append("\n\n✅ ", style="green")
            content.append_text(_join_answers(result.record.answer, result.answer_matches))

        console.print(Panel(
            content,
            title=f"[bold]#{rank}[/bold]",
            subtitle=f"[dim]{result.matched_label}[/dim]" if result.matched_label else None,
            border_style=color,
            box=box.ROUNDED,
            padding=(1, 2),
        ))

    hidden = len(results) - len(shown)
    if hidden > 0:
        console.print(f"[dim]… {hidden} more result(s) not shown.[/dim]")


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Search again?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _join_answers(answers, span: MatchSpan) -> Text:
    """
    Render every answer highlighted with the combined answer_matches list.

    The highlight is approximate: answer_matches concatenates the spans of
    all answers, each in its own coordinates, without saying which answer an
    index came from. With answers ["8", "18"] and query "8" the "1" of "18"
    is highlighted too.
    """
    joined = Text()
    for i, answer in enumerate(answers):
        if i:
            joined.append(" / ", style="dim")
        joined.append_text(highlight(answer, span))
    return joined


def _bucket_to_color(bucket: AccuracyBucket) -> str:
    if bucket is AccuracyBucket.HIGH:
        return "green"
    elif bucket is AccuracyBucket.MEDIUM:
        return "yellow"
    else:
        return "red"
