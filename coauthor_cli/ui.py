from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
import plotille
import pyfiglet

console = Console()


def print_banner():
    ascii_banner = pyfiglet.figlet_format("coauthor", font="slant")
    console.print(f"[bold magenta]{ascii_banner}[/bold magenta]")
    console.print("[dim]" + "─" * 80 + "[/dim]\n")


def _percentage_color(pct: float) -> str:
    if pct >= 50:
        return "bold red"
    elif pct > 10:
        return "yellow"
    return "green"


def format_percentage(pct: float) -> str:
    color = _percentage_color(pct)
    return f"[{color}]{pct:.2f}%[/{color}]"


def format_similarity(score: float, threshold: float) -> str:
    if score >= threshold:
        return f"[bold red]{score:.3f}[/bold red]"
    elif score >= threshold * 0.75:
        return f"[yellow]{score:.3f}[/yellow]"
    return f"[green]{score:.3f}[/green]"


def render_verdict(result, threshold: float):
    """Summary panel for one attribution run."""
    pct = result.ai_percentage
    color = _percentage_color(pct)

    if result.total_lines == 0:
        verdict = "NO ATTRIBUTABLE LINES"
        note = "The pending diff only adds blank or comment lines."
        color = "dim"
    elif result.needs_co_author:
        verdict = "AI CO-AUTHORED"
        note = "More than 10% of the added lines match recent AI snapshots. A Co-authored-by trailer will be added."
    else:
        verdict = "HUMAN-WRITTEN"
        note = "10% or less of the added lines match recent AI snapshots."

    if result.used_fallback:
        note += "\nNo recent AI snapshots were found, so every line was counted as AI-generated."

    summary_text = (
        f"[{color}]VERDICT: {verdict}[/{color}]\n\n"
        f"  Added lines analyzed   : {result.total_lines}\n"
        f"  AI-generated lines     : [bold]{result.ai_generated_lines}[/bold]\n"
        f"  AI share               : {format_percentage(pct)}\n"
        f"  Similarity threshold   : {threshold:.2f}\n\n"
        f"  [dim]{note}[/dim]"
    )

    console.print()
    console.print(Panel(
        summary_text,
        title="[bold]Attribution Complete[/bold]",
        border_style=color.replace("bold ", ""),
        expand=False,
        padding=(1, 4)
    ))
    console.print()


def build_lines_table(result, threshold: float) -> Table:
    table = Table(title="Per-line Attribution", show_header=True, header_style="bold magenta")
    table.add_column("File", style="dim", max_width=30)
    table.add_column("Line")
    table.add_column("Best Match", justify="center", width=12)
    table.add_column("AI", justify="center", width=4)
    for score in result.lines:
        table.add_row(
            escape(score.file or "?"),
            escape(score.text),
            "[dim]n/a[/dim]" if result.used_fallback else format_similarity(score.similarity, threshold),
            "[bold red]✔[/bold red]" if score.ai_generated else "",
        )
    return table


def render_similarity_chart(result, threshold: float):
    if result.used_fallback or len(result.lines) < 3:
        console.print("[dim]Not enough scored lines to draw a similarity chart (need at least 3).[/dim]")
        return

    console.print("\n[bold cyan]Best Snapshot Match per Added Line[/bold cyan]")

    scores = [s.similarity for s in result.lines]
    x_data = list(range(1, len(scores) + 1))

    fig = plotille.Figure()
    fig.width = 60
    fig.height = 15
    fig.set_x_limits(min_=1, max_=len(scores))
    fig.set_y_limits(min_=0.0, max_=1.0)
    fig.y_label = "Similarity"
    fig.x_label = "Added line (diff order)"

    fig.plot(x_data, scores, lc='cyan', label="best match")
    fig.plot([1, len(scores)], [threshold, threshold], lc='red', label="threshold")

    print(fig.show(legend=True))


def render_commit_message(message: str):
    console.print(Panel(escape(message), title="[bold]Commit Message[/bold]", border_style="cyan", expand=False))
