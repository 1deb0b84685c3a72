from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..parsing.diagnostics import Diagnostic
from .highlighter import MARKERS, SEVERITY_STYLES
from .state import CpleState

# Theme Colors
C_BG = "#EBEEEE"
C_TEXT = "#191A1A"
C_ACCENT1 = "#45d3ee" # Cyan
C_ACCENT2 = "#9FBFC5" # Muted Blue
C_ACCENT3 = "#94bfc1" # Teal


def create_gradient_header(title: str) -> Text:
    text = Text(f" {title} ", style="bold italic")
    # Gradient between Cyan and Blue-Grey
    start_rgb = (69, 211, 238) # #45d3ee
    end_rgb = (159, 191, 197)   # #9FBFC5

    for i in range(len(text)):
        ratio = i / len(text)
        r = int(start_rgb[0] + (end_rgb[0] - start_rgb[0]) * ratio)
        g = int(start_rgb[1] + (end_rgb[1] - start_rgb[1]) * ratio)
        b = int(start_rgb[2] + (end_rgb[2] - start_rgb[2]) * ratio)
        text.stylize(f"#{r:02x}{g:02x}{b:02x}", i, i + 1)
    return text


def diagnostics_table(diagnostics: Sequence[Diagnostic]) -> Table:
    table = Table(
        title="Diagnostics",
        title_style=f"bold {C_ACCENT3}",
        header_style=f"bold {C_ACCENT1}",
        box=None,
        expand=True,
    )
    table.add_column("", no_wrap=True)
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Col", justify="right", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Message")

    # Positions are shown 1-based, the way editors number them
    for d in diagnostics:
        fg, _ = SEVERITY_STYLES[d.severity]
        table.add_row(
            Text(MARKERS[d.severity], style=fg),
            str(d.line + 1),
            str(d.column + 1),
            Text(d.severity.value, style=fg),
            d.message,
        )
    return table


def print_report(state: CpleState, console: Optional[Console] = None):
    """Prints the output log, then the diagnostics table if there is one."""
    console = console or Console()

    console.print(Panel(
        Text(state.output.text),
        title=create_gradient_header("CPLE OUTPUT"),
        title_align="left",
        border_style=C_ACCENT2,
        padding=(1, 2),
    ))

    diagnostics = state.current_diagnostics
    if diagnostics:
        console.print(diagnostics_table(diagnostics))
        console.print(
            f"[bold {C_TEXT}]{state.error_count} error(s), {state.warning_count} warning(s)[/bold {C_TEXT}]"
        )
