from typing import Dict, List, Sequence

from rich.text import Text

from ..parsing.diagnostics import Diagnostic, Severity

SEVERITY_STYLES = {
    Severity.ERROR: ("bold #a80000", "on #f8d7da"),
    Severity.WARNING: ("bold #8a6d00", "on #fff3cd"),
}

MARKERS = {
    Severity.ERROR: "●",
    Severity.WARNING: "▲",
}


def group_by_line(diagnostics: Sequence[Diagnostic]) -> Dict[int, List[Diagnostic]]:
    grouped: Dict[int, List[Diagnostic]] = {}
    for d in diagnostics:
        grouped.setdefault(d.line, []).append(d)
    return grouped


def worst_severity(diagnostics: Sequence[Diagnostic]) -> Severity:
    if any(d.severity == Severity.ERROR for d in diagnostics):
        return Severity.ERROR
    return Severity.WARNING


def highlight_source_line(line: str, diagnostics: Sequence[Diagnostic]) -> Text:
    """
    One source line with each diagnostic's span underlined.
    Spans past the end of the line are clipped.
    """
    text = Text(line)
    for d in diagnostics:
        fg, _ = SEVERITY_STYLES[d.severity]
        start = min(d.column, len(line))
        end = min(d.end_column, len(line))
        if start < end:
            text.stylize(f"{fg} underline", start, end)
    return text


def build_source_view(source_lines: List[str], diagnostics: Sequence[Diagnostic]) -> Text:
    """
    Renders source with a gutter: line number, then a severity marker on
    lines that carry diagnostics. Diagnostics pointing past the end of the
    file are ignored here; the diagnostics list still shows them.
    """
    by_line = group_by_line(diagnostics)
    width = len(str(len(source_lines))) if source_lines else 1
    result = Text()

    for i, line in enumerate(source_lines):
        line_diags = by_line.get(i, [])
        if line_diags:
            severity = worst_severity(line_diags)
            fg, bg = SEVERITY_STYLES[severity]
            result.append(f"{i + 1:>{width}} ", style=f"dim {bg}")
            result.append(MARKERS[severity] + " ", style=fg)
        else:
            result.append(f"{i + 1:>{width}} ", style="dim")
            result.append("  ")
        result.append_text(highlight_source_line(line, line_diags))

        if i + 1 < len(source_lines):
            result.append("\n")

    return result


def format_diagnostic(d: Diagnostic) -> Text:
    """`12:4 error message` with 1-based positions, as editors display them."""
    fg, _ = SEVERITY_STYLES[d.severity]
    row = Text()
    row.append(f"{MARKERS[d.severity]} ", style=fg)
    row.append(f"{d.line + 1}:{d.column + 1} ", style="dim")
    row.append(f"{d.severity.value} ", style=fg)
    row.append(d.message)
    return row
