"""
Custom Widgets
==============
Exposes: SourceView, DiagnosticsList, StatusBar

The user edits the .cple file in their own editor; the TUI shows the
source with diagnostic markers, the diagnostics list and the output log.
"""

from __future__ import annotations

from typing import Sequence

from rich.text import Text
from textual.widgets import Static

from ..parsing.diagnostics import Diagnostic
from ..utils.highlighter import build_source_view, format_diagnostic


class SourceView(Static):
    """
    Main pane: source with gutter markers.
    ID: #source-view
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="source-view", **kwargs)

    def set_source(self, lines: list[str], diagnostics: Sequence[Diagnostic]) -> None:
        self.update(build_source_view(lines, diagnostics))


class DiagnosticsList(Static):
    """
    One row per diagnostic, in compiler order.
    ID: #diagnostics-list
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="diagnostics-list", **kwargs)
        self.count = 0

    def set_diagnostics(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.count = len(diagnostics)
        if not diagnostics:
            self.update(Text("No problems", style="dim"))
            return
        rows = Text()
        for i, d in enumerate(diagnostics):
            rows.append_text(format_diagnostic(d))
            if i + 1 < len(diagnostics):
                rows.append("\n")
        self.update(rows)


class StatusBar(Static):
    """
    Bottom bar with file, compiler args, status and problem counts.
    ID: #status-bar
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="status-bar", **kwargs)
        self._file: str = ""
        self._args: str = ""
        self._status: str = "idle"
        self._errors: int = 0
        self._warnings: int = 0

    def set_status(
        self,
        *,
        file: str | None = None,
        args: str | None = None,
        status: str | None = None,
        errors: int | None = None,
        warnings: int | None = None,
    ) -> None:
        if file is not None:
            self._file = file
        if args is not None:
            self._args = args
        if status is not None:
            self._status = status
        if errors is not None:
            self._errors = errors
        if warnings is not None:
            self._warnings = warnings
        self._render_bar()

    def render_text(self) -> str:
        parts = []
        if self._file:
            parts.append(f"📄 {self._file}")
        if self._args:
            parts.append(f"⚙  {self._args}")
        parts.append(f"● {self._status}")
        if self._errors:
            parts.append(f"❌ {self._errors} error(s)")
        if self._warnings:
            parts.append(f"⚠  {self._warnings} warning(s)")
        return "  │  ".join(parts)

    def _render_bar(self) -> None:
        self.update(self.render_text())
