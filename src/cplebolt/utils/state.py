import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..parsing.diagnostics import Diagnostic, Severity


class DiagnosticCollection:
    """
    Diagnostics per document path. Each set is swapped in whole, so a reader
    sees either the previous compile's diagnostics or the new ones.
    """

    def __init__(self, name: str = "cple"):
        self.name = name
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[Diagnostic, ...]] = {}

    def set(self, document: str, diagnostics: Sequence[Diagnostic]):
        frozen = tuple(diagnostics)
        with self._lock:
            self._entries[document] = frozen

    def get(self, document: str) -> Tuple[Diagnostic, ...]:
        with self._lock:
            return self._entries.get(document, ())

    def delete(self, document: str):
        with self._lock:
            self._entries.pop(document, None)


class OutputLog:
    """The text shown in the output pane, one entry per appended line."""

    def __init__(self):
        self._lock = threading.Lock()
        self._lines: List[str] = []

    def append_line(self, text: str = ""):
        with self._lock:
            self._lines.extend(text.split("\n"))

    def clear(self):
        with self._lock:
            self._lines = []

    @property
    def lines(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class CpleState:
    """
    Everything the front ends render for one source document.
    """
    source_path: str = ""
    source_code: str = ""
    source_lines: List[str] = field(default_factory=list)

    diagnostics: DiagnosticCollection = field(default_factory=DiagnosticCollection)
    output: OutputLog = field(default_factory=OutputLog)

    # Results of the most recent commands (driver / locator objects)
    last_compile: Optional[object] = None
    last_run: Optional[object] = None
    last_lookup: Optional[object] = None
    status: str = "idle"
    last_update: float = 0.0

    @property
    def current_diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self.diagnostics.get(self.source_path)

    @property
    def has_errors(self) -> bool:
        """Returns True if any diagnostic for this document is an error."""
        return any(d.severity == Severity.ERROR for d in self.current_diagnostics)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.current_diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.current_diagnostics if d.severity == Severity.WARNING)

    def diagnostics_for_line(self, line: int) -> List[Diagnostic]:
        """Zero-based line lookup."""
        return [d for d in self.current_diagnostics if d.line == line]

    def load_source(self, content: str):
        self.source_code = content
        self.source_lines = content.splitlines()
