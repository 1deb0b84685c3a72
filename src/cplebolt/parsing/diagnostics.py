import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Pattern, Tuple

DIAGNOSTIC_SOURCE = "cple"
# Width of the marker drawn under the reported column
MARKER_SPAN = 20


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    line: int  # zero-based
    column: int  # zero-based
    severity: Severity
    message: str
    source: str = DIAGNOSTIC_SOURCE

    @property
    def end_column(self) -> int:
        return self.column + MARKER_SPAN


def _to_line(raw: str) -> Optional[int]:
    """1-based capture -> zero-based line, or None if unusable."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    if value < 1:
        return None
    return value - 1


def _to_column(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return 0
    try:
        return int(raw)
    except ValueError:
        return None


def _severity(raw: Optional[str]) -> Severity:
    if raw and raw.lower() == "warning":
        return Severity.WARNING
    return Severity.ERROR


def _build(line_raw: str, column_raw: Optional[str], severity: Severity, message: str) -> Optional[Diagnostic]:
    line = _to_line(line_raw)
    column = _to_column(column_raw)
    message = message.strip()
    if line is None or column is None or not message:
        return None
    return Diagnostic(line=line, column=column, severity=severity, message=message)


# --- KNOWN OUTPUT SHAPES ---
# Order is priority: a line may satisfy several of these and the first wins.
Matcher = Tuple[Pattern[str], Callable[[re.Match], Optional[Diagnostic]]]

MATCHERS: List[Matcher] = [
    # "file.cple:5:10: error: message"
    (
        re.compile(r"([^:]+):(\d+):(\d+):\s*(error|warning):\s*(.+)", re.IGNORECASE),
        lambda m: _build(m.group(2), m.group(3), _severity(m.group(4)), m.group(5)),
    ),
    # "line 5: message"
    (
        re.compile(r"line\s+(\d+):\s*(.+)", re.IGNORECASE),
        lambda m: _build(m.group(1), None, Severity.ERROR, m.group(2)),
    ),
    # "Error at line 5, column 10: message"
    (
        re.compile(r"error\s+at\s+line\s+(\d+)(?:,\s*column\s+(\d+))?:\s*(.+)", re.IGNORECASE),
        lambda m: _build(m.group(1), m.group(2), Severity.ERROR, m.group(3)),
    ),
    # "file.cple(5): warning: message"
    (
        re.compile(r"[^(]+\((\d+)\):\s*(error|warning):\s*(.+)", re.IGNORECASE),
        lambda m: _build(m.group(1), None, _severity(m.group(2)), m.group(3)),
    ),
    # "Error: line 5: message"
    (
        re.compile(r"error:\s*line\s+(\d+):\s*(.+)", re.IGNORECASE),
        lambda m: _build(m.group(1), None, Severity.ERROR, m.group(2)),
    ),
]


def parse_line(line: str, matchers: List[Matcher] = MATCHERS) -> Optional[Diagnostic]:
    for pattern, build in matchers:
        match = pattern.search(line)
        if not match:
            continue
        diagnostic = build(match)
        if diagnostic is not None:
            return diagnostic
    return None


def extract_diagnostics(output: str, matchers: List[Matcher] = MATCHERS) -> List[Diagnostic]:
    """
    Turns raw compiler output into Diagnostics, in input order.
    Unrecognised lines are skipped; this never raises on bad input.
    Example: hello.cple:5:10: error: missing semicolon
    """
    if not output:
        return []

    diagnostics = []
    for line in output.split("\n"):
        diagnostic = parse_line(line, matchers)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return diagnostics


def publish_diagnostics(collection, document: str, output: str) -> List[Diagnostic]:
    """
    Extracts diagnostics from `output` and hands them to `collection` for
    `document`. An empty result leaves the collection untouched; callers clear
    stale entries before compiling.
    """
    diagnostics = extract_diagnostics(output)
    if diagnostics:
        collection.set(document, diagnostics)
    return diagnostics
