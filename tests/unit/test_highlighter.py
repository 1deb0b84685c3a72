"""Tests for source rendering with diagnostic markers."""
import pytest
from rich.text import Text

from cplebolt.parsing.diagnostics import Diagnostic, Severity
from cplebolt.utils.highlighter import (
    MARKERS,
    build_source_view,
    format_diagnostic,
    group_by_line,
    highlight_source_line,
    worst_severity,
)


def _diag(line, column=0, severity=Severity.ERROR, message="m"):
    return Diagnostic(line=line, column=column, severity=severity, message=message)


class TestGrouping:

    def test_group_by_line_keeps_order(self):
        diags = [_diag(2, message="a"), _diag(0), _diag(2, message="b")]
        grouped = group_by_line(diags)
        assert [d.message for d in grouped[2]] == ["a", "b"]
        assert set(grouped) == {0, 2}

    def test_worst_severity(self):
        assert worst_severity([_diag(0, severity=Severity.WARNING)]) == Severity.WARNING
        assert worst_severity([
            _diag(0, severity=Severity.WARNING),
            _diag(0, severity=Severity.ERROR),
        ]) == Severity.ERROR


class TestBuildSourceView:

    def test_plain_lines(self):
        view = build_source_view(["a = 1", "b = 2"], [])
        assert isinstance(view, Text)
        assert view.plain == "1   a = 1\n2   b = 2"

    def test_marker_on_error_line(self):
        view = build_source_view(["a = 1", "b = ?"], [_diag(1, 4)])
        lines = view.plain.split("\n")
        assert MARKERS[Severity.ERROR] not in lines[0]
        assert lines[1].startswith(f"2 {MARKERS[Severity.ERROR]} ")

    def test_warning_marker(self):
        view = build_source_view(["x"], [_diag(0, severity=Severity.WARNING)])
        assert MARKERS[Severity.WARNING] in view.plain

    def test_gutter_width_tracks_line_count(self):
        view = build_source_view([f"l{i}" for i in range(12)], [])
        assert view.plain.split("\n")[0] == " 1   l0"

    def test_out_of_range_diagnostic_ignored(self):
        view = build_source_view(["only line"], [_diag(40)])
        assert view.plain == "1   only line"

    def test_empty_source(self):
        assert build_source_view([], []).plain == ""


class TestHighlightLine:

    def test_span_is_clipped(self):
        text = highlight_source_line("abc", [_diag(0, column=1)])
        assert text.plain == "abc"
        assert len(text.spans) == 1
        assert (text.spans[0].start, text.spans[0].end) == (1, 3)

    def test_column_past_end_adds_no_span(self):
        text = highlight_source_line("abc", [_diag(0, column=10)])
        assert text.spans == []


class TestFormatDiagnostic:

    def test_one_based_positions(self):
        row = format_diagnostic(_diag(4, 10, message="missing semicolon"))
        assert row.plain == f"{MARKERS[Severity.ERROR]} 5:11 error missing semicolon"
