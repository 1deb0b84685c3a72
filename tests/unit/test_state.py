"""
Tests for the front-end state: diagnostic collection, output log, CpleState.
"""
import threading
import pytest
from cplebolt.parsing.diagnostics import Diagnostic, Severity
from cplebolt.utils.state import CpleState, DiagnosticCollection, OutputLog


def _diag(line=0, severity=Severity.ERROR, message="bad"):
    return Diagnostic(line=line, column=0, severity=severity, message=message)


class TestDiagnosticCollection:

    def test_get_unknown_document_is_empty(self):
        assert DiagnosticCollection().get("nope") == ()

    def test_set_and_get(self):
        collection = DiagnosticCollection()
        collection.set("a.cple", [_diag()])
        assert collection.get("a.cple") == (_diag(),)

    def test_set_copies_input(self):
        collection = DiagnosticCollection()
        diags = [_diag()]
        collection.set("a.cple", diags)
        diags.append(_diag(line=5))
        assert len(collection.get("a.cple")) == 1

    def test_set_replaces(self):
        collection = DiagnosticCollection()
        collection.set("a.cple", [_diag(1), _diag(2)])
        collection.set("a.cple", [_diag(3)])
        assert [d.line for d in collection.get("a.cple")] == [3]

    def test_documents_are_independent(self):
        collection = DiagnosticCollection()
        collection.set("a.cple", [_diag(1)])
        collection.set("b.cple", [_diag(2)])
        collection.delete("a.cple")
        assert collection.get("a.cple") == ()
        assert collection.get("b.cple") == (_diag(2),)

    def test_delete_missing_is_noop(self):
        DiagnosticCollection().delete("never-set")

    def test_readers_never_see_partial_sets(self):
        collection = DiagnosticCollection()
        full = [_diag(i) for i in range(50)]
        seen = []

        def writer():
            for _ in range(200):
                collection.set("a.cple", full)
                collection.delete("a.cple")

        t = threading.Thread(target=writer)
        t.start()
        while t.is_alive():
            seen.append(len(collection.get("a.cple")))
        t.join()
        assert set(seen) <= {0, 50}


class TestOutputLog:

    def test_append_and_text(self):
        log = OutputLog()
        log.append_line("one")
        log.append_line("two")
        assert log.text == "one\ntwo"

    def test_multiline_append_splits(self):
        log = OutputLog()
        log.append_line("a\nb")
        assert log.lines == ["a", "b"]

    def test_clear(self):
        log = OutputLog()
        log.append_line("x")
        log.clear()
        assert log.lines == []


class TestCpleState:

    def test_defaults(self):
        state = CpleState()
        assert state.source_path == ""
        assert state.source_lines == []
        assert state.current_diagnostics == ()
        assert state.status == "idle"
        assert state.has_errors is False

    def test_counts(self):
        state = CpleState(source_path="/p/a.cple")
        state.diagnostics.set("/p/a.cple", [
            _diag(0, Severity.WARNING),
            _diag(1, Severity.ERROR),
            _diag(1, Severity.ERROR),
        ])
        assert state.has_errors is True
        assert state.error_count == 2
        assert state.warning_count == 1

    def test_warning_only_has_no_errors(self):
        state = CpleState(source_path="a.cple")
        state.diagnostics.set("a.cple", [_diag(severity=Severity.WARNING)])
        assert state.has_errors is False

    def test_other_documents_ignored(self):
        state = CpleState(source_path="a.cple")
        state.diagnostics.set("b.cple", [_diag()])
        assert state.current_diagnostics == ()

    def test_diagnostics_for_line(self):
        state = CpleState(source_path="a.cple")
        state.diagnostics.set("a.cple", [_diag(0), _diag(3, message="x"), _diag(3, message="y")])
        assert [d.message for d in state.diagnostics_for_line(3)] == ["x", "y"]

    def test_load_source(self):
        state = CpleState()
        state.load_source("a\nb\n")
        assert state.source_code == "a\nb\n"
        assert state.source_lines == ["a", "b"]

    def test_separate_instances_do_not_share_collections(self):
        assert CpleState().diagnostics is not CpleState().diagnostics
