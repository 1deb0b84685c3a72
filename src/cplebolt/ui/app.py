from pathlib import Path
from typing import Callable
from textual.app import App, ComposeResult
from textual.widgets import Footer, TextArea
from textual.containers import VerticalScroll, Horizontal, Vertical
from textual.binding import Binding
from textual.message import Message
from ..engine import CpleEngine
from ..utils.state import CpleState
from .widgets import SourceView, DiagnosticsList, StatusBar
from .args_palette import ArgsPopup

# User Palette
C_BG = "#EBEEEE"
C_TEXT = "#191A1A"
C_ACCENT1 = "#45d3ee" # Cyan
C_ACCENT2 = "#9FBFC5" # Muted Blue
C_ACCENT3 = "#94bfc1" # Teal

class CpleApp(App):
    """CPLE build front end: source markers, problems and output."""

    CSS = f"""
    Screen {{
        background: {C_BG};
        color: {C_TEXT};
        layers: base popups;
        align: center middle;
    }}

    #main-layout {{ height: 1fr; width: 100%; layer: base; }}

    #source-container {{
        width: 3fr;
        border: solid {C_ACCENT2};
        margin: 1 1;
    }}

    #side-panel {{ width: 2fr; }}

    #diagnostics-list {{
        height: auto;
        max-height: 12;
        border: solid {C_ACCENT3};
        margin: 1 1 0 0;
    }}

    #output-view {{ height: 1fr; margin: 1 1 1 0; }}

    #status-bar {{ height: 1; background: {C_ACCENT2}; padding: 0 1; }}

    ArgsPopup {{ layer: popups; margin: 1 1; width: 60; }}

    Footer {{ background: {C_TEXT}; color: {C_ACCENT1}; }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("c", "compile", "Compile", show=True),
        Binding("r", "run", "Run", show=True),
        Binding("s", "check_syntax", "Check", show=True),
        Binding("d", "debug", "Debug", show=True),
        Binding("a", "toggle_args", "Args", show=True),
        Binding("o", "toggle_output", "Output", show=True),
    ]

    class StateUpdated(Message):
        def __init__(self, state: CpleState) -> None:
            super().__init__()
            self.state = state

    def __init__(self, source_file: str):
        super().__init__()
        self.engine = CpleEngine(source_file)
        self.engine.on_update_callback = lambda state: self.post_message(self.StateUpdated(state))

    def compose(self) -> ComposeResult:
        with Horizontal(id="main-layout"):
            with VerticalScroll(id="source-container"):
                yield SourceView()
            with Vertical(id="side-panel"):
                yield DiagnosticsList()
                yield TextArea(id="output-view", read_only=True)
        yield ArgsPopup(id="args-palette")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(StatusBar).set_status(
            file=Path(self.engine.state.source_path).name,
            args=self.engine.config.get("compiler_args", ""),
        )
        self.engine.start()

    def _run_command(self, command: Callable[[], object]) -> None:
        if self.engine.config.get("show_output_on_compile"):
            self.query_one("#output-view", TextArea).display = True
        self.query_one(StatusBar).set_status(status="working")
        # Compiles may take up to the configured timeout; keep the UI responsive
        self.run_worker(command, thread=True, exclusive=True, group="engine")

    def action_compile(self) -> None: self._run_command(self.engine.compile)
    def action_run(self) -> None: self._run_command(self.engine.run)
    def action_check_syntax(self) -> None: self._run_command(self.engine.check_syntax)
    def action_debug(self) -> None:
        self.query_one("#output-view", TextArea).display = True
        self._run_command(self.engine.debug_compiler)

    def action_toggle_output(self) -> None:
        view = self.query_one("#output-view", TextArea)
        view.display = not view.display

    def action_toggle_args(self) -> None:
        current = self.engine.config.get("compiler_args", "")
        self.query_one("#args-palette", ArgsPopup).show(current)

    def on_args_popup_args_changed(self, message: ArgsPopup.ArgsChanged) -> None:
        self.engine.config.set("compiler_args", message.args)
        self.query_one(StatusBar).set_status(args=message.args)

    def on_cple_app_state_updated(self, message: StateUpdated) -> None:
        state = message.state
        diagnostics = state.current_diagnostics
        self.query_one(SourceView).set_source(state.source_lines, diagnostics)
        self.query_one(DiagnosticsList).set_diagnostics(diagnostics)

        output_view = self.query_one("#output-view", TextArea)
        output_view.text = state.output.text
        output_view.scroll_end(animate=False)

        self.query_one(StatusBar).set_status(
            status=state.status,
            errors=state.error_count,
            warnings=state.warning_count,
        )

    def on_unmount(self) -> None:
        self.engine.stop()
        self.engine.close()

def run_tui(source_file: str):
    app = CpleApp(source_file)
    app.run()
