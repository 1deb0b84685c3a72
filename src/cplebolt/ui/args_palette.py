from textual.widgets import Static, Input
from textual.message import Message

class ArgsPopup(Static):
    """A centered palette for editing the extra compiler arguments."""

    DEFAULT_CSS = """
    ArgsPopup {
        display: none;
        width: 60;
        height: auto;
        background: #EBEEEE;
        border: solid #45d3ee;
        padding: 1 2;
        align: center middle;
    }

    ArgsPopup .title {
        color: #191A1A;
        text-style: bold;
        margin-bottom: 1;
    }

    ArgsPopup Input {
        background: #FFFFFF;
        color: #191A1A;
        border: solid #94bfc1;
    }
    """

    class ArgsChanged(Message):
        def __init__(self, args: str) -> None:
            super().__init__()
            self.args = args

    def compose(self):
        yield Static("Compiler Args", classes="title")
        yield Input(placeholder="-o output.exe ...", id="args-input")

    def on_input_submitted(self, event: Input.Submitted):
        self.post_message(self.ArgsChanged(event.value.strip()))
        self.display = False

    def on_key(self, event):
        if event.key == "escape":
            self.display = False

    def show(self, current_args: str):
        self.display = True
        input_widget = self.query_one("#args-input", Input)
        input_widget.value = current_args
        input_widget.focus()
