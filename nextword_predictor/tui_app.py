# tui_app.py - Next-Word Predictor TUI Application
# -------------------------------------------------------
# Text based terminal UI over one SelectionController session.
# Features:
#  - Type or edit the text, Enter asks for the top 5 next words
#  - Color-coded prediction list, pick one with keys 1–5
#  - The picked word is appended and the next predictions load straight away
#  - Status line (loading / error / exhausted) and latency readout
# Every widget is redrawn from SessionState; nothing here changes the
# predictions, it only shows them.
# -------------------------------------------------------

from __future__ import annotations

from textual import events, work
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from nextword_predictor.core.controller import SelectionController
from nextword_predictor.core.protocols import SessionState, Status
from nextword_predictor.view import prediction_rows, status_line


class TextView(Static):
    """The text built so far."""
    def show_text(self, text: str):
        self.update(text or "[dim](empty)[/dim]")


class SuggestionPanel(Static, can_focus=True):
    """
    Right-side suggestion panel.
    Displays up to 5 predictions, showing:
     - index shortcuts (1–5)
     - color-coded probability
     - the predicted word
    """
    def show_state(self, state: SessionState):
        rows = prediction_rows(state)
        if not rows:
            self.update("[dim]No suggestions[/dim]")
            return
        lines = [
            f"[b]{r.index}[/b] • [{r.color}]{r.word}[/{r.color}]  [dim]{r.percent}[/dim]"
            for r in rows
        ]
        self.update("\n".join(lines))


class TypingLatency(Static):
    """
    Bottom-left readout showing how long the last prediction took.
    """
    def set_latency(self, seconds: float):
        ms = round(seconds * 1000)
        self.update(f"[dim]Latency:[/dim] {ms}ms")


# Main Application -----------------------------------------------------------------
class NextWordApp(App):
    """
    The main Textual app.
    Architecture:
     - UI events to controller transitions (run as workers)
     - controller notifies the app with each new SessionState
     - reactive state to UI updates
    """
    CSS_PATH = "tui_style.css"
    TITLE = "Next-Word Predictor"

    # keyboard shortcuts for user
    BINDINGS = [
        ("ctrl+r", "reset_session", "Reset"),
        ("ctrl+e", "edit_text", "Edit text"),
        ("ctrl+q", "quit", "Quit"),
    ]

    session: reactive[SessionState] = reactive(SessionState, init=False, always_update=True)

    def __init__(self, controller: SelectionController):
        super().__init__()
        self.controller = controller

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():  # Main split view
            with Container(id="left"):
                yield TextView(id="text")
                yield Input(placeholder="Start typing…, Enter to predict", id="text_input")
            with Container(id="right"):
                yield SuggestionPanel(id="predictions")

        with Horizontal(id="bottom"):
            yield TypingLatency(id="latency")
            yield Static(id="status")
        yield Footer()

    # Startup hook ---------------------------------------------------------------------
    def on_mount(self) -> None:
        self.controller.subscribe(self._on_state)
        self.session = self.controller.state
        self.reset_session()

    def on_unmount(self) -> None:
        self.controller.unsubscribe(self._on_state)

    def _on_state(self, state: SessionState) -> None:
        self.session = state

    # Reactive state (watcher functions) ---------------------------------------
    def watch_session(self, state: SessionState) -> None:
        self.query_one(TextView).show_text(state.text)
        self.query_one(SuggestionPanel).show_state(state)
        self.query_one("#status", Static).update(status_line(state))
        if state.status is Status.READY:
            self.query_one(TypingLatency).set_latency(self.controller.service.last_latency)
        text_input = self.query_one(Input)
        if not text_input.has_focus:
            text_input.value = state.text

    # Workers: one per transition, the controller drops stale results ------------
    @work(group="predictions")
    async def request(self, text: str) -> None:
        await self.controller.request_predictions(text)

    @work(group="predictions")
    async def pick(self, word: str) -> None:
        await self.controller.select_word(word)

    @work(group="predictions")
    async def reset_session(self) -> None:
        await self.controller.reset()

    # Events ----------------------------------------------------------------------
    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter = predict from the text in the box."""
        self.request(event.value)
        self.query_one(SuggestionPanel).focus()

    # Accept predictions (using 1-5 keys) -----------------------------------------------------
    # digits typed into the Input never reach here, it stops them
    async def on_key(self, event: events.Key) -> None:
        if event.key.isdigit():
            idx = int(event.key) - 1
            preds = self.session.predictions
            if self.session.status is Status.READY and 0 <= idx < len(preds):
                self.pick(preds[idx].word)

    # Actions ----------------------------------------------------------------------
    def action_reset_session(self) -> None:
        """Ctrl+R = back to the initial text."""
        self.reset_session()

    def action_edit_text(self) -> None:
        """Ctrl+E = jump to the text box."""
        self.query_one(Input).focus()
