"""Textual TUI for browsing and editing the inventory."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Input, Static, TextArea

from src.tcis.cli.log_filters import latest_log_file
from src.tcis.core.paths import get_logs_dir
from src.tcis.services import inventory
from src.tcis.ui.commands import (
    EXIT_COMMANDS,
    CommandResult,
    confirmation_prompt,
    execute_command,
    is_confirmation,
    split_command,
)

WELCOME_TEXT = (
    "Type a command such as 'card list', 'binder create Trades --type non-curated' "
    "or 'help'. Use /quit to leave."
)


def render_panels(view: inventory.InventoryView) -> dict[str, str]:
    """Text for each inventory panel, keyed by widget id."""
    collection_lines = [
        f"{card.name} ({card.rarity}, {card.variant}) ${card.value:.2f} x{card.count}"
        for card in view.cards
    ]
    return {
        "money": f"Money: ${view.total_money:.2f}",
        "collection": "\n".join(["Collection", *collection_lines])
        if collection_lines
        else "Collection\n(no cards)",
        "binders": "\n".join(
            ["Binders", *(inventory.container_heading(b) for b in view.binders)]
        )
        if view.binders
        else "Binders\n(none)",
        "decks": "\n".join(
            ["Decks", *(inventory.container_heading(d) for d in view.decks)]
        )
        if view.decks
        else "Decks\n(none)",
    }


class InventoryTUI(App):
    """Main menu with collection, binder and deck panels above a command line."""

    BINDINGS = [("ctrl+l", "toggle_log_view", "Logs"), ("ctrl+q", "quit", "Quit")]
    CSS_PATH = "app.tcss"
    TITLE = "Trading Card Inventory System"

    def __init__(self) -> None:
        super().__init__()
        self._pending_tokens: list[str] | None = None

    def compose(self) -> ComposeResult:
        yield Static(id="money", markup=False)
        with Horizontal(id="panels"):
            with VerticalScroll(classes="panel"):
                yield Static(id="collection", markup=False)
            with VerticalScroll(classes="panel"):
                yield Static(id="binders", markup=False)
            with VerticalScroll(classes="panel"):
                yield Static(id="decks", markup=False)
        with VerticalScroll(id="output-box"):
            yield Static(WELCOME_TEXT, id="output", markup=False)
        with Horizontal(id="input-box"):
            yield Static("> ", id="prompt", markup=False)
            yield Input(placeholder="card list", id="input")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_panels()
        self.query_one("#input", Input).focus()

    def refresh_panels(self) -> None:
        panels = render_panels(inventory.collect_status())
        for widget_id, text in panels.items():
            self.query_one(f"#{widget_id}", Static).update(text)

    def show_output(self, text: str) -> None:
        self.query_one("#output", Static).update(text or "(no output)")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        event.input.value = ""
        if not text:
            return
        if text.lower() in EXIT_COMMANDS:
            self.exit()
            return
        self.handle_line(text)

    def handle_line(self, text: str) -> CommandResult | None:
        if self._pending_tokens is not None:
            tokens = self._pending_tokens
            self._pending_tokens = None
            if not is_confirmation(text):
                self.show_output("Canceled.")
                return None
            return self._run([*tokens, "--yes"])
        try:
            tokens = split_command(text)
        except ValueError as exc:
            self.show_output(f"Could not read command: {exc}")
            return None
        question = confirmation_prompt(tokens)
        if question is not None:
            self._pending_tokens = tokens
            self.show_output(question)
            return None
        return self._run(tokens)

    def _run(self, tokens: list[str]) -> CommandResult:
        result = execute_command(tokens)
        self.show_output(result.output)
        self.refresh_panels()
        return result

    def action_toggle_log_view(self) -> None:
        if self.screen.id == "log_view":
            self.pop_screen()
        else:
            self.push_screen(LogView())


class LogView(Screen):
    def __init__(self) -> None:
        super().__init__(id="log_view")

    def compose(self) -> ComposeResult:
        yield TextArea(_read_latest_log(), id="log_text", read_only=True)


def _read_latest_log() -> str:
    target = latest_log_file(get_logs_dir())
    if target is None:
        return "No log files yet."
    return target.read_text(encoding="utf-8", errors="ignore")
