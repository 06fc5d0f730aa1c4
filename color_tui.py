#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# color_tui.py - ColorTUIDisplay: full-screen Textual TUI for the Dungeon of Doom.
#
# Requires: pip install textual

from __future__ import annotations

import asyncio
import threading

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.events import Key
from textual.widgets import RichLog, Static

from dungeon import Display, Event, Game, event_text


# ── Widgets ───────────────────────────────────────────────────────────────────

class MarkupPanel(Static):
    """Static that remembers, in shown_markup, the markup it was last given."""

    def __init__(self, markup: str = "", **kwargs) -> None:
        super().__init__(markup, **kwargs)
        self.shown_markup = markup

    def set_markup(self, markup: str) -> None:
        self.shown_markup = markup
        self.update(markup)


class StatusPanel(MarkupPanel):
    """Top strip: map, difficulty, the human's purse and the turn count."""

    DEFAULT_CSS = """
    StatusPanel {
        height: auto;
        border: solid $success-darken-1;
        padding: 0 1;
    }
    """


class LookPanel(MarkupPanel):
    """The last 5x5 window the human looked at."""

    DEFAULT_CSS = """
    LookPanel {
        width: 13;
        border: solid grey;
        padding: 1 2;
    }
    """


class EventLog(RichLog):
    """Scrolling log of game events. history keeps the plain lines written so far."""

    DEFAULT_CSS = """
    EventLog {
        width: 1fr;
        border: solid $primary-darken-1;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(markup=True, **kwargs)
        self.history: list[str] = []

    def add_line(self, line: str) -> None:
        self.history.append(line)
        self.write(line)


class IOPanel(MarkupPanel):
    """Current prompt and whatever the human has typed so far."""

    DEFAULT_CSS = """
    IOPanel {
        height: auto;
        border: solid $warning-darken-1;
        padding: 0 1;
    }
    """


# ── Helpers ───────────────────────────────────────────────────────────────────

_GLYPH_COLORS = {"B": "bold red", "P": "bold cyan", "G": "yellow", "E": "green", "#": "dim"}


def _look_markup(window: str) -> str:
    """Color each glyph of a look window."""
    lines = []
    for row in window.splitlines():
        cells = []
        for glyph in row:
            color = _GLYPH_COLORS.get(glyph)
            cells.append(f"[{color}]{glyph}[/{color}]" if color else glyph)
        lines.append("".join(cells))
    return "\n".join(lines)


def _status_markup(game: Game) -> str:
    human = game.get_player_state(game.human)
    return (f"[b]{game.map.name}[/b] ({game.difficulty})  │  "
            f"gold {human['gold']}/{game.map.goldWinCondition}  │  "
            f"turn {game.turn_number}")


def _event_to_str(event: Event) -> str | None:
    """Convert a game Event to a log string, or None if the event is silent in the TUI."""
    if event.type == "look":
        return None  # shown in the LookPanel instead
    text = event_text(event)
    if text is None:
        return None
    if event.type == "turn_start":
        return f"--- {text} ---"
    if event.type == "win":
        return f"[bold green]{text}[/bold green]"
    if event.type == "lose":
        return f"[bold red]{text}[/bold red]"
    return text


# ── App ───────────────────────────────────────────────────────────────────────

class DungeonApp(App):
    """Full-screen Dungeon of Doom TUI."""

    TITLE = "Dungeon of Doom"
    BINDINGS = [("escape", "quit", "Quit")]
    CSS = """
    #view-area { height: 1fr; }
    """

    def __init__(self, game: Game | None = None,
                 display: ColorTUIDisplay | None = None) -> None:
        super().__init__()
        self.game = game
        self._game_display = display
        self._bridge_event = threading.Event()
        self._bridge_result: object = None
        self._bridge_mode: str | None = None   # "pick_one" | "command" | None
        self._bridge_options: list = []
        self._key_buffer: str = ""
        self._last_prompt: str = ""
        if display is not None:
            display.app = self

    def compose(self) -> ComposeResult:
        yield StatusPanel(id="status")
        with Horizontal(id="view-area"):
            yield LookPanel(id="look")
            yield EventLog(id="event-log")
        yield IOPanel(id="io-panel")

    def on_mount(self) -> None:
        if self.game is not None:
            self.update_state(self.game)
            if self._game_display is not None:
                threading.Thread(target=self._game_worker, daemon=True).start()

    def add_events(self, events: list[Event]) -> None:
        """Write renderable events to the EventLog; look windows go to the LookPanel."""
        log = self.query_one(EventLog)
        for event in events:
            if event.type == "look":
                self.query_one(LookPanel).set_markup(_look_markup(event.message))
            text = _event_to_str(event)
            if text is not None:
                log.add_line(text)

    def update_state(self, game: Game) -> None:
        """Repopulate the status strip from current game state."""
        self.query_one(StatusPanel).set_markup(_status_markup(game))

    def _game_worker(self) -> None:
        """Run the game loop in a background thread.

        Exceptions are swallowed silently: the app may exit (e.g., test teardown)
        while a turn is in progress, causing call_from_thread() to re-raise a
        widget-not-found error.
        """
        try:
            self.game.run(display=self._game_display)  # type: ignore[arg-type]
        except Exception:  # noqa: BLE001
            pass

    def show_prompt(self, options: list, formatter: callable, prompt: str = "") -> None:
        """Update IOPanel with the prompt, a numbered choice list, and enter pick_one mode."""
        self._bridge_options = list(options)
        self._bridge_mode = "pick_one"
        self._key_buffer = ""
        lines = [f"[{i + 1}] {formatter(opt)}" for i, opt in enumerate(options)]
        if prompt.strip():
            lines.insert(0, prompt.strip())
        self._last_prompt = "\n".join(lines)
        self._refresh_io_panel()

    def show_command_prompt(self, prompt: str) -> None:
        """Update IOPanel with a free-text prompt and enter command mode."""
        self._bridge_mode = "command"
        self._key_buffer = ""
        self._last_prompt = prompt.strip() + "  (hello, gold, pickup, look, move n/e/s/w, quit)"
        self._refresh_io_panel()

    def show_info_text(self, content: str) -> None:
        """Write informational content to the EventLog."""
        self.query_one(EventLog).add_line(content)

    def _refresh_io_panel(self) -> None:
        """Redraw the IOPanel with the current prompt and key-buffer cursor."""
        self.query_one(IOPanel).set_markup(f"{self._last_prompt}\n> {self._key_buffer}_")

    def resolve_bridge(self, value: object) -> None:
        """Resolve the current blocking bridge request and clear the IOPanel."""
        self._bridge_mode = None
        self._bridge_options = []
        self._key_buffer = ""
        self.query_one(IOPanel).set_markup("")
        self._bridge_result = value
        self._bridge_event.set()

    def on_key(self, event: Key) -> None:
        """Route keypresses to the active bridge request."""
        if self._bridge_mode == "command":
            if event.key == "backspace":
                self._key_buffer = self._key_buffer[:-1]
                self._refresh_io_panel()
                event.stop()
            elif event.key == "enter":
                event.stop()
                self.resolve_bridge(self._key_buffer)
            elif event.character is not None and event.character.isprintable():
                self._key_buffer += event.character
                self._refresh_io_panel()
                event.stop()
        elif self._bridge_mode == "pick_one":
            if event.key == "backspace":
                self._key_buffer = self._key_buffer[:-1]
                self._refresh_io_panel()
                event.stop()
            elif event.key == "enter":
                try:
                    idx = int(self._key_buffer) - 1
                except ValueError:
                    return
                if 0 <= idx < len(self._bridge_options):
                    event.stop()
                    self._key_buffer = ""
                    self.resolve_bridge(self._bridge_options[idx])
            elif event.character is not None and event.character.isdigit():
                # Cap buffer at the number of digits needed to express the
                # highest valid index (e.g. 9 options → 1 digit; 10 → 2 digits).
                max_digits = len(str(len(self._bridge_options)))
                if len(self._key_buffer) < max_digits:
                    self._key_buffer += event.character
                    self._refresh_io_panel()
                event.stop()


# ── ColorTUIDisplay ───────────────────────────────────────────────────────────

class ColorTUIDisplay(Display):
    """Full-screen TUI display powered by Textual.

    Wire up via DungeonApp(game=..., display=...) so the app starts the game
    worker thread automatically. pick_one() and read_command() MUST be called from
    a background thread; calling them from the Textual event loop will deadlock.
    """

    def __init__(self, app: DungeonApp | None = None) -> None:
        self.app = app

    def _require_app(self, method: str) -> None:
        if self.app is None:
            raise RuntimeError(
                f"ColorTUIDisplay.{method}() requires an app: "
                "pass app=DungeonApp() to the constructor"
            )

    def _call_on_ui(self, fn: callable, /, *args: object) -> None:
        """Call fn(*args) thread-safely.

        If an asyncio event loop is running in the current thread (Textual event loop),
        call fn directly. Otherwise schedule via call_from_thread() (background thread).
        """
        try:
            asyncio.get_running_loop()
            fn(*args)
        except RuntimeError:
            self.app.call_from_thread(fn, *args)  # type: ignore[union-attr]

    def show_events(self, events: list[Event]) -> None:
        self._require_app("show_events")
        self._call_on_ui(self.app.add_events, events)

    def show_state(self, game: Game) -> None:
        self._require_app("show_state")
        self._call_on_ui(self.app.update_state, game)

    def pick_one(self, options: list, prompt: str = "Your selection: ",
                 formatter: callable = str) -> object:
        """Present a numbered menu and block until resolve_bridge() is called.

        Must be called from a background thread, not the Textual event loop.
        """
        self._require_app("pick_one")
        self.app._bridge_event.clear()
        self._call_on_ui(self.app.show_prompt, options, formatter, prompt)
        self.app._bridge_event.wait()
        return self.app._bridge_result

    def read_command(self, prompt: str = "Your turn: ") -> str:
        """Collect one typed line and block until Enter resolves it.

        Must be called from a background thread, not the Textual event loop.
        """
        self._require_app("read_command")
        self.app._bridge_event.clear()
        self._call_on_ui(self.app.show_command_prompt, prompt)
        self.app._bridge_event.wait()
        return str(self.app._bridge_result)

    def show_info(self, content: str) -> None:
        self._require_app("show_info")
        self._call_on_ui(self.app.show_info_text, content)
