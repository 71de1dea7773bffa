"""Full-screen terminal UI (prompt_toolkit-based).

The screen has three parts: a title bar, the main area (the expense list, or
the new-expense form while composing) and a footer hint bar that also shows
status and error messages. All state lives in a :class:`TrackerSession`;
this module only translates raw keys into :class:`KeyEvent` values and turns
the session into formatted text.

The ``render_*`` helpers are pure so they can be tested without a terminal.
"""

from __future__ import annotations

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from .editor import Field
from .session import ADD_KEY, DELETE_KEY, EXPORT_KEY, QUIT_KEY, Key, KeyEvent, TrackerSession

TITLE = "Expense Tracker"

STYLE = Style.from_dict(
    {
        "title": "fg:ansicyan bold",
        "date": "bold",
        "amount": "fg:ansigreen",
        "selected": "bg:ansibrightblack",
        "label": "fg:ansigray",
        "focused": "reverse",
        "hint": "fg:ansigray",
        "info": "fg:ansigreen",
        "error": "fg:ansired bold",
    }
)


# ----------------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------------


def render_title(session: TrackerSession) -> StyleAndTextTuples:
    return [("class:title", TITLE)]


def render_body(session: TrackerSession) -> StyleAndTextTuples:
    editor = session.editor
    if editor.composing and editor.draft is not None:
        fragments: StyleAndTextTuples = []
        for f in Field:
            marker = "> " if f is editor.focus else "  "
            style = "class:focused" if f is editor.focus else ""
            fragments.append(("class:label", f"{marker}{f.value + ':':<10}"))
            fragments.append((style, editor.draft.text_of(f)))
            fragments.append(("", "\n"))
        return fragments

    records = session.selection.records
    if not records:
        return [("class:hint", f"No expenses yet. Press '{ADD_KEY}' to add one.")]
    cursor = session.selection.cursor
    fragments = []
    for i, r in enumerate(records):
        row_style = "class:selected " if i == cursor else ""
        fragments.append((row_style + "class:date", f"{r.date.isoformat():<10} "))
        fragments.append((row_style, f"{r.name:<20}{r.category:<15}"))
        fragments.append((row_style + "class:amount", f"${r.amount:.2f}"))
        fragments.append(("", "\n"))
    return fragments


def render_footer(session: TrackerSession) -> StyleAndTextTuples:
    if session.message is not None:
        return [(f"class:{session.message.kind}", session.message.text)]
    if session.editor.composing:
        return [("class:hint", "Tab next field • Enter save • Esc cancel")]
    return [
        (
            "class:hint",
            f"'{QUIT_KEY}' quit • '{ADD_KEY}' add • '{DELETE_KEY}' delete • "
            f"'{EXPORT_KEY}' export • ↑/↓ select",
        )
    ]


def _body_title(session: TrackerSession) -> str:
    return "New Expense" if session.editor.composing else "Expenses"


# ----------------------------------------------------------------------------
# Application
# ----------------------------------------------------------------------------


def _key_bindings(session: TrackerSession) -> KeyBindings:
    kb = KeyBindings()

    def dispatch(event: KeyPressEvent, key_event: KeyEvent) -> None:
        session.handle(key_event)
        if not session.running:
            event.app.exit()

    @kb.add(Keys.Any)
    def _(event: KeyPressEvent) -> None:
        # Only printable characters; other control/meta keys are ignored.
        for ch in event.data or "":
            if ch.isprintable():
                dispatch(event, KeyEvent.of(ch))

    @kb.add("backspace")
    def _(event: KeyPressEvent) -> None:
        dispatch(event, KeyEvent(Key.BACKSPACE))

    @kb.add("tab")
    def _(event: KeyPressEvent) -> None:
        dispatch(event, KeyEvent(Key.TAB))

    @kb.add("enter")
    def _(event: KeyPressEvent) -> None:
        dispatch(event, KeyEvent(Key.ENTER))

    @kb.add("escape")
    def _(event: KeyPressEvent) -> None:  # pragma: no cover - timing dependent
        dispatch(event, KeyEvent(Key.ESCAPE))

    @kb.add("up")
    def _(event: KeyPressEvent) -> None:
        dispatch(event, KeyEvent(Key.UP))

    @kb.add("down")
    def _(event: KeyPressEvent) -> None:
        dispatch(event, KeyEvent(Key.DOWN))

    # Ctrl-C leaves immediately, skipping export-on-quit.
    @kb.add("c-c", eager=True)
    def _(event: KeyPressEvent) -> None:  # pragma: no cover - interactive
        session.running = False
        event.app.exit()

    return kb


def build_application(
    session: TrackerSession,
    *,
    input: Input | None = None,
    output: Output | None = None,
) -> Application[None]:
    """Assemble the three-part layout bound to ``session``."""

    def text(render):
        return FormattedTextControl(lambda: render(session))

    root = HSplit(
        [
            Frame(Window(text(render_title), height=1)),
            Frame(Window(text(render_body), wrap_lines=False), title=lambda: _body_title(session)),
            Frame(Window(text(render_footer), height=1)),
        ]
    )
    return Application(
        layout=Layout(root),
        key_bindings=_key_bindings(session),
        style=STYLE,
        full_screen=True,
        input=input,
        output=output,
    )


def run_tui(
    session: TrackerSession,
    *,
    input: Input | None = None,
    output: Output | None = None,
) -> None:
    """Block until the session stops running (quit key or Ctrl-C)."""

    build_application(session, input=input, output=output).run()


__all__ = [
    "TITLE",
    "render_title",
    "render_body",
    "render_footer",
    "build_application",
    "run_tui",
]
