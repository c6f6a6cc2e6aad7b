import sys
import logging
import argparse
from dataclasses import dataclass

from prompt_toolkit import Application
from prompt_toolkit.application import get_app
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout, HSplit, Window
from prompt_toolkit.layout.controls import DummyControl
from prompt_toolkit.widgets import TextArea, Frame, Label
from prompt_toolkit.keys import Keys
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style
from prompt_toolkit.filters import Condition

from typing_session import SessionState, TypingSession, Verdict
from text_source import (
    DEFAULT_TEXT_PATH,
    PASSAGE_LENGTH,
    TextLoadError,
    generate_passage,
    load_target_text,
)

logger = logging.getLogger(__name__)

#config

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_FILE = "typing_trainer.log"
MISMATCH_MARKER = "█"
ACTIVE_GLYPHS = {" ": "_", "\t": "→", "\n": "↵"}

style = Style.from_dict({
    "target": "",
    "target.active": "underline",
    "input.pending": "",
    "input.correct": "#00ff00",
    "input.incorrect": "#ff0000",
    "stats": "reverse"
})


@dataclass
class SessionConfig:
    show_stats: bool = True
    auto_submit: bool = False


# rendering

def render_target(passage, pos):
    fragments = []

    for i, ch in enumerate(passage):
        if i == pos:
            fragments.append(("class:target.active", ACTIVE_GLYPHS.get(ch, ch)))
            if ch == "\n":
                fragments.append(("class:target", ch))
        else:
            fragments.append(("class:target", ch))

    return fragments

def render_input(session):
    fragments = []
    for ch, verdict in zip(session.typed, session.current_comparison()):
        if verdict is Verdict.MATCH:
            fragments.append(("class:input.correct", ch))
        else:
            fragments.append(("class:input.incorrect", MISMATCH_MARKER))
    fragments.append(("class:input.pending", "_"))
    return fragments

def format_stats(wpm, acc):
    def fmt(x, pct = False):
        if x is None:
            return "  -- "
        return f"{x:5.1f}%" if pct else f"{x:5.1f}"

    return f"WPM: {fmt(wpm)}  |  Accuracy: {fmt(acc, True)}"

def format_report(outcome):
    wpm = "n/a" if outcome.words_per_minute is None else f"{outcome.words_per_minute:.2f}"
    return "\n".join([
        f"You got {outcome.chars_correct} out of {outcome.chars_total}!",
        f"You typed {outcome.words_typed} words in {outcome.elapsed_seconds:.2f} seconds",
        f"Words per minute : {wpm}",
        f"Accuracy : {outcome.accuracy:.2f}%",
    ])


# prompt tk stuff

def build_application(session, config, input = None, output = None):
    typed_area = Label(text = "")
    target_area = Label(text = "")
    focus_sink = Window(
        content = DummyControl(),
        height = 0,
        width = 0
    )
    stats_area = TextArea(
        height = 1,
        focusable = False,
        style = "class:stats"
    )

    def refresh():
        target_area.text = FormattedText(
            render_target(session.target, session.position)
        )
        typed_area.text = FormattedText(
            render_input(session)
        )
        if config.show_stats:
            if session.position:
                wpm, acc = session.live_metrics()
            else:
                wpm, acc = None, None
            stats_area.text = format_stats(wpm, acc)

    def submit(event):
        outcome = session.finalize()
        logger.info("session submitted")
        event.app.exit(result = outcome)

    # keys buffered after submit or cancel must not touch the session
    accepting = Condition(
        lambda: session.state is SessionState.ACTIVE and not get_app().is_done
    )

    kb = KeyBindings()

    @kb.add(Keys.Backspace, filter = accepting)
    def _(event):
        session.apply_backspace()
        refresh()

    @kb.add(Keys.Enter, filter = accepting)
    def _(event):
        submit(event)

    @kb.add(Keys.Escape, eager = True, filter = accepting)
    @kb.add(Keys.ControlC, filter = accepting)
    def _(event):
        logger.info("session cancelled at position %d", session.position)
        event.app.exit(result = None)

    @kb.add(Keys.Tab, filter = accepting)
    def _(event):
        session.apply_character("\t")
        refresh()

    @kb.add(Keys.Any, filter = accepting)
    def _(event):
        key = event.key_sequence[0].key
        if len(key) != 1:
            return

        logger.debug("key %r at position %d", key, session.position)
        session.apply_character(key)
        refresh()

        if config.auto_submit and session.is_complete:
            submit(event)

    refresh()

    panes = [
        Frame(target_area, title = "Target"),
        Frame(typed_area, title = "Your Input"),
        focus_sink
    ]
    if config.show_stats:
        panes.insert(0, stats_area)

    return Application(
        layout = Layout(
            HSplit(panes),
            focused_element = focus_sink
        ),
        key_bindings = kb,
        full_screen = True,
        cursor = None,
        style = style,
        input = input,
        output = output
    )

def run_typing_session(session, config = None, input = None, output = None):
    app = build_application(session, config or SessionConfig(), input = input, output = output)
    return app.run()


# cli

def setup_logging(log_file = DEFAULT_LOG_FILE, level = "INFO"):
    # the full-screen app owns stdout, so only log to a file
    logging.basicConfig(
        level = getattr(logging, level.upper(), logging.INFO),
        format = LOG_FORMAT,
        handlers = [logging.FileHandler(log_file, encoding = "utf-8")],
    )

def positive_int(value):
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n

def parse_args(argv = None):
    p = argparse.ArgumentParser(description = "Terminal typing practice")
    p.add_argument("path", nargs = "?", default = DEFAULT_TEXT_PATH, help = "UTF-8 text file to type")
    p.add_argument("--words", type = positive_int, default = None, metavar = "N",
                   help = f"Type a generated passage of N common words instead of a file (e.g. {PASSAGE_LENGTH})")
    p.add_argument("--no-stats", action = "store_true", help = "Hide the live WPM/accuracy bar")
    p.add_argument("--auto-submit", action = "store_true", help = "Submit as soon as the whole text is typed")
    p.add_argument("--log-file", default = DEFAULT_LOG_FILE, help = "Log file path")
    p.add_argument("--log-level", default = "INFO", choices = ["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)

def main(argv = None):
    args = parse_args(argv)
    setup_logging(args.log_file, args.log_level)

    try:
        if args.words:
            passage = generate_passage(args.words)
        else:
            passage = load_target_text(args.path)
    except TextLoadError as e:
        logger.error("startup failed: %s", e)
        print(f"error: {e}", file = sys.stderr)
        return 1

    session = TypingSession(passage)
    config = SessionConfig(
        show_stats = not args.no_stats,
        auto_submit = args.auto_submit
    )
    outcome = run_typing_session(session, config)

    if outcome is not None:
        print(format_report(outcome))
    return 0

if __name__ == "__main__":
    sys.exit(main())
