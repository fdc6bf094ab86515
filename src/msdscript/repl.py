"""Interactive REPL for MSDScript, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .repl_highlight import MsdLexer
from .runner import MODES, REPORTED_ERRORS, report_error, run_source
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/mode": ("Switch between interp, print and pretty", "interp|print|pretty"),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
}

_MODE_NAMES = tuple(MODES.values())


class _SlashCompleter(Completer):
    """Autocomplete slash commands, and mode names after /mode."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        if text.startswith("/mode "):
            word = text[len("/mode "):]
            for name in _MODE_NAMES:
                if name.startswith(word):
                    yield Completion(name, start_position=-len(word))
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=f"{desc} {hint}".rstrip(),
                )


def handle_slash(line: str, mode_box: list[str]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/mode":
        if arg == "":
            print(f"Mode: {mode_box[0]}")
        elif arg in _MODE_NAMES:
            mode_box[0] = arg
            print(f"Mode: {arg}")
        else:
            print("Usage: /mode interp|print|pretty", file=sys.stderr)
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, mode_box: list[str]) -> None:
    """Run one line of REPL input, printing either its result or the error."""
    text = _normalize(text)
    if not text.strip():
        return

    if handle_slash(text, mode_box):
        return

    try:
        result = run_source(text, mode_box[0])
    except REPORTED_ERRORS as exc:
        report_error(exc, sys.stderr)
        return

    print(result)


def repl(mode: str = "interp") -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /mode can swap the mode.
    mode_box = [mode]

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MsdLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
    )

    print("msdscript repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt("msd> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        eval_line(text, mode_box)
