"""
session.py - What a command needs from the outside world

Commands never touch the terminal, the clipboard or the file system
directly; they go through a SessionConfig so tests can swap every
capability out.
"""
import enum
import getpass
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional

import click
import pyperclip

from .vault import PasswordDatabase

try:
    import readline  # line editing and history for input()
except ImportError:  # Windows
    readline = None


class Outcome(enum.Enum):
    """What the session loop should do after a command"""

    CONTINUE = "continue"
    EXIT = "exit"


class TerminalInput:
    """Line and secret input from the controlling terminal"""

    def __init__(self, prompt_text: str = "> "):
        self.prompt_text = prompt_text

    def readline(self, prompt: Optional[str] = None) -> str:
        """Read one line; raises EOFError / KeyboardInterrupt like input()"""
        return input(self.prompt_text if prompt is None else prompt)

    def read_password(self, prompt: str) -> str:
        """Read a secret without echoing it"""
        return getpass.getpass(prompt)

    def interactive(self) -> bool:
        return sys.stdin.isatty()

    def set_completer(self, complete: Callable[[str, str], List[str]]) -> None:
        """
        Complete the word under the cursor with Tab.

        complete(line, text) gets the whole line and the word being typed
        and returns the candidates.
        """
        if readline is None:
            return

        def readline_complete(text, state):
            matches = complete(readline.get_line_buffer(), text)
            return matches[state] if state < len(matches) else None

        readline.set_completer(readline_complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")

    def close(self) -> None:
        # Typed commands can contain entry names; don't keep them around
        if readline is not None:
            readline.set_completer(None)
            readline.clear_history()


def copy_to_clipboard(text: str) -> None:
    """Raises pyperclip.PyperclipException when no clipboard is available"""
    pyperclip.copy(text)


@dataclass
class SessionConfig:
    vault: PasswordDatabase
    file_path: str
    line_input: TerminalInput
    write_file: Callable[[bytes], None]
    echo: Callable[[str], None] = click.echo
    copy: Callable[[str], None] = copy_to_clipboard
